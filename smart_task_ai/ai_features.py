from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field
from datetime import date, datetime, timezone
from enum import Enum
from typing import Generic, Optional, Protocol, Sequence, TypeVar

from openai import OpenAI

from smart_task_ai.constants import RECENT_TASKS_LIMIT
from smart_task_ai.llm import LLMError, get_default_model, get_openai_client, request_text_response
from smart_task_ai.metrics import count_completed, high_priority_pending, is_due_on
from smart_task_ai.models import Category, Priority, Subtask, Task, TaskDraft, TaskStatus

LOGGER = logging.getLogger(__name__)

PayloadT = TypeVar("PayloadT")

AI_TASK_DESCRIPTION = "AI-enhanced task with suggested improvements"
_NUMBERED_LINE = re.compile(r"^\d+\.\s+(.+)$")


@dataclass
class AISuggestion(Generic[PayloadT]):
    payload: PayloadT
    from_ai: bool


class AssistantMode(str, Enum):
    ENHANCE = "enhance"
    ANALYZE = "analyze"
    SUBTASKS = "subtasks"
    HELP = "help"

    @property
    def label(self) -> str:
        if self is AssistantMode.ENHANCE:
            return "✨ Enhance Task"
        if self is AssistantMode.ANALYZE:
            return "🎯 Smart Analysis"
        if self is AssistantMode.SUBTASKS:
            return "📋 Break Down"
        return "💡 Get Help"

    @property
    def placeholder(self) -> str:
        if self is AssistantMode.ENHANCE:
            return "e.g., 'work on project' or 'exercise more'"
        if self is AssistantMode.ANALYZE:
            return "e.g., 'Prepare quarterly presentation for board meeting'"
        if self is AssistantMode.SUBTASKS:
            return "e.g., 'Plan a wedding' or 'Launch new product'"
        return "e.g., 'Write a research paper' or 'Organize home office'"

    @property
    def apology(self) -> str:
        if self is AssistantMode.ENHANCE:
            return "Sorry, I encountered an error while processing your request. Please try again."
        if self is AssistantMode.ANALYZE:
            return "Sorry, I encountered an error while analyzing your task. Please try again."
        if self is AssistantMode.SUBTASKS:
            return "Sorry, I encountered an error while generating subtasks. Please try again."
        return "Sorry, I encountered an error while generating help. Please try again."


_PROMPT_TEMPLATES: dict[AssistantMode, str] = {
    AssistantMode.ENHANCE: (
        'As a task management AI assistant, enhance this vague task: "{task}"\n\n'
        "Please provide:\n"
        "1. A clarified, actionable version of the task\n"
        "2. Suggested breakdown into specific steps\n"
        "3. Recommended category (Work, Personal, Health, Study, Communication, Errands)\n"
        "4. Priority level (Low, Medium, High, Critical) with reasoning\n"
        "5. Estimated effort level (1-5 scale)\n"
        "6. Optimal timing suggestions\n\n"
        "Format your response clearly with sections."
    ),
    AssistantMode.ANALYZE: (
        'Analyze this task for smart categorization and scheduling: "{task}"\n\n'
        "Please provide:\n"
        "1. Category classification (Work, Personal, Health, Study, Communication, Errands) with reasoning\n"
        "2. Urgency assessment (Low, Medium, High, Critical) based on context clues\n"
        "3. Optimal timing recommendations (morning, afternoon, evening) based on task type\n"
        "4. Energy level requirements and focus needed\n"
        "5. Dependencies or prerequisites\n"
        "6. Potential obstacles and how to overcome them\n\n"
        "Be specific and actionable in your analysis."
    ),
    AssistantMode.SUBTASKS: (
        'Break down this complex task into specific, actionable subtasks: "{task}"\n\n'
        "Please provide:\n"
        "1. A numbered list of 4-8 specific subtasks\n"
        "2. Each subtask should be clear and actionable\n"
        "3. Order them logically (what needs to be done first, second, etc.)\n"
        "4. Include time estimates for each subtask if possible\n"
        "5. Note any dependencies between subtasks\n\n"
        "Make sure each subtask is something that can be completed in one focused session."
    ),
    AssistantMode.HELP: (
        'Provide comprehensive help and guidance for this task: "{task}"\n\n'
        "Please include:\n"
        "1. Step-by-step approach or methodology\n"
        "2. Best practices and tips\n"
        "3. Common pitfalls to avoid\n"
        "4. Resources or tools that might be helpful\n"
        "5. Templates or examples if applicable\n"
        "6. Quality checkpoints to ensure good results\n\n"
        "Be practical and actionable in your advice."
    ),
}


def build_prompt(mode: AssistantMode, user_input: str) -> str:
    return _PROMPT_TEMPLATES[mode].format(task=user_input)


def supports_task_creation(mode: AssistantMode) -> bool:
    return mode in (AssistantMode.ENHANCE, AssistantMode.SUBTASKS)


def _generate(prompt: str, client: Optional[OpenAI]) -> str:
    client_to_use = client or get_openai_client()
    if client_to_use is None:
        raise LLMError("No OpenAI client configured.")
    return request_text_response(client=client_to_use, model=get_default_model(), prompt=prompt)


def request_assistance(
    mode: AssistantMode,
    user_input: str,
    client: Optional[OpenAI] = None,
) -> AISuggestion[str]:
    """Run one assistant mode; failures are answered with the mode's apology."""

    if not user_input.strip():
        return AISuggestion("", from_ai=False)

    try:
        text = _generate(build_prompt(mode, user_input), client)
    except LLMError as exc:
        LOGGER.warning("Assistant request (%s) failed: %s", mode.value, exc)
        return AISuggestion(mode.apology, from_ai=False)
    return AISuggestion(text, from_ai=True)


@dataclass
class TaskSummary:
    total: int
    completed: int
    high_priority_pending: int
    due_today: int
    recent: list[Task] = field(default_factory=list)

    def as_prompt_block(self) -> str:
        recent = ", ".join(f"{task.title} ({task.category.value}, {task.priority.value})" for task in self.recent)
        return (
            "Current tasks summary:\n"
            f"- Total tasks: {self.total}\n"
            f"- Completed: {self.completed}\n"
            f"- High priority pending: {self.high_priority_pending}\n"
            f"- Due today: {self.due_today}\n\n"
            f"Recent tasks: {recent}"
        )


def build_task_summary(tasks: Sequence[Task], today: Optional[date] = None) -> TaskSummary:
    current_day = today or datetime.now(timezone.utc).date()
    return TaskSummary(
        total=len(tasks),
        completed=count_completed(tasks),
        high_priority_pending=len(high_priority_pending(tasks)),
        due_today=sum(
            1 for task in tasks if is_due_on(task, current_day) and task.status is not TaskStatus.COMPLETED
        ),
        recent=list(tasks[:RECENT_TASKS_LIMIT]),
    )


def build_insights_prompt(summary: TaskSummary) -> str:
    return (
        "Based on this task summary, provide daily planning insights and recommendations:\n\n"
        f"{summary.as_prompt_block()}\n\n"
        "Please provide:\n"
        "1. Today's focus priorities\n"
        "2. Workload assessment\n"
        "3. Specific recommendations for task ordering\n"
        "4. Energy management tips\n"
        "5. Productivity suggestions\n"
        "6. Motivational insights\n\n"
        "Keep it concise but actionable."
    )


def _fallback_insights(summary: TaskSummary) -> str:
    return (
        "Daily Planning Insights:\n\n"
        "**Today's Focus:**\n"
        f"- You have {summary.due_today} tasks due today\n"
        f"- {summary.high_priority_pending} high-priority tasks need attention\n\n"
        "**Recommendations:**\n"
        "- Start with high-priority tasks during peak energy hours\n"
        "- Break large tasks into smaller, manageable chunks\n"
        "- Schedule regular breaks to maintain focus\n"
        "- Review completed tasks to stay motivated"
    )


def generate_daily_insights(
    tasks: Sequence[Task],
    client: Optional[OpenAI] = None,
    today: Optional[date] = None,
) -> AISuggestion[str]:
    summary = build_task_summary(tasks, today=today)
    try:
        text = _generate(build_insights_prompt(summary), client)
    except LLMError as exc:
        LOGGER.warning("Daily insights failed, using local summary: %s", exc)
        return AISuggestion(_fallback_insights(summary), from_ai=False)
    return AISuggestion(text, from_ai=True)


def extract_subtasks(text: str) -> list[Subtask]:
    """Read numbered lines (``"1. Buy milk"``) of free-form model text as sub-tasks.

    Best effort only: the model is not asked for a fixed format, so any other
    layout yields an empty list. Nothing beyond the numbered lines is parsed.
    """

    subtasks: list[Subtask] = []
    for line in text.split("\n"):
        match = _NUMBERED_LINE.match(line)
        if match:
            subtasks.append(Subtask(title=match.group(1)))
    return subtasks


@dataclass(frozen=True)
class TaskClassification:
    category: Category
    priority: Priority
    urgency: Priority


class TaskClassifier(Protocol):
    def classify(self, text: str) -> TaskClassification: ...


class KeywordTaskClassifier:
    """Substring matching on the raw task text."""

    def classify(self, text: str) -> TaskClassification:
        lowered = text.lower()
        category = Category.WORK if "work" in lowered else Category.PERSONAL
        level = Priority.HIGH if "urgent" in lowered else Priority.MEDIUM
        return TaskClassification(category=category, priority=level, urgency=level)


def draft_task_from_response(
    user_input: str,
    response_text: str,
    classifier: Optional[TaskClassifier] = None,
) -> Optional[TaskDraft]:
    if not user_input.strip():
        return None

    classification = (classifier or KeywordTaskClassifier()).classify(user_input)
    return TaskDraft(
        title=user_input,
        description=AI_TASK_DESCRIPTION,
        category=classification.category,
        priority=classification.priority,
        urgency=classification.urgency,
        effort=3,
        status=TaskStatus.TODO,
        subtasks=extract_subtasks(response_text),
        ai_enhanced=True,
        original_title=user_input,
    )


__all__ = [
    "AISuggestion",
    "AI_TASK_DESCRIPTION",
    "AssistantMode",
    "KeywordTaskClassifier",
    "TaskClassification",
    "TaskClassifier",
    "TaskSummary",
    "build_insights_prompt",
    "build_prompt",
    "build_task_summary",
    "draft_task_from_response",
    "extract_subtasks",
    "generate_daily_insights",
    "request_assistance",
    "supports_task_creation",
]
