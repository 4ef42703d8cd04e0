from __future__ import annotations

from datetime import date, datetime, timezone
from enum import Enum
from typing import Optional
from uuid import uuid4

from pydantic import BaseModel, Field


class Category(str, Enum):
    """Life domains a task can belong to."""

    WORK = "Work"
    PERSONAL = "Personal"
    HEALTH = "Health"
    STUDY = "Study"
    COMMUNICATION = "Communication"
    ERRANDS = "Errands"

    @property
    def icon(self) -> str:
        if self is Category.WORK:
            return "💼"
        if self is Category.PERSONAL:
            return "🏠"
        if self is Category.HEALTH:
            return "🧘"
        if self is Category.STUDY:
            return "📚"
        if self is Category.COMMUNICATION:
            return "📞"
        return "🛠️"

    @property
    def label(self) -> str:
        return f"{self.icon} {self.value}"


class Priority(str, Enum):
    """Four-step scale shared by the priority and urgency axes."""

    LOW = "Low"
    MEDIUM = "Medium"
    HIGH = "High"
    CRITICAL = "Critical"

    @property
    def color_hex(self) -> str:
        if self is Priority.LOW:
            return "#2E9E5B"
        if self is Priority.MEDIUM:
            return "#C9A227"
        if self is Priority.HIGH:
            return "#E07B24"
        return "#D64545"

    @property
    def is_high(self) -> bool:
        return self in (Priority.HIGH, Priority.CRITICAL)


class TaskStatus(str, Enum):
    """Workflow state of a task."""

    TODO = "Todo"
    IN_PROGRESS = "In Progress"
    COMPLETED = "Completed"


class Subtask(BaseModel):
    """Checklist item owned by exactly one task."""

    id: str = Field(default_factory=lambda: str(uuid4()))
    title: str
    completed: bool = False


class TaskDraft(BaseModel):
    """Payload for creating or fully rewriting a task (no id, no creation time)."""

    title: str
    description: str = ""
    category: Category = Category.PERSONAL
    priority: Priority = Priority.MEDIUM
    urgency: Priority = Priority.MEDIUM
    effort: int = Field(default=3, ge=1, le=5)
    status: TaskStatus = TaskStatus.TODO
    due_date: Optional[date] = None
    subtasks: list[Subtask] = Field(default_factory=list)
    completed_at: Optional[datetime] = None
    ai_enhanced: bool = False
    original_title: Optional[str] = None


class Task(TaskDraft):
    """Task record as stored remotely and cached locally."""

    id: str
    created_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
    user_id: Optional[str] = None

    @property
    def is_completed(self) -> bool:
        return self.status is TaskStatus.COMPLETED

    @property
    def subtask_progress(self) -> float:
        """Share of completed subtasks in percent (0 when there are none)."""

        if not self.subtasks:
            return 0.0
        done = sum(1 for subtask in self.subtasks if subtask.completed)
        return done / len(self.subtasks) * 100


class TaskPatch(BaseModel):
    """Partial update; only explicitly set fields are sent and merged."""

    title: Optional[str] = None
    description: Optional[str] = None
    category: Optional[Category] = None
    priority: Optional[Priority] = None
    urgency: Optional[Priority] = None
    effort: Optional[int] = Field(default=None, ge=1, le=5)
    status: Optional[TaskStatus] = None
    due_date: Optional[date] = None
    subtasks: Optional[list[Subtask]] = None
    completed_at: Optional[datetime] = None
    ai_enhanced: Optional[bool] = None
    original_title: Optional[str] = None

    def changes(self) -> dict[str, object]:
        return self.model_dump(exclude_unset=True)

    def apply_to(self, task: Task) -> Task:
        """Merge the patch into a cached task without contacting the server."""

        updates = {key: getattr(self, key) for key in self.model_fields_set}
        return task.model_copy(update=updates)

    @classmethod
    def from_draft(cls, draft: TaskDraft) -> "TaskPatch":
        return cls.model_validate(draft.model_dump())


class TaskFilter(BaseModel):
    """Process-local selection criteria; ``None`` on an axis means "all"."""

    category: Optional[Category] = None
    priority: Optional[Priority] = None
    status: Optional[TaskStatus] = None

    def matches(self, task: Task) -> bool:
        if self.category is not None and task.category is not self.category:
            return False
        if self.priority is not None and task.priority is not self.priority:
            return False
        if self.status is not None and task.status is not self.status:
            return False
        return True


class AuthUser(BaseModel):
    """Opaque user handed out by the auth provider."""

    id: str
    email: str = ""


class AuthSessionData(BaseModel):
    access_token: str
    refresh_token: Optional[str] = None
    expires_at: Optional[int] = None
    user: AuthUser


__all__ = [
    "AuthSessionData",
    "AuthUser",
    "Category",
    "Priority",
    "Subtask",
    "Task",
    "TaskDraft",
    "TaskFilter",
    "TaskPatch",
    "TaskStatus",
]
