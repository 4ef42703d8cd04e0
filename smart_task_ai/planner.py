from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime, timezone
from enum import Enum
from typing import Optional, Sequence

from smart_task_ai.constants import (
    DAY_OVERLOAD_THRESHOLD,
    HIGH_EFFORT_THRESHOLD,
    HIGH_PRIORITY_PLANNER_LIMIT,
)
from smart_task_ai.metrics import high_priority_pending, is_due_on, overdue_tasks
from smart_task_ai.models import Task


class RecommendationKind(str, Enum):
    URGENT = "urgent"
    WORKLOAD = "workload"
    PRIORITY = "priority"
    ENERGY = "energy"
    POSITIVE = "positive"

    @property
    def icon(self) -> str:
        if self is RecommendationKind.URGENT:
            return "🚨"
        if self is RecommendationKind.WORKLOAD:
            return "⏰"
        if self is RecommendationKind.PRIORITY:
            return "🎯"
        if self is RecommendationKind.ENERGY:
            return "☀️"
        return "✅"


@dataclass(frozen=True)
class Recommendation:
    kind: RecommendationKind
    title: str
    description: str


@dataclass(frozen=True)
class EnergyBlock:
    icon: str
    title: str
    description: str


ENERGY_BLOCKS: tuple[EnergyBlock, ...] = (
    EnergyBlock(icon="☀️", title="Morning (High Energy)", description="Complex tasks, creative work"),
    EnergyBlock(icon="🌇", title="Afternoon (Medium Energy)", description="Meetings, routine tasks"),
    EnergyBlock(icon="🌙", title="Evening (Low Energy)", description="Planning, light tasks"),
)


@dataclass
class DailyPlan:
    day: date
    tasks: list[Task] = field(default_factory=list)
    high_priority: list[Task] = field(default_factory=list)
    overdue: list[Task] = field(default_factory=list)
    recommendations: list[Recommendation] = field(default_factory=list)


def tasks_for_date(tasks: Sequence[Task], day: date) -> list[Task]:
    return [task for task in tasks if is_due_on(task, day)]


def top_high_priority(tasks: Sequence[Task], *, limit: int = HIGH_PRIORITY_PLANNER_LIMIT) -> list[Task]:
    return high_priority_pending(tasks)[:limit]


def time_recommendation(task: Task) -> str:
    """Best time of day for a task, looked up from its category and effort."""

    category = task.category.value.lower()
    demanding = task.effort >= HIGH_EFFORT_THRESHOLD

    if "work" in category or "study" in category:
        return "Morning (High Focus)" if demanding else "Morning/Afternoon"
    if "communication" in category:
        return "Business Hours"
    if "health" in category or "exercise" in category:
        return "Morning/Evening"
    return "When Energy is High" if demanding else "Flexible"


def build_recommendations(
    *,
    day_tasks: Sequence[Task],
    high_priority: Sequence[Task],
    overdue: Sequence[Task],
) -> list[Recommendation]:
    """Evaluate the planning rules in fixed order; never returns an empty list."""

    recommendations: list[Recommendation] = []

    if overdue:
        recommendations.append(
            Recommendation(
                kind=RecommendationKind.URGENT,
                title="Address Overdue Tasks",
                description=(
                    f"You have {len(overdue)} overdue tasks. Consider rescheduling or completing them first."
                ),
            )
        )

    if len(day_tasks) > DAY_OVERLOAD_THRESHOLD:
        recommendations.append(
            Recommendation(
                kind=RecommendationKind.WORKLOAD,
                title="Heavy Workload Today",
                description="Consider rescheduling non-urgent tasks to maintain quality and avoid burnout.",
            )
        )

    if high_priority:
        recommendations.append(
            Recommendation(
                kind=RecommendationKind.PRIORITY,
                title="Focus on High Priority",
                description=f'Start with "{high_priority[0].title}" during your peak energy hours.',
            )
        )

    if any(task.effort >= HIGH_EFFORT_THRESHOLD for task in day_tasks):
        recommendations.append(
            Recommendation(
                kind=RecommendationKind.ENERGY,
                title="Schedule Demanding Tasks Early",
                description="Tackle high-effort tasks when your energy and focus are at their peak.",
            )
        )

    if not recommendations:
        recommendations.append(
            Recommendation(
                kind=RecommendationKind.POSITIVE,
                title="Well Balanced Day",
                description="Your schedule looks manageable. Great job on task planning!",
            )
        )

    return recommendations


def build_daily_plan(
    tasks: Sequence[Task],
    day: Optional[date] = None,
    *,
    today: Optional[date] = None,
) -> DailyPlan:
    """Collect the planner view for ``day`` (defaults to today).

    Overdue tasks are always judged against ``today``, independent of the
    selected day.
    """

    current_day = today or datetime.now(timezone.utc).date()
    selected_day = day or current_day
    day_tasks = tasks_for_date(tasks, selected_day)
    high_priority = top_high_priority(tasks)
    overdue = overdue_tasks(tasks, today=current_day)
    return DailyPlan(
        day=selected_day,
        tasks=day_tasks,
        high_priority=high_priority,
        overdue=overdue,
        recommendations=build_recommendations(day_tasks=day_tasks, high_priority=high_priority, overdue=overdue),
    )


__all__ = [
    "DailyPlan",
    "ENERGY_BLOCKS",
    "EnergyBlock",
    "Recommendation",
    "RecommendationKind",
    "build_daily_plan",
    "build_recommendations",
    "tasks_for_date",
    "time_recommendation",
    "top_high_priority",
]
