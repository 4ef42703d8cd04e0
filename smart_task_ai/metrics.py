from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime, timedelta, timezone
from typing import Iterable, Optional, Sequence

from smart_task_ai.constants import EFFORT_LABELS, STREAK_MAX_DAYS, WEEKLY_WINDOW_DAYS
from smart_task_ai.models import Category, Priority, Task, TaskFilter, TaskStatus

NO_CATEGORY = "None"


@dataclass
class CategoryStats:
    category: Category
    total: int = 0
    completed: int = 0

    @property
    def completion_rate(self) -> float:
        return self.completed / self.total * 100 if self.total else 0.0


@dataclass
class PriorityShare:
    priority: Priority
    count: int
    percentage: float


@dataclass
class WeeklyStats:
    completed: int
    created: int


@dataclass
class DashboardSummary:
    total: int
    completed: int
    completion_rate: float
    high_priority_pending: int
    due_today: int


def _utc_now(now: datetime | None) -> datetime:
    return now or datetime.now(timezone.utc)


def _utc_today(today: date | None) -> date:
    return today or datetime.now(timezone.utc).date()


def _as_utc(timestamp: datetime) -> datetime:
    if timestamp.tzinfo is None:
        return timestamp.replace(tzinfo=timezone.utc)
    return timestamp.astimezone(timezone.utc)


def _utc_day(timestamp: datetime) -> date:
    return _as_utc(timestamp).date()


def filter_tasks(tasks: Sequence[Task], task_filter: Optional[TaskFilter] = None) -> list[Task]:
    """Return the tasks matching every restricted axis, in input order."""

    if task_filter is None:
        return list(tasks)
    return [task for task in tasks if task_filter.matches(task)]


def count_completed(tasks: Iterable[Task]) -> int:
    return sum(1 for task in tasks if task.status is TaskStatus.COMPLETED)


def completion_rate(tasks: Sequence[Task]) -> float:
    """Completed share in percent; 0 for an empty collection."""

    if not tasks:
        return 0.0
    return count_completed(tasks) / len(tasks) * 100


def category_stats(tasks: Sequence[Task]) -> dict[Category, CategoryStats]:
    """Per-category counts, keyed in order of first appearance."""

    stats: dict[Category, CategoryStats] = {}
    for task in tasks:
        entry = stats.setdefault(task.category, CategoryStats(category=task.category))
        entry.total += 1
        if task.status is TaskStatus.COMPLETED:
            entry.completed += 1
    return stats


def priority_distribution(tasks: Sequence[Task]) -> list[PriorityShare]:
    counts: dict[Priority, int] = {}
    for task in tasks:
        counts[task.priority] = counts.get(task.priority, 0) + 1

    total = len(tasks)
    return [
        PriorityShare(priority=priority, count=count, percentage=count / total * 100 if total else 0.0)
        for priority, count in counts.items()
    ]


def effort_histogram(tasks: Iterable[Task]) -> dict[int, int]:
    histogram = {level: 0 for level in EFFORT_LABELS}
    for task in tasks:
        if task.effort in histogram:
            histogram[task.effort] += 1
    return histogram


def average_effort(tasks: Sequence[Task]) -> float:
    if not tasks:
        return 0.0
    return sum(task.effort for task in tasks) / len(tasks)


def effort_label(effort: float) -> str:
    return EFFORT_LABELS.get(int(round(effort)), "Unknown")


def is_overdue(task: Task, *, today: date | None = None) -> bool:
    """A pending task is overdue from the start of its due day (UTC) onwards."""

    if task.due_date is None or task.status is TaskStatus.COMPLETED:
        return False
    return task.due_date <= _utc_today(today)


def overdue_tasks(tasks: Iterable[Task], *, today: date | None = None) -> list[Task]:
    return [task for task in tasks if is_overdue(task, today=today)]


def count_overdue(tasks: Iterable[Task], *, today: date | None = None) -> int:
    return len(overdue_tasks(tasks, today=today))


def is_due_on(task: Task, day: date) -> bool:
    return task.due_date is not None and task.due_date == day


def high_priority_pending(tasks: Iterable[Task]) -> list[Task]:
    return [task for task in tasks if task.priority.is_high and task.status is not TaskStatus.COMPLETED]


def completion_streak(tasks: Iterable[Task], *, today: date | None = None) -> int:
    """Consecutive days ending today with at least one completion (at most 30)."""

    completion_days = {_utc_day(task.completed_at) for task in tasks if task.completed_at is not None}
    pointer = _utc_today(today)
    streak = 0
    while streak < STREAK_MAX_DAYS and pointer in completion_days:
        streak += 1
        pointer -= timedelta(days=1)
    return streak


def weekly_stats(tasks: Iterable[Task], *, now: datetime | None = None) -> WeeklyStats:
    """Completions and creations within the last 7 days, counted independently."""

    window_start = _utc_now(now) - timedelta(days=WEEKLY_WINDOW_DAYS)
    completed = 0
    created = 0
    for task in tasks:
        if task.completed_at is not None and _as_utc(task.completed_at) >= window_start:
            completed += 1
        if _as_utc(task.created_at) >= window_start:
            created += 1
    return WeeklyStats(completed=completed, created=created)


def most_productive_category(tasks: Sequence[Task]) -> str:
    """Category with the best completion ratio; earlier categories win ties."""

    best_name = NO_CATEGORY
    best_rate = 0.0
    for category, stats in category_stats(tasks).items():
        if stats.completion_rate > best_rate:
            best_name = category.value
            best_rate = stats.completion_rate
    return best_name


def dashboard_summary(tasks: Sequence[Task], *, today: date | None = None) -> DashboardSummary:
    current_day = _utc_today(today)
    due_today = sum(
        1 for task in tasks if is_due_on(task, current_day) and task.status is not TaskStatus.COMPLETED
    )
    return DashboardSummary(
        total=len(tasks),
        completed=count_completed(tasks),
        completion_rate=completion_rate(tasks),
        high_priority_pending=len(high_priority_pending(tasks)),
        due_today=due_today,
    )


def attention_message(overdue_count: int) -> str:
    if overdue_count > 0:
        return f"{overdue_count} overdue tasks"
    return "All tasks on track!"


def analytics_recommendations(tasks: Sequence[Task], *, today: date | None = None) -> list[str]:
    rate = completion_rate(tasks)
    overdue = count_overdue(tasks, today=today)
    streak = completion_streak(tasks, today=today)

    recommendations: list[str] = []
    if rate < 50:
        recommendations.append("Focus on completing existing tasks before adding new ones")
    if overdue > 0:
        recommendations.append("Prioritize overdue tasks to get back on track")
    if average_effort(tasks) > 4:
        recommendations.append("Consider breaking down complex tasks into smaller steps")
    if streak == 0:
        recommendations.append("Start a completion streak by finishing one task today")
    else:
        recommendations.append(f"Great job on your {streak}-day streak! Keep it up!")
    return recommendations


__all__ = [
    "CategoryStats",
    "DashboardSummary",
    "NO_CATEGORY",
    "PriorityShare",
    "WeeklyStats",
    "analytics_recommendations",
    "attention_message",
    "average_effort",
    "category_stats",
    "completion_rate",
    "completion_streak",
    "count_completed",
    "count_overdue",
    "dashboard_summary",
    "effort_histogram",
    "effort_label",
    "filter_tasks",
    "high_priority_pending",
    "is_due_on",
    "is_overdue",
    "most_productive_category",
    "overdue_tasks",
    "priority_distribution",
    "weekly_stats",
]
