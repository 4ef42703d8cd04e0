from __future__ import annotations

from datetime import date, datetime, timedelta, timezone

import pytest

from smart_task_ai.metrics import (
    NO_CATEGORY,
    analytics_recommendations,
    attention_message,
    average_effort,
    category_stats,
    completion_rate,
    completion_streak,
    count_overdue,
    dashboard_summary,
    effort_histogram,
    effort_label,
    filter_tasks,
    is_overdue,
    most_productive_category,
    priority_distribution,
    weekly_stats,
)
from smart_task_ai.models import Category, Priority, Task, TaskFilter, TaskStatus

TODAY = date(2024, 5, 10)
NOW = datetime(2024, 5, 10, 15, 0, tzinfo=timezone.utc)


def _task(task_id: str, **kwargs: object) -> Task:
    return Task(id=task_id, title=f"Task {task_id}", **kwargs)


def _completed(task_id: str, day: date, **kwargs: object) -> Task:
    return _task(
        task_id,
        status=TaskStatus.COMPLETED,
        completed_at=datetime(day.year, day.month, day.day, 12, tzinfo=timezone.utc),
        **kwargs,
    )


@pytest.mark.parametrize(
    "tasks",
    [
        [],
        [_task("a")],
        [_completed("a", TODAY)],
        [_completed("a", TODAY), _task("b"), _task("c")],
    ],
)
def test_completion_rate_is_a_percentage(tasks: list[Task]) -> None:
    rate = completion_rate(tasks)

    assert 0 <= rate <= 100
    if not tasks:
        assert rate == 0


def test_filter_by_category_and_all() -> None:
    tasks = [
        _task("a", category=Category.WORK),
        _task("b", category=Category.HEALTH),
        _task("c", category=Category.WORK, priority=Priority.HIGH),
    ]

    work = filter_tasks(tasks, TaskFilter(category=Category.WORK))

    assert [task.id for task in work] == ["a", "c"]
    assert filter_tasks(tasks, TaskFilter()) == tasks
    assert filter_tasks(tasks) == tasks


def test_streak_counts_unbroken_run_ending_today() -> None:
    two_days = [
        _completed("a", TODAY),
        _completed("b", TODAY - timedelta(days=1)),
        _completed("c", TODAY - timedelta(days=3)),
    ]
    yesterday_only = [_completed("a", TODAY - timedelta(days=1))]

    assert completion_streak(two_days, today=TODAY) == 2
    assert completion_streak(yesterday_only, today=TODAY) == 0


def test_streak_is_capped_at_thirty_days() -> None:
    tasks = [_completed(str(offset), TODAY - timedelta(days=offset)) for offset in range(40)]

    assert completion_streak(tasks, today=TODAY) == 30


def test_overdue_predicate() -> None:
    yesterday = TODAY - timedelta(days=1)
    pending = _task("a", due_date=yesterday)
    done = _task("b", due_date=yesterday, status=TaskStatus.COMPLETED)
    due_today = _task("c", due_date=TODAY)
    tomorrow = _task("d", due_date=TODAY + timedelta(days=1))

    assert is_overdue(pending, today=TODAY)
    assert not is_overdue(done, today=TODAY)
    assert is_overdue(due_today, today=TODAY)
    assert not is_overdue(tomorrow, today=TODAY)
    assert count_overdue([pending, done, due_today, tomorrow], today=TODAY) == 2


def test_category_stats_in_encounter_order() -> None:
    tasks = [
        _task("a", category=Category.STUDY),
        _completed("b", TODAY, category=Category.WORK),
        _task("c", category=Category.STUDY),
    ]

    stats = category_stats(tasks)

    assert list(stats) == [Category.STUDY, Category.WORK]
    assert stats[Category.STUDY].total == 2
    assert stats[Category.WORK].completion_rate == 100.0


def test_priority_distribution_percentages() -> None:
    tasks = [_task("a", priority=Priority.HIGH), _task("b", priority=Priority.HIGH), _task("c")]

    shares = {share.priority: share for share in priority_distribution(tasks)}

    assert shares[Priority.HIGH].count == 2
    assert shares[Priority.MEDIUM].percentage == pytest.approx(100 / 3)


def test_effort_metrics() -> None:
    tasks = [_task("a", effort=5), _task("b", effort=4), _task("c", effort=5)]

    assert effort_histogram(tasks) == {1: 0, 2: 0, 3: 0, 4: 1, 5: 2}
    assert average_effort(tasks) == pytest.approx(14 / 3)
    assert average_effort([]) == 0.0
    assert effort_label(4.6) == "Very Hard"


def test_weekly_stats_counts_independently() -> None:
    tasks = [
        _task("new", created_at=NOW - timedelta(days=2)),
        _completed("done", TODAY - timedelta(days=1), created_at=NOW - timedelta(days=20)),
        _task("old", created_at=NOW - timedelta(days=9)),
    ]

    stats = weekly_stats(tasks, now=NOW)

    assert stats.completed == 1
    assert stats.created == 1


def test_most_productive_category_prefers_first_on_ties() -> None:
    tasks = [
        _completed("a", TODAY, category=Category.HEALTH),
        _completed("b", TODAY, category=Category.WORK),
        _task("c", category=Category.ERRANDS),
    ]

    assert most_productive_category(tasks) == "Health"
    assert most_productive_category([_task("x")]) == NO_CATEGORY


def test_dashboard_summary_counts() -> None:
    tasks = [
        _task("a", priority=Priority.CRITICAL, due_date=TODAY),
        _completed("b", TODAY, priority=Priority.HIGH, due_date=TODAY),
        _task("c"),
    ]

    summary = dashboard_summary(tasks, today=TODAY)

    assert summary.total == 3
    assert summary.completed == 1
    assert summary.high_priority_pending == 1
    assert summary.due_today == 1


def test_attention_message() -> None:
    assert attention_message(2) == "2 overdue tasks"
    assert attention_message(0) == "All tasks on track!"


def test_analytics_recommendations_for_struggling_backlog() -> None:
    tasks = [
        _task("a", effort=5, due_date=TODAY - timedelta(days=2)),
        _task("b", effort=5),
    ]

    assert analytics_recommendations(tasks, today=TODAY) == [
        "Focus on completing existing tasks before adding new ones",
        "Prioritize overdue tasks to get back on track",
        "Consider breaking down complex tasks into smaller steps",
        "Start a completion streak by finishing one task today",
    ]


def test_analytics_recommendations_praise_streak() -> None:
    tasks = [_completed("a", TODAY), _completed("b", TODAY - timedelta(days=1))]

    assert analytics_recommendations(tasks, today=TODAY) == ["Great job on your 2-day streak! Keep it up!"]
