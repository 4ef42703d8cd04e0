from __future__ import annotations

from datetime import date

from smart_task_ai.models import Priority, Task, TaskStatus
from smart_task_ai.ui.common import priority_badge, status_icon, task_meta_line, task_title_html

TODAY = date(2024, 5, 10)


def test_overdue_due_date_is_highlighted() -> None:
    late = Task(id="a", title="Late", due_date=date(2024, 5, 1))
    done = late.model_copy(update={"status": TaskStatus.COMPLETED})

    assert "sta-overdue" in task_meta_line(late, today=TODAY)
    assert "sta-overdue" not in task_meta_line(done, today=TODAY)


def test_meta_line_lists_badges() -> None:
    line = task_meta_line(Task(id="a", title="Deck", effort=5, ai_enhanced=True), today=TODAY)

    assert "Medium Priority" in line
    assert "Medium Urgency" in line
    assert "Very Hard" in line
    assert "🧠 AI" in line


def test_badge_and_icons() -> None:
    assert Priority.CRITICAL.color_hex in priority_badge(Priority.CRITICAL)
    assert status_icon(TaskStatus.COMPLETED) == "✅"
    assert status_icon(TaskStatus.TODO) == "⭕"


def test_title_markup_is_escaped() -> None:
    task = Task(id="a", title="<img src=x onerror=alert(1)> & co")

    assert task_title_html(task) == "&lt;img src=x onerror=alert(1)&gt; &amp; co"
