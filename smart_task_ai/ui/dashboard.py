from __future__ import annotations

from datetime import date
from typing import Optional, Sequence

import streamlit as st

from smart_task_ai.constants import RECENT_TASKS_LIMIT
from smart_task_ai.metrics import dashboard_summary
from smart_task_ai.models import Task
from smart_task_ai.state import set_task_form
from smart_task_ai.task_form import TaskFormState
from smart_task_ai.ui.common import priority_badge, status_icon, task_title_html


def render_dashboard(tasks: Sequence[Task], *, today: Optional[date] = None) -> None:
    summary = dashboard_summary(tasks, today=today)

    metric_cols = st.columns(4)
    metric_cols[0].metric("Total Tasks", summary.total, help=f"{summary.completed} completed")
    metric_cols[1].metric("Completion Rate", f"{summary.completion_rate:.0f}%")
    metric_cols[2].metric("High Priority", summary.high_priority_pending, help="Urgent tasks pending")
    metric_cols[3].metric("Due Today", summary.due_today, help="Tasks due today")
    st.progress(min(summary.completion_rate / 100, 1.0))

    recent_col, actions_col = st.columns([0.6, 0.4])
    with recent_col:
        with st.container(border=True):
            st.subheader("Recent Tasks")
            st.caption("Your latest task activity")
            recent = list(tasks[:RECENT_TASKS_LIMIT])
            if not recent:
                st.caption("No tasks yet. Create your first task to get started!")
            for task in recent:
                st.markdown(
                    f"{status_icon(task.status)} **{task_title_html(task)}** · {task.category.label} "
                    f"{priority_badge(task.priority)}",
                    unsafe_allow_html=True,
                )

    with actions_col:
        with st.container(border=True):
            st.subheader("Quick Actions")
            st.caption("Get started with common tasks")
            if st.button("➕ Add New Task", key="dashboard_add_task", use_container_width=True):
                set_task_form(TaskFormState.empty())
                st.toast("The new task form is open in the Tasks tab.")
            st.markdown("🧠 **Get AI Help**: open the *AI Assistant* tab.")
            st.markdown("📅 **Plan Your Day**: open the *Daily Planner* tab.")


__all__ = ["render_dashboard"]
