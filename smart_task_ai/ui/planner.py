from __future__ import annotations

from datetime import date, datetime, timezone
from typing import Optional

import streamlit as st

from smart_task_ai.constants import OVERDUE_PLANNER_LIMIT, PLANNER_DATE_KEY
from smart_task_ai.metrics import effort_label
from smart_task_ai.planner import ENERGY_BLOCKS, build_daily_plan, time_recommendation
from smart_task_ai.state import push_flash
from smart_task_ai.task_store import TaskStore
from smart_task_ai.ui.common import priority_badge, status_icon, task_title_html


def _mark_complete(store: TaskStore, task_id: str) -> None:
    if not store.toggle_status(task_id):
        push_flash("error", "Could not update the task.")


def render_planner(store: TaskStore, *, today: Optional[date] = None) -> None:
    current_day = today or datetime.now(timezone.utc).date()

    with st.container(border=True):
        st.subheader("📅 AI Daily Planner")
        st.caption("Smart scheduling based on your tasks, priorities, and energy levels")
        selected_day = st.date_input("Select date", value=current_day, format="YYYY-MM-DD", key=PLANNER_DATE_KEY)

    plan = build_daily_plan(store.tasks, selected_day, today=current_day)

    main_col, side_col = st.columns([0.62, 0.38])
    with main_col:
        with st.container(border=True):
            st.subheader(f"Tasks for {plan.day.isoformat()}")
            st.caption(f"{len(plan.tasks)} tasks scheduled")
            if not plan.tasks:
                st.caption("No tasks scheduled for this day")
            for task in plan.tasks:
                st.markdown(
                    f"{status_icon(task.status)} **{task_title_html(task)}** {priority_badge(task.priority)}",
                    unsafe_allow_html=True,
                )
                if task.description:
                    st.caption(task.description)
                st.caption(
                    f"⏰ Best time: {time_recommendation(task)} · {task.category.label} · {effort_label(task.effort)}"
                )

        if plan.overdue:
            with st.container(border=True):
                st.subheader(f"🚨 Overdue Tasks ({len(plan.overdue)})")
                for task in plan.overdue[:OVERDUE_PLANNER_LIMIT]:
                    row_cols = st.columns([0.7, 0.3])
                    due_label = task.due_date.isoformat() if task.due_date else ""
                    row_cols[0].markdown(f"**{task.title}**  \nDue: {due_label}")
                    row_cols[1].button(
                        "Mark Complete",
                        key=f"planner_complete_{task.id}",
                        on_click=_mark_complete,
                        args=(store, task.id),
                    )

    with side_col:
        with st.container(border=True):
            st.subheader("💡 AI Recommendations")
            for recommendation in plan.recommendations:
                st.markdown(f"{recommendation.kind.icon} **{recommendation.title}**")
                st.caption(recommendation.description)

        with st.container(border=True):
            st.subheader("High Priority Tasks")
            if not plan.high_priority:
                st.caption("No high priority tasks pending")
            for task in plan.high_priority:
                st.markdown(
                    f"**{task_title_html(task)}** {priority_badge(task.priority, suffix='')}",
                    unsafe_allow_html=True,
                )
                st.caption(task.category.label)

        with st.container(border=True):
            st.subheader("Energy Planning")
            for block in ENERGY_BLOCKS:
                st.markdown(f"{block.icon} **{block.title}**")
                st.caption(block.description)


__all__ = ["render_planner"]
