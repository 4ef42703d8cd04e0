from __future__ import annotations

from datetime import date, datetime, timezone
from typing import Optional, Sequence

import streamlit as st

from smart_task_ai.charts import (
    build_category_breakdown_figure,
    build_effort_histogram_figure,
    build_priority_distribution_figure,
)
from smart_task_ai.constants import EFFORT_LABELS
from smart_task_ai.metrics import (
    analytics_recommendations,
    attention_message,
    average_effort,
    category_stats,
    completion_rate,
    completion_streak,
    count_completed,
    count_overdue,
    effort_histogram,
    effort_label,
    most_productive_category,
    priority_distribution,
    weekly_stats,
)
from smart_task_ai.models import Task


def render_analytics(tasks: Sequence[Task], *, now: Optional[datetime] = None) -> None:
    current_time = now or datetime.now(timezone.utc)
    today: date = current_time.date()

    rate = completion_rate(tasks)
    streak = completion_streak(tasks, today=today)
    week = weekly_stats(tasks, now=current_time)
    overdue = count_overdue(tasks, today=today)

    metric_cols = st.columns(4)
    metric_cols[0].metric("Completion Rate", f"{rate:.0f}%", help=f"{count_completed(tasks)} of {len(tasks)} tasks")
    metric_cols[1].metric("Current Streak", streak, help=f"{'day' if streak == 1 else 'days'} of completing tasks")
    metric_cols[2].metric("This Week", week.completed, help=f"completed, {week.created} created")
    metric_cols[3].metric("Overdue", overdue, help="tasks past due date")

    stats = category_stats(tasks)
    shares = priority_distribution(tasks)
    breakdown_col, priority_col = st.columns(2)
    with breakdown_col:
        with st.container(border=True):
            st.subheader("Category Breakdown")
            if not stats:
                st.caption("No tasks yet.")
            for entry in stats.values():
                st.markdown(f"{entry.category.label} · {entry.completed}/{entry.total}")
                st.progress(min(entry.completion_rate / 100, 1.0))
            if stats:
                st.plotly_chart(build_category_breakdown_figure(stats), use_container_width=True)

    with priority_col:
        with st.container(border=True):
            st.subheader("Priority Distribution")
            if not shares:
                st.caption("No tasks yet.")
            for share in shares:
                st.markdown(f"{share.priority.value} · {share.count} ({share.percentage:.0f}%)")
            if shares:
                st.plotly_chart(build_priority_distribution_figure(shares), use_container_width=True)

    effort_col, insights_col = st.columns(2)
    with effort_col:
        with st.container(border=True):
            st.subheader("Effort Analysis")
            average = average_effort(tasks)
            st.metric("Average Effort Level", f"{average:.1f}", help=effort_label(average))
            histogram = effort_histogram(tasks)
            for level, count in histogram.items():
                st.caption(f"{level} - {EFFORT_LABELS[level]}: {count}")
            st.plotly_chart(build_effort_histogram_figure(histogram), use_container_width=True)

    with insights_col:
        with st.container(border=True):
            st.subheader("Productivity Insights")
            st.success(f"**Most Productive Category**: {most_productive_category(tasks)}")
            st.warning(f"**Needs Attention**: {attention_message(overdue)}")
            st.markdown("**Recommendations**")
            for recommendation in analytics_recommendations(tasks, today=today):
                st.markdown(f"- {recommendation}")


__all__ = ["render_analytics"]
