from __future__ import annotations

import html
from datetime import date
from typing import Optional

import streamlit as st

from smart_task_ai.metrics import effort_label, is_overdue
from smart_task_ai.models import Priority, Task, TaskStatus
from smart_task_ai.state import pop_flash


def priority_badge(priority: Priority, *, suffix: str = "Priority") -> str:
    return (
        f"<span class='sta-badge' style='border-color:{priority.color_hex}; color:{priority.color_hex}'>"
        f"{priority.value} {suffix}</span>"
    )


def task_title_html(task: Task) -> str:
    """Task title escaped for markdown rendered with ``unsafe_allow_html``."""

    return html.escape(task.title)


def status_icon(status: TaskStatus) -> str:
    if status is TaskStatus.COMPLETED:
        return "✅"
    if status is TaskStatus.IN_PROGRESS:
        return "🔄"
    return "⭕"


def task_meta_line(task: Task, *, today: Optional[date] = None) -> str:
    """Badges shown under a task title: priority, urgency, effort, category, due date."""

    parts = [
        priority_badge(task.priority),
        priority_badge(task.urgency, suffix="Urgency"),
        f"<span class='sta-badge'>{effort_label(task.effort)}</span>",
        f"<span class='sta-badge'>{task.category.label}</span>",
    ]
    if task.due_date is not None:
        overdue_class = " sta-overdue" if is_overdue(task, today=today) else ""
        parts.append(f"<span class='sta-badge{overdue_class}'>📅 {task.due_date.isoformat()}</span>")
    if task.ai_enhanced:
        parts.append("<span class='sta-badge sta-ai'>🧠 AI</span>")
    return " ".join(parts)


def render_flash() -> None:
    flash = pop_flash()
    if flash is None:
        return
    kind, message = flash
    if kind == "error":
        st.error(message)
    elif kind == "warning":
        st.warning(message)
    else:
        st.success(message)


def inject_styles() -> None:
    st.markdown(
        """
        <style>
            :root {
                --sta-primary: #3b82f6;
                --sta-surface: #111827;
                --sta-surface-alt: #0f172a;
                --sta-border: #1e3a5f;
                --sta-text: #f1f5f9;
                --sta-muted: #cbd5e1;
            }

            .block-container {
                padding-top: 1.2rem;
                max-width: 1400px;
            }

            div[data-testid="stMetric"] {
                background: linear-gradient(145deg, var(--sta-surface), var(--sta-surface-alt));
                border: 1px solid var(--sta-border);
                border-radius: 14px;
                padding: 12px;
            }

            div[data-testid="stMetricValue"] {
                color: var(--sta-text);
                font-weight: 700;
            }

            [data-testid="stExpander"] {
                border: 1px solid var(--sta-border);
                border-radius: 12px;
            }

            .sta-badge {
                display: inline-block;
                border: 1px solid var(--sta-border);
                border-radius: 999px;
                padding: 0.05rem 0.55rem;
                margin: 0 0.25rem 0.25rem 0;
                font-size: 0.8rem;
                color: var(--sta-muted);
            }

            .sta-overdue {
                border-color: #ef4444;
                color: #ef4444;
                font-weight: 600;
            }

            .sta-ai {
                border-color: #a855f7;
                color: #a855f7;
            }

            .sta-completed {
                text-decoration: line-through;
                color: var(--sta-muted);
            }
        </style>
    """,
        unsafe_allow_html=True,
    )


__all__ = [
    "inject_styles",
    "priority_badge",
    "render_flash",
    "status_icon",
    "task_meta_line",
    "task_title_html",
]
