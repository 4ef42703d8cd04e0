from __future__ import annotations

from datetime import date, datetime, timezone
from typing import Optional, Sequence

import streamlit as st

from smart_task_ai.constants import EFFORT_LABELS, FILTER_ALL, NEW_SUBTASK_TITLE_KEY, SS_TASK_FORM
from smart_task_ai.metrics import filter_tasks
from smart_task_ai.models import Category, Priority, Task, TaskFilter, TaskPatch, TaskStatus
from smart_task_ai.state import (
    clear_task_form,
    get_expanded_tasks,
    get_task_filter,
    get_task_form,
    push_flash,
    save_task_filter,
    set_task_form,
    toggle_expanded,
)
from smart_task_ai.task_form import TaskFormState
from smart_task_ai.task_store import TaskStore
from smart_task_ai.ui.common import status_icon, task_meta_line, task_title_html

PENDING_DELETE_KEY = "pending_delete_task"


def _form_key(form: TaskFormState, name: str) -> str:
    return f"{SS_TASK_FORM}_{form.task_id or 'new'}_{name}"


def _add_subtask_from_input(form: TaskFormState, input_key: str) -> None:
    form.add_subtask(str(st.session_state.get(input_key, "")))
    st.session_state[input_key] = ""


def _save_form(store: TaskStore, form: TaskFormState) -> None:
    draft = form.submit()
    if draft is None:
        return

    if form.task_id is not None:
        saved = store.update(form.task_id, TaskPatch.from_draft(draft))
    else:
        saved = store.create(draft) is not None

    if saved:
        clear_task_form()
        push_flash("success", "Task updated." if form.is_edit else "Task created.")
    else:
        push_flash("error", "Could not save the task. Please try again.")


def _cancel_form(form: TaskFormState) -> None:
    form.cancel()
    clear_task_form()


def render_task_form(store: TaskStore) -> None:
    """Create/edit form for the task currently held in session state."""

    form = get_task_form()
    if form is None:
        return

    with st.container(border=True):
        st.subheader("Edit Task" if form.is_edit else "Create New Task")
        form.title = st.text_input(
            "Title *",
            value=form.title,
            placeholder="Enter task title...",
            key=_form_key(form, "title"),
        )
        form.description = st.text_area(
            "Description",
            value=form.description,
            placeholder="Add task details...",
            key=_form_key(form, "description"),
        )

        left, right = st.columns(2)
        with left:
            form.category = st.selectbox(
                "Category",
                options=list(Category),
                format_func=lambda option: option.label,
                index=list(Category).index(form.category),
                key=_form_key(form, "category"),
            )
            form.priority = st.selectbox(
                "Priority",
                options=list(Priority),
                format_func=lambda option: option.value,
                index=list(Priority).index(form.priority),
                key=_form_key(form, "priority"),
            )
            form.status = st.selectbox(
                "Status",
                options=list(TaskStatus),
                format_func=lambda option: option.value,
                index=list(TaskStatus).index(form.status),
                key=_form_key(form, "status"),
            )
        with right:
            form.urgency = st.selectbox(
                "Urgency",
                options=list(Priority),
                format_func=lambda option: option.value,
                index=list(Priority).index(form.urgency),
                key=_form_key(form, "urgency"),
            )
            form.effort = st.select_slider(
                "Effort Level",
                options=list(EFFORT_LABELS),
                value=form.effort,
                format_func=lambda level: f"{level} - {EFFORT_LABELS[level]}",
                key=_form_key(form, "effort"),
            )
            form.due_date = st.date_input(
                "Due Date",
                value=form.due_date if isinstance(form.due_date, date) else None,
                format="YYYY-MM-DD",
                key=_form_key(form, "due_date"),
            )

        st.markdown("**Subtasks**")
        for subtask in list(form.subtasks):
            subtask_cols = st.columns([0.85, 0.15])
            subtask_cols[0].write(f"• {subtask.title}")
            subtask_cols[1].button(
                "Remove",
                key=_form_key(form, f"remove_{subtask.id}"),
                on_click=form.remove_subtask,
                args=(subtask.id,),
            )

        input_key = f"{NEW_SUBTASK_TITLE_KEY}_{form.task_id or 'new'}"
        add_cols = st.columns([0.85, 0.15])
        add_cols[0].text_input(
            "Add subtask",
            placeholder="Add a subtask...",
            key=input_key,
            label_visibility="collapsed",
        )
        add_cols[1].button(
            "Add",
            key=_form_key(form, "add_subtask"),
            on_click=_add_subtask_from_input,
            args=(form, input_key),
        )

        action_cols = st.columns(2)
        if action_cols[0].button(
            "Update Task" if form.is_edit else "Create Task",
            type="primary",
            key=_form_key(form, "save"),
        ):
            _save_form(store, form)
            st.rerun()
        action_cols[1].button(
            "Cancel",
            key=_form_key(form, "cancel"),
            on_click=_cancel_form,
            args=(form,),
        )


def _filter_label(option: object, all_label: str) -> str:
    if option == FILTER_ALL:
        return all_label
    if isinstance(option, Category):
        return option.label
    return str(getattr(option, "value", option))


def render_filters() -> TaskFilter:
    current = get_task_filter()
    category_options: list[object] = [FILTER_ALL, *Category]
    priority_options: list[object] = [FILTER_ALL, *Priority]
    status_options: list[object] = [FILTER_ALL, *TaskStatus]

    filter_cols = st.columns([0.25, 0.25, 0.25, 0.25])
    category = filter_cols[0].selectbox(
        "Category",
        options=category_options,
        index=category_options.index(current.category or FILTER_ALL),
        format_func=lambda option: _filter_label(option, "All Categories"),
        key="filter_category",
    )
    priority = filter_cols[1].selectbox(
        "Priority",
        options=priority_options,
        index=priority_options.index(current.priority or FILTER_ALL),
        format_func=lambda option: _filter_label(option, "All Priorities"),
        key="filter_priority",
    )
    status = filter_cols[2].selectbox(
        "Status",
        options=status_options,
        index=status_options.index(current.status or FILTER_ALL),
        format_func=lambda option: _filter_label(option, "All Status"),
        key="filter_status",
    )
    with filter_cols[3]:
        st.write("")
        if st.button("➕ Add Task", key="tasks_add_button", use_container_width=True):
            set_task_form(TaskFormState.empty())

    selected = TaskFilter(
        category=None if category == FILTER_ALL else Category(category),
        priority=None if priority == FILTER_ALL else Priority(priority),
        status=None if status == FILTER_ALL else TaskStatus(status),
    )
    save_task_filter(selected)
    return selected


def _toggle_status(store: TaskStore, task_id: str) -> None:
    if not store.toggle_status(task_id):
        push_flash("error", "Could not update the task.")


def _toggle_subtask(store: TaskStore, task_id: str, subtask_id: str) -> None:
    if not store.toggle_subtask(task_id, subtask_id):
        push_flash("error", "Could not update the subtask.")


def _delete_task(store: TaskStore, task_id: str) -> None:
    st.session_state.pop(f"{PENDING_DELETE_KEY}_{task_id}", None)
    if store.delete(task_id):
        push_flash("success", "Task deleted.")
    else:
        push_flash("error", "Could not delete the task.")


def _render_delete_confirmation(store: TaskStore, task: Task) -> None:
    pending_key = f"{PENDING_DELETE_KEY}_{task.id}"
    if st.session_state.get(pending_key):
        st.warning("Are you sure? This task will be removed permanently.")
        confirm_cols = st.columns(2)
        confirm_cols[0].button(
            "Yes, delete",
            key=f"task_delete_confirm_{task.id}",
            on_click=_delete_task,
            args=(store, task.id),
        )
        if confirm_cols[1].button("Keep", key=f"task_delete_cancel_{task.id}"):
            st.session_state.pop(pending_key, None)
            st.rerun()
        return

    if st.button("🗑️ Delete", key=f"task_delete_{task.id}", help="Remove task"):
        st.session_state[pending_key] = True
        st.rerun()


def render_task_row(store: TaskStore, task: Task, *, expanded: bool, today: Optional[date] = None) -> None:
    with st.container(border=True):
        row_cols = st.columns([0.07, 0.68, 0.25])
        with row_cols[0]:
            st.checkbox(
                "Completed",
                value=task.is_completed,
                key=f"task_done_{task.id}_{task.status.value}",
                label_visibility="collapsed",
                on_change=_toggle_status,
                args=(store, task.id),
                help="Toggle completion",
            )

        with row_cols[1]:
            title_class = "sta-completed" if task.is_completed else ""
            st.markdown(
                f"<strong class='{title_class}'>{status_icon(task.status)} {task_title_html(task)}</strong>",
                unsafe_allow_html=True,
            )
            if task.description:
                st.caption(task.description)
            st.markdown(task_meta_line(task, today=today), unsafe_allow_html=True)
            if task.subtasks:
                done = sum(1 for subtask in task.subtasks if subtask.completed)
                st.progress(
                    task.subtask_progress / 100,
                    text=f"{done}/{len(task.subtasks)} subtasks completed",
                )

        with row_cols[2]:
            if task.subtasks:
                st.button(
                    "▲ Hide subtasks" if expanded else "▼ Show subtasks",
                    key=f"task_expand_{task.id}",
                    on_click=toggle_expanded,
                    args=(task.id,),
                )
            if st.button("✏️ Edit", key=f"task_edit_{task.id}"):
                set_task_form(TaskFormState.from_task(task))
                st.rerun()
            _render_delete_confirmation(store, task)

        if expanded and task.subtasks:
            for subtask in task.subtasks:
                st.checkbox(
                    subtask.title,
                    value=subtask.completed,
                    key=f"subtask_done_{task.id}_{subtask.id}_{subtask.completed}",
                    on_change=_toggle_subtask,
                    args=(store, task.id, subtask.id),
                )


def render_task_list(store: TaskStore, tasks: Sequence[Task], *, today: Optional[date] = None) -> None:
    if not tasks:
        st.info("No tasks found. Create your first task or adjust your filters to see tasks here.")
        return

    expanded = get_expanded_tasks()
    for task in tasks:
        render_task_row(store, task, expanded=task.id in expanded, today=today)


def render_tasks_tab(store: TaskStore) -> None:
    today = datetime.now(timezone.utc).date()
    selected = render_filters()
    render_task_form(store)
    render_task_list(store, filter_tasks(store.tasks, selected), today=today)


__all__ = [
    "render_filters",
    "render_task_form",
    "render_task_list",
    "render_task_row",
    "render_tasks_tab",
]
