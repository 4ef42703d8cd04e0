from __future__ import annotations

import logging
from typing import Optional

import streamlit as st

from smart_task_ai.config import Settings, load_settings
from smart_task_ai.constants import (
    SS_AUTH_MANAGER,
    SS_EXPANDED_TASKS,
    SS_FLASH_MESSAGE,
    SS_TASK_FILTER,
    SS_TASK_FORM,
    SS_TASKS,
)
from smart_task_ai.integrations.supabase import build_auth_client, build_rest_client
from smart_task_ai.models import AuthUser, TaskFilter
from smart_task_ai.session import AuthSession
from smart_task_ai.storage import SupabaseTaskTable
from smart_task_ai.task_form import TaskFormState
from smart_task_ai.task_store import TaskStore

LOGGER = logging.getLogger(__name__)

__all__ = [
    "get_auth_session",
    "get_expanded_tasks",
    "get_task_filter",
    "get_task_form",
    "get_task_store",
    "clear_task_form",
    "init_state",
    "pop_flash",
    "push_flash",
    "reset_state",
    "save_task_filter",
    "set_task_form",
    "toggle_expanded",
]


def _build_table(settings: Settings, access_token: Optional[str]) -> SupabaseTaskTable:
    return SupabaseTaskTable(build_rest_client(settings, access_token=access_token), table=settings.tasks_table)


def get_task_store(settings: Optional[Settings] = None) -> TaskStore:
    """Return the session's task store, creating it on first use."""

    store = st.session_state.get(SS_TASKS)
    if not isinstance(store, TaskStore):
        active_settings = settings or load_settings()
        store = TaskStore(
            table=_build_table(active_settings, None),
            reauthenticate=lambda: _reauthenticate(active_settings),
        )
        st.session_state[SS_TASKS] = store
    return store


def get_auth_session() -> Optional[AuthSession]:
    manager = st.session_state.get(SS_AUTH_MANAGER)
    return manager if isinstance(manager, AuthSession) else None


def _reauthenticate(settings: Settings) -> bool:
    """Refresh the session after a rejected token and hand the store a new table."""

    manager = get_auth_session()
    if manager is None or manager.refresh(notify=False) is None:
        return False
    get_task_store(settings).table = _build_table(settings, manager.access_token)
    return True


def _handle_auth_change(user: Optional[AuthUser], settings: Settings) -> None:
    manager = get_auth_session()
    store = get_task_store(settings)
    store.table = _build_table(settings, manager.access_token if manager else None)
    if user is None:
        store.set_user(None)
        clear_task_form()
        return
    LOGGER.info("Loading tasks for user %s", user.id)
    store.load(user)


def init_state(settings: Optional[Settings] = None) -> AuthSession:
    """Initialize session state and the auth lifecycle once per browser session.

    On later reruns an access token close to expiry is refreshed and the
    store's table is rebuilt so that it carries the current token.
    """

    active_settings = settings or load_settings()
    st.session_state.setdefault(SS_TASK_FILTER, TaskFilter().model_dump())
    st.session_state.setdefault(SS_EXPANDED_TASKS, [])

    manager = get_auth_session()
    if manager is None:
        manager = AuthSession(build_auth_client(active_settings), st.session_state)
        st.session_state[SS_AUTH_MANAGER] = manager
        manager.init(lambda user: _handle_auth_change(user, active_settings))
    else:
        manager.refresh_if_expiring()
        get_task_store(active_settings).table = _build_table(active_settings, manager.access_token)
    return manager


def reset_state() -> None:
    """Dispose the auth subscription and clear managed keys."""

    manager = get_auth_session()
    if manager is not None:
        manager.teardown()
    for key in (SS_AUTH_MANAGER, SS_TASKS, SS_TASK_FILTER, SS_EXPANDED_TASKS, SS_TASK_FORM, SS_FLASH_MESSAGE):
        if key in st.session_state:
            del st.session_state[key]


def get_task_filter() -> TaskFilter:
    return TaskFilter.model_validate(st.session_state.get(SS_TASK_FILTER) or {})


def save_task_filter(task_filter: TaskFilter) -> None:
    st.session_state[SS_TASK_FILTER] = task_filter.model_dump()


def get_expanded_tasks() -> set[str]:
    return set(st.session_state.get(SS_EXPANDED_TASKS, []))


def toggle_expanded(task_id: str) -> None:
    expanded = get_expanded_tasks()
    if task_id in expanded:
        expanded.discard(task_id)
    else:
        expanded.add(task_id)
    st.session_state[SS_EXPANDED_TASKS] = sorted(expanded)


def get_task_form() -> Optional[TaskFormState]:
    form = st.session_state.get(SS_TASK_FORM)
    return form if isinstance(form, TaskFormState) else None


def set_task_form(form: TaskFormState) -> None:
    st.session_state[SS_TASK_FORM] = form


def clear_task_form() -> None:
    st.session_state.pop(SS_TASK_FORM, None)


def push_flash(kind: str, message: str) -> None:
    """Queue a message to show after the next rerun."""

    st.session_state[SS_FLASH_MESSAGE] = (kind, message)


def pop_flash() -> Optional[tuple[str, str]]:
    flash = st.session_state.pop(SS_FLASH_MESSAGE, None)
    return flash if isinstance(flash, tuple) else None
