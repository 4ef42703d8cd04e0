from __future__ import annotations

import sys
from datetime import datetime, timezone
from pathlib import Path
from typing import Dict, Optional

import pytest
import streamlit as st

PROJECT_ROOT = Path(__file__).resolve().parent.parent
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from smart_task_ai.integrations.supabase import StoreWriteError, SupabaseError  # noqa: E402
from smart_task_ai.models import Task, TaskDraft, TaskPatch  # noqa: E402


class FakeTaskTable:
    """In-memory TaskTable that records calls and can be told to fail."""

    def __init__(self, rows: Optional[list[Task]] = None) -> None:
        self.rows: list[Task] = list(rows or [])
        self.calls: list[tuple[str, object]] = []
        self.fail_with: Optional[Exception] = None
        self.return_no_row = False
        self._counter = 0

    def _maybe_fail(self) -> None:
        if self.fail_with is not None:
            raise self.fail_with

    def fetch_all(self, user_id: str) -> list[Task]:
        self.calls.append(("fetch_all", user_id))
        self._maybe_fail()
        owned = [task for task in self.rows if task.user_id == user_id]
        return sorted(owned, key=lambda task: task.created_at, reverse=True)

    def insert(self, draft: TaskDraft, user_id: str) -> Task:
        self.calls.append(("insert", draft))
        self._maybe_fail()
        if self.return_no_row:
            raise StoreWriteError("Supabase insert returned no row.")
        self._counter += 1
        task = Task(
            id=f"task-{self._counter}",
            user_id=user_id,
            created_at=datetime(2024, 5, 1, 8, self._counter, tzinfo=timezone.utc),
            **draft.model_dump(),
        )
        self.rows.insert(0, task)
        return task

    def update(self, task_id: str, patch: TaskPatch, user_id: str) -> None:
        self.calls.append(("update", (task_id, patch.changes())))
        self._maybe_fail()
        self.rows = [patch.apply_to(task) if task.id == task_id else task for task in self.rows]

    def delete(self, task_id: str, user_id: str) -> None:
        self.calls.append(("delete", task_id))
        self._maybe_fail()
        self.rows = [task for task in self.rows if task.id != task_id]


@pytest.fixture()
def session_state(monkeypatch: pytest.MonkeyPatch) -> Dict[str, object]:
    state: Dict[str, object] = {}
    monkeypatch.setattr(st, "session_state", state, raising=False)
    return state


@pytest.fixture()
def fake_table() -> FakeTaskTable:
    return FakeTaskTable()


@pytest.fixture()
def store_error() -> SupabaseError:
    return SupabaseError("Supabase request failed (status 500)")
