from __future__ import annotations

from typing import Any, Mapping, Protocol

from pydantic_core import to_jsonable_python

from smart_task_ai.integrations.supabase.client import SupabaseRestClient
from smart_task_ai.models import Task, TaskDraft, TaskPatch

ORDER_NEWEST_FIRST = "created_at.desc"


class TaskTable(Protocol):
    """Remote table holding one row per task, scoped by owner."""

    def fetch_all(self, user_id: str) -> list[Task]:
        """Return every task of ``user_id``, newest first."""

    def insert(self, draft: TaskDraft, user_id: str) -> Task:
        """Insert a row and return it as stored (server id and created_at)."""

    def update(self, task_id: str, patch: TaskPatch, user_id: str) -> None:
        """Write only the fields set on ``patch``."""

    def delete(self, task_id: str, user_id: str) -> None:
        """Remove the row of ``user_id`` with ``task_id``."""


def task_from_row(row: Mapping[str, Any]) -> Task:
    """Translate a snake_case row into a Task; null columns fall back to defaults."""

    payload = {key: value for key, value in row.items() if value is not None}
    return Task.model_validate(payload)


def draft_to_row(draft: TaskDraft, user_id: str) -> dict[str, Any]:
    row = to_jsonable_python(draft.model_dump())
    row["user_id"] = user_id
    return row


def patch_to_row(patch: TaskPatch) -> dict[str, Any]:
    return to_jsonable_python(patch.changes())


class SupabaseTaskTable:
    """TaskTable backed by a Supabase (PostgREST) table."""

    def __init__(self, client: SupabaseRestClient, table: str = "tasks") -> None:
        self.client = client
        self.table = table

    def fetch_all(self, user_id: str) -> list[Task]:
        rows = self.client.select(self.table, filters={"user_id": user_id}, order=ORDER_NEWEST_FIRST)
        return [task_from_row(row) for row in rows]

    def insert(self, draft: TaskDraft, user_id: str) -> Task:
        row = self.client.insert(self.table, draft_to_row(draft, user_id))
        return task_from_row(row)

    def update(self, task_id: str, patch: TaskPatch, user_id: str) -> None:
        self.client.update(self.table, patch_to_row(patch), filters={"id": task_id, "user_id": user_id})

    def delete(self, task_id: str, user_id: str) -> None:
        self.client.delete(self.table, filters={"id": task_id, "user_id": user_id})


__all__ = [
    "ORDER_NEWEST_FIRST",
    "SupabaseTaskTable",
    "TaskTable",
    "draft_to_row",
    "patch_to_row",
    "task_from_row",
]
