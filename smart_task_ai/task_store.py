from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Callable, Iterable, Optional, TypeVar

from pydantic import ValidationError

from smart_task_ai.integrations.supabase import SupabaseError
from smart_task_ai.models import AuthUser, Task, TaskDraft, TaskPatch, TaskStatus
from smart_task_ai.storage import TaskTable

LOGGER = logging.getLogger(__name__)

_STORE_ERRORS = (SupabaseError, ValidationError)

T = TypeVar("T")


def completion_patch(task: Task, *, now: datetime | None = None) -> TaskPatch:
    """Patch that flips a task between Completed and Todo.

    ``completed_at`` is set exactly when the task becomes Completed and
    cleared when it leaves Completed.
    """

    if task.status is TaskStatus.COMPLETED:
        return TaskPatch(status=TaskStatus.TODO, completed_at=None)
    return TaskPatch(status=TaskStatus.COMPLETED, completed_at=now or datetime.now(timezone.utc))


class TaskStore:
    """Client-side cache of the signed-in user's tasks.

    Every mutation round-trips to the remote table first and only touches the
    local list once the call succeeded. Updates merge the request patch into
    the cached task; the row is not re-read, so server-side defaults are not
    reflected until the next ``load``. Calls are neither queued nor versioned:
    the last one to finish wins.

    When a call is rejected as unauthorized and ``reauthenticate`` is set, it
    is invoked once; a True result means ``table`` now carries a fresh token
    and the call is repeated.
    """

    def __init__(
        self,
        table: TaskTable,
        tasks: Iterable[Task] = (),
        *,
        reauthenticate: Optional[Callable[[], bool]] = None,
    ) -> None:
        self.table = table
        self.reauthenticate = reauthenticate
        self.user: Optional[AuthUser] = None
        self._tasks: list[Task] = list(tasks)

    def _call(self, action: Callable[[], T]) -> T:
        try:
            return action()
        except SupabaseError as exc:
            if not exc.is_unauthorized or self.reauthenticate is None:
                raise
            LOGGER.info("Request unauthorized, refreshing session: %s", exc)
            if not self.reauthenticate():
                raise
        return action()

    @property
    def tasks(self) -> list[Task]:
        return list(self._tasks)

    def get(self, task_id: str) -> Optional[Task]:
        for task in self._tasks:
            if task.id == task_id:
                return task
        return None

    def set_user(self, user: Optional[AuthUser]) -> None:
        if user is None or (self.user is not None and self.user.id != user.id):
            self._tasks = []
        self.user = user

    def load(self, user: Optional[AuthUser] = None) -> list[Task]:
        if user is not None:
            self.set_user(user)
        if self.user is None:
            return self.tasks
        user_id = self.user.id

        try:
            self._tasks = self._call(lambda: self.table.fetch_all(user_id))
        except _STORE_ERRORS as exc:
            LOGGER.error("Error loading tasks: %s", exc)
        return self.tasks

    def create(self, draft: TaskDraft) -> Optional[Task]:
        if self.user is None:
            return None
        user_id = self.user.id

        try:
            created = self._call(lambda: self.table.insert(draft, user_id))
        except _STORE_ERRORS as exc:
            LOGGER.error("Error adding task: %s", exc)
            return None

        self._tasks.insert(0, created)
        return created

    def update(self, task_id: str, patch: TaskPatch) -> bool:
        if self.user is None:
            return False
        user_id = self.user.id

        try:
            self._call(lambda: self.table.update(task_id, patch, user_id))
        except _STORE_ERRORS as exc:
            LOGGER.error("Error updating task: %s", exc)
            return False

        self._tasks = [patch.apply_to(task) if task.id == task_id else task for task in self._tasks]
        return True

    def delete(self, task_id: str) -> bool:
        if self.user is None:
            return False
        user_id = self.user.id

        try:
            self._call(lambda: self.table.delete(task_id, user_id))
        except _STORE_ERRORS as exc:
            LOGGER.error("Error deleting task: %s", exc)
            return False

        self._tasks = [task for task in self._tasks if task.id != task_id]
        return True

    def toggle_status(self, task_id: str, *, now: datetime | None = None) -> bool:
        task = self.get(task_id)
        if task is None:
            return False
        return self.update(task_id, completion_patch(task, now=now))

    def toggle_subtask(self, task_id: str, subtask_id: str) -> bool:
        task = self.get(task_id)
        if task is None:
            return False

        subtasks = [
            subtask.model_copy(update={"completed": not subtask.completed}) if subtask.id == subtask_id else subtask
            for subtask in task.subtasks
        ]
        return self.update(task_id, TaskPatch(subtasks=subtasks))


__all__ = ["TaskStore", "completion_patch"]
