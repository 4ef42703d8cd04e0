from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime, timezone
from typing import Optional, Union

from smart_task_ai.models import Category, Priority, Subtask, Task, TaskDraft, TaskStatus


def _coerce_due_date(value: Union[date, str, None]) -> Optional[date]:
    if value is None:
        return None
    if isinstance(value, date):
        return value
    cleaned = value.strip()
    if not cleaned:
        return None
    return date.fromisoformat(cleaned)


@dataclass
class TaskFormState:
    """Local, uncommitted edits of one create or edit form.

    Nothing leaves the form until ``submit`` returns a draft; ``cancel``
    throws the edits away.
    """

    title: str = ""
    description: str = ""
    category: Category = Category.PERSONAL
    priority: Priority = Priority.MEDIUM
    urgency: Priority = Priority.MEDIUM
    effort: int = 3
    status: TaskStatus = TaskStatus.TODO
    due_date: Union[date, str, None] = None
    subtasks: list[Subtask] = field(default_factory=list)
    task_id: Optional[str] = None
    completed_at: Optional[datetime] = None
    ai_enhanced: bool = False
    original_title: Optional[str] = None

    @classmethod
    def empty(cls) -> "TaskFormState":
        return cls()

    @classmethod
    def from_task(cls, task: Task) -> "TaskFormState":
        return cls(
            title=task.title,
            description=task.description,
            category=task.category,
            priority=task.priority,
            urgency=task.urgency,
            effort=task.effort,
            status=task.status,
            due_date=task.due_date,
            subtasks=[subtask.model_copy() for subtask in task.subtasks],
            task_id=task.id,
            completed_at=task.completed_at,
            ai_enhanced=task.ai_enhanced,
            original_title=task.original_title,
        )

    @property
    def is_edit(self) -> bool:
        return self.task_id is not None

    def add_subtask(self, title: str) -> Optional[Subtask]:
        cleaned = title.strip()
        if not cleaned:
            return None
        subtask = Subtask(title=cleaned)
        self.subtasks.append(subtask)
        return subtask

    def remove_subtask(self, subtask_id: str) -> None:
        self.subtasks = [subtask for subtask in self.subtasks if subtask.id != subtask_id]

    def submit(self, *, now: datetime | None = None) -> Optional[TaskDraft]:
        """Return the draft to persist, or ``None`` when the title is blank.

        ``completed_at`` follows the status: kept while the task stays
        Completed, stamped when it becomes Completed, cleared otherwise.
        """

        title = self.title.strip()
        if not title:
            return None

        completed_at: Optional[datetime] = None
        if self.status is TaskStatus.COMPLETED:
            completed_at = self.completed_at or now or datetime.now(timezone.utc)

        return TaskDraft(
            title=title,
            description=self.description.strip(),
            category=self.category,
            priority=self.priority,
            urgency=self.urgency,
            effort=self.effort,
            status=self.status,
            due_date=_coerce_due_date(self.due_date),
            subtasks=list(self.subtasks),
            completed_at=completed_at,
            ai_enhanced=self.ai_enhanced,
            original_title=self.original_title,
        )

    def cancel(self) -> None:
        fresh = TaskFormState()
        for name in self.__dataclass_fields__:
            setattr(self, name, getattr(fresh, name))


__all__ = ["TaskFormState"]
