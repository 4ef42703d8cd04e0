from __future__ import annotations

from datetime import datetime, timezone

from conftest import FakeTaskTable

from smart_task_ai.integrations.supabase import SupabaseError
from smart_task_ai.metrics import dashboard_summary
from smart_task_ai.models import AuthUser, Category, Priority, Subtask, Task, TaskDraft, TaskPatch, TaskStatus
from smart_task_ai.task_store import TaskStore, completion_patch

ADA = AuthUser(id="user-1", email="ada@example.com")
NOW = datetime(2024, 5, 2, 9, 30, tzinfo=timezone.utc)


def _store(table: FakeTaskTable) -> TaskStore:
    store = TaskStore(table)
    store.load(ADA)
    return store


def test_operations_without_user_are_noops(fake_table: FakeTaskTable) -> None:
    store = TaskStore(fake_table)

    assert store.load() == []
    assert store.create(TaskDraft(title="Nope")) is None
    assert store.update("x", TaskPatch(title="y")) is False
    assert store.delete("x") is False
    assert fake_table.calls == []


def test_load_orders_newest_first(fake_table: FakeTaskTable) -> None:
    fake_table.rows = [
        Task(id="old", title="Old", user_id="user-1", created_at=datetime(2024, 5, 1, tzinfo=timezone.utc)),
        Task(id="new", title="New", user_id="user-1", created_at=datetime(2024, 5, 2, tzinfo=timezone.utc)),
        Task(id="other", title="Other", user_id="user-2"),
    ]

    tasks = _store(fake_table).tasks

    assert [task.id for task in tasks] == ["new", "old"]


def test_load_failure_keeps_previous_tasks(fake_table: FakeTaskTable, store_error: SupabaseError, caplog) -> None:
    fake_table.rows = [Task(id="t1", title="Keep me", user_id="user-1")]
    store = _store(fake_table)
    fake_table.fail_with = store_error

    store.load()

    assert [task.id for task in store.tasks] == ["t1"]
    assert "Error loading tasks" in caplog.text


def test_create_prepends_task(fake_table: FakeTaskTable) -> None:
    fake_table.rows = [Task(id="t0", title="Existing", user_id="user-1")]
    store = _store(fake_table)

    created = store.create(TaskDraft(title="Fresh"))

    assert created is not None
    assert store.tasks[0].id == created.id
    assert len(store.tasks) == 2


def test_create_without_returned_row_fails(fake_table: FakeTaskTable) -> None:
    store = _store(fake_table)
    fake_table.return_no_row = True

    assert store.create(TaskDraft(title="Ghost")) is None
    assert store.tasks == []


def test_update_merges_patch_without_refetch(fake_table: FakeTaskTable) -> None:
    fake_table.rows = [Task(id="t1", title="Draft", user_id="user-1")]
    store = _store(fake_table)
    fetches_before = sum(1 for name, _ in fake_table.calls if name == "fetch_all")

    assert store.update("t1", TaskPatch(title="Final", priority=Priority.HIGH)) is True

    task = store.get("t1")
    assert task is not None
    assert task.title == "Final"
    assert task.priority is Priority.HIGH
    assert fake_table.calls[-1] == ("update", ("t1", {"title": "Final", "priority": Priority.HIGH}))
    assert sum(1 for name, _ in fake_table.calls if name == "fetch_all") == fetches_before


def test_update_failure_leaves_local_state(fake_table: FakeTaskTable, store_error: SupabaseError) -> None:
    fake_table.rows = [Task(id="t1", title="Draft", user_id="user-1")]
    store = _store(fake_table)
    fake_table.fail_with = store_error

    assert store.update("t1", TaskPatch(title="Final")) is False
    assert store.tasks[0].title == "Draft"


def test_delete_removes_task(fake_table: FakeTaskTable) -> None:
    fake_table.rows = [Task(id="t1", title="Bye", user_id="user-1")]
    store = _store(fake_table)

    assert store.delete("t1") is True
    assert store.tasks == []


def test_delete_failure_keeps_task(fake_table: FakeTaskTable, store_error: SupabaseError) -> None:
    fake_table.rows = [Task(id="t1", title="Stay", user_id="user-1")]
    store = _store(fake_table)
    fake_table.fail_with = store_error

    assert store.delete("t1") is False
    assert [task.id for task in store.tasks] == ["t1"]


def test_toggle_status_maintains_completed_at(fake_table: FakeTaskTable) -> None:
    fake_table.rows = [Task(id="t1", title="Toggle", user_id="user-1", status=TaskStatus.IN_PROGRESS)]
    store = _store(fake_table)

    store.toggle_status("t1", now=NOW)
    completed = store.get("t1")
    assert completed is not None
    assert completed.status is TaskStatus.COMPLETED
    assert completed.completed_at == NOW

    store.toggle_status("t1", now=NOW)
    reopened = store.get("t1")
    assert reopened is not None
    assert reopened.status is TaskStatus.TODO
    assert reopened.completed_at is None


def test_completion_patch_reopens_completed_task() -> None:
    task = Task(id="t1", title="Done", status=TaskStatus.COMPLETED, completed_at=NOW)

    assert completion_patch(task).changes() == {"status": TaskStatus.TODO, "completed_at": None}


def test_toggle_subtask_sends_full_list(fake_table: FakeTaskTable) -> None:
    fake_table.rows = [
        Task(
            id="t1",
            title="Parent",
            user_id="user-1",
            subtasks=[Subtask(id="s1", title="One"), Subtask(id="s2", title="Two")],
        )
    ]
    store = _store(fake_table)

    assert store.toggle_subtask("t1", "s2") is True

    task = store.get("t1")
    assert task is not None
    assert [subtask.completed for subtask in task.subtasks] == [False, True]
    _, (task_id, changes) = fake_table.calls[-1]
    assert task_id == "t1"
    assert len(changes["subtasks"]) == 2


def test_switching_user_drops_cached_tasks(fake_table: FakeTaskTable) -> None:
    fake_table.rows = [Task(id="t1", title="Mine", user_id="user-1")]
    store = _store(fake_table)

    store.set_user(AuthUser(id="user-2"))
    assert store.tasks == []

    store.set_user(None)
    assert store.user is None


def test_create_then_complete_updates_dashboard(fake_table: FakeTaskTable) -> None:
    fake_table.rows = [
        Task(
            id="t0",
            title="Earlier",
            user_id="user-1",
            priority=Priority.CRITICAL,
            created_at=datetime(2024, 4, 1, tzinfo=timezone.utc),
        )
    ]
    store = _store(fake_table)
    before = dashboard_summary(store.tasks, today=NOW.date()).high_priority_pending

    created = store.create(
        TaskDraft(title="Write report", category=Category.WORK, priority=Priority.HIGH, effort=4)
    )

    assert created is not None
    assert store.tasks[0].title == "Write report"
    assert dashboard_summary(store.tasks, today=NOW.date()).high_priority_pending == before + 1

    store.toggle_status(created.id, now=NOW)

    completed = store.get(created.id)
    assert completed is not None
    assert completed.status is TaskStatus.COMPLETED
    assert completed.completed_at == NOW
    assert dashboard_summary(store.tasks, today=NOW.date()).high_priority_pending == before


def test_unauthorized_call_refreshes_and_retries_once(fake_table: FakeTaskTable) -> None:
    expired = FakeTaskTable()
    expired.fail_with = SupabaseError("JWT expired", status_code=401)
    refreshed: list[bool] = []
    store = TaskStore(expired)
    store.load(ADA)

    def reauthenticate() -> bool:
        refreshed.append(True)
        store.table = fake_table
        return True

    store.reauthenticate = reauthenticate

    created = store.create(TaskDraft(title="After expiry"))

    assert created is not None
    assert refreshed == [True]
    assert [name for name, _ in expired.calls] == ["fetch_all", "insert"]
    assert [name for name, _ in fake_table.calls] == ["insert"]
    assert [task.title for task in store.tasks] == ["After expiry"]


def test_failed_refresh_reports_original_error(caplog) -> None:
    expired = FakeTaskTable([Task(id="t1", title="Keep", user_id="user-1")])
    store = TaskStore(expired, reauthenticate=lambda: False)
    store.load(ADA)
    expired.fail_with = SupabaseError("JWT expired", status_code=401)

    assert store.update("t1", TaskPatch(title="Lost")) is False
    assert store.tasks[0].title == "Keep"
    assert "JWT expired" in caplog.text


def test_other_errors_do_not_trigger_refresh(fake_table: FakeTaskTable, store_error: SupabaseError) -> None:
    calls: list[bool] = []
    store = TaskStore(fake_table, reauthenticate=lambda: calls.append(True) or True)
    store.load(ADA)
    fake_table.fail_with = store_error

    assert store.create(TaskDraft(title="Nope")) is None
    assert calls == []
