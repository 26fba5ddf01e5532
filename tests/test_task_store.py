# tests/test_task_store.py

from __future__ import annotations

from datetime import datetime, timedelta

import pytest

from todo_api.errors import NotFoundError, StorageError
from todo_api.models.task import Task
from todo_api.task.task_store import TaskStore


def test_insert_select_update_delete(store: TaskStore) -> None:
    task_id = store.insert(title="Write report", priority="high", due_date="2026-05-01")
    assert task_id > 0

    task = store.select_by_id(task_id)
    assert task is not None
    assert task.title == "Write report"
    assert task.completed is False
    assert task.description is None
    assert task.created_at == task.updated_at

    later = task.updated_at + timedelta(seconds=5)
    store.update_fields(task_id, {"completed": True}, updated_at=later)
    updated = store.select_by_id(task_id)
    assert updated.completed is True
    assert updated.updated_at == later
    assert updated.created_at == task.created_at
    assert updated.title == "Write report"

    assert store.delete_by_id(task_id) is True
    assert store.select_by_id(task_id) is None
    assert store.delete_by_id(task_id) is False


def test_update_fields_missing_id(store: TaskStore) -> None:
    with pytest.raises(NotFoundError):
        store.update_fields(999, {"title": "nope"})


def test_update_fields_rejects_unknown_columns(store: TaskStore) -> None:
    task_id = store.insert(title="A")
    with pytest.raises(ValueError):
        store.update_fields(task_id, {"created_at": datetime(2000, 1, 1)})


def test_select_all_with_criteria_and_order(store: TaskStore) -> None:
    store.insert(title="b", priority="low")
    store.insert(title="a", priority="high")
    store.insert(title="c", priority="low")

    rows = store.select_all([Task.priority == "low"], [Task.title.asc()])
    assert [t.title for t in rows] == ["b", "c"]

    assert len(store.select_all()) == 3


def test_count_where(store: TaskStore) -> None:
    store.insert(title="a", completed=True)
    store.insert(title="b")
    store.insert(title="c")

    assert store.count_where() == 3
    assert store.count_where(Task.completed.is_(True)) == 1
    assert store.count_where(Task.completed.is_(False), Task.title == "b") == 1


# ---------- storage constraints (writes that skip the service) ----------

@pytest.mark.parametrize(
    "fields",
    [
        {"title": ""},
        {"title": "   "},
        {"title": "t" * 201},
        {"title": "ok", "description": "d" * 1001},
        {"title": "ok", "priority": "urgent"},
    ],
)
def test_storage_rejects_invalid_rows(store: TaskStore, fields: dict) -> None:
    with pytest.raises(StorageError):
        store.insert(**fields)
    assert store.count_where() == 0


def test_storage_rejects_invalid_update_and_keeps_row(store: TaskStore) -> None:
    task_id = store.insert(title="Keep me", priority="low")

    with pytest.raises(StorageError):
        store.update_fields(task_id, {"priority": "urgent", "title": "Changed"})

    task = store.select_by_id(task_id)
    assert task.priority == "low"
    assert task.title == "Keep me"


def test_storage_rejects_updated_before_created(store: TaskStore) -> None:
    created = datetime(2026, 1, 1, 12, 0, 0)
    task_id = store.insert(title="x", created_at=created, updated_at=created)

    with pytest.raises(StorageError):
        store.update_fields(task_id, {}, updated_at=created - timedelta(days=1))
