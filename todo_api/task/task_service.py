# todo_api/task/task_service.py

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date
from typing import Any, Mapping, Optional, Union

from sqlalchemy import func, or_

from todo_api.errors import NotFoundError, ValidationError
from todo_api.models.task import Task
from todo_api.task.task_store import TaskStore
from todo_api.task.validators import validate_task_data
from todo_api.utils.date_helpers import format_due_date, next_timestamp, utc_now

logger = logging.getLogger("todo_api.task")


class _Unset:
    """Marker for a patch field the caller did not send."""

    _instance: Optional["_Unset"] = None

    def __new__(cls) -> "_Unset":
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "UNSET"

    def __bool__(self) -> bool:
        return False


UNSET: Any = _Unset()

# ==========================
#  SORT WHITELIST
# ==========================
# caller tokens -> columns; nothing else ever reaches ORDER BY
SORT_COLUMNS = {
    "createdAt": Task.created_at,
    "dueDate": Task.due_date,
    "title": Task.title,
    "priority": Task.priority,
    "id": Task.id,
    "completed": Task.completed,
}
SORT_ORDERS = ("ASC", "DESC")


@dataclass(frozen=True)
class TaskFilters:
    completed: Optional[bool] = None
    priority: Optional[str] = None
    search: Optional[str] = None
    sort_by: str = "createdAt"
    sort_order: str = "DESC"


@dataclass(frozen=True)
class TaskPatch:
    """
    Partial update. A field left as UNSET is not touched; any other value,
    None included, is written. Only description and due_date may be cleared.
    """

    title: Union[str, _Unset] = UNSET
    description: Union[str, None, _Unset] = UNSET
    completed: Union[bool, _Unset] = UNSET
    priority: Union[str, _Unset] = UNSET
    due_date: Union[str, None, _Unset] = UNSET

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> "TaskPatch":
        values: dict[str, Any] = {}
        # null on these means "leave as is"
        for name in ("title", "completed", "priority"):
            if data.get(name) is not None:
                values[name] = data[name]
        # null (or "") on these means "clear"
        for name in ("description", "due_date"):
            if name in data:
                values[name] = data[name] or None
        return cls(**values)

    def provided(self) -> dict[str, Any]:
        return {
            name: value
            for name, value in (
                ("title", self.title),
                ("description", self.description),
                ("completed", self.completed),
                ("priority", self.priority),
                ("due_date", self.due_date),
            )
            if value is not UNSET
        }


@dataclass(frozen=True)
class TaskStats:
    total: int
    completed: int
    incomplete: int
    overdue: int


def _task_fields(task: Task) -> dict[str, Any]:
    return {
        "title": task.title,
        "description": task.description,
        "completed": task.completed,
        "priority": task.priority,
        "due_date": task.due_date,
    }


class TaskService:
    def __init__(self, store: TaskStore):
        self.store = store

    # ==========================
    #  LIST / READ
    # ==========================
    def get_all_tasks(self, filters: Optional[TaskFilters] = None) -> list[Task]:
        filters = filters or TaskFilters()

        column = SORT_COLUMNS.get(filters.sort_by)
        if column is None:
            raise ValidationError([f"sortBy must be one of: {', '.join(SORT_COLUMNS)}"])
        order = (filters.sort_order or "").upper()
        if order not in SORT_ORDERS:
            raise ValidationError(["sortOrder must be ASC or DESC"])

        criteria = []
        if filters.completed is not None:
            criteria.append(Task.completed.is_(bool(filters.completed)))
        if filters.priority:
            criteria.append(Task.priority == filters.priority)
        if filters.search:
            # LIKE wildcards inside the search text are passed through as-is
            pattern = f"%{filters.search}%"
            criteria.append(or_(Task.title.like(pattern), Task.description.like(pattern)))

        if order == "ASC":
            order_by = [column.asc(), Task.id.asc()]
        else:
            order_by = [column.desc(), Task.id.desc()]

        return self.store.select_all(criteria, order_by)

    def get_task_by_id(self, task_id: int) -> Optional[Task]:
        return self.store.select_by_id(task_id)

    # ==========================
    #  CREATE
    # ==========================
    def create_task(self, data: Mapping[str, Any]) -> Task:
        validation = validate_task_data(data)
        if not validation.valid:
            logger.info("task_validation_failed", extra={"errors": validation.errors})
            raise ValidationError(validation.errors)

        completed = data.get("completed")
        if completed is None:
            completed = False

        now = utc_now()
        task_id = self.store.insert(
            title=data["title"].strip(),
            description=data.get("description") or None,
            completed=completed,
            priority=data.get("priority") or "none",
            due_date=format_due_date(data.get("due_date")),
            created_at=now,
            updated_at=now,
        )
        logger.info("task_created", extra={"task_id": task_id})

        task = self.store.select_by_id(task_id)
        if task is None:
            raise NotFoundError()
        return task

    # ==========================
    #  UPDATE (partial)
    # ==========================
    def update_task(self, task_id: int, patch: Union[TaskPatch, Mapping[str, Any]]) -> Task:
        if not isinstance(patch, TaskPatch):
            patch = TaskPatch.from_mapping(patch)

        existing = self.store.select_by_id(task_id)
        if existing is None:
            raise NotFoundError()

        changes = patch.provided()
        merged = {**_task_fields(existing), **changes}

        validation = validate_task_data(merged)
        if not validation.valid:
            logger.info("task_validation_failed", extra={"task_id": task_id, "errors": validation.errors})
            raise ValidationError(validation.errors)

        if "title" in changes:
            changes["title"] = changes["title"].strip()
        if "due_date" in changes:
            changes["due_date"] = format_due_date(changes["due_date"])

        self.store.update_fields(
            task_id,
            changes,
            updated_at=next_timestamp(existing.updated_at),
        )
        logger.info("task_updated", extra={"task_id": task_id, "fields": sorted(changes)})

        task = self.store.select_by_id(task_id)
        if task is None:
            raise NotFoundError()
        return task

    def toggle_task_completion(self, task_id: int) -> Task:
        task = self.store.select_by_id(task_id)
        if task is None:
            raise NotFoundError()
        return self.update_task(task_id, TaskPatch(completed=not task.completed))

    # ==========================
    #  DELETE
    # ==========================
    def delete_task(self, task_id: int) -> bool:
        removed = self.store.delete_by_id(task_id)
        if removed:
            logger.info("task_deleted", extra={"task_id": task_id})
        return removed

    # ==========================
    #  STATS
    # ==========================
    def get_task_stats(self, today: Optional[date] = None) -> TaskStats:
        """
        Counts for the dashboard. A task is overdue when it is not completed,
        has a due date, and that date is strictly before `today` (local date
        by default). Only calendar dates are compared.
        """
        today = today or date.today()

        return TaskStats(
            total=self.store.count_where(),
            completed=self.store.count_where(Task.completed.is_(True)),
            incomplete=self.store.count_where(Task.completed.is_(False)),
            overdue=self.store.count_where(
                Task.completed.is_(False),
                Task.due_date.is_not(None),
                func.date(Task.due_date) < today.isoformat(),
            ),
        )
