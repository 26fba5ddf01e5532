# todo_api/task/task_store.py

from __future__ import annotations

import logging
from datetime import datetime
from typing import Any, Mapping, Optional, Sequence

from sqlalchemy import func
from sqlalchemy.sql import ColumnElement

from todo_api.database import Database
from todo_api.errors import NotFoundError
from todo_api.models.task import Task
from todo_api.utils.date_helpers import utc_now

logger = logging.getLogger("todo_api.task.store")

# attributes a caller may write through update_fields
UPDATABLE_FIELDS = ("title", "description", "completed", "priority", "due_date")


class TaskStore:
    """
    The only code that touches the tasks table.

    Every statement goes through SQLAlchemy with bound parameters. CHECK
    constraints on the table reject bad rows even when a caller skips the
    service layer; such failures come out as StorageError.
    """

    def __init__(self, database: Database):
        self.database = database

    def insert(
        self,
        *,
        title: str,
        description: Optional[str] = None,
        completed: bool = False,
        priority: str = "none",
        due_date: Optional[str] = None,
        created_at: Optional[datetime] = None,
        updated_at: Optional[datetime] = None,
    ) -> int:
        now = utc_now()
        task = Task(
            title=title,
            description=description,
            completed=completed,
            priority=priority,
            due_date=due_date,
            created_at=created_at or now,
            updated_at=updated_at or created_at or now,
        )
        with self.database.session_scope() as db:
            db.add(task)
            db.flush()
            task_id = int(task.id)
        logger.debug("task_inserted", extra={"task_id": task_id})
        return task_id

    def select_by_id(self, task_id: int) -> Optional[Task]:
        with self.database.session_scope() as db:
            return db.get(Task, task_id)

    def select_all(
        self,
        criteria: Sequence[ColumnElement] = (),
        order_by: Sequence[ColumnElement] = (),
    ) -> list[Task]:
        with self.database.session_scope() as db:
            q = db.query(Task)
            if criteria:
                q = q.filter(*criteria)
            if order_by:
                q = q.order_by(*order_by)
            return q.all()

    def update_fields(
        self,
        task_id: int,
        fields: Mapping[str, Any],
        *,
        updated_at: Optional[datetime] = None,
    ) -> None:
        unknown = set(fields) - set(UPDATABLE_FIELDS)
        if unknown:
            raise ValueError(f"Fields cannot be updated: {', '.join(sorted(unknown))}")

        with self.database.session_scope() as db:
            task = db.get(Task, task_id)
            if task is None:
                raise NotFoundError()

            for name, value in fields.items():
                setattr(task, name, value)
            task.updated_at = updated_at or utc_now()

        logger.debug("task_updated", extra={"task_id": task_id, "fields": sorted(fields)})

    def delete_by_id(self, task_id: int) -> bool:
        with self.database.session_scope() as db:
            removed = db.query(Task).filter(Task.id == task_id).delete(synchronize_session=False)
        return removed > 0

    def count_where(self, *criteria: ColumnElement) -> int:
        with self.database.session_scope() as db:
            q = db.query(func.count(Task.id))
            if criteria:
                q = q.filter(*criteria)
            return int(q.scalar() or 0)
