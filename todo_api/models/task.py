# todo_api/models/task.py

from __future__ import annotations

from sqlalchemy import Boolean, CheckConstraint, Column, DateTime, Index, Integer, String

from todo_api.database import Base

PRIORITY_LEVELS = ("high", "medium", "low", "none")


class Task(Base):
    __tablename__ = "tasks"

    # storage-level backstop, independent of todo_api.task.validators
    __table_args__ = (
        CheckConstraint(
            "length(trim(title)) >= 1 AND length(title) <= 200",
            name="ck_tasks_title_length",
        ),
        CheckConstraint(
            "description IS NULL OR length(description) <= 1000",
            name="ck_tasks_description_length",
        ),
        CheckConstraint("completed IN (0, 1)", name="ck_tasks_completed_bool"),
        CheckConstraint(
            "priority IN (%s)" % ", ".join(f"'{p}'" for p in PRIORITY_LEVELS),
            name="ck_tasks_priority_enum",
        ),
        CheckConstraint('"updatedAt" >= "createdAt"', name="ck_tasks_updated_after_created"),
    )

    id = Column(Integer, primary_key=True, autoincrement=True)
    title = Column(String(200), nullable=False)
    description = Column(String(1000), nullable=True)

    completed = Column(Boolean, nullable=False, default=False)
    priority = Column(String, nullable=False, default="none")

    # ISO date string, kept as text exactly as the client sent it
    due_date = Column("dueDate", String, nullable=True)

    created_at = Column("createdAt", DateTime, nullable=False)
    updated_at = Column("updatedAt", DateTime, nullable=False)

    def __repr__(self) -> str:
        return f"<Task id={self.id} title={self.title!r} completed={self.completed}>"


Index("idx_tasks_completed", Task.completed)
Index("idx_tasks_priority", Task.priority)
Index("idx_tasks_dueDate", Task.due_date)
Index("idx_tasks_createdAt", Task.created_at)
