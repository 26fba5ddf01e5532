# todo_api/schemas/task_schema.py

from __future__ import annotations

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, StrictBool, field_serializer

from todo_api.utils.date_helpers import format_timestamp


# --------- Request bodies ----------
# Every field is optional here: required-ness, lengths and the priority enum
# are checked by todo_api.task.validators so clients get those messages.
class TaskCreate(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    title: Optional[str] = None
    description: Optional[str] = None
    # no "yes"/1 -> True coercion
    completed: Optional[StrictBool] = None
    priority: Optional[str] = None
    due_date: Optional[str] = Field(default=None, alias="dueDate")


class TaskUpdate(TaskCreate):
    pass


# --------- Responses ----------
class TaskRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    title: str
    description: Optional[str] = None
    completed: bool
    priority: str
    due_date: Optional[str] = Field(default=None, serialization_alias="dueDate")
    created_at: datetime = Field(serialization_alias="createdAt")
    updated_at: datetime = Field(serialization_alias="updatedAt")

    @field_serializer("created_at", "updated_at")
    def _utc(self, value: datetime) -> str:
        return format_timestamp(value)


class TaskStatsRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    total: int
    completed: int
    incomplete: int
    overdue: int
