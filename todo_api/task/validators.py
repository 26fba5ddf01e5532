# todo_api/task/validators.py

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Mapping

from todo_api.errors import InvalidFieldError
from todo_api.models.task import PRIORITY_LEVELS
from todo_api.utils.date_helpers import parse_due_date

TITLE_MAX_LENGTH = 200
DESCRIPTION_MAX_LENGTH = 1000


@dataclass(frozen=True)
class ValidationResult:
    valid: bool
    errors: list[str] = field(default_factory=list)


def validate_title(value: Any) -> None:
    if not value or not isinstance(value, str):
        raise InvalidFieldError("title", "Title is required and must be a string")

    trimmed = value.strip()
    if len(trimmed) == 0:
        raise InvalidFieldError("title", "Title cannot be empty")
    if len(trimmed) > TITLE_MAX_LENGTH:
        raise InvalidFieldError("title", f"Title must be {TITLE_MAX_LENGTH} characters or less")


def validate_description(value: Any) -> None:
    if value is None:
        return
    if not isinstance(value, str):
        raise InvalidFieldError("description", "Description must be a string")
    if len(value) > DESCRIPTION_MAX_LENGTH:
        raise InvalidFieldError(
            "description", f"Description must be {DESCRIPTION_MAX_LENGTH} characters or less"
        )


def validate_due_date(value: Any) -> None:
    if value is None:
        return
    if not isinstance(value, str):
        raise InvalidFieldError("due_date", "Due date must be a string")
    if parse_due_date(value) is None:
        raise InvalidFieldError("due_date", "Invalid date format. Use ISO 8601 format.")


def validate_priority(value: Any) -> None:
    if value is None:
        return
    if not isinstance(value, str):
        raise InvalidFieldError("priority", "Priority must be a string")
    if value not in PRIORITY_LEVELS:
        raise InvalidFieldError("priority", f"Priority must be one of: {', '.join(PRIORITY_LEVELS)}")


def validate_completed(value: Any) -> None:
    if value is None:
        return
    if not isinstance(value, bool):
        raise InvalidFieldError("completed", "Completed must be a boolean")


# title, description, due_date, priority, completed: the order messages come back in
_FIELD_CHECKS = (
    ("title", validate_title),
    ("description", validate_description),
    ("due_date", validate_due_date),
    ("priority", validate_priority),
    ("completed", validate_completed),
)


def validate_task_data(candidate: Mapping[str, Any]) -> ValidationResult:
    """Run every field check and collect all failures, not just the first."""
    errors: list[str] = []
    for name, check in _FIELD_CHECKS:
        try:
            check(candidate.get(name))
        except InvalidFieldError as exc:
            errors.append(exc.message)
    return ValidationResult(valid=not errors, errors=errors)
