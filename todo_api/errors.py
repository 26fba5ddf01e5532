# todo_api/errors.py

from __future__ import annotations


class TaskError(Exception):
    pass


class InvalidFieldError(TaskError):
    """Raised by the single-field validators."""

    def __init__(self, field: str, message: str):
        super().__init__(message)
        self.field = field
        self.message = message


class ValidationError(TaskError):
    """
    Bad input. Carries every violated constraint, never just the first one,
    so clients can show all messages at once.
    """

    def __init__(self, errors: list[str]):
        super().__init__(", ".join(errors))
        self.errors = list(errors)


class NotFoundError(TaskError):
    def __init__(self, message: str = "Task not found"):
        super().__init__(message)
        self.message = message


class StorageError(TaskError):
    """Engine-level failure. Details are logged, never returned to the client."""
