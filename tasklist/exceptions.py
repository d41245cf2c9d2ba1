"""Errors raised by the task list service.

Adapters translate infrastructure failures (Redis, SQLAlchemy) into these
types; the HTTP layer maps them to status codes in
``tasklist.core.exception_handlers``.
"""

from typing import Any


class TaskListError(Exception):
    """Base class for every error the service reports to callers.

    Attributes:
        message: Human-readable description.
        error_code: Machine-readable code, used to pick the HTTP status.
        details: Extra context (field name, task id, cache key).
    """

    def __init__(
        self,
        message: str,
        error_code: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        self.message = message
        self.error_code = error_code or self.__class__.__name__
        self.details = details or {}
        super().__init__(self.message)

    def to_dict(self) -> dict[str, Any]:
        return {
            "error": self.error_code,
            "message": self.message,
            "details": self.details,
        }


class InvalidInputError(TaskListError):
    """Raised before any side effect when caller input is unusable."""

    def __init__(self, message: str, field: str | None = None) -> None:
        details = {"field": field} if field else {}
        super().__init__(message, "VALIDATION_ERROR", details)


class TaskNotFoundError(TaskListError):
    """Raised when no task exists with the given identifier."""

    def __init__(self, task_id: int) -> None:
        super().__init__(
            f"Task with id {task_id} not found",
            "TASK_NOT_FOUND",
            {"task_id": task_id},
        )
        self.task_id = task_id


class BackingStoreError(TaskListError):
    """Raised when the relational store cannot complete a query or write."""

    def __init__(self, operation: str, message: str = "Backing store failure") -> None:
        super().__init__(message, "BACKING_STORE_ERROR", {"operation": operation})
        self.operation = operation


class CacheError(TaskListError):
    """Raised when the cache cannot complete a read, write or delete.

    The operation that hit it is aborted, even when the store write that
    preceded an eviction has already committed.
    """

    def __init__(
        self, operation: str, key: str, message: str = "Cache failure"
    ) -> None:
        super().__init__(
            message, "CACHE_ERROR", {"operation": operation, "key": key}
        )
        self.operation = operation
        self.key = key
