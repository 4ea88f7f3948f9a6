"""Persistence exceptions raised by repository backends.

"Not found" is a normal ``None``/``False`` return from a repository; these
exceptions signal that the store itself failed (connection loss, corrupt
document, unexpected backend error). Services map them to SYSTEM_ERROR.
"""

from typing import Any


class PersistenceError(Exception):
    """Base exception for all repository failures."""

    def __init__(self, message: str = "A persistence error occurred", details: dict[str, Any] | None = None) -> None:
        self.message = message
        self.details = details or {}
        super().__init__(self.message)


class EmployeePersistenceError(PersistenceError):
    """Raised when the employee store cannot complete an operation."""

    pass


class BookingPersistenceError(PersistenceError):
    """Raised when the booking store cannot complete an operation."""

    pass
