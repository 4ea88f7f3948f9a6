"""Repository contracts for employees and bookings.

Both backends (in-memory and Redis) implement these interfaces. Absence is a
normal return value (``None`` / ``False`` / empty list); store failures raise
``EmployeePersistenceError`` or ``BookingPersistenceError``.

``save`` is idempotent on the primary key. On the first save of a record
(``created_at`` unset) the repository assigns the default status and
``created_at``; every write bumps ``updated_at``. Returned entities are
copies, so callers cannot mutate stored state through them.
"""
from abc import ABC, abstractmethod
from datetime import datetime, timezone
from typing import List, Optional

from travel_booking.domain.booking import Booking
from travel_booking.domain.employee import Employee


def utc_timestamp() -> str:
    """ISO-8601 UTC timestamp used for createdAt/updatedAt."""
    return datetime.now(timezone.utc).isoformat().replace("+00:00", "Z")


class EmployeeRepository(ABC):
    """Persistence contract for employees keyed by ``employee_id``."""

    @abstractmethod
    def save(self, employee: Employee) -> Employee:
        """Insert or replace an employee and return the stored copy."""

    @abstractmethod
    def find_by_id(self, employee_id: str) -> Optional[Employee]:
        """Return the employee or None."""

    @abstractmethod
    def find_by_email(self, email: str) -> List[Employee]:
        """Exact-match lookup on email."""

    @abstractmethod
    def find_by_department(self, department: str) -> List[Employee]:
        """Exact-match lookup on department."""

    @abstractmethod
    def find_all(self) -> List[Employee]:
        """Every stored employee."""

    @abstractmethod
    def delete_by_id(self, employee_id: str) -> bool:
        """Hard delete; False when the employee did not exist."""

    @abstractmethod
    def update_status(self, employee_id: str, status: str) -> Optional[Employee]:
        """Set the status and bump updated_at; None when absent."""

    @abstractmethod
    def exists_by_id(self, employee_id: str) -> bool:
        ...

    @abstractmethod
    def count(self) -> int:
        ...


class BookingRepository(ABC):
    """Persistence contract for bookings keyed by ``booking_reference_id``."""

    @abstractmethod
    def save(self, booking: Booking) -> Booking:
        """Insert or replace a booking and return the stored copy."""

    @abstractmethod
    def find_by_reference_id(self, booking_reference_id: str) -> Optional[Booking]:
        """Return the booking or None."""

    @abstractmethod
    def find_by_employee_id(self, employee_id: str) -> List[Booking]:
        """Secondary lookup on the booking's employee id."""

    @abstractmethod
    def find_all(self) -> List[Booking]:
        """Every stored booking. A full scan on key-value backends."""

    @abstractmethod
    def delete_by_reference_id(self, booking_reference_id: str) -> bool:
        """Hard delete; False when the booking did not exist."""

    @abstractmethod
    def update_status(self, booking_reference_id: str, status: str) -> Optional[Booking]:
        """Set the status and bump updated_at; None when absent."""

    @abstractmethod
    def exists_by_reference_id(self, booking_reference_id: str) -> bool:
        ...

    @abstractmethod
    def count_by_employee_id(self, employee_id: str) -> int:
        ...
