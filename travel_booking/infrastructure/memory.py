"""In-memory repositories for tests and local development.

Records live in plain dicts guarded by a re-entrant lock, so concurrent
requests handled by a threaded server see consistent state. Data does not
survive a restart; use the Redis repositories for persistence.
"""
import threading
from typing import Dict, List, Optional

from travel_booking.core.exceptions import BookingPersistenceError, EmployeePersistenceError
from travel_booking.core.logging import get_logger
from travel_booking.domain.booking import Booking, BookingStatus
from travel_booking.domain.employee import Employee, EmployeeStatus
from travel_booking.domain.repositories import BookingRepository, EmployeeRepository, utc_timestamp

logger = get_logger(__name__)


class InMemoryEmployeeRepository(EmployeeRepository):
    """Thread-safe dict-backed employee store."""

    def __init__(self):
        self._store: Dict[str, Employee] = {}
        self._lock = threading.RLock()
        logger.info("Initialized in-memory employee repository")

    def save(self, employee: Employee) -> Employee:
        if employee is None:
            raise ValueError("Employee cannot be None")
        if not employee.employee_id or not employee.employee_id.strip():
            raise ValueError("Employee ID cannot be blank")

        try:
            now = utc_timestamp()
            updates = {"updated_at": now}
            if employee.created_at is None:
                updates["created_at"] = now
                updates["status"] = EmployeeStatus.ACTIVE.value

            stored = employee.model_copy(update=updates)
            with self._lock:
                self._store[stored.employee_id] = stored

            logger.debug(f"Saved employee: {stored.employee_id}")
            return stored.model_copy()

        except Exception as e:
            logger.error(f"Failed to save employee {employee.employee_id}: {e}", exc_info=True)
            raise EmployeePersistenceError(
                f"Failed to save employee: {e}", {"employee_id": employee.employee_id}
            ) from e

    def find_by_id(self, employee_id: str) -> Optional[Employee]:
        with self._lock:
            employee = self._store.get(employee_id)
        if employee is None:
            logger.debug(f"Employee not found: {employee_id}")
            return None
        return employee.model_copy()

    def find_by_email(self, email: str) -> List[Employee]:
        with self._lock:
            return [e.model_copy() for e in self._store.values() if e.email == email]

    def find_by_department(self, department: str) -> List[Employee]:
        with self._lock:
            return [e.model_copy() for e in self._store.values() if e.department == department]

    def find_all(self) -> List[Employee]:
        with self._lock:
            employees = [e.model_copy() for e in self._store.values()]
        logger.debug(f"Found {len(employees)} total employees")
        return employees

    def delete_by_id(self, employee_id: str) -> bool:
        with self._lock:
            removed = self._store.pop(employee_id, None)
        return removed is not None

    def update_status(self, employee_id: str, status: str) -> Optional[Employee]:
        with self._lock:
            current = self._store.get(employee_id)
            if current is None:
                return None
            updated = current.model_copy(update={"status": status, "updated_at": utc_timestamp()})
            self._store[employee_id] = updated
        return updated.model_copy()

    def exists_by_id(self, employee_id: str) -> bool:
        with self._lock:
            return employee_id in self._store

    def count(self) -> int:
        with self._lock:
            return len(self._store)

    def clear(self) -> None:
        """Drop every stored employee (test helper)."""
        with self._lock:
            self._store.clear()


class InMemoryBookingRepository(BookingRepository):
    """Thread-safe dict-backed booking store."""

    def __init__(self):
        self._store: Dict[str, Booking] = {}
        self._lock = threading.RLock()
        logger.info("Initialized in-memory booking repository")

    def save(self, booking: Booking) -> Booking:
        if booking is None:
            raise ValueError("Booking cannot be None")
        if not booking.booking_reference_id or not booking.booking_reference_id.strip():
            raise ValueError("Booking reference ID cannot be blank")

        try:
            now = utc_timestamp()
            updates = {"updated_at": now}
            if booking.created_at is None:
                updates["created_at"] = now
                updates["status"] = BookingStatus.PENDING.value

            stored = booking.model_copy(update=updates)
            with self._lock:
                self._store[stored.booking_reference_id] = stored

            logger.debug(f"Saved booking: {stored.booking_reference_id}")
            return stored.model_copy()

        except Exception as e:
            logger.error(f"Failed to save booking {booking.booking_reference_id}: {e}", exc_info=True)
            raise BookingPersistenceError(
                f"Failed to save booking: {e}", {"booking_reference_id": booking.booking_reference_id}
            ) from e

    def find_by_reference_id(self, booking_reference_id: str) -> Optional[Booking]:
        with self._lock:
            booking = self._store.get(booking_reference_id)
        return booking.model_copy() if booking is not None else None

    def find_by_employee_id(self, employee_id: str) -> List[Booking]:
        with self._lock:
            return [b.model_copy() for b in self._store.values() if b.employee_id == employee_id]

    def find_all(self) -> List[Booking]:
        with self._lock:
            return [b.model_copy() for b in self._store.values()]

    def delete_by_reference_id(self, booking_reference_id: str) -> bool:
        with self._lock:
            return self._store.pop(booking_reference_id, None) is not None

    def update_status(self, booking_reference_id: str, status: str) -> Optional[Booking]:
        with self._lock:
            current = self._store.get(booking_reference_id)
            if current is None:
                return None
            updated = current.model_copy(update={"status": status, "updated_at": utc_timestamp()})
            self._store[booking_reference_id] = updated
        return updated.model_copy()

    def exists_by_reference_id(self, booking_reference_id: str) -> bool:
        with self._lock:
            return booking_reference_id in self._store

    def count_by_employee_id(self, employee_id: str) -> int:
        with self._lock:
            return sum(1 for b in self._store.values() if b.employee_id == employee_id)

    def clear(self) -> None:
        """Drop every stored booking (test helper)."""
        with self._lock:
            self._store.clear()
