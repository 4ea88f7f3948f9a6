"""Redis-backed repositories for employees and bookings.

Each record is stored as one JSON document (camelCase wire names) under
``{prefix}employee:{id}`` or ``{prefix}booking:{ref}``. Secondary lookups use
Redis sets maintained in the same pipeline as the record write:

- ``{prefix}employees``, ``{prefix}employees:email:{email}``,
  ``{prefix}employees:department:{department}``
- ``{prefix}bookings``, ``{prefix}bookings:employee:{employee_id}``

Redis gives single-key atomicity and MULTI/EXEC pipelines; there are no
cross-record transactions, so the service-level check-then-act windows
remain open.
"""
from contextlib import contextmanager
from typing import Iterable, List, Optional, Type
import redis
from pydantic import ValidationError

from travel_booking.core.config import Settings
from travel_booking.core.exceptions import (
    BookingPersistenceError,
    EmployeePersistenceError,
    PersistenceError,
)
from travel_booking.core.logging import get_logger
from travel_booking.domain.booking import Booking, BookingStatus
from travel_booking.domain.employee import Employee, EmployeeStatus
from travel_booking.domain.repositories import BookingRepository, EmployeeRepository, utc_timestamp

logger = get_logger(__name__)


def create_redis_client(settings: Settings) -> redis.Redis:
    """Build a pooled Redis client from settings.

    No connection is opened here; the first command (or ``ping_redis``)
    connects. Call once at startup and share the client.
    """
    logger.info(f"Initializing Redis connection pool: {settings.redis_host}:{settings.redis_port}")

    pool = redis.ConnectionPool(
        host=settings.redis_host,
        port=settings.redis_port,
        db=settings.redis_db,
        password=settings.redis_password,
        decode_responses=True,
        max_connections=50,
        socket_connect_timeout=settings.redis_socket_timeout,
        socket_timeout=settings.redis_socket_timeout,
    )
    return redis.Redis(connection_pool=pool)


def ping_redis(client: redis.Redis) -> bool:
    """True when Redis answers PING."""
    try:
        return bool(client.ping())
    except redis.RedisError as e:
        logger.warning(f"Redis ping failed: {e}")
        return False


class _RedisRepository:
    """Shared key handling and error translation."""

    error_class: Type[PersistenceError] = PersistenceError

    def __init__(self, client: redis.Redis, key_prefix: str):
        self.redis = client
        self.key_prefix = key_prefix

    def _make_key(self, *parts: str) -> str:
        return self.key_prefix + ":".join(parts)

    @contextmanager
    def _translate_errors(self, action: str, **details):
        try:
            yield
        except PersistenceError:
            raise
        except redis.RedisError as e:
            logger.error(f"Redis error while trying to {action}: {e}", exc_info=True)
            raise self.error_class(f"Failed to {action}: {e}", details) from e

    def _decode(self, model: Type, raw: Optional[str], key: str):
        if raw is None:
            return None
        try:
            return model.model_validate_json(raw)
        except ValidationError as e:
            logger.error(f"Corrupt document at {key}: {e}")
            raise self.error_class(f"Corrupt document at {key}", {"key": key}) from e

    def _load_many(self, model: Type, ids: Iterable[str], key_for) -> list:
        keys = [key_for(record_id) for record_id in sorted(ids)]
        if not keys:
            return []
        records = []
        for key, raw in zip(keys, self.redis.mget(keys)):
            # Index entries can outlive a record deleted by another writer
            record = self._decode(model, raw, key)
            if record is not None:
                records.append(record)
        return records


class RedisEmployeeRepository(_RedisRepository, EmployeeRepository):
    """Employee store on Redis with email and department set indexes."""

    error_class = EmployeePersistenceError

    def __init__(self, client: redis.Redis, key_prefix: str = "corporate-employees:"):
        super().__init__(client, key_prefix)
        logger.info(f"Initialized Redis employee repository with prefix '{key_prefix}'")

    def _record_key(self, employee_id: str) -> str:
        return self._make_key("employee", employee_id)

    def _all_key(self) -> str:
        return self._make_key("employees")

    def _email_key(self, email: str) -> str:
        return self._make_key("employees", "email", email)

    def _department_key(self, department: str) -> str:
        return self._make_key("employees", "department", department)

    def _get(self, employee_id: str) -> Optional[Employee]:
        key = self._record_key(employee_id)
        return self._decode(Employee, self.redis.get(key), key)

    def save(self, employee: Employee) -> Employee:
        if employee is None:
            raise ValueError("Employee cannot be None")
        if not employee.employee_id or not employee.employee_id.strip():
            raise ValueError("Employee ID cannot be blank")

        with self._translate_errors("save employee", employee_id=employee.employee_id):
            now = utc_timestamp()
            updates = {"updated_at": now}
            if employee.created_at is None:
                updates["created_at"] = now
                updates["status"] = EmployeeStatus.ACTIVE.value
            stored = employee.model_copy(update=updates)

            previous = self._get(stored.employee_id)

            pipe = self.redis.pipeline()
            pipe.set(self._record_key(stored.employee_id), stored.model_dump_json(by_alias=True))
            pipe.sadd(self._all_key(), stored.employee_id)
            pipe.sadd(self._email_key(stored.email), stored.employee_id)
            pipe.sadd(self._department_key(stored.department), stored.employee_id)
            if previous is not None and previous.email != stored.email:
                pipe.srem(self._email_key(previous.email), stored.employee_id)
            if previous is not None and previous.department != stored.department:
                pipe.srem(self._department_key(previous.department), stored.employee_id)
            pipe.execute()

            logger.debug(f"Saved employee: {stored.employee_id}")
            return stored

    def find_by_id(self, employee_id: str) -> Optional[Employee]:
        with self._translate_errors("find employee", employee_id=employee_id):
            return self._get(employee_id)

    def find_by_email(self, email: str) -> List[Employee]:
        with self._translate_errors("query employees by email", email=email):
            ids = self.redis.smembers(self._email_key(email))
            return self._load_many(Employee, ids, self._record_key)

    def find_by_department(self, department: str) -> List[Employee]:
        with self._translate_errors("query employees by department", department=department):
            ids = self.redis.smembers(self._department_key(department))
            return self._load_many(Employee, ids, self._record_key)

    def find_all(self) -> List[Employee]:
        with self._translate_errors("retrieve employees"):
            ids = self.redis.smembers(self._all_key())
            return self._load_many(Employee, ids, self._record_key)

    def delete_by_id(self, employee_id: str) -> bool:
        with self._translate_errors("delete employee", employee_id=employee_id):
            existing = self._get(employee_id)
            if existing is None:
                return False

            pipe = self.redis.pipeline()
            pipe.delete(self._record_key(employee_id))
            pipe.srem(self._all_key(), employee_id)
            pipe.srem(self._email_key(existing.email), employee_id)
            pipe.srem(self._department_key(existing.department), employee_id)
            pipe.execute()
            return True

    def update_status(self, employee_id: str, status: str) -> Optional[Employee]:
        with self._translate_errors("update employee status", employee_id=employee_id):
            current = self._get(employee_id)
            if current is None:
                return None
            updated = current.model_copy(update={"status": status, "updated_at": utc_timestamp()})
            self.redis.set(self._record_key(employee_id), updated.model_dump_json(by_alias=True))
            return updated

    def exists_by_id(self, employee_id: str) -> bool:
        with self._translate_errors("check employee", employee_id=employee_id):
            return bool(self.redis.exists(self._record_key(employee_id)))

    def count(self) -> int:
        with self._translate_errors("count employees"):
            return int(self.redis.scard(self._all_key()))


class RedisBookingRepository(_RedisRepository, BookingRepository):
    """Booking store on Redis with an employee-id set index."""

    error_class = BookingPersistenceError

    def __init__(self, client: redis.Redis, key_prefix: str = "corporate-bookings:"):
        super().__init__(client, key_prefix)
        logger.info(f"Initialized Redis booking repository with prefix '{key_prefix}'")

    def _record_key(self, booking_reference_id: str) -> str:
        return self._make_key("booking", booking_reference_id)

    def _all_key(self) -> str:
        return self._make_key("bookings")

    def _employee_key(self, employee_id: str) -> str:
        return self._make_key("bookings", "employee", employee_id)

    def _get(self, booking_reference_id: str) -> Optional[Booking]:
        key = self._record_key(booking_reference_id)
        return self._decode(Booking, self.redis.get(key), key)

    def save(self, booking: Booking) -> Booking:
        if booking is None:
            raise ValueError("Booking cannot be None")
        if not booking.booking_reference_id or not booking.booking_reference_id.strip():
            raise ValueError("Booking reference ID cannot be blank")

        ref = booking.booking_reference_id
        with self._translate_errors("save booking", booking_reference_id=ref):
            now = utc_timestamp()
            updates = {"updated_at": now}
            if booking.created_at is None:
                updates["created_at"] = now
                updates["status"] = BookingStatus.PENDING.value
            stored = booking.model_copy(update=updates)

            previous = self._get(ref)

            pipe = self.redis.pipeline()
            pipe.set(self._record_key(ref), stored.model_dump_json(by_alias=True))
            pipe.sadd(self._all_key(), ref)
            pipe.sadd(self._employee_key(stored.employee_id), ref)
            if previous is not None and previous.employee_id != stored.employee_id:
                pipe.srem(self._employee_key(previous.employee_id), ref)
            pipe.execute()

            logger.debug(f"Saved booking: {ref}")
            return stored

    def find_by_reference_id(self, booking_reference_id: str) -> Optional[Booking]:
        with self._translate_errors("find booking", booking_reference_id=booking_reference_id):
            return self._get(booking_reference_id)

    def find_by_employee_id(self, employee_id: str) -> List[Booking]:
        with self._translate_errors("query bookings by employee", employee_id=employee_id):
            refs = self.redis.smembers(self._employee_key(employee_id))
            return self._load_many(Booking, refs, self._record_key)

    def find_all(self) -> List[Booking]:
        with self._translate_errors("retrieve bookings"):
            refs = self.redis.smembers(self._all_key())
            return self._load_many(Booking, refs, self._record_key)

    def delete_by_reference_id(self, booking_reference_id: str) -> bool:
        with self._translate_errors("delete booking", booking_reference_id=booking_reference_id):
            existing = self._get(booking_reference_id)
            if existing is None:
                return False

            pipe = self.redis.pipeline()
            pipe.delete(self._record_key(booking_reference_id))
            pipe.srem(self._all_key(), booking_reference_id)
            pipe.srem(self._employee_key(existing.employee_id), booking_reference_id)
            pipe.execute()
            return True

    def update_status(self, booking_reference_id: str, status: str) -> Optional[Booking]:
        with self._translate_errors("update booking status", booking_reference_id=booking_reference_id):
            current = self._get(booking_reference_id)
            if current is None:
                return None
            updated = current.model_copy(update={"status": status, "updated_at": utc_timestamp()})
            self.redis.set(self._record_key(booking_reference_id), updated.model_dump_json(by_alias=True))
            return updated

    def exists_by_reference_id(self, booking_reference_id: str) -> bool:
        with self._translate_errors("check booking", booking_reference_id=booking_reference_id):
            return bool(self.redis.exists(self._record_key(booking_reference_id)))

    def count_by_employee_id(self, employee_id: str) -> int:
        """Indexed bookings for the employee whose documents still exist."""
        with self._translate_errors("count bookings", employee_id=employee_id):
            refs = self.redis.smembers(self._employee_key(employee_id))
            return len(self._load_many(Booking, refs, self._record_key))
