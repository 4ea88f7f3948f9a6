"""Repository backend selection.

``create_repositories`` is called once at application startup with the
resolved settings; the returned repositories are injected into the services.
"""
from typing import NamedTuple, Optional
import redis

from travel_booking.core.config import REPOSITORY_INMEMORY, REPOSITORY_REDIS, Settings
from travel_booking.core.logging import get_logger
from travel_booking.domain.repositories import BookingRepository, EmployeeRepository
from travel_booking.infrastructure.memory import InMemoryBookingRepository, InMemoryEmployeeRepository
from travel_booking.infrastructure.redis import (
    RedisBookingRepository,
    RedisEmployeeRepository,
    create_redis_client,
)

logger = get_logger(__name__)


class Repositories(NamedTuple):
    """The pair of repositories a running service uses."""
    employees: EmployeeRepository
    bookings: BookingRepository
    backend: str
    redis_client: Optional[redis.Redis] = None


def resolve_repository_type(settings: Settings) -> str:
    """Normalize REPOSITORY_TYPE; unknown values fall back to Redis."""
    repository_type = (settings.repository_type or "").strip().upper()
    if repository_type in (REPOSITORY_INMEMORY, REPOSITORY_REDIS):
        return repository_type

    logger.warning(f"Unknown repository type '{settings.repository_type}', defaulting to {REPOSITORY_REDIS}")
    return REPOSITORY_REDIS


def create_repositories(settings: Settings, redis_client=None) -> Repositories:
    """Build the employee and booking repositories for the configured backend.

    Args:
        settings: Resolved application settings
        redis_client: Optional pre-built client (tests, shared pools)

    Returns:
        Repositories tuple
    """
    repository_type = resolve_repository_type(settings)
    logger.info(f"Creating repositories of type: {repository_type}")

    if repository_type == REPOSITORY_INMEMORY:
        return Repositories(
            employees=InMemoryEmployeeRepository(),
            bookings=InMemoryBookingRepository(),
            backend=REPOSITORY_INMEMORY,
        )

    client = redis_client if redis_client is not None else create_redis_client(settings)
    return Repositories(
        employees=RedisEmployeeRepository(client, key_prefix=settings.employees_key_prefix),
        bookings=RedisBookingRepository(client, key_prefix=settings.bookings_key_prefix),
        backend=REPOSITORY_REDIS,
        redis_client=client,
    )
