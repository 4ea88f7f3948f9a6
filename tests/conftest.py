"""Pytest configuration and shared fixtures."""
import os

import pytest
from unittest.mock import Mock
from fastapi.testclient import TestClient

os.environ.setdefault("ENVIRONMENT", "test")
os.environ.setdefault("REPOSITORY_TYPE", "INMEMORY")

from travel_booking.core.config import Settings
from travel_booking.domain.booking import BookingRequest
from travel_booking.domain.employee import EmployeeRequest
from travel_booking.infrastructure.memory import InMemoryBookingRepository, InMemoryEmployeeRepository
from travel_booking.services.booking import BookingService
from travel_booking.services.employee import EmployeeService


@pytest.fixture
def employee_repository():
    """Fresh in-memory employee store."""
    return InMemoryEmployeeRepository()


@pytest.fixture
def booking_repository():
    """Fresh in-memory booking store."""
    return InMemoryBookingRepository()


@pytest.fixture
def employee_service(employee_repository):
    return EmployeeService(employee_repository)


@pytest.fixture
def booking_service(booking_repository):
    return BookingService(booking_repository)


@pytest.fixture
def booking_payload():
    """Valid booking request body (wire names)."""
    return {
        "employeeId": "EMP9876",
        "resourceType": "Flight",
        "destination": "NYC",
        "departureDate": "2024-11-05 08:00:00",
        "returnDate": "2024-11-08 18:00:00",
        "travelerCount": 1,
        "costCenterRef": "CC-456",
        "tripPurpose": "Client meeting",
    }


@pytest.fixture
def employee_payload():
    """Valid employee registration body (wire names)."""
    return {
        "employeeId": "EMP9876",
        "name": "Ana Pop",
        "email": "ana.pop@example.com",
        "department": "Engineering",
        "costCenterRef": "CC-456",
    }


@pytest.fixture
def valid_booking_request(booking_payload):
    return BookingRequest(**booking_payload)


@pytest.fixture
def valid_employee_request(employee_payload):
    return EmployeeRequest(**employee_payload)


@pytest.fixture
def test_settings():
    """In-memory settings independent of the environment."""
    return Settings(environment="test", repository_type="INMEMORY", log_level="WARNING", log_json=False)


@pytest.fixture
def test_client(test_settings):
    """FastAPI test client on a fresh in-memory application."""
    from main import create_app
    return TestClient(create_app(test_settings))


@pytest.fixture
def mock_redis():
    """Dict-backed Mock standing in for a redis.Redis client.

    Supports the commands the Redis repositories issue. ``pipeline()``
    returns the client itself, so queued commands apply immediately and
    ``execute()`` is a no-op.
    """
    values = {}
    sets = {}
    client = Mock()

    def _set(key, value):
        values[key] = value
        return True

    def _delete(*keys):
        removed = 0
        for key in keys:
            removed += int(values.pop(key, None) is not None)
            removed += int(sets.pop(key, None) is not None)
        return removed

    def _sadd(key, *members):
        bucket = sets.setdefault(key, set())
        before = len(bucket)
        bucket.update(members)
        return len(bucket) - before

    def _srem(key, *members):
        bucket = sets.get(key, set())
        removed = len(bucket & set(members))
        bucket.difference_update(members)
        if not bucket:
            sets.pop(key, None)
        return removed

    client.get.side_effect = lambda key: values.get(key)
    client.set.side_effect = _set
    client.mget.side_effect = lambda keys: [values.get(key) for key in keys]
    client.delete.side_effect = _delete
    client.exists.side_effect = lambda *keys: sum(1 for key in keys if key in values or key in sets)
    client.sadd.side_effect = _sadd
    client.srem.side_effect = _srem
    client.smembers.side_effect = lambda key: set(sets.get(key, set()))
    client.scard.side_effect = lambda key: len(sets.get(key, set()))
    client.ping.return_value = True
    client.pipeline.return_value = client
    client.execute.return_value = []
    client.values = values
    client.sets = sets
    return client
