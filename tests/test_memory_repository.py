"""Tests for the in-memory repositories."""
from concurrent.futures import ThreadPoolExecutor

import pytest

from travel_booking.domain.booking import Booking
from travel_booking.domain.employee import Employee


def make_employee(employee_id="EMP1", email="one@example.com", department="Engineering"):
    return Employee(
        employee_id=employee_id,
        name="Test Person",
        email=email,
        department=department,
        cost_center_ref="CC-1",
    )


def make_booking(ref="BKG-1", employee_id="EMP1"):
    return Booking(
        booking_reference_id=ref,
        employee_id=employee_id,
        resource_type="Hotel",
        destination="Berlin",
        departure_date="2024-11-05 08:00:00",
        return_date="2024-11-08 18:00:00",
        traveler_count=2,
        cost_center_ref="CC-1",
        trip_purpose="Conference",
    )


class TestInMemoryEmployeeRepository:
    """Test the dict-backed employee store."""

    def test_first_save_sets_defaults(self, employee_repository):
        saved = employee_repository.save(make_employee())

        assert saved.status == "ACTIVE"
        assert saved.created_at is not None
        assert saved.created_at.endswith("Z")
        assert saved.updated_at == saved.created_at

    def test_resave_keeps_created_at(self, employee_repository):
        saved = employee_repository.save(make_employee())
        again = employee_repository.save(saved.model_copy(update={"name": "Renamed"}))

        assert again.created_at == saved.created_at
        assert employee_repository.find_by_id("EMP1").name == "Renamed"
        assert employee_repository.count() == 1

    def test_returned_copies_are_detached(self, employee_repository):
        employee_repository.save(make_employee())
        found = employee_repository.find_by_id("EMP1")
        found.name = "Mutated"

        assert employee_repository.find_by_id("EMP1").name == "Test Person"

    @pytest.mark.parametrize("employee_id", ["", "   "])
    def test_blank_id_rejected(self, employee_repository, employee_id):
        with pytest.raises(ValueError):
            employee_repository.save(make_employee(employee_id=employee_id))

    def test_none_rejected(self, employee_repository):
        with pytest.raises(ValueError):
            employee_repository.save(None)

    def test_find_by_email_and_department(self, employee_repository):
        employee_repository.save(make_employee("EMP1", "one@example.com", "Engineering"))
        employee_repository.save(make_employee("EMP2", "two@example.com", "Engineering"))
        employee_repository.save(make_employee("EMP3", "one@example.com", "Sales"))

        assert {e.employee_id for e in employee_repository.find_by_email("one@example.com")} == {"EMP1", "EMP3"}
        assert {e.employee_id for e in employee_repository.find_by_department("Engineering")} == {"EMP1", "EMP2"}
        assert employee_repository.find_by_email("ONE@example.com") == []

    def test_update_status_and_delete(self, employee_repository):
        employee_repository.save(make_employee())

        updated = employee_repository.update_status("EMP1", "SUSPENDED")
        assert updated.status == "SUSPENDED"
        assert employee_repository.update_status("EMP404", "SUSPENDED") is None

        assert employee_repository.delete_by_id("EMP1") is True
        assert employee_repository.delete_by_id("EMP1") is False
        assert employee_repository.exists_by_id("EMP1") is False

    def test_clear(self, employee_repository):
        employee_repository.save(make_employee())
        employee_repository.clear()
        assert employee_repository.find_all() == []

    def test_concurrent_writers(self, employee_repository):
        """Parallel saves of distinct ids all land."""
        ids = [f"EMP{i:04d}" for i in range(200)]

        with ThreadPoolExecutor(max_workers=8) as pool:
            list(pool.map(lambda i: employee_repository.save(make_employee(i, f"{i}@example.com")), ids))

        assert employee_repository.count() == len(ids)
        assert {e.employee_id for e in employee_repository.find_all()} == set(ids)


class TestInMemoryBookingRepository:
    """Test the dict-backed booking store."""

    def test_first_save_is_pending(self, booking_repository):
        saved = booking_repository.save(make_booking())

        assert saved.status == "PENDING"
        assert saved.created_at is not None

    def test_find_by_employee_and_count(self, booking_repository):
        booking_repository.save(make_booking("BKG-1", "EMP1"))
        booking_repository.save(make_booking("BKG-2", "EMP1"))
        booking_repository.save(make_booking("BKG-3", "EMP2"))

        assert {b.booking_reference_id for b in booking_repository.find_by_employee_id("EMP1")} == {"BKG-1", "BKG-2"}
        assert booking_repository.count_by_employee_id("EMP1") == 2
        assert booking_repository.count_by_employee_id("EMP404") == 0
        assert len(booking_repository.find_all()) == 3

    def test_update_status_bumps_updated_at(self, booking_repository):
        saved = booking_repository.save(make_booking())
        updated = booking_repository.update_status("BKG-1", "CONFIRMED")

        assert updated.status == "CONFIRMED"
        assert updated.created_at == saved.created_at
        assert updated.updated_at >= saved.updated_at
        assert booking_repository.update_status("BKG-404", "CONFIRMED") is None

    def test_delete(self, booking_repository):
        booking_repository.save(make_booking())

        assert booking_repository.exists_by_reference_id("BKG-1") is True
        assert booking_repository.delete_by_reference_id("BKG-1") is True
        assert booking_repository.find_by_reference_id("BKG-1") is None

    def test_blank_reference_rejected(self, booking_repository):
        with pytest.raises(ValueError):
            booking_repository.save(make_booking(ref=" "))

    def test_concurrent_status_updates(self, booking_repository):
        booking_repository.save(make_booking())
        statuses = ["CONFIRMED", "PENDING"] * 50

        with ThreadPoolExecutor(max_workers=8) as pool:
            results = list(pool.map(lambda s: booking_repository.update_status("BKG-1", s), statuses))

        assert all(r is not None for r in results)
        assert booking_repository.find_by_reference_id("BKG-1").status in {"CONFIRMED", "PENDING"}
