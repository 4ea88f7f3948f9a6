"""Integration tests for API routes."""
import pytest
from fastapi import status
from unittest.mock import Mock

from travel_booking.core.exceptions import BookingPersistenceError
from travel_booking.domain.repositories import BookingRepository
from travel_booking.services.booking import BookingService


@pytest.fixture
def booking_ref(test_client, booking_payload):
    """Reference ID of a freshly created PENDING booking."""
    response = test_client.post("/bookings", json=booking_payload)
    assert response.status_code == status.HTTP_201_CREATED
    return response.json()["bookingReferenceId"]


@pytest.fixture
def registered_client(test_client, employee_payload):
    response = test_client.post("/employees", json=employee_payload)
    assert response.status_code == status.HTTP_201_CREATED
    return test_client


class TestEmployeeRoutes:
    """Test employee endpoints."""

    def test_register_employee(self, test_client, employee_payload):
        response = test_client.post("/employees", json=employee_payload)

        assert response.status_code == status.HTTP_201_CREATED
        data = response.json()
        assert data["status"] == "SUCCESS"
        assert data["employeeId"] == "EMP9876"
        assert data["employeeStatus"] == "ACTIVE"
        assert "X-Request-ID" in response.headers

    def test_register_duplicate(self, registered_client, employee_payload):
        response = registered_client.post("/employees", json=employee_payload)

        assert response.status_code == status.HTTP_409_CONFLICT
        assert response.json()["status"] == "CONFLICT"

    def test_register_invalid_email(self, test_client, employee_payload):
        employee_payload["email"] = "nope"
        response = test_client.post("/employees", json=employee_payload)

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert response.json() == {
            "status": "VALIDATION_ERROR",
            "message": "Invalid email format",
            "employeeId": "EMP9876",
        }

    def test_register_missing_field(self, test_client, employee_payload):
        del employee_payload["name"]
        response = test_client.post("/employees", json=employee_payload)

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert response.json()["message"] == "Employee name is required"

    def test_get_employee(self, registered_client):
        response = registered_client.get("/employees/EMP9876")

        assert response.status_code == status.HTTP_200_OK
        assert response.json()["message"] == "Employee found: Ana Pop"

    def test_get_unknown_employee(self, test_client):
        response = test_client.get("/employees/EMP404")
        assert response.status_code == status.HTTP_404_NOT_FOUND

    def test_search_by_email(self, registered_client):
        response = registered_client.get("/employees", params={"email": "ana.pop@example.com"})

        assert response.status_code == status.HTTP_200_OK
        assert [e["employeeId"] for e in response.json()] == ["EMP9876"]

    def test_search_by_department(self, registered_client):
        response = registered_client.get("/employees", params={"department": "Finance"})

        assert response.status_code == status.HTTP_200_OK
        assert response.json() == []

    def test_list_all(self, registered_client):
        response = registered_client.get("/employees")
        assert len(response.json()) == 1

    def test_update_status(self, registered_client):
        response = registered_client.patch("/employees/EMP9876/status", json={"status": "suspended"})

        assert response.status_code == status.HTTP_200_OK
        assert response.json()["employeeStatus"] == "SUSPENDED"

    def test_update_status_missing_body_field(self, registered_client):
        response = registered_client.patch("/employees/EMP9876/status", json={})

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert response.json()["message"] == "Status field is required in body"

    def test_update_status_invalid(self, registered_client):
        response = registered_client.patch("/employees/EMP9876/status", json={"status": "DELETED"})
        assert response.status_code == status.HTTP_400_BAD_REQUEST

    def test_delete_employee(self, registered_client):
        response = registered_client.delete("/employees/EMP9876")
        assert response.status_code == status.HTTP_200_OK

        response = registered_client.delete("/employees/EMP9876")
        assert response.status_code == status.HTTP_404_NOT_FOUND

    def test_employee_bookings(self, test_client, booking_ref):
        response = test_client.get("/employees/EMP9876/bookings")

        assert response.status_code == status.HTTP_200_OK
        data = response.json()
        assert data["employeeId"] == "EMP9876"
        assert data["count"] == 1
        assert data["bookings"][0]["bookingReferenceId"] == booking_ref


class TestBookingRoutes:
    """Test booking endpoints."""

    def test_create_booking(self, test_client, booking_payload):
        response = test_client.post("/bookings", json=booking_payload)

        assert response.status_code == status.HTTP_201_CREATED
        data = response.json()
        assert data["status"] == "SUCCESS"
        assert data["bookingReferenceId"].startswith("BKG-")
        assert data["bookingStatus"] == "PENDING"

    def test_create_booking_same_dates(self, test_client, booking_payload):
        booking_payload["returnDate"] = booking_payload["departureDate"]
        response = test_client.post("/bookings", json=booking_payload)

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert response.json()["status"] == "VALIDATION_ERROR"
        assert "bookingReferenceId" not in response.json()

    def test_malformed_body(self, test_client, booking_payload):
        booking_payload["travelerCount"] = "several"
        response = test_client.post("/bookings", json=booking_payload)

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        data = response.json()
        assert data["status"] == "INVALID_REQUEST"
        assert data["message"].startswith("Invalid request format")

    def test_unparseable_json(self, test_client):
        response = test_client.post(
            "/bookings", content="{not json", headers={"Content-Type": "application/json"}
        )

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert response.json()["status"] == "INVALID_REQUEST"

    def test_get_booking(self, test_client, booking_ref):
        response = test_client.get(f"/bookings/{booking_ref}")

        assert response.status_code == status.HTTP_200_OK
        assert response.json()["message"] == "Flight to NYC [PENDING]"

    def test_get_unknown_booking(self, test_client):
        response = test_client.get("/bookings/BKG-missing")

        assert response.status_code == status.HTTP_404_NOT_FOUND
        assert response.json()["message"] == "Booking not found: BKG-missing"

    def test_search_by_employee(self, test_client, booking_ref):
        response = test_client.get("/bookings", params={"employeeId": "EMP9876"})

        assert response.status_code == status.HTTP_200_OK
        assert [b["bookingReferenceId"] for b in response.json()] == [booking_ref]

    def test_search_blank_employee(self, test_client):
        response = test_client.get("/bookings", params={"employeeId": ""})

        assert response.status_code == status.HTTP_200_OK
        assert response.json()[0]["status"] == "VALIDATION_ERROR"

    def test_list_all_bookings(self, test_client, booking_ref):
        response = test_client.get("/bookings")
        assert len(response.json()) == 1

    def test_status_flow(self, test_client, booking_ref):
        response = test_client.patch(f"/bookings/{booking_ref}/status", json={"status": "CONFIRMED"})
        assert response.status_code == status.HTTP_200_OK
        assert response.json()["bookingStatus"] == "CONFIRMED"

        response = test_client.patch(f"/bookings/{booking_ref}/status", json={"status": "COMPLETED"})
        assert response.status_code == status.HTTP_200_OK

        response = test_client.patch(f"/bookings/{booking_ref}/status", json={"status": "PENDING"})
        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert response.json()["message"] == "Cannot update booking in COMPLETED state"

    def test_cancel(self, test_client, booking_ref):
        response = test_client.post(f"/bookings/{booking_ref}/cancel")

        assert response.status_code == status.HTTP_200_OK
        assert response.json()["bookingStatus"] == "CANCELLED"

        response = test_client.post(f"/bookings/{booking_ref}/cancel")
        assert response.status_code == status.HTTP_400_BAD_REQUEST

    def test_status_missing(self, test_client, booking_ref):
        response = test_client.patch(f"/bookings/{booking_ref}/status", json={"status": " "})
        assert response.status_code == status.HTTP_400_BAD_REQUEST

    def test_persistence_failure_is_500(self, test_client, booking_payload):
        repository = Mock(spec=BookingRepository)
        repository.save.side_effect = BookingPersistenceError("connection reset")
        test_client.app.state.booking_service = BookingService(repository)

        response = test_client.post("/bookings", json=booking_payload)

        assert response.status_code == status.HTTP_500_INTERNAL_SERVER_ERROR
        assert response.json() == {
            "status": "SYSTEM_ERROR",
            "message": "Failed to save booking. Please try again later.",
        }


class TestHealthRoutes:
    """Test service endpoints."""

    def test_root(self, test_client):
        response = test_client.get("/")

        assert response.status_code == status.HTTP_200_OK
        assert response.json()["status"] == "running"

    def test_health(self, test_client):
        response = test_client.get("/health")

        assert response.status_code == status.HTTP_200_OK
        assert response.json()["checks"]["repository"] == "INMEMORY"

    def test_debug_setting_applied(self):
        from main import create_app
        from travel_booking.core.config import Settings

        app = create_app(Settings(repository_type="INMEMORY", debug=True, log_json=False))
        assert app.debug is True

    def test_ready_inmemory(self, test_client):
        response = test_client.get("/ready")
        assert response.status_code == status.HTTP_200_OK

    def test_ready_redis_unreachable(self, mock_redis):
        from fastapi.testclient import TestClient
        from main import create_app
        from travel_booking.core.config import Settings
        import redis

        mock_redis.ping.side_effect = redis.ConnectionError("refused")
        app = create_app(Settings(repository_type="REDIS", log_json=False), redis_client=mock_redis)

        response = TestClient(app).get("/ready")

        assert response.status_code == status.HTTP_503_SERVICE_UNAVAILABLE
        assert response.json()["checks"]["redis"] == "unreachable"
