"""FastAPI routes for employees and bookings.

Routes only parse requests, call the domain services and map outcome
statuses to HTTP codes. Services are built once by the application factory
and read from ``app.state``.
"""
from typing import Optional
from fastapi import APIRouter, Depends, Query, Request, status
from pydantic import BaseModel

from travel_booking.api.responses import (
    error_response,
    outcome_list_response,
    outcome_response,
)
from travel_booking.core.exceptions import PersistenceError
from travel_booking.core.logging import LogTimer, get_logger
from travel_booking.domain.booking import BookingRequest
from travel_booking.domain.employee import EmployeeRequest
from travel_booking.domain.outcome import OutcomeStatus
from travel_booking.domain.validation import is_blank
from travel_booking.services.booking import BookingService
from travel_booking.services.employee import EmployeeService

logger = get_logger(__name__)
router = APIRouter()


class StatusUpdateRequest(BaseModel):
    """Body of the status PATCH endpoints: ``{"status": "CONFIRMED"}``."""
    status: Optional[str] = None


def get_employee_service(request: Request) -> EmployeeService:
    return request.app.state.employee_service


def get_booking_service(request: Request) -> BookingService:
    return request.app.state.booking_service


# -----------------
# EMPLOYEES
# -----------------

@router.post("/employees")
def register_employee(
    req: EmployeeRequest,
    service: EmployeeService = Depends(get_employee_service),
):
    """Register a new employee. 201 on success, 409 if the ID is taken.

    Example:
        POST /employees
        {"employeeId": "EMP9876", "name": "Ana Pop", "email": "ana.pop@example.com",
         "department": "Engineering", "costCenterRef": "CC-456"}
    """
    with LogTimer(logger, "register_employee"):
        outcome = service.register_employee(req)
    return outcome_response(outcome, created=True)


@router.get("/employees")
def search_employees(
    email: Optional[str] = None,
    department: Optional[str] = None,
    service: EmployeeService = Depends(get_employee_service),
):
    """Look up employees by email or department; without either, list all."""
    if email is not None:
        return outcome_list_response(service.get_employees_by_email(email))
    if department is not None:
        return outcome_list_response(service.get_employees_by_department(department))

    with LogTimer(logger, "get_all_employees"):
        return outcome_list_response(service.get_all_employees())


@router.get("/employees/{employee_id}")
def get_employee(employee_id: str, service: EmployeeService = Depends(get_employee_service)):
    return outcome_response(service.get_employee_by_id(employee_id))


@router.patch("/employees/{employee_id}/status")
def update_employee_status(
    employee_id: str,
    body: StatusUpdateRequest,
    service: EmployeeService = Depends(get_employee_service),
):
    """Set an employee's status to ACTIVE, INACTIVE or SUSPENDED."""
    if is_blank(body.status):
        return error_response(
            status.HTTP_400_BAD_REQUEST,
            OutcomeStatus.VALIDATION_ERROR.value,
            "Status field is required in body",
            employeeId=employee_id,
        )
    return outcome_response(service.update_employee_status(employee_id, body.status))


@router.delete("/employees/{employee_id}")
def delete_employee(employee_id: str, service: EmployeeService = Depends(get_employee_service)):
    return outcome_response(service.delete_employee(employee_id))


@router.get("/employees/{employee_id}/bookings")
def employee_bookings(
    employee_id: str,
    bookings: BookingService = Depends(get_booking_service),
):
    """Bookings made for an employee, with their count."""
    try:
        count = bookings.count_bookings_by_employee_id(employee_id)
    except PersistenceError as e:
        logger.error(f"Failed to count bookings for employee {employee_id}: {e}", exc_info=True)
        return error_response(
            status.HTTP_500_INTERNAL_SERVER_ERROR,
            OutcomeStatus.SYSTEM_ERROR.value,
            "Failed to search bookings. Please try again later.",
            employeeId=employee_id,
        )

    outcomes = bookings.get_bookings_by_employee_id(employee_id)
    return {
        "employeeId": employee_id,
        "count": count,
        "bookings": [outcome.to_payload() for outcome in outcomes],
    }


# -----------------
# BOOKINGS
# -----------------

@router.post("/bookings")
def create_booking(
    req: BookingRequest,
    service: BookingService = Depends(get_booking_service),
):
    """Create a booking in PENDING state. 201 with the new reference ID.

    Example:
        POST /bookings
        {"employeeId": "EMP9876", "resourceType": "Flight", "destination": "NYC",
         "departureDate": "2024-11-05 08:00:00", "returnDate": "2024-11-08 18:00:00",
         "travelerCount": 1, "costCenterRef": "CC-456", "tripPurpose": "Client meeting"}
    """
    with LogTimer(logger, "create_booking"):
        outcome = service.create_booking(req)
    return outcome_response(outcome, created=True)


@router.get("/bookings")
def search_bookings(
    employee_id: Optional[str] = Query(default=None, alias="employeeId"),
    service: BookingService = Depends(get_booking_service),
):
    """Bookings for ``?employeeId=``; without it, every booking (full scan)."""
    if employee_id is not None:
        return outcome_list_response(service.get_bookings_by_employee_id(employee_id))

    with LogTimer(logger, "get_all_bookings"):
        return outcome_list_response(service.get_all_bookings())


@router.get("/bookings/{booking_reference_id}")
def get_booking(booking_reference_id: str, service: BookingService = Depends(get_booking_service)):
    return outcome_response(service.get_booking_by_reference_id(booking_reference_id))


@router.patch("/bookings/{booking_reference_id}/status")
def update_booking_status(
    booking_reference_id: str,
    body: StatusUpdateRequest,
    service: BookingService = Depends(get_booking_service),
):
    """Move a booking to a new status; CANCELLED and COMPLETED are final."""
    if is_blank(body.status):
        return error_response(
            status.HTTP_400_BAD_REQUEST,
            OutcomeStatus.VALIDATION_ERROR.value,
            "Status field is required in body",
            bookingReferenceId=booking_reference_id,
        )
    return outcome_response(service.update_booking_status(booking_reference_id, body.status))


@router.post("/bookings/{booking_reference_id}/cancel")
def cancel_booking(booking_reference_id: str, service: BookingService = Depends(get_booking_service)):
    return outcome_response(service.cancel_booking(booking_reference_id))
