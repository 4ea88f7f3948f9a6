"""Request validation for employees and bookings.

All validators are pure functions returning a ``ValidationResult``; they never
raise on bad input. Services inspect the result and short-circuit before any
repository write.
"""
import re
from datetime import datetime
from typing import Iterable, Optional
from pydantic import BaseModel

from travel_booking.domain.booking import BookingRequest
from travel_booking.domain.employee import EmployeeRequest

EMAIL_PATTERN = re.compile(r"^[A-Za-z0-9+_.-]+@[A-Za-z0-9.-]+\.[A-Za-z]{2,}$")

# Wire format of booking dates: yyyy-MM-dd HH:mm:ss, zero padded, no zone
BOOKING_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"
BOOKING_DATE_DISPLAY_FORMAT = "yyyy-MM-dd HH:mm:ss"
_BOOKING_DATE_SHAPE = re.compile(r"^\d{4}-\d{2}-\d{2} \d{2}:\d{2}:\d{2}$")


class ValidationResult(BaseModel):
    """Tagged validation result: ok, or the offending field and a reason."""
    field_name: Optional[str] = None
    message: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.message is None

    @classmethod
    def success(cls) -> "ValidationResult":
        return cls()

    @classmethod
    def failure(cls, field_name: str, message: str) -> "ValidationResult":
        return cls(field_name=field_name, message=message)


VALID = ValidationResult.success()


def is_blank(value: Optional[str]) -> bool:
    """True for None or a string that is empty after stripping whitespace."""
    return value is None or not str(value).strip()


def parse_booking_datetime(value: str) -> Optional[datetime]:
    """Parse a booking date string, returning None when it is malformed."""
    if value is None or not _BOOKING_DATE_SHAPE.match(value):
        return None
    try:
        return datetime.strptime(value, BOOKING_DATE_FORMAT)
    except ValueError:
        return None


def validate_employee_fields(request: EmployeeRequest) -> ValidationResult:
    """Check required employee fields and the email format.

    Checks run in a fixed order and the first failure is reported.
    """
    required = (
        ("employeeId", request.employee_id, "Employee ID is required"),
        ("name", request.name, "Employee name is required"),
        ("email", request.email, "Email is required"),
    )
    for field_name, value, message in required:
        if is_blank(value):
            return ValidationResult.failure(field_name, message)

    if not EMAIL_PATTERN.fullmatch(request.email):
        return ValidationResult.failure("email", "Invalid email format")

    if is_blank(request.department):
        return ValidationResult.failure("department", "Department is required")
    if is_blank(request.cost_center_ref):
        return ValidationResult.failure("costCenterRef", "Cost center reference is required")

    return VALID


def validate_booking_fields(request: BookingRequest) -> ValidationResult:
    """Check that every required booking field is present and non-blank."""
    required = (
        ("employeeId", request.employee_id, "Employee ID is required"),
        ("resourceType", request.resource_type, "Resource type is required"),
        ("destination", request.destination, "Destination is required"),
        ("departureDate", request.departure_date, "Departure date is required"),
        ("returnDate", request.return_date, "Return date is required"),
    )
    for field_name, value, message in required:
        if is_blank(value):
            return ValidationResult.failure(field_name, message)

    if request.traveler_count is None or request.traveler_count < 1:
        return ValidationResult.failure("travelerCount", "Traveler count must be at least 1")

    if is_blank(request.cost_center_ref):
        return ValidationResult.failure("costCenterRef", "Cost center reference is required")
    if is_blank(request.trip_purpose):
        return ValidationResult.failure("tripPurpose", "Trip purpose is required")

    return VALID


def validate_booking_dates(departure_date: str, return_date: str) -> ValidationResult:
    """Departure must parse, and must fall strictly before return."""
    departure = parse_booking_datetime(departure_date)
    if departure is None:
        return ValidationResult.failure(
            "departureDate", f"Invalid date format. Expected '{BOOKING_DATE_DISPLAY_FORMAT}'"
        )
    returning = parse_booking_datetime(return_date)
    if returning is None:
        return ValidationResult.failure(
            "returnDate", f"Invalid date format. Expected '{BOOKING_DATE_DISPLAY_FORMAT}'"
        )

    if departure > returning:
        return ValidationResult.failure("departureDate", "Departure date must be before return date")
    if departure == returning:
        return ValidationResult.failure("returnDate", "Departure and return dates cannot be the same")

    return VALID


def is_valid_status_value(candidate: Optional[str], allowed: Iterable[str]) -> bool:
    """Case-insensitive membership check of a status against an allowed set."""
    if is_blank(candidate):
        return False
    return candidate.strip().upper() in {value.upper() for value in allowed}
