"""Domain models for travel bookings."""
from enum import Enum
from typing import Optional
from pydantic import BaseModel, Field

from travel_booking.domain.outcome import Outcome

BOOKING_REFERENCE_PREFIX = "BKG-"


class BookingStatus(str, Enum):
    """Booking lifecycle status.

    PENDING and CONFIRMED may move to any status (including themselves).
    CANCELLED and COMPLETED are terminal: no further transition is accepted.
    """
    PENDING = "PENDING"
    CONFIRMED = "CONFIRMED"
    CANCELLED = "CANCELLED"
    COMPLETED = "COMPLETED"

    @classmethod
    def values(cls) -> tuple[str, ...]:
        return tuple(member.value for member in cls)

    @classmethod
    def terminal(cls) -> frozenset[str]:
        return frozenset({cls.CANCELLED.value, cls.COMPLETED.value})


class Booking(BaseModel):
    """Flight or hotel booking made for an employee.

    Dates are kept as the ``yyyy-MM-dd HH:mm:ss`` strings clients send; they
    are parsed only for validation.
    """
    booking_reference_id: str = Field(alias="bookingReferenceId")
    employee_id: str = Field(alias="employeeId")
    resource_type: str = Field(alias="resourceType")
    destination: str
    departure_date: str = Field(alias="departureDate")
    return_date: str = Field(alias="returnDate")
    traveler_count: int = Field(ge=1, alias="travelerCount")
    cost_center_ref: str = Field(alias="costCenterRef")
    trip_purpose: str = Field(alias="tripPurpose")
    status: Optional[BookingStatus] = None
    created_at: Optional[str] = Field(default=None, alias="createdAt")
    updated_at: Optional[str] = Field(default=None, alias="updatedAt")

    class Config:
        populate_by_name = True
        use_enum_values = True

    @property
    def is_terminal(self) -> bool:
        return self.status in BookingStatus.terminal()

    def summary(self) -> str:
        return f"{self.resource_type} to {self.destination} [{self.status}]"


class BookingRequest(BaseModel):
    """Booking creation payload; every field is validated by the service."""
    employee_id: Optional[str] = Field(default=None, alias="employeeId")
    resource_type: Optional[str] = Field(default=None, alias="resourceType")
    destination: Optional[str] = None
    departure_date: Optional[str] = Field(default=None, alias="departureDate")
    return_date: Optional[str] = Field(default=None, alias="returnDate")
    traveler_count: Optional[int] = Field(default=None, alias="travelerCount")
    cost_center_ref: Optional[str] = Field(default=None, alias="costCenterRef")
    trip_purpose: Optional[str] = Field(default=None, alias="tripPurpose")

    class Config:
        populate_by_name = True
        json_schema_extra = {
            "example": {
                "employeeId": "EMP9876",
                "resourceType": "Flight",
                "destination": "NYC",
                "departureDate": "2024-11-05 08:00:00",
                "returnDate": "2024-11-08 18:00:00",
                "travelerCount": 1,
                "costCenterRef": "CC-456",
                "tripPurpose": "Client meeting"
            }
        }


class BookingOutcome(Outcome):
    """Result of a booking service call, with the booking fields on SUCCESS."""
    booking_reference_id: Optional[str] = Field(default=None, alias="bookingReferenceId")
    employee_id: Optional[str] = Field(default=None, alias="employeeId")
    resource_type: Optional[str] = Field(default=None, alias="resourceType")
    destination: Optional[str] = None
    departure_date: Optional[str] = Field(default=None, alias="departureDate")
    return_date: Optional[str] = Field(default=None, alias="returnDate")
    traveler_count: Optional[int] = Field(default=None, alias="travelerCount")
    cost_center_ref: Optional[str] = Field(default=None, alias="costCenterRef")
    trip_purpose: Optional[str] = Field(default=None, alias="tripPurpose")
    booking_status: Optional[str] = Field(default=None, alias="bookingStatus")
    created_at: Optional[str] = Field(default=None, alias="createdAt")
    updated_at: Optional[str] = Field(default=None, alias="updatedAt")

    @classmethod
    def success(cls, booking: Booking, message: str) -> "BookingOutcome":
        return cls(
            status="SUCCESS",
            message=message,
            booking_reference_id=booking.booking_reference_id,
            employee_id=booking.employee_id,
            resource_type=booking.resource_type,
            destination=booking.destination,
            departure_date=booking.departure_date,
            return_date=booking.return_date,
            traveler_count=booking.traveler_count,
            cost_center_ref=booking.cost_center_ref,
            trip_purpose=booking.trip_purpose,
            booking_status=booking.status,
            created_at=booking.created_at,
            updated_at=booking.updated_at,
        )

    @classmethod
    def error(cls, status: str, booking_reference_id: Optional[str], message: str) -> "BookingOutcome":
        return cls(status=status, booking_reference_id=booking_reference_id, message=message)
