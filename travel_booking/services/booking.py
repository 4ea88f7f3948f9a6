"""Booking lifecycle service.

Handles:
- Booking creation with field and date validation
- Lookup by reference ID and by employee
- Status transitions, with CANCELLED and COMPLETED as terminal states

Bookings are never deleted here; they are retired by moving to CANCELLED or
COMPLETED so the history stays auditable.
"""
import uuid
from typing import List, Optional

from travel_booking.core.exceptions import PersistenceError
from travel_booking.core.logging import get_logger
from travel_booking.domain.booking import (
    BOOKING_REFERENCE_PREFIX,
    Booking,
    BookingOutcome,
    BookingRequest,
    BookingStatus,
)
from travel_booking.domain.outcome import OutcomeStatus
from travel_booking.domain.repositories import BookingRepository
from travel_booking.domain.validation import (
    is_blank,
    is_valid_status_value,
    validate_booking_dates,
    validate_booking_fields,
)

logger = get_logger(__name__)

INVALID_STATUS_MESSAGE = "Invalid status. Allowed values: " + ", ".join(BookingStatus.values())
UNEXPECTED_ERROR_MESSAGE = "An unexpected error occurred"


def generate_booking_reference() -> str:
    """New reference ID: ``BKG-`` followed by a random UUID4."""
    return f"{BOOKING_REFERENCE_PREFIX}{uuid.uuid4()}"


class BookingService:
    """Validation, reference generation and state machine for bookings.

    Holds no state besides the injected repository, so one instance can serve
    concurrent requests.
    """

    def __init__(self, repository: BookingRepository):
        self.repository = repository

    def create_booking(self, request: Optional[BookingRequest]) -> BookingOutcome:
        """Validate and persist a new booking in PENDING state."""
        if request is None:
            logger.error("Booking request is None")
            return BookingOutcome.error(OutcomeStatus.VALIDATION_ERROR, None, "Booking request cannot be empty")

        logger.info(f"Processing booking request for employee: {request.employee_id}")

        result = validate_booking_fields(request)
        if result.ok:
            result = validate_booking_dates(request.departure_date, request.return_date)
        if not result.ok:
            logger.info(f"Booking request rejected ({result.field_name}): {result.message}")
            return BookingOutcome.error(OutcomeStatus.VALIDATION_ERROR, None, result.message)

        try:
            booking = Booking(
                booking_reference_id=generate_booking_reference(),
                employee_id=request.employee_id,
                resource_type=request.resource_type,
                destination=request.destination,
                departure_date=request.departure_date,
                return_date=request.return_date,
                traveler_count=request.traveler_count,
                cost_center_ref=request.cost_center_ref,
                trip_purpose=request.trip_purpose,
            )
            saved = self.repository.save(booking)

            logger.info(
                f"Booking created successfully. Reference: {saved.booking_reference_id}",
                extra={"booking_reference_id": saved.booking_reference_id, "employee_id": saved.employee_id}
            )
            return BookingOutcome.success(saved, f"Booking created successfully for employee {request.employee_id}")

        except PersistenceError as e:
            logger.error(f"Failed to persist booking: {e}", exc_info=True)
            return BookingOutcome.error(
                OutcomeStatus.SYSTEM_ERROR, None, "Failed to save booking. Please try again later."
            )
        except Exception:
            logger.exception("Unexpected error processing booking request")
            return BookingOutcome.error(
                OutcomeStatus.SYSTEM_ERROR, None, "An unexpected error occurred processing your booking"
            )

    def get_booking_by_reference_id(self, booking_reference_id: Optional[str]) -> BookingOutcome:
        logger.info(f"Looking up booking: {booking_reference_id}")

        if is_blank(booking_reference_id):
            return BookingOutcome.error(OutcomeStatus.VALIDATION_ERROR, None, "Booking reference ID is required")

        try:
            booking = self.repository.find_by_reference_id(booking_reference_id)
            if booking is None:
                logger.debug(f"Booking not found: {booking_reference_id}")
                return BookingOutcome.error(
                    OutcomeStatus.NOT_FOUND, booking_reference_id, f"Booking not found: {booking_reference_id}"
                )

            return BookingOutcome.success(booking, booking.summary())

        except PersistenceError as e:
            logger.error(f"Failed to retrieve booking {booking_reference_id}: {e}", exc_info=True)
            return BookingOutcome.error(
                OutcomeStatus.SYSTEM_ERROR, booking_reference_id, "Failed to retrieve booking. Please try again later."
            )
        except Exception:
            logger.exception(f"Unexpected error retrieving booking: {booking_reference_id}")
            return BookingOutcome.error(OutcomeStatus.SYSTEM_ERROR, booking_reference_id, UNEXPECTED_ERROR_MESSAGE)

    def get_bookings_by_employee_id(self, employee_id: Optional[str]) -> List[BookingOutcome]:
        """Bookings for an employee.

        Always returns a list: a blank employee ID yields a single
        VALIDATION_ERROR outcome rather than raising.
        """
        logger.info(f"Searching bookings for employee: {employee_id}")

        if is_blank(employee_id):
            return [BookingOutcome.error(OutcomeStatus.VALIDATION_ERROR, None, "Employee ID is required")]

        try:
            bookings = self.repository.find_by_employee_id(employee_id)
            return [BookingOutcome.success(b, b.summary()) for b in bookings]

        except PersistenceError as e:
            logger.error(f"Failed to search bookings for employee {employee_id}: {e}", exc_info=True)
            return [BookingOutcome.error(
                OutcomeStatus.SYSTEM_ERROR, None, "Failed to search bookings. Please try again later."
            )]
        except Exception:
            logger.exception(f"Unexpected error searching bookings for employee: {employee_id}")
            return [BookingOutcome.error(OutcomeStatus.SYSTEM_ERROR, None, UNEXPECTED_ERROR_MESSAGE)]

    def count_bookings_by_employee_id(self, employee_id: Optional[str]) -> int:
        """Number of bookings recorded for an employee; 0 for a blank ID.

        Raises:
            PersistenceError: if the store fails
        """
        if is_blank(employee_id):
            return 0
        return self.repository.count_by_employee_id(employee_id)

    def get_all_bookings(self) -> List[BookingOutcome]:
        """Every booking. On Redis this reads the whole booking index."""
        logger.info("Retrieving all bookings")

        try:
            return [BookingOutcome.success(b, b.summary()) for b in self.repository.find_all()]

        except PersistenceError as e:
            logger.error(f"Failed to retrieve all bookings: {e}", exc_info=True)
            return [BookingOutcome.error(
                OutcomeStatus.SYSTEM_ERROR, None, "Failed to retrieve bookings. Please try again later."
            )]
        except Exception:
            logger.exception("Unexpected error retrieving all bookings")
            return [BookingOutcome.error(OutcomeStatus.SYSTEM_ERROR, None, UNEXPECTED_ERROR_MESSAGE)]

    def cancel_booking(self, booking_reference_id: Optional[str]) -> BookingOutcome:
        logger.info(f"Cancelling booking: {booking_reference_id}")
        return self.update_booking_status(booking_reference_id, BookingStatus.CANCELLED.value)

    def update_booking_status(self, booking_reference_id: Optional[str], new_status: Optional[str]) -> BookingOutcome:
        """Move a booking to ``new_status``.

        Any non-terminal booking may move to any of the four statuses,
        itself included. A booking that is CANCELLED or COMPLETED rejects
        every transition.
        """
        logger.info(f"Updating status for booking: {booking_reference_id} to {new_status}")

        if is_blank(booking_reference_id):
            return BookingOutcome.error(OutcomeStatus.VALIDATION_ERROR, None, "Booking reference ID is required")
        if is_blank(new_status):
            return BookingOutcome.error(OutcomeStatus.VALIDATION_ERROR, booking_reference_id, "New status is required")
        if not is_valid_status_value(new_status, BookingStatus.values()):
            return BookingOutcome.error(OutcomeStatus.VALIDATION_ERROR, booking_reference_id, INVALID_STATUS_MESSAGE)

        normalized_status = new_status.strip().upper()

        try:
            current = self.repository.find_by_reference_id(booking_reference_id)
            if current is None:
                return BookingOutcome.error(
                    OutcomeStatus.NOT_FOUND, booking_reference_id, f"Booking not found: {booking_reference_id}"
                )

            if current.is_terminal:
                logger.warning(
                    f"Rejected transition of booking {booking_reference_id} from terminal state {current.status}"
                )
                return BookingOutcome.error(
                    OutcomeStatus.VALIDATION_ERROR,
                    booking_reference_id,
                    f"Cannot update booking in {current.status} state",
                )

            updated = self.repository.update_status(booking_reference_id, normalized_status)
            if updated is None:
                return BookingOutcome.error(
                    OutcomeStatus.NOT_FOUND, booking_reference_id, f"Booking not found: {booking_reference_id}"
                )

            logger.info(
                f"Successfully updated booking {booking_reference_id} status to {normalized_status}",
                extra={"booking_reference_id": booking_reference_id}
            )
            return BookingOutcome.success(updated, f"Booking status updated to {updated.status}")

        except PersistenceError as e:
            logger.error(f"Failed to update booking status {booking_reference_id}: {e}", exc_info=True)
            return BookingOutcome.error(
                OutcomeStatus.SYSTEM_ERROR,
                booking_reference_id,
                "Failed to update booking status. Please try again later.",
            )
        except Exception:
            logger.exception(f"Unexpected error updating booking status: {booking_reference_id}")
            return BookingOutcome.error(OutcomeStatus.SYSTEM_ERROR, booking_reference_id, UNEXPECTED_ERROR_MESSAGE)
