"""Translate domain outcomes into HTTP responses."""
from typing import Iterable
from fastapi import status
from fastapi.responses import JSONResponse

from travel_booking.domain.outcome import Outcome, OutcomeStatus

INVALID_REQUEST = "INVALID_REQUEST"

STATUS_CODES = {
    OutcomeStatus.SUCCESS.value: status.HTTP_200_OK,
    OutcomeStatus.VALIDATION_ERROR.value: status.HTTP_400_BAD_REQUEST,
    OutcomeStatus.NOT_FOUND.value: status.HTTP_404_NOT_FOUND,
    OutcomeStatus.CONFLICT.value: status.HTTP_409_CONFLICT,
    OutcomeStatus.SYSTEM_ERROR.value: status.HTTP_500_INTERNAL_SERVER_ERROR,
}


def status_to_http_code(outcome_status: str, created: bool = False) -> int:
    """Map an outcome status to an HTTP status code.

    Args:
        outcome_status: OutcomeStatus value
        created: Whether a SUCCESS created a resource (201 instead of 200)
    """
    if created and outcome_status == OutcomeStatus.SUCCESS.value:
        return status.HTTP_201_CREATED
    return STATUS_CODES.get(outcome_status, status.HTTP_500_INTERNAL_SERVER_ERROR)


def outcome_response(outcome: Outcome, created: bool = False) -> JSONResponse:
    return JSONResponse(
        status_code=status_to_http_code(outcome.status, created=created),
        content=outcome.to_payload(),
    )


def outcome_list_response(outcomes: Iterable[Outcome]) -> JSONResponse:
    """Lists are always 200; per-item status carries any error."""
    return JSONResponse(
        status_code=status.HTTP_200_OK,
        content=[outcome.to_payload() for outcome in outcomes],
    )


def error_response(status_code: int, error_status: str, message: str, **fields) -> JSONResponse:
    """Error body in the same shape as an outcome."""
    content = {"status": error_status, "message": message}
    content.update({key: value for key, value in fields.items() if value is not None})
    return JSONResponse(status_code=status_code, content=content)
