"""Outcome taxonomy shared by the employee and booking services."""
from enum import Enum
from pydantic import BaseModel


class OutcomeStatus(str, Enum):
    """Result category of a domain service call.

    SUCCESS, VALIDATION_ERROR, NOT_FOUND and CONFLICT are expected outcomes
    returned as values. SYSTEM_ERROR covers persistence failures and any
    unanticipated fault; its message never carries the underlying cause.
    """
    SUCCESS = "SUCCESS"
    VALIDATION_ERROR = "VALIDATION_ERROR"
    NOT_FOUND = "NOT_FOUND"
    CONFLICT = "CONFLICT"
    SYSTEM_ERROR = "SYSTEM_ERROR"


class Outcome(BaseModel):
    """Base outcome: a status and a human-readable message.

    Subclasses add the entity's primary id and, on SUCCESS, its fields.
    """
    status: OutcomeStatus
    message: str

    class Config:
        populate_by_name = True
        use_enum_values = True

    @property
    def is_success(self) -> bool:
        return self.status == OutcomeStatus.SUCCESS

    def to_payload(self) -> dict:
        """Wire representation: camelCase keys, unset fields omitted."""
        return self.model_dump(by_alias=True, exclude_none=True, mode="json")
