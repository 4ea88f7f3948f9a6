"""Domain models for employees."""
from enum import Enum
from typing import Optional
from pydantic import BaseModel, Field

from travel_booking.domain.outcome import Outcome


class EmployeeStatus(str, Enum):
    """Employee lifecycle status. Any status may move to any other."""
    ACTIVE = "ACTIVE"
    INACTIVE = "INACTIVE"
    SUSPENDED = "SUSPENDED"

    @classmethod
    def values(cls) -> tuple[str, ...]:
        return tuple(member.value for member in cls)


class Employee(BaseModel):
    """Registered employee.

    Attributes:
        employee_id: Externally supplied unique identifier (primary key)
        name: Full name
        email: Work email address
        department: Department the employee belongs to
        cost_center_ref: Cost center billed for the employee's travel
        status: Lifecycle status, set to ACTIVE by the repository on first save
        created_at: ISO-8601 creation timestamp, set by the repository
        updated_at: ISO-8601 last-write timestamp, set by the repository
    """
    employee_id: str = Field(alias="employeeId")
    name: str
    email: str
    department: str
    cost_center_ref: str = Field(alias="costCenterRef")
    status: Optional[EmployeeStatus] = None
    created_at: Optional[str] = Field(default=None, alias="createdAt")
    updated_at: Optional[str] = Field(default=None, alias="updatedAt")

    class Config:
        populate_by_name = True
        use_enum_values = True
        json_schema_extra = {
            "example": {
                "employeeId": "EMP9876",
                "name": "Ana Pop",
                "email": "ana.pop@example.com",
                "department": "Engineering",
                "costCenterRef": "CC-456",
                "status": "ACTIVE"
            }
        }


class EmployeeRequest(BaseModel):
    """Employee registration payload.

    Every field is optional at parse time so that missing values are reported
    by field validation rather than by request parsing.
    """
    employee_id: Optional[str] = Field(default=None, alias="employeeId")
    name: Optional[str] = None
    email: Optional[str] = None
    department: Optional[str] = None
    cost_center_ref: Optional[str] = Field(default=None, alias="costCenterRef")

    class Config:
        populate_by_name = True
        json_schema_extra = {
            "example": {
                "employeeId": "EMP9876",
                "name": "Ana Pop",
                "email": "ana.pop@example.com",
                "department": "Engineering",
                "costCenterRef": "CC-456"
            }
        }


class EmployeeOutcome(Outcome):
    """Result of an employee service call, with the profile on SUCCESS."""
    employee_id: Optional[str] = Field(default=None, alias="employeeId")
    name: Optional[str] = None
    email: Optional[str] = None
    department: Optional[str] = None
    cost_center_ref: Optional[str] = Field(default=None, alias="costCenterRef")
    employee_status: Optional[str] = Field(default=None, alias="employeeStatus")
    created_at: Optional[str] = Field(default=None, alias="createdAt")
    updated_at: Optional[str] = Field(default=None, alias="updatedAt")

    @classmethod
    def success(cls, employee: Employee, message: str) -> "EmployeeOutcome":
        return cls(
            status="SUCCESS",
            message=message,
            employee_id=employee.employee_id,
            name=employee.name,
            email=employee.email,
            department=employee.department,
            cost_center_ref=employee.cost_center_ref,
            employee_status=employee.status,
            created_at=employee.created_at,
            updated_at=employee.updated_at,
        )

    @classmethod
    def error(cls, status: str, employee_id: Optional[str], message: str) -> "EmployeeOutcome":
        return cls(status=status, employee_id=employee_id, message=message)
