"""Employee registration and management service."""
from typing import List, Optional

from travel_booking.core.exceptions import PersistenceError
from travel_booking.core.logging import get_logger
from travel_booking.domain.employee import Employee, EmployeeOutcome, EmployeeRequest, EmployeeStatus
from travel_booking.domain.outcome import OutcomeStatus
from travel_booking.domain.repositories import EmployeeRepository
from travel_booking.domain.validation import is_blank, is_valid_status_value, validate_employee_fields

logger = get_logger(__name__)

INVALID_STATUS_MESSAGE = "Invalid status. Allowed values: " + ", ".join(EmployeeStatus.values())
UNEXPECTED_ERROR_MESSAGE = "An unexpected error occurred"


class EmployeeService:
    """Registration, lookup, status changes and deletion of employees.

    Unlike bookings, employee statuses have no terminal state. Deleting an
    employee leaves that employee's bookings in place.
    """

    def __init__(self, repository: EmployeeRepository):
        self.repository = repository

    def register_employee(self, request: Optional[EmployeeRequest]) -> EmployeeOutcome:
        if request is None:
            logger.error("Employee request is None")
            return EmployeeOutcome.error(OutcomeStatus.VALIDATION_ERROR, None, "Employee request cannot be empty")

        logger.info(f"Processing employee registration for: {request.employee_id}")

        result = validate_employee_fields(request)
        if not result.ok:
            logger.info(f"Employee registration rejected ({result.field_name}): {result.message}")
            return EmployeeOutcome.error(OutcomeStatus.VALIDATION_ERROR, request.employee_id, result.message)

        try:
            # Not atomic with the save below; concurrent registrations of the
            # same ID can both pass this check.
            if self.repository.exists_by_id(request.employee_id):
                logger.warning(f"Employee already exists: {request.employee_id}")
                return EmployeeOutcome.error(
                    OutcomeStatus.CONFLICT,
                    request.employee_id,
                    f"Employee with ID {request.employee_id} already exists",
                )

            employee = Employee(
                employee_id=request.employee_id,
                name=request.name,
                email=request.email,
                department=request.department,
                cost_center_ref=request.cost_center_ref,
            )
            saved = self.repository.save(employee)

            logger.info(f"Employee registered successfully: {saved.employee_id}", extra={"employee_id": saved.employee_id})
            return EmployeeOutcome.success(saved, "Employee registered successfully")

        except PersistenceError as e:
            logger.error(f"Failed to persist employee: {e}", exc_info=True)
            return EmployeeOutcome.error(
                OutcomeStatus.SYSTEM_ERROR, request.employee_id, "Failed to save employee. Please try again later."
            )
        except Exception:
            logger.exception("Unexpected error processing employee registration")
            return EmployeeOutcome.error(
                OutcomeStatus.SYSTEM_ERROR,
                request.employee_id,
                "An unexpected error occurred processing your request",
            )

    def get_employee_by_id(self, employee_id: Optional[str]) -> EmployeeOutcome:
        logger.info(f"Looking up employee: {employee_id}")

        if is_blank(employee_id):
            return EmployeeOutcome.error(OutcomeStatus.VALIDATION_ERROR, None, "Employee ID is required")

        try:
            employee = self.repository.find_by_id(employee_id)
            if employee is None:
                logger.debug(f"Employee not found: {employee_id}")
                return EmployeeOutcome.error(OutcomeStatus.NOT_FOUND, employee_id, f"Employee not found: {employee_id}")

            return EmployeeOutcome.success(employee, f"Employee found: {employee.name}")

        except PersistenceError as e:
            logger.error(f"Failed to retrieve employee {employee_id}: {e}", exc_info=True)
            return EmployeeOutcome.error(
                OutcomeStatus.SYSTEM_ERROR, employee_id, "Failed to retrieve employee. Please try again later."
            )
        except Exception:
            logger.exception(f"Unexpected error retrieving employee: {employee_id}")
            return EmployeeOutcome.error(OutcomeStatus.SYSTEM_ERROR, employee_id, UNEXPECTED_ERROR_MESSAGE)

    def get_employees_by_email(self, email: Optional[str]) -> List[EmployeeOutcome]:
        """Exact-match lookup; no matches (or a blank email) is an empty list."""
        logger.info(f"Searching employees by email: {email}")

        if is_blank(email):
            return []

        try:
            return [
                EmployeeOutcome.success(e, f"Employee: {e.name} ({e.department})")
                for e in self.repository.find_by_email(email)
            ]
        except PersistenceError as e:
            logger.error(f"Failed to search employees by email {email}: {e}", exc_info=True)
            return [EmployeeOutcome.error(
                OutcomeStatus.SYSTEM_ERROR, None, "Failed to search employees. Please try again later."
            )]
        except Exception:
            logger.exception(f"Unexpected error searching employees by email: {email}")
            return [EmployeeOutcome.error(OutcomeStatus.SYSTEM_ERROR, None, UNEXPECTED_ERROR_MESSAGE)]

    def get_employees_by_department(self, department: Optional[str]) -> List[EmployeeOutcome]:
        """Exact-match lookup; no matches (or a blank department) is an empty list."""
        logger.info(f"Searching employees by department: {department}")

        if is_blank(department):
            return []

        try:
            return [
                EmployeeOutcome.success(e, f"Employee: {e.name} ({e.email})")
                for e in self.repository.find_by_department(department)
            ]
        except PersistenceError as e:
            logger.error(f"Failed to search employees by department {department}: {e}", exc_info=True)
            return [EmployeeOutcome.error(
                OutcomeStatus.SYSTEM_ERROR, None, "Failed to search employees. Please try again later."
            )]
        except Exception:
            logger.exception(f"Unexpected error searching employees by department: {department}")
            return [EmployeeOutcome.error(OutcomeStatus.SYSTEM_ERROR, None, UNEXPECTED_ERROR_MESSAGE)]

    def update_employee_status(self, employee_id: Optional[str], new_status: Optional[str]) -> EmployeeOutcome:
        logger.info(f"Updating status for employee: {employee_id} to {new_status}")

        if is_blank(employee_id):
            return EmployeeOutcome.error(OutcomeStatus.VALIDATION_ERROR, None, "Employee ID is required")
        if is_blank(new_status):
            return EmployeeOutcome.error(OutcomeStatus.VALIDATION_ERROR, employee_id, "New status is required")
        if not is_valid_status_value(new_status, EmployeeStatus.values()):
            return EmployeeOutcome.error(OutcomeStatus.VALIDATION_ERROR, employee_id, INVALID_STATUS_MESSAGE)

        try:
            updated = self.repository.update_status(employee_id, new_status.strip().upper())
            if updated is None:
                return EmployeeOutcome.error(OutcomeStatus.NOT_FOUND, employee_id, f"Employee not found: {employee_id}")

            logger.info(f"Successfully updated employee {employee_id} status to {updated.status}")
            return EmployeeOutcome.success(updated, f"Employee status updated to {updated.status}")

        except PersistenceError as e:
            logger.error(f"Failed to update employee status {employee_id}: {e}", exc_info=True)
            return EmployeeOutcome.error(
                OutcomeStatus.SYSTEM_ERROR, employee_id, "Failed to update employee status. Please try again later."
            )
        except Exception:
            logger.exception(f"Unexpected error updating employee status: {employee_id}")
            return EmployeeOutcome.error(OutcomeStatus.SYSTEM_ERROR, employee_id, UNEXPECTED_ERROR_MESSAGE)

    def delete_employee(self, employee_id: Optional[str]) -> EmployeeOutcome:
        """Hard delete. Bookings referencing the employee are left as they are."""
        logger.info(f"Deleting employee: {employee_id}")

        if is_blank(employee_id):
            return EmployeeOutcome.error(OutcomeStatus.VALIDATION_ERROR, None, "Employee ID is required")

        try:
            if not self.repository.delete_by_id(employee_id):
                return EmployeeOutcome.error(OutcomeStatus.NOT_FOUND, employee_id, f"Employee not found: {employee_id}")

            logger.info(f"Successfully deleted employee: {employee_id}")
            return EmployeeOutcome(
                status=OutcomeStatus.SUCCESS, employee_id=employee_id, message="Employee deleted successfully"
            )

        except PersistenceError as e:
            logger.error(f"Failed to delete employee {employee_id}: {e}", exc_info=True)
            return EmployeeOutcome.error(
                OutcomeStatus.SYSTEM_ERROR, employee_id, "Failed to delete employee. Please try again later."
            )
        except Exception:
            logger.exception(f"Unexpected error deleting employee: {employee_id}")
            return EmployeeOutcome.error(OutcomeStatus.SYSTEM_ERROR, employee_id, UNEXPECTED_ERROR_MESSAGE)

    def get_all_employees(self) -> List[EmployeeOutcome]:
        logger.info("Retrieving all employees")

        try:
            return [EmployeeOutcome.success(e, f"Employee: {e.name}") for e in self.repository.find_all()]
        except PersistenceError as e:
            logger.error(f"Failed to retrieve all employees: {e}", exc_info=True)
            return [EmployeeOutcome.error(
                OutcomeStatus.SYSTEM_ERROR, None, "Failed to retrieve employees. Please try again later."
            )]
        except Exception:
            logger.exception("Unexpected error retrieving all employees")
            return [EmployeeOutcome.error(OutcomeStatus.SYSTEM_ERROR, None, UNEXPECTED_ERROR_MESSAGE)]
