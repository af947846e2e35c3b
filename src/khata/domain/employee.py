"""Employee directory service."""

import logging
from datetime import datetime, UTC
from decimal import Decimal
from typing import Optional

from khata.database.base import Database
from khata.domain import errors
from khata.domain.entities import Employee as EmployeeEntity
from khata.domain.errors import ConflictError, NotFoundError, ValidationError

logger = logging.getLogger(__name__)


def validate_salary_terms(
    basic_salary: Optional[Decimal],
    salary_period_start: Optional[int],
    salary_period_end: Optional[int],
) -> None:
    """Check a basic salary and pay-period days before they are stored."""
    if basic_salary is not None and basic_salary < 0:
        raise ValidationError(f"Basic salary cannot be negative (got {basic_salary})")
    for day in (salary_period_start, salary_period_end):
        if day is not None and not 1 <= day <= 31:
            raise ValidationError(errors.invalid_pay_period_day(day))
    if (salary_period_start is None) != (salary_period_end is None):
        raise ValidationError("Pay period needs both a start day and an end day")


class EmployeeService:
    """Service for managing employees and their salary terms."""

    def __init__(self, db: Database):
        """Initialize employee service.

        Args:
            db: Database instance
        """
        self.db = db

    def create_employee(
        self,
        name: str,
        basic_salary: Optional[Decimal] = None,
        salary_period_start: Optional[int] = None,
        salary_period_end: Optional[int] = None,
    ) -> int:
        """Create an employee.

        Returns:
            Employee ID

        Raises:
            ValidationError: If the name is empty or the salary terms are invalid
            ConflictError: If an employee with this name already exists
        """
        name = (name or "").strip()
        if not name:
            raise ValidationError(errors.missing_fields("add employee", ["name"]))
        validate_salary_terms(basic_salary, salary_period_start, salary_period_end)

        if self.db.get_employee(name) is not None:
            raise ConflictError(f"Employee '{name}' already exists")

        has_terms = basic_salary is not None or salary_period_start is not None
        with self.db.atomic("add employee"):
            employee_id = self.db.create_employee(
                name=name,
                basic_salary=basic_salary,
                salary_period_start=salary_period_start,
                salary_period_end=salary_period_end,
                salary_last_updated=datetime.now(UTC) if has_terms else None,
            )
        logger.info("Created employee %s", name)
        return employee_id

    def get_employee(self, name: str) -> Optional[EmployeeEntity]:
        """Get employee by name, or None if not found."""
        return self.db.get_employee(name)

    def require_employee(self, name: str) -> EmployeeEntity:
        """Get employee by name or raise NotFoundError."""
        employee = self.db.get_employee(name)
        if employee is None:
            raise NotFoundError(errors.employee_not_found(name))
        return employee

    def list_employees(self) -> list[EmployeeEntity]:
        """List all employees ordered by name."""
        return self.db.list_employees()

    def update_salary_terms(
        self,
        name: str,
        basic_salary: Optional[Decimal],
        salary_period_start: Optional[int],
        salary_period_end: Optional[int],
    ) -> None:
        """Replace an employee's basic salary and pay period.

        Raises:
            NotFoundError: If the employee doesn't exist
            ValidationError: If the terms are invalid
        """
        self.require_employee(name)
        validate_salary_terms(basic_salary, salary_period_start, salary_period_end)

        with self.db.atomic("update salary terms"):
            self.db.update_employee_salary_terms(
                name=name,
                basic_salary=basic_salary,
                salary_period_start=salary_period_start,
                salary_period_end=salary_period_end,
                salary_last_updated=datetime.now(UTC),
            )
        logger.info("Updated salary terms for %s", name)
