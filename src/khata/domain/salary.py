"""Salary payments and the remaining-salary calculation."""

import calendar
import logging
from datetime import date
from decimal import Decimal
from typing import Iterable, Optional

from dateutil.relativedelta import relativedelta

from khata.database.base import Database
from khata.domain import errors
from khata.domain.employee import EmployeeService
from khata.domain.entities import Employee, Salary
from khata.domain.errors import ValidationError

logger = logging.getLogger(__name__)


def _day_in_month(month_start: date, day: int) -> date:
    last_day = calendar.monthrange(month_start.year, month_start.month)[1]
    return month_start.replace(day=min(day, last_day))


def current_pay_period(employee: Employee, today: date) -> Optional[tuple[date, date]]:
    """Return the ``(start, end)`` window of the pay period anchored on ``today``'s month.

    The period starts on ``salary_period_start`` of the current month. When
    ``salary_period_end`` is earlier than the start day the period ends in the
    following month. Days beyond a month's length clamp to its last day.
    Returns None when the employee has no period configured.
    """
    if employee.salary_period_start is None or employee.salary_period_end is None:
        return None

    this_month = today.replace(day=1)
    start = _day_in_month(this_month, employee.salary_period_start)
    if employee.salary_period_end < employee.salary_period_start:
        end = _day_in_month(this_month + relativedelta(months=1), employee.salary_period_end)
    else:
        end = _day_in_month(this_month, employee.salary_period_end)
    return start, end


def remaining_salary(employee: Employee, salary_history: Iterable[Salary], today: date) -> Decimal:
    """Unpaid salary for the employee's current pay period, never negative."""
    if employee.basic_salary is None:
        return Decimal("0")

    period = current_pay_period(employee, today)
    if period is None:
        return employee.basic_salary

    start, end = period
    paid = sum(
        (
            s.amount
            for s in salary_history
            if s.employee_name == employee.name and start <= s.date <= end
        ),
        Decimal("0"),
    )
    return max(Decimal("0"), employee.basic_salary - paid)


class SalaryService:
    """Service for paying salaries and reporting what is still due."""

    def __init__(self, db: Database):
        """Initialize salary service.

        Args:
            db: Database instance
        """
        self.db = db
        self.employees = EmployeeService(db)

    def pay_salary(
        self,
        employee_name: str,
        amount: Decimal,
        date: date,
        comment: Optional[str] = None,
    ) -> int:
        """Record a salary payment.

        Args:
            employee_name: Name of the employee being paid
            amount: Amount paid
            date: Payment date
            comment: Optional note

        Returns:
            Salary record ID

        Raises:
            ValidationError: If a field is missing or the amount is not positive
            NotFoundError: If the employee doesn't exist
        """
        missing = [
            label
            for label, value in (("employee", employee_name), ("amount", amount), ("date", date))
            if value in (None, "")
        ]
        if missing:
            raise ValidationError(errors.missing_fields("pay salary", missing))
        if amount <= 0:
            raise ValidationError(errors.non_positive_amount("Salary amount", amount))

        employee = self.employees.require_employee(employee_name)
        if date > date_today():
            logger.warning(errors.future_salary_note(employee.name, date))

        with self.db.atomic("record salary"):
            salary_id = self.db.create_salary(
                employee_name=employee.name, amount=amount, date=date, comment=comment
            )
        logger.info("Paid salary %s to %s on %s", amount, employee.name, date)
        return salary_id

    def salary_history(self, employee_name: Optional[str] = None) -> list[Salary]:
        """List salary payments newest first, optionally for one employee."""
        if employee_name is not None:
            self.employees.require_employee(employee_name)
        salaries = self.db.list_salaries(employee_name=employee_name)
        return sorted(salaries, key=lambda s: (s.date, s.id), reverse=True)

    def remaining_salary(self, employee_name: str, today: Optional[date] = None) -> Decimal:
        """Salary still owed to an employee for the current pay period.

        Args:
            employee_name: Employee name
            today: Reference date, defaults to the current date

        Raises:
            NotFoundError: If the employee doesn't exist
        """
        employee = self.employees.require_employee(employee_name)
        if today is None:
            today = date_today()
        return remaining_salary(employee, self.db.list_salaries(employee_name=employee.name), today)


def date_today() -> date:
    """Current date; a seam for tests that need a fixed clock."""
    return date.today()
