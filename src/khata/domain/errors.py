"""Shared domain error messages and error types."""

from datetime import date
from decimal import Decimal


class DomainError(ValueError):
    """Base class for domain-level errors.

    Subclasses provide semantic categories while preserving ValueError
    compatibility for existing error handling.
    """


class ValidationError(DomainError):
    """Invalid input or failed validation in domain logic."""


class NotFoundError(DomainError):
    """Requested party, employee or transaction does not exist."""


class ConflictError(DomainError):
    """Domain conflict, such as uniqueness violations."""


class BusinessRuleError(DomainError):
    """Input is valid but a ledger rule (overpayment, bank funds) forbids it."""


class StorageError(DomainError):
    """A read or write against the backing store failed."""


def party_not_found(name: str) -> str:
    """Return message for missing party."""
    return f"Party '{name}' not found"


def employee_not_found(name: str) -> str:
    """Return message for missing employee."""
    return f"Employee '{name}' not found"


def transaction_not_found(transaction_id: int) -> str:
    """Return message for missing transaction."""
    return f"Transaction {transaction_id} not found"


def missing_fields(action: str, fields: list[str]) -> str:
    """Return message listing required fields that were left empty."""
    return f"Cannot {action}: missing {', '.join(fields)}"


def non_positive_amount(label: str, amount: Decimal) -> str:
    """Return message for an amount that must be greater than zero."""
    return f"{label} must be greater than zero (got {amount})"


def nothing_owed(party: str, owed: Decimal) -> str:
    """Return message when a payment is attempted with no balance owed."""
    return f"Nothing is owed to '{party}' (balance {owed:,.2f}); payment rejected"


def overpayment(party: str, amount: Decimal, owed: Decimal) -> str:
    """Return message when a payment exceeds what is owed."""
    return (
        f"Payment of {amount:,.2f} exceeds the {owed:,.2f} owed to '{party}'"
    )


def insufficient_bank_funds(amount: Decimal, balance: Decimal) -> str:
    """Return message when the bank balance cannot cover an outflow."""
    return f"Not enough money in the bank: need {amount:,.2f}, have {balance:,.2f}"


def storage_failure(action: str) -> str:
    """Return the generic message shown when the store rejects a write."""
    return f"Could not {action}; the change was not saved. Please try again."


def invalid_pay_period_day(day: int) -> str:
    """Return message for a pay-period day outside 1..31."""
    return f"Pay-period day must be between 1 and 31 (got {day})"


def future_salary_note(employee: str, on: date) -> str:
    """Return message used when logging salaries dated after today."""
    return f"Salary for '{employee}' is dated in the future ({on.isoformat()})"


def too_many_decimals(label: str, amount: Decimal) -> str:
    """Return message for an amount with fractions of a paisa."""
    return f"{label} can have at most 2 decimal places (got {amount})"
