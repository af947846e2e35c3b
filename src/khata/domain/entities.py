"""Domain model entities for khata.

These are pure data classes representing the bookkeeping concepts,
independent of the database schema. Purchases, payments and returns form a
closed union (``Transaction``); every consumer matches on the concrete class,
so a new transaction kind has to be handled everywhere it is introduced.
"""

from dataclasses import dataclass
from datetime import datetime, date
from decimal import Decimal
from enum import Enum
from typing import Optional, Union


class TransactionKind(str, Enum):
    """Discriminant stored alongside every party transaction."""

    PURCHASE = "purchase"
    PAYMENT = "payment"
    RETURN = "return"


class PaymentMethod(str, Enum):
    """How a payment left the business.

    Everything except cash goes through the bank account.
    """

    CASH = "Cash"
    NEFT = "NEFT"
    CHECK = "Check"

    @property
    def is_non_cash(self) -> bool:
        return self is not PaymentMethod.CASH


@dataclass(frozen=True)
class Party:
    """Vendor/customer counterparty, keyed by business name."""

    id: int
    business_name: str
    phone_number: str
    bank_account_number: str
    bank_name: str
    contact_name: str
    contact_mobile: str
    created_at: datetime


@dataclass(frozen=True)
class Purchase:
    """Goods bought from a party; increases the amount owed."""

    id: int
    party: str
    date: date
    amount: Decimal
    base_amount: Decimal
    gst_amount: Decimal
    has_gst: bool
    bill_number: str
    comment: Optional[str] = None

    kind = TransactionKind.PURCHASE


@dataclass(frozen=True)
class Payment:
    """Money paid to a party; decreases the amount owed."""

    id: int
    party: str
    date: date
    amount: Decimal
    method: PaymentMethod
    check_number: Optional[str] = None
    comment: Optional[str] = None

    kind = TransactionKind.PAYMENT


@dataclass(frozen=True)
class Return:
    """Goods sent back to a party; decreases the amount owed."""

    id: int
    party: str
    date: date
    amount: Decimal
    comment: str
    bill_number: Optional[str] = None

    kind = TransactionKind.RETURN


Transaction = Union[Purchase, Payment, Return]


@dataclass(frozen=True)
class Salary:
    """Salary paid to an employee. Kept out of party and bank ledgers."""

    id: int
    employee_name: str
    amount: Decimal
    date: date
    comment: Optional[str] = None


@dataclass(frozen=True)
class BankDepositRecord:
    """Entry in the bank deposit log.

    ``amount`` is signed: positive for money put in, negative for money taken
    out. Records flagged ``is_payment_deduction`` mirror a non-cash payment and
    are bookkeeping only; the payment itself is the ledger's source of truth.
    """

    id: int
    amount: Decimal
    date: date
    party: Optional[str] = None
    is_payment_deduction: bool = False
    payment_id: Optional[int] = None


@dataclass(frozen=True)
class Employee:
    """Employee with optional salary terms.

    The pay period recurs monthly from ``salary_period_start`` to
    ``salary_period_end`` (days of month). An end day before the start day
    means the period runs into the following month.
    """

    id: int
    name: str
    basic_salary: Optional[Decimal] = None
    salary_period_start: Optional[int] = None
    salary_period_end: Optional[int] = None
    salary_last_updated: Optional[datetime] = None


@dataclass(frozen=True)
class LedgerEntry:
    """One row of the bank cash-flow ledger."""

    date: date
    party: Optional[str]
    method: Optional[PaymentMethod]
    check_number: Optional[str]
    debit: Decimal
    credit: Decimal
    balance: Decimal


@dataclass(frozen=True)
class PartyLedgerRow:
    """A party transaction paired with the running balance after it."""

    transaction: Transaction
    balance: Decimal


@dataclass(frozen=True)
class BankReconciliation:
    """Stored bank balance compared with the balance rebuilt from history."""

    stored_balance: Decimal
    rebuilt_balance: Decimal

    @property
    def drift(self) -> Decimal:
        return self.stored_balance - self.rebuilt_balance

    @property
    def is_consistent(self) -> bool:
        return self.drift == 0
