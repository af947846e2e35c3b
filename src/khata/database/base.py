"""Abstract database interface."""

from abc import ABC, abstractmethod
from contextlib import AbstractContextManager
from datetime import date, datetime
from decimal import Decimal
from typing import Optional

# Import entities directly to avoid circular import through the domain services
from khata.domain.entities import (
    BankDepositRecord,
    Employee,
    Party,
    Payment,
    PaymentMethod,
    Purchase,
    Return,
    Salary,
    Transaction,
    TransactionKind,
)


class Database(ABC):
    """Abstract database interface for khata.

    Each collection (parties, employees, transactions, salaries, bank
    deposits, bank metadata) gets list/create/update/delete operations that
    return domain entities. Writes made inside ``atomic()`` are committed
    together; writes made outside it are committed immediately.
    """

    @abstractmethod
    def connect(self) -> None:
        """Connect to the database."""
        pass

    @abstractmethod
    def disconnect(self) -> None:
        """Disconnect from the database."""
        pass

    @abstractmethod
    def initialize_schema(self) -> None:
        """Initialize database schema (create tables)."""
        pass

    @abstractmethod
    def atomic(self, action: str = "save changes") -> AbstractContextManager[None]:
        """Group writes into one unit of work.

        On a storage failure the unit is rolled back and a StorageError
        naming ``action`` is raised. Nested calls join the outer unit.
        """
        pass

    # Party operations
    @abstractmethod
    def create_party(
        self,
        business_name: str,
        phone_number: str,
        bank_account_number: str,
        bank_name: str,
        contact_name: str,
        contact_mobile: str,
    ) -> int:
        """Create a party. Returns party ID."""
        pass

    @abstractmethod
    def get_party(self, business_name: str) -> Optional[Party]:
        """Get party by business name."""
        pass

    @abstractmethod
    def list_parties(self) -> list[Party]:
        """List all parties ordered by business name."""
        pass

    @abstractmethod
    def update_party(self, business_name: str, /, **changes: str) -> None:
        """Update contact/bank fields of a party."""
        pass

    # Employee operations
    @abstractmethod
    def create_employee(
        self,
        name: str,
        basic_salary: Optional[Decimal] = None,
        salary_period_start: Optional[int] = None,
        salary_period_end: Optional[int] = None,
        salary_last_updated: Optional[datetime] = None,
    ) -> int:
        """Create an employee. Returns employee ID."""
        pass

    @abstractmethod
    def get_employee(self, name: str) -> Optional[Employee]:
        """Get employee by name."""
        pass

    @abstractmethod
    def list_employees(self) -> list[Employee]:
        """List all employees ordered by name."""
        pass

    @abstractmethod
    def update_employee_salary_terms(
        self,
        name: str,
        basic_salary: Optional[Decimal],
        salary_period_start: Optional[int],
        salary_period_end: Optional[int],
        salary_last_updated: datetime,
    ) -> None:
        """Replace an employee's salary terms."""
        pass

    # Transaction operations
    @abstractmethod
    def create_purchase(
        self,
        party: str,
        date: date,
        base_amount: Decimal,
        gst_amount: Decimal,
        amount: Decimal,
        has_gst: bool,
        bill_number: str,
        comment: Optional[str] = None,
    ) -> int:
        """Create a purchase. Returns transaction ID."""
        pass

    @abstractmethod
    def create_payment(
        self,
        party: str,
        date: date,
        amount: Decimal,
        method: PaymentMethod,
        check_number: Optional[str] = None,
        comment: Optional[str] = None,
    ) -> int:
        """Create a payment. Returns transaction ID."""
        pass

    @abstractmethod
    def create_return(
        self,
        party: str,
        date: date,
        amount: Decimal,
        comment: str,
        bill_number: Optional[str] = None,
    ) -> int:
        """Create a return. Returns transaction ID."""
        pass

    @abstractmethod
    def get_transaction(self, transaction_id: int) -> Optional[Transaction]:
        """Get a purchase, payment or return by ID."""
        pass

    @abstractmethod
    def list_transactions(
        self,
        party: Optional[str] = None,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
        kind: Optional[TransactionKind] = None,
    ) -> list[Transaction]:
        """List transactions oldest first (by date, then creation order).

        Args:
            party: Optional party filter
            start_date: Optional inclusive start date
            end_date: Optional inclusive end date
            kind: Optional transaction kind filter
        """
        pass

    @abstractmethod
    def update_transaction(self, transaction_id: int, **changes) -> None:
        """Overwrite stored fields of a transaction."""
        pass

    @abstractmethod
    def delete_transaction(self, transaction_id: int) -> None:
        """Delete a transaction."""
        pass

    def list_purchases(self, party: Optional[str] = None) -> list[Purchase]:
        """List purchases oldest first."""
        return self.list_transactions(party=party, kind=TransactionKind.PURCHASE)

    def list_payments(self, party: Optional[str] = None) -> list[Payment]:
        """List payments oldest first."""
        return self.list_transactions(party=party, kind=TransactionKind.PAYMENT)

    def list_returns(self, party: Optional[str] = None) -> list[Return]:
        """List returns oldest first."""
        return self.list_transactions(party=party, kind=TransactionKind.RETURN)

    # Salary operations
    @abstractmethod
    def create_salary(
        self, employee_name: str, amount: Decimal, date: date, comment: Optional[str] = None
    ) -> int:
        """Create a salary record. Returns salary ID."""
        pass

    @abstractmethod
    def list_salaries(self, employee_name: Optional[str] = None) -> list[Salary]:
        """List salary records oldest first, optionally for one employee."""
        pass

    # Bank operations
    @abstractmethod
    def create_bank_deposit(
        self,
        amount: Decimal,
        date: date,
        party: Optional[str] = None,
        is_payment_deduction: bool = False,
        payment_id: Optional[int] = None,
    ) -> int:
        """Create a bank deposit log record. Returns record ID."""
        pass

    @abstractmethod
    def list_bank_deposits(self) -> list[BankDepositRecord]:
        """List bank deposit log records oldest first."""
        pass

    @abstractmethod
    def update_bank_deposit(self, record_id: int, **changes) -> None:
        """Overwrite stored fields of a bank deposit record."""
        pass

    @abstractmethod
    def delete_bank_deposit(self, record_id: int) -> None:
        """Delete a bank deposit log record."""
        pass

    @abstractmethod
    def get_bank_balance(self) -> Decimal:
        """Get the stored bank balance (zero when never set)."""
        pass

    @abstractmethod
    def set_bank_balance(self, balance: Decimal) -> None:
        """Overwrite the stored bank balance."""
        pass

    def adjust_bank_balance(self, delta: Decimal) -> Decimal:
        """Add ``delta`` to the stored bank balance and return the new value."""
        balance = self.get_bank_balance() + delta
        self.set_bank_balance(balance)
        return balance
