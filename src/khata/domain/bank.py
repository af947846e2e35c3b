"""Bank account domain service."""

import logging
from datetime import date
from decimal import Decimal
from typing import Optional

from khata.database.base import Database
from khata.domain import errors
from khata.domain.bank_ledger import build_bank_ledger, rebuild_bank_balance
from khata.domain.entities import BankReconciliation, LedgerEntry
from khata.domain.errors import BusinessRuleError, ValidationError
from khata.domain.policy import LedgerPolicy

logger = logging.getLogger(__name__)


class BankService:
    """Service for the bank balance and its cash-flow ledger."""

    def __init__(self, db: Database, policy: Optional[LedgerPolicy] = None):
        """Initialize bank service.

        Args:
            db: Database instance
            policy: Ledger guards to apply; defaults to every guard enabled
        """
        self.db = db
        self.policy = policy if policy is not None else LedgerPolicy()

    def deposit(self, amount: Decimal, date: date, party: Optional[str] = None) -> int:
        """Put money into the bank account.

        Returns:
            Bank record ID

        Raises:
            ValidationError: If the amount is not positive or the date is missing
        """
        self._validate(amount, date, "Deposit amount")
        with self.db.atomic("record deposit"):
            record_id = self.db.create_bank_deposit(amount=amount, date=date, party=party)
            balance = self.db.adjust_bank_balance(amount)
        logger.info("Deposited %s on %s; bank balance %s", amount, date, balance)
        return record_id

    def withdraw(self, amount: Decimal, date: date, party: Optional[str] = None) -> int:
        """Take money out of the bank account outside of a party payment.

        Stored as a negative manual record, so it shows as a debit in the
        ledger.

        Returns:
            Bank record ID

        Raises:
            ValidationError: If the amount is not positive or the date is missing
            BusinessRuleError: If the bank-funds guard is on and the balance is too low
        """
        self._validate(amount, date, "Withdrawal amount")
        if self.policy.enforce_bank_funds_guard:
            balance = self.db.get_bank_balance()
            if amount > balance:
                logger.warning("Rejected withdrawal of %s: balance is %s", amount, balance)
                raise BusinessRuleError(errors.insufficient_bank_funds(amount, balance))

        with self.db.atomic("record withdrawal"):
            record_id = self.db.create_bank_deposit(amount=-amount, date=date, party=party)
            balance = self.db.adjust_bank_balance(-amount)
        logger.info("Withdrew %s on %s; bank balance %s", amount, date, balance)
        return record_id

    @staticmethod
    def _validate(amount: Optional[Decimal], date: Optional[date], label: str) -> None:
        missing = [name for name, value in (("amount", amount), ("date", date)) if value is None]
        if missing:
            raise ValidationError(errors.missing_fields("update bank balance", missing))
        if amount <= 0:
            raise ValidationError(errors.non_positive_amount(label, amount))

    def get_balance(self) -> Decimal:
        """Current stored bank balance."""
        return self.db.get_bank_balance()

    def ledger(
        self,
        newest_first: bool = True,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
    ) -> list[LedgerEntry]:
        """Bank cash-flow ledger with running balances.

        Balances are accumulated over the full history; the date range only
        limits which entries are returned.
        """
        entries = build_bank_ledger(
            self.db.list_bank_deposits(), self.db.list_payments(), newest_first=newest_first
        )
        return [
            entry
            for entry in entries
            if (start_date is None or entry.date >= start_date)
            and (end_date is None or entry.date <= end_date)
        ]

    def reconcile(self) -> BankReconciliation:
        """Compare the stored balance with the balance implied by history."""
        result = BankReconciliation(
            stored_balance=self.db.get_bank_balance(),
            rebuilt_balance=rebuild_bank_balance(
                self.db.list_bank_deposits(), self.db.list_payments()
            ),
        )
        if not result.is_consistent:
            logger.warning(
                "Bank balance drift: stored %s, rebuilt %s",
                result.stored_balance,
                result.rebuilt_balance,
            )
        return result
