"""Transaction domain service.

Command handlers for purchases, payments and returns, plus the balance views
built on top of them. Every handler validates and applies the ledger policy
before writing. A non-cash payment is written together with its bank
deduction record and the bank balance change in one unit of work.
"""

import logging
from datetime import date
from decimal import Decimal
from typing import Any, Optional

from khata.database.base import Database
from khata.domain import errors
from khata.domain.balance import (
    build_party_ledger,
    compute_party_balances,
    compute_running_balances,
    compute_total_owed,
)
from khata.domain.entities import (
    BankDepositRecord,
    PartyLedgerRow,
    Payment,
    PaymentMethod,
    Purchase,
    Return,
    Transaction,
    TransactionKind,
)
from khata.domain.errors import BusinessRuleError, NotFoundError, ValidationError
from khata.domain.gst import compute_gst
from khata.domain.party import PartyService
from khata.domain.policy import LedgerPolicy
from khata.domain.records import parse_payment_method, require_paise

logger = logging.getLogger(__name__)

_EDITABLE_FIELDS = {
    TransactionKind.PURCHASE: {"party", "date", "base_amount", "has_gst", "bill_number", "comment"},
    TransactionKind.PAYMENT: {"party", "date", "amount", "method", "check_number", "comment"},
    TransactionKind.RETURN: {"party", "date", "amount", "bill_number", "comment"},
}


def _require(action: str, **fields: Any) -> None:
    missing = [
        name.replace("_", " ")
        for name, value in fields.items()
        if value is None or (isinstance(value, str) and not value.strip())
    ]
    if missing:
        raise ValidationError(errors.missing_fields(action, missing))


def _require_positive(label: str, amount: Decimal) -> None:
    if amount <= 0:
        raise ValidationError(errors.non_positive_amount(label, amount))
    require_paise(label, amount)


def _clean_text(value: Optional[str]) -> Optional[str]:
    if value is None:
        return None
    value = value.strip()
    return value or None


def _bank_effect(payment: Payment) -> Decimal:
    """Change a payment makes to the bank balance."""
    if payment.method.is_non_cash:
        return -payment.amount
    return Decimal("0")


def find_payment_deduction(
    payment: Payment, deposits: list[BankDepositRecord]
) -> Optional[BankDepositRecord]:
    """Locate the deduction record paired with a payment.

    Records created here carry a ``payment_id`` link. Older records have no
    link and are matched on amount, party and date instead.
    """
    for record in deposits:
        if record.is_payment_deduction and record.payment_id == payment.id:
            return record
    for record in deposits:
        if (
            record.is_payment_deduction
            and record.payment_id is None
            and record.amount == -payment.amount
            and record.party == payment.party
            and record.date == payment.date
        ):
            return record
    return None


class TransactionService:
    """Service for recording party transactions and reading balances."""

    def __init__(self, db: Database, policy: Optional[LedgerPolicy] = None):
        """Initialize transaction service.

        Args:
            db: Database instance
            policy: Ledger guards to apply; defaults to every guard enabled
        """
        self.db = db
        self.policy = policy if policy is not None else LedgerPolicy()
        self.parties = PartyService(db)

    # Command handlers
    def add_purchase(
        self,
        party: str,
        base_amount: Decimal,
        bill_number: str,
        date: date,
        has_gst: bool = True,
        comment: Optional[str] = None,
    ) -> int:
        """Record a purchase from a party.

        The GST and the final amount are derived from the base amount.

        Args:
            party: Party business name
            base_amount: Pre-tax amount
            bill_number: Supplier bill number
            date: Purchase date
            has_gst: Whether 5% GST applies
            comment: Optional note

        Returns:
            Transaction ID

        Raises:
            ValidationError: If a field is missing or the base amount is not positive
            NotFoundError: If the party doesn't exist
        """
        _require("add purchase", party=party, base_amount=base_amount, bill_number=bill_number, date=date)
        _require_positive("Purchase amount", base_amount)
        self.parties.require_party(party)

        gst_amount, amount = compute_gst(base_amount, has_gst)
        with self.db.atomic("record purchase"):
            transaction_id = self.db.create_purchase(
                party=party,
                date=date,
                base_amount=base_amount,
                gst_amount=gst_amount,
                amount=amount,
                has_gst=has_gst,
                bill_number=bill_number.strip(),
                comment=_clean_text(comment),
            )
        logger.info("Recorded purchase %s from %s: %s (GST %s)", transaction_id, party, amount, gst_amount)
        return transaction_id

    def add_payment(
        self,
        party: str,
        amount: Decimal,
        method: PaymentMethod | str,
        date: date,
        check_number: Optional[str] = None,
        comment: Optional[str] = None,
    ) -> int:
        """Record a payment to a party.

        Non-cash payments (NEFT, Check) also take the amount out of the bank
        balance and leave a deduction record in the bank log.

        Args:
            party: Party business name
            amount: Amount paid
            method: Cash, NEFT or Check
            date: Payment date
            check_number: Check number, only for Check payments
            comment: Optional note

        Returns:
            Transaction ID

        Raises:
            ValidationError: If a field is missing or invalid
            NotFoundError: If the party doesn't exist
            BusinessRuleError: If the payment breaks an enabled ledger guard
        """
        _require("add payment", party=party, amount=amount, method=method, date=date)
        _require_positive("Payment amount", amount)
        method = parse_payment_method(method)
        check_number = self._check_number_for(method, check_number)
        self.parties.require_party(party)

        self._guard_payment(party, amount, owed=self.total_owed(party))
        if method.is_non_cash:
            self._guard_bank_outflow(amount)

        with self.db.atomic("record payment"):
            transaction_id = self.db.create_payment(
                party=party,
                date=date,
                amount=amount,
                method=method,
                check_number=check_number,
                comment=_clean_text(comment),
            )
            if method.is_non_cash:
                self.db.create_bank_deposit(
                    amount=-amount,
                    date=date,
                    party=party,
                    is_payment_deduction=True,
                    payment_id=transaction_id,
                )
                self.db.adjust_bank_balance(-amount)
        logger.info("Recorded %s payment %s to %s: %s", method.value, transaction_id, party, amount)
        return transaction_id

    def add_return(
        self,
        party: str,
        amount: Decimal,
        date: date,
        comment: str,
        bill_number: Optional[str] = None,
    ) -> int:
        """Record goods returned to a party.

        Args:
            party: Party business name
            amount: Value of the returned goods
            date: Return date
            comment: Reason for the return (required)
            bill_number: Optional bill the return relates to

        Returns:
            Transaction ID

        Raises:
            ValidationError: If a field is missing, the amount is not positive or
                the comment is blank
            NotFoundError: If the party doesn't exist
        """
        _require("add return", party=party, amount=amount, date=date, comment=comment)
        _require_positive("Return amount", amount)
        self.parties.require_party(party)

        with self.db.atomic("record return"):
            transaction_id = self.db.create_return(
                party=party,
                date=date,
                amount=amount,
                comment=comment.strip(),
                bill_number=_clean_text(bill_number),
            )
        logger.info("Recorded return %s to %s: %s", transaction_id, party, amount)
        return transaction_id

    def delete_transaction(self, transaction_id: int) -> None:
        """Delete a transaction.

        Deleting a non-cash payment puts its amount back into the bank balance
        and removes the paired deduction record.

        Raises:
            NotFoundError: If the transaction doesn't exist
        """
        txn = self.require_transaction(transaction_id)

        with self.db.atomic("delete transaction"):
            self.db.delete_transaction(transaction_id)
            if isinstance(txn, Payment) and txn.method.is_non_cash:
                deduction = find_payment_deduction(txn, self.db.list_bank_deposits())
                if deduction is not None:
                    self.db.delete_bank_deposit(deduction.id)
                else:
                    logger.warning("No bank deduction record found for payment %s", transaction_id)
                self.db.adjust_bank_balance(txn.amount)
        logger.info("Deleted %s %s for %s", txn.kind.value, transaction_id, txn.party)

    def edit_transaction(self, transaction_id: int, **changes: Any) -> Transaction:
        """Edit a transaction and return the updated entity.

        Purchases accept ``base_amount`` and ``has_gst`` but never ``amount`` or
        ``gst_amount``, which are always re-derived. Editing a payment moves the
        bank balance by the difference between the old and new bank effect
        and keeps the deduction record in step.

        Raises:
            NotFoundError: If the transaction or a new party doesn't exist
            ValidationError: If a field is not editable or a new value is invalid
            BusinessRuleError: If an edited payment breaks an enabled ledger guard
        """
        txn = self.require_transaction(transaction_id)
        allowed = _EDITABLE_FIELDS[txn.kind]
        unknown = sorted(set(changes) - allowed)
        if unknown:
            raise ValidationError(
                f"Cannot edit {', '.join(unknown)} on a {txn.kind.value}; "
                f"editable fields: {', '.join(sorted(allowed))}"
            )

        party = changes.get("party", txn.party)
        if party != txn.party:
            _require("edit transaction", party=party)
            self.parties.require_party(party)
        if "date" in changes:
            _require("edit transaction", date=changes["date"])

        if isinstance(txn, Purchase):
            self._edit_purchase(txn, party, changes)
        elif isinstance(txn, Payment):
            self._edit_payment(txn, party, changes)
        elif isinstance(txn, Return):
            self._edit_return(txn, party, changes)
        else:
            raise TypeError(f"Unsupported transaction type: {type(txn).__name__}")

        logger.info("Edited %s %s (%s)", txn.kind.value, transaction_id, ", ".join(sorted(changes)))
        return self.require_transaction(transaction_id)

    def _edit_purchase(self, txn: Purchase, party: str, changes: dict[str, Any]) -> None:
        base_amount = changes.get("base_amount", txn.base_amount)
        has_gst = changes.get("has_gst", txn.has_gst)
        bill_number = changes.get("bill_number", txn.bill_number)
        _require("edit purchase", base_amount=base_amount, bill_number=bill_number)
        _require_positive("Purchase amount", base_amount)

        gst_amount, amount = compute_gst(base_amount, has_gst)
        with self.db.atomic("edit purchase"):
            self.db.update_transaction(
                txn.id,
                party=party,
                date=changes.get("date", txn.date),
                base_amount=base_amount,
                has_gst=has_gst,
                gst_amount=gst_amount,
                amount=amount,
                bill_number=bill_number.strip(),
                comment=_clean_text(changes.get("comment", txn.comment)),
            )

    def _edit_return(self, txn: Return, party: str, changes: dict[str, Any]) -> None:
        amount = changes.get("amount", txn.amount)
        comment = changes.get("comment", txn.comment)
        _require("edit return", amount=amount, comment=comment)
        _require_positive("Return amount", amount)

        with self.db.atomic("edit return"):
            self.db.update_transaction(
                txn.id,
                party=party,
                date=changes.get("date", txn.date),
                amount=amount,
                comment=comment.strip(),
                bill_number=_clean_text(changes.get("bill_number", txn.bill_number)),
            )

    def _edit_payment(self, txn: Payment, party: str, changes: dict[str, Any]) -> None:
        amount = changes.get("amount", txn.amount)
        _require("edit payment", amount=amount)
        _require_positive("Payment amount", amount)
        method = parse_payment_method(changes.get("method", txn.method))
        check_number = changes.get("check_number", txn.check_number if method is PaymentMethod.CHECK else None)
        check_number = self._check_number_for(method, check_number)
        payment_date = changes.get("date", txn.date)

        owed_without = compute_total_owed(
            (t for t in self.db.list_transactions(party=party) if t.id != txn.id), party
        )
        self._guard_payment(party, amount, owed=owed_without)

        updated = Payment(
            id=txn.id,
            party=party,
            date=payment_date,
            amount=amount,
            method=method,
            check_number=check_number,
            comment=_clean_text(changes.get("comment", txn.comment)),
        )
        delta = _bank_effect(updated) - _bank_effect(txn)
        if delta < 0:
            self._guard_bank_outflow(-delta)

        with self.db.atomic("edit payment"):
            self.db.update_transaction(
                txn.id,
                party=updated.party,
                date=updated.date,
                amount=updated.amount,
                method=updated.method,
                check_number=updated.check_number,
                comment=updated.comment,
            )
            self._sync_deduction(txn, updated)
            if delta:
                self.db.adjust_bank_balance(delta)

    def _sync_deduction(self, old: Payment, new: Payment) -> None:
        deduction = None
        if old.method.is_non_cash:
            deduction = find_payment_deduction(old, self.db.list_bank_deposits())

        if not new.method.is_non_cash:
            if deduction is not None:
                self.db.delete_bank_deposit(deduction.id)
            return

        if deduction is None:
            self.db.create_bank_deposit(
                amount=-new.amount,
                date=new.date,
                party=new.party,
                is_payment_deduction=True,
                payment_id=new.id,
            )
        else:
            self.db.update_bank_deposit(
                deduction.id,
                amount=-new.amount,
                date=new.date,
                party=new.party,
                payment_id=new.id,
            )

    # Guards
    @staticmethod
    def _check_number_for(method: PaymentMethod, check_number: Optional[str]) -> Optional[str]:
        check_number = _clean_text(check_number)
        if check_number is not None and method is not PaymentMethod.CHECK:
            raise ValidationError("A check number can only be given for Check payments")
        return check_number

    def _guard_payment(self, party: str, amount: Decimal, owed: Decimal) -> None:
        if not self.policy.enforce_overpayment_guard:
            return
        if owed <= 0:
            logger.warning("Rejected payment of %s to %s: nothing owed", amount, party)
            raise BusinessRuleError(errors.nothing_owed(party, owed))
        if amount > owed:
            logger.warning("Rejected payment of %s to %s: only %s owed", amount, party, owed)
            raise BusinessRuleError(errors.overpayment(party, amount, owed))

    def _guard_bank_outflow(self, amount: Decimal) -> None:
        if not self.policy.enforce_bank_funds_guard:
            return
        balance = self.db.get_bank_balance()
        if amount > balance:
            logger.warning("Rejected bank outflow of %s: balance is %s", amount, balance)
            raise BusinessRuleError(errors.insufficient_bank_funds(amount, balance))

    # Queries
    def get_transaction(self, transaction_id: int) -> Optional[Transaction]:
        """Get transaction by ID, or None if not found."""
        return self.db.get_transaction(transaction_id)

    def require_transaction(self, transaction_id: int) -> Transaction:
        """Get transaction by ID or raise NotFoundError."""
        txn = self.db.get_transaction(transaction_id)
        if txn is None:
            raise NotFoundError(errors.transaction_not_found(transaction_id))
        return txn

    def list_transactions(
        self,
        party: Optional[str] = None,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
        kind: Optional[TransactionKind] = None,
    ) -> list[Transaction]:
        """List transactions oldest first with optional filters."""
        return self.db.list_transactions(
            party=party, start_date=start_date, end_date=end_date, kind=kind
        )

    def running_balances(self, party: Optional[str] = None) -> dict[int, Decimal]:
        """Balance after each transaction, keyed by transaction ID."""
        return compute_running_balances(self.db.list_transactions(party=party))

    def party_ledger(
        self,
        party: str,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
    ) -> list[PartyLedgerRow]:
        """Chronological ledger of one party.

        Running balances always reflect the party's full history; the date
        range only limits which rows are returned.

        Raises:
            NotFoundError: If the party doesn't exist
        """
        self.parties.require_party(party)
        rows = build_party_ledger(self.db.list_transactions(party=party), party)
        return [
            row
            for row in rows
            if (start_date is None or row.transaction.date >= start_date)
            and (end_date is None or row.transaction.date <= end_date)
        ]

    def total_owed(
        self,
        party: Optional[str] = None,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
    ) -> Decimal:
        """Net amount owed, for one party or all parties.

        With a date range this is the net movement inside the window only.
        """
        transactions = self.db.list_transactions(
            party=party, start_date=start_date, end_date=end_date
        )
        return compute_total_owed(transactions, party)

    def party_balances(self) -> dict[str, Decimal]:
        """Final balance of every party with transactions, by party name."""
        return compute_party_balances(self.db.list_transactions())
