"""Bank cash-flow ledger construction."""

from decimal import Decimal
from typing import Iterable

from khata.domain.entities import BankDepositRecord, LedgerEntry, Payment

_ZERO = Decimal("0")

# Manual entries sort ahead of payments dated the same day.
_MANUAL_ORDER = 0
_PAYMENT_ORDER = 1


def _manual_entries(deposits: Iterable[BankDepositRecord]) -> list[tuple[tuple, dict]]:
    entries = []
    for record in deposits:
        if record.is_payment_deduction:
            continue
        if record.amount >= 0:
            debit, credit = _ZERO, record.amount
        else:
            debit, credit = abs(record.amount), _ZERO
        entries.append(
            (
                (record.date, _MANUAL_ORDER, record.id),
                {
                    "date": record.date,
                    "party": record.party,
                    "method": None,
                    "check_number": None,
                    "debit": debit,
                    "credit": credit,
                },
            )
        )
    return entries


def _payment_entries(payments: Iterable[Payment]) -> list[tuple[tuple, dict]]:
    entries = []
    for payment in payments:
        if not payment.method.is_non_cash:
            continue
        entries.append(
            (
                (payment.date, _PAYMENT_ORDER, payment.id),
                {
                    "date": payment.date,
                    "party": payment.party,
                    "method": payment.method,
                    "check_number": payment.check_number,
                    "debit": payment.amount,
                    "credit": _ZERO,
                },
            )
        )
    return entries


def build_bank_ledger(
    deposits: Iterable[BankDepositRecord],
    payments: Iterable[Payment],
    newest_first: bool = True,
) -> list[LedgerEntry]:
    """Merge manual bank entries and non-cash payments into one ledger.

    Deduction records mirroring payments are skipped; the payment itself is
    the single representation of that outflow. Balances accumulate oldest to
    newest, and only then is the list reversed for newest-first display.

    Args:
        deposits: Bank deposit log, including any payment-deduction records
        payments: Payments of every method; cash payments are ignored
        newest_first: Return the ledger most-recent-first

    Returns:
        List of ledger entries carrying the running balance after each one
    """
    merged = _manual_entries(deposits) + _payment_entries(payments)
    merged.sort(key=lambda item: item[0])

    ledger = []
    balance = _ZERO
    for _, fields in merged:
        balance = balance + fields["credit"] - fields["debit"]
        ledger.append(LedgerEntry(balance=balance, **fields))

    if newest_first:
        ledger.reverse()
    return ledger


def rebuild_bank_balance(
    deposits: Iterable[BankDepositRecord], payments: Iterable[Payment]
) -> Decimal:
    """Bank balance implied by history alone, for auditing the stored value."""
    total = sum(
        (record.amount for record in deposits if not record.is_payment_deduction),
        _ZERO,
    )
    total -= sum((p.amount for p in payments if p.method.is_non_cash), _ZERO)
    return total
