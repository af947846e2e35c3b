"""Text formatting shared by CLI commands."""

from decimal import Decimal
from typing import Optional

from khata.domain.entities import Payment, Purchase, Return, Transaction


def money(amount: Optional[Decimal]) -> str:
    """Format a rupee amount for display."""
    if amount is None:
        return "-"
    return f"₹{amount:,.2f}"


def describe(txn: Transaction) -> str:
    """One-line detail column for a transaction."""
    if isinstance(txn, Purchase):
        gst = f"GST {money(txn.gst_amount)}" if txn.has_gst else "no GST"
        detail = f"Bill {txn.bill_number}, base {money(txn.base_amount)}, {gst}"
    elif isinstance(txn, Payment):
        detail = txn.method.value
        if txn.check_number:
            detail += f" #{txn.check_number}"
    elif isinstance(txn, Return):
        detail = txn.comment
        if txn.bill_number:
            detail = f"Bill {txn.bill_number}: {detail}"
    else:
        raise TypeError(f"Unsupported transaction type: {type(txn).__name__}")
    if txn.comment and not isinstance(txn, Return):
        detail += f" ({txn.comment})"
    return detail


TRANSACTION_HEADER = f"{'ID':<6} {'Date':<12} {'Type':<9} {'Party':<20} {'Amount':>14}  {'Details'}"


def transaction_row(txn: Transaction, balance: Optional[Decimal] = None) -> str:
    """Table row for a transaction, with an optional running balance."""
    row = (
        f"{txn.id:<6} {str(txn.date):<12} {txn.kind.value:<9} {txn.party[:20]:<20} "
        f"{money(txn.amount):>14}  {describe(txn)}"
    )
    if balance is not None:
        row += f"  | balance {money(balance)}"
    return row
