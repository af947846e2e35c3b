"""Party balance aggregation.

All functions here are pure and operate on whatever snapshot of transactions
they are given. Ordering within a party is by date, then by transaction id;
ids are assigned in creation order, so same-day transactions keep the order in
which they were recorded.
"""

from collections import defaultdict
from decimal import Decimal
from typing import Iterable, Optional

from khata.domain.entities import (
    Purchase,
    Payment,
    Return,
    Transaction,
    PartyLedgerRow,
)


def signed_amount(transaction: Transaction) -> Decimal:
    """Contribution of a transaction to the amount owed to its party."""
    if isinstance(transaction, Purchase):
        return transaction.amount
    if isinstance(transaction, (Payment, Return)):
        return -transaction.amount
    raise TypeError(f"Unsupported transaction type: {type(transaction).__name__}")


def chronological_key(transaction: Transaction) -> tuple:
    """Sort key: date first, creation order second."""
    return (transaction.date, transaction.id)


def group_by_party(transactions: Iterable[Transaction]) -> dict[str, list[Transaction]]:
    """Partition transactions by party, each partition in chronological order."""
    partitions: dict[str, list[Transaction]] = defaultdict(list)
    for txn in transactions:
        partitions[txn.party].append(txn)
    for party_transactions in partitions.values():
        party_transactions.sort(key=chronological_key)
    return dict(partitions)


def compute_running_balances(transactions: Iterable[Transaction]) -> dict[int, Decimal]:
    """Map each transaction id to its party's balance right after it."""
    balances: dict[int, Decimal] = {}
    for party_transactions in group_by_party(transactions).values():
        balance = Decimal("0")
        for txn in party_transactions:
            balance += signed_amount(txn)
            balances[txn.id] = balance
    return balances


def build_party_ledger(transactions: Iterable[Transaction], party: str) -> list[PartyLedgerRow]:
    """Chronological ledger rows for one party with running balances."""
    rows = []
    balance = Decimal("0")
    party_transactions = group_by_party(t for t in transactions if t.party == party).get(party, [])
    for txn in party_transactions:
        balance += signed_amount(txn)
        rows.append(PartyLedgerRow(transaction=txn, balance=balance))
    return rows


def compute_total_owed(transactions: Iterable[Transaction], party: Optional[str] = None) -> Decimal:
    """Net amount owed over the given transactions.

    With ``party`` set only that party's transactions count; otherwise the sum
    runs across all parties. The result only covers the transactions passed
    in, so a date-restricted list yields the net movement in that window rather
    than a balance as of a date.
    """
    total = Decimal("0")
    for txn in transactions:
        if party is not None and txn.party != party:
            continue
        total += signed_amount(txn)
    return total


def compute_party_balances(transactions: Iterable[Transaction]) -> dict[str, Decimal]:
    """Final balance for every party that has transactions, keyed by name."""
    totals: dict[str, Decimal] = defaultdict(lambda: Decimal("0"))
    for txn in transactions:
        totals[txn.party] += signed_amount(txn)
    return dict(sorted(totals.items()))
