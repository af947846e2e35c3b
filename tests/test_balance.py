"""Tests for party balance aggregation."""

from datetime import date
from decimal import Decimal

import pytest

from khata.domain.balance import (
    build_party_ledger,
    compute_party_balances,
    compute_running_balances,
    compute_total_owed,
    signed_amount,
)
from khata.domain.entities import Payment, PaymentMethod, Purchase, Return


def purchase(id, party, day, amount):
    return Purchase(
        id=id,
        party=party,
        date=date(2024, 1, day),
        amount=Decimal(amount),
        base_amount=Decimal(amount),
        gst_amount=Decimal("0"),
        has_gst=False,
        bill_number=f"B{id}",
    )


def payment(id, party, day, amount, method=PaymentMethod.CASH):
    return Payment(id=id, party=party, date=date(2024, 1, day), amount=Decimal(amount), method=method)


def goods_return(id, party, day, amount):
    return Return(id=id, party=party, date=date(2024, 1, day), amount=Decimal(amount), comment="Damaged")


def test_signed_amount():
    """Test the sign of each transaction kind."""
    assert signed_amount(purchase(1, "Acme", 1, "100")) == Decimal("100")
    assert signed_amount(payment(2, "Acme", 1, "40")) == Decimal("-40")
    assert signed_amount(goods_return(3, "Acme", 1, "10")) == Decimal("-10")


def test_signed_amount_rejects_unknown_type():
    """Test that anything outside the transaction union is rejected."""
    with pytest.raises(TypeError):
        signed_amount("not a transaction")


def test_running_balances_per_party():
    """Test that running balances are tracked separately for each party."""
    txns = [
        purchase(1, "Acme", 1, "1000"),
        purchase(2, "Bharat", 2, "300"),
        payment(3, "Acme", 3, "400"),
        goods_return(4, "Bharat", 4, "50"),
    ]

    balances = compute_running_balances(txns)

    assert balances == {
        1: Decimal("1000"),
        2: Decimal("300"),
        3: Decimal("600"),
        4: Decimal("250"),
    }


def test_running_balances_ignore_input_order():
    """Test that balances follow date order, not list order."""
    txns = [payment(2, "Acme", 5, "200"), purchase(1, "Acme", 1, "500")]

    balances = compute_running_balances(txns)

    assert balances[1] == Decimal("500")
    assert balances[2] == Decimal("300")


def test_same_day_transactions_keep_creation_order():
    """Test that ties on date are broken by transaction id."""
    txns = [payment(7, "Acme", 1, "100"), purchase(3, "Acme", 1, "500")]

    balances = compute_running_balances(txns)

    assert balances[3] == Decimal("500")
    assert balances[7] == Decimal("400")


def test_last_running_balance_equals_total_owed():
    """Test that the final running balance matches the total owed."""
    txns = [
        purchase(1, "Acme", 1, "1050"),
        payment(2, "Acme", 2, "500"),
        goods_return(3, "Acme", 3, "50"),
        purchase(4, "Acme", 4, "210"),
    ]

    rows = build_party_ledger(txns, "Acme")

    assert rows[-1].balance == compute_total_owed(txns, "Acme") == Decimal("710")


def test_party_ledger_filters_other_parties():
    """Test that a party ledger only contains that party's transactions."""
    txns = [purchase(1, "Acme", 1, "100"), purchase(2, "Bharat", 1, "200")]

    rows = build_party_ledger(txns, "Acme")

    assert [row.transaction.id for row in rows] == [1]


def test_party_ledger_unknown_party_is_empty():
    """Test that a party without transactions has an empty ledger."""
    assert build_party_ledger([purchase(1, "Acme", 1, "100")], "Nobody") == []


def test_total_owed_across_parties():
    """Test the total across every party."""
    txns = [
        purchase(1, "Acme", 1, "1000"),
        purchase(2, "Bharat", 1, "500"),
        payment(3, "Bharat", 2, "600"),
    ]

    assert compute_total_owed(txns) == Decimal("900")
    assert compute_total_owed(txns, "Bharat") == Decimal("-100")


def test_total_owed_of_nothing_is_zero():
    """Test the empty case."""
    assert compute_total_owed([]) == Decimal("0")


def test_party_balances_sorted_by_name():
    """Test that party balances are keyed and ordered by business name."""
    txns = [
        purchase(1, "Zenith", 1, "100"),
        purchase(2, "Acme", 1, "200"),
        payment(3, "Acme", 2, "50"),
    ]

    balances = compute_party_balances(txns)

    assert list(balances) == ["Acme", "Zenith"]
    assert balances["Acme"] == Decimal("150")
