"""Tests for amount parsing."""

from decimal import Decimal

import pytest

from khata.utils.amount_parser import parse_amount


@pytest.mark.parametrize(
    "text, expected",
    [
        ("1050", Decimal("1050")),
        ("1050.50", Decimal("1050.50")),
        ("₹1,050.50", Decimal("1050.50")),
        ("Rs. 1,05,000", Decimal("105000")),
        ("rs 500", Decimal("500")),
        ("INR 500", Decimal("500")),
        ("-75", Decimal("-75")),
    ],
)
def test_parse_amount(text, expected):
    """Test the accepted spellings of an amount."""
    assert parse_amount(text) == expected


@pytest.mark.parametrize("text", ["", "   ", "abc", "NaN", "Infinity", "100.001"])
def test_parse_amount_invalid(text):
    """Test that unparseable amounts raise ValueError."""
    with pytest.raises(ValueError):
        parse_amount(text)
