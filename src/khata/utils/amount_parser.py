"""Amount parsing utilities."""

import re
from decimal import Decimal, InvalidOperation


def parse_amount(amount_str: str) -> Decimal:
    """Parse a rupee amount string into a Decimal.

    Handles "1050", "1050.50", "₹1,050.50", "Rs. 1,05,000" (Indian digit
    grouping) and "INR 500". The sign is kept; callers decide whether
    negative amounts are acceptable.

    Raises:
        ValueError: If amount string cannot be parsed
    """
    if not amount_str or not amount_str.strip():
        raise ValueError("Empty amount string")

    cleaned = amount_str.strip()
    cleaned = re.sub(r"^(?:₹|rs\.?|inr)\s*", "", cleaned, flags=re.IGNORECASE)
    cleaned = cleaned.replace(",", "").replace(" ", "")

    try:
        amount = Decimal(cleaned)
    except InvalidOperation:
        raise ValueError(f"Could not parse amount '{amount_str}'")
    if not amount.is_finite():
        raise ValueError(f"Could not parse amount '{amount_str}'")
    if amount != amount.quantize(Decimal("0.01")):
        raise ValueError(f"Amount '{amount_str}' can have at most 2 decimal places")
    return amount
