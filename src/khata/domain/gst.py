"""GST calculation for purchases."""

from decimal import Decimal, ROUND_HALF_UP

GST_RATE = Decimal("0.05")
_WHOLE_RUPEE = Decimal("1")


def compute_gst(base_amount: Decimal, apply_gst: bool) -> tuple[Decimal, Decimal]:
    """Return ``(gst_amount, final_amount)`` for a purchase base amount.

    With GST the tax is 5% of the base and the GST-inclusive total is rounded
    half-up to whole rupees; the tax itself is left unrounded. Without GST the
    total is the base amount as given.

    The caller is responsible for rejecting non-positive base amounts.
    """
    base_amount = Decimal(base_amount)
    if not apply_gst:
        return Decimal("0"), base_amount

    gst_amount = base_amount * GST_RATE
    final_amount = (base_amount + gst_amount).quantize(_WHOLE_RUPEE, rounding=ROUND_HALF_UP)
    return gst_amount, final_amount
