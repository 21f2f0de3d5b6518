"""Quotation price arithmetic.

Totals are computed in Decimal and rounded half-up to cents so the service
and the client agree on the figure a supplier sees before submitting.
"""

from decimal import ROUND_HALF_UP, Decimal

CENTS = Decimal("0.01")


def to_decimal(value) -> Decimal:
    if value is None:
        return Decimal("0")
    if isinstance(value, Decimal):
        return value
    return Decimal(str(value))


def round_money(value) -> Decimal:
    return to_decimal(value).quantize(CENTS, rounding=ROUND_HALF_UP)


def billable_quantity(moq: int | None, required_qty: int | None = None) -> int:
    """Units a quotation is priced for: the larger of moq and the buyer's quantity."""
    return max(moq or 0, required_qty or 0)


def compute_total_price(price_per_unit, moq: int | None, required_qty: int | None = None) -> Decimal:
    """price_per_unit × max(moq, required_qty), in cents.

    >>> compute_total_price(12.50, 100)
    Decimal('1250.00')
    """
    return round_money(to_decimal(price_per_unit) * billable_quantity(moq, required_qty))
