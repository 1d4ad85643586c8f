"""Decimal arithmetic for prices.

Amounts are stored as floats on aggregates; every calculation goes through
``Decimal`` and rounds half-up to cents before being stored again.
"""

from decimal import ROUND_HALF_UP, Decimal

CENTS = Decimal("0.01")
HUNDRED = Decimal("100")
ZERO = Decimal("0")


def to_decimal(value) -> Decimal:
    if isinstance(value, Decimal):
        return value
    # Go through str so 9.5 becomes Decimal("9.5"), not its binary expansion
    return Decimal(str(value))


def quantize(value) -> Decimal:
    return to_decimal(value).quantize(CENTS, rounding=ROUND_HALF_UP)


def as_amount(value) -> float:
    """Round to cents and return the float stored on aggregates."""
    return float(quantize(value))


def line_total(unit_price, quantity: int) -> Decimal:
    return quantize(to_decimal(unit_price) * quantity)


def sum_amounts(amounts) -> Decimal:
    return quantize(sum((to_decimal(a) for a in amounts), ZERO))


def increase_by_percentage(amount, percentage) -> Decimal:
    factor = HUNDRED + to_decimal(percentage)
    return quantize(to_decimal(amount) * factor / HUNDRED)


def decrease_by_percentage(amount, percentage) -> Decimal:
    """Reduce ``amount`` by ``percentage`` percent, never below zero."""
    factor = HUNDRED - to_decimal(percentage)
    result = quantize(to_decimal(amount) * factor / HUNDRED)
    return max(result, ZERO)
