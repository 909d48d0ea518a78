"""
Money helpers

Amounts are carried as Decimal end to end. Quantities and rates are stored
with two decimal places; ticket totals keep the full product (four places)
and only aggregate figures shown on a document are rounded to cents.
"""

from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
from typing import Optional, Union

CENTS = Decimal("0.01")
ZERO = Decimal("0")
# Largest value a Numeric(10, 2) quantity or rate column holds.
MAX_AMOUNT = Decimal("99999999.99")

Number = Union[Decimal, int, float, str]


def to_decimal(value: Optional[Number], default: Decimal = ZERO) -> Decimal:
    """
    Convert a stored or user supplied number to Decimal.

    Floats go through str() so 0.1 becomes Decimal("0.1") and not its
    binary approximation.

    Example:
        >>> to_decimal("250.50")
        Decimal('250.50')
        >>> to_decimal(None)
        Decimal('0')
    """
    if value is None:
        return default
    if isinstance(value, Decimal):
        return value
    try:
        return Decimal(str(value))
    except (InvalidOperation, ValueError):
        raise ValueError(f"Not a number: {value!r}")


def quantize_cents(value: Decimal) -> Decimal:
    """
    Round to two decimal places, half up.

    Example:
        >>> quantize_cents(Decimal("17.525"))
        Decimal('17.53')
    """
    return value.quantize(CENTS, rounding=ROUND_HALF_UP)
