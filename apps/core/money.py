"""
Decimal helpers for currency amounts.

Amounts are rupees. Prices are whole rupees (round-half-up); order totals
keep two decimal places so client-entered paise survive unchanged.
"""

from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
from typing import Union

from apps.core.exceptions import InvalidInput

RUPEE = Decimal("1")
PAISA = Decimal("0.01")
ZERO = Decimal("0")

Number = Union[str, int, float, Decimal]


def to_decimal(value: Number, field: str = "amount", allow_negative: bool = False) -> Decimal:
    """
    Convert user input to Decimal without passing through binary floats.

    Args:
        value: Raw value (string, int, float or Decimal). None and "" mean zero.
        field: Field name used in the error message
        allow_negative: Accept values below zero

    Returns:
        Decimal value

    Raises:
        InvalidInput: If the value is not a finite number or is negative
    """
    if value is None or value == "":
        return ZERO
    if isinstance(value, bool):
        raise InvalidInput(f"{field} must be a number")

    try:
        amount = value if isinstance(value, Decimal) else Decimal(str(value).strip())
    except (InvalidOperation, ValueError):
        raise InvalidInput(f"{field} must be a number")

    if not amount.is_finite():
        raise InvalidInput(f"{field} must be a number")
    if amount < 0 and not allow_negative:
        raise InvalidInput(f"{field} cannot be negative")
    return amount


def round_rupees(amount: Decimal) -> Decimal:
    """Round half-up to the nearest whole rupee."""
    return amount.quantize(RUPEE, rounding=ROUND_HALF_UP)


def round_paise(amount: Decimal) -> Decimal:
    """Round half-up to two decimal places."""
    return amount.quantize(PAISA, rounding=ROUND_HALF_UP)
