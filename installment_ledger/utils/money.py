"""Decimal helpers for currency amounts"""

from decimal import Decimal, InvalidOperation, ROUND_HALF_UP

CENT = Decimal("0.01")
ZERO = Decimal("0.00")


def to_decimal(value: int | float | str | Decimal) -> Decimal:
    """
    Coerce a numeric value to a finite Decimal.

    Floats go through str() so 0.1 becomes Decimal("0.1"), not its binary
    expansion. Raises ValueError for NaN, infinity or unparseable input.
    """
    if isinstance(value, bool):
        raise ValueError("Boolean is not a valid amount")
    if isinstance(value, Decimal):
        result = value
    elif isinstance(value, (int, float)):
        result = Decimal(str(value))
    elif isinstance(value, str):
        try:
            result = Decimal(value.strip())
        except InvalidOperation as e:
            raise ValueError(f"Invalid amount {value!r}") from e
    else:
        raise ValueError(f"Unsupported amount type {type(value).__name__}")

    if not result.is_finite():
        raise ValueError(f"Amount must be finite, got {value!r}")
    return result


def round2(value: Decimal) -> Decimal:
    """Round half-up to cents"""
    return value.quantize(CENT, rounding=ROUND_HALF_UP)
