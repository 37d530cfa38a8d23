"""Decimal utilities for reserving and exposure calculations.

Development factors are products of up to eight link ratios, so small
rounding errors compound. All factor arithmetic in this package runs on
``decimal.Decimal`` at full precision and is only quantized when a value is
reported.

Example:
    Convert inputs and report a factor::

        from claims_risk.decimal_utils import quantize_factor, to_decimal

        ratio = to_decimal(1350.0) / to_decimal(1000)
        print(quantize_factor(ratio))  # Decimal('1.3500')
"""

from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
from typing import Optional, Union

# Standard precision for currency amounts (2 decimal places = cents)
CURRENCY_PLACES = Decimal("0.01")

# Default reporting precision for development factors
FACTOR_PLACES = 4

ZERO = Decimal("0")
ONE = Decimal("1")

Numeric = Union[Decimal, float, int, str]


def to_decimal(value: Union[Numeric, None]) -> Decimal:
    """Convert a numeric value to Decimal.

    Floats are converted via their string representation to avoid binary
    floating point artifacts.

    Args:
        value: Numeric value to convert. None is converted to zero.

    Returns:
        Decimal representation of the value.

    Raises:
        ValueError: If a string value is not a number.

    Example:
        >>> to_decimal(1234.56)
        Decimal('1234.56')
        >>> to_decimal(None)
        Decimal('0')
    """
    if value is None:
        return ZERO
    if isinstance(value, Decimal):
        return value
    if isinstance(value, bool):
        raise ValueError(f"Cannot convert boolean {value!r} to Decimal")
    if isinstance(value, float):
        # Round to reasonable precision first to avoid artifacts like 0.1 -> 0.10000000000000001
        return Decimal(str(round(value, 10)))
    try:
        return Decimal(value)
    except InvalidOperation as exc:
        raise ValueError(f"Cannot convert {value!r} to Decimal") from exc


def quantize_factor(value: Decimal, places: int = FACTOR_PLACES) -> Decimal:
    """Quantize a development factor to reporting precision.

    Args:
        value: Factor to round.
        places: Number of decimal places to keep (at least 4 by convention).

    Returns:
        Factor rounded with ``ROUND_HALF_UP``.

    Example:
        >>> quantize_factor(Decimal("1.234567"))
        Decimal('1.2346')
    """
    return to_decimal(value).quantize(Decimal(1).scaleb(-places), rounding=ROUND_HALF_UP)


def quantize_currency(value: Numeric) -> Decimal:
    """Quantize a value to currency precision (2 decimal places).

    Args:
        value: Numeric value to quantize.

    Returns:
        Decimal rounded to cents with ``ROUND_HALF_UP``.
    """
    return to_decimal(value).quantize(CURRENCY_PLACES, rounding=ROUND_HALF_UP)


def safe_divide(numerator: Numeric, denominator: Numeric) -> Optional[Decimal]:
    """Divide two values, returning None when the denominator is zero.

    A zero denominator in a link ratio means no factor can be computed for
    that accident year; it is never imputed.

    Args:
        numerator: Value to divide.
        denominator: Value to divide by.

    Returns:
        Quotient, or None if the denominator is zero.

    Example:
        >>> safe_divide(150, 100)
        Decimal('1.5')
        >>> safe_divide(100, 0) is None
        True
    """
    denom = to_decimal(denominator)
    if denom == ZERO:
        return None
    return to_decimal(numerator) / denom
