"""
Module: payroll_kernel.db.types
Responsibility: Precision constants and conversion helpers for monetary and
    hour values.  Centralizes rounding so every service and the payroll
    calculator quantize identically.
Architecture position: Kernel > DB.  May be imported by models/, domain/,
    and services/.  MUST NOT import from any of those layers.

Invariants enforced:
    - No floats reach arithmetic.  to_decimal() converts via str() so that
      0.1 becomes Decimal("0.1"), not its binary expansion.
    - round_money() is the ONLY sanctioned rounding function for payouts.
"""

from decimal import ROUND_HALF_UP, Decimal, InvalidOperation

CURRENCY_DECIMAL_PLACES = 2
DEFAULT_ROUNDING = ROUND_HALF_UP


def to_decimal(value: Decimal | int | str | float) -> Decimal:
    """
    Coerce a caller-supplied number to Decimal.

    Raises:
        ValueError: If value is not a finite number.
    """
    if isinstance(value, bool):
        raise ValueError(f"Not a number: {value!r}")
    if isinstance(value, Decimal):
        result = value
    else:
        try:
            result = Decimal(str(value))
        except InvalidOperation as exc:
            raise ValueError(f"Not a number: {value!r}") from exc
    if not result.is_finite():
        raise ValueError(f"Not a finite number: {value!r}")
    return result


def round_money(
    value: Decimal,
    decimal_places: int = CURRENCY_DECIMAL_PLACES,
    rounding: str = DEFAULT_ROUNDING,
) -> Decimal:
    """
    Round a monetary value to the currency precision.

    This is the ONLY sanctioned rounding function for payroll figures.

    Example:
        round_money(Decimal("10.125")) -> Decimal("10.13")
    """
    quantizer = Decimal(10) ** -decimal_places
    return value.quantize(quantizer, rounding=rounding)
