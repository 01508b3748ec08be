"""Decimal helpers shared by every calculator.

All monetary rounding goes through ``round2`` so that payroll figures and
document totals use one rule: two places, half-up.

Inputs are capped at ``MAX_AMOUNT``. A product of two capped values still
fits the default 28-digit context with cents to spare, so line and payroll
arithmetic never loses digits silently.
"""

from decimal import ROUND_HALF_UP, Decimal, InvalidOperation

from src.calculators.errors import ValidationError

CENT = Decimal("0.01")
ZERO = Decimal("0")
ONE = Decimal("1")
MAX_AMOUNT = Decimal("1E+12")


def round2(value: Decimal, field: str = "amount") -> Decimal:
    """Round to cents using ROUND_HALF_UP.

    Raises:
        ValidationError: if ``value`` has too many digits to hold cents.
    """
    try:
        return value.quantize(CENT, rounding=ROUND_HALF_UP)
    except InvalidOperation as exc:
        raise ValidationError(field, "too large to round to cents") from exc


def as_decimal(value: object, field: str) -> Decimal:
    """Return ``value`` as a finite Decimal or raise ValidationError.

    Only ``Decimal`` and ``int`` are accepted. Floats and strings are
    rejected: parsing belongs to the caller. Magnitudes above
    ``MAX_AMOUNT`` are rejected as too large.
    """
    if isinstance(value, bool):
        raise ValidationError(field, "must be a number, not a boolean")
    if isinstance(value, int):
        number = Decimal(value)
    elif not isinstance(value, Decimal):
        raise ValidationError(field, f"must be a Decimal or int, got {type(value).__name__}")
    elif not value.is_finite():
        raise ValidationError(field, "must be a finite number")
    else:
        number = value
    if abs(number) > MAX_AMOUNT:
        raise ValidationError(field, "too large")
    return number


def non_negative(value: object, field: str) -> Decimal:
    """Coerce with ``as_decimal`` and reject values below zero."""
    number = as_decimal(value, field)
    if number < 0:
        raise ValidationError(field, "must be non-negative")
    return number


def ratio(value: object, field: str) -> Decimal:
    """Coerce with ``as_decimal`` and require 0 <= value <= 1."""
    number = as_decimal(value, field)
    if number < 0 or number > 1:
        raise ValidationError(field, "must be a ratio between 0 and 1")
    return number
