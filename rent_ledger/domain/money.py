"""Decimal helpers shared by every monetary calculation."""
from __future__ import annotations

from decimal import ROUND_HALF_UP, Context, Decimal, InvalidOperation

from .errors import InvalidInput

CENT = Decimal("0.01")
ZERO = Decimal("0")

MONEY_CONTEXT = Context(prec=28, rounding=ROUND_HALF_UP)


def to_decimal(value: object, field_name: str = "amount") -> Decimal:
    """Coerce ``value`` to ``Decimal`` without going through binary floats."""
    if isinstance(value, Decimal):
        result = value
    elif isinstance(value, bool):
        raise InvalidInput(f"{field_name} must be numeric, got {value!r}")
    elif isinstance(value, (int, float, str)):
        try:
            result = Decimal(str(value).strip())
        except InvalidOperation as exc:
            raise InvalidInput(f"{field_name} is not a number: {value!r}") from exc
    else:
        raise InvalidInput(f"{field_name} must be numeric, got {type(value).__name__}")
    if not result.is_finite():
        raise InvalidInput(f"{field_name} must be finite, got {value!r}")
    return result


def non_negative(value: object, field_name: str) -> Decimal:
    result = to_decimal(value, field_name)
    if result < ZERO:
        raise InvalidInput(f"{field_name} must not be negative, got {result}")
    return result


def round2(value: Decimal) -> Decimal:
    """Round to cents, halves away from zero.

    Amounts too large to hold in cents at 28 digits raise ``InvalidInput``.
    """
    try:
        return value.quantize(CENT, context=MONEY_CONTEXT)
    except InvalidOperation as exc:
        raise InvalidInput(f"Amount {value} is too large to round to cents") from exc
