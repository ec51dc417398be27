from __future__ import annotations

from decimal import ROUND_HALF_UP, Decimal, localcontext
from typing import TypeAlias


DecimalLike: TypeAlias = Decimal | str | int | float


def as_decimal(value: DecimalLike) -> Decimal:
    """Convert supported scalar types into Decimal.

    Floats are converted via string to avoid binary precision noise.

    Args:
        value: Input value as Decimal, string, int or float.

    Returns:
        Value converted to Decimal.
    """

    if isinstance(value, Decimal):
        return value

    return Decimal(str(value))


def round_half_up(value: DecimalLike) -> int:
    """Round $value to the nearest integer, halves away from zero.

    This is the only rounding rule used for minor units: Money construction,
    exchange and parsing all go through it.

    Args:
        value: Decimal-like scalar.

    Returns:
        The rounded integer.
    """
    # Integers are exact already; quantize would fail past the context precision
    if isinstance(value, int) and not isinstance(value, bool):
        return value

    decimal_value = as_decimal(value)
    with localcontext() as ctx:
        if decimal_value.is_finite():
            ctx.prec = max(ctx.prec, decimal_value.adjusted() + 3)
        return int(decimal_value.quantize(Decimal("1"), rounding=ROUND_HALF_UP))
