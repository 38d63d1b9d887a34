"""Decimal amount helpers.

Centralized so scaling and rate arithmetic use identical precision and
truncation everywhere. Floats never enter the arithmetic.
"""

from __future__ import annotations

from decimal import ROUND_DOWN, Decimal, InvalidOperation, localcontext
from typing import Union

# minimum precision; contexts widen to fit the operands so products stay exact
PRECISION = 50

AmountLike = Union[Decimal, int, str, float]


def to_decimal(value: AmountLike) -> Decimal:
    if isinstance(value, bool):
        raise ValueError(f"not an amount: {value!r}")
    if isinstance(value, float):
        value = str(value)
    try:
        result = Decimal(value)
    except (InvalidOperation, TypeError) as e:
        raise ValueError(f"not an amount: {value!r}") from e
    if not result.is_finite():
        raise ValueError(f"amount must be finite: {value!r}")
    return result


def scale_amount(amount: AmountLike, scale: int) -> str:
    """Return ``amount * 10**scale`` as an integer string, truncated toward zero."""
    if scale < 0:
        raise ValueError("scale must be non-negative")
    value = to_decimal(amount)
    with localcontext() as ctx:
        ctx.prec = max(
            PRECISION,
            len(value.as_tuple().digits),
            value.adjusted() + scale + 2,
        )
        scaled = value.scaleb(scale)
        truncated = scaled.quantize(Decimal(1), rounding=ROUND_DOWN)
        # avoid rendering "-0" for tiny negative amounts
        return str(truncated) if truncated else "0"


def exchange_rate(source_amount: AmountLike, destination_amount: AmountLike) -> Decimal:
    """Source units paid per destination unit received."""
    source = to_decimal(source_amount)
    destination = to_decimal(destination_amount)
    if destination <= 0:
        raise ValueError("destination amount must be positive")
    with localcontext() as ctx:
        ctx.prec = PRECISION
        return source / destination


def convert(amount: AmountLike, rate: Decimal) -> Decimal:
    value = to_decimal(amount)
    with localcontext() as ctx:
        ctx.prec = max(
            PRECISION,
            len(value.as_tuple().digits) + len(rate.as_tuple().digits),
        )
        return value * rate
