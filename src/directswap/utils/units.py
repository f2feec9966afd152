"""Fixed-point conversion between human amounts and integer token units.

Amounts are truncated toward zero when scaled, so a scaled amount never
exceeds the human amount it came from.
"""

from decimal import ROUND_DOWN, Decimal, InvalidOperation, localcontext
from typing import Union

from directswap.errors import InvalidSwapParameters

Number = Union[Decimal, int, float, str]

# uint256 needs 78 significant digits
_PRECISION = 80


def to_decimal(value: Number) -> Decimal:
    """Convert a JSON/config number to Decimal without binary float noise."""
    if isinstance(value, Decimal):
        return value
    if isinstance(value, bool):
        raise InvalidSwapParameters(f"Not a number: {value!r}")
    if isinstance(value, float):
        value = repr(value)
    try:
        result = Decimal(value)
    except (InvalidOperation, TypeError, ValueError) as e:
        raise InvalidSwapParameters(f"Not a number: {value!r}", cause=e) from e
    if not result.is_finite():
        raise InvalidSwapParameters(f"Not a finite number: {value!r}")
    return result


def to_fixed_point(amount: Number, decimals: int) -> int:
    """Scale a human amount to integer units at the given precision.

    Example:
        to_fixed_point(Decimal("0.09405"), 8) -> 9405000
    """
    if decimals < 0:
        raise InvalidSwapParameters(f"Precision must be >= 0, got {decimals}")

    with localcontext() as ctx:
        ctx.prec = _PRECISION
        scaled = to_decimal(amount).scaleb(decimals)
        return int(scaled.to_integral_value(rounding=ROUND_DOWN))


def from_fixed_point(units: int, decimals: int) -> Decimal:
    """Inverse of to_fixed_point for integer units."""
    if decimals < 0:
        raise InvalidSwapParameters(f"Precision must be >= 0, got {decimals}")

    with localcontext() as ctx:
        ctx.prec = _PRECISION
        return Decimal(int(units)).scaleb(-decimals)
