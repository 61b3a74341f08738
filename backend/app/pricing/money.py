"""Money helpers shared by the pricing engine and its callers."""

from __future__ import annotations

from decimal import Decimal, ROUND_FLOOR, ROUND_HALF_UP
from typing import Final

MONEY_PLACES: Final = Decimal("1")
ZERO: Final = Decimal("0")


def to_money(value: Decimal | int | float | str) -> Decimal:
    """Quantize a value to the currency unit (whole VND)."""
    return Decimal(value).quantize(MONEY_PLACES, rounding=ROUND_HALF_UP)


def floor_money(value: Decimal) -> Decimal:
    return value.quantize(MONEY_PLACES, rounding=ROUND_FLOOR)


def money_str(value: Decimal) -> str:
    return f"{to_money(value):f}"


def clamp_to(amount: Decimal, ceiling: Decimal) -> Decimal:
    """Bound a discount amount to ``[0, ceiling]``."""
    if ceiling < ZERO:
        ceiling = ZERO
    return max(ZERO, min(amount, ceiling))
