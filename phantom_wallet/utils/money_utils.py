"""Decimal rounding helpers for currency amounts"""

from decimal import Decimal, ROUND_DOWN, ROUND_FLOOR, ROUND_HALF_UP

CENT = Decimal("0.01")
UNIT = Decimal("1")


def to_money(value) -> Decimal:
    """Coerce to Decimal at the 0.01 granularity (half-up)"""
    return Decimal(str(value)).quantize(CENT, rounding=ROUND_HALF_UP)


def round_whole(value: Decimal) -> Decimal:
    """Nearest whole currency unit, halves rounding up"""
    return value.quantize(UNIT, rounding=ROUND_HALF_UP)


def floor_whole(value: Decimal) -> int:
    return int(value.to_integral_value(rounding=ROUND_FLOOR))


def floor_cent(value: Decimal) -> Decimal:
    return value.quantize(CENT, rounding=ROUND_DOWN)
