"""Presentation rounding for currency amounts"""

from decimal import Decimal, ROUND_HALF_UP
from typing import Sequence, TypeVar

T = TypeVar("T")


def round_currency(amount: float, places: int = 0) -> float:
    """
    Round half away from zero, the way amounts are shown on the calculator pages.

    Python's round() uses banker's rounding (round(2.5) == 2), which would make
    displayed totals disagree with hand calculations.
    """
    quantum = Decimal(1).scaleb(-places)
    return float(Decimal(repr(amount)).quantize(quantum, rounding=ROUND_HALF_UP))


def every_nth(points: Sequence[T], n: int) -> list[T]:
    """Pick the last point of every block of n (e.g. year-end points of a monthly series)"""
    return list(points[n - 1::n])
