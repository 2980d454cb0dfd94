"""Direction-reversal scans: oscillation count and percentage-difference sum.

Both statistics walk the series once and track ``sign(previous - current)``.
Equal consecutive prices are ignored completely: they neither count as a
reversal nor move the tracked price, so runs of duplicates never change either
result.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable


@dataclass(frozen=True, slots=True)
class DirectionChange:
    """A detected reversal.

    :param previous: Tracked price right before the reversal (the extreme).
    :param current: Price that reversed the direction.
    """

    previous: float
    current: float

    @property
    def percentage(self) -> float:
        return percentage_difference_between(self.previous, self.current)


def _sign(value: float) -> int:
    return (value > 0) - (value < 0)


def percentage_difference_between(a: float, b: float) -> float:
    """``|a - b|`` relative to the mean of ``a`` and ``b``, in percent.

    Returns 0 instead of dividing by zero when ``a + b == 0``.
    """
    total = a + b
    if total == 0:
        return 0.0
    return abs(a - b) / (total / 2) * 100


class DirectionTracker:
    """Single-pass state machine over price changes.

    Keeps the last non-zero sign of ``previous - current`` and the last tracked
    price. The first non-zero change only establishes a direction; every later
    non-zero change with a different sign is reported as a :class:`DirectionChange`.
    """

    def __init__(self) -> None:
        self.last_sign = 0
        self.last_price: float | None = None
        self.changes = 0

    def observe(self, price: float) -> DirectionChange | None:
        if self.last_price is None:
            self.last_price = price
            return None

        sign = _sign(self.last_price - price)
        if sign == 0:
            return None

        change = None
        if self.last_sign != 0 and sign != self.last_sign:
            change = DirectionChange(previous=self.last_price, current=price)
            self.changes += 1

        self.last_sign = sign
        self.last_price = price
        return change


def oscillation_count(values: Iterable[float]) -> int:
    """Number of direction reversals across the whole series."""
    tracker = DirectionTracker()
    for value in values:
        tracker.observe(value)
    return tracker.changes


def percentage_difference(values: Iterable[float]) -> float:
    """Sum of the percentage differences at every direction reversal."""
    tracker = DirectionTracker()
    total = 0.0
    for value in values:
        change = tracker.observe(value)
        if change is not None:
            total += change.percentage
    return total
