"""Sliding-window moving average."""

from __future__ import annotations

from collections import deque
from typing import Iterable, Iterator


class MovingAverageWindow:
    """FIFO window over the last ``window`` values with an incrementally kept sum.

    The running total is updated by adding the newest value and subtracting the
    evicted one; it is never re-summed from the buffer.

    :param window: Number of samples averaged.
    """

    def __init__(self, window: int) -> None:
        if window < 1:
            raise ValueError(f"window must be >= 1, got {window}")
        self.window = window
        self._samples: deque[float] = deque()
        self._total = 0.0

    @property
    def total(self) -> float:
        return self._total

    def __len__(self) -> int:
        return len(self._samples)

    def observe(self, value: float) -> float | None:
        """Push one value; return the window average once the window has slid.

        The first ``window`` values only fill the buffer and yield None. From then
        on every value evicts the oldest one and the average of the last
        ``window`` values is returned.
        """
        self._samples.append(value)
        self._total += value

        if len(self._samples) <= self.window:
            return None

        self._total -= self._samples.popleft()
        return self._total / len(self._samples)


def moving_average(values: Iterable[float], window: int) -> Iterator[float]:
    """Lazily yield the moving averages of ``values``.

    Yields ``max(0, len(values) - window)`` items; item ``i`` is the mean of
    ``values[i + 1 : i + window + 1]``.

    :param values: Price sequence.
    :param window: Number of samples averaged.
    :raises ValueError: If window is smaller than one.
    """
    accumulator = MovingAverageWindow(window)
    return (avg for avg in map(accumulator.observe, values) if avg is not None)
