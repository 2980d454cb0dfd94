"""Dispersion statistics and derived volatility signals."""

from __future__ import annotations

from typing import Iterable

import numpy as np
from pydantic import BaseModel

from volatility.exceptions import InsufficientSamplesError

# Deviations above this are damped by OUTLIER_DAMPING.
OUTLIER_LIMIT = 100.0
OUTLIER_DAMPING = 0.1


class Dispersion(BaseModel):
    """Mean and sample standard deviation of a series.

    :param mean: Arithmetic mean.
    :param stddev: Sample standard deviation (divisor ``n - 1``).
    :param count: Number of samples.
    """

    mean: float
    stddev: float
    count: int


def dispersion(values: Iterable[float]) -> Dispersion:
    """Two-pass mean and sample standard deviation.

    :param values: Samples.
    :returns: Dispersion of the samples.
    :raises InsufficientSamplesError: If fewer than two samples are given.
    """
    samples = np.fromiter(values, dtype=np.float64)
    if samples.size < 2:
        raise InsufficientSamplesError(
            f"Standard deviation needs at least 2 samples, got {samples.size}"
        )

    mean = float(samples.mean())
    squares = float(np.square(samples - mean).sum())
    stddev = float(np.sqrt(squares / (samples.size - 1)))
    return Dispersion(mean=mean, stddev=stddev, count=int(samples.size))


def volatility_score(percentage_diff: float, oscillations: float, last_price: float) -> float:
    """Composite ranking signal ``(percentage_diff + oscillations) / last_price``.

    Returns 0 when ``last_price`` is 0.
    """
    if last_price == 0:
        return 0.0
    return (percentage_diff + oscillations) / last_price


def deviation_percent(moving_average: float, price: float) -> float:
    """Distance of ``price`` from its moving average, in percent of the price.

    Values above 100 are multiplied by 0.1. A zero price yields 0.
    """
    perc = 0.0 if price == 0 else abs((moving_average - price) / price * 100)
    if perc > OUTLIER_LIMIT:
        perc *= OUTLIER_DAMPING
    return perc


class DeviationTracker:
    """Pointwise deviation signal plus its jump channel.

    ``observe`` returns ``(deviation, jump)`` where ``jump`` is the absolute
    change of the deviation since the previous point (the first jump is measured
    from zero).
    """

    def __init__(self) -> None:
        self.previous = 0.0

    def observe(self, moving_average: float, price: float) -> tuple[float, float]:
        perc = deviation_percent(moving_average, price)
        jump = abs(self.previous - perc)
        self.previous = perc
        return perc, jump
