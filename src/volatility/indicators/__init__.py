"""Streaming statistics over price series."""

from volatility.indicators.direction import (
    DirectionChange,
    DirectionTracker,
    oscillation_count,
    percentage_difference,
    percentage_difference_between,
)
from volatility.indicators.dispersion import (
    DeviationTracker,
    Dispersion,
    deviation_percent,
    dispersion,
    volatility_score,
)
from volatility.indicators.window import MovingAverageWindow, moving_average

__all__ = [
    "MovingAverageWindow",
    "moving_average",
    "DirectionChange",
    "DirectionTracker",
    "oscillation_count",
    "percentage_difference",
    "percentage_difference_between",
    "Dispersion",
    "dispersion",
    "volatility_score",
    "deviation_percent",
    "DeviationTracker",
]
