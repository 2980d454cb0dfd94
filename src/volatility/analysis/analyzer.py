"""Per-symbol analysis: annotated price series plus one summary row.

Example usage::

    from volatility.analysis import SymbolAnalyzer
    from volatility.types import AnalysisConfig, AnalysisMode, SymbolInfo

    analyzer = SymbolAnalyzer(AnalysisConfig(mode=AnalysisMode.MOVING_AVERAGE))
    result = analyzer.analyze(SymbolInfo(asset="BTC", currency="USDT"), prices)
    if result is not None:
        print(result.summary.to_line())
"""

from __future__ import annotations

from itertools import islice
from pathlib import Path
from typing import Callable

from loguru import logger

from volatility.data.prices import read_prices, write_lines
from volatility.indicators import (DeviationTracker, DirectionTracker,
                                   dispersion, moving_average,
                                   volatility_score)
from volatility.types import (AnalysisConfig, AnalysisMode, AnalysisRecord,
                              AnalysisResult, DateRange, SummaryRow,
                              SymbolInfo, SymbolTask)

_Computation = Callable[[list[float]], tuple[list[AnalysisRecord], tuple[float, ...]]]


class SymbolAnalyzer:
    """Compute the indicators of one analysis mode for a symbol's price series.

    A series is analyzed only when it is longer than the moving-average window
    and, if a date range is known, holds at least ``coverage_threshold`` of the
    minutes in that range. Anything else is skipped silently.

    :param config: Analysis configuration.
    :param date_range: Range the price files should cover, for the coverage gate.
    """

    def __init__(
        self,
        config: AnalysisConfig | None = None,
        date_range: DateRange | None = None,
    ) -> None:
        self.config = config or AnalysisConfig()
        self.date_range = date_range
        self._computations: dict[AnalysisMode, _Computation] = {
            AnalysisMode.MOVING_AVERAGE: self._moving_average,
            AnalysisMode.OSCILLATION: self._oscillation,
            AnalysisMode.PERCENT_DIFF: self._percent_diff,
        }

    @property
    def min_samples(self) -> float:
        """Smallest series length accepted by the coverage gate."""
        if self.date_range is None:
            return 0.0
        return self.date_range.minutes * self.config.coverage_threshold

    def is_analyzable(self, prices: list[float]) -> bool:
        return len(prices) > self.config.window and len(prices) >= self.min_samples

    def artifact_path(self, path: Path) -> Path:
        """Annotated output location: the input path with its extension replaced."""
        return path.with_suffix(self.config.output_suffix)

    def analyze(self, symbol: SymbolInfo, prices: list[float]) -> AnalysisResult | None:
        """Analyze a loaded price series.

        :param symbol: Symbol the prices belong to.
        :param prices: Chronological minute prices.
        :returns: The annotated records and summary row, or None if the series
            fails the data-quality gate.
        :raises InsufficientSamplesError: If the moving-average mode leaves fewer
            than two points to summarize.
        """
        if not self.is_analyzable(prices):
            logger.bind(symbol=str(symbol)).debug(
                "Skipping {}: {} prices (window {}, minimum {:.0f})",
                symbol,
                len(prices),
                self.config.window,
                self.min_samples,
            )
            return None

        records, values = self._computations[self.config.mode](prices)
        summary = SummaryRow(asset=symbol.asset, currency=symbol.currency, values=values)
        return AnalysisResult(
            symbol=symbol,
            mode=self.config.mode,
            summary=summary,
            records=records,
        )

    def analyze_file(self, task: SymbolTask) -> AnalysisResult | None:
        """Read, analyze and write the annotated artifact for one task.

        The artifact is rewritten from scratch on every run. Skipped symbols get
        no artifact.

        :raises PriceParseError: If the price file holds a malformed line.
        :raises StorageError: If the artifact cannot be written.
        :raises OSError: If the price file cannot be read.
        """
        prices = read_prices(task.path)
        result = self.analyze(task.symbol, prices)
        if result is None:
            return None

        result.artifact_path = write_lines(
            self.artifact_path(task.path),
            (record.to_line() for record in result.records),
        )
        return result

    def _moving_average(
        self, prices: list[float]
    ) -> tuple[list[AnalysisRecord], tuple[float, ...]]:
        # Prices advanced by half a window are zipped against averages that
        # start one full window in.
        deviation = DeviationTracker()
        records = []
        for price, average in zip(
            islice(prices, self.config.half_window, None),
            moving_average(prices, self.config.window),
        ):
            perc, jump = deviation.observe(average, price)
            records.append(AnalysisRecord(price, (average, perc, jump)))

        perc_stat = dispersion(r.indicators[1] for r in records)
        jump_stat = dispersion(r.indicators[2] for r in records)
        return records, (perc_stat.stddev, perc_stat.mean, jump_stat.stddev, jump_stat.mean)

    def _oscillation(
        self, prices: list[float]
    ) -> tuple[list[AnalysisRecord], tuple[float, ...]]:
        tracker = DirectionTracker()
        records = []
        for price in prices:
            tracker.observe(price)
            records.append(AnalysisRecord(price, (float(tracker.changes),)))
        return records, (float(tracker.changes), prices[-1])

    def _percent_diff(
        self, prices: list[float]
    ) -> tuple[list[AnalysisRecord], tuple[float, ...]]:
        tracker = DirectionTracker()
        total = 0.0
        records = []
        for price in prices:
            change = tracker.observe(price)
            if change is not None:
                total += change.percentage
            records.append(AnalysisRecord(price, (total,)))

        score = volatility_score(total, tracker.changes, prices[-1])
        return records, (total, float(tracker.changes), score)
