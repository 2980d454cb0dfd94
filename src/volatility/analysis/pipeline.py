"""Bounded parallel fan-out of symbol analyses into one summary table.

Example usage::

    from volatility.analysis import BoundedParallelPipeline, SummaryWriter, SymbolAnalyzer
    from volatility.data import LocalPriceSource

    with SummaryWriter.open("BINANCE-summary.csv") as writer:
        pipeline = BoundedParallelPipeline(
            SymbolAnalyzer(config, date_range),
            writer,
            source=LocalPriceSource("data"),
            concurrency=8,
        )
        report = pipeline.run("BINANCE", symbols, date_range)

    print(f"{len(report.processed)} rows, {len(report.failed)} failures")
"""

from __future__ import annotations

from concurrent.futures import ThreadPoolExecutor, as_completed
from enum import Enum
from typing import Callable, Iterable

from loguru import logger

from volatility.analysis.analyzer import SymbolAnalyzer
from volatility.analysis.summary import SummaryWriter
from volatility.data.sources import PriceSource, resolve_price_source
from volatility.exceptions import ConfigError, VolatilityError
from volatility.types import (AnalyzeRunConfig, DateRange, PipelineReport,
                              SymbolInfo, SymbolTask)


class Outcome(str, Enum):
    """Terminal state of one symbol's task."""

    PROCESSED = "processed"
    SKIPPED = "skipped"
    FAILED = "failed"


_Job = tuple[SymbolInfo, Callable[[], SymbolTask]]


class BoundedParallelPipeline:
    """Run a :class:`SymbolAnalyzer` over many symbols with capped concurrency.

    Every task runs resolve, read, compute, write artifact, append summary row,
    in that order. Tasks are independent; the summary writer is the only shared
    state and serializes its own writes. A failing task is logged and reported
    without affecting the others.

    :param analyzer: Analyzer applied to every symbol.
    :param writer: Summary sink; its header is written before the first task.
    :param source: Price source used by :meth:`run` to obtain files.
    :param concurrency: Maximum tasks in flight (defaults to the analyzer's
        configured concurrency).
    """

    def __init__(
        self,
        analyzer: SymbolAnalyzer,
        writer: SummaryWriter,
        source: PriceSource | None = None,
        concurrency: int | None = None,
    ) -> None:
        self.analyzer = analyzer
        self.writer = writer
        self.source = source
        self.concurrency = (
            analyzer.config.concurrency if concurrency is None else concurrency
        )
        if self.concurrency < 1:
            raise ConfigError(f"concurrency must be >= 1, got {self.concurrency}")

    def run(
        self,
        exchange: str,
        symbols: Iterable[SymbolInfo],
        date_range: DateRange,
    ) -> PipelineReport:
        """Resolve each symbol's price file through the source, then analyze it.

        :param exchange: Exchange the symbols trade on.
        :param symbols: Symbols to analyze.
        :param date_range: Range requested from the source.
        :returns: Report of processed, skipped and failed symbols.
        :raises ConfigError: If the pipeline has no price source.
        """
        source = self.source
        if source is None:
            raise ConfigError("BoundedParallelPipeline.run requires a price source")

        def resolver(symbol: SymbolInfo) -> Callable[[], SymbolTask]:
            return lambda: SymbolTask(
                symbol=symbol, path=source.resolve(exchange, symbol, date_range)
            )

        return self._execute([(symbol, resolver(symbol)) for symbol in symbols])

    def run_tasks(self, tasks: Iterable[SymbolTask]) -> PipelineReport:
        """Analyze tasks whose price files are already on disk."""
        return self._execute([(task.symbol, lambda task=task: task) for task in tasks])

    def _execute(self, jobs: list[_Job]) -> PipelineReport:
        if not self.writer.header_written:
            self.writer.write_header(self.analyzer.config.summary_header)

        report = PipelineReport()
        logger.info(
            "Analyzing {} symbols with concurrency {}", len(jobs), self.concurrency
        )

        with ThreadPoolExecutor(
            max_workers=self.concurrency, thread_name_prefix="analyzer"
        ) as executor:
            futures = {
                executor.submit(self._process, symbol, resolve): symbol
                for symbol, resolve in jobs
            }
            try:
                for future in as_completed(futures):
                    symbol = futures[future]
                    outcome, error = future.result()
                    if outcome is Outcome.PROCESSED:
                        report.processed.append(symbol)
                    elif outcome is Outcome.SKIPPED:
                        report.skipped.append(symbol)
                    else:
                        report.failed[str(symbol)] = error
            except KeyboardInterrupt:
                logger.warning("Interrupted, cancelling tasks that have not started")
                executor.shutdown(wait=False, cancel_futures=True)
                raise

        logger.info(
            "Finished: {} processed, {} skipped, {} failed",
            len(report.processed),
            len(report.skipped),
            len(report.failed),
        )
        return report

    def _process(
        self,
        symbol: SymbolInfo,
        resolve: Callable[[], SymbolTask],
    ) -> tuple[Outcome, str]:
        log = logger.bind(symbol=str(symbol))
        try:
            task = resolve()
            log.info("Processing: {}", symbol)
            result = self.analyzer.analyze_file(task)
            if result is None:
                return Outcome.SKIPPED, ""
            self.writer.append_row(result.summary)
        except (VolatilityError, OSError) as e:
            log.error("Analysis of {} failed: {}", symbol, e)
            return Outcome.FAILED, str(e)
        return Outcome.PROCESSED, ""


def analyze_exchange(
    config: AnalyzeRunConfig,
    source: PriceSource | None = None,
) -> PipelineReport:
    """Run a complete exchange analysis described by ``config``.

    Opens (and truncates) the summary file, writes its header and fans the
    configured symbols out over the pipeline.

    :param config: Run configuration.
    :param source: Price source overriding the configured one.
    :returns: The pipeline report.
    """
    source = source or resolve_price_source(
        config.data_source, config.storage_root, config.source_params
    )
    analyzer = SymbolAnalyzer(config.analysis, config.date_range)

    with SummaryWriter.open(config.summary_path) as writer:
        pipeline = BoundedParallelPipeline(analyzer, writer, source=source)
        return pipeline.run(config.exchange, config.symbols, config.date_range)
