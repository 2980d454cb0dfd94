"""Core type definitions for the volatility analyzer.

Configuration and summary models use Pydantic BaseModel for automatic
validation and better error messages. Per-price-point records are plain slotted
dataclasses.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from pathlib import Path
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

from volatility.formatting import format_decimal

# ---------------------------------------------------------------------------
# Base Configuration
# ---------------------------------------------------------------------------


class FrozenModel(BaseModel):
    """Base model with frozen (immutable) configuration."""

    model_config = ConfigDict(frozen=True)


# ---------------------------------------------------------------------------
# Date/Time Types
# ---------------------------------------------------------------------------


class DateRange(FrozenModel):
    """Inclusive start, exclusive end range for time-bounded queries.

    :param start: Start of the range (inclusive).
    :param end: End of the range (exclusive).
    """

    start: datetime
    end: datetime

    @property
    def minutes(self) -> float:
        """Length of the range in minutes, the expected one-minute sample count."""
        return (self.end - self.start).total_seconds() / 60


# ---------------------------------------------------------------------------
# Symbol Types
# ---------------------------------------------------------------------------


class SymbolInfo(FrozenModel):
    """A tradable pair on an exchange.

    :param asset: Base asset identifier (e.g. "BTC").
    :param currency: Quote currency (e.g. "USDT").
    """

    asset: str
    currency: str

    @classmethod
    def parse(cls, value: str) -> SymbolInfo:
        """Parse the ``ASSET/CURRENCY`` notation."""
        asset, sep, currency = value.partition("/")
        if not sep or not asset or not currency:
            raise ValueError(f"Symbol must look like 'ASSET/CURRENCY', got {value!r}")
        return cls(asset=asset.strip(), currency=currency.strip())

    def __str__(self) -> str:
        return f"{self.asset}/{self.currency}"


class SymbolTask(FrozenModel):
    """One unit of pipeline work: a symbol and its downloaded price file.

    :param symbol: The symbol being analyzed.
    :param path: Local price file produced by the download collaborator.
    """

    symbol: SymbolInfo
    path: Path


# ---------------------------------------------------------------------------
# Analysis Configuration
# ---------------------------------------------------------------------------


class AnalysisMode(str, Enum):
    """Indicator family computed by a single analysis run."""

    MOVING_AVERAGE = "moving_average"
    OSCILLATION = "oscillation"
    PERCENT_DIFF = "percent_diff"


SUMMARY_HEADERS: dict[AnalysisMode, tuple[str, ...]] = {
    AnalysisMode.MOVING_AVERAGE: ("Asset", "Currency", "Stddev", "Avg", "DStddev", "DAvg"),
    AnalysisMode.OSCILLATION: ("Asset", "Currency", "Oscillations", "LastPrice"),
    AnalysisMode.PERCENT_DIFF: ("Asset", "Currency", "PercDiff", "Oscillations", "Score"),
}


class AnalysisConfig(FrozenModel):
    """Configuration shared by every symbol of an analysis run.

    :param mode: Indicator family to compute.
    :param window: Moving-average window in samples (one day of minutes by default).
    :param coverage_threshold: Minimum fraction of the expected sample count.
    :param concurrency: Maximum number of symbols analyzed at once.
    :param output_suffix: Extension replacing the input file's own for artifacts.
    """

    mode: AnalysisMode = AnalysisMode.MOVING_AVERAGE
    window: int = Field(default=1440, ge=1)
    coverage_threshold: float = Field(default=0.7, ge=0.0, le=1.0)
    concurrency: int = Field(default=4, ge=1)
    output_suffix: str = ".analyzed.csv"

    @field_validator("output_suffix")
    @classmethod
    def _check_suffix(cls, value: str) -> str:
        if not value.startswith(".") or value == "." or "/" in value:
            raise ValueError("output_suffix must start with '.' and name a file extension")
        return value

    @property
    def half_window(self) -> int:
        return self.window // 2

    @property
    def summary_header(self) -> tuple[str, ...]:
        return SUMMARY_HEADERS[self.mode]


class AnalyzeRunConfig(FrozenModel):
    """Configuration for one exchange-wide analysis run.

    :param exchange: Exchange identifier, used for storage layout and summary name.
    :param storage_root: Directory the download collaborator stores files under.
    :param symbols: Symbols to analyze.
    :param date_range: Time range the price files are expected to cover.
    :param data_source: Download collaborator type ("local" or "yahoo").
    :param source_params: Collaborator-specific parameters.
    :param analysis: Analysis configuration.
    :param summary_path: Summary table location.
    :param log_level: Logging level.
    :param log_file: Optional log file in addition to stderr.
    """

    exchange: str
    storage_root: Path
    symbols: list[SymbolInfo]
    date_range: DateRange
    data_source: str = "local"
    source_params: dict[str, Any] = Field(default_factory=dict)
    analysis: AnalysisConfig = Field(default_factory=AnalysisConfig)
    summary_path: Path
    log_level: str = "INFO"
    log_file: Path | None = None


# ---------------------------------------------------------------------------
# Analysis Output Types
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class AnalysisRecord:
    """One annotated price point.

    :param price: The price at this point.
    :param indicators: Mode-dependent indicator values, in artifact column order.
    """

    price: float
    indicators: tuple[float, ...]

    def to_line(self) -> str:
        return ",".join(format_decimal(v) for v in (self.price, *self.indicators))


class SummaryRow(FrozenModel):
    """One aggregate statistics row of the exchange summary table.

    :param asset: Base asset identifier.
    :param currency: Quote currency.
    :param values: Statistics in summary header order.
    """

    asset: str
    currency: str
    values: tuple[float, ...]

    def to_line(self) -> str:
        return ",".join([self.asset, self.currency, *(format_decimal(v) for v in self.values)])


@dataclass
class AnalysisResult:
    """Output of analyzing one symbol.

    :param symbol: The analyzed symbol.
    :param mode: Indicator family that produced the records.
    :param records: Annotated price points.
    :param summary: Summary row for the exchange table.
    :param artifact_path: Where the annotated records were written, if anywhere.
    """

    symbol: SymbolInfo
    mode: AnalysisMode
    summary: SummaryRow
    records: list[AnalysisRecord] = field(default_factory=list)
    artifact_path: Path | None = None


class PipelineReport(BaseModel):
    """Outcome of a pipeline run.

    :param processed: Symbols that produced a summary row.
    :param skipped: Symbols dropped by the data-quality gate.
    :param failed: Symbols whose task raised, mapped to the error message.
    """

    processed: list[SymbolInfo] = Field(default_factory=list)
    skipped: list[SymbolInfo] = Field(default_factory=list)
    failed: dict[str, str] = Field(default_factory=dict)

    @property
    def total(self) -> int:
        return len(self.processed) + len(self.skipped) + len(self.failed)


__all__ = [
    "FrozenModel",
    "DateRange",
    "SymbolInfo",
    "SymbolTask",
    "AnalysisMode",
    "SUMMARY_HEADERS",
    "AnalysisConfig",
    "AnalyzeRunConfig",
    "AnalysisRecord",
    "SummaryRow",
    "AnalysisResult",
    "PipelineReport",
]
