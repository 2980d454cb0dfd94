"""Volatility analyzer exception hierarchy.

All analyzer-specific exceptions derive from :class:`VolatilityError` so callers
can catch every failure of a single symbol uniformly.
"""

from __future__ import annotations

from pathlib import Path


class VolatilityError(Exception):
    """Base class for volatility analyzer exceptions.

    Derived exceptions should extend this class so that the pipeline can isolate
    the failure of one symbol from its siblings.
    """


class ConfigError(VolatilityError):
    """Raised when configuration files or parameters are invalid."""


class DataSourceError(VolatilityError):
    """Raised when a price file cannot be resolved or downloaded."""


class DataValidationError(VolatilityError):
    """Raised when data fails validation checks.

    Named DataValidationError to avoid conflict with pydantic's ValidationError.
    """


class PriceParseError(DataValidationError):
    """Raised when a line of a price file is not a plain decimal number.

    :param path: File that contains the malformed line.
    :param line_number: 1-based line number of the malformed line.
    :param line: The offending text.
    """

    def __init__(self, path: Path | str, line_number: int, line: str) -> None:
        self.path = Path(path)
        self.line_number = line_number
        self.line = line
        super().__init__(f"{self.path}:{line_number}: invalid price {line!r}")


class StatisticsError(VolatilityError):
    """Raised when a statistic is requested outside its domain."""


class InsufficientSamplesError(StatisticsError):
    """Raised when dispersion is requested on fewer than two samples."""


class StorageError(VolatilityError):
    """Raised when writing an analysis artifact fails."""


class SummaryWriterError(StorageError):
    """Raised when the summary table is written out of order."""


__all__ = [
    "VolatilityError",
    "ConfigError",
    "DataSourceError",
    "DataValidationError",
    "PriceParseError",
    "StatisticsError",
    "InsufficientSamplesError",
    "StorageError",
    "SummaryWriterError",
]
