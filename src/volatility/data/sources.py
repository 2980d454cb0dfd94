"""Price file sources.

A price source plays the role of the download collaborator: given an exchange,
a symbol and a date range it hands back a local file with one price per minute,
one price per line. This module provides the abstract interface plus a source
for already-downloaded files and one that downloads from Yahoo Finance.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from pathlib import Path
from typing import Any

import numpy as np

from volatility.data.prices import write_lines
from volatility.exceptions import DataSourceError, StorageError
from volatility.types import DateRange, SymbolInfo

DEFAULT_FILENAME_TEMPLATE = "{asset}-{currency}.csv"


class PriceSource(ABC):
    """Abstract base class for price sources.

    All price source implementations must inherit from this class and implement
    the `resolve` method.

    :param storage_root: Directory price files are stored under, one
        subdirectory per exchange.
    :param source_params: Optional parameters for configuring the source.
        - filename_template: Format string for file names, receiving
          ``asset`` and ``currency`` (default: "{asset}-{currency}.csv")
    """

    def __init__(
        self,
        storage_root: Path | str,
        source_params: dict[str, Any] | None = None,
    ) -> None:
        self.storage_root = Path(storage_root)
        self.params = source_params or {}
        self.filename_template = self.params.get(
            "filename_template", DEFAULT_FILENAME_TEMPLATE
        )

    def path_for(self, exchange: str, symbol: SymbolInfo) -> Path:
        """Location of the price file of ``symbol`` on ``exchange``."""
        filename = self.filename_template.format(
            asset=symbol.asset, currency=symbol.currency
        )
        return self.storage_root / exchange / filename

    @abstractmethod
    def resolve(
        self,
        exchange: str,
        symbol: SymbolInfo,
        date_range: DateRange,
    ) -> Path:
        """Return a local price file for the symbol and time range.

        :param exchange: Exchange identifier.
        :param symbol: Symbol to resolve.
        :param date_range: Time range the prices should cover.
        :returns: Path of a file with one price per line.
        :raises DataSourceError: If the file cannot be produced.
        """
        ...


class LocalPriceSource(PriceSource):
    """Price source for files that were downloaded beforehand.

    Reads ``{storage_root}/{exchange}/{filename_template}``.
    """

    def resolve(
        self,
        exchange: str,
        symbol: SymbolInfo,
        date_range: DateRange,
    ) -> Path:
        path = self.path_for(exchange, symbol)
        if not path.is_file():
            raise DataSourceError(f"Price file not found for {symbol}: {path}")
        return path


class YahooPriceSource(PriceSource):
    """Price source that downloads minute closes from Yahoo Finance via yfinance.

    The Yahoo ticker is ``ASSET-CURRENCY`` (e.g. ``BTC-USD``). Downloaded closes
    are stored under the same layout as :class:`LocalPriceSource` uses, so later
    runs can switch to the local source.

    :param source_params: Optional parameters for configuring the source.
        - filename_template: See :class:`PriceSource`.
        - interval: yfinance interval (default: "1m")
        - timeout: Request timeout in seconds (default: 30)
        - refresh: Download again even if the file exists (default: False)
    """

    def __init__(
        self,
        storage_root: Path | str,
        source_params: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(storage_root, source_params)
        self.interval = self.params.get("interval", "1m")
        self.timeout = self.params.get("timeout", 30)
        self.refresh = bool(self.params.get("refresh", False))

    def resolve(
        self,
        exchange: str,
        symbol: SymbolInfo,
        date_range: DateRange,
    ) -> Path:
        path = self.path_for(exchange, symbol)
        if path.is_file() and not self.refresh:
            return path

        try:
            import yfinance as yf
        except ImportError as e:
            raise DataSourceError(
                "yfinance is not installed. Install it with: pip install yfinance"
            ) from e

        ticker_name = f"{symbol.asset}-{symbol.currency}"
        try:
            ticker = yf.Ticker(ticker_name)
            df = ticker.history(
                start=date_range.start,
                end=date_range.end,
                interval=self.interval,
                timeout=self.timeout,
            )
        except Exception as e:
            raise DataSourceError(
                f"Failed to fetch data for symbol '{ticker_name}': {e}"
            ) from e

        if df.empty:
            raise DataSourceError(f"No data returned for symbol '{ticker_name}'")

        closes = df["Close"].dropna().to_numpy(dtype=np.float64)
        path.parent.mkdir(parents=True, exist_ok=True)
        try:
            write_lines(
                path,
                (np.format_float_positional(close, trim="-") for close in closes),
            )
        except StorageError as e:
            raise DataSourceError(str(e)) from e
        return path


def resolve_price_source(
    data_source: str,
    storage_root: Path | str,
    source_params: dict[str, Any] | None = None,
) -> PriceSource:
    """Construct a price source from configuration.

    :param data_source: Source type ("local" or "yahoo").
    :param storage_root: Root directory for price files.
    :param source_params: Source-specific parameters.
    :returns: PriceSource instance for the specified type.
    :raises DataSourceError: If the source type is unrecognized.
    """
    source_type = data_source.lower()

    if source_type == "local":
        return LocalPriceSource(storage_root, source_params)
    elif source_type == "yahoo":
        return YahooPriceSource(storage_root, source_params)
    else:
        raise DataSourceError(
            f"Unrecognized data source type: '{data_source}'. "
            f"Supported types: local, yahoo"
        )
