"""Price file sources and parsing."""

from volatility.data.prices import parse_price, read_prices, write_lines
from volatility.data.sources import (LocalPriceSource, PriceSource,
                                     YahooPriceSource, resolve_price_source)

__all__ = [
    "PriceSource",
    "LocalPriceSource",
    "YahooPriceSource",
    "resolve_price_source",
    "parse_price",
    "read_prices",
    "write_lines",
]
