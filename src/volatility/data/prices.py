"""Reading and writing one-price-per-line files."""

from __future__ import annotations

import re
from pathlib import Path
from typing import Iterable

from volatility.exceptions import (DataValidationError, PriceParseError,
                                   StorageError)

# Plain decimal: digits with an optional decimal point. No sign, exponent,
# surrounding whitespace or group separators.
_DECIMAL = re.compile(r"(?:\d+(?:\.\d*)?|\.\d+)")


def parse_price(line: str) -> float:
    """Parse one price line, raising ValueError if it is not a plain decimal."""
    if not _DECIMAL.fullmatch(line):
        raise ValueError(f"not a plain decimal: {line!r}")
    return float(line)


def read_prices(path: Path | str) -> list[float]:
    """Load a price series from a newline-delimited file.

    :param path: File with one price per line in chronological order.
    :returns: The prices, in file order.
    :raises PriceParseError: If a line is not a plain decimal.
    :raises DataValidationError: If the file is not UTF-8 text.
    :raises OSError: If the file cannot be read.
    """
    path = Path(path)
    prices: list[float] = []
    # utf-8-sig drops a leading byte order mark
    try:
        with open(path, encoding="utf-8-sig") as f:
            text = f.read()
    except UnicodeDecodeError as e:
        raise DataValidationError(f"{path}: not valid UTF-8 text ({e.reason} at byte {e.start})") from e
    for line_number, line in enumerate(text.splitlines(), start=1):
        try:
            prices.append(parse_price(line))
        except ValueError as e:
            raise PriceParseError(path, line_number, line) from e
    return prices


def write_lines(path: Path | str, lines: Iterable[str]) -> Path:
    """Write ``lines`` to ``path``, replacing any existing file.

    Every line is terminated by ``\\n``.

    :raises StorageError: If the file cannot be written.
    """
    path = Path(path)
    try:
        with open(path, "w", encoding="utf-8", newline="\n") as f:
            for line in lines:
                f.write(line)
                f.write("\n")
    except OSError as e:
        raise StorageError(f"Failed to write {path}: {e}") from e
    return path
