"""Tests for price file reading and writing."""

from pathlib import Path

import pytest

from volatility.data.prices import parse_price, read_prices, write_lines
from volatility.exceptions import (DataValidationError, PriceParseError,
                                   StorageError)


class TestParsePrice:
    """Tests for single-line parsing."""

    @pytest.mark.parametrize(
        ("line", "expected"),
        [("100", 100.0), ("0.5", 0.5), (".5", 0.5), ("5.", 5.0), ("00012.250", 12.25)],
    )
    def test_plain_decimals(self, line: str, expected: float) -> None:
        """Digits with an optional decimal point parse."""
        assert parse_price(line) == expected

    @pytest.mark.parametrize("line", ["", " 1", "1 ", "-1", "+1", "1e5", "1,5", "1,000.5", "abc", "."])
    def test_rejects_other_forms(self, line: str) -> None:
        """Signs, exponents, whitespace and separators are rejected."""
        with pytest.raises(ValueError):
            parse_price(line)


class TestReadPrices:
    """Tests for reading price files."""

    def test_reads_in_order(self, tmp_path: Path) -> None:
        """Prices are returned in file order."""
        path = tmp_path / "prices.csv"
        path.write_text("1.5\n2\n0.25\n")

        assert read_prices(path) == [1.5, 2.0, 0.25]

    def test_accepts_missing_trailing_newline(self, tmp_path: Path) -> None:
        """The last line may lack a newline."""
        path = tmp_path / "prices.csv"
        path.write_text("1\n2")

        assert read_prices(path) == [1.0, 2.0]

    def test_accepts_crlf(self, tmp_path: Path) -> None:
        """Windows line endings are accepted."""
        path = tmp_path / "prices.csv"
        path.write_bytes(b"1.5\r\n2.5\r\n")

        assert read_prices(path) == [1.5, 2.5]

    def test_empty_file(self, tmp_path: Path) -> None:
        """An empty file is an empty series."""
        path = tmp_path / "prices.csv"
        path.write_text("")

        assert read_prices(path) == []

    def test_malformed_line_reports_location(self, tmp_path: Path) -> None:
        """A malformed line raises PriceParseError with its line number."""
        path = tmp_path / "prices.csv"
        path.write_text("1\n2\nbroken\n4\n")

        with pytest.raises(PriceParseError) as exc_info:
            read_prices(path)

        assert exc_info.value.line_number == 3
        assert exc_info.value.line == "broken"
        assert exc_info.value.path == path
        assert isinstance(exc_info.value, DataValidationError)

    def test_blank_line_is_malformed(self, tmp_path: Path) -> None:
        """A blank line in the middle of the file is an error."""
        path = tmp_path / "prices.csv"
        path.write_text("1\n\n2\n")

        with pytest.raises(PriceParseError, match=":2:"):
            read_prices(path)

    def test_strips_byte_order_mark(self, tmp_path: Path) -> None:
        """A leading UTF-8 BOM is not part of the first price."""
        path = tmp_path / "prices.csv"
        path.write_bytes(b"\xef\xbb\xbf1.5\n2\n")

        assert read_prices(path) == [1.5, 2.0]

    def test_undecodable_bytes(self, tmp_path: Path) -> None:
        """Bytes that are not UTF-8 raise DataValidationError naming the file."""
        path = tmp_path / "prices.csv"
        path.write_bytes(b"100\n\xff\xfe\n")

        with pytest.raises(DataValidationError, match="not valid UTF-8") as exc_info:
            read_prices(path)

        assert str(path) in str(exc_info.value)

    def test_missing_file_raises_os_error(self, tmp_path: Path) -> None:
        """Missing files surface as OSError."""
        with pytest.raises(OSError):
            read_prices(tmp_path / "missing.csv")


class TestWriteLines:
    """Tests for artifact writing."""

    def test_writes_terminated_lines(self, tmp_path: Path) -> None:
        """Every line ends with a newline."""
        path = write_lines(tmp_path / "out.csv", ["a", "b"])
        assert path.read_bytes() == b"a\nb\n"

    def test_overwrites_existing_file(self, tmp_path: Path) -> None:
        """Writing replaces previous content."""
        path = tmp_path / "out.csv"
        write_lines(path, ["first", "second", "third"])
        write_lines(path, ["only"])

        assert path.read_text() == "only\n"

    def test_unwritable_location_raises(self, tmp_path: Path) -> None:
        """A missing parent directory raises StorageError."""
        with pytest.raises(StorageError):
            write_lines(tmp_path / "missing" / "out.csv", ["a"])
