"""Tests for command configuration loaders."""

from datetime import datetime, timezone
from pathlib import Path
from typing import Any

import pytest
import yaml

from volatility.commands.analyze import _parse_datetime, load_analyze_config
from volatility.exceptions import ConfigError
from volatility.types import AnalysisMode, SymbolInfo


def write_config(tmp_path: Path, config: Any) -> Path:
    config_file = tmp_path / "analyze.yaml"
    config_file.write_text(yaml.dump(config))
    return config_file


@pytest.fixture
def base_config() -> dict[str, Any]:
    """Minimal valid configuration."""
    return {
        "exchange": "BINANCE",
        "storage_root": "data",
        "symbols": ["BTC/USDT", {"asset": "ETH", "currency": "BTC"}],
        "date_range": {"start": "2021-01-02", "end": "2022-01-02"},
    }


class TestParseDatetime:
    """Tests for datetime parsing utility."""

    def test_parse_iso_format(self) -> None:
        """Parse ISO format datetime string."""
        result = _parse_datetime("2024-01-15T10:30:00Z")
        assert result == datetime(2024, 1, 15, 10, 30, 0, tzinfo=timezone.utc)

    def test_parse_simple_date(self) -> None:
        """Parse simple YYYY-MM-DD format."""
        result = _parse_datetime("2024-01-15")
        assert result == datetime(2024, 1, 15, tzinfo=timezone.utc)

    def test_parse_naive_datetime_adds_utc(self) -> None:
        """Naive datetime gets UTC timezone."""
        result = _parse_datetime(datetime(2024, 1, 15))
        assert result.tzinfo == timezone.utc

    def test_parse_invalid_format_raises(self) -> None:
        """Invalid format raises ConfigError."""
        with pytest.raises(ConfigError, match="Invalid datetime format"):
            _parse_datetime("not-a-date")


class TestLoadAnalyzeConfig:
    """Tests for analyze config loading."""

    def test_load_valid_config(self, tmp_path: Path, base_config: dict[str, Any]) -> None:
        """Load a minimal configuration and fill in defaults."""
        result = load_analyze_config(write_config(tmp_path, base_config))

        assert result.exchange == "BINANCE"
        assert result.storage_root == Path("data")
        assert result.symbols == [
            SymbolInfo(asset="BTC", currency="USDT"),
            SymbolInfo(asset="ETH", currency="BTC"),
        ]
        assert result.date_range.minutes == 365 * 1440
        assert result.data_source == "local"
        assert result.analysis.mode is AnalysisMode.MOVING_AVERAGE
        assert result.analysis.window == 1440
        assert result.summary_path == Path("BINANCE-summary.csv")
        assert result.log_level == "INFO"
        assert result.log_file is None

    def test_date_range_from_days(self, tmp_path: Path, base_config: dict[str, Any]) -> None:
        """`days` counts back from `end`."""
        base_config["date_range"] = {"end": "2022-01-02", "days": 365}

        result = load_analyze_config(write_config(tmp_path, base_config))

        assert result.date_range.start == datetime(2021, 1, 2, tzinfo=timezone.utc)

    def test_full_config(self, tmp_path: Path, base_config: dict[str, Any]) -> None:
        """All optional sections are honoured."""
        base_config.update(
            {
                "data_source": "yahoo",
                "source_params": {"interval": "1m"},
                "analysis": {"mode": "oscillation", "window": 60, "concurrency": 16},
                "summary_path": "out/summary.csv",
                "logging": {"level": "debug", "file": "run.log"},
            }
        )

        result = load_analyze_config(write_config(tmp_path, base_config))

        assert result.data_source == "yahoo"
        assert result.source_params == {"interval": "1m"}
        assert result.analysis.mode is AnalysisMode.OSCILLATION
        assert result.analysis.window == 60
        assert result.analysis.concurrency == 16
        assert result.summary_path == Path("out/summary.csv")
        assert result.log_level == "DEBUG"
        assert result.log_file == Path("run.log")

    @pytest.mark.parametrize("field", ["exchange", "storage_root", "symbols", "date_range"])
    def test_missing_required_field(
        self, tmp_path: Path, base_config: dict[str, Any], field: str
    ) -> None:
        """Required fields must be present."""
        del base_config[field]
        with pytest.raises(ConfigError, match=f"Missing required field: {field}"):
            load_analyze_config(write_config(tmp_path, base_config))

    @pytest.mark.parametrize(
        "update,message",
        [
            ({"symbols": []}, "non-empty list"),
            ({"symbols": ["BTCUSDT"]}, "Invalid symbol"),
            ({"symbols": [42]}, "Invalid symbol"),
            ({"date_range": {"start": "2022-01-02", "end": "2021-01-02"}}, "must be before"),
            ({"date_range": {"end": "2022-01-02"}}, "'start' or 'days'"),
            ({"date_range": {"end": "2022-01-02", "days": -1}}, "positive"),
            ({"date_range": "2022"}, "must be a mapping"),
            ({"data_source": "ftp"}, "Invalid data_source"),
            ({"source_params": ["a"]}, "must be a mapping"),
            ({"analysis": {"mode": "median"}}, "Invalid analysis mode"),
            ({"analysis": {"window": 0}}, "Invalid 'analysis' section"),
            ({"analysis": "fast"}, "must be a mapping"),
            ({"logging": {"level": "LOUD"}}, "Invalid log level"),
        ],
    )
    def test_invalid_values(
        self,
        tmp_path: Path,
        base_config: dict[str, Any],
        update: dict[str, Any],
        message: str,
    ) -> None:
        """Invalid values raise ConfigError with a helpful message."""
        base_config.update(update)
        with pytest.raises(ConfigError, match=message):
            load_analyze_config(write_config(tmp_path, base_config))

    def test_file_not_found(self, tmp_path: Path) -> None:
        """Missing files raise ConfigError."""
        with pytest.raises(ConfigError, match="not found"):
            load_analyze_config(tmp_path / "missing.yaml")

    def test_invalid_yaml(self, tmp_path: Path) -> None:
        """Unparseable YAML raises ConfigError."""
        config_file = tmp_path / "bad.yaml"
        config_file.write_text("exchange: [unclosed")
        with pytest.raises(ConfigError, match="Invalid YAML"):
            load_analyze_config(config_file)

    def test_not_a_mapping(self, tmp_path: Path) -> None:
        """Top-level YAML must be a mapping."""
        with pytest.raises(ConfigError, match="YAML mapping"):
            load_analyze_config(write_config(tmp_path, ["a", "b"]))
