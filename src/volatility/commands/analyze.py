"""Configuration for the analyze command.

Example config file (analyze.yaml):

    exchange: "BINANCE"
    storage_root: "data"
    symbols:
      - "BTC/USDT"
      - asset: "ETH"
        currency: "USDT"
    date_range:
      start: "2021-01-02"   # or `days: 365` counted back from `end`
      end: "2022-01-02"
    data_source: "local"    # local | yahoo
    source_params: {}
    analysis:
      mode: "moving_average"   # moving_average | oscillation | percent_diff
      window: 1440
      coverage_threshold: 0.7
      concurrency: 4
      output_suffix: ".analyzed.csv"
    summary_path: "BINANCE-summary.csv"  # Optional, defaults to {exchange}-summary.csv
    logging:
      level: "INFO"
      file: null
"""

from __future__ import annotations

from datetime import datetime, timedelta, timezone
from pathlib import Path
from typing import Any

import yaml
from pydantic import ValidationError

from volatility.exceptions import ConfigError
from volatility.types import (AnalysisConfig, AnalysisMode, AnalyzeRunConfig,
                              DateRange, SymbolInfo)

# Valid data source types
VALID_DATA_SOURCES = frozenset(["local", "yahoo"])

# Valid log levels
VALID_LOG_LEVELS = frozenset(["TRACE", "DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"])


def _parse_datetime(value: str | datetime) -> datetime:
    """Parse a datetime string or pass through datetime objects.

    :param value: ISO format string or datetime object.
    :returns: Timezone-aware datetime (UTC if no timezone specified).
    :raises ConfigError: If parsing fails.
    """
    if isinstance(value, datetime):
        if value.tzinfo is None:
            return value.replace(tzinfo=timezone.utc)
        return value

    try:
        dt = datetime.fromisoformat(str(value).replace("Z", "+00:00"))
    except ValueError as e:
        raise ConfigError(f"Invalid datetime format: {value}") from e

    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    return dt


def _parse_date_range(raw_date_range: Any) -> DateRange:
    if not isinstance(raw_date_range, dict):
        raise ConfigError("'date_range' must be a mapping with 'start' and 'end'")
    if "end" not in raw_date_range:
        raise ConfigError("'date_range' must contain 'end'")

    end_dt = _parse_datetime(raw_date_range["end"])
    if "start" in raw_date_range:
        start_dt = _parse_datetime(raw_date_range["start"])
    elif "days" in raw_date_range:
        days = raw_date_range["days"]
        if not isinstance(days, (int, float)) or days <= 0:
            raise ConfigError("'date_range.days' must be a positive number")
        start_dt = end_dt - timedelta(days=days)
    else:
        raise ConfigError("'date_range' must contain 'start' or 'days'")

    if start_dt >= end_dt:
        raise ConfigError("'date_range.start' must be before 'date_range.end'")

    return DateRange(start=start_dt, end=end_dt)


def _parse_symbol(raw_symbol: Any) -> SymbolInfo:
    try:
        if isinstance(raw_symbol, str):
            return SymbolInfo.parse(raw_symbol)
        if isinstance(raw_symbol, dict):
            return SymbolInfo(**raw_symbol)
    except (ValueError, TypeError) as e:
        raise ConfigError(f"Invalid symbol {raw_symbol!r}: {e}") from e
    raise ConfigError(f"Invalid symbol {raw_symbol!r}: expected 'ASSET/CURRENCY' or mapping")


def _parse_analysis(raw_analysis: Any) -> AnalysisConfig:
    if not isinstance(raw_analysis, dict):
        raise ConfigError("'analysis' must be a mapping")

    mode = raw_analysis.get("mode", AnalysisMode.MOVING_AVERAGE.value)
    valid_modes = sorted(m.value for m in AnalysisMode)
    if mode not in valid_modes:
        raise ConfigError(f"Invalid analysis mode '{mode}'. Valid options: {valid_modes}")

    try:
        return AnalysisConfig(**raw_analysis)
    except ValidationError as e:
        raise ConfigError(f"Invalid 'analysis' section: {e}") from e


def load_analyze_config(config_path: str | Path) -> AnalyzeRunConfig:
    """Parse and validate an analyze configuration file.

    :param config_path: Path to YAML configuration file.
    :returns: Validated AnalyzeRunConfig object.
    :raises ConfigError: If file cannot be read or config is invalid.
    """
    config_path = Path(config_path)

    # Read and parse YAML
    try:
        with open(config_path) as f:
            raw_config = yaml.safe_load(f)
    except FileNotFoundError as e:
        raise ConfigError(f"Configuration file not found: {config_path}") from e
    except yaml.YAMLError as e:
        raise ConfigError(f"Invalid YAML in configuration file: {e}") from e

    if not isinstance(raw_config, dict):
        raise ConfigError("Configuration must be a YAML mapping")

    # Validate required fields
    required_fields = ["exchange", "storage_root", "symbols", "date_range"]
    for field in required_fields:
        if field not in raw_config:
            raise ConfigError(f"Missing required field: {field}")

    exchange = raw_config["exchange"]
    if not isinstance(exchange, str) or not exchange:
        raise ConfigError("'exchange' must be a non-empty string")

    raw_symbols = raw_config["symbols"]
    if not isinstance(raw_symbols, list) or len(raw_symbols) == 0:
        raise ConfigError("'symbols' must be a non-empty list")
    symbols = [_parse_symbol(s) for s in raw_symbols]

    date_range = _parse_date_range(raw_config["date_range"])

    # Parse data_source (optional)
    data_source = raw_config.get("data_source", "local")
    if data_source not in VALID_DATA_SOURCES:
        raise ConfigError(
            f"Invalid data_source '{data_source}'. "
            f"Valid options: {sorted(VALID_DATA_SOURCES)}"
        )

    source_params: dict[str, Any] = raw_config.get("source_params") or {}
    if not isinstance(source_params, dict):
        raise ConfigError("'source_params' must be a mapping")

    analysis = _parse_analysis(raw_config.get("analysis") or {})

    summary_path = Path(raw_config.get("summary_path") or f"{exchange}-summary.csv")

    # Parse logging (optional)
    raw_logging = raw_config.get("logging") or {}
    if not isinstance(raw_logging, dict):
        raise ConfigError("'logging' must be a mapping")

    log_level = str(raw_logging.get("level", "INFO")).upper()
    if log_level not in VALID_LOG_LEVELS:
        raise ConfigError(
            f"Invalid log level '{log_level}'. "
            f"Valid options: {sorted(VALID_LOG_LEVELS)}"
        )
    log_file = raw_logging.get("file")

    return AnalyzeRunConfig(
        exchange=exchange,
        storage_root=Path(raw_config["storage_root"]),
        symbols=symbols,
        date_range=date_range,
        data_source=data_source,
        source_params=source_params,
        analysis=analysis,
        summary_path=summary_path,
        log_level=log_level,
        log_file=Path(log_file) if log_file else None,
    )
