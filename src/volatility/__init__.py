"""Volatility analyzer package root."""

from volatility.exceptions import ConfigError, VolatilityError

__version__ = "0.1.0"

__all__ = ["__version__", "ConfigError", "VolatilityError"]
