"""CLI command implementations for the volatility analyzer.

Each command module provides:
- Configuration loading and validation
- Integration with core library functions
"""

from volatility.commands.analyze import load_analyze_config

__all__ = [
    "load_analyze_config",
]
