#!/usr/bin/env python3
"""Command-line interface for the volatility analyzer."""

from __future__ import annotations

import argparse
import sys


def cmd_analyze(args: argparse.Namespace) -> int:
    """Analyze every configured symbol of an exchange."""
    from loguru import logger
    from pydantic import ValidationError

    from volatility.analysis import analyze_exchange
    from volatility.commands.analyze import load_analyze_config
    from volatility.exceptions import VolatilityError
    from volatility.log import configure_logging
    from volatility.types import AnalysisConfig

    try:
        config = load_analyze_config(args.config)
    except VolatilityError as e:
        print(f"Error: {e}")
        return 1

    overrides = {}
    if args.concurrency is not None:
        overrides["concurrency"] = args.concurrency
    if args.mode is not None:
        overrides["mode"] = args.mode
    if overrides:
        try:
            analysis = AnalysisConfig.model_validate(
                {**config.analysis.model_dump(), **overrides}
            )
        except ValidationError as e:
            print(f"Error: {e}")
            return 1
        config = config.model_copy(update={"analysis": analysis})

    configure_logging(args.log_level or config.log_level, config.log_file)
    logger.info("Starting")

    try:
        report = analyze_exchange(config)
    except VolatilityError as e:
        logger.error("Analysis aborted: {}", e)
        return 1
    finally:
        logger.complete()

    print("=" * 60)
    print(f"Exchange:   {config.exchange}")
    print(f"Mode:       {config.analysis.mode.value}")
    print(f"Summary:    {config.summary_path}")
    print(f"Processed:  {len(report.processed)}")
    print(f"Skipped:    {len(report.skipped)}")
    print(f"Failed:     {len(report.failed)}")
    for symbol, error in sorted(report.failed.items()):
        print(f"   {symbol}: {error}")
    print("=" * 60)

    return 0 if not report.failed else 2


def cmd_stats(args: argparse.Namespace) -> int:
    """Print scalar statistics of a single price file."""
    from volatility.data.prices import read_prices
    from volatility.exceptions import VolatilityError
    from volatility.formatting import format_decimal
    from volatility.indicators import (DeviationTracker, dispersion,
                                       moving_average, oscillation_count,
                                       percentage_difference,
                                       volatility_score)

    try:
        prices = read_prices(args.file)
    except (VolatilityError, OSError) as e:
        print(f"Error: {e}")
        return 1

    if not prices:
        print("Error: price file is empty")
        return 1

    oscillations = oscillation_count(prices)
    perc_diff = percentage_difference(prices)

    print(f"Prices:        {len(prices)}")
    print(f"Oscillations:  {oscillations}")
    print(f"PercDiff:      {format_decimal(perc_diff)}")
    print(f"Score:         {format_decimal(volatility_score(perc_diff, oscillations, prices[-1]))}")

    averages = list(moving_average(prices, args.window))
    if len(averages) < 2:
        print(f"Deviation:     n/a (needs more than {args.window + 1} prices)")
        return 0

    tracker = DeviationTracker()
    half = args.window // 2
    deviations = [tracker.observe(ma, price)[0] for price, ma in zip(prices[half:], averages)]
    stat = dispersion(deviations)
    print(f"Deviation:     avg {format_decimal(stat.mean)}, stddev {format_decimal(stat.stddev)}")
    return 0


def main(argv: list[str] | None = None) -> int:
    """Main entry point."""
    parser = argparse.ArgumentParser(
        description="Price volatility analyzer CLI",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # Analyze command
    analyze_parser = subparsers.add_parser(
        "analyze", help="Analyze an exchange from configuration"
    )
    analyze_parser.add_argument("config", help="Path to YAML configuration file")
    analyze_parser.add_argument(
        "-c", "--concurrency", type=int, help="Override analysis.concurrency"
    )
    analyze_parser.add_argument(
        "-m",
        "--mode",
        choices=["moving_average", "oscillation", "percent_diff"],
        help="Override analysis.mode",
    )
    analyze_parser.add_argument("--log-level", help="Override logging.level")

    # Stats command
    stats_parser = subparsers.add_parser(
        "stats", help="Show statistics of a single price file"
    )
    stats_parser.add_argument("file", help="Price file, one price per line")
    stats_parser.add_argument(
        "-w", "--window", type=int, default=1440, help="Moving-average window (default: 1440)"
    )

    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        return 0

    if args.command == "analyze":
        return cmd_analyze(args)
    elif args.command == "stats":
        return cmd_stats(args)

    return 0


if __name__ == "__main__":
    sys.exit(main())
