"""Logging setup."""

from __future__ import annotations

import sys
from pathlib import Path
from typing import IO

from loguru import logger

CONSOLE_FORMAT = (
    "<green>{time:YYYY-MM-DD HH:mm:ss.SSS}</green> | <level>{level: <8}</level> | "
    "{thread.name} | {extra[symbol]} | <level>{message}</level>"
)
FILE_FORMAT = "{time:YYYY-MM-DD HH:mm:ss.SSS} | {level: <8} | {thread.name} | {extra[symbol]} | {message}"


def configure_logging(
    level: str = "INFO",
    log_file: Path | str | None = None,
    stream: IO[str] | None = None,
) -> None:
    """Replace loguru's default sink with the analyzer's sinks.

    Records are enqueued so worker threads never block on the sink.

    :param level: Minimum level for every sink.
    :param log_file: Optional file receiving the same records.
    :param stream: Console stream (stderr by default).
    """
    logger.remove()
    logger.configure(extra={"symbol": "-"})
    logger.add(
        stream or sys.stderr,
        level=level.upper(),
        format=CONSOLE_FORMAT,
        colorize=stream is None and sys.stderr.isatty(),
        enqueue=True,
    )
    if log_file is not None:
        logger.add(
            str(log_file),
            level=level.upper(),
            format=FILE_FORMAT,
            enqueue=True,
            encoding="utf-8",
        )
