"""Append-only summary table shared by concurrent analysis workers."""

from __future__ import annotations

import os
import threading
from pathlib import Path
from typing import Iterable, TextIO

from volatility.exceptions import StorageError, SummaryWriterError
from volatility.types import SummaryRow


class SummaryWriter:
    """Serialized sink for summary rows.

    The header is written once before any row. ``append_row`` may be called
    from any number of threads; each call writes one complete line and flushes
    it before releasing the lock, so rows never interleave and a crash loses at
    most the row in flight.

    :param stream: Text stream receiving the table.
    :param fsync: Also ``os.fsync`` the stream after each write. Only valid for
        streams backed by a file descriptor.
    :param owns_stream: Close the stream in :meth:`close`.
    """

    def __init__(
        self,
        stream: TextIO,
        *,
        fsync: bool = False,
        owns_stream: bool = False,
    ) -> None:
        self._stream = stream
        self._fsync = fsync
        self._owns_stream = owns_stream
        self._lock = threading.Lock()
        self._header_written = False
        self.rows_written = 0

    @classmethod
    def open(cls, path: Path | str) -> SummaryWriter:
        """Create (or truncate) the summary file at ``path``."""
        path = Path(path)
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            stream = open(path, "w", encoding="utf-8", newline="\n")
        except OSError as e:
            raise StorageError(f"Failed to open summary file {path}: {e}") from e
        return cls(stream, fsync=True, owns_stream=True)

    @property
    def header_written(self) -> bool:
        return self._header_written

    def write_header(self, columns: Iterable[str]) -> None:
        """Write the header line.

        :raises SummaryWriterError: If the header was already written.
        """
        with self._lock:
            if self._header_written:
                raise SummaryWriterError("Summary header already written")
            self._write_line(",".join(columns))
            self._header_written = True

    def append_row(self, row: SummaryRow) -> None:
        """Append one row and flush it.

        :raises SummaryWriterError: If no header has been written yet.
        """
        line = row.to_line()
        with self._lock:
            if not self._header_written:
                raise SummaryWriterError("Summary header must be written before rows")
            self._write_line(line)
            self.rows_written += 1

    def _write_line(self, line: str) -> None:
        try:
            self._stream.write(line + "\n")
            self._stream.flush()
            if self._fsync:
                os.fsync(self._stream.fileno())
        except OSError as e:
            raise StorageError(f"Failed to write summary row: {e}") from e

    def close(self) -> None:
        with self._lock:
            if self._owns_stream and not self._stream.closed:
                self._stream.close()

    def __enter__(self) -> SummaryWriter:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()
