"""Append-only record of copied files.

The log file is shared by every worker of a run. All access goes through
ActivityLog.record(), which holds one lock for the whole append so that
records from concurrent workers never interleave.
"""

from __future__ import annotations

import threading
from collections.abc import Callable
from datetime import datetime
from pathlib import Path

import click

from mirrorsync.sync.types import ActivityLogError, LogRecord


def rfc3339_now() -> str:
    """Current local time as an RFC 3339 timestamp with UTC offset."""
    return datetime.now().astimezone().isoformat(timespec="seconds")


class ActivityLog:
    """Serialized writer for the copied-files log.

    Usage:
        log = ActivityLog(Path("sync.log"))
        log.record(Path("/backup/docs/report.txt"))
    """

    def __init__(
        self,
        log_path: Path,
        echo: Callable[[str], None] | None = None,
    ) -> None:
        """Initialize the activity log.

        Args:
            log_path: File to append records to (created on first record).
            echo: Operator-visible output for each record. Defaults to
                click.echo.
        """
        self._log_path = log_path
        self._echo = echo or click.echo
        self._lock = threading.Lock()
        self._count = 0

    @property
    def log_path(self) -> Path:
        return self._log_path

    @property
    def count(self) -> int:
        """Number of records written by this instance."""
        with self._lock:
            return self._count

    def record(self, dest_path: Path) -> LogRecord:
        """Append a record for a copied file and echo it.

        Args:
            dest_path: Destination path that was written.

        Returns:
            The record that was written.

        Raises:
            ActivityLogError: If the log file cannot be opened or written.
        """
        with self._lock:
            record = LogRecord(timestamp=rfc3339_now(), dest_path=dest_path)
            line = record.format()
            try:
                with open(self._log_path, "a", encoding="utf-8") as f:
                    f.write(line + "\n")
            except OSError as e:
                raise ActivityLogError(
                    f"Failed to write {self._log_path}: {e}"
                ) from e

            self._count += 1
            self._echo(line)
            return record
