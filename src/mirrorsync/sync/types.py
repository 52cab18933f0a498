"""Shared types and dataclasses for sync operations.

This module provides:
- SyncError, WalkError, TransferError, ActivityLogError: Exception classes
- WalkEntry: One entry discovered by the tree walk
- TransferProgress: Progress of a single in-flight copy
- TransferOutcome: Result of a single copy
- LogRecord: One line of the activity log
- SyncStats: Counters for a whole run
- Type aliases for callbacks
"""

from __future__ import annotations

import os
import stat
from collections.abc import Callable
from dataclasses import dataclass, field
from pathlib import Path


class SyncError(Exception):
    """Base exception for sync errors."""


class TransferError(SyncError):
    """Failed to copy a file."""


class ActivityLogError(SyncError):
    """Failed to append a record to the activity log."""


class WalkError(SyncError):
    """The source tree walk failed.

    Raised once every job queued before the failure has drained.

    Attributes:
        path: Path the walk failed on
        stats: Counters for the work done before and after the failure
    """

    def __init__(self, path: Path, cause: OSError, stats: SyncStats) -> None:
        self.path = path
        self.stats = stats
        super().__init__(f"{path}: {cause.strerror or cause}")


@dataclass(frozen=True)
class WalkEntry:
    """An entry produced by the tree walk and consumed by one worker."""

    path: Path
    is_dir: bool
    size: int
    mtime_ns: int

    @classmethod
    def from_stat(cls, path: Path, st: os.stat_result) -> WalkEntry:
        """Build an entry from an ``lstat`` result."""
        return cls(
            path=path,
            is_dir=stat.S_ISDIR(st.st_mode),
            size=st.st_size,
            mtime_ns=st.st_mtime_ns,
        )


@dataclass
class TransferProgress:
    """Progress information for one file copy."""

    file_path: Path
    file_size: int
    bytes_transferred: int
    elapsed: float  # seconds since the copy started

    @property
    def speed(self) -> float:
        """Average throughput so far in bytes/sec."""
        if self.elapsed <= 0:
            return 0.0
        return self.bytes_transferred / self.elapsed

    @property
    def percent(self) -> float:
        """Get progress percentage."""
        if self.file_size == 0:
            return 100.0
        return (self.bytes_transferred / self.file_size) * 100


# Type alias for progress callback
ProgressCallback = Callable[[TransferProgress], None]


@dataclass
class TransferOutcome:
    """Result of a file copy.

    Attributes:
        bytes_copied: Number of bytes written to the destination.
        elapsed: Time taken in seconds.
        error: Non-fatal error raised after the bytes were copied
            (the modification time could not be restored).
    """

    bytes_copied: int
    elapsed: float
    error: Exception | None = None


@dataclass(frozen=True)
class LogRecord:
    """One activity log line: when a destination file was written."""

    timestamp: str
    dest_path: Path

    def format(self) -> str:
        return f"{self.timestamp}: {self.dest_path}"


@dataclass
class SyncStats:
    """Counters for a sync run."""

    copied: int = 0
    up_to_date: int = 0
    skipped: int = 0
    directories: int = 0
    failed: int = 0
    bytes_copied: int = 0
    errors: list[str] = field(default_factory=list)

    @property
    def changed(self) -> bool:
        """True if the run copied anything or hit a per-entry error."""
        return self.copied > 0 or self.failed > 0
