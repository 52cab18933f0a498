"""Streaming file copy with progress reporting.

This module provides:
- copy_file: Copy one file through a fixed-size buffer
- restore_mtime: Set a destination's modification time

Writes go straight to the destination path. A copy that fails half-way
leaves the partial file in place; the next run sees a size/mtime mismatch
and copies it again.
"""

from __future__ import annotations

import os
import time
from pathlib import Path

from mirrorsync.sync.types import (
    ProgressCallback,
    TransferError,
    TransferOutcome,
    TransferProgress,
)

COPY_BUFFER_SIZE = 32 * 1024  # 32 KiB


def restore_mtime(dest: Path, mtime_ns: int) -> None:
    """Set the modification time of ``dest``, access time to now.

    Raises:
        OSError: If the times cannot be set.
    """
    os.utime(dest, ns=(time.time_ns(), mtime_ns))


def copy_file(
    source: Path,
    dest: Path,
    progress_callback: ProgressCallback | None = None,
) -> TransferOutcome:
    """Copy ``source`` to ``dest`` and carry over its modification time.

    The source is streamed through a COPY_BUFFER_SIZE buffer. The source's
    modification time is captured before the first read and applied to the
    destination once all bytes are written. Failing to apply it is reported
    in the outcome but does not undo the copy.

    Args:
        source: Regular file to read.
        dest: File to create or truncate. Its parent must exist.
        progress_callback: Optional callback invoked after every chunk.

    Returns:
        TransferOutcome with the number of bytes copied.

    Raises:
        TransferError: If either file cannot be opened, or a read or write
            fails mid-stream.
    """
    start = time.monotonic()
    bytes_copied = 0

    try:
        with open(source, "rb") as src:
            source_stat = os.fstat(src.fileno())
            with open(dest, "wb") as dst:
                while True:
                    chunk = src.read(COPY_BUFFER_SIZE)
                    if not chunk:
                        break
                    dst.write(chunk)
                    bytes_copied += len(chunk)

                    if progress_callback:
                        progress_callback(TransferProgress(
                            file_path=source,
                            file_size=source_stat.st_size,
                            bytes_transferred=bytes_copied,
                            elapsed=time.monotonic() - start,
                        ))
    except OSError as e:
        raise TransferError(str(e)) from e

    outcome = TransferOutcome(
        bytes_copied=bytes_copied,
        elapsed=time.monotonic() - start,
    )

    try:
        restore_mtime(dest, source_stat.st_mtime_ns)
    except OSError as e:
        outcome.error = e

    return outcome
