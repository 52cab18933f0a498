"""Up-to-date check between a source file and its mirrored destination."""

from __future__ import annotations

from pathlib import Path


def is_up_to_date(source: Path, dest: Path) -> bool:
    """Check whether ``dest`` already matches ``source``.

    Two files are considered equal when their sizes and modification times
    are identical (nanosecond resolution, no tolerance). Content is never
    read.

    Args:
        source: Source file path.
        dest: Mirrored destination path.

    Returns:
        True if the destination is up to date, False if it is missing or stale.

    Raises:
        OSError: If the source cannot be stat'ed, or the destination stat
            fails for any reason other than not existing.
    """
    source_stat = source.stat()

    try:
        dest_stat = dest.stat()
    except FileNotFoundError:
        return False

    if source_stat.st_size != dest_stat.st_size:
        return False

    return source_stat.st_mtime_ns == dest_stat.st_mtime_ns
