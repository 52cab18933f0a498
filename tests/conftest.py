"""Shared pytest fixtures for mirrorsync tests."""

from __future__ import annotations

import logging
import os
from collections.abc import Callable, Iterator
from pathlib import Path

import pytest

from mirrorsync.core.config import SyncRequest

# Fixed mtime (2024-01-02 03:04:05 UTC) with a sub-second part
SOURCE_MTIME_NS = 1_704_164_645_123_456_789


@pytest.fixture
def source_dir(tmp_path: Path) -> Path:
    """Create an empty source directory."""
    path = tmp_path / "src"
    path.mkdir()
    return path


@pytest.fixture
def dest_dir(tmp_path: Path) -> Path:
    """Destination path (not created)."""
    return tmp_path / "dest"


@pytest.fixture
def log_path(tmp_path: Path) -> Path:
    """Activity log path (not created)."""
    return tmp_path / "sync.log"


@pytest.fixture
def make_file() -> Callable[..., Path]:
    """Factory that writes a file with a fixed modification time."""

    def _make(
        path: Path, content: bytes | str = b"", mtime_ns: int = SOURCE_MTIME_NS
    ) -> Path:
        path.parent.mkdir(parents=True, exist_ok=True)
        if isinstance(content, str):
            content = content.encode()
        path.write_bytes(content)
        os.utime(path, ns=(mtime_ns, mtime_ns))
        return path

    return _make


@pytest.fixture
def make_request(
    source_dir: Path, dest_dir: Path, log_path: Path
) -> Callable[..., SyncRequest]:
    """Factory for a SyncRequest over the temporary directories."""

    def _make(worker_count: int = 2, skip_extensions: tuple[str, ...] = ()) -> SyncRequest:
        return SyncRequest(
            source_root=source_dir,
            dest_root=dest_dir,
            log_path=log_path,
            worker_count=worker_count,
            skip_extensions=frozenset(skip_extensions),
        )

    return _make


@pytest.fixture(autouse=True)
def reset_mirrorsync_logger() -> Iterator[None]:
    """Undo handler changes the CLI makes to the mirrorsync logger."""
    logger = logging.getLogger("mirrorsync")
    handlers = logger.handlers[:]
    level = logger.level
    propagate = logger.propagate
    yield
    logger.handlers[:] = handlers
    logger.setLevel(level)
    logger.propagate = propagate
