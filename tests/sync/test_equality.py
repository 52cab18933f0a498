"""Tests for the size + mtime equality check."""

from __future__ import annotations

import os
from pathlib import Path

import pytest

from mirrorsync.sync.equality import is_up_to_date


class TestIsUpToDate:
    """Tests for is_up_to_date."""

    def test_missing_destination_is_stale(self, tmp_path: Path, make_file) -> None:
        """A missing destination is not an error, just not up to date."""
        source = make_file(tmp_path / "a.txt", "hello")
        assert is_up_to_date(source, tmp_path / "missing.txt") is False

    def test_same_size_and_mtime(self, tmp_path: Path, make_file) -> None:
        """Identical size and mtime means up to date, content is not read."""
        source = make_file(tmp_path / "a.txt", "hello")
        dest = make_file(tmp_path / "b.txt", "world")
        assert is_up_to_date(source, dest) is True

    def test_different_size(self, tmp_path: Path, make_file) -> None:
        """Different sizes are stale even with the same mtime."""
        source = make_file(tmp_path / "a.txt", "hello")
        dest = make_file(tmp_path / "b.txt", "hello!")
        assert is_up_to_date(source, dest) is False

    def test_different_mtime(self, tmp_path: Path, make_file) -> None:
        """Different mtimes are stale even with the same size."""
        source = make_file(tmp_path / "a.txt", "hello")
        dest = make_file(tmp_path / "b.txt", "hello", mtime_ns=1_600_000_000_000_000_000)
        assert is_up_to_date(source, dest) is False

    def test_mtime_compared_exactly(self, tmp_path: Path, make_file) -> None:
        """There is no tolerance window on the modification time."""
        source = make_file(tmp_path / "a.txt", "hello")
        st = source.stat()
        dest = make_file(tmp_path / "b.txt", "hello", mtime_ns=st.st_mtime_ns + 1000)
        if os.stat(dest).st_mtime_ns == st.st_mtime_ns:
            pytest.skip("filesystem does not store sub-millisecond mtimes")
        assert is_up_to_date(source, dest) is False

    def test_missing_source_raises(self, tmp_path: Path, make_file) -> None:
        """A source that cannot be stat'ed is an error."""
        dest = make_file(tmp_path / "b.txt", "hello")
        with pytest.raises(FileNotFoundError):
            is_up_to_date(tmp_path / "gone.txt", dest)

    def test_destination_stat_error_raises(self, tmp_path: Path, make_file) -> None:
        """Destination stat errors other than not-found are propagated."""
        source = make_file(tmp_path / "a.txt", "hello")
        # A path below a regular file fails with ENOTDIR, not ENOENT
        with pytest.raises(NotADirectoryError):
            is_up_to_date(source, source / "child")
