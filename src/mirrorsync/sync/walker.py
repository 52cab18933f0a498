"""Depth-first walk of the source tree.

Entries are produced in lexical order, parents before children, starting
with the root itself. Symbolic links are reported but never followed.
The walk keeps its own stack, so tree depth is not bounded by the
interpreter's recursion limit.
"""

from __future__ import annotations

import os
from collections.abc import Iterator
from pathlib import Path

from mirrorsync.sync.types import WalkEntry


def walk_tree(root: Path) -> Iterator[WalkEntry]:
    """Yield every entry under ``root``, including ``root`` itself.

    The walk stops at the first error: the exception propagates out of the
    iterator and no further entries are produced.

    Raises:
        OSError: If the root or any entry cannot be stat'ed, or a directory
            cannot be listed. ``filename`` holds the offending path.
    """
    pending: list[Path] = [root]

    while pending:
        path = pending.pop()
        entry = WalkEntry.from_stat(path, os.lstat(path))
        yield entry

        if not entry.is_dir:
            continue

        # Reversed so the lexically first child is popped next
        children = sorted(os.listdir(path))
        pending.extend(path / name for name in reversed(children))
