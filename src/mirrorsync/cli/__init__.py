"""Command-line interface for mirrorsync.

This module provides the main CLI entry point.
"""

from __future__ import annotations

from mirrorsync.cli.mirror import sync

cli = sync


def main() -> None:
    """Entry point for the CLI."""
    cli()


__all__ = [
    "cli",
    "main",
]
