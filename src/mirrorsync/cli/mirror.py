"""Mirror command for mirrorsync CLI.

Commands:
- sync: Mirror the configured source directory into the destination
"""

from __future__ import annotations

import logging
import sys
import threading
from collections.abc import Callable
from pathlib import Path

import click

from mirrorsync import __version__
from mirrorsync.core.config import DEFAULT_CONFIG_FILE, ConfigError, load_config
from mirrorsync.sync import SyncStats, TransferProgress, WalkError, sync_directories


def format_size(size_bytes: float) -> str:
    """Format size in bytes to human-readable string."""
    if size_bytes < 1024:
        return f"{size_bytes:.0f} B"
    if size_bytes < 1024 * 1024:
        return f"{size_bytes / 1024:.1f} KB"
    if size_bytes < 1024 * 1024 * 1024:
        return f"{size_bytes / (1024 * 1024):.1f} MB"
    return f"{size_bytes / (1024 * 1024 * 1024):.2f} GB"


class StatusLineAwareHandler(logging.Handler):
    """Logging handler that coordinates with the status line display.

    Clears the status line before printing log messages and restores it after.
    """

    def __init__(
        self,
        clear_func: Callable[[], None],
        update_func: Callable[[], None],
        lock: threading.RLock,
    ) -> None:
        super().__init__()
        self._clear_func = clear_func
        self._update_func = update_func
        self._lock = lock

    def emit(self, record: logging.LogRecord) -> None:
        try:
            msg = self.format(record)
            with self._lock:
                self._clear_func()
                # Use stdout (same as status line) to prevent interleaving
                sys.stdout.write(msg + "\n")
                sys.stdout.flush()
                self._update_func()
        except Exception:
            self.handleError(record)


class StatusLine:
    """Single-line display of in-flight copies with their throughput."""

    def __init__(self, enabled: bool = True, width: int = 80) -> None:
        self._enabled = enabled
        self._width = width
        self._lock = threading.RLock()
        self._in_progress: dict[Path, TransferProgress] = {}
        self._last_len = 0

    @property
    def lock(self) -> threading.RLock:
        return self._lock

    def clear(self) -> None:
        """Clear the current status line."""
        with self._lock:
            if self._last_len > 0 and self._enabled:
                sys.stdout.write("\r" + " " * self._last_len + "\r")
                sys.stdout.flush()
                self._last_len = 0

    def update(self) -> None:
        """Redraw the status line from the in-flight transfers."""
        if not self._enabled:
            return

        with self._lock:
            if not self._in_progress:
                self.clear()
                return

            files_str = ", ".join(
                f"{p.file_path.name} {p.percent:.0f}% ({format_size(p.speed)}/s)"
                for p in self._in_progress.values()
            )
            status = f"  Copying: {files_str}"

            if len(status) > self._width - 3:
                status = status[: self._width - 6] + "..."

            clear_part = " " * max(0, self._last_len - len(status))
            sys.stdout.write(f"\r{status}{clear_part}")
            sys.stdout.flush()
            self._last_len = len(status)

    def on_progress(self, progress: TransferProgress) -> None:
        with self._lock:
            self._in_progress[progress.file_path] = progress
            self.update()

    def on_finished(self, source: Path) -> None:
        with self._lock:
            self._in_progress.pop(source, None)
            self.update()

    def echo(self, message: str) -> None:
        """Print a full line without tearing the status line."""
        with self._lock:
            self.clear()
            click.echo(message)
            self.update()


def setup_logging(status: StatusLine, level: int) -> None:
    """Route mirrorsync log records through the status line."""
    handler = StatusLineAwareHandler(
        clear_func=status.clear,
        update_func=status.update,
        lock=status.lock,
    )
    handler.setFormatter(logging.Formatter("%(message)s"))
    handler.setLevel(level)

    mirrorsync_logger = logging.getLogger("mirrorsync")
    for existing in mirrorsync_logger.handlers[:]:
        mirrorsync_logger.removeHandler(existing)
    mirrorsync_logger.addHandler(handler)
    mirrorsync_logger.setLevel(level)
    mirrorsync_logger.propagate = False


def display_summary(stats: SyncStats) -> None:
    """Display sync results summary."""
    if stats.errors:
        click.echo(click.style("\nErrors:", fg="red"))
        for error in stats.errors:
            click.echo(f"  ✗ {error}")

    if not stats.changed and not stats.errors:
        click.echo("Everything is up to date.")
        return

    click.echo(
        f"\nSync complete: {stats.copied} copied ({format_size(stats.bytes_copied)}), "
        f"{stats.up_to_date} up to date, "
        f"{stats.skipped} skipped, "
        f"{stats.failed} failed"
    )


@click.command()
@click.option(
    "--config",
    "-c",
    "config_file",
    type=click.Path(dir_okay=False, path_type=Path),
    default=DEFAULT_CONFIG_FILE,
    show_default=True,
    help="JSON config file.",
)
@click.option(
    "--workers",
    "-w",
    type=click.IntRange(min=1),
    default=None,
    help="Number of copy workers (overrides the config file).",
)
@click.option("--no-progress", is_flag=True, help="Disable the progress status line.")
@click.option("--verbose", "-v", is_flag=True, help="Also show skipped entries.")
@click.option("--quiet", "-q", is_flag=True, help="Only show warnings and errors.")
@click.version_option(version=__version__, prog_name="mirrorsync")
def sync(
    config_file: Path,
    workers: int | None,
    no_progress: bool,
    verbose: bool,
    quiet: bool,
) -> None:
    """Mirror the source directory into the destination.

    Copies every missing or changed file, skipping configured extensions,
    and appends one line per copied file to the log file. Nothing is ever
    deleted from the destination.
    """
    try:
        request = load_config(config_file)
    except ConfigError as e:
        click.echo(f"Error reading config: {e}", err=True)
        sys.exit(1)

    if workers is not None:
        request = request.with_workers(workers)

    status = StatusLine(enabled=not no_progress and not quiet)
    level = logging.DEBUG if verbose else logging.WARNING if quiet else logging.INFO
    setup_logging(status, level)

    if not quiet:
        click.echo(f"Syncing {request.source_root} -> {request.dest_root}")
        click.echo(f"Workers: {request.worker_count}, log: {request.log_path}\n")

    try:
        stats = sync_directories(
            request,
            echo=status.echo,
            on_progress=status.on_progress,
            on_finished=status.on_finished,
        )
    except WalkError as e:
        status.clear()
        click.echo(f"Error syncing directories: {e}", err=True)
        display_summary(e.stats)
        sys.exit(1)

    status.clear()
    if not quiet:
        display_summary(stats)
