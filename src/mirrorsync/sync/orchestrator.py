"""Walk-and-copy pipeline for one-way directory sync.

This module provides:
- SyncOrchestrator: Walks the source tree and fans entries out to workers
- sync_directories: One-call entry point for a whole run

Architecture:
    walk_tree → bounded job queue → worker threads
                                    → is_up_to_date → copy_file → ActivityLog

The walking thread blocks when the queue is full, which is the only flow
control between discovery and copying. Once the walk ends (normally or on
error) one sentinel per worker closes the queue and every worker is joined
before run() returns.
"""

from __future__ import annotations

import logging
import queue
import threading
import time
from collections.abc import Callable
from pathlib import Path

from mirrorsync.core.config import SyncRequest
from mirrorsync.sync.activity_log import ActivityLog
from mirrorsync.sync.equality import is_up_to_date
from mirrorsync.sync.transfer import copy_file
from mirrorsync.sync.types import (
    ActivityLogError,
    ProgressCallback,
    SyncStats,
    TransferError,
    WalkEntry,
    WalkError,
)
from mirrorsync.sync.walker import walk_tree

logger = logging.getLogger(__name__)

DEFAULT_QUEUE_SIZE = 100

# Pause after a failed copy before a worker takes its next job
FAILED_COPY_BACKOFF = 30.0  # seconds


class SyncOrchestrator:
    """Mirrors a source tree into a destination with a fixed worker pool.

    Usage:
        log = ActivityLog(request.log_path)
        orchestrator = SyncOrchestrator(request, log)
        stats = orchestrator.run()
    """

    def __init__(
        self,
        request: SyncRequest,
        activity_log: ActivityLog,
        on_progress: ProgressCallback | None = None,
        on_finished: Callable[[Path], None] | None = None,
        queue_size: int = DEFAULT_QUEUE_SIZE,
        failure_backoff: float = FAILED_COPY_BACKOFF,
    ) -> None:
        """Initialize the orchestrator.

        Args:
            request: What to sync and how many workers to use.
            activity_log: Log that receives one record per copied file.
            on_progress: Optional callback for per-chunk copy progress.
            on_finished: Optional callback with the source path once a copy
                attempt ends, successful or not.
            queue_size: Capacity of the job queue.
            failure_backoff: Seconds a worker sleeps after a failed copy.
        """
        self._request = request
        self._activity_log = activity_log
        self._on_progress = on_progress
        self._on_finished = on_finished
        self._queue_size = queue_size
        self._failure_backoff = failure_backoff

        self._lock = threading.Lock()
        self._stats = SyncStats()

    @property
    def request(self) -> SyncRequest:
        return self._request

    def run(self) -> SyncStats:
        """Run one sync pass and wait for every worker to finish.

        Returns:
            Counters for the run.

        Raises:
            WalkError: If the source tree could not be fully walked. Jobs
                queued before the failure are still processed first.
        """
        self._stats = SyncStats()
        jobs: queue.Queue[WalkEntry | None] = queue.Queue(maxsize=self._queue_size)

        workers: list[threading.Thread] = []
        for worker_id in range(1, self._request.worker_count + 1):
            thread = threading.Thread(
                target=self._worker_loop,
                args=(worker_id, jobs),
                name=f"Worker-{worker_id}",
            )
            thread.start()
            workers.append(thread)

        logger.debug(f"Started {len(workers)} workers for {self._request.source_root}")

        walk_error: OSError | None = None
        try:
            for entry in walk_tree(self._request.source_root):
                jobs.put(entry)
        except OSError as e:
            walk_error = e
            logger.error(f"Error walking {e.filename or self._request.source_root}: {e}")
        finally:
            # Sentinels close the queue; workers drain what is left first
            for _ in workers:
                jobs.put(None)
            for thread in workers:
                thread.join()

        if walk_error is not None:
            failed_path = Path(walk_error.filename or self._request.source_root)
            raise WalkError(failed_path, walk_error, self._stats) from walk_error

        return self._stats

    def _worker_loop(
        self, worker_id: int, jobs: queue.Queue[WalkEntry | None]
    ) -> None:
        """Main loop for worker threads."""
        while True:
            entry = jobs.get()
            if entry is None:
                break

            try:
                self._process_entry(worker_id, entry)
            except Exception as e:
                logger.exception(f"Worker {worker_id}: Unexpected error on {entry.path}")
                self._record_failure(f"{entry.path}: {e}")

    def _process_entry(self, worker_id: int, entry: WalkEntry) -> None:
        """Bring the mirrored counterpart of one entry up to date."""
        request = self._request

        try:
            relative = entry.path.relative_to(request.source_root)
        except ValueError as e:
            logger.error(
                f"Worker {worker_id}: Error getting relative path for {entry.path}: {e}"
            )
            self._record_failure(f"{entry.path}: {e}")
            return

        dest = request.dest_root / relative

        if request.should_skip(entry.path):
            logger.debug(f"Worker {worker_id}: Skipping {entry.path}")
            self._increment("skipped")
            return

        # The walk uses lstat; a link to a directory is mirrored as a directory
        if entry.is_dir or entry.path.is_dir():
            try:
                dest.mkdir(parents=True, exist_ok=True)
            except OSError as e:
                logger.error(f"Worker {worker_id}: Error creating directory {dest}: {e}")
                self._record_failure(f"{dest}: {e}")
                return
            self._increment("directories")
            return

        try:
            equal = is_up_to_date(entry.path, dest)
        except OSError as e:
            logger.error(
                f"Worker {worker_id}: Error comparing files {entry.path} and {dest}: {e}"
            )
            self._record_failure(f"{entry.path}: {e}")
            return

        if equal:
            self._increment("up_to_date")
            return

        logger.info(f"Worker {worker_id}: Copying {entry.path} to {dest}")
        try:
            # Another worker may not have reached the parent directory yet
            dest.parent.mkdir(parents=True, exist_ok=True)
            outcome = copy_file(entry.path, dest, progress_callback=self._on_progress)
        except (TransferError, OSError) as e:
            logger.error(
                f"Worker {worker_id}: Error copying file {entry.path} to {dest}: {e}"
            )
            self._record_failure(f"{entry.path}: {e}")
            self._finished(entry.path)
            time.sleep(self._failure_backoff)
            return

        self._finished(entry.path)

        with self._lock:
            self._stats.copied += 1
            self._stats.bytes_copied += outcome.bytes_copied

        if outcome.error is not None:
            logger.warning(
                f"Worker {worker_id}: Error setting times for {dest}: {outcome.error}"
            )
            self._record_error(f"{dest}: {outcome.error}")

        try:
            self._activity_log.record(dest)
        except ActivityLogError as e:
            logger.error(f"Worker {worker_id}: Error logging file {dest}: {e}")
            self._record_error(f"{dest}: {e}")

    def _finished(self, source: Path) -> None:
        if self._on_finished:
            self._on_finished(source)

    def _increment(self, counter: str) -> None:
        with self._lock:
            setattr(self._stats, counter, getattr(self._stats, counter) + 1)

    def _record_failure(self, message: str) -> None:
        """Count an entry that could not be brought up to date."""
        with self._lock:
            self._stats.failed += 1
            self._stats.errors.append(message)

    def _record_error(self, message: str) -> None:
        """Remember an error that did not prevent the copy."""
        with self._lock:
            self._stats.errors.append(message)


def sync_directories(
    request: SyncRequest,
    echo: Callable[[str], None] | None = None,
    on_progress: ProgressCallback | None = None,
    on_finished: Callable[[Path], None] | None = None,
    failure_backoff: float = FAILED_COPY_BACKOFF,
) -> SyncStats:
    """Sync ``request.source_root`` into ``request.dest_root``.

    Args:
        request: Sync parameters.
        echo: Operator output for activity log records (default click.echo).
        on_progress: Optional per-chunk copy progress callback.
        on_finished: Optional callback when a copy attempt ends.
        failure_backoff: Seconds a worker sleeps after a failed copy.

    Returns:
        Counters for the run.

    Raises:
        WalkError: If the source tree could not be fully walked.
    """
    activity_log = ActivityLog(request.log_path, echo=echo)
    orchestrator = SyncOrchestrator(
        request,
        activity_log,
        on_progress=on_progress,
        on_finished=on_finished,
        failure_backoff=failure_backoff,
    )
    return orchestrator.run()
