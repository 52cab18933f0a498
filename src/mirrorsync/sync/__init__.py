"""One-way directory sync.

Architecture:
    walk_tree → job queue → SyncOrchestrator workers → copy_file → ActivityLog

Components:
- **walk_tree**: Depth-first walk of the source tree
- **is_up_to_date**: Size + modification time equality check
- **copy_file**: Streaming copy that carries over the source mtime
- **ActivityLog**: Lock-guarded append-only log of copied files
- **SyncOrchestrator**: Bounded queue and fixed pool of worker threads
"""

from mirrorsync.sync.activity_log import ActivityLog
from mirrorsync.sync.equality import is_up_to_date
from mirrorsync.sync.orchestrator import (
    DEFAULT_QUEUE_SIZE,
    FAILED_COPY_BACKOFF,
    SyncOrchestrator,
    sync_directories,
)
from mirrorsync.sync.transfer import COPY_BUFFER_SIZE, copy_file, restore_mtime
from mirrorsync.sync.types import (
    ActivityLogError,
    LogRecord,
    ProgressCallback,
    SyncError,
    SyncStats,
    TransferError,
    TransferOutcome,
    TransferProgress,
    WalkEntry,
    WalkError,
)
from mirrorsync.sync.walker import walk_tree

__all__ = [
    # Pipeline
    "SyncOrchestrator",
    "sync_directories",
    "walk_tree",
    "is_up_to_date",
    "copy_file",
    "restore_mtime",
    "ActivityLog",
    # Constants
    "COPY_BUFFER_SIZE",
    "DEFAULT_QUEUE_SIZE",
    "FAILED_COPY_BACKOFF",
    # Types
    "LogRecord",
    "ProgressCallback",
    "SyncStats",
    "TransferOutcome",
    "TransferProgress",
    "WalkEntry",
    # Errors
    "ActivityLogError",
    "SyncError",
    "TransferError",
    "WalkError",
]
