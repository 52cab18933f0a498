"""Configuration for a mirrorsync run.

This module provides:
- SyncRequest: Immutable parameters of one sync run
- load_config: Read a SyncRequest from a JSON config file
- ConfigError: Raised for missing or invalid configuration

Config file format (all paths may use ``~``):

    {
        "source": "/data/projects",
        "destination": "/mnt/backup/projects",
        "logfile": "/var/log/mirrorsync.log",
        "worker": 4,
        "skip_extensions": [".pdf", ".iso"]
    }
"""

from __future__ import annotations

import json
from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

DEFAULT_CONFIG_FILE = "config.json"

REQUIRED_KEYS = ("source", "destination", "logfile")


class ConfigError(Exception):
    """Exception raised for configuration errors."""


def normalize_extension(ext: str) -> str:
    """Lowercase an extension and make sure it starts with a dot.

    >>> normalize_extension("PDF")
    '.pdf'
    """
    ext = ext.strip().lower()
    if ext and not ext.startswith("."):
        ext = "." + ext
    return ext


@dataclass(frozen=True)
class SyncRequest:
    """Parameters of one sync run.

    Attributes:
        source_root: Directory to mirror from.
        dest_root: Directory to mirror into.
        log_path: Append-only log of copied files.
        worker_count: Number of concurrent copy workers (>= 1).
        skip_extensions: Lowercase extensions (with leading dot) never copied.
    """

    source_root: Path
    dest_root: Path
    log_path: Path
    worker_count: int = 1
    skip_extensions: frozenset[str] = field(default_factory=frozenset)

    def __post_init__(self) -> None:
        """Validate worker count and normalize extensions."""
        if isinstance(self.worker_count, bool) or not isinstance(self.worker_count, int):
            raise ConfigError(f"worker must be an integer, got {self.worker_count!r}")
        if self.worker_count < 1:
            raise ConfigError(f"worker must be at least 1, got {self.worker_count}")

        object.__setattr__(self, "source_root", Path(self.source_root))
        object.__setattr__(self, "dest_root", Path(self.dest_root))
        object.__setattr__(self, "log_path", Path(self.log_path))
        object.__setattr__(
            self,
            "skip_extensions",
            frozenset(normalize_extension(e) for e in self.skip_extensions if e.strip()),
        )

    def should_skip(self, path: Path) -> bool:
        """Check whether a path's extension is skip-listed (case-insensitive)."""
        return path.suffix.lower() in self.skip_extensions

    def with_workers(self, worker_count: int) -> SyncRequest:
        """Return a copy of this request with a different worker count."""
        return SyncRequest(
            source_root=self.source_root,
            dest_root=self.dest_root,
            log_path=self.log_path,
            worker_count=worker_count,
            skip_extensions=self.skip_extensions,
        )

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> SyncRequest:
        """Build a request from a parsed config mapping.

        Paths are expanded and resolved to absolute paths.

        Raises:
            ConfigError: If a required key is missing or a value has the
                wrong type.
        """
        missing = [key for key in REQUIRED_KEYS if not data.get(key)]
        if missing:
            raise ConfigError(f"Missing required config key(s): {', '.join(missing)}")

        for key in REQUIRED_KEYS:
            if not isinstance(data[key], str):
                raise ConfigError(f"{key} must be a string, got {data[key]!r}")

        skip = data.get("skip_extensions") or []
        if isinstance(skip, str) or not isinstance(skip, Iterable):
            raise ConfigError(f"skip_extensions must be a list, got {skip!r}")
        if not all(isinstance(ext, str) for ext in skip):
            raise ConfigError("skip_extensions entries must be strings")

        return cls(
            source_root=_resolve(data["source"]),
            dest_root=_resolve(data["destination"]),
            log_path=_resolve(data["logfile"]),
            worker_count=data.get("worker", 1),
            skip_extensions=frozenset(skip),
        )


def _resolve(path: str) -> Path:
    return Path(path).expanduser().resolve()


def load_config(config_file: Path) -> SyncRequest:
    """Load a sync request from a JSON config file.

    Args:
        config_file: Path to the JSON file.

    Returns:
        The validated SyncRequest.

    Raises:
        ConfigError: If the file is missing, unreadable, not valid JSON,
            or does not describe a valid request.
    """
    try:
        text = config_file.read_text(encoding="utf-8")
    except FileNotFoundError as e:
        raise ConfigError(f"Config file not found: {config_file}") from e
    except OSError as e:
        raise ConfigError(f"Cannot read config file {config_file}: {e}") from e

    try:
        data = json.loads(text)
    except json.JSONDecodeError as e:
        raise ConfigError(f"Invalid JSON in {config_file}: {e}") from e

    if not isinstance(data, dict):
        raise ConfigError(f"Config file {config_file} must contain a JSON object")

    return SyncRequest.from_dict(data)
