"""Core configuration shared by the sync engine and the CLI."""

from mirrorsync.core.config import (
    DEFAULT_CONFIG_FILE,
    ConfigError,
    SyncRequest,
    load_config,
)

__all__ = [
    "DEFAULT_CONFIG_FILE",
    "ConfigError",
    "SyncRequest",
    "load_config",
]
