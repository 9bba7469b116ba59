"""Core constants, models, errors and config for mac-backup-helper."""

from .constants import (
    HOME,
    USERS_DIR,
    EXCLUDED_USERS,
    DEFAULT_THRESHOLD_KB,
    DU_PATHS,
    PLACEHOLDER_TEXT,
)
from .errors import (
    BackupHelperError,
    ScanRootError,
    CollectorError,
    MalformedBatchError,
    RenderOrderError,
)
from .models import Entry, ScanBatch, TreeLine
from . import config

__all__ = [
    "HOME",
    "USERS_DIR",
    "EXCLUDED_USERS",
    "DEFAULT_THRESHOLD_KB",
    "DU_PATHS",
    "PLACEHOLDER_TEXT",
    "BackupHelperError",
    "ScanRootError",
    "CollectorError",
    "MalformedBatchError",
    "RenderOrderError",
    "Entry",
    "ScanBatch",
    "TreeLine",
    "config",
]
