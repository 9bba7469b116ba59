"""mac-backup-helper: see where the space lives before a backup."""

__version__ = "0.3.0"
