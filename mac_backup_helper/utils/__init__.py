"""Small helpers for mac-backup-helper."""
