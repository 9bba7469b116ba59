"""Exceptions raised by mac-backup-helper."""


class BackupHelperError(Exception):
    """Base class for everything this tool raises on purpose."""


class ScanRootError(BackupHelperError):
    """A scan root is not a real directory. Fatal for the whole run."""


class CollectorError(BackupHelperError):
    """du could not be run or produced nothing usable for one root."""


class MalformedBatchError(BackupHelperError):
    """A size batch contains paths outside its scan root."""


class RenderOrderError(BackupHelperError):
    """A child was consumed more times than it was counted."""
