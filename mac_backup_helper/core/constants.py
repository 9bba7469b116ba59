"""Path, tool and rendering constants for mac-backup-helper."""

import pathlib

HOME = str(pathlib.Path.home())

USERS_DIR = "/Users"
# Not real people; never offered as a backup source
EXCLUDED_USERS = {"Shared", "Guest"}

# 1 GB, expressed in kilobytes
DEFAULT_THRESHOLD_KB = 1_000_000
DEFAULT_SCAN_TIMEOUT_SEC = 3600

DU_PATHS = ["/usr/bin/du", "/bin/du"]

PLACEHOLDER_TEXT = "(no items over threshold here)"

# Tree connectors
BAR = "│ "
GAP = "  "
TEE = "├─"
ELBOW = "└─"

SIZE_WIDTH = 7
