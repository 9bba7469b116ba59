"""Disk and path helpers for mac-backup-helper."""
import os

UNITS = ["KB", "MB", "GB", "TB", "PB"]


# size formatter, base 1000 starting from kilobytes
def human_size_kb(kb):
    """'500 MB', '1.5 GB'. Truncates, so 999_999 KB stays '999 MB'. None/negative -> ''."""
    if kb is None or kb < 0:
        return ""
    kb = int(kb)
    i = 0
    while i < len(UNITS) - 1 and kb >= 1000 ** (i + 1):
        i += 1
    scale = 1000 ** i
    if i > 0 and kb < 10 * scale:
        tenths = kb * 10 // scale
        return f"{tenths // 10}.{tenths % 10} {UNITS[i]}"
    return f"{kb // scale} {UNITS[i]}"


def is_real_dir(path):
    """True for an existing directory that is not a symlink to one."""
    try:
        return os.path.isdir(path) and not os.path.islink(path)
    except OSError:
        return False


def printable(text):
    """Text safe to print; undecodable name bytes become U+FFFD only here."""
    return os.fsencode(text).decode("utf-8", "replace")
