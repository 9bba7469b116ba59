#!/usr/bin/env python3
"""Find the user home folders a technician can pick as a backup source."""
import os
from typing import List, Tuple

from ..core.constants import USERS_DIR, EXCLUDED_USERS
from ..core.errors import ScanRootError
from ..utils.disk import is_real_dir


def list_user_homes(users_dir: str = USERS_DIR) -> List[Tuple[str, str]]:
    """Return [(name, path), ...] sorted by name. Empty if users_dir is unreadable."""
    out = []
    try:
        names = os.listdir(users_dir)
    except OSError:
        return out
    for name in sorted(names, key=str.lower):
        if name.startswith(".") or name in EXCLUDED_USERS:
            continue
        p = os.path.join(users_dir, name)
        if is_real_dir(p):
            out.append((name, p))
    return out


def user_home(name: str, users_dir: str = USERS_DIR) -> str:
    p = os.path.join(users_dir, name)
    if not name or os.sep in name or not is_real_dir(p):
        raise ScanRootError(f"No home folder for user '{name}' in {users_dir}")
    return p
