#!/usr/bin/env python3
"""Configuration for mac-backup-helper."""
from __future__ import annotations

import json
import os
from pathlib import Path
from typing import Any

from .constants import DEFAULT_THRESHOLD_KB, DEFAULT_SCAN_TIMEOUT_SEC

HOME = str(Path.home())
CONFIG_PATHS = [
    os.path.join(HOME, ".macbackuprc"),
    os.path.join(HOME, ".config", "mac-backup-helper", "config.json"),
]

DEFAULTS: dict[str, Any] = {
    "threshold_kb": DEFAULT_THRESHOLD_KB,
    "scan_roots": [],
    "one_filesystem": True,
    "log_file": "",
    "scan_timeout_sec": DEFAULT_SCAN_TIMEOUT_SEC,
}

VALID_KEYS = frozenset(DEFAULTS.keys())


def find_config() -> str | None:
    """The rc file that load() reads, or None when the defaults apply."""
    return next((p for p in CONFIG_PATHS if os.path.isfile(p)), None)


def config_path() -> str:
    """Where settings are written: the rc file already in use, else ~/.macbackuprc."""
    return find_config() or CONFIG_PATHS[0]


def config_exists() -> bool:
    return find_config() is not None


def load() -> dict[str, Any]:
    """Load config from first existing file. Returns defaults + overrides."""
    out = dict(DEFAULTS)
    out["scan_roots"] = list(DEFAULTS["scan_roots"])
    for p in CONFIG_PATHS:
        if not os.path.isfile(p):
            continue
        try:
            with open(p, "r", encoding="utf-8") as f:
                raw = json.load(f)
            if not isinstance(raw, dict):
                continue
            for k, v in raw.items():
                if k not in VALID_KEYS:
                    continue
                if k == "threshold_kb" and isinstance(v, (int, float)) and not isinstance(v, bool):
                    val = int(v)
                    if 1 <= val <= 10**12:
                        out[k] = val
                elif k == "scan_roots" and isinstance(v, list):
                    out[k] = [str(x) for x in v if isinstance(x, str) and x][:50]
                elif k == "one_filesystem" and isinstance(v, bool):
                    out[k] = v
                elif k == "log_file" and isinstance(v, str):
                    out[k] = v
                elif k == "scan_timeout_sec" and isinstance(v, (int, float)) and not isinstance(v, bool):
                    val = int(v)
                    if 10 <= val <= 86400:
                        out[k] = val
            return out
        except (OSError, json.JSONDecodeError):
            continue
    return out


def save(cfg: dict[str, Any], path: str | None = None) -> str:
    """Write the known settings to path (default: config_path()). Returns the path.

    Scan roots are stored expanded and absolute so the file means the same
    thing whichever directory the tool is started from.
    """
    p = path or config_path()
    dirname = os.path.dirname(p)
    if dirname:
        os.makedirs(dirname, exist_ok=True)
    to_write = {k: cfg.get(k, DEFAULTS[k]) for k in sorted(VALID_KEYS)}
    to_write["scan_roots"] = [os.path.abspath(os.path.expanduser(r)) for r in to_write["scan_roots"]]
    with open(p, "w", encoding="utf-8") as f:
        json.dump(to_write, f, indent=2)
        f.write("\n")
    return p


def init_config(force: bool = False) -> str | None:
    """Write a settings file holding the defaults.

    Returns the path written, or None when a settings file already exists and
    force is False.
    """
    if config_exists() and not force:
        return None
    return save(DEFAULTS, config_path())
