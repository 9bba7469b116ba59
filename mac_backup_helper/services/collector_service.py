#!/usr/bin/env python3
"""Size collection: run du over a scan root and keep what meets the threshold."""
import os
import shutil
import subprocess
from typing import List, Optional, Tuple

from ..core.constants import DU_PATHS, DEFAULT_SCAN_TIMEOUT_SEC
from ..core.errors import CollectorError
from ..core.models import Entry, ScanBatch


def _find_du():
    for p in DU_PATHS:
        if os.path.isfile(p) and os.access(p, os.X_OK):
            return p
    return shutil.which("du")


def _run_du(args: list, timeout: int) -> str:
    """Run du with list args (no shell). Returns stdout as str.

    Output is read as bytes and decoded with os.fsdecode, so names that are not
    valid UTF-8 keep their original bytes (surrogateescape) and still map back
    to the real file.

    du exits 1 when a few folders are unreadable (TCC, SIP) but still reports
    everything else, so output wins over the exit code.
    """
    du = _find_du()
    if not du:
        raise CollectorError("du not found")
    try:
        proc = subprocess.run(
            [du] + args,
            capture_output=True,
            timeout=timeout,
        )
    except subprocess.TimeoutExpired as e:
        raise CollectorError(f"du timed out after {timeout}s on {args[-1]}") from e
    except (FileNotFoundError, OSError) as e:
        raise CollectorError(str(e)) from e
    if proc.returncode != 0 and not proc.stdout.strip():
        err = (proc.stderr or b"").decode("utf-8", "replace").strip() or f"exit code {proc.returncode}"
        raise CollectorError(f"du failed on {args[-1]}: {err}")
    return "\n".join(os.fsdecode(line) for line in proc.stdout.split(b"\n"))


def parse_du_output(text: str) -> List[Tuple[int, str]]:
    """Return [(size_kb, path), ...] from du -k output; junk lines are skipped."""
    results = []
    for line in text.split("\n"):
        if "\t" in line:
            parts = line.split("\t", 1)
        else:
            parts = line.strip().split(None, 1)
        if len(parts) != 2:
            continue
        try:
            size = int(parts[0].strip())
        except ValueError:
            continue
        path = parts[1]
        if not path:
            continue
        results.append((max(0, size), path))
    return results


def du_records(root: str, one_filesystem: bool = True,
               timeout: int = DEFAULT_SCAN_TIMEOUT_SEC) -> List[Tuple[int, str]]:
    """Every file and folder under root with its size in KB (du -a -k)."""
    args = ["-a", "-k"]
    if one_filesystem:
        args.append("-x")
    args.append(root)
    return parse_du_output(_run_du(args, timeout))


def measure_root_kb(root: str, one_filesystem: bool = True,
                    timeout: int = DEFAULT_SCAN_TIMEOUT_SEC) -> int:
    """Total size of root in KB (du -s -k)."""
    args = ["-s", "-k"]
    if one_filesystem:
        args.append("-x")
    args.append(root)
    for size, path in parse_du_output(_run_du(args, timeout)):
        if path == root:
            return size
    raise CollectorError(f"du reported no total for {root}")


def filter_records(root: str, records: List[Tuple[int, str]], threshold_kb: int,
                   root_total_kb: Optional[int] = None) -> ScanBatch:
    """Keep records at or above threshold. The root's own record sets the total."""
    entries = []
    for size, path in records:
        if path == root and root_total_kb is None:
            root_total_kb = size
        if size >= threshold_kb:
            entries.append(Entry(path, size))
    return ScanBatch(root=root, entries=entries, root_total_kb=root_total_kb)


def collect_sizes(root: str, threshold_kb: int, one_filesystem: bool = True,
                  timeout: int = DEFAULT_SCAN_TIMEOUT_SEC) -> ScanBatch:
    """One ScanBatch for root. Blocks for as long as du takes."""
    root = os.path.abspath(root)
    batch = filter_records(root, du_records(root, one_filesystem, timeout), threshold_kb)
    if batch.root_total_kb is None:
        batch.root_total_kb = measure_root_kb(root, one_filesystem, timeout)
    return batch
