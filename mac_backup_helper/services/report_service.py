#!/usr/bin/env python3
"""Drive the collector and renderer over every scan root and keep the total."""
import os
from dataclasses import dataclass, field
from typing import Callable, Iterable, List, Optional

from ..core.errors import BackupHelperError, ScanRootError
from ..core.models import ScanBatch, TreeLine
from ..utils.disk import is_real_dir
from . import collector_service as collector
from . import tree_service as tree


@dataclass
class TotalAccumulator:
    """Running KB total across roots. Only ever grows."""
    total_kb: int = 0

    def add(self, kb) -> int:
        try:
            kb = int(kb or 0)
        except (TypeError, ValueError):
            kb = 0
        self.total_kb += max(0, kb)
        return self.total_kb


@dataclass
class RootFailure:
    root: str
    error: BackupHelperError


@dataclass
class ReportResult:
    total: TotalAccumulator = field(default_factory=TotalAccumulator)
    failures: List[RootFailure] = field(default_factory=list)


def validate_roots(roots: Iterable[str]) -> List[str]:
    """Absolute, slash-trimmed roots. Raises ScanRootError on the first non-directory."""
    out = []
    for r in roots:
        p = os.path.abspath(os.path.expanduser(r))
        if not is_real_dir(p):
            raise ScanRootError(f"Not a directory: {r}")
        out.append(p)
    return out


def render_batch(batch: ScanBatch, is_dir: Callable[[str], bool] = os.path.isdir) -> List[TreeLine]:
    if not batch.entries:
        return tree.render_empty_root(batch.root, batch.root_total_kb)
    return tree.render_root(batch.root, batch.entries, batch.root_total_kb, is_dir=is_dir)


def run_report(roots: Iterable[str], threshold_kb: int,
               collect: Optional[Callable[[str, int], ScanBatch]] = None,
               on_root: Optional[Callable[[str], None]] = None,
               on_lines: Optional[Callable[[str, List[TreeLine]], None]] = None,
               on_error: Optional[Callable[[RootFailure], None]] = None,
               is_dir: Callable[[str], bool] = os.path.isdir) -> ReportResult:
    """Scan and render each root in order.

    A root that fails after validation is reported through on_error and adds
    nothing to the total; the remaining roots still run. The root total comes
    from the collector, which queries du itself when the scan did not report it.
    """
    collect = collect or collector.collect_sizes
    result = ReportResult()
    for root in validate_roots(roots):
        if on_root:
            on_root(root)
        try:
            batch = collect(root, threshold_kb)
            lines = render_batch(batch, is_dir=is_dir)
        except ScanRootError:
            raise
        except BackupHelperError as e:
            failure = RootFailure(root, e)
            result.failures.append(failure)
            if on_error:
                on_error(failure)
            continue
        if on_lines:
            on_lines(root, lines)
        result.total.add(batch.root_total_kb)
    return result
