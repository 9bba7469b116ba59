#!/usr/bin/env python3
"""Render a flat, threshold-filtered du batch as an indented size tree.

The batch only holds items at or above the threshold, so the tree is implicit:
parents are found by trimming path segments, and "does this folder still have
children to draw" is tracked with a per-root countdown of unrendered children.
"""
import os
from collections import Counter
from typing import Callable, Dict, Iterable, List, Optional

from ..core.constants import BAR, GAP, TEE, ELBOW, PLACEHOLDER_TEXT
from ..core.errors import MalformedBatchError, RenderOrderError
from ..core.models import Entry, TreeLine
from ..utils.disk import human_size_kb


def depth(path: str, sep: str = os.sep) -> int:
    """Number of separators in path; the filesystem root itself is 0."""
    if path == sep:
        return 0
    return path.count(sep)


def parent_of(path: str, sep: str = os.sep) -> str:
    head = path.rsplit(sep, 1)[0]
    return head or sep


def _segments(path: str, sep: str = os.sep):
    return tuple(s for s in path.split(sep) if s)


def _is_inside(path: str, root: str, sep: str = os.sep) -> bool:
    if root == sep:
        return path.startswith(sep) and path != sep
    return path.startswith(root + sep)


class HierarchyTracker:
    """Per-root count of children that have not been rendered yet."""

    def __init__(self, root: str, entries: Iterable[Entry], sep: str = os.sep):
        self.root = root
        self.sep = sep
        self._remaining: Counter = Counter()
        for e in entries:
            if e.path != root:
                self._remaining[parent_of(e.path, sep)] += 1

    def remaining(self, path: str) -> int:
        return self._remaining.get(path, 0)

    def consume(self, path: str) -> int:
        """Mark path as rendered. Returns how many siblings are still to come."""
        parent = parent_of(path, self.sep)
        if self._remaining.get(parent, 0) <= 0:
            raise RenderOrderError(f"{path} rendered more often than counted under {parent}")
        self._remaining[parent] -= 1
        return self._remaining[parent]


def active_levels(tracker: HierarchyTracker, path: str) -> List[bool]:
    """One flag per level from just below the root down to path, outermost first.

    A level is active while the parent at that level still has children queued.
    Must be read before path itself is consumed.
    """
    sep = tracker.sep
    root_depth = depth(tracker.root, sep)
    levels = []
    node = path
    while depth(node, sep) > root_depth:
        parent = parent_of(node, sep)
        levels.append(tracker.remaining(parent) >= 1)
        node = parent
    levels.reverse()
    return levels


def _clean_size(size_kb) -> Optional[int]:
    if size_kb is None:
        return None
    try:
        size_kb = int(size_kb)
    except (TypeError, ValueError):
        return None
    return size_kb if size_kb >= 0 else None


def complete_hierarchy(root: str, entries: Iterable[Entry],
                       root_total_kb: Optional[int] = None,
                       sep: str = os.sep) -> List[Entry]:
    """Return the batch sorted in pre-order, with missing folders filled in.

    Folders below the threshold that hold a qualifying item get a synthetic
    entry without a size, and so does the root when du left it out.
    """
    by_path: Dict[str, Entry] = {}
    for e in entries:
        if e.path != root and not _is_inside(e.path, root, sep):
            raise MalformedBatchError(f"{e.path} is not inside scan root {root}")
        if e.path in by_path:
            continue
        by_path[e.path] = Entry(e.path, _clean_size(e.size_kb), e.synthetic)

    if root not in by_path:
        by_path[root] = Entry(root, _clean_size(root_total_kb), synthetic=True)

    for path in list(by_path):
        parent = parent_of(path, sep)
        while path != root and parent != root and parent not in by_path:
            by_path[parent] = Entry(parent, None, synthetic=True)
            path, parent = parent, parent_of(parent, sep)

    return sorted(by_path.values(), key=lambda e: _segments(e.path, sep))


def _label(entry: Entry, root: str, sep: str) -> str:
    if depth(entry.path, sep) <= depth(root, sep) + 1:
        return entry.path
    return entry.path.rsplit(sep, 1)[-1]


def render_root(root: str, entries: Iterable[Entry],
                root_total_kb: Optional[int] = None,
                is_dir: Callable[[str], bool] = os.path.isdir,
                sep: str = os.sep) -> List[TreeLine]:
    """Render one scan root. Pure apart from the is_dir lookups."""
    ordered = complete_hierarchy(root, entries, root_total_kb, sep)
    tracker = HierarchyTracker(root, ordered, sep)
    lines: List[TreeLine] = []

    for index, entry in enumerate(ordered):
        levels = active_levels(tracker, entry.path)
        if entry.path == root:
            prefix = ""
            child_indent = ""
        else:
            siblings_left = tracker.consume(entry.path)
            bars = "".join(BAR if active else GAP for active in levels[:-1])
            prefix = bars + (TEE if siblings_left else ELBOW) + " "
            child_indent = bars + (BAR if siblings_left else GAP)

        following = ordered[index + 1] if index + 1 < len(ordered) else None
        directory = entry.synthetic or is_dir(entry.path)

        size_text = human_size_kb(entry.size_kb)
        if (directory and size_text and following is not None
                and parent_of(following.path, sep) == entry.path
                and human_size_kb(following.size_kb) == size_text):
            # same figure is printed on the child right below
            size_text = ""

        lines.append(TreeLine(size_text, prefix, _label(entry, root, sep)))

        if directory and (following is None or not _is_inside(following.path, entry.path, sep)):
            lines.append(TreeLine("", child_indent + "   ", PLACEHOLDER_TEXT, placeholder=True))

    return lines


def render_empty_root(root: str, root_total_kb: Optional[int]) -> List[TreeLine]:
    """Single line for a root where nothing reached the threshold."""
    return [TreeLine(human_size_kb(_clean_size(root_total_kb)), "", root,
                     note=PLACEHOLDER_TEXT, placeholder=True)]


def render_text(lines: Iterable[TreeLine]) -> str:
    return "\n".join(line.format() for line in lines)
