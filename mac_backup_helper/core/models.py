from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Optional

from .constants import SIZE_WIDTH


@dataclass(frozen=True)
class Entry:
    path: str
    size_kb: Optional[int] = None
    # Intermediate folder below threshold, added so the tree has no gaps
    synthetic: bool = False


@dataclass
class ScanBatch:
    root: str
    entries: List[Entry] = field(default_factory=list)
    root_total_kb: Optional[int] = None


@dataclass(frozen=True)
class TreeLine:
    size_text: str
    prefix: str
    label: str
    note: str = ""
    placeholder: bool = False

    def format(self) -> str:
        text = f"{self.size_text:>{SIZE_WIDTH}}  {self.prefix}{self.label}"
        if self.note:
            text = f"{text}  {self.note}"
        return text.rstrip()
