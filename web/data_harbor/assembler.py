"""
Snapshot assembly.

Export happens while producers keep writing, so assembly is split in two:
`plan()` records which segments exist and how many entries each holds at
that instant; `assemble(plan)` decodes exactly those entries and nothing
appended afterwards. Planning is cheap and is the only part the harbor runs
under its lock.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import List, Optional, Tuple

from .codec import decode_entry
from .dto import Entry
from .segments import Segment, SegmentStore


@dataclass(frozen=True)
class SnapshotPlan:
    """Structural snapshot: (segment, entry count) pairs in creation order."""
    parts: Tuple[Tuple[Segment, int], ...]

    @property
    def entry_count(self) -> int:
        return sum(count for _, count in self.parts)


class SnapshotAssembler:
    """Reads every segment back into one ordered list of entries."""

    def __init__(self, store: SegmentStore) -> None:
        self._store = store

    def plan(self) -> SnapshotPlan:
        return SnapshotPlan(parts=tuple((seg, len(seg)) for seg in self._store.all_segments()))

    def assemble(self, plan: Optional[SnapshotPlan] = None) -> List[Entry]:
        """
        Decode the planned entries, dividers included, in append order.

        Parameters
        ----------
        plan : SnapshotPlan | None
            Boundary taken earlier via `plan()`. When omitted a fresh plan is
            taken now.
        """
        if plan is None:
            plan = self.plan()

        out: List[Entry] = []
        for segment, count in plan.parts:
            for stored in segment.entries(count):
                out.append(decode_entry(stored))
        return out
