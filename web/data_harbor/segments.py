"""
Segment primitives and the ordered segment store.

Responsibilities:
- Keep an append-only run of encoded entries per segment, with a running size.
- Freeze a segment on close (copy-on-close into an immutable tuple) so any
  reader already holding it never observes a mutation.
- Own the open segment's capacity ledger and dedup index, resetting both
  whenever the open segment changes.

Notes
-----
- A divider is appended to the segment it closes; it is never charged
  against the ledger.
- Closed segments are never reopened. `clear()` replaces the whole sequence
  rather than emptying segments in place.
"""

from __future__ import annotations

from typing import List, Optional, Sequence, Tuple, Union

from .dto import StoredEntry
from .ledger import CapacityLedger
from .stock import DedupIndex


class Segment:
    """Ordered, append-only run of stored entries."""

    def __init__(self, index: int) -> None:
        self.index = index
        self._entries: Union[List[StoredEntry], Tuple[StoredEntry, ...]] = []
        self._size = 0

    @property
    def closed(self) -> bool:
        return isinstance(self._entries, tuple)

    @property
    def size(self) -> int:
        return self._size

    def __len__(self) -> int:
        return len(self._entries)

    def append(self, stored: StoredEntry) -> None:
        if self.closed:
            raise RuntimeError(f"Segment {self.index} is closed")
        self._entries.append(stored)  # type: ignore[union-attr]
        self._size += stored.size

    def freeze(self) -> None:
        if not self.closed:
            self._entries = tuple(self._entries)

    def entries(self, count: Optional[int] = None) -> Tuple[StoredEntry, ...]:
        """First `count` entries (all of them when count is None)."""
        if count is None:
            return tuple(self._entries)
        return tuple(self._entries[:count])


class SegmentStore:
    """
    Ordered sequence of segments with exactly one open segment at a time.

    Parameters
    ----------
    ledger : CapacityLedger
        Byte budget for the open segment.
    stock : DedupIndex
        Network identifiers admitted in the open segment.
    """

    def __init__(self, *, ledger: CapacityLedger, stock: DedupIndex) -> None:
        self.ledger = ledger
        self.stock = stock
        self._segments: List[Segment] = [Segment(0)]

    # --- writes ---

    def append(self, stored: StoredEntry) -> bool:
        """Reserve capacity and append to the open segment; False if it does not fit."""
        if not self.ledger.try_reserve(stored.size):
            return False
        self.open_segment.append(stored)
        return True

    def append_divider(self, stored: StoredEntry) -> None:
        """Append a boundary marker and close the segment it lands in."""
        self.open_segment.append(stored)
        self.close_current()

    def close_current(self) -> None:
        current = self.open_segment
        current.freeze()
        self._segments = self._segments + [Segment(current.index + 1)]
        self.ledger.reset()
        self.stock.reset()

    def clear(self) -> None:
        self._segments = [Segment(0)]
        self.ledger.reset()
        self.stock.reset()

    # --- reads ---

    @property
    def open_segment(self) -> Segment:
        return self._segments[-1]

    def all_segments(self) -> Sequence[Segment]:
        """Read-only view in creation order, open segment last."""
        return tuple(self._segments)

    @property
    def entry_count(self) -> int:
        return sum(len(s) for s in self._segments)

    @property
    def total_size(self) -> int:
        return sum(s.size for s in self._segments)
