"""
Data Transfer Objects (DTOs) shared by every harbor component.

These are intentionally small, immutable, and independent of any I/O or
transport library. An `Entry` is what producers hand to the harbor; a
`StoredEntry` is what actually sits inside a segment (the encoded chunk).
"""

from __future__ import annotations

import time
from dataclasses import dataclass
from typing import Any, Dict, Literal, Optional, Tuple

DataType = Literal["console", "network", "storage", "system", "rrweb-event"]

DATA_TYPES: Tuple[str, ...] = ("console", "network", "storage", "system", "rrweb-event")

# Reserved kind for period boundaries; never produced by instrumentation.
DIVIDER_KIND: str = "divider"


def now_ms() -> int:
    """Current wall-clock time in epoch milliseconds."""
    return int(time.time() * 1000)


# === Producer-facing entry ===
@dataclass(frozen=True)
class Entry:
    """One captured event."""
    kind: str                 # one of DATA_TYPES or DIVIDER_KIND
    payload: Any              # JSON-serializable, str keys; tuples decode as lists
    timestamp: int            # epoch milliseconds

    @property
    def is_divider(self) -> bool:
        return self.kind == DIVIDER_KIND

    @property
    def dedup_key(self) -> Optional[str]:
        """Request URL for network entries; None for everything else."""
        if self.kind != "network" or not isinstance(self.payload, dict):
            return None
        url = self.payload.get("url")
        return url if isinstance(url, str) and url else None

    def to_message(self) -> Dict[str, Any]:
        """Export envelope consumed by the download/upload helpers."""
        return {"type": self.kind, "timestamp": self.timestamp, "data": self.payload}


def make_entry(kind: str, payload: Any, timestamp: Optional[int] = None) -> Entry:
    """Stamp a payload with its kind and the current time."""
    return Entry(kind=kind, payload=payload, timestamp=now_ms() if timestamp is None else int(timestamp))


def make_divider(timestamp: Optional[int] = None) -> Entry:
    """Sentinel entry marking a period boundary."""
    return make_entry(DIVIDER_KIND, None, timestamp)


# === Stored (encoded) entry ===
@dataclass(frozen=True)
class StoredEntry:
    """Encoded form of an Entry as held by a segment."""
    kind: str
    chunk: bytes
    timestamp: int

    @property
    def size(self) -> int:
        return len(self.chunk)
