"""
Dedup index ("stock") of network request URLs admitted in the open segment.

A plain dict keeps insertion order so the exposed key tuple reads in the
order requests were first captured.
"""

from __future__ import annotations

from typing import Dict, Tuple


class DedupIndex:
    """Set of network identifiers seen since the last divider."""

    def __init__(self) -> None:
        self._keys: Dict[str, None] = {}

    def has(self, key: str) -> bool:
        return key in self._keys

    def record(self, key: str) -> None:
        """Remember `key`; recording an existing key is a no-op."""
        self._keys.setdefault(key, None)

    def reset(self) -> None:
        self._keys = {}

    def keys(self) -> Tuple[str, ...]:
        return tuple(self._keys)

    def __contains__(self, key: object) -> bool:
        return key in self._keys

    def __len__(self) -> int:
        return len(self._keys)
