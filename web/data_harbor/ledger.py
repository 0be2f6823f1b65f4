"""
Capacity ledger.

Byte-accurate accounting for the open segment. A reservation is all or
nothing: an entry that would push the running total past `maximum` is
rejected and the counter is left untouched.
"""

from __future__ import annotations

from typing import Optional


def _coerce_maximum(maximum: object) -> Optional[int]:
    if isinstance(maximum, bool) or not isinstance(maximum, int) or maximum <= 0:
        return None
    return maximum


class CapacityLedger:
    """
    Running byte counter with an admit/reject decision.

    Parameters
    ----------
    maximum : int | None
        Byte budget for one segment. Anything other than a positive integer
        makes the ledger unbounded.
    """

    def __init__(self, maximum: Optional[int] = None) -> None:
        self._maximum = _coerce_maximum(maximum)
        self._current = 0

    @property
    def maximum(self) -> Optional[int]:
        return self._maximum

    @property
    def current(self) -> int:
        return self._current

    @property
    def remaining(self) -> Optional[int]:
        if self._maximum is None:
            return None
        return self._maximum - self._current

    def try_reserve(self, size: int) -> bool:
        """Commit `size` bytes if they fit; return False (no side effect) otherwise."""
        size = int(size)
        if size < 0:
            return False
        if self._maximum is not None and self._current + size > self._maximum:
            return False
        self._current += size
        return True

    def reset(self) -> None:
        self._current = 0
