"""
Harbor façade: the bounded, optionally period-segmented staging buffer.

Control flow for `add(entry)`:
  dedup check (network only) -> encode -> ledger-checked append -> record key

Divider entries skip dedup and capacity and close the open segment. Every
mutation (`add`, `divide`, `clear`) runs under one re-entrant lock, so a
timer-fired division is linearized with producer calls exactly like any
other callback. `get_all()` holds the lock only while planning the snapshot
and decodes outside it, so producers are never paused by an export.
"""

from __future__ import annotations

import logging
import threading
import time
from typing import Any, Callable, Dict, List, Mapping, Optional, Tuple, Union

from .assembler import SnapshotAssembler
from .codec import encode_entry
from .config import HarborConfig
from .divider import PeriodTimer, should_divide
from .dto import Entry, make_divider
from .errors import MalformedEntryError
from .ledger import CapacityLedger
from .segments import SegmentStore
from .stock import DedupIndex

BoundaryListener = Callable[[], None]


class Harbor:
    """
    Bounded buffer of telemetry entries.

    Parameters
    ----------
    config : HarborConfig | Mapping | None
        `maximum` (bytes per segment) and `period` (milliseconds or None).
    logger : logging.Logger | None
        Destination for rejection and listener diagnostics.
    clock : Callable[[], float]
        Monotonic clock in seconds; injectable for tests.
    """

    def __init__(
        self,
        config: Union[HarborConfig, Mapping[str, Any], None] = None,
        *,
        logger: Optional[logging.Logger] = None,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        if config is None:
            config = HarborConfig()
        elif not isinstance(config, HarborConfig):
            config = HarborConfig(**dict(config))
        self.config: HarborConfig = config
        self.logger = logger or logging.getLogger(__name__)
        self._clock = clock

        self._lock = threading.RLock()
        self._ledger = CapacityLedger(config.maximum)
        self._stock = DedupIndex()
        self._store = SegmentStore(ledger=self._ledger, stock=self._stock)
        self._assembler = SnapshotAssembler(self._store)
        self._listeners: List[BoundaryListener] = []
        self._last_divide_at = clock()
        self._timer: Optional[PeriodTimer] = None

    # ------------------------------ Writes -------------------------------

    def add(self, entry: Entry) -> bool:
        """
        Try to admit one entry.

        Returns False for a duplicate network URL, an unencodable payload, or
        an entry that does not fit the open segment's remaining budget. A
        rejected entry leaves stored state unchanged.
        """
        with self._lock:
            if entry.is_divider:
                self._store.append_divider(encode_entry(entry))
                return True

            key = entry.dedup_key
            if key is not None and self._stock.has(key):
                self.logger.debug("Duplicate network entry rejected: %s", key)
                return False

            try:
                stored = encode_entry(entry)
            except MalformedEntryError as e:
                self.logger.debug("Malformed entry rejected: %s", e)
                return False

            if not self._store.append(stored):
                self.logger.debug(
                    "Capacity exceeded: %d bytes offered, %s remaining",
                    stored.size,
                    self._ledger.remaining,
                )
                return False

            if key is not None:
                self._stock.record(key)
            return True

    def divide(self) -> None:
        """Close the open segment with a divider, then notify boundary listeners."""
        self._divide(None)

    def _divide(self, timer: Optional[PeriodTimer]) -> None:
        with self._lock:
            # a tick from a cancelled or replaced timer may still be waiting on the lock
            if timer is not None and timer is not self._timer:
                return
            self.add(make_divider())
            self._last_divide_at = self._clock()
            listeners = list(self._listeners)

        for listener in listeners:
            try:
                listener()
            except Exception:
                self.logger.exception("Boundary listener failed")

    def maybe_divide(self) -> bool:
        """Divide if a full period has elapsed since the last division."""
        with self._lock:
            elapsed_ms = (self._clock() - self._last_divide_at) * 1000.0
            if not should_divide(elapsed_ms, self.config.period):
                return False
        self.divide()
        return True

    def clear(self) -> None:
        """Discard every segment and reset the ledger, stock and division clock."""
        with self._lock:
            self._store.clear()
            self._last_divide_at = self._clock()

    # ------------------------------ Reads --------------------------------

    def get_all(self) -> List[Entry]:
        """Consistent snapshot of every entry, dividers included, in append order."""
        with self._lock:
            plan = self._assembler.plan()
        return self._assembler.assemble(plan)

    def get_messages(self) -> List[Dict[str, Any]]:
        """Snapshot rendered as export envelopes."""
        return [entry.to_message() for entry in self.get_all()]

    @property
    def stock(self) -> Tuple[str, ...]:
        with self._lock:
            return self._stock.keys()

    def stats(self) -> Dict[str, object]:
        with self._lock:
            return {
                "segments": len(self._store.all_segments()),
                "entries": self._store.entry_count,
                "open_bytes": self._ledger.current,
                "total_bytes": self._store.total_size,
                "stock_size": len(self._stock),
                "maximum": self.config.maximum,
                "period": self.config.period,
                "timer_active": self._timer is not None and self._timer.active,
            }

    # --------------------------- Boundaries ------------------------------

    def add_boundary_listener(self, listener: BoundaryListener) -> None:
        with self._lock:
            if listener not in self._listeners:
                self._listeners.append(listener)

    def remove_boundary_listener(self, listener: BoundaryListener) -> None:
        with self._lock:
            if listener in self._listeners:
                self._listeners.remove(listener)

    def start_period_timer(self) -> bool:
        """
        (Re)schedule automatic division. Returns False when no valid period
        is configured; any previously scheduled timer is cancelled either way.
        """
        with self._lock:
            self.stop_period_timer()
            if not self.config.divides:
                return False
            timer = PeriodTimer(self.config.period, lambda: self._divide(timer), logger=self.logger)  # type: ignore[arg-type]
            self._timer = timer
            self._last_divide_at = self._clock()
            timer.start()
            return True

    def stop_period_timer(self) -> None:
        with self._lock:
            if self._timer is not None:
                self._timer.cancel()
                self._timer = None
