"""
Period segmentation.

The harbor may partition its stream into fixed-duration periods. This module
provides the predicate deciding when a period has elapsed and a cancellable
scheduled task that fires the division on a background thread. All times are
milliseconds unless noted otherwise.
"""

from __future__ import annotations

import logging
import math
import threading
from typing import Callable, Optional


def is_valid_period(period: object) -> bool:
    """Return True for a positive, finite number of milliseconds."""
    if isinstance(period, bool) or not isinstance(period, (int, float)):
        return False
    return math.isfinite(period) and period > 0


def should_divide(elapsed: float, period: object) -> bool:
    """
    Return True once `elapsed` has reached `period`.

    Parameters
    ----------
    elapsed : float
        Milliseconds since the last division (or since harbor creation).
    period : object
        Configured period; anything invalid means "never divide".
    """
    if not is_valid_period(period):
        return False
    return elapsed >= float(period)  # type: ignore[arg-type]


class PeriodTimer:
    """
    Repeating, cancellable timer driving period divisions.

    The callback runs on a daemon thread every `period_ms` until `cancel()`.
    `start()` on a running timer cancels the old task first, so at most one
    task is ever active. A callback that raises is logged and the timer keeps
    ticking.
    """

    def __init__(
        self,
        period_ms: float,
        callback: Callable[[], object],
        *,
        logger: Optional[logging.Logger] = None,
        name: str = "harbor-period",
    ) -> None:
        if not is_valid_period(period_ms):
            raise ValueError(f"period must be a positive number of milliseconds, got {period_ms!r}")
        self.period_ms = float(period_ms)
        self._callback = callback
        self._logger = logger or logging.getLogger(__name__)
        self._name = name
        self._lock = threading.Lock()
        self._stop: Optional[threading.Event] = None
        self._thread: Optional[threading.Thread] = None

    @property
    def active(self) -> bool:
        with self._lock:
            return self._thread is not None and self._thread.is_alive() and not self._stop.is_set()  # type: ignore[union-attr]

    def start(self) -> None:
        with self._lock:
            self._cancel_locked()
            stop = threading.Event()
            interval = self.period_ms / 1000.0

            def runner() -> None:
                while not stop.wait(interval):
                    try:
                        self._callback()
                    except Exception:
                        self._logger.exception("Period callback failed")

            self._stop = stop
            self._thread = threading.Thread(target=runner, name=self._name, daemon=True)
            self._thread.start()

    def cancel(self) -> None:
        with self._lock:
            self._cancel_locked()

    def _cancel_locked(self) -> None:
        if self._stop is not None:
            self._stop.set()
        self._stop = None
        self._thread = None
