"""
In-process event bus.

Thread-safe listener registry; dispatch runs listeners synchronously on the
caller's thread, in registration order. A failing listener is logged and the
remaining listeners still run.
"""

from __future__ import annotations

import logging
import threading
from collections import defaultdict
from typing import Any, DefaultDict, List, Optional

from .ports import EventBusPort, Listener


class EventBus(EventBusPort):
    def __init__(self, logger: Optional[logging.Logger] = None) -> None:
        self._logger = logger or logging.getLogger("harborapp")
        self._listeners: DefaultDict[str, List[Listener]] = defaultdict(list)
        self._lock = threading.Lock()

    def add_listener(self, event: str, listener: Listener) -> None:
        with self._lock:
            self._listeners[event].append(listener)

    def remove_listener(self, event: str, listener: Listener) -> None:
        with self._lock:
            if listener in self._listeners.get(event, []):
                self._listeners[event].remove(listener)

    def dispatch_event(self, event: str, data: Any) -> None:
        with self._lock:
            listeners = list(self._listeners.get(event, []))
        for listener in listeners:
            try:
                listener(data)
            except Exception:
                self._logger.exception("Listener for %r failed", event)

    def listener_count(self, event: str) -> int:
        with self._lock:
            return len(self._listeners.get(event, []))
