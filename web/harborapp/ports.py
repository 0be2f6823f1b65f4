"""
Hexagonal interfaces (Ports) between the plugin and its host.

Keep them small and implementation-agnostic so they're easy to fake in tests.
"""

from __future__ import annotations

from typing import Any, Callable, Protocol

Listener = Callable[[Any], None]


class EventBusPort(Protocol):
    """
    Host event bus the plugin subscribes to and publishes on.

    Events used by the plugin:
    - "public-data": incoming instrumentation messages {"type": ..., "data": ...}
    - "harbor-clear": published when producers must re-send a full baseline
    """

    def add_listener(self, event: str, listener: Listener) -> None:
        ...

    def remove_listener(self, event: str, listener: Listener) -> None:
        ...

    def dispatch_event(self, event: str, data: Any) -> None:
        ...
