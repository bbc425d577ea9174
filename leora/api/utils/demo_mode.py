from __future__ import annotations

import logging
import threading
from typing import Callable, List

logger = logging.getLogger(__name__)

Listener = Callable[[bool], None]


class DemoMode:
    """
    Development-only switch that swaps every read for local seed data and
    disables outbound assistant calls. When not available it is always off.
    """

    def __init__(self, available: bool) -> None:
        self._lock = threading.Lock()
        self._available = bool(available)
        self._enabled = False
        self._listeners: List[Listener] = []

    @property
    def available(self) -> bool:
        return self._available

    @property
    def enabled(self) -> bool:
        return self._enabled if self._available else False

    def set_enabled(self, next_enabled: bool) -> None:
        if not self._available:
            return

        normalized = bool(next_enabled)
        with self._lock:
            if normalized == self._enabled:
                return
            self._enabled = normalized
        self._notify(normalized)

    def toggle(self) -> None:
        if not self._available:
            return
        with self._lock:
            self._enabled = not self._enabled
            enabled = self._enabled
        self._notify(enabled)

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def _notify(self, enabled: bool) -> None:
        for listener in list(self._listeners):
            try:
                listener(enabled)
            except Exception:
                logger.exception("demo mode listener failed")
