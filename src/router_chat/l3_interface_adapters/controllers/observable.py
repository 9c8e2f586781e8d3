"""Explicit subscriber list for controller state changes."""

from __future__ import annotations

import logging
from collections.abc import Callable

log = logging.getLogger('rc.chat')

Listener = Callable[[], None]


class Observable:
    """Holds listeners and fans out a single notification per state mutation.

    A listener that raises is logged and skipped; remaining listeners still run.
    """

    def __init__(self) -> None:
        self._listeners: list[Listener] = []

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """Register *listener*. Returns a callable that unsubscribes it."""
        self._listeners.append(listener)
        return lambda: self.unsubscribe(listener)

    def unsubscribe(self, listener: Listener) -> None:
        if listener in self._listeners:
            self._listeners.remove(listener)

    def dispose(self) -> None:
        """Release all listeners."""
        self._listeners.clear()

    def _notify(self) -> None:
        for listener in list(self._listeners):
            try:
                listener()
            except Exception:
                log.exception('Listener %r failed', listener)
