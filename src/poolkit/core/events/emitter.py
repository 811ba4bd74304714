"""Synchronous observer lists keyed by event name."""

from __future__ import annotations

from typing import Any

from poolkit.core.events.models import Handler, PoolEvent


class EventEmitter:
    """Per-name handler lists invoked synchronously in registration order.

    Handler exceptions are not caught: they propagate out of emit() to the
    operation that triggered the event.
    """

    def __init__(self) -> None:
        self._handlers: dict[str, list[Handler]] = {}

    def on(self, event: PoolEvent | str, handler: Handler) -> None:
        """Register a handler. The same handler may be registered more than once."""
        self._handlers.setdefault(str(event), []).append(handler)

    def off(self, event: PoolEvent | str, handler: Handler) -> None:
        """Remove the first registration of handler (by identity). Unknown handlers are ignored."""
        handlers = self._handlers.get(str(event))
        if not handlers:
            return
        for i, registered in enumerate(handlers):
            if registered is handler:
                del handlers[i]
                return

    def emit(self, event: PoolEvent | str, *args: Any) -> None:
        """Call every handler for event with args.

        Handlers added or removed while emitting take effect on the next emit.
        """
        handlers = self._handlers.get(str(event))
        if not handlers:
            return
        for handler in list(handlers):
            handler(*args)

    def handlers(self, event: PoolEvent | str) -> list[Handler]:
        """Handlers currently registered for event, in call order."""
        return list(self._handlers.get(str(event), []))
