"""Event functionality: event names and the synchronous emitter."""

from poolkit.core.events.emitter import EventEmitter
from poolkit.core.events.models import Handler, PoolEvent

__all__ = [
    "PoolEvent",
    "Handler",
    "EventEmitter",
]
