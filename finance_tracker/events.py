"""
In-process change notification.

Mutating services publish a named event after a successful
write; anything that caches derived data (AI suggestions,
for instance) subscribes and invalidates. One bus per
application, created at start-up and passed to whoever
needs it.
"""

from datetime import datetime
from typing import Callable, NamedTuple

import structlog

logger = structlog.get_logger(__name__)

EXPENSES_CHANGED = "expenses_changed"
ACCOUNTS_CHANGED = "accounts_changed"


class Event(NamedTuple):
    name: str
    ts: str
    payload: dict


Handler = Callable[[Event], None]


class EventBus:

    def __init__(self):
        self._subscribers: dict[str, list[Handler]] = {}

    def subscribe(self, name: str, handler: Handler) -> None:
        self._subscribers.setdefault(name, []).append(handler)

    def unsubscribe(self, name: str, handler: Handler) -> None:
        handlers = self._subscribers.get(name, [])
        if handler in handlers:
            handlers.remove(handler)

    def publish(self, name: str, payload: dict) -> Event:
        event = Event(
            name=name,
            ts=datetime.utcnow().isoformat(),
            payload=payload,
        )
        handlers = list(self._subscribers.get(name, []))
        logger.debug("event_published", event_name=name, subscribers=len(handlers))
        for handler in handlers:
            handler(event)
        return event
