"""Append-only event log.

Event names and argument keys keep their original camelCase spelling so
indexers built against the contracts keep working.
"""

import logging
from dataclasses import dataclass, field
from typing import Any

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Event:
    index: int
    name: str
    emitter: str  # contract address
    timestamp: int  # block timestamp at emission
    args: dict[str, Any] = field(default_factory=dict)


class EventLog:
    def __init__(self) -> None:
        self._events: list[Event] = []

    def __len__(self) -> int:
        return len(self._events)

    def emit(self, name: str, emitter: str, timestamp: int, args: dict[str, Any]) -> Event:
        event = Event(
            index=len(self._events),
            name=name,
            emitter=emitter,
            timestamp=timestamp,
            args=dict(args),
        )
        self._events.append(event)
        logger.debug("event %s from %s: %s", name, emitter, args)
        return event

    def truncate(self, length: int) -> None:
        """Drop everything emitted after `length` (used when a call reverts)."""
        del self._events[length:]

    def since(self, length: int) -> list[Event]:
        return self._events[length:]

    def filter(
        self,
        name: str | None = None,
        emitter: str | None = None,
    ) -> list[Event]:
        return [
            e
            for e in self._events
            if (name is None or e.name == name) and (emitter is None or e.emitter == emitter)
        ]

    def last(self, name: str) -> Event | None:
        for event in reversed(self._events):
            if event.name == name:
                return event
        return None
