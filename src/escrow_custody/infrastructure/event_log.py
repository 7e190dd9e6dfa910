"""Append-only event log.

Events are appended while a registry call runs and become visible to
subscribers only once the outermost call commits. A failed call truncates
the log back to where it started, so subscribers never see an event whose
call was reverted.
"""

from __future__ import annotations

from collections.abc import Callable, Mapping
from typing import Any

from escrow_custody.domain.enums import EventType
from escrow_custody.domain.models import EscrowEvent
from escrow_custody.logging_config import get_logger

logger = get_logger(__name__)

EventSubscriber = Callable[[EscrowEvent], None]


class EventLog:
    """Ordered, append-only store of EscrowEvents."""

    def __init__(self) -> None:
        self._events: list[EscrowEvent] = []
        self._published = 0
        self._subscribers: list[EventSubscriber] = []

    def append(
        self,
        event_type: EventType,
        escrow_id: int | None,
        actor: str,
        timestamp: int,
        data: Mapping[str, Any] | None = None,
    ) -> EscrowEvent:
        """Append a new event. This is the ONLY way events are written."""
        evt = EscrowEvent(
            sequence=len(self._events) + 1,
            event_type=event_type,
            escrow_id=escrow_id,
            actor=actor,
            timestamp=timestamp,
            data=data or {},
        )
        self._events.append(evt)
        return evt

    def subscribe(self, subscriber: EventSubscriber) -> None:
        """Register a callback invoked once per committed event, in order."""
        self._subscribers.append(subscriber)

    def publish(self) -> None:
        """Deliver every event appended since the last publish.

        The events are already committed, so a failing subscriber is logged
        and skipped; it never stops delivery to the others.
        """
        pending = self._events[self._published:]
        self._published = len(self._events)
        for evt in pending:
            for subscriber in self._subscribers:
                try:
                    subscriber(evt)
                except Exception:
                    logger.exception(
                        "events.subscriber_failed",
                        sequence=evt.sequence,
                        event_type=evt.event_type,
                        subscriber=repr(subscriber),
                    )

    def truncate(self, length: int) -> None:
        """Drop unpublished events past ``length`` (call rollback)."""
        if length < self._published:
            raise ValueError("Cannot truncate events that were already published")
        dropped = len(self._events) - length
        if dropped > 0:
            del self._events[length:]
            logger.debug("events.truncated", dropped=dropped)

    def events(self, escrow_id: int | None = None) -> list[EscrowEvent]:
        """Return all events, or those of one escrow, in emission order."""
        if escrow_id is None:
            return list(self._events)
        return [evt for evt in self._events if evt.escrow_id == escrow_id]

    def __len__(self) -> int:
        return len(self._events)
