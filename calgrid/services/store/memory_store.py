from __future__ import annotations

import logging
from typing import Iterable

from calgrid.domain.schemas.event import CalendarEvent, EventInput, EventUpdate
from calgrid.services.store.base import EventRepository, TimestampIds
from calgrid.services.store.mapper import input_to_event, merge_update

logger = logging.getLogger(__name__)


class InMemoryEventRepository(EventRepository):
    """List-backed store; lookups are linear scans and nothing survives a restart."""

    def __init__(
        self,
        events: Iterable[CalendarEvent] = (),
        ids: TimestampIds | None = None,
    ) -> None:
        self._events: list[CalendarEvent] = list(events)
        self._ids = ids or TimestampIds()
        for event in self._events:
            self._ids.observe(event.id)

    def list_events(self) -> list[CalendarEvent]:
        logger.info("Fetching all calendar events: %d", len(self._events))
        return list(self._events)

    def create_event(self, data: EventInput) -> CalendarEvent:
        logger.info("Creating new calendar event: title=%r start=%s", data.title, data.start)
        event = input_to_event(self._ids.next_id(), data)
        self._events.append(event)
        return event

    def update_event(self, data: EventUpdate) -> CalendarEvent | None:
        logger.info("Updating calendar event: %s", data.id)
        for idx, existing in enumerate(self._events):
            if existing.id == data.id:
                updated = merge_update(existing, data)
                self._events[idx] = updated
                return updated
        return None

    def delete_event(self, event_id: str) -> bool:
        logger.info("Deleting calendar event: %s", event_id)
        before = len(self._events)
        self._events = [event for event in self._events if event.id != event_id]
        return before != len(self._events)
