from __future__ import annotations

import threading
import time
from typing import Callable, Protocol

from calgrid.domain.schemas.event import CalendarEvent, EventInput, EventUpdate


class EventRepository(Protocol):
    def list_events(self) -> list[CalendarEvent]:
        ...

    def create_event(self, data: EventInput) -> CalendarEvent:
        ...

    def update_event(self, data: EventUpdate) -> CalendarEvent | None:
        ...

    def delete_event(self, event_id: str) -> bool:
        ...


class TimestampIds:
    """Millisecond-timestamp identifiers, bumped past the last one issued."""

    def __init__(self, clock: Callable[[], float] = time.time) -> None:
        self._clock = clock
        self._last = 0
        self._lock = threading.Lock()

    def observe(self, event_id: str) -> None:
        if event_id.isdigit():
            with self._lock:
                self._last = max(self._last, int(event_id))

    def next_id(self) -> str:
        with self._lock:
            candidate = int(self._clock() * 1000)
            if candidate <= self._last:
                candidate = self._last + 1
            self._last = candidate
        return str(candidate)
