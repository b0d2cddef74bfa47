from __future__ import annotations

import logging
from typing import Iterable

from sqlalchemy import delete, func, select
from sqlalchemy.orm import sessionmaker

from calgrid.db.models.event import EventRow
from calgrid.domain.schemas.event import CalendarEvent, EventInput, EventUpdate
from calgrid.services.store.base import EventRepository, TimestampIds
from calgrid.services.store.mapper import (
    apply_event_to_row,
    input_to_event,
    merge_update,
    row_to_event,
)

logger = logging.getLogger(__name__)


class SqlEventRepository(EventRepository):
    def __init__(self, session_factory: sessionmaker, ids: TimestampIds | None = None) -> None:
        self._session_factory = session_factory
        self._ids = ids or TimestampIds()
        with self._session_factory() as session:
            for event_id in session.scalars(select(EventRow.id)):
                self._ids.observe(event_id)

    def seed(self, events: Iterable[CalendarEvent]) -> int:
        with self._session_factory() as session:
            existing = session.scalar(select(func.count(EventRow.seq))) or 0
            if existing:
                logger.info("Skipping seed; %d events already stored", existing)
                return 0
            count = 0
            for event in events:
                session.add(apply_event_to_row(EventRow(), event))
                self._ids.observe(event.id)
                count += 1
            session.commit()
        return count

    def list_events(self) -> list[CalendarEvent]:
        with self._session_factory() as session:
            rows = session.scalars(select(EventRow).order_by(EventRow.seq)).all()
            logger.info("Fetching all calendar events: %d", len(rows))
            return [row_to_event(row) for row in rows]

    def create_event(self, data: EventInput) -> CalendarEvent:
        logger.info("Creating new calendar event: title=%r start=%s", data.title, data.start)
        event = input_to_event(self._ids.next_id(), data)
        with self._session_factory() as session:
            session.add(apply_event_to_row(EventRow(), event))
            session.commit()
        return event

    def update_event(self, data: EventUpdate) -> CalendarEvent | None:
        logger.info("Updating calendar event: %s", data.id)
        with self._session_factory() as session:
            row = session.scalar(select(EventRow).where(EventRow.id == data.id))
            if row is None:
                return None
            updated = merge_update(row_to_event(row), data)
            apply_event_to_row(row, updated)
            session.commit()
        return updated

    def delete_event(self, event_id: str) -> bool:
        logger.info("Deleting calendar event: %s", event_id)
        with self._session_factory() as session:
            result = session.execute(delete(EventRow).where(EventRow.id == event_id))
            session.commit()
        return bool(result.rowcount)
