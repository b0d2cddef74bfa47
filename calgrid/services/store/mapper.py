from typing import Any

from calgrid.db.models.event import EventRow
from calgrid.domain.schemas.event import CalendarEvent, EventInput, EventUpdate
from calgrid.domain.schemas.form import EventForm


def input_to_event(event_id: str, data: EventInput) -> CalendarEvent:
    return CalendarEvent(
        id=event_id,
        title=data.title,
        description=data.description if data.description is not None else "",
        start=data.start,
        end=data.end,
        all_day=data.all_day if data.all_day is not None else False,
        color=data.color.value,
        location=data.location if data.location is not None else "",
    )


def update_changes(data: EventUpdate) -> dict[str, Any]:
    # only fields the caller actually sent overwrite stored values
    return data.model_dump(mode="json", exclude_unset=True, exclude={"id"})


def merge_update(existing: CalendarEvent, data: EventUpdate) -> CalendarEvent:
    merged = existing.model_dump(mode="json")
    merged.update(update_changes(data))
    return CalendarEvent.model_validate(merged)


def form_to_input(form: EventForm) -> EventInput:
    return EventInput(
        title=form.title,
        description=form.description,
        start=form.start,
        end=form.end,
        all_day=form.all_day,
        color=form.color,
        location=form.location,
    )


def form_to_update(event_id: str, form: EventForm) -> EventUpdate:
    return EventUpdate(id=event_id, **form_to_input(form).model_dump())


def row_to_event(row: EventRow) -> CalendarEvent:
    return CalendarEvent(
        id=row.id,
        title=row.title,
        description=row.description,
        start=row.start_time,
        end=row.end_time,
        all_day=row.all_day,
        color=row.color,
        location=row.location,
    )


def apply_event_to_row(row: EventRow, event: CalendarEvent) -> EventRow:
    row.id = event.id
    row.title = event.title
    row.description = event.description
    row.start_time = event.start
    row.end_time = event.end
    row.all_day = event.all_day
    row.color = event.color
    row.location = event.location
    return row
