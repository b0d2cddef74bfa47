"""Week view geometry.

Each timed event is cut into one segment per hour row it overlaps. Segments
are positioned in pixels relative to their own row, so a multi-hour event is
drawn as a stack of boxes that visually join into one block. Display is
clipped at 20:00; the stored end time is never touched.
"""

from __future__ import annotations

import calendar
from dataclasses import dataclass, field
from datetime import date, datetime, time, timedelta
from enum import Enum
from typing import Any, Iterable

from calgrid.domain.schemas.event import CalendarEvent

ROW_HEIGHT_PX = 64
FIRST_HOUR = 7
LAST_HOUR = 19
HOURS = tuple(range(FIRST_HOUR, LAST_HOUR + 1))
CLIP_HOUR = 20
BLEED_PX = 1


class Corners(str, Enum):
    FULL = "full"
    TOP = "top"
    BOTTOM = "bottom"
    NONE = "none"


@dataclass(frozen=True)
class RowSegment:
    event_id: str
    day: date
    hour: int
    top: float
    height: float
    raw_height: float
    is_first: bool
    is_last: bool
    color: str | None = None
    label: str | None = None

    @property
    def corners(self) -> Corners:
        if self.is_first and self.is_last:
            return Corners.FULL
        if self.is_first:
            return Corners.TOP
        if self.is_last:
            return Corners.BOTTOM
        return Corners.NONE

    def as_dict(self) -> dict[str, Any]:
        return {
            "eventId": self.event_id,
            "day": self.day.isoformat(),
            "hour": self.hour,
            "top": self.top,
            "height": self.height,
            "isFirst": self.is_first,
            "isLast": self.is_last,
            "corners": self.corners.value,
            "color": self.color,
            "label": self.label,
        }


def clamp_end(end: datetime) -> datetime:
    ceiling = datetime.combine(end.date(), time(CLIP_HOUR))
    return ceiling if end > ceiling else end


def format_clock(value: datetime) -> str:
    hour = value.hour % 12 or 12
    suffix = "am" if value.hour < 12 else "pm"
    return f"{hour}:{value.minute:02d}{suffix}".replace(":00", "")


def segment_label(event: CalendarEvent) -> str:
    return f"{format_clock(event.start)} - {format_clock(event.end)} • {event.title}"


def _minutes(delta: timedelta) -> float:
    return delta.total_seconds() / 60


def compute_row_segment(
    event: CalendarEvent,
    day: date,
    hour: int,
    row_height_px: int = ROW_HEIGHT_PX,
) -> RowSegment | None:
    """Return the part of ``event`` drawn in the ``hour`` row of ``day``, or None."""
    if event.all_day:
        return None

    start = event.start
    end = clamp_end(event.end)
    hour_start = datetime.combine(day, time()) + timedelta(hours=hour)
    hour_end = hour_start + timedelta(hours=1)

    overlap_start = max(start, hour_start)
    overlap_end = min(end, hour_end)
    if overlap_end <= overlap_start:
        return None

    top = _minutes(overlap_start - hour_start) / 60 * row_height_px
    raw_height = _minutes(overlap_end - overlap_start) / 60 * row_height_px

    starts_before = start < hour_start
    ends_after = end > hour_end
    adjusted_top = top - (BLEED_PX if starts_before else 0)
    adjusted_height = raw_height + (BLEED_PX if starts_before else 0) + (BLEED_PX if ends_after else 0)

    is_first = overlap_start == start
    is_last = overlap_end == end
    return RowSegment(
        event_id=event.id,
        day=day,
        hour=hour,
        top=adjusted_top,
        height=adjusted_height,
        raw_height=raw_height,
        is_first=is_first,
        is_last=is_last,
        color=event.color,
        label=segment_label(event) if is_first else None,
    )


def event_segments(
    event: CalendarEvent,
    day: date,
    hours: Iterable[int] = HOURS,
    row_height_px: int = ROW_HEIGHT_PX,
) -> list[RowSegment]:
    segments = []
    for hour in hours:
        segment = compute_row_segment(event, day, hour, row_height_px)
        if segment is not None:
            segments.append(segment)
    return segments


def all_day_lane(events: Iterable[CalendarEvent], day: date) -> list[CalendarEvent]:
    lane = []
    for event in events:
        if not event.all_day:
            continue
        first = event.start.date()
        last = max(event.end.date(), first)
        if first <= day <= last:
            lane.append(event)
    return lane


def week_days(reference: date, week_starts_on: int = calendar.SUNDAY) -> list[date]:
    offset = (reference.weekday() - week_starts_on) % 7
    first = reference - timedelta(days=offset)
    return [first + timedelta(days=i) for i in range(7)]


def sort_key(event: CalendarEvent) -> tuple[datetime, str]:
    return (event.start, event.id)


@dataclass
class WeekLayout:
    days: list[date]
    hours: tuple[int, ...] = HOURS
    all_day: dict[date, list[CalendarEvent]] = field(default_factory=dict)
    segments: dict[tuple[date, int], list[RowSegment]] = field(default_factory=dict)

    def cell(self, day: date, hour: int) -> list[RowSegment]:
        return self.segments.get((day, hour), [])

    def as_dict(self) -> dict[str, Any]:
        return {
            "days": [day.isoformat() for day in self.days],
            "hours": list(self.hours),
            "allDay": {
                day.isoformat(): [e.model_dump(mode="json", by_alias=True) for e in events]
                for day, events in self.all_day.items()
            },
            "cells": [
                {
                    "day": day.isoformat(),
                    "hour": hour,
                    "segments": [segment.as_dict() for segment in segments],
                }
                for (day, hour), segments in self.segments.items()
            ],
        }


def layout_week(
    events: Iterable[CalendarEvent],
    reference: date,
    week_starts_on: int = calendar.SUNDAY,
    hours: tuple[int, ...] = HOURS,
    row_height_px: int = ROW_HEIGHT_PX,
) -> WeekLayout:
    ordered = sorted(events, key=sort_key)
    timed = [event for event in ordered if not event.all_day]
    layout = WeekLayout(days=week_days(reference, week_starts_on), hours=hours)
    for day in layout.days:
        layout.all_day[day] = all_day_lane(ordered, day)
        for hour in hours:
            cell = [
                segment
                for segment in (compute_row_segment(e, day, hour, row_height_px) for e in timed)
                if segment is not None
            ]
            if cell:
                layout.segments[(day, hour)] = cell
    return layout
