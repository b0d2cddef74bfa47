from __future__ import annotations

import calendar
import math
from dataclasses import dataclass, field
from datetime import date
from typing import Any, Iterable

from calgrid.domain.schemas.event import CalendarEvent
from calgrid.services.layout.week_grid import sort_key

MONTH_CELL_LIMIT = 4


def build_month_weeks(
    year: int,
    month: int,
    week_starts_on: int = calendar.SUNDAY,
) -> list[list[date | None]]:
    """Rows of seven cells covering ``month``; cells outside the month are None."""
    first = date(year, month, 1)
    days_in_month = calendar.monthrange(year, month)[1]
    lead = (first.weekday() - week_starts_on) % 7
    rows = math.ceil((lead + days_in_month) / 7)

    weeks: list[list[date | None]] = []
    day = 1 - lead
    for _ in range(rows):
        row: list[date | None] = []
        for _ in range(7):
            row.append(date(year, month, day) if 1 <= day <= days_in_month else None)
            day += 1
        weeks.append(row)
    return weeks


def time_label(event: CalendarEvent) -> str:
    return f"{event.start:%H:%M} - {event.end:%H:%M}"


@dataclass
class MonthCell:
    day: date | None
    events: list[CalendarEvent] = field(default_factory=list)
    limit: int = MONTH_CELL_LIMIT
    is_today: bool = False

    @property
    def visible(self) -> list[CalendarEvent]:
        return self.events[: self.limit]

    @property
    def overflow(self) -> int:
        return max(len(self.events) - self.limit, 0)

    @property
    def more_label(self) -> str | None:
        return f"+{self.overflow} more" if self.overflow else None

    def as_dict(self) -> dict[str, Any]:
        return {
            "day": self.day.isoformat() if self.day else None,
            "isToday": self.is_today,
            "events": [
                {**event.model_dump(mode="json", by_alias=True), "timeLabel": time_label(event)}
                for event in self.visible
            ],
            "overflow": self.overflow,
            "moreLabel": self.more_label,
        }


def bucket_day_events(
    events: Iterable[CalendarEvent],
    day: date | None,
    limit: int = MONTH_CELL_LIMIT,
) -> MonthCell:
    if day is None:
        return MonthCell(day=None, limit=limit)
    # bucketed by start day only; multi-day events do not repeat in later cells
    matching = sorted((e for e in events if e.start.date() == day), key=sort_key)
    return MonthCell(day=day, events=matching, limit=limit)


@dataclass
class MonthLayout:
    year: int
    month: int
    weeks: list[list[MonthCell]]

    def cells(self) -> list[MonthCell]:
        return [cell for week in self.weeks for cell in week]

    def as_dict(self) -> dict[str, Any]:
        return {
            "year": self.year,
            "month": self.month,
            "weeks": [[cell.as_dict() for cell in week] for week in self.weeks],
        }


def layout_month(
    events: Iterable[CalendarEvent],
    year: int,
    month: int,
    today: date | None = None,
    week_starts_on: int = calendar.SUNDAY,
    limit: int = MONTH_CELL_LIMIT,
) -> MonthLayout:
    events = list(events)
    weeks = []
    for row in build_month_weeks(year, month, week_starts_on):
        cells = []
        for day in row:
            cell = bucket_day_events(events, day, limit)
            cell.is_today = day is not None and day == today
            cells.append(cell)
        weeks.append(cells)
    return MonthLayout(year=year, month=month, weeks=weeks)
