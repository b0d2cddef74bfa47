from __future__ import annotations

from datetime import datetime
from enum import Enum
from typing import Annotated

from pydantic import AfterValidator, BaseModel, ConfigDict, Field


def to_local_naive(value: datetime) -> datetime:
    """Wall-clock only: aware timestamps are shifted to local time and stripped."""
    if value.tzinfo is not None:
        return value.astimezone().replace(tzinfo=None)
    return value


LocalDateTime = Annotated[datetime, AfterValidator(to_local_naive)]


class EventColor(str, Enum):
    ORANGE = "orange"
    BLUE = "blue"
    PINK = "pink"


def normalize_color(value: str | None) -> EventColor:
    try:
        return EventColor(value)
    except ValueError:
        return EventColor.BLUE


class CalendarEvent(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    id: str
    title: str
    description: str | None = None
    start: LocalDateTime
    end: LocalDateTime
    all_day: bool = Field(default=False, alias="allDay")
    color: str | None = None
    location: str | None = None


class EventInput(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    title: str = Field(min_length=2)
    description: str | None = None
    start: LocalDateTime
    end: LocalDateTime
    all_day: bool | None = Field(default=None, alias="allDay")
    color: EventColor
    location: str | None = None


class EventUpdate(EventInput):
    id: str


class EventRef(BaseModel):
    id: str
