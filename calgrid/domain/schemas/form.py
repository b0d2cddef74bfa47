from __future__ import annotations

from dataclasses import asdict, dataclass, field
from datetime import date, datetime, time
from typing import Any, Mapping

from pydantic import BaseModel, ConfigDict, Field, ValidationError, ValidationInfo, field_validator

from calgrid.domain.schemas.event import EventColor, LocalDateTime

TITLE_MIN = 2
TITLE_MAX = 40
DESCRIPTION_MAX = 50
LOCATION_MAX = 40

SAME_DAY_MESSAGE = "Start and end must be on the same day and end must be after start."


class EventForm(BaseModel):
    """Create/edit dialog payload.

    Timed and all-day events alike must start and end on the same calendar
    day; overnight events cannot be entered through the form.
    """

    model_config = ConfigDict(populate_by_name=True)

    title: str
    description: str | None = None
    start: LocalDateTime
    end: LocalDateTime
    all_day: bool = Field(default=False, alias="allDay")
    color: EventColor
    location: str | None = None

    @field_validator("title")
    @classmethod
    def _title_length(cls, value: str) -> str:
        if len(value) < TITLE_MIN:
            raise ValueError(f"Title must be at least {TITLE_MIN} characters")
        if len(value) > TITLE_MAX:
            raise ValueError(f"Title must be at most {TITLE_MAX} characters")
        return value

    @field_validator("description")
    @classmethod
    def _description_length(cls, value: str | None) -> str | None:
        if value and len(value) > DESCRIPTION_MAX:
            raise ValueError(f"Description must be at most {DESCRIPTION_MAX} characters")
        return value

    @field_validator("location")
    @classmethod
    def _location_length(cls, value: str | None) -> str | None:
        if value and len(value) > LOCATION_MAX:
            raise ValueError(f"Location must be at most {LOCATION_MAX} characters")
        return value

    @field_validator("end")
    @classmethod
    def _same_day_and_after_start(cls, end: datetime, info: ValidationInfo) -> datetime:
        start = info.data.get("start")
        if start is None:
            raise ValueError(SAME_DAY_MESSAGE)
        # midnight-normalized comparison
        if start.date() != end.date() or end <= start:
            raise ValueError(SAME_DAY_MESSAGE)
        return end


@dataclass
class FormValues:
    """Editable dialog state; may be invalid until submitted."""

    title: str = ""
    description: str = ""
    start: datetime | None = None
    end: datetime | None = None
    all_day: bool = False
    color: EventColor = EventColor.BLUE
    location: str = ""


def initial_values(today: date) -> FormValues:
    return FormValues(
        start=datetime.combine(today, time(7, 0)),
        end=datetime.combine(today, time(7, 30)),
    )


@dataclass
class FormResult:
    form: EventForm | None = None
    errors: dict[str, list[str]] = field(default_factory=dict)

    @property
    def ok(self) -> bool:
        return self.form is not None


def form_errors(exc: ValidationError) -> dict[str, list[str]]:
    errors: dict[str, list[str]] = {}
    for err in exc.errors():
        name = str(err["loc"][0]) if err["loc"] else "__root__"
        ctx_error = (err.get("ctx") or {}).get("error")
        message = str(ctx_error) if ctx_error is not None else err["msg"]
        errors.setdefault(name, []).append(message)
    return errors


def validate_form(data: FormValues | Mapping[str, Any]) -> FormResult:
    payload = asdict(data) if isinstance(data, FormValues) else dict(data)
    try:
        return FormResult(form=EventForm.model_validate(payload))
    except ValidationError as exc:
        return FormResult(errors=form_errors(exc))
