from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from enum import Enum

from calgrid.domain.schemas.form import FormValues


class ViewMode(str, Enum):
    MONTH = "month"
    WEEK = "week"


@dataclass(frozen=True)
class DialogClosed:
    pass


@dataclass(frozen=True)
class CreateMode:
    pass


@dataclass(frozen=True)
class EditMode:
    event_id: str


DialogMode = DialogClosed | CreateMode | EditMode


def first_of_month(value: date) -> date:
    return value.replace(day=1)


@dataclass
class ViewState:
    current_date: date
    selected_day: date
    current_month: date
    view: ViewMode = ViewMode.WEEK
    dialog: DialogMode = field(default_factory=DialogClosed)
    form: FormValues = field(default_factory=FormValues)
    form_errors: dict[str, list[str]] = field(default_factory=dict)
    is_submitting: bool = False
    is_updating: bool = False
    is_deleting: bool = False

    @classmethod
    def starting_on(cls, today: date) -> "ViewState":
        return cls(current_date=today, selected_day=today, current_month=first_of_month(today))

    @property
    def is_dialog_open(self) -> bool:
        return not isinstance(self.dialog, DialogClosed)

    @property
    def busy(self) -> bool:
        return self.is_submitting or self.is_updating or self.is_deleting
