from __future__ import annotations

import calendar
import dataclasses
import logging
from datetime import date, timedelta
from typing import Any, Callable, Mapping

from calgrid.domain.schemas.event import CalendarEvent, normalize_color
from calgrid.domain.schemas.form import EventForm, FormValues, initial_values, validate_form
from calgrid.services.layout.month_grid import MonthLayout, layout_month
from calgrid.services.layout.week_grid import WeekLayout, layout_week, week_days
from calgrid.services.store.base import EventRepository
from calgrid.services.store.mapper import form_to_input, form_to_update
from calgrid.services.view.state import (
    CreateMode,
    DialogClosed,
    EditMode,
    ViewMode,
    ViewState,
    first_of_month,
)

logger = logging.getLogger(__name__)


def _shift_month(value: date, delta: int) -> date:
    index = value.year * 12 + (value.month - 1) + delta
    return date(index // 12, index % 12 + 1, 1)


class CalendarController:
    """Navigation cursors, view switching and the create/edit dialog.

    Store calls are synchronous; a failing call is logged and leaves the
    dialog open so the user can retry. Layouts are recomputed from the
    repository on every ``render``.
    """

    def __init__(
        self,
        repository: EventRepository,
        today_fn: Callable[[], date] = date.today,
    ) -> None:
        self.repository = repository
        self._today_fn = today_fn
        self.state = ViewState.starting_on(today_fn())
        self.state.form = initial_values(today_fn())

    # navigation

    def _resync_month(self, value: date) -> None:
        if (value.year, value.month) != (self.state.current_month.year, self.state.current_month.month):
            self.state.current_month = first_of_month(value)

    def next_week(self) -> None:
        self.state.current_date += timedelta(days=7)
        self._resync_month(self.state.current_date)

    def prev_week(self) -> None:
        self.state.current_date -= timedelta(days=7)
        self._resync_month(self.state.current_date)

    def next_month(self) -> None:
        target = _shift_month(self.state.current_date, 1)
        self.state.current_month = target
        self.state.current_date = target

    def prev_month(self) -> None:
        target = _shift_month(self.state.current_date, -1)
        self.state.current_month = target
        self.state.current_date = target

    def next_day(self) -> None:
        self.select_day(self.state.selected_day + timedelta(days=1))
        self._resync_month(self.state.selected_day)

    def prev_day(self) -> None:
        self.select_day(self.state.selected_day - timedelta(days=1))
        self._resync_month(self.state.selected_day)

    def next(self) -> None:
        if self.state.view is ViewMode.MONTH:
            self.next_month()
        else:
            self.next_week()

    def prev(self) -> None:
        if self.state.view is ViewMode.MONTH:
            self.prev_month()
        else:
            self.prev_week()

    def select_day(self, day: date) -> None:
        self.state.selected_day = day
        self.state.current_date = day

    def today(self) -> None:
        today = self._today_fn()
        self.state.current_date = today
        self.state.selected_day = today
        if self.state.view is ViewMode.MONTH:
            self.state.current_month = first_of_month(today)

    def switch_view(self, mode: ViewMode | str) -> None:
        self.state.view = ViewMode(mode)

    def visible_range(self) -> tuple[date, date]:
        if self.state.view is ViewMode.MONTH:
            first = self.state.current_month
            last = first.replace(day=calendar.monthrange(first.year, first.month)[1])
            return first, last
        days = week_days(self.state.current_date)
        return days[0], days[-1]

    def header_title(self) -> str:
        if self.state.view is ViewMode.MONTH:
            return f"{self.state.current_date:%B %Y}"
        first, last = self.visible_range()
        return f"{first.day} {first:%B %Y} - {last.day} {last:%B %Y}"

    def render(self) -> WeekLayout | MonthLayout:
        events = self.repository.list_events()
        if self.state.view is ViewMode.MONTH:
            month = self.state.current_month
            return layout_month(events, month.year, month.month, today=self._today_fn())
        return layout_week(events, self.state.current_date)

    # dialog

    def _reset_dialog(self) -> None:
        self.state.dialog = DialogClosed()
        self.state.form = initial_values(self._today_fn())
        self.state.form_errors = {}

    def open_create(self) -> None:
        self._reset_dialog()
        self.state.dialog = CreateMode()

    def open_edit(self, event: CalendarEvent | Mapping[str, Any]) -> None:
        if not isinstance(event, CalendarEvent):
            event = CalendarEvent.model_validate(event)
        self.state.dialog = EditMode(event_id=event.id)
        self.state.form = FormValues(
            title=event.title,
            description=event.description or "",
            start=event.start,
            end=event.end,
            all_day=event.all_day,
            color=normalize_color(event.color),
            location=event.location or "",
        )
        self.state.form_errors = {}

    def close_dialog(self) -> None:
        self._reset_dialog()

    def update_form(self, **changes: Any) -> None:
        self.state.form = dataclasses.replace(self.state.form, **changes)

    def submit(self) -> CalendarEvent | None:
        dialog = self.state.dialog
        if isinstance(dialog, DialogClosed):
            return None
        if self.state.busy:
            logger.debug("Ignoring submit while a request is in flight")
            return None

        result = validate_form(self.state.form)
        if not result.ok:
            self.state.form_errors = result.errors
            return None
        self.state.form_errors = {}

        if isinstance(dialog, EditMode):
            return self._update(dialog.event_id, result.form)
        return self._create(result.form)

    def _create(self, form: EventForm) -> CalendarEvent | None:
        self.state.is_submitting = True
        try:
            created = self.repository.create_event(form_to_input(form))
        except Exception as exc:  # noqa: BLE001
            logger.error("Failed to create event: %s", exc, exc_info=True)
            return None
        finally:
            self.state.is_submitting = False
        self._reset_dialog()
        return created

    def _update(self, event_id: str, form: EventForm) -> CalendarEvent | None:
        self.state.is_updating = True
        try:
            updated = self.repository.update_event(form_to_update(event_id, form))
        except Exception as exc:  # noqa: BLE001
            logger.error("Failed to update event id=%s: %s", event_id, exc, exc_info=True)
            return None
        finally:
            self.state.is_updating = False
        if updated is None:
            logger.warning("Update dropped; event id=%s not found", event_id)
        self._reset_dialog()
        return updated

    def delete(self, event_id: str | None = None) -> bool:
        if event_id is None and isinstance(self.state.dialog, EditMode):
            event_id = self.state.dialog.event_id
        if event_id is None or self.state.busy:
            return False

        self.state.is_deleting = True
        try:
            removed = self.repository.delete_event(event_id)
        except Exception as exc:  # noqa: BLE001
            logger.error("Failed to delete event id=%s: %s", event_id, exc, exc_info=True)
            return False
        finally:
            self.state.is_deleting = False
        self._reset_dialog()
        return removed
