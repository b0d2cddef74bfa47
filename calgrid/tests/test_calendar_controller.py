import logging
from datetime import date, datetime

from calgrid.domain.schemas.event import CalendarEvent, EventColor
from calgrid.services.layout.month_grid import MonthLayout
from calgrid.services.layout.week_grid import WeekLayout
from calgrid.services.store.memory_store import InMemoryEventRepository
from calgrid.services.view.controller import CalendarController
from calgrid.services.view.state import CreateMode, DialogClosed, EditMode, ViewMode

TODAY = date(2024, 1, 31)


def _standup() -> CalendarEvent:
    return CalendarEvent(
        id="100",
        title="Standup",
        description="Daily",
        start=datetime(2024, 1, 31, 9, 0),
        end=datetime(2024, 1, 31, 9, 30),
        color="orange",
        location="Room 2",
    )


def _make_controller(events=None, repository=None) -> CalendarController:
    repo = repository or InMemoryEventRepository(events if events is not None else [_standup()])
    return CalendarController(repo, today_fn=lambda: TODAY)


def _fill_valid_form(controller: CalendarController, title: str = "Lunch") -> None:
    controller.update_form(
        title=title,
        start=datetime(2024, 1, 31, 12, 0),
        end=datetime(2024, 1, 31, 13, 0),
        color=EventColor.PINK,
    )


class _FailingRepository(InMemoryEventRepository):
    def __init__(self) -> None:
        super().__init__([_standup()])
        self.calls = 0

    def create_event(self, data):
        self.calls += 1
        raise RuntimeError("connection reset")

    def delete_event(self, event_id):
        self.calls += 1
        raise RuntimeError("connection reset")


def test_week_navigation_resyncs_month() -> None:
    controller = _make_controller()

    controller.next_week()
    assert controller.state.current_date == date(2024, 2, 7)
    assert controller.state.current_month == date(2024, 2, 1)

    controller.prev_week()
    assert controller.state.current_date == TODAY
    assert controller.state.current_month == date(2024, 1, 1)


def test_month_navigation_moves_both_cursors() -> None:
    controller = _make_controller()
    controller.switch_view("month")

    controller.next()
    assert controller.state.current_date == date(2024, 2, 1)
    assert controller.state.current_month == date(2024, 2, 1)

    controller.prev()
    controller.prev()
    assert controller.state.current_date == date(2023, 12, 1)
    assert controller.state.current_month == date(2023, 12, 1)


def test_day_navigation() -> None:
    controller = _make_controller()

    controller.next_day()
    assert controller.state.selected_day == date(2024, 2, 1)
    assert controller.state.current_date == date(2024, 2, 1)
    assert controller.state.current_month == date(2024, 2, 1)

    controller.prev_day()
    assert controller.state.selected_day == TODAY
    assert controller.state.current_month == date(2024, 1, 1)


def test_today_resets_month_only_in_month_view() -> None:
    controller = _make_controller()
    controller.next_week()
    controller.today()
    assert controller.state.current_date == TODAY
    assert controller.state.current_month == date(2024, 2, 1)

    controller.switch_view(ViewMode.MONTH)
    controller.next_month()
    controller.today()
    assert controller.state.current_month == date(2024, 1, 1)
    assert controller.state.selected_day == TODAY


def test_visible_range_and_title() -> None:
    controller = _make_controller()
    assert controller.visible_range() == (date(2024, 1, 28), date(2024, 2, 3))
    assert controller.header_title() == "28 January 2024 - 3 February 2024"

    controller.switch_view("month")
    assert controller.visible_range() == (date(2024, 1, 1), date(2024, 1, 31))
    assert controller.header_title() == "January 2024"


def test_render_recomputes_each_time() -> None:
    controller = _make_controller()
    layout = controller.render()
    assert isinstance(layout, WeekLayout)
    assert [s.event_id for s in layout.cell(TODAY, 9)] == ["100"]

    controller.open_create()
    _fill_valid_form(controller)
    created = controller.submit()
    assert created is not None
    assert [s.event_id for s in controller.render().cell(TODAY, 12)] == [created.id]

    controller.switch_view("month")
    month = controller.render()
    assert isinstance(month, MonthLayout)
    assert [c for c in month.cells() if c.is_today][0].day == TODAY


def test_invalid_form_blocks_the_store_call() -> None:
    controller = _make_controller()
    controller.open_create()
    controller.update_form(title="A", end=datetime(2024, 1, 31, 6, 0))

    assert controller.submit() is None
    assert set(controller.state.form_errors) == {"title", "end"}
    assert isinstance(controller.state.dialog, CreateMode)
    assert len(controller.repository.list_events()) == 1


def test_create_closes_dialog_and_resets_form() -> None:
    controller = _make_controller()
    controller.open_create()
    _fill_valid_form(controller)

    created = controller.submit()

    assert created is not None and created.title == "Lunch"
    assert isinstance(controller.state.dialog, DialogClosed)
    assert controller.state.form.title == ""
    assert controller.state.form.start == datetime(2024, 1, 31, 7, 0)
    assert controller.state.is_submitting is False


def test_open_edit_populates_form_from_wire_shape() -> None:
    controller = _make_controller()
    controller.open_edit(
        {
            "id": "900",
            "title": "Imported",
            "start": "2024-01-31T10:00:00",
            "end": "2024-01-31T11:15:00",
            "color": "purple",
        }
    )

    assert controller.state.dialog == EditMode(event_id="900")
    assert controller.state.form.start == datetime(2024, 1, 31, 10, 0)
    assert controller.state.form.end == datetime(2024, 1, 31, 11, 15)
    assert controller.state.form.color is EventColor.BLUE
    assert controller.state.form.description == ""


def test_edit_submit_updates_store() -> None:
    controller = _make_controller()
    controller.open_edit(_standup())
    assert controller.state.form.color is EventColor.ORANGE

    controller.update_form(title="Standup (moved)")
    updated = controller.submit()

    assert updated is not None
    assert controller.repository.list_events()[0].title == "Standup (moved)"
    assert controller.repository.list_events()[0].location == "Room 2"
    assert isinstance(controller.state.dialog, DialogClosed)


def test_update_of_deleted_event_is_dropped_silently(caplog) -> None:
    caplog.set_level(logging.WARNING)
    controller = _make_controller()
    controller.open_edit(_standup())
    controller.repository.delete_event("100")

    assert controller.submit() is None
    assert controller.repository.list_events() == []
    assert controller.state.form_errors == {}
    assert isinstance(controller.state.dialog, DialogClosed)
    assert any("not found" in rec.message for rec in caplog.records)


def test_store_failure_keeps_dialog_open(caplog) -> None:
    caplog.set_level(logging.ERROR)
    repo = _FailingRepository()
    controller = _make_controller(repository=repo)
    controller.open_create()
    _fill_valid_form(controller)

    assert controller.submit() is None
    assert isinstance(controller.state.dialog, CreateMode)
    assert controller.state.form.title == "Lunch"
    assert controller.state.is_submitting is False
    assert any("Failed to create event" in rec.message for rec in caplog.records)

    # retry is possible once the flag is cleared
    assert controller.submit() is None
    assert repo.calls == 2


def test_in_flight_request_blocks_duplicate_submit() -> None:
    controller = _make_controller()
    controller.open_create()
    _fill_valid_form(controller)
    controller.state.is_submitting = True

    assert controller.submit() is None
    assert len(controller.repository.list_events()) == 1


def test_delete_from_edit_dialog() -> None:
    controller = _make_controller()
    controller.open_edit(_standup())

    assert controller.delete() is True
    assert controller.repository.list_events() == []
    assert isinstance(controller.state.dialog, DialogClosed)

    assert controller.delete("missing") is False
    assert controller.delete() is False


def test_delete_failure_is_logged(caplog) -> None:
    caplog.set_level(logging.ERROR)
    controller = _make_controller(repository=_FailingRepository())
    controller.open_edit(_standup())

    assert controller.delete() is False
    assert isinstance(controller.state.dialog, EditMode)
    assert controller.state.is_deleting is False
    assert any("Failed to delete event id=100" in rec.message for rec in caplog.records)


def test_close_dialog_clears_edit_mode() -> None:
    controller = _make_controller()
    controller.open_edit(_standup())
    controller.state.form_errors = {"title": ["x"]}

    controller.close_dialog()

    assert isinstance(controller.state.dialog, DialogClosed)
    assert not controller.state.is_dialog_open
    assert controller.state.form.title == ""
    assert controller.state.form_errors == {}
