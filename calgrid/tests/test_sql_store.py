from datetime import datetime

from calgrid.db.session import build_engine, build_sessionmaker
from calgrid.domain.schemas.event import CalendarEvent, EventInput, EventUpdate
from calgrid.services.store.base import TimestampIds
from calgrid.services.store.sql_store import SqlEventRepository


def _make_repo(**kwargs) -> SqlEventRepository:
    engine = build_engine("sqlite:///:memory:")
    return SqlEventRepository(build_sessionmaker(engine), **kwargs)


def _seed() -> list[CalendarEvent]:
    return [
        CalendarEvent(
            id="300",
            title="Later",
            start=datetime(2024, 1, 5, 9, 0),
            end=datetime(2024, 1, 5, 10, 0),
            color="blue",
            location="Room 1",
        ),
        CalendarEvent(
            id="100",
            title="Earlier",
            start=datetime(2024, 1, 1, 9, 0),
            end=datetime(2024, 1, 1, 10, 0),
            all_day=True,
            color="pink",
        ),
    ]


def test_seed_keeps_insertion_order_and_runs_once() -> None:
    repo = _make_repo()

    assert repo.seed(_seed()) == 2
    assert repo.seed(_seed()) == 0

    events = repo.list_events()
    assert [e.id for e in events] == ["300", "100"]
    assert events[1].all_day is True
    assert events[0].start == datetime(2024, 1, 5, 9, 0)


def test_create_update_delete_roundtrip() -> None:
    repo = _make_repo(ids=TimestampIds(clock=lambda: 2.0))
    repo.seed(_seed())

    created = repo.create_event(
        EventInput(
            title="Lunch",
            start=datetime(2024, 1, 3, 12, 0),
            end=datetime(2024, 1, 3, 13, 0),
            color="orange",
        )
    )
    assert created.id == "2000"
    assert repo.list_events()[-1] == created

    updated = repo.update_event(
        EventUpdate(
            id="300",
            title="Later (moved)",
            start=datetime(2024, 1, 5, 11, 0),
            end=datetime(2024, 1, 5, 12, 0),
            color="orange",
        )
    )
    assert updated is not None
    assert updated.location == "Room 1"
    assert repo.list_events()[0].title == "Later (moved)"

    assert repo.delete_event(created.id) is True
    assert [e.id for e in repo.list_events()] == ["300", "100"]


def test_missing_ids_leave_store_unchanged() -> None:
    repo = _make_repo()
    repo.seed(_seed())
    before = repo.list_events()

    assert repo.delete_event("nope") is False
    assert (
        repo.update_event(
            EventUpdate(
                id="nope",
                title="Ghost",
                start=datetime(2024, 1, 1, 9, 0),
                end=datetime(2024, 1, 1, 10, 0),
                color="blue",
            )
        )
        is None
    )
    assert repo.list_events() == before
