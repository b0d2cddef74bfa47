from datetime import date

from fastapi import APIRouter, Depends, HTTPException, Query, Request

from calgrid.domain.schemas.event import CalendarEvent, EventInput, EventRef, EventUpdate
from calgrid.services.layout.month_grid import layout_month
from calgrid.services.layout.week_grid import layout_week
from calgrid.services.store.base import EventRepository

router = APIRouter(prefix="/calendar")


def get_repository(request: Request) -> EventRepository:
    return request.app.state.repository


@router.get("/events", response_model=list[CalendarEvent])
def list_events(repository: EventRepository = Depends(get_repository)) -> list[CalendarEvent]:
    return repository.list_events()


@router.post("/events", response_model=CalendarEvent)
def create_event(
    payload: EventInput,
    repository: EventRepository = Depends(get_repository),
) -> CalendarEvent:
    return repository.create_event(payload)


@router.post("/events/update", response_model=CalendarEvent | None)
def update_event(
    payload: EventUpdate,
    repository: EventRepository = Depends(get_repository),
) -> CalendarEvent | None:
    return repository.update_event(payload)


@router.post("/events/delete")
def delete_event(
    payload: EventRef,
    repository: EventRepository = Depends(get_repository),
) -> bool:
    return repository.delete_event(payload.id)


@router.get("/week")
def week_layout(
    day: date | None = Query(default=None, alias="date"),
    repository: EventRepository = Depends(get_repository),
) -> dict:
    reference = day or date.today()
    try:
        layout = layout_week(repository.list_events(), reference)
    except OverflowError:
        raise HTTPException(
            status_code=422,
            detail=f"Week of {reference.isoformat()} is outside the supported date range",
        )
    return layout.as_dict()


@router.get("/month")
def month_layout(
    year: int | None = Query(default=None, ge=1, le=9999),
    month: int | None = Query(default=None, ge=1, le=12),
    repository: EventRepository = Depends(get_repository),
) -> dict:
    today = date.today()
    return layout_month(
        repository.list_events(),
        year or today.year,
        month or today.month,
        today=today,
    ).as_dict()
