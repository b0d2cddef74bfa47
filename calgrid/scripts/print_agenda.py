from __future__ import annotations

import argparse
from datetime import date

from calgrid.config import settings
from calgrid.core.env import load_env
from calgrid.domain.schemas.event import CalendarEvent
from calgrid.logging import configure_logging
from calgrid.services.layout.month_grid import layout_month, time_label
from calgrid.services.layout.week_grid import clamp_end, event_segments, layout_week
from calgrid.services.store.seed import load_seed_events


def print_week(events: list[CalendarEvent], reference: date) -> None:
    layout = layout_week(events, reference)
    timed = [event for event in events if not event.all_day]
    for day in layout.days:
        print(f"{day:%a %d %b}")
        for event in layout.all_day[day]:
            print(f"  [all day] {event.title}")
        for event in timed:
            segments = event_segments(event, day, layout.hours)
            if not segments:
                continue
            first, last = segments[0], segments[-1]
            clipped = " (clipped)" if clamp_end(event.end) != event.end else ""
            print(
                f"  {first.label or event.title} "
                f"rows={first.hour}-{last.hour} top={first.top:.0f}px{clipped}"
            )


def print_month(events: list[CalendarEvent], reference: date) -> None:
    layout = layout_month(events, reference.year, reference.month, today=date.today())
    print(f"{reference:%B %Y}")
    for cell in layout.cells():
        if cell.day is None or not cell.events:
            continue
        print(f"{cell.day:%a %d}")
        for event in cell.visible:
            print(f"  {time_label(event)} {event.title}")
        if cell.more_label:
            print(f"  {cell.more_label}")


def main(argv: list[str] | None = None) -> None:
    parser = argparse.ArgumentParser(description="Print the calendar grid for a date.")
    parser.add_argument("--date", type=date.fromisoformat, default=date.today())
    parser.add_argument("--view", choices=["week", "month"], default="week")
    parser.add_argument("--seed", default=settings.SEED_PATH)
    args = parser.parse_args(argv)

    load_env()
    configure_logging()
    events = load_seed_events(args.seed)
    if args.view == "month":
        print_month(events, args.date)
    else:
        print_week(events, args.date)


if __name__ == "__main__":
    main()
