from __future__ import annotations

import json
import logging
from pathlib import Path

from pydantic import TypeAdapter, ValidationError

from calgrid.domain.schemas.event import CalendarEvent

logger = logging.getLogger(__name__)

_EVENT_LIST = TypeAdapter(list[CalendarEvent])


def load_seed_events(path: str | Path) -> list[CalendarEvent]:
    seed_path = Path(path)
    if not seed_path.exists():
        logger.warning("Seed file %s not found; starting with an empty calendar", seed_path)
        return []
    try:
        raw = json.loads(seed_path.read_text(encoding="utf-8"))
        events = _EVENT_LIST.validate_python(raw)
    except (json.JSONDecodeError, ValidationError) as exc:
        raise ValueError(f"Malformed seed file {seed_path}: {exc}") from exc
    logger.info("Loaded %d seed events from %s", len(events), seed_path)
    return events
