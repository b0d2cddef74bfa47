from calgrid.db.models.event import EventRow

__all__ = [
    "EventRow",
]
