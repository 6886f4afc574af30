from __future__ import annotations

import logging
import time
from typing import Any

logger = logging.getLogger(__name__)

# Stand-in for the live broadcast channel: status changes and searches are
# appended here and read back by the activity summary.
_events: list[dict[str, Any]] = []


def record_event(event_type: str, data: dict[str, Any]) -> dict[str, Any]:
    event = {"type": event_type, "timestamp": time.time(), **data}
    _events.append(event)
    logger.debug("event %s recorded", event_type)
    return event


def get_events(event_type: str | None = None) -> list[dict[str, Any]]:
    if event_type is None:
        return list(_events)
    return [e for e in _events if e["type"] == event_type]


def clear_events() -> None:
    _events.clear()
