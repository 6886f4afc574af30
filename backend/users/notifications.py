from __future__ import annotations

import logging
import uuid
from datetime import datetime, timezone
from typing import Any

logger = logging.getLogger(__name__)

MAX_NOTIFICATIONS = 50

_notifications: list[dict[str, Any]] = []


def notify(
    user_id: str,
    notification_type: str,
    title: str,
    body: str | None = None,
    data: dict[str, Any] | None = None,
) -> dict[str, Any]:
    notification = {
        "id": uuid.uuid4().hex[:12],
        "user_id": user_id,
        "type": notification_type,
        "title": title,
        "body": body,
        "data": data or {},
        "read": False,
        "created_at": datetime.now(timezone.utc).isoformat(),
    }
    _notifications.append(notification)
    logger.debug("notification %s for %s", notification_type, user_id)
    return notification


def get_notifications(user_id: str, unread_only: bool = False) -> list[dict[str, Any]]:
    """Newest first, capped at MAX_NOTIFICATIONS."""
    items = [
        n for n in reversed(_notifications)
        if n["user_id"] == user_id and not (unread_only and n["read"])
    ]
    return items[:MAX_NOTIFICATIONS]


def unread_count(user_id: str) -> int:
    return sum(1 for n in _notifications if n["user_id"] == user_id and not n["read"])


def mark_read(user_id: str, notification_id: str) -> bool:
    for n in _notifications:
        if n["id"] == notification_id and n["user_id"] == user_id:
            n["read"] = True
            return True
    return False


def mark_all_read(user_id: str) -> int:
    marked = 0
    for n in _notifications:
        if n["user_id"] == user_id and not n["read"]:
            n["read"] = True
            marked += 1
    return marked


def clear_notifications() -> None:
    _notifications.clear()
