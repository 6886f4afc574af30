from __future__ import annotations

import logging
import threading
from datetime import datetime, timezone
from typing import Any

from ..stalls.data_store import get_stall
from ..stalls.reviews import get_reviews_for_stall
from ..stalls.search import review_stats
from .models import FavoriteStall

logger = logging.getLogger(__name__)

_favorites: list[dict[str, Any]] = []
_lock = threading.Lock()


class UnknownStallError(LookupError):
    """The stall being favourited does not exist."""


def add_favorite(user_id: str, stall_id: str) -> dict[str, Any]:
    """Favourite a stall; favouriting it again returns the existing entry."""
    if get_stall(stall_id) is None:
        raise UnknownStallError(stall_id)

    with _lock:
        for fav in _favorites:
            if fav["user_id"] == user_id and fav["stall_id"] == stall_id:
                return fav
        fav = {
            "user_id": user_id,
            "stall_id": stall_id,
            "created_at": datetime.now(timezone.utc).isoformat(),
        }
        _favorites.append(fav)
    logger.info("User %s favourited stall %s", user_id, stall_id)
    return fav


def remove_favorite(user_id: str, stall_id: str) -> bool:
    with _lock:
        before = len(_favorites)
        _favorites[:] = [
            f for f in _favorites
            if not (f["user_id"] == user_id and f["stall_id"] == stall_id)
        ]
        return len(_favorites) < before


def is_favorited(user_id: str, stall_id: str) -> bool:
    with _lock:
        return any(f["user_id"] == user_id and f["stall_id"] == stall_id for f in _favorites)


def users_for_stall(stall_id: str) -> list[str]:
    with _lock:
        return [f["user_id"] for f in _favorites if f["stall_id"] == stall_id]


def get_favorites(user_id: str) -> list[FavoriteStall]:
    """The user's favourite stalls with review stats, most recently added first."""
    with _lock:
        entries = [f for f in reversed(_favorites) if f["user_id"] == user_id]

    stalls: list[FavoriteStall] = []
    for fav in entries:
        stall = get_stall(fav["stall_id"])
        if stall is None:
            continue
        count, avg_rating = review_stats(get_reviews_for_stall(fav["stall_id"]))
        stalls.append(FavoriteStall(
            **stall,
            favorited_at=fav["created_at"],
            review_count=count,
            avg_rating=avg_rating,
        ))
    return stalls


def clear_favorites() -> None:
    with _lock:
        _favorites.clear()
