from __future__ import annotations

import logging
import threading
import uuid
from datetime import datetime, timezone
from typing import Any

import pandas as pd

from ..hygiene.scoring import responses_to_tags
from .config import DEFAULT_STALLS_CONFIG, StallsConfig

logger = logging.getLogger(__name__)

_reviews: list[dict[str, Any]] = []
_seeded: bool = False
_lock = threading.RLock()

_EDITABLE_FIELDS = ("rating", "hygiene_score", "comment", "hygiene_responses")
_REQUIRED_FIELDS = ("rating", "hygiene_score")


class DuplicateReviewError(Exception):
    """The user has already reviewed this stall."""


class ReviewPermissionError(Exception):
    """The review does not exist or belongs to another user."""


class InvalidReviewError(ValueError):
    """An edit would leave a required review field empty."""


def _now() -> str:
    return datetime.now(timezone.utc).isoformat()


def _seed(config: StallsConfig = DEFAULT_STALLS_CONFIG) -> None:
    global _seeded
    _seeded = True
    if not config.reviews_path.exists():
        logger.warning("No seed reviews at %s", config.reviews_path)
        return

    df = pd.read_csv(
        config.reviews_path,
        dtype={"id": str, "stall_id": str, "user_id": str},
    )
    for _, row in df.iterrows():
        tags = row["hygiene_tags"] if isinstance(row["hygiene_tags"], str) else ""
        _reviews.append({
            "id": row["id"],
            "stall_id": row["stall_id"],
            "user_id": row["user_id"],
            "rating": int(row["rating"]),
            "hygiene_score": int(row["hygiene_score"]),
            "hygiene_tags": [t for t in tags.split("|") if t],
            "hygiene_responses": None,
            "comment": row["comment"] if isinstance(row["comment"], str) else None,
            "created_at": row["created_at"],
            "updated_at": row["created_at"],
        })


def _all() -> list[dict[str, Any]]:
    with _lock:
        if not _seeded:
            _seed()
    return _reviews


def _newest_first(reviews: list[dict[str, Any]]) -> list[dict[str, Any]]:
    return sorted(reviews, key=lambda r: r["created_at"], reverse=True)


def add_review(
    stall_id: str,
    user_id: str,
    rating: int,
    hygiene_score: int,
    hygiene_responses: dict[str, Any] | None = None,
    comment: str | None = None,
) -> dict[str, Any]:
    """Store a review, deriving its hygiene tags from the checklist answers."""
    created = _now()
    review = {
        "id": uuid.uuid4().hex[:12],
        "stall_id": stall_id,
        "user_id": user_id,
        "rating": rating,
        "hygiene_score": hygiene_score,
        "hygiene_tags": responses_to_tags(hygiene_responses),
        "hygiene_responses": hygiene_responses,
        "comment": comment,
        "created_at": created,
        "updated_at": created,
    }
    with _lock:
        reviews = _all()
        if any(r["stall_id"] == stall_id and r["user_id"] == user_id for r in reviews):
            raise DuplicateReviewError(f"user {user_id} already reviewed stall {stall_id}")
        reviews.append(review)
    logger.info("Review %s added for stall %s", review["id"], stall_id)
    return review


def get_reviews_for_stall(stall_id: str) -> list[dict[str, Any]]:
    return _newest_first([r for r in _all() if r["stall_id"] == stall_id])


def get_reviews_for_user(user_id: str) -> list[dict[str, Any]]:
    return _newest_first([r for r in _all() if r["user_id"] == user_id])


def _owned_review(review_id: str, user_id: str) -> dict[str, Any]:
    for review in _all():
        if review["id"] == review_id and review["user_id"] == user_id:
            return review
    raise ReviewPermissionError(f"review {review_id} is not editable by {user_id}")


def update_review(review_id: str, user_id: str, **changes: Any) -> dict[str, Any]:
    """Apply *changes* to a user's own review.

    New checklist answers replace the stored hygiene tags as well.
    """
    updated = {f: changes[f] for f in _EDITABLE_FIELDS if f in changes}
    missing = [f for f in _REQUIRED_FIELDS if f in updated and updated[f] is None]
    if missing:
        raise InvalidReviewError(f"{', '.join(missing)} cannot be empty")
    if "hygiene_responses" in updated:
        updated["hygiene_tags"] = responses_to_tags(updated["hygiene_responses"])
    updated["updated_at"] = _now()

    with _lock:
        review = _owned_review(review_id, user_id)
        review.update(updated)
    return review


def delete_review(review_id: str, user_id: str) -> None:
    with _lock:
        review = _owned_review(review_id, user_id)
        _reviews.remove(review)
    logger.info("Review %s deleted", review_id)


def clear_reviews(reseed: bool = False) -> None:
    """Empty the store; with *reseed* the seed file is loaded again on next use."""
    global _seeded
    with _lock:
        _reviews.clear()
        _seeded = not reseed
