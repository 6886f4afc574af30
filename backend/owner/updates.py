from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Any

from fastapi import HTTPException

from ..analytics.store import record_event
from ..stalls.data_store import get_stall, get_stalls_for_owner, update_stall
from ..stalls.models import (
    MenuUpdateRequest,
    OwnerStall,
    OwnerStallsResponse,
    StallOut,
    StallUpdateResponse,
    StatusUpdateRequest,
)
from ..stalls.reviews import get_reviews_for_stall
from ..stalls.search import review_stats
from ..users.favorites import users_for_stall
from ..users.notifications import notify

logger = logging.getLogger(__name__)


def verify_ownership(stall_id: str, owner_id: str) -> dict[str, Any]:
    """Raise 404 for an unknown stall, 403 if *owner_id* does not own it."""
    stall = get_stall(stall_id)
    if stall is None:
        raise HTTPException(status_code=404, detail="Stall not found")
    if stall["owner_id"] != owner_id:
        raise HTTPException(status_code=403, detail="Not authorized to update this stall")
    return stall


def update_status(body: StatusUpdateRequest) -> StallUpdateResponse:
    verify_ownership(body.stall_id, body.owner_id)

    now = datetime.now(timezone.utc).isoformat()
    fields: dict[str, Any] = {"is_open": body.is_open, "last_status_update": now}
    # Mobile carts report where they are whenever they open or close
    if body.location is not None:
        fields["latitude"] = body.location.lat
        fields["longitude"] = body.location.long

    stall = update_stall(body.stall_id, **fields)
    record_event("stall_status_update", {
        "stall_id": body.stall_id,
        "is_open": body.is_open,
        "last_status_update": now,
    })
    logger.info("Stall %s is now %s", body.stall_id, "open" if body.is_open else "closed")

    if body.is_open:
        _notify_favorites(stall)

    return StallUpdateResponse(
        message=f"Stall is now {'OPEN' if body.is_open else 'CLOSED'}",
        stall=StallOut(**stall),
    )


def _notify_favorites(stall: dict[str, Any]) -> None:
    for user_id in users_for_stall(stall["id"]):
        notify(
            user_id,
            "favorite_stall_open",
            f"{stall['name']} is now OPEN!",
            body="Your favourite stall is serving right now.",
            data={"stall_id": stall["id"]},
        )


def update_menu(body: MenuUpdateRequest) -> StallUpdateResponse:
    verify_ownership(body.stall_id, body.owner_id)
    stall = update_stall(body.stall_id, menu_text=body.menu_text)
    return StallUpdateResponse(message="Menu updated successfully", stall=StallOut(**stall))


def list_owner_stalls(owner_id: str) -> OwnerStallsResponse:
    stalls: list[OwnerStall] = []
    for stall in get_stalls_for_owner(owner_id):
        count, avg_rating = review_stats(get_reviews_for_stall(stall["id"]))
        stalls.append(OwnerStall(**stall, review_count=count, avg_rating=avg_rating))
    return OwnerStallsResponse(count=len(stalls), stalls=stalls)
