from __future__ import annotations

from fastapi import FastAPI, HTTPException, Query

from .analytics.aggregator import compute_activity
from .analytics.store import get_events, record_event
from .hygiene.scoring import calculate_aggregated_score
from .hygiene.tags import tag_catalog
from .owner.updates import list_owner_stalls, update_menu, update_status
from .stalls.config import DEFAULT_STALLS_CONFIG
from .stalls.data_store import get_stall
from .stalls.models import (
    MenuUpdateRequest,
    NearbyRequest,
    NearbyResponse,
    OwnerStallsResponse,
    ReviewCreate,
    ReviewOut,
    ReviewResponse,
    ReviewUpdate,
    ScoreRequest,
    StallDetailResponse,
    StallUpdateResponse,
    StatusUpdateRequest,
)
from .stalls.reviews import (
    DuplicateReviewError,
    InvalidReviewError,
    ReviewPermissionError,
    add_review,
    delete_review,
    get_reviews_for_user,
    update_review,
)
from .stalls.search import get_nearby_stalls, get_stall_detail
from .users.favorites import (
    UnknownStallError,
    add_favorite,
    get_favorites,
    is_favorited,
    remove_favorite,
)
from .users.models import (
    FavoritesResponse,
    NotificationOut,
    NotificationsResponse,
    ReportCreate,
    ReportOut,
    ReportResponse,
    ReportsResponse,
)
from .users.notifications import get_notifications, mark_all_read, mark_read, unread_count
from .users.reports import add_report, get_reports_for_user

app = FastAPI(title="Street Food Finder API", version="1.0.0")


# ── Public endpoints ─────────────────────────────────────────────────────


@app.get("/health")
def health() -> dict[str, str]:
    return {"status": "ok"}


@app.get("/api/v1/hygiene/tags")
def hygiene_tags() -> dict:
    return tag_catalog()


@app.post("/api/v1/hygiene/score")
def hygiene_score(body: ScoreRequest) -> dict:
    return calculate_aggregated_score([r.model_dump() for r in body.reviews])


# ── Stall endpoints ──────────────────────────────────────────────────────


@app.get("/api/v1/stalls/nearby", response_model=NearbyResponse)
def nearby_stalls(
    lat: float = Query(..., ge=-90.0, le=90.0),
    long: float = Query(..., ge=-180.0, le=180.0),
    radius: int = Query(DEFAULT_STALLS_CONFIG.default_radius_m, ge=1, le=50_000),
    open_only: bool = False,
) -> NearbyResponse:
    request = NearbyRequest(lat=lat, long=long, radius=radius, open_only=open_only)
    return get_nearby_stalls(request)


@app.get("/api/v1/stalls/{stall_id}", response_model=StallDetailResponse)
def stall_detail(stall_id: str) -> StallDetailResponse:
    detail = get_stall_detail(stall_id)
    if detail is None:
        raise HTTPException(status_code=404, detail="Stall not found")
    return detail


@app.post("/api/v1/stalls/reviews", response_model=ReviewResponse, status_code=201)
def submit_review(body: ReviewCreate) -> ReviewResponse:
    if get_stall(body.stall_id) is None:
        raise HTTPException(status_code=404, detail="Stall not found")

    responses = body.hygiene_responses.model_dump() if body.hygiene_responses else None
    try:
        review = add_review(
            body.stall_id,
            body.user_id,
            body.rating,
            body.hygiene_score,
            hygiene_responses=responses,
            comment=body.comment,
        )
    except DuplicateReviewError:
        raise HTTPException(status_code=409, detail="You have already reviewed this stall")

    record_event("review_submitted", {
        "stall_id": body.stall_id,
        "hygiene_score": body.hygiene_score,
        "tag_count": len(review["hygiene_tags"]),
    })
    return ReviewResponse(message="Review submitted successfully", review=ReviewOut(**review))


# ── User review endpoints ────────────────────────────────────────────────


@app.get("/api/v1/users/{user_id}/reviews")
def user_reviews(user_id: str) -> dict:
    reviews = get_reviews_for_user(user_id)
    return {
        "success": True,
        "count": len(reviews),
        "reviews": [ReviewOut(**r).model_dump() for r in reviews],
    }


@app.put("/api/v1/users/{user_id}/reviews/{review_id}", response_model=ReviewResponse)
def edit_review(user_id: str, review_id: str, body: ReviewUpdate) -> ReviewResponse:
    changes = body.model_dump(exclude_unset=True)
    if not changes:
        raise HTTPException(status_code=400, detail="No fields to update")
    try:
        review = update_review(review_id, user_id, **changes)
    except ReviewPermissionError:
        raise HTTPException(status_code=403, detail="Not authorized to edit this review")
    except InvalidReviewError as exc:
        raise HTTPException(status_code=422, detail=str(exc))
    return ReviewResponse(message="Review updated successfully", review=ReviewOut(**review))


@app.delete("/api/v1/users/{user_id}/reviews/{review_id}")
def remove_review(user_id: str, review_id: str) -> dict:
    try:
        delete_review(review_id, user_id)
    except ReviewPermissionError:
        raise HTTPException(status_code=403, detail="Not authorized to delete this review")
    return {"success": True, "message": "Review deleted successfully"}


# ── Favourites, reports and notifications ───────────────────────────────


@app.get("/api/v1/users/{user_id}/favorites", response_model=FavoritesResponse)
def user_favorites(user_id: str) -> FavoritesResponse:
    favorites = get_favorites(user_id)
    return FavoritesResponse(count=len(favorites), favorites=favorites)


@app.post("/api/v1/users/{user_id}/favorites/{stall_id}")
def favorite_stall(user_id: str, stall_id: str) -> dict:
    try:
        favorite = add_favorite(user_id, stall_id)
    except UnknownStallError:
        raise HTTPException(status_code=404, detail="Stall not found")
    return {"success": True, "message": "Stall added to favorites", "favorite": favorite}


@app.delete("/api/v1/users/{user_id}/favorites/{stall_id}")
def unfavorite_stall(user_id: str, stall_id: str) -> dict:
    remove_favorite(user_id, stall_id)
    return {"success": True, "message": "Stall removed from favorites"}


@app.get("/api/v1/users/{user_id}/favorites/{stall_id}/check")
def check_favorite(user_id: str, stall_id: str) -> dict:
    return {"success": True, "is_favorited": is_favorited(user_id, stall_id)}


@app.post("/api/v1/users/reports", response_model=ReportResponse, status_code=201)
def submit_report(body: ReportCreate) -> ReportResponse:
    if body.stall_id and get_stall(body.stall_id) is None:
        raise HTTPException(status_code=404, detail="Stall not found")
    report = add_report(body.user_id, body.type, body.description, stall_id=body.stall_id)
    return ReportResponse(
        message="Report submitted successfully. Thank you for your feedback!",
        report=ReportOut(**report),
    )


@app.get("/api/v1/users/{user_id}/reports", response_model=ReportsResponse)
def user_reports(user_id: str) -> ReportsResponse:
    reports = [ReportOut(**r) for r in get_reports_for_user(user_id)]
    return ReportsResponse(count=len(reports), reports=reports)


@app.get("/api/v1/users/{user_id}/notifications", response_model=NotificationsResponse)
def user_notifications(user_id: str, unread_only: bool = False) -> NotificationsResponse:
    return NotificationsResponse(
        unread_count=unread_count(user_id),
        notifications=[NotificationOut(**n) for n in get_notifications(user_id, unread_only)],
    )


@app.put("/api/v1/users/{user_id}/notifications/read-all")
def read_all_notifications(user_id: str) -> dict:
    marked = mark_all_read(user_id)
    return {"success": True, "message": "All notifications marked as read", "marked": marked}


@app.put("/api/v1/users/{user_id}/notifications/{notification_id}/read")
def read_notification(user_id: str, notification_id: str) -> dict:
    if not mark_read(user_id, notification_id):
        raise HTTPException(status_code=404, detail="Notification not found")
    return {"success": True, "message": "Notification marked as read"}


# ── Owner endpoints ──────────────────────────────────────────────────────


@app.post("/api/v1/owner/status", response_model=StallUpdateResponse)
def owner_status(body: StatusUpdateRequest) -> StallUpdateResponse:
    return update_status(body)


@app.put("/api/v1/owner/menu", response_model=StallUpdateResponse)
def owner_menu(body: MenuUpdateRequest) -> StallUpdateResponse:
    return update_menu(body)


@app.get("/api/v1/owner/stalls/{owner_id}", response_model=OwnerStallsResponse)
def owner_stalls(owner_id: str) -> OwnerStallsResponse:
    return list_owner_stalls(owner_id)


# ── Activity ─────────────────────────────────────────────────────────────


@app.get("/analytics")
def analytics() -> dict:
    return compute_activity(get_events())
