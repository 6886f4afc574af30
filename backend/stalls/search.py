"""
Stall search and detail lookups.

Every stall returned carries a hygiene score computed from its current
reviews; scores are recomputed on each request and never cached.
"""
from __future__ import annotations

import time
from typing import Any

import pandas as pd

from ..analytics.store import record_event
from ..hygiene.scoring import calculate_aggregated_score, round_half_up
from .data_store import get_stall, row_to_dict, stalls_within
from .models import (
    HygieneBreakdown,
    NearbyRequest,
    NearbyResponse,
    NearbyStall,
    ReviewOut,
    StallDetail,
    StallDetailResponse,
)
from .reviews import get_reviews_for_stall


def review_stats(reviews: list[dict[str, Any]]) -> tuple[int, float]:
    """Return ``(review_count, avg_rating)`` with the average to 1 decimal."""
    if not reviews:
        return 0, 0.0
    avg = sum(r["rating"] for r in reviews) / len(reviews)
    return len(reviews), round_half_up(avg, 1)


def _nearby_stall(row: pd.Series) -> NearbyStall:
    stall = row_to_dict(row)
    reviews = get_reviews_for_stall(stall["id"])
    count, avg_rating = review_stats(reviews)
    hygiene = calculate_aggregated_score(reviews)
    return NearbyStall(
        **stall,
        distance_km=round(stall["distance_meters"] / 1000, 2),
        review_count=count,
        avg_rating=avg_rating,
        hygiene_score=hygiene["score"],
    )


def get_nearby_stalls(request: NearbyRequest) -> NearbyResponse:
    start_time = time.time()

    nearby = stalls_within(
        request.lat, request.long, request.radius, open_only=request.open_only,
    )
    stalls = [_nearby_stall(row) for _, row in nearby.iterrows()]

    elapsed_ms = round((time.time() - start_time) * 1000, 1)
    record_event("nearby_search", {
        "lat": request.lat,
        "long": request.long,
        "radius": request.radius,
        "open_only": request.open_only,
        "results_returned": len(stalls),
        "response_time_ms": elapsed_ms,
    })

    return NearbyResponse(count=len(stalls), stalls=stalls)


def get_stall_detail(stall_id: str) -> StallDetailResponse | None:
    stall = get_stall(stall_id)
    if stall is None:
        return None

    reviews = get_reviews_for_stall(stall_id)
    count, avg_rating = review_stats(reviews)
    hygiene = calculate_aggregated_score(reviews)

    detail = StallDetail(
        **stall,
        review_count=count,
        avg_rating=avg_rating,
        hygiene_score=hygiene["score"],
        hygiene_breakdown=HygieneBreakdown(**hygiene["breakdown"]),
    )
    return StallDetailResponse(
        stall=detail,
        reviews=[ReviewOut(**r) for r in reviews],
    )
