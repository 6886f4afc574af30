from __future__ import annotations

from collections import Counter
from typing import Any

_RADIUS_BUCKETS = ((500, "<=500m"), (1000, "<=1km"), (5000, "<=5km"))


def _radius_bucket(radius: float) -> str:
    for limit, label in _RADIUS_BUCKETS:
        if radius <= limit:
            return label
    return ">5km"


def compute_activity(events: list[dict[str, Any]]) -> dict[str, Any]:
    searches = [e for e in events if e["type"] == "nearby_search"]
    status_updates = [e for e in events if e["type"] == "stall_status_update"]
    reviews = [e for e in events if e["type"] == "review_submitted"]
    total = len(searches)

    # Average stalls returned per search
    returned = [s.get("results_returned", 0) for s in searches]
    avg_results = round(sum(returned) / total, 1) if total else 0.0

    times = [s["response_time_ms"] for s in searches if "response_time_ms" in s]
    avg_time = round(sum(times) / len(times), 1) if times else 0.0

    radius_counter: Counter[str] = Counter()
    for s in searches:
        radius_counter[_radius_bucket(s.get("radius", 0))] += 1

    open_only = sum(1 for s in searches if s.get("open_only"))
    opened = sum(1 for u in status_updates if u.get("is_open"))

    # Most reviewed stalls
    review_counter: Counter[str] = Counter(r.get("stall_id", "unknown") for r in reviews)
    top_reviewed = [{"stall_id": s, "count": c} for s, c in review_counter.most_common(10)]

    return {
        "total_searches": total,
        "avg_results_per_search": avg_results,
        "avg_response_time_ms": avg_time,
        "radius_usage": dict(radius_counter),
        "open_only_rate": round(open_only / total * 100, 1) if total else 0.0,
        "reviews_submitted": len(reviews),
        "top_reviewed_stalls": top_reviewed,
        "status_updates": {
            "total": len(status_updates),
            "opened": opened,
            "closed": len(status_updates) - opened,
        },
    }
