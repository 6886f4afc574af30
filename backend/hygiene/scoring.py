"""
Hygiene score calculation.

A stall's hygiene score blends two signals from its reviews:

* the 1-5 hygiene rating each reviewer gives directly, and
* the hygiene tags attached to each review (from the checklist on the
  review form), turned into a 0-100 tag score per review.

The final figure is ``0.7 x average rating + 0.3 x average tag score``,
with the tag score rescaled onto the same 0-5 range as the rating.
"""
from __future__ import annotations

import math
from typing import Any, Iterable, Mapping, Sequence

from .tags import CHECKLIST_QUESTIONS, NEGATIVE_TAGS, POSITIVE_TAGS

BASE_TAG_SCORE = 50
MIN_TAG_SCORE = 0
MAX_TAG_SCORE = 100

USER_SCORE_WEIGHT = 0.7
TAG_SCORE_WEIGHT = 0.3


def round_half_up(value: float, digits: int = 0) -> float:
    """Round to *digits* decimals with halves going up, like JS ``Math.round``."""
    factor = 10 ** digits
    return math.floor(value * factor + 0.5) / factor


def calculate_tag_score(tags: Iterable[str] | None) -> int:
    """Score a single review's hygiene tags on a 0-100 scale.

    No tags scores 0. Otherwise tags move a base of 50 up or down by
    their catalog value; unknown tags are ignored.
    """
    if not tags:
        return 0

    score = BASE_TAG_SCORE
    for tag in tags:
        if tag in POSITIVE_TAGS:
            score += POSITIVE_TAGS[tag]
        elif tag in NEGATIVE_TAGS:
            score += NEGATIVE_TAGS[tag]

    # Keeps the aggregated score inside 0-5 whatever the catalog values are.
    return max(MIN_TAG_SCORE, min(MAX_TAG_SCORE, score))


def calculate_aggregated_score(
    reviews: Sequence[Mapping[str, Any]] | None,
) -> dict[str, Any]:
    """Aggregate a stall's reviews into ``{score, breakdown}``.

    ``score`` is rounded to one decimal; the breakdown carries the
    intermediate averages and tag tallies for display.
    """
    if not reviews:
        return {"score": 0.0, "breakdown": {"total_reviews": 0}}

    total_score = 0
    total_tag_score = 0
    positive_tag_count = 0
    negative_tag_count = 0

    for review in reviews:
        total_score += review.get("hygiene_score") or 0

        tags = review.get("hygiene_tags")
        if tags:
            total_tag_score += calculate_tag_score(tags)
            for tag in tags:
                if tag in POSITIVE_TAGS:
                    positive_tag_count += 1
                if tag in NEGATIVE_TAGS:
                    negative_tag_count += 1

    count = len(reviews)
    avg_score = total_score / count
    avg_tag_score = total_tag_score / count

    tag_score_normalized = (avg_tag_score / 100) * 5
    final_score = avg_score * USER_SCORE_WEIGHT + tag_score_normalized * TAG_SCORE_WEIGHT

    return {
        "score": round_half_up(final_score, 1),
        "breakdown": {
            "total_reviews": count,
            "avg_user_score": round_half_up(avg_score, 1),
            "avg_tag_score": int(round_half_up(avg_tag_score)),
            "positive_tag_count": positive_tag_count,
            "negative_tag_count": negative_tag_count,
        },
    }


def responses_to_tags(responses: Mapping[str, Any] | None) -> list[str]:
    """Map yes/no checklist answers onto hygiene tags.

    Only real booleans produce a tag; ``None`` or a missing answer is skipped.
    """
    if not responses:
        return []

    tags: list[str] = []
    for question, yes_tag, no_tag in CHECKLIST_QUESTIONS:
        answer = responses.get(question)
        if answer is True:
            tags.append(yes_tag)
        elif answer is False:
            tags.append(no_tag)
    return tags
