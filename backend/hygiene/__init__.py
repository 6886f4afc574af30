"""
Hygiene score aggregation.

Responsibilities:
- Hold the static positive/negative hygiene tag catalogs.
- Convert checklist answers from the review form into hygiene tags.
- Blend user hygiene ratings and tag signals into one 1-5 score per stall.
"""
from .scoring import (
    calculate_aggregated_score,
    calculate_tag_score,
    responses_to_tags,
)
from .tags import CHECKLIST_QUESTIONS, NEGATIVE_TAGS, POSITIVE_TAGS

__all__ = [
    "CHECKLIST_QUESTIONS",
    "NEGATIVE_TAGS",
    "POSITIVE_TAGS",
    "calculate_aggregated_score",
    "calculate_tag_score",
    "responses_to_tags",
]
