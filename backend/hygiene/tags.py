from __future__ import annotations

from types import MappingProxyType
from typing import Any, Mapping

POSITIVE_TAGS: Mapping[str, int] = MappingProxyType({
    "gloves_used": 10,
    "clean_water": 10,
    "fssai_visible": 15,
    "covered_food": 8,
    "clean_area": 7,
    "hairnet_used": 5,
    "mineral_water": 10,
    "clean_utensils": 8,
    "hand_sanitizer": 5,
    "waste_disposal": 6,
})

NEGATIVE_TAGS: Mapping[str, int] = MappingProxyType({
    "dirty_utensils": -10,
    "no_water_filter": -8,
    "uncovered_food": -8,
    "dirty_area": -7,
    "flies_present": -5,
    "no_gloves": -8,
})

# Question order is the order tags are emitted in.
CHECKLIST_QUESTIONS: tuple[tuple[str, str, str], ...] = (
    ("vendor_wears_gloves", "gloves_used", "no_gloves"),
    ("filtered_water_visible", "clean_water", "no_water_filter"),
    ("clean_utensils", "clean_utensils", "dirty_utensils"),
    ("covered_food_storage", "covered_food", "uncovered_food"),
)


def is_known_tag(tag: str) -> bool:
    return tag in POSITIVE_TAGS or tag in NEGATIVE_TAGS


def tag_catalog() -> dict[str, Any]:
    """Return a JSON-ready copy of both catalogs and the checklist."""
    return {
        "positive": dict(POSITIVE_TAGS),
        "negative": dict(NEGATIVE_TAGS),
        "checklist": [
            {"question": q, "yes_tag": yes, "no_tag": no}
            for q, yes, no in CHECKLIST_QUESTIONS
        ],
    }
