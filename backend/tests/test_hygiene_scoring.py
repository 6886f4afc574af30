from __future__ import annotations

import copy
import random

import pytest

from backend.hygiene.scoring import (
    calculate_aggregated_score,
    calculate_tag_score,
    responses_to_tags,
)
from backend.hygiene.tags import NEGATIVE_TAGS, POSITIVE_TAGS, is_known_tag, tag_catalog

ALL_TAGS = list(POSITIVE_TAGS) + list(NEGATIVE_TAGS) + ["unknown_tag", "hairy_counter"]

EXAMPLE_REVIEWS = [
    {"hygiene_score": 5, "hygiene_tags": ["gloves_used", "clean_water", "fssai_visible"]},
    {"hygiene_score": 4, "hygiene_tags": ["gloves_used", "clean_utensils"]},
]


def _random_reviews(rng: random.Random, max_reviews: int = 8) -> list[dict]:
    reviews = []
    for _ in range(rng.randint(1, max_reviews)):
        tags = rng.sample(ALL_TAGS, rng.randint(0, len(ALL_TAGS)))
        # Duplicate tags are allowed in stored rows
        tags += rng.choices(ALL_TAGS, k=rng.randint(0, 3))
        reviews.append({"hygiene_score": rng.randint(1, 5), "hygiene_tags": tags})
    return reviews


# ── Tag catalogs ─────────────────────────────────────────────────────────


def test_catalog_sizes_and_ranges():
    assert len(POSITIVE_TAGS) == 10
    assert len(NEGATIVE_TAGS) == 6
    assert all(5 <= v <= 15 for v in POSITIVE_TAGS.values())
    assert all(-10 <= v <= -5 for v in NEGATIVE_TAGS.values())


def test_catalogs_are_disjoint():
    assert not set(POSITIVE_TAGS) & set(NEGATIVE_TAGS)


def test_is_known_tag():
    assert is_known_tag("fssai_visible")
    assert is_known_tag("flies_present")
    assert not is_known_tag("unknown_tag")


def test_catalogs_are_read_only():
    with pytest.raises(TypeError):
        POSITIVE_TAGS["gloves_used"] = 100
    with pytest.raises(TypeError):
        NEGATIVE_TAGS["flies_present"] = 0


def test_tag_catalog_snapshot_is_a_copy():
    catalog = tag_catalog()
    catalog["positive"]["gloves_used"] = 99
    assert POSITIVE_TAGS["gloves_used"] == 10
    assert [c["question"] for c in catalog["checklist"]] == [
        "vendor_wears_gloves",
        "filtered_water_visible",
        "clean_utensils",
        "covered_food_storage",
    ]


# ── calculate_tag_score ──────────────────────────────────────────────────


def test_tag_score_empty_and_none():
    assert calculate_tag_score([]) == 0
    assert calculate_tag_score(None) == 0


def test_tag_score_unknown_tag_keeps_base():
    assert calculate_tag_score(["unknown_tag"]) == 50


def test_tag_score_adds_positive_and_negative_values():
    assert calculate_tag_score(["gloves_used", "clean_water", "fssai_visible"]) == 85
    assert calculate_tag_score(["gloves_used", "no_water_filter"]) == 52
    assert calculate_tag_score(("flies_present",)) == 45


def test_tag_score_clamped_to_bounds():
    assert calculate_tag_score(list(POSITIVE_TAGS)) == 100
    assert calculate_tag_score(["dirty_utensils"] * 6) == 0


def test_tag_score_always_in_range():
    rng = random.Random(7)
    for _ in range(500):
        tags = rng.choices(ALL_TAGS, k=rng.randint(0, 20))
        assert 0 <= calculate_tag_score(tags) <= 100


# ── calculate_aggregated_score ───────────────────────────────────────────


def test_aggregate_no_reviews():
    for empty in ([], None):
        result = calculate_aggregated_score(empty)
        assert result["score"] == 0
        assert result["breakdown"] == {"total_reviews": 0}


def test_aggregate_example_reviews():
    result = calculate_aggregated_score(EXAMPLE_REVIEWS)
    assert result["score"] > 4
    assert result["score"] == 4.3
    assert result["breakdown"] == {
        "total_reviews": 2,
        "avg_user_score": 4.5,
        "avg_tag_score": 77,
        "positive_tag_count": 5,
        "negative_tag_count": 0,
    }


def test_aggregate_missing_fields_contribute_zero():
    result = calculate_aggregated_score([{"hygiene_score": 4}])
    assert result["score"] == 2.8
    assert result["breakdown"]["avg_tag_score"] == 0
    assert result["breakdown"]["positive_tag_count"] == 0

    result = calculate_aggregated_score([{"hygiene_tags": ["gloves_used"]}])
    assert result["score"] == 0.9
    assert result["breakdown"]["avg_user_score"] == 0


def test_aggregate_counts_each_tag_occurrence():
    result = calculate_aggregated_score([
        {"hygiene_score": 3, "hygiene_tags": ["gloves_used", "no_gloves", "mystery"]},
        {"hygiene_score": 3, "hygiene_tags": ["gloves_used", "gloves_used"]},
    ])
    assert result["breakdown"]["positive_tag_count"] == 3
    assert result["breakdown"]["negative_tag_count"] == 1


def test_aggregate_rounds_half_up():
    # Tag scores 60 and 65 average to 62.5
    result = calculate_aggregated_score([
        {"hygiene_score": 3, "hygiene_tags": ["gloves_used"]},
        {"hygiene_score": 3, "hygiene_tags": ["fssai_visible"]},
    ])
    assert result["breakdown"]["avg_tag_score"] == 63

    result = calculate_aggregated_score([{"hygiene_score": s} for s in (4, 4, 4, 5)])
    assert result["breakdown"]["avg_user_score"] == 4.3


def test_aggregate_score_bounded():
    rng = random.Random(42)
    for _ in range(500):
        result = calculate_aggregated_score(_random_reviews(rng))
        assert 0 <= result["score"] <= 5


def test_aggregate_is_idempotent_and_does_not_mutate():
    rng = random.Random(3)
    reviews = _random_reviews(rng)
    snapshot = copy.deepcopy(reviews)
    first = calculate_aggregated_score(reviews)
    second = calculate_aggregated_score(reviews)
    assert first == second
    assert reviews == snapshot


def test_adding_top_review_never_lowers_user_average():
    rng = random.Random(11)
    positives = list(POSITIVE_TAGS)
    for _ in range(200):
        reviews = _random_reviews(rng)
        before = calculate_aggregated_score(reviews)["breakdown"]["avg_user_score"]
        extra = {
            "hygiene_score": 5,
            "hygiene_tags": rng.sample(positives, rng.randint(1, len(positives))),
        }
        after = calculate_aggregated_score(reviews + [extra])["breakdown"]["avg_user_score"]
        assert after >= before


# ── responses_to_tags ────────────────────────────────────────────────────


def test_responses_to_tags_example():
    tags = responses_to_tags({
        "vendor_wears_gloves": True,
        "filtered_water_visible": False,
        "clean_utensils": None,
        "covered_food_storage": True,
    })
    assert tags == ["gloves_used", "no_water_filter", "covered_food"]


def test_responses_to_tags_fixed_order():
    answers = {
        "covered_food_storage": False,
        "clean_utensils": False,
        "filtered_water_visible": False,
        "vendor_wears_gloves": False,
    }
    assert responses_to_tags(answers) == [
        "no_gloves",
        "no_water_filter",
        "dirty_utensils",
        "uncovered_food",
    ]


@pytest.mark.parametrize("responses", [None, {}, {"vendor_wears_gloves": 1, "clean_utensils": "yes"}])
def test_responses_to_tags_ignores_non_booleans(responses):
    assert responses_to_tags(responses) == []


def test_derived_tags_are_all_in_catalog():
    answers = {q: v for q, v in zip(
        ("vendor_wears_gloves", "filtered_water_visible", "clean_utensils", "covered_food_storage"),
        (True, True, False, False),
    )}
    for tag in responses_to_tags(answers):
        assert tag in POSITIVE_TAGS or tag in NEGATIVE_TAGS
