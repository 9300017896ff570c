"""Tests for tiered food matching."""

import pytest

from nutrition_lookup.domain import vocabulary as vocab
from nutrition_lookup.domain.catalog import CatalogEntry, CatalogTier
from nutrition_lookup.services.matcher import (
    FoodMatcher,
    build_catalog,
    build_entry,
    edit_distance_score,
    exact_score,
    substring_score,
    token_overlap_score,
)
from nutrition_lookup.services.normalizer import token_set


def _entry(name: str, tier: CatalogTier = CatalogTier.GENERIC) -> CatalogEntry:
    return build_entry(name.lower().replace(" ", "_"), name, tier, "test")


def test_exact_and_subset_scores() -> None:
    entry = _entry("Chicken Breast")

    assert exact_score(frozenset({"chicken", "breast"}), entry) == 1.0
    assert exact_score(frozenset({"chicken"}), entry) == 0.9
    assert exact_score(frozenset({"chicken", "wings"}), entry) == 0.0


def test_substring_scores() -> None:
    assert substring_score(frozenset({"burger"}), _entry("Burgers")) == 0.8
    assert substring_score(frozenset({"pepperoni", "xl"}), _entry("Pepperonis")) == 0.6
    assert substring_score(frozenset({"tea"}), _entry("Lasagna")) == 0.0


def test_token_overlap_applies_boosts() -> None:
    entry = _entry("Chicken, broilers or fryers, breast, meat only, cooked, grilled")

    score = token_overlap_score(frozenset({"grilled", "chicken", "rice"}), entry)

    assert score == pytest.approx(0.85)


def test_token_overlap_is_capped() -> None:
    entry = _entry("Grilled Chicken")

    assert token_overlap_score(frozenset({"grilled", "chicken"}), entry) == 1.0


def test_edit_distance_score() -> None:
    assert edit_distance_score(frozenset({"burger"}), _entry("Burgers")) == pytest.approx(
        1 - 1 / 7
    )
    assert edit_distance_score(frozenset(), _entry("!!!")) == 1.0


def test_priority_tier_beats_better_generic_match() -> None:
    catalog = build_catalog(
        [
            ("burger", "Burger", CatalogTier.GENERIC),
            ("R9000", "Burgers", CatalogTier.PRIORITY),
        ],
        source_id="test",
    )

    match = FoodMatcher().find_best_match(frozenset({"burger"}), catalog)

    assert match is not None
    assert match.entry.raw_key == "R9000"
    assert match.score < 1.0
    assert match.strategy_name == "edit_distance"


def test_generic_tier_used_when_priority_has_no_match() -> None:
    catalog = build_catalog(
        [
            ("R0056", "McDonalds", CatalogTier.PRIORITY),
            ("salad", "Garden Salad", CatalogTier.GENERIC),
        ],
        source_id="test",
    )

    match = FoodMatcher().find_best_match(frozenset({"salad"}), catalog)

    assert match is not None
    assert match.entry.raw_key == "salad"
    assert match.entry.tier is CatalogTier.GENERIC


def test_exact_match_skips_remaining_strategies() -> None:
    def fail(_tokens: frozenset[str], _entry: CatalogEntry) -> float:
        raise AssertionError("strategy should not run")

    matcher = FoodMatcher(strategies=(("exact", exact_score), ("fail", fail)))
    catalog = build_catalog(
        [("R0056", "McDonalds", CatalogTier.PRIORITY)], source_id="test"
    )

    match = matcher.find_best_match(token_set("mcdonalds"), catalog)

    assert match is not None
    assert match.score == 1.0
    assert match.strategy_name == "exact"


def test_first_entry_wins_ties() -> None:
    catalog = build_catalog(
        [
            ("first", "Chicken Wrap", CatalogTier.GENERIC),
            ("second", "Chicken Bowl", CatalogTier.GENERIC),
        ],
        source_id="test",
    )

    match = FoodMatcher().find_best_match(frozenset({"chicken"}), catalog)

    assert match is not None
    assert match.entry.raw_key == "first"


def test_no_match_below_threshold() -> None:
    catalog = build_catalog(
        [("tea", "Iced Tea", CatalogTier.GENERIC)], source_id="test"
    )

    assert FoodMatcher().find_best_match(frozenset({"lasagna"}), catalog) is None
    assert FoodMatcher().find_best_match(frozenset(), catalog) is None


def test_find_top_matches_boosts_priority_entries() -> None:
    catalog = build_catalog(
        [
            ("generic", "Garden Salad Large Bowl Extra", CatalogTier.GENERIC),
            ("R0064", "Panera Garden Salad Large Bowl Extra", CatalogTier.PRIORITY),
        ],
        source_id="test",
    )

    matches = FoodMatcher().find_top_matches(
        frozenset({"garden", "salad"}), catalog, limit=2
    )

    assert [match.entry.raw_key for match in matches] == ["R0064", "generic"]
    assert matches[0].score < matches[1].score


def test_statistics_counts_tiers() -> None:
    catalog = build_catalog(
        [
            ("R0056", "McDonalds", CatalogTier.PRIORITY),
            ("salad", "Salad", CatalogTier.GENERIC),
            ("soup", "Soup", CatalogTier.GENERIC),
            ("bread", "Bread", CatalogTier.GENERIC),
        ],
        source_id="test",
    )

    stats = FoodMatcher.statistics(catalog)

    assert stats.total_entries == 4
    assert stats.priority_entries == 1
    assert stats.priority_percentage == 25.0


def test_preparation_boost_applies_to_tokenized_terms() -> None:
    assert not vocab.PREPARATION_TOKENS & vocab.STOP_WORDS
    entry = _entry("Baked Potato Wedges")
    boosted = token_overlap_score(frozenset({"baked", "wedges"}), entry)
    plain = token_overlap_score(frozenset({"potato", "wedges"}), entry)
    assert boosted == pytest.approx(plain + 0.1)
