"""Tests for menu text normalization."""

import re

import pytest

from nutrition_lookup.services.normalizer import (
    FoodTextNormalizer,
    clean_food_name,
    ingredient_cache_key,
    search_keywords,
    token_set,
    tokenize,
)


def test_price_and_noise_are_removed() -> None:
    terms = FoodTextNormalizer().extract_core_food_terms(
        "$8.99 grilled chicken with rice"
    )

    assert terms.primary_food == "chicken"
    assert terms.modifiers == ("grilled",)
    assert "rice" in terms.accompaniments
    assert "$8.99" in terms.removed_text
    assert "with" in terms.removed_text
    assert terms.cleaned_text == "grilled chicken rice"
    assert terms.confidence == pytest.approx(0.8)


@pytest.mark.parametrize(
    "text",
    [
        "12 oz Ribeye Steak $24.99",
        "Combo #3 burger 2 for 10",
        "Wings 6pc 9.50",
        "1/2 lb burger",
    ],
)
def test_no_digits_survive_cleaning(text: str) -> None:
    terms = FoodTextNormalizer().extract_core_food_terms(text)

    assert not re.search(r"\d", terms.cleaned_text)
    assert not re.search(r"\d", terms.primary_food)


def test_weight_units_are_removed_with_their_numbers() -> None:
    terms = FoodTextNormalizer().extract_core_food_terms("12 oz Ribeye Steak $24.99")

    assert terms.cleaned_text == "ribeye steak"
    assert terms.primary_food == "ribeye"
    assert terms.confidence == pytest.approx(0.3)


def test_protein_beats_generic_food() -> None:
    terms = FoodTextNormalizer().extract_core_food_terms("Chicken Caesar Salad")

    assert terms.primary_food == "chicken"


def test_multi_word_generic_term_is_preferred() -> None:
    terms = FoodTextNormalizer().extract_core_food_terms("Goat Cheese Salad")

    assert terms.primary_food == "goat cheese"


def test_accompaniments_exclude_primary_food() -> None:
    terms = FoodTextNormalizer().extract_core_food_terms(
        "Burger with fries and ketchup"
    )

    assert terms.primary_food == "burger"
    assert terms.accompaniments == frozenset({"fries", "ketchup"})


def test_terms_match_whole_words_only() -> None:
    terms = FoodTextNormalizer().extract_core_food_terms("Hotdog Special")

    assert "hot" not in terms.removed_text
    assert terms.primary_food == "hotdog"


def test_compound_food_adds_confidence() -> None:
    normalizer = FoodTextNormalizer(protein_terms=(), generic_food_terms=())

    terms = normalizer.extract_core_food_terms("Fish Tacos")

    assert terms.primary_food == "fish tacos"
    assert terms.confidence == pytest.approx(0.5)


def test_blank_text_has_zero_confidence() -> None:
    terms = FoodTextNormalizer().extract_core_food_terms("   ")

    assert terms.primary_food == ""
    assert terms.confidence == 0.0


def test_only_noise_falls_back_to_original_text() -> None:
    terms = FoodTextNormalizer().extract_core_food_terms("With And")

    assert terms.cleaned_text == ""
    assert terms.primary_food == "With And"


def test_clean_food_name_strips_ids_and_symbols() -> None:
    assert clean_food_name("Chicken_Breast_123") == "chicken breast"
    assert clean_food_name("Rice, white, long-grain") == "rice white longgrain"


def test_tokenize_drops_stop_words_and_short_tokens() -> None:
    assert tokenize("chicken with rice a la carte") == ["chicken", "rice", "la", "carte"]
    assert token_set("The Chicken, cooked") == frozenset({"chicken"})


def test_ingredient_cache_key_is_stable() -> None:
    assert ingredient_cache_key("Goat Cheese") == "goat_cheese"
    assert ingredient_cache_key("chef's choice") == "chefs_choice"


def test_search_keywords_order() -> None:
    terms = FoodTextNormalizer().extract_core_food_terms(
        "Grilled chicken with rice and beans"
    )

    assert search_keywords(terms) == ["chicken", "grilled", "beans", "rice"]
