"""Menu text normalization and tokenization."""

import logging
import re
from dataclasses import dataclass
from functools import lru_cache

from nutrition_lookup.domain import vocabulary as vocab
from nutrition_lookup.domain.text import CoreFoodTerms

_logger = logging.getLogger(__name__)

_WHITESPACE = re.compile(r"\s+")
_WORD = re.compile(r"[^\W\d_][^\W\d_']*(?:'[^\W\d_]+)?")
_ID_SUFFIX = re.compile(r"_\d+$")
_SEPARATORS = re.compile(r"[_,]")
_NON_ALPHA = re.compile(r"[^a-z\s]")
_NON_KEY = re.compile(r"[^a-zA-Z0-9_]")

_KNOWN_FOOD = "known"
_COMPOUND = "compound"
_FALLBACK = "fallback"


@lru_cache(maxsize=512)
def _term_pattern(term: str) -> re.Pattern[str]:
    """Whole-word pattern for a vocabulary term (terms may contain spaces or /)."""
    return re.compile(rf"(?<!\w){re.escape(term)}(?!\w)")


def _squash(text: str) -> str:
    return _WHITESPACE.sub(" ", text).strip()


def _contains(text: str, term: str) -> bool:
    return _term_pattern(term).search(text) is not None


@dataclass
class FoodTextNormalizer:
    """Extracts the core food terms from a noisy menu line.

    Vocabulary tables default to the shared static tables and may be replaced
    per instance, which keeps the parsing rules testable in isolation.
    """

    protein_terms: tuple[str, ...] = vocab.PROTEIN_TERMS
    generic_food_terms: tuple[str, ...] = vocab.GENERIC_FOOD_TERMS
    compound_foods: tuple[str, ...] = vocab.COMPOUND_FOODS
    cooking_methods: tuple[str, ...] = vocab.COOKING_METHODS
    noise_words: tuple[str, ...] = vocab.NOISE_WORDS
    accompaniment_terms: tuple[str, ...] = vocab.ACCOMPANIMENT_TERMS
    number_patterns: tuple[str, ...] = (
        *vocab.WEIGHT_PATTERNS,
        *vocab.PRICE_PATTERNS,
    )
    stop_words: frozenset[str] = vocab.STOP_WORDS
    debug: bool = False

    def __post_init__(self) -> None:
        self._compiled_numbers = [
            re.compile(pattern, re.IGNORECASE) for pattern in self.number_patterns
        ]
        self._known_foods = frozenset(self.protein_terms) | frozenset(
            self.generic_food_terms
        )

    def extract_core_food_terms(self, text: str) -> CoreFoodTerms:
        """Parse a menu line into primary food, modifiers and accompaniments."""
        original = text.strip()
        removed: list[str] = []

        working = self._remove_numbers(original.lower(), removed)
        working = self._remove_noise(working, removed)
        cleaned_text = working
        working, modifiers = self._extract_modifiers(working)
        primary_food, origin = self._identify_primary_food(working, original)
        accompaniments = frozenset(
            term
            for term in self.accompaniment_terms
            if term != primary_food and _contains(working, term)
        )
        confidence = self._parsing_confidence(primary_food, origin, modifiers)

        terms = CoreFoodTerms(
            primary_food=primary_food,
            modifiers=tuple(modifiers),
            accompaniments=accompaniments,
            removed_text=tuple(removed),
            confidence=confidence,
            cleaned_text=cleaned_text,
        )
        if self.debug:
            _logger.info(
                "Parsed food text: text=%r primary=%r modifiers=%s confidence=%.2f",
                text,
                primary_food,
                list(modifiers),
                confidence,
            )
        return terms

    def _remove_numbers(self, text: str, removed: list[str]) -> str:
        for pattern in self._compiled_numbers:
            removed.extend(match.group().strip() for match in pattern.finditer(text))
            text = pattern.sub(" ", text)
        return _squash(text)

    def _remove_noise(self, text: str, removed: list[str]) -> str:
        for word in self.noise_words:
            pattern = _term_pattern(word)
            if pattern.search(text):
                removed.append(word)
                text = pattern.sub(" ", text)
        return _squash(text)

    def _extract_modifiers(self, text: str) -> tuple[str, list[str]]:
        modifiers: list[str] = []
        for method in self.cooking_methods:
            pattern = _term_pattern(method)
            if pattern.search(text):
                modifiers.append(method)
                text = pattern.sub(" ", text)
        return _squash(text), modifiers

    def _identify_primary_food(self, text: str, original: str) -> tuple[str, str]:
        for term in self.protein_terms:
            if _contains(text, term):
                return term, _KNOWN_FOOD
        for term in self.generic_food_terms:
            if _contains(text, term):
                return term, _KNOWN_FOOD
        for phrase in self.compound_foods:
            if _contains(text, phrase):
                return phrase, _COMPOUND

        words = _WORD.findall(text)
        for word in words:
            if (
                len(word) > 2
                and word not in self.noise_words
                and word not in self.cooking_methods
            ):
                return word, _FALLBACK
        survivors = [word for word in words if word not in self.stop_words]
        if survivors:
            return max(survivors, key=len), _FALLBACK
        return original, _FALLBACK

    def _parsing_confidence(
        self, primary_food: str, origin: str, modifiers: list[str]
    ) -> float:
        confidence = 0.0
        if primary_food in self._known_foods:
            confidence += 0.6
        elif len(primary_food) > 2:
            confidence += 0.3
        if modifiers:
            confidence += 0.2
        if origin == _COMPOUND:
            confidence += 0.2
        if len(primary_food) <= 2:
            confidence -= 0.3
        return max(0.0, min(1.0, confidence))


def clean_food_name(name: str) -> str:
    """Lowercase a catalog or menu name and strip ids, separators and symbols."""
    cleaned = _ID_SUFFIX.sub("", name.lower())
    cleaned = _SEPARATORS.sub(" ", cleaned)
    cleaned = _NON_ALPHA.sub("", cleaned)
    return _squash(cleaned)


def tokenize(
    text: str, stop_words: frozenset[str] = vocab.STOP_WORDS
) -> list[str]:
    """Split cleaned text into tokens, dropping stop words and 1-letter tokens."""
    return [
        token
        for token in text.split()
        if token and token not in stop_words and len(token) >= 2
    ]


def token_set(name: str) -> frozenset[str]:
    """Clean and tokenize a name into the set used by the matcher."""
    return frozenset(tokenize(clean_food_name(name)))


def ingredient_cache_key(primary_food: str) -> str:
    """Create a stable cache key from a primary food term."""
    return _NON_KEY.sub("", primary_food.replace(" ", "_")).lower()


def search_keywords(terms: CoreFoodTerms) -> list[str]:
    """Primary food followed by modifiers and sorted accompaniments."""
    return [terms.primary_food, *terms.modifiers, *sorted(terms.accompaniments)]
