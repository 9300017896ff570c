"""Tiered fuzzy matching of food names against catalogs."""

import logging
from collections.abc import Callable, Iterable
from dataclasses import dataclass

from rapidfuzz.distance import Levenshtein

from nutrition_lookup.domain import vocabulary as vocab
from nutrition_lookup.domain.catalog import (
    Catalog,
    CatalogEntry,
    CatalogTier,
    MatchCandidate,
)
from nutrition_lookup.services.normalizer import clean_food_name, tokenize

_logger = logging.getLogger(__name__)

Strategy = Callable[[frozenset[str], CatalogEntry], float]


def build_entry(
    raw_key: str,
    name: str,
    tier: CatalogTier,
    source_id: str,
) -> CatalogEntry:
    """Preprocess a catalog row into a matcher entry."""
    cleaned = clean_food_name(name)
    return CatalogEntry(
        raw_key=raw_key,
        cleaned_name=cleaned,
        tokens=frozenset(tokenize(cleaned)),
        tier=tier,
        source_id=source_id,
        display_name=name,
    )


def build_catalog(
    rows: Iterable[tuple[str, str, CatalogTier]], source_id: str
) -> Catalog:
    """Build a catalog snapshot from (key, name, tier) rows."""
    return Catalog.from_entries(
        build_entry(raw_key, name, tier, source_id) for raw_key, name, tier in rows
    )


def _joined(tokens: Iterable[str]) -> str:
    return " ".join(sorted(tokens))


def exact_score(input_tokens: frozenset[str], entry: CatalogEntry) -> float:
    """1.0 for identical token sets, 0.9 when the input is a strict subset."""
    if input_tokens == entry.tokens:
        return 1.0
    if input_tokens < entry.tokens:
        return 0.9
    return 0.0


def substring_score(input_tokens: frozenset[str], entry: CatalogEntry) -> float:
    """0.8 for a joined-string substring hit, 0.6 for a long token overlap."""
    if _joined(input_tokens) in _joined(entry.tokens):
        return 0.8
    for input_token in input_tokens:
        if len(input_token) < 4:
            continue
        for entry_token in entry.tokens:
            if input_token in entry_token or entry_token in input_token:
                return 0.6
    return 0.0


def token_overlap_score(input_tokens: frozenset[str], entry: CatalogEntry) -> float:
    """Jaccard similarity boosted by shared brand, protein and preparation terms."""
    union = input_tokens | entry.tokens
    if not union:
        return 0.0
    shared = input_tokens & entry.tokens
    score = len(shared) / len(union)
    if shared & vocab.BRAND_CATEGORY_TOKENS:
        score += 0.3
    if shared & vocab.MATCH_PROTEIN_TOKENS:
        score += 0.2
    if shared & vocab.PREPARATION_TOKENS:
        score += 0.1
    return min(score, 1.0)


def edit_distance_score(input_tokens: frozenset[str], entry: CatalogEntry) -> float:
    """Normalized Levenshtein similarity of the sorted, joined token strings."""
    left = _joined(input_tokens)
    right = _joined(entry.tokens)
    longest = max(len(left), len(right))
    if longest == 0:
        return 1.0
    return 1.0 - Levenshtein.distance(left, right) / longest


STRATEGIES: tuple[tuple[str, Strategy], ...] = (
    ("exact", exact_score),
    ("substring", substring_score),
    ("token_overlap", token_overlap_score),
    ("edit_distance", edit_distance_score),
)


@dataclass(frozen=True)
class MatcherStatistics:
    """Entry counts per catalog tier."""

    total_entries: int
    priority_entries: int
    generic_entries: int

    @property
    def priority_percentage(self) -> float:
        """Share of priority entries in percent."""
        if not self.total_entries:
            return 0.0
        return self.priority_entries / self.total_entries * 100.0


@dataclass(frozen=True)
class FoodMatcher:
    """Runs the ordered matching strategies tier by tier.

    A hit in a higher tier always wins over any lower-tier hit, regardless of
    score. Within a tier a strategy only replaces the running best if it
    scores strictly higher and clears ``min_score``; once the running best
    exceeds ``good_enough_score`` the remaining strategies are skipped.
    """

    min_score: float = 0.3
    good_enough_score: float = 0.8
    strategies: tuple[tuple[str, Strategy], ...] = STRATEGIES
    debug: bool = False

    def find_best_match(
        self, input_tokens: frozenset[str], catalog: Catalog
    ) -> MatchCandidate | None:
        """Return the best candidate from the highest tier that has one."""
        if not input_tokens:
            return None
        for tier, entries in catalog.tiers:
            best = self._best_in_tier(input_tokens, entries)
            if best is not None:
                if self.debug:
                    _logger.info(
                        "Matched %s tier: key=%s score=%.3f strategy=%s",
                        tier.name.lower(),
                        best.entry.raw_key,
                        best.score,
                        best.strategy_name,
                    )
                return best
        if self.debug:
            _logger.info("No match above threshold %.2f", self.min_score)
        return None

    def find_top_matches(
        self, input_tokens: frozenset[str], catalog: Catalog, limit: int = 10
    ) -> list[MatchCandidate]:
        """Rank all entries by token overlap, nudging priority entries up."""
        scored = [
            MatchCandidate(
                entry=entry,
                score=token_overlap_score(input_tokens, entry),
                strategy_name="token_overlap",
            )
            for entry in catalog.entries()
        ]
        ranked = sorted(
            (candidate for candidate in scored if candidate.score >= self.min_score),
            key=lambda candidate: candidate.score
            + (0.1 if candidate.entry.tier is CatalogTier.PRIORITY else 0.0),
            reverse=True,
        )
        return ranked[:limit]

    @staticmethod
    def statistics(catalog: Catalog) -> MatcherStatistics:
        """Return entry counts for a catalog."""
        counts = {tier: len(entries) for tier, entries in catalog.tiers}
        return MatcherStatistics(
            total_entries=len(catalog),
            priority_entries=counts.get(CatalogTier.PRIORITY, 0),
            generic_entries=counts.get(CatalogTier.GENERIC, 0),
        )

    def _best_in_tier(
        self, input_tokens: frozenset[str], entries: tuple[CatalogEntry, ...]
    ) -> MatchCandidate | None:
        best: MatchCandidate | None = None
        best_score = 0.0
        for name, strategy in self.strategies:
            for entry in entries:
                score = strategy(input_tokens, entry)
                if score > best_score and score >= self.min_score:
                    best_score = score
                    best = MatchCandidate(entry=entry, score=score, strategy_name=name)
            if best_score > self.good_enough_score:
                break
        return best
