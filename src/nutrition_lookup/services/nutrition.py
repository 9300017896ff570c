"""Nutrition lookup across an ordered chain of sources."""

import logging
from collections.abc import Sequence
from dataclasses import dataclass, field, replace
from typing import Protocol

from nutrition_lookup.domain.catalog import (
    Catalog,
    MatchCandidate,
    QueryKind,
    SearchQuery,
    SourceCandidate,
)
from nutrition_lookup.domain.errors import (
    LookupFailure,
    LookupFailureKind,
    SourceRateLimitedError,
    SourceUnavailableError,
)
from nutrition_lookup.domain.nutrition import (
    NutritionEstimate,
    ScoredResult,
    has_calories,
)
from nutrition_lookup.domain.text import CoreFoodTerms
from nutrition_lookup.domain.vocabulary import infer_food_category
from nutrition_lookup.services.cache import ResultCache
from nutrition_lookup.services.confidence import ConfidenceScorer
from nutrition_lookup.services.matcher import FoodMatcher, build_entry
from nutrition_lookup.services.normalizer import (
    FoodTextNormalizer,
    ingredient_cache_key,
    token_set,
)
from nutrition_lookup.services.rate_limit import RateLimiter

_logger = logging.getLogger(__name__)


class NutritionSource(Protocol):
    """Search contract every nutrition source satisfies."""

    source_id: str
    max_confidence: float | None
    aggregate_limit: int
    supports_category_search: bool
    rate_limiter: RateLimiter

    async def search(self, query: SearchQuery) -> list[SourceCandidate]:
        """Return candidates for a query, best first."""

    async def fetch_details(self, structured_id: str) -> dict[str, float | None] | None:
        """Return full nutrient fields for a candidate, if supported."""


def build_search_queries(
    terms: CoreFoodTerms, include_category: bool = True
) -> list[SearchQuery]:
    """Primary food, then modifier + primary food, then the inferred category."""
    queries = [SearchQuery(terms.primary_food)]
    if terms.modifiers:
        queries.append(SearchQuery(f"{terms.modifiers[0]} {terms.primary_food}"))
    if include_category:
        category = infer_food_category(terms.primary_food)
        if category:
            queries.append(SearchQuery(category, QueryKind.CATEGORY))
    unique: list[SearchQuery] = []
    for query in queries:
        if query not in unique:
            unique.append(query)
    return unique


@dataclass(frozen=True)
class _QueryOutcome:
    match: MatchCandidate
    catalog: Catalog
    candidates: dict[str, SourceCandidate]


@dataclass
class NutritionLookupService:
    """Resolves menu item names to nutrition, trying sources in priority order.

    Every outcome, including invalid input and source failures, is returned
    as a ``ScoredResult``; callers only branch on ``is_available``.
    """

    sources: Sequence[NutritionSource]
    cache: ResultCache
    normalizer: FoodTextNormalizer = field(default_factory=FoodTextNormalizer)
    matcher: FoodMatcher = field(default_factory=FoodMatcher)
    scorer: ConfidenceScorer = field(default_factory=ConfidenceScorer)
    query_quality_threshold: float = 0.7
    debug: bool = False

    async def lookup(self, raw_name: str) -> ScoredResult:
        """Resolve a raw menu item name to the first accepted source result."""
        if not raw_name.strip():
            self._record(LookupFailure(LookupFailureKind.INVALID_INPUT, None, raw_name))
            return ScoredResult.unavailable(raw_name)

        terms = self.normalizer.extract_core_food_terms(raw_name)
        input_tokens = token_set(terms.cleaned_text) or token_set(terms.primary_food)
        if not input_tokens:
            self._record(LookupFailure(LookupFailureKind.INVALID_INPUT, None, raw_name))
            return ScoredResult.unavailable(raw_name)

        ingredient_key = ingredient_cache_key(terms.primary_food)
        for source in self.sources:
            try:
                result = await self._try_source(
                    source, raw_name, terms, input_tokens, ingredient_key
                )
            except SourceRateLimitedError:
                self._record(
                    LookupFailure(
                        LookupFailureKind.RATE_LIMITED, source.source_id, raw_name
                    )
                )
                continue
            except SourceUnavailableError as exc:
                self._record(
                    LookupFailure(
                        LookupFailureKind.TRANSIENT_FAILURE, source.source_id, raw_name
                    ),
                    detail=exc.detail,
                )
                continue
            if result is not None:
                return result
            self._record(
                LookupFailure(LookupFailureKind.DECLINED, source.source_id, raw_name)
            )
        return ScoredResult.unavailable(raw_name)

    async def lookup_many(self, raw_names: Sequence[str]) -> list[ScoredResult]:
        """Resolve several names sequentially, preserving their order."""
        return [await self.lookup(name) for name in raw_names]

    async def _try_source(
        self,
        source: NutritionSource,
        raw_name: str,
        terms: CoreFoodTerms,
        input_tokens: frozenset[str],
        ingredient_key: str,
    ) -> ScoredResult | None:
        cache_key = f"{source.source_id}:{ingredient_key}"
        cached = self.cache.get(cache_key)
        if cached is not None and self.scorer.is_acceptable(cached.confidence):
            if self.debug:
                _logger.info(
                    "Nutrition cache hit: source=%s key=%s confidence=%.2f",
                    source.source_id,
                    cache_key,
                    cached.confidence,
                )
            return replace(cached, original_input=raw_name)

        best = await self._search(source, terms, input_tokens)
        if best is None:
            return None

        winner = best.candidates[best.match.entry.raw_key]
        nutrients = dict(winner.nutrients)
        if not has_calories(nutrients):
            details = await source.fetch_details(winner.structured_id)
            if details:
                nutrients = details
        if not has_calories(nutrients):
            return None

        samples = [nutrients]
        if source.aggregate_limit > 1:
            for other in self.matcher.find_top_matches(
                input_tokens, best.catalog, limit=source.aggregate_limit + 1
            ):
                if len(samples) >= source.aggregate_limit:
                    break
                if other.entry.raw_key == best.match.entry.raw_key:
                    continue
                fields = best.candidates[other.entry.raw_key].nutrients
                if has_calories(fields):
                    samples.append(fields)

        nutrition = NutritionEstimate.from_samples(samples)
        confidence = self.scorer.score(
            best.match.score,
            nutrition.completeness_score,
            terms.confidence,
            cap=source.max_confidence,
        )
        if self.debug:
            _logger.info(
                "Nutrition candidate: source=%s key=%s match=%.2f confidence=%.2f",
                source.source_id,
                best.match.entry.raw_key,
                best.match.score,
                confidence,
            )
        if not self.scorer.is_acceptable(confidence):
            return None

        result = ScoredResult(
            original_input=raw_name,
            cleaned_query=terms.primary_food,
            matched_key=best.match.entry.raw_key,
            matched_name=winner.name,
            source_id=source.source_id,
            nutrition=nutrition,
            match_score=best.match.score,
            confidence=confidence,
            is_available=True,
        )
        if self.scorer.is_cacheable(confidence):
            self.cache.put(cache_key, result)
        return result

    async def _search(
        self,
        source: NutritionSource,
        terms: CoreFoodTerms,
        input_tokens: frozenset[str],
    ) -> _QueryOutcome | None:
        best: _QueryOutcome | None = None
        queries = build_search_queries(terms, source.supports_category_search)
        for query in queries:
            await source.rate_limiter.wait()
            candidates = await source.search(query)
            if self.debug:
                _logger.info(
                    "Nutrition search: source=%s query=%r kind=%s results=%s",
                    source.source_id,
                    query.text,
                    query.kind,
                    len(candidates),
                )
            if not candidates:
                continue
            by_key: dict[str, SourceCandidate] = {}
            for candidate in candidates:
                by_key.setdefault(candidate.structured_id or candidate.name, candidate)
            catalog = Catalog.from_entries(
                build_entry(key, candidate.name, candidate.tier, source.source_id)
                for key, candidate in by_key.items()
            )
            match = self.matcher.find_best_match(input_tokens, catalog)
            if match is None:
                continue
            if best is None or match.score > best.match.score:
                best = _QueryOutcome(match=match, catalog=catalog, candidates=by_key)
            if match.score > self.query_quality_threshold:
                break
        return best

    def _record(self, failure: LookupFailure, detail: str = "") -> None:
        """Log a failed or declined lookup step."""
        if failure.kind in {
            LookupFailureKind.TRANSIENT_FAILURE,
            LookupFailureKind.RATE_LIMITED,
        }:
            _logger.warning(
                "Nutrition lookup %s: source=%s input=%r detail=%s",
                failure.kind,
                failure.source_id,
                failure.raw_input,
                detail,
            )
        elif self.debug:
            _logger.info(
                "Nutrition lookup %s: source=%s input=%r",
                failure.kind,
                failure.source_id,
                failure.raw_input,
            )
