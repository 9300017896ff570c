"""Shared test fixtures."""

from collections.abc import Mapping
from dataclasses import dataclass, field
from datetime import UTC, datetime, timedelta

import pytest

from nutrition_lookup.adapters.overpass_client import RestaurantFetcher
from nutrition_lookup.config import Settings
from nutrition_lookup.containers import AppContainer
from nutrition_lookup.domain.catalog import CatalogTier, SearchQuery, SourceCandidate
from nutrition_lookup.domain.geo import GeoPoint, Restaurant
from nutrition_lookup.domain.nutrition import CachedResultRecord, ScoredResult
from nutrition_lookup.services.cache import ResultCache, ResultCacheRepository
from nutrition_lookup.services.geo_cache import GeoCache
from nutrition_lookup.services.nutrition import NutritionLookupService
from nutrition_lookup.services.rate_limit import RateLimiter
from nutrition_lookup.services.restaurants import RestaurantDiscoveryService
from nutrition_lookup.services.sources import (
    InMemoryNutritionTable,
    NutritionTableRow,
    StaticCatalogSource,
)

FULL_NUTRIENTS: dict[str, float | None] = {
    "calories": 250.0,
    "carbs": 30.0,
    "protein": 12.0,
    "fat": 9.0,
    "fiber": 1.5,
    "sugar": 6.0,
    "sodium": 480.0,
}


@dataclass
class MutableClock:
    """Wall clock that only moves when told to."""

    now: datetime = field(default_factory=lambda: datetime(2024, 1, 1, tzinfo=UTC))

    def __call__(self) -> datetime:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += timedelta(seconds=seconds)


@dataclass
class FakeSource:
    """Nutrition source returning canned candidates and recording queries."""

    source_id: str
    candidates: list[SourceCandidate] = field(default_factory=list)
    details: dict[str, dict[str, float | None]] = field(default_factory=dict)
    error: Exception | None = None
    max_confidence: float | None = None
    aggregate_limit: int = 1
    supports_category_search: bool = False
    rate_limiter: RateLimiter = field(default_factory=lambda: RateLimiter(0.0))
    queries: list[SearchQuery] = field(default_factory=list)

    async def search(self, query: SearchQuery) -> list[SourceCandidate]:
        self.queries.append(query)
        if self.error is not None:
            raise self.error
        return list(self.candidates)

    async def fetch_details(self, structured_id: str) -> dict[str, float | None] | None:
        return self.details.get(structured_id)


@dataclass
class FakeRestaurantFetcher(RestaurantFetcher):
    """Restaurant fetcher returning a fixed list."""

    restaurants: list[Restaurant] = field(default_factory=list)
    error: Exception | None = None
    calls: list[GeoPoint] = field(default_factory=list)

    async def fetch_restaurants(
        self, center: GeoPoint, radius_miles: float
    ) -> list[Restaurant]:
        self.calls.append(center)
        if self.error is not None:
            raise self.error
        return list(self.restaurants)


@dataclass
class FakeNutritionLookup:
    """Records names passed to ``lookup``."""

    names: list[str] = field(default_factory=list)

    async def lookup(self, raw_name: str) -> ScoredResult:
        self.names.append(raw_name)
        return ScoredResult.unavailable(raw_name)


@dataclass
class InMemoryResultCacheRepository(ResultCacheRepository):
    """In-memory result cache persistence for tests."""

    records: list[CachedResultRecord] = field(default_factory=list)
    saved: list[CachedResultRecord] | None = None

    def load_records(self) -> list[CachedResultRecord]:
        return list(self.records)

    def save_records(self, records: list[CachedResultRecord]) -> None:
        self.saved = list(records)


def make_candidate(
    name: str,
    structured_id: str,
    nutrients: Mapping[str, float | None] | None = None,
    tier: CatalogTier = CatalogTier.GENERIC,
) -> SourceCandidate:
    return SourceCandidate(
        name=name,
        structured_id=structured_id,
        nutrients=dict(FULL_NUTRIENTS if nutrients is None else nutrients),
        tier=tier,
    )


def make_restaurant(restaurant_id: int, name: str) -> Restaurant:
    return Restaurant(
        id=restaurant_id,
        name=name,
        latitude=40.0 + restaurant_id / 1000,
        longitude=-74.0,
        amenity_type="fast_food",
    )


@pytest.fixture
def settings() -> Settings:
    return Settings(
        fdc_api_key="fdc-key",
        supabase_url=None,
        supabase_service_key=None,
    )


@pytest.fixture
def clock() -> MutableClock:
    return MutableClock()


@pytest.fixture
def static_source() -> StaticCatalogSource:
    table = InMemoryNutritionTable(
        entries=[
            NutritionTableRow("R0056", "McDonalds", FULL_NUTRIENTS),
            NutritionTableRow("R0010", "Burger King", FULL_NUTRIENTS),
            NutritionTableRow(
                "cheeseburger", "Cheeseburger", {**FULL_NUTRIENTS, "calories": 300.0}
            ),
        ]
    )
    return StaticCatalogSource(table)


@pytest.fixture
def container(
    settings: Settings, static_source: StaticCatalogSource
) -> AppContainer:
    result_cache = ResultCache()
    nutrition_service = NutritionLookupService(
        sources=[static_source], cache=result_cache
    )
    geo_cache = GeoCache()
    restaurant_service = RestaurantDiscoveryService(
        fetcher=FakeRestaurantFetcher(
            restaurants=[make_restaurant(1, "McDonald's"), make_restaurant(2, "Corner Cafe")]
        ),
        geo_cache=geo_cache,
        preload_limiter=RateLimiter(0.0),
    )

    async def close_resources() -> None:
        return None

    return AppContainer(
        settings=settings,
        result_cache=result_cache,
        result_cache_repository=None,
        nutrition_service=nutrition_service,
        geo_cache=geo_cache,
        restaurant_service=restaurant_service,
        close_resources=close_resources,
    )
