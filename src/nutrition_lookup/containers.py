"""Dependency container wiring for the application."""

from collections.abc import Awaitable, Callable
from dataclasses import dataclass

from supabase import create_client

from nutrition_lookup.adapters.fdc_client import HttpxFdcClient
from nutrition_lookup.adapters.off_client import HttpxOffClient
from nutrition_lookup.adapters.overpass_client import HttpxOverpassClient
from nutrition_lookup.adapters.supabase_result_cache_repository import (
    SupabaseResultCacheRepository,
)
from nutrition_lookup.config import Settings
from nutrition_lookup.services.cache import ResultCache, ResultCacheRepository
from nutrition_lookup.services.confidence import ConfidenceScorer
from nutrition_lookup.services.geo_cache import GeoCache
from nutrition_lookup.services.matcher import FoodMatcher
from nutrition_lookup.services.nutrition import NutritionLookupService, NutritionSource
from nutrition_lookup.services.rate_limit import RateLimiter
from nutrition_lookup.services.restaurants import RestaurantDiscoveryService
from nutrition_lookup.services.sources import (
    FdcNutritionSource,
    InMemoryNutritionTable,
    OpenFoodFactsSource,
    StaticCatalogSource,
    load_nutrition_table,
)


@dataclass
class AppContainer:
    """Holds application-wide dependencies."""

    settings: Settings
    result_cache: ResultCache
    result_cache_repository: ResultCacheRepository | None
    nutrition_service: NutritionLookupService
    geo_cache: GeoCache
    restaurant_service: RestaurantDiscoveryService
    close_resources: Callable[[], Awaitable[None]]


def build_container(settings: Settings | None = None) -> AppContainer:
    """Create the default dependency container."""
    resolved_settings = settings or Settings()
    result_cache_repository: ResultCacheRepository | None = None
    if resolved_settings.persistence_enabled:
        supabase_client = create_client(
            resolved_settings.supabase_url, resolved_settings.supabase_service_key
        )
        result_cache_repository = SupabaseResultCacheRepository(supabase_client)

    fdc_client = HttpxFdcClient.create(
        api_key=resolved_settings.fdc_api_key,
        base_url=resolved_settings.fdc_base_url,
    )
    off_client = HttpxOffClient.create(
        base_url=resolved_settings.off_base_url,
        user_agent=resolved_settings.off_user_agent,
    )
    overpass_client = HttpxOverpassClient.create(resolved_settings.overpass_url)

    table = (
        load_nutrition_table(resolved_settings.nutrition_table_path)
        if resolved_settings.nutrition_table_path
        else InMemoryNutritionTable()
    )
    sources: list[NutritionSource] = [
        StaticCatalogSource(table),
        FdcNutritionSource(
            client=fdc_client,
            rate_limiter=RateLimiter(resolved_settings.fdc_request_interval_seconds),
            max_confidence=resolved_settings.fdc_confidence_cap,
        ),
        OpenFoodFactsSource(
            client=off_client,
            rate_limiter=RateLimiter(resolved_settings.off_request_interval_seconds),
            max_confidence=resolved_settings.off_confidence_cap,
        ),
    ]
    result_cache = ResultCache(
        ttl_seconds=resolved_settings.result_cache_ttl_seconds,
        capacity=resolved_settings.result_cache_capacity,
    )
    nutrition_service = NutritionLookupService(
        sources=sources,
        cache=result_cache,
        matcher=FoodMatcher(
            min_score=resolved_settings.match_min_score,
            debug=resolved_settings.debug,
        ),
        scorer=ConfidenceScorer(
            min_acceptance=resolved_settings.min_acceptance_confidence,
            high_confidence=resolved_settings.high_confidence_threshold,
        ),
        debug=resolved_settings.debug,
    )
    geo_cache = GeoCache(
        ttl_seconds=resolved_settings.geo_cache_ttl_seconds,
        capacity=resolved_settings.geo_cache_capacity,
    )
    restaurant_service = RestaurantDiscoveryService(
        fetcher=overpass_client,
        geo_cache=geo_cache,
        nutrition_lookup=nutrition_service,
        radius_miles=resolved_settings.geo_radius_miles,
        stale_after_seconds=resolved_settings.geo_stale_after_seconds,
        max_background_tasks=resolved_settings.max_background_tasks,
        preload_limiter=RateLimiter(resolved_settings.preload_interval_seconds),
        preload_limit=resolved_settings.preload_limit,
        debug=resolved_settings.debug,
    )

    async def close_resources() -> None:
        await fdc_client.close()
        await off_client.close()
        await overpass_client.close()

    return AppContainer(
        settings=resolved_settings,
        result_cache=result_cache,
        result_cache_repository=result_cache_repository,
        nutrition_service=nutrition_service,
        geo_cache=geo_cache,
        restaurant_service=restaurant_service,
        close_resources=close_resources,
    )
