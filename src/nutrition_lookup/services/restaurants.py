"""Restaurant discovery with cached regions and background refresh."""

import asyncio
import itertools
import logging
from collections.abc import Coroutine, Iterator
from dataclasses import dataclass, field
from datetime import datetime, timedelta
from typing import Any, Protocol

from nutrition_lookup.adapters.overpass_client import RestaurantFetcher
from nutrition_lookup.domain.geo import GeoPoint, Restaurant
from nutrition_lookup.domain.nutrition import ScoredResult
from nutrition_lookup.domain.restaurant_codes import code_for_restaurant
from nutrition_lookup.services.geo_cache import GeoCache
from nutrition_lookup.services.rate_limit import RateLimiter

_logger = logging.getLogger(__name__)


class NutritionLookup(Protocol):
    """Interface used to warm nutrition results for discovered chains."""

    async def lookup(self, raw_name: str) -> ScoredResult:
        """Resolve a name to a scored nutrition result."""


@dataclass
class RestaurantDiscoveryService:
    """Serves nearby restaurants from the geo cache and refreshes it in the background.

    Stale regions are still served; a refresh task is scheduled alongside.
    At most ``max_background_tasks`` refresh, region preload or nutrition
    preload tasks run at once and a task key is never scheduled twice while
    it is in flight.
    """

    fetcher: RestaurantFetcher
    geo_cache: GeoCache
    nutrition_lookup: NutritionLookup | None = None
    radius_miles: float = 10.0
    stale_after_seconds: float = 900
    max_background_tasks: int = 3
    refresh_delay_seconds: float = 0.0
    preload_limiter: RateLimiter = field(default_factory=lambda: RateLimiter(0.5))
    preload_limit: int = 5
    debug: bool = False
    peak_active_tasks: int = field(default=0, init=False)
    _active_tasks: dict[str, "asyncio.Task[None]"] = field(
        default_factory=dict, init=False, repr=False
    )
    _nutrition_batches: Iterator[int] = field(
        default_factory=itertools.count, init=False, repr=False
    )
    _preloaded_names: set[str] = field(default_factory=set, init=False, repr=False)

    @property
    def last_refreshed_at(self) -> datetime | None:
        """Time of the most recent region store."""
        return self.geo_cache.last_refreshed_at

    @property
    def active_task_count(self) -> int:
        """Number of background tasks currently in flight."""
        return len(self._active_tasks)

    async def get_restaurants(self, location: GeoPoint) -> list[Restaurant]:
        """Return restaurants near a location, fetching on a cache miss."""
        region = self.geo_cache.lookup(location)
        if region is not None:
            age = self.geo_cache.clock() - region.created_at
            if age > timedelta(seconds=self.stale_after_seconds):
                # Refresh the served region in place, not the query point.
                self.trigger_refresh(region.center)
            if self.debug:
                _logger.info(
                    "Restaurants cache hit: region=%s restaurants=%s",
                    region.key,
                    len(region.restaurants),
                )
            return list(region.restaurants)

        try:
            restaurants = await self.fetcher.fetch_restaurants(
                location, self.radius_miles
            )
        except Exception:
            _logger.exception("Failed to fetch restaurants near %s", location)
            return []
        self.geo_cache.store(restaurants, location, self.radius_miles)
        self.trigger_nutrition_preload(restaurants)
        return restaurants

    def trigger_refresh(self, location: GeoPoint) -> bool:
        """Schedule a background refresh; returns False when skipped."""
        task_key = f"refresh_{location.latitude}_{location.longitude}"
        return self._spawn(task_key, self._refresh(location))

    def preload_region(self, location: GeoPoint) -> bool:
        """Schedule a fetch for a region the caller expects to need soon."""
        task_key = f"preload_{location.latitude}_{location.longitude}"
        return self._spawn(task_key, self._refresh(location))

    def trigger_nutrition_preload(self, restaurants: list[Restaurant]) -> bool:
        """Warm nutrition results for chains among the given restaurants."""
        if self.nutrition_lookup is None or not restaurants:
            return False
        task_key = f"nutrition_{next(self._nutrition_batches)}"
        return self._spawn(task_key, self._preload_nutrition_safely(restaurants))

    async def wait_idle(self) -> None:
        """Wait until no background task is in flight."""
        while self._active_tasks:
            pending = list(self._active_tasks.values())
            await asyncio.gather(*pending, return_exceptions=True)
            # Let done callbacks drop finished tasks before re-checking.
            await asyncio.sleep(0)

    def cleanup_expired(self) -> int:
        """Drop expired regions and forget which chains were already warmed."""
        self._preloaded_names.clear()
        return self.geo_cache.purge_expired()

    def status(self) -> str:
        """Human-readable cache summary."""
        return f"{self.geo_cache.status()}, {self.active_task_count} background tasks"

    def _spawn(self, task_key: str, coro: Coroutine[Any, Any, None]) -> bool:
        if task_key in self._active_tasks:
            coro.close()
            if self.debug:
                _logger.info("Background task already running: %s", task_key)
            return False
        if len(self._active_tasks) >= self.max_background_tasks:
            coro.close()
            _logger.info(
                "Background task limit reached, skipping %s (%s running)",
                task_key,
                len(self._active_tasks),
            )
            return False
        task = asyncio.create_task(coro, name=task_key)
        self._active_tasks[task_key] = task
        self.peak_active_tasks = max(self.peak_active_tasks, len(self._active_tasks))
        task.add_done_callback(lambda _task: self._active_tasks.pop(task_key, None))
        return True

    async def _refresh(self, location: GeoPoint) -> None:
        try:
            if self.refresh_delay_seconds > 0:
                await asyncio.sleep(self.refresh_delay_seconds)
            restaurants = await self.fetcher.fetch_restaurants(
                location, self.radius_miles
            )
            self.geo_cache.store(restaurants, location, self.radius_miles)
            await self._preload_nutrition(restaurants)
        except Exception:
            _logger.exception("Background refresh failed near %s", location)

    async def _preload_nutrition_safely(self, restaurants: list[Restaurant]) -> None:
        try:
            await self._preload_nutrition(restaurants)
        except Exception:
            _logger.exception("Nutrition preload failed")

    async def _preload_nutrition(self, restaurants: list[Restaurant]) -> None:
        if self.nutrition_lookup is None:
            return
        chains = [
            restaurant
            for restaurant in restaurants
            if code_for_restaurant(restaurant.name) is not None
        ][: self.preload_limit]
        for restaurant in chains:
            name_key = restaurant.name.lower()
            if name_key in self._preloaded_names:
                continue
            self._preloaded_names.add(name_key)
            await self.preload_limiter.wait()
            result = await self.nutrition_lookup.lookup(restaurant.name)
            if self.debug:
                _logger.info(
                    "Preloaded nutrition: restaurant=%s available=%s",
                    restaurant.name,
                    result.is_available,
                )
