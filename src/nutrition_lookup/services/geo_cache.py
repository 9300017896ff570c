"""Bounding-box cache for restaurant discovery results."""

import logging
import threading
from collections.abc import Callable, Sequence
from dataclasses import dataclass, field, replace
from datetime import datetime, timedelta

from nutrition_lookup.domain.geo import (
    CachedRegion,
    GeographicBounds,
    GeoPoint,
    Restaurant,
)
from nutrition_lookup.services.cache import utcnow

_logger = logging.getLogger(__name__)


def region_key(center: GeoPoint) -> str:
    """Cache key derived from the query center coordinates."""
    return f"{center.latitude}_{center.longitude}"


@dataclass
class GeoCache:
    """Caches restaurant lists per region and answers containment lookups.

    Regions are scanned linearly; catalog sizes here are small. Readers get
    immutable ``CachedRegion`` snapshots, never the stored entries.
    """

    ttl_seconds: float = 1800
    capacity: int = 50
    eviction_fraction: float = 0.2
    clock: Callable[[], datetime] = utcnow
    _regions: dict[str, CachedRegion] = field(default_factory=dict, init=False, repr=False)
    _lock: threading.Lock = field(default_factory=threading.Lock, init=False, repr=False)
    last_refreshed_at: datetime | None = field(default=None, init=False)

    def lookup(self, point: GeoPoint) -> CachedRegion | None:
        """Return the first unexpired region whose bounds contain the point."""
        with self._lock:
            now = self.clock()
            expired: list[str] = []
            found: CachedRegion | None = None
            for key, region in self._regions.items():
                if self._is_expired(region, now):
                    expired.append(key)
                    continue
                if region.bounds.contains(point):
                    found = replace(region, last_accessed_at=now)
                    self._regions[key] = found
                    break
            for key in expired:
                del self._regions[key]
            return found

    def store(
        self,
        restaurants: Sequence[Restaurant],
        center: GeoPoint,
        radius_miles: float,
    ) -> CachedRegion:
        """Cache restaurants for a center point and radius in miles."""
        with self._lock:
            now = self.clock()
            key = region_key(center)
            if key not in self._regions and len(self._regions) >= self.capacity:
                self._evict_oldest()
            region = CachedRegion(
                key=key,
                bounds=GeographicBounds.from_radius_miles(center, radius_miles),
                center=center,
                radius_miles=radius_miles,
                restaurants=tuple(restaurants),
                created_at=now,
                last_accessed_at=now,
            )
            self._regions[key] = region
            self.last_refreshed_at = now
        _logger.info(
            "Cached %s restaurants for %s mile radius at %s",
            len(restaurants),
            radius_miles,
            key,
        )
        return region

    def purge_expired(self) -> int:
        """Drop expired regions and return how many were removed."""
        with self._lock:
            now = self.clock()
            expired = [
                key for key, region in self._regions.items() if self._is_expired(region, now)
            ]
            for key in expired:
                del self._regions[key]
        if expired:
            _logger.info("Cleaned up %s expired cache regions", len(expired))
        return len(expired)

    def clear(self) -> None:
        """Remove every cached region."""
        with self._lock:
            self._regions.clear()

    def __len__(self) -> int:
        with self._lock:
            return len(self._regions)

    def status(self) -> str:
        """Short diagnostic summary of cached regions."""
        return f"Cache: {self.valid_region_count()} areas"

    def valid_region_count(self) -> int:
        """Number of regions that have not expired."""
        with self._lock:
            now = self.clock()
            return sum(
                1 for region in self._regions.values() if not self._is_expired(region, now)
            )

    def _is_expired(self, region: CachedRegion, now: datetime) -> bool:
        return now - region.created_at >= timedelta(seconds=self.ttl_seconds)

    def _evict_oldest(self) -> None:
        count = max(1, int(len(self._regions) * self.eviction_fraction))
        oldest = sorted(
            self._regions, key=lambda key: self._regions[key].last_accessed_at
        )[:count]
        for key in oldest:
            del self._regions[key]
        _logger.info("Cleaned %s cache regions", count)
