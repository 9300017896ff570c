"""Geographic domain models."""

from dataclasses import dataclass
from datetime import datetime

MILES_PER_DEGREE = 69.0


@dataclass(frozen=True)
class GeoPoint:
    """Latitude/longitude pair in degrees."""

    latitude: float
    longitude: float


@dataclass(frozen=True)
class GeographicBounds:
    """Axis-aligned bounding box; both edges are inclusive."""

    min_lat: float
    max_lat: float
    min_lon: float
    max_lon: float

    @classmethod
    def from_center(cls, center: GeoPoint, radius_degrees: float) -> "GeographicBounds":
        """Build a square box around a center point."""
        return cls(
            min_lat=center.latitude - radius_degrees,
            max_lat=center.latitude + radius_degrees,
            min_lon=center.longitude - radius_degrees,
            max_lon=center.longitude + radius_degrees,
        )

    @classmethod
    def from_radius_miles(cls, center: GeoPoint, radius_miles: float) -> "GeographicBounds":
        """Build a box using a fixed degrees-per-mile approximation."""
        return cls.from_center(center, radius_miles / MILES_PER_DEGREE)

    def contains(self, point: GeoPoint) -> bool:
        """Return True if the point lies inside or on the box."""
        return (
            self.min_lat <= point.latitude <= self.max_lat
            and self.min_lon <= point.longitude <= self.max_lon
        )


@dataclass(frozen=True)
class Restaurant:
    """Restaurant discovered near a location."""

    id: int
    name: str
    latitude: float
    longitude: float
    amenity_type: str | None = None
    address: str | None = None


@dataclass(frozen=True)
class CachedRegion:
    """Snapshot of a cached restaurant list for a region."""

    key: str
    bounds: GeographicBounds
    center: GeoPoint
    radius_miles: float
    restaurants: tuple[Restaurant, ...]
    created_at: datetime
    last_accessed_at: datetime
