"""Overpass API client for nearby restaurant discovery."""

from dataclasses import dataclass
from typing import Protocol

import httpx

from nutrition_lookup.domain.geo import GeoPoint, Restaurant

METERS_PER_MILE = 1609.34


class RestaurantFetcher(Protocol):
    """Interface for fetching restaurants around a point."""

    async def fetch_restaurants(
        self, center: GeoPoint, radius_miles: float
    ) -> list[Restaurant]:
        """Return restaurants within the radius of the center point."""


def build_overpass_query(center: GeoPoint, radius_miles: float) -> str:
    """Fast food within the radius and sit-down restaurants within half of it."""
    radius = radius_miles * METERS_PER_MILE
    lat, lon = center.latitude, center.longitude
    return (
        "[out:json][timeout:10];\n"
        "(\n"
        f'  node["amenity"="fast_food"]["name"](around:{radius},{lat},{lon});\n'
        f'  node["amenity"="restaurant"]["name"](around:{radius / 2},{lat},{lon});\n'
        ");\n"
        "out body;"
    )


def parse_restaurants(payload: dict[str, object]) -> list[Restaurant]:
    """Convert Overpass elements to restaurants, skipping unnamed nodes."""
    restaurants: list[Restaurant] = []
    for element in payload.get("elements", []):
        tags = element.get("tags") or {}
        name = tags.get("name")
        if not name or "lat" not in element or "lon" not in element:
            continue
        restaurants.append(
            Restaurant(
                id=int(element["id"]),
                name=name,
                latitude=float(element["lat"]),
                longitude=float(element["lon"]),
                amenity_type=tags.get("amenity"),
                address=tags.get("addr:full") or tags.get("addr:street"),
            )
        )
    return restaurants


@dataclass
class HttpxOverpassClient(RestaurantFetcher):
    """HTTPX-backed Overpass client."""

    url: str
    http_client: httpx.AsyncClient
    timeout_seconds: float = 8

    @classmethod
    def create(cls, url: str) -> "HttpxOverpassClient":
        """Create an Overpass client with a managed httpx session."""
        return cls(url=url, http_client=httpx.AsyncClient())

    async def fetch_restaurants(
        self, center: GeoPoint, radius_miles: float
    ) -> list[Restaurant]:
        """Run the Overpass query and parse the response."""
        response = await self.http_client.post(
            self.url,
            data={"data": build_overpass_query(center, radius_miles)},
            timeout=self.timeout_seconds,
        )
        response.raise_for_status()
        return parse_restaurants(response.json())

    async def close(self) -> None:
        """Close the underlying HTTP session."""
        await self.http_client.aclose()
