"""Open Food Facts search API client."""

from dataclasses import dataclass
from typing import Protocol

import httpx

from nutrition_lookup.domain.catalog import QueryKind
from nutrition_lookup.domain.open_food_facts import OffSearchResponse

_FIELDS = "product_name,nutriments,code,id"


class OffClient(Protocol):
    """Interface for Open Food Facts product search."""

    async def search_products(
        self, query: str, kind: QueryKind = QueryKind.TEXT, page_size: int = 20
    ) -> OffSearchResponse:
        """Search products by free text or category tag."""


@dataclass
class HttpxOffClient(OffClient):
    """HTTPX-backed Open Food Facts client."""

    base_url: str
    http_client: httpx.AsyncClient
    timeout_seconds: float = 15

    @classmethod
    def create(cls, base_url: str, user_agent: str) -> "HttpxOffClient":
        """Create a client; OFF asks integrations to send a descriptive User-Agent."""
        return cls(
            base_url=base_url,
            http_client=httpx.AsyncClient(headers={"User-Agent": user_agent}),
        )

    async def search_products(
        self, query: str, kind: QueryKind = QueryKind.TEXT, page_size: int = 20
    ) -> OffSearchResponse:
        """Search products and validate the response payload."""
        term_param = "categories_tags_en" if kind is QueryKind.CATEGORY else "search_terms"
        response = await self.http_client.get(
            f"{self.base_url}/search",
            params={term_param: query, "fields": _FIELDS, "page_size": page_size},
            timeout=self.timeout_seconds,
        )
        response.raise_for_status()
        return OffSearchResponse.model_validate(response.json())

    async def close(self) -> None:
        """Close the underlying HTTP session."""
        await self.http_client.aclose()
