"""Concrete nutrition sources used by the lookup chain."""

import json
import logging
from collections.abc import Awaitable, Callable, Mapping
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Protocol, TypeVar

import httpx

from nutrition_lookup.adapters.fdc_client import FdcClient
from nutrition_lookup.adapters.off_client import OffClient
from nutrition_lookup.domain.catalog import CatalogTier, SearchQuery, SourceCandidate
from nutrition_lookup.domain.errors import SourceRateLimitedError, SourceUnavailableError
from nutrition_lookup.domain.nutrition import has_calories
from nutrition_lookup.domain.open_food_facts import OffSearchResponse
from nutrition_lookup.domain.restaurant_codes import (
    is_restaurant_code,
    restaurant_name_for_code,
)
from nutrition_lookup.services.rate_limit import RateLimiter

_FDC_NUTRIENT_IDS = {
    1008: "calories",
    1005: "carbs",
    1003: "protein",
    1004: "fat",
    1079: "fiber",
    2000: "sugar",
    1093: "sodium",
}

_logger = logging.getLogger(__name__)

T = TypeVar("T")
R = TypeVar("R")


@dataclass(frozen=True)
class NutritionTableRow:
    """Row of a local nutrition table keyed by food name or R-code."""

    key: str
    name: str
    nutrients: Mapping[str, float | None]


class StaticNutritionTable(Protocol):
    """Interface for local nutrition tables."""

    def rows(self) -> list[NutritionTableRow]:
        """Return every row of the table."""


@dataclass
class InMemoryNutritionTable(StaticNutritionTable):
    """Nutrition table held in memory."""

    entries: list[NutritionTableRow] = field(default_factory=list)

    def rows(self) -> list[NutritionTableRow]:
        return list(self.entries)


def load_nutrition_table(path: str | Path) -> InMemoryNutritionTable:
    """Load a JSON table mapping keys to nutrient fields.

    The file holds an object like ``{"R0056": {"calories": 250, ...}}``.
    An optional ``name`` field overrides the display name; R-code rows
    default to the chain name.
    """
    payload = json.loads(Path(path).read_text(encoding="utf-8"))
    entries: list[NutritionTableRow] = []
    for key, fields in payload.items():
        nutrients = {name: value for name, value in fields.items() if name != "name"}
        name = fields.get("name") or restaurant_name_for_code(key) or key
        entries.append(NutritionTableRow(key=key, name=name, nutrients=nutrients))
    return InMemoryNutritionTable(entries=entries)


@dataclass
class StaticCatalogSource:
    """Local table source; restaurant-chain rows form the priority tier."""

    table: StaticNutritionTable
    source_id: str = "static_catalog"
    max_confidence: float | None = None
    aggregate_limit: int = 1
    supports_category_search: bool = False
    rate_limiter: RateLimiter = field(default_factory=lambda: RateLimiter(0.0))
    _candidates: list[SourceCandidate] = field(default_factory=list, init=False, repr=False)

    def __post_init__(self) -> None:
        for row in self.table.rows():
            if is_restaurant_code(row.key):
                # Unknown chain codes have no name to match against.
                if restaurant_name_for_code(row.key) is None:
                    continue
                tier = CatalogTier.PRIORITY
            else:
                tier = CatalogTier.GENERIC
            self._candidates.append(
                SourceCandidate(
                    name=row.name,
                    structured_id=row.key,
                    nutrients=dict(row.nutrients),
                    tier=tier,
                )
            )
        _logger.info(
            "Loaded static catalog: source=%s entries=%s",
            self.source_id,
            len(self._candidates),
        )

    async def search(self, query: SearchQuery) -> list[SourceCandidate]:
        """The whole table is the candidate set; ranking happens in the matcher."""
        return list(self._candidates)

    async def fetch_details(self, structured_id: str) -> dict[str, float | None] | None:
        return None


@dataclass
class FdcNutritionSource:
    """USDA FoodData Central source aggregating several close matches."""

    client: FdcClient
    rate_limiter: RateLimiter
    source_id: str = "usda_fdc"
    max_confidence: float | None = 0.85
    aggregate_limit: int = 3
    page_size: int = 10
    supports_category_search: bool = False

    async def search(self, query: SearchQuery) -> list[SourceCandidate]:
        """Search FDC and map hits to candidates with abridged nutrients."""
        return await _call_source(
            self.source_id,
            self.client.search_foods(query.text, page_size=self.page_size),
            _fdc_candidates,
        )

    async def fetch_details(self, structured_id: str) -> dict[str, float | None] | None:
        """Fetch the full nutrient list for one FDC food."""
        if not structured_id.isdigit():
            return None
        return await _call_source(
            self.source_id,
            self.client.get_food(int(structured_id)),
            lambda payload: extract_nutrient_fields(payload.get("foodNutrients", [])),
        )


@dataclass
class OpenFoodFactsSource:
    """Open Food Facts source; only products with calories are usable."""

    client: OffClient
    rate_limiter: RateLimiter
    source_id: str = "open_food_facts"
    max_confidence: float | None = 0.75
    aggregate_limit: int = 1
    page_size: int = 20
    supports_category_search: bool = True

    async def search(self, query: SearchQuery) -> list[SourceCandidate]:
        """Search by text or category and drop products without calories."""
        return await _call_source(
            self.source_id,
            self.client.search_products(query.text, query.kind, page_size=self.page_size),
            _off_candidates,
        )

    async def fetch_details(self, structured_id: str) -> dict[str, float | None] | None:
        return None


def _fdc_candidates(payload: dict[str, Any]) -> list[SourceCandidate]:
    return [
        SourceCandidate(
            name=food["description"],
            structured_id=str(food["fdcId"]),
            nutrients=extract_nutrient_fields(food.get("foodNutrients", [])),
        )
        for food in payload.get("foods", [])
        if food.get("description")
    ]


def _off_candidates(response: OffSearchResponse) -> list[SourceCandidate]:
    candidates: list[SourceCandidate] = []
    for product in response.products:
        if not product.product_name or product.nutriments is None:
            continue
        nutrients = product.nutriments.to_fields()
        if not has_calories(nutrients):
            continue
        candidates.append(
            SourceCandidate(
                name=product.product_name,
                structured_id=product.id or product.code or product.product_name,
                nutrients=nutrients,
            )
        )
    return candidates


def extract_nutrient_fields(
    food_nutrients: list[dict[str, object]],
) -> dict[str, float | None]:
    """Extract the seven tracked nutrients from FDC nutrient entries.

    Search hits carry ``nutrientId``/``value``; food details nest the id under
    ``nutrient`` and report ``amount``.
    """
    values: dict[str, float | None] = {name: None for name in _FDC_NUTRIENT_IDS.values()}
    for nutrient in food_nutrients:
        nutrient_info = nutrient.get("nutrient") or {}
        nutrient_id = nutrient_info.get("id") or nutrient.get("nutrientId")
        amount = nutrient.get("amount")
        if amount is None:
            amount = nutrient.get("value")
        name = _FDC_NUTRIENT_IDS.get(nutrient_id)
        if name is not None and amount is not None:
            values[name] = float(amount)
    return values


async def _call_source(
    source_id: str, call: Awaitable[T], parse: Callable[[T], R]
) -> R:
    """Await a client call and parse its payload.

    Transport failures and malformed payloads both raise source errors.
    """
    try:
        return parse(await call)
    except httpx.HTTPStatusError as exc:
        status_code = _status_code_from_exception(exc)
        if status_code == "429":
            raise SourceRateLimitedError(source_id, "HTTP 429") from exc
        raise SourceUnavailableError(source_id, f"HTTP {status_code}") from exc
    except httpx.HTTPError as exc:
        raise SourceUnavailableError(source_id, str(exc)) from exc
    except (KeyError, TypeError, AttributeError, ValueError) as exc:
        raise SourceUnavailableError(
            source_id, f"malformed payload: {type(exc).__name__}: {exc}"
        ) from exc


def _status_code_from_exception(exc: Exception) -> str:
    """Extract HTTP status code from an exception, if available."""
    response = getattr(exc, "response", None)
    status_code = getattr(response, "status_code", None)
    if isinstance(status_code, int):
        return str(status_code)
    return "n/a"
