"""Catalog and match models."""

from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from enum import IntEnum, StrEnum


class CatalogTier(IntEnum):
    """Catalog partitions in priority order; lower values are tried first."""

    PRIORITY = 0
    GENERIC = 1


@dataclass(frozen=True)
class CatalogEntry:
    """Preprocessed catalog row used by the matcher."""

    raw_key: str
    cleaned_name: str
    tokens: frozenset[str]
    tier: CatalogTier
    source_id: str
    display_name: str = ""


@dataclass(frozen=True)
class Catalog:
    """Immutable catalog snapshot partitioned into tiers."""

    tiers: tuple[tuple[CatalogTier, tuple[CatalogEntry, ...]], ...]

    @classmethod
    def from_entries(cls, entries: Iterable[CatalogEntry]) -> "Catalog":
        """Partition entries by tier, keeping their original order."""
        grouped: dict[CatalogTier, list[CatalogEntry]] = {}
        for entry in entries:
            grouped.setdefault(entry.tier, []).append(entry)
        return cls(
            tiers=tuple(
                (tier, tuple(grouped[tier])) for tier in sorted(grouped)
            )
        )

    def entries(self) -> list[CatalogEntry]:
        """Return all entries in tier order."""
        return [entry for _, tier_entries in self.tiers for entry in tier_entries]

    def __len__(self) -> int:
        return sum(len(tier_entries) for _, tier_entries in self.tiers)


@dataclass(frozen=True)
class MatchCandidate:
    """Scored catalog entry produced by one matching strategy."""

    entry: CatalogEntry
    score: float
    strategy_name: str


class QueryKind(StrEnum):
    """How a source should interpret a search query."""

    TEXT = "text"
    CATEGORY = "category"


@dataclass(frozen=True)
class SearchQuery:
    """Search query generated from parsed food terms."""

    text: str
    kind: QueryKind = QueryKind.TEXT


@dataclass(frozen=True)
class SourceCandidate:
    """Search hit returned by a nutrition source."""

    name: str
    structured_id: str
    nutrients: Mapping[str, float | None] = field(default_factory=dict)
    tier: CatalogTier = CatalogTier.GENERIC
