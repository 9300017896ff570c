"""TTL result cache with capacity-bounded eviction."""

import logging
import threading
from collections.abc import Callable, Iterable
from dataclasses import dataclass, field
from datetime import UTC, datetime, timedelta
from typing import Generic, Protocol, TypeVar

from nutrition_lookup.domain.nutrition import CachedResultRecord, ScoredResult

_logger = logging.getLogger(__name__)

T = TypeVar("T")


def utcnow() -> datetime:
    """Return the current UTC time."""
    return datetime.now(tz=UTC)


@dataclass
class CacheEntry(Generic[T]):
    """Cached value with creation and last-access timestamps."""

    value: T
    created_at: datetime
    last_accessed_at: datetime


class ResultCacheRepository(Protocol):
    """Persistence interface for cached lookup results."""

    def load_records(self) -> list[CachedResultRecord]:
        """Return all persisted cache records."""

    def save_records(self, records: list[CachedResultRecord]) -> None:
        """Persist cache records, replacing rows with the same key."""


@dataclass
class ResultCache:
    """Thread-safe name → result cache.

    Entries are visible only while younger than ``ttl_seconds``; expired ones
    are dropped when touched. When full, the least recently accessed
    ``eviction_fraction`` of entries (at least one) makes room for a new key.
    """

    ttl_seconds: float = 7 * 24 * 3600
    capacity: int = 500
    eviction_fraction: float = 0.2
    clock: Callable[[], datetime] = utcnow
    _entries: dict[str, CacheEntry[ScoredResult]] = field(
        default_factory=dict, init=False, repr=False
    )
    _lock: threading.Lock = field(default_factory=threading.Lock, init=False, repr=False)
    hits: int = field(default=0, init=False)
    misses: int = field(default=0, init=False)

    def get(self, key: str) -> ScoredResult | None:
        """Return a cached value if present and not expired."""
        with self._lock:
            entry = self._entries.get(key)
            if entry is None:
                self.misses += 1
                return None
            now = self.clock()
            if self._is_expired(entry, now):
                del self._entries[key]
                self.misses += 1
                return None
            entry.last_accessed_at = now
            self.hits += 1
            return entry.value

    def put(self, key: str, value: ScoredResult) -> None:
        """Store a value, evicting old entries when at capacity."""
        with self._lock:
            now = self.clock()
            self._admit(key, value, created_at=now, now=now)

    def evict(self, count: int) -> int:
        """Evict up to ``count`` least recently accessed entries."""
        with self._lock:
            return self._evict_oldest(count)

    def purge_expired(self) -> int:
        """Drop all expired entries and return how many were removed."""
        with self._lock:
            return self._purge_expired(self.clock())

    def clear(self) -> None:
        """Remove every entry."""
        with self._lock:
            self._entries.clear()

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)

    def __contains__(self, key: object) -> bool:
        with self._lock:
            return key in self._entries

    def export_records(self) -> list[CachedResultRecord]:
        """Return unexpired entries as flat records for persistence."""
        with self._lock:
            now = self.clock()
            return [
                CachedResultRecord(key=key, result=entry.value, timestamp=entry.created_at)
                for key, entry in self._entries.items()
                if not self._is_expired(entry, now)
            ]

    def load_records(self, records: Iterable[CachedResultRecord]) -> int:
        """Load persisted records, skipping any already past their TTL."""
        loaded = 0
        with self._lock:
            now = self.clock()
            for record in records:
                if now - record.timestamp >= self._ttl:
                    continue
                self._admit(record.key, record.result, created_at=record.timestamp, now=now)
                loaded += 1
        return loaded

    def stats(self) -> dict[str, object]:
        """Return simple cache diagnostics."""
        with self._lock:
            return {
                "entries": len(self._entries),
                "capacity": self.capacity,
                "ttl_seconds": self.ttl_seconds,
                "hits": self.hits,
                "misses": self.misses,
            }

    @property
    def _ttl(self) -> timedelta:
        return timedelta(seconds=self.ttl_seconds)

    def _is_expired(self, entry: CacheEntry[ScoredResult], now: datetime) -> bool:
        return now - entry.created_at >= self._ttl

    def _admit(
        self, key: str, value: ScoredResult, *, created_at: datetime, now: datetime
    ) -> None:
        if key not in self._entries and len(self._entries) >= self.capacity:
            self._purge_expired(now)
            if len(self._entries) >= self.capacity:
                self._evict_oldest(
                    max(1, int(len(self._entries) * self.eviction_fraction))
                )
        self._entries[key] = CacheEntry(
            value=value, created_at=created_at, last_accessed_at=now
        )

    def _evict_oldest(self, count: int) -> int:
        oldest = sorted(
            self._entries, key=lambda key: self._entries[key].last_accessed_at
        )[:count]
        for key in oldest:
            del self._entries[key]
        if oldest:
            _logger.info("Evicted %s result cache entries", len(oldest))
        return len(oldest)

    def _purge_expired(self, now: datetime) -> int:
        expired = [
            key for key, entry in self._entries.items() if self._is_expired(entry, now)
        ]
        for key in expired:
            del self._entries[key]
        return len(expired)
