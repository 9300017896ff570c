"""Supabase repository persisting lookup cache records."""

from dataclasses import dataclass

from supabase import Client

from nutrition_lookup.domain.nutrition import CachedResultRecord
from nutrition_lookup.services.cache import ResultCacheRepository

_TABLE = "nutrition_result_cache"


@dataclass
class SupabaseResultCacheRepository(ResultCacheRepository):
    """Supabase implementation of result cache persistence."""

    client: Client

    def load_records(self) -> list[CachedResultRecord]:
        """Return all persisted cache rows."""
        response = (
            self.client.table(_TABLE)
            .select("cache_key, result_json, cached_at")
            .execute()
        )
        return [
            CachedResultRecord(
                key=row["cache_key"],
                result=row["result_json"],
                timestamp=row["cached_at"],
            )
            for row in response.data or []
        ]

    def save_records(self, records: list[CachedResultRecord]) -> None:
        """Upsert records keyed by cache key."""
        if not records:
            return
        rows = []
        for record in records:
            payload = record.model_dump(mode="json")
            rows.append(
                {
                    "cache_key": payload["key"],
                    "result_json": payload["result"],
                    "cached_at": payload["timestamp"],
                }
            )
        self.client.table(_TABLE).upsert(rows, on_conflict="cache_key").execute()
