"""Tests for the lookup result cache."""

from nutrition_lookup.domain.nutrition import CachedResultRecord, ScoredResult
from nutrition_lookup.services.cache import ResultCache
from tests.conftest import MutableClock


def _result(name: str) -> ScoredResult:
    return ScoredResult.unavailable(name)


def test_get_returns_stored_value(clock: MutableClock) -> None:
    cache = ResultCache(clock=clock)
    result = _result("chicken")
    cache.put("usda_fdc:chicken", result)

    assert cache.get("usda_fdc:chicken") is result
    assert cache.get("missing") is None
    assert cache.stats()["hits"] == 1
    assert cache.stats()["misses"] == 1


def test_entries_expire_after_ttl(clock: MutableClock) -> None:
    cache = ResultCache(ttl_seconds=60, clock=clock)
    cache.put("key", _result("chicken"))

    clock.advance(59)
    assert cache.get("key") is not None

    clock.advance(1)
    assert cache.get("key") is None
    assert "key" not in cache


def test_full_cache_evicts_least_recently_accessed(clock: MutableClock) -> None:
    cache = ResultCache(capacity=50, clock=clock)
    for index in range(50):
        cache.put(f"key-{index}", _result(str(index)))
        clock.advance(1)
    cache.get("key-0")
    clock.advance(1)

    cache.put("key-50", _result("50"))

    assert len(cache) == 41
    assert "key-0" in cache
    assert "key-50" in cache
    assert all(f"key-{index}" not in cache for index in range(1, 11))


def test_overwrite_does_not_evict(clock: MutableClock) -> None:
    cache = ResultCache(capacity=2, clock=clock)
    cache.put("a", _result("a"))
    cache.put("b", _result("b"))

    cache.put("a", _result("a2"))

    assert len(cache) == 2
    assert cache.get("a").original_input == "a2"


def test_full_cache_prefers_purging_expired(clock: MutableClock) -> None:
    cache = ResultCache(ttl_seconds=10, capacity=3, clock=clock)
    cache.put("old", _result("old"))
    clock.advance(11)
    cache.put("b", _result("b"))
    cache.put("c", _result("c"))

    cache.put("d", _result("d"))

    assert "old" not in cache
    assert {key for key in ("b", "c", "d") if key in cache} == {"b", "c", "d"}


def test_export_and_load_skip_expired(clock: MutableClock) -> None:
    cache = ResultCache(ttl_seconds=100, clock=clock)
    cache.put("old", _result("old"))
    clock.advance(50)
    cache.put("new", _result("new"))
    records = cache.export_records()

    restored = ResultCache(ttl_seconds=100, clock=clock)
    clock.advance(60)
    loaded = restored.load_records(records)

    assert [record.key for record in records] == ["old", "new"]
    assert loaded == 1
    assert "new" in restored
    assert "old" not in restored


def test_load_records_accepts_serialized_payload(clock: MutableClock) -> None:
    cache = ResultCache(clock=clock)
    record = CachedResultRecord(key="k", result=_result("fries"), timestamp=clock())

    restored = CachedResultRecord.model_validate(record.model_dump(mode="json"))
    cache.load_records([restored])

    assert cache.get("k").original_input == "fries"
