"""Tests for the HTTP API."""

from datetime import UTC, datetime

from fastapi.testclient import TestClient

from nutrition_lookup.api.app import create_app
from nutrition_lookup.containers import AppContainer
from nutrition_lookup.domain.nutrition import CachedResultRecord, ScoredResult
from tests.conftest import InMemoryResultCacheRepository


def test_health(container: AppContainer) -> None:
    client = TestClient(create_app(container))

    response = client.get("/health")

    assert response.status_code == 200
    assert response.json() == {"status": "ok"}


def test_nutrition_lookup(container: AppContainer) -> None:
    client = TestClient(create_app(container))

    response = client.get("/nutrition", params={"name": "mcdonalds"})

    assert response.status_code == 200
    payload = response.json()
    assert payload["matched_key"] == "R0056"
    assert payload["is_available"] is True
    assert payload["nutrition"]["calories"]["unit"] == "kcal"


def test_nutrition_lookup_unknown_name(container: AppContainer) -> None:
    client = TestClient(create_app(container))

    response = client.get("/nutrition", params={"name": "zzzz qqqq"})

    assert response.status_code == 200
    assert response.json()["is_available"] is False
    assert response.json()["confidence"] == 0.0


def test_nutrition_requires_name(container: AppContainer) -> None:
    client = TestClient(create_app(container))

    response = client.get("/nutrition")

    assert response.status_code == 422


def test_restaurants(container: AppContainer) -> None:
    client = TestClient(create_app(container))

    response = client.get("/restaurants", params={"lat": 40.0, "lon": -74.0})

    assert response.status_code == 200
    payload = response.json()
    assert [item["name"] for item in payload["restaurants"]] == [
        "McDonald's",
        "Corner Cafe",
    ]
    assert payload["last_refreshed_at"] is not None
    assert payload["status"] == "Cache: 1 areas, 0 background tasks"


def test_restaurants_rejects_bad_coordinates(container: AppContainer) -> None:
    client = TestClient(create_app(container))

    response = client.get("/restaurants", params={"lat": 120.0, "lon": -74.0})

    assert response.status_code == 422


def test_cache_status(container: AppContainer) -> None:
    client = TestClient(create_app(container))
    client.get("/nutrition", params={"name": "mcdonalds"})

    response = client.get("/cache/status")

    assert response.status_code == 200
    payload = response.json()
    assert payload["result_cache"]["entries"] == 1
    assert payload["geo_cache"]["regions"] == 0
    assert payload["geo_cache"]["active_tasks"] == 0


def test_lifespan_restores_and_saves_cache(container: AppContainer) -> None:
    record = CachedResultRecord(
        key="static_catalog:fries",
        result=ScoredResult.unavailable("fries"),
        timestamp=datetime.now(tz=UTC),
    )
    repository = InMemoryResultCacheRepository(records=[record])
    container.result_cache_repository = repository

    with TestClient(create_app(container)) as client:
        assert "static_catalog:fries" in container.result_cache
        client.get("/nutrition", params={"name": "mcdonalds"})

    assert repository.saved is not None
    assert {saved.key for saved in repository.saved} == {
        "static_catalog:fries",
        "static_catalog:mcdonalds",
    }
