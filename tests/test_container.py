"""Tests for container wiring."""

import asyncio

from nutrition_lookup.config import Settings
from nutrition_lookup.containers import build_container


def test_build_container_creates_services(settings: Settings) -> None:
    container = build_container(settings)

    assert container.result_cache_repository is None
    assert [source.source_id for source in container.nutrition_service.sources] == [
        "static_catalog",
        "usda_fdc",
        "open_food_facts",
    ]
    assert container.restaurant_service.geo_cache is container.geo_cache
    asyncio.run(container.close_resources())


def test_build_container_applies_settings(tmp_path) -> None:
    table = tmp_path / "table.json"
    table.write_text('{"R0056": {"calories": 250}}', encoding="utf-8")
    settings = Settings(
        nutrition_table_path=str(table),
        off_confidence_cap=0.7,
        geo_cache_capacity=10,
        max_background_tasks=2,
    )

    container = build_container(settings)

    assert container.nutrition_service.sources[2].max_confidence == 0.7
    assert container.geo_cache.capacity == 10
    assert container.restaurant_service.max_background_tasks == 2
    asyncio.run(container.close_resources())
