"""Application configuration."""

import os

from pydantic_settings import BaseSettings, SettingsConfigDict

_ENVIRONMENT = os.getenv("ENVIRONMENT", "local")


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    fdc_api_key: str = "DEMO_KEY"
    fdc_base_url: str = "https://api.nal.usda.gov/fdc/v1"
    off_base_url: str = "https://world.openfoodfacts.org/api/v2"
    off_user_agent: str = "nutrition-lookup/1.0"
    overpass_url: str = "https://overpass-api.de/api/interpreter"
    supabase_url: str | None = None
    supabase_service_key: str | None = None
    nutrition_table_path: str | None = None
    min_acceptance_confidence: float = 0.60
    high_confidence_threshold: float = 0.75
    match_min_score: float = 0.30
    result_cache_ttl_seconds: int = 7 * 24 * 3600
    result_cache_capacity: int = 500
    fdc_request_interval_seconds: float = 1.0
    off_request_interval_seconds: float = 6.0
    fdc_confidence_cap: float = 0.85
    off_confidence_cap: float = 0.75
    geo_cache_ttl_seconds: int = 1800
    geo_stale_after_seconds: int = 900
    geo_cache_capacity: int = 50
    geo_radius_miles: float = 10.0
    max_background_tasks: int = 3
    preload_interval_seconds: float = 0.5
    preload_limit: int = 5
    debug: bool = False
    environment: str = _ENVIRONMENT

    model_config = SettingsConfigDict(
        env_file=(f".env.{_ENVIRONMENT}", ".env"),
        extra="ignore",
    )

    @property
    def persistence_enabled(self) -> bool:
        """Supabase persistence needs both the URL and the service key."""
        return bool(self.supabase_url and self.supabase_service_key)
