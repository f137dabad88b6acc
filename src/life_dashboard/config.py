"""Application configuration."""

import os

from pydantic_settings import BaseSettings, SettingsConfigDict

_ENVIRONMENT = os.getenv("ENVIRONMENT", "local")


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    supabase_url: str
    supabase_service_key: str
    api_token: str
    dashboard_user_id: str
    timezone: str = "UTC"
    calorie_tolerance: float = 0.10
    history_window_days: int = 100
    catalog_ttl_seconds: int = 300
    open_food_facts_base_url: str = "https://world.openfoodfacts.org"
    log_level: str = "INFO"
    environment: str = _ENVIRONMENT

    model_config = SettingsConfigDict(
        env_file=(f".env.{_ENVIRONMENT}", ".env"),
        extra="ignore",
    )
