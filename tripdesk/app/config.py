"""Typed settings configuration - single source of truth."""

from functools import lru_cache

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    # Database (in-memory repositories when unset)
    database_url: str | None = None

    # Cache
    redis_url: str | None = None

    # Auth
    default_owner_id: str = "dev-owner"

    # Itinerary generation (seconds)
    generation_delay_seconds: float = 0.0
    generation_timeout_seconds: float = 30.0
    mock_supplier_delay_seconds: float = 0.0

    # Cart
    cart_write_retries: int = 3
    checkout_base_url: str = "https://checkout.tripdesk.app/cart"

    # Rate limiting (requests per minute)
    trip_creations_per_min: int = 10


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
