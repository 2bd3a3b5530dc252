"""
Configuration management for the StreamFlow catalog client.
Uses pydantic-settings for environment variable loading.
"""
from functools import lru_cache
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # Client
    app_name: str = "StreamFlow"
    app_version: str = "0.1.0"
    debug: bool = False
    log_level: str = "INFO"

    # Data Sources (iptv-org API)
    iptv_api_base: str = "https://iptv-org.github.io/api"
    fetch_timeout_seconds: float = 60.0

    # Catalog presentation
    page_size: int = 40
    featured_count: int = 5
    display_locale: str = "en"
    placeholder_logo_base: str = "https://via.placeholder.com/150?text="

    # Preference store (key-value SQLite file)
    database_path: str = "data/streamflow_prefs.db"
    favorites_key: str = "streamflow_favorites"
    hidden_key: str = "streamflow_hidden"

    # Pydantic V2 configuration
    model_config = SettingsConfigDict(env_prefix="STREAMFLOW_", env_file=".env")


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
