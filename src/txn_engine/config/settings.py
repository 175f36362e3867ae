"""Application settings and configuration."""

from typing import Optional

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Engine configuration loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_prefix="TXN_ENGINE_",
    )

    app_name: str = "Transaction Enrichment Engine"
    app_version: str = "0.1.0"

    # Remote store (None = offline in-memory sources)
    api_base_url: Optional[str] = None
    # Opaque bearer credential; its lifecycle is owned elsewhere
    api_token: Optional[str] = None

    # Transport
    request_timeout_seconds: float = 10.0
    retry_attempts: int = 3
    retry_delay_seconds: float = 1.0

    # Cache freshness
    list_stale_seconds: int = 2 * 60
    detail_stale_seconds: int = 5 * 60

    log_level: str = "INFO"


# Global settings instance (can be replaced at runtime)
_settings: Optional[Settings] = None


def get_settings() -> Settings:
    """Return the current settings instance."""
    global _settings
    if _settings is None:
        _settings = Settings()
    return _settings


def set_settings(settings: Settings) -> None:
    """Set the global settings instance."""
    global _settings
    _settings = settings


def reset_settings() -> None:
    """Reset settings to force reload."""
    global _settings
    _settings = None
