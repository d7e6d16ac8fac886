"""Application configuration."""

from functools import lru_cache

from pydantic_settings import BaseSettings

from affiliation_scout.constants import (
    DEFAULT_DATABASE_URL,
    DEFAULT_MAX_RESULTS,
    DEFAULT_TIMEOUT,
)


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # Database
    database_url: str = DEFAULT_DATABASE_URL

    # API Keys
    ncbi_api_key: str = ""

    # Upstream
    max_results: int = DEFAULT_MAX_RESULTS
    request_timeout: float = DEFAULT_TIMEOUT

    # App Settings
    host: str = "0.0.0.0"
    port: int = 8081
    cors_origins: list[str] = ["*"]
    log_level: str = "INFO"

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"
        frozen = True


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
