"""Application configuration.

Loads settings from environment variables with sensible defaults.
"""

from functools import lru_cache

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # API
    api_version: str = "0.1.0"
    debug: bool = False

    # Database
    database_url: str = "postgresql+asyncpg://storefront:storefront_dev_password@db:5432/storefront"
    db_pool_size: int = 5

    # Authentication (catalog write operations)
    api_key: str = "dev-api-key-change-in-production"

    # Pagination
    default_page_limit: int = 10
    max_page_limit: int = 100

    # Logging
    log_level: str = "INFO"
    log_json: bool = True

    class Config:
        """Pydantic configuration."""

        env_prefix = "STOREFRONT_"
        env_file = ".env"
        env_file_encoding = "utf-8"


@lru_cache
def get_settings() -> Settings:
    """Get application settings.

    Returns:
        Cached settings instance.
    """
    return Settings()
