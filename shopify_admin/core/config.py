"""Library configuration using Pydantic settings."""

from functools import lru_cache
from typing import Literal

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Shopify credentials and client settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Environment
    environment: Literal["development", "staging", "production"] = "development"
    debug: bool = False

    # Shop credentials
    shopify_domain: str = ""
    shopify_api_key: str = ""
    shopify_api_secret: str = ""
    shopify_password: str = ""  # private apps only
    shopify_access_token: str = ""  # OAuth apps, once installed

    # HTTP
    shopify_api_version: str | None = None  # None keeps the unversioned /admin/ root
    shopify_timeout: float = 30.0


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()


settings = get_settings()
