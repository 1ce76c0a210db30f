"""Configuration settings for the SDN screening engine."""

from pydantic_settings import BaseSettings, SettingsConfigDict
from pydantic import Field
from functools import lru_cache
from enum import Enum


DEFAULT_SDN_API_URL = "https://sdn-api-w7wr.onrender.com"


class Environment(str, Enum):
    """Application environment."""
    DEVELOPMENT = "development"
    STAGING = "staging"
    PRODUCTION = "production"


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # App
    app_name: str = "SDN Screening API"
    app_version: str = "0.1.0"
    environment: Environment = Environment.DEVELOPMENT
    debug: bool = False

    # API Server
    host: str = "0.0.0.0"
    port: int = 8000
    api_prefix: str = "/v1"

    # Watchlist provider
    sdn_api_url: str = Field(
        default=DEFAULT_SDN_API_URL,
        description="Base URL of the SDN watchlist provider"
    )
    request_timeout: float = 30.0   # seconds, per provider request
    default_limit: int = 100

    # Batch screening
    max_concurrent: int = Field(default=10, ge=1)
    max_batch_size: int = Field(default=1000, ge=1)

    # Logging
    log_level: str = "INFO"
    log_json: bool = False


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
