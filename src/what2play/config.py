"""
Application configuration using Pydantic Settings.

Loads configuration from environment variables with validation,
type coercion, and sensible defaults.
"""

from functools import lru_cache
from typing import Literal

from pydantic import Field, SecretStr, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class SteamAPIConfig(BaseSettings):
    """Steam API specific configuration."""

    model_config = SettingsConfigDict(env_prefix="STEAM_")

    api_key: SecretStr = Field(
        default=...,
        description="Steam Web API key from https://steamcommunity.com/dev/apikey",
    )
    base_url: str = Field(
        default="https://api.steampowered.com",
        description="Base URL for Steam Web API",
    )
    store_url: str = Field(
        default="https://store.steampowered.com/api",
        description="Base URL for Steam Store API",
    )
    requests_per_minute: int = Field(
        default=40,
        ge=1,
        le=600,
        description="Sustained pace for Store API requests",
    )
    burst_size: int = Field(
        default=10,
        ge=1,
        le=100,
        description="Store API requests allowed before pacing kicks in",
    )
    timeout_seconds: int = Field(
        default=30,
        ge=5,
        le=120,
        description="HTTP request timeout in seconds",
    )


class DatabaseConfig(BaseSettings):
    """Persistent category store configuration."""

    model_config = SettingsConfigDict(env_prefix="DB_")

    url: str = Field(
        default="sqlite+aiosqlite:///what2play.db",
        description="SQLAlchemy async database URL",
    )
    auth_token: SecretStr | None = Field(
        default=None,
        description="Auth token for remote libSQL databases",
    )
    echo: bool = Field(
        default=False,
        description="Log every SQL statement",
    )

    @field_validator("url")
    @classmethod
    def validate_async_driver(cls, v: str) -> str:
        """Only async drivers can back the store."""
        if "+" not in v.split("://", 1)[0]:
            raise ValueError(f"Database URL must name an async driver: {v}")
        return v

    @property
    def connection_url(self) -> str:
        """Database URL with the auth token appended, if any."""
        if self.auth_token is None:
            return self.url
        separator = "&" if "?" in self.url else "?"
        return f"{self.url}{separator}authToken={self.auth_token.get_secret_value()}"


class FetchConfig(BaseSettings):
    """Catalog fetching and paging behaviour."""

    model_config = SettingsConfigDict(env_prefix="FETCH_")

    category_concurrency: int = Field(
        default=10,
        ge=1,
        le=50,
        description="Maximum in-flight category requests during fan-out",
    )
    page_size: int = Field(
        default=20,
        ge=1,
        le=100,
        description="Games per page",
    )
    price_batch_size: int = Field(
        default=100,
        ge=1,
        le=500,
        description="App IDs per Store API price request",
    )


class RetryConfig(BaseSettings):
    """
    Retry behavior configuration.

    A single attempt by default: failed provider requests are
    surfaced once and never retried unless explicitly configured.
    """

    model_config = SettingsConfigDict(env_prefix="RETRY_")

    max_attempts: int = Field(
        default=1,
        ge=1,
        le=10,
        description="Maximum number of attempts per request",
    )
    base_delay_seconds: float = Field(
        default=1.0,
        ge=0.1,
        le=30.0,
        description="Base delay between retries (exponential backoff)",
    )
    max_delay_seconds: float = Field(
        default=60.0,
        ge=1.0,
        le=300.0,
        description="Maximum delay between retries",
    )
    exponential_base: float = Field(
        default=2.0,
        ge=1.5,
        le=4.0,
        description="Base for exponential backoff calculation",
    )


class LoggingConfig(BaseSettings):
    """Logging configuration."""

    model_config = SettingsConfigDict(env_prefix="LOG_")

    level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = Field(
        default="INFO",
        description="Logging level",
    )
    format: Literal["json", "console"] = Field(
        default="json",
        description="Log output format",
    )
    include_timestamp: bool = Field(
        default=True,
        description="Include timestamp in log entries",
    )


class Settings(BaseSettings):
    """
    Main application settings.

    Aggregates all configuration sections and provides
    a single entry point for configuration access.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Environment
    environment: Literal["development", "staging", "production"] = Field(
        default="development",
        description="Deployment environment",
    )

    # Sub-configurations
    steam: SteamAPIConfig = Field(default_factory=SteamAPIConfig)
    database: DatabaseConfig = Field(default_factory=DatabaseConfig)
    fetch: FetchConfig = Field(default_factory=FetchConfig)
    retry: RetryConfig = Field(default_factory=RetryConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)

    @property
    def is_production(self) -> bool:
        """Check if running in production environment."""
        return self.environment == "production"


@lru_cache
def get_settings() -> Settings:
    """
    Get cached application settings.

    Uses lru_cache to ensure settings are only loaded once
    and reused across the application.

    Returns:
        Settings: Application configuration instance
    """
    return Settings()
