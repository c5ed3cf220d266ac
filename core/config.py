"""
Application configuration using Pydantic Settings.

Typed settings for the back-office, loaded from environment variables and
an optional ``.env`` file.
"""

from __future__ import annotations

from decimal import Decimal
from functools import lru_cache
from typing import Literal
from urllib.parse import urlparse

from pydantic import Field, SecretStr, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class DatabaseSettings(BaseSettings):
    """Database connection settings."""

    model_config = SettingsConfigDict(env_prefix="DB_")

    url: str | None = Field(
        default=None,
        alias="DATABASE_URL",
        description="Full database URL (takes precedence over individual params)",
    )

    name: str = Field(default="ecommerce_backoffice", description="Database name")
    user: str = Field(default="postgres", description="Database user")
    password: SecretStr = Field(default=SecretStr("postgres"), description="Database password")
    host: str = Field(default="localhost", description="Database host")
    port: int = Field(default=5432, description="Database port", ge=1, le=65535)

    @property
    def connection_url(self) -> str:
        """Return DATABASE_URL if set, otherwise build it from the individual params."""
        if self.url:
            return self.url
        return (
            f"postgresql://{self.user}:{self.password.get_secret_value()}"
            f"@{self.host}:{self.port}/{self.name}"
        )

    @property
    def safe_url(self) -> str:
        """Get database URL without password for logging."""
        if self.url:
            parsed = urlparse(self.url)
            if parsed.password:
                return self.url.replace(f":{parsed.password}@", ":***@")
            return self.url
        return f"postgresql://{self.user}@{self.host}:{self.port}/{self.name}"


class RedisSettings(BaseSettings):
    """Redis connection settings."""

    model_config = SettingsConfigDict(env_prefix="REDIS_")

    url: str = Field(default="redis://localhost:6379/0", description="Redis connection URL")


class LoggingSettings(BaseSettings):
    """Structured logging settings."""

    model_config = SettingsConfigDict(env_prefix="LOG_")

    level: str = Field(default="INFO", description="Minimum log level")
    json_format: bool = Field(default=False, description="Emit JSON log lines")

    @field_validator("level")
    @classmethod
    def normalize_level(cls, v: str) -> str:
        """Upper-case and validate the level name."""
        level = v.strip().upper()
        if level not in {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}:
            msg = f"Unknown log level: {v}"
            raise ValueError(msg)
        return level


class TaxSettings(BaseSettings):
    """Tax calculation settings."""

    model_config = SettingsConfigDict(env_prefix="TAX_")

    amount_places: int = Field(
        default=2,
        ge=0,
        le=6,
        description="Decimal places tax amounts are rounded to when stored on orders",
    )

    @property
    def quantum(self) -> Decimal:
        """Return the quantize exponent for stored tax amounts (e.g. 0.01)."""
        return Decimal(1).scaleb(-self.amount_places)


class ShippingSettings(BaseSettings):
    """Shipping and carrier settings."""

    model_config = SettingsConfigDict(env_prefix="SHIPPING_")

    carrier_timeout: float = Field(
        default=30.0, gt=0, description="Timeout in seconds for carrier API requests"
    )
    quote_cache_ttl: int = Field(
        default=300, ge=0, description="Seconds a carrier quote stays cached (0 disables)"
    )
    origin_country: str = Field(default="US", description="Warehouse country code")
    origin_state: str = Field(default="", description="Warehouse state/province code")
    origin_city: str = Field(default="", description="Warehouse city")
    origin_postal_code: str = Field(default="", description="Warehouse postal code")

    @field_validator("origin_country")
    @classmethod
    def normalize_country(cls, v: str) -> str:
        """Upper-case the origin country code."""
        return v.strip().upper()


class Settings(BaseSettings):
    """
    Main application settings.

    Aggregates all configuration sections.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    environment: Literal["development", "production", "test"] = Field(
        default="development", description="Application environment"
    )
    debug: bool = Field(default=False, description="Debug mode")
    secret_key: SecretStr = Field(
        default=SecretStr("django-insecure-change-me-in-production"),
        description="Django secret key",
    )
    allowed_hosts: list[str] = Field(
        default_factory=lambda: ["localhost", "127.0.0.1"],
        description="Allowed hosts",
    )

    database: DatabaseSettings = Field(default_factory=DatabaseSettings)
    redis: RedisSettings = Field(default_factory=RedisSettings)
    logging: LoggingSettings = Field(default_factory=LoggingSettings)
    tax: TaxSettings = Field(default_factory=TaxSettings)
    shipping: ShippingSettings = Field(default_factory=ShippingSettings)

    @field_validator("allowed_hosts", mode="before")
    @classmethod
    def parse_allowed_hosts(cls, v: str | list[str]) -> list[str]:
        """Parse allowed hosts from comma-separated string or list."""
        if isinstance(v, str):
            return [h.strip() for h in v.split(",") if h.strip()]
        return v

    @property
    def is_production(self) -> bool:
        """Check if running in production environment."""
        return self.environment == "production"

    @property
    def is_development(self) -> bool:
        """Check if running in development environment."""
        return self.environment == "development"

    @property
    def is_test(self) -> bool:
        """Check if running in test environment."""
        return self.environment == "test"


@lru_cache
def get_settings() -> Settings:
    """
    Get cached application settings.

    Returns:
        Configured Settings instance.
    """
    return Settings()
