"""
Settings Module
===============

Pydantic-based configuration with environment variable loading.

Version: 0.1.0
"""

from enum import Enum
from functools import lru_cache

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Environment(str, Enum):
    """Deployment environment."""

    DEVELOPMENT = "development"
    STAGING = "staging"
    PRODUCTION = "production"
    TESTING = "testing"


class LogLevel(str, Enum):
    """Logging levels."""

    DEBUG = "DEBUG"
    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"
    CRITICAL = "CRITICAL"


class ScoringSettings(BaseSettings):
    """Credit scoring engine configuration."""

    model_config = SettingsConfigDict(env_prefix="SCORING_")

    cache_ttl_seconds: int = 300
    # Advisory only: exceeding it logs a warning, nothing is aborted
    processing_budget_ms: float = 50.0


class FraudSettings(BaseSettings):
    """Fraud detection engine configuration."""

    model_config = SettingsConfigDict(env_prefix="FRAUD_")

    # Velocity limits
    applications_per_hour: int = 5
    applications_per_day: int = 20
    ip_requests_per_hour: int = 5

    # Geolocation
    impossible_travel_kmh: float = 1000.0
    location_lookback_hours: int = 24
    high_risk_countries: str = "KP,IR,SY"

    # High-risk response
    blacklist_duration_hours: int = 24

    model_version: str = "1.0.0"

    @property
    def high_risk_country_list(self) -> list[str]:
        """Parse high-risk countries string into a list of ISO codes."""
        return [c.strip().upper() for c in self.high_risk_countries.split(",") if c.strip()]


class ProviderSettings(BaseSettings):
    """External data provider call policy."""

    model_config = SettingsConfigDict(env_prefix="PROVIDER_")

    timeout_seconds: float = 10.0
    max_retries: int = 3
    retry_wait_seconds: float = 0.5

    # Optional HTTP endpoints; empty means the provider is not configured
    credit_bureau_url: str = ""
    government_url: str = ""
    alternative_data_url: str = ""


class Settings(BaseSettings):
    """
    Main application settings.

    Loads configuration from environment variables with sensible defaults.
    Use the global `settings` singleton or call `get_settings()`.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # General
    environment: Environment = Environment.DEVELOPMENT
    debug: bool = True
    log_level: LogLevel = LogLevel.INFO

    # Engines
    scoring: ScoringSettings = Field(default_factory=ScoringSettings)
    fraud: FraudSettings = Field(default_factory=FraudSettings)
    providers: ProviderSettings = Field(default_factory=ProviderSettings)

    @field_validator("log_level", mode="before")
    @classmethod
    def uppercase_log_level(cls, v: str | LogLevel) -> LogLevel:
        """Ensure log level is uppercase."""
        if isinstance(v, str):
            return LogLevel(v.upper())
        return v

    @property
    def is_development(self) -> bool:
        """Check if running in development mode."""
        return self.environment == Environment.DEVELOPMENT

    @property
    def is_production(self) -> bool:
        """Check if running in production mode."""
        return self.environment == Environment.PRODUCTION

    @property
    def is_testing(self) -> bool:
        """Check if running in test mode."""
        return self.environment == Environment.TESTING


@lru_cache
def get_settings() -> Settings:
    """
    Get cached settings instance.

    Returns:
        Settings: Application settings singleton.
    """
    return Settings()
