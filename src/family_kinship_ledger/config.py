"""Centralized configuration management using pydantic-settings.

Configuration is loaded from environment variables with sensible defaults.
All settings can be overridden via environment variables or a .env file.
"""

from enum import Enum
from functools import lru_cache
from pathlib import Path
from typing import Literal

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Environment(str, Enum):
    """Application environment."""

    DEVELOPMENT = "development"
    TESTING = "testing"
    STAGING = "staging"
    PRODUCTION = "production"


class LogLevel(str, Enum):
    """Log level options."""

    DEBUG = "DEBUG"
    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"
    CRITICAL = "CRITICAL"


class Settings(BaseSettings):
    """Application settings loaded from environment variables.

    All settings have sensible defaults for development. Override via
    environment variables (prefixed with FKL_) or .env file.

    Examples:
        FKL_SQLITE_PATH=/var/lib/fkl/families.db
        FKL_LOG_LEVEL=DEBUG
        FKL_ENVIRONMENT=production
        FKL_CUSTOMARY_MAX_WIVES=3
    """

    model_config = SettingsConfigDict(
        env_prefix="FKL_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Application
    app_name: str = "Family Kinship Ledger"
    app_version: str = "0.1.0"
    environment: Environment = Environment.DEVELOPMENT

    # Storage
    sqlite_path: Path = Field(
        default=Path("family_kinship_ledger.db"),
        description="SQLite database file holding family snapshots",
    )

    # Logging
    log_level: LogLevel = LogLevel.INFO
    log_format: Literal["json", "console"] = Field(
        default=None,
        validate_default=True,
        description="Log output format: 'json' for production, 'console' for development",
    )
    log_file: Path | None = Field(default=None, description="Optional log file path")

    # Family structure policy
    adult_age: int = Field(default=18, ge=1, description="Age of legal majority")
    elder_age: int = Field(
        default=65, ge=1, description="Age from which a member is treated as an elder"
    )
    cohabitation_min_years: int = Field(
        default=2,
        ge=0,
        description="Minimum cohabitation duration for an S.29 dependency claim",
    )
    adoption_min_age_gap: int = Field(
        default=18, ge=0, description="Expected age gap between adopter and adoptee"
    )
    enforce_marriage_regime: bool = Field(
        default=True,
        description="Reject marriages that breach monogamous regimes or wife caps",
    )
    islamic_max_wives: int = Field(default=4, ge=1)
    customary_max_wives: int | None = Field(
        default=None, ge=1, description="Cap on customary wives; None means uncapped"
    )

    # Dashboard
    dashboard_timeline_limit: int = Field(default=10, ge=1, le=500)

    @field_validator("log_format", mode="before")
    @classmethod
    def set_log_format_from_environment(cls, v: str, info) -> str:
        """Default to JSON logging in production."""
        if v is None:
            env = info.data.get("environment")
            if env == Environment.PRODUCTION:
                return "json"
        return v or "console"

    @field_validator("elder_age", mode="after")
    @classmethod
    def elder_after_majority(cls, v: int, info) -> int:
        adult_age = info.data.get("adult_age")
        if adult_age is not None and v <= adult_age:
            raise ValueError("elder_age must be greater than adult_age")
        return v


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance.

    Call get_settings.cache_clear() to reload settings.
    """
    return Settings()
