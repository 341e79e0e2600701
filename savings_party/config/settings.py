"""
Configuration Management for Savings Party

Uses pydantic-settings for type-safe configuration from environment variables.

DESIGN DECISION: All configuration is centralized here.
The party size cap, storage location and logging output are the only knobs;
everything else about progression is fixed.
"""

from functools import lru_cache
from typing import Literal

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class StorageSettings(BaseSettings):
    """Key-value storage configuration."""

    model_config = SettingsConfigDict(
        env_prefix="SAVINGS_STORAGE_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )

    backend: Literal["json", "memory"] = Field(
        default="json",
        description="Where the party is kept: JSON files on disk or memory only"
    )
    data_dir: str = Field(
        default=".savings_party",
        description="Directory holding one JSON file per storage key"
    )

    # Keys within the store
    accounts_key: str = Field(
        default="pokemon-savings-accounts",
        description="Key for the account collection"
    )
    settings_key: str = Field(
        default="pokemon-savings-settings",
        description="Key for user preferences"
    )
    achievements_key: str = Field(
        default="pokemon-savings-achievements",
        description="Key for unlocked achievements"
    )
    activity_key: str = Field(
        default="pokemon-savings-activity",
        description="Key for the activity log"
    )

    write_retries: int = Field(
        default=3,
        ge=1,
        le=10,
        description="Attempts per write before giving up"
    )

    @field_validator("accounts_key", "settings_key", "achievements_key", "activity_key")
    @classmethod
    def validate_key(cls, v: str) -> str:
        """Keys become file names, so keep them path-safe."""
        if not v or "/" in v or "\\" in v or v.startswith("."):
            raise ValueError(f"Invalid storage key: {v!r}")
        return v


class LoggingSettings(BaseSettings):
    """Structured logging configuration."""

    model_config = SettingsConfigDict(
        env_prefix="SAVINGS_LOG_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )

    level: str = Field(
        default="INFO",
        description="Minimum log level"
    )
    json_output: bool = Field(
        default=True,
        description="Render JSON lines instead of console output"
    )

    @field_validator("level")
    @classmethod
    def validate_level(cls, v: str) -> str:
        v = v.upper()
        if v not in {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}:
            raise ValueError(f"Unknown log level: {v}")
        return v


class AppSettings(BaseSettings):
    """
    Main application settings.

    Loads configuration from environment variables and .env file.
    """

    model_config = SettingsConfigDict(
        env_prefix="SAVINGS_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )

    # Environment
    app_environment: str = Field(
        default="development",
        description="Application environment"
    )
    debug_mode: bool = Field(
        default=False,
        description="Enable debug mode"
    )

    # Party limits
    max_accounts: int = Field(
        default=6,
        ge=1,
        le=24,
        description="Maximum number of accounts in the party"
    )
    max_activity_entries: int = Field(
        default=50,
        ge=1,
        le=1000,
        description="Activity log entries kept (newest first)"
    )

    # Achievements
    big_saver_threshold: float = Field(
        default=1000.0,
        gt=0,
        description="Total saved across all accounts for the 'Big Saver' achievement"
    )


class Settings(BaseSettings):
    """
    Root settings container.

    Aggregates all sub-settings for easy access.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )

    # Note: These are loaded lazily to allow partial configuration

    @property
    def storage(self) -> StorageSettings:
        return StorageSettings()

    @property
    def logging(self) -> LoggingSettings:
        return LoggingSettings()

    @property
    def app(self) -> AppSettings:
        return AppSettings()


@lru_cache()
def get_settings() -> Settings:
    """
    Get application settings (cached).

    Uses LRU cache to ensure settings are only loaded once.
    Call get_settings.cache_clear() to reload if needed.
    """
    return Settings()


def validate_all_settings() -> dict[str, bool]:
    """
    Validate all settings are properly configured.

    Returns a dict of {setting_name: is_valid}, plus
    {setting_name}_error entries for the failures.
    """
    results = {}

    settings = get_settings()

    for name in ("storage", "logging", "app"):
        try:
            _ = getattr(settings, name)
            results[name] = True
        except Exception as e:
            results[name] = False
            results[f"{name}_error"] = str(e)

    return results
