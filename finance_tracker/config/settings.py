"""
Configuration Management for Finance Tracker

Uses pydantic-settings for type-safe configuration from environment variables.

All configuration is centralized here so storage locations, search behaviour
and the optional first-run seed can be changed without touching code.
"""

from functools import lru_cache
from pathlib import Path
from typing import Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class StorageSettings(BaseSettings):
    """Key-value store configuration."""

    model_config = SettingsConfigDict(
        env_prefix="TRACKER_STORAGE_",
        extra="ignore"
    )

    data_dir: Path = Field(
        default=Path("data"),
        description="Directory holding one JSON file per stored key"
    )
    data_key: str = Field(
        default="moneyTrackerData",
        min_length=1,
        description="Key of the transactions + settings document"
    )
    preferences_key: str = Field(
        default="userPreferences",
        min_length=1,
        description="Key of the presentation preferences document"
    )

    @field_validator('data_key', 'preferences_key')
    @classmethod
    def validate_key(cls, v: str) -> str:
        """Keys become file names, so path separators are not allowed."""
        if "/" in v or "\\" in v:
            raise ValueError(f"Storage key must not contain path separators: {v}")
        return v


class SearchSettings(BaseSettings):
    """Live search configuration."""

    model_config = SettingsConfigDict(
        env_prefix="TRACKER_SEARCH_",
        extra="ignore"
    )

    debounce_ms: int = Field(
        default=300,
        ge=0,
        le=5000,
        description="Delay after the latest keystroke before a search runs"
    )
    case_insensitive: bool = Field(
        default=True,
        description="Default case sensitivity for search patterns"
    )

    @property
    def debounce_seconds(self) -> float:
        return self.debounce_ms / 1000


class SeedSettings(BaseSettings):
    """First-run sample data configuration."""

    model_config = SettingsConfigDict(
        env_prefix="TRACKER_SEED_",
        extra="ignore"
    )

    source: Optional[str] = Field(
        default=None,
        description="Path or http(s) URL of a JSON array of sample transactions"
    )
    timeout_seconds: float = Field(
        default=5.0,
        gt=0,
        le=60,
        description="Timeout for fetching the seed"
    )


class AppSettings(BaseSettings):
    """
    Main application settings.

    Loads configuration from environment variables and .env file.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )

    app_environment: str = Field(
        default="development",
        description="Application environment"
    )
    log_level: str = Field(
        default="INFO",
        description="Minimum log level"
    )
    log_json: bool = Field(
        default=True,
        description="Render log lines as JSON (console rendering otherwise)"
    )

    @field_validator('log_level')
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        level = v.strip().upper()
        if level not in {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}:
            raise ValueError(f"Unknown log level: {v}")
        return level


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

    @property
    def storage(self) -> StorageSettings:
        return StorageSettings()

    @property
    def search(self) -> SearchSettings:
        return SearchSettings()

    @property
    def seed(self) -> SeedSettings:
        return SeedSettings()

    @property
    def app(self) -> AppSettings:
        return AppSettings()


@lru_cache()
def get_settings() -> Settings:
    """
    Get application settings (cached).

    Call get_settings.cache_clear() to reload if needed.
    """
    return Settings()


def validate_all_settings() -> dict[str, bool]:
    """
    Validate all settings groups.

    Returns a dict of {setting_name: is_valid} plus `<name>_error` entries
    for the groups that failed. Useful for startup checks.
    """
    results = {}
    settings = get_settings()

    for name in ("storage", "search", "seed", "app"):
        try:
            getattr(settings, name)
            results[name] = True
        except Exception as e:
            results[name] = False
            results[f"{name}_error"] = str(e)

    return results
