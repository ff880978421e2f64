"""Configuration package."""

from finance_tracker.config.settings import (
    AppSettings,
    SearchSettings,
    SeedSettings,
    Settings,
    StorageSettings,
    get_settings,
    validate_all_settings,
)

__all__ = [
    "AppSettings",
    "SearchSettings",
    "SeedSettings",
    "Settings",
    "StorageSettings",
    "get_settings",
    "validate_all_settings",
]
