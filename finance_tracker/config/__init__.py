"""Configuration package."""

from finance_tracker.config.settings import (
    AppSettings,
    MongoSettings,
    SessionSettings,
    Settings,
    get_settings,
    validate_all_settings,
)

__all__ = [
    "AppSettings",
    "MongoSettings",
    "SessionSettings",
    "Settings",
    "get_settings",
    "validate_all_settings",
]
