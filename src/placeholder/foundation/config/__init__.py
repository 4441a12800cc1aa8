"""Configuration management using pydantic-settings."""

from .settings import (
    LoggingSettings,
    PlaceholderSettings,
    clear_settings_cache,
    get_settings,
    normalize_strategy_name,
)

__all__ = [
    "LoggingSettings",
    "PlaceholderSettings",
    "clear_settings_cache",
    "get_settings",
    "normalize_strategy_name",
]
