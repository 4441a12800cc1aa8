"""Foundation: errors and configuration shared by core and runtime."""

from .config import LoggingSettings, PlaceholderSettings, clear_settings_cache, get_settings
from .errors import ErrorCode, PlaceholderError, PlaceholderException

__all__ = [
    "ErrorCode",
    "LoggingSettings",
    "PlaceholderError",
    "PlaceholderException",
    "PlaceholderSettings",
    "clear_settings_cache",
    "get_settings",
]
