"""Environment-based configuration using pydantic-settings.

Example:
    >>> from placeholder.foundation.config import get_settings
    >>> settings = get_settings()
    >>> settings.default_strategy
    'parallel'
    
    # Or with environment variables:
    # PLACEHOLDER_DEFAULT_STRATEGY=series
    # PLACEHOLDER_ON_DUPLICATE=error
    # PLACEHOLDER_LOG_LEVEL=DEBUG
"""

from __future__ import annotations

from functools import lru_cache
from typing import Literal

from pydantic import Field, computed_field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class LoggingSettings(BaseSettings):
    """Logging configuration."""
    
    model_config = SettingsConfigDict(
        env_prefix="PLACEHOLDER_LOG_",
        extra="ignore",
    )
    
    level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = "WARNING"
    format: Literal["console", "json", "none"] = "console"


class PlaceholderSettings(BaseSettings):
    """Root settings for placeholder instances.
    
    Loads configuration from environment variables with PLACEHOLDER_ prefix.
    Instance constructor arguments always override these defaults.
    
    Example environment variables:
        PLACEHOLDER_DEFAULT_STRATEGY=parallel_limit
        PLACEHOLDER_STRICT=true
        PLACEHOLDER_ON_DUPLICATE=error
    """
    
    model_config = SettingsConfigDict(
        env_prefix="PLACEHOLDER_",
        env_file=".env",
        env_file_encoding="utf-8",
        env_nested_delimiter="__",
        extra="ignore",
        validate_default=True,
    )
    
    default_strategy: str = Field(default="parallel", min_length=1, description="Strategy used by execute()")
    strict: bool = Field(default=False, description="Only collect explicit Task markers, not bare callables")
    on_duplicate: Literal["last_wins", "error"] = Field(
        default="last_wins",
        description="Policy when the same container/key is collected twice",
    )
    
    logging: LoggingSettings = Field(default_factory=LoggingSettings)
    
    @field_validator("default_strategy", mode="before")
    @classmethod
    def _normalize_strategy(cls, v: str) -> str:
        """Accept 'parallelLimit' or 'Parallel-Limit' style names."""
        return normalize_strategy_name(v) if isinstance(v, str) else v
    
    @computed_field
    @property
    def rejects_duplicates(self) -> bool:
        return self.on_duplicate == "error"


def normalize_strategy_name(name: str) -> str:
    """Convert 'parallelLimit' or 'parallel-limit' to 'parallel_limit'."""
    out: list[str] = []
    for i, ch in enumerate(name.strip()):
        if ch.isupper() and i and out[-1] != "_":
            out.append("_")
        out.append("_" if ch == "-" else ch.lower())
    return "".join(out)


@lru_cache(maxsize=1)
def get_settings() -> PlaceholderSettings:
    """Get the global settings instance (cached)."""
    return PlaceholderSettings()


def clear_settings_cache() -> None:
    """Clear the settings cache (useful for testing).
    
    After calling this, the next get_settings() call will
    reload configuration from environment.
    """
    get_settings.cache_clear()
