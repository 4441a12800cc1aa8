"""Shared fixtures: isolate global settings and the strategy registry per test."""

import pytest

from placeholder.foundation.config import clear_settings_cache
from placeholder.runtime.strategies import reset_registry


@pytest.fixture(autouse=True)
def clean_globals(monkeypatch: pytest.MonkeyPatch) -> object:
    """Reset cached settings and the process-wide registry around each test."""
    for var in ("PLACEHOLDER_DEFAULT_STRATEGY", "PLACEHOLDER_STRICT", "PLACEHOLDER_ON_DUPLICATE"):
        monkeypatch.delenv(var, raising=False)
    clear_settings_cache()
    reset_registry()
    yield
    clear_settings_cache()
    reset_registry()
