"""Tests for settings, error types and structured logging."""

from __future__ import annotations

import io
import logging

import orjson
import pytest

from placeholder.foundation.config import (
    PlaceholderSettings,
    clear_settings_cache,
    get_settings,
    normalize_strategy_name,
)
from placeholder.foundation.errors import ErrorCode, PlaceholderError, PlaceholderException
from placeholder.runtime.observability import BoundLogger, ConsoleRenderer, JsonRenderer
from placeholder.runtime.strategies import get_registry


# ─────────────────────────────────────────────────────────────────────────────
# Settings
# ─────────────────────────────────────────────────────────────────────────────


def test_default_settings() -> None:
    settings = get_settings()
    assert settings.default_strategy == "parallel"
    assert settings.strict is False
    assert settings.on_duplicate == "last_wins"
    assert settings.rejects_duplicates is False
    assert get_settings() is settings


def test_settings_from_env(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("PLACEHOLDER_DEFAULT_STRATEGY", "parallelLimit")
    monkeypatch.setenv("PLACEHOLDER_STRICT", "true")
    monkeypatch.setenv("PLACEHOLDER_LOG_LEVEL", "DEBUG")
    clear_settings_cache()
    
    settings = get_settings()
    assert settings.default_strategy == "parallel_limit"
    assert settings.strict is True
    assert settings.logging.level == "DEBUG"


def test_registry_default_follows_settings(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("PLACEHOLDER_DEFAULT_STRATEGY", "series")
    clear_settings_cache()
    assert get_registry().default == "series"


def test_invalid_duplicate_policy_rejected() -> None:
    with pytest.raises(ValueError):
        PlaceholderSettings(on_duplicate="first_wins")  # type: ignore[arg-type]


@pytest.mark.parametrize(("raw", "expected"), [
    ("parallel", "parallel"),
    ("parallelLimit", "parallel_limit"),
    ("Parallel-Limit", "parallel_limit"),
    ("settled_limit", "settled_limit"),
])
def test_normalize_strategy_name(raw: str, expected: str) -> None:
    assert normalize_strategy_name(raw) == expected


# ─────────────────────────────────────────────────────────────────────────────
# Errors
# ─────────────────────────────────────────────────────────────────────────────


def test_error_render_and_classification() -> None:
    err = PlaceholderError(message="  Slot 'a' is already collected ", code=ErrorCode.DUPLICATE_REFERENCE, details="x")
    assert err.message == "Slot 'a' is already collected"
    assert err.render() == "[DUPLICATE_REFERENCE] Slot 'a' is already collected (x)"
    assert err.during_collection
    assert not PlaceholderError(message="m", code=ErrorCode.RESULT_MISMATCH).during_collection


def test_error_accepts_exception_message() -> None:
    assert PlaceholderError(message=ValueError("bad")).message == "bad"  # type: ignore[arg-type]


def test_exception_wraps_error() -> None:
    exc = PlaceholderException.create("no such strategy", ErrorCode.UNKNOWN_STRATEGY)
    assert exc.code == ErrorCode.UNKNOWN_STRATEGY
    assert str(exc) == "[UNKNOWN_STRATEGY] no such strategy"
    with pytest.raises(ValueError):
        PlaceholderError(message="")


# ─────────────────────────────────────────────────────────────────────────────
# Logging
# ─────────────────────────────────────────────────────────────────────────────


def test_console_renderer_output() -> None:
    out = io.StringIO()
    log = BoundLogger(context={"logger": "placeholder"}, _renderer=ConsoleRenderer(output=out, colors=False,
                                                                                     show_timestamp=False),
                      _level=logging.DEBUG)
    
    log.bind(strategy="series").info("executed", size=3)
    
    assert out.getvalue() == '[info] executed logger="placeholder" size=3 strategy="series"\n'


def test_json_renderer_output() -> None:
    out = io.StringIO()
    log = BoundLogger(_renderer=JsonRenderer(output=out), _level=logging.INFO)
    
    log.bind(batch="b1").warning("execution failed", error="boom")
    log.debug("dropped")
    
    lines = out.getvalue().splitlines()
    assert len(lines) == 1
    record = orjson.loads(lines[0])
    assert record["level"] == "warning"
    assert record["event"] == "execution failed"
    assert record["batch"] == "b1"
    assert record["error"] == "boom"


def test_logger_level_filtering() -> None:
    out = io.StringIO()
    log = BoundLogger(_renderer=JsonRenderer(output=out), _level=logging.ERROR)
    log.info("hidden")
    log.error("shown")
    assert "hidden" not in out.getvalue()
    assert "shown" in out.getvalue()
