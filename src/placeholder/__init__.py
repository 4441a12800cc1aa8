"""Placeholder - describe the shape of your data and how to compute each piece in one literal.

Build a nested structure whose leaves are zero-argument (sync or async)
operations, collect them with a Placeholder, execute them concurrently
under a named strategy, and find each result in the slot its operation
occupied.

Quick Start:
    >>> from placeholder import Placeholder
    >>>
    >>> pp = Placeholder()
    >>> page = pp({
    ...     "user": lambda: fetch_user(42),
    ...     "feed": pp({"posts": lambda: fetch_posts(42), "ads": lambda: fetch_ads()}),
    ... })
    >>> await pp.execute()
    >>> page["feed"]["posts"]
    [...]

Deep collection (one call for any nesting depth):
    >>> pp = Placeholder().deep(page)
    >>> await pp.execute_parallel_limit(4)

Custom writeback:
    >>> pp.revive(lambda container, key, value, results, i: container.setdefault("_raw", {}).update({key: value}))
    >>> pp.revive(IGNORE)  # keep pp.results, leave the structure untouched

Strategies:
    parallel, parallel_limit(n), series, settled, settled_limit(n); add more
    with get_registry().register(name, fn) or swap the set with set_registry().
"""

from __future__ import annotations

__version__ = "0.1.0"

from .core import IGNORE, BackRef, Placeholder, Reviver, Task, task
from .foundation import (
    ErrorCode,
    PlaceholderError,
    PlaceholderException,
    PlaceholderSettings,
    clear_settings_cache,
    get_settings,
)
from .runtime.observability import configure_logging, get_logger
from .runtime.strategies import (
    Settled,
    SettledStatus,
    StrategyRegistry,
    get_registry,
    reset_registry,
    set_registry,
)

__all__ = [
    "IGNORE",
    "BackRef",
    "ErrorCode",
    "Placeholder",
    "PlaceholderError",
    "PlaceholderException",
    "PlaceholderSettings",
    "Reviver",
    "Settled",
    "SettledStatus",
    "StrategyRegistry",
    "Task",
    "__version__",
    "clear_settings_cache",
    "configure_logging",
    "get_logger",
    "get_registry",
    "reset_registry",
    "set_registry",
    "task",
]
