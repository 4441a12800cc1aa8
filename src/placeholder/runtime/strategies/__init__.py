"""Concurrency strategies and the registry that exposes them to placeholders.

Usage:
    from placeholder.runtime.strategies import get_registry, parallel_limit
    
    results = await parallel_limit(ops, 4)
    get_registry().names()  # ['parallel', 'parallel_limit', 'series', 'settled', 'settled_limit']
"""

from .builtin import (
    Operation,
    Settled,
    SettledStatus,
    invoke,
    parallel,
    parallel_limit,
    series,
    settled,
    settled_limit,
)
from .registry import (
    ENTRY_PREFIX,
    Strategy,
    StrategyRegistry,
    builtin_registry,
    entry_point_name,
    get_registry,
    reset_registry,
    set_registry,
)

__all__ = [
    "ENTRY_PREFIX",
    "Operation",
    "Settled",
    "SettledStatus",
    "Strategy",
    "StrategyRegistry",
    "builtin_registry",
    "entry_point_name",
    "get_registry",
    "invoke",
    "parallel",
    "parallel_limit",
    "reset_registry",
    "series",
    "set_registry",
    "settled",
    "settled_limit",
]
