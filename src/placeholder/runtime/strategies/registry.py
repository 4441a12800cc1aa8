"""Strategy registry: the task-orchestration collaborator seen by placeholders.

A registry maps strategy names to strategy functions of the shape
``async (ops, *args) -> list``. Placeholders resolve ``execute_<name>``
entry points against the registry they were built with, falling back to
the process-wide one. Swap the whole collaborator with set_registry().

Example:
    >>> reg = StrategyRegistry()
    >>> @reg.register("reversed_series")
    ... async def reversed_series(ops):
    ...     return list(reversed([await invoke(op) for op in reversed(ops)]))
    >>> set_registry(reg)
"""

from __future__ import annotations

from collections.abc import Awaitable, Callable, Iterator, Sequence
from typing import Any, overload

from placeholder.foundation.config import get_settings, normalize_strategy_name
from placeholder.foundation.errors import ErrorCode, PlaceholderException

from .builtin import parallel, parallel_limit, series, settled, settled_limit

Strategy = Callable[..., Awaitable[Sequence[Any]]]

ENTRY_PREFIX = "execute_"


def entry_point_name(name: str) -> str:
    """Name of the Placeholder method bound to a strategy (``parallelLimit`` -> ``execute_parallel_limit``)."""
    return ENTRY_PREFIX + normalize_strategy_name(name)


class StrategyRegistry:
    """Name -> strategy lookup table.
    
    Names are normalized, so ``parallelLimit``, ``parallel-limit`` and
    ``parallel_limit`` all refer to the same entry.
    
    Attributes:
        default: Strategy name used by Placeholder.execute() with no name
    """
    
    __slots__ = ("_strategies", "default")
    
    def __init__(self, default: str | None = None) -> None:
        self._strategies: dict[str, Strategy] = {}
        self.default = normalize_strategy_name(default or get_settings().default_strategy)
    
    @overload
    def register(self, name: str) -> Callable[[Strategy], Strategy]: ...
    @overload
    def register(self, name: str, fn: Strategy) -> Strategy: ...
    
    def register(self, name: str, fn: Strategy | None = None) -> Strategy | Callable[[Strategy], Strategy]:
        """Register a strategy under ``name``. Usable directly or as a decorator."""
        key = normalize_strategy_name(name)
        if not key.isidentifier():
            raise PlaceholderException.create(
                f"Strategy name {name!r} cannot form a method name", ErrorCode.INVALID_STRATEGY,
            )
        
        def decorator(func: Strategy) -> Strategy:
            if not callable(func):
                raise PlaceholderException.create(
                    f"Strategy {name!r} must be callable", ErrorCode.INVALID_STRATEGY, details=repr(func),
                )
            self._strategies[key] = func
            return func
        
        return decorator(fn) if fn is not None else decorator
    
    def unregister(self, name: str) -> None:
        self._strategies.pop(normalize_strategy_name(name), None)
    
    def get(self, name: str) -> Strategy:
        """Look up a strategy.
        
        Raises:
            PlaceholderException: UNKNOWN_STRATEGY if nothing is registered under name
        """
        try:
            return self._strategies[normalize_strategy_name(name)]
        except KeyError:
            raise PlaceholderException.create(
                f"Unknown strategy: {name!r}",
                ErrorCode.UNKNOWN_STRATEGY,
                details=f"available: {', '.join(self.names()) or 'none'}",
            ) from None
    
    def names(self) -> list[str]:
        return sorted(self._strategies)
    
    def entry_points(self) -> list[str]:
        return [entry_point_name(n) for n in self.names()]
    
    def __contains__(self, name: object) -> bool:
        return isinstance(name, str) and normalize_strategy_name(name) in self._strategies
    
    def __len__(self) -> int:
        return len(self._strategies)
    
    def __iter__(self) -> Iterator[str]:
        return iter(self.names())
    
    def __repr__(self) -> str:
        return f"StrategyRegistry(default={self.default!r}, strategies={self.names()})"


def builtin_registry(default: str | None = None) -> StrategyRegistry:
    """Build a registry holding the built-in strategies."""
    reg = StrategyRegistry(default)
    reg.register("parallel", parallel)
    reg.register("parallel_limit", parallel_limit)
    reg.register("series", series)
    reg.register("settled", settled)
    reg.register("settled_limit", settled_limit)
    return reg


# Global registry (lazy)
_registry: StrategyRegistry | None = None


def get_registry() -> StrategyRegistry:
    """Get the process-wide strategy registry, building it on first use."""
    global _registry
    if _registry is None:
        _registry = builtin_registry()
    return _registry


def set_registry(registry: StrategyRegistry) -> None:
    """Replace the process-wide collaborator wholesale."""
    global _registry
    _registry = registry


def reset_registry() -> None:
    """Drop the process-wide registry so the next get_registry() rebuilds the built-ins."""
    global _registry
    _registry = None
