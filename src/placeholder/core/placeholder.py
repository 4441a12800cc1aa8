"""Placeholder: collect task-valued entries, run them, write results back in place.

A Placeholder is a callable collector. Calling it on a container records
a back-reference for every task-valued entry and returns the container
unchanged, so it can wrap literals inline. execute() then runs every
collected operation under a named strategy and writes each result into
the slot its operation came from.

Example:
    >>> pp = Placeholder()
    >>> data = pp({
    ...     "teams": lambda: fetch_teams(),
    ...     "players": pp({
    ...         "active": lambda: fetch_players("active"),
    ...         "retired": lambda: fetch_players("retired"),
    ...     }),
    ... })
    >>> await pp.execute()                  # default strategy (parallel)
    >>> await pp.execute_parallel_limit(2)  # any registered strategy
    >>> data["players"]["active"]
    ['p1', 'p2']

One instance per batch: collecting again after execute() keeps the
earlier back-references, so a second execute() reruns them too. Use a
new instance, or clear(), for unrelated work.
"""

from __future__ import annotations

import time
from collections.abc import Callable, Sequence
from typing import Any, Final, Literal, Self, TypeVar, get_args

from placeholder.foundation.config import get_settings, normalize_strategy_name
from placeholder.foundation.errors import ErrorCode, PlaceholderException
from placeholder.runtime.interop import run_sync
from placeholder.runtime.observability import get_logger
from placeholder.runtime.strategies import ENTRY_PREFIX, StrategyRegistry, get_registry

from .collector import collect_shallow, walk_post_order
from .refs import BackRef

C = TypeVar("C")

Reviver = Callable[[Any, Any, Any, list[Any], int], None]
DuplicatePolicy = Literal["last_wins", "error"]
_DUPLICATE_POLICIES: Final = frozenset(get_args(DuplicatePolicy))

_log = get_logger("placeholder")


class _Ignore:
    """Reviver sentinel: keep results, skip writeback."""
    
    __slots__ = ()
    
    def __repr__(self) -> str:
        return "IGNORE"


IGNORE: Final = _Ignore()


class Placeholder:
    """Collector of pending operations and the slots their results belong in.
    
    Attributes:
        strict: Only collect Task markers, leaving bare callables as values
        on_duplicate: 'last_wins' keeps aliased slots (later writes win),
            'error' rejects a collection that would alias a recorded slot
    """
    
    __slots__ = ("_refs", "_tasks", "_reviver", "_results", "_registry", "strict", "on_duplicate")
    
    def __init__(
        self,
        *,
        registry: StrategyRegistry | None = None,
        strict: bool | None = None,
        on_duplicate: DuplicatePolicy | None = None,
    ) -> None:
        settings = get_settings()
        self._refs: list[BackRef] = []
        self._tasks: list[Callable[[], Any]] = []
        self._reviver: Reviver | _Ignore | None = None
        self._results: list[Any] | None = None
        self._registry = registry
        self.strict = settings.strict if strict is None else strict
        policy = settings.on_duplicate if on_duplicate is None else on_duplicate
        if not isinstance(policy, str) or policy not in _DUPLICATE_POLICIES:
            raise PlaceholderException.create(
                f"Unknown duplicate policy: {policy!r}", ErrorCode.INVALID_POLICY,
                details=f"expected one of: {', '.join(sorted(_DUPLICATE_POLICIES))}",
            )
        self.on_duplicate: DuplicatePolicy = policy
    
    # ─────────────────────────────────────────────────────────────────────────
    # Collection
    # ─────────────────────────────────────────────────────────────────────────
    
    def __call__(self, container: C) -> C:
        """Shallow collect: record task-valued entries of container, return it unchanged."""
        self._extend(collect_shallow(container, strict=self.strict))
        return container
    
    def deep(self, root: object) -> Self:
        """Collect task-valued entries at every nesting level of root.
        
        Nested containers are collected before the containers holding them.
        Nothing is recorded if the structure contains a cycle.
        """
        found = [pair for node in list(walk_post_order(root))
                 for pair in collect_shallow(node, strict=self.strict)]
        self._extend(found)
        return self
    
    def _extend(self, found: Sequence[tuple[BackRef, Callable[[], Any]]]) -> None:
        if self.on_duplicate == "error":
            seen = {ref.location for ref in self._refs}
            for ref, _ in found:
                if ref.location in seen:
                    raise PlaceholderException.create(
                        f"Slot {ref.key!r} is already collected", ErrorCode.DUPLICATE_REFERENCE,
                        details=repr(ref),
                    )
                seen.add(ref.location)
        for ref, op in found:
            self._refs.append(ref)
            self._tasks.append(op)
        if found:
            _log.debug("collected", added=len(found), size=len(self._tasks))
    
    def clear(self) -> Self:
        """Forget collected slots and cached results. The reviver is kept."""
        self._refs.clear()
        self._tasks.clear()
        self._results = None
        return self
    
    # ─────────────────────────────────────────────────────────────────────────
    # Accessors
    # ─────────────────────────────────────────────────────────────────────────
    
    def revive(self, reviver: Reviver | _Ignore | str | None) -> Self:
        """Set how results are applied.
        
        Args:
            reviver: Callable(container, key, value, results, index) replacing
                direct assignment, IGNORE (or "ignore") to skip writeback,
                None to restore direct assignment
        
        Raises:
            PlaceholderException: INVALID_REVIVER for anything else
        """
        if isinstance(reviver, str) and reviver.lower() == "ignore":
            reviver = IGNORE
        if reviver is not None and reviver is not IGNORE and not callable(reviver):
            raise PlaceholderException.create(
                "Reviver must be a callable, IGNORE or None", ErrorCode.INVALID_REVIVER,
                details=f"got {type(reviver).__name__}",
            )
        self._reviver = reviver  # type: ignore[assignment]
        return self
    
    @property
    def reviver(self) -> Reviver | _Ignore | None:
        return self._reviver
    
    @property
    def results(self) -> list[Any] | None:
        """Results of the last successful execution, or None."""
        return self._results
    
    @property
    def refs(self) -> tuple[BackRef, ...]:
        return tuple(self._refs)
    
    @property
    def tasks(self) -> tuple[Callable[[], Any], ...]:
        return tuple(self._tasks)
    
    @property
    def registry(self) -> StrategyRegistry:
        """Strategy collaborator: the instance's own, else the process-wide one."""
        return self._registry or get_registry()
    
    def size(self) -> int:
        """Number of pending operations."""
        return len(self._tasks)
    
    def __len__(self) -> int:
        return len(self._tasks)
    
    # ─────────────────────────────────────────────────────────────────────────
    # Execution
    # ─────────────────────────────────────────────────────────────────────────
    
    async def execute(self, strategy: str | None = None, *args: Any) -> list[Any]:
        """Run every collected operation and apply the results.
        
        Args:
            strategy: Registered strategy name (default: the registry's default)
            *args: Forwarded to the strategy after the operation list
        
        Returns:
            Results in collection order
        
        Raises:
            PlaceholderException: UNKNOWN_STRATEGY, or RESULT_MISMATCH when a
                strategy returns the wrong number of results
            Exception: Whatever the strategy raises, unchanged. No slot is
                written and the cached results keep their previous value.
        """
        registry = self.registry
        name = normalize_strategy_name(strategy or registry.default)
        run = registry.get(name)
        refs, tasks = list(self._refs), list(self._tasks)
        log = _log.bind(strategy=name, size=len(tasks))
        
        log.debug("executing")
        start = time.perf_counter()
        try:
            results = list(await run(tasks, *args))
        except Exception as e:
            log.warning("execution failed", error=f"{type(e).__name__}: {e}",
                        duration_ms=round((time.perf_counter() - start) * 1000, 2))
            raise
        
        if len(results) != len(tasks):
            raise PlaceholderException.create(
                f"Strategy {name!r} returned {len(results)} results for {len(tasks)} operations",
                ErrorCode.RESULT_MISMATCH,
            )
        
        self._results = results
        self._apply(refs, results)
        log.debug("executed", duration_ms=round((time.perf_counter() - start) * 1000, 2),
                  revived=self._reviver is not None)
        return results
    
    def _apply(self, refs: list[BackRef], results: list[Any]) -> None:
        reviver = self._reviver
        if reviver is IGNORE:
            return
        for i, ref in enumerate(refs):
            if reviver is None:
                ref.set(results[i])
            else:
                reviver(ref.container, ref.key, results[i], results, i)  # type: ignore[operator]
    
    def execute_sync(self, strategy: str | None = None, *args: Any) -> list[Any]:
        """Blocking execute() for synchronous callers."""
        return run_sync(self.execute(strategy, *args))
    
    async def execute_parallel(self) -> list[Any]:
        """All operations at once, fail fast."""
        return await self.execute("parallel")
    
    async def execute_parallel_limit(self, limit: int) -> list[Any]:
        """At most ``limit`` operations in flight, fail fast."""
        return await self.execute("parallel_limit", limit)
    
    async def execute_series(self) -> list[Any]:
        """One operation at a time in collection order."""
        return await self.execute("series")
    
    async def execute_settled(self) -> list[Any]:
        """All at once; every slot receives a Settled instead of raising."""
        return await self.execute("settled")
    
    def __getattr__(self, name: str) -> Callable[..., Any]:
        # execute_<strategy> for strategies without an explicit method
        if not name.startswith(ENTRY_PREFIX) or name.startswith("__"):
            raise AttributeError(f"{type(self).__name__!r} object has no attribute {name!r}")
        strategy = name[len(ENTRY_PREFIX):]
        if strategy not in self.registry:
            raise AttributeError(f"{type(self).__name__!r} object has no attribute {name!r} "
                                 f"(no strategy named {strategy!r})")
        
        async def entry_point(*args: Any) -> list[Any]:
            return await self.execute(strategy, *args)
        
        entry_point.__name__ = entry_point.__qualname__ = name
        return entry_point
    
    def __dir__(self) -> list[str]:
        return sorted(set(super().__dir__()) | set(self.registry.entry_points()))
    
    def __repr__(self) -> str:
        return f"Placeholder(size={len(self._tasks)}, executed={self._results is not None})"


