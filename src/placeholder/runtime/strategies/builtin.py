"""Built-in concurrency strategies.

Every strategy takes the ordered list of zero-argument operations first,
then any strategy-specific positional arguments, and returns a list with
one result per operation in the same order:
    - parallel: All at once, fail fast on first error
    - parallel_limit: At most N in flight, fail fast on first error
    - series: One at a time in order, stop at first error
    - settled: All at once, never raise; each result is a Settled
    - settled_limit: Like settled with at most N in flight

Operations may be plain functions or coroutine functions; invoke()
awaits whatever they return when it is awaitable.

Example:
    >>> results = await parallel_limit([lambda: fetch(1), lambda: fetch(2)], 1)
"""

from __future__ import annotations

import asyncio
import inspect
from collections.abc import Awaitable, Callable, Sequence
from dataclasses import dataclass
from enum import StrEnum
from typing import Generic, TypeVar, Union

T = TypeVar("T")

Operation = Callable[[], Union[T, Awaitable[T]]]


class SettledStatus(StrEnum):
    """Status of a settled operation."""
    FULFILLED = "fulfilled"
    REJECTED = "rejected"


@dataclass(slots=True, frozen=True)
class Settled(Generic[T]):
    """Result of a settled operation (success or failure).
    
    Attributes:
        status: 'fulfilled' or 'rejected'
        value: Result value if fulfilled
        error: Exception if rejected
    """
    
    status: SettledStatus
    value: T | None = None
    error: BaseException | None = None
    
    @property
    def is_fulfilled(self) -> bool:
        return self.status == SettledStatus.FULFILLED
    
    @property
    def is_rejected(self) -> bool:
        return self.status == SettledStatus.REJECTED
    
    def unwrap(self) -> T:
        """Get value or raise stored error."""
        if self.is_rejected:
            raise self.error or RuntimeError("Rejected with no error")
        return self.value  # type: ignore[return-value]
    
    def unwrap_or(self, default: T) -> T:
        """Get value or return default."""
        return self.value if self.is_fulfilled else default  # type: ignore[return-value]


def _fulfilled(value: T) -> Settled[T]:
    return Settled(SettledStatus.FULFILLED, value=value)


def _rejected(error: BaseException) -> Settled[T]:
    return Settled(SettledStatus.REJECTED, error=error)


async def invoke(op: Operation[T]) -> T:
    """Call a zero-argument operation, awaiting its result if needed."""
    result = op()
    if inspect.isawaitable(result):
        return await result
    return result


def _check_limit(limit: int) -> int:
    if isinstance(limit, bool) or not isinstance(limit, int) or limit < 1:
        raise ValueError(f"limit must be a positive integer, got {limit!r}")
    return limit


async def _gather_fail_fast(tasks: list[asyncio.Future[T]]) -> list[T]:
    """Gather tasks; on the first error cancel the rest and re-raise it."""
    try:
        return list(await asyncio.gather(*tasks))
    except BaseException:
        for task in tasks:
            task.cancel()
        await asyncio.gather(*tasks, return_exceptions=True)
        raise


# ─────────────────────────────────────────────────────────────────────────────
# Fail-fast strategies
# ─────────────────────────────────────────────────────────────────────────────

async def parallel(ops: Sequence[Operation[T]]) -> list[T]:
    """Run all operations concurrently.
    
    Returns:
        Results in the same order as ops
    
    Raises:
        Exception: The first operation failure; remaining operations are cancelled
    """
    if not ops:
        return []
    return await _gather_fail_fast([asyncio.ensure_future(invoke(op)) for op in ops])


async def parallel_limit(ops: Sequence[Operation[T]], limit: int) -> list[T]:
    """Run operations concurrently with at most ``limit`` in flight.
    
    Args:
        ops: Operations to run
        limit: Maximum concurrent operations
    
    Raises:
        ValueError: If limit is not a positive integer
        Exception: The first operation failure; remaining operations are cancelled
    """
    _check_limit(limit)
    if not ops:
        return []
    if limit >= len(ops):
        return await parallel(ops)
    
    semaphore = asyncio.Semaphore(limit)
    
    async def limited_call(op: Operation[T]) -> T:
        async with semaphore:
            return await invoke(op)
    
    return await _gather_fail_fast([asyncio.ensure_future(limited_call(op)) for op in ops])


async def series(ops: Sequence[Operation[T]]) -> list[T]:
    """Run operations one at a time in list order, stopping at the first failure."""
    results: list[T] = []
    for op in ops:
        results.append(await invoke(op))
    return results


# ─────────────────────────────────────────────────────────────────────────────
# Tolerant strategies
# ─────────────────────────────────────────────────────────────────────────────

async def _settle(op: Operation[T]) -> Settled[T]:
    try:
        return _fulfilled(await invoke(op))
    except Exception as e:
        return _rejected(e)


async def settled(ops: Sequence[Operation[T]]) -> list[Settled[T]]:
    """Run all operations concurrently, never raising on operation failure.
    
    Like Promise.allSettled() - each position holds a Settled carrying
    either the value or the exception.
    
    Example:
        >>> results = await settled([risky_a, risky_b])
        >>> [r.unwrap_or(None) for r in results]
    """
    return list(await asyncio.gather(*(_settle(op) for op in ops)))


async def settled_limit(ops: Sequence[Operation[T]], limit: int) -> list[Settled[T]]:
    """Like settled() with at most ``limit`` operations in flight."""
    _check_limit(limit)
    semaphore = asyncio.Semaphore(limit)
    
    async def limited_settle(op: Operation[T]) -> Settled[T]:
        async with semaphore:
            return await _settle(op)
    
    return list(await asyncio.gather(*(limited_settle(op) for op in ops)))
