"""Tests for built-in strategies and the strategy registry."""

from __future__ import annotations

import asyncio

import pytest

from placeholder.foundation.errors import ErrorCode, PlaceholderException
from placeholder.runtime.strategies import (
    Settled,
    StrategyRegistry,
    builtin_registry,
    entry_point_name,
    get_registry,
    invoke,
    parallel,
    parallel_limit,
    reset_registry,
    series,
    set_registry,
    settled,
    settled_limit,
)


def delayed(value: object, delay: float = 0.0):
    async def op() -> object:
        await asyncio.sleep(delay)
        return value
    return op


def failing(message: str = "boom"):
    async def op() -> object:
        raise RuntimeError(message)
    return op


class InFlight:
    """Tracks the maximum number of operations running at once."""
    
    def __init__(self) -> None:
        self.current = self.peak = 0
    
    def op(self, value: object):
        async def run() -> object:
            self.current += 1
            self.peak = max(self.peak, self.current)
            await asyncio.sleep(0.01)
            self.current -= 1
            return value
        return run


# ─────────────────────────────────────────────────────────────────────────────
# invoke
# ─────────────────────────────────────────────────────────────────────────────


@pytest.mark.asyncio
async def test_invoke_sync_and_async() -> None:
    assert await invoke(lambda: 1) == 1
    assert await invoke(delayed(2)) == 2


# ─────────────────────────────────────────────────────────────────────────────
# Fail-fast strategies
# ─────────────────────────────────────────────────────────────────────────────


@pytest.mark.asyncio
async def test_parallel_preserves_order_regardless_of_completion() -> None:
    ops = [delayed("slow", 0.03), delayed("fast", 0.0), lambda: "sync"]
    assert await parallel(ops) == ["slow", "fast", "sync"]


@pytest.mark.asyncio
async def test_parallel_empty() -> None:
    assert await parallel([]) == []


@pytest.mark.asyncio
async def test_parallel_fails_fast_and_cancels_rest() -> None:
    finished: list[str] = []
    
    async def slow() -> str:
        await asyncio.sleep(0.2)
        finished.append("slow")
        return "slow"
    
    with pytest.raises(RuntimeError, match="boom"):
        await parallel([slow, failing()])
    
    await asyncio.sleep(0.01)
    assert finished == []


@pytest.mark.asyncio
async def test_parallel_limit_bounds_concurrency() -> None:
    tracker = InFlight()
    results = await parallel_limit([tracker.op(i) for i in range(6)], 2)
    
    assert results == list(range(6))
    assert tracker.peak == 2


@pytest.mark.asyncio
async def test_parallel_limit_above_size_runs_all() -> None:
    tracker = InFlight()
    assert await parallel_limit([tracker.op(i) for i in range(3)], 10) == [0, 1, 2]
    assert tracker.peak == 3


@pytest.mark.asyncio
@pytest.mark.parametrize("limit", [0, -1, True, 1.5])
async def test_parallel_limit_rejects_bad_limit(limit: object) -> None:
    with pytest.raises(ValueError, match="limit"):
        await parallel_limit([lambda: 1], limit)  # type: ignore[arg-type]


@pytest.mark.asyncio
async def test_parallel_limit_fails_fast() -> None:
    with pytest.raises(RuntimeError, match="second"):
        await parallel_limit([delayed(1), failing("second"), delayed(3)], 2)


@pytest.mark.asyncio
async def test_series_runs_in_order_and_stops_on_failure() -> None:
    calls: list[int] = []
    
    def record(i: int):
        async def op() -> int:
            calls.append(i)
            return i
        return op
    
    assert await series([record(0), record(1), record(2)]) == [0, 1, 2]
    assert calls == [0, 1, 2]
    
    calls.clear()
    with pytest.raises(RuntimeError):
        await series([record(0), failing(), record(2)])
    assert calls == [0]


@pytest.mark.asyncio
async def test_series_one_at_a_time() -> None:
    tracker = InFlight()
    await series([tracker.op(i) for i in range(3)])
    assert tracker.peak == 1


# ─────────────────────────────────────────────────────────────────────────────
# Tolerant strategies
# ─────────────────────────────────────────────────────────────────────────────


@pytest.mark.asyncio
async def test_settled_never_raises() -> None:
    results = await settled([delayed("ok"), failing("bad"), lambda: 3])
    
    assert [r.is_fulfilled for r in results] == [True, False, True]
    assert results[0].unwrap() == "ok"
    assert isinstance(results[1].error, RuntimeError)
    assert results[1].unwrap_or("fallback") == "fallback"
    with pytest.raises(RuntimeError, match="bad"):
        results[1].unwrap()


@pytest.mark.asyncio
async def test_settled_limit_bounds_concurrency() -> None:
    tracker = InFlight()
    results = await settled_limit([tracker.op(i) for i in range(4)], 1)
    
    assert [r.value for r in results] == [0, 1, 2, 3]
    assert all(isinstance(r, Settled) for r in results)
    assert tracker.peak == 1


# ─────────────────────────────────────────────────────────────────────────────
# Registry
# ─────────────────────────────────────────────────────────────────────────────


def test_builtin_registry_names() -> None:
    reg = builtin_registry()
    assert reg.names() == ["parallel", "parallel_limit", "series", "settled", "settled_limit"]
    assert reg.default == "parallel"
    assert reg.get("parallelLimit") is parallel_limit
    assert "parallel-limit" in reg
    assert "waterfall" not in reg


def test_entry_point_names() -> None:
    assert entry_point_name("parallelLimit") == "execute_parallel_limit"
    assert entry_point_name("series") == "execute_series"
    assert "execute_settled_limit" in builtin_registry().entry_points()


def test_unknown_strategy() -> None:
    with pytest.raises(PlaceholderException) as exc_info:
        builtin_registry().get("waterfall")
    assert exc_info.value.code == ErrorCode.UNKNOWN_STRATEGY
    assert "parallel" in (exc_info.value.error.details or "")


def test_register_as_decorator_and_unregister() -> None:
    reg = StrategyRegistry(default="reverse")
    
    @reg.register("reverse")
    async def reverse(ops):
        return [await invoke(op) for op in ops]
    
    assert reg.get("reverse") is reverse
    assert len(reg) == 1
    reg.unregister("reverse")
    assert "reverse" not in reg


@pytest.mark.parametrize("name", ["1st", "with space", ""])
def test_register_rejects_bad_names(name: str) -> None:
    with pytest.raises(PlaceholderException) as exc_info:
        StrategyRegistry().register(name, parallel)
    assert exc_info.value.code == ErrorCode.INVALID_STRATEGY


def test_register_rejects_non_callables() -> None:
    with pytest.raises(PlaceholderException) as exc_info:
        StrategyRegistry().register("broken", "not a function")  # type: ignore[arg-type]
    assert exc_info.value.code == ErrorCode.INVALID_STRATEGY


def test_global_registry_swap_and_reset() -> None:
    original = get_registry()
    assert get_registry() is original
    
    custom = StrategyRegistry()
    set_registry(custom)
    assert get_registry() is custom
    
    reset_registry()
    assert get_registry() is not custom
    assert "parallel" in get_registry()
