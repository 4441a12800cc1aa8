"""Sync/async interoperability: run a placeholder's execution from sync code.

When an event loop is already running in the calling thread (Jupyter, a
sync helper called from async code), the coroutine runs on a fresh loop
in a one-shot worker thread that is joined before returning.

Example:
    >>> results = run_sync(pp.execute())
"""

from __future__ import annotations

import asyncio
from collections.abc import Coroutine
from concurrent.futures import ThreadPoolExecutor
from typing import TypeVar

T = TypeVar("T")


def run_sync(
    coro: Coroutine[object, object, T],
    *,
    loop: asyncio.AbstractEventLoop | None = None,
) -> T:
    """Run async coroutine from synchronous context.
    
    Args:
        coro: Coroutine to execute
        loop: Optional (not running) event loop to run it in
    
    Returns:
        Coroutine result; exceptions propagate unchanged
    """
    if loop is not None:
        return loop.run_until_complete(coro)
    
    try:
        asyncio.get_running_loop()
    except RuntimeError:
        return asyncio.run(coro)
    
    # Leaving the with-block shuts the pool down and joins its thread
    with ThreadPoolExecutor(max_workers=1, thread_name_prefix="placeholder-run-sync") as pool:
        return pool.submit(asyncio.run, coro).result()
