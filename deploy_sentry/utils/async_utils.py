# deploy_sentry/utils/async_utils.py
"""Helpers for running coroutines and bounding their concurrency"""

import asyncio
import functools
from typing import Any, Callable, Coroutine, Iterable, List, TypeVar

T = TypeVar('T')


def run_async(coro: Coroutine[Any, Any, T]) -> T:
    """
    Run a coroutine to completion from synchronous code

    Raises:
        RuntimeError: If called while an event loop is running
    """
    try:
        asyncio.get_running_loop()
    except RuntimeError:
        return asyncio.run(coro)

    coro.close()
    raise RuntimeError(
        "run_async() cannot be called from a running event loop, await the coroutine instead"
    )


def sync_to_async(func: Callable[..., T]) -> Callable[..., Coroutine[Any, Any, T]]:
    """Run a blocking function in the default executor when awaited"""

    @functools.wraps(func)
    async def wrapper(*args, **kwargs):
        loop = asyncio.get_running_loop()
        return await loop.run_in_executor(None, functools.partial(func, *args, **kwargs))

    return wrapper


class AsyncPool:
    """
    Async task pool with a fixed number of concurrently running tasks

    Tasks are admitted one at a time as slots free up, so a finished task
    immediately lets the next queued one start.
    """

    def __init__(self, max_workers: int = 10):
        if max_workers < 1:
            raise ValueError("max_workers must be at least 1")
        self.max_workers = max_workers
        self.semaphore = asyncio.Semaphore(max_workers)
        self.tasks: List[asyncio.Task] = []

    async def submit(self, coro: Coroutine) -> asyncio.Task:
        """Schedule a coroutine, it starts once a slot is free"""

        async def wrapped():
            async with self.semaphore:
                return await coro

        task = asyncio.create_task(wrapped())
        self.tasks.append(task)
        return task

    async def wait_all(self) -> List[Any]:
        """Wait for all tasks to settle, exceptions are returned in place of results"""
        results = await asyncio.gather(*self.tasks, return_exceptions=True)
        self.tasks.clear()
        return results

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.wait_all()


async def map_bounded(func: Callable[[Any], Coroutine[Any, Any, T]],
                      items: Iterable[Any],
                      limit: int) -> List[Any]:
    """
    Apply an async function to every item with at most ``limit`` in flight

    Args:
        func: Async function called once per item
        items: Items to process
        limit: Maximum number of concurrently running calls

    Returns:
        Results in item order; failed calls yield their exception
    """
    pool = AsyncPool(max_workers=limit)
    for item in items:
        await pool.submit(func(item))
    return await pool.wait_all()
