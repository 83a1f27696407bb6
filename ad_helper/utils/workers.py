from __future__ import annotations

import asyncio
import concurrent.futures
import functools
import threading
from typing import Any, Awaitable, Callable, TypeVar

T = TypeVar("T")

_EXECUTOR: concurrent.futures.ThreadPoolExecutor | None = None
_EXECUTOR_LOCK = threading.Lock()
_MAX_WORKERS = 8


def configure_workers(max_workers: int) -> None:
    """Set the pool size; takes effect for a pool not yet started."""
    global _MAX_WORKERS
    _MAX_WORKERS = max(1, int(max_workers))


def get_executor() -> concurrent.futures.ThreadPoolExecutor:
    global _EXECUTOR
    with _EXECUTOR_LOCK:
        if _EXECUTOR is None:
            _EXECUTOR = concurrent.futures.ThreadPoolExecutor(
                max_workers=_MAX_WORKERS,
                thread_name_prefix="ad-helper",
            )
        return _EXECUTOR


async def run_in_worker(fn: Callable[..., T], *args: Any, **kwargs: Any) -> T:
    """Run a blocking call in the shared worker pool and await its result."""
    loop = asyncio.get_running_loop()
    return await loop.run_in_executor(get_executor(), functools.partial(fn, *args, **kwargs))


def async_twin(fn: Callable[..., T]) -> Callable[..., Awaitable[T]]:
    """Coroutine method that offloads the synchronous method ``fn``."""

    @functools.wraps(fn)
    async def wrapper(self, *args: Any, **kwargs: Any) -> T:
        return await run_in_worker(fn, self, *args, **kwargs)

    wrapper.__name__ = f"{fn.__name__}_async"
    wrapper.__qualname__ = f"{fn.__qualname__}_async"
    return wrapper
