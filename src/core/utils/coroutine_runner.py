"""
Run async code from sync entry points such as Celery tasks.

One event loop per process is reused between calls so async drivers (asyncpg)
never see futures attached to a different loop. Assumes a single-threaded
worker process.
"""

import asyncio
from collections.abc import Awaitable, Callable
from typing import TypeVar

T = TypeVar("T")

_loop: asyncio.AbstractEventLoop | None = None


def execute_coroutine_sync(
    *, coroutine: Awaitable[T] | Callable[[], Awaitable[T]]
) -> T:
    """Drive a coroutine, or a zero-argument factory of one, to completion."""
    awaitable = coroutine() if callable(coroutine) else coroutine
    return _shared_loop().run_until_complete(awaitable)


def _shared_loop() -> asyncio.AbstractEventLoop:
    global _loop
    if _loop is None or _loop.is_closed():
        _loop = asyncio.new_event_loop()
    asyncio.set_event_loop(_loop)
    return _loop
