"""
Drivers that run pagination steps under a calling convention.

``run_sync`` feeds each yielded payload to a blocking executor, ``run_async``
awaits a non-blocking one. Executor errors propagate to the caller unchanged;
the steps generator is closed either way, discarding whatever it accumulated.
"""

from __future__ import annotations

from typing import Awaitable, Callable, Generator, TypeVar

T = TypeVar("T")

SyncExecute = Callable[[bytes], bytes]
AsyncExecute = Callable[[bytes], Awaitable[bytes]]


def run_sync(steps: Generator[bytes, bytes, T], execute: SyncExecute) -> T:
    """Drive ``steps`` to completion with a blocking ``execute``."""
    try:
        payload = next(steps)
        while True:
            payload = steps.send(execute(payload))
    except StopIteration as stop:
        return stop.value
    finally:
        steps.close()


async def run_async(steps: Generator[bytes, bytes, T], execute: AsyncExecute) -> T:
    """Drive ``steps`` to completion, awaiting a non-blocking ``execute``."""
    try:
        payload = next(steps)
        while True:
            payload = steps.send(await execute(payload))
    except StopIteration as stop:
        return stop.value
    finally:
        steps.close()


__all__ = ["AsyncExecute", "SyncExecute", "run_async", "run_sync"]
