"""Cooperative cancellation for store calls.

A caller hands an asyncio.Event to a repository method.  If the event is
set before the store answers, the pending driver call is cancelled and
OperationCancelled is raised.  When the store answers first its result
wins, so an acknowledged write is always reported.
"""

from __future__ import annotations

import asyncio
import inspect
from collections.abc import Awaitable
from typing import TypeVar

R = TypeVar("R")


class OperationCancelled(RuntimeError):
    """The cancellation event fired before the store call completed."""


async def cancellable(awaitable: Awaitable[R], cancellation: asyncio.Event | None = None) -> R:
    """Await awaitable, aborting it if cancellation fires first."""
    if cancellation is None:
        return await awaitable
    if cancellation.is_set():
        if inspect.iscoroutine(awaitable):
            awaitable.close()
        elif isinstance(awaitable, asyncio.Future):
            awaitable.cancel()
        raise OperationCancelled("operation cancelled before it started")

    task = asyncio.ensure_future(awaitable)
    waiter = asyncio.ensure_future(cancellation.wait())
    try:
        done, _ = await asyncio.wait({task, waiter}, return_when=asyncio.FIRST_COMPLETED)
    except BaseException:
        task.cancel()
        raise
    finally:
        waiter.cancel()

    if task in done:
        return task.result()
    task.cancel()
    raise OperationCancelled("operation cancelled while awaiting the store")


def raise_if_cancelled(cancellation: asyncio.Event | None) -> None:
    """Checkpoint for loops that hand control back to the caller between store reads."""
    if cancellation is not None and cancellation.is_set():
        raise OperationCancelled("operation cancelled between store reads")
