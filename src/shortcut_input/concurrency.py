"""Cooperative stop helpers."""

from __future__ import annotations

import asyncio
from collections.abc import Awaitable

from shortcut_input.errors import InvocationCancelledError


async def run_until_stopped[T](coro: Awaitable[T], stop_event: asyncio.Event) -> T:
    """Await `coro`, cancelling it when `stop_event` is set first.

    A stop surfaces as `InvocationCancelledError`. Cancellation of the calling
    task itself is re-raised unchanged.
    """
    task = asyncio.ensure_future(coro)
    stopper = asyncio.ensure_future(stop_event.wait())
    stopper.add_done_callback(lambda _: task.cancel())
    try:
        return await task
    except asyncio.CancelledError:
        current = asyncio.current_task()
        if not stop_event.is_set() or (current is not None and current.cancelling()):
            raise
        raise InvocationCancelledError() from None
    finally:
        stopper.cancel()
