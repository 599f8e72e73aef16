"""Delay helpers shared across pagination components."""

from __future__ import annotations

import asyncio


async def sleep_ms(milliseconds: float | None) -> None:
    """Sleep for the given number of milliseconds; non-positive values still yield to the event loop."""
    if not milliseconds or milliseconds <= 0:
        await asyncio.sleep(0)
        return
    await asyncio.sleep(milliseconds / 1000)


async def maybe_await(value):
    """Await *value* when a caller hook returned a coroutine, otherwise return it as is."""
    if hasattr(value, "__await__"):
        return await value
    return value
