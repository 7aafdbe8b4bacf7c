"""Detached asyncio tasks for side effects that must not block or fail the caller."""

import asyncio
import logging
from typing import Awaitable, Set

logger = logging.getLogger(__name__)

# Strong references so pending tasks are not garbage collected mid-flight
_pending: Set["asyncio.Task[None]"] = set()


async def _run_logged(awaitable: Awaitable, label: str) -> None:
    try:
        await awaitable
    except asyncio.CancelledError:
        raise
    except Exception:  # noqa: BLE001
        logger.exception("Background task failed: %s", label)


def fire_and_forget(awaitable: Awaitable, label: str = "background") -> "asyncio.Task[None]":
    """
    Schedule ``awaitable`` on the running loop and return immediately.

    Failures are logged and never propagated to the caller.
    """
    task = asyncio.get_running_loop().create_task(_run_logged(awaitable, label))
    _pending.add(task)
    task.add_done_callback(_pending.discard)
    return task


async def drain_background_tasks() -> None:
    """Wait for scheduled tasks to settle (used on shutdown and in tests)."""
    if _pending:
        await asyncio.gather(*list(_pending), return_exceptions=True)
