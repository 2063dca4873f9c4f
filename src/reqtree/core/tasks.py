"""Registry keeping fire-and-forget tasks alive until they finish."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Coroutine
from typing import Any, Optional

logger = logging.getLogger(__name__)

# The event loop only keeps weak references to tasks
_background_tasks: set[asyncio.Task] = set()


def _finished(task: asyncio.Task) -> None:
    _background_tasks.discard(task)
    if task.cancelled():
        return
    error = task.exception()
    if error is not None:
        logger.error(f"Background task {task.get_name()} failed: {error}", exc_info=error)


def spawn(coro: Coroutine[Any, Any, Any], name: Optional[str] = None) -> asyncio.Task:
    """
    Schedule a coroutine on the running loop without awaiting it.

    Raises:
        RuntimeError: If no event loop is running
    """
    try:
        loop = asyncio.get_running_loop()
    except RuntimeError:
        coro.close()
        raise RuntimeError("No running event loop. Use 'await request.perform()' or call() inside asyncio.") from None

    task = loop.create_task(coro, name=name)
    _background_tasks.add(task)
    task.add_done_callback(_finished)
    return task


def pending_tasks() -> int:
    """Number of background tasks that have not finished yet."""
    return len(_background_tasks)
