"""
MIT License
Copyright (c) 2026 arpan404
See LICENSE file for full license text.

Module: runtime/coalescing.py.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Awaitable, Callable
from typing import Generic, TypeVar

T = TypeVar("T")

logger = logging.getLogger("dojo_client.runtime")


class InFlightRegistry(Generic[T]):
    """
    Deduplicate identical in-flight requests.

    The first caller for a key starts the work as a task; later callers for
    the same key await that task and observe the same result or exception.
    The entry is removed by a done-callback, which runs on every completion
    path before any waiter resumes.

    Waiters await through ``asyncio.shield``: a caller that is cancelled stops
    waiting but the shared work still runs to completion.
    """

    def __init__(self) -> None:
        self._tasks: dict[str, asyncio.Task[T]] = {}

    def __len__(self) -> int:
        return len(self._tasks)

    def in_flight(self, key: str) -> bool:
        return key in self._tasks

    async def get_or_start(self, key: str, executor: Callable[[], Awaitable[T]]) -> T:
        # Lookup and registration must not be separated by a suspension point.
        task = self._tasks.get(key)
        if task is None:
            task = asyncio.ensure_future(executor())
            self._tasks[key] = task
            task.add_done_callback(lambda done, key=key: self._release(key, done))
        else:
            logger.debug("Joining in-flight request %s", key)
        return await asyncio.shield(task)

    def _release(self, key: str, task: asyncio.Task[T]) -> None:
        if self._tasks.get(key) is task:
            del self._tasks[key]
        if not task.cancelled():
            # Mark the exception retrieved when every waiter has gone away.
            task.exception()
