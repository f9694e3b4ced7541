"""
Bounded executor for storage operations the request path does not wait on.

Stale deletes and write-backs are submitted here instead of being awaited.
Operations sharing a key run in submission order, so a delete queued for a
(kind, location) always lands before the write-back queued after it. At most
``max_concurrency`` operations touch storage at once. Failures are logged
and counted, never raised to the submitter.
"""

import asyncio
from typing import Any, Awaitable, Callable, Dict, Hashable, Optional, Set, TYPE_CHECKING

from shared.logging import get_logger

if TYPE_CHECKING:  # pragma: no cover - imported for typing only
    from shared.metrics import MetricsCollector


Operation = Callable[[], Awaitable[Any]]


class BackgroundWriter:
    """Run storage operations in tracked background tasks."""

    def __init__(self, max_concurrency: int = 10, *, metrics: Optional["MetricsCollector"] = None):
        self.logger = get_logger("explorer.background")
        self.metrics = metrics
        self._semaphore = asyncio.Semaphore(max(1, max_concurrency))
        self._tails: Dict[Hashable, "asyncio.Task[bool]"] = {}
        self._tasks: Set["asyncio.Task[bool]"] = set()

    @property
    def pending(self) -> int:
        """Number of submitted operations that have not finished."""
        return len(self._tasks)

    def submit(self, key: Hashable, operation: Operation, *, name: str) -> "asyncio.Task[bool]":
        """Schedule ``operation`` after any earlier operation for ``key``.

        Must be called from a running event loop. The returned task resolves
        to True on success and False on failure.
        """
        previous = self._tails.get(key)
        task = asyncio.create_task(self._run(key, previous, operation, name))
        self._tails[key] = task
        self._tasks.add(task)
        task.add_done_callback(lambda done: self._forget(key, done))
        return task

    async def drain(self) -> None:
        """Wait for every submitted operation, including ones queued meanwhile."""
        while self._tasks:
            await asyncio.gather(*list(self._tasks), return_exceptions=True)

    async def _run(
        self,
        key: Hashable,
        previous: Optional["asyncio.Task[bool]"],
        operation: Operation,
        name: str,
    ) -> bool:
        if previous is not None and not previous.done():
            await asyncio.wait([previous])

        async with self._semaphore:
            try:
                await operation()
            except Exception as exc:
                self.logger.error(
                    "Background storage operation failed",
                    operation=name,
                    key=str(key),
                    error=str(exc),
                )
                self._record(name, "error")
                return False

        self.logger.debug("Background storage operation completed", operation=name, key=str(key))
        self._record(name, "ok")
        return True

    def _forget(self, key: Hashable, task: "asyncio.Task[bool]") -> None:
        self._tasks.discard(task)
        if self._tails.get(key) is task:
            del self._tails[key]

    def _record(self, name: str, status: str) -> None:
        if not self.metrics:
            return
        self.metrics.increment_counter("background_operations_total", operation=name, status=status)
