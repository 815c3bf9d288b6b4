"""De-duplication of identical outstanding reads.

While a call for a key is pending, later callers await the same task instead
of starting another one. The registry never holds a settled task: the entry
is dropped by a done-callback registered before anyone else can await the
task, so the first caller to observe the result already sees a clean slot.
"""

import asyncio

import structlog

logger = structlog.get_logger(__name__)


class InFlightRegistry:
    def __init__(self):
        self._tasks = {}

    def task_for(self, key, factory):
        """Return ``(task, created)`` for ``key``, starting ``factory()`` if nothing is pending."""
        task = self._tasks.get(key)
        if task is not None:
            logger.debug("request_joined", key=key)
            return task, False

        task = asyncio.ensure_future(factory())
        self._tasks[key] = task
        task.add_done_callback(lambda finished: self._discard(key, finished))
        return task, True

    def _discard(self, key, task):
        if self._tasks.get(key) is task:
            del self._tasks[key]

    async def join(self, key, factory):
        task, _ = self.task_for(key, factory)
        return await asyncio.shield(task)

    def pending(self, key):
        return key in self._tasks

    def __len__(self):
        return len(self._tasks)
