"""Concurrency-limited FIFO queue for outgoing requests."""

import asyncio
from collections import deque

import structlog

logger = structlog.get_logger(__name__)

DEFAULT_MAX_CONCURRENT = 6


class RequestQueue:
    """Run at most ``max_concurrent`` tasks at once; the rest wait in arrival order.

    A finished task hands its slot straight to the oldest waiter, so a newcomer
    can never overtake someone already queued.
    """

    def __init__(self, max_concurrent=DEFAULT_MAX_CONCURRENT):
        if max_concurrent < 1:
            raise ValueError("max_concurrent must be at least 1")
        self.max_concurrent = max_concurrent
        self._active = 0
        self._waiters = deque()

    @property
    def active(self):
        return self._active

    @property
    def waiting(self):
        return sum(1 for waiter in self._waiters if not waiter.done())

    async def schedule(self, task):
        """Await ``task()`` once a slot is free and return its result."""
        await self._acquire()
        try:
            return await task()
        finally:
            self._release()

    async def _acquire(self):
        if self._active < self.max_concurrent and not self.waiting:
            self._active += 1
            return

        waiter = asyncio.get_running_loop().create_future()
        self._waiters.append(waiter)
        logger.debug("request_queued", waiting=self.waiting, active=self._active)
        try:
            await waiter
        except asyncio.CancelledError:
            if waiter.done() and not waiter.cancelled():
                # Slot was already handed over; give it to the next in line.
                self._release()
            elif waiter in self._waiters:
                self._waiters.remove(waiter)
            raise

    def _release(self):
        while self._waiters:
            waiter = self._waiters.popleft()
            if not waiter.done():
                waiter.set_result(None)
                logger.debug("request_admitted", waiting=self.waiting, active=self._active)
                return
        self._active -= 1
