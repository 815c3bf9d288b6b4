"""Trailing-edge debounce on the running event loop."""

import asyncio
import inspect

import structlog

logger = structlog.get_logger(__name__)


class Debounced:
    def __init__(self, func, wait):
        self.func = func
        self.wait = wait
        self._handle = None
        self.task = None

    def __call__(self, *args, **kwargs):
        self.cancel()
        loop = asyncio.get_running_loop()
        self._handle = loop.call_later(self.wait, self._fire, args, kwargs)

    def _fire(self, args, kwargs):
        self._handle = None
        if inspect.iscoroutinefunction(self.func):
            self.task = asyncio.ensure_future(self.func(*args, **kwargs))
            self.task.add_done_callback(self._report)
        else:
            self.func(*args, **kwargs)

    def _report(self, task):
        if task.cancelled():
            return
        exc = task.exception()
        if exc is not None:
            name = getattr(self.func, "__name__", repr(self.func))
            logger.error("debounced_call_failed", func=name, error=str(exc), exc_info=exc)

    @property
    def pending(self):
        return self._handle is not None

    def cancel(self):
        if self._handle is not None:
            self._handle.cancel()
            self._handle = None


def debounce(func, wait):
    """Delay ``func`` until ``wait`` seconds pass without another call; the latest arguments win."""
    return Debounced(func, wait)
