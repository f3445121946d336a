"""
Trailing-edge debounce

Delays a callback until its caller stops invoking it for `delay_ms`, so a
search box only triggers a lookup once the user pauses typing.
"""

import asyncio
import inspect
import logging
from typing import Any, Callable

logger = logging.getLogger(__name__)


class Debounced:
    """
    Callable wrapper returned by `debounce()`.

    Each call cancels the pending timer and schedules a new one; only the
    last call's arguments are used. There is no maximum wait.
    """

    def __init__(
        self,
        callback: Callable[..., Any],
        delay_ms: float,
        loop: asyncio.AbstractEventLoop | None = None,
    ):
        self.callback = callback
        self.delay = delay_ms / 1000.0
        self._loop = loop
        self._handle: asyncio.TimerHandle | None = None
        self._pending_args: tuple = ()
        self._pending_kwargs: dict = {}
        self._task: asyncio.Future | None = None

    def __call__(self, *args, **kwargs) -> None:
        self.cancel()
        loop = self._loop or asyncio.get_running_loop()
        self._pending_args = args
        self._pending_kwargs = kwargs
        self._handle = loop.call_later(self.delay, self._fire)

    @property
    def pending(self) -> bool:
        return self._handle is not None

    def cancel(self) -> None:
        """Drop the scheduled call, if any."""
        if self._handle is not None:
            self._handle.cancel()
            self._handle = None

    def flush(self) -> None:
        """Run the scheduled call now instead of waiting for the delay."""
        if self._handle is not None:
            self.cancel()
            self._fire()

    def _fire(self) -> None:
        self._handle = None
        args, kwargs = self._pending_args, self._pending_kwargs
        self._pending_args, self._pending_kwargs = (), {}

        logger.debug("Debounced call to %r fired", self.callback)
        result = self.callback(*args, **kwargs)
        if inspect.isawaitable(result):
            loop = self._loop or asyncio.get_running_loop()
            # Keep a reference so the task is not garbage collected mid-flight
            self._task = asyncio.ensure_future(result, loop=loop)
            self._task.add_done_callback(self._log_failure)

    def _log_failure(self, task: asyncio.Future) -> None:
        # Retrieve the outcome even when a newer firing replaced self._task
        if task.cancelled():
            return
        exc = task.exception()
        if exc is not None:
            logger.error("Debounced call to %r failed", self.callback, exc_info=exc)

    @property
    def task(self) -> asyncio.Future | None:
        """Task running the last coroutine callback, if there was one."""
        return self._task


def debounce(
    callback: Callable[..., Any],
    delay_ms: float,
    loop: asyncio.AbstractEventLoop | None = None,
) -> Debounced:
    """
    Wrap `callback` so rapid calls collapse into one, `delay_ms` after the last.

    Each wrapper owns its own timer; wrapping twice gives two independent
    debouncers.
    """
    return Debounced(callback, delay_ms, loop=loop)
