"""Periodic autosave timer."""

import asyncio
import inspect
from collections.abc import Awaitable, Callable
from contextlib import suppress

import structlog

logger = structlog.get_logger()


class AutosaveTimer:
    """Invoke a callback every ``interval`` seconds on the running loop.

    There is no other cancellation path: shutdown code must ``await stop()``
    before tearing down whatever the callback talks to.
    """

    def __init__(
        self,
        callback: Callable[[], None | Awaitable[None]],
        interval: float,
    ):
        if interval <= 0:
            raise ValueError(f"autosave interval must be positive, got {interval}")
        self._callback = callback
        self._interval = interval
        self._task: asyncio.Task[None] | None = None

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    def start(self) -> None:
        """Start ticking. Must be called from within a running event loop."""
        if self.running:
            return
        self._task = asyncio.get_running_loop().create_task(self._run())
        logger.info("autosave_started", interval=self._interval)

    async def stop(self) -> None:
        """Cancel the timer and wait for it to finish."""
        task, self._task = self._task, None
        if task is None:
            return
        task.cancel()
        with suppress(asyncio.CancelledError):
            await task
        logger.info("autosave_stopped")

    async def _run(self) -> None:
        while True:
            await asyncio.sleep(self._interval)
            try:
                result = self._callback()
                if inspect.isawaitable(result):
                    await result
            except Exception:
                logger.exception("autosave_tick_failed")
