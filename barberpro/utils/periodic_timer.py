"""
Owned, restartable interval timer for the asyncio loop.

The timer fires its callback once immediately on ``start()`` and then every
``interval`` seconds until ``stop()``. Starting a running timer and stopping a
stopped one are both no-ops. A callback that raises is logged and the timer
keeps ticking.
"""

import asyncio
import inspect
from typing import Any, Awaitable, Callable, Optional, Union

from .logging_config import get_logger


TickCallback = Callable[[], Union[None, Awaitable[Any]]]


class PeriodicTimer:
    """
    Fixed-period timer bound to the running event loop.

    Usage:
        timer = PeriodicTimer(30.0, scheduler.check_reminders, name="reminders")
        timer.start()
        ...
        timer.stop()
    """

    def __init__(
        self,
        interval: float,
        callback: TickCallback,
        name: str = "timer",
        fire_immediately: bool = True,
    ):
        if interval <= 0:
            raise ValueError(f"Timer interval must be positive, got {interval}")
        self.interval = interval
        self.name = name
        self._callback = callback
        self._fire_immediately = fire_immediately
        self._task: Optional[asyncio.Task] = None
        self._tick_count = 0
        self._logger = get_logger(name)

    @property
    def is_running(self) -> bool:
        return self._task is not None and not self._task.done()

    @property
    def tick_count(self) -> int:
        return self._tick_count

    def start(self) -> bool:
        """
        Start ticking on the running loop.

        Returns:
            True if the timer was started, False if it was already running
        """
        if self.is_running:
            return False
        loop = asyncio.get_running_loop()
        self._task = loop.create_task(self._run(), name=f"barberpro-{self.name}")
        self._logger.debug(f"Timer started (every {self.interval}s)")
        return True

    def stop(self) -> bool:
        """
        Cancel the timer.

        Returns:
            True if a running timer was stopped, False if nothing was running
        """
        if self._task is None:
            return False
        task, self._task = self._task, None
        if task.done():
            return False
        task.cancel()
        self._logger.debug("Timer stopped")
        return True

    async def _run(self) -> None:
        if not self._fire_immediately:
            await asyncio.sleep(self.interval)
        while True:
            await self._tick()
            await asyncio.sleep(self.interval)

    async def _tick(self) -> None:
        self._tick_count += 1
        try:
            result = self._callback()
            if inspect.isawaitable(result):
                await result
        except asyncio.CancelledError:
            raise
        except Exception as e:
            self._logger.exception(f"Tick {self._tick_count} failed: {e}")
