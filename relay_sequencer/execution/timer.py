"""
Countdown timer for wait steps.

A CountdownTimer is the engine's single "active timer": a repeating
per-interval task that decrements the remaining seconds and reports each
tick. cancel() may be called any number of times; only the first call on a
running timer has an effect.
"""

import asyncio
import logging
from typing import Callable, Optional

logger = logging.getLogger(__name__)


class CountdownTimer:
    def __init__(
        self,
        seconds: int,
        on_tick: Callable[[int], None],
        interval: float = 1.0,
    ):
        self.remaining = seconds
        self._on_tick = on_tick
        self._interval = interval
        self._task: Optional[asyncio.Task] = None
        self._stopped = asyncio.Event()
        self._cancelled = False

    @property
    def active(self) -> bool:
        return self._task is not None and not self._stopped.is_set()

    @property
    def cancelled(self) -> bool:
        return self._cancelled

    def start(self) -> None:
        if self._task is not None:
            raise RuntimeError("CountdownTimer can only be started once")
        self._task = asyncio.get_running_loop().create_task(self._run())

    async def _run(self) -> None:
        try:
            while self.remaining > 0:
                await asyncio.sleep(self._interval)
                self.remaining -= 1
                self._on_tick(self.remaining)
        finally:
            self._stopped.set()

    def cancel(self) -> bool:
        """Stops the countdown. Returns False if it was not running."""
        if not self.active:
            return False
        self._cancelled = True
        self._stopped.set()
        self._task.cancel()
        logger.debug(f"Countdown cancelled with {self.remaining}s remaining")
        return True

    async def wait(self) -> bool:
        """Waits until the countdown ends. True if it reached zero, False if cancelled."""
        await self._stopped.wait()
        return not self._cancelled
