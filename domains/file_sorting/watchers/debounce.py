"""
Debounced run loop for File Sorting domain.

Bursts of change notifications collapse into a single run: every
notification restarts one shared timer and only the timer firing starts a
run. Runs never overlap; a timer that fires while a run is in flight is
remembered and produces exactly one follow-up run.
"""

import asyncio
from typing import Any, Awaitable, Callable, Optional

from loguru import logger

from app.models.schemas import RunOptions

RunCallback = Callable[[RunOptions], Awaitable[Any]]


class DebouncedWatcher:
    """Single-slot timer plus the options for the next run."""

    def __init__(
        self,
        run: RunCallback,
        options: RunOptions,
        loop: Optional[asyncio.AbstractEventLoop] = None,
    ):
        self._run = run
        self.options = options
        self._loop = loop
        self._timer: Optional[asyncio.TimerHandle] = None
        self._task: Optional[asyncio.Task] = None
        self._running = False
        self._deferred = False
        self.runs_started = 0

    @property
    def loop(self) -> asyncio.AbstractEventLoop:
        if self._loop is None:
            self._loop = asyncio.get_running_loop()
        return self._loop

    @property
    def interval(self) -> float:
        """Debounce interval in seconds."""
        return self.options.debounce_interval_ms / 1000

    @property
    def pending(self) -> bool:
        """Whether a run is scheduled or deferred."""
        return self._timer is not None or self._deferred

    @property
    def running(self) -> bool:
        return self._running

    def reset(self, options: Optional[RunOptions] = None):
        """
        Restart the debounce timer. Must be called on the loop's thread.

        Args:
            options: Replacement options for the next run
        """
        if options is not None:
            self.options = options

        if self._timer is not None:
            self._timer.cancel()
        self._timer = self.loop.call_later(self.interval, self._fire)

    def reset_threadsafe(self):
        """Restart the debounce timer from another thread (watchdog observer)."""
        self.loop.call_soon_threadsafe(self.reset)

    def cancel(self):
        """Drop any scheduled or deferred run. An in-flight run is not interrupted."""
        if self._timer is not None:
            self._timer.cancel()
            self._timer = None
        self._deferred = False

    async def wait_idle(self):
        """Wait for the in-flight run, and any run deferred behind it, to finish."""
        if self._task is not None:
            await self._task

    def _fire(self):
        self._timer = None

        if self._running:
            logger.debug("Change arrived mid-run, deferring next run")
            self._deferred = True
            return

        self._task = self.loop.create_task(self._run_serialized())

    async def _run_serialized(self):
        self._running = True
        try:
            while True:
                self._deferred = False
                self.runs_started += 1
                try:
                    await self._run(self.options)
                except Exception as e:
                    logger.error(f"Run failed: {e}")

                if not self._deferred:
                    break
        finally:
            self._running = False
