"""
Bounded exponential backoff for File Sorting domain.

Each relocation attempt owns its own scheduler, so backoff clocks of
different entries are independent.
"""

import asyncio
from typing import Any, Awaitable, Callable, Optional

from loguru import logger

from app.utils.helpers import to_millis
from domains.file_sorting.errors import RetryExhausted

Sleeper = Callable[[float], Awaitable[Any]]


class RetryScheduler:
    """Runs a fallible async operation with doubling delays between attempts."""

    def __init__(
        self,
        base_delay: float = 0.5,
        max_retries: int = 5,
        sleep: Optional[Sleeper] = None,
    ):
        """
        Initialize scheduler.

        Args:
            base_delay: First wait in seconds
            max_retries: Number of waits before giving up
            sleep: Awaitable sleep used between attempts (defaults to asyncio.sleep)
        """
        if base_delay <= 0:
            raise ValueError("base_delay must be positive")
        if max_retries < 0:
            raise ValueError("max_retries must not be negative")

        self.base_delay = base_delay
        self.max_retries = max_retries
        self.ceiling = base_delay * 2 ** max_retries
        self._sleep = sleep or asyncio.sleep

        self.attempts = 0
        self.waits: list[float] = []
        self.exhausted: Optional[RetryExhausted] = None

    async def run(self, operation: Callable[[], Awaitable[Any]]) -> bool:
        """
        Run ``operation`` until it succeeds or the delay reaches the ceiling.

        Every exception is treated the same way. Exhaustion is reported
        through the return value and :attr:`exhausted`, never raised.

        Returns:
            True if the operation eventually succeeded
        """
        delay = self.base_delay

        while True:
            self.attempts += 1
            try:
                await operation()
                return True

            except Exception as e:
                if delay >= self.ceiling:
                    self.exhausted = RetryExhausted(
                        f"Gave up after {self.attempts} attempts: {e}",
                        attempts=self.attempts,
                        last_error=e,
                    )
                    return False

                logger.info(
                    f"Retrying in {to_millis(delay)}ms... "
                    f"({to_millis(delay)}/{to_millis(self.ceiling)})"
                )
                await self._sleep(delay)
                self.waits.append(delay)
                delay *= 2
