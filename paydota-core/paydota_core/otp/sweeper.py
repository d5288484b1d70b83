"""
OTP Sweeper
===========
Background task that periodically purges terminal OTP records.
"""

import asyncio
from contextlib import suppress
from typing import Callable, Optional
import structlog

logger = structlog.get_logger(__name__)


class OTPSweeper:
    """
    Runs a cleanup callable on a fixed interval.

    The task is owned explicitly: start() schedules it on the running
    event loop and stop() cancels it and waits for it to finish.
    """

    def __init__(self, cleanup: Callable[[], int], interval_seconds: float = 60):
        self.cleanup = cleanup
        self.interval_seconds = interval_seconds
        self._task: Optional[asyncio.Task] = None

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    def start(self) -> None:
        """Schedule the sweep loop. Must be called from a running event loop."""
        if self.running:
            return
        self._task = asyncio.get_running_loop().create_task(self._run())
        logger.info("OTP sweeper started", interval_seconds=self.interval_seconds)

    async def stop(self) -> None:
        """Cancel the sweep loop and wait for it to exit."""
        if self._task is None:
            return
        task, self._task = self._task, None
        task.cancel()
        with suppress(asyncio.CancelledError):
            await task
        logger.info("OTP sweeper stopped")

    async def _run(self) -> None:
        while True:
            await asyncio.sleep(self.interval_seconds)
            try:
                self.cleanup()
            except Exception as e:
                logger.error("OTP cleanup failed", error=str(e))
