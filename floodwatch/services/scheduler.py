"""
Periodic refresh scheduling.

Runs the monitor on a fixed cadence in a background asyncio task. Changing
the cadence cancels the task and installs a new one; accumulated history
lives on the monitor and is unaffected.
"""

import asyncio
from typing import Optional

from floodwatch.services.feeds import UpstreamFetchError
from floodwatch.services.monitor import FloodMonitor
from floodwatch.utils.logging_config import get_logger

logger = get_logger(__name__)


class RefreshScheduler:
    """Background polling loop for a FloodMonitor."""

    def __init__(self, monitor: FloodMonitor, interval_seconds: float):
        if interval_seconds <= 0:
            raise ValueError("interval_seconds must be positive")
        self.monitor = monitor
        self.interval = interval_seconds
        self._task: Optional[asyncio.Task] = None
        self._inflight: Optional[asyncio.Future] = None

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    def start(self, immediate: bool = True) -> None:
        """Start polling; `immediate` runs the first cycle without waiting."""
        if self.running:
            return
        self._task = asyncio.create_task(self._run(immediate))
        logger.info(f"Refresh scheduler started, interval {self.interval:g}s")

    async def stop(self) -> None:
        """Cancel the loop, then wait for a cycle it left running."""
        if self._task is None:
            return
        task, self._task = self._task, None
        task.cancel()
        try:
            await task
        except asyncio.CancelledError:
            pass

        inflight, self._inflight = self._inflight, None
        if inflight is not None:
            await self._settle(inflight)
        logger.info("Refresh scheduler stopped")

    async def set_interval(self, seconds: float) -> None:
        """Change the polling cadence, reinstalling the loop if it is running."""
        if seconds <= 0:
            raise ValueError("seconds must be positive")
        was_running = self.running
        self.interval = seconds
        if was_running:
            await self.stop()
            self.start(immediate=False)

    async def _run(self, immediate: bool) -> None:
        if not immediate:
            await asyncio.sleep(self.interval)
        while True:
            await self._tick()
            await asyncio.sleep(self.interval)

    async def _tick(self) -> None:
        # Cancelling the loop leaves the cycle running; stop() collects it
        self._inflight = asyncio.ensure_future(self.monitor.refresh())
        await asyncio.wait({self._inflight})
        inflight, self._inflight = self._inflight, None
        await self._settle(inflight)

    @staticmethod
    async def _settle(cycle: asyncio.Future) -> None:
        """Wait for a refresh cycle and log how it failed, if it did."""
        try:
            await cycle
        except asyncio.CancelledError:
            if not cycle.cancelled():
                raise
        except UpstreamFetchError as e:
            logger.warning(f"Scheduled refresh failed: {e}")
        except Exception:
            logger.exception("Scheduled refresh crashed")
