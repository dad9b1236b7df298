import asyncio
import logging
from typing import Optional

from ..errors import ConfigurationError
from ..manager import SessionManager

logger = logging.getLogger(__name__)

DEFAULT_MIN_INTERVAL = 1.0


class SessionCollector:
    def __init__(self, manager: SessionManager, interval: Optional[float] = None):
        """
        Initialize session collector.

        Args:
            manager: Manager whose provider is swept
            interval: Seconds between sweeps (defaults to the manager's max lifetime)
        """
        self.manager = manager
        if interval is None:
            # A zero lifetime would make the loop spin
            interval = manager.max_lifetime or DEFAULT_MIN_INTERVAL
        if interval <= 0:
            raise ConfigurationError(
                "Session collector interval must be positive", details={"interval": interval}
            )
        self.interval = float(interval)
        self.ticks = 0
        self.last_evicted = 0
        self._stop_event = asyncio.Event()
        self._task: Optional[asyncio.Task] = None

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    def start(self) -> None:
        """Start the background sweep task."""
        if self.running:
            return
        self._stop_event.clear()
        self._task = asyncio.create_task(self._run(), name="session-gc")
        logger.info(f"Session collector started (interval={self.interval}s)")

    async def stop(self) -> None:
        """Signal shutdown and wait for the loop to finish."""
        if self._task is None:
            return
        self._stop_event.set()
        try:
            await self._task
        finally:
            self._task = None
        logger.info("Session collector stopped")

    async def run_once(self) -> int:
        """
        Perform a single sweep.

        Returns:
            Number of sessions evicted
        """
        removed = await self.manager.session_gc()
        self.ticks += 1
        self.last_evicted = removed
        return removed

    async def _run(self) -> None:
        """
        Sweep loop.

        Logic:
        1. Wait for the interval or the stop signal, whichever comes first
        2. Exit on stop
        3. Sweep; a failed sweep is logged and retried next interval
        """
        while not self._stop_event.is_set():
            try:
                await asyncio.wait_for(self._stop_event.wait(), timeout=self.interval)
                break
            except asyncio.TimeoutError:
                pass

            try:
                await self.run_once()
            except Exception as e:
                logger.exception(f"Session sweep failed: {e}")

    async def __aenter__(self) -> "SessionCollector":
        self.start()
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.stop()
