"""
Weather Tick Service

Background service that drives the engine from the event loop: every update
interval it measures the elapsed monotonic time and hands it to
``engine.tick``. The engine quantizes it, so the update interval only sets
how promptly quanta are consumed.
"""

import asyncio
import logging
import time

from .engine import WeatherVibeEngine

logger = logging.getLogger(__name__)


class WeatherTickService:
    """Periodic driver for a WeatherVibeEngine."""

    def __init__(self, engine: WeatherVibeEngine, update_interval_seconds: float = 0.5):
        self.engine = engine
        self.update_interval_seconds = update_interval_seconds
        self._task: asyncio.Task | None = None
        self._running = False
        self._last_update: float | None = None

    @property
    def running(self) -> bool:
        return self._running

    async def start(self):
        """Start the tick service."""
        if self._running:
            logger.warning("Weather tick service already running")
            return

        self._running = True
        self._last_update = time.monotonic()
        self._task = asyncio.create_task(self._run_loop())
        logger.info(f"🌦️ Weather tick service started (update every {self.update_interval_seconds}s)")

    async def stop(self):
        """Stop the tick service."""
        if not self._running:
            return

        self._running = False
        if self._task:
            self._task.cancel()
            try:
                await self._task
            except asyncio.CancelledError:
                pass

        logger.info("🌦️ Weather tick service stopped")

    async def _run_loop(self):
        """Main loop - feeds elapsed time to the engine every interval."""
        while self._running:
            await asyncio.sleep(self.update_interval_seconds)
            now = time.monotonic()
            elapsed = now - self._last_update
            self._last_update = now
            try:
                self.engine.tick(elapsed)
            except Exception as e:
                logger.error(f"Error in weather tick loop: {e}", exc_info=True)
