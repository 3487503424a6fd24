"""
Simulation Clock

Background asyncio task that calls a tick function at a fixed interval.
The tick function is synchronous, so a tick always finishes before the next
one can start and nothing else on the event loop runs in the middle of it.
"""

import asyncio
import logging
from collections.abc import Callable

logger = logging.getLogger(__name__)


class SimulationClock:
    """Drives periodic simulation ticks."""

    def __init__(self, on_tick: Callable[[], None], interval_seconds: float = 4.0):
        self.on_tick = on_tick
        self.interval_seconds = interval_seconds
        self.tick_count = 0

        self._task: asyncio.Task | None = None
        self._running = False

    @property
    def running(self) -> bool:
        return self._running

    async def start(self):
        """Start ticking."""
        if self._running:
            logger.warning("Simulation clock already running")
            return

        self._running = True
        self._task = asyncio.create_task(self._run_loop())
        logger.info(f"⏱️ Simulation clock started (interval: {self.interval_seconds}s)")

    async def stop(self):
        """Stop ticking; returns once the loop task has finished."""
        if not self._running:
            return

        self._running = False
        if self._task:
            self._task.cancel()
            try:
                await self._task
            except asyncio.CancelledError:
                pass
            self._task = None

        logger.info(f"⏱️ Simulation clock stopped after {self.tick_count} tick(s)")

    async def _run_loop(self):
        """Main loop - one tick, then sleep for the interval."""
        while self._running:
            # First tick fires after one full interval
            await asyncio.sleep(self.interval_seconds)
            try:
                self.on_tick()
                self.tick_count += 1
            except Exception as e:
                logger.error(f"Error in simulation tick: {e}", exc_info=True)
