"""Expiration Sweeper — periodic bulk scan that expires overdue pending actions.

Invariants:
    - One tick = one CoordinationEngine.sweep_expirations() call (idempotent)
    - Confirmed and already-expired actions are never touched
    - A failing tick is logged and the loop keeps running; the worst case is a
      pending action that waits one more period
    - Runs for the lifetime of the process; stop() exists only for shutdown

Design Decisions:
    - asyncio task started in the FastAPI lifespan
    - sweep_once() is public so tests and the manual /sweeps route share the tick body
"""

import asyncio
import logging

from pairgate.services.coordination_engine import CoordinationEngine

logger = logging.getLogger(__name__)


class ExpirationSweeper:
    def __init__(self, engine: CoordinationEngine, interval_seconds: float = 5.0):
        self._engine = engine
        self._interval = interval_seconds
        self._task: asyncio.Task | None = None
        self.ticks = 0

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    def sweep_once(self) -> list[str]:
        self.ticks += 1
        return self._engine.sweep_expirations()

    async def run(self) -> None:
        while True:
            await asyncio.sleep(self._interval)
            try:
                self.sweep_once()
            except Exception as e:
                logger.error(f"Expiration sweep failed: {e}", exc_info=True)

    def start(self) -> asyncio.Task:
        if not self.running:
            self._task = asyncio.create_task(self.run(), name="expiration-sweeper")
            logger.info(f"Expiration sweeper started (every {self._interval}s)")
        return self._task

    async def stop(self) -> None:
        if self._task is None:
            return
        self._task.cancel()
        try:
            await self._task
        except asyncio.CancelledError:
            pass
        self._task = None


# Singleton (started on startup)
sweeper: ExpirationSweeper | None = None
