"""
Periodic refresher: the host's scheduled callback.

Every `interval` seconds it opens a fresh store, runs Tracker.refresh(now)
and closes the store again. The streak grows with wall-clock time, so this
is what carries the high score forward when nobody is looking at the page.

The loop sleeps first, then refreshes in a worker thread (the store calls
are blocking). Cancel the task to stop it.
"""
from __future__ import annotations

import asyncio
import logging
from contextlib import AbstractContextManager
from typing import Callable, Optional

from dogcare.services.store import KeyValueStore
from dogcare.services.timefmt import now_ms
from dogcare.services.tracker import DisplayModel, Tracker

logger = logging.getLogger(__name__)


class PeriodicRefresher:
    def __init__(
        self,
        open_store: Callable[[], AbstractContextManager[KeyValueStore]],
        interval: float,
        display_tz: str = "UTC",
        clock: Callable[[], int] = now_ms,
    ):
        self.open_store = open_store
        self.interval = interval
        self.display_tz = display_tz
        self.clock = clock
        self.ticks = 0
        self.last_display: Optional[DisplayModel] = None
        self._task: Optional[asyncio.Task] = None

    def tick(self) -> DisplayModel:
        with self.open_store() as store:
            display = Tracker(store, display_tz=self.display_tz).refresh(self.clock())
        self.ticks += 1
        self.last_display = display
        logger.debug(
            "Refresh #%d: streak=%s high_score=%d",
            self.ticks, display.streak_text, display.high_score,
        )
        return display

    async def run(self) -> None:
        while True:
            await asyncio.sleep(self.interval)
            try:
                await asyncio.to_thread(self.tick)
            except Exception:
                # Keep the timer alive; the next tick retries against the store.
                logger.exception("Periodic refresh failed")

    def start(self) -> None:
        if self._task is None:
            self._task = asyncio.get_running_loop().create_task(self.run())
            logger.info("Periodic refresher started (every %ss)", self.interval)

    async def stop(self) -> None:
        if self._task is None:
            return
        self._task.cancel()
        try:
            await self._task
        except asyncio.CancelledError:
            pass
        self._task = None
        logger.info("Periodic refresher stopped after %d ticks", self.ticks)
