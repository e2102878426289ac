"""
Delayed Task Scheduler

Keeps deferred callbacks on a single logical timeline and fires them by
comparing their due time against a clock. Nothing runs on its own: the
owner calls ``run_due()``, either on every read or from a periodic ticker.
Everything happens on the caller's thread, so callbacks never overlap
with request handlers running on the same event loop.
"""

import heapq
import itertools
import logging
from datetime import datetime, timedelta
from typing import Callable

from food_ordering.services.clock import BaseClock

logger = logging.getLogger(__name__)

Callback = Callable[[datetime], None]


class StatusScheduler:
    """
    Min-heap of (due time, sequence, callback) entries.

    Entries with the same due time fire in the order they were scheduled.
    Each callback receives its own due time. There is no cancellation.
    """

    def __init__(self, clock: BaseClock):
        self.clock = clock
        self._queue: list[tuple[datetime, int, Callback]] = []
        self._sequence = itertools.count()

    def __len__(self) -> int:
        return len(self._queue)

    def schedule_at(self, due: datetime, callback: Callback) -> None:
        heapq.heappush(self._queue, (due, next(self._sequence), callback))

    def schedule_after(self, start: datetime, delay_seconds: float, callback: Callback) -> datetime:
        """Schedule ``callback`` at ``start + delay_seconds`` and return that time."""
        due = start + timedelta(seconds=delay_seconds)
        self.schedule_at(due, callback)
        return due

    def run_due(self) -> int:
        """
        Fire every entry whose due time has been reached.

        Returns:
            int: Number of callbacks fired
        """
        now = self.clock.now()
        fired = 0
        while self._queue and self._queue[0][0] <= now:
            due, _, callback = heapq.heappop(self._queue)
            try:
                callback(due)
            except Exception:
                logger.exception(f"Scheduled task due at {due.isoformat()} failed")
            fired += 1
        return fired
