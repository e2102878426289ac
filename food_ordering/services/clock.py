"""
Clock Abstraction

The order status timeline is driven by elapsed wall-clock time. Services
read the time through a clock object so tests can move time forward
without sleeping.

    - SystemClock: real UTC time (server)
    - ManualClock: time only moves when ``advance()`` is called (tests)
"""

from abc import ABC, abstractmethod
from datetime import datetime, timedelta, timezone
from typing import Optional


class BaseClock(ABC):
    """Source of the current time as an aware UTC datetime."""

    @property
    @abstractmethod
    def provider_name(self) -> str:
        """Return the name of the clock implementation."""
        pass

    @abstractmethod
    def now(self) -> datetime:
        pass


class SystemClock(BaseClock):

    @property
    def provider_name(self) -> str:
        return "system"

    def now(self) -> datetime:
        return datetime.now(timezone.utc)


class ManualClock(BaseClock):
    """
    Clock that only advances when told to.

    Example:
        >>> clock = ManualClock()
        >>> start = clock.now()
        >>> clock.advance(2.5)
        >>> (clock.now() - start).total_seconds()
        2.5
    """

    def __init__(self, start: Optional[datetime] = None):
        self._now = start or datetime(2024, 1, 1, 12, 0, tzinfo=timezone.utc)

    @property
    def provider_name(self) -> str:
        return "manual"

    def now(self) -> datetime:
        return self._now

    def advance(self, seconds: float) -> datetime:
        if seconds < 0:
            raise ValueError("ManualClock cannot move backwards")
        self._now += timedelta(seconds=seconds)
        return self._now
