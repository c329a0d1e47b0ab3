"""Providers of "today" for rota resolution.

Resolution never reads the system clock itself; callers pass today's date
explicitly, usually taken from one of these clocks.
"""

from abc import ABC, abstractmethod
from datetime import datetime, timezone

from supportrota.domain.models import CalendarDate


class Clock(ABC):
    """Abstract source of the current calendar date."""

    @abstractmethod
    def today(self) -> CalendarDate:
        pass


class SystemClock(Clock):
    """Today's date in UTC."""

    def today(self) -> CalendarDate:
        return CalendarDate(datetime.now(timezone.utc).date())


class FixedClock(Clock):
    """Always returns the same date. Used for tests and ``--today`` overrides."""

    def __init__(self, fixed: CalendarDate):
        self.fixed = fixed

    def today(self) -> CalendarDate:
        return self.fixed

    def __repr__(self) -> str:
        return f"FixedClock({self.fixed})"
