"""Policy definitions for rota resolution rules.

This module contains the configurable rule for what happens when a
reference date candidate lands on a weekend. Policies are kept separate
from the resolver to allow independent testing and easy modification.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass

from supportrota.domain.errors import OutOfRange
from supportrota.domain.models import WEEKEND_LENGTH_IN_DAYS, CalendarDate


class WeekendSnapPolicy(ABC):
    """Abstract base class for moving a weekend candidate onto a business day."""

    @abstractmethod
    def snap(self, candidate: CalendarDate) -> CalendarDate:
        """Map a non-business-day candidate to a business day.

        Args:
            candidate: A reference date candidate that is not a business day.

        Returns:
            The reference date to use instead.
        """
        pass


@dataclass
class CompactWeekendPolicy(WeekendSnapPolicy):
    """Step back a fixed number of days, once.

    A Saturday lands on Thursday and a Sunday on Friday. The rotation
    length reserves two slack days per five engineers to absorb weekends,
    and this rule relies on that: it does not loop, so with any other
    business-day definition it could return a non-business day.
    """

    days_back: int = WEEKEND_LENGTH_IN_DAYS

    def snap(self, candidate: CalendarDate) -> CalendarDate:
        return candidate.step_back(self.days_back)


@dataclass
class PreviousBusinessDayPolicy(WeekendSnapPolicy):
    """Step back one day at a time until a business day is reached.

    A Saturday lands on Friday and a Sunday on Friday. Bounded by
    ``max_steps`` so a misconfigured calendar cannot loop forever.
    """

    max_steps: int = 7

    def snap(self, candidate: CalendarDate) -> CalendarDate:
        current = candidate
        for _ in range(self.max_steps):
            current = current.step_back(1)
            if current.is_business_day():
                return current
        raise OutOfRange(
            f"No business day within {self.max_steps} days before {candidate}",
            details={"date": candidate.isoformat(), "max_steps": self.max_steps},
        )


SNAP_POLICIES = {
    "compact": CompactWeekendPolicy,
    "previous_business_day": PreviousBusinessDayPolicy,
}


@dataclass
class RotaConfig:
    """Configuration for rota resolution.

    Attributes:
        weekend_snap: Name of the weekend snap policy
            (``compact`` or ``previous_business_day``).
    """

    weekend_snap: str = "compact"

    def __post_init__(self):
        if self.weekend_snap not in SNAP_POLICIES:
            raise ValueError(
                f"Unknown weekend snap policy '{self.weekend_snap}', "
                f"expected one of {sorted(SNAP_POLICIES)}"
            )

    def create_policy(self) -> WeekendSnapPolicy:
        """Instantiate the configured weekend snap policy."""
        return SNAP_POLICIES[self.weekend_snap]()
