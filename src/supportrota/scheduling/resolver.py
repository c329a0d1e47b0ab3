"""Rotation resolution.

Maps a future query date to the reference date: the date on which the
engineer now due for duty last served. This answers "whose turn was it one
cycle ago" without simulating the whole duty history.
"""

import logging
from typing import Optional

from supportrota.domain.errors import DegenerateRotation, InvalidQuery
from supportrota.domain.models import CalendarDate, Rotation
from supportrota.domain.policies import CompactWeekendPolicy, WeekendSnapPolicy

logger = logging.getLogger(__name__)


class RotationResolver:
    """Computes reference dates for a rotation.

    Example:
        >>> resolver = RotationResolver()
        >>> resolver.resolve(
        ...     CalendarDate.of(2022, 12, 22),
        ...     Rotation.from_engineer_count(5),
        ...     today=CalendarDate.of(2022, 12, 15),
        ... )
        CalendarDate(2022-12-15)
    """

    def __init__(self, snap_policy: Optional[WeekendSnapPolicy] = None):
        """Initialize resolver.

        Args:
            snap_policy: Rule applied when the candidate is not a business day.
                Defaults to stepping back two days once.
        """
        self.snap_policy = snap_policy or CompactWeekendPolicy()

    def resolve(
        self,
        query_date: CalendarDate,
        rotation: Rotation,
        today: CalendarDate,
    ) -> CalendarDate:
        """Find the reference date for a query date.

        Args:
            query_date: The future date to find the duty engineer for.
            rotation: The roster's rotation.
            today: The current date, supplied by the caller.

        Returns:
            The business day on which the due engineer last served.

        Raises:
            DegenerateRotation: If the rotation length is zero.
            InvalidQuery: If ``query_date`` is not strictly after ``today``.
            OutOfRange: If stepping back leaves the representable range.
        """
        if rotation.is_degenerate:
            raise DegenerateRotation(
                "Rotation length is zero; the roster has no engineers",
                details={"length_in_days": rotation.length_in_days},
            )

        days_ahead = today.days_until(query_date)
        if days_ahead <= 0:
            raise InvalidQuery(
                f"Cannot resolve service history for a non-future date: "
                f"{query_date} is not after {today}",
                details={"date": query_date.isoformat(), "today": today.isoformat()},
            )

        days_back = self.days_to_go_back(days_ahead, rotation)
        candidate = query_date.step_back(days_back)

        if candidate.is_business_day():
            reference = candidate
        else:
            reference = self.snap_policy.snap(candidate)

        logger.debug(
            "Resolved %s (today %s, %d days ahead, rotation %d): "
            "candidate %s, reference %s",
            query_date, today, days_ahead, rotation.length_in_days, candidate, reference,
        )
        return reference

    @staticmethod
    def days_to_go_back(days_ahead: int, rotation: Rotation) -> int:
        """Number of days between the query date and the reference candidate.

        Always in ``1..length_in_days``.
        """
        days_into_cycle = days_ahead % rotation.length_in_days
        return rotation.length_in_days - days_into_cycle
