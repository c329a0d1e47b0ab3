"""Department roster.

This module provides the DepartmentRoster, which owns the engineers of a
support rotation, indexes them by last-served date, and answers who is on
duty on a given date. Rosters are immutable: recording a service returns a
new roster and leaves the original untouched.
"""

import logging
from typing import Iterable, Optional

from supportrota.domain.errors import (
    DuplicateLastServedDate,
    InvalidQuery,
    NoEngineerFound,
    NotABusinessDay,
)
from supportrota.domain.models import (
    Calendar,
    CalendarDate,
    DutyCalendar,
    Engineer,
    EngineerIdentifier,
    Month,
    Period,
    Rotation,
    Year,
)
from supportrota.scheduling.resolver import RotationResolver

logger = logging.getLogger(__name__)


class DepartmentRoster:
    """The engineers of a support rotation and their duty lookups.

    Use ``DepartmentRoster.build`` to construct a roster; it enforces that
    no two engineers share a last-served date.

    Example:
        >>> roster = DepartmentRoster.build(engineers)
        >>> engineer = roster.engineer_serving_on(
        ...     CalendarDate.of(2022, 12, 22), today=CalendarDate.of(2022, 12, 15)
        ... )
        >>> roster = roster.record_service(engineer, CalendarDate.of(2022, 12, 22))
    """

    def __init__(
        self,
        engineers: dict[EngineerIdentifier, Engineer],
        by_last_served: dict[CalendarDate, Engineer],
        reservations: dict[CalendarDate, Engineer],
        resolver: RotationResolver,
    ):
        """Assemble a roster from a prebuilt last-served index.

        Internal: callers should use ``build``, which constructs the index.

        Raises:
            ValueError: If ``by_last_served`` does not map each engineer's
                last-served date to that engineer.
        """
        if len(by_last_served) != len(engineers) or any(
            by_last_served.get(e.last_served) != e for e in engineers.values()
        ):
            raise ValueError("Last-served index does not match the engineers")
        self._engineers = engineers
        self._by_last_served = by_last_served
        self._reservations = reservations
        self.resolver = resolver
        self.rotation = Rotation.from_engineer_count(len(engineers))

    @classmethod
    def build(
        cls,
        engineers: Iterable[Engineer],
        reservations: Optional[dict[CalendarDate, Engineer]] = None,
        resolver: Optional[RotationResolver] = None,
    ) -> "DepartmentRoster":
        """Build a roster from engineers and optional date reservations.

        Args:
            engineers: The engineers on the rotation.
            reservations: Dates pre-assigned to an engineer, overriding rotation.
            resolver: Resolver used for rotation lookups.

        Raises:
            DuplicateLastServedDate: If two engineers share a last-served date.
            ValueError: If an identifier appears twice.
        """
        by_id: dict[EngineerIdentifier, Engineer] = {}
        by_last_served: dict[CalendarDate, Engineer] = {}

        for engineer in engineers:
            if engineer.id in by_id:
                raise ValueError(f"Engineer {engineer.id} appears more than once")
            holder = by_last_served.get(engineer.last_served)
            if holder is not None:
                raise DuplicateLastServedDate(
                    f"{engineer.name} and {holder.name} both last served on "
                    f"{engineer.last_served}",
                    details={
                        "date": engineer.last_served.isoformat(),
                        "engineers": [str(holder.id), str(engineer.id)],
                    },
                )
            by_id[engineer.id] = engineer
            by_last_served[engineer.last_served] = engineer

        roster = cls(
            engineers=by_id,
            by_last_served=by_last_served,
            reservations=dict(reservations or {}),
            resolver=resolver or RotationResolver(),
        )
        logger.debug(
            "Built roster with %d engineers, %d reservations, rotation of %d days",
            len(by_id), len(roster._reservations), roster.rotation.length_in_days,
        )
        return roster

    @property
    def engineers(self) -> list[Engineer]:
        """Engineers ordered by last-served date, most recent first."""
        return sorted(self._engineers.values(), key=lambda e: e.last_served, reverse=True)

    @property
    def reservations(self) -> dict[CalendarDate, Engineer]:
        return dict(self._reservations)

    def __len__(self) -> int:
        return len(self._engineers)

    def get_engineer(self, identifier: EngineerIdentifier) -> Optional[Engineer]:
        """Get the roster's current record for an engineer."""
        return self._engineers.get(identifier)

    def engineer_last_served_on(self, served_on: CalendarDate) -> Optional[Engineer]:
        """Get the engineer whose last service was on a date, if any."""
        return self._by_last_served.get(served_on)

    def engineer_serving_on(
        self,
        on: CalendarDate,
        today: CalendarDate,
    ) -> Engineer:
        """Find the engineer on duty on a date.

        A reservation for the date takes precedence over the rotation.

        Args:
            on: The date to look up.
            today: The current date, supplied by the caller.

        Raises:
            DegenerateRotation: If the roster is empty.
            InvalidQuery: If ``on`` is not after ``today`` and not reserved.
            NoEngineerFound: If no engineer last served on the reference date.
            OutOfRange: If the reference date cannot be represented.
        """
        reserved = self._reservations.get(on)
        if reserved is not None:
            return reserved

        reference = self.resolver.resolve(on, self.rotation, today)
        engineer = self._by_last_served.get(reference)
        if engineer is None:
            raise NoEngineerFound(
                f"No engineer last served on {reference} (reference date for {on})",
                details={"date": on.isoformat(), "reference_date": reference.isoformat()},
            )
        return engineer

    def record_service(
        self,
        engineer: Engineer,
        service_date: CalendarDate,
    ) -> "DepartmentRoster":
        """Record that an engineer served support on a date.

        Args:
            engineer: The engineer who served.
            service_date: The date served.

        Returns:
            A new roster with the engineer's last-served date updated.

        Raises:
            NotABusinessDay: If ``service_date`` is a weekend.
            NoEngineerFound: If the engineer is not on this roster.
            DuplicateLastServedDate: If another engineer last served on ``service_date``.
        """
        if not service_date.is_business_day():
            raise NotABusinessDay(
                f"Cannot record service on {service_date} ({service_date.weekday_name})",
                details={"date": service_date.isoformat()},
            )

        current = self._engineers.get(engineer.id)
        if current is None:
            raise NoEngineerFound(
                f"Engineer {engineer.name} ({engineer.id}) is not on this roster",
                details={"engineer": str(engineer.id)},
            )

        holder = self._by_last_served.get(service_date)
        if holder is not None and holder.id != current.id:
            raise DuplicateLastServedDate(
                f"{holder.name} already last served on {service_date}",
                details={"date": service_date.isoformat(), "engineer": str(holder.id)},
            )

        updated = current.with_last_served(service_date)

        engineers = dict(self._engineers)
        engineers[updated.id] = updated

        by_last_served = dict(self._by_last_served)
        del by_last_served[current.last_served]
        by_last_served[service_date] = updated

        reservations = {
            d: updated if e.id == updated.id else e
            for d, e in self._reservations.items()
        }

        logger.info(
            "Recorded service for %s on %s (previously %s)",
            updated.name, service_date, current.last_served,
        )
        return DepartmentRoster(
            engineers=engineers,
            by_last_served=by_last_served,
            reservations=reservations,
            resolver=self.resolver,
        )

    def duty_calendar(
        self,
        start: CalendarDate,
        end: CalendarDate,
        today: CalendarDate,
        include_weekends: bool = False,
    ) -> DutyCalendar:
        """Resolve the engineer on duty for every date in a range.

        Dates that are not after ``today`` or that have no matching engineer
        are listed as unresolved with the reason. Other failures propagate.

        Args:
            start: First date of the range.
            end: Last date of the range (inclusive).
            today: The current date, supplied by the caller.
            include_weekends: Whether to list Saturdays and Sundays.
        """
        if end < start:
            raise ValueError(f"End date {end} is before start date {start}")

        result = DutyCalendar(start=start, end=end)
        for offset in range(start.days_until(end) + 1):
            current = start.step_forward(offset)
            if not include_weekends and not current.is_business_day():
                continue
            try:
                result.assignments[current] = self.engineer_serving_on(current, today)
            except (InvalidQuery, NoEngineerFound) as exc:
                result.unresolved[current] = exc.message

        logger.debug(
            "Duty calendar %s..%s: %d resolved, %d unresolved",
            start, end, len(result.assignments), len(result.unresolved),
        )
        return result

    def calendar(self, period: Period, today: CalendarDate) -> Calendar:
        """List the business days of a period on which its engineer is on duty.

        Raises:
            NoEngineerFound: If the period's engineer is not on this roster.
        """
        if period.engineer_identifier not in self._engineers:
            raise NoEngineerFound(
                f"Engineer {period.engineer_identifier} is not on this roster",
                details={"engineer": str(period.engineer_identifier)},
            )
        duty = self.duty_calendar(period.first_day, period.last_day, today)
        return Calendar(period=period, dates=duty.get_engineer_dates(period.engineer_identifier))

    def support_days_for_month(
        self,
        engineer: Engineer,
        month: Month,
        year: Year,
        today: CalendarDate,
    ) -> list[CalendarDate]:
        """Dates in a month on which an engineer is on duty."""
        return self.calendar(Period(engineer.id, month, year), today).dates

    def to_dict(self) -> dict:
        """Convert to a dictionary for serialization."""
        return {
            "engineers": [e.to_dict() for e in self.engineers],
            "reservations": {
                d.isoformat(): str(e.id) for d, e in sorted(self._reservations.items())
            },
        }
