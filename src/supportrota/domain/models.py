"""Domain models for the support rota.

This module contains the value types used throughout the rota: calendar
dates with business-day arithmetic, the rotation cycle, engineers, and the
month/period/calendar types used for duty listings.
"""

import calendar as _calendar
import uuid
from dataclasses import dataclass, field, replace
from datetime import MAXYEAR, MINYEAR, date, datetime, timedelta
from enum import Enum
from typing import Iterator, Optional

from supportrota.domain.errors import OutOfRange

# Monday=0 ... Sunday=6
WEEKEND_DAYS = frozenset({5, 6})
BUSINESS_DAYS_PER_WEEK = 5
WEEKEND_LENGTH_IN_DAYS = 2


@dataclass(frozen=True, order=True)
class CalendarDate:
    """A calendar date with no time component.

    Values are immutable; stepping operations return new instances.

    Attributes:
        value: The underlying date.
    """

    value: date

    def __post_init__(self):
        if isinstance(self.value, datetime):
            object.__setattr__(self, "value", self.value.date())
        elif not isinstance(self.value, date):
            raise TypeError(f"CalendarDate requires a date, got {type(self.value).__name__}")

    @classmethod
    def of(cls, year: int, month: int, day: int) -> "CalendarDate":
        """Create a date from its year, month and day."""
        return cls(date(year, month, day))

    @classmethod
    def from_iso(cls, text: str) -> "CalendarDate":
        """Parse a ``YYYY-MM-DD`` string."""
        return cls(date.fromisoformat(text.strip()))

    @property
    def weekday_name(self) -> str:
        """Full English weekday name, e.g. ``Thursday``."""
        return self.value.strftime("%A")

    def is_business_day(self) -> bool:
        """True unless the date falls on a Saturday or Sunday."""
        return self.value.weekday() not in WEEKEND_DAYS

    def step_back(self, n_days: int) -> "CalendarDate":
        """Return the date ``n_days`` earlier.

        Raises:
            ValueError: If ``n_days`` is negative.
            OutOfRange: If the result precedes the earliest representable date.
        """
        if n_days < 0:
            raise ValueError(f"n_days must be non-negative, got {n_days}")
        try:
            return CalendarDate(self.value - timedelta(days=n_days))
        except OverflowError:
            raise OutOfRange(
                f"{self} minus {n_days} days is out of range",
                details={"date": self.isoformat(), "n_days": n_days},
            ) from None

    def step_forward(self, n_days: int) -> "CalendarDate":
        """Return the date ``n_days`` later."""
        if n_days < 0:
            raise ValueError(f"n_days must be non-negative, got {n_days}")
        try:
            return CalendarDate(self.value + timedelta(days=n_days))
        except OverflowError:
            raise OutOfRange(
                f"{self} plus {n_days} days is out of range",
                details={"date": self.isoformat(), "n_days": n_days},
            ) from None

    def days_until(self, other: "CalendarDate") -> int:
        """Signed number of days from this date to ``other``.

        Positive when ``other`` is later.
        """
        return (other.value - self.value).days

    def isoformat(self) -> str:
        return self.value.isoformat()

    def __str__(self) -> str:
        return self.value.isoformat()

    def __repr__(self) -> str:
        return f"CalendarDate({self.value.isoformat()})"


@dataclass(frozen=True)
class Rotation:
    """The duty cycle of a roster.

    Each group of five engineers adds a weekend's worth of slack days to
    the cycle, so that duty keeps landing on business days.

    Attributes:
        length_in_days: Number of days after which the duty sequence repeats.
    """

    length_in_days: int

    @classmethod
    def from_engineer_count(cls, count: int) -> "Rotation":
        """Derive the rotation for a roster of ``count`` engineers."""
        if count < 0:
            raise ValueError(f"Engineer count must be non-negative, got {count}")
        length = count // BUSINESS_DAYS_PER_WEEK * WEEKEND_LENGTH_IN_DAYS + count
        return cls(length_in_days=length)

    @property
    def is_degenerate(self) -> bool:
        """True when the cycle has no length (empty roster)."""
        return self.length_in_days <= 0


@dataclass(frozen=True)
class EngineerIdentifier:
    """Opaque unique identifier for an engineer."""

    value: uuid.UUID

    @classmethod
    def generate(cls) -> "EngineerIdentifier":
        return cls(uuid.uuid4())

    @classmethod
    def parse(cls, text: str) -> "EngineerIdentifier":
        """Parse the canonical string form of an identifier."""
        return cls(uuid.UUID(text.strip()))

    def __str__(self) -> str:
        return str(self.value)


@dataclass(frozen=True)
class Engineer:
    """An engineer taking part in the support rotation.

    Equality and hashing use the identifier only.

    Attributes:
        id: Unique identifier for the engineer.
        name: Display name.
        last_served: The last date the engineer was on support duty.
    """

    id: EngineerIdentifier
    name: str = field(compare=False)
    last_served: CalendarDate = field(compare=False)

    def with_last_served(self, served_on: CalendarDate) -> "Engineer":
        """Copy of this engineer with a new last-served date."""
        return replace(self, last_served=served_on)

    def to_dict(self) -> dict:
        """Convert to a dictionary for serialization."""
        return {
            "id": str(self.id),
            "name": self.name,
            "last_served": self.last_served.isoformat(),
        }

    @classmethod
    def from_dict(cls, data: dict) -> "Engineer":
        """Create from a dictionary produced by ``to_dict``."""
        return cls(
            id=EngineerIdentifier.parse(data["id"]),
            name=data["name"],
            last_served=CalendarDate.from_iso(data["last_served"]),
        )


class Month(Enum):
    """Calendar months, valued by their number."""

    JANUARY = 1
    FEBRUARY = 2
    MARCH = 3
    APRIL = 4
    MAY = 5
    JUNE = 6
    JULY = 7
    AUGUST = 8
    SEPTEMBER = 9
    OCTOBER = 10
    NOVEMBER = 11
    DECEMBER = 12

    @property
    def display_name(self) -> str:
        return _calendar.month_name[self.value]

    def first_day(self, year: "Year") -> CalendarDate:
        return CalendarDate.of(year.value, self.value, 1)

    def last_day(self, year: "Year") -> CalendarDate:
        _, days_in_month = _calendar.monthrange(year.value, self.value)
        return CalendarDate.of(year.value, self.value, days_in_month)


@dataclass(frozen=True)
class Year:
    """A calendar year within the representable date range."""

    value: int

    def __post_init__(self):
        if not MINYEAR <= self.value <= MAXYEAR:
            raise ValueError(f"Year must be between {MINYEAR} and {MAXYEAR}, got {self.value}")


@dataclass(frozen=True)
class Period:
    """One engineer's month of the rota.

    Attributes:
        engineer_identifier: The engineer the period belongs to.
        month: Calendar month.
        year: Calendar year.
    """

    engineer_identifier: EngineerIdentifier
    month: Month
    year: Year

    @property
    def first_day(self) -> CalendarDate:
        return self.month.first_day(self.year)

    @property
    def last_day(self) -> CalendarDate:
        return self.month.last_day(self.year)

    def dates(self) -> list[CalendarDate]:
        """All dates of the month, in order."""
        first = self.first_day
        return [first.step_forward(i) for i in range(first.days_until(self.last_day) + 1)]

    def business_days(self) -> list[CalendarDate]:
        """Business days of the month, in order."""
        return [d for d in self.dates() if d.is_business_day()]


@dataclass
class Calendar:
    """The duty dates of one engineer within a period.

    Attributes:
        period: The engineer and month the calendar covers.
        dates: Dates the engineer is on duty, in order.
    """

    period: Period
    dates: list[CalendarDate] = field(default_factory=list)

    def __len__(self) -> int:
        return len(self.dates)

    def __iter__(self) -> Iterator[CalendarDate]:
        return iter(self.dates)

    def contains(self, served_on: CalendarDate) -> bool:
        """Check if the engineer is on duty on a date."""
        return served_on in self.dates


@dataclass
class DutyCalendar:
    """Who is on duty for each date of a range.

    Attributes:
        start: First date of the range.
        end: Last date of the range (inclusive).
        assignments: Dates mapped to the engineer on duty.
        unresolved: Dates with no engineer, mapped to the reason.
    """

    start: CalendarDate
    end: CalendarDate
    assignments: dict[CalendarDate, Engineer] = field(default_factory=dict)
    unresolved: dict[CalendarDate, str] = field(default_factory=dict)

    @property
    def dates(self) -> list[CalendarDate]:
        """All listed dates (resolved or not), in order."""
        return sorted(set(self.assignments) | set(self.unresolved))

    @property
    def is_complete(self) -> bool:
        """True when every listed date has an engineer."""
        return not self.unresolved

    def get_engineer(self, on: CalendarDate) -> Optional[Engineer]:
        """Engineer on duty on a date, if resolved."""
        return self.assignments.get(on)

    def get_engineer_dates(self, identifier: EngineerIdentifier) -> list[CalendarDate]:
        """Dates an engineer is on duty within the range."""
        return sorted(d for d, e in self.assignments.items() if e.id == identifier)

    def duty_counts(self) -> dict[EngineerIdentifier, int]:
        """Number of duty days per engineer."""
        counts: dict[EngineerIdentifier, int] = {}
        for engineer in self.assignments.values():
            counts[engineer.id] = counts.get(engineer.id, 0) + 1
        return counts
