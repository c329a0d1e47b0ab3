"""Tests for domain models."""

from datetime import date, datetime

import pytest

from supportrota.domain.errors import OutOfRange
from supportrota.domain.models import (
    Calendar,
    CalendarDate,
    DutyCalendar,
    Engineer,
    Month,
    Period,
    Rotation,
    Year,
)

from helpers import make_engineer


class TestCalendarDate:
    """Tests for CalendarDate."""

    def test_weekdays_are_business_days(self):
        """Monday through Friday are business days."""
        for day in range(12, 17):  # Mon 12 Dec 2022 .. Fri 16 Dec 2022
            assert CalendarDate.of(2022, 12, day).is_business_day() is True

    def test_weekend_is_not_business_day(self):
        """Saturday and Sunday are not business days."""
        assert CalendarDate.of(2022, 12, 17).is_business_day() is False
        assert CalendarDate.of(2022, 12, 18).is_business_day() is False

    def test_step_back(self):
        """Stepping back returns an earlier date without mutating."""
        d = CalendarDate.of(2022, 12, 15)
        assert d.step_back(7) == CalendarDate.of(2022, 12, 8)
        assert d.step_back(15) == CalendarDate.of(2022, 11, 30)
        assert d == CalendarDate.of(2022, 12, 15)

    def test_step_back_zero_days(self):
        d = CalendarDate.of(2022, 12, 15)
        assert d.step_back(0) == d

    def test_step_back_negative_rejected(self):
        with pytest.raises(ValueError):
            CalendarDate.of(2022, 12, 15).step_back(-1)

    def test_step_back_underflow(self):
        """Stepping before the earliest date raises OutOfRange."""
        with pytest.raises(OutOfRange):
            CalendarDate(date.min).step_back(1)

    def test_step_forward_overflow(self):
        with pytest.raises(OutOfRange):
            CalendarDate(date.max).step_forward(1)

    def test_days_until_is_signed(self):
        """days_until is positive when the other date is later."""
        thursday = CalendarDate.of(2022, 12, 15)
        next_thursday = CalendarDate.of(2022, 12, 22)
        assert thursday.days_until(next_thursday) == 7
        assert next_thursday.days_until(thursday) == -7
        assert thursday.days_until(thursday) == 0

    def test_datetime_is_truncated_to_date(self):
        """A datetime is stored as its calendar date."""
        d = CalendarDate(datetime(2022, 12, 15, 10, 0))
        assert d == CalendarDate.of(2022, 12, 15)
        assert type(d.value) is date

    def test_non_date_rejected(self):
        with pytest.raises(TypeError):
            CalendarDate("2022-12-15")

    def test_iso_parsing_and_formatting(self):
        d = CalendarDate.from_iso("2022-12-15")
        assert d == CalendarDate.of(2022, 12, 15)
        assert str(d) == "2022-12-15"
        assert d.isoformat() == "2022-12-15"

    def test_weekday_name(self):
        assert CalendarDate.of(2022, 12, 15).weekday_name == "Thursday"

    def test_ordering_and_hashing(self):
        earlier = CalendarDate.of(2022, 12, 14)
        later = CalendarDate.of(2022, 12, 15)
        assert earlier < later
        assert {earlier: "a", CalendarDate.of(2022, 12, 14): "b"} == {earlier: "b"}


class TestRotation:
    """Tests for Rotation."""

    def test_five_engineers_give_seven_days(self):
        """Five engineers fill one business week plus a weekend."""
        assert Rotation.from_engineer_count(5).length_in_days == 7

    def test_two_slack_days_per_five_engineers(self):
        assert Rotation.from_engineer_count(1).length_in_days == 1
        assert Rotation.from_engineer_count(4).length_in_days == 4
        assert Rotation.from_engineer_count(9).length_in_days == 11
        assert Rotation.from_engineer_count(10).length_in_days == 14
        assert Rotation.from_engineer_count(12).length_in_days == 16

    def test_empty_roster_is_degenerate(self):
        rotation = Rotation.from_engineer_count(0)
        assert rotation.length_in_days == 0
        assert rotation.is_degenerate is True

    def test_non_empty_roster_is_not_degenerate(self):
        assert Rotation.from_engineer_count(3).is_degenerate is False

    def test_negative_count_rejected(self):
        with pytest.raises(ValueError):
            Rotation.from_engineer_count(-1)


class TestEngineer:
    """Tests for Engineer."""

    def test_equality_uses_identifier(self):
        """The same identifier with a different date is the same engineer."""
        alice = make_engineer("Alice", CalendarDate.of(2022, 12, 15))
        moved = alice.with_last_served(CalendarDate.of(2022, 12, 19))
        assert moved == alice
        assert hash(moved) == hash(alice)
        assert moved.last_served == CalendarDate.of(2022, 12, 19)
        assert alice.last_served == CalendarDate.of(2022, 12, 15)

    def test_different_identifiers_differ(self):
        alice = make_engineer("Alice", CalendarDate.of(2022, 12, 15))
        bob = make_engineer("Bob", CalendarDate.of(2022, 12, 15))
        assert alice != bob

    def test_dict_conversion(self):
        alice = make_engineer("Alice", CalendarDate.of(2022, 12, 15))
        data = alice.to_dict()
        assert data["name"] == "Alice"
        assert data["last_served"] == "2022-12-15"

        restored = Engineer.from_dict(data)
        assert restored == alice
        assert restored.name == "Alice"
        assert restored.last_served == alice.last_served


class TestMonthYearPeriod:
    """Tests for Month, Year and Period."""

    def test_month_display_name(self):
        assert Month.DECEMBER.display_name == "December"
        assert Month(2) is Month.FEBRUARY

    def test_month_bounds_in_leap_year(self):
        assert Month.FEBRUARY.last_day(Year(2024)) == CalendarDate.of(2024, 2, 29)
        assert Month.FEBRUARY.last_day(Year(2023)) == CalendarDate.of(2023, 2, 28)

    def test_year_out_of_range(self):
        with pytest.raises(ValueError):
            Year(0)
        with pytest.raises(ValueError):
            Year(10000)

    def test_period_dates(self):
        alice = make_engineer("Alice", CalendarDate.of(2022, 12, 15))
        period = Period(alice.id, Month.DECEMBER, Year(2022))
        dates = period.dates()
        assert len(dates) == 31
        assert dates[0] == CalendarDate.of(2022, 12, 1)
        assert dates[-1] == CalendarDate.of(2022, 12, 31)

    def test_period_business_days(self):
        """December 2022 has 22 business days."""
        alice = make_engineer("Alice", CalendarDate.of(2022, 12, 15))
        period = Period(alice.id, Month.DECEMBER, Year(2022))
        business_days = period.business_days()
        assert len(business_days) == 22
        assert all(d.is_business_day() for d in business_days)


class TestCalendars:
    """Tests for Calendar and DutyCalendar."""

    def test_calendar_contains(self):
        alice = make_engineer("Alice", CalendarDate.of(2022, 12, 15))
        calendar = Calendar(
            period=Period(alice.id, Month.DECEMBER, Year(2022)),
            dates=[CalendarDate.of(2022, 12, 22)],
        )
        assert len(calendar) == 1
        assert calendar.contains(CalendarDate.of(2022, 12, 22))
        assert not calendar.contains(CalendarDate.of(2022, 12, 23))
        assert list(calendar) == [CalendarDate.of(2022, 12, 22)]

    def test_duty_calendar_queries(self):
        alice = make_engineer("Alice", CalendarDate.of(2022, 12, 15))
        bob = make_engineer("Bob", CalendarDate.of(2022, 12, 16))
        duty = DutyCalendar(
            start=CalendarDate.of(2022, 12, 19),
            end=CalendarDate.of(2022, 12, 21),
            assignments={
                CalendarDate.of(2022, 12, 20): bob,
                CalendarDate.of(2022, 12, 19): alice,
                CalendarDate.of(2022, 12, 21): alice,
            },
        )
        assert duty.dates[0] == CalendarDate.of(2022, 12, 19)
        assert duty.is_complete is True
        assert duty.get_engineer(CalendarDate.of(2022, 12, 20)) == bob
        assert duty.get_engineer_dates(alice.id) == [
            CalendarDate.of(2022, 12, 19),
            CalendarDate.of(2022, 12, 21),
        ]
        assert duty.duty_counts() == {alice.id: 2, bob.id: 1}

    def test_duty_calendar_with_unresolved(self):
        duty = DutyCalendar(
            start=CalendarDate.of(2022, 12, 19),
            end=CalendarDate.of(2022, 12, 19),
            unresolved={CalendarDate.of(2022, 12, 19): "no engineer"},
        )
        assert duty.is_complete is False
        assert duty.dates == [CalendarDate.of(2022, 12, 19)]
        assert duty.get_engineer(CalendarDate.of(2022, 12, 19)) is None
