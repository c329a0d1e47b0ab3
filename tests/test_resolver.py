"""Tests for rotation resolution.

All queries use Thursday 2022-12-15 as today and a five-engineer rotation
(seven days) unless stated otherwise.
"""

import logging
from datetime import date, datetime, timezone

import pytest

from supportrota.domain.errors import DegenerateRotation, InvalidQuery, OutOfRange
from supportrota.domain.models import CalendarDate, Rotation
from supportrota.domain.policies import PreviousBusinessDayPolicy
from supportrota.scheduling.clock import FixedClock, SystemClock
from supportrota.scheduling.resolver import RotationResolver


@pytest.fixture
def resolver():
    return RotationResolver()


@pytest.fixture
def rotation():
    return Rotation.from_engineer_count(5)


class TestRotationResolver:
    """Tests for RotationResolver with the default (compact) weekend rule."""

    def test_one_full_cycle_ahead(self, resolver, rotation, today):
        """Seven days ahead resolves to today itself."""
        reference = resolver.resolve(CalendarDate.of(2022, 12, 22), rotation, today)
        assert reference == CalendarDate.of(2022, 12, 15)

    def test_nine_days_ahead(self, resolver, rotation, today):
        """Nine days ahead: 9 mod 7 = 2, so go back 5 days to Monday."""
        reference = resolver.resolve(CalendarDate.of(2022, 12, 24), rotation, today)
        assert reference == CalendarDate.of(2022, 12, 19)

    def test_business_day_candidate_is_kept(self, resolver, rotation, today):
        assert resolver.resolve(
            CalendarDate.of(2022, 12, 21), rotation, today
        ) == CalendarDate.of(2022, 12, 20)
        assert resolver.resolve(
            CalendarDate.of(2022, 12, 19), rotation, today
        ) == CalendarDate.of(2022, 12, 16)

    def test_saturday_candidate_steps_back_two_days(self, resolver, rotation, today):
        """Eight days ahead lands on Saturday 17th, snapped to Thursday."""
        reference = resolver.resolve(CalendarDate.of(2022, 12, 23), rotation, today)
        assert reference == CalendarDate.of(2022, 12, 15)

    def test_sunday_candidate_steps_back_two_days(self, resolver, rotation, today):
        """Five days ahead lands on Sunday 18th, snapped to Friday."""
        reference = resolver.resolve(CalendarDate.of(2022, 12, 20), rotation, today)
        assert reference == CalendarDate.of(2022, 12, 16)

    def test_one_day_ahead(self, resolver, rotation, today):
        """Tomorrow goes back six days to Saturday 10th, snapped to Thursday 8th."""
        reference = resolver.resolve(CalendarDate.of(2022, 12, 16), rotation, today)
        assert reference == CalendarDate.of(2022, 12, 8)

    def test_two_cycles_ahead(self, resolver, rotation, today):
        assert resolver.resolve(
            CalendarDate.of(2022, 12, 29), rotation, today
        ) == CalendarDate.of(2022, 12, 22)
        assert resolver.resolve(
            CalendarDate.of(2022, 12, 30), rotation, today
        ) == CalendarDate.of(2022, 12, 22)

    def test_today_is_rejected(self, resolver, rotation, today):
        with pytest.raises(InvalidQuery):
            resolver.resolve(today, rotation, today)

    def test_past_date_is_rejected(self, resolver, rotation, today):
        with pytest.raises(InvalidQuery):
            resolver.resolve(CalendarDate.of(2022, 12, 14), rotation, today)

    def test_degenerate_rotation(self, resolver, today):
        """A zero-length rotation fails before the date is even checked."""
        with pytest.raises(DegenerateRotation):
            resolver.resolve(CalendarDate.of(2022, 12, 22), Rotation(0), today)
        with pytest.raises(DegenerateRotation):
            resolver.resolve(CalendarDate.of(2022, 12, 1), Rotation(0), today)

    def test_underflow(self, resolver, rotation):
        """Stepping back before year 1 raises OutOfRange."""
        first_day = CalendarDate(date.min)
        with pytest.raises(OutOfRange):
            resolver.resolve(first_day.step_forward(2), rotation, first_day)

    def test_days_to_go_back(self, rotation):
        assert RotationResolver.days_to_go_back(7, rotation) == 7
        assert RotationResolver.days_to_go_back(9, rotation) == 5
        assert RotationResolver.days_to_go_back(1, rotation) == 6
        assert RotationResolver.days_to_go_back(14, rotation) == 7

    def test_resolution_is_deterministic(self, resolver, rotation, today):
        query = CalendarDate.of(2022, 12, 23)
        assert resolver.resolve(query, rotation, today) == resolver.resolve(
            query, rotation, today
        )

    def test_reference_construction_for_many_rotations(self, resolver, today):
        """The reference is the L-day-back candidate, or two days before it."""
        for count in range(1, 16):
            rotation = Rotation.from_engineer_count(count)
            length = rotation.length_in_days
            for days_ahead in range(1, 60):
                query = today.step_forward(days_ahead)
                reference = resolver.resolve(query, rotation, today)
                candidate = query.step_back(length - days_ahead % length)

                assert reference.is_business_day()
                assert reference < query
                if candidate.is_business_day():
                    assert reference == candidate
                else:
                    assert reference == candidate.step_back(2)

    def test_logs_resolution_at_debug(self, resolver, rotation, today, caplog):
        caplog.set_level(logging.DEBUG, logger="supportrota.scheduling.resolver")
        resolver.resolve(CalendarDate.of(2022, 12, 22), rotation, today)
        assert any("Resolved 2022-12-22" in r.getMessage() for r in caplog.records)


class TestPreviousBusinessDayResolution:
    """Tests for RotationResolver with the bounded previous-business-day rule."""

    @pytest.fixture
    def resolver(self):
        return RotationResolver(snap_policy=PreviousBusinessDayPolicy())

    def test_saturday_candidate_lands_on_friday(self, resolver, rotation, today):
        reference = resolver.resolve(CalendarDate.of(2022, 12, 23), rotation, today)
        assert reference == CalendarDate.of(2022, 12, 16)

    def test_tomorrow_lands_on_friday(self, resolver, rotation, today):
        reference = resolver.resolve(CalendarDate.of(2022, 12, 16), rotation, today)
        assert reference == CalendarDate.of(2022, 12, 9)

    def test_business_day_candidate_unchanged(self, resolver, rotation, today):
        reference = resolver.resolve(CalendarDate.of(2022, 12, 24), rotation, today)
        assert reference == CalendarDate.of(2022, 12, 19)

    def test_never_earlier_than_compact_rule(self, resolver, today):
        compact = RotationResolver()
        for count in range(1, 12):
            rotation = Rotation.from_engineer_count(count)
            for days_ahead in range(1, 30):
                query = today.step_forward(days_ahead)
                reference = resolver.resolve(query, rotation, today)
                assert reference.is_business_day()
                assert reference >= compact.resolve(query, rotation, today)


class TestClocks:
    """Tests for clock providers."""

    def test_fixed_clock(self, today):
        assert FixedClock(today).today() == today

    def test_system_clock_uses_utc(self):
        before = datetime.now(timezone.utc).date()
        value = SystemClock().today().value
        after = datetime.now(timezone.utc).date()
        assert before <= value <= after
