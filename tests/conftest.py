"""Shared fixtures for rota tests."""

import pytest

from supportrota.domain.models import CalendarDate

from helpers import make_engineer


@pytest.fixture
def today():
    """A Thursday."""
    return CalendarDate.of(2022, 12, 15)


@pytest.fixture
def alice():
    return make_engineer("Alice", CalendarDate.of(2022, 12, 15))  # Thursday


@pytest.fixture
def bob():
    return make_engineer("Bob", CalendarDate.of(2022, 12, 16))  # Friday


@pytest.fixture
def carol():
    return make_engineer("Carol", CalendarDate.of(2022, 12, 14))  # Wednesday


@pytest.fixture
def dan():
    return make_engineer("Dan", CalendarDate.of(2022, 12, 13))  # Tuesday


@pytest.fixture
def eve():
    return make_engineer("Eve", CalendarDate.of(2022, 12, 12))  # Monday


@pytest.fixture
def engineers(alice, bob, carol, dan, eve):
    """Five engineers, giving a seven-day rotation."""
    return [alice, bob, carol, dan, eve]
