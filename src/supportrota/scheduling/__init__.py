"""Rotation resolution and roster lookups."""

from supportrota.scheduling.clock import Clock, FixedClock, SystemClock
from supportrota.scheduling.resolver import RotationResolver
from supportrota.scheduling.roster import DepartmentRoster

__all__ = [
    # Clocks
    "Clock",
    "FixedClock",
    "SystemClock",
    # Resolution
    "RotationResolver",
    "DepartmentRoster",
]
