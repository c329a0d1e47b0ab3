"""Domain models and business rules for the support rota."""

from supportrota.domain.errors import (
    DegenerateRotation,
    DuplicateLastServedDate,
    InvalidQuery,
    NoEngineerFound,
    NotABusinessDay,
    OutOfRange,
    RotaError,
    RotaErrorType,
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
from supportrota.domain.policies import (
    CompactWeekendPolicy,
    PreviousBusinessDayPolicy,
    RotaConfig,
    WeekendSnapPolicy,
)

__all__ = [
    # Models
    "Calendar",
    "CalendarDate",
    "DutyCalendar",
    "Engineer",
    "EngineerIdentifier",
    "Month",
    "Period",
    "Rotation",
    "Year",
    # Errors
    "DegenerateRotation",
    "DuplicateLastServedDate",
    "InvalidQuery",
    "NoEngineerFound",
    "NotABusinessDay",
    "OutOfRange",
    "RotaError",
    "RotaErrorType",
    # Policies
    "CompactWeekendPolicy",
    "PreviousBusinessDayPolicy",
    "RotaConfig",
    "WeekendSnapPolicy",
]
