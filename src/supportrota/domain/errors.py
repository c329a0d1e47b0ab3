"""Typed failures raised by the rota domain.

Every failure is recoverable by the caller: retry with another date or fix
the roster data. None of them leave a roster partially updated.
"""

from enum import Enum
from typing import Optional


class RotaErrorType(Enum):
    """Kinds of rota failures."""

    INVALID_QUERY = "invalid_query"
    OUT_OF_RANGE = "out_of_range"
    NO_ENGINEER_FOUND = "no_engineer_found"
    DUPLICATE_LAST_SERVED_DATE = "duplicate_last_served_date"
    NOT_A_BUSINESS_DAY = "not_a_business_day"
    DEGENERATE_ROTATION = "degenerate_rotation"


class RotaError(Exception):
    """Base class for all rota failures."""

    error_type: RotaErrorType

    def __init__(self, message: str, details: Optional[dict] = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}

    def __str__(self) -> str:
        return f"[{self.error_type.value}] {self.message}"


class InvalidQuery(RotaError):
    """The queried date is not strictly after today."""

    error_type = RotaErrorType.INVALID_QUERY


class OutOfRange(RotaError):
    """Stepping back a date left the representable calendar range."""

    error_type = RotaErrorType.OUT_OF_RANGE


class NoEngineerFound(RotaError):
    """No engineer on the roster matches the request."""

    error_type = RotaErrorType.NO_ENGINEER_FOUND


class DuplicateLastServedDate(RotaError):
    """Two engineers would share a last-served date."""

    error_type = RotaErrorType.DUPLICATE_LAST_SERVED_DATE


class NotABusinessDay(RotaError):
    """Service can only be recorded on a business day."""

    error_type = RotaErrorType.NOT_A_BUSINESS_DAY


class DegenerateRotation(RotaError):
    """The rotation length is zero, so no duty can be resolved."""

    error_type = RotaErrorType.DEGENERATE_ROTATION
