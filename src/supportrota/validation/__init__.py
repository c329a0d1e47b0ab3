"""Validation module for checking roster data."""

from supportrota.validation.validator import (
    RosterValidator,
    ValidationError,
    ValidationErrorType,
    ValidationResult,
)

__all__ = [
    "RosterValidator",
    "ValidationError",
    "ValidationErrorType",
    "ValidationResult",
]
