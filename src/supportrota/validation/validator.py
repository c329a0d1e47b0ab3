"""Validation module for checking roster data.

The roster itself refuses inconsistent data by raising. The validator
instead collects every problem it finds, so that roster files can be
checked and reported on in one pass.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Optional

from supportrota.domain.errors import NoEngineerFound, OutOfRange
from supportrota.domain.models import CalendarDate, Engineer
from supportrota.scheduling.roster import DepartmentRoster


class ValidationErrorType(Enum):
    """Types of validation errors."""

    EMPTY_ROSTER = "empty_roster"
    DUPLICATE_IDENTIFIER = "duplicate_identifier"
    DUPLICATE_LAST_SERVED_DATE = "duplicate_last_served_date"
    LAST_SERVED_NOT_BUSINESS_DAY = "last_served_not_business_day"
    LAST_SERVED_IN_FUTURE = "last_served_in_future"
    RESERVATION_UNKNOWN_ENGINEER = "reservation_unknown_engineer"
    RESERVATION_NOT_BUSINESS_DAY = "reservation_not_business_day"


@dataclass
class ValidationError:
    """A single validation error."""

    error_type: ValidationErrorType
    message: str
    engineer_id: Optional[str] = None
    on: Optional[CalendarDate] = None
    details: dict = field(default_factory=dict)

    def __str__(self) -> str:
        parts = [f"[{self.error_type.value}]"]
        if self.engineer_id:
            parts.append(f"Engineer {self.engineer_id}:")
        parts.append(self.message)
        if self.on is not None:
            parts.append(f"({self.on})")
        return " ".join(parts)


@dataclass
class ValidationResult:
    """Result of validating a roster."""

    is_valid: bool
    errors: list[ValidationError] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)

    def add_error(self, error: ValidationError) -> None:
        """Add an error and mark as invalid."""
        self.errors.append(error)
        self.is_valid = False

    def add_warning(self, warning: str) -> None:
        """Add a warning (doesn't affect validity)."""
        self.warnings.append(warning)

    def error_types(self) -> set[ValidationErrorType]:
        return {e.error_type for e in self.errors}


class RosterValidator:
    """Validates roster data.

    Example:
        >>> validator = RosterValidator()
        >>> result = validator.validate(engineers, reservations, today)
        >>> if not result.is_valid:
        ...     for error in result.errors:
        ...         print(error)
    """

    def validate(
        self,
        engineers: list[Engineer],
        reservations: Optional[dict[CalendarDate, Engineer]] = None,
        today: Optional[CalendarDate] = None,
    ) -> ValidationResult:
        """Validate raw roster data before building a roster.

        Args:
            engineers: The engineers on the rotation.
            reservations: Dates pre-assigned to an engineer.
            today: If given, last-served dates after it are reported.

        Returns:
            ValidationResult with is_valid flag and any errors.
        """
        result = ValidationResult(is_valid=True)

        if not engineers:
            result.add_error(
                ValidationError(
                    error_type=ValidationErrorType.EMPTY_ROSTER,
                    message="Roster has no engineers; rotation length would be zero",
                )
            )

        seen_ids: set = set()
        seen_dates: dict[CalendarDate, Engineer] = {}

        for engineer in engineers:
            engineer_id = str(engineer.id)

            if engineer.id in seen_ids:
                result.add_error(
                    ValidationError(
                        error_type=ValidationErrorType.DUPLICATE_IDENTIFIER,
                        message=f"{engineer.name} uses an identifier already on the roster",
                        engineer_id=engineer_id,
                    )
                )
            seen_ids.add(engineer.id)

            holder = seen_dates.get(engineer.last_served)
            if holder is not None:
                result.add_error(
                    ValidationError(
                        error_type=ValidationErrorType.DUPLICATE_LAST_SERVED_DATE,
                        message=f"{engineer.name} shares a last-served date with {holder.name}",
                        engineer_id=engineer_id,
                        on=engineer.last_served,
                    )
                )
            else:
                seen_dates[engineer.last_served] = engineer

            if not engineer.last_served.is_business_day():
                result.add_error(
                    ValidationError(
                        error_type=ValidationErrorType.LAST_SERVED_NOT_BUSINESS_DAY,
                        message=(
                            f"{engineer.name} last served on a "
                            f"{engineer.last_served.weekday_name}"
                        ),
                        engineer_id=engineer_id,
                        on=engineer.last_served,
                    )
                )

            if today is not None and engineer.last_served > today:
                result.add_error(
                    ValidationError(
                        error_type=ValidationErrorType.LAST_SERVED_IN_FUTURE,
                        message=f"{engineer.name} last served after today ({today})",
                        engineer_id=engineer_id,
                        on=engineer.last_served,
                    )
                )

        for reserved_on, engineer in sorted((reservations or {}).items()):
            if engineer.id not in seen_ids:
                result.add_error(
                    ValidationError(
                        error_type=ValidationErrorType.RESERVATION_UNKNOWN_ENGINEER,
                        message=f"Reservation for {engineer.name}, who is not on the roster",
                        engineer_id=str(engineer.id),
                        on=reserved_on,
                    )
                )
            if not reserved_on.is_business_day():
                result.add_error(
                    ValidationError(
                        error_type=ValidationErrorType.RESERVATION_NOT_BUSINESS_DAY,
                        message=f"Reservation on a {reserved_on.weekday_name}",
                        engineer_id=str(engineer.id),
                        on=reserved_on,
                    )
                )

        return result

    def validate_coverage(
        self,
        roster: DepartmentRoster,
        today: CalendarDate,
    ) -> ValidationResult:
        """Check that the next full rotation cycle resolves to engineers.

        Business days after ``today`` that neither carry a reservation nor
        resolve to an engineer are reported as warnings. This catches a
        roster edited without its last-served dates being brought in line
        with the rotation length.
        """
        result = ValidationResult(is_valid=True)
        if roster.rotation.is_degenerate:
            result.add_warning("Rotation length is zero; no dates can be resolved")
            return result

        for offset in range(1, roster.rotation.length_in_days + 1):
            try:
                current = today.step_forward(offset)
            except OutOfRange:
                break
            if not current.is_business_day():
                continue
            try:
                roster.engineer_serving_on(current, today)
            except (NoEngineerFound, OutOfRange) as exc:
                result.add_warning(f"{current} ({current.weekday_name}): {exc.message}")

        return result
