"""Command-line interface for the support rota."""

import argparse
import json
import logging
import sys
import uuid
from pathlib import Path
from typing import Optional

from supportrota.domain.errors import RotaError
from supportrota.domain.models import (
    CalendarDate,
    Engineer,
    EngineerIdentifier,
    Month,
    Period,
    Year,
)
from supportrota.domain.policies import SNAP_POLICIES, RotaConfig
from supportrota.output.pdf_generator import PDFGenerator
from supportrota.output.text_generator import TextGenerator
from supportrota.scheduling.clock import FixedClock, SystemClock
from supportrota.scheduling.resolver import RotationResolver
from supportrota.scheduling.roster import DepartmentRoster
from supportrota.validation.validator import RosterValidator

logger = logging.getLogger(__name__)

SAMPLE_NAMESPACE = uuid.UUID("6f1d2c44-8b7e-4a51-9d0e-2f6c3b8a9e10")


def create_sample_engineers(
    count: int = 5,
    today: Optional[CalendarDate] = None,
) -> list[Engineer]:
    """Create sample engineers for demos.

    Engineers last served on consecutive business days ending today (or the
    last business day before it), most recent first.

    Args:
        count: Number of engineers to create.
        today: Date the sample history ends at. Defaults to today in UTC.
    """
    if today is None:
        today = SystemClock().today()

    names = [
        "Alice", "Bob", "Carol", "David", "Eve", "Frank", "Grace", "Henry",
        "Ivy", "Jack", "Kate", "Leo", "Mia", "Noah", "Olivia", "Paul",
    ]

    engineers = []
    served_on = today
    for i in range(count):
        name = names[i % len(names)]
        if i >= len(names):
            name = f"{name}{i // len(names) + 1}"

        while not served_on.is_business_day():
            served_on = served_on.step_back(1)

        engineers.append(
            Engineer(
                id=EngineerIdentifier(uuid.uuid5(SAMPLE_NAMESPACE, name)),
                name=name,
                last_served=served_on,
            )
        )
        served_on = served_on.step_back(1)

    return engineers


def load_roster_file(
    path: Path,
) -> tuple[list[Engineer], dict[CalendarDate, Engineer]]:
    """Load engineers and reservations from a JSON roster file.

    The file holds ``{"engineers": [{"id", "name", "last_served"}, ...],
    "reservations": {"YYYY-MM-DD": "<engineer id>", ...}}``.

    Raises:
        ValueError: If the file cannot be read, an entry is malformed, or a
            reservation refers to an unknown engineer.
    """
    try:
        data = json.loads(Path(path).read_text())
    except OSError as exc:
        raise ValueError(f"Cannot read roster file {path}: {exc.strerror or exc}") from exc
    if not isinstance(data, dict):
        raise ValueError(f"Roster file {path} must hold a JSON object")

    engineers = []
    for index, item in enumerate(data.get("engineers", [])):
        try:
            engineers.append(Engineer.from_dict(item))
        except (KeyError, TypeError, AttributeError) as exc:
            raise ValueError(
                f"Malformed engineer entry {index} in {path}: {item!r}"
            ) from exc
    by_id = {str(e.id): e for e in engineers}

    reservations = {}
    for date_text, engineer_id in data.get("reservations", {}).items():
        try:
            engineer = by_id.get(str(EngineerIdentifier.parse(engineer_id)))
        except (TypeError, AttributeError) as exc:
            raise ValueError(f"Malformed reservation on {date_text} in {path}") from exc
        if engineer is None:
            raise ValueError(f"Reservation on {date_text} refers to unknown engineer {engineer_id}")
        reservations[CalendarDate.from_iso(date_text)] = engineer

    logger.info("Loaded %d engineers and %d reservations from %s",
                len(engineers), len(reservations), path)
    return engineers, reservations


def _load_inputs(args) -> tuple[list[Engineer], dict[CalendarDate, Engineer], CalendarDate]:
    """Resolve today, engineers and reservations from common options."""
    clock = FixedClock(args.today) if args.today else SystemClock()
    today = clock.today()
    if args.roster:
        engineers, reservations = load_roster_file(args.roster)
    else:
        engineers, reservations = create_sample_engineers(args.count, today), {}
    return engineers, reservations, today


def _build_roster(args) -> tuple[DepartmentRoster, CalendarDate]:
    engineers, reservations, today = _load_inputs(args)
    config = RotaConfig(weekend_snap=args.snap)
    resolver = RotationResolver(snap_policy=config.create_policy())
    return DepartmentRoster.build(engineers, reservations, resolver), today


def _find_engineer(roster: DepartmentRoster, key: str) -> Engineer:
    """Find an engineer by identifier or (case-insensitive) name."""
    for engineer in roster.engineers:
        if str(engineer.id) == key or engineer.name.lower() == key.lower():
            return engineer
    raise ValueError(f"No engineer with identifier or name '{key}'")


def run_who(args) -> None:
    """Print the engineer on duty on a date."""
    roster, today = _build_roster(args)
    engineer = roster.engineer_serving_on(args.date, today)
    print(f"{args.date} ({args.date.weekday_name}): {engineer.name} [{engineer.id}]")
    print(f"  Last served: {engineer.last_served}")
    print(f"  Rotation: {roster.rotation.length_in_days} days, {len(roster)} engineers")


def run_calendar(args) -> None:
    """Print (and optionally render) who is on duty over a range."""
    roster, today = _build_roster(args)

    if args.engineer:
        engineer = _find_engineer(roster, args.engineer)
        month = Month(args.month or today.value.month)
        year = Year(args.year or today.value.year)
        calendar = roster.calendar(Period(engineer.id, month, year), today)
        print(f"{engineer.name} - {month.display_name} {year.value}: {len(calendar)} duty day(s)")
        for served_on in calendar:
            print(f"  {served_on} ({served_on.weekday_name})")
        return

    if args.month:
        month = Month(args.month)
        year = Year(args.year or today.value.year)
        start, end = month.first_day(year), month.last_day(year)
    else:
        start = args.start or today.step_forward(1)
        end = args.end or start.step_forward(roster.rotation.length_in_days * 2)

    duty = roster.duty_calendar(start, end, today, include_weekends=args.weekends)

    text = TextGenerator()
    if args.text_output:
        text.generate(duty, args.text_output)
        print(f"Text rota written to {args.text_output}")
    else:
        print(text.generate_to_string(duty))

    if args.output:
        print(f"\nGenerating PDF: {args.output}")
        PDFGenerator().generate(duty, args.output)
        print("  PDF created successfully!")


def run_serve(args) -> None:
    """Record a service and print the updated roster as JSON."""
    roster, today = _build_roster(args)
    engineer = _find_engineer(roster, args.engineer)
    served_on = args.date or today
    updated = roster.record_service(engineer, served_on)
    print(json.dumps(updated.to_dict(), indent=2))


def run_validate(args) -> bool:
    """Validate roster data and the coming rotation cycle."""
    engineers, reservations, today = _load_inputs(args)
    validator = RosterValidator()
    result = validator.validate(engineers, reservations, today)

    if result.is_valid:
        print("Roster data: PASSED")
        config = RotaConfig(weekend_snap=args.snap)
        roster = DepartmentRoster.build(
            engineers, reservations, RotationResolver(config.create_policy())
        )
        coverage = validator.validate_coverage(roster, today)
        result.warnings.extend(coverage.warnings)
    else:
        print(f"Roster data: FAILED ({len(result.errors)} errors)")
        for error in result.errors:
            print(f"    - {error}")

    if result.warnings:
        print(f"\nWarnings ({len(result.warnings)}):")
        for warning in result.warnings[:10]:
            print(f"    - {warning}")
        if len(result.warnings) > 10:
            print(f"    ... and {len(result.warnings) - 10} more warnings")

    return result.is_valid


def _add_common_arguments(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "--roster", "-r",
        type=Path,
        help="JSON roster file (default: generated sample engineers)",
    )
    parser.add_argument(
        "--count", "-c",
        type=int,
        default=5,
        help="Number of sample engineers when no roster file is given (default: 5)",
    )
    parser.add_argument(
        "--today",
        type=CalendarDate.from_iso,
        help="Override today's date (YYYY-MM-DD, default: today in UTC)",
    )
    parser.add_argument(
        "--snap",
        type=str,
        default="compact",
        choices=sorted(SNAP_POLICIES),
        help="Weekend snap policy (default: compact)",
    )


def main(argv: Optional[list[str]] = None) -> int:
    """Main entry point for CLI."""
    parser = argparse.ArgumentParser(
        description="Support Rota - who is on support duty, and when",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  %(prog)s who --date 2022-12-22 --today 2022-12-15
  %(prog)s calendar --month 12 --year 2022 --today 2022-12-15
  %(prog)s calendar --engineer Alice --month 12 --today 2022-12-15
  %(prog)s calendar --roster team.json --output rota.pdf
  %(prog)s serve --roster team.json --engineer Alice --date 2022-12-16
  %(prog)s validate --roster team.json
        """,
    )
    parser.add_argument(
        "--log-level",
        type=str,
        default="WARNING",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Logging level (default: WARNING)",
    )

    subparsers = parser.add_subparsers(dest="command", help="Command to run")

    # Who command
    who_parser = subparsers.add_parser("who", help="Show who is on duty on a date")
    _add_common_arguments(who_parser)
    who_parser.add_argument(
        "--date", "-d",
        type=CalendarDate.from_iso,
        required=True,
        help="Date to look up (YYYY-MM-DD), must be after today",
    )

    # Calendar command
    calendar_parser = subparsers.add_parser("calendar", help="List who is on duty over a range")
    _add_common_arguments(calendar_parser)
    calendar_parser.add_argument("--start", type=CalendarDate.from_iso, help="First date")
    calendar_parser.add_argument("--end", type=CalendarDate.from_iso, help="Last date")
    calendar_parser.add_argument(
        "--month", "-m",
        type=int,
        choices=range(1, 13),
        help="List a whole month instead of a range",
    )
    calendar_parser.add_argument("--year", "-y", type=int, help="Year for --month")
    calendar_parser.add_argument(
        "--engineer", "-e",
        type=str,
        help="Only list the duty days of this engineer (identifier or name)",
    )
    calendar_parser.add_argument(
        "--weekends",
        action="store_true",
        help="Include Saturdays and Sundays",
    )
    calendar_parser.add_argument("--output", "-o", type=str, help="Output PDF file path")
    calendar_parser.add_argument("--text-output", type=str, help="Output text file path")

    # Serve command
    serve_parser = subparsers.add_parser("serve", help="Record that an engineer served support")
    _add_common_arguments(serve_parser)
    serve_parser.add_argument(
        "--engineer", "-e",
        type=str,
        required=True,
        help="Engineer identifier or name",
    )
    serve_parser.add_argument(
        "--date", "-d",
        type=CalendarDate.from_iso,
        help="Date served (default: today)",
    )

    # Validate command
    validate_parser = subparsers.add_parser("validate", help="Check roster data")
    _add_common_arguments(validate_parser)

    args = parser.parse_args(argv)

    logging.basicConfig(
        level=getattr(logging, args.log_level),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )

    try:
        if args.command == "who":
            run_who(args)
            return 0
        elif args.command == "calendar":
            run_calendar(args)
            return 0
        elif args.command == "serve":
            run_serve(args)
            return 0
        elif args.command == "validate":
            return 0 if run_validate(args) else 1
        else:
            parser.print_help()
            return 1
    except (RotaError, ValueError) as exc:
        logger.debug("Command %s failed", args.command, exc_info=True)
        print(f"Error: {exc}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
