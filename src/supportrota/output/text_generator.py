"""Plain-text output for duty calendars.

This module renders a duty calendar as a fixed-width table followed by
per-engineer duty counts and the list of unresolved dates.
"""

from collections import defaultdict
from pathlib import Path
from typing import Union

from supportrota.domain.models import DutyCalendar


class TextGenerator:
    """Generates text tables of who is on duty.

    Example:
        >>> generator = TextGenerator()
        >>> print(generator.generate_to_string(duty_calendar))
    """

    def generate(
        self,
        duty: DutyCalendar,
        output_path: Union[str, Path],
    ) -> str:
        """Generate text output and save to file.

        Args:
            duty: The duty calendar to render.
            output_path: Path to save the text file.

        Returns:
            The generated text content.
        """
        content = self._generate_content(duty)
        Path(output_path).write_text(content)
        return content

    def generate_to_string(self, duty: DutyCalendar) -> str:
        """Generate text output and return as string."""
        return self._generate_content(duty)

    def _generate_content(self, duty: DutyCalendar) -> str:
        lines = []

        lines.append("=" * 60)
        lines.append(f"SUPPORT ROTA - {duty.start} to {duty.end}")
        lines.append("=" * 60)
        lines.append(f"{'Date':<12} {'Day':<10} {'On duty':<36}")
        lines.append("-" * 60)

        for current in duty.dates:
            engineer = duty.get_engineer(current)
            if engineer is not None:
                who = engineer.name
            else:
                who = "-"
            lines.append(f"{current.isoformat():<12} {current.weekday_name:<10} {who[:36]:<36}")

        lines.append("")
        lines.append("-" * 60)
        lines.append("DUTY DAYS PER ENGINEER")
        lines.append("-" * 60)

        names = {}
        counts = defaultdict(int)
        for engineer in duty.assignments.values():
            names[engineer.id] = engineer.name
            counts[engineer.id] += 1

        if counts:
            for engineer_id in sorted(counts, key=lambda i: (-counts[i], names[i])):
                lines.append(f"{names[engineer_id]:<36} {counts[engineer_id]:>3}")
        else:
            lines.append("No duty days resolved")

        if duty.unresolved:
            lines.append("")
            lines.append("-" * 60)
            lines.append(f"UNRESOLVED DATES ({len(duty.unresolved)})")
            lines.append("-" * 60)
            for current in sorted(duty.unresolved):
                lines.append(f"{current}: {duty.unresolved[current]}")

        lines.append("=" * 60)
        return "\n".join(lines)
