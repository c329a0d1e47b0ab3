"""PDF generation for duty calendars.

This module creates printable PDF rotas showing:
- One row per date with the engineer on duty
- Unresolved dates highlighted
- A summary page with duty counts per engineer
"""

from io import BytesIO
from pathlib import Path
from typing import Union

from supportrota.domain.models import DutyCalendar, EngineerIdentifier

# Color definitions (RGB tuples, 0-1 scale)
PALETTE = [
    (0.4, 0.7, 0.4),  # Green
    (0.4, 0.4, 0.8),  # Blue
    (0.8, 0.6, 0.2),  # Orange
    (0.7, 0.4, 0.7),  # Purple
    (0.3, 0.7, 0.8),  # Teal
    (0.8, 0.4, 0.4),  # Red
]
UNRESOLVED_COLOR = (0.9, 0.9, 0.9)


class PDFGenerator:
    """Generates printable PDF rotas.

    Example:
        >>> generator = PDFGenerator()
        >>> generator.generate(duty_calendar, "rota.pdf")
    """

    def __init__(
        self,
        page_width: float = 792,  # Letter landscape width (11")
        page_height: float = 612,  # Letter landscape height (8.5")
        margin: float = 36,  # 0.5 inch margins
    ):
        self.page_width = page_width
        self.page_height = page_height
        self.margin = margin

    def generate(
        self,
        duty: DutyCalendar,
        output_path: Union[str, Path],
        include_summary: bool = True,
    ) -> None:
        """Generate PDF rota and save to file.

        Args:
            duty: The duty calendar to render.
            output_path: Path to save the PDF.
            include_summary: Whether to include the summary page.
        """
        canvas_module, pagesize = self._load_reportlab()
        c = canvas_module.Canvas(str(output_path), pagesize=pagesize)
        self._draw(c, duty, include_summary)
        c.save()

    def generate_to_buffer(
        self,
        duty: DutyCalendar,
        include_summary: bool = True,
    ) -> BytesIO:
        """Generate PDF and return as bytes buffer."""
        canvas_module, pagesize = self._load_reportlab()
        buffer = BytesIO()
        c = canvas_module.Canvas(buffer, pagesize=pagesize)
        self._draw(c, duty, include_summary)
        c.save()
        buffer.seek(0)
        return buffer

    def _load_reportlab(self):
        try:
            from reportlab.lib.pagesizes import landscape, letter
            from reportlab.pdfgen import canvas
        except ImportError:
            raise ImportError(
                "reportlab is required for PDF generation. "
                "Install with: pip install reportlab"
            )
        return canvas, landscape(letter)

    def _draw(self, c, duty: DutyCalendar, include_summary: bool) -> None:
        colors = self._assign_colors(duty)
        self._draw_rota_pages(c, duty, colors)
        if include_summary:
            self._draw_summary_page(c, duty, colors)

    def _assign_colors(self, duty: DutyCalendar) -> dict[EngineerIdentifier, tuple]:
        """Give each engineer a stable color, in order of first duty."""
        colors: dict[EngineerIdentifier, tuple] = {}
        for current in sorted(duty.assignments):
            engineer_id = duty.assignments[current].id
            if engineer_id not in colors:
                colors[engineer_id] = PALETTE[len(colors) % len(PALETTE)]
        return colors

    def _draw_rota_pages(self, c, duty: DutyCalendar, colors: dict) -> None:
        """Draw main pages with one row per date."""
        dates = duty.dates

        row_height = 20
        header_height = 60
        footer_height = 40
        usable_height = self.page_height - 2 * self.margin - header_height - footer_height
        rows_per_page = max(1, int(usable_height / row_height))
        total_pages = max(1, (len(dates) + rows_per_page - 1) // rows_per_page)

        for page_index in range(total_pages):
            page_dates = dates[page_index * rows_per_page : (page_index + 1) * rows_per_page]

            self._draw_header(c, duty)

            y = self.page_height - self.margin - header_height
            for current in page_dates:
                y -= row_height
                self._draw_row(c, duty, current, colors, y, row_height - 4)

            c.setFont("Helvetica", 9)
            c.setFillColorRGB(0, 0, 0)
            c.drawCentredString(
                self.page_width / 2,
                self.margin - 10,
                f"Page {page_index + 1} of {total_pages}",
            )
            c.showPage()

    def _draw_header(self, c, duty: DutyCalendar) -> None:
        """Draw page header with the date range."""
        c.setFillColorRGB(0, 0, 0)
        c.setFont("Helvetica-Bold", 16)
        c.drawString(
            self.margin,
            self.page_height - self.margin - 20,
            f"Support Rota - {duty.start.value.strftime('%B %d, %Y')} "
            f"to {duty.end.value.strftime('%B %d, %Y')}",
        )

        c.setFont("Helvetica", 10)
        c.drawString(
            self.margin,
            self.page_height - self.margin - 35,
            f"Dates listed: {len(duty.dates)}    Unresolved: {len(duty.unresolved)}",
        )

    def _draw_row(
        self,
        c,
        duty: DutyCalendar,
        current,
        colors: dict,
        y: float,
        height: float,
    ) -> None:
        """Draw a single date row."""
        engineer = duty.get_engineer(current)

        c.setFillColorRGB(0, 0, 0)
        c.setFont("Helvetica", 9)
        c.drawString(self.margin, y + height / 2 - 3, current.isoformat())
        c.drawString(self.margin + 80, y + height / 2 - 3, current.weekday_name)

        bar_x = self.margin + 170
        bar_w = self.page_width - self.margin - bar_x

        if engineer is not None:
            c.setFillColorRGB(*colors.get(engineer.id, PALETTE[0]))
            label = engineer.name
        else:
            c.setFillColorRGB(*UNRESOLVED_COLOR)
            label = duty.unresolved.get(current, "")
        c.rect(bar_x, y, bar_w, height, fill=1, stroke=0)

        c.setFillColorRGB(0, 0, 0)
        c.setFont("Helvetica-Bold" if engineer is not None else "Helvetica-Oblique", 9)
        c.drawString(bar_x + 6, y + height / 2 - 3, label[:90])

    def _draw_summary_page(self, c, duty: DutyCalendar, colors: dict) -> None:
        """Draw summary page with duty counts per engineer."""
        c.setFillColorRGB(0, 0, 0)
        c.setFont("Helvetica-Bold", 16)
        c.drawString(
            self.margin,
            self.page_height - self.margin - 20,
            "Rota Summary",
        )

        y = self.page_height - self.margin - 60
        c.setFont("Helvetica-Bold", 12)
        c.drawString(self.margin, y, "Duty days per engineer")
        y -= 20

        names = {e.id: e.name for e in duty.assignments.values()}
        counts = duty.duty_counts()
        max_count = max(counts.values()) if counts else 1
        bar_max_width = 400

        c.setFont("Helvetica", 10)
        for engineer_id in sorted(counts, key=lambda i: (-counts[i], names[i])):
            count = counts[engineer_id]
            c.setFillColorRGB(*colors.get(engineer_id, PALETTE[0]))
            c.rect(self.margin + 160, y - 2, bar_max_width * count / max_count, 12, fill=1, stroke=0)
            c.setFillColorRGB(0, 0, 0)
            c.drawString(self.margin + 20, y, names[engineer_id][:24])
            c.drawString(self.margin + 170 + bar_max_width, y, str(count))
            y -= 18

        if duty.unresolved:
            y -= 10
            c.drawString(
                self.margin + 20, y,
                f"{len(duty.unresolved)} date(s) could not be resolved to an engineer",
            )

        c.showPage()
