"""Output generation for duty calendars (PDF, text)."""

from supportrota.output.pdf_generator import PDFGenerator
from supportrota.output.text_generator import TextGenerator

__all__ = [
    "PDFGenerator",
    "TextGenerator",
]
