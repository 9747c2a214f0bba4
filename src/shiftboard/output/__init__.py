"""Output generation for schedules (PNG, PDF, text)."""

from shiftboard.output.image_generator import ImageGenerator
from shiftboard.output.layout import DateGroup, TableLayout, build_layout
from shiftboard.output.pdf_generator import PDFGenerator
from shiftboard.output.report_generator import ReportGenerator

__all__ = [
    "DateGroup",
    "ImageGenerator",
    "PDFGenerator",
    "ReportGenerator",
    "TableLayout",
    "build_layout",
]
