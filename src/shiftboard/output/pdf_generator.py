"""PDF generation for the monthly schedule.

This module creates printable PDF schedules showing:
- The same date / name / slot table as the PNG export
- Uncovered slots highlighted in a trailing row per date
- Page numbers, with date blocks kept on one page where they fit
"""

from io import BytesIO
from pathlib import Path
from typing import Optional, Union

from PIL import ImageColor

from shiftboard.config import RenderConfig
from shiftboard.domain.colors import color_for
from shiftboard.domain.models import RecordsLike
from shiftboard.output.image_generator import resolve_records
from shiftboard.output.layout import DateGroup, TableLayout, build_layout


def _rgb(color: Union[str, tuple[int, int, int]]) -> tuple[float, float, float]:
    """Colour as an RGB tuple on the 0-1 scale reportlab expects."""
    if isinstance(color, str):
        color = ImageColor.getrgb(color)[:3]
    return tuple(channel / 255 for channel in color)


class PDFGenerator:
    """Generates printable PDF schedules.

    The table geometry comes from the same layout as the PNG export and is
    scaled to the page width.

    Example:
        >>> generator = PDFGenerator()
        >>> generator.generate(records, 2025, 5, "schedule.pdf")
    """

    def __init__(
        self,
        config: Optional[RenderConfig] = None,
        page_width: float = 792,  # Letter landscape width (11")
        page_height: float = 612,  # Letter landscape height (8.5")
        margin: float = 36,  # 0.5 inch margins
    ):
        self.config = config or RenderConfig()
        self.page_width = page_width
        self.page_height = page_height
        self.margin = margin

    def generate(
        self,
        records: RecordsLike,
        year: Optional[int],
        month: Optional[int],
        output_path: Union[str, Path],
    ) -> None:
        """Generate PDF schedule and save to file.

        Args:
            records: Records for one month, or a ``MonthlyShiftBatch``.
            year: Year shown in the title.
            month: Month shown in the title.
            output_path: Path to save the PDF.
        """
        try:
            from reportlab.pdfgen import canvas
        except ImportError:
            raise ImportError(
                "reportlab is required for PDF generation. "
                "Install with: pip install reportlab"
            )

        records, year, month = resolve_records(records, year, month)
        c = canvas.Canvas(str(output_path), pagesize=(self.page_width, self.page_height))
        self._draw_pages(c, build_layout(records, self.config), year, month)
        c.save()

    def generate_to_buffer(
        self,
        records: RecordsLike,
        year: Optional[int] = None,
        month: Optional[int] = None,
    ) -> BytesIO:
        """Generate PDF and return as bytes buffer."""
        try:
            from reportlab.pdfgen import canvas
        except ImportError:
            raise ImportError(
                "reportlab is required for PDF generation. "
                "Install with: pip install reportlab"
            )

        records, year, month = resolve_records(records, year, month)
        buffer = BytesIO()
        c = canvas.Canvas(buffer, pagesize=(self.page_width, self.page_height))
        self._draw_pages(c, build_layout(records, self.config), year, month)
        c.save()
        buffer.seek(0)
        return buffer

    def paginate(self, layout: TableLayout) -> list[list[tuple[DateGroup, int, int]]]:
        """Split the table body into pages.

        Returns, per page, ``(group, first_row, end_row)`` slices with row
        offsets relative to the group. A group starts a new page when it
        does not fit in what is left; only a group taller than a whole page
        is split.
        """
        rows_per_page = self.rows_per_page(layout)
        pages: list[list[tuple[DateGroup, int, int]]] = [[]]
        used = 0

        for group in layout.groups:
            if used and used + group.row_count > rows_per_page:
                pages.append([])
                used = 0
            first = 0
            while first < group.row_count:
                take = min(group.row_count - first, rows_per_page - used)
                pages[-1].append((group, first, first + take))
                used += take
                first += take
                if used >= rows_per_page and first < group.row_count:
                    pages.append([])
                    used = 0
        return pages

    def rows_per_page(self, layout: TableLayout) -> int:
        scale = self._scale(layout)
        usable = self.page_height - 2 * self.margin - layout.header_height * scale - 20
        return max(1, int(usable // (layout.row_height * scale)))

    def _scale(self, layout: TableLayout) -> float:
        return (self.page_width - 2 * self.margin) / layout.width

    def _draw_pages(self, c, layout: TableLayout, year: int, month: int) -> None:
        """Draw every page of the table."""
        pages = self.paginate(layout)
        for page_num, page in enumerate(pages, start=1):
            c.saveState()
            # Table coordinates: origin at the top-left margin, y down
            scale = self._scale(layout)
            c.translate(self.margin, self.page_height - self.margin)
            c.scale(scale, -scale)

            self._draw_header(c, layout, year, month)
            row = 0
            for group, first, end in page:
                self._draw_group_slice(c, layout, group, first, end, row)
                row += end - first

            body_bottom = layout.header_height + row * layout.row_height
            c.setStrokeColorRGB(*_rgb(self.config.rule_color))
            c.setLineWidth(1)
            for x in (layout.date_width, layout.left_width):
                c.line(x, layout.header_height - 4, x, body_bottom)
            c.restoreState()

            c.setFont("Helvetica", 9)
            c.setFillColorRGB(0, 0, 0)
            c.drawCentredString(
                self.page_width / 2,
                self.margin - 10,
                f"Page {page_num} of {len(pages)}",
            )
            c.showPage()

    @staticmethod
    def fit_text(text: str, size: float, available: float, font: str = "Helvetica") -> str:
        """Shorten text with a trailing ``...`` until it fits ``available`` points."""
        from reportlab.pdfbase.pdfmetrics import stringWidth

        if stringWidth(text, font, size) <= available:
            return text
        while text and stringWidth(text + "...", font, size) > available:
            text = text[:-1]
        return text + "..."

    def _draw_text(self, c, x: float, y: float, text: str, size: float, bold: bool = False, align: str = "left") -> None:
        """Draw text upright inside the flipped table coordinates."""
        c.saveState()
        c.translate(x, y)
        c.scale(1, -1)
        c.setFont("Helvetica-Bold" if bold else "Helvetica", size)
        if align == "center":
            c.drawCentredString(0, 0, text)
        else:
            c.drawString(0, 0, text)
        c.restoreState()

    def _draw_header(self, c, layout: TableLayout, year: int, month: int) -> None:
        """Draw title, hour labels and the rule under them."""
        cfg = self.config
        c.setFillColorRGB(*_rgb(cfg.title_color))
        self._draw_text(c, 24, 12 + cfg.title_font_size * 0.8, cfg.title(year, month), cfg.title_font_size, bold=True)

        c.setFillColorRGB(*_rgb(cfg.hour_label_color))
        for col, hour in layout.hour_columns():
            x = layout.column_left(col) + layout.cell_width / 2
            self._draw_text(c, x, layout.header_height - 10, hour, cfg.hour_font_size, bold=True, align="center")

        c.setStrokeColorRGB(*_rgb(cfg.rule_color))
        c.setLineWidth(1)
        c.line(0, layout.header_height - 4, layout.width, layout.header_height - 4)

    def _draw_group_slice(
        self,
        c,
        layout: TableLayout,
        group: DateGroup,
        first: int,
        end: int,
        page_row: int,
    ) -> None:
        """Draw rows ``first``..``end`` of a group starting at ``page_row``."""
        cfg = self.config
        top = layout.header_height + page_row * layout.row_height
        height = (end - first) * layout.row_height

        c.setFillColorRGB(*_rgb(cfg.title_color))
        self._draw_text(c, layout.date_width / 2, top + height / 2 + 5, group.date, cfg.date_font_size * 0.8, align="center")

        for offset in range(first, end):
            y = top + (offset - first) * layout.row_height
            if offset < len(group.records):
                record = group.records[offset]
                c.setFillColorRGB(*_rgb(color_for(record.color_key).rgb()))
                c.rect(layout.date_width, y, layout.name_width, layout.row_height, fill=1, stroke=0)
                c.setFillColorRGB(*_rgb(cfg.text_color))
                name_size = cfg.name_font_size * 0.8
                name = self.fit_text(record.label, name_size, layout.name_width - 14)
                self._draw_text(c, layout.date_width + 10, y + layout.row_height / 2 + 4, name, name_size)
                scheduled = set(record.slots)
                filled = {col for col, label in enumerate(layout.slots) if label in scheduled}
                fill_color = cfg.scheduled_color
            else:
                filled = set(group.gap_columns)
                fill_color = cfg.alert_color

            for col in range(len(layout.slots)):
                x = layout.column_left(col)
                c.setStrokeColorRGB(*_rgb(cfg.cell_border_color))
                c.setLineWidth(0.5)
                c.rect(x, y, layout.cell_width, layout.row_height, fill=0, stroke=1)
                if col in filled:
                    c.setFillColorRGB(*_rgb(fill_color))
                    c.rect(x + 1, y + 1, layout.cell_width - 2, layout.row_height - 2, fill=1, stroke=0)

            if offset > first:
                c.setStrokeColorRGB(*_rgb(cfg.rule_color))
                c.setLineWidth(1)
                c.line(0, y, layout.width, y)

        c.setStrokeColorRGB(*_rgb(cfg.group_rule_color))
        c.setLineWidth(cfg.group_rule_width)
        c.line(0, top, layout.width, top)
