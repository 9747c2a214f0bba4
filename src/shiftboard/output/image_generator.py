"""PNG rendering of the monthly schedule table.

The image shows one row per confirmed shift, grouped by date:
- A merged date cell spanning every row of the date
- A name cell tinted with the person's colour
- One cell per half-hour slot, filled where the person is scheduled
- A trailing red-marked row for slots nobody covers that day
"""

from io import BytesIO
from pathlib import Path
from typing import Optional, Union

from PIL import Image, ImageDraw, ImageFont

from shiftboard.config import RenderConfig
from shiftboard.domain.colors import color_for
from shiftboard.domain.models import MonthlyShiftBatch, RecordsLike
from shiftboard.output.layout import DateGroup, TableLayout, build_layout


def resolve_records(records: RecordsLike, year: Optional[int], month: Optional[int]):
    """Split renderer input into a record list and the title year/month.

    A ``MonthlyShiftBatch`` supplies its own year and month unless they are
    given explicitly.
    """
    if isinstance(records, MonthlyShiftBatch):
        year = records.year if year is None else year
        month = records.month if month is None else month
        records = records.records
    if year is None or month is None:
        raise ValueError("year and month are required for a plain record list")
    return list(records), year, month


class ImageGenerator:
    """Renders shift records into a PNG schedule table.

    Rendering is pure: the input is not modified and nothing is written
    unless ``generate`` is called with a path.

    Example:
        >>> generator = ImageGenerator()
        >>> png = generator.render(records, 2025, 5)
        >>> generator.generate(records, 2025, 5, "2025-05-shift.png")
    """

    def __init__(self, config: Optional[RenderConfig] = None):
        self.config = config or RenderConfig()
        self._fonts: dict[int, ImageFont.ImageFont] = {}

    def render(
        self,
        records: RecordsLike,
        year: Optional[int] = None,
        month: Optional[int] = None,
    ) -> bytes:
        """Render records to PNG bytes.

        Args:
            records: Records for one month, or a ``MonthlyShiftBatch``.
            year: Year shown in the title.
            month: Month shown in the title.

        Returns:
            The encoded PNG image.
        """
        return self.generate_to_buffer(records, year, month).getvalue()

    def generate(
        self,
        records: RecordsLike,
        year: Optional[int],
        month: Optional[int],
        output_path: Union[str, Path],
    ) -> bytes:
        """Render records and save the PNG to a file."""
        data = self.render(records, year, month)
        Path(output_path).write_bytes(data)
        return data

    def generate_to_buffer(
        self,
        records: RecordsLike,
        year: Optional[int] = None,
        month: Optional[int] = None,
    ) -> BytesIO:
        """Render records and return a PNG bytes buffer."""
        records, year, month = resolve_records(records, year, month)
        layout = build_layout(records, self.config)
        image = self.draw(layout, year, month)

        buffer = BytesIO()
        image.save(buffer, format="PNG")
        buffer.seek(0)
        return buffer

    def draw(self, layout: TableLayout, year: int, month: int) -> Image.Image:
        """Draw a computed layout onto a new image."""
        cfg = self.config
        image = Image.new("RGB", (layout.width, layout.height), cfg.background_color)
        draw = ImageDraw.Draw(image)

        self._draw_header(draw, layout, year, month)

        for group in layout.groups:
            self._draw_group(draw, layout, group)

        self._draw_row_rules(draw, layout)

        # Column separators: date | name | slots
        for x in (layout.date_width, layout.left_width):
            draw.line(
                [(x, layout.header_height - 4), (x, layout.height)],
                fill=cfg.rule_color,
                width=1,
            )
        return image

    def _font(self, size: int):
        font = self._fonts.get(size)
        if font is None:
            if self.config.font_path:
                font = ImageFont.truetype(self.config.font_path, size)
            else:
                font = ImageFont.load_default(size=size)
            self._fonts[size] = font
        return font

    def _draw_header(self, draw: ImageDraw.ImageDraw, layout: TableLayout, year: int, month: int) -> None:
        """Draw the title, the hour labels and the rule below them."""
        cfg = self.config
        draw.text(
            (24, 12),
            cfg.title(year, month),
            fill=cfg.title_color,
            font=self._font(cfg.title_font_size),
        )

        # Only the :00 column gets a label, so each hour spans two columns
        hour_font = self._font(cfg.hour_font_size)
        for col, hour in layout.hour_columns():
            center_x = layout.column_left(col) + layout.cell_width / 2
            left, _, right, _ = draw.textbbox((0, 0), hour, font=hour_font)
            draw.text(
                (round(center_x - (left + right) / 2), layout.header_height - 22),
                hour,
                fill=cfg.hour_label_color,
                font=hour_font,
            )

        draw.line(
            [(0, layout.header_height - 4), (layout.width, layout.header_height - 4)],
            fill=cfg.rule_color,
            width=1,
        )

    def _draw_group(self, draw: ImageDraw.ImageDraw, layout: TableLayout, group: DateGroup) -> None:
        """Draw one date block: date cell, record rows, gap row, top rule."""
        cfg = self.config
        group_top = layout.row_top(group.start_row)
        group_height = layout.row_height * group.row_count

        self._draw_centered_text(
            draw,
            group.date,
            (0, group_top, layout.date_width, group_top + group_height),
            self._font(cfg.date_font_size),
            cfg.title_color,
        )

        for offset, record in enumerate(group.records):
            y = layout.row_top(group.start_row + offset)
            draw.rectangle(
                [layout.date_width, y, layout.left_width - 1, y + layout.row_height - 1],
                fill=color_for(record.color_key).rgb(),
            )
            self._draw_name(draw, layout, record.label, y)

            scheduled = set(record.slots)
            filled = [col for col, label in enumerate(layout.slots) if label in scheduled]
            self._draw_slot_row(draw, layout, y, filled, cfg.scheduled_color)

        if group.has_gap_row:
            y = layout.row_top(group.start_row + len(group.records))
            self._draw_slot_row(draw, layout, y, group.gap_columns, cfg.alert_color)

        draw.line(
            [(0, group_top), (layout.width, group_top)],
            fill=cfg.group_rule_color,
            width=cfg.group_rule_width,
        )

    def _draw_slot_row(
        self,
        draw: ImageDraw.ImageDraw,
        layout: TableLayout,
        y: int,
        filled_columns: list[int],
        fill: str,
    ) -> None:
        """Draw bordered slot cells for one row, filling the given columns."""
        cfg = self.config
        filled = set(filled_columns)
        bottom = y + layout.row_height
        for col in range(len(layout.slots)):
            left = round(layout.column_left(col))
            right = round(layout.column_left(col + 1))
            draw.rectangle([left, y, right, bottom], outline=cfg.cell_border_color)
            if col in filled:
                draw.rectangle([left + 1, y + 1, right - 1, bottom - 1], fill=fill)

    def _draw_name(self, draw: ImageDraw.ImageDraw, layout: TableLayout, name: str, y: int) -> None:
        cfg = self.config
        font = self._font(cfg.name_font_size)
        available = layout.name_width - 14
        text = name
        if draw.textlength(text, font=font) > available:
            while text and draw.textlength(text + "...", font=font) > available:
                text = text[:-1]
            text += "..."
        _, top, _, bottom = draw.textbbox((0, 0), text, font=font)
        draw.text(
            (layout.date_width + 10, round(y + layout.row_height / 2 - (top + bottom) / 2)),
            text,
            fill=cfg.text_color,
            font=font,
        )

    @staticmethod
    def _draw_centered_text(draw: ImageDraw.ImageDraw, text: str, box: tuple, font, fill: str) -> None:
        x0, y0, x1, y1 = box
        left, top, right, bottom = draw.textbbox((0, 0), text, font=font)
        draw.text(
            (round((x0 + x1) / 2 - (left + right) / 2), round((y0 + y1) / 2 - (top + bottom) / 2)),
            text,
            fill=fill,
            font=font,
        )

    def _draw_row_rules(self, draw: ImageDraw.ImageDraw, layout: TableLayout) -> None:
        """Thin rules between rows; group tops already have a heavy rule."""
        cfg = self.config
        for group in layout.groups:
            for row in range(group.start_row + 1, group.end_row):
                y = layout.row_top(row)
                draw.line([(0, y), (layout.width, y)], fill=cfg.rule_color, width=1)
