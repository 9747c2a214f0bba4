"""Plain-text coverage report for a month of confirmed shifts.

This module creates text output to review a schedule before it is sent:
- Who works on each date, as time ranges
- Slots nobody covers on each date
- Scheduled hours per person
"""

from collections import defaultdict
from pathlib import Path
from typing import Optional, Union

from shiftboard.config import RenderConfig
from shiftboard.domain.models import RecordsLike
from shiftboard.domain.slots import RENDER_GRID, SlotGrid, format_time_ranges
from shiftboard.output.image_generator import resolve_records
from shiftboard.output.layout import build_layout


class ReportGenerator:
    """Generates a text coverage report.

    Uses the same grouping and coverage rules as the image export, so the
    "Uncovered" lines match the red cells of the rendered table.
    """

    def __init__(self, config: Optional[RenderConfig] = None):
        self.config = config or RenderConfig()

    def generate(
        self,
        records: RecordsLike,
        year: Optional[int],
        month: Optional[int],
        output_path: Union[str, Path],
    ) -> str:
        """Generate the report and save it to a file.

        Returns:
            The generated text content.
        """
        content = self.generate_to_string(records, year, month)
        Path(output_path).write_text(content, encoding="utf-8")
        return content

    def generate_to_string(
        self,
        records: RecordsLike,
        year: Optional[int] = None,
        month: Optional[int] = None,
    ) -> str:
        records, year, month = resolve_records(records, year, month)
        layout = build_layout(records, self.config)

        lines = []
        lines.append("=" * 60)
        lines.append(f"SHIFT COVERAGE REPORT - {year}-{month:02d}")
        lines.append("=" * 60)
        lines.append("")
        lines.append(f"Dates: {len(layout.groups)}")
        lines.append(f"Shifts: {len(records)}")
        lines.append(f"Slot window: {layout.slots[0]} - {layout.slots[-1]}")
        lines.append("")

        dates_with_gaps = 0
        for group in layout.groups:
            lines.append(f"{group.date}")
            for record in group.records:
                ranges = format_time_ranges(record.slots) or "(no slots)"
                lines.append(f"  {record.label:<20} {ranges}")
            if group.has_gap_row:
                dates_with_gaps += 1
                gap = [layout.slots[col] for col in group.gap_columns]
                lines.append(f"  {'Uncovered:':<20} {format_time_ranges(gap)}")
            lines.append("")

        lines.append("-" * 60)
        lines.append(f"Dates with uncovered slots: {dates_with_gaps}/{len(layout.groups)}")
        lines.append("")
        lines.append("Scheduled hours per person:")
        hours = self.hours_by_person(records, self.config.slot_grid)
        if not hours:
            lines.append("  (none)")
        for name in sorted(hours):
            lines.append(f"  {name:<20} {hours[name]:.1f}h")

        return "\n".join(lines) + "\n"

    @staticmethod
    def hours_by_person(records, grid: SlotGrid = RENDER_GRID) -> dict[str, float]:
        """Total scheduled hours per display label, half an hour per slot.

        Only slots on the grid count; malformed or out-of-window labels
        are left out, as they are in the drawn table.
        """
        totals: dict[str, float] = defaultdict(float)
        for record in records:
            totals[record.label] += sum(1 for label in record.slots if label in grid) * 0.5
        return dict(totals)
