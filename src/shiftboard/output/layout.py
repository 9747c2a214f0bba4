"""Table layout for the schedule renderers.

Turns a flat list of shift records into the row and column geometry shared
by the PNG and PDF renderers:

- A date column and a name column on the left, each a fixed share of the
  width, and one equal-width column per slot on the right
- One block of rows per date, in first-encountered order
- Within a block, rows ordered by each record's earliest slot
- An extra nameless row when some slot of the day has nobody scheduled
"""

import logging
import math
from dataclasses import dataclass, field
from typing import Iterable

from shiftboard.config import RenderConfig
from shiftboard.domain.models import ShiftRecord
from shiftboard.domain.slots import to_half_hours
from shiftboard.errors import RenderLimitError

logger = logging.getLogger(__name__)


@dataclass
class DateGroup:
    """All records for one date, drawn as a contiguous block of rows.

    Attributes:
        date: The shared ``YYYY-MM-DD`` date.
        records: Records ordered by earliest slot.
        gap_columns: Slot columns no record covers, exempt slots excluded.
        start_row: Index of the group's first row in the table body.
    """

    date: str
    records: list[ShiftRecord] = field(default_factory=list)
    gap_columns: list[int] = field(default_factory=list)
    start_row: int = 0

    @property
    def has_gap_row(self) -> bool:
        return bool(self.gap_columns)

    @property
    def row_count(self) -> int:
        return len(self.records) + (1 if self.has_gap_row else 0)

    @property
    def end_row(self) -> int:
        """Index one past the group's last row."""
        return self.start_row + self.row_count


@dataclass
class TableLayout:
    """Geometry of a rendered schedule table.

    Attributes:
        width: Total width in pixels.
        header_height: Height of the title and hour-label band.
        row_height: Height of one row.
        date_width: Width of the date column.
        name_width: Width of the name column.
        cell_width: Width of one slot column.
        slots: Slot labels, one per column.
        groups: Date groups in drawing order.
    """

    width: int
    header_height: int
    row_height: int
    date_width: int
    name_width: int
    cell_width: float
    slots: tuple[str, ...]
    groups: list[DateGroup] = field(default_factory=list)

    @property
    def left_width(self) -> int:
        """Combined width of the date and name columns."""
        return self.date_width + self.name_width

    @property
    def total_rows(self) -> int:
        return sum(group.row_count for group in self.groups)

    @property
    def height(self) -> int:
        return self.header_height + self.row_height * self.total_rows

    def row_top(self, row: int) -> int:
        """Y coordinate of the top edge of a body row."""
        return self.header_height + row * self.row_height

    def column_left(self, column: int) -> float:
        """X coordinate of the left edge of a slot column."""
        return self.left_width + column * self.cell_width

    def hour_columns(self) -> list[tuple[int, str]]:
        """Columns that carry an hour label, with the hour text."""
        return [
            (i, label.split(":")[0])
            for i, label in enumerate(self.slots)
            if label.endswith(":00")
        ]


def earliest_slot(record: ShiftRecord) -> float:
    """Sort key for a record: its earliest slot, or infinity if none.

    Labels that cannot be parsed are ignored.
    """
    values = []
    for label in record.slots:
        try:
            values.append(to_half_hours(label))
        except ValueError:
            continue
    return min(values) if values else math.inf


def group_by_date(records: Iterable[ShiftRecord]) -> list[DateGroup]:
    """Group records by date in first-encountered order.

    Dates are not sorted across groups; rows inside a group are ordered by
    earliest slot, ties keeping input order.
    """
    groups: dict[str, DateGroup] = {}
    for record in records:
        group = groups.get(record.date)
        if group is None:
            group = groups[record.date] = DateGroup(date=record.date)
        group.records.append(record)

    for group in groups.values():
        group.records.sort(key=earliest_slot)
    return list(groups.values())


def coverage_gap(
    records: Iterable[ShiftRecord],
    slots: tuple[str, ...],
    exempt: Iterable[str] = (),
) -> list[int]:
    """Columns of ``slots`` that no record covers, skipping exempt labels."""
    covered: set[str] = set()
    for record in records:
        covered.update(record.slots)
    exempt_set = set(exempt)
    return [
        col
        for col, label in enumerate(slots)
        if label not in exempt_set and label not in covered
    ]


def build_layout(records: Iterable[ShiftRecord], config: RenderConfig) -> TableLayout:
    """Compute the full table layout for a list of records.

    Raises:
        RenderLimitError: If the table needs more rows than
            ``config.max_rows``.
    """
    slots = config.slot_grid.labels
    date_width = math.floor(config.width * config.date_fraction)
    name_width = math.floor(config.width * config.name_fraction)
    cell_width = (config.width - date_width - name_width) / len(slots)

    groups = group_by_date(records)
    row = 0
    for group in groups:
        group.gap_columns = coverage_gap(group.records, slots, config.exempt_slots)
        group.start_row = row
        row += group.row_count

    if config.max_rows is not None and row > config.max_rows:
        raise RenderLimitError(row, config.max_rows)

    layout = TableLayout(
        width=config.width,
        header_height=config.header_height,
        row_height=config.row_height,
        date_width=date_width,
        name_width=name_width,
        cell_width=cell_width,
        slots=slots,
        groups=groups,
    )
    logger.debug(
        "Layout: %d date groups, %d rows, %dx%d px",
        len(groups), layout.total_rows, layout.width, layout.height,
    )
    return layout
