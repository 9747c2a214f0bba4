"""Domain models, slot grid and colour rules."""

from shiftboard.domain.colors import (
    HSLColor,
    calendar_color_for,
    color_for,
)
from shiftboard.domain.models import (
    MonthlyShiftBatch,
    ShiftCollection,
    ShiftRecord,
    month_bounds,
)
from shiftboard.domain.slots import (
    AVAILABILITY_GRID,
    RENDER_GRID,
    SlotGrid,
    format_time_ranges,
    group_consecutive_times,
)

__all__ = [
    # Models
    "MonthlyShiftBatch",
    "ShiftCollection",
    "ShiftRecord",
    "month_bounds",
    # Slots
    "AVAILABILITY_GRID",
    "RENDER_GRID",
    "SlotGrid",
    "format_time_ranges",
    "group_consecutive_times",
    # Colours
    "HSLColor",
    "calendar_color_for",
    "color_for",
]
