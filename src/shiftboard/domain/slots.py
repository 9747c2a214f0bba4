"""Half-hour slot grid and time-range grouping.

Slots are identified by ``"H:MM"`` labels with an unpadded hour, e.g.
``"9:00"`` or ``"13:30"``. Internally a label is converted to a count of
half-hours since midnight so runs can be detected with integer arithmetic.
"""

from typing import Iterable, Iterator


def to_half_hours(label: str) -> int:
    """Convert a slot label to half-hours since midnight.

    Any minute other than 30 is treated as the top of the hour.

    Raises:
        ValueError: If the label is not of the form ``H:MM``.
    """
    hour_text, sep, minute_text = label.strip().partition(":")
    if not sep:
        raise ValueError(f"Invalid slot label: {label!r}")
    try:
        hour = int(hour_text)
        minute = int(minute_text)
    except ValueError:
        raise ValueError(f"Invalid slot label: {label!r}") from None
    return hour * 2 + (1 if minute == 30 else 0)


def format_half_hours(value: int) -> str:
    """Format half-hours since midnight as an ``H:MM`` label."""
    hour, half = divmod(value, 2)
    return f"{hour}:{'30' if half else '00'}"


class SlotGrid:
    """Fixed, ordered sequence of half-hour slot labels.

    The grid spans ``start_hour`` to ``end_hour`` inclusive, so
    ``SlotGrid(11, 21)`` runs ``11:00, 11:30, ... 20:30, 21:00``.

    Example:
        >>> grid = SlotGrid(11, 13)
        >>> grid.labels
        ('11:00', '11:30', '12:00', '12:30', '13:00')
    """

    def __init__(self, start_hour: int, end_hour: int, step_minutes: int = 30):
        if step_minutes != 30:
            raise ValueError("Only 30 minute slots are supported")
        if end_hour < start_hour:
            raise ValueError("end_hour must not be before start_hour")
        self.start_hour = start_hour
        self.end_hour = end_hour
        self.step_minutes = step_minutes
        self._labels = tuple(
            format_half_hours(value)
            for value in range(start_hour * 2, end_hour * 2 + 1)
        )

    @property
    def labels(self) -> tuple[str, ...]:
        return self._labels

    def __len__(self) -> int:
        return len(self._labels)

    def __iter__(self) -> Iterator[str]:
        return iter(self._labels)

    def __contains__(self, label: object) -> bool:
        return label in self._labels

    def index(self, label: str) -> int:
        """Column index of a label in the grid."""
        return self._labels.index(label)

    def span(self, first: str, last: str) -> list[str]:
        """All labels between two labels, inclusive, in grid order.

        The arguments may be given in either order, matching a click on a
        start cell followed by a click on an end cell.

        Raises:
            ValueError: If either label is not part of the grid.
        """
        start = self.index(first)
        end = self.index(last)
        if start > end:
            start, end = end, start
        return list(self._labels[start : end + 1])

    def __repr__(self) -> str:
        return f"SlotGrid({self.start_hour}, {self.end_hour})"


# Grid shown to staff when submitting availability
AVAILABILITY_GRID = SlotGrid(9, 21)

# Grid drawn in the exported schedule image
RENDER_GRID = SlotGrid(11, 21)


def group_consecutive_times(times: Iterable[str]) -> list[str]:
    """Collapse slot labels into ``"start - end"`` ranges.

    Labels are deduplicated and sorted; each run of consecutive half-hours
    becomes one range whose end is the end of its last half-hour block.
    Labels that cannot be parsed are skipped.

    Example:
        >>> group_consecutive_times(["13:00", "13:30", "18:00", "18:30"])
        ['13:00 - 14:00', '18:00 - 19:00']
    """
    parsed = set()
    for label in times:
        try:
            parsed.add(to_half_hours(label))
        except ValueError:
            continue
    values = sorted(parsed)
    if not values:
        return []

    ranges = []
    start = prev = values[0]
    for value in values[1:]:
        if value != prev + 1:
            ranges.append(f"{format_half_hours(start)} - {format_half_hours(prev + 1)}")
            start = value
        prev = value
    ranges.append(f"{format_half_hours(start)} - {format_half_hours(prev + 1)}")
    return ranges


def format_time_ranges(times: Iterable[str]) -> str:
    """Comma-joined ranges, as written to spreadsheet cells and reports."""
    return ", ".join(group_consecutive_times(times))
