"""Domain models for shift records.

A shift record is one person's set of half-hour slots on one date. The same
shape is used for availability requests, confirmed shifts and open request
shifts; only the collection they live in differs.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Iterable, Optional, Union


class ShiftCollection(Enum):
    """Document collections holding shift records."""

    REQUESTS = "shifts"  # Availability submitted by staff
    FINAL = "finalShifts"  # Confirmed by an administrator
    OPEN = "requestedShifts"  # Slots the administrator wants filled


@dataclass(frozen=True)
class ShiftRecord:
    """One person's slots on one date.

    Attributes:
        date: Calendar date as ``YYYY-MM-DD``.
        user: Stable identifier of the staff member (usually an email).
        display_name: Optional human-readable name.
        times: Slot labels as stored; may contain duplicates.
        id: Document id, when the record came from a store.
    """

    date: str
    user: str = ""
    display_name: Optional[str] = None
    times: tuple[str, ...] = ()
    id: Optional[str] = None

    def __post_init__(self):
        # Anything but a list or tuple of labels means no slots
        times = self.times
        if isinstance(times, (list, tuple)):
            times = tuple(str(t) for t in times)
        else:
            times = ()
        object.__setattr__(self, "times", times)

    @classmethod
    def from_dict(cls, data: dict[str, Any], doc_id: Optional[str] = None) -> "ShiftRecord":
        """Build a record from a stored document.

        A missing or non-list ``times`` field yields a record with no slots.
        """
        display_name = data.get("displayName")
        return cls(
            date=str(data.get("date") or ""),
            user=str(data.get("user") or ""),
            display_name=str(display_name) if display_name else None,
            times=data.get("times"),
            id=doc_id if doc_id is not None else data.get("id"),
        )

    def to_dict(self) -> dict[str, Any]:
        """Document shape, without the id."""
        data: dict[str, Any] = {
            "date": self.date,
            "user": self.user,
            "times": list(self.times),
        }
        if self.display_name:
            data["displayName"] = self.display_name
        return data

    @property
    def label(self) -> str:
        """Name shown in tables, falling back to the user identifier."""
        return self.display_name or self.user

    @property
    def color_key(self) -> str:
        """String the per-user colour is derived from."""
        return self.user or self.display_name or ""

    @property
    def slots(self) -> tuple[str, ...]:
        """Slot labels with duplicates removed, first occurrence kept."""
        return tuple(dict.fromkeys(self.times))

    def with_id(self, doc_id: str) -> "ShiftRecord":
        return ShiftRecord(
            date=self.date,
            user=self.user,
            display_name=self.display_name,
            times=self.times,
            id=doc_id,
        )


@dataclass
class MonthlyShiftBatch:
    """Shift records for one calendar month, sorted by date.

    Renderers take records in the order given. Building a batch makes the
    "already filtered to the month and sorted" precondition explicit.

    Example:
        >>> batch = MonthlyShiftBatch.build(records, 2025, 5)
        >>> png = ImageGenerator().render(batch)
    """

    year: int
    month: int
    records: list[ShiftRecord] = field(default_factory=list)

    @classmethod
    def build(cls, records: Iterable[ShiftRecord], year: int, month: int) -> "MonthlyShiftBatch":
        """Keep the records dated in ``year``/``month`` and sort them by date.

        The sort is stable, so records on the same date keep their order.
        """
        if not 1 <= month <= 12:
            raise ValueError(f"Invalid month: {month}")
        prefix = month_prefix(year, month)
        selected = [r for r in records if r.date.startswith(prefix + "-")]
        selected.sort(key=lambda r: r.date)
        return cls(year=year, month=month, records=selected)

    @property
    def is_empty(self) -> bool:
        return not self.records

    def __len__(self) -> int:
        return len(self.records)

    def __iter__(self):
        return iter(self.records)


RecordsLike = Union[MonthlyShiftBatch, Iterable[ShiftRecord]]


def month_prefix(year: int, month: int) -> str:
    """``YYYY-MM`` prefix shared by every date in a month."""
    return f"{year}-{month:02d}"


def month_bounds(year: int, month: int) -> tuple[str, str]:
    """Lexicographic date bounds used by month queries.

    The upper bound is always day 31; string comparison makes that correct
    for shorter months too.
    """
    prefix = month_prefix(year, month)
    return f"{prefix}-01", f"{prefix}-31"
