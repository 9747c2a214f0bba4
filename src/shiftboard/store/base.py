"""Shift record storage interface and an in-memory implementation.

The store holds three collections of the same record shape (see
``ShiftCollection``). Month queries compare dates as strings, so they return
records in no particular order; callers group and sort as needed.
"""

from abc import ABC, abstractmethod
from typing import Optional
from uuid import uuid4

from shiftboard.domain.models import ShiftCollection, ShiftRecord, month_bounds


class ShiftStore(ABC):
    """Abstract base class for shift record stores."""

    @abstractmethod
    def add(self, collection: ShiftCollection, record: ShiftRecord) -> str:
        """Store a record and return its generated id."""
        pass

    @abstractmethod
    def get(self, collection: ShiftCollection, record_id: str) -> Optional[ShiftRecord]:
        """Fetch one record, or None if it does not exist."""
        pass

    @abstractmethod
    def list_records(self, collection: ShiftCollection) -> list[ShiftRecord]:
        """All records in a collection."""
        pass

    @abstractmethod
    def delete(self, collection: ShiftCollection, record_id: str) -> bool:
        """Delete a record. Returns False if it did not exist."""
        pass

    @abstractmethod
    def query_month(self, collection: ShiftCollection, year: int, month: int) -> list[ShiftRecord]:
        """Records dated between ``YYYY-MM-01`` and ``YYYY-MM-31``."""
        pass

    def confirm(self, request_id: str) -> str:
        """Copy an availability request into the confirmed collection.

        Returns:
            Id of the new confirmed record.

        Raises:
            KeyError: If no request has that id.
        """
        record = self.get(ShiftCollection.REQUESTS, request_id)
        if record is None:
            raise KeyError(request_id)
        return self.add(ShiftCollection.FINAL, record)


class InMemoryShiftStore(ShiftStore):
    """Dict-backed store for tests, demos and offline rendering."""

    def __init__(self):
        self._data: dict[ShiftCollection, dict[str, ShiftRecord]] = {
            collection: {} for collection in ShiftCollection
        }

    def add(self, collection: ShiftCollection, record: ShiftRecord) -> str:
        record_id = uuid4().hex
        self._data[collection][record_id] = record.with_id(record_id)
        return record_id

    def get(self, collection: ShiftCollection, record_id: str) -> Optional[ShiftRecord]:
        return self._data[collection].get(record_id)

    def list_records(self, collection: ShiftCollection) -> list[ShiftRecord]:
        return list(self._data[collection].values())

    def delete(self, collection: ShiftCollection, record_id: str) -> bool:
        return self._data[collection].pop(record_id, None) is not None

    def query_month(self, collection: ShiftCollection, year: int, month: int) -> list[ShiftRecord]:
        low, high = month_bounds(year, month)
        return [r for r in self._data[collection].values() if low <= r.date <= high]
