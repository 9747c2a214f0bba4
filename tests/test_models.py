"""Tests for shift record models."""

import pytest

from shiftboard.domain.models import (
    MonthlyShiftBatch,
    ShiftCollection,
    ShiftRecord,
    month_bounds,
)


class TestShiftRecord:
    """Tests for ShiftRecord."""

    def test_from_dict(self):
        record = ShiftRecord.from_dict(
            {"date": "2025-05-10", "user": "a@x.com", "displayName": "Alice", "times": ["11:00"]},
            doc_id="doc1",
        )
        assert record.date == "2025-05-10"
        assert record.user == "a@x.com"
        assert record.display_name == "Alice"
        assert record.times == ("11:00",)
        assert record.id == "doc1"

    def test_missing_times(self):
        """Missing times means no slots."""
        record = ShiftRecord.from_dict({"date": "2025-05-10", "user": "a@x.com"})
        assert record.times == ()
        assert record.slots == ()

    def test_non_list_times(self):
        """A non-list times field is treated as empty."""
        record = ShiftRecord.from_dict({"date": "2025-05-10", "user": "a@x.com", "times": "11:00"})
        assert record.times == ()

    def test_label_falls_back_to_user(self):
        assert ShiftRecord("2025-05-10", user="a@x.com").label == "a@x.com"
        assert ShiftRecord("2025-05-10", user="a@x.com", display_name="Alice").label == "Alice"

    def test_color_key_prefers_user(self):
        assert ShiftRecord("2025-05-10", user="a@x.com", display_name="Alice").color_key == "a@x.com"
        assert ShiftRecord("2025-05-10", display_name="Alice").color_key == "Alice"
        assert ShiftRecord("2025-05-10").color_key == ""

    @pytest.mark.parametrize("times", [None, "11:00", 7])
    def test_constructor_normalizes_times(self, times):
        """Only a list or tuple of labels is kept as times."""
        record = ShiftRecord("2025-05-10", "a@x.com", times=times)
        assert record.times == ()
        assert record.slots == ()

    def test_list_times_become_tuple(self):
        record = ShiftRecord("2025-05-10", "a@x.com", times=["11:00", "11:30"])
        assert record.times == ("11:00", "11:30")

    def test_slots_deduplicated_in_order(self):
        record = ShiftRecord("2025-05-10", "a@x.com", times=("12:00", "11:00", "12:00"))
        assert record.slots == ("12:00", "11:00")

    def test_to_dict_uses_document_field_names(self):
        record = ShiftRecord("2025-05-10", "a@x.com", "Alice", ("11:00",), id="doc1")
        assert record.to_dict() == {
            "date": "2025-05-10",
            "user": "a@x.com",
            "displayName": "Alice",
            "times": ["11:00"],
        }

    def test_to_dict_omits_empty_display_name(self):
        assert "displayName" not in ShiftRecord("2025-05-10", "a@x.com").to_dict()


class TestMonthlyShiftBatch:
    """Tests for MonthlyShiftBatch."""

    def test_build_filters_and_sorts(self):
        """Only the target month is kept, ordered by date."""
        records = [
            ShiftRecord("2025-05-20", "a@x.com"),
            ShiftRecord("2025-06-01", "b@x.com"),
            ShiftRecord("2025-05-03", "c@x.com"),
            ShiftRecord("2025-04-30", "d@x.com"),
            ShiftRecord("2025-05-20", "e@x.com"),
        ]
        batch = MonthlyShiftBatch.build(records, 2025, 5)
        assert [r.user for r in batch.records] == ["c@x.com", "a@x.com", "e@x.com"]
        assert batch.year == 2025
        assert batch.month == 5
        assert len(batch) == 3

    def test_empty(self):
        batch = MonthlyShiftBatch.build([], 2025, 5)
        assert batch.is_empty

    def test_invalid_month(self):
        with pytest.raises(ValueError):
            MonthlyShiftBatch.build([], 2025, 13)


def test_month_bounds():
    """Upper bound is day 31 even for short months."""
    assert month_bounds(2025, 2) == ("2025-02-01", "2025-02-31")
    assert month_bounds(2025, 11) == ("2025-11-01", "2025-11-31")


def test_collection_names():
    assert ShiftCollection.FINAL.value == "finalShifts"
    assert ShiftCollection.REQUESTS.value == "shifts"
    assert ShiftCollection.OPEN.value == "requestedShifts"
