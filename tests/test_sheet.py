"""Tests for the spreadsheet sink."""

import pytest
import requests
from gspread.exceptions import WorksheetNotFound

from shiftboard.delivery.sheet import (
    SheetSink,
    build_sheet_entries,
    clear_ranges,
    normalize_sheet_date,
)
from shiftboard.domain.models import ShiftRecord
from shiftboard.errors import DeliveryError


class FakeWorksheet:
    def __init__(self, values):
        self.values = values
        self.cleared = None
        self.updates = None
        self.value_input_option = None

    def get(self, range_name):
        return self.values

    def batch_clear(self, ranges):
        self.cleared = ranges

    def batch_update(self, data, value_input_option=None):
        self.updates = data
        self.value_input_option = value_input_option


class FakeSpreadsheet:
    def __init__(self, worksheets):
        self.worksheets = worksheets

    def worksheet(self, title):
        if title not in self.worksheets:
            raise WorksheetNotFound(title)
        return self.worksheets[title]


@pytest.fixture
def worksheet():
    """Dates in C1 (MM/DD) and E1 (unpadded), names in B3 and B4."""
    return FakeWorksheet([
        ["", "", "05/10", "", "2025/5/11"],
        [],
        ["", "Alice"],
        ["", "Bob "],
    ])


class TestBuildSheetEntries:
    """Tests for build_sheet_entries."""

    def test_keys_and_ranges(self):
        records = [
            ShiftRecord("2025-05-10", "a@x.com", "Alice", ("13:00", "13:30", "18:00")),
            ShiftRecord("2025-05-11", "b@x.com", None, ("11:00",)),
        ]
        assert build_sheet_entries(records) == {
            ("Alice", "2025/05/10"): "13:00 - 14:00, 18:00 - 18:30",
            ("b@x.com", "2025/05/11"): "11:00 - 11:30",
        }


class TestNormalizeSheetDate:
    """Tests for header date normalisation."""

    @pytest.mark.parametrize("value, expected", [
        ("05/10", "2025/05/10"),
        ("2025/5/1", "2025/05/01"),
        ("2025/05/01", "2025/05/01"),
        (" Sat ", "Sat"),
        (None, ""),
    ])
    def test_formats(self, value, expected):
        assert normalize_sheet_date(value, 2025, 5) == expected


class TestSheetSink:
    """Tests for SheetSink."""

    def test_worksheet_title(self):
        assert SheetSink.worksheet_title(2025, 5) == "202505"

    def test_clear_ranges(self):
        ranges = clear_ranges()
        assert len(ranges) == 19
        assert ranges[0] == "C3:C10"
        assert ranges[1] == "E3:E10"
        assert ranges[-1] == "AM3:AM10"

    def test_write(self, worksheet):
        sink = SheetSink(FakeSpreadsheet({"202505": worksheet}))
        result = sink.write(2025, 5, {
            ("Alice", "2025/05/10"): "13:00 - 14:00",
            ("Bob", "2025/05/11"): "18:00 - 19:00",
            ("Carol", "2025/05/10"): "11:00 - 12:00",
        })

        assert worksheet.cleared == clear_ranges()
        assert worksheet.updates == [
            {"range": "C3", "values": [["13:00 - 14:00"]]},
            {"range": "E4", "values": [["18:00 - 19:00"]]},
        ]
        assert worksheet.value_input_option == "USER_ENTERED"
        assert [w["cell"] for w in result.written] == ["C3", "E4"]
        assert result.skipped == [{"name": "Carol", "date": "2025/05/10", "value": "11:00 - 12:00"}]

    def test_unknown_date_is_skipped(self, worksheet):
        sink = SheetSink(FakeSpreadsheet({"202505": worksheet}))
        result = sink.write(2025, 5, {("Alice", "2025/05/20"): "13:00 - 14:00"})
        assert result.written == []
        assert len(result.skipped) == 1
        assert worksheet.updates is None
        # Old values are cleared even when nothing is written
        assert worksheet.cleared == clear_ranges()

    def test_connection_error_on_read(self, worksheet):
        def fail(range_name):
            raise requests.ConnectionError("down")

        worksheet.get = fail
        sink = SheetSink(FakeSpreadsheet({"202505": worksheet}))
        with pytest.raises(DeliveryError) as exc_info:
            sink.write(2025, 5, {})
        assert isinstance(exc_info.value.__cause__, requests.ConnectionError)

    def test_timeout_on_write(self, worksheet):
        def fail(data, value_input_option=None):
            raise requests.Timeout("slow")

        worksheet.batch_update = fail
        sink = SheetSink(FakeSpreadsheet({"202505": worksheet}))
        with pytest.raises(DeliveryError, match="Could not write"):
            sink.write(2025, 5, {("Alice", "2025/05/10"): "13:00 - 14:00"})

    def test_missing_worksheet(self):
        sink = SheetSink(FakeSpreadsheet({}))
        with pytest.raises(DeliveryError, match="202505"):
            sink.write(2025, 5, {})
