"""Tests for publishing confirmed schedules."""

import logging

import pytest

from shiftboard.delivery.publisher import (
    image_caption,
    image_filename,
    load_confirmed_batch,
    publish_image,
    publish_sheet,
)
from shiftboard.delivery.sheet import SheetWriteResult
from shiftboard.domain.models import ShiftCollection, ShiftRecord
from shiftboard.errors import NoShiftsFound
from shiftboard.store.base import InMemoryShiftStore


class RecordingWebhook:
    def __init__(self):
        self.sent = []

    def send(self, png, caption, filename="shift.png"):
        self.sent.append((png, caption, filename))


class RecordingSheet:
    def __init__(self):
        self.writes = []

    def write(self, year, month, entries):
        self.writes.append((year, month, entries))
        return SheetWriteResult(skipped=[{"name": "Zed", "date": "2025/05/02", "value": "x"}])


@pytest.fixture
def store():
    store = InMemoryShiftStore()
    store.add(ShiftCollection.FINAL, ShiftRecord("2025-05-12", "b@x.com", "Bob", ("15:00",)))
    store.add(ShiftCollection.FINAL, ShiftRecord("2025-05-03", "a@x.com", "Alice", ("11:00", "11:30")))
    store.add(ShiftCollection.FINAL, ShiftRecord("2025-06-01", "c@x.com", "Carol", ("13:00",)))
    store.add(ShiftCollection.REQUESTS, ShiftRecord("2025-05-04", "d@x.com", "Dan", ("13:00",)))
    return store


class TestLoadConfirmedBatch:
    """Tests for load_confirmed_batch."""

    def test_sorted_by_date(self, store):
        batch = load_confirmed_batch(store, 2025, 5)
        assert [r.date for r in batch.records] == ["2025-05-03", "2025-05-12"]
        assert (batch.year, batch.month) == (2025, 5)

    def test_no_shifts(self, store):
        with pytest.raises(NoShiftsFound) as exc_info:
            load_confirmed_batch(store, 2025, 7)
        assert "2025-07" in str(exc_info.value)

    @pytest.mark.parametrize("month", [0, 13])
    def test_invalid_month(self, store, month):
        with pytest.raises(ValueError):
            load_confirmed_batch(store, 2025, month)

    def test_logs_invalid_records(self, caplog):
        store = InMemoryShiftStore()
        store.add(ShiftCollection.FINAL, ShiftRecord("2025-05-03", times=("13:00",)))
        with caplog.at_level(logging.WARNING, logger="shiftboard.delivery.publisher"):
            batch = load_confirmed_batch(store, 2025, 5)
        assert len(batch) == 1
        assert "missing_user" in caplog.text


class TestPublishImage:
    """Tests for publish_image."""

    def test_sends_png(self, store):
        sink = RecordingWebhook()
        batch = publish_image(store, sink, 2025, 5)
        assert len(batch) == 2
        png, caption, filename = sink.sent[0]
        assert png.startswith(b"\x89PNG")
        assert caption == "Confirmed shift schedule for 2025/5"
        assert filename == "2025-05-shift.png"

    def test_nothing_sent_for_empty_month(self, store):
        sink = RecordingWebhook()
        with pytest.raises(NoShiftsFound):
            publish_image(store, sink, 2025, 8)
        assert sink.sent == []

    def test_caption_and_filename(self):
        assert image_caption(2025, 11) == "Confirmed shift schedule for 2025/11"
        assert image_filename(2025, 1) == "2025-01-shift.png"


class TestPublishSheet:
    """Tests for publish_sheet."""

    def test_writes_entries(self, store, caplog):
        sink = RecordingSheet()
        with caplog.at_level(logging.WARNING, logger="shiftboard.delivery.publisher"):
            result = publish_sheet(store, sink, 2025, 5)
        year, month, entries = sink.writes[0]
        assert (year, month) == (2025, 5)
        assert entries == {
            ("Alice", "2025/05/03"): "11:00 - 12:00",
            ("Bob", "2025/05/12"): "15:00 - 15:30",
        }
        assert len(result.skipped) == 1
        assert "Zed" in caplog.text
