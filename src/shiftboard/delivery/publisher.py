"""Publishing confirmed monthly schedules to the delivery sinks."""

import logging
from typing import Optional

from shiftboard.config import RenderConfig
from shiftboard.delivery.sheet import SheetSink, SheetWriteResult, build_sheet_entries
from shiftboard.delivery.webhook import WebhookSink
from shiftboard.domain.models import MonthlyShiftBatch, ShiftCollection
from shiftboard.errors import NoShiftsFound
from shiftboard.output.image_generator import ImageGenerator
from shiftboard.store.base import ShiftStore
from shiftboard.validation.validator import RecordValidator

logger = logging.getLogger(__name__)


def load_confirmed_batch(store: ShiftStore, year: int, month: int) -> MonthlyShiftBatch:
    """Read the confirmed shifts of a month into a sorted batch.

    Validation problems are logged; they never stop publishing.

    Raises:
        ValueError: If ``month`` is not 1-12.
        NoShiftsFound: If the month has no confirmed shifts.
    """
    if not 1 <= month <= 12:
        raise ValueError(f"Invalid month: {month}")

    records = store.query_month(ShiftCollection.FINAL, year, month)
    batch = MonthlyShiftBatch.build(records, year, month)
    if batch.is_empty:
        raise NoShiftsFound(year, month)

    result = RecordValidator().validate(batch.records, year, month)
    for error in result.errors:
        logger.warning("Invalid shift record: %s", error)
    for warning in result.warnings:
        logger.info("Shift record warning: %s", warning)
    return batch


def image_caption(year: int, month: int) -> str:
    return f"Confirmed shift schedule for {year}/{month}"


def image_filename(year: int, month: int) -> str:
    return f"{year}-{month:02d}-shift.png"


def publish_image(
    store: ShiftStore,
    sink: WebhookSink,
    year: int,
    month: int,
    config: Optional[RenderConfig] = None,
) -> MonthlyShiftBatch:
    """Render the month's confirmed shifts and post the image.

    Returns:
        The batch that was rendered.
    """
    batch = load_confirmed_batch(store, year, month)
    png = ImageGenerator(config).render(batch)
    logger.info("Rendered %d shifts for %d-%02d (%d bytes)", len(batch), year, month, len(png))
    sink.send(png, image_caption(year, month), image_filename(year, month))
    return batch


def publish_sheet(store: ShiftStore, sink: SheetSink, year: int, month: int) -> SheetWriteResult:
    """Write the month's confirmed shifts into the spreadsheet."""
    batch = load_confirmed_batch(store, year, month)
    result = sink.write(year, month, build_sheet_entries(batch.records))
    for entry in result.skipped:
        logger.warning("No sheet cell for %s on %s", entry["name"], entry["date"])
    return result
