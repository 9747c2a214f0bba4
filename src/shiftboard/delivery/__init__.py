"""Delivery of confirmed schedules to external services."""

from shiftboard.delivery.publisher import (
    load_confirmed_batch,
    publish_image,
    publish_sheet,
)
from shiftboard.delivery.sheet import SheetSink, SheetWriteResult, build_sheet_entries
from shiftboard.delivery.webhook import WebhookSink

__all__ = [
    "SheetSink",
    "SheetWriteResult",
    "WebhookSink",
    "build_sheet_entries",
    "load_confirmed_batch",
    "publish_image",
    "publish_sheet",
]
