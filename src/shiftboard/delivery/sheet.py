"""Spreadsheet sink for confirmed shifts.

The monthly worksheet (titled ``YYYYMM``) has a fixed shape:
- Staff names in ``B3:B10``
- Dates in row 1, every second column from ``C`` (merged pairs of cells)
- One cell per name and date holding that person's time ranges
"""

import logging
import re
from dataclasses import dataclass, field
from typing import Any, Iterable

import requests
from gspread.exceptions import GSpreadException
from gspread.utils import rowcol_to_a1

from shiftboard.domain.models import ShiftRecord
from shiftboard.domain.slots import format_time_ranges
from shiftboard.errors import DeliveryError

logger = logging.getLogger(__name__)

NAME_ROWS = range(3, 11)  # B3:B10
NAME_COLUMN = 2  # B
FIRST_DATE_COLUMN = 3  # C
LAST_DATE_COLUMN = 39  # AM
HEADER_RANGE = "A1:AM10"

SheetEntries = dict[tuple[str, str], str]


def build_sheet_entries(records: Iterable[ShiftRecord]) -> SheetEntries:
    """Map ``(display label, "YYYY/MM/DD")`` to the cell text for each record.

    Example:
        >>> build_sheet_entries([ShiftRecord("2025-05-10", "a@x.com", "Alice", ("13:00", "13:30"))])
        {('Alice', '2025/05/10'): '13:00 - 14:00'}
    """
    return {
        (record.label, record.date.replace("-", "/")): format_time_ranges(record.slots)
        for record in records
    }


def normalize_sheet_date(value: Any, year: int, month: int) -> str:
    """Normalise a header date to ``YYYY/MM/DD``.

    Handles ``MM/DD`` (year taken from the sheet's month) and unpadded
    ``YYYY/M/D``; anything else is returned stripped.
    """
    text = str(value or "").strip()
    if re.fullmatch(r"\d{2}/\d{2}", text):
        return f"{year}/{month:02d}/{text[-2:]}"
    match = re.fullmatch(r"(\d{4})/(\d{1,2})/(\d{1,2})", text)
    if match:
        y, m, d = match.groups()
        return f"{y}/{int(m):02d}/{int(d):02d}"
    return text


def clear_ranges() -> list[str]:
    """Per-date value ranges emptied before each write (``C3:C10`` ...)."""
    first, last = NAME_ROWS[0], NAME_ROWS[-1]
    return [
        f"{rowcol_to_a1(first, col)}:{rowcol_to_a1(last, col)}"
        for col in range(FIRST_DATE_COLUMN, LAST_DATE_COLUMN + 1, 2)
    ]


@dataclass
class SheetWriteResult:
    """Cells written, and entries that matched no name or date."""

    written: list[dict[str, str]] = field(default_factory=list)
    skipped: list[dict[str, str]] = field(default_factory=list)


class SheetSink:
    """Writes confirmed shifts into the month's worksheet.

    Example:
        >>> client = gspread.service_account_from_dict(settings.google_credentials())
        >>> sink = SheetSink(client.open_by_key(settings.spreadsheet_id))
        >>> sink.write(2025, 5, build_sheet_entries(batch.records))
    """

    def __init__(self, spreadsheet):
        self.spreadsheet = spreadsheet

    @staticmethod
    def worksheet_title(year: int, month: int) -> str:
        return f"{year}{month:02d}"

    def write(self, year: int, month: int, entries: SheetEntries) -> SheetWriteResult:
        """Clear the month's value cells and write the entries.

        Raises:
            DeliveryError: If the Sheets API call fails or the request
                does not reach it.
        """
        title = self.worksheet_title(year, month)
        try:
            worksheet = self.spreadsheet.worksheet(title)
            values = worksheet.get(HEADER_RANGE)
        except (GSpreadException, requests.RequestException) as exc:
            raise DeliveryError(f"Could not read worksheet {title}: {exc}") from exc

        name_rows = self._name_rows(values)
        date_columns = self._date_columns(values, year, month)

        result = SheetWriteResult()
        updates = []
        for (name, day), text in entries.items():
            row = name_rows.get(name.strip())
            col = date_columns.get(day.strip())
            if row is None or col is None:
                result.skipped.append({"name": name, "date": day, "value": text})
                continue
            cell = rowcol_to_a1(row, col)
            updates.append({"range": cell, "values": [[text]]})
            result.written.append({"name": name, "date": day, "value": text, "cell": cell})

        try:
            worksheet.batch_clear(clear_ranges())
            if updates:
                worksheet.batch_update(updates, value_input_option="USER_ENTERED")
        except (GSpreadException, requests.RequestException) as exc:
            raise DeliveryError(f"Could not write worksheet {title}: {exc}") from exc

        logger.info(
            "Wrote %d cells to %s, skipped %d entries",
            len(result.written), title, len(result.skipped),
        )
        return result

    @staticmethod
    def _name_rows(values: list[list[Any]]) -> dict[str, int]:
        rows = {}
        for row in NAME_ROWS:
            cells = values[row - 1] if len(values) >= row else []
            name = str(cells[NAME_COLUMN - 1]).strip() if len(cells) >= NAME_COLUMN else ""
            if name:
                rows[name] = row
        return rows

    @staticmethod
    def _date_columns(values: list[list[Any]], year: int, month: int) -> dict[str, int]:
        header = values[0] if values else []
        columns = {}
        for col in range(FIRST_DATE_COLUMN, len(header) + 1, 2):
            day = normalize_sheet_date(header[col - 1], year, month)
            if day:
                columns[day] = col
        return columns
