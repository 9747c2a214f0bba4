"""Exception types raised by shiftboard."""


class ShiftboardError(Exception):
    """Base class for all shiftboard errors."""


class RenderLimitError(ShiftboardError, ValueError):
    """Raised when a table would exceed the configured row cap."""

    def __init__(self, rows: int, max_rows: int):
        super().__init__(
            f"Schedule table needs {rows} rows, more than the limit of {max_rows}"
        )
        self.rows = rows
        self.max_rows = max_rows


class NoShiftsFound(ShiftboardError):
    """Raised when no confirmed shifts exist for the requested month."""

    def __init__(self, year: int, month: int):
        super().__init__(f"No confirmed shifts found for {year}-{month:02d}")
        self.year = year
        self.month = month


class DeliveryError(ShiftboardError):
    """Raised when an outbound webhook or spreadsheet write fails."""


class ConfigurationError(ShiftboardError):
    """Raised when a required setting is missing."""
