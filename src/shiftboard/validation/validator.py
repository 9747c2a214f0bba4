"""Validation of shift records before they are rendered or exported.

Renderers never reject malformed records; they fall back to blanks. This
module reports what those fallbacks would hide, so callers can log or show
the problems without blocking an export.
"""

import re
from dataclasses import dataclass, field
from datetime import date
from enum import Enum
from typing import Iterable, Optional

from shiftboard.domain.models import ShiftRecord, month_prefix
from shiftboard.domain.slots import RENDER_GRID, SlotGrid

DATE_PATTERN = re.compile(r"^\d{4}-\d{2}-\d{2}$")


class ValidationErrorType(Enum):
    """Types of validation errors."""

    INVALID_DATE = "invalid_date"
    DATE_OUTSIDE_MONTH = "date_outside_month"
    MISSING_USER = "missing_user"
    UNKNOWN_SLOT = "unknown_slot"


@dataclass
class ValidationError:
    """A single validation error."""

    error_type: ValidationErrorType
    message: str
    record_id: Optional[str] = None
    date: Optional[str] = None
    details: dict = field(default_factory=dict)

    def __str__(self) -> str:
        parts = [f"[{self.error_type.value}]"]
        if self.record_id:
            parts.append(f"Record {self.record_id}:")
        parts.append(self.message)
        if self.date:
            parts.append(f"({self.date})")
        return " ".join(parts)


@dataclass
class ValidationResult:
    """Result of validating a list of records."""

    is_valid: bool
    errors: list[ValidationError] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)

    def add_error(self, error: ValidationError) -> None:
        """Add an error and mark as invalid."""
        self.errors.append(error)
        self.is_valid = False

    def add_warning(self, warning: str) -> None:
        """Add a warning (doesn't affect validity)."""
        self.warnings.append(warning)


class RecordValidator:
    """Checks shift records against the slot grid and target month.

    Example:
        >>> validator = RecordValidator()
        >>> result = validator.validate(records, year=2025, month=5)
        >>> for error in result.errors:
        ...     print(error)
    """

    def __init__(self, grid: Optional[SlotGrid] = None):
        self.grid = grid or RENDER_GRID

    def validate(
        self,
        records: Iterable[ShiftRecord],
        year: Optional[int] = None,
        month: Optional[int] = None,
    ) -> ValidationResult:
        """Validate records.

        Args:
            records: Records to check.
            year: If given with ``month``, dates outside that month are errors.
            month: Month the records should belong to.

        Returns:
            ValidationResult with errors and warnings.
        """
        result = ValidationResult(is_valid=True)
        prefix = month_prefix(year, month) + "-" if year and month else None

        for record in records:
            self._validate_date(record, prefix, result)
            self._validate_user(record, result)
            self._validate_slots(record, result)

        return result

    def _validate_date(self, record: ShiftRecord, prefix: Optional[str], result: ValidationResult) -> None:
        if not DATE_PATTERN.match(record.date) or not _is_real_date(record.date):
            result.add_error(ValidationError(
                error_type=ValidationErrorType.INVALID_DATE,
                message=f"Date {record.date!r} is not a valid YYYY-MM-DD date",
                record_id=record.id,
            ))
            return

        if prefix and not record.date.startswith(prefix):
            result.add_error(ValidationError(
                error_type=ValidationErrorType.DATE_OUTSIDE_MONTH,
                message=f"Date is outside {prefix[:-1]}",
                record_id=record.id,
                date=record.date,
            ))

    def _validate_user(self, record: ShiftRecord, result: ValidationResult) -> None:
        if not record.user and not record.display_name:
            result.add_error(ValidationError(
                error_type=ValidationErrorType.MISSING_USER,
                message="Record has neither a user nor a display name",
                record_id=record.id,
                date=record.date,
            ))

    def _validate_slots(self, record: ShiftRecord, result: ValidationResult) -> None:
        unknown = [label for label in record.slots if label not in self.grid]
        if unknown:
            result.add_error(ValidationError(
                error_type=ValidationErrorType.UNKNOWN_SLOT,
                message=f"Slots outside the {self.grid.labels[0]}-{self.grid.labels[-1]} grid: "
                        f"{', '.join(unknown)}",
                record_id=record.id,
                date=record.date,
                details={"slots": unknown},
            ))

        if not record.times:
            result.add_warning(f"{record.label or '?'} on {record.date} has no slots")
        elif len(record.slots) != len(record.times):
            result.add_warning(f"{record.label or '?'} on {record.date} has duplicate slots")


def _is_real_date(value: str) -> bool:
    try:
        date.fromisoformat(value)
    except ValueError:
        return False
    return True
