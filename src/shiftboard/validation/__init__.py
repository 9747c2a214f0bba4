"""Validation for shift records."""

from shiftboard.validation.validator import RecordValidator, ValidationResult

__all__ = [
    "RecordValidator",
    "ValidationResult",
]
