"""Entry validation package."""

from src.validation.validator import (
    TransactionValidator,
    ValidationError,
    parse_iso_date,
)

__all__ = ["TransactionValidator", "ValidationError", "parse_iso_date"]
