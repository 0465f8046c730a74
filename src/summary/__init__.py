"""Summary engine package."""

from src.summary.engine import (
    SummaryEngine,
    category_predicate,
    date_range_predicate,
    month_predicate,
)

__all__ = [
    "SummaryEngine",
    "category_predicate",
    "date_range_predicate",
    "month_predicate",
]
