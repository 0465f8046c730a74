"""
Summary Engine

DESIGN DECISION: Summaries are DETERMINISTIC aggregations over a snapshot
of the ledger. Each canned view is just a predicate handed to
Ledger.filter, followed by summarize().

Amounts are Decimal, so totals do not depend on summation order.

NOTE on by_month: the month filter deliberately ignores the year.
by_month(3) aggregates March 2023 together with March 2024. This is the
long-standing behavior of the tracker and part of its public contract;
use by_date_range for a single calendar month.
"""

import calendar
from datetime import date
from decimal import Decimal
from typing import Callable, Iterable, Optional

from src.ledger import Ledger
from src.models.transaction import LedgerSummary, Transaction, TransactionKind


Predicate = Callable[[Transaction], bool]


def month_predicate(month: int) -> Predicate:
    """Match entries in ``month`` (1-12) of any year."""
    return lambda t: t.date.month == month


def category_predicate(name: str) -> Predicate:
    """Match entries whose category equals ``name`` ignoring case."""
    wanted = name.strip().casefold()
    return lambda t: t.category.casefold() == wanted


def date_range_predicate(start: date, end: date) -> Predicate:
    """
    Match entries dated within [start, end], both ends inclusive.

    An inverted range (end before start) simply matches nothing.
    """
    return lambda t: start <= t.date <= end


class SummaryEngine:
    """
    Computes income/expense/balance totals over the ledger.

    GUARANTEES:
    - balance == total_income - total_expense, exactly
    - An empty selection yields zeros, never an error
    - The ledger is only read, never modified
    """

    def __init__(self, ledger: Ledger):
        self._ledger = ledger

    @staticmethod
    def summarize(
        transactions: Iterable[Transaction],
        description: str = "Summary",
    ) -> LedgerSummary:
        """Aggregate any sequence of transactions."""
        total_income = Decimal("0")
        total_expense = Decimal("0")
        count = 0

        for transaction in transactions:
            count += 1
            if transaction.kind == TransactionKind.INCOME:
                total_income += transaction.amount
            else:
                total_expense += transaction.amount

        return LedgerSummary(
            total_income=total_income,
            total_expense=total_expense,
            balance=total_income - total_expense,
            transaction_count=count,
            description=description,
        )

    def summarize_where(
        self,
        predicate: Predicate,
        description: str = "Summary",
    ) -> LedgerSummary:
        return self.summarize(self._ledger.filter(predicate), description)

    def overall(self) -> LedgerSummary:
        return self.summarize(self._ledger.all(), "Summary of all transactions")

    def by_month(self, month: int) -> LedgerSummary:
        """Totals for a month number across ALL years."""
        if 1 <= month <= 12:
            description = f"Summary for {calendar.month_name[month]}"
        else:
            description = f"Summary for month {month}"
        return self.summarize_where(month_predicate(month), description)

    def by_category(self, name: str) -> LedgerSummary:
        return self.summarize_where(
            category_predicate(name),
            f"Summary for category: {name}",
        )

    def by_date_range(self, start: date, end: date) -> LedgerSummary:
        return self.summarize_where(
            date_range_predicate(start, end),
            f"Summary from {start.isoformat()} to {end.isoformat()}",
        )

    def breakdown_by_category(
        self,
        transactions: Optional[Iterable[Transaction]] = None,
    ) -> dict[str, LedgerSummary]:
        """
        Per-category totals.

        Categories are grouped case-insensitively; the first spelling seen
        is used as the key. Keys keep first-seen order.
        """
        if transactions is None:
            transactions = self._ledger.all()

        groups: dict[str, list[Transaction]] = {}
        spelling: dict[str, str] = {}
        for transaction in transactions:
            folded = transaction.category.casefold()
            if folded not in spelling:
                spelling[folded] = transaction.category
                groups[folded] = []
            groups[folded].append(transaction)

        return {
            spelling[folded]: self.summarize(
                items, f"Summary for category: {spelling[folded]}"
            )
            for folded, items in groups.items()
        }

    def breakdown_by_year_month(
        self,
        transactions: Optional[Iterable[Transaction]] = None,
    ) -> dict[str, LedgerSummary]:
        """Per calendar month totals keyed "YYYY-MM", sorted by key."""
        if transactions is None:
            transactions = self._ledger.all()

        groups: dict[str, list[Transaction]] = {}
        for transaction in transactions:
            key = f"{transaction.date.year:04d}-{transaction.date.month:02d}"
            groups.setdefault(key, []).append(transaction)

        return {
            key: self.summarize(groups[key], f"Summary for {key}")
            for key in sorted(groups)
        }
