"""
Core Data Models for the Finance Ledger

These models define the strict schemas for all data flowing through the system.
They are designed to:
1. Enforce the structural invariants of a ledger entry at construction
2. Provide clear error messages for malformed persisted lines
3. Be serializable to the one-line text format and to logs

DESIGN DECISION: A Transaction validates what the file format itself needs
(positive finite amount, non-empty category without commas or line breaks)
but NOT category membership. Category lists are configuration, enforced at
the interactive boundary only, so a ledger file written with a different
category list still loads.
"""

import datetime as dt
import re
from decimal import DefaultContext, Decimal, InvalidOperation
from enum import Enum
from typing import Optional

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    ValidationError as PydanticValidationError,
    field_validator,
)


FIELD_SEPARATOR = ","
FIELD_COUNT = 4

ISO_DATE_PATTERN = re.compile(r"[0-9]{4}-[0-9]{2}-[0-9]{2}")

# Totals of any realistic number of entries stay inside the default decimal
# context, so summing never overflows.
MAX_AMOUNT_EXPONENT = DefaultContext.Emax // 2

DEFAULT_INCOME_CATEGORIES = ("Salary", "Business", "Investment", "Other")
DEFAULT_EXPENSE_CATEGORIES = (
    "Food",
    "Rent",
    "Travel",
    "Utilities",
    "Entertainment",
    "Other",
)


# =============================================================================
# ENUMS - Finite set of valid values
# =============================================================================

class TransactionKind(str, Enum):
    """
    Kind of a ledger entry.

    The persisted form is the member NAME (INCOME/EXPENSE), matched exactly
    and case-sensitively when a line is parsed.
    """
    INCOME = "income"
    EXPENSE = "expense"

    @property
    def label(self) -> str:
        return self.value.title()


def amount_in_range(amount: Decimal) -> bool:
    """Whether ``amount`` is small enough to be summed safely."""
    return amount.is_finite() and amount.adjusted() <= MAX_AMOUNT_EXPONENT


# =============================================================================
# ERRORS
# =============================================================================

class FormatError(ValueError):
    """A persisted ledger line could not be turned into a Transaction."""

    def __init__(self, line: str, reason: str):
        self.line = line
        self.reason = reason
        super().__init__(f"Invalid transaction entry: {line!r} ({reason})")


# =============================================================================
# CORE TRANSACTION MODEL
# =============================================================================

class Transaction(BaseModel):
    """
    A single income or expense entry.

    Immutable once constructed; the ledger only ever appends new entries or
    replaces its whole collection.
    """
    model_config = ConfigDict(frozen=True, str_strip_whitespace=True)

    kind: TransactionKind = Field(
        ...,
        description="Income or expense"
    )
    category: str = Field(
        ...,
        min_length=1,
        description="Category name (free text on load, fixed list on entry)"
    )
    amount: Decimal = Field(
        ...,
        gt=0,
        description="Positive amount, no currency"
    )
    date: dt.date = Field(
        ...,
        description="Calendar date of the entry"
    )

    @field_validator("category")
    @classmethod
    def validate_category_text(cls, v: str) -> str:
        """The line format has no escaping, so separators cannot appear."""
        if FIELD_SEPARATOR in v:
            raise ValueError("Category cannot contain a comma")
        if "\n" in v or "\r" in v:
            raise ValueError("Category cannot contain a line break")
        return v

    @field_validator("amount")
    @classmethod
    def validate_amount_range(cls, v: Decimal) -> Decimal:
        if not amount_in_range(v):
            raise ValueError("Amount is out of range")
        return v

    @property
    def signed_amount(self) -> Decimal:
        """Contribution of this entry to the balance."""
        if self.kind == TransactionKind.EXPENSE:
            return -self.amount
        return self.amount

    def format(self) -> str:
        """
        Canonical one-line representation.

        KIND,category,amount,YYYY-MM-DD - the amount keeps its own textual
        form (3000.0 stays 3000.0), there is no fixed precision.
        """
        return FIELD_SEPARATOR.join([
            self.kind.name,
            self.category,
            str(self.amount),
            self.date.isoformat(),
        ])

    @classmethod
    def parse(cls, line: str) -> "Transaction":
        """
        Parse one persisted line.

        Raises:
            FormatError: wrong field count, unknown kind literal, unparsable
                amount or date, or a record violating the model invariants
        """
        text = line.rstrip("\r\n")
        try:
            text.encode("utf-8")
        except UnicodeEncodeError:
            raise FormatError(line, "line is not valid UTF-8 text")

        fields = text.split(FIELD_SEPARATOR)
        # Trailing separators add empty fields that are not part of the record.
        while len(fields) > FIELD_COUNT and not fields[-1]:
            fields.pop()
        if len(fields) != FIELD_COUNT:
            raise FormatError(
                line, f"expected {FIELD_COUNT} fields, found {len(fields)}"
            )

        kind_raw, category, amount_raw, date_raw = fields

        if kind_raw not in TransactionKind.__members__:
            raise FormatError(line, f"unknown transaction kind {kind_raw!r}")

        try:
            amount = Decimal(amount_raw)
        except InvalidOperation:
            raise FormatError(line, f"amount {amount_raw!r} is not a number")
        if not amount.is_finite():
            raise FormatError(line, f"amount {amount_raw!r} is not finite")
        if not amount_in_range(amount):
            raise FormatError(line, f"amount {amount_raw!r} is out of range")

        if not ISO_DATE_PATTERN.fullmatch(date_raw):
            raise FormatError(line, f"date {date_raw!r} is not YYYY-MM-DD")
        try:
            entry_date = dt.date.fromisoformat(date_raw)
        except ValueError:
            raise FormatError(line, f"date {date_raw!r} is not a calendar date")

        try:
            return cls(
                kind=TransactionKind[kind_raw],
                category=category,
                amount=amount,
                date=entry_date,
            )
        except PydanticValidationError as e:
            messages = "; ".join(err["msg"] for err in e.errors())
            raise FormatError(line, messages) from e


# =============================================================================
# CATEGORY POLICY
# =============================================================================

class CategoryPolicy(BaseModel):
    """
    Allowed categories per transaction kind.

    Built from configuration so the validator is data-driven and testable
    without any UI text. Order is preserved for numbered menus.
    """
    model_config = ConfigDict(frozen=True)

    income: tuple[str, ...] = DEFAULT_INCOME_CATEGORIES
    expense: tuple[str, ...] = DEFAULT_EXPENSE_CATEGORIES

    @field_validator("income", "expense")
    @classmethod
    def validate_non_empty(cls, v: tuple[str, ...]) -> tuple[str, ...]:
        cleaned = tuple(name.strip() for name in v if name.strip())
        if not cleaned:
            raise ValueError("At least one category is required")
        for name in cleaned:
            if FIELD_SEPARATOR in name:
                raise ValueError(f"Category {name!r} cannot contain a comma")
        return cleaned

    def allowed_for(self, kind: TransactionKind) -> tuple[str, ...]:
        if kind == TransactionKind.INCOME:
            return self.income
        return self.expense

    def canonical(self, kind: TransactionKind, name: str) -> Optional[str]:
        """Return the configured spelling of ``name`` or None if not allowed."""
        wanted = name.strip().casefold()
        for allowed in self.allowed_for(kind):
            if allowed.casefold() == wanted:
                return allowed
        return None

    def is_allowed(self, kind: TransactionKind, name: str) -> bool:
        return self.canonical(kind, name) is not None


# =============================================================================
# SUMMARY MODEL
# =============================================================================

class LedgerSummary(BaseModel):
    """
    Aggregated totals over a filtered subset of the ledger.

    Amounts are Decimal, so totals are exact regardless of summation order.
    Rounding to two places happens only for display.
    """
    model_config = ConfigDict(frozen=True)

    total_income: Decimal = Field(default=Decimal("0"))
    total_expense: Decimal = Field(default=Decimal("0"))
    balance: Decimal = Field(default=Decimal("0"))
    transaction_count: int = Field(default=0, ge=0)
    description: str = Field(
        default="Summary",
        description="Human-readable description of what was summarized"
    )

    @property
    def is_empty(self) -> bool:
        return self.transaction_count == 0

    def to_display_lines(self, currency_symbol: str = "$") -> list[str]:
        return [
            f"Total Income : {currency_symbol}{self.total_income:,.2f}",
            f"Total Expense: {currency_symbol}{self.total_expense:,.2f}",
            f"Balance      : {currency_symbol}{self.balance:,.2f}",
        ]


# =============================================================================
# DECODING MODELS
# =============================================================================

class LineDecodeResult(BaseModel):
    """Outcome of decoding one line: exactly one of transaction/error is set."""

    line_index: int = Field(ge=0)
    raw_line: str
    transaction: Optional[Transaction] = None
    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.transaction is not None


class SkippedLine(BaseModel):
    """A line that was not loaded, with the reason."""

    line_index: int = Field(ge=0)
    raw_line: str
    reason: str


class DecodeReport(BaseModel):
    """
    Result of a best-effort bulk decode.

    Every input line appears exactly once, either as a decoded transaction
    (original order kept) or as a skipped line.
    """

    transactions: list[Transaction] = Field(default_factory=list)
    skipped: list[SkippedLine] = Field(default_factory=list)

    @property
    def line_count(self) -> int:
        return len(self.transactions) + len(self.skipped)

    @property
    def has_skipped(self) -> bool:
        return len(self.skipped) > 0


# =============================================================================
# VALIDATION MODELS
# =============================================================================

class ValidationIssue(BaseModel):
    """A single validation issue found."""

    field: str = Field(
        ...,
        description="Field with the issue"
    )
    issue_type: str = Field(
        ...,
        description="Type of issue (e.g., 'invalid_value', 'not_allowed', 'future_date')"
    )
    message: str = Field(
        ...,
        description="Human-readable description of the issue"
    )
    severity: str = Field(
        ...,
        pattern="^(error|warning|info)$",
        description="Issue severity"
    )
    suggested_fix: Optional[str] = Field(
        default=None,
        description="Suggested fix if available"
    )


class ValidationResult(BaseModel):
    """Result of validating one interactive entry."""

    is_valid: bool = Field(
        ...,
        description="True when no error-level issue was found"
    )
    issues: list[ValidationIssue] = Field(
        default_factory=list,
        description="All validation issues found"
    )

    @property
    def has_errors(self) -> bool:
        """Check if there are any error-level issues."""
        return any(issue.severity == "error" for issue in self.issues)

    @property
    def error_count(self) -> int:
        """Count error-level issues."""
        return sum(1 for issue in self.issues if issue.severity == "error")

    @property
    def warnings(self) -> list[str]:
        return [issue.message for issue in self.issues if issue.severity == "warning"]
