"""
Interactive Entry Validation

DESIGN DECISION: Validation happens at the interactive boundary, not in
the ledger or codec.

- A Transaction only enforces what the file format needs
  (positive amount, non-empty category without commas).
- This module enforces the business rules for NEW entries:
  the category must belong to the configured list for the kind,
  menu choices must be in range, date ranges must not be inverted.

Loading a file never goes through here, so a ledger written with a
different category list still loads.

IMPORTANT: Validation NEVER silently fixes issues, with one exception
kept from the original tracker: an unparsable entry date falls back to
today and is reported as a warning.
"""

from datetime import date, timedelta
from decimal import Decimal, InvalidOperation
from typing import Optional, Union

from src.config import get_settings
from src.models.transaction import (
    ISO_DATE_PATTERN,
    CategoryPolicy,
    Transaction,
    TransactionKind,
    ValidationIssue,
    ValidationResult,
    amount_in_range,
)


AmountInput = Union[Decimal, int, float, str]

KIND_MENU = {
    "1": TransactionKind.INCOME,
    "2": TransactionKind.EXPENSE,
}


class ValidationError(Exception):
    """Semantic violation of an interactive entry."""

    def __init__(self, issues: list[ValidationIssue]):
        self.issues = issues
        super().__init__("; ".join(issue.message for issue in issues))

    @classmethod
    def single(
        cls,
        field: str,
        issue_type: str,
        message: str,
        suggested_fix: Optional[str] = None,
    ) -> "ValidationError":
        return cls([ValidationIssue(
            field=field,
            issue_type=issue_type,
            message=message,
            severity="error",
            suggested_fix=suggested_fix,
        )])


def parse_iso_date(raw: str, field: str = "date") -> date:
    """Parse a strict YYYY-MM-DD date or raise ValidationError."""
    text = raw.strip()
    if ISO_DATE_PATTERN.fullmatch(text):
        try:
            return date.fromisoformat(text)
        except ValueError:
            pass
    raise ValidationError.single(
        field=field,
        issue_type="invalid_format",
        message="Invalid date format.",
        suggested_fix="Use YYYY-MM-DD, e.g. 2024-01-31",
    )


class TransactionValidator:
    """
    Validates interactive input before it reaches the ledger.

    The category lists come from a CategoryPolicy, normally built from
    configuration, so the rules are testable without any UI.
    """

    def __init__(
        self,
        policy: Optional[CategoryPolicy] = None,
        future_date_tolerance_days: Optional[int] = None,
    ):
        """
        Initialize validator.

        Args:
            policy: Allowed categories per kind. Read from settings if None.
            future_date_tolerance_days: Warn about entries dated further in
                the future than this. 0 disables the check. Read from
                settings if None.
        """
        settings = get_settings()
        self._policy = policy or settings.categories.category_policy()
        if future_date_tolerance_days is None:
            future_date_tolerance_days = settings.ledger.future_date_tolerance_days
        self._future_tolerance = future_date_tolerance_days

    @property
    def policy(self) -> CategoryPolicy:
        return self._policy

    # -------------------------------------------------------------------------
    # Menu-style resolution
    # -------------------------------------------------------------------------

    def resolve_kind(self, choice: Union[str, int, TransactionKind]) -> TransactionKind:
        """Accept 1/2 menu choices, kind names or a TransactionKind."""
        if isinstance(choice, TransactionKind):
            return choice

        text = str(choice).strip()
        if text in KIND_MENU:
            return KIND_MENU[text]

        upper = text.upper()
        if upper in TransactionKind.__members__:
            return TransactionKind[upper]

        raise ValidationError.single(
            field="kind",
            issue_type="invalid_choice",
            message="Invalid type. Please enter 1 or 2.",
            suggested_fix="1 for INCOME, 2 for EXPENSE",
        )

    def resolve_category(self, kind: TransactionKind, choice: Union[str, int]) -> str:
        """Accept a 1-based menu index or a category name (any case)."""
        allowed = self._policy.allowed_for(kind)
        text = str(choice).strip()

        if text.isdecimal():
            index = int(text)
            if 1 <= index <= len(allowed):
                return allowed[index - 1]
        else:
            canonical = self._policy.canonical(kind, text)
            if canonical is not None:
                return canonical

        raise ValidationError.single(
            field="category",
            issue_type="invalid_choice",
            message="Invalid category choice.",
            suggested_fix=f"Choose one of: {', '.join(allowed)}",
        )

    def resolve_entry_date(
        self,
        raw: Optional[str],
        today: date,
    ) -> tuple[date, Optional[str]]:
        """
        Resolve the entry date.

        Empty input means today. Unparsable input also falls back to
        today, and the returned warning says so.
        """
        if raw is None or not raw.strip():
            return today, None
        try:
            return parse_iso_date(raw), None
        except ValidationError:
            return today, "Invalid date format. Using today."

    def validate_month(self, value: Union[str, int]) -> int:
        try:
            month = int(str(value).strip())
        except ValueError:
            month = 0
        if not 1 <= month <= 12:
            raise ValidationError.single(
                field="month",
                issue_type="out_of_range",
                message="Invalid month.",
                suggested_fix="Enter a month number from 1 to 12",
            )
        return month

    def validate_date_range(self, start: date, end: date) -> tuple[date, date]:
        if end < start:
            raise ValidationError.single(
                field="date_range",
                issue_type="inconsistent",
                message="End date cannot be before start date.",
            )
        return start, end

    # -------------------------------------------------------------------------
    # Entry validation
    # -------------------------------------------------------------------------

    def _parse_amount(self, amount: AmountInput) -> Optional[Decimal]:
        if isinstance(amount, Decimal):
            value = amount
        else:
            try:
                value = Decimal(str(amount).strip())
            except InvalidOperation:
                return None
        if not value.is_finite():
            return None
        return value

    def validate_entry(
        self,
        kind: TransactionKind,
        category: str,
        amount: AmountInput,
        entry_date: date,
        today: Optional[date] = None,
    ) -> ValidationResult:
        """
        Check a new entry against the business rules.

        Checks:
        - Amount is a number and strictly positive
        - Category belongs to the configured list for the kind
        - Date is not too far in the future (warning only)
        """
        issues = []

        value = self._parse_amount(amount)
        if value is None:
            issues.append(ValidationIssue(
                field="amount",
                issue_type="invalid_format",
                message="Invalid amount.",
                severity="error",
                suggested_fix="Enter a number such as 250 or 19.99",
            ))
        elif value <= 0:
            issues.append(ValidationIssue(
                field="amount",
                issue_type="invalid_value",
                message="Amount must be positive.",
                severity="error",
            ))
        elif not amount_in_range(value):
            issues.append(ValidationIssue(
                field="amount",
                issue_type="out_of_range",
                message="Amount is too large.",
                severity="error",
            ))

        if not self._policy.is_allowed(kind, category):
            allowed = self._policy.allowed_for(kind)
            issues.append(ValidationIssue(
                field="category",
                issue_type="not_allowed",
                message=f"Category '{category}' is not valid for {kind.label.lower()}.",
                severity="error",
                suggested_fix=f"Choose one of: {', '.join(allowed)}",
            ))

        if self._future_tolerance > 0:
            today = today or date.today()
            limit = today + timedelta(days=self._future_tolerance)
            if entry_date > limit:
                issues.append(ValidationIssue(
                    field="date",
                    issue_type="future_date",
                    message=f"Entry date ({entry_date}) is in the future",
                    severity="warning",
                    suggested_fix="Please verify the date is correct",
                ))

        return ValidationResult(
            is_valid=not any(issue.severity == "error" for issue in issues),
            issues=issues,
        )

    def build_transaction(
        self,
        kind: TransactionKind,
        category: str,
        amount: AmountInput,
        entry_date: date,
        today: Optional[date] = None,
    ) -> Transaction:
        """
        Validate and construct a Transaction.

        Raises:
            ValidationError: if any error-level issue was found
        """
        result = self.validate_entry(kind, category, amount, entry_date, today)
        if result.has_errors:
            raise ValidationError(
                [issue for issue in result.issues if issue.severity == "error"]
            )

        return Transaction(
            kind=kind,
            category=self._policy.canonical(kind, category),
            amount=self._parse_amount(amount),
            date=entry_date,
        )

    def get_user_friendly_summary(self, result: ValidationResult) -> str:
        """
        Generate a user-friendly summary of validation results.
        """
        if result.is_valid and not result.warnings:
            return "All checks passed."

        lines = []

        if result.has_errors:
            lines.append("Please fix the following:")
            for issue in result.issues:
                if issue.severity == "error":
                    lines.append(f"  - {issue.message}")
                    if issue.suggested_fix:
                        lines.append(f"    {issue.suggested_fix}")

        if result.warnings:
            if lines:
                lines.append("")
            lines.append("Please verify the following:")
            for warning in result.warnings:
                lines.append(f"  - {warning}")

        return "\n".join(lines)
