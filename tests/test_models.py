"""
Tests for the Finance Ledger models and line codec

Test strategy:
1. Unit tests for individual components (models, codec)
2. Flow tests with in-memory storage (see test_orchestrator.py)
3. File tests only under tmp_path
"""

import pytest
from datetime import date
from decimal import Decimal

from pydantic import ValidationError as PydanticValidationError

from src.codec import TextCodec
from src.models.transaction import (
    CategoryPolicy,
    FormatError,
    LedgerSummary,
    Transaction,
    TransactionKind,
    ValidationIssue,
    ValidationResult,
)


class TestTransactionModel:
    """Tests for the Transaction model."""

    def test_transaction_creation(self, salary):
        """Test Transaction model creation."""
        assert salary.kind == TransactionKind.INCOME
        assert salary.category == "Salary"
        assert salary.amount == Decimal("3000.0")
        assert salary.date == date(2024, 1, 5)

    def test_transaction_is_immutable(self, salary):
        """Test that fields cannot be reassigned."""
        with pytest.raises(PydanticValidationError):
            salary.amount = Decimal("1")

    def test_transaction_rejects_non_positive_amount(self):
        """Test that zero and negative amounts are rejected."""
        for amount in ("0", "-5"):
            with pytest.raises(ValueError):
                Transaction(
                    kind=TransactionKind.EXPENSE,
                    category="Food",
                    amount=Decimal(amount),
                    date=date(2024, 1, 1),
                )

    def test_transaction_rejects_comma_in_category(self):
        """Test that a category cannot break the line format."""
        with pytest.raises(ValueError, match="comma"):
            Transaction(
                kind=TransactionKind.EXPENSE,
                category="Food,Drinks",
                amount=Decimal("10"),
                date=date(2024, 1, 1),
            )

    def test_transaction_strips_whitespace(self):
        """Test that whitespace is stripped from the category."""
        transaction = Transaction(
            kind=TransactionKind.EXPENSE,
            category="  Rent  ",
            amount=Decimal("900"),
            date=date(2024, 1, 1),
        )
        assert transaction.category == "Rent"

    def test_signed_amount(self, salary, food):
        """Test that expenses count negatively."""
        assert salary.signed_amount == Decimal("3000.0")
        assert food.signed_amount == Decimal("-200.0")


class TestTransactionFormat:
    """Tests for format() and parse()."""

    def test_format(self, salary):
        """Test the canonical line."""
        assert salary.format() == "INCOME,Salary,3000.0,2024-01-05"

    def test_format_keeps_amount_text(self):
        """Test that the amount keeps its own textual form."""
        transaction = Transaction(
            kind=TransactionKind.EXPENSE,
            category="Travel",
            amount=Decimal("12.5"),
            date=date(2023, 12, 31),
        )
        assert transaction.format() == "EXPENSE,Travel,12.5,2023-12-31"

    def test_round_trip(self, salary, food):
        """Test that parse(format(t)) == t."""
        assert Transaction.parse(salary.format()) == salary
        assert Transaction.parse(food.format()) == food

    def test_parse_accepts_unlisted_category(self):
        """Test that loading is lenient about category lists."""
        transaction = Transaction.parse("EXPENSE,Gadgets,99.99,2024-05-01")
        assert transaction.category == "Gadgets"
        assert transaction.amount == Decimal("99.99")

    def test_parse_strips_line_ending(self):
        """Test that CRLF and LF endings are ignored."""
        transaction = Transaction.parse("INCOME,Salary,3000.0,2024-01-05\r\n")
        assert transaction.date == date(2024, 1, 5)

    @pytest.mark.parametrize(
        "line",
        [
            "INCOME,Salary,3000.0",
            "INCOME,Salary,3000.0,2024-01-05,extra",
            "income,Salary,3000.0,2024-01-05",
            "REFUND,Salary,3000.0,2024-01-05",
            "INCOME,Salary,abc,2024-01-05",
            "INCOME,Salary,NaN,2024-01-05",
            "INCOME,Salary,3000.0,2024-02-30",
            "INCOME,Salary,3000.0,20240105",
            "INCOME,Salary,3000.0,05/01/2024",
            "INCOME,,3000.0,2024-01-05",
            "EXPENSE,Food,-5,2024-01-10",
            "",
            "garbage",
        ],
    )
    def test_parse_rejects_malformed_line(self, line):
        """Test that every malformed line raises FormatError."""
        with pytest.raises(FormatError):
            Transaction.parse(line)

    def test_format_error_carries_reason(self):
        """Test that FormatError says why the line was rejected."""
        with pytest.raises(FormatError) as excinfo:
            Transaction.parse("INCOME,Salary,3000.0")
        assert excinfo.value.line == "INCOME,Salary,3000.0"
        assert "expected 4 fields" in excinfo.value.reason
        assert isinstance(excinfo.value, ValueError)

    @pytest.mark.parametrize(
        "line",
        [
            "INCOME,Salary,3000.0,2024-01-05,",
            "INCOME,Salary,3000.0,2024-01-05,,,",
        ],
    )
    def test_parse_ignores_trailing_separators(self, salary, line):
        """Test that empty fields after the date are dropped."""
        assert Transaction.parse(line) == salary

    def test_parse_accepts_long_category(self):
        """Test that category length is not capped on load."""
        name = "x" * 250
        transaction = Transaction.parse(f"EXPENSE,{name},1.0,2024-01-05")
        assert transaction.category == name
        assert Transaction.parse(transaction.format()) == transaction

    def test_parse_rejects_huge_amount(self):
        """Test that an amount too large to sum is malformed."""
        with pytest.raises(FormatError) as excinfo:
            Transaction.parse("INCOME,Salary,1E+1000000,2024-01-05")
        assert "out of range" in excinfo.value.reason

    def test_constructor_rejects_huge_amount(self):
        """Test the same bound on direct construction."""
        with pytest.raises(PydanticValidationError):
            Transaction(
                kind=TransactionKind.INCOME,
                category="Salary",
                amount=Decimal("1E+1000000"),
                date=date(2024, 1, 5),
            )

    def test_parse_rejects_undecodable_text(self):
        """Test a line carrying an undecodable byte."""
        with pytest.raises(FormatError) as excinfo:
            Transaction.parse("EXPENSE,F\udcffood,1.0,2024-01-06")
        assert "UTF-8" in excinfo.value.reason


class TestTextCodec:
    """Tests for the line codec."""

    def test_encode_all_preserves_order(self, salary, food):
        """Test encode_all output order."""
        codec = TextCodec()
        assert codec.encode_all([food, salary]) == [
            "EXPENSE,Food,200.0,2024-01-10",
            "INCOME,Salary,3000.0,2024-01-05",
        ]

    def test_decode_line_success(self, salary):
        """Test decode_line on a valid line."""
        result = TextCodec().decode_line("INCOME,Salary,3000.0,2024-01-05", line_index=3)
        assert result.ok is True
        assert result.transaction == salary
        assert result.line_index == 3
        assert result.error is None

    def test_decode_line_failure_does_not_raise(self):
        """Test decode_line on a malformed line."""
        result = TextCodec().decode_line("garbage")
        assert result.ok is False
        assert result.transaction is None
        assert "expected 4 fields" in result.error

    def test_decode_all_skips_garbage(self):
        """Test the mixed-file scenario."""
        report = TextCodec().decode_all([
            "INCOME,Salary,3000.0,2024-01-05",
            "garbage",
            "EXPENSE,Food,200.0,2024-01-10",
        ])
        assert len(report.transactions) == 2
        assert len(report.skipped) == 1
        assert report.skipped[0].line_index == 1
        assert report.skipped[0].raw_line == "garbage"
        assert [t.category for t in report.transactions] == ["Salary", "Food"]

    def test_decode_all_empty(self):
        """Test decoding no lines at all."""
        report = TextCodec().decode_all([])
        assert report.transactions == []
        assert report.skipped == []
        assert report.has_skipped is False

    def test_decode_all_covers_every_line(self):
        """Test that decoded + skipped partitions the input."""
        lines = [
            "",
            "EXPENSE,Rent,900,2024-02-01",
            "EXPENSE,Rent,900",
            ",,,",
            "INCOME,Business,150.75,2024-02-03",
            "   ",
        ]
        report = TextCodec().decode_all(lines)
        assert report.line_count == len(lines)
        skipped_indexes = {s.line_index for s in report.skipped}
        assert skipped_indexes == {0, 2, 3, 5}

    def test_decode_all_skips_undecodable_line(self):
        """Test that one damaged line doesn't stop the others."""
        report = TextCodec().decode_all([
            "INCOME,Salary,3000.0,2024-01-05",
            "EXPENSE,F\udcffood,1.0,2024-01-06",
            "EXPENSE,Food,200.0,2024-01-10",
        ])
        assert [t.category for t in report.transactions] == ["Salary", "Food"]
        assert [s.line_index for s in report.skipped] == [1]
        assert report.skipped[0].raw_line == "EXPENSE,F?ood,1.0,2024-01-06"

    def test_encode_then_decode_file(self, salary, food):
        """Test that a saved ledger loads back unchanged."""
        codec = TextCodec()
        report = codec.decode_all(codec.encode_all([salary, food]))
        assert report.transactions == [salary, food]
        assert report.skipped == []


class TestCategoryPolicy:
    """Tests for the per-kind category lists."""

    def test_default_categories(self):
        """Test the default lists."""
        policy = CategoryPolicy()
        assert policy.allowed_for(TransactionKind.INCOME) == (
            "Salary", "Business", "Investment", "Other",
        )
        assert policy.allowed_for(TransactionKind.EXPENSE) == (
            "Food", "Rent", "Travel", "Utilities", "Entertainment", "Other",
        )

    def test_canonical_is_case_insensitive(self):
        """Test canonical spelling lookup."""
        policy = CategoryPolicy()
        assert policy.canonical(TransactionKind.EXPENSE, "food") == "Food"
        assert policy.canonical(TransactionKind.INCOME, "food") is None

    def test_custom_categories(self):
        """Test that lists come from data, not constants."""
        policy = CategoryPolicy(income=("Gift",), expense=("Books", "Other"))
        assert policy.is_allowed(TransactionKind.INCOME, "gift")
        assert not policy.is_allowed(TransactionKind.EXPENSE, "Food")

    def test_empty_category_list_rejected(self):
        """Test that a kind needs at least one category."""
        with pytest.raises(ValueError):
            CategoryPolicy(income=())


class TestSummaryAndValidationModels:
    """Tests for LedgerSummary and ValidationResult."""

    def test_summary_defaults(self):
        """Test an empty summary."""
        summary = LedgerSummary()
        assert summary.balance == Decimal("0")
        assert summary.is_empty is True

    def test_summary_display_lines(self):
        """Test the plain-text totals."""
        summary = LedgerSummary(
            total_income=Decimal("3000.0"),
            total_expense=Decimal("200.0"),
            balance=Decimal("2800.0"),
            transaction_count=2,
        )
        assert summary.to_display_lines() == [
            "Total Income : $3,000.00",
            "Total Expense: $200.00",
            "Balance      : $2,800.00",
        ]

    def test_validation_result_warnings_only(self):
        """Test that warnings don't count as errors."""
        result = ValidationResult(
            is_valid=True,
            issues=[
                ValidationIssue(
                    field="date",
                    issue_type="future_date",
                    message="Date in future",
                    severity="warning",
                ),
            ],
        )
        assert result.has_errors is False
        assert result.error_count == 0
        assert result.warnings == ["Date in future"]


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
