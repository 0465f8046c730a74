"""Shared fixtures for the Finance Ledger tests."""

from datetime import date
from decimal import Decimal

import pytest

from src.config import get_settings
from src.models.transaction import Transaction, TransactionKind


LEDGER_ENV_VARS = (
    "LEDGER_DEFAULT_FILENAME",
    "LEDGER_FILE_EXTENSION",
    "LEDGER_CREATE_SAMPLE_FILE",
    "LEDGER_CURRENCY_SYMBOL",
    "LEDGER_FUTURE_DATE_TOLERANCE_DAYS",
    "CATEGORIES_INCOME",
    "CATEGORIES_EXPENSE",
    "LOG_LEVEL",
)


@pytest.fixture(autouse=True)
def isolated_settings(tmp_path, monkeypatch):
    """Point the data directory at tmp_path and drop any ledger env overrides."""
    monkeypatch.setenv("LEDGER_DATA_DIR", str(tmp_path))
    for name in LEDGER_ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture
def salary() -> Transaction:
    return Transaction(
        kind=TransactionKind.INCOME,
        category="Salary",
        amount=Decimal("3000.0"),
        date=date(2024, 1, 5),
    )


@pytest.fixture
def food() -> Transaction:
    return Transaction(
        kind=TransactionKind.EXPENSE,
        category="Food",
        amount=Decimal("200.0"),
        date=date(2024, 1, 10),
    )
