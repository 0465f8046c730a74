"""
Data Models Package

This package contains all Pydantic models used in the Finance Ledger.
All data flowing through the system must conform to these schemas.
"""

from src.models.transaction import (
    CategoryPolicy,
    DecodeReport,
    FormatError,
    LedgerSummary,
    LineDecodeResult,
    SkippedLine,
    Transaction,
    TransactionKind,
    ValidationIssue,
    ValidationResult,
)
from src.models.audit import (
    AuditEvent,
    AuditEventBuilder,
    AuditEventType,
    AuditSeverity,
)

__all__ = [
    # Ledger models
    "CategoryPolicy",
    "DecodeReport",
    "FormatError",
    "LedgerSummary",
    "LineDecodeResult",
    "SkippedLine",
    "Transaction",
    "TransactionKind",
    "ValidationIssue",
    "ValidationResult",
    # Audit models
    "AuditEvent",
    "AuditEventBuilder",
    "AuditEventType",
    "AuditSeverity",
]
