"""
Audit Models for the Finance Ledger

Every significant action on the ledger is logged for audit purposes.
This provides:
1. Traceability of what was added, loaded and saved
2. Debugging information when a ledger file is partly corrupt
3. Ability to reconstruct what happened during a session

Events are only ever appended; nothing edits or removes them.
"""

from datetime import datetime, timezone
from enum import Enum
from typing import Any, Optional
from uuid import UUID, uuid4

from pydantic import BaseModel, Field


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class AuditEventType(str, Enum):
    """
    Types of events we audit.

    Each user-facing ledger action has its own event type.
    """
    # Entry
    TRANSACTION_ADDED = "transaction_added"
    TRANSACTION_REJECTED = "transaction_rejected"

    # Persistence
    LEDGER_LOADED = "ledger_loaded"
    LINE_SKIPPED = "line_skipped"
    LOAD_FAILED = "load_failed"
    LEDGER_SAVED = "ledger_saved"
    SAVE_FAILED = "save_failed"
    SAMPLE_FILE_CREATED = "sample_file_created"

    # Reporting
    SUMMARY_GENERATED = "summary_generated"

    # System events
    SYSTEM_ERROR = "system_error"


class AuditSeverity(str, Enum):
    """Severity level for audit events."""
    DEBUG = "debug"
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"
    CRITICAL = "critical"


class AuditEvent(BaseModel):
    """
    A single audit event.

    One entry, load, save or summary produces one or more of these;
    a damaged file produces one per skipped line.
    """

    # Identity
    event_id: UUID = Field(
        default_factory=uuid4,
        description="Unique event identifier"
    )
    timestamp: datetime = Field(
        default_factory=_utcnow,
        description="When the event occurred (UTC)"
    )

    # Event classification
    event_type: AuditEventType = Field(
        ...,
        description="Type of event"
    )
    severity: AuditSeverity = Field(
        default=AuditSeverity.INFO,
        description="Event severity"
    )

    # Context - what is this about?
    entity_type: Optional[str] = Field(
        default=None,
        description="Type of entity (e.g., 'transaction', 'ledger_file', 'summary')"
    )

    # Correlation - for tracking related events
    correlation_id: Optional[UUID] = Field(
        default=None,
        description="ID to correlate related events (e.g., all events in one load)"
    )

    # Event details
    description: str = Field(
        ...,
        max_length=500,
        description="Human-readable description of what happened"
    )

    # Additional data (event-specific)
    details: dict[str, Any] = Field(
        default_factory=dict,
        description="Additional event-specific data"
    )

    # Error information (if applicable)
    error_message: Optional[str] = None

    # User action tracking
    is_user_action: bool = Field(
        default=False,
        description="Was this triggered by a user action?"
    )

    def to_log_dict(self) -> dict:
        """
        Convert to a dictionary suitable for structured logging.
        """
        return {
            "event_id": str(self.event_id),
            "timestamp": self.timestamp.isoformat(),
            "event_type": self.event_type.value,
            "severity": self.severity.value,
            "entity_type": self.entity_type,
            "correlation_id": str(self.correlation_id) if self.correlation_id else None,
            "description": self.description,
            "details": self.details,
            "error_message": self.error_message,
            "is_user_action": self.is_user_action,
        }


class AuditEventBuilder:
    """
    Factories for the events the ledger flows emit.

    Usage:
        event = AuditEventBuilder.ledger_loaded(path, loaded, skipped, correlation_id)
        event = AuditEventBuilder.ledger_saved(path, count, correlation_id)
    """

    @staticmethod
    def transaction_added(
        kind: str,
        category: str,
        amount: str,
        entry_date: str,
        correlation_id: UUID
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.TRANSACTION_ADDED,
            entity_type="transaction",
            correlation_id=correlation_id,
            description=f"Transaction added: {kind} {category} {amount}",
            details={
                "kind": kind,
                "category": category,
                "amount": amount,
                "date": entry_date,
            },
            is_user_action=True,
        )

    @staticmethod
    def transaction_rejected(
        issues: list[dict],
        correlation_id: UUID
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.TRANSACTION_REJECTED,
            severity=AuditSeverity.WARNING,
            entity_type="transaction",
            correlation_id=correlation_id,
            description=f"Transaction rejected with {len(issues)} issues",
            details={
                "issues": issues,
            },
            is_user_action=True,
        )

    @staticmethod
    def ledger_loaded(
        path: str,
        loaded_count: int,
        skipped_count: int,
        correlation_id: UUID
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.LEDGER_LOADED,
            severity=AuditSeverity.WARNING if skipped_count else AuditSeverity.INFO,
            entity_type="ledger_file",
            correlation_id=correlation_id,
            description=f"Ledger loaded from {path}",
            details={
                "path": path,
                "loaded_count": loaded_count,
                "skipped_count": skipped_count,
            },
            is_user_action=True,
        )

    @staticmethod
    def line_skipped(
        path: str,
        line_index: int,
        raw_line: str,
        reason: str,
        correlation_id: UUID
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.LINE_SKIPPED,
            severity=AuditSeverity.WARNING,
            entity_type="ledger_file",
            correlation_id=correlation_id,
            description=f"Skipping invalid entry at line {line_index + 1}",
            details={
                "path": path,
                "line_index": line_index,
                "raw_line": raw_line,
                "reason": reason,
            },
        )

    @staticmethod
    def load_failed(
        path: str,
        error_message: str,
        correlation_id: UUID
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.LOAD_FAILED,
            severity=AuditSeverity.ERROR,
            entity_type="ledger_file",
            correlation_id=correlation_id,
            description=f"Could not load ledger from {path}",
            error_message=error_message,
            details={
                "path": path,
            },
            is_user_action=True,
        )

    @staticmethod
    def ledger_saved(
        path: str,
        transaction_count: int,
        correlation_id: UUID
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.LEDGER_SAVED,
            entity_type="ledger_file",
            correlation_id=correlation_id,
            description=f"Ledger saved to {path}",
            details={
                "path": path,
                "transaction_count": transaction_count,
            },
            is_user_action=True,
        )

    @staticmethod
    def save_failed(
        path: str,
        error_message: str,
        correlation_id: UUID
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.SAVE_FAILED,
            severity=AuditSeverity.ERROR,
            entity_type="ledger_file",
            correlation_id=correlation_id,
            description=f"Could not save ledger to {path}",
            error_message=error_message,
            details={
                "path": path,
            },
            is_user_action=True,
        )

    @staticmethod
    def sample_file_created(
        path: str,
        correlation_id: Optional[UUID] = None
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.SAMPLE_FILE_CREATED,
            entity_type="ledger_file",
            correlation_id=correlation_id,
            description=f"Sample file created: {path}",
            details={
                "path": path,
            },
        )

    @staticmethod
    def summary_generated(
        view: str,
        description: str,
        transaction_count: int,
        correlation_id: UUID
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.SUMMARY_GENERATED,
            entity_type="summary",
            correlation_id=correlation_id,
            description=description,
            details={
                "view": view,
                "transaction_count": transaction_count,
            },
            is_user_action=True,
        )

    @staticmethod
    def system_error(
        error_type: str,
        error_message: str,
        details: Optional[dict] = None,
        correlation_id: Optional[UUID] = None
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.SYSTEM_ERROR,
            severity=AuditSeverity.ERROR,
            description=f"System error: {error_type}",
            error_message=error_message,
            details=details or {},
            correlation_id=correlation_id,
        )
