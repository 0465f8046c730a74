"""Tests for audit models and the audit logger."""

import pytest
from uuid import uuid4

from src.audit import AuditLogger, create_correlation_id
from src.codec import TextCodec
from src.models.audit import (
    AuditEvent,
    AuditEventBuilder,
    AuditEventType,
    AuditSeverity,
)
from src.services.storage import AuditStorageInterface, InMemoryAuditStorage


class FailingAuditStorage(AuditStorageInterface):
    def append_event(self, event):
        raise RuntimeError("disk full")

    def get_events_by_correlation_id(self, correlation_id):
        return []

    def get_recent_events(self, limit=100):
        return []


class TestAuditModels:
    """Tests for audit-related models."""

    def test_audit_event_creation(self):
        """Test AuditEvent model creation."""
        event = AuditEvent(
            event_type=AuditEventType.LEDGER_SAVED,
            description="Ledger saved",
        )
        assert event.event_type == AuditEventType.LEDGER_SAVED
        assert event.severity == AuditSeverity.INFO
        assert event.timestamp.tzinfo is not None

    def test_audit_event_to_log_dict(self):
        """Test conversion to log dictionary."""
        event = AuditEvent(
            event_type=AuditEventType.TRANSACTION_ADDED,
            description="Transaction added",
            details={"category": "Food", "amount": "200.0"},
        )
        log_dict = event.to_log_dict()
        assert "event_id" in log_dict
        assert log_dict["event_type"] == "transaction_added"
        assert log_dict["details"]["category"] == "Food"

    def test_builder_line_skipped(self):
        """Test AuditEventBuilder.line_skipped."""
        correlation_id = uuid4()
        event = AuditEventBuilder.line_skipped(
            path="/tmp/ledger.txt",
            line_index=1,
            raw_line="garbage",
            reason="expected 4 fields, found 1",
            correlation_id=correlation_id,
        )
        assert event.event_type == AuditEventType.LINE_SKIPPED
        assert event.severity == AuditSeverity.WARNING
        assert event.description == "Skipping invalid entry at line 2"
        assert event.correlation_id == correlation_id

    def test_builder_ledger_loaded_severity(self):
        """Test that a load with skipped lines is a warning."""
        clean = AuditEventBuilder.ledger_loaded("f.txt", 2, 0, uuid4())
        damaged = AuditEventBuilder.ledger_loaded("f.txt", 2, 1, uuid4())
        assert clean.severity == AuditSeverity.INFO
        assert damaged.severity == AuditSeverity.WARNING
        assert damaged.is_user_action is True


class TestAuditLogger:
    """Tests for AuditLogger."""

    def test_log_without_storage(self):
        """Test local-only logging."""
        logger = AuditLogger()
        event = AuditEventBuilder.sample_file_created(path="sample.txt")
        assert logger.log(event) is True

    def test_log_persists_to_storage(self):
        """Test that events reach the storage backend."""
        storage = InMemoryAuditStorage()
        logger = AuditLogger(storage)
        logger.log_error("test", "boom")
        assert len(storage) == 1
        assert storage.get_recent_events()[0].event_type == AuditEventType.SYSTEM_ERROR

    def test_first_event_reaches_empty_storage(self):
        """Test that an empty store still receives events."""
        storage = InMemoryAuditStorage()
        logger = AuditLogger(storage)
        event = AuditEventBuilder.sample_file_created(path="sample.txt")
        assert logger.log(event) is True
        assert storage.get_recent_events() == [event]

    def test_storage_failure_does_not_raise(self):
        """Test that a broken audit store never breaks the caller."""
        logger = AuditLogger(FailingAuditStorage())
        event = AuditEventBuilder.sample_file_created(path="sample.txt")
        assert logger.log(event) is False

    def test_log_ledger_loaded_reports_each_skipped_line(self):
        """Test one LINE_SKIPPED event per skipped line, then LEDGER_LOADED."""
        storage = InMemoryAuditStorage()
        logger = AuditLogger(storage)
        report = TextCodec().decode_all([
            "INCOME,Salary,3000.0,2024-01-05",
            "garbage",
            "also garbage",
        ])
        correlation_id = create_correlation_id()
        logger.log_ledger_loaded("ledger.txt", report, correlation_id)

        events = storage.get_events_by_correlation_id(correlation_id)
        assert [e.event_type for e in events] == [
            AuditEventType.LINE_SKIPPED,
            AuditEventType.LINE_SKIPPED,
            AuditEventType.LEDGER_LOADED,
        ]
        assert events[-1].details["loaded_count"] == 1
        assert events[-1].details["skipped_count"] == 2

    def test_recent_events_newest_first(self):
        """Test ordering and limit of recent events."""
        storage = InMemoryAuditStorage()
        logger = AuditLogger(storage)
        for name in ("a.txt", "b.txt", "c.txt"):
            logger.log_sample_file_created(name)
        recent = storage.get_recent_events(limit=2)
        assert [e.details["path"] for e in recent] == ["c.txt", "b.txt"]


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
