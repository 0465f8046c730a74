"""
Audit Logger

DESIGN DECISION: Every significant ledger action is logged.
This provides:
1. Traceability of entries, loads and saves
2. A record of every line skipped while loading a damaged file
3. Debugging capability

The audit logger:
- Gracefully handles storage failures (doesn't crash the app if logging fails)
- Supports correlation IDs to trace related events
"""

import logging
import sys
from typing import Optional
from uuid import UUID, uuid4

import structlog

from src.models.audit import AuditEvent, AuditEventBuilder
from src.models.transaction import DecodeReport, Transaction
from src.services.storage import AuditStorageInterface


# Configure structlog for local logging
structlog.configure(
    processors=[
        structlog.stdlib.filter_by_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        structlog.processors.UnicodeDecoder(),
        structlog.processors.JSONRenderer()
    ],
    wrapper_class=structlog.stdlib.BoundLogger,
    context_class=dict,
    logger_factory=structlog.stdlib.LoggerFactory(),
    cache_logger_on_first_use=True,
)


def configure_logging(level: str = "INFO") -> None:
    """
    Route structlog output to stderr at ``level``.

    Call once from the entrypoint. structlog renders the JSON line, the
    stdlib handler only prints it.
    """
    logging.basicConfig(
        format="%(message)s",
        stream=sys.stderr,
        level=getattr(logging, level.upper(), logging.INFO),
    )


class AuditLogger:
    """
    Writes ledger audit events.

    Logs events both to:
    1. Structured local log (for debugging)
    2. An audit storage backend, when one is configured
    """

    def __init__(
        self,
        storage: Optional[AuditStorageInterface] = None,
    ):
        """
        Initialize audit logger.

        Args:
            storage: Where events are kept besides the local log.
                    If None, events are only logged.
        """
        self._storage = storage
        self._logger = structlog.get_logger("ledger.audit")

    @property
    def storage(self) -> Optional[AuditStorageInterface]:
        return self._storage

    def log(self, event: AuditEvent) -> bool:
        """
        Log an audit event.

        Always logs locally. Persists to storage if available.

        Returns True if storage write succeeded (or no storage configured).
        """
        log_dict = event.to_log_dict()

        if event.severity.value in ("error", "critical"):
            self._logger.error("audit_event", **log_dict)
        elif event.severity.value == "warning":
            self._logger.warning("audit_event", **log_dict)
        elif event.severity.value == "debug":
            self._logger.debug("audit_event", **log_dict)
        else:
            self._logger.info("audit_event", **log_dict)

        if self._storage is not None:
            try:
                return self._storage.append_event(event)
            except Exception as e:
                # Log failure but don't raise
                self._logger.error(
                    "audit_storage_failed",
                    error=str(e),
                    event_id=str(event.event_id),
                )
                return False

        return True

    def log_transaction_added(
        self,
        transaction: Transaction,
        correlation_id: UUID,
    ) -> None:
        """Log a new ledger entry."""
        event = AuditEventBuilder.transaction_added(
            kind=transaction.kind.name,
            category=transaction.category,
            amount=str(transaction.amount),
            entry_date=transaction.date.isoformat(),
            correlation_id=correlation_id,
        )
        self.log(event)

    def log_transaction_rejected(
        self,
        issues: list[dict],
        correlation_id: UUID,
    ) -> None:
        """Log an entry refused by validation."""
        event = AuditEventBuilder.transaction_rejected(
            issues=issues,
            correlation_id=correlation_id,
        )
        self.log(event)

    def log_ledger_loaded(
        self,
        path: str,
        report: DecodeReport,
        correlation_id: UUID,
    ) -> None:
        """Log a load, with one extra event per skipped line."""
        for skipped in report.skipped:
            self.log(AuditEventBuilder.line_skipped(
                path=path,
                line_index=skipped.line_index,
                raw_line=skipped.raw_line,
                reason=skipped.reason,
                correlation_id=correlation_id,
            ))
        event = AuditEventBuilder.ledger_loaded(
            path=path,
            loaded_count=len(report.transactions),
            skipped_count=len(report.skipped),
            correlation_id=correlation_id,
        )
        self.log(event)

    def log_load_failed(
        self,
        path: str,
        error_message: str,
        correlation_id: UUID,
    ) -> None:
        """Log a load that did not happen."""
        event = AuditEventBuilder.load_failed(
            path=path,
            error_message=error_message,
            correlation_id=correlation_id,
        )
        self.log(event)

    def log_ledger_saved(
        self,
        path: str,
        transaction_count: int,
        correlation_id: UUID,
    ) -> None:
        """Log a save."""
        event = AuditEventBuilder.ledger_saved(
            path=path,
            transaction_count=transaction_count,
            correlation_id=correlation_id,
        )
        self.log(event)

    def log_save_failed(
        self,
        path: str,
        error_message: str,
        correlation_id: UUID,
    ) -> None:
        """Log a failed save."""
        event = AuditEventBuilder.save_failed(
            path=path,
            error_message=error_message,
            correlation_id=correlation_id,
        )
        self.log(event)

    def log_sample_file_created(self, path: str) -> None:
        self.log(AuditEventBuilder.sample_file_created(path=path))

    def log_summary_generated(
        self,
        view: str,
        description: str,
        transaction_count: int,
        correlation_id: UUID,
    ) -> None:
        """Log a summary view."""
        event = AuditEventBuilder.summary_generated(
            view=view,
            description=description,
            transaction_count=transaction_count,
            correlation_id=correlation_id,
        )
        self.log(event)

    def log_error(
        self,
        error_type: str,
        error_message: str,
        details: Optional[dict] = None,
        correlation_id: Optional[UUID] = None,
    ) -> None:
        """Log an error."""
        event = AuditEventBuilder.system_error(
            error_type=error_type,
            error_message=error_message,
            details=details,
            correlation_id=correlation_id,
        )
        self.log(event)


def create_correlation_id() -> UUID:
    """
    New id shared by every event of one user action.

    Create it when the action starts (e.g. a file load) and hand it to
    each step that audits.
    """
    return uuid4()
