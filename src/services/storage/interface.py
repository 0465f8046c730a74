"""
Abstract Storage Interface

DESIGN DECISION: We define an abstract interface for storage operations.
This allows us to:
1. Keep the text file as the default backend
2. Use in-memory storage for testing
3. Keep the ledger and codec decoupled from where lines come from

Storage works on LINES, not transactions. Turning lines into transactions
is the codec's job, so a backend never has to know the record format.
"""

from abc import ABC, abstractmethod
from pathlib import Path
from typing import Iterable, Optional, Union
from uuid import UUID

from src.models.audit import AuditEvent


PathLike = Union[str, Path]


class LedgerStorageInterface(ABC):
    """
    Abstract interface for ledger line storage.

    A backend is a line-oriented source and sink addressed by path.
    """

    @abstractmethod
    def resolve_path(self, filename: PathLike) -> Path:
        """
        Turn a user-supplied file name into a full path.

        Args:
            filename: Absolute path or a name relative to the data directory

        Returns:
            The path the backend will read from / write to
        """
        pass

    @abstractmethod
    def exists(self, path: PathLike) -> bool:
        """Check whether a ledger exists at ``path``."""
        pass

    @abstractmethod
    def read_lines(self, path: PathLike) -> list[str]:
        """
        Read every line of the ledger at ``path``.

        Returns:
            Lines without their trailing newline

        Raises:
            LedgerFileNotFoundError: If nothing exists at ``path``
            LedgerIOError: If the ledger cannot be read
        """
        pass

    @abstractmethod
    def write_lines(self, path: PathLike, lines: Iterable[str]) -> int:
        """
        Replace the ledger at ``path`` with ``lines``.

        Each line is written newline-terminated.

        Returns:
            Number of lines written

        Raises:
            LedgerIOError: If the ledger cannot be written
        """
        pass


class AuditStorageInterface(ABC):
    """
    Abstract interface for audit log storage.

    Audit logs are append-only - we never delete or modify them.
    """

    @abstractmethod
    def append_event(self, event: AuditEvent) -> bool:
        """
        Append an audit event to the log.

        Args:
            event: The audit event to log

        Returns:
            True if logged successfully
        """
        pass

    @abstractmethod
    def get_events_by_correlation_id(
        self,
        correlation_id: UUID,
    ) -> list[AuditEvent]:
        """
        Get all events for a correlation ID (e.g., one load action).

        Args:
            correlation_id: The correlation identifier

        Returns:
            List of related events in chronological order
        """
        pass

    @abstractmethod
    def get_recent_events(
        self,
        limit: int = 100,
    ) -> list[AuditEvent]:
        """
        Get the most recent audit events.

        Args:
            limit: Maximum number of events to return

        Returns:
            List of recent events (newest first)
        """
        pass


class StorageError(Exception):
    """Base exception for storage operations."""
    pass


class LedgerIOError(StorageError):
    """The ledger could not be read or written."""

    def __init__(self, message: str, path: Optional[PathLike] = None):
        self.path = str(path) if path is not None else None
        super().__init__(message)


class LedgerFileNotFoundError(LedgerIOError):
    """No ledger exists at the requested path."""
    pass
