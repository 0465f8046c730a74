"""
In-Memory Storage Implementations

Used by tests and by the front end when the audit trail should be shown
to the user for the current session only. Nothing here touches disk.
"""

from collections import deque
from pathlib import Path, PurePosixPath
from typing import Iterable, Optional
from uuid import UUID

from src.models.audit import AuditEvent
from src.services.storage.interface import (
    AuditStorageInterface,
    LedgerFileNotFoundError,
    LedgerStorageInterface,
    PathLike,
)


class InMemoryLedgerStorage(LedgerStorageInterface):
    """Ledger storage keeping each 'file' as a list of lines."""

    def __init__(self, files: Optional[dict[str, list[str]]] = None):
        self._files: dict[str, list[str]] = {
            str(PurePosixPath(name)): list(lines)
            for name, lines in (files or {}).items()
        }

    def _key(self, path: PathLike) -> str:
        return str(PurePosixPath(str(path)))

    def resolve_path(self, filename: PathLike) -> Path:
        return Path(str(filename).strip())

    def exists(self, path: PathLike) -> bool:
        return self._key(path) in self._files

    def read_lines(self, path: PathLike) -> list[str]:
        key = self._key(path)
        if key not in self._files:
            raise LedgerFileNotFoundError(f"File not found: {path}", path)
        return list(self._files[key])

    def write_lines(self, path: PathLike, lines: Iterable[str]) -> int:
        stored = list(lines)
        self._files[self._key(path)] = stored
        return len(stored)


class InMemoryAuditStorage(AuditStorageInterface):
    """
    Append-only audit trail held in memory.

    With ``max_events`` set, only the newest ``max_events`` are kept and
    older ones are dropped as new ones arrive.
    """

    def __init__(self, max_events: Optional[int] = None):
        self._events: deque[AuditEvent] = deque(maxlen=max_events)

    def append_event(self, event: AuditEvent) -> bool:
        self._events.append(event)
        return True

    def get_events_by_correlation_id(
        self,
        correlation_id: UUID,
    ) -> list[AuditEvent]:
        return [e for e in self._events if e.correlation_id == correlation_id]

    def get_recent_events(
        self,
        limit: int = 100,
    ) -> list[AuditEvent]:
        return list(reversed(self._events))[:limit]

    def __len__(self) -> int:
        return len(self._events)
