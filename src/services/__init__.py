"""Services package."""

from src.services.storage import (
    AuditStorageInterface,
    InMemoryAuditStorage,
    InMemoryLedgerStorage,
    LedgerFileNotFoundError,
    LedgerIOError,
    LedgerStorageInterface,
    StorageError,
    TextFileLedgerStorage,
)

__all__ = [
    # Storage services
    "AuditStorageInterface",
    "InMemoryAuditStorage",
    "InMemoryLedgerStorage",
    "LedgerFileNotFoundError",
    "LedgerIOError",
    "LedgerStorageInterface",
    "StorageError",
    "TextFileLedgerStorage",
]
