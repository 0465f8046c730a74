"""
Storage Services Package

Provides abstract interfaces and concrete implementations for data storage.
The text file backend is the default; in-memory backends serve tests and
session-only audit trails.
"""

from src.services.storage.interface import (
    AuditStorageInterface,
    LedgerFileNotFoundError,
    LedgerIOError,
    LedgerStorageInterface,
    StorageError,
)
from src.services.storage.memory import (
    InMemoryAuditStorage,
    InMemoryLedgerStorage,
)
from src.services.storage.text_file import TextFileLedgerStorage

__all__ = [
    # Interfaces
    "AuditStorageInterface",
    "LedgerStorageInterface",
    # Exceptions
    "LedgerFileNotFoundError",
    "LedgerIOError",
    "StorageError",
    # Implementations
    "InMemoryAuditStorage",
    "InMemoryLedgerStorage",
    "TextFileLedgerStorage",
]
