"""In-memory ledger package."""

from src.ledger.ledger import Ledger

__all__ = ["Ledger"]
