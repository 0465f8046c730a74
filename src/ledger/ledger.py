"""
In-Memory Ledger

The ledger owns the ordered collection of transactions for the session.
Insertion order is entry order; nothing is sorted by date.

DESIGN DECISION: The ledger does NOT validate. Validation is the caller's
job (see src.validation) so that loading a file with categories outside
the configured lists still works.

A single coarse lock guards every read and write. The Streamlit front end
shares one cached ledger across script reruns, which may run on different
threads.
"""

import threading
from typing import Callable, Iterable, Iterator

from src.models.transaction import Transaction


class Ledger:
    """
    Ordered, append-only collection of transactions.

    State transitions:
    - empty -> populated   (add / replace_all)
    - populated -> replaced (replace_all)
    The only way back to empty is replace_all([]).
    """

    def __init__(self, transactions: Iterable[Transaction] = ()):
        self._lock = threading.Lock()
        self._transactions: list[Transaction] = list(transactions)

    def add(self, transaction: Transaction) -> None:
        """Append one entry to the end of the ledger."""
        with self._lock:
            self._transactions.append(transaction)

    def all(self) -> tuple[Transaction, ...]:
        """Snapshot of every entry, in insertion order."""
        with self._lock:
            return tuple(self._transactions)

    def replace_all(self, transactions: Iterable[Transaction]) -> None:
        """Discard the current contents and install ``transactions``."""
        replacement = list(transactions)
        with self._lock:
            self._transactions = replacement

    def filter(self, predicate: Callable[[Transaction], bool]) -> list[Transaction]:
        """Entries matching ``predicate``, original order preserved."""
        return [t for t in self.all() if predicate(t)]

    @property
    def is_empty(self) -> bool:
        return len(self) == 0

    def __len__(self) -> int:
        with self._lock:
            return len(self._transactions)

    def __iter__(self) -> Iterator[Transaction]:
        return iter(self.all())

    def __repr__(self) -> str:
        return f"Ledger(transactions={len(self)})"
