"""
Main Orchestrator for the Finance Ledger

This module ties together all the components and defines the
end-to-end flows the front end calls:
1. Add (raw input -> validate -> Transaction -> ledger)
2. Summary (filter choice -> validate -> SummaryEngine)
3. Persistence (ledger <-> codec <-> storage)

DESIGN DECISION: The orchestrator enforces the boundaries:
- Nothing reaches the ledger without passing the validator
- A failed load never touches the current ledger
- Every step is audited

The core (ledger, codec, summary engine) takes no console, clock or
file dependency; those are injected here.
"""

from datetime import date
from pathlib import Path
from typing import Callable, NamedTuple, Optional, Protocol, Union
from uuid import UUID

from src.audit import AuditLogger, create_correlation_id
from src.codec import TextCodec
from src.config import LedgerSettings, get_settings
from src.ledger import Ledger
from src.models.transaction import (
    DecodeReport,
    LedgerSummary,
    Transaction,
    TransactionKind,
)
from src.services.storage import (
    InMemoryAuditStorage,
    LedgerIOError,
    LedgerStorageInterface,
    TextFileLedgerStorage,
)
from src.summary import SummaryEngine
from src.validation import TransactionValidator, ValidationError


Clock = Callable[[], date]

SAMPLE_ENTRIES = (
    (TransactionKind.INCOME, "Salary", "3000.0"),
    (TransactionKind.EXPENSE, "Food", "200.0"),
)

# Events kept for the in-session activity view; the oldest are dropped first.
AUDIT_HISTORY_LIMIT = 1000


class SaveNotifier(Protocol):
    """Told about every successful save, e.g. to open the file in a viewer."""

    def notify_saved(self, path: Path) -> None:
        ...


class NoOpSaveNotifier:
    """Default notifier: does nothing."""

    def notify_saved(self, path: Path) -> None:
        return None


class LedgerSession:
    """
    Per-process ledger state.

    Holds the ledger and remembers the last file loaded or saved.
    """

    def __init__(self, ledger: Optional[Ledger] = None):
        self.ledger = ledger if ledger is not None else Ledger()
        self.last_file_path: Optional[Path] = None


class AddTransactionFlow:
    """
    Orchestrates adding one entry.

    Flow:
    1. Resolve kind / category / date from raw input
    2. Validate against the configured category lists
    3. Append to the ledger
    4. Audit (added or rejected)
    """

    def __init__(
        self,
        session: LedgerSession,
        validator: Optional[TransactionValidator] = None,
        audit_logger: Optional[AuditLogger] = None,
        clock: Clock = date.today,
    ):
        self._session = session
        self._validator = validator or TransactionValidator()
        self._audit_logger = audit_logger
        self._clock = clock

    @property
    def validator(self) -> TransactionValidator:
        return self._validator

    def add_transaction(
        self,
        kind: TransactionKind,
        category: str,
        amount: Union[str, float, int],
        entry_date: Optional[date] = None,
        correlation_id: Optional[UUID] = None,
    ) -> Transaction:
        """
        Validate and append an entry from typed input.

        A missing date means today.

        Raises:
            ValidationError: if the entry breaks a business rule.
                The ledger is left unchanged.
        """
        correlation_id = correlation_id or create_correlation_id()
        today = self._clock()

        try:
            transaction = self._validator.build_transaction(
                kind=kind,
                category=category,
                amount=amount,
                entry_date=entry_date or today,
                today=today,
            )
        except ValidationError as e:
            if self._audit_logger:
                self._audit_logger.log_transaction_rejected(
                    issues=[
                        {"field": i.field, "type": i.issue_type, "message": i.message}
                        for i in e.issues
                    ],
                    correlation_id=correlation_id,
                )
            raise

        self._session.ledger.add(transaction)

        if self._audit_logger:
            self._audit_logger.log_transaction_added(
                transaction=transaction,
                correlation_id=correlation_id,
            )

        return transaction

    def add_from_menu(
        self,
        kind_choice: str,
        category_choice: str,
        amount: str,
        date_text: Optional[str] = None,
        correlation_id: Optional[UUID] = None,
    ) -> tuple[Transaction, list[str]]:
        """
        Append an entry from menu-style text input.

        kind_choice is "1"/"2" or a kind name, category_choice a 1-based
        index or a name. An unparsable date falls back to today.

        Returns:
            (transaction, warnings)
        """
        correlation_id = correlation_id or create_correlation_id()
        warnings = []

        try:
            kind = self._validator.resolve_kind(kind_choice)
            category = self._validator.resolve_category(kind, category_choice)
        except ValidationError as e:
            if self._audit_logger:
                self._audit_logger.log_transaction_rejected(
                    issues=[
                        {"field": i.field, "type": i.issue_type, "message": i.message}
                        for i in e.issues
                    ],
                    correlation_id=correlation_id,
                )
            raise

        entry_date, date_warning = self._validator.resolve_entry_date(
            date_text, self._clock()
        )
        if date_warning:
            warnings.append(date_warning)

        transaction = self.add_transaction(
            kind=kind,
            category=category,
            amount=amount,
            entry_date=entry_date,
            correlation_id=correlation_id,
        )
        return transaction, warnings


class SummaryFlow:
    """
    Orchestrates the three summary views.

    Inputs are validated here (month range, non-inverted date range);
    the engine itself never raises.
    """

    def __init__(
        self,
        session: LedgerSession,
        validator: Optional[TransactionValidator] = None,
        audit_logger: Optional[AuditLogger] = None,
    ):
        self._session = session
        self._engine = SummaryEngine(session.ledger)
        self._validator = validator or TransactionValidator()
        self._audit_logger = audit_logger

    @property
    def engine(self) -> SummaryEngine:
        return self._engine

    def _audit(
        self,
        view: str,
        summary: LedgerSummary,
        correlation_id: Optional[UUID],
    ) -> LedgerSummary:
        if self._audit_logger:
            self._audit_logger.log_summary_generated(
                view=view,
                description=summary.description,
                transaction_count=summary.transaction_count,
                correlation_id=correlation_id or create_correlation_id(),
            )
        return summary

    def month_summary(
        self,
        month: Union[int, str],
        correlation_id: Optional[UUID] = None,
    ) -> LedgerSummary:
        """Totals for a month number, across all years."""
        month = self._validator.validate_month(month)
        return self._audit("month", self._engine.by_month(month), correlation_id)

    def category_summary(
        self,
        category: str,
        correlation_id: Optional[UUID] = None,
    ) -> LedgerSummary:
        return self._audit(
            "category", self._engine.by_category(category), correlation_id
        )

    def date_range_summary(
        self,
        start: date,
        end: date,
        correlation_id: Optional[UUID] = None,
    ) -> LedgerSummary:
        start, end = self._validator.validate_date_range(start, end)
        return self._audit(
            "date_range", self._engine.by_date_range(start, end), correlation_id
        )

    def overall_summary(self) -> LedgerSummary:
        return self._engine.overall()


class PersistenceFlow:
    """
    Orchestrates loading and saving the ledger file.

    GUARANTEES:
    - Load replaces the ledger only after the file was read in full
    - A missing or unreadable file leaves the ledger untouched
    - Corrupt lines are skipped and reported, never fatal
    """

    def __init__(
        self,
        session: LedgerSession,
        storage: LedgerStorageInterface,
        codec: Optional[TextCodec] = None,
        audit_logger: Optional[AuditLogger] = None,
        notifier: Optional[SaveNotifier] = None,
        clock: Clock = date.today,
    ):
        self._session = session
        self._storage = storage
        self._codec = codec or TextCodec()
        self._audit_logger = audit_logger
        self._notifier = notifier or NoOpSaveNotifier()
        self._clock = clock

    @property
    def storage(self) -> LedgerStorageInterface:
        return self._storage

    def load(
        self,
        filename: Union[str, Path],
        correlation_id: Optional[UUID] = None,
    ) -> DecodeReport:
        """
        Replace the ledger with the contents of ``filename``.

        Returns:
            DecodeReport listing loaded transactions and skipped lines

        Raises:
            LedgerFileNotFoundError: if the file does not exist
            LedgerIOError: if the file cannot be read
        """
        correlation_id = correlation_id or create_correlation_id()
        path = self._storage.resolve_path(filename)

        try:
            lines = self._storage.read_lines(path)
        except LedgerIOError as e:
            if self._audit_logger:
                self._audit_logger.log_load_failed(
                    path=str(path),
                    error_message=str(e),
                    correlation_id=correlation_id,
                )
            raise

        report = self._codec.decode_all(lines)
        self._session.ledger.replace_all(report.transactions)
        self._session.last_file_path = path

        if self._audit_logger:
            self._audit_logger.log_ledger_loaded(
                path=str(path),
                report=report,
                correlation_id=correlation_id,
            )

        return report

    def save(
        self,
        filename: Union[str, Path],
        correlation_id: Optional[UUID] = None,
    ) -> Path:
        """
        Write the whole ledger to ``filename``.

        Returns:
            The resolved path written to

        Raises:
            LedgerIOError: if the file cannot be written
        """
        correlation_id = correlation_id or create_correlation_id()
        path = self._storage.resolve_path(filename)
        lines = self._codec.encode_all(self._session.ledger.all())

        try:
            count = self._storage.write_lines(path, lines)
        except LedgerIOError as e:
            if self._audit_logger:
                self._audit_logger.log_save_failed(
                    path=str(path),
                    error_message=str(e),
                    correlation_id=correlation_id,
                )
            raise

        self._session.last_file_path = path

        if self._audit_logger:
            self._audit_logger.log_ledger_saved(
                path=str(path),
                transaction_count=count,
                correlation_id=correlation_id,
            )

        self._notifier.notify_saved(path)
        return path

    def sample_lines(self) -> list[str]:
        """The two starter entries, dated today."""
        today = self._clock()
        return self._codec.encode_all(
            Transaction(kind=kind, category=category, amount=amount, date=today)
            for kind, category, amount in SAMPLE_ENTRIES
        )

    def ensure_sample_file(self, filename: Union[str, Path]) -> bool:
        """
        Create a starter ledger at ``filename`` unless one exists.

        Returns:
            True if the file was created
        """
        path = self._storage.resolve_path(filename)
        if self._storage.exists(path):
            return False

        try:
            self._storage.write_lines(path, self.sample_lines())
        except LedgerIOError as e:
            if self._audit_logger:
                self._audit_logger.log_error(
                    error_type="sample_file",
                    error_message=str(e),
                    details={"path": str(path)},
                )
            raise

        if self._audit_logger:
            self._audit_logger.log_sample_file_created(path=str(path))
        return True


class AppComponents(NamedTuple):
    session: LedgerSession
    add_flow: AddTransactionFlow
    summary_flow: SummaryFlow
    persistence_flow: PersistenceFlow
    audit_logger: AuditLogger


def create_app_components(
    settings: Optional[LedgerSettings] = None,
    storage: Optional[LedgerStorageInterface] = None,
    validator: Optional[TransactionValidator] = None,
    notifier: Optional[SaveNotifier] = None,
    clock: Clock = date.today,
) -> AppComponents:
    """
    Factory function to create all application components.

    Args:
        settings: Ledger settings. Read from the environment if None.
        storage: Ledger storage. A TextFileLedgerStorage if None.
        validator: Entry validator. Built from settings if None.
        notifier: Told about successful saves. No-op if None.
        clock: Source of "today" for entries without a date.

    Returns:
        AppComponents sharing one session and one audit logger
    """
    settings = settings or get_settings().ledger
    storage = storage or TextFileLedgerStorage(settings)
    validator = validator or TransactionValidator()

    session = LedgerSession()
    audit_logger = AuditLogger(InMemoryAuditStorage(max_events=AUDIT_HISTORY_LIMIT))

    return AppComponents(
        session=session,
        add_flow=AddTransactionFlow(
            session=session,
            validator=validator,
            audit_logger=audit_logger,
            clock=clock,
        ),
        summary_flow=SummaryFlow(
            session=session,
            validator=validator,
            audit_logger=audit_logger,
        ),
        persistence_flow=PersistenceFlow(
            session=session,
            storage=storage,
            audit_logger=audit_logger,
            notifier=notifier,
            clock=clock,
        ),
        audit_logger=audit_logger,
    )
