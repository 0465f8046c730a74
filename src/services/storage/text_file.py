"""
Text File Storage Implementation

DESIGN DECISION: A plain UTF-8 text file is the storage backend because:
1. Users can open and fix their ledger in any editor
2. No database setup required
3. The format is trivially diffable and backed up

TRADEOFFS:
- No concurrent writers (single-user tool, by scope)
- A save rewrites the whole file
- No schema version; the line format is fixed

Every file handle is opened in a ``with`` block, so it is released on
both normal return and error.
"""

from pathlib import Path
from typing import Iterable, Optional

from tenacity import (
    retry,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
)

from src.config import LedgerSettings, get_settings
from src.services.storage.interface import (
    LedgerFileNotFoundError,
    LedgerIOError,
    LedgerStorageInterface,
    PathLike,
)


ENCODING = "utf-8"
# Undecodable bytes come through as lone surrogates, so only the damaged
# line fails to parse instead of the whole file.
DECODE_ERRORS = "surrogateescape"


class TextFileLedgerStorage(LedgerStorageInterface):
    """
    Ledger storage backed by one text file per ledger.

    Relative file names resolve under the configured data directory and
    get the configured extension appended when they lack it, so
    "march" becomes "<data_dir>/march.txt".
    """

    def __init__(
        self,
        settings: Optional[LedgerSettings] = None,
        data_dir: Optional[PathLike] = None,
    ):
        self._settings = settings or get_settings().ledger
        self._data_dir = Path(data_dir) if data_dir else self._settings.data_dir

    @property
    def data_dir(self) -> Path:
        return self._data_dir

    @property
    def default_path(self) -> Path:
        return self.resolve_path(self._settings.default_filename)

    def resolve_path(self, filename: PathLike) -> Path:
        name = str(filename).strip()
        if not name:
            raise LedgerIOError("File name cannot be empty")

        extension = self._settings.file_extension
        if extension and not name.endswith(extension):
            name += extension

        path = Path(name).expanduser()
        if not path.is_absolute():
            path = self._data_dir / path
        return path

    def exists(self, path: PathLike) -> bool:
        return Path(path).is_file()

    def read_lines(self, path: PathLike) -> list[str]:
        path = Path(path)
        if not path.exists():
            raise LedgerFileNotFoundError(f"File not found: {path}", path)

        try:
            with open(path, "r", encoding=ENCODING, errors=DECODE_ERRORS) as f:
                return [line.rstrip("\r\n") for line in f]
        except OSError as e:
            raise LedgerIOError(f"Error loading file: {e}", path) from e

    def write_lines(self, path: PathLike, lines: Iterable[str]) -> int:
        path = Path(path)
        lines = list(lines)
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            self._write_file(path, lines)
        except OSError as e:
            raise LedgerIOError(f"Error saving to file: {e}", path) from e
        return len(lines)

    # A file held open by another program (a spreadsheet, a sync client)
    # is often only locked for a moment.
    @retry(
        retry=retry_if_exception_type(PermissionError),
        stop=stop_after_attempt(3),
        wait=wait_exponential(multiplier=0.2, min=0.2, max=1),
        reraise=True,
    )
    def _write_file(self, path: Path, lines: list[str]) -> None:
        with open(path, "w", encoding=ENCODING, newline="\n") as f:
            for line in lines:
                f.write(line)
                f.write("\n")
