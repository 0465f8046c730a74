"""
Text Codec for Ledger Files

Converts between Transaction objects and their one-line text form:

    KIND,CATEGORY,AMOUNT,DATE

DESIGN DECISION: Loading is best-effort. A corrupt line is reported back
to the caller as a skipped entry, it never aborts loading the rest of the
file. decode_line and decode_all therefore never raise; Transaction.parse
is the only place that raises FormatError.
"""

from typing import Iterable

from src.models.transaction import (
    DecodeReport,
    FormatError,
    LineDecodeResult,
    SkippedLine,
    Transaction,
)


def _safe_text(line: str) -> str:
    """Copy of ``line`` with undecodable bytes shown as "?"."""
    return line.encode("utf-8", "replace").decode("utf-8")


class TextCodec:
    """
    Stateless encoder/decoder for the ledger line format.

    Works on sequences of strings so the same code serves files,
    in-memory buffers and uploaded content.
    """

    def encode(self, transaction: Transaction) -> str:
        """Encode one transaction (no trailing newline)."""
        return transaction.format()

    def encode_all(self, transactions: Iterable[Transaction]) -> list[str]:
        """Encode every transaction, preserving order."""
        return [self.encode(t) for t in transactions]

    def decode_line(self, line: str, line_index: int = 0) -> LineDecodeResult:
        """
        Decode one line without raising.

        Returns a result carrying either the transaction or the reason
        the line was rejected.
        """
        try:
            transaction = Transaction.parse(line)
        except FormatError as e:
            return LineDecodeResult(
                line_index=line_index,
                raw_line=_safe_text(line),
                error=e.reason,
            )
        return LineDecodeResult(
            line_index=line_index,
            raw_line=line,
            transaction=transaction,
        )

    def decode_all(self, lines: Iterable[str]) -> DecodeReport:
        """
        Decode every line independently.

        Well-formed lines are kept in their original order; malformed
        lines (including blank ones) are collected as skipped entries
        with their zero-based index.
        """
        report = DecodeReport()
        for index, line in enumerate(lines):
            result = self.decode_line(line, line_index=index)
            if result.ok:
                report.transactions.append(result.transaction)
            else:
                report.skipped.append(SkippedLine(
                    line_index=index,
                    raw_line=result.raw_line.rstrip("\r\n"),
                    reason=result.error,
                ))
        return report
