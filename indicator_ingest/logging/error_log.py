from __future__ import annotations

import json
from dataclasses import asdict, dataclass
from datetime import UTC, datetime
from pathlib import Path

from ..models.diagnostic import ValidationDiagnostic

"""Diagnostic log records and buffering.

- JSON Lines with a fixed key set (no extra keys)
- one `logs/diagnostics-YYYYMMDD-HHMMSS.log` (UTC) per run, created on first flush
- records are buffered and written in one append per flush
"""

__all__ = [
    "DiagnosticLogBuffer",
    "DiagnosticRecord",
    "UNKNOWN_ROW",
]

LOGS_DIR = Path("./logs")
TIMESTAMP_FMT = "%Y%m%d-%H%M%S"

# Row used when a file could not be read at all
UNKNOWN_ROW = -1


@dataclass(frozen=True)
class DiagnosticRecord:
    """One diagnostic, stamped and tied to the uploaded file and indicator.

    Attributes:
        timestamp: ISO8601 UTC timestamp with 'Z' suffix
        file: Uploaded file name
        indicator: Indicator id the upload targets
        row: File line number; 0 for file-shape problems, -1 for unreadable files
        column: Column label
        message: Diagnostic message
        value: Raw offending text
    """
    timestamp: str
    file: str
    indicator: str
    row: int
    column: str
    message: str
    value: str

    @staticmethod
    def create(
        file: str, indicator: str, row: int, column: str, message: str, value: str = ""
    ) -> DiagnosticRecord:
        ts = datetime.now(UTC).isoformat().replace("+00:00", "Z")
        return DiagnosticRecord(
            timestamp=ts,
            file=file,
            indicator=indicator,
            row=row,
            column=column,
            message=message,
            value=value,
        )

    @staticmethod
    def from_diagnostic(file: str, indicator: str, diag: ValidationDiagnostic) -> DiagnosticRecord:
        return DiagnosticRecord.create(file, indicator, **diag.to_dict())

    def to_json_line(self) -> str:
        return json.dumps(asdict(self), ensure_ascii=False)


class DiagnosticLogBuffer:
    """In-memory buffer for diagnostic records. Flush writes JSON Lines.

    The file path is fixed on first access and reused by later flushes.
    Single-threaded use only.
    """

    def __init__(self, logs_dir: Path | None = None) -> None:
        self._records: list[DiagnosticRecord] = []
        self._file_path: Path | None = None
        self._logs_dir = logs_dir if logs_dir is not None else LOGS_DIR

    @property
    def file_path(self) -> Path:
        if self._file_path is None:
            self._logs_dir.mkdir(parents=True, exist_ok=True)
            stamp = datetime.now(UTC).strftime(TIMESTAMP_FMT)
            self._file_path = self._logs_dir / f"diagnostics-{stamp}.log"
        return self._file_path

    def append(self, record: DiagnosticRecord) -> None:
        self._records.append(record)

    def extend(self, file: str, indicator: str, diagnostics: list[ValidationDiagnostic]) -> None:
        for diag in diagnostics:
            self._records.append(DiagnosticRecord.from_diagnostic(file, indicator, diag))

    def __len__(self) -> int:  # pragma: no cover (trivial)
        return len(self._records)

    def flush(self) -> Path | None:
        """Append buffered records to the log file.

        Returns:
            Path written to, or None when there was nothing to write
        """
        if not self._records:
            return None
        fp = self.file_path
        with fp.open("a", encoding="utf-8") as f:
            for r in self._records:
                f.write(r.to_json_line() + "\n")
        self._records.clear()
        return fp
