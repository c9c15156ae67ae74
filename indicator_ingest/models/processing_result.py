from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime

from .indicator import IndicatorData, UploadSubmission

"""Processing result models for upload runs.

ProcessingResult aggregates one CLI run over several upload files and carries
everything needed for the SUMMARY line.
"""

__all__ = [
    "FileStat",
    "ProcessingResult",
]


@dataclass(frozen=True)
class FileStat:
    """Per-file validation statistics."""
    file_name: str
    status: str  # validated / failed
    total_rows: int  # data rows read (excluding header)
    accepted_rows: int  # rows turned into IndicatorData
    diagnostics: int
    elapsed_seconds: float


@dataclass(frozen=True)
class ProcessingResult:
    """Aggregated results of an upload run."""
    validated_files: int
    failed_files: int
    total_rows: int
    accepted_rows: int
    total_diagnostics: int
    start_time: datetime
    end_time: datetime
    elapsed_seconds: float
    file_stats: list[FileStat] = field(default_factory=list)
    records: list[IndicatorData] = field(default_factory=list)
    submissions: list[UploadSubmission] = field(default_factory=list)

    @property
    def total_files(self) -> int:
        return self.validated_files + self.failed_files
