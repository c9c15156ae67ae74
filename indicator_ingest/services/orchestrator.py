from __future__ import annotations

import logging
import time
from dataclasses import dataclass, field
from datetime import UTC, datetime
from pathlib import Path

from ..config.loader import UploadConfig
from ..logging.error_log import UNKNOWN_ROW, DiagnosticLogBuffer, DiagnosticRecord
from ..models.indicator import Indicator, IndicatorData, SubmissionStatus, UploadSubmission
from ..models.processing_result import FileStat, ProcessingResult
from ..models.validation import ValidationResult, ValidationRules
from ..parsing.validator import parse_and_validate_file
from .progress import ProgressTracker
from .submission import build_indicator_data, build_submission

logger = logging.getLogger(__name__)

"""Upload orchestration.

Reads upload files, runs the validation pipeline on each, records diagnostics
in the JSON Lines log, and builds submission/data records for files that pass.

A file that cannot be read counts as a failed file; it never aborts the run.
Only configuration-level problems (unknown indicator, missing directory) raise
UploadError.
"""

__all__ = [
    "FileOutcome",
    "UPLOAD_SUFFIXES",
    "UploadError",
    "process_all",
    "process_upload",
    "read_upload_text",
    "resolve_indicator",
    "scan_upload_files",
]

UPLOAD_SUFFIXES = {".csv", ".txt"}


class UploadError(Exception):
    """Fatal error that prevents an upload run."""
    pass


@dataclass(frozen=True)
class FileOutcome:
    """Everything produced for one uploaded file."""
    path: Path
    result: ValidationResult | None  # None when the file could not be read
    submission: UploadSubmission | None
    records: list[IndicatorData] = field(default_factory=list)
    error: str | None = None  # read failure summary
    elapsed_seconds: float = 0.0

    @property
    def succeeded(self) -> bool:
        return self.submission is not None and self.submission.status is SubmissionStatus.APPROVED


def scan_upload_files(directory: Path) -> list[Path]:
    """List upload files (``.csv``/``.txt``) in ``directory``, non-recursive, sorted by name.

    Raises:
        UploadError: If directory doesn't exist, isn't a directory or can't be read
    """
    if not directory.exists():
        raise UploadError(f"Directory not found: {directory}")
    if not directory.is_dir():
        raise UploadError(f"Path is not a directory: {directory}")
    try:
        return sorted(
            (p for p in directory.iterdir() if p.is_file() and p.suffix.lower() in UPLOAD_SUFFIXES),
            key=lambda p: p.name,
        )
    except OSError as e:
        raise UploadError(f"Error reading directory {directory}: {e}") from e


def read_upload_text(path: Path, encoding: str = "utf-8-sig") -> str:
    """Decode an upload file to text.

    Raises:
        UploadError: On I/O or decoding failure
    """
    try:
        return path.read_text(encoding=encoding)
    except UnicodeDecodeError as e:
        raise UploadError(f"cannot decode {path.name} as {encoding}: {e.reason}") from e
    except OSError as e:
        raise UploadError(f"cannot read {path.name}: {e}") from e


def resolve_indicator(config: UploadConfig, indicator_id: str) -> Indicator:
    """Look up the target indicator and check it accepts uploads.

    Raises:
        UploadError: unknown, disabled or deleted indicator
    """
    indicator = config.find_indicator(indicator_id)
    if indicator is None:
        raise UploadError(f"unknown indicator: {indicator_id}")
    if not indicator.is_selectable:
        raise UploadError(f"indicator not accepting uploads (disabled or deleted): {indicator_id}")
    return indicator


def process_upload(
    path: Path,
    indicator: Indicator,
    rules: ValidationRules,
    uploaded_by: str,
    error_log: DiagnosticLogBuffer,
    *,
    encoding: str = "utf-8-sig",
) -> FileOutcome:
    """Validate a single upload file.

    Diagnostics (or the read failure) are appended to ``error_log``; records
    are only built when the file has no diagnostics.
    """
    started = time.perf_counter()
    try:
        content = read_upload_text(path, encoding)
    except UploadError as e:
        logger.debug("read failed file=%s err=%s", path.name, e)
        error_log.append(DiagnosticRecord.create(path.name, indicator.id, UNKNOWN_ROW, "", str(e)))
        return FileOutcome(
            path=path,
            result=None,
            submission=None,
            error=str(e),
            elapsed_seconds=time.perf_counter() - started,
        )

    result = parse_and_validate_file(content, rules)
    error_log.extend(path.name, indicator.id, result.diagnostics)

    now = datetime.now(UTC)
    submission = build_submission(indicator, path.name, result, uploaded_by, now)
    records: list[IndicatorData] = []
    if submission.status is SubmissionStatus.APPROVED:
        records = build_indicator_data(result, indicator.id, uploaded_by, now)

    logger.debug(
        "validated file=%s rows=%d diagnostics=%d status=%s",
        path.name,
        len(result.rows),
        len(result.diagnostics),
        submission.status.value,
    )
    return FileOutcome(
        path=path,
        result=result,
        submission=submission,
        records=records,
        elapsed_seconds=time.perf_counter() - started,
    )


def _file_stat(outcome: FileOutcome) -> FileStat:
    result = outcome.result
    return FileStat(
        file_name=outcome.path.name,
        status="validated" if outcome.succeeded else "failed",
        total_rows=len(result.rows) if result is not None else 0,
        accepted_rows=len(outcome.records),
        diagnostics=len(result.diagnostics) if result is not None else 1,
        elapsed_seconds=outcome.elapsed_seconds,
    )


def process_all(
    config: UploadConfig,
    indicator_id: str,
    uploaded_by: str,
    paths: list[Path] | None = None,
    *,
    error_log: DiagnosticLogBuffer | None = None,
) -> tuple[ProcessingResult, list[FileOutcome]]:
    """Validate every upload file of a run.

    Args:
        config: Loaded configuration (catalog, year range, source directory)
        indicator_id: Indicator all files are filed against
        uploaded_by: Uploader id recorded on submissions and records
        paths: Explicit files; when None the source directory is scanned
        error_log: Diagnostic log buffer (a fresh one when None)

    Returns:
        (aggregated ProcessingResult, per-file outcomes in processing order)

    Raises:
        UploadError: unknown/disabled indicator or unreadable source directory
    """
    start_time = datetime.now(UTC)
    error_log = error_log if error_log is not None else DiagnosticLogBuffer()

    indicator = resolve_indicator(config, indicator_id)
    rules = config.rules()
    file_paths = list(paths) if paths is not None else scan_upload_files(Path(config.source_directory))

    outcomes: list[FileOutcome] = []
    file_stats: list[FileStat] = []
    with ProgressTracker(len(file_paths)) as progress:
        for path in file_paths:
            progress.start_file(path)
            outcome = process_upload(
                path, indicator, rules, uploaded_by, error_log, encoding=config.encoding
            )
            stat = _file_stat(outcome)
            outcomes.append(outcome)
            file_stats.append(stat)
            progress.finish_file(rows=stat.total_rows, diagnostics=stat.diagnostics)

    log_path = error_log.flush()
    if log_path is not None:
        logger.debug("diagnostic log written: %s", log_path)

    end_time = datetime.now(UTC)
    result = ProcessingResult(
        validated_files=sum(1 for s in file_stats if s.status == "validated"),
        failed_files=sum(1 for s in file_stats if s.status == "failed"),
        total_rows=sum(s.total_rows for s in file_stats),
        accepted_rows=sum(s.accepted_rows for s in file_stats),
        total_diagnostics=sum(s.diagnostics for s in file_stats),
        start_time=start_time,
        end_time=end_time,
        elapsed_seconds=(end_time - start_time).total_seconds(),
        file_stats=file_stats,
        records=[r for o in outcomes for r in o.records],
        submissions=[o.submission for o in outcomes if o.submission is not None],
    )
    return result, outcomes
