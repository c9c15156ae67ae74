from __future__ import annotations

from datetime import UTC, datetime

import pandas as pd

from ..models.indicator import Indicator, IndicatorData, SubmissionStatus, UploadSubmission
from ..models.validation import ValidationResult

"""Submission record building for validated uploads.

Turns a ValidationResult into the records the portal keeps: IndicatorData for
each valid row and one UploadSubmission per uploaded file.
"""

__all__ = [
    "RECORD_COLUMNS",
    "build_indicator_data",
    "build_submission",
    "records_to_frame",
]

RECORD_COLUMNS = ["id", "indicator_id", "year", "state", "value", "uploaded_at", "uploaded_by"]


def _iso(now: datetime) -> str:
    return now.astimezone(UTC).isoformat().replace("+00:00", "Z")


def _epoch_ms(now: datetime) -> int:
    return int(now.timestamp() * 1000)


def build_indicator_data(
    result: ValidationResult,
    indicator_id: str,
    uploaded_by: str,
    now: datetime | None = None,
) -> list[IndicatorData]:
    """Create one IndicatorData per valid row.

    Invalid rows are skipped; ids are ``d-new-{epoch_ms}-{n}`` where ``n``
    counts accepted rows only.

    Args:
        result: Pipeline output
        indicator_id: Indicator the rows are filed against
        uploaded_by: Uploader id
        now: Upload time (UTC now when None)
    """
    now = now or datetime.now(UTC)
    stamp = _epoch_ms(now)
    uploaded_at = _iso(now)
    records: list[IndicatorData] = []
    for row in result.valid_rows:
        # A valid row can still lack a role the header never declared
        if row.year is None or row.value is None:
            continue
        records.append(
            IndicatorData(
                id=f"d-new-{stamp}-{len(records)}",
                indicator_id=indicator_id,
                year=row.year,
                state=row.state,
                value=row.value,
                uploaded_at=uploaded_at,
                uploaded_by=uploaded_by,
            )
        )
    return records


def build_submission(
    indicator: Indicator,
    file_name: str,
    result: ValidationResult,
    uploaded_by: str,
    now: datetime | None = None,
) -> UploadSubmission:
    """Describe one upload.

    A file with no diagnostics is approved with its accepted row count; any
    diagnostic marks the whole file failed with the full diagnostic list
    attached. There is no partial accept.
    """
    now = now or datetime.now(UTC)
    if result.is_valid:
        status = SubmissionStatus.APPROVED
        row_count = len(build_indicator_data(result, indicator.id, uploaded_by, now))
        errors = []
    else:
        status = SubmissionStatus.FAILED
        row_count = 0
        errors = list(result.diagnostics)
    return UploadSubmission(
        id=f"sub-{_epoch_ms(now)}",
        indicator_id=indicator.id,
        indicator_name=indicator.name,
        file_name=file_name,
        status=status,
        uploaded_at=_iso(now),
        uploaded_by=uploaded_by,
        row_count=row_count,
        errors=errors,
    )


def records_to_frame(records: list[IndicatorData]) -> pd.DataFrame:
    """Tabulate IndicatorData records (columns kept even when empty)."""
    return pd.DataFrame(
        [[getattr(r, c) for c in RECORD_COLUMNS] for r in records],
        columns=RECORD_COLUMNS,
    )
