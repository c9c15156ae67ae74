from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum

from .diagnostic import ValidationDiagnostic

"""Indicator and submission records.

These are the records the portal keeps once an upload has been validated: the
indicator the data belongs to, one IndicatorData per accepted row, and the
UploadSubmission describing the upload itself.
"""

__all__ = [
    "Indicator",
    "IndicatorData",
    "SubmissionStatus",
    "UploadSubmission",
]


class SubmissionStatus(Enum):
    """Upload submission lifecycle.

    pending -> (validated | failed) -> approved
    """
    PENDING = "pending"
    VALIDATED = "validated"
    FAILED = "failed"
    APPROVED = "approved"


@dataclass(frozen=True)
class Indicator:
    """Named statistical metric uploads are filed against."""
    id: str
    name: str
    unit: str = ""
    source: str = ""
    category: str = ""
    enabled: bool = True
    deleted: bool = False

    @property
    def is_selectable(self) -> bool:
        """Only enabled, non-deleted indicators accept uploads."""
        return self.enabled and not self.deleted


@dataclass(frozen=True)
class IndicatorData:
    """One accepted data point (copied out of a valid ParsedRow)."""
    id: str
    indicator_id: str
    year: int
    state: str
    value: float
    uploaded_at: str  # ISO8601 UTC
    uploaded_by: str


@dataclass(frozen=True)
class UploadSubmission:
    id: str
    indicator_id: str
    indicator_name: str
    file_name: str
    status: SubmissionStatus
    uploaded_at: str  # ISO8601 UTC
    uploaded_by: str
    row_count: int  # accepted rows
    errors: list[ValidationDiagnostic] = field(default_factory=list)
