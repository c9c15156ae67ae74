"""Domain models for the indicator data upload validator.

Transient validation models (ParsedRow, ValidationDiagnostic, HeaderMapping,
ValidationResult) plus the indicator/submission records built from them.
"""

from .diagnostic import ValidationDiagnostic
from .header_mapping import HeaderMapping
from .indicator import Indicator, IndicatorData, SubmissionStatus, UploadSubmission
from .parsed_row import ParsedRow
from .validation import ValidationResult, ValidationRules

__all__ = [
    # Validation models
    "HeaderMapping",
    "ParsedRow",
    "ValidationDiagnostic",
    "ValidationResult",
    "ValidationRules",
    # Indicator records
    "Indicator",
    "IndicatorData",
    "SubmissionStatus",
    "UploadSubmission",
]
