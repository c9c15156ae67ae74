"""Indicator data upload validator.

Validates CSV uploads of state-level indicator data (year, state/territory,
value) and turns accepted files into indicator data records.
"""

from .models.validation import ValidationResult, ValidationRules
from .parsing.validator import parse_and_validate_file

__all__ = [
    "ValidationResult",
    "ValidationRules",
    "parse_and_validate_file",
]

__version__ = "0.1.0"
