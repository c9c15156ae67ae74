from __future__ import annotations

from dataclasses import asdict, dataclass

"""Validation diagnostic model.

A diagnostic is the only error-reporting vehicle of the validation pipeline:
per-cell problems are returned as data, never raised.
"""

__all__ = [
    "FATAL_ROW",
    "ValidationDiagnostic",
]

# Row number used for file-shape problems that are not tied to a data row
FATAL_ROW = 0


@dataclass(frozen=True)
class ValidationDiagnostic:
    """Structured complaint about a single cell (or the whole file).

    Attributes:
        row: Line number in the uploaded file (header is line 1, first data
            row is line 2). ``0`` for file-level problems.
        column: Header text of the offending column, or the fallback label
            ``Year``/``State``/``Value`` when the cell itself is missing.
        message: Fixed-vocabulary message.
        value: Raw offending text, ``""`` when the cell was absent.
    """
    row: int
    column: str
    message: str
    value: str

    @property
    def is_fatal(self) -> bool:
        return self.row == FATAL_ROW

    def to_dict(self) -> dict[str, object]:
        return asdict(self)
