from __future__ import annotations

from dataclasses import dataclass, field

"""ParsedRow model for indicator uploads.

A ParsedRow is the typed view of one data row of an uploaded file, produced 1:1
and in order with the data rows of the file.
"""

__all__ = [
    "ParsedRow",
]


@dataclass(frozen=True)
class ParsedRow:
    """Validated representation of one data row.

    Fields left at their defaults (``None`` / ``""``) either failed validation
    or belong to a role that the header does not declare.
    """
    year: int | None = None
    state: str = ""  # empty when invalid or missing
    value: float | None = None
    is_valid: bool = False  # True iff the row raised no diagnostics
    errors: list[str] = field(default_factory=list)  # messages only, year -> state -> value
