from __future__ import annotations

from dataclasses import dataclass, field

from .diagnostic import ValidationDiagnostic
from .parsed_row import ParsedRow

"""Validation rules and result models.

ValidationRules carries the catalog of recognized state/territory names and the
accepted year range. It is passed into the validator explicitly so that the
pipeline stays a pure function of (content, rules).
"""

__all__ = [
    "DEFAULT_STATES",
    "MAX_YEAR",
    "MIN_YEAR",
    "ValidationResult",
    "ValidationRules",
]

MIN_YEAR = 1947
MAX_YEAR = 2030

# 28 states, Delhi and the national aggregate "India"
DEFAULT_STATES: tuple[str, ...] = (
    "Andhra Pradesh", "Arunachal Pradesh", "Assam", "Bihar", "Chhattisgarh",
    "Goa", "Gujarat", "Haryana", "Himachal Pradesh", "Jharkhand",
    "Karnataka", "Kerala", "Madhya Pradesh", "Maharashtra", "Manipur",
    "Meghalaya", "Mizoram", "Nagaland", "Odisha", "Punjab",
    "Rajasthan", "Sikkim", "Tamil Nadu", "Telangana", "Tripura",
    "Uttar Pradesh", "Uttarakhand", "West Bengal", "Delhi", "India",
)


@dataclass(frozen=True)
class ValidationRules:
    """Domain rules the row validator checks cells against."""
    states: tuple[str, ...] = DEFAULT_STATES
    min_year: int = MIN_YEAR
    max_year: int = MAX_YEAR
    _state_keys: frozenset[str] = field(init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        if self.min_year > self.max_year:
            raise ValueError(f"min_year {self.min_year} is greater than max_year {self.max_year}")
        object.__setattr__(self, "states", tuple(self.states))
        object.__setattr__(self, "_state_keys", frozenset(s.strip().lower() for s in self.states))

    @classmethod
    def default(cls) -> ValidationRules:
        return cls()

    def is_known_state(self, name: str) -> bool:
        """Case-insensitive exact match against the catalog."""
        return name.strip().lower() in self._state_keys

    def year_in_range(self, year: int) -> bool:
        return self.min_year <= year <= self.max_year

    @property
    def year_range_message(self) -> str:
        return f"Year must be between {self.min_year} and {self.max_year}"


@dataclass(frozen=True)
class ValidationResult:
    """Output of one pipeline run.

    ``rows`` pairs 1:1 with the data rows of the file, ``diagnostics`` is the
    unabridged list (grouped by row, then year -> state -> value), ``headers``
    is the literal header row.
    """
    rows: list[ParsedRow] = field(default_factory=list)
    diagnostics: list[ValidationDiagnostic] = field(default_factory=list)
    headers: list[str] = field(default_factory=list)

    @property
    def is_valid(self) -> bool:
        return not self.diagnostics

    @property
    def is_fatal(self) -> bool:
        """True when the file shape itself was rejected (no header + data)."""
        return any(d.is_fatal for d in self.diagnostics)

    @property
    def valid_rows(self) -> list[ParsedRow]:
        return [r for r in self.rows if r.is_valid]

    @property
    def invalid_rows(self) -> list[ParsedRow]:
        return [r for r in self.rows if not r.is_valid]

    def diagnostics_for_row(self, row_number: int) -> list[ValidationDiagnostic]:
        return [d for d in self.diagnostics if d.row == row_number]
