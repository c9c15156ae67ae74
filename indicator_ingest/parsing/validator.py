from __future__ import annotations

import re

from ..models.diagnostic import FATAL_ROW, ValidationDiagnostic
from ..models.header_mapping import HeaderMapping
from ..models.parsed_row import ParsedRow
from ..models.validation import ValidationResult, ValidationRules
from .tokenizer import tokenize

"""Row validator and upload pipeline.

parse_and_validate_file() is the single entry point used by the upload
service:

1. tokenize the text (tokenizer.tokenize)
2. first row = headers, resolve role indices (HeaderMapping.from_headers)
3. validate every data row against ValidationRules
4. return ValidationResult(rows, diagnostics, headers)

Per-cell problems are reported as ValidationDiagnostic entries and never abort
the pass. Only a file without header + data row yields the fatal row-0
diagnostic.
"""

__all__ = [
    "MSG_FILE_SHAPE",
    "MSG_INVALID_STATE",
    "MSG_INVALID_YEAR",
    "MSG_MISSING_STATE",
    "MSG_MISSING_VALUE",
    "MSG_MISSING_YEAR",
    "MSG_NEGATIVE_VALUE",
    "MSG_NON_NUMERIC",
    "parse_and_validate_file",
    "parse_leading_float",
    "parse_leading_int",
    "validate_row",
]

MSG_FILE_SHAPE = "File must have headers and at least one data row"
MSG_INVALID_YEAR = "Invalid year format"
MSG_MISSING_YEAR = "Missing year value"
MSG_INVALID_STATE = "Invalid state/territory name"
MSG_MISSING_STATE = "Missing state value"
MSG_NON_NUMERIC = "Non-numeric value where numeric expected"
MSG_NEGATIVE_VALUE = "Value cannot be negative"
MSG_MISSING_VALUE = "Missing value"

# Fallback column labels for missing cells
YEAR_LABEL = "Year"
STATE_LABEL = "State"
VALUE_LABEL = "Value"

_MAX_INT_DIGITS = 18
_INT_PREFIX = re.compile(r"\s*([+-]?)([0-9]+)")
_FLOAT_PREFIX = re.compile(r"\s*([+-]?(?:Infinity|(?:[0-9]+\.?[0-9]*|\.[0-9]+)(?:[eE][+-]?[0-9]+)?))")


def parse_leading_int(text: str) -> int | None:
    """Parse the integer prefix of ``text`` (``"2023abc"`` -> 2023, ``"20.5"`` -> 20).

    Only ASCII digits count. Returns None when the text does not start with an
    (optionally signed) digit. Digit runs longer than ``_MAX_INT_DIGITS`` keep
    their magnitude but not their exact low digits.
    """
    m = _INT_PREFIX.match(text)
    if m is None:
        return None
    sign, digits = m.groups()
    digits = digits.lstrip("0") or "0"
    # int() refuses very long digit strings (sys.get_int_max_str_digits)
    scale = max(len(digits) - _MAX_INT_DIGITS, 0)
    number = int(digits[:len(digits) - scale]) * 10 ** scale
    return -number if sign == "-" else number


def parse_leading_float(text: str) -> float | None:
    """Parse the numeric prefix of ``text`` (``"12.5%"`` -> 12.5, ``"1e3"`` -> 1000.0)."""
    m = _FLOAT_PREFIX.match(text)
    if m is None:
        return None
    token = m.group(1)
    if token.endswith("Infinity"):
        return float(token.replace("Infinity", "inf"))
    return float(token)


def _cell(row: list[str], idx: int) -> str:
    """Safe indexed access: short rows read as empty cells."""
    return row[idx] if idx < len(row) else ""


def validate_row(
    row: list[str],
    row_number: int,
    headers: list[str],
    mapping: HeaderMapping,
    rules: ValidationRules,
) -> tuple[ParsedRow, list[ValidationDiagnostic]]:
    """Validate one tokenized data row.

    Args:
        row: Cells of the data row (may be shorter or longer than headers)
        row_number: Line number reported in diagnostics (data index + 2)
        headers: Header cells, used as column labels
        mapping: Resolved role indices for ``headers``
        rules: State catalog and year range

    Returns:
        (ParsedRow, diagnostics raised for this row in year -> state -> value order)
    """
    diagnostics: list[ValidationDiagnostic] = []
    year: int | None = None
    state = ""
    value: float | None = None

    if mapping.year is not None:
        raw = _cell(row, mapping.year)
        if raw:
            parsed_year = parse_leading_int(raw)
            if parsed_year is None:
                diagnostics.append(
                    ValidationDiagnostic(row_number, headers[mapping.year], MSG_INVALID_YEAR, raw)
                )
            elif not rules.year_in_range(parsed_year):
                diagnostics.append(
                    ValidationDiagnostic(row_number, headers[mapping.year], rules.year_range_message, raw)
                )
            else:
                year = parsed_year
        else:
            diagnostics.append(ValidationDiagnostic(row_number, YEAR_LABEL, MSG_MISSING_YEAR, ""))

    if mapping.state is not None:
        raw = _cell(row, mapping.state)
        if raw:
            name = raw.strip()
            if rules.is_known_state(name):
                state = name
            else:
                diagnostics.append(
                    ValidationDiagnostic(row_number, headers[mapping.state], MSG_INVALID_STATE, name)
                )
        else:
            diagnostics.append(ValidationDiagnostic(row_number, STATE_LABEL, MSG_MISSING_STATE, ""))

    if mapping.value is not None:
        raw = _cell(row, mapping.value)
        if raw:
            number = parse_leading_float(raw)
            if number is None:
                diagnostics.append(
                    ValidationDiagnostic(row_number, headers[mapping.value], MSG_NON_NUMERIC, raw)
                )
            elif number < 0:
                diagnostics.append(
                    ValidationDiagnostic(row_number, headers[mapping.value], MSG_NEGATIVE_VALUE, raw)
                )
            else:
                value = number
        else:
            diagnostics.append(ValidationDiagnostic(row_number, VALUE_LABEL, MSG_MISSING_VALUE, ""))

    parsed = ParsedRow(
        year=year,
        state=state,
        value=value,
        is_valid=not diagnostics,
        errors=[d.message for d in diagnostics],
    )
    return parsed, diagnostics


def parse_and_validate_file(content: str, rules: ValidationRules | None = None) -> ValidationResult:
    """Tokenize and validate upload text.

    Args:
        content: Decoded file text
        rules: Catalog and year range; ``ValidationRules.default()`` when None

    Returns:
        ValidationResult. For input with fewer than two lines, rows and headers
        are empty and diagnostics holds the single row-0 file-shape diagnostic.
    """
    if rules is None:
        rules = ValidationRules.default()

    grid = tokenize(content)
    if len(grid) < 2:
        return ValidationResult(
            rows=[],
            diagnostics=[ValidationDiagnostic(FATAL_ROW, "", MSG_FILE_SHAPE, "")],
            headers=[],
        )

    headers = grid[0]
    mapping = HeaderMapping.from_headers(headers)
    rows: list[ParsedRow] = []
    diagnostics: list[ValidationDiagnostic] = []
    for i, data_row in enumerate(grid[1:]):
        parsed, row_diags = validate_row(data_row, i + 2, headers, mapping, rules)
        rows.append(parsed)
        diagnostics.extend(row_diags)

    return ValidationResult(rows=rows, diagnostics=diagnostics, headers=headers)
