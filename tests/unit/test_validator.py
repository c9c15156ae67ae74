from __future__ import annotations

import math

import pytest

from indicator_ingest.models.diagnostic import ValidationDiagnostic
from indicator_ingest.models.header_mapping import HeaderMapping
from indicator_ingest.models.parsed_row import ParsedRow
from indicator_ingest.models.validation import ValidationRules
from indicator_ingest.parsing.validator import (
    MSG_FILE_SHAPE,
    parse_and_validate_file,
    parse_leading_float,
    parse_leading_int,
    validate_row,
)

"""Unit tests for the row validator and the upload pipeline."""


# --- file shape ---------------------------------------------------------

@pytest.mark.parametrize("content", ["", "Year,State,Value", "Year,State,Value\n", "\n\n  \n"])
def test_fewer_than_two_lines_is_fatal(content: str):
    result = parse_and_validate_file(content)
    assert result.rows == []
    assert result.headers == []
    assert result.diagnostics == [ValidationDiagnostic(0, "", MSG_FILE_SHAPE, "")]
    assert result.is_fatal


# --- scenarios ----------------------------------------------------------

def test_valid_row_scenario():
    result = parse_and_validate_file("Year,State,Value\n2023,Kerala,96.2")
    assert result.headers == ["Year", "State", "Value"]
    assert result.rows == [ParsedRow(year=2023, state="Kerala", value=96.2, is_valid=True, errors=[])]
    assert result.diagnostics == []
    assert result.is_valid


def test_three_diagnostics_for_one_row():
    result = parse_and_validate_file("Year,State,Rate\nabcd,Atlantis,-5")
    assert result.diagnostics == [
        ValidationDiagnostic(2, "Year", "Invalid year format", "abcd"),
        ValidationDiagnostic(2, "State", "Invalid state/territory name", "Atlantis"),
        ValidationDiagnostic(2, "Rate", "Value cannot be negative", "-5"),
    ]
    assert result.rows == [
        ParsedRow(
            year=None,
            state="",
            value=None,
            is_valid=False,
            errors=[
                "Invalid year format",
                "Invalid state/territory name",
                "Value cannot be negative",
            ],
        )
    ]


def test_header_without_state_column_never_reports_state():
    content = "Year,Value\n2020,1.5,Atlantis\n2021,2.5,Kerala,extra\n"
    result = parse_and_validate_file(content)
    assert result.diagnostics == []
    assert [r.state for r in result.rows] == ["", ""]
    assert all(r.is_valid for r in result.rows)


def test_header_with_no_roles_accepts_every_row():
    result = parse_and_validate_file("Name,Notes\nfoo,bar\n,\n")
    assert result.diagnostics == []
    assert [r.is_valid for r in result.rows] == [True, True]
    assert result.rows[0] == ParsedRow(year=None, state="", value=None, is_valid=True, errors=[])


# --- year ---------------------------------------------------------------

@pytest.mark.parametrize("year", ["1947", "2030", "1999"])
def test_year_bounds_inclusive(year: str):
    result = parse_and_validate_file(f"Year,State,Value\n{year},Goa,1")
    assert result.diagnostics == []
    assert result.rows[0].year == int(year)


@pytest.mark.parametrize("year", ["1946", "2031", "-5", "0"])
def test_year_out_of_range(year: str):
    result = parse_and_validate_file(f"Year,State,Value\n{year},Goa,1")
    assert result.diagnostics == [
        ValidationDiagnostic(2, "Year", "Year must be between 1947 and 2030", year)
    ]
    assert result.rows[0].year is None


def test_year_uses_integer_prefix():
    result = parse_and_validate_file("Year,State,Value\n2020.7,Goa,1\n2021-22,Goa,1")
    assert [r.year for r in result.rows] == [2020, 2021]
    assert result.diagnostics == []


def test_missing_year_uses_fallback_label():
    result = parse_and_validate_file("Survey Year,State,Value\n,Goa,1")
    assert result.diagnostics == [ValidationDiagnostic(2, "Year", "Missing year value", "")]


def test_invalid_year_reports_header_text():
    result = parse_and_validate_file("Survey Year,State,Value\nFY20,Goa,1")
    assert result.diagnostics == [ValidationDiagnostic(2, "Survey Year", "Invalid year format", "FY20")]


def test_custom_year_range_message():
    rules = ValidationRules(min_year=2000, max_year=2010)
    result = parse_and_validate_file("Year\n1999", rules)
    assert result.diagnostics[0].message == "Year must be between 2000 and 2010"


# --- state --------------------------------------------------------------

def test_state_match_is_case_insensitive_and_keeps_source_text():
    result = parse_and_validate_file("Year,State,Value\n2020,tamil NADU,3\n2020,  INDIA ,4")
    assert [r.state for r in result.rows] == ["tamil NADU", "INDIA"]
    assert result.diagnostics == []


def test_state_must_match_whole_name():
    result = parse_and_validate_file("Year,State,Value\n2020,Tamil,3")
    assert result.diagnostics == [ValidationDiagnostic(2, "State", "Invalid state/territory name", "Tamil")]


def test_quoted_state_with_comma_is_one_cell():
    rules = ValidationRules(states=("Dadra and Nagar Haveli, Daman and Diu",))
    result = parse_and_validate_file('Year,State,Value\n2020,"Dadra and Nagar Haveli, Daman and Diu",3', rules)
    assert result.diagnostics == []
    assert result.rows[0].state == "Dadra and Nagar Haveli, Daman and Diu"


def test_alternate_catalog_is_honored():
    rules = ValidationRules(states=("Atlantis",))
    result = parse_and_validate_file("State\nAtlantis\nKerala", rules)
    assert [r.is_valid for r in result.rows] == [True, False]


def test_missing_state_uses_fallback_label():
    result = parse_and_validate_file("Year,State Name,Value\n2020,,3")
    assert result.diagnostics == [ValidationDiagnostic(2, "State", "Missing state value", "")]


# --- value --------------------------------------------------------------

def test_zero_value_is_accepted():
    result = parse_and_validate_file("Year,State,Value\n2020,Goa,0")
    assert result.rows[0].value == 0.0
    assert result.rows[0].is_valid


def test_non_numeric_value():
    result = parse_and_validate_file("Year,State,Value\n2020,Goa,n/a")
    assert result.diagnostics == [
        ValidationDiagnostic(2, "Value", "Non-numeric value where numeric expected", "n/a")
    ]


def test_value_uses_numeric_prefix():
    result = parse_and_validate_file("Year,State,Literacy Rate\n2020,Goa,88.7%")
    assert result.rows[0].value == pytest.approx(88.7)


def test_missing_value_uses_fallback_label():
    result = parse_and_validate_file("Year,State,Value (%)\n2020,Goa")
    assert result.diagnostics == [ValidationDiagnostic(2, "Value", "Missing value", "")]


# --- header role resolution --------------------------------------------

def test_first_matching_header_wins():
    mapping = HeaderMapping.from_headers(["Id", "Year", "Base Year", "Rate", "Value"])
    assert mapping == HeaderMapping(year=1, state=None, value=3)


def test_one_header_can_serve_two_roles():
    mapping = HeaderMapping.from_headers(["Growth Rate Year", "State"])
    assert mapping == HeaderMapping(year=0, state=1, value=0)


def test_role_keywords_are_case_insensitive_substrings():
    mapping = HeaderMapping.from_headers(["FISCAL_YEAR", "StateOrUT", "RATE_PCT"])
    assert mapping == HeaderMapping(year=0, state=1, value=2)


# --- row numbering & grouping -------------------------------------------

def test_row_numbers_and_grouping():
    content = "Year,State,Value\n2020,Goa,1\n,,\n2020,Goa,-1\n"
    result = parse_and_validate_file(content)
    assert [(d.row, d.message) for d in result.diagnostics] == [
        (3, "Missing year value"),
        (3, "Missing state value"),
        (3, "Missing value"),
        (4, "Value cannot be negative"),
    ]
    assert [r.is_valid for r in result.rows] == [True, False, False]
    assert len(result.rows) == 3


def test_short_row_reads_missing_cells():
    result = parse_and_validate_file("Year,State,Value\n2020")
    assert [d.message for d in result.diagnostics] == ["Missing state value", "Missing value"]


def test_validity_flag_matches_diagnostics():
    content = "Year,State,Value\n2020,Goa,1\n1900,Goa,1\n2020,Mars,1\n2020,Goa,x\n"
    result = parse_and_validate_file(content)
    for i, row in enumerate(result.rows):
        assert row.is_valid == (result.diagnostics_for_row(i + 2) == [])
        assert row.errors == [d.message for d in result.diagnostics_for_row(i + 2)]


def test_pipeline_is_idempotent(invalid_csv_text: str):
    first = parse_and_validate_file(invalid_csv_text)
    second = parse_and_validate_file(invalid_csv_text)
    assert first == second


def test_validate_row_direct_call():
    headers = ["Year", "State", "Value"]
    parsed, diags = validate_row(
        ["2023", "Kerala", "1"], 7, headers, HeaderMapping.from_headers(headers), ValidationRules()
    )
    assert parsed.is_valid
    assert diags == []


# --- numeric prefix helpers ---------------------------------------------

@pytest.mark.parametrize(
    "text,expected",
    [("2023", 2023), ("+12", 12), ("-7", -7), ("42abc", 42), ("3.9", 3), ("abc", None), ("", None), ("-", None)],
)
def test_parse_leading_int(text: str, expected: int | None):
    assert parse_leading_int(text) == expected


@pytest.mark.parametrize(
    "text,expected",
    [("96.2", 96.2), (".5", 0.5), ("5.", 5.0), ("1e3", 1000.0), ("2.5e", 2.5), ("-0", 0.0), ("x1", None), (".", None)],
)
def test_parse_leading_float(text: str, expected: float | None):
    assert parse_leading_float(text) == expected


def test_parse_leading_float_infinity():
    assert math.isinf(parse_leading_float("Infinity"))
    assert parse_leading_float("-Infinity") < 0


def test_overlong_year_is_out_of_range_not_an_error():
    result = parse_and_validate_file("Year,State,Value\n" + "1" * 5000 + ",Goa,1")
    assert [d.message for d in result.diagnostics] == ["Year must be between 1947 and 2030"]
    assert result.rows[0].year is None


def test_parse_leading_int_long_digit_runs():
    assert parse_leading_int("0" * 5000 + "2023") == 2023
    assert parse_leading_int("9" * 5000) > 10 ** 4990
    assert parse_leading_int("-" + "9" * 5000) < -(10 ** 4990)


def test_non_ascii_digits_are_not_numbers():
    result = parse_and_validate_file("Year,State,Value\n２０２３,Goa,٥")
    assert [d.message for d in result.diagnostics] == [
        "Invalid year format",
        "Non-numeric value where numeric expected",
    ]
    assert parse_leading_int("٢٠٢٣") is None
    assert parse_leading_float("５") is None
