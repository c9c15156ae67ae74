from __future__ import annotations

"""Delimited-text tokenizer for indicator uploads.

Turns raw upload text into a grid of string cells. Each line is tokenized on
its own; there are no multi-line fields.

- ``"`` toggles quoting and is dropped from the cell (``""`` is not an escape)
- ``,`` outside quotes ends a cell
- every cell is stripped of surrounding whitespace (also drops CR of CRLF files)
- an unterminated quote just runs to the end of the line

Rows are not padded: callers must tolerate short rows.
"""

__all__ = [
    "tokenize",
    "tokenize_line",
]

QUOTE = '"'
DELIMITER = ","


def tokenize_line(line: str) -> list[str]:
    """Split a single line into stripped cells."""
    cells: list[str] = []
    buf: list[str] = []
    in_quotes = False
    for ch in line:
        if ch == QUOTE:
            in_quotes = not in_quotes
        elif ch == DELIMITER and not in_quotes:
            cells.append("".join(buf).strip())
            buf = []
        else:
            buf.append(ch)
    cells.append("".join(buf).strip())
    return cells


def tokenize(content: str) -> list[list[str]]:
    """Tokenize upload text into rows of cells.

    Leading/trailing whitespace of the whole content is removed before the
    line split, so a trailing newline does not produce an empty last row.
    Blank lines inside the content are kept as ``[""]``.

    Examples:
        >>> tokenize('Year,State\\n2023,"Jammu, Kashmir"\\n')
        [['Year', 'State'], ['2023', 'Jammu, Kashmir']]
    """
    return [tokenize_line(line) for line in content.strip().split("\n")]
