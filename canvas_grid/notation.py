"""
Position Notation Codec

Parses the two position grammars accepted by the grid and formats cell spans
back into canonical spreadsheet notation.

Spreadsheet style (1-based, case-insensitive):
    A1          single cell
    A1:C2       inclusive range, corners in any order

Coordinate style (0-based):
    0,1         single cell (row, column)
    0,1:2x3     explicit span of 2 rows by 3 columns

format_position(parse_position(s).span) returns s upper-cased with range
corners ordered top-left to bottom-right.
"""

import logging
import re
from dataclasses import dataclass
from typing import Optional

from .errors import ParseError
from .models.grid import CellSpan

logger = logging.getLogger(__name__)

_SPREADSHEET_PATTERN = re.compile(
    r"^([A-Z]+)([0-9]+)(?::([A-Z]+)([0-9]+))?$", re.IGNORECASE | re.ASCII
)
_COORDINATE_PATTERN = re.compile(
    r"^([0-9]+)\s*,\s*([0-9]+)(?:\s*:\s*([0-9]+)\s*[xX]\s*([0-9]+))?$", re.ASCII
)


@dataclass(frozen=True)
class ParseResult:
    """Outcome of parse_position; exactly one of span/error is set."""

    success: bool
    span: Optional[CellSpan] = None
    error: Optional[ParseError] = None


def column_to_letters(index: int) -> str:
    """Convert a zero-based column index to bijective base-26 letters.

    0 -> "A", 25 -> "Z", 26 -> "AA", 701 -> "ZZ", 702 -> "AAA".
    """
    if index < 0:
        raise ValueError(f"Column index cannot be negative: {index}")

    letters = []
    n = index + 1
    while n > 0:
        n, remainder = divmod(n - 1, 26)
        letters.append(chr(ord("A") + remainder))
    return "".join(reversed(letters))


def letters_to_column(letters: str) -> int:
    """Convert column letters (case-insensitive) to a zero-based index."""
    if not letters or not letters.isalpha() or not letters.isascii():
        raise ValueError(f"Invalid column letters: {letters!r}")

    n = 0
    for char in letters.upper():
        n = n * 26 + (ord(char) - ord("A") + 1)
    return n - 1


def format_cell(row: int, column: int) -> str:
    """Spreadsheet address of a unit cell ("B3" for row 2, column 1)."""
    return f"{column_to_letters(column)}{row + 1}"


def format_position(span: CellSpan) -> str:
    """Format a span as "A1" for a single cell or "A1:C2" for a range."""
    top_left = format_cell(span.start_row, span.start_column)
    if span.row_span == 1 and span.column_span == 1:
        return top_left
    bottom_right = format_cell(span.end_row - 1, span.end_column - 1)
    return f"{top_left}:{bottom_right}"


def _parse_spreadsheet(text: str, match: re.Match) -> ParseResult:
    first_column, first_row, second_column, second_row = match.groups()

    rows = [int(first_row)]
    columns = [letters_to_column(first_column)]
    if second_column is not None:
        rows.append(int(second_row))
        columns.append(letters_to_column(second_column))

    if min(rows) < 1:
        return ParseResult(success=False, error=ParseError(text, "row numbers start at 1"))

    start_row = min(rows) - 1
    start_column = min(columns)
    span = CellSpan(
        start_row=start_row,
        start_column=start_column,
        row_span=max(rows) - min(rows) + 1,
        column_span=max(columns) - start_column + 1,
    )
    return ParseResult(success=True, span=span)


def _parse_coordinates(text: str, match: re.Match) -> ParseResult:
    row, column, row_span, column_span = match.groups()

    if row_span is None:
        return ParseResult(
            success=True,
            span=CellSpan(start_row=int(row), start_column=int(column)),
        )

    if int(row_span) < 1 or int(column_span) < 1:
        return ParseResult(success=False, error=ParseError(text, "span must be at least 1x1"))

    span = CellSpan(
        start_row=int(row),
        start_column=int(column),
        row_span=int(row_span),
        column_span=int(column_span),
    )
    return ParseResult(success=True, span=span)


def parse_position(text: Optional[str]) -> ParseResult:
    """
    Parse a position string into a zero-based CellSpan.

    Never raises for malformed input; failures are reported through
    ParseResult.error.

    Args:
        text: Spreadsheet ("B2", "a1:c3") or coordinate ("1,1", "0,0:2x2") notation

    Returns:
        ParseResult with span on success, ParseError on failure
    """
    if text is None or not text.strip():
        return ParseResult(success=False, error=ParseError("", "position is empty"))

    stripped = text.strip()

    match = _SPREADSHEET_PATTERN.match(stripped)
    if match:
        return _parse_spreadsheet(stripped, match)

    match = _COORDINATE_PATTERN.match(stripped)
    if match:
        return _parse_coordinates(stripped, match)

    logger.debug(f"Unrecognised position notation: {text!r}")
    return ParseResult(
        success=False,
        error=ParseError(stripped, "expected A1, A1:B2, row,column or row,column:RxC"),
    )
