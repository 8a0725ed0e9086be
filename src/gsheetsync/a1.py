"""
A1 notation addressing for gsheetsync.

Provides validated conversion between A1 cell references ("B2", "A1:C10")
and one-based (column, row) coordinates. Column letters use bijective
base-26: there is no zero digit, so A=1, Z=26, AA=27, ZZ=702.
"""

from __future__ import annotations

import re
from dataclasses import dataclass

from gsheetsync.exceptions import InvalidRangeError, InvalidReferenceError

# Two-letter cap ("ZZ")
MAX_COLUMN_NUMBER = 702
MAX_ROW_NUMBER = 100000

_CELL_PATTERN = re.compile(r"([A-Za-z]+)([0-9]+)")
_LETTERS_PATTERN = re.compile(r"[A-Za-z]+")


@dataclass(frozen=True, order=True)
class CellAddress:
    """A single cell as one-based (column, row) coordinates."""

    column: int
    row: int

    def __post_init__(self) -> None:
        if not 1 <= self.column <= MAX_COLUMN_NUMBER:
            raise InvalidReferenceError(
                f"{self.column},{self.row}",
                f"column must be between 1 and {MAX_COLUMN_NUMBER}",
            )
        if not 1 <= self.row <= MAX_ROW_NUMBER:
            raise InvalidReferenceError(
                f"{self.column},{self.row}",
                f"row must be between 1 and {MAX_ROW_NUMBER}",
            )

    @property
    def column_name(self) -> str:
        return column_number_to_name(self.column)

    @property
    def a1(self) -> str:
        """Canonical uppercase A1 rendering, e.g. "B12"."""
        return format_cell(self.column, self.row)

    def __str__(self) -> str:
        return self.a1


@dataclass(frozen=True)
class CellRange:
    """An inclusive rectangle of cells from ``start`` to ``end``.

    A single cell is represented with ``start == end``.
    """

    start: CellAddress
    end: CellAddress

    def __post_init__(self) -> None:
        if self.start.column > self.end.column:
            raise InvalidRangeError(
                f"{self.start}:{self.end}", "start column is after end column"
            )
        if self.start.row > self.end.row:
            raise InvalidRangeError(
                f"{self.start}:{self.end}", "start row is after end row"
            )

    @classmethod
    def single(cls, cell: CellAddress) -> CellRange:
        return cls(cell, cell)

    @property
    def is_single_cell(self) -> bool:
        return self.start == self.end

    @property
    def a1(self) -> str:
        if self.is_single_cell:
            return self.start.a1
        return f"{self.start.a1}:{self.end.a1}"

    def contains(self, column: int, row: int) -> bool:
        """Check whether the one-based (column, row) lies inside the range."""
        return (
            self.start.column <= column <= self.end.column
            and self.start.row <= row <= self.end.row
        )

    def __str__(self) -> str:
        return self.a1


def _decode_letters(letters: str) -> int:
    """Decode a letter run without any capping."""
    result = 0
    for char in letters.upper():
        result = result * 26 + (ord(char) - ord("A") + 1)
    return result


def is_valid_cell_reference(reference: str) -> bool:
    """Check that a string is a single A1 cell reference within bounds.

    Examples:
        "B2" -> True, "zz100000" -> True, "2B" -> False,
        "AAA1" -> False (column 703), "A0" -> False, "A01" -> False
    """
    match = _CELL_PATTERN.fullmatch(reference)
    if not match:
        return False
    letters, digits = match.groups()
    if digits.startswith("0"):
        return False
    return (
        _decode_letters(letters) <= MAX_COLUMN_NUMBER
        and int(digits) <= MAX_ROW_NUMBER
    )


def parse_cell_reference(reference: str) -> CellAddress:
    """Parse an A1 cell reference into a CellAddress.

    Raises:
        InvalidReferenceError: If the reference is not a valid cell
    """
    if not is_valid_cell_reference(reference):
        raise InvalidReferenceError(reference, "expected letters followed by a row number")
    match = _CELL_PATTERN.fullmatch(reference)
    assert match is not None
    letters, digits = match.groups()
    # Validated above; the clamp keeps the row sane if validation is relaxed.
    row = min(max(int(digits), 1), MAX_ROW_NUMBER)
    return CellAddress(column=column_name_to_number(letters), row=row)


def column_name_to_number(letters: str, *, strict: bool = False) -> int:
    """Convert column letters to a one-based column number.

    By default this is lenient: empty or non-letter input yields 1 and the
    result is capped at MAX_COLUMN_NUMBER. With ``strict=True`` those cases
    raise InvalidReferenceError instead.

    Examples:
        A -> 1, Z -> 26, AA -> 27, ZZ -> 702
    """
    if not _LETTERS_PATTERN.fullmatch(letters):
        if strict:
            raise InvalidReferenceError(letters, "column must be letters only")
        return 1

    result = 0
    for char in letters.upper():
        result = result * 26 + (ord(char) - ord("A") + 1)
        if result > MAX_COLUMN_NUMBER:
            if strict:
                raise InvalidReferenceError(
                    letters, f"column exceeds {column_number_to_name(MAX_COLUMN_NUMBER)}"
                )
            result = MAX_COLUMN_NUMBER
    return max(result, 1)


def column_number_to_name(number: int) -> str:
    """Convert a one-based column number to letters.

    Out-of-range input (<= 0 or > MAX_COLUMN_NUMBER) yields "A".

    Examples:
        1 -> A, 26 -> Z, 27 -> AA, 52 -> AZ, 702 -> ZZ
    """
    if number <= 0 or number > MAX_COLUMN_NUMBER:
        return "A"
    result = ""
    n = number
    while n > 0:
        n -= 1
        result = chr(ord("A") + n % 26) + result
        n //= 26
    return result


def format_cell(column: int, row: int) -> str:
    """Render one-based coordinates as A1 notation, e.g. (3, 10) -> C10."""
    return f"{column_number_to_name(column)}{row}"


def parse_cell_range(range_a1: str) -> CellRange:
    """Parse "A1:C3" or a single cell "B2" into a CellRange.

    A sheet qualifier ("Sheet1!A1:C3") is accepted and ignored.

    Raises:
        InvalidReferenceError: If either endpoint is not a valid cell
        InvalidRangeError: If the range has more than two endpoints or its
            start lies after its end
    """
    _, a1 = split_sheet_range(range_a1)
    parts = a1.split(":")
    if len(parts) > 2:
        raise InvalidRangeError(range_a1, "expected at most one ':'")
    start = parse_cell_reference(parts[0])
    end = parse_cell_reference(parts[-1])
    return CellRange(start, end)


def parse_sheet_range_origin(range_string: str) -> CellAddress:
    """Extract the top-left cell of a sheet-qualified range.

    The API echoes back the range it actually served, e.g. "Sheet1!A1:C10";
    its first cell is the origin of the returned value grid.

    Examples:
        "Sheet1!B2:D5" -> CellAddress(column=2, row=2)
        "'My Sheet'!C7" -> CellAddress(column=3, row=7)

    Raises:
        InvalidRangeError: If the '!' separator is missing or the cell part
            is not a valid reference
    """
    if "!" not in range_string:
        raise InvalidRangeError(range_string, "sheet range must contain '!' separator")
    cell_ref = range_string.rsplit("!", 1)[1].split(":", 1)[0]
    if not is_valid_cell_reference(cell_ref):
        raise InvalidRangeError(range_string, f"invalid cell reference '{cell_ref}'")
    return parse_cell_reference(cell_ref)


def split_sheet_range(range_string: str) -> tuple[str | None, str]:
    """Split "Sheet!A1:B2" into (sheet title, "A1:B2").

    Quoted titles are unescaped. Returns None as the title when the string
    has no sheet qualifier.
    """
    if "!" not in range_string:
        return None, range_string
    title, a1 = range_string.rsplit("!", 1)
    if len(title) >= 2 and title.startswith("'") and title.endswith("'"):
        title = title[1:-1].replace("''", "'")
    return title, a1


def escape_sheet_title(title: str) -> str:
    """Escape sheet title for use in A1 notation ranges.

    Sheet names containing spaces, special characters, or starting with
    digits need to be wrapped in single quotes.
    """
    needs_quoting = (
        " " in title
        or "'" in title
        or "!" in title
        or ":" in title
        or (len(title) > 0 and title[0].isdigit())
    )
    if needs_quoting:
        escaped = title.replace("'", "''")
        return f"'{escaped}'"
    return title


def qualify_range(sheet_name: str, range_a1: str) -> str:
    """Prefix an A1 range with its sheet, e.g. ("My Sheet", "A1") -> "'My Sheet'!A1"."""
    return f"{escape_sheet_title(sheet_name)}!{range_a1}"
