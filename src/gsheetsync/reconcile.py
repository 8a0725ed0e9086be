"""Map a fetched value grid onto a requested cell range.

The API may serve a grid anchored earlier than the range the caller asked
for (it snaps to the used range or sheet bounds), so row 0 of the grid is
not assumed to be the first requested row. Every cell is placed by its
absolute coordinate, derived from the grid origin, and then filtered
against the requested window.
"""

from __future__ import annotations

from collections.abc import Sequence

from gsheetsync.a1 import CellAddress, CellRange, format_cell, parse_sheet_range_origin
from gsheetsync.exceptions import InvalidRangeError
from gsheetsync.models import ValueRange

ValueGrid = Sequence[Sequence[str]]


def reconcile(
    origin: CellAddress,
    grid: ValueGrid,
    requested: CellRange,
) -> dict[str, str]:
    """Collect the non-blank grid cells that fall inside ``requested``.

    Args:
        origin: Absolute cell that ``grid[0][0]`` corresponds to
        grid: Rows of cell text; rows may be shorter than the widest row
        requested: The window the caller asked for

    Returns:
        Mapping of A1 address to value. Blank and whitespace-only cells,
        and cells outside the window, are omitted.

    Raises:
        InvalidRangeError: If ``requested`` starts after it ends
    """
    if (
        requested.start.column > requested.end.column
        or requested.start.row > requested.end.row
    ):
        raise InvalidRangeError(str(requested), "start must not be after end")

    result: dict[str, str] = {}
    for row_offset, row_values in enumerate(grid):
        row = origin.row + row_offset
        if row < requested.start.row:
            continue
        if row > requested.end.row:
            break
        for col_offset, value in enumerate(row_values):
            column = origin.column + col_offset
            if column < requested.start.column:
                continue
            if column > requested.end.column:
                break
            if not value.strip():
                continue
            result[format_cell(column, row)] = value
    return result


def extract_cell_values(value_range: ValueRange, requested: CellRange) -> dict[str, str]:
    """Reconcile a values.get response against the range the caller asked for.

    Raises:
        InvalidRangeError: If the response range has no parseable origin
    """
    if not value_range.values:
        return {}
    origin = parse_sheet_range_origin(value_range.range)
    return reconcile(origin, value_range.values, requested)
