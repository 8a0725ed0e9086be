"""Generate Google Sheets request payloads from A1 references and indices.

Two half-open conventions are in play:

- Dimension edits take a one-based row/column position ``index`` and
  address the single slot ``[index - 1, index)``. Inserting at ``index``
  pushes the current occupant of that position down (or right); deleting
  at ``index`` removes it. Insert-then-delete at the same index is a no-op.
- Protection ranges take an inclusive A1 rectangle and convert each edge:
  ``[start.row - 1, end.row)`` and ``[start.column - 1, end.column)``.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Literal

from gsheetsync.a1 import (
    MAX_COLUMN_NUMBER,
    MAX_ROW_NUMBER,
    CellRange,
    is_valid_cell_reference,
    qualify_range,
)
from gsheetsync.api_types import (
    BatchUpdateValuesRequest,
    Dimension,
    DimensionRange,
    GridRange,
    Request,
    ValueRangeBody,
)
from gsheetsync.exceptions import InvalidReferenceError

if TYPE_CHECKING:
    from collections.abc import Mapping

# The API has no "unbounded" sentinel for these requests, so whole-sheet
# protection covers a fixed block. Policy constants, not computed values.
WHOLE_SHEET_ROW_BOUND = 1000
WHOLE_SHEET_COLUMN_BOUND = 26

EditOperation = Literal["insert", "delete"]


@dataclass(frozen=True)
class DimensionEdit:
    """Insert or delete one row/column at a one-based position."""

    dimension: Dimension
    operation: EditOperation
    index: int

    def __post_init__(self) -> None:
        limit = MAX_ROW_NUMBER if self.dimension == "ROWS" else MAX_COLUMN_NUMBER
        if not 1 <= self.index <= limit:
            raise InvalidReferenceError(
                str(self.index),
                f"{self.dimension.lower()} index must be between 1 and {limit}",
            )


@dataclass(frozen=True)
class ProtectionRange:
    """Either a whole sheet (``cells is None``) or an explicit cell range."""

    cells: CellRange | None = None

    @classmethod
    def whole_sheet(cls) -> ProtectionRange:
        return cls(None)

    @property
    def is_whole_sheet(self) -> bool:
        return self.cells is None


def dimension_interval(index: int) -> tuple[int, int]:
    """Zero-based half-open (startIndex, endIndex) for one-based ``index``.

    Examples:
        1 -> (0, 1), 3 -> (2, 3)
    """
    if index < 1:
        raise InvalidReferenceError(str(index), "index is one-based")
    return index - 1, index


def dimension_request(edit: DimensionEdit, sheet_id: int) -> Request:
    """Build an insertDimension or deleteDimension request."""
    start, end = dimension_interval(edit.index)
    dimension_range: DimensionRange = {
        "sheetId": sheet_id,
        "dimension": edit.dimension,
        "startIndex": start,
        "endIndex": end,
    }
    if edit.operation == "insert":
        return {
            "insertDimension": {
                "range": dimension_range,
                "inheritFromBefore": False,
            }
        }
    return {"deleteDimension": {"range": dimension_range}}


def protection_grid_range(protection: ProtectionRange, sheet_id: int) -> GridRange:
    """Convert a ProtectionRange to a zero-based half-open GridRange.

    Examples:
        A1:C10 -> rows [0, 10), columns [0, 3)
        whole sheet -> rows [0, 1000), columns [0, 26)
    """
    if protection.cells is None:
        return {
            "sheetId": sheet_id,
            "startRowIndex": 0,
            "endRowIndex": WHOLE_SHEET_ROW_BOUND,
            "startColumnIndex": 0,
            "endColumnIndex": WHOLE_SHEET_COLUMN_BOUND,
        }
    start, end = protection.cells.start, protection.cells.end
    return {
        "sheetId": sheet_id,
        "startRowIndex": start.row - 1,
        "endRowIndex": end.row,  # endRowIndex is exclusive
        "startColumnIndex": start.column - 1,
        "endColumnIndex": end.column,  # endColumnIndex is exclusive
    }


def add_protected_range_request(
    grid_range: GridRange,
    description: str,
    *,
    warning_only: bool = False,
) -> Request:
    return {
        "addProtectedRange": {
            "protectedRange": {
                "range": grid_range,
                "description": description,
                "warningOnly": warning_only,
            }
        }
    }


def delete_protected_range_request(protected_range_id: int) -> Request:
    return {"deleteProtectedRange": {"protectedRangeId": protected_range_id}}


def add_sheet_request(title: str) -> Request:
    return {"addSheet": {"properties": {"title": title}}}


def delete_sheet_request(sheet_id: int) -> Request:
    return {"deleteSheet": {"sheetId": sheet_id}}


def create_spreadsheet_body(title: str) -> dict[str, dict[str, str]]:
    """Body for spreadsheets.create."""
    if not title.strip():
        raise ValueError("Spreadsheet title cannot be blank")
    return {"properties": {"title": title}}


def values_batch_update_body(
    sheet_name: str, updates: Mapping[str, str]
) -> BatchUpdateValuesRequest:
    """Build a values:batchUpdate body writing one value per cell.

    Args:
        sheet_name: Sheet the cell references belong to
        updates: Mapping of A1 cell reference to new value

    Raises:
        InvalidReferenceError: If any key is not a valid cell reference
        ValueError: If ``updates`` is empty or any value is blank
    """
    if not updates:
        raise ValueError("Updates cannot be empty")

    data: list[ValueRangeBody] = []
    for cell, value in updates.items():
        if not is_valid_cell_reference(cell):
            raise InvalidReferenceError(cell, "must be in A1 notation, e.g. 'B3'")
        if not value.strip():
            raise ValueError(f"Value for cell '{cell}' cannot be blank")
        data.append(
            {
                "range": qualify_range(sheet_name, cell.upper()),
                "majorDimension": "ROWS",
                "values": [[value]],
            }
        )
    return {"valueInputOption": "RAW", "data": data}
