"""
Google Sheets API request types used by gsheetsync.

A hand-picked subset of the Sheets v4 request objects. These TypedDict
classes provide static type checking for request payloads without runtime
overhead.
"""

from __future__ import annotations

from typing import Literal, TypedDict

Dimension = Literal["ROWS", "COLUMNS"]


class GridRange(TypedDict, total=False):
    """A range on a sheet. Indexes are zero-based and half open: [start, end)."""

    # The sheet this range is on.
    sheetId: int

    # The start row (inclusive) of the range.
    startRowIndex: int

    # The end row (exclusive) of the range.
    endRowIndex: int

    # The start column (inclusive) of the range.
    startColumnIndex: int

    # The end column (exclusive) of the range.
    endColumnIndex: int


class DimensionRange(TypedDict):
    """A range along a single dimension. Zero-based, half open."""

    sheetId: int
    dimension: Dimension
    startIndex: int
    endIndex: int


class InsertDimensionRequest(TypedDict, total=False):
    """Inserts rows or columns in a sheet at a particular index."""

    range: DimensionRange

    # Whether properties are inherited from the row/column before the insert.
    inheritFromBefore: bool


class DeleteDimensionRequest(TypedDict):
    """Deletes the dimensions from the sheet."""

    range: DimensionRange


class ProtectedRange(TypedDict, total=False):
    """A protected range."""

    range: GridRange
    description: str

    # True if editing shows a warning instead of being blocked.
    warningOnly: bool


class AddProtectedRangeRequest(TypedDict):
    protectedRange: ProtectedRange


class DeleteProtectedRangeRequest(TypedDict):
    protectedRangeId: int


class SheetPropertiesBody(TypedDict, total=False):
    sheetId: int
    title: str


class AddSheetRequest(TypedDict):
    properties: SheetPropertiesBody


class DeleteSheetRequest(TypedDict):
    sheetId: int


class Request(TypedDict, total=False):
    """A single kind of update to apply to a spreadsheet."""

    insertDimension: InsertDimensionRequest
    deleteDimension: DeleteDimensionRequest
    addProtectedRange: AddProtectedRangeRequest
    deleteProtectedRange: DeleteProtectedRangeRequest
    addSheet: AddSheetRequest
    deleteSheet: DeleteSheetRequest


class ValueRangeBody(TypedDict):
    """A range of values to write."""

    range: str
    majorDimension: Literal["ROWS", "COLUMNS"]
    values: list[list[str]]


class BatchUpdateValuesRequest(TypedDict):
    """The request for updating more than one range of values."""

    valueInputOption: Literal["RAW", "USER_ENTERED"]
    data: list[ValueRangeBody]
