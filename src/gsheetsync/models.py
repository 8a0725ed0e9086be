"""Typed views of Google Sheets and Drive API responses.

Every response is validated here, at the boundary, so the addressing and
reconciliation code never walks untyped JSON trees.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from gsheetsync.exceptions import ResponseFormatError

SPREADSHEET_MIME_TYPE = "application/vnd.google-apps.spreadsheet"


def _cell_to_str(value: Any) -> str:
    if isinstance(value, bool):
        return "TRUE" if value else "FALSE"
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


@dataclass(frozen=True)
class ValueRange:
    """A values.get response: the served range and its rows of cell text."""

    range: str
    values: tuple[tuple[str, ...], ...] = ()
    major_dimension: str = "ROWS"

    @classmethod
    def from_api(cls, payload: Any) -> ValueRange:
        """Parse a ValueRange dict.

        The API omits ``values`` entirely when the range holds no data.
        Only row-major grids are accepted, since cells are placed by row.
        Non-string scalars (numbers, booleans) are rendered as text.

        Raises:
            ResponseFormatError: If the payload shape is wrong
        """
        if not isinstance(payload, dict):
            raise ResponseFormatError("ValueRange", "expected a JSON object")
        range_ = payload.get("range")
        if not isinstance(range_, str):
            raise ResponseFormatError("ValueRange", "'range' must be a string")
        major_dimension = payload.get("majorDimension", "ROWS")
        if major_dimension != "ROWS":
            raise ResponseFormatError(
                "ValueRange", f"unsupported majorDimension {major_dimension!r}"
            )
        raw_values = payload.get("values", [])
        if not isinstance(raw_values, list):
            raise ResponseFormatError("ValueRange", "'values' must be a list of rows")

        rows: list[tuple[str, ...]] = []
        for row in raw_values:
            if not isinstance(row, list):
                raise ResponseFormatError("ValueRange", "each row must be a list")
            rows.append(tuple("" if cell is None else _cell_to_str(cell) for cell in row))

        return cls(
            range=range_,
            values=tuple(rows),
            major_dimension=major_dimension,
        )


@dataclass(frozen=True)
class ProtectedRangeInfo:
    """An existing protected range on a sheet."""

    protected_range_id: int
    sheet_id: int
    description: str = ""
    warning_only: bool = False

    @classmethod
    def from_api(cls, payload: dict[str, Any]) -> ProtectedRangeInfo:
        range_id = payload.get("protectedRangeId")
        if not isinstance(range_id, int):
            raise ResponseFormatError(
                "ProtectedRange", "'protectedRangeId' must be an integer"
            )
        return cls(
            protected_range_id=range_id,
            sheet_id=payload.get("range", {}).get("sheetId", 0),
            description=payload.get("description", ""),
            warning_only=payload.get("warningOnly", False),
        )


@dataclass(frozen=True)
class SheetProperties:
    """Information about a single sheet within a spreadsheet."""

    sheet_id: int
    title: str
    index: int = 0
    row_count: int = 1000
    column_count: int = 26
    protected_ranges: tuple[ProtectedRangeInfo, ...] = ()

    @classmethod
    def from_api(cls, payload: dict[str, Any]) -> SheetProperties:
        """Parse a Sheet resource (or a bare SheetProperties dict)."""
        props = payload.get("properties", payload)
        grid_props = props.get("gridProperties", {})
        sheet_id = props.get("sheetId", 0)
        if not isinstance(sheet_id, int):
            raise ResponseFormatError("SheetProperties", "'sheetId' must be an integer")
        return cls(
            sheet_id=sheet_id,
            title=props.get("title", "Sheet1"),
            index=props.get("index", 0),
            row_count=grid_props.get("rowCount", 1000),
            column_count=grid_props.get("columnCount", 26),
            protected_ranges=tuple(
                ProtectedRangeInfo.from_api(p)
                for p in payload.get("protectedRanges", [])
            ),
        )


@dataclass(frozen=True)
class SpreadsheetInfo:
    """Metadata about a spreadsheet, including sheet information."""

    spreadsheet_id: str
    title: str
    sheets: tuple[SheetProperties, ...]
    url: str | None = None
    raw: dict[str, Any] = field(default_factory=dict, compare=False, repr=False)

    @classmethod
    def from_api(cls, payload: Any) -> SpreadsheetInfo:
        if not isinstance(payload, dict):
            raise ResponseFormatError("Spreadsheet", "expected a JSON object")
        spreadsheet_id = payload.get("spreadsheetId")
        if not isinstance(spreadsheet_id, str):
            raise ResponseFormatError("Spreadsheet", "'spreadsheetId' must be a string")
        return cls(
            spreadsheet_id=spreadsheet_id,
            title=payload.get("properties", {}).get("title", ""),
            sheets=tuple(SheetProperties.from_api(s) for s in payload.get("sheets", [])),
            url=payload.get("spreadsheetUrl"),
            raw=payload,
        )

    @property
    def default_sheet(self) -> SheetProperties | None:
        """Get the first sheet."""
        if self.sheets:
            return self.sheets[0]
        return None

    def find_sheet(self, title: str) -> SheetProperties | None:
        for sheet in self.sheets:
            if sheet.title == title:
                return sheet
        return None


@dataclass(frozen=True)
class DriveFile:
    """A Drive file entry returned by a files.list lookup."""

    file_id: str
    name: str
    mime_type: str = SPREADSHEET_MIME_TYPE

    @classmethod
    def from_api(cls, payload: dict[str, Any]) -> DriveFile:
        file_id = payload.get("id")
        if not isinstance(file_id, str):
            raise ResponseFormatError("Drive file", "'id' must be a string")
        return cls(
            file_id=file_id,
            name=payload.get("name", ""),
            mime_type=payload.get("mimeType", SPREADSHEET_MIME_TYPE),
        )
