"""SheetsClient - main interface for gsheetsync.

Composes the A1 addressing core with a Transport. Sheet-scoped calls take
an explicit, immutable SheetConfig instead of relying on state held by the
client.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass, replace
from typing import TYPE_CHECKING, Any

from gsheetsync.a1 import (
    CellRange,
    parse_cell_range,
    parse_cell_reference,
    qualify_range,
    split_sheet_range,
)
from gsheetsync.exceptions import InvalidRangeError, SheetNotFoundError
from gsheetsync.models import SheetProperties
from gsheetsync.reconcile import extract_cell_values
from gsheetsync.request_generator import (
    DimensionEdit,
    ProtectionRange,
    add_protected_range_request,
    add_sheet_request,
    create_spreadsheet_body,
    delete_protected_range_request,
    delete_sheet_request,
    dimension_request,
    protection_grid_range,
    values_batch_update_body,
)
from gsheetsync.transport import NotFoundError

if TYPE_CHECKING:
    from collections.abc import Mapping
    from types import TracebackType

    from gsheetsync.api_types import Dimension
    from gsheetsync.models import SpreadsheetInfo
    from gsheetsync.request_generator import EditOperation
    from gsheetsync.transport import Transport

logger = logging.getLogger(__name__)

_URL_ID_PATTERN = re.compile(r"/d/([a-zA-Z0-9_-]+)")
_BARE_ID_PATTERN = re.compile(r"^[a-zA-Z0-9_-]+$")


def extract_spreadsheet_id(url_or_id: str) -> str:
    """Extract the spreadsheet ID from a Google Sheets URL, or accept a bare ID.

    Example:
        https://docs.google.com/spreadsheets/d/SPREADSHEET_ID/edit -> SPREADSHEET_ID

    Raises:
        ValueError: If the input is neither a Sheets URL nor an ID
    """
    match = _URL_ID_PATTERN.search(url_or_id)
    if match:
        return match.group(1)
    if _BARE_ID_PATTERN.match(url_or_id):
        return url_or_id
    raise ValueError(f"Invalid Google Sheets URL: {url_or_id}")


@dataclass(frozen=True)
class SheetConfig:
    """The spreadsheet and working sheet an operation targets."""

    spreadsheet_id: str
    sheet_name: str
    sheet_id: int

    def with_sheet(self, sheet: SheetProperties) -> SheetConfig:
        """Return a copy targeting ``sheet`` in the same spreadsheet."""
        return replace(self, sheet_name=sheet.title, sheet_id=sheet.sheet_id)


def _config_for(info: SpreadsheetInfo) -> SheetConfig:
    sheet = info.default_sheet
    return SheetConfig(
        spreadsheet_id=info.spreadsheet_id,
        sheet_name=sheet.title if sheet else "Sheet1",
        sheet_id=sheet.sheet_id if sheet else 0,
    )


class SheetsClient:
    """Client for reading, writing and structuring Google Sheets.

    Example:
        >>> from gsheetsync.transport import GoogleSheetsTransport
        >>> transport = GoogleSheetsTransport(access_token="ya29...")
        >>> async with SheetsClient(transport) as client:
        ...     config = await client.open("https://docs.google.com/spreadsheets/d/abc/edit")
        ...     await client.get_data(config, "A1", "C3")
        {'A1': 'Name', 'B1': 'Age'}
    """

    def __init__(self, transport: Transport) -> None:
        """Initialize the client.

        Args:
            transport: Transport implementation for talking to the API
        """
        self._transport = transport

    async def __aenter__(self) -> SheetsClient:
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        await self.close()

    async def close(self) -> None:
        await self._transport.close()

    # =========================================================================
    # Spreadsheets
    # =========================================================================

    async def open(self, url_or_id: str) -> SheetConfig:
        """Resolve a spreadsheet URL or ID and target its first sheet."""
        spreadsheet_id = extract_spreadsheet_id(url_or_id)
        info = await self._transport.get_spreadsheet(spreadsheet_id)
        config = _config_for(info)
        logger.debug(
            "Opened spreadsheet %s, working sheet %r", spreadsheet_id, config.sheet_name
        )
        return config

    async def open_by_name(self, name: str) -> SheetConfig:
        """Resolve a spreadsheet by its Drive file name.

        When several spreadsheets share the name, the first match wins.

        Raises:
            NotFoundError: If no spreadsheet has that name
        """
        files = await self._transport.find_files(name)
        if not files:
            raise NotFoundError(f"No spreadsheet named '{name}'")
        if len(files) > 1:
            logger.warning(
                "%d spreadsheets named %r, using %s", len(files), name, files[0].file_id
            )
        return await self.open(files[0].file_id)

    async def create_spreadsheet(self, title: str) -> SpreadsheetInfo:
        info = await self._transport.create_spreadsheet(create_spreadsheet_body(title))
        logger.info("Created spreadsheet %s (%r)", info.spreadsheet_id, title)
        return info

    async def get_spreadsheet(self, config: SheetConfig) -> SpreadsheetInfo:
        return await self._transport.get_spreadsheet(config.spreadsheet_id)

    # =========================================================================
    # Sheets
    # =========================================================================

    async def get_sheet(self, config: SheetConfig, title: str) -> SheetProperties | None:
        """Get a sheet by title, or None if the spreadsheet has no such sheet."""
        info = await self.get_spreadsheet(config)
        return info.find_sheet(title)

    async def _require_sheet(self, config: SheetConfig, title: str) -> SheetProperties:
        sheet = await self.get_sheet(config, title)
        if sheet is None:
            raise SheetNotFoundError(title, config.spreadsheet_id)
        return sheet

    async def _resolve_sheet_id(self, config: SheetConfig, title: str | None) -> int:
        if title is None or title == config.sheet_name:
            return config.sheet_id
        return (await self._require_sheet(config, title)).sheet_id

    async def use_sheet(self, config: SheetConfig, title: str) -> SheetConfig:
        """Return a config whose working sheet is ``title``.

        Raises:
            SheetNotFoundError: If the sheet does not exist
        """
        return config.with_sheet(await self._require_sheet(config, title))

    async def create_sheet(self, config: SheetConfig, title: str) -> SheetProperties:
        """Add a sheet and return its properties, including the assigned ID."""
        response = await self._transport.batch_update(
            config.spreadsheet_id, [dict(add_sheet_request(title))]
        )
        replies = response.get("replies", [])
        if replies and "addSheet" in replies[0]:
            sheet = SheetProperties.from_api(replies[0]["addSheet"])
        else:
            # The reply should always carry the new sheet; fall back to a lookup.
            sheet = await self._require_sheet(config, title)
        logger.info("Created sheet %r (id %d)", sheet.title, sheet.sheet_id)
        return sheet

    async def delete_sheet(self, config: SheetConfig, title: str) -> dict[str, Any]:
        """Delete a sheet by title.

        Raises:
            SheetNotFoundError: If the sheet does not exist
        """
        sheet = await self._require_sheet(config, title)
        logger.info("Deleting sheet %r (id %d)", title, sheet.sheet_id)
        return await self._transport.batch_update(
            config.spreadsheet_id, [dict(delete_sheet_request(sheet.sheet_id))]
        )

    # =========================================================================
    # Values
    # =========================================================================

    async def get_data(
        self, config: SheetConfig, start: str, end: str | None = None
    ) -> dict[str, str]:
        """Fetch non-blank cell values between ``start`` and ``end`` inclusive.

        Args:
            config: Target spreadsheet and sheet
            start: First cell in A1 notation (e.g. "B2")
            end: Last cell (defaults to ``start`` for a single cell)

        Returns:
            Mapping of A1 address to value, e.g. {"A1": "Hello", "C3": "42"}

        Raises:
            InvalidReferenceError: If either cell reference is invalid
            InvalidRangeError: If ``start`` lies after ``end``
        """
        end = end or start
        requested = CellRange(parse_cell_reference(start), parse_cell_reference(end))
        range_ = qualify_range(
            config.sheet_name, f"{requested.start.a1}:{requested.end.a1}"
        )
        value_range = await self._transport.get_values(config.spreadsheet_id, range_)
        return extract_cell_values(value_range, requested)

    async def update_data(
        self, config: SheetConfig, updates: Mapping[str, str]
    ) -> dict[str, Any]:
        """Write one value per cell, e.g. {"A1": "Test", "B2": "42"}.

        Raises:
            InvalidReferenceError: If any cell reference is invalid
            ValueError: If ``updates`` is empty or any value is blank
        """
        body = values_batch_update_body(config.sheet_name, updates)
        logger.debug("Updating %d cells on %r", len(body["data"]), config.sheet_name)
        return await self._transport.batch_update_values(
            config.spreadsheet_id, dict(body)
        )

    async def clear_cell(self, config: SheetConfig, cell: str) -> dict[str, Any]:
        """Clear a cell ("A1") or a range ("A1:B2") on the working sheet.

        Raises:
            InvalidRangeError: If ``cell`` names a sheet; use ``use_sheet``
                to target another sheet
            InvalidReferenceError: If either endpoint is not a valid cell
        """
        title, _ = split_sheet_range(cell)
        if title is not None:
            raise InvalidRangeError(cell, "sheet qualifier not allowed here")
        cells = parse_cell_range(cell)
        return await self._transport.clear_values(
            config.spreadsheet_id, qualify_range(config.sheet_name, cells.a1)
        )

    # =========================================================================
    # Rows and columns
    # =========================================================================

    async def _edit_dimension(
        self,
        config: SheetConfig,
        dimension: Dimension,
        operation: EditOperation,
        index: int,
    ) -> dict[str, Any]:
        edit = DimensionEdit(dimension, operation, index)
        logger.info(
            "%s %s at %d on %r",
            operation.capitalize(),
            dimension.lower()[:-1],
            index,
            config.sheet_name,
        )
        return await self._transport.batch_update(
            config.spreadsheet_id, [dict(dimension_request(edit, config.sheet_id))]
        )

    async def insert_row(self, config: SheetConfig, index: int) -> dict[str, Any]:
        """Insert an empty row at one-based ``index``; the old row moves down."""
        return await self._edit_dimension(config, "ROWS", "insert", index)

    async def delete_row(self, config: SheetConfig, index: int) -> dict[str, Any]:
        """Delete the row at one-based ``index``."""
        return await self._edit_dimension(config, "ROWS", "delete", index)

    async def insert_column(self, config: SheetConfig, index: int) -> dict[str, Any]:
        """Insert an empty column at one-based ``index``; the old column moves right."""
        return await self._edit_dimension(config, "COLUMNS", "insert", index)

    async def delete_column(self, config: SheetConfig, index: int) -> dict[str, Any]:
        """Delete the column at one-based ``index``."""
        return await self._edit_dimension(config, "COLUMNS", "delete", index)

    # =========================================================================
    # Protection
    # =========================================================================

    async def _protect(
        self,
        config: SheetConfig,
        targets: list[tuple[int, ProtectionRange]],
        description: str,
    ) -> dict[str, Any]:
        requests = [
            dict(
                add_protected_range_request(
                    protection_grid_range(protection, sheet_id), description
                )
            )
            for sheet_id, protection in targets
        ]
        logger.info("Adding %d protected range(s): %s", len(requests), description)
        return await self._transport.batch_update(config.spreadsheet_id, requests)

    async def _unprotect(
        self, config: SheetConfig, sheet_ids: set[int] | None
    ) -> dict[str, Any]:
        info = await self.get_spreadsheet(config)
        requests = [
            dict(delete_protected_range_request(p.protected_range_id))
            for sheet in info.sheets
            if sheet_ids is None or sheet.sheet_id in sheet_ids
            for p in sheet.protected_ranges
        ]
        if not requests:
            logger.debug("No protected ranges to remove")
            return {"spreadsheetId": config.spreadsheet_id, "replies": []}
        logger.info("Removing %d protected range(s)", len(requests))
        return await self._transport.batch_update(config.spreadsheet_id, requests)

    async def protect_sheet(
        self, config: SheetConfig, title: str | None = None
    ) -> dict[str, Any]:
        """Protect a whole sheet (the working sheet when ``title`` is None)."""
        sheet_id = await self._resolve_sheet_id(config, title)
        name = title or config.sheet_name
        return await self._protect(
            config, [(sheet_id, ProtectionRange.whole_sheet())], f"Protected sheet {name}"
        )

    async def protect_all_sheets(self, config: SheetConfig) -> dict[str, Any]:
        info = await self.get_spreadsheet(config)
        targets = [(s.sheet_id, ProtectionRange.whole_sheet()) for s in info.sheets]
        return await self._protect(config, targets, "Protected sheet")

    async def unprotect_sheet(
        self, config: SheetConfig, title: str | None = None
    ) -> dict[str, Any]:
        """Remove every protected range on a sheet."""
        sheet_id = await self._resolve_sheet_id(config, title)
        return await self._unprotect(config, {sheet_id})

    async def unprotect_all_sheets(self, config: SheetConfig) -> dict[str, Any]:
        return await self._unprotect(config, None)

    async def protect_cells_in_range(
        self, config: SheetConfig, start: str, end: str
    ) -> dict[str, Any]:
        """Protect the cells from ``start`` to ``end`` on the working sheet.

        Raises:
            InvalidReferenceError: If either cell reference is invalid
            InvalidRangeError: If ``start`` lies after ``end``
        """
        cells = CellRange(parse_cell_reference(start), parse_cell_reference(end))
        return await self._protect(
            config,
            [(config.sheet_id, ProtectionRange(cells))],
            f"Protected range {cells.a1}",
        )

    async def protect_all_cells(
        self, config: SheetConfig, title: str | None = None
    ) -> dict[str, Any]:
        """Protect every cell of a sheet within the whole-sheet bounds."""
        sheet_id = await self._resolve_sheet_id(config, title)
        return await self._protect(
            config, [(sheet_id, ProtectionRange.whole_sheet())], "Protected all cells"
        )
