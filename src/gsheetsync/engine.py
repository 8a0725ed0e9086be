"""SheetsEngine - SheetsClient facade with uniform results and status tracking.

Every operation returns a SyncResult instead of raising for expected
failures (bad references, missing sheets, API and network errors). Each
operation name tracks its own loading/error status; there is no shared
queue, retry or coalescing between operations.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Generic, TypeVar

from gsheetsync.exceptions import SheetsError
from gsheetsync.transport import TransportError

if TYPE_CHECKING:
    from collections.abc import Awaitable, Mapping

    from gsheetsync.client import SheetConfig, SheetsClient
    from gsheetsync.models import SheetProperties, SpreadsheetInfo

logger = logging.getLogger(__name__)

T = TypeVar("T")

# Failures surfaced as SyncResult errors; anything else propagates.
_EXPECTED_ERRORS = (SheetsError, TransportError, ValueError)


@dataclass(frozen=True)
class SyncResult(Generic[T]):
    """Outcome of an engine operation: a value or the error that prevented it."""

    value: T | None = None
    error: Exception | None = None

    @classmethod
    def success(cls, value: T) -> SyncResult[T]:
        return cls(value=value)

    @classmethod
    def failure(cls, error: Exception) -> SyncResult[T]:
        return cls(error=error)

    @property
    def is_success(self) -> bool:
        return self.error is None

    @property
    def is_error(self) -> bool:
        return self.error is not None

    def get_or_none(self) -> T | None:
        return self.value if self.is_success else None

    def unwrap(self) -> T:
        """Return the value, re-raising the captured error on failure."""
        if self.error is not None:
            raise self.error
        return self.value  # type: ignore[return-value]


@dataclass(frozen=True)
class OperationStatus:
    loading: bool = False
    error: str | None = None


StatusListener = Callable[[str, OperationStatus], None]


class SheetsEngine:
    """Wraps a SheetsClient so every call yields a SyncResult.

    Example:
        >>> engine = SheetsEngine(client, on_status=print)
        >>> opened = await engine.open(url)
        >>> if opened.is_success:
        ...     data = await engine.get_data(opened.unwrap(), "A1", "B2")
    """

    def __init__(
        self, client: SheetsClient, on_status: StatusListener | None = None
    ) -> None:
        self._client = client
        self._on_status = on_status
        self._statuses: dict[str, OperationStatus] = {}

    def status(self, operation: str) -> OperationStatus:
        """Current status of ``operation`` (idle with no error if never run)."""
        return self._statuses.get(operation, OperationStatus())

    def _set_status(self, operation: str, status: OperationStatus) -> None:
        self._statuses[operation] = status
        if self._on_status is not None:
            self._on_status(operation, status)

    async def _run(
        self, operation: str, call: Callable[[], Awaitable[T]]
    ) -> SyncResult[T]:
        self._set_status(operation, OperationStatus(loading=True))
        try:
            value = await call()
        except _EXPECTED_ERRORS as e:
            logger.warning("%s failed: %s", operation, e)
            self._set_status(operation, OperationStatus(error=str(e)))
            return SyncResult.failure(e)
        except BaseException as e:
            self._set_status(operation, OperationStatus(error=repr(e)))
            raise
        self._set_status(operation, OperationStatus())
        return SyncResult.success(value)

    async def close(self) -> None:
        await self._client.close()

    # Spreadsheets

    async def open(self, url_or_id: str) -> SyncResult[SheetConfig]:
        return await self._run("open", lambda: self._client.open(url_or_id))

    async def open_by_name(self, name: str) -> SyncResult[SheetConfig]:
        return await self._run("open_by_name", lambda: self._client.open_by_name(name))

    async def create_spreadsheet(self, title: str) -> SyncResult[SpreadsheetInfo]:
        return await self._run(
            "create_spreadsheet", lambda: self._client.create_spreadsheet(title)
        )

    async def get_spreadsheet(self, config: SheetConfig) -> SyncResult[SpreadsheetInfo]:
        return await self._run(
            "get_spreadsheet", lambda: self._client.get_spreadsheet(config)
        )

    # Sheets

    async def get_sheet(
        self, config: SheetConfig, title: str
    ) -> SyncResult[SheetProperties | None]:
        return await self._run("get_sheet", lambda: self._client.get_sheet(config, title))

    async def use_sheet(self, config: SheetConfig, title: str) -> SyncResult[SheetConfig]:
        return await self._run("use_sheet", lambda: self._client.use_sheet(config, title))

    async def create_sheet(
        self, config: SheetConfig, title: str
    ) -> SyncResult[SheetProperties]:
        return await self._run(
            "create_sheet", lambda: self._client.create_sheet(config, title)
        )

    async def delete_sheet(
        self, config: SheetConfig, title: str
    ) -> SyncResult[dict[str, Any]]:
        return await self._run(
            "delete_sheet", lambda: self._client.delete_sheet(config, title)
        )

    # Values

    async def get_data(
        self, config: SheetConfig, start: str, end: str | None = None
    ) -> SyncResult[dict[str, str]]:
        return await self._run(
            "get_data", lambda: self._client.get_data(config, start, end)
        )

    async def update_data(
        self, config: SheetConfig, updates: Mapping[str, str]
    ) -> SyncResult[dict[str, Any]]:
        return await self._run(
            "update_data", lambda: self._client.update_data(config, updates)
        )

    async def clear_cell(self, config: SheetConfig, cell: str) -> SyncResult[dict[str, Any]]:
        return await self._run("clear_cell", lambda: self._client.clear_cell(config, cell))

    # Rows and columns

    async def insert_row(self, config: SheetConfig, index: int) -> SyncResult[dict[str, Any]]:
        return await self._run(
            "insert_row", lambda: self._client.insert_row(config, index)
        )

    async def delete_row(self, config: SheetConfig, index: int) -> SyncResult[dict[str, Any]]:
        return await self._run(
            "delete_row", lambda: self._client.delete_row(config, index)
        )

    async def insert_column(
        self, config: SheetConfig, index: int
    ) -> SyncResult[dict[str, Any]]:
        return await self._run(
            "insert_column", lambda: self._client.insert_column(config, index)
        )

    async def delete_column(
        self, config: SheetConfig, index: int
    ) -> SyncResult[dict[str, Any]]:
        return await self._run(
            "delete_column", lambda: self._client.delete_column(config, index)
        )

    # Protection

    async def protect_sheet(
        self, config: SheetConfig, title: str | None = None
    ) -> SyncResult[dict[str, Any]]:
        return await self._run(
            "protect_sheet", lambda: self._client.protect_sheet(config, title)
        )

    async def protect_all_sheets(self, config: SheetConfig) -> SyncResult[dict[str, Any]]:
        return await self._run(
            "protect_all_sheets", lambda: self._client.protect_all_sheets(config)
        )

    async def unprotect_sheet(
        self, config: SheetConfig, title: str | None = None
    ) -> SyncResult[dict[str, Any]]:
        return await self._run(
            "unprotect_sheet", lambda: self._client.unprotect_sheet(config, title)
        )

    async def unprotect_all_sheets(
        self, config: SheetConfig
    ) -> SyncResult[dict[str, Any]]:
        return await self._run(
            "unprotect_all_sheets", lambda: self._client.unprotect_all_sheets(config)
        )

    async def protect_cells_in_range(
        self, config: SheetConfig, start: str, end: str
    ) -> SyncResult[dict[str, Any]]:
        return await self._run(
            "protect_cells_in_range",
            lambda: self._client.protect_cells_in_range(config, start, end),
        )

    async def protect_all_cells(
        self, config: SheetConfig, title: str | None = None
    ) -> SyncResult[dict[str, Any]]:
        return await self._run(
            "protect_all_cells", lambda: self._client.protect_all_cells(config, title)
        )
