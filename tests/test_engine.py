"""Tests for SheetsEngine result wrapping and status tracking."""

from __future__ import annotations

import pytest

from gsheetsync.client import SheetConfig, SheetsClient
from gsheetsync.engine import OperationStatus, SheetsEngine, SyncResult
from gsheetsync.exceptions import InvalidReferenceError, SheetNotFoundError
from gsheetsync.transport import NotFoundError


@pytest.fixture
def statuses() -> list[tuple[str, OperationStatus]]:
    return []


@pytest.fixture
def engine(
    client: SheetsClient, statuses: list[tuple[str, OperationStatus]]
) -> SheetsEngine:
    return SheetsEngine(client, on_status=lambda name, s: statuses.append((name, s)))


class TestSyncResult:
    def test_success(self) -> None:
        result = SyncResult.success({"A1": "x"})
        assert result.is_success
        assert not result.is_error
        assert result.get_or_none() == {"A1": "x"}
        assert result.unwrap() == {"A1": "x"}

    def test_success_with_none_value(self) -> None:
        result: SyncResult[None] = SyncResult.success(None)
        assert result.is_success

    def test_failure(self) -> None:
        error = InvalidReferenceError("2B")
        result: SyncResult[dict[str, str]] = SyncResult.failure(error)
        assert result.is_error
        assert result.get_or_none() is None
        assert result.error is error
        with pytest.raises(InvalidReferenceError):
            result.unwrap()


class TestSheetsEngine:
    async def test_get_data_success(
        self,
        engine: SheetsEngine,
        config: SheetConfig,
        statuses: list[tuple[str, OperationStatus]],
    ) -> None:
        result = await engine.get_data(config, "A1")
        assert result.unwrap() == {"A1": "Name"}
        assert statuses == [
            ("get_data", OperationStatus(loading=True)),
            ("get_data", OperationStatus()),
        ]
        assert engine.status("get_data") == OperationStatus()

    async def test_validation_error_is_captured(
        self, engine: SheetsEngine, config: SheetConfig
    ) -> None:
        result = await engine.get_data(config, "AAA1")
        assert result.is_error
        assert isinstance(result.error, InvalidReferenceError)
        status = engine.status("get_data")
        assert not status.loading
        assert status.error is not None
        assert "AAA1" in status.error

    async def test_transport_error_is_captured(self, engine: SheetsEngine) -> None:
        result = await engine.open("no_such_sheet")
        assert isinstance(result.error, NotFoundError)
        assert engine.status("open").error is not None

    async def test_missing_sheet_is_captured(
        self, engine: SheetsEngine, config: SheetConfig
    ) -> None:
        result = await engine.use_sheet(config, "Nope")
        assert isinstance(result.error, SheetNotFoundError)

    async def test_statuses_are_per_operation(
        self, engine: SheetsEngine, config: SheetConfig
    ) -> None:
        await engine.update_data(config, {"A1": ""})
        await engine.insert_row(config, 2)
        assert engine.status("update_data").error is not None
        assert engine.status("insert_row") == OperationStatus()
        assert engine.status("delete_row") == OperationStatus()

    async def test_error_cleared_on_next_success(
        self, engine: SheetsEngine, config: SheetConfig
    ) -> None:
        await engine.clear_cell(config, "not a cell")
        assert engine.status("clear_cell").error is not None
        await engine.clear_cell(config, "A1")
        assert engine.status("clear_cell") == OperationStatus()

    async def test_unexpected_error_propagates(
        self, client: SheetsClient, config: SheetConfig
    ) -> None:
        async def boom(*args: object) -> dict[str, str]:
            raise RuntimeError("boom")

        client.get_data = boom  # type: ignore[method-assign]
        engine = SheetsEngine(client)
        with pytest.raises(RuntimeError):
            await engine.get_data(config, "A1")
        status = engine.status("get_data")
        assert not status.loading
        assert status.error is not None

    async def test_open_and_protect_flow(self, engine: SheetsEngine) -> None:
        opened = await engine.open("test_sheet")
        config = opened.unwrap()
        protected = await engine.protect_cells_in_range(config, "A1", "C10")
        assert protected.is_success
        created = await engine.create_sheet(config, "Q4")
        assert created.unwrap().sheet_id == 1000
        unprotected = await engine.unprotect_all_sheets(config)
        assert unprotected.is_success
