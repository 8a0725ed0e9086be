"""Shared test fixtures for gsheetsync."""

from __future__ import annotations

from pathlib import Path

import pytest

from gsheetsync.client import SheetConfig, SheetsClient
from gsheetsync.config import get_settings
from gsheetsync.transport import LocalFileTransport

GOLDEN_DIR = Path(__file__).parent / "golden"


@pytest.fixture
def golden_dir() -> Path:
    return GOLDEN_DIR


@pytest.fixture
def local_transport() -> LocalFileTransport:
    return LocalFileTransport(GOLDEN_DIR)


@pytest.fixture
def client(local_transport: LocalFileTransport) -> SheetsClient:
    return SheetsClient(local_transport)


@pytest.fixture
def config() -> SheetConfig:
    """Working-sheet config for the golden spreadsheet's first sheet."""
    return SheetConfig(spreadsheet_id="test_sheet", sheet_name="Sheet1", sheet_id=0)


@pytest.fixture(autouse=True)
def _fresh_settings():
    """Drop cached settings so monkeypatched env vars take effect."""
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()
