"""Tests for the gsheetsync command line, run against golden files."""

from __future__ import annotations

import json
from pathlib import Path

import pytest

from gsheetsync.__main__ import main

GOLDEN_DIR = Path(__file__).parent / "golden"

LOCAL = ["--local", str(GOLDEN_DIR)]


def run(capsys: pytest.CaptureFixture[str], *argv: str) -> tuple[int, str, str]:
    code = main([*argv, *LOCAL])
    captured = capsys.readouterr()
    return code, captured.out, captured.err


class TestRead:
    def test_read_range(self, capsys: pytest.CaptureFixture[str]) -> None:
        code, out, _ = run(capsys, "read", "test_sheet", "B2", "C3")
        assert code == 0
        assert json.loads(out) == {"B2": "30", "C3": "x"}

    def test_read_other_sheet(self, capsys: pytest.CaptureFixture[str]) -> None:
        code, out, _ = run(capsys, "read", "test_sheet", "A1", "B2", "--sheet", "Q3 Data")
        assert code == 0
        assert json.loads(out) == {"A1": "1", "B1": "TRUE", "A2": "2.5"}

    def test_read_invalid_reference(self, capsys: pytest.CaptureFixture[str]) -> None:
        code, out, err = run(capsys, "read", "test_sheet", "A0")
        assert code == 1
        assert out == ""
        assert "Invalid cell reference" in err

    def test_read_missing_sheet(self, capsys: pytest.CaptureFixture[str]) -> None:
        code, _, err = run(capsys, "read", "test_sheet", "A1", "--sheet", "Nope")
        assert code == 1
        assert "Nope" in err


class TestWrite:
    def test_write(self, capsys: pytest.CaptureFixture[str]) -> None:
        code, out, _ = run(capsys, "write", "test_sheet", "A1=Hello", "B2=a=b")
        assert code == 0
        assert json.loads(out)["totalUpdatedCells"] == 2

    def test_write_malformed_pair(self, capsys: pytest.CaptureFixture[str]) -> None:
        code, _, err = run(capsys, "write", "test_sheet", "A1")
        assert code == 1
        assert "CELL=VALUE" in err

    def test_write_blank_value(self, capsys: pytest.CaptureFixture[str]) -> None:
        code, _, err = run(capsys, "write", "test_sheet", "A1=")
        assert code == 1
        assert "cannot be blank" in err


class TestStructure:
    def test_clear(self, capsys: pytest.CaptureFixture[str]) -> None:
        code, out, _ = run(capsys, "clear", "test_sheet", "A1:B2")
        assert code == 0
        assert json.loads(out)["clearedRange"] == "Sheet1!A1:B2"

    @pytest.mark.parametrize(
        "command", ["insert-row", "delete-row", "insert-column", "delete-column"]
    )
    def test_dimension_commands(
        self, capsys: pytest.CaptureFixture[str], command: str
    ) -> None:
        code, out, _ = run(capsys, command, "test_sheet", "3")
        assert code == 0
        assert json.loads(out)["spreadsheetId"] == "test_sheet"

    def test_dimension_invalid_index(self, capsys: pytest.CaptureFixture[str]) -> None:
        code, _, _ = run(capsys, "insert-row", "test_sheet", "0")
        assert code == 1


class TestProtect:
    def test_protect_sheet(self, capsys: pytest.CaptureFixture[str]) -> None:
        code, out, _ = run(capsys, "protect", "test_sheet")
        assert code == 0
        assert json.loads(out)["replies"] == [{}]

    def test_protect_range(self, capsys: pytest.CaptureFixture[str]) -> None:
        code, _, _ = run(capsys, "protect", "test_sheet", "A1", "C10")
        assert code == 0

    def test_protect_needs_both_ends(self, capsys: pytest.CaptureFixture[str]) -> None:
        code, _, err = run(capsys, "protect", "test_sheet", "A1")
        assert code == 1
        assert "both start and end" in err

    def test_unprotect(self, capsys: pytest.CaptureFixture[str]) -> None:
        code, out, _ = run(capsys, "unprotect", "test_sheet", "--sheet", "Q3 Data")
        assert code == 0
        assert len(json.loads(out)["replies"]) == 2


class TestAuthentication:
    def test_missing_token(
        self, capsys: pytest.CaptureFixture[str], monkeypatch: pytest.MonkeyPatch
    ) -> None:
        monkeypatch.delenv("GSHEETSYNC_ACCESS_TOKEN", raising=False)
        code = main(["read", "test_sheet", "A1"])
        assert code == 1
        assert "No access token" in capsys.readouterr().err
