"""Tests for gsheetsync.reconcile module."""

import pytest

from gsheetsync.a1 import CellAddress, CellRange, parse_cell_range
from gsheetsync.exceptions import InvalidRangeError
from gsheetsync.models import ValueRange
from gsheetsync.reconcile import extract_cell_values, reconcile


class TestReconcile:
    """Tests for placing grid cells by absolute coordinate."""

    def test_origin_matches_request(self) -> None:
        grid = [["", "Hello"], ["World", ""]]
        result = reconcile(CellAddress(1, 1), grid, parse_cell_range("A1:B2"))
        assert result == {"B1": "Hello", "A2": "World"}

    def test_offset_origin(self) -> None:
        result = reconcile(CellAddress(3, 5), [["X"]], parse_cell_range("C5:C5"))
        assert result == {"C5": "X"}

    def test_single_cell_requests_on_first_row(self) -> None:
        grid = [["", "Hello"], ["World", ""]]
        origin = CellAddress(1, 1)
        assert reconcile(origin, grid, parse_cell_range("B1")) == {"B1": "Hello"}
        assert reconcile(origin, grid, parse_cell_range("A1")) == {}

    def test_request_before_origin_is_empty(self) -> None:
        result = reconcile(CellAddress(3, 5), [["X"]], parse_cell_range("A1:B4"))
        assert result == {}

    def test_superset_grid_is_filtered(self) -> None:
        grid = [
            ["a1", "b1", "c1"],
            ["a2", "b2", "c2"],
            ["a3", "b3", "c3"],
        ]
        result = reconcile(CellAddress(1, 1), grid, parse_cell_range("B2:C3"))
        assert result == {"B2": "b2", "C2": "c2", "B3": "b3", "C3": "c3"}

    def test_grid_extending_past_request(self) -> None:
        grid = [["x"] * 5 for _ in range(5)]
        result = reconcile(CellAddress(2, 2), grid, parse_cell_range("B2:C3"))
        assert set(result) == {"B2", "C2", "B3", "C3"}

    def test_jagged_rows(self) -> None:
        grid = [["a"], ["b", "c", "d"], []]
        result = reconcile(CellAddress(1, 1), grid, parse_cell_range("A1:D3"))
        assert result == {"A1": "a", "A2": "b", "B2": "c", "C2": "d"}

    def test_blank_and_whitespace_dropped(self) -> None:
        grid = [["", " ", "\t", "ok"]]
        result = reconcile(CellAddress(1, 1), grid, parse_cell_range("A1:D1"))
        assert result == {"D1": "ok"}

    def test_values_keep_surrounding_whitespace(self) -> None:
        result = reconcile(CellAddress(1, 1), [[" padded "]], parse_cell_range("A1"))
        assert result == {"A1": " padded "}

    def test_every_key_inside_request(self) -> None:
        grid = [[f"{r},{c}" for c in range(10)] for r in range(10)]
        requested = parse_cell_range("C4:F7")
        result = reconcile(CellAddress(2, 3), grid, requested)
        for key in result:
            cell = parse_cell_range(key).start
            assert requested.contains(cell.column, cell.row)

    def test_empty_grid(self) -> None:
        assert reconcile(CellAddress(1, 1), [], parse_cell_range("A1:Z100")) == {}

    def test_inverted_request_rejected(self) -> None:
        # Built without __post_init__ validation to reach the guard.
        inverted = object.__new__(CellRange)
        object.__setattr__(inverted, "start", CellAddress(3, 3))
        object.__setattr__(inverted, "end", CellAddress(1, 1))
        with pytest.raises(InvalidRangeError):
            reconcile(CellAddress(1, 1), [["x"]], inverted)


class TestExtractCellValues:
    """Tests for reconciling values.get responses."""

    def test_from_response(self) -> None:
        value_range = ValueRange.from_api(
            {
                "range": "Sheet1!A1:C3",
                "majorDimension": "ROWS",
                "values": [["Name", "Age"], ["Alice", 30]],
            }
        )
        result = extract_cell_values(value_range, parse_cell_range("A1:C3"))
        assert result == {"A1": "Name", "B1": "Age", "A2": "Alice", "B2": "30"}

    def test_missing_values_is_empty(self) -> None:
        value_range = ValueRange.from_api({"range": "Sheet1!A1:C3"})
        assert extract_cell_values(value_range, parse_cell_range("A1:C3")) == {}

    def test_missing_values_needs_no_origin(self) -> None:
        value_range = ValueRange(range="not a sheet range")
        assert extract_cell_values(value_range, parse_cell_range("A1")) == {}

    def test_quoted_sheet_origin(self) -> None:
        value_range = ValueRange(range="'My Sheet'!D4:E5", values=(("x", "y"),))
        result = extract_cell_values(value_range, parse_cell_range("E4"))
        assert result == {"E4": "y"}

    def test_unparseable_origin(self) -> None:
        value_range = ValueRange(range="A1:B2", values=(("x",),))
        with pytest.raises(InvalidRangeError):
            extract_cell_values(value_range, parse_cell_range("A1"))
