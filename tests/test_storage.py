# SPDX-License-Identifier: BSL-1.1
# Copyright (c) 2026 MuVeraAI Corporation
"""Tests for the tabular store backends."""

from __future__ import annotations

from typing import Any

import pytest

from budget_horizon.errors import MissingSheetError
from budget_horizon.storage.interface import split_range
from budget_horizon.storage.memory import MemoryTabularStore, parse_a1_range
from budget_horizon.storage.sheets import SheetsTabularStore


# ---------------------------------------------------------------------------
# TestRangeParsing
# ---------------------------------------------------------------------------


class TestRangeParsing:
    def test_split_range_with_cells(self) -> None:
        assert split_range("_meta!A1:B100") == ("_meta", "A1:B100")

    def test_split_range_bare_title(self) -> None:
        assert split_range("budget_horizon") == ("budget_horizon", None)

    def test_split_range_unquotes_title(self) -> None:
        assert split_range("'Plan ''25'!A1") == ("Plan '25", "A1")

    def test_parse_a1_range_bounds(self) -> None:
        assert parse_a1_range("s!B2:AA10") == ("s", (1, 1, 9, 26))

    def test_parse_single_cell(self) -> None:
        assert parse_a1_range("s!C3") == ("s", (2, 2, 2, 2))

    @pytest.mark.parametrize("range_name", ["s!A0:B1", "s!B2:A1", "s!1A", "s!A1:9"])
    def test_invalid_ranges_raise(self, range_name: str) -> None:
        with pytest.raises(ValueError):
            parse_a1_range(range_name)


# ---------------------------------------------------------------------------
# TestMemoryTabularStore
# ---------------------------------------------------------------------------


class TestMemoryTabularStore:
    def test_whole_sheet_read_trims_trailing_blanks(self) -> None:
        store = MemoryTabularStore({"s": [["a", "b", ""], ["", ""], ["c"], ["", None]]})
        assert store.get_values("s") == [["a", "b"], [], ["c"]]

    def test_range_read_returns_window(self) -> None:
        store = MemoryTabularStore({"s": [["a", "b", "c"], ["d", "e", "f"], ["g", "h", "i"]]})
        assert store.get_values("s!B2:C3") == [["e", "f"], ["h", "i"]]

    def test_reads_past_the_grid_are_empty(self) -> None:
        store = MemoryTabularStore({"s": [["a"]]})
        assert store.get_values("s!A5:B9") == []

    def test_update_writes_from_top_left_and_grows(self) -> None:
        store = MemoryTabularStore({"s": []})
        store.update_values("s!B2:C3", [["x", "y"], ["z"]])
        assert store.sheet_values("s") == [[], ["", "x", "y"], ["", "z"]]

    def test_update_overwrites_only_written_cells(self) -> None:
        store = MemoryTabularStore({"s": [["a", "b", "c"], ["d", "e", "f"]]})
        store.update_values("s!A1:B1", [["1", "2"]])
        assert store.sheet_values("s") == [["1", "2", "c"], ["d", "e", "f"]]

    def test_update_larger_than_range_raises(self) -> None:
        store = MemoryTabularStore({"s": []})
        with pytest.raises(ValueError, match="exceed"):
            store.update_values("s!A1:A1", [["1", "2"]])

    def test_missing_sheet_raises_on_read_and_write(self) -> None:
        store = MemoryTabularStore()
        with pytest.raises(MissingSheetError) as excinfo:
            store.get_values("nope!A1:B2")
        assert excinfo.value.sheet_title == "nope"
        with pytest.raises(MissingSheetError):
            store.update_values("nope!A1", [["x"]])

    def test_calls_are_recorded(self) -> None:
        store = MemoryTabularStore({"s": []})
        store.get_values("s")
        store.update_values("s!A1:A1", [["x"]])
        assert store.reads == ["s"]
        assert store.writes == [("s!A1:A1", [["x"]])]


# ---------------------------------------------------------------------------
# TestSheetsTabularStore
# ---------------------------------------------------------------------------


class _Request:
    def __init__(self, result: Any = None, error: Exception | None = None) -> None:
        self._result = result
        self._error = error

    def execute(self) -> Any:
        if self._error is not None:
            raise self._error
        return self._result


class _Values:
    def __init__(self, response: Any = None, error: Exception | None = None) -> None:
        self.response = response
        self.error = error
        self.calls: list[tuple[str, dict[str, Any]]] = []

    def get(self, **kwargs: Any) -> _Request:
        self.calls.append(("get", kwargs))
        return _Request(self.response, self.error)

    def update(self, **kwargs: Any) -> _Request:
        self.calls.append(("update", kwargs))
        return _Request({"updatedCells": 1}, self.error)


class _Spreadsheets:
    def __init__(self, values: _Values) -> None:
        self._values = values

    def values(self) -> _Values:
        return self._values


class _Service:
    def __init__(self, values: _Values) -> None:
        self._spreadsheets = _Spreadsheets(values)

    def spreadsheets(self) -> _Spreadsheets:
        return self._spreadsheets


class TestSheetsTabularStore:
    def test_get_values_passes_spreadsheet_and_range(self) -> None:
        values = _Values(response={"range": "s!A1:B2", "values": [["a", "b"]]})
        store = SheetsTabularStore(_Service(values), " sheet-123 ")

        assert store.get_values("s!A1:B2") == [["a", "b"]]
        assert values.calls == [("get", {"spreadsheetId": "sheet-123", "range": "s!A1:B2"})]

    def test_get_values_without_values_key_is_empty(self) -> None:
        store = SheetsTabularStore(_Service(_Values(response={"range": "s!A1:B2"})), "id")
        assert store.get_values("s!A1:B2") == []

    def test_update_values_uses_raw_input(self) -> None:
        values = _Values()
        store = SheetsTabularStore(_Service(values), "id")
        store.update_values("s!A1:B1", [["a", "b"]])
        assert values.calls == [
            (
                "update",
                {
                    "spreadsheetId": "id",
                    "range": "s!A1:B1",
                    "valueInputOption": "RAW",
                    "body": {"values": [["a", "b"]]},
                },
            )
        ]

    def test_unparseable_range_maps_to_missing_sheet(self) -> None:
        error = RuntimeError("Unable to parse range: _meta!A1:B100")
        store = SheetsTabularStore(_Service(_Values(error=error)), "id")
        with pytest.raises(MissingSheetError) as excinfo:
            store.get_values("_meta!A1:B100")
        assert excinfo.value.__cause__ is error

    def test_write_to_missing_tab_maps_to_missing_sheet(self) -> None:
        error = RuntimeError("Unable to parse range: _meta!A1:B3")
        store = SheetsTabularStore(_Service(_Values(error=error)), "id")
        with pytest.raises(MissingSheetError) as excinfo:
            store.update_values("_meta!A1:B3", [["key", "value"]])
        assert excinfo.value.sheet_title == "_meta"
        assert excinfo.value.__cause__ is error

    def test_other_write_errors_propagate(self) -> None:
        store = SheetsTabularStore(_Service(_Values(error=RuntimeError("quota"))), "id")
        with pytest.raises(RuntimeError, match="quota"):
            store.update_values("s!A1:A1", [["x"]])

    def test_other_errors_propagate(self) -> None:
        store = SheetsTabularStore(_Service(_Values(error=RuntimeError("quota"))), "id")
        with pytest.raises(RuntimeError, match="quota"):
            store.get_values("s!A1:B2")

    def test_blank_spreadsheet_id_rejected(self) -> None:
        with pytest.raises(ValueError, match="spreadsheet_id"):
            SheetsTabularStore(_Service(_Values()), "  ")
