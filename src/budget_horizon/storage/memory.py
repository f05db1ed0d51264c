# SPDX-License-Identifier: BSL-1.1
# Copyright (c) 2026 MuVeraAI Corporation

from __future__ import annotations

import re
from collections.abc import Mapping, Sequence
from typing import Any

from budget_horizon.errors import MissingSheetError
from budget_horizon.schema import column_letter_to_index
from budget_horizon.storage.interface import TabularStore, split_range

_CELL_PATTERN = re.compile(r"^([A-Za-z]+)(\d+)$")


def _parse_cell(reference: str) -> tuple[int, int]:
    match = _CELL_PATTERN.match(reference.strip())
    if match is None:
        raise ValueError(f"Invalid cell reference: {reference!r}")
    column = column_letter_to_index(match.group(1))
    row = int(match.group(2))
    if row <= 0:
        raise ValueError(f"Invalid cell reference: {reference!r}")
    return row - 1, column - 1


def parse_a1_range(range_name: str) -> tuple[str, tuple[int, int, int, int] | None]:
    """
    Parse an A1 range into the sheet title and zero-based bounds.

    Bounds are ``(first_row, first_column, last_row, last_column)``
    inclusive, or None when the whole sheet is addressed.
    """
    title, cells = split_range(range_name)
    if cells is None:
        return title, None
    start, _, end = cells.partition(":")
    first_row, first_column = _parse_cell(start)
    last_row, last_column = _parse_cell(end) if end else (first_row, first_column)
    if last_row < first_row or last_column < first_column:
        raise ValueError(f"Inverted range: {range_name!r}")
    return title, (first_row, first_column, last_row, last_column)


def _trim(rows: list[list[Any]]) -> list[list[Any]]:
    trimmed: list[list[Any]] = []
    for row in rows:
        cells = list(row)
        while cells and (cells[-1] is None or cells[-1] == ""):
            cells.pop()
        trimmed.append(cells)
    while trimmed and not trimmed[-1]:
        trimmed.pop()
    return trimmed


class MemoryTabularStore(TabularStore):
    """
    In-process spreadsheet — suitable for tests and local experiments.

    Reads trim trailing blank cells and rows the way the Sheets API does.
    Every read and write is recorded in ``reads`` and ``writes`` so tests
    can assert on the exact ranges used. All state is lost when the
    process exits.
    """

    def __init__(self, sheets: Mapping[str, Sequence[Sequence[Any]]] | None = None) -> None:
        self._sheets: dict[str, list[list[Any]]] = {}
        self.reads: list[str] = []
        self.writes: list[tuple[str, list[list[str]]]] = []
        for title, rows in (sheets or {}).items():
            self.add_sheet(title, rows)

    def add_sheet(self, title: str, rows: Sequence[Sequence[Any]] | None = None) -> None:
        self._sheets[title] = [list(row) for row in rows or []]

    def has_sheet(self, title: str) -> bool:
        return title in self._sheets

    def sheet_values(self, title: str) -> list[list[Any]]:
        """Trimmed copy of a whole sheet."""
        if title not in self._sheets:
            raise MissingSheetError(title)
        return _trim(self._sheets[title])

    def get_values(self, range_name: str) -> list[list[Any]]:
        self.reads.append(range_name)
        title, bounds = parse_a1_range(range_name)
        if title not in self._sheets:
            raise MissingSheetError(title)

        grid = self._sheets[title]
        if bounds is None:
            return _trim(grid)

        first_row, first_column, last_row, last_column = bounds
        window = [
            list(row[first_column : last_column + 1])
            for row in grid[first_row : last_row + 1]
        ]
        return _trim(window)

    def update_values(self, range_name: str, values: list[list[str]]) -> None:
        self.writes.append((range_name, [list(row) for row in values]))
        title, bounds = parse_a1_range(range_name)
        if title not in self._sheets:
            raise MissingSheetError(title)

        first_row, first_column = (bounds[0], bounds[1]) if bounds else (0, 0)
        if bounds is not None:
            height = bounds[2] - bounds[0] + 1
            width = bounds[3] - bounds[1] + 1
            if len(values) > height or any(len(row) > width for row in values):
                raise ValueError(f"Values exceed the requested range {range_name!r}")

        grid = self._sheets[title]
        for row_offset, row in enumerate(values):
            row_index = first_row + row_offset
            while len(grid) <= row_index:
                grid.append([])
            target = grid[row_index]
            for column_offset, value in enumerate(row):
                column_index = first_column + column_offset
                if len(target) <= column_index:
                    target.extend([""] * (column_index + 1 - len(target)))
                target[column_index] = value
