# SPDX-License-Identifier: BSL-1.1
# Copyright (c) 2026 MuVeraAI Corporation

"""
Row codec between the category x month matrix and the flat sheet grid.

Grid layout::

    category_id | 2025-01_amount | 2025-01_currency | 2025-02_amount | ...
    groceries   | 400            | EUR              | 420            | ...

The in-memory shape (``CategoryMap``) and the storage shape (rows of
strings) are kept apart: ``decode_grid`` and ``encode_grid`` are the only
crossing points.
"""

from __future__ import annotations

import math
import re
from collections.abc import Sequence
from dataclasses import dataclass, field
from typing import Any

from budget_horizon.errors import CellParseError, SchemaMismatchError
from budget_horizon.schema import build_header_row
from budget_horizon.types import CategoryMap, CategoryMonthEntry, MonthDescriptor

# Data rows start on sheet row 2, below the header.
FIRST_DATA_ROW = 2

# Plain ASCII decimal, optional sign and exponent. No underscores, no "inf".
_AMOUNT_PATTERN = re.compile(r"^[+-]?(?:[0-9]+(?:\.[0-9]*)?|\.[0-9]+)(?:[eE][+-]?[0-9]+)?$")


@dataclass(frozen=True)
class DecodedGrid:
    """
    Result of decoding a raw grid.

    Attributes:
        category_order: Category ids in first-seen row order.
        category_map: Entries for every current month of every category.
        needs_header: True when the sheet was uninitialized and the caller
            must write the generated header before continuing.
        row_count: Number of rows present in the raw grid.
        column_count: Widest row present in the raw grid.
    """

    category_order: list[str] = field(default_factory=list)
    category_map: CategoryMap = field(default_factory=dict)
    needs_header: bool = False
    row_count: int = 0
    column_count: int = 0


def normalize_row(row: Sequence[Any] | None, length: int) -> list[str]:
    """Pad or truncate a raw row to ``length`` string cells."""
    cells = list(row) if isinstance(row, (list, tuple)) else []
    normalized: list[str] = []
    for index in range(length):
        value = cells[index] if index < len(cells) else None
        if value is None:
            normalized.append("")
        elif isinstance(value, str):
            normalized.append(value)
        else:
            normalized.append(str(value))
    return normalized


def grid_extent(values: Sequence[Sequence[Any]]) -> tuple[int, int]:
    """Row count and widest row of a raw grid."""
    widths = [len(row) for row in values if isinstance(row, (list, tuple))]
    return len(values), max(widths, default=0)


def normalize_currency(value: str | None) -> str:
    return (value or "").strip().upper()


def parse_amount(value: str, *, category_id: str, month_key: str, row_number: int) -> float:
    """Read an amount cell. Blank cells read as zero."""
    trimmed = value.strip()
    if not trimmed:
        return 0.0
    if not _AMOUNT_PATTERN.match(trimmed):
        raise CellParseError(category_id, month_key, row_number, value)
    amount = float(trimmed)
    if not math.isfinite(amount):
        raise CellParseError(category_id, month_key, row_number, value)
    return amount


def format_amount(amount: float) -> str:
    """Render an amount without a trailing ``.0`` for whole numbers."""
    number = float(amount)
    if number.is_integer():
        return str(int(number))
    return repr(number)


def _is_uninitialized(raw_header: Sequence[Any] | None, data_rows: Sequence[Any]) -> bool:
    if data_rows:
        return False
    cells = normalize_row(raw_header, len(raw_header) if isinstance(raw_header, (list, tuple)) else 0)
    non_blank = [cell for cell in cells if cell.strip()]
    return len(non_blank) <= 1


def decode_grid(
    values: Sequence[Sequence[Any]],
    months: list[MonthDescriptor],
    sheet_title: str,
) -> DecodedGrid:
    """
    Parse a raw grid into category entries for the given months.

    An empty grid, or a mismatching header with no data rows and at most one
    non-blank header cell, decodes to an empty matrix with ``needs_header``
    set. Any other header mismatch raises SchemaMismatchError.
    Unparseable amounts raise CellParseError.
    """
    row_count, column_count = grid_extent(values)
    if not values:
        return DecodedGrid(needs_header=True)

    expected_header = build_header_row(months)
    width = len(expected_header)
    raw_header, data_rows = values[0], list(values[1:])
    header = normalize_row(raw_header, width)

    if header != expected_header:
        if _is_uninitialized(raw_header, data_rows):
            return DecodedGrid(needs_header=True, row_count=row_count, column_count=column_count)
        raise SchemaMismatchError(sheet_title, expected_header, header)

    category_order: list[str] = []
    category_map: CategoryMap = {}

    for offset, raw_row in enumerate(data_rows):
        row = normalize_row(raw_row, width)
        category_id = row[0].strip()
        if not category_id:
            continue

        if category_id not in category_map:
            category_map[category_id] = {}
            category_order.append(category_id)

        row_number = FIRST_DATA_ROW + offset
        month_map = category_map[category_id]
        for descriptor in months:
            amount_index = 1 + descriptor.index * 2
            month_map[descriptor.key] = CategoryMonthEntry(
                amount=parse_amount(
                    row[amount_index],
                    category_id=category_id,
                    month_key=descriptor.key,
                    row_number=row_number,
                ),
                currency=normalize_currency(row[amount_index + 1]),
            )

    return DecodedGrid(
        category_order=category_order,
        category_map=category_map,
        row_count=row_count,
        column_count=column_count,
    )


def encode_grid(
    category_order: list[str],
    category_map: CategoryMap,
    months: list[MonthDescriptor],
) -> list[list[str]]:
    """Header plus one row per category, zero-filling months without an entry."""
    rows: list[list[str]] = [build_header_row(months)]
    for category_id in category_order:
        month_map = category_map.get(category_id)
        if month_map is None:
            continue
        row = [category_id]
        for descriptor in months:
            entry = month_map.get(descriptor.key)
            row.append(format_amount(entry.amount) if entry else "0")
            row.append(entry.currency if entry else "")
        rows.append(row)
    return rows


def pad_grid(rows: list[list[str]], row_count: int, column_count: int) -> list[list[str]]:
    """
    Extend ``rows`` with blank cells so it covers at least the given extent.

    Used to blank out rows and columns left over from a larger previous
    grid. Blank rows are skipped on decode.
    """
    width = max([column_count, *(len(row) for row in rows)])
    height = max(row_count, len(rows))
    padded = [row + [""] * (width - len(row)) for row in rows]
    padded.extend([""] * width for _ in range(height - len(rows)))
    return padded
