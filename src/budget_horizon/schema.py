# SPDX-License-Identifier: BSL-1.1
# Copyright (c) 2026 MuVeraAI Corporation

from __future__ import annotations

from budget_horizon.types import MonthDescriptor

CATEGORY_ID_HEADER = "category_id"
META_HEADERS: tuple[str, str] = ("key", "value")


def column_index_to_letter(index: int) -> str:
    """
    Convert a 1-based column index to spreadsheet letters.

    1 -> A, 26 -> Z, 27 -> AA, 703 -> AAA.
    Raises ValueError for non-positive indexes.
    """
    if index <= 0:
        raise ValueError(f"Column index must be positive, got {index!r}")

    letters = ""
    current = index
    while current > 0:
        current, remainder = divmod(current - 1, 26)
        letters = chr(ord("A") + remainder) + letters
    return letters


def column_letter_to_index(letters: str) -> int:
    """Inverse of column_index_to_letter. Raises ValueError on bad input."""
    normalized = letters.strip().upper()
    if not normalized or not normalized.isalpha() or not normalized.isascii():
        raise ValueError(f"Invalid column letters: {letters!r}")

    index = 0
    for letter in normalized:
        index = index * 26 + (ord(letter) - ord("A") + 1)
    return index


def build_header_row(months: list[MonthDescriptor]) -> list[str]:
    """``category_id`` followed by an amount/currency column pair per month."""
    headers = [CATEGORY_ID_HEADER]
    for descriptor in months:
        headers.append(f"{descriptor.key}_amount")
        headers.append(f"{descriptor.key}_currency")
    return headers


def build_range(column_count: int, row_count: int, sheet_title: str) -> str:
    """A1 range anchored at the top-left cell, at least one cell wide and tall."""
    last_column = column_index_to_letter(max(column_count, 1))
    return f"{sheet_title}!A1:{last_column}{max(row_count, 1)}"
