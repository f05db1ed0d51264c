# SPDX-License-Identifier: BSL-1.1
# Copyright (c) 2026 MuVeraAI Corporation

from __future__ import annotations

from budget_horizon.types import (
    EMPTY_ENTRY,
    CategoryMap,
    CategoryMonthEntry,
    MatrixSnapshot,
    MonthDescriptor,
)


def category_universe(snapshot: MatrixSnapshot) -> list[str]:
    """Categories in recorded order, falling back to the map's keys."""
    if snapshot.category_order:
        return list(snapshot.category_order)
    return list(snapshot.category_map.keys())


def carry_forward(
    existing: dict[str, CategoryMonthEntry],
    target_months: list[MonthDescriptor],
) -> dict[str, CategoryMonthEntry]:
    """
    Rebuild one category's entries over ``target_months``.

    Walks the target months in order. A month already present is copied
    and becomes the last known value; a missing month takes the last known
    value, or zero when nothing earlier in the walk was known. Months
    outside the target window are dropped.
    """
    result: dict[str, CategoryMonthEntry] = {}
    last_known: CategoryMonthEntry | None = None

    for descriptor in target_months:
        entry = existing.get(descriptor.key)
        if entry is not None:
            last_known = entry
            result[descriptor.key] = entry
        elif last_known is not None:
            result[descriptor.key] = last_known
        else:
            result[descriptor.key] = EMPTY_ENTRY

    return result


def reshape_matrix(
    snapshot: MatrixSnapshot,
    target_months: list[MonthDescriptor],
) -> tuple[list[str], CategoryMap]:
    """
    Reshape a snapshot onto a new month sequence.

    Returns the category order and the rebuilt category map. The input
    snapshot is not modified.
    """
    category_order = category_universe(snapshot)
    category_map: CategoryMap = {
        category_id: carry_forward(snapshot.category_map.get(category_id, {}), target_months)
        for category_id in category_order
    }
    return category_order, category_map
