# SPDX-License-Identifier: BSL-1.1
# Copyright (c) 2026 MuVeraAI Corporation

from __future__ import annotations

from collections.abc import Iterable, Mapping
from typing import Any

from pydantic import ValidationError

from budget_horizon.codec import normalize_currency
from budget_horizon.errors import HorizonValidationError
from budget_horizon.horizon import month_key
from budget_horizon.types import (
    BudgetPlanRecord,
    CategoryMap,
    CategoryMonthEntry,
    MatrixSnapshot,
    MonthDescriptor,
)


def create_record_id(category_id: str, key: str) -> str:
    """Deterministic id for one (category, month) cell."""
    return f"budget_{category_id}_{key}"


def materialize_records(snapshot: MatrixSnapshot) -> list[BudgetPlanRecord]:
    """
    Flatten a snapshot into one record per (category, month) pair.

    Categories follow ``category_order`` and months follow the horizon, so
    unchanged data always materializes to the same list with the same ids.
    ``rollover_balance`` is always zero here.
    """
    records: list[BudgetPlanRecord] = []
    for category_id in snapshot.category_order:
        if category_id not in snapshot.category_map:
            continue
        for descriptor in snapshot.months:
            entry = snapshot.entry(category_id, descriptor.key)
            records.append(
                BudgetPlanRecord(
                    record_id=create_record_id(category_id, descriptor.key),
                    category_id=category_id,
                    month=descriptor.month,
                    year=descriptor.year,
                    amount=entry.amount,
                    currency=entry.currency,
                    rollover_balance=0.0,
                )
            )
    return records


def group_records(
    records: Iterable[BudgetPlanRecord],
    months: list[MonthDescriptor],
) -> tuple[list[str], CategoryMap, int]:
    """
    Group records into a category map restricted to ``months``.

    Records dated outside the horizon are dropped. New categories keep
    their first-seen order. A later record for the same (category, month)
    silently replaces an earlier one.

    Returns the category order, the map, and how many records were dropped.
    """
    window = {descriptor.key for descriptor in months}
    category_order: list[str] = []
    category_map: CategoryMap = {}
    dropped = 0

    for record in records:
        key = month_key(record.year, record.month)
        if key not in window:
            dropped += 1
            continue

        if record.category_id not in category_map:
            category_map[record.category_id] = {}
            category_order.append(record.category_id)

        category_map[record.category_id][key] = CategoryMonthEntry(
            amount=record.amount,
            currency=normalize_currency(record.currency),
        )

    return category_order, category_map, dropped


def coerce_records(records: Iterable[BudgetPlanRecord | Mapping[str, Any]]) -> list[BudgetPlanRecord]:
    """Validate caller records, accepting models or plain mappings."""
    validated: list[BudgetPlanRecord] = []
    for position, record in enumerate(records):
        if isinstance(record, BudgetPlanRecord):
            validated.append(record)
            continue
        try:
            validated.append(BudgetPlanRecord.model_validate(record))
        except ValidationError as exc:
            raise HorizonValidationError(
                f"Invalid budget plan record at position {position}: {exc.error_count()} error(s)"
            ) from exc
    return validated
