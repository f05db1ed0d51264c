# SPDX-License-Identifier: BSL-1.1
# Copyright (c) 2026 MuVeraAI Corporation
"""Shared fixtures for budget-horizon tests."""

from __future__ import annotations

from datetime import datetime
from typing import Any, Callable

import pytest

from budget_horizon.repository import BudgetHorizonRepository
from budget_horizon.storage.memory import MemoryTabularStore

FIXED_NOW = datetime(2025, 1, 15, 9, 30)


def meta_rows(start: str | None = None, months: str | None = None, **extra: str) -> list[list[str]]:
    """Build ``_meta`` rows with optional horizon keys and unrelated keys."""
    rows = [["key", "value"]]
    for key, value in extra.items():
        rows.append([key, value])
    if start is not None:
        rows.append(["horizon_start", start])
    if months is not None:
        rows.append(["horizon_month_count", months])
    return rows


@pytest.fixture
def fixed_now() -> Callable[[], datetime]:
    """A clock frozen at 2025-01-15."""
    return lambda: FIXED_NOW


@pytest.fixture
def empty_store() -> MemoryTabularStore:
    """A store with an empty meta tab and an empty grid tab."""
    return MemoryTabularStore({"_meta": meta_rows(), "budget_horizon": []})


@pytest.fixture
def make_repository(
    fixed_now: Callable[[], datetime],
) -> Callable[..., tuple[BudgetHorizonRepository, MemoryTabularStore]]:
    """Factory returning a repository over a seeded memory store."""

    def _make(
        meta: list[list[str]] | None = None,
        grid: list[list[Any]] | None = None,
    ) -> tuple[BudgetHorizonRepository, MemoryTabularStore]:
        store = MemoryTabularStore(
            {
                "_meta": meta if meta is not None else meta_rows(),
                "budget_horizon": grid if grid is not None else [],
            }
        )
        sleeps: list[float] = []
        repository = BudgetHorizonRepository(store, now=fixed_now, sleep=sleeps.append)
        return repository, store

    return _make
