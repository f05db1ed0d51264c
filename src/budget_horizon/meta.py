# SPDX-License-Identifier: BSL-1.1
# Copyright (c) 2026 MuVeraAI Corporation

"""
Key/value settings region shared with other subsystems.

The ``_meta`` tab holds a ``key | value`` header followed by one row per
setting. Other subsystems own most of the keys, so writers must always
load the full map, change only their own keys, and save the full map back.
"""

from __future__ import annotations

import logging
import time
from collections.abc import Mapping, Sequence
from typing import Any, Callable

from budget_horizon.config import BudgetHorizonConfig
from budget_horizon.errors import MissingSheetError
from budget_horizon.retry import execute_with_retry
from budget_horizon.schema import META_HEADERS, build_range
from budget_horizon.storage.interface import TabularStore

logger = logging.getLogger("budget_horizon.meta")


def parse_meta_rows(rows: Sequence[Sequence[Any]]) -> dict[str, str]:
    """Read key/value rows, skipping the header and rows without a key."""
    entries: dict[str, str] = {}
    for index, row in enumerate(rows):
        if not isinstance(row, (list, tuple)) or not row:
            continue
        key = row[0]
        value = row[1] if len(row) > 1 else ""
        if index == 0 and key == META_HEADERS[0]:
            continue
        if not isinstance(key, str) or not key.strip():
            continue
        entries[key] = value if isinstance(value, str) else ""
    return entries


def to_meta_rows(entries: Mapping[str, str]) -> list[list[str]]:
    rows: list[list[str]] = [list(META_HEADERS)]
    for key, value in entries.items():
        rows.append([key, value or ""])
    return rows


class MetaRepository:
    """
    Read-modify-write access to the shared key/value tab.

    A missing tab reads as an empty map; the caller falls back to defaults.
    """

    def __init__(
        self,
        store: TabularStore,
        config: BudgetHorizonConfig | None = None,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        self._store = store
        self._config = config or BudgetHorizonConfig()
        self._sleep = sleep

    @property
    def values_range(self) -> str:
        return build_range(len(META_HEADERS), self._config.meta_row_limit, self._config.meta_sheet_title)

    def load(self) -> dict[str, str]:
        try:
            rows = execute_with_retry(
                lambda: self._store.get_values(self.values_range),
                self._config.retry,
                sleep=self._sleep,
                description="meta read",
            )
        except MissingSheetError:
            logger.warning("Meta sheet %r is missing; using defaults", self._config.meta_sheet_title)
            return {}
        return parse_meta_rows(rows)

    def save(self, entries: Mapping[str, str]) -> None:
        rows = to_meta_rows(entries)
        range_name = build_range(len(META_HEADERS), len(rows), self._config.meta_sheet_title)
        logger.debug("Writing %d meta entries to %s", len(entries), range_name)
        execute_with_retry(
            lambda: self._store.update_values(range_name, rows),
            self._config.retry,
            sleep=self._sleep,
            description="meta write",
        )

    def update(self, changes: Mapping[str, str]) -> dict[str, str]:
        """Load every entry, apply ``changes``, and save the full map."""
        entries = self.load()
        entries.update(changes)
        self.save(entries)
        return entries
