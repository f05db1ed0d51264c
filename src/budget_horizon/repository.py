# SPDX-License-Identifier: BSL-1.1
# Copyright (c) 2026 MuVeraAI Corporation

from __future__ import annotations

import logging
import time
from collections.abc import Iterable, Mapping
from datetime import datetime
from typing import Any, Callable, TypeVar

from budget_horizon.codec import decode_grid, encode_grid, grid_extent, pad_grid
from budget_horizon.config import BudgetHorizonConfig
from budget_horizon.horizon import build_month_sequence, ensure_metadata, normalize_input_metadata
from budget_horizon.meta import MetaRepository
from budget_horizon.records import coerce_records, group_records, materialize_records
from budget_horizon.resize import reshape_matrix
from budget_horizon.retry import execute_with_retry
from budget_horizon.schema import build_header_row, build_range
from budget_horizon.storage.interface import TabularStore
from budget_horizon.types import (
    BudgetPlanRecord,
    CategoryMap,
    HorizonLoadResult,
    HorizonMetadata,
    MatrixSnapshot,
)

T = TypeVar("T")

logger = logging.getLogger("budget_horizon.repository")

Extent = tuple[int, int]


class BudgetHorizonRepository:
    """
    Storage engine for the per-category monthly budget grid.

    Design contract
    ---------------
    - Nothing is cached. Every operation re-reads the metadata and the
      whole grid, recomputes the whole target matrix, and rewrites the
      whole grid.
    - Writes are two independent calls: metadata first, then the grid.
      There is no transaction. A failure between them leaves the store
      mismatched; re-running the same operation repairs it because both
      writes fully overwrite their targets.
    - Caller-supplied metadata is validated before any store call and is
      never substituted. Unusable stored metadata falls back to defaults.
    - Shrinking the horizon drops the months outside the new window.
      Confirming that with the user is the caller's job.
    - ``rollover_balance`` is always zero here.

    Usage
    -----
    ::

        repository = BudgetHorizonRepository(SheetsTabularStore(service, spreadsheet_id))
        result = repository.load()
        repository.expand_horizon({"start": "2025-01-01", "month_count": 18})
    """

    def __init__(
        self,
        store: TabularStore,
        config: BudgetHorizonConfig | None = None,
        now: Callable[[], datetime] = datetime.now,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        self._store = store
        self._config = config or BudgetHorizonConfig()
        self._now = now
        self._sleep = sleep
        self._meta = MetaRepository(store, self._config, sleep=sleep)

    @property
    def config(self) -> BudgetHorizonConfig:
        return self._config

    # ─── Store access ─────────────────────────────────────────────────────────

    def _call(self, run: Callable[[], T], description: str) -> T:
        return execute_with_retry(run, self._config.retry, sleep=self._sleep, description=description)

    def _read_grid(self) -> list[list[Any]]:
        title = self._config.sheet_title
        values = self._call(lambda: self._store.get_values(title), "grid read")
        logger.debug("Read %d rows from %s", len(values), title)
        return values

    def _write_grid(self, rows: list[list[str]], extent: Extent) -> None:
        padded = pad_grid(rows, *extent)
        range_name = build_range(len(padded[0]), len(padded), self._config.sheet_title)
        logger.debug("Writing %d rows to %s", len(rows), range_name)
        self._call(lambda: self._store.update_values(range_name, padded), "grid write")

    def _save_metadata(self, metadata: HorizonMetadata) -> None:
        self._meta.update(
            {
                self._config.start_key: metadata.start.isoformat(),
                self._config.month_count_key: str(metadata.month_count),
            }
        )

    # ─── Snapshots ────────────────────────────────────────────────────────────

    def _load(self) -> tuple[MatrixSnapshot, Extent]:
        metadata = ensure_metadata(self._meta.load(), self._now(), self._config)
        months = build_month_sequence(metadata)
        decoded = decode_grid(self._read_grid(), months, self._config.sheet_title)
        extent: Extent = (decoded.row_count, decoded.column_count)

        if decoded.needs_header:
            header = build_header_row(months)
            logger.info("Initializing %s header with %d months", self._config.sheet_title, len(months))
            self._write_grid([header], extent)
            extent = (max(extent[0], 1), max(extent[1], len(header)))

        snapshot = MatrixSnapshot(
            metadata=metadata,
            months=months,
            category_order=decoded.category_order,
            category_map=decoded.category_map,
        )
        return snapshot, extent

    def load_snapshot(self) -> MatrixSnapshot:
        """Read the current matrix, initializing an empty sheet's header."""
        snapshot, _ = self._load()
        return snapshot

    def _save_snapshot(
        self,
        category_order: list[str],
        category_map: CategoryMap,
        metadata: HorizonMetadata,
        extent: Extent,
    ) -> None:
        rows = encode_grid(category_order, category_map, build_month_sequence(metadata))
        self._save_metadata(metadata)
        self._write_grid(rows, extent)

    # ─── Public API ───────────────────────────────────────────────────────────

    def load(self) -> HorizonLoadResult:
        """Stored metadata plus one record per (category, month)."""
        snapshot, _ = self._load()
        return HorizonLoadResult(metadata=snapshot.metadata, records=materialize_records(snapshot))

    def list_records(self) -> list[BudgetPlanRecord]:
        snapshot, _ = self._load()
        return materialize_records(snapshot)

    def save(
        self,
        records: Iterable[BudgetPlanRecord | Mapping[str, Any]],
        metadata: HorizonMetadata | Mapping[str, Any],
    ) -> None:
        """
        Replace the whole grid with ``records`` over the target horizon.

        Records outside the target window are dropped. For duplicate
        (category, month) pairs the later record wins.
        """
        target = normalize_input_metadata(metadata)
        validated = coerce_records(records)
        months = build_month_sequence(target)
        category_order, category_map, dropped = group_records(validated, months)

        extent = grid_extent(self._read_grid())
        self._save_snapshot(category_order, category_map, target, extent)
        logger.info(
            "Saved %d categories over %d months starting %s (%d out-of-horizon records dropped)",
            len(category_order),
            target.month_count,
            target.start.isoformat(),
            dropped,
        )

    def apply_horizon(self, metadata: HorizonMetadata | Mapping[str, Any]) -> HorizonMetadata:
        """
        Reshape the stored grid onto a new horizon.

        Existing months are kept, new trailing months take each category's
        last known value, new leading months start at zero, and months
        outside the new window are dropped.
        """
        target = normalize_input_metadata(metadata)
        snapshot, extent = self._load()
        category_order, category_map = reshape_matrix(snapshot, build_month_sequence(target))
        self._save_snapshot(category_order, category_map, target, extent)
        logger.info(
            "Applied horizon %s x %d (was %s x %d) to %d categories",
            target.start.isoformat(),
            target.month_count,
            snapshot.metadata.start.isoformat(),
            snapshot.metadata.month_count,
            len(category_order),
        )
        return target

    def expand_horizon(self, metadata: HorizonMetadata | Mapping[str, Any]) -> HorizonMetadata:
        return self.apply_horizon(metadata)

    def shrink_horizon(self, metadata: HorizonMetadata | Mapping[str, Any]) -> HorizonMetadata:
        """Same as apply_horizon. Months outside the new window are lost."""
        return self.apply_horizon(metadata)

    def list(self) -> list[BudgetPlanRecord]:
        """Alias of list_records."""
        return self.list_records()

