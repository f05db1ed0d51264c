# SPDX-License-Identifier: BSL-1.1
# Copyright (c) 2026 MuVeraAI Corporation

"""
budget-horizon — monthly category budgets stored in a spreadsheet grid.

Quick start::

    from budget_horizon import BudgetHorizonRepository, MemoryTabularStore

    store = MemoryTabularStore({"_meta": [["key", "value"]], "budget_horizon": []})
    repository = BudgetHorizonRepository(store)

    result = repository.load()
    repository.expand_horizon({"start": "2025-01-01", "month_count": 18})
"""

from budget_horizon.codec import decode_grid, encode_grid
from budget_horizon.config import RETRYABLE_STATUS_CODES, BudgetHorizonConfig, RetryPolicy
from budget_horizon.errors import (
    BudgetHorizonError,
    CellParseError,
    HorizonValidationError,
    MissingSheetError,
    SchemaMismatchError,
)
from budget_horizon.horizon import (
    build_month_sequence,
    default_start,
    ensure_metadata,
    month_key,
    normalize_input_metadata,
)
from budget_horizon.meta import MetaRepository
from budget_horizon.records import create_record_id, group_records, materialize_records
from budget_horizon.repository import BudgetHorizonRepository
from budget_horizon.resize import carry_forward, reshape_matrix
from budget_horizon.retry import execute_with_retry
from budget_horizon.schema import build_header_row, build_range, column_index_to_letter
from budget_horizon.service import BudgetPlanPayload, BudgetPlanService, parse_metadata_payload
from budget_horizon.storage import MemoryTabularStore, SheetsTabularStore, TabularStore
from budget_horizon.types import (
    DEFAULT_MONTH_COUNT,
    MAX_MONTH_COUNT,
    BudgetPlanRecord,
    CategoryMonthEntry,
    HorizonLoadResult,
    HorizonMetadata,
    MatrixSnapshot,
    MonthDescriptor,
)

__all__ = [
    # Core classes
    "BudgetHorizonRepository",
    "BudgetPlanService",
    "MetaRepository",
    # Types
    "HorizonMetadata",
    "MonthDescriptor",
    "CategoryMonthEntry",
    "MatrixSnapshot",
    "BudgetPlanRecord",
    "HorizonLoadResult",
    "BudgetPlanPayload",
    "DEFAULT_MONTH_COUNT",
    "MAX_MONTH_COUNT",
    # Config
    "BudgetHorizonConfig",
    "RetryPolicy",
    "RETRYABLE_STATUS_CODES",
    # Errors
    "BudgetHorizonError",
    "HorizonValidationError",
    "SchemaMismatchError",
    "CellParseError",
    "MissingSheetError",
    # Storage
    "TabularStore",
    "MemoryTabularStore",
    "SheetsTabularStore",
    # Utilities
    "build_month_sequence",
    "ensure_metadata",
    "normalize_input_metadata",
    "month_key",
    "default_start",
    "build_header_row",
    "build_range",
    "column_index_to_letter",
    "decode_grid",
    "encode_grid",
    "carry_forward",
    "reshape_matrix",
    "create_record_id",
    "materialize_records",
    "group_records",
    "execute_with_retry",
    "parse_metadata_payload",
]
