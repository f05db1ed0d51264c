# SPDX-License-Identifier: BSL-1.1
# Copyright (c) 2026 MuVeraAI Corporation
from __future__ import annotations

from typing import Annotated

from pydantic import BaseModel, Field

from budget_horizon.types import DEFAULT_MONTH_COUNT, MAX_MONTH_COUNT

RETRYABLE_STATUS_CODES: frozenset[int] = frozenset({408, 425, 429, 500, 502, 503, 504})


class RetryPolicy(BaseModel, frozen=True):
    """
    Backoff settings applied to every store call.

    Attributes:
        max_attempts: Total attempts including the first one.
        base_delay_seconds: Delay before the first retry. Doubles on each
            subsequent retry.
        max_delay_seconds: Upper bound for a single delay before jitter.
        retry_status_codes: Status codes treated as transient. Errors
            without a recognisable status are never retried.
    """

    max_attempts: Annotated[int, Field(ge=1)] = 5
    base_delay_seconds: Annotated[float, Field(ge=0)] = 0.2
    max_delay_seconds: Annotated[float, Field(ge=0)] = 5.0
    retry_status_codes: frozenset[int] = RETRYABLE_STATUS_CODES


class BudgetHorizonConfig(BaseModel, frozen=True):
    """
    Top-level configuration for a BudgetHorizonRepository.

    All fields are optional. The defaults match the tab layout created by
    the spreadsheet bootstrap flow.

    Example::

        config = BudgetHorizonConfig(
            sheet_title="budget_horizon",
            retry=RetryPolicy(max_attempts=3),
        )
        repository = BudgetHorizonRepository(store, config=config)

    Attributes:
        sheet_title: Tab holding the category x month grid.
        meta_sheet_title: Tab holding the shared key/value settings.
        meta_row_limit: Number of rows read from the key/value tab.
        start_key: Metadata key for the horizon start date.
        month_count_key: Metadata key for the horizon length.
        default_month_count: Length used when the stored value is unusable.
        retry: Backoff policy for store calls.
    """

    sheet_title: str = Field("budget_horizon", min_length=1)
    meta_sheet_title: str = Field("_meta", min_length=1)
    meta_row_limit: Annotated[int, Field(gt=1)] = 100
    start_key: str = Field("horizon_start", min_length=1)
    month_count_key: str = Field("horizon_month_count", min_length=1)
    default_month_count: Annotated[int, Field(ge=1, le=MAX_MONTH_COUNT)] = DEFAULT_MONTH_COUNT
    retry: RetryPolicy = Field(default_factory=RetryPolicy)
