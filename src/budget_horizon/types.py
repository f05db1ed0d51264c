# SPDX-License-Identifier: BSL-1.1
# Copyright (c) 2026 MuVeraAI Corporation

from __future__ import annotations

import re
from datetime import date, datetime

from pydantic import AliasChoices, BaseModel, Field, field_validator, model_validator

# ─── Limits ───────────────────────────────────────────────────────────────────

DEFAULT_MONTH_COUNT = 12
MAX_MONTH_COUNT = 120
ISO_DATE_PATTERN = re.compile(r"^\d{4}-\d{2}-\d{2}$")

# ─── Horizon ──────────────────────────────────────────────────────────────────


class HorizonMetadata(BaseModel, frozen=True):
    """
    The contiguous run of months tracked by the budget grid.

    ``start`` is always normalized to the first day of its month. Accepts
    ``months`` as an alternative input name for ``month_count``.
    """

    start: date
    month_count: int = Field(
        ...,
        ge=1,
        le=MAX_MONTH_COUNT,
        validation_alias=AliasChoices("month_count", "months"),
    )

    @field_validator("start", mode="before")
    @classmethod
    def start_must_be_iso_date(cls, value: object) -> object:
        if isinstance(value, datetime):
            return value.date()
        if isinstance(value, date):
            return value
        if isinstance(value, str):
            stripped = value.strip()
            if not ISO_DATE_PATTERN.match(stripped):
                raise ValueError("start must be formatted as YYYY-MM-DD")
            return date.fromisoformat(stripped)
        raise ValueError("start must be a date or a YYYY-MM-DD string")

    @field_validator("start")
    @classmethod
    def start_is_first_of_month(cls, value: date) -> date:
        return value.replace(day=1)

    @field_validator("month_count", mode="before")
    @classmethod
    def month_count_must_not_be_bool(cls, value: object) -> object:
        if isinstance(value, bool):
            raise ValueError("month_count must be an integer")
        return value


class MonthDescriptor(BaseModel, frozen=True):
    """One calendar month inside a horizon. Derived, never persisted."""

    key: str
    month: int = Field(..., ge=1, le=12)
    year: int
    index: int = Field(..., ge=0)


# ─── Matrix ───────────────────────────────────────────────────────────────────


class CategoryMonthEntry(BaseModel, frozen=True):
    """Planned amount for one (category, month) cell."""

    amount: float = 0.0
    currency: str = ""


EMPTY_ENTRY = CategoryMonthEntry()

CategoryMap = dict[str, dict[str, CategoryMonthEntry]]


class MatrixSnapshot(BaseModel):
    """
    In-memory category x month view reconstructed from the store.

    Lives for a single operation only; nothing caches it between calls.
    """

    metadata: HorizonMetadata
    months: list[MonthDescriptor]
    category_order: list[str] = Field(default_factory=list)
    category_map: CategoryMap = Field(default_factory=dict)

    @model_validator(mode="after")
    def order_entries_have_months(self) -> MatrixSnapshot:
        missing = [category_id for category_id in self.category_order if category_id not in self.category_map]
        if missing:
            raise ValueError(f"category_order references unmapped categories: {missing}")
        return self

    def entry(self, category_id: str, key: str) -> CategoryMonthEntry:
        """Return the entry for a cell, defaulting to an empty amount."""
        return self.category_map.get(category_id, {}).get(key, EMPTY_ENTRY)


# ─── Records ──────────────────────────────────────────────────────────────────


class BudgetPlanRecord(BaseModel):
    """Materialized, addressable form of one matrix cell."""

    record_id: str
    category_id: str = Field(..., min_length=1)
    month: int = Field(..., ge=1, le=12)
    year: int
    amount: float = Field(0.0, allow_inf_nan=False)
    currency: str = ""
    rollover_balance: float = 0.0

    @field_validator("category_id")
    @classmethod
    def category_id_must_not_be_blank(cls, value: str) -> str:
        stripped = value.strip()
        if not stripped:
            raise ValueError("category_id must not be blank")
        return stripped


class HorizonLoadResult(BaseModel):
    """Result of a full load: the stored metadata plus every record."""

    metadata: HorizonMetadata
    records: list[BudgetPlanRecord]
