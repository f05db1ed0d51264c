# SPDX-License-Identifier: BSL-1.1
# Copyright (c) 2026 MuVeraAI Corporation

from __future__ import annotations

import logging
from collections.abc import Mapping
from datetime import date, datetime
from typing import Any

from pydantic import ValidationError

from budget_horizon.config import BudgetHorizonConfig
from budget_horizon.errors import HorizonValidationError
from budget_horizon.types import (
    ISO_DATE_PATTERN,
    MAX_MONTH_COUNT,
    HorizonMetadata,
    MonthDescriptor,
)

logger = logging.getLogger("budget_horizon.horizon")


def month_key(year: int, month: int) -> str:
    """Format a ``YYYY-MM`` key."""
    return f"{year}-{month:02d}"


def default_start(now: datetime) -> date:
    """First day of the month containing ``now``."""
    return date(now.year, now.month, 1)


def _parse_stored_start(raw: str | None) -> date | None:
    if raw is None:
        return None
    stripped = raw.strip()
    if not ISO_DATE_PATTERN.match(stripped):
        return None
    try:
        return date.fromisoformat(stripped).replace(day=1)
    except ValueError:
        return None


def _parse_stored_month_count(raw: str | None) -> int | None:
    if raw is None:
        return None
    try:
        return int(raw.strip())
    except ValueError:
        return None


def ensure_metadata(
    entries: Mapping[str, str],
    now: datetime,
    config: BudgetHorizonConfig | None = None,
) -> HorizonMetadata:
    """
    Derive usable horizon metadata from the stored key/value entries.

    Storage corruption is tolerated: an unusable start falls back to the
    first of the current month, an unusable month count falls back to the
    configured default, and the count is clamped into ``[1, 120]``.
    Never raises.
    """
    config = config or BudgetHorizonConfig()
    raw_start = entries.get(config.start_key)
    raw_months = entries.get(config.month_count_key)

    start = _parse_stored_start(raw_start)
    if start is None:
        if raw_start is not None:
            logger.warning("Stored horizon start %r is malformed; using current month", raw_start)
        start = default_start(now)

    month_count = _parse_stored_month_count(raw_months)
    if month_count is None:
        if raw_months is not None:
            logger.warning(
                "Stored horizon month count %r is malformed; using %d",
                raw_months,
                config.default_month_count,
            )
        month_count = config.default_month_count

    return HorizonMetadata(start=start, month_count=min(max(month_count, 1), MAX_MONTH_COUNT))


def _describe_validation_error(exc: ValidationError) -> str:
    details = "; ".join(
        f"{'.'.join(str(part) for part in error['loc']) or 'metadata'}: {error['msg']}"
        for error in exc.errors()
    )
    return f"Invalid budget horizon ({details})"


def normalize_input_metadata(metadata: HorizonMetadata | Mapping[str, Any]) -> HorizonMetadata:
    """
    Validate caller-supplied horizon metadata.

    Unlike ``ensure_metadata`` nothing is substituted: a malformed start or
    a month count outside ``[1, 120]`` raises HorizonValidationError.
    """
    if isinstance(metadata, HorizonMetadata):
        payload: Any = {"start": metadata.start, "month_count": metadata.month_count}
    elif isinstance(metadata, Mapping):
        payload = dict(metadata)
    else:
        raise HorizonValidationError(
            f"Invalid budget horizon: expected metadata, got {type(metadata).__name__}"
        )

    try:
        return HorizonMetadata.model_validate(payload)
    except ValidationError as exc:
        raise HorizonValidationError(_describe_validation_error(exc)) from exc


def build_month_sequence(metadata: HorizonMetadata) -> list[MonthDescriptor]:
    """
    Expand metadata into ``month_count`` consecutive month descriptors.

    Year boundaries roll over, so a November start with four months yields
    Nov, Dec, Jan, Feb.
    """
    try:
        base_year = int(metadata.start.year)
        base_month = int(metadata.start.month)
        count = int(metadata.month_count)
    except (AttributeError, TypeError, ValueError) as exc:
        raise HorizonValidationError("Invalid budget horizon metadata") from exc

    months: list[MonthDescriptor] = []
    for index in range(count):
        year_offset, month_offset = divmod(base_month - 1 + index, 12)
        year = base_year + year_offset
        month = month_offset + 1
        months.append(
            MonthDescriptor(key=month_key(year, month), month=month, year=year, index=index)
        )
    return months
