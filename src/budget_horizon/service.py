# SPDX-License-Identifier: BSL-1.1
# Copyright (c) 2026 MuVeraAI Corporation

from __future__ import annotations

from collections.abc import Iterable, Mapping
from datetime import datetime, timezone
from typing import Any, Callable, Literal

from pydantic import BaseModel

from budget_horizon.errors import HorizonValidationError
from budget_horizon.horizon import normalize_input_metadata
from budget_horizon.records import coerce_records
from budget_horizon.repository import BudgetHorizonRepository
from budget_horizon.types import BudgetPlanRecord, HorizonMetadata

HorizonAction = Literal["expand", "shrink", "apply"]

VALID_ACTIONS: frozenset[str] = frozenset({"expand", "shrink", "apply"})


class BudgetPlanPayload(BaseModel, frozen=True):
    """
    Response body for budget plan reads and writes.

    Attributes:
        budget_plan: Records for every (category, month) in the horizon.
        metadata: The horizon the records belong to.
        updated_at: When the payload was produced (UTC).
    """

    budget_plan: list[BudgetPlanRecord]
    metadata: HorizonMetadata
    updated_at: datetime


def parse_metadata_payload(value: object) -> dict[str, Any] | None:
    """
    Pull ``start`` and ``months`` out of a JSON-like request body.

    ``months`` may be a number or a numeric string. Returns None when either
    field is missing or not numeric. Range and integrality checks are left
    to the repository, so ``12.5`` is passed through and rejected there.
    """
    if not isinstance(value, Mapping):
        return None

    raw_start = value.get("start")
    start = raw_start.strip() if isinstance(raw_start, str) else ""

    raw_months = value.get("months", value.get("month_count"))
    months: int | float | None = None
    if isinstance(raw_months, bool):
        months = None
    elif isinstance(raw_months, int):
        months = raw_months
    elif isinstance(raw_months, float):
        months = int(raw_months) if raw_months.is_integer() else raw_months
    elif isinstance(raw_months, str):
        try:
            months = int(raw_months.strip())
        except ValueError:
            months = None

    if not start or months is None:
        return None
    return {"start": start, "month_count": months}


class BudgetPlanService:
    """
    Thin application layer over BudgetHorizonRepository.

    Every method performs its repository call(s) and wraps the result in a
    BudgetPlanPayload stamped with the injected clock.

    Example::

        service = BudgetPlanService(repository)
        payload = service.apply_horizon_action("expand", {"start": "2025-01-01", "months": 18})
    """

    def __init__(
        self,
        repository: BudgetHorizonRepository,
        now: Callable[[], datetime] | None = None,
    ) -> None:
        self._repository = repository
        self._now = now or (lambda: datetime.now(tz=timezone.utc))

    def _payload(self, records: list[BudgetPlanRecord], metadata: HorizonMetadata) -> BudgetPlanPayload:
        return BudgetPlanPayload(budget_plan=records, metadata=metadata, updated_at=self._now())

    def get_budget_plan(self) -> BudgetPlanPayload:
        result = self._repository.load()
        return self._payload(result.records, result.metadata)

    def save_budget_plan(
        self,
        records: Iterable[BudgetPlanRecord | Mapping[str, Any]],
        metadata: HorizonMetadata | Mapping[str, Any],
    ) -> BudgetPlanPayload:
        """Persist records and echo them back without re-reading the sheet."""
        validated = coerce_records(records)
        target = normalize_input_metadata(metadata)
        self._repository.save(validated, target)
        return self._payload(validated, target)

    def apply_horizon_action(
        self,
        action: str,
        metadata: HorizonMetadata | Mapping[str, Any],
    ) -> BudgetPlanPayload:
        """
        Run an ``expand``, ``shrink`` or ``apply`` request, then reload.

        Raises:
            HorizonValidationError: If ``action`` is unknown or the metadata
                is invalid. Nothing is written in either case.
        """
        normalized_action = action.strip() if isinstance(action, str) else ""
        if normalized_action not in VALID_ACTIONS:
            raise HorizonValidationError(
                f"Unsupported horizon action {action!r}. Valid values: {sorted(VALID_ACTIONS)}."
            )

        if normalized_action == "shrink":
            self._repository.shrink_horizon(metadata)
        else:
            self._repository.expand_horizon(metadata)

        result = self._repository.load()
        return self._payload(result.records, result.metadata)
