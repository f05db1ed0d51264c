# SPDX-License-Identifier: BSL-1.1
# Copyright (c) 2026 MuVeraAI Corporation
"""Tests for the budget plan application service."""

from __future__ import annotations

from datetime import datetime, timedelta, timezone
from typing import Any

import pytest

from budget_horizon.errors import HorizonValidationError
from budget_horizon.service import BudgetPlanService, parse_metadata_payload
from budget_horizon.types import HorizonMetadata

from conftest import meta_rows

STAMP = datetime(2025, 1, 15, 12, 0, tzinfo=timezone.utc)

GRID = [
    ["category_id", "2025-01_amount", "2025-01_currency", "2025-02_amount", "2025-02_currency"],
    ["rent", "1000", "USD", "1000", "USD"],
]


@pytest.fixture
def service_and_store(make_repository: Any) -> tuple[BudgetPlanService, Any]:
    repository, store = make_repository(meta=meta_rows("2025-01-01", "2"), grid=[list(row) for row in GRID])
    return BudgetPlanService(repository, now=lambda: STAMP), store


class TestParseMetadataPayload:
    def test_reads_start_and_months(self) -> None:
        assert parse_metadata_payload({"start": " 2025-01-01 ", "months": 6}) == {
            "start": "2025-01-01",
            "month_count": 6,
        }

    def test_numeric_string_months(self) -> None:
        assert parse_metadata_payload({"start": "2025-01-01", "months": "18"})["month_count"] == 18

    def test_month_count_key_is_accepted(self) -> None:
        assert parse_metadata_payload({"start": "2025-01-01", "month_count": 3})["month_count"] == 3

    @pytest.mark.parametrize(
        "payload",
        [
            None,
            "2025-01-01",
            {"months": 6},
            {"start": "", "months": 6},
            {"start": "2025-01-01"},
            {"start": "2025-01-01", "months": "six"},
            {"start": "2025-01-01", "months": True},
            {"start": 20250101, "months": 6},
        ],
    )
    def test_unusable_payload_returns_none(self, payload: object) -> None:
        assert parse_metadata_payload(payload) is None

    def test_whole_float_months_become_int(self) -> None:
        parsed = parse_metadata_payload({"start": "2025-01-01", "months": 12.0})
        assert parsed == {"start": "2025-01-01", "month_count": 12}
        assert isinstance(parsed["month_count"], int)

    def test_fractional_months_are_rejected_by_the_service(self, service_and_store: Any) -> None:
        service, store = service_and_store
        parsed = parse_metadata_payload({"start": "2025-01-01", "months": 12.5})
        assert parsed == {"start": "2025-01-01", "month_count": 12.5}
        with pytest.raises(HorizonValidationError):
            service.apply_horizon_action("expand", parsed)
        assert store.writes == []

    def test_out_of_range_months_are_left_to_validation(self) -> None:
        assert parse_metadata_payload({"start": "2025-01-01", "months": 500}) == {
            "start": "2025-01-01",
            "month_count": 500,
        }


class TestBudgetPlanService:
    def test_get_budget_plan(self, service_and_store: Any) -> None:
        service, _ = service_and_store
        payload = service.get_budget_plan()

        assert payload.updated_at == STAMP
        assert payload.metadata == HorizonMetadata(start="2025-01-01", month_count=2)
        assert [r.record_id for r in payload.budget_plan] == ["budget_rent_2025-01", "budget_rent_2025-02"]

    def test_save_echoes_records(self, service_and_store: Any) -> None:
        service, store = service_and_store
        records = [
            {"record_id": "budget_food_2025-01", "category_id": "food", "month": 1, "year": 2025, "amount": 300},
        ]
        payload = service.save_budget_plan(records, {"start": "2025-01-01", "months": 1})

        assert [r.category_id for r in payload.budget_plan] == ["food"]
        assert payload.metadata.month_count == 1
        assert store.sheet_values("budget_horizon") == [
            ["category_id", "2025-01_amount", "2025-01_currency"],
            ["food", "300"],
        ]

    @pytest.mark.parametrize("action", ["expand", "apply", " expand "])
    def test_expand_actions_forward_fill(self, service_and_store: Any, action: str) -> None:
        service, _ = service_and_store
        payload = service.apply_horizon_action(action, {"start": "2025-01-01", "months": 3})

        assert payload.metadata.month_count == 3
        assert [r.amount for r in payload.budget_plan] == [1000, 1000, 1000]

    def test_shrink_action(self, service_and_store: Any) -> None:
        service, _ = service_and_store
        payload = service.apply_horizon_action("shrink", {"start": "2025-02-01", "months": 1})
        assert [r.record_id for r in payload.budget_plan] == ["budget_rent_2025-02"]

    @pytest.mark.parametrize("action", ["grow", "", None])
    def test_unknown_action_writes_nothing(self, service_and_store: Any, action: Any) -> None:
        service, store = service_and_store
        with pytest.raises(HorizonValidationError, match="Unsupported horizon action"):
            service.apply_horizon_action(action, {"start": "2025-01-01", "months": 3})
        assert store.reads == []
        assert store.writes == []

    def test_invalid_metadata_writes_nothing(self, service_and_store: Any) -> None:
        service, store = service_and_store
        with pytest.raises(HorizonValidationError):
            service.apply_horizon_action("expand", {"start": "2025-01-01", "months": 0})
        assert store.writes == []

    def test_default_clock_is_utc(self, make_repository: Any) -> None:
        repository, _ = make_repository()
        payload = BudgetPlanService(repository).get_budget_plan()
        assert payload.updated_at.utcoffset() == timedelta(0)
