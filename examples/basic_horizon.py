# SPDX-License-Identifier: BSL-1.1
# Copyright (c) 2026 MuVeraAI Corporation

"""
basic_horizon.py

Walks through the lifecycle of a budget horizon against an in-memory sheet:
  1. Load an empty sheet (the header is written for the default horizon).
  2. Save a two-month plan for two categories.
  3. Expand to five months and watch the last value carry forward.
  4. Shrink back and print the raw grid.

Run with:  python examples/basic_horizon.py
(from the repository root with budget-horizon installed)
"""

import logging

from budget_horizon import BudgetHorizonRepository, BudgetPlanRecord, MemoryTabularStore, create_record_id

logging.basicConfig(level=logging.INFO, format="%(levelname)s %(name)s: %(message)s")

# ─── Setup ────────────────────────────────────────────────────────────────────

store = MemoryTabularStore({"_meta": [["key", "value"], ["theme", "dark"]], "budget_horizon": []})
repository = BudgetHorizonRepository(store)

initial = repository.load()
print(f"Fresh sheet: {initial.metadata.month_count} months from {initial.metadata.start}")

# ─── Save a plan ──────────────────────────────────────────────────────────────

plan = {
    ("rent", 1): (1200, "USD"),
    ("rent", 2): (1200, "USD"),
    ("groceries", 1): (420, "USD"),
    ("groceries", 2): (455.5, "USD"),
}

records = [
    BudgetPlanRecord(
        record_id=create_record_id(category_id, f"2025-{month:02d}"),
        category_id=category_id,
        month=month,
        year=2025,
        amount=amount,
        currency=currency,
    )
    for (category_id, month), (amount, currency) in plan.items()
]

repository.save(records, {"start": "2025-01-01", "month_count": 2})

# ─── Expand ───────────────────────────────────────────────────────────────────

repository.expand_horizon({"start": "2025-01-01", "month_count": 5})

print("\n── After expanding to 5 months ───────────────────────")
for record in repository.list_records():
    print(f"  {record.record_id:<28} {record.amount:>9.2f} {record.currency}")

# ─── Shrink ───────────────────────────────────────────────────────────────────

repository.shrink_horizon({"start": "2025-02-01", "month_count": 2})

print("\n── Raw grid after shrinking to Feb-Mar ───────────────")
for row in store.sheet_values("budget_horizon"):
    print("  " + " | ".join(row))

print("\n── Meta tab ──────────────────────────────────────────")
for key, value in store.sheet_values("_meta"):
    print(f"  {key:<20} {value}")
