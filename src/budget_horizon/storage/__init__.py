# SPDX-License-Identifier: BSL-1.1
# Copyright (c) 2026 MuVeraAI Corporation

from budget_horizon.storage.interface import TabularStore, split_range
from budget_horizon.storage.memory import MemoryTabularStore
from budget_horizon.storage.sheets import SheetsTabularStore

__all__ = ["TabularStore", "MemoryTabularStore", "SheetsTabularStore", "split_range"]
