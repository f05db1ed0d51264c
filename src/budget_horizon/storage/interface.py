# SPDX-License-Identifier: BSL-1.1
# Copyright (c) 2026 MuVeraAI Corporation

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any


def split_range(range_name: str) -> tuple[str, str | None]:
    """
    Split ``"Title!A1:B2"`` into the sheet title and the cell reference.

    A bare title (``"budget_horizon"``) addresses the whole sheet and
    returns ``None`` as the cell reference. Quoted titles are unquoted.
    """
    title, separator, cells = range_name.rpartition("!")
    if not separator:
        title, cells = range_name, ""
    title = title.strip()
    if len(title) >= 2 and title[0] == title[-1] == "'":
        title = title[1:-1].replace("''", "'")
    return title, (cells.strip() or None)


class TabularStore(ABC):
    """
    Minimal remote-spreadsheet contract used by the repositories.

    Implementors wrap a real spreadsheet API. Every call is a blocking,
    potentially rate-limited round-trip; callers wrap each one in
    ``execute_with_retry``. The default MemoryTabularStore is suitable for
    single-process use and testing only.
    """

    @abstractmethod
    def get_values(self, range_name: str) -> list[list[Any]]:
        """
        Return the cells inside ``range_name`` as rows.

        Trailing blank cells and trailing blank rows may be omitted.
        Raises MissingSheetError when the sheet does not exist.
        """
        ...

    @abstractmethod
    def update_values(self, range_name: str, values: list[list[str]]) -> None:
        """Overwrite cells starting at the top-left of ``range_name``."""
        ...
