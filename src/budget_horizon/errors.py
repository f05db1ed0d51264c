# SPDX-License-Identifier: BSL-1.1
# Copyright (c) 2026 MuVeraAI Corporation
from __future__ import annotations


class BudgetHorizonError(Exception):
    """Base class for all budget-horizon errors."""

    def __init__(self, message: str, code: str = "BUDGET_HORIZON_ERROR") -> None:
        super().__init__(message)
        self.code = code
        self.message = message

    def __repr__(self) -> str:
        return f"{type(self).__name__}(code={self.code!r}, message={self.message!r})"


class HorizonValidationError(BudgetHorizonError):
    """
    Raised when caller-supplied horizon input is rejected.

    Caller input is never silently corrected. This error is always raised
    before any call reaches the store.
    """

    def __init__(self, message: str) -> None:
        super().__init__(message, code="INVALID_HORIZON")


class SchemaMismatchError(BudgetHorizonError):
    """
    Raised when a populated sheet's header differs from the generated one.

    Attributes:
        sheet_title: The tab whose header was read.
        expected: The header generated from the current metadata.
        actual: The header row found in the sheet.
    """

    def __init__(
        self,
        sheet_title: str,
        expected: list[str],
        actual: list[str],
    ) -> None:
        super().__init__(
            f"{sheet_title} header does not match expected schema "
            f"({len(expected)} columns expected).",
            code="SCHEMA_MISMATCH",
        )
        self.sheet_title = sheet_title
        self.expected = expected
        self.actual = actual


class CellParseError(BudgetHorizonError):
    """
    Raised when an amount cell cannot be read as a finite number.

    Attributes:
        category_id: Category of the offending row.
        month_key: ``YYYY-MM`` key of the offending column pair.
        row_number: 1-based sheet row number.
        value: The raw cell content.
    """

    def __init__(
        self,
        category_id: str,
        month_key: str,
        row_number: int,
        value: str,
    ) -> None:
        super().__init__(
            f"Invalid amount for category '{category_id}' in {month_key} "
            f"at row {row_number}: {value!r}",
            code="INVALID_CELL",
        )
        self.category_id = category_id
        self.month_key = month_key
        self.row_number = row_number
        self.value = value


class MissingSheetError(BudgetHorizonError):
    """Raised by a store when the requested tab does not exist."""

    def __init__(self, sheet_title: str) -> None:
        super().__init__(
            f"Sheet '{sheet_title}' does not exist.",
            code="SHEET_NOT_FOUND",
        )
        self.sheet_title = sheet_title
