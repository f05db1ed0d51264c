# SPDX-License-Identifier: BSL-1.1
# Copyright (c) 2026 MuVeraAI Corporation

"""
Google Sheets backend.

Wraps an already-authorised Sheets v4 ``service`` object, as returned by
``googleapiclient.discovery.build("sheets", "v4", credentials=...)``.
Authentication and spreadsheet bootstrap happen elsewhere; this class only
reads and writes value ranges. Writes use ``valueInputOption="RAW"`` so
amounts are stored exactly as rendered.
"""

from __future__ import annotations

from typing import Any

from budget_horizon.errors import MissingSheetError
from budget_horizon.storage.interface import TabularStore, split_range

_MISSING_RANGE_MARKER = "Unable to parse range"


def _is_missing_sheet_error(error: Exception, sheet_title: str) -> bool:
    message = str(error)
    return _MISSING_RANGE_MARKER in message or f"'{sheet_title}'" in message


class SheetsTabularStore(TabularStore):
    """
    TabularStore backed by one Google spreadsheet.

    Parameters
    ----------
    service:
        A Sheets v4 service resource.
    spreadsheet_id:
        Id of the spreadsheet holding the budget tabs.
    """

    def __init__(self, service: Any, spreadsheet_id: str) -> None:
        if not spreadsheet_id or not spreadsheet_id.strip():
            raise ValueError("spreadsheet_id must be a non-empty string")
        self._service = service
        self._spreadsheet_id = spreadsheet_id.strip()

    @property
    def spreadsheet_id(self) -> str:
        return self._spreadsheet_id

    def _values(self) -> Any:
        return self._service.spreadsheets().values()

    def get_values(self, range_name: str) -> list[list[Any]]:
        title, _ = split_range(range_name)
        try:
            response = (
                self._values()
                .get(spreadsheetId=self._spreadsheet_id, range=range_name)
                .execute()
            )
        except Exception as error:
            if _is_missing_sheet_error(error, title):
                raise MissingSheetError(title) from error
            raise
        return list(response.get("values") or [])

    def update_values(self, range_name: str, values: list[list[str]]) -> None:
        title, _ = split_range(range_name)
        try:
            (
                self._values()
                .update(
                    spreadsheetId=self._spreadsheet_id,
                    range=range_name,
                    valueInputOption="RAW",
                    body={"values": values},
                )
                .execute()
            )
        except Exception as error:
            if _is_missing_sheet_error(error, title):
                raise MissingSheetError(title) from error
            raise
