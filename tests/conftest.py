"""Shared fixtures: in-memory and failing tables, and a fake worksheet."""

from typing import Any

import pytest

from finance_tracker.diagnostics import DiagnosticLogger
from finance_tracker.models.transaction import TRANSACTION_COLUMNS
from finance_tracker.services.storage import InMemoryTable, StorageError


class FailingTable(InMemoryTable):
    """In-memory table whose selected operations raise StorageError."""

    def __init__(self, fail_on: tuple[str, ...] = ("insert", "select", "update"), **kwargs):
        super().__init__(**kwargs)
        self.fail_on = set(fail_on)

    async def _insert_rows(self, rows: list[dict[str, Any]]) -> list[dict[str, Any]]:
        if "insert" in self.fail_on:
            raise StorageError("insert unavailable")
        return await super()._insert_rows(rows)

    async def _fetch_rows(self, filters):
        if "select" in self.fail_on:
            raise StorageError("select unavailable")
        return await super()._fetch_rows(filters)

    async def _update_rows(self, values, filters):
        if "update" in self.fail_on:
            raise StorageError("update unavailable")
        return await super()._update_rows(values, filters)


class FakeWorksheet:
    """Just enough of gspread.Worksheet for the table backend."""

    def __init__(self, rows=None):
        self.rows = [list(TRANSACTION_COLUMNS)] + [list(r) for r in (rows or [])]
        self.cell_updates = []

    def get_all_values(self):
        return [list(r) for r in self.rows]

    def append_row(self, values, value_input_option=None):
        assert value_input_option == "RAW"
        self.rows.append(list(values))

    def update_cell(self, row, col, value):
        self.cell_updates.append((row, col, value))
        self.rows[row - 1][col - 1] = value


class FakeSheetsClient:
    table_name = "finance-tracker"

    def __init__(self, sheet=None, error=None):
        self.sheet = sheet or FakeWorksheet()
        self.error = error

    def get_table_sheet(self):
        if self.error:
            raise self.error
        return self.sheet


@pytest.fixture
def table() -> InMemoryTable:
    return InMemoryTable()


@pytest.fixture
def diagnostics() -> DiagnosticLogger:
    return DiagnosticLogger().keep_events()
