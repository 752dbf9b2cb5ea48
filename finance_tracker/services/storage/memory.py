"""
In-Memory Table Implementation

Used by the test-suite and as the fallback when no Google Sheets
credentials are configured. Data lives only as long as the process.
"""

from copy import deepcopy
from typing import Any, Optional

from finance_tracker.services.storage.interface import Filters, TableInterface


class InMemoryTable(TableInterface):
    """A list of row dicts behind the table interface."""

    def __init__(
        self,
        table_name: str = "finance-tracker",
        rows: Optional[list[dict[str, Any]]] = None,
    ):
        super().__init__(table_name)
        self._rows: list[dict[str, Any]] = deepcopy(rows) if rows else []

    async def _insert_rows(self, rows: list[dict[str, Any]]) -> list[dict[str, Any]]:
        stored = []
        for row in rows:
            full_row = {column: row.get(column) for column in self.columns}
            self._rows.append(full_row)
            stored.append(deepcopy(full_row))
        return stored

    async def _fetch_rows(self, filters: Filters) -> list[dict[str, Any]]:
        return [deepcopy(row) for row in self._rows if self._matches(row, filters)]

    async def _update_rows(
        self,
        values: dict[str, Any],
        filters: Filters,
    ) -> list[dict[str, Any]]:
        updated = []
        for row in self._rows:
            if self._matches(row, filters):
                row.update(values)
                updated.append(deepcopy(row))
        return updated

    def __len__(self) -> int:
        return len(self._rows)
