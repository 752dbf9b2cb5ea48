"""
Abstract Table Interface

DESIGN DECISION: The tracker talks to its remote table through a small
query-builder API: insert, select().eq(), update().eq(). This allows us to:
1. Back the table with a Google Sheets worksheet in production
2. Use in-memory storage for testing and for unconfigured installs
3. Keep the submitter and view controller unaware of the backend

Every call resolves to a TableResult. Backends signal failure by raising
StorageError; the builders turn that into TableResult.error so callers
never see the exception.
"""

from abc import ABC, abstractmethod
from typing import Any, Union

from finance_tracker.models.transaction import (
    TRANSACTION_COLUMNS,
    TableResult,
)


Filters = list[tuple[str, Any]]


class StorageError(Exception):
    """Base exception for storage operations."""
    pass


class ConnectionError(StorageError):
    """Could not connect to storage backend."""
    pass


class TableInterface(ABC):
    """
    Abstract interface for the remote transaction table.

    Concrete backends implement the three underscored row operations.
    Everything else is shared.
    """

    columns: list[str] = TRANSACTION_COLUMNS

    def __init__(self, table_name: str):
        self.table_name = table_name

    # -------------------------------------------------------------------------
    # Public builder API
    # -------------------------------------------------------------------------

    async def insert(
        self,
        rows: Union[dict[str, Any], list[dict[str, Any]]],
    ) -> TableResult:
        """Insert one row (or a list of rows)."""
        if isinstance(rows, dict):
            rows = [rows]
        try:
            for row in rows:
                self._check_columns(row.keys())
            inserted = await self._insert_rows(rows)
        except StorageError as e:
            return TableResult.failure("insert", str(e), {"table": self.table_name})
        return TableResult(data=inserted)

    def select(self, *columns: str) -> "SelectQuery":
        """Start a read. With no columns, every column is returned."""
        return SelectQuery(self, list(columns))

    def update(self, values: dict[str, Any]) -> "UpdateQuery":
        """Start an update of the given columns."""
        return UpdateQuery(self, dict(values))

    # -------------------------------------------------------------------------
    # Backend operations
    # -------------------------------------------------------------------------

    @abstractmethod
    async def _insert_rows(self, rows: list[dict[str, Any]]) -> list[dict[str, Any]]:
        """
        Append rows to the table.

        Returns:
            The rows as stored

        Raises:
            StorageError: If the write fails
        """
        pass

    @abstractmethod
    async def _fetch_rows(self, filters: Filters) -> list[dict[str, Any]]:
        """
        Read all rows whose columns equal every (column, value) filter.

        Raises:
            StorageError: If the read fails
        """
        pass

    @abstractmethod
    async def _update_rows(
        self,
        values: dict[str, Any],
        filters: Filters,
    ) -> list[dict[str, Any]]:
        """
        Overwrite the given columns on every matching row.

        Returns:
            The updated rows (empty if nothing matched)

        Raises:
            StorageError: If the write fails
        """
        pass

    # -------------------------------------------------------------------------
    # Helpers
    # -------------------------------------------------------------------------

    def _check_columns(self, columns) -> None:
        unknown = [c for c in columns if c not in self.columns]
        if unknown:
            raise StorageError(f"Unknown column(s) for {self.table_name}: {unknown}")

    @staticmethod
    def _matches(row: dict[str, Any], filters: Filters) -> bool:
        return all(row.get(column) == value for column, value in filters)


class _FilteredQuery:
    """Shared .eq() chaining for select and update."""

    operation = ""

    def __init__(self, table: TableInterface):
        self._table = table
        self._filters: Filters = []

    def eq(self, column: str, value: Any) -> "_FilteredQuery":
        """Restrict the query to rows where column == value."""
        self._filters.append((column, value))
        return self

    async def execute(self) -> TableResult:
        try:
            self._table._check_columns([c for c, _ in self._filters])
            data = await self._run()
        except StorageError as e:
            return TableResult.failure(
                self.operation,
                str(e),
                {"table": self._table.table_name},
            )
        return TableResult(data=data)

    async def _run(self) -> list[dict[str, Any]]:
        raise NotImplementedError


class SelectQuery(_FilteredQuery):
    """select(...).eq(...).execute()"""

    operation = "select"

    def __init__(self, table: TableInterface, columns: list[str]):
        super().__init__(table)
        self._columns = columns

    async def _run(self) -> list[dict[str, Any]]:
        self._table._check_columns(self._columns)
        rows = await self._table._fetch_rows(self._filters)
        if not self._columns:
            return rows
        return [{c: row.get(c) for c in self._columns} for row in rows]


class UpdateQuery(_FilteredQuery):
    """update({...}).eq(...).execute()"""

    operation = "update"

    def __init__(self, table: TableInterface, values: dict[str, Any]):
        super().__init__(table)
        self._values = values

    async def _run(self) -> list[dict[str, Any]]:
        self._table._check_columns(self._values.keys())
        if not self._filters:
            # Refuse table-wide updates
            raise StorageError("update() requires at least one eq() filter")
        return await self._table._update_rows(self._values, self._filters)

