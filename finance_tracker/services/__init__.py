"""Services package."""

from finance_tracker.services.storage import (
    ConnectionError,
    GoogleSheetsClient,
    GoogleSheetsTable,
    InMemoryTable,
    StorageError,
    TableInterface,
)

__all__ = [
    "ConnectionError",
    "GoogleSheetsClient",
    "GoogleSheetsTable",
    "InMemoryTable",
    "StorageError",
    "TableInterface",
]
