"""
Storage Services Package

Provides the abstract table interface and its implementations.
Google Sheets is the hosted backend; the in-memory table backs tests and
unconfigured installs.
"""

from finance_tracker.services.storage.interface import (
    ConnectionError,
    SelectQuery,
    StorageError,
    TableInterface,
    UpdateQuery,
)
from finance_tracker.services.storage.memory import InMemoryTable
from finance_tracker.services.storage.google_sheets import (
    GoogleSheetsClient,
    GoogleSheetsTable,
)

__all__ = [
    # Interface
    "SelectQuery",
    "TableInterface",
    "UpdateQuery",
    # Exceptions
    "ConnectionError",
    "StorageError",
    # Implementations
    "GoogleSheetsClient",
    "GoogleSheetsTable",
    "InMemoryTable",
]
