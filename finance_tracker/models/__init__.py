"""
Data Models Package

Pydantic models shared by the submitter, the view controller and the
storage backends.
"""

from finance_tracker.models.transaction import (
    AMOUNT_COLUMNS,
    AMOUNT_PRECEDENCE,
    CREATED_AT_COLUMN,
    DESCRIPTION_COLUMN,
    REC_ID_COLUMN,
    STATUS_COLUMN,
    TRANSACTION_COLUMNS,
    EntryForm,
    TableError,
    TableResult,
    Transaction,
    TransactionType,
    generate_record_id,
)
from finance_tracker.models.diagnostics import (
    DiagnosticEvent,
    DiagnosticEventBuilder,
    DiagnosticEventType,
    DiagnosticSeverity,
)

__all__ = [
    # Table layout
    "AMOUNT_COLUMNS",
    "AMOUNT_PRECEDENCE",
    "CREATED_AT_COLUMN",
    "DESCRIPTION_COLUMN",
    "REC_ID_COLUMN",
    "STATUS_COLUMN",
    "TRANSACTION_COLUMNS",
    # Transaction models
    "EntryForm",
    "TableError",
    "TableResult",
    "Transaction",
    "TransactionType",
    "generate_record_id",
    # Diagnostic models
    "DiagnosticEvent",
    "DiagnosticEventBuilder",
    "DiagnosticEventType",
    "DiagnosticSeverity",
]
