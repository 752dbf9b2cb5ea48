"""
Diagnostic Event Models

Every remote call made by the tracker produces one diagnostic event.
Events are written to the local structured log only; they are not
persisted anywhere, so they are NOT an audit trail of the ledger.
"""

from datetime import datetime, timezone
from enum import Enum
from typing import Any, Optional
from uuid import UUID, uuid4

from pydantic import BaseModel, Field


class DiagnosticEventType(str, Enum):
    """Types of events we emit."""
    # Submission
    ENTRY_INSERTED = "entry_inserted"
    INSERT_FAILED = "insert_failed"
    SUBMISSION_REJECTED = "submission_rejected"

    # Reads
    ENTRIES_FETCHED = "entries_fetched"
    FETCH_FAILED = "fetch_failed"
    MALFORMED_ROW_SKIPPED = "malformed_row_skipped"

    # Mutations
    ENTRY_SOFT_DELETED = "entry_soft_deleted"
    ENTRY_DESCRIPTION_EDITED = "entry_description_edited"
    UPDATE_FAILED = "update_failed"
    DELETE_CANCELLED = "delete_cancelled"

    # System
    STORAGE_UNAVAILABLE = "storage_unavailable"


class DiagnosticSeverity(str, Enum):
    """Severity level for diagnostic events."""
    DEBUG = "debug"
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"


class DiagnosticEvent(BaseModel):
    """A single diagnostic event."""

    event_id: UUID = Field(default_factory=uuid4)
    timestamp: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
        description="When the event occurred (UTC)"
    )
    event_type: DiagnosticEventType
    severity: DiagnosticSeverity = DiagnosticSeverity.INFO

    # Which record, if any
    rec_id: Optional[str] = None
    table: Optional[str] = None

    # Correlation - ties the mutation to the re-fetch that follows it
    correlation_id: Optional[UUID] = None

    description: str = Field(..., max_length=500)
    details: dict[str, Any] = Field(default_factory=dict)
    error_message: Optional[str] = None

    def to_log_dict(self) -> dict:
        """Convert to a dictionary suitable for structured logging."""
        return {
            "event_id": str(self.event_id),
            "timestamp": self.timestamp.isoformat(),
            "event_type": self.event_type.value,
            "severity": self.severity.value,
            "rec_id": self.rec_id,
            "table": self.table,
            "correlation_id": str(self.correlation_id) if self.correlation_id else None,
            "description": self.description,
            "details": self.details,
            "error_message": self.error_message,
        }


class DiagnosticEventBuilder:
    """
    Helper class to build diagnostic events with common patterns.

    Usage:
        event = DiagnosticEventBuilder.entry_inserted(rec_id, table, "income", correlation_id)
    """

    @staticmethod
    def entry_inserted(
        rec_id: str,
        table: str,
        category: str,
        correlation_id: Optional[UUID] = None,
    ) -> DiagnosticEvent:
        return DiagnosticEvent(
            event_type=DiagnosticEventType.ENTRY_INSERTED,
            rec_id=rec_id,
            table=table,
            correlation_id=correlation_id,
            description=f"Entry inserted into {table}",
            details={"category": category},
        )

    @staticmethod
    def insert_failed(
        rec_id: str,
        table: str,
        error_message: str,
        correlation_id: Optional[UUID] = None,
    ) -> DiagnosticEvent:
        return DiagnosticEvent(
            event_type=DiagnosticEventType.INSERT_FAILED,
            severity=DiagnosticSeverity.ERROR,
            rec_id=rec_id,
            table=table,
            correlation_id=correlation_id,
            description="Insert failed",
            error_message=error_message,
        )

    @staticmethod
    def submission_rejected(
        issues: list[dict],
        correlation_id: Optional[UUID] = None,
    ) -> DiagnosticEvent:
        return DiagnosticEvent(
            event_type=DiagnosticEventType.SUBMISSION_REJECTED,
            severity=DiagnosticSeverity.WARNING,
            correlation_id=correlation_id,
            description=f"Form submission rejected with {len(issues)} issues",
            details={"issues": issues},
        )

    @staticmethod
    def entries_fetched(
        table: str,
        count: int,
        correlation_id: Optional[UUID] = None,
    ) -> DiagnosticEvent:
        return DiagnosticEvent(
            event_type=DiagnosticEventType.ENTRIES_FETCHED,
            severity=DiagnosticSeverity.DEBUG,
            table=table,
            correlation_id=correlation_id,
            description=f"Fetched {count} active entries",
            details={"count": count},
        )

    @staticmethod
    def fetch_failed(
        table: str,
        error_message: str,
        correlation_id: Optional[UUID] = None,
    ) -> DiagnosticEvent:
        return DiagnosticEvent(
            event_type=DiagnosticEventType.FETCH_FAILED,
            severity=DiagnosticSeverity.ERROR,
            table=table,
            correlation_id=correlation_id,
            description="Fetching active entries failed",
            error_message=error_message,
        )

    @staticmethod
    def malformed_row_skipped(
        table: str,
        rec_id: Optional[str],
        error_message: str,
    ) -> DiagnosticEvent:
        return DiagnosticEvent(
            event_type=DiagnosticEventType.MALFORMED_ROW_SKIPPED,
            severity=DiagnosticSeverity.WARNING,
            rec_id=rec_id,
            table=table,
            description="Skipped a row that could not be read",
            error_message=error_message,
        )

    @staticmethod
    def entry_soft_deleted(
        rec_id: str,
        table: str,
        correlation_id: Optional[UUID] = None,
    ) -> DiagnosticEvent:
        return DiagnosticEvent(
            event_type=DiagnosticEventType.ENTRY_SOFT_DELETED,
            rec_id=rec_id,
            table=table,
            correlation_id=correlation_id,
            description="Entry marked inactive",
        )

    @staticmethod
    def entry_description_edited(
        rec_id: str,
        table: str,
        correlation_id: Optional[UUID] = None,
    ) -> DiagnosticEvent:
        return DiagnosticEvent(
            event_type=DiagnosticEventType.ENTRY_DESCRIPTION_EDITED,
            rec_id=rec_id,
            table=table,
            correlation_id=correlation_id,
            description="Entry description changed",
        )

    @staticmethod
    def update_failed(
        rec_id: str,
        table: str,
        action: str,
        error_message: str,
        correlation_id: Optional[UUID] = None,
    ) -> DiagnosticEvent:
        return DiagnosticEvent(
            event_type=DiagnosticEventType.UPDATE_FAILED,
            severity=DiagnosticSeverity.ERROR,
            rec_id=rec_id,
            table=table,
            correlation_id=correlation_id,
            description=f"Update failed: {action}",
            details={"action": action},
            error_message=error_message,
        )

    @staticmethod
    def delete_cancelled(rec_id: str) -> DiagnosticEvent:
        return DiagnosticEvent(
            event_type=DiagnosticEventType.DELETE_CANCELLED,
            severity=DiagnosticSeverity.DEBUG,
            rec_id=rec_id,
            description="User declined to delete the entry",
        )

    @staticmethod
    def storage_unavailable(
        backend: str,
        error_message: str,
    ) -> DiagnosticEvent:
        return DiagnosticEvent(
            event_type=DiagnosticEventType.STORAGE_UNAVAILABLE,
            severity=DiagnosticSeverity.WARNING,
            description=f"Storage backend unavailable: {backend}",
            details={"backend": backend},
            error_message=error_message,
        )
