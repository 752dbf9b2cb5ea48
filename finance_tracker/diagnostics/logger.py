"""
Diagnostic Logger

Every remote table call reports its outcome here. The logger:
- Writes structured JSON lines through structlog
- Never raises
- Supports correlation IDs to tie a mutation to the re-fetch after it

Events are not persisted. The rows of the transaction table are the
only record the tracker keeps.
"""

import logging
from typing import Optional
from uuid import UUID, uuid4

import structlog

from finance_tracker.models.diagnostics import (
    DiagnosticEvent,
    DiagnosticEventBuilder,
    DiagnosticSeverity,
)


def configure_logging(level: int = logging.INFO) -> None:
    """Configure stdlib logging and structlog for local JSON output."""
    logging.basicConfig(format="%(message)s", level=level)
    logging.getLogger().setLevel(level)

    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.stdlib.PositionalArgumentsFormatter(),
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.processors.UnicodeDecoder(),
            structlog.processors.JSONRenderer()
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )


configure_logging()


class DiagnosticLogger:
    """Central diagnostic logging service for table calls."""

    def __init__(self, name: str = "finance_tracker"):
        self._logger = structlog.get_logger(name)
        self.events: list[DiagnosticEvent] = []
        self._keep_events = False

    def keep_events(self) -> "DiagnosticLogger":
        """Also retain emitted events in memory."""
        self._keep_events = True
        return self

    def log(self, event: DiagnosticEvent) -> None:
        """Log a diagnostic event at the level matching its severity."""
        if self._keep_events:
            self.events.append(event)

        log_dict = event.to_log_dict()
        try:
            if event.severity == DiagnosticSeverity.ERROR:
                self._logger.error("diagnostic_event", **log_dict)
            elif event.severity == DiagnosticSeverity.WARNING:
                self._logger.warning("diagnostic_event", **log_dict)
            elif event.severity == DiagnosticSeverity.DEBUG:
                self._logger.debug("diagnostic_event", **log_dict)
            else:
                self._logger.info("diagnostic_event", **log_dict)
        except Exception as e:
            logging.getLogger(__name__).warning("Failed to write diagnostic event: %s", e)

    def log_entry_inserted(
        self,
        rec_id: str,
        table: str,
        category: str,
        correlation_id: Optional[UUID] = None,
    ) -> None:
        self.log(DiagnosticEventBuilder.entry_inserted(
            rec_id=rec_id,
            table=table,
            category=category,
            correlation_id=correlation_id,
        ))

    def log_insert_failed(
        self,
        rec_id: str,
        table: str,
        error_message: str,
        correlation_id: Optional[UUID] = None,
    ) -> None:
        self.log(DiagnosticEventBuilder.insert_failed(
            rec_id=rec_id,
            table=table,
            error_message=error_message,
            correlation_id=correlation_id,
        ))

    def log_submission_rejected(
        self,
        issues: list[dict],
        correlation_id: Optional[UUID] = None,
    ) -> None:
        self.log(DiagnosticEventBuilder.submission_rejected(
            issues=issues,
            correlation_id=correlation_id,
        ))

    def log_entries_fetched(
        self,
        table: str,
        count: int,
        correlation_id: Optional[UUID] = None,
    ) -> None:
        self.log(DiagnosticEventBuilder.entries_fetched(
            table=table,
            count=count,
            correlation_id=correlation_id,
        ))

    def log_fetch_failed(
        self,
        table: str,
        error_message: str,
        correlation_id: Optional[UUID] = None,
    ) -> None:
        self.log(DiagnosticEventBuilder.fetch_failed(
            table=table,
            error_message=error_message,
            correlation_id=correlation_id,
        ))

    def log_malformed_row(
        self,
        table: str,
        rec_id: Optional[str],
        error_message: str,
    ) -> None:
        self.log(DiagnosticEventBuilder.malformed_row_skipped(
            table=table,
            rec_id=rec_id,
            error_message=error_message,
        ))

    def log_entry_soft_deleted(
        self,
        rec_id: str,
        table: str,
        correlation_id: Optional[UUID] = None,
    ) -> None:
        self.log(DiagnosticEventBuilder.entry_soft_deleted(
            rec_id=rec_id,
            table=table,
            correlation_id=correlation_id,
        ))

    def log_description_edited(
        self,
        rec_id: str,
        table: str,
        correlation_id: Optional[UUID] = None,
    ) -> None:
        self.log(DiagnosticEventBuilder.entry_description_edited(
            rec_id=rec_id,
            table=table,
            correlation_id=correlation_id,
        ))

    def log_update_failed(
        self,
        rec_id: str,
        table: str,
        action: str,
        error_message: str,
        correlation_id: Optional[UUID] = None,
    ) -> None:
        self.log(DiagnosticEventBuilder.update_failed(
            rec_id=rec_id,
            table=table,
            action=action,
            error_message=error_message,
            correlation_id=correlation_id,
        ))

    def log_delete_cancelled(self, rec_id: str) -> None:
        self.log(DiagnosticEventBuilder.delete_cancelled(rec_id=rec_id))

    def log_storage_unavailable(self, backend: str, error_message: str) -> None:
        self.log(DiagnosticEventBuilder.storage_unavailable(
            backend=backend,
            error_message=error_message,
        ))


def create_correlation_id() -> UUID:
    """
    Create a new correlation ID for tracking related events.

    Use this at the start of a user action (submit, delete, edit) and
    pass it through the mutation and the re-fetch that follows.
    """
    return uuid4()
