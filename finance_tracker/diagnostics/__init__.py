"""Diagnostic logging package."""

from finance_tracker.diagnostics.logger import (
    DiagnosticLogger,
    configure_logging,
    create_correlation_id,
)

__all__ = ["DiagnosticLogger", "configure_logging", "create_correlation_id"]
