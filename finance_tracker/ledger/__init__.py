"""Ledger calculations package."""

from finance_tracker.ledger.calculations import (
    compute_balance,
    filter_entries,
    find_entry,
    parse_rows,
    row_rec_id,
    sort_for_display,
)

__all__ = [
    "compute_balance",
    "filter_entries",
    "find_entry",
    "parse_rows",
    "row_rec_id",
    "sort_for_display",
]
