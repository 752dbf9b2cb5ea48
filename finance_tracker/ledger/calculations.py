"""
Ledger Calculations

Everything derived from the fetched rows on the client side: parsing
rows into Transactions, the running balance, category filtering and the
display order. None of these touch the remote table.
"""

from decimal import Decimal
from typing import Any, Callable, Iterable, Optional

from pydantic import ValidationError

from finance_tracker.models.transaction import (
    REC_ID_COLUMN,
    Transaction,
    TransactionType,
)


RowErrorCallback = Callable[[dict[str, Any], Exception], None]


def parse_rows(
    rows: Iterable[dict[str, Any]],
    on_error: Optional[RowErrorCallback] = None,
) -> list[Transaction]:
    """
    Convert table rows into Transactions.

    Rows that cannot be read are skipped and reported through on_error.
    """
    entries = []
    for row in rows:
        try:
            entries.append(Transaction.from_row(row))
        except (KeyError, ValueError, ArithmeticError, ValidationError) as e:
            if on_error:
                on_error(row, e)
    return entries


def compute_balance(entries: Iterable[Transaction]) -> Decimal:
    """
    Income, savings and emergency fund add; expenses subtract.

    Each entry contributes through its single category, which for legacy
    rows is the first populated column in AMOUNT_PRECEDENCE order.
    """
    return sum((entry.signed_amount for entry in entries), Decimal("0"))


def filter_entries(
    entries: Iterable[Transaction],
    category: Optional[TransactionType] = None,
) -> list[Transaction]:
    """
    Keep entries of the given category.

    category=None is the "All" filter and returns every entry.
    """
    if category is None:
        return list(entries)
    return [entry for entry in entries if entry.category == category]


def sort_for_display(entries: Iterable[Transaction]) -> list[Transaction]:
    """Most recent first; ties keep their fetch order."""
    return sorted(entries, key=lambda e: e.created_at, reverse=True)


def find_entry(entries: Iterable[Transaction], rec_id: str) -> Optional[Transaction]:
    """Look up an entry by record id."""
    for entry in entries:
        if entry.rec_id == rec_id:
            return entry
    return None


def row_rec_id(row: dict[str, Any]) -> Optional[str]:
    value = row.get(REC_ID_COLUMN)
    return str(value) if value is not None else None
