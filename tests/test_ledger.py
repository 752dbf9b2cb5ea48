"""Tests for balance, filtering and display order."""

import pytest
from datetime import date
from decimal import Decimal

from finance_tracker.ledger import (
    compute_balance,
    filter_entries,
    find_entry,
    parse_rows,
    sort_for_display,
)
from finance_tracker.models.transaction import Transaction, TransactionType


def make(category, amount, day=1, description="x"):
    return Transaction(
        description=description,
        category=category,
        amount=Decimal(amount),
        created_at=date(2024, 1, day),
    )


def legacy_row(rec_id, created_at="2024-01-01", **amounts):
    row = {
        "recId": rec_id,
        "description": f"row {rec_id}",
        "rec_status": True,
        "created_at": created_at,
        "expense": None,
        "income": None,
        "savings": None,
        "emergency_fund": None,
    }
    row.update(amounts)
    return row


class TestComputeBalance:
    """Tests for the running balance."""

    def test_empty(self):
        assert compute_balance([]) == Decimal("0")

    def test_credits_add_and_expenses_subtract(self):
        """Test sum(income) + sum(savings) + sum(emergency_fund) - sum(expense)."""
        entries = [
            make(TransactionType.INCOME, "5000"),
            make(TransactionType.SAVINGS, "300"),
            make(TransactionType.EMERGENCY_FUND, "200"),
            make(TransactionType.EXPENSE, "120.50"),
            make(TransactionType.EXPENSE, "79.50"),
        ]
        assert compute_balance(entries) == Decimal("5300.00")

    def test_salary_then_groceries(self):
        entries = [
            make(TransactionType.INCOME, "5000"),
            make(TransactionType.EXPENSE, "120.50"),
        ]
        assert compute_balance(entries) == Decimal("4879.50")

    def test_malformed_row_counts_once_by_precedence(self):
        """Test a row with income and expense counts only the income."""
        entries = parse_rows([legacy_row("1", income=100, expense=40)])
        assert compute_balance(entries) == Decimal("100")

    def test_expense_only_counted_when_nothing_else_set(self):
        entries = parse_rows([legacy_row("1", expense=40, emergency_fund=5)])
        assert compute_balance(entries) == Decimal("5")


class TestFilterEntries:
    """Tests for the client-side category filter."""

    @pytest.fixture
    def entries(self):
        return [
            make(TransactionType.INCOME, "1", description="a"),
            make(TransactionType.EXPENSE, "2", description="b"),
            make(TransactionType.SAVINGS, "3", description="c"),
            make(TransactionType.EMERGENCY_FUND, "4", description="d"),
            make(TransactionType.EXPENSE, "5", description="e"),
        ]

    def test_all_returns_everything(self, entries):
        assert filter_entries(entries, None) == entries

    @pytest.mark.parametrize("category", list(TransactionType))
    def test_each_category(self, entries, category):
        result = filter_entries(entries, category)
        assert result
        assert all(e.category == category for e in result)
        assert len(result) == sum(1 for e in entries if e.category == category)

    def test_uncategorized_rows_only_under_all(self):
        entries = parse_rows([legacy_row("1")])
        assert len(filter_entries(entries, None)) == 1
        for category in TransactionType:
            assert filter_entries(entries, category) == []


class TestSortForDisplay:
    """Tests for display order."""

    def test_most_recent_first(self):
        entries = [make("income", "1", day=d, description=str(d)) for d in (3, 10, 1, 7)]
        assert [e.created_at.day for e in sort_for_display(entries)] == [10, 7, 3, 1]

    def test_sort_does_not_mutate_input(self):
        entries = [make("income", "1", day=1), make("income", "1", day=2)]
        sort_for_display(entries)
        assert entries[0].created_at.day == 1


class TestParseRows:
    """Tests for row parsing."""

    def test_bad_rows_skipped_and_reported(self):
        reported = []
        rows = [
            legacy_row("1", income=10),
            legacy_row("2", created_at="not a date", income=10),
            {"description": "no id or date"},
            legacy_row("3", expense="abc"),
        ]
        entries = parse_rows(rows, on_error=lambda row, e: reported.append(row))
        assert [e.rec_id for e in entries] == ["1"]
        assert len(reported) == 3

    def test_find_entry(self):
        entries = parse_rows([legacy_row("1", income=1), legacy_row("2", income=2)])
        assert find_entry(entries, "2").amount == Decimal("2")
        assert find_entry(entries, "9") is None
