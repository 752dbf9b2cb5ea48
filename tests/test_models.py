"""
Tests for the Finance Tracker

Test strategy:
1. Unit tests for individual components (models, ledger, screen state)
2. Integration tests for flows (against the in-memory table)
3. No real API calls in tests (Sheets is replaced by a fake worksheet)
"""

import pytest
from datetime import date, timezone
from decimal import Decimal
from uuid import uuid4

from pydantic import ValidationError

from finance_tracker.models.transaction import (
    AMOUNT_COLUMNS,
    EntryForm,
    TableResult,
    Transaction,
    TransactionType,
)
from finance_tracker.models.diagnostics import (
    DiagnosticEvent,
    DiagnosticEventBuilder,
    DiagnosticEventType,
    DiagnosticSeverity,
)


class TestTransactionType:
    """Tests for the category enum."""

    def test_category_values(self):
        """Test category string values match the amount columns."""
        assert TransactionType.EXPENSE.value == "expense"
        assert TransactionType.EMERGENCY_FUND.column == "emergency_fund"
        assert sorted(t.column for t in TransactionType) == sorted(AMOUNT_COLUMNS)

    def test_form_labels_are_accepted(self):
        """Test the labels used by the original form still map."""
        assert TransactionType("Savings") is TransactionType.SAVINGS
        assert TransactionType("Emergency Fund") is TransactionType.EMERGENCY_FUND
        assert TransactionType("emergency-fund") is TransactionType.EMERGENCY_FUND

    def test_unknown_label_rejected(self):
        """Test unknown categories raise."""
        with pytest.raises(ValueError):
            TransactionType("Lottery")

    def test_labels(self):
        """Test display labels."""
        assert TransactionType.INCOME.label == "Income"
        assert TransactionType.EMERGENCY_FUND.label == "Emergency Fund"


class TestEntryForm:
    """Tests for form validation."""

    def test_entry_form_creation(self):
        """Test EntryForm creation using the form field names."""
        form = EntryForm(
            description="Salary",
            amount=Decimal("5000"),
            type="income",
            date="2024-01-01",
        )
        assert form.description == "Salary"
        assert form.type == TransactionType.INCOME
        assert form.entry_date == date(2024, 1, 1)

    def test_entry_form_strips_whitespace(self):
        """Test that whitespace is stripped from the description."""
        form = EntryForm(description="  Rent  ", amount=1, type="expense", date="2024-01-01")
        assert form.description == "Rent"

    def test_entry_form_rejects_negative_amount(self):
        """Test that negative amounts are rejected."""
        with pytest.raises(ValidationError):
            EntryForm(description="Test", amount=Decimal("-1"), type="expense", date="2024-01-01")

    def test_entry_form_rejects_blank_description(self):
        """Test that description is required."""
        with pytest.raises(ValidationError):
            EntryForm(description="   ", amount=1, type="expense", date="2024-01-01")

    def test_entry_form_rejects_unknown_type(self):
        """Test that an unknown type is rejected instead of stored without an amount."""
        with pytest.raises(ValidationError):
            EntryForm(description="Test", amount=1, type="gift", date="2024-01-01")

    def test_entry_form_accepts_zero(self):
        """Test that zero passes the non-negative constraint."""
        form = EntryForm(description="Free", amount=0, type="Savings", date="2024-01-01")
        assert form.amount == Decimal("0")
        assert form.type == TransactionType.SAVINGS


class TestTransaction:
    """Tests for the Transaction record and its row conversion."""

    @pytest.mark.parametrize("category", list(TransactionType))
    def test_to_row_populates_exactly_one_amount(self, category):
        """Test the single-amount invariant for every category."""
        row = Transaction(
            description="x",
            category=category,
            amount=Decimal("12.34"),
            created_at=date(2024, 1, 1),
        ).to_row()

        populated = [c for c in AMOUNT_COLUMNS if row[c] is not None]
        assert populated == [category.column]
        assert row[category.column] == Decimal("12.34")

    def test_from_form(self):
        """Test shaping a form into a new record."""
        form = EntryForm(description="Groceries", amount="120.50", type="expense", date="2024-01-02")
        tx = Transaction.from_form(form)
        assert tx.active is True
        assert tx.created_at == date(2024, 1, 2)
        assert tx.category == TransactionType.EXPENSE
        assert tx.signed_amount == Decimal("-120.50")

    def test_record_ids_are_unique(self):
        """Test that generated record ids do not collide."""
        ids = {
            Transaction(description="x", created_at=date(2024, 1, 1)).rec_id
            for _ in range(500)
        }
        assert len(ids) == 500

    def test_to_row_uses_supplied_date(self):
        """Test created_at is the entry date, not insertion time."""
        tx = Transaction(description="x", category="income", amount=1, created_at=date(2020, 5, 17))
        row = tx.to_row()
        assert row["created_at"] == "2020-05-17"
        assert row["rec_status"] is True
        assert row["recId"] == tx.rec_id

    def test_from_row_round_trip(self):
        """Test a written row reads back as the same record."""
        tx = Transaction(description="Bonus", category="savings", amount=Decimal("99.99"), created_at=date(2024, 3, 1))
        assert Transaction.from_row(tx.to_row()) == tx

    def test_from_row_precedence(self):
        """Test legacy rows with several amounts use income > savings > emergency_fund > expense."""
        row = {
            "recId": "123456",
            "description": "Broken",
            "rec_status": True,
            "created_at": "2024-01-01",
            "expense": 10,
            "income": None,
            "savings": 20,
            "emergency_fund": 30,
        }
        tx = Transaction.from_row(row)
        assert tx.category == TransactionType.SAVINGS
        assert tx.amount == Decimal("20")

    def test_from_row_without_amount(self):
        """Test a row with no amount becomes an uncategorized zero entry."""
        row = {
            "recId": "654321",
            "description": "Empty",
            "rec_status": True,
            "created_at": "2024-01-01T08:30:00+00:00",
            "expense": None,
            "income": None,
            "savings": None,
            "emergency_fund": None,
        }
        tx = Transaction.from_row(row)
        assert tx.category is None
        assert tx.signed_amount == Decimal("0")
        assert tx.created_at == date(2024, 1, 1)
        assert tx.format_amount("₱") == ""

    def test_format_amount(self):
        """Test signed display strings."""
        expense = Transaction(description="x", category="expense", amount=Decimal("1250"), created_at=date(2024, 1, 1))
        income = Transaction(description="x", category="income", amount=Decimal("5000"), created_at=date(2024, 1, 1))
        assert expense.format_amount("₱") == "-₱1,250.00"
        assert income.format_amount("₱") == "+₱5,000.00"


class TestTableResult:
    """Tests for the (data, error) result model."""

    def test_ok_result(self):
        result = TableResult(data=[{"recId": "1"}])
        assert result.ok is True
        assert result.error is None

    def test_failure_result(self):
        result = TableResult.failure("update", "network down", {"table": "t"})
        assert result.ok is False
        assert result.data is None
        assert result.error.operation == "update"
        assert result.error.details["table"] == "t"

    def test_failure_requires_known_operation(self):
        with pytest.raises(ValidationError):
            TableResult.failure("delete", "nope")


class TestDiagnosticModels:
    """Tests for diagnostic event models."""

    def test_event_defaults(self):
        """Test DiagnosticEvent creation."""
        event = DiagnosticEvent(
            event_type=DiagnosticEventType.ENTRIES_FETCHED,
            description="Fetched",
        )
        assert event.severity == DiagnosticSeverity.INFO
        assert event.timestamp.tzinfo == timezone.utc

    def test_event_to_log_dict(self):
        """Test conversion to log dictionary."""
        correlation_id = uuid4()
        event = DiagnosticEventBuilder.update_failed(
            rec_id="abc",
            table="finance-tracker",
            action="soft_delete",
            error_message="timeout",
            correlation_id=correlation_id,
        )
        log_dict = event.to_log_dict()
        assert log_dict["event_type"] == "update_failed"
        assert log_dict["severity"] == "error"
        assert log_dict["correlation_id"] == str(correlation_id)
        assert log_dict["details"]["action"] == "soft_delete"
        assert log_dict["error_message"] == "timeout"

    def test_builder_entry_inserted(self):
        """Test DiagnosticEventBuilder.entry_inserted."""
        event = DiagnosticEventBuilder.entry_inserted(
            rec_id="abc",
            table="finance-tracker",
            category="income",
        )
        assert event.event_type == DiagnosticEventType.ENTRY_INSERTED
        assert event.rec_id == "abc"
        assert event.details == {"category": "income"}


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
