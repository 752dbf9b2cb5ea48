"""
Core Data Models for the Finance Tracker

These models define the schemas for everything that flows between the
entry form, the view controller and the remote transaction table.

DESIGN DECISION: The domain model is a tagged union of {category, amount}.
The remote table keeps its four nullable amount columns (expense, income,
savings, emergency_fund), but the ONLY way to produce a row is
Transaction.to_row(), which populates exactly one of them.
Rows written by older clients are read back with a fixed column precedence.
"""

from datetime import date
from decimal import Decimal
from enum import Enum
from typing import Any, Optional
from uuid import uuid4

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    field_validator,
)


# =============================================================================
# TABLE LAYOUT
# =============================================================================

REC_ID_COLUMN = "recId"
STATUS_COLUMN = "rec_status"
DESCRIPTION_COLUMN = "description"
CREATED_AT_COLUMN = "created_at"

# Column order of the remote table (also the header row of the worksheet)
TRANSACTION_COLUMNS = [
    REC_ID_COLUMN,
    DESCRIPTION_COLUMN,
    STATUS_COLUMN,
    CREATED_AT_COLUMN,
    "expense",
    "income",
    "savings",
    "emergency_fund",
]


# =============================================================================
# ENUMS
# =============================================================================

class TransactionType(str, Enum):
    """
    The four mutually exclusive transaction categories.

    Values double as the name of the amount column each category writes to.
    """
    EXPENSE = "expense"
    INCOME = "income"
    SAVINGS = "savings"
    EMERGENCY_FUND = "emergency_fund"

    @classmethod
    def _missing_(cls, value: object) -> Optional["TransactionType"]:
        # Accept form labels such as "Savings", "Emergency Fund", "emergency-fund"
        if isinstance(value, str):
            normalized = value.strip().lower().replace(" ", "_").replace("-", "_")
            for member in cls:
                if member.value == normalized:
                    return member
        return None

    @property
    def label(self) -> str:
        """Human readable label used by the list and filter buttons."""
        return self.value.replace("_", " ").title()

    @property
    def column(self) -> str:
        """Amount column this category is stored in."""
        return self.value

    @property
    def is_debit(self) -> bool:
        return self is TransactionType.EXPENSE


# Read precedence for rows with more than one populated amount column.
# First non-null column wins; kept for compatibility with existing rows.
AMOUNT_PRECEDENCE = [
    TransactionType.INCOME,
    TransactionType.SAVINGS,
    TransactionType.EMERGENCY_FUND,
    TransactionType.EXPENSE,
]

AMOUNT_COLUMNS = [category.column for category in TransactionType]


# =============================================================================
# FORM INPUT
# =============================================================================

class EntryForm(BaseModel):
    """
    A submission from the add-entry form.

    Only the basic constraints are enforced here: every field is required,
    the amount is a non-negative number and the type is a known category.
    """
    model_config = ConfigDict(str_strip_whitespace=True, populate_by_name=True)

    description: str = Field(
        ...,
        min_length=1,
        max_length=500,
        description="What the entry is for"
    )
    amount: Decimal = Field(
        ...,
        ge=0,
        description="Amount of the entry"
    )
    type: TransactionType = Field(
        ...,
        description="Which category the amount belongs to"
    )
    entry_date: date = Field(
        ...,
        alias="date",
        description="Calendar date of the entry"
    )

    @field_validator("type", mode="before")
    @classmethod
    def normalize_type(cls, v: Any) -> Any:
        """Map form labels ("Savings", "Emergency Fund") onto categories."""
        if isinstance(v, str):
            return TransactionType(v)
        return v


# =============================================================================
# TRANSACTION RECORD
# =============================================================================

def generate_record_id() -> str:
    """Create a new collision-free record identifier."""
    return uuid4().hex


class Transaction(BaseModel):
    """
    One logged financial event.

    category is None only for legacy rows that have no amount column
    populated; such entries count as zero and only show up under "All".
    """
    model_config = ConfigDict(str_strip_whitespace=True)

    rec_id: str = Field(
        default_factory=generate_record_id,
        description="Record identifier"
    )
    description: str = Field(
        ...,
        description="Free text description (the only editable field)"
    )
    category: Optional[TransactionType] = None
    amount: Decimal = Field(
        default=Decimal("0"),
        ge=0,
        description="Unsigned amount"
    )
    created_at: date = Field(
        ...,
        description="User supplied date, used as both insertion and display date"
    )
    active: bool = Field(
        default=True,
        description="False once soft-deleted"
    )

    @classmethod
    def from_form(cls, form: EntryForm) -> "Transaction":
        """Shape a validated form submission into a new active record."""
        return cls(
            description=form.description,
            category=form.type,
            amount=form.amount,
            created_at=form.entry_date,
        )

    @property
    def signed_amount(self) -> Decimal:
        """Contribution of this entry to the balance."""
        if self.category is None:
            return Decimal("0")
        if self.category.is_debit:
            return -self.amount
        return self.amount

    @property
    def type_label(self) -> str:
        return self.category.label if self.category else ""

    def format_amount(self, currency_symbol: str = "") -> str:
        """Signed, two-decimal display string, e.g. '-₱1,250.00'."""
        if self.category is None:
            return ""
        sign = "-" if self.category.is_debit else "+"
        return f"{sign}{currency_symbol}{self.amount:,.2f}"

    def to_row(self) -> dict[str, Any]:
        """
        Convert to a table row.

        Exactly one amount column is populated; the other three are None.
        """
        row: dict[str, Any] = {
            REC_ID_COLUMN: self.rec_id,
            DESCRIPTION_COLUMN: self.description,
            STATUS_COLUMN: self.active,
            CREATED_AT_COLUMN: self.created_at.isoformat(),
        }
        for column in AMOUNT_COLUMNS:
            row[column] = None
        if self.category is not None:
            row[self.category.column] = self.amount
        return row

    @classmethod
    def from_row(cls, row: dict[str, Any]) -> "Transaction":
        """Convert a table row back into a Transaction."""
        category = None
        amount = Decimal("0")
        for candidate in AMOUNT_PRECEDENCE:
            value = row.get(candidate.column)
            if value is not None and value != "":
                category = candidate
                amount = Decimal(str(value))
                break

        return cls(
            rec_id=str(row[REC_ID_COLUMN]),
            description=row.get(DESCRIPTION_COLUMN) or "",
            category=category,
            amount=amount,
            created_at=_parse_date(row[CREATED_AT_COLUMN]),
            active=bool(row.get(STATUS_COLUMN, True)),
        )


def _parse_date(value: Any) -> date:
    if isinstance(value, date):
        return value
    # Timestamps such as "2024-01-01T00:00:00+00:00" keep only the date part
    return date.fromisoformat(str(value)[:10])


# =============================================================================
# REMOTE CALL RESULTS
# =============================================================================

class TableError(BaseModel):
    """Error returned by the remote table instead of an exception."""

    message: str
    operation: str = Field(
        ...,
        pattern="^(insert|select|update)$",
        description="Which table operation failed"
    )
    details: dict[str, Any] = Field(default_factory=dict)


class TableResult(BaseModel):
    """
    Result of a remote table call: (data, error).

    Exactly one of data / error is meaningful. Callers inspect .ok rather
    than catching exceptions.
    """

    data: Optional[list[dict[str, Any]]] = None
    error: Optional[TableError] = None

    @field_validator("data")
    @classmethod
    def copy_rows(cls, v: Optional[list[dict[str, Any]]]) -> Optional[list[dict[str, Any]]]:
        """Detach returned rows from the backend's own storage."""
        if v is None:
            return None
        return [dict(row) for row in v]

    @property
    def ok(self) -> bool:
        return self.error is None

    @classmethod
    def failure(
        cls,
        operation: str,
        message: str,
        details: Optional[dict[str, Any]] = None,
    ) -> "TableResult":
        return cls(
            error=TableError(
                operation=operation,
                message=message,
                details=details or {},
            )
        )
