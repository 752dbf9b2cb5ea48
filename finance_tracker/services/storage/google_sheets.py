"""
Google Sheets Table Implementation

DESIGN DECISION: A Google Sheets worksheet is used as the hosted table because:
1. The user can look at (and fix) their ledger directly in Sheets
2. No database setup required
3. Built-in backup (Google's infrastructure)

TRADEOFFS:
- Not suitable for high-volume data (fine for a personal ledger)
- No transactions; concurrent edits are last-write-wins
- Limited query capabilities (we filter in Python)

Cell encoding: values are written RAW. Booleans are "TRUE"/"FALSE",
null amounts are empty cells, amounts are decimal strings.
"""

from decimal import Decimal, InvalidOperation
from typing import Any, Optional

import gspread
from google.oauth2.service_account import Credentials
from tenacity import retry, stop_after_attempt, wait_exponential

from finance_tracker.config import get_settings
from finance_tracker.config.settings import GoogleSheetsSettings
from finance_tracker.models.transaction import (
    AMOUNT_COLUMNS,
    REC_ID_COLUMN,
    STATUS_COLUMN,
    TRANSACTION_COLUMNS,
)
from finance_tracker.services.storage.interface import (
    ConnectionError,
    Filters,
    StorageError,
    TableInterface,
)


class GoogleSheetsClient:
    """
    Low-level Google Sheets client wrapper.

    Handles authentication and retries establishing the connection.
    """

    def __init__(self, settings: Optional[GoogleSheetsSettings] = None):
        self._client: Optional[gspread.Client] = None
        self._spreadsheet: Optional[gspread.Spreadsheet] = None
        self._settings = settings or get_settings().google_sheets

    @property
    def table_name(self) -> str:
        return self._settings.table_name

    @retry(
        stop=stop_after_attempt(3),
        wait=wait_exponential(multiplier=1, min=2, max=10),
        reraise=True,
    )
    def connect(self) -> gspread.Client:
        """
        Establish connection to Google Sheets.

        Uses service account credentials for authentication.
        """
        if self._client is None:
            try:
                scopes = [
                    "https://www.googleapis.com/auth/spreadsheets",
                    "https://www.googleapis.com/auth/drive",
                ]
                credentials = Credentials.from_service_account_file(
                    self._settings.credentials_path,
                    scopes=scopes,
                )
                self._client = gspread.authorize(credentials)
            except FileNotFoundError:
                raise ConnectionError(
                    f"Google credentials file not found: {self._settings.credentials_path}"
                )
            except Exception as e:
                raise ConnectionError(f"Failed to connect to Google Sheets: {e}")

        return self._client

    def get_spreadsheet(self) -> gspread.Spreadsheet:
        """Get the configured spreadsheet."""
        if self._spreadsheet is None:
            client = self.connect()
            try:
                self._spreadsheet = client.open_by_key(
                    self._settings.spreadsheet_id
                )
            except gspread.SpreadsheetNotFound:
                raise ConnectionError(
                    f"Spreadsheet not found: {self._settings.spreadsheet_id}"
                )
        return self._spreadsheet

    def get_table_sheet(self) -> gspread.Worksheet:
        """Get or create the transaction worksheet."""
        spreadsheet = self.get_spreadsheet()
        try:
            sheet = spreadsheet.worksheet(self._settings.table_name)
        except gspread.WorksheetNotFound:
            # Create the sheet with headers
            sheet = spreadsheet.add_worksheet(
                title=self._settings.table_name,
                rows=1000,
                cols=len(TRANSACTION_COLUMNS),
            )
            sheet.append_row(TRANSACTION_COLUMNS)
        return sheet


class GoogleSheetsTable(TableInterface):
    """
    Google Sheets implementation of the transaction table.

    Row 1 is the header; one transaction per row after that.
    """

    def __init__(self, client: Optional[GoogleSheetsClient] = None):
        self._client = client or GoogleSheetsClient()
        super().__init__(self._client.table_name)

    # -------------------------------------------------------------------------
    # Cell encoding
    # -------------------------------------------------------------------------

    @staticmethod
    def _to_cell(column: str, value: Any) -> str:
        if value is None:
            return ""
        if column == STATUS_COLUMN:
            return "TRUE" if value else "FALSE"
        return str(value)

    @staticmethod
    def _from_cell(column: str, cell: str) -> Any:
        if column == STATUS_COLUMN:
            return cell.strip().upper() == "TRUE"
        if column in AMOUNT_COLUMNS:
            if not cell.strip():
                return None
            try:
                return Decimal(cell.strip().replace(",", ""))
            except InvalidOperation:
                # Left as text; the ledger reports the row as malformed
                return cell.strip()
        return cell

    def _row_to_values(self, row: dict[str, Any]) -> list[str]:
        """Convert a row dict to worksheet cells in column order."""
        return [self._to_cell(column, row.get(column)) for column in self.columns]

    def _values_to_row(self, values: list[str]) -> dict[str, Any]:
        """Convert worksheet cells to a row dict."""
        # Handle short rows (trailing empty cells are not returned)
        padded = list(values) + [""] * (len(self.columns) - len(values))
        return {
            column: self._from_cell(column, padded[idx])
            for idx, column in enumerate(self.columns)
        }

    def _read_rows(self, sheet: gspread.Worksheet) -> list[tuple[int, dict[str, Any]]]:
        """Read every non-empty data row as (sheet_row_number, row)."""
        rows = []
        # Start from 2 (row 1 is header)
        for idx, values in enumerate(sheet.get_all_values()[1:], start=2):
            if not values or not values[0]:  # Skip empty rows
                continue
            rows.append((idx, self._values_to_row(values)))
        return rows

    # -------------------------------------------------------------------------
    # Table operations
    # -------------------------------------------------------------------------

    async def _insert_rows(self, rows: list[dict[str, Any]]) -> list[dict[str, Any]]:
        try:
            sheet = self._client.get_table_sheet()
            stored = []
            for row in rows:
                values = self._row_to_values(row)
                sheet.append_row(values, value_input_option="RAW")
                stored.append(self._values_to_row(values))
            return stored
        except StorageError:
            raise
        except Exception as e:
            raise StorageError(f"Failed to insert into {self.table_name}: {e}")

    async def _fetch_rows(self, filters: Filters) -> list[dict[str, Any]]:
        try:
            sheet = self._client.get_table_sheet()
            return [
                row for _, row in self._read_rows(sheet)
                if self._matches(row, self._normalize(filters))
            ]
        except StorageError:
            raise
        except Exception as e:
            raise StorageError(f"Failed to read {self.table_name}: {e}")

    async def _update_rows(
        self,
        values: dict[str, Any],
        filters: Filters,
    ) -> list[dict[str, Any]]:
        try:
            sheet = self._client.get_table_sheet()
            updated = []
            for idx, row in self._read_rows(sheet):
                if not self._matches(row, self._normalize(filters)):
                    continue
                # Only touch the cells being changed
                for column, value in values.items():
                    col_idx = self.columns.index(column) + 1
                    sheet.update_cell(idx, col_idx, self._to_cell(column, value))
                    row[column] = self._from_cell(column, self._to_cell(column, value))
                updated.append(row)
            return updated
        except StorageError:
            raise
        except Exception as e:
            raise StorageError(f"Failed to update {self.table_name}: {e}")

    def _normalize(self, filters: Filters) -> Filters:
        """Bring filter values into the same types the cells decode to."""
        normalized = []
        for column, value in filters:
            if column == REC_ID_COLUMN:
                value = str(value)
            else:
                value = self._from_cell(column, self._to_cell(column, value))
            normalized.append((column, value))
        return normalized
