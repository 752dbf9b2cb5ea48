"""
Main Orchestrator for the Finance Tracker

This module ties together the table, the ledger calculations and the
screen state, and defines the two flows:
1. Entry submission (form → shaped row → insert)
2. Entry view (fetch → balance → filter/sort → soft delete / edit → re-fetch)

DESIGN DECISION: The remote table is the only source of truth.
Every mutation is followed by an unconditional full re-fetch, and the
local list is always replaced wholesale, never patched.

Remote failures never raise out of this module. They are logged and
handed back as TableResult.error; the screen simply does not advance.
"""

from typing import Any, Callable, Mapping, Optional, Union
from uuid import UUID

from pydantic import ValidationError

from finance_tracker.config import get_settings
from finance_tracker.diagnostics import DiagnosticLogger, create_correlation_id
from finance_tracker.ledger import compute_balance, find_entry, parse_rows, row_rec_id
from finance_tracker.models.transaction import (
    DESCRIPTION_COLUMN,
    REC_ID_COLUMN,
    STATUS_COLUMN,
    EntryForm,
    TableResult,
    Transaction,
    TransactionType,
)
from finance_tracker.screen import InvalidTransitionError, ScreenPhase, ScreenState
from finance_tracker.services.storage import (
    GoogleSheetsClient,
    GoogleSheetsTable,
    InMemoryTable,
    TableInterface,
)


ADD_SUCCESS_MESSAGE = "Entry added successfully!"
ADD_FAILURE_MESSAGE = "Failed to add entry."
EDIT_SUCCESS_MESSAGE = "Entry successfully edited!"
EDIT_FAILURE_MESSAGE = "Failed to edit entry."
DELETE_SUCCESS_MESSAGE = "Entry deleted."
DELETE_FAILURE_MESSAGE = "Failed to delete entry."

# Yes/no answer from the presentation layer before a delete is issued
ConfirmCallback = Callable[[Transaction], bool]


class EntrySubmitter:
    """
    Shapes a form submission into a table row and inserts it.

    Flow:
    1. Validate the form (required fields, amount >= 0, known type)
    2. Build a Transaction with a fresh record id, active, dated with the
       user supplied date
    3. One insert; no retry
    4. Hand the raw (data, error) result back to the caller
    """

    def __init__(
        self,
        table: TableInterface,
        diagnostics: Optional[DiagnosticLogger] = None,
    ):
        self._table = table
        self._diagnostics = diagnostics or DiagnosticLogger()

    async def submit(
        self,
        form: EntryForm,
        correlation_id: Optional[UUID] = None,
    ) -> TableResult:
        """Insert a validated form as a new record."""
        transaction = Transaction.from_form(form)
        result = await self._table.insert(transaction.to_row())

        if result.ok:
            self._diagnostics.log_entry_inserted(
                rec_id=transaction.rec_id,
                table=self._table.table_name,
                category=form.type.value,
                correlation_id=correlation_id,
            )
        else:
            self._diagnostics.log_insert_failed(
                rec_id=transaction.rec_id,
                table=self._table.table_name,
                error_message=result.error.message,
                correlation_id=correlation_id,
            )
        return result

    async def submit_raw(
        self,
        payload: Mapping[str, Any],
        correlation_id: Optional[UUID] = None,
    ) -> TableResult:
        """
        Validate an unchecked payload, then submit it.

        Validation problems come back as a failed TableResult, like any
        other failure, instead of an exception.
        """
        try:
            form = EntryForm.model_validate(dict(payload))
        except ValidationError as e:
            issues = [
                {
                    "field": ".".join(str(part) for part in err["loc"]),
                    "type": err["type"],
                    "message": err["msg"],
                }
                for err in e.errors()
            ]
            self._diagnostics.log_submission_rejected(
                issues=issues,
                correlation_id=correlation_id,
            )
            return TableResult.failure("insert", "Invalid entry", {"issues": issues})

        return await self.submit(form, correlation_id)


class EntryViewController:
    """
    Drives the entry list screen.

    Holds one ScreenState and keeps it in sync with the remote table:
    every mutation is followed by fetch_entries().
    """

    def __init__(
        self,
        table: TableInterface,
        submitter: Optional[EntrySubmitter] = None,
        diagnostics: Optional[DiagnosticLogger] = None,
        state: Optional[ScreenState] = None,
    ):
        self._table = table
        self._diagnostics = diagnostics or DiagnosticLogger()
        self._submitter = submitter or EntrySubmitter(table, self._diagnostics)
        self._state = state or ScreenState()

    @property
    def state(self) -> ScreenState:
        return self._state

    # -------------------------------------------------------------------------
    # Reads
    # -------------------------------------------------------------------------

    async def fetch_entries(
        self,
        correlation_id: Optional[UUID] = None,
    ) -> list[Transaction]:
        """
        Fetch every active record and replace the local list.

        A failed fetch is logged and shown as an empty list.
        """
        self._state.begin_loading()

        result = await self._table.select().eq(STATUS_COLUMN, True).execute()

        if result.ok:
            entries = parse_rows(result.data or [], on_error=self._report_malformed_row)
            self._diagnostics.log_entries_fetched(
                table=self._table.table_name,
                count=len(entries),
                correlation_id=correlation_id,
            )
        else:
            entries = []
            self._diagnostics.log_fetch_failed(
                table=self._table.table_name,
                error_message=result.error.message,
                correlation_id=correlation_id,
            )

        self._state.finish_loading(entries, compute_balance(entries))
        return entries

    def _report_malformed_row(self, row: dict[str, Any], error: Exception) -> None:
        self._diagnostics.log_malformed_row(
            table=self._table.table_name,
            rec_id=row_rec_id(row),
            error_message=str(error),
        )

    # -------------------------------------------------------------------------
    # Local state
    # -------------------------------------------------------------------------

    def set_filter(self, category: Optional[TransactionType]) -> list[Transaction]:
        """Apply a category filter (None = All) and return what is visible."""
        self._state.set_filter(category)
        return self._state.visible_entries

    def open_entry(self, rec_id: str) -> Transaction:
        """Open the detail view for a fetched entry."""
        entry = find_entry(self._state.entries, rec_id)
        if entry is None:
            raise KeyError(f"No active entry with record id {rec_id}")
        self._state.open_entry(entry)
        return entry

    # -------------------------------------------------------------------------
    # Writes
    # -------------------------------------------------------------------------

    async def add_entry(
        self,
        payload: Union[EntryForm, Mapping[str, Any]],
        correlation_id: Optional[UUID] = None,
    ) -> TableResult:
        """Submit a new entry; re-fetch only when it was stored."""
        correlation_id = correlation_id or create_correlation_id()

        if isinstance(payload, EntryForm):
            result = await self._submitter.submit(payload, correlation_id)
        else:
            result = await self._submitter.submit_raw(payload, correlation_id)

        if result.ok:
            self._state.message = ADD_SUCCESS_MESSAGE
            await self.fetch_entries(correlation_id)
        else:
            self._state.message = ADD_FAILURE_MESSAGE
        return result

    async def soft_delete(
        self,
        rec_id: str,
        correlation_id: Optional[UUID] = None,
    ) -> TableResult:
        """Mark one record inactive, then re-fetch."""
        correlation_id = correlation_id or create_correlation_id()
        result = await self._set_inactive(rec_id, correlation_id)
        await self.fetch_entries(correlation_id)
        return result

    async def edit_description(
        self,
        rec_id: str,
        description: str,
        correlation_id: Optional[UUID] = None,
    ) -> TableResult:
        """Overwrite one record's description, then re-fetch."""
        correlation_id = correlation_id or create_correlation_id()
        result = await self._set_description(rec_id, description, correlation_id)
        await self.fetch_entries(correlation_id)
        return result

    async def delete_selected(
        self,
        confirm: Optional[ConfirmCallback] = None,
        correlation_id: Optional[UUID] = None,
    ) -> Optional[TableResult]:
        """
        Soft-delete the entry open in the detail view.

        Returns None (and changes nothing) if the user declines.
        On success the re-fetch closes the detail view; on failure it
        stays open.
        """
        if not self._state.is_modal_open:
            raise InvalidTransitionError("delete an entry", self._state.phase)

        entry = self._state.selected
        if confirm is not None and not confirm(entry):
            self._diagnostics.log_delete_cancelled(entry.rec_id)
            return None

        if self._state.is_editing:
            self._state.cancel_edit()

        result = await self.soft_delete(entry.rec_id, correlation_id)
        self._state.message = (
            DELETE_SUCCESS_MESSAGE if result.ok else DELETE_FAILURE_MESSAGE
        )
        return result

    async def save_edit(
        self,
        correlation_id: Optional[UUID] = None,
    ) -> TableResult:
        """
        Save the edit buffer as the open entry's description.

        On success the detail view returns to modal_open showing the new
        description; on failure it stays in editing with the buffer kept.
        """
        if self._state.phase != ScreenPhase.EDITING:
            raise InvalidTransitionError("save an edit", self._state.phase)

        correlation_id = correlation_id or create_correlation_id()
        entry = self._state.selected
        result = await self._set_description(
            entry.rec_id,
            self._state.edit_buffer,
            correlation_id,
        )
        if result.ok:
            self._state.commit_edit()
            self._state.message = EDIT_SUCCESS_MESSAGE
        else:
            self._state.message = EDIT_FAILURE_MESSAGE

        await self.fetch_entries(correlation_id)
        return result

    async def _set_inactive(self, rec_id: str, correlation_id: UUID) -> TableResult:
        result = await (
            self._table.update({STATUS_COLUMN: False})
            .eq(REC_ID_COLUMN, rec_id)
            .execute()
        )
        result = self._require_match(result, rec_id)
        if result.ok:
            self._diagnostics.log_entry_soft_deleted(
                rec_id=rec_id,
                table=self._table.table_name,
                correlation_id=correlation_id,
            )
        else:
            self._diagnostics.log_update_failed(
                rec_id=rec_id,
                table=self._table.table_name,
                action="soft_delete",
                error_message=result.error.message,
                correlation_id=correlation_id,
            )
        return result

    async def _set_description(
        self,
        rec_id: str,
        description: str,
        correlation_id: UUID,
    ) -> TableResult:
        result = await (
            self._table.update({DESCRIPTION_COLUMN: description})
            .eq(REC_ID_COLUMN, rec_id)
            .execute()
        )
        result = self._require_match(result, rec_id)
        if result.ok:
            self._diagnostics.log_description_edited(
                rec_id=rec_id,
                table=self._table.table_name,
                correlation_id=correlation_id,
            )
        else:
            self._diagnostics.log_update_failed(
                rec_id=rec_id,
                table=self._table.table_name,
                action="edit_description",
                error_message=result.error.message,
                correlation_id=correlation_id,
            )
        return result


    def _require_match(self, result: TableResult, rec_id: str) -> TableResult:
        """An update that touched no row did not happen."""
        if result.ok and not result.data:
            return TableResult.failure(
                "update",
                f"No record with id {rec_id}",
                {"table": self._table.table_name, "rec_id": rec_id},
            )
        return result

def create_app_components(
    use_storage: bool = True,
) -> tuple[EntrySubmitter, EntryViewController, TableInterface]:
    """
    Factory function to create all application components.

    Args:
        use_storage: Whether to connect to the configured hosted table.
                    With False (or when it is not configured) an
                    in-memory table is used.

    Returns:
        (submitter, view_controller, table)
    """
    diagnostics = DiagnosticLogger()
    table: Optional[TableInterface] = None

    if use_storage and get_settings().app.storage_backend == "google_sheets":
        try:
            client = GoogleSheetsClient()
            client.get_table_sheet()
            table = GoogleSheetsTable(client)
        except Exception as e:
            # Storage not configured - continue with an in-memory table
            diagnostics.log_storage_unavailable("google_sheets", str(e))

    if table is None:
        table = InMemoryTable()

    submitter = EntrySubmitter(table, diagnostics)
    controller = EntryViewController(table, submitter=submitter, diagnostics=diagnostics)

    return submitter, controller, table
