"""
Screen State for the Entry View

One object holds everything the list screen shows: the fetched entries,
the balance, the active filter, the entry open in the detail view and
the description being edited.

Phases:
    idle        list visible, nothing selected
    loading     a fetch is in flight
    modal_open  detail view open for `selected`
    editing     detail view open, description being edited in `edit_buffer`

A selected entry exists only in modal_open, editing, or a loading phase
entered from one of them. Transitions that would break this raise
InvalidTransitionError.
"""

from decimal import Decimal
from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field, PrivateAttr

from finance_tracker.ledger import filter_entries, find_entry, sort_for_display
from finance_tracker.models.transaction import Transaction, TransactionType


class ScreenPhase(str, Enum):
    IDLE = "idle"
    LOADING = "loading"
    MODAL_OPEN = "modal_open"
    EDITING = "editing"


class InvalidTransitionError(Exception):
    """An event was applied in a phase that does not allow it."""

    def __init__(self, event: str, phase: ScreenPhase):
        self.event = event
        self.phase = phase
        super().__init__(f"Cannot {event} while {phase.value}")


class ScreenState(BaseModel):
    """State machine for the entry list screen."""

    phase: ScreenPhase = ScreenPhase.IDLE
    filter: Optional[TransactionType] = Field(
        default=None,
        description="Active category filter; None means All"
    )
    entries: list[Transaction] = Field(default_factory=list)
    balance: Decimal = Decimal("0")
    selected: Optional[Transaction] = None
    edit_buffer: str = ""
    message: Optional[str] = None

    _resume_phase: ScreenPhase = PrivateAttr(default=ScreenPhase.IDLE)

    # -------------------------------------------------------------------------
    # Derived views
    # -------------------------------------------------------------------------

    @property
    def visible_entries(self) -> list[Transaction]:
        """Filtered, most recent first."""
        return sort_for_display(filter_entries(self.entries, self.filter))

    @property
    def is_loading(self) -> bool:
        return self.phase == ScreenPhase.LOADING

    @property
    def is_modal_open(self) -> bool:
        return self.phase in (ScreenPhase.MODAL_OPEN, ScreenPhase.EDITING)

    @property
    def is_editing(self) -> bool:
        return self.phase == ScreenPhase.EDITING

    # -------------------------------------------------------------------------
    # Transitions
    # -------------------------------------------------------------------------

    def begin_loading(self) -> None:
        """Enter loading from any phase, remembering where to return."""
        if self.phase != ScreenPhase.LOADING:
            self._resume_phase = self.phase
        self.phase = ScreenPhase.LOADING

    def finish_loading(self, entries: list[Transaction], balance: Decimal) -> None:
        """
        Replace the entry list wholesale.

        If an entry was open and still exists it is refreshed and the
        previous phase is restored; otherwise the detail view closes.
        """
        self._require("finish loading", ScreenPhase.LOADING)
        self.entries = list(entries)
        self.balance = balance

        if self.selected is not None:
            refreshed = find_entry(self.entries, self.selected.rec_id)
            if refreshed is not None and self._resume_phase in (
                ScreenPhase.MODAL_OPEN,
                ScreenPhase.EDITING,
            ):
                self.selected = refreshed
                self.phase = self._resume_phase
                return
            self.selected = None
            self.edit_buffer = ""
        self.phase = ScreenPhase.IDLE

    def open_entry(self, entry: Transaction) -> None:
        """Open the detail view for an entry."""
        self._require("open an entry", ScreenPhase.IDLE, ScreenPhase.MODAL_OPEN)
        self.selected = entry
        self.edit_buffer = ""
        self.phase = ScreenPhase.MODAL_OPEN

    def start_edit(self) -> None:
        """Start editing the open entry's description."""
        self._require("start editing", ScreenPhase.MODAL_OPEN)
        self.edit_buffer = self.selected.description
        self.phase = ScreenPhase.EDITING

    def set_edit_buffer(self, text: str) -> None:
        self._require("edit the description", ScreenPhase.EDITING)
        self.edit_buffer = text

    def cancel_edit(self) -> None:
        """Leave editing without saving."""
        self._require("cancel editing", ScreenPhase.EDITING)
        self.edit_buffer = ""
        self.phase = ScreenPhase.MODAL_OPEN

    def commit_edit(self) -> None:
        """Leave editing after a successful save."""
        self._require("commit an edit", ScreenPhase.EDITING)
        self.edit_buffer = ""
        self.phase = ScreenPhase.MODAL_OPEN

    def close(self) -> None:
        """Close the detail view."""
        self._require("close the detail view", ScreenPhase.MODAL_OPEN, ScreenPhase.EDITING)
        self.selected = None
        self.edit_buffer = ""
        self.phase = ScreenPhase.IDLE

    def set_filter(self, category: Optional[TransactionType]) -> None:
        """Change the category filter. Purely local."""
        self.filter = category

    def _require(self, event: str, *phases: ScreenPhase) -> None:
        if self.phase not in phases:
            raise InvalidTransitionError(event, self.phase)
