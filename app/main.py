"""
Streamlit Frontend for the Finance Tracker

A single page with two halves:
- Left: the "Add Entry" form
- Right: the balance, category filter buttons and the entry list

Clicking an entry opens its detail panel, where the description can be
edited and the entry can be deleted (after confirmation).

All state for the list lives in one ScreenState held by the session's
EntryViewController. Widgets only read from it and call controller
methods; nothing here talks to the table directly.
"""

import asyncio
import logging
from datetime import date
from decimal import Decimal

import streamlit as st

from finance_tracker.config import get_settings, validate_all_settings
from finance_tracker.diagnostics import configure_logging
from finance_tracker.models.transaction import Transaction, TransactionType
from finance_tracker.orchestrator import (
    ADD_SUCCESS_MESSAGE,
    EDIT_SUCCESS_MESSAGE,
    EntryViewController,
    create_app_components,
)


app_settings = get_settings().app

if app_settings.debug_mode:
    configure_logging(logging.DEBUG)

# Page configuration
st.set_page_config(
    page_title=app_settings.app_title,
    page_icon="💰",
    layout="wide",
)

# Badge colors per category
st.markdown("""
<style>
    .stButton>button {
        width: 100%;
    }
    .badge {
        display: inline-block;
        padding: 2px 8px;
        border-radius: 6px;
        font-size: 0.75em;
        font-weight: 600;
    }
    .badge-expense { background-color: #fee2e2; color: #dc2626; }
    .badge-income { background-color: #dcfce7; color: #15803d; }
    .badge-savings { background-color: #dbeafe; color: #1d4ed8; }
    .badge-emergency_fund { background-color: #fef9c3; color: #a16207; }
    .amount-debit { color: #ef4444; font-weight: 600; font-size: 1.1em; }
    .amount-credit { color: #0f766e; font-weight: 600; font-size: 1.1em; }
    .balance {
        font-size: 1.6em;
        font-weight: bold;
        color: #0d9488;
    }
</style>
""", unsafe_allow_html=True)


FILTER_OPTIONS = [
    None,
    TransactionType.INCOME,
    TransactionType.SAVINGS,
    TransactionType.EXPENSE,
    TransactionType.EMERGENCY_FUND,
]


def run_async(coro):
    """Helper to run async functions in Streamlit."""
    loop = asyncio.new_event_loop()
    asyncio.set_event_loop(loop)
    try:
        return loop.run_until_complete(coro)
    finally:
        loop.close()


@st.cache_resource
def get_components():
    """Get or create the shared table and submitter (cached)."""
    try:
        return create_app_components(use_storage=True)
    except Exception as e:
        st.error(f"Failed to initialize: {e}")
        return create_app_components(use_storage=False)


def get_controller() -> EntryViewController:
    """One view controller (and screen state) per browser session."""
    if "controller" not in st.session_state:
        submitter, _, table = get_components()
        controller = EntryViewController(table, submitter=submitter)
        run_async(controller.fetch_entries())
        st.session_state.controller = controller
        st.session_state.confirm_delete = False
    return st.session_state.controller


def format_amount(entry: Transaction) -> str:
    return entry.format_amount(app_settings.currency_symbol)


def badge(entry: Transaction) -> str:
    if entry.category is None:
        return ""
    return f'<span class="badge badge-{entry.category.value}">{entry.type_label}</span>'


def main():
    """Main application entry point."""
    controller = get_controller()

    st.title(f"💰 {app_settings.app_title}")

    col_form, col_list = st.columns(2)

    with col_form:
        render_entry_form(controller)

    with col_list:
        render_entry_list(controller)

    if controller.state.is_modal_open:
        st.markdown("---")
        render_entry_details(controller)

    render_connection_status()


def render_entry_form(controller: EntryViewController):
    """Render the add-entry form."""
    st.subheader("Add Entry")

    with st.form("add_entry", clear_on_submit=True):
        description = st.text_input("Description *", placeholder="Description")
        amount = st.number_input(
            "Amount *",
            value=None,
            min_value=0.0,
            step=0.01,
            format="%.2f",
            placeholder="Amount",
        )
        entry_type = st.selectbox(
            "Type",
            options=list(TransactionType),
            index=list(TransactionType).index(TransactionType.INCOME),
            format_func=lambda x: x.label,
        )
        entry_date = st.date_input("Date *", value=date.today())

        submitted = st.form_submit_button("Add Entry", type="primary")

    if submitted:
        if not description.strip() or amount is None:
            st.error("Please fill in the description and amount")
            return

        with st.spinner("Adding..."):
            run_async(
                controller.add_entry({
                    "description": description,
                    "amount": Decimal(str(amount)),
                    "type": entry_type,
                    "date": entry_date,
                })
            )

    # Messages are shown once, then cleared
    message, controller.state.message = controller.state.message, None
    if message in (ADD_SUCCESS_MESSAGE, EDIT_SUCCESS_MESSAGE):
        st.success(message)
    elif message and message.startswith("Failed"):
        st.error(message)
    elif message:
        st.info(message)


def render_entry_list(controller: EntryViewController):
    """Render the balance, filter buttons and the entry list."""
    state = controller.state
    symbol = app_settings.currency_symbol

    st.markdown(
        f'### Balance: <span class="balance">{symbol} {state.balance:,.2f}</span>',
        unsafe_allow_html=True,
    )

    # Filter buttons
    filter_cols = st.columns(len(FILTER_OPTIONS))
    for col, option in zip(filter_cols, FILTER_OPTIONS):
        label = "All" if option is None else option.label
        with col:
            if st.button(
                label,
                key=f"filter_{label}",
                type="primary" if state.filter == option else "secondary",
            ):
                controller.set_filter(option)
                st.rerun()

    entries = state.visible_entries
    if not entries:
        st.markdown("#### No entries yet.")
        return

    with st.container(height=420):
        for entry in entries:
            with st.container(border=True):
                left, right = st.columns([3, 2])
                with left:
                    st.markdown(f"**{entry.description}**")
                    st.caption(entry.created_at.isoformat())
                    st.markdown(badge(entry), unsafe_allow_html=True)
                with right:
                    css = "amount-debit" if entry.category == TransactionType.EXPENSE else "amount-credit"
                    st.markdown(
                        f'<span class="{css}">{format_amount(entry)}</span>',
                        unsafe_allow_html=True,
                    )
                    if st.button("Details", key=f"open_{entry.rec_id}"):
                        if state.is_modal_open:
                            state.close()
                        controller.open_entry(entry.rec_id)
                        st.session_state.confirm_delete = False
                        st.rerun()


def render_entry_details(controller: EntryViewController):
    """Render the detail panel for the selected entry."""
    state = controller.state
    entry = state.selected

    header, close_col = st.columns([5, 1])
    with header:
        st.subheader("Entry Details")
    with close_col:
        if st.button("✖ Close", key="close_details"):
            state.close()
            st.session_state.confirm_delete = False
            st.rerun()

    if state.is_editing:
        new_description = st.text_input(
            "Description",
            value=state.edit_buffer,
            key=f"edit_{entry.rec_id}",
        )
    else:
        st.markdown(f"**Description:** {entry.description}")
    st.markdown(f"**Type:** {badge(entry)}", unsafe_allow_html=True)
    st.markdown(f"**Amount:** {format_amount(entry)}")
    st.markdown(f"**Date:** {entry.created_at.strftime('%d %B %Y')}")
    st.markdown(f"**Record ID:** `{entry.rec_id}`")

    col1, col2, col3 = st.columns(3)

    if state.is_editing:
        with col1:
            if st.button("Save", type="primary", key="save_edit"):
                state.set_edit_buffer(new_description)
                result = run_async(controller.save_edit())
                if result.ok and state.is_modal_open:
                    state.close()
                st.rerun()
        with col2:
            if st.button("Cancel", key="cancel_edit"):
                state.cancel_edit()
                st.rerun()
    else:
        with col1:
            if st.button("Edit", key="start_edit"):
                state.start_edit()
                st.rerun()

    with col3:
        if st.button("Delete", key="delete_entry"):
            st.session_state.confirm_delete = True
            st.rerun()

    if st.session_state.get("confirm_delete"):
        st.warning("Are you sure? This entry will be deleted.")
        yes_col, no_col = st.columns(2)
        with yes_col:
            if st.button("Yes, delete it!", type="primary", key="confirm_delete_yes"):
                st.session_state.confirm_delete = False
                run_async(controller.delete_selected(confirm=lambda _: True))
                st.rerun()
        with no_col:
            if st.button("Cancel", key="confirm_delete_no"):
                st.session_state.confirm_delete = False
                st.rerun()


def render_connection_status():
    """Show which table backend is in use in the sidebar."""
    status = validate_all_settings()

    st.sidebar.markdown("### Connection Status")
    if app_settings.storage_backend == "memory":
        st.sidebar.info("In-memory table (entries are not saved)")
    elif status.get("google_sheets", False):
        st.sidebar.success("✅ Google Sheets - Configured")
    else:
        error = status.get("google_sheets_error", "Not configured")
        st.sidebar.error(f"❌ Google Sheets - {error}")
        st.sidebar.caption("Entries are kept in memory until Sheets is configured.")

    st.sidebar.markdown("---")
    st.sidebar.caption(f"Environment: {app_settings.app_environment}")


if __name__ == "__main__":
    main()
