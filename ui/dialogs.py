"""
Deletion dialogs.

Deletes go through request_delete(): when the deletion-confirmation setting
is on, a modal asks first; when it is off, the delete runs immediately.
"""

from typing import Callable

import streamlit as st

from domain.errors import LodestoneError
from logging_config import setup_logging

logger = setup_logging(__name__, log_file="ui.log")


def _run_delete(label: str, on_confirm: Callable[[], None]) -> None:
    try:
        on_confirm()
    except LodestoneError as e:
        logger.error(f"Delete of {label} failed: {e}")
        st.session_state["_delete_error"] = f"Could not delete {label}: {e}"
    else:
        st.session_state["_delete_toast"] = f"Deleted {label}"


@st.dialog("Confirm deletion")
def _confirm_dialog(label: str, on_confirm: Callable[[], None]) -> None:
    st.write(f"Are you sure you want to delete **{label}**? This cannot be undone.")
    col1, col2 = st.columns(2)
    if col1.button("Delete", type="primary", use_container_width=True):
        _run_delete(label, on_confirm)
        st.rerun()
    if col2.button("Cancel", use_container_width=True):
        st.rerun()


def request_delete(label: str, on_confirm: Callable[[], None], confirm: bool) -> None:
    """Delete something, asking first when confirm is True."""
    if confirm:
        _confirm_dialog(label, on_confirm)
    else:
        _run_delete(label, on_confirm)
        st.rerun()


def show_delete_feedback() -> None:
    """Show the outcome of the last delete, once."""
    message = st.session_state.pop("_delete_toast", None)
    if message:
        st.toast(message, icon="🗑️")
    error = st.session_state.pop("_delete_error", None)
    if error:
        st.error(error)
