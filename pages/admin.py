"""
Admin Page

Dashboard for signed-in admins with three tabs:
- Resources: provisions list, add form, delete
- Resource Hubs: hub list, add form, visibility, delete
- Settings: deletion confirmation toggle with auto re-enable

Deletes ask for confirmation unless the setting is switched off.
"""

import streamlit as st

from domain.enums import Rarity, SettingsState
from domain.errors import LodestoneError, StoreUnavailable
from logging_config import setup_logging
from services import get_catalog_service, get_settings_state_machine, is_admin_email
from settings_service import SettingsService
from state import ss_get, ss_set
from ui.dialogs import request_delete, show_delete_feedback
from ui.formatters import format_price, rarity_badge

logger = setup_logging(__name__, log_file="pages.log")


@st.fragment(run_every=15)
def show_settings_notifications(machine) -> None:
    """Toast background settings changes this session hasn't seen yet."""
    last_seen = ss_get("admin_last_notification", 0)
    for note in machine.notifications_since(last_seen):
        st.toast(f"**{note.title}**: {note.description}", icon="⚙️")
        last_seen = note.seq
    ss_set("admin_last_notification", last_seen)


def render_provisions_tab(catalog, hubs, confirm_deletes: bool):
    if not hubs:
        st.info("Create a resource hub before adding resources.")
    else:
        with st.expander("➕ Add resource"):
            with st.form("add_provision", clear_on_submit=True):
                name = st.text_input("Name")
                rarity = st.selectbox(
                    "Rarity", Rarity.display_order(), format_func=lambda r: r.display_name
                )
                price = st.number_input("Price (gp)", min_value=0.01, value=1.0, step=1.0)
                hub_name = st.selectbox("Resource hub", [h.name for h in hubs])
                if st.form_submit_button("Add"):
                    hub = next(h for h in hubs if h.name == hub_name)
                    try:
                        catalog.create_provision(name, rarity, price, hub.id)
                        st.toast(f"Added {name}", icon="✅")
                        st.rerun()
                    except LodestoneError as e:
                        st.error(str(e))

    try:
        provisions = catalog.list_provisions()
    except StoreUnavailable as e:
        st.error(f"Could not load resources: {e}")
        return
    if not provisions:
        st.caption("No resources yet.")
        return
    hub_names = {h.id: h.name for h in hubs}
    for p in provisions:
        cols = st.columns([0.4, 0.2, 0.15, 0.15, 0.1], vertical_alignment="center")
        cols[0].markdown(f"**{p.name}**")
        cols[1].markdown(rarity_badge(p.rarity))
        cols[2].write(format_price(p.price))
        cols[3].caption(hub_names.get(p.hub_id, "—"))
        if cols[4].button("🗑️", key=f"del_prov_{p.id}", help=f"Delete {p.name}"):
            request_delete(p.name, lambda pid=p.id: catalog.delete_provision(pid), confirm_deletes)


def update_visibility(catalog, hub, is_public: bool) -> bool:
    """Save a hub's public flag; report store failures on the page."""
    try:
        catalog.set_hub_visibility(hub.id, is_public)
    except StoreUnavailable as e:
        logger.error(f"Could not update visibility of hub {hub.id}: {e}")
        st.error(f"Could not update {hub.name}: {e}")
        return False
    return True


def render_hubs_tab(catalog, hubs, confirm_deletes: bool):
    with st.expander("➕ Add resource hub"):
        with st.form("add_hub", clear_on_submit=True):
            name = st.text_input("Name")
            is_public = st.checkbox("Public", value=True)
            if st.form_submit_button("Add"):
                try:
                    catalog.create_hub(name, is_public=is_public)
                    st.toast(f"Added {name}", icon="✅")
                    st.rerun()
                except LodestoneError as e:
                    st.error(str(e))

    if not hubs:
        st.caption("No resource hubs yet.")
        return
    for hub in hubs:
        cols = st.columns([0.5, 0.2, 0.2, 0.1], vertical_alignment="center")
        cols[0].markdown(f"**{hub.name}**")
        cols[1].caption(f"{len(hub.provisions)} resources")
        public = cols[2].toggle("Public", value=hub.is_public, key=f"pub_{hub.id}")
        if public != hub.is_public and update_visibility(catalog, hub, public):
            st.rerun()
        if cols[3].button("🗑️", key=f"del_hub_{hub.id}", help=f"Delete {hub.name}"):
            request_delete(
                f"{hub.name} and its {len(hub.provisions)} resources",
                lambda hid=hub.id: catalog.delete_hub(hid),
                confirm_deletes,
            )


def render_settings_tab(machine):
    st.subheader("Settings")
    if machine.loading:
        st.caption("Loading settings…")
    if machine.error is not None:
        st.error(f"Settings are unavailable: {machine.error}")

    settings = machine.current_settings()
    enabled = st.toggle(
        "Show deletion confirmation",
        value=settings.show_deletion_confirmation,
        key=f"toggle_confirm_{settings.state.name}",
    )
    st.caption(
        "When disabled, deletion confirmation is automatically re-enabled after "
        f"{int(machine.revert_after.total_seconds() // 60)} minutes."
    )
    if enabled != settings.show_deletion_confirmation:
        try:
            machine.toggle_deletion_confirmation(enabled)
        except StoreUnavailable as e:
            st.error(f"Could not save settings: {e}")
        else:
            st.rerun()

    if machine.state is SettingsState.DISABLED_PENDING_REVERT:
        due = machine.revert_due_at()
        if due is not None:
            st.info(f"Confirmation turns back on at {due.astimezone():%H:%M:%S}.")


def main():
    if not st.user.is_logged_in:
        st.warning("Sign in to use the admin dashboard.")
        if st.button("Login", type="primary"):
            st.login("google")
        return
    if not is_admin_email(st.user.get("email"), SettingsService().admin_emails):
        st.error("Your account doesn't have admin access.")
        return

    col1, col2, col3 = st.columns([0.7, 0.15, 0.15], vertical_alignment="bottom")
    col1.title("Lodestone Admin")
    col2.page_link("pages/home.py", label="Home", icon="🏠")
    if col3.button("Logout", use_container_width=True):
        st.logout()

    machine = get_settings_state_machine()
    show_settings_notifications(machine)
    show_delete_feedback()
    confirm_deletes = machine.current_settings().show_deletion_confirmation

    catalog = get_catalog_service()
    try:
        hubs = catalog.list_hubs()
    except StoreUnavailable as e:
        logger.error(f"Could not load hubs: {e}")
        st.error("The document store is unavailable right now.")
        hubs = None

    tab_resources, tab_hubs, tab_settings = st.tabs(["📦 Resources", "📍 Resource Hubs", "⚙️ Settings"])
    if hubs is not None:
        with tab_resources:
            render_provisions_tab(catalog, hubs, confirm_deletes)
        with tab_hubs:
            render_hubs_tab(catalog, hubs, confirm_deletes)
    with tab_settings:
        render_settings_tab(machine)


if __name__ == "__main__":
    main()
