"""
Generator Page

Public list generator: pick a public resource hub, generate a
rarity-weighted list, and browse or clear the local history.

Uses ListGenerator for generation and ListHistory for recording.
"""

import streamlit as st

from domain.errors import StoreUnavailable, ValidationError
from logging_config import setup_logging
from services import get_catalog_service, get_list_generator, get_list_history
from state import ss_clear, ss_get, ss_init, ss_set
from ui.formatters import (
    create_rarity_chart,
    format_price,
    format_timestamp,
    generated_list_to_dataframe,
)

logger = setup_logging(__name__, log_file="pages.log")


def render_generated_list(generated, key: str):
    """Table, total and rarity breakdown for one generated list."""
    st.dataframe(
        generated_list_to_dataframe(generated),
        hide_index=True,
        use_container_width=True,
        column_config={
            "Price": st.column_config.NumberColumn(format="%.2f gp"),
            "Value": st.column_config.NumberColumn(format="%.2f gp"),
        },
    )
    st.markdown(f"**{generated.total_count} items** · total value **{format_price(generated.total_value)}**")
    fig = create_rarity_chart(generated)
    if fig is not None:
        st.plotly_chart(fig, use_container_width=True, key=key)


def main():
    ss_init({"gen_selected_hub": None, "gen_last_list": None})

    st.title("🎲 Generate a List")

    catalog = get_catalog_service()
    history = get_list_history()

    try:
        hubs = catalog.list_hubs(public_only=True)
    except StoreUnavailable as e:
        logger.error(f"Could not load hubs: {e}")
        st.error("Resource hubs are unavailable right now. Please try again shortly.")
        return

    if not hubs:
        st.info("No public resource hubs yet.")
        return

    names = [h.name for h in hubs]
    selected_id = ss_get("gen_selected_hub")
    index = next((i for i, h in enumerate(hubs) if h.id == selected_id), 0)
    name = st.selectbox("Resource hub", names, index=index)
    hub = hubs[names.index(name)]
    ss_set("gen_selected_hub", hub.id)
    odds = get_list_generator().tier_probabilities(hub)
    st.caption(
        f"{len(hub.provisions)} provisions · "
        + " · ".join(f"{r.display_name} {p:.0%}" for r, p in odds.items())
    )

    if st.button("Generate", type="primary"):
        try:
            generated = get_list_generator().generate(hub)
        except ValidationError as e:
            st.error(str(e))
        else:
            history.add(generated)
            ss_set("gen_last_list", generated)
            logger.info(f"Generated list from hub {hub.id} with {len(generated.items)} lines")

    last = ss_get("gen_last_list")
    if last is not None:
        st.subheader(f"{last.hub_name} · {format_timestamp(last)}")
        render_generated_list(last, key="last_list_chart")

    entries = history.all()
    with st.expander(f"History ({len(entries)})"):
        if not entries:
            st.caption("Generated lists will appear here.")
        for entry in entries:
            st.markdown(f"**{entry.hub_name}** · {format_timestamp(entry)} · {format_price(entry.total_value)}")
            st.dataframe(generated_list_to_dataframe(entry), hide_index=True, use_container_width=True)
        if entries and st.button("Clear history"):
            history.clear()
            ss_clear("gen_last_list")
            st.rerun()


if __name__ == "__main__":
    main()
