"""
Home Page

Welcome screen with Google sign-in, or a link to the admin dashboard for
signed-in users.
"""

import streamlit as st

from logging_config import setup_logging

logger = setup_logging(__name__, log_file="pages.log")


def main():
    _, nav = st.columns([0.85, 0.15])
    with nav:
        if st.user.is_logged_in:
            st.page_link("pages/admin.py", label="Admin", icon="🛠️")
        elif st.button("Login", type="primary", use_container_width=True):
            logger.info("Starting Google login")
            st.login("google")

    st.title("Welcome to Lodestone")
    st.markdown("Create and manage inventory lists for your RPG characters.")
    st.page_link("pages/generator.py", label="Generate a list", icon="🎲")


if __name__ == "__main__":
    main()
