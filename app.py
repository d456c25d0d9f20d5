"""Lodestone Streamlit entry point.

Run with:
    streamlit run app.py
"""

import streamlit as st

from logging_config import setup_logging

logger = setup_logging(__name__)

st.set_page_config(page_title="Lodestone", page_icon="🧭", layout="wide")

pages = [
    st.Page("pages/home.py", title="Home", icon="🏠", default=True),
    st.Page("pages/generator.py", title="Generate", icon="🎲"),
    st.Page("pages/admin.py", title="Admin", icon="🛠️"),
]

st.navigation(pages).run()
