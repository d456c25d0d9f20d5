"""
Session State Utilities

Thin helpers over Streamlit session state for page-level keys
(selected hub, last generated list, last seen notification).
"""

import streamlit as st
from typing import TypeVar, Any, Optional

T = TypeVar('T')


def ss_get(key: str, default: T = None) -> Optional[T]:
    """Session value for key, or default when it is missing or None."""
    val = st.session_state.get(key)
    return default if val is None else val


def ss_init(defaults: dict[str, Any]) -> None:
    """Seed page keys on first render; values already in the session win."""
    for key, default in defaults.items():
        st.session_state.setdefault(key, default)


def ss_set(key: str, value: Any) -> None:
    st.session_state[key] = value


def ss_clear(*keys: str) -> None:
    """Drop the given keys; missing keys are ignored."""
    for key in keys:
        st.session_state.pop(key, None)
