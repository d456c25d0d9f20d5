"""
Client-scoped history storage.

KeyValueStore over Streamlit session state, plus the id that scopes
file-backed history to one client.
"""

import hashlib
import uuid
from typing import Any, Callable, Optional

import streamlit as st

CLIENT_ID_KEY = "_client_id"


def current_client_id() -> str:
    """Stable id for the current client.

    Signed-in users get a hash of their email, so their history follows
    them across sessions on this server. Anonymous visitors get a random
    id that lives as long as their browser session.
    """
    if st.user.is_logged_in:
        email = (st.user.get("email") or "").strip().lower()
        if email:
            return hashlib.sha256(email.encode("utf-8")).hexdigest()[:32]
    client_id = st.session_state.get(CLIENT_ID_KEY)
    if client_id is None:
        client_id = uuid.uuid4().hex
        st.session_state[CLIENT_ID_KEY] = client_id
    return client_id


class SessionStateKeyValueStore:
    """KeyValueStore backed by st.session_state."""

    def __init__(self, namespace: str = "kv"):
        self.namespace = namespace

    def _key(self, key: str) -> str:
        return f"{self.namespace}:{key}"

    def get(self, key: str) -> Optional[Any]:
        return st.session_state.get(self._key(key))

    def set(self, key: str, value: Any) -> None:
        st.session_state[self._key(key)] = value

    def update(self, key: str, fn: Callable[[Optional[Any]], Any]) -> None:
        # Session state belongs to one script run thread at a time
        self.set(key, fn(self.get(key)))
