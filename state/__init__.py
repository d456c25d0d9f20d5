"""
State Management Module

Centralized state management for Streamlit session state.
This module belongs in the presentation layer and provides:
- Session state utilities (ss_get, ss_init, ss_set, ss_clear)
- Service registry for per-session singletons (get_service)
- Session-scoped key-value storage for list history

Usage:
    from state import ss_get, ss_init
    from state import get_service
"""

from state.session_state import ss_get, ss_init, ss_set, ss_clear
from state.service_registry import get_service
from state.history_state import SessionStateKeyValueStore

__all__ = [
    # Session state utilities
    'ss_get',
    'ss_init',
    'ss_set',
    'ss_clear',
    # Service registry
    'get_service',
    # History storage
    'SessionStateKeyValueStore',
]
