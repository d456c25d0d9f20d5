"""
Service Registry

Per-session singleton management for services and repositories.
Services and repositories call get_service from their factory functions
instead of touching st.session_state themselves.
"""

import streamlit as st
from typing import TypeVar, Callable

T = TypeVar('T')

_PREFIX = "_svc_"


def get_service(service_name: str, factory: Callable[[], T]) -> T:
    """Get or create a service instance in session state.

    Args:
        service_name: Unique key for the service
        factory: Zero-argument callable that creates the service instance

    Returns:
        The service instance (either cached or newly created)

    Example:
        def get_catalog_service() -> CatalogService:
            from state import get_service
            return get_service('catalog_service', CatalogService.create_default)
    """
    key = _PREFIX + service_name
    if key not in st.session_state:
        st.session_state[key] = factory()
    return st.session_state[key]

