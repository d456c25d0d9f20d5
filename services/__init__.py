"""
Services Package

This package contains service modules that implement Lodestone's business
logic using clean architecture patterns.

Each service module follows these principles:
1. Single Responsibility - one domain per service
2. Dependency Injection - dependencies passed in, not created
3. Protocol - interfaces for testability (KeyValueStore, TimerHandle)
4. Dataclasses - structured domain models

Streamlit Caching Pattern:
- Per-session services live in the service registry (state.get_service)
- The settings state machine is process-wide via @st.cache_resource

Available Services:
- ListGenerator: Rarity-weighted list generation
- ListHistory: Newest-first, capacity-bounded history of generated lists
- SettingsStateMachine: Deletion-confirmation toggle with auto re-enable
- CatalogService: Resource hub and provision CRUD
"""

# -----------------------------------------------------------------------------
# List Generator
# -----------------------------------------------------------------------------
from services.generator_service import (
    ListGenerator,
    get_list_generator,
)

# -----------------------------------------------------------------------------
# List History
# -----------------------------------------------------------------------------
from services.history_service import (
    ListHistory,
    get_list_history,
    KeyValueStore,
    InMemoryKeyValueStore,
    JsonFileKeyValueStore,
    HISTORY_KEY,
)

# -----------------------------------------------------------------------------
# Settings State Machine
# -----------------------------------------------------------------------------
from services.settings_state import (
    SettingsStateMachine,
    SettingsNotification,
    get_settings_state_machine,
)

# -----------------------------------------------------------------------------
# Catalog
# -----------------------------------------------------------------------------
from services.catalog_service import (
    CatalogService,
    get_catalog_service,
    SAMPLE_HUBS,
)

from services.auth_service import is_admin_email

__all__ = [
    # === List Generator ===
    'ListGenerator',
    'get_list_generator',

    # === List History ===
    'ListHistory',
    'get_list_history',
    'KeyValueStore',
    'InMemoryKeyValueStore',
    'JsonFileKeyValueStore',
    'HISTORY_KEY',

    # === Settings ===
    'SettingsStateMachine',
    'SettingsNotification',
    'get_settings_state_machine',

    # === Catalog ===
    'CatalogService',
    'get_catalog_service',
    'SAMPLE_HUBS',

    # === Auth ===
    'is_admin_email',
]
