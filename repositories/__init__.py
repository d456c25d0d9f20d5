"""
Repository Layer Package

This package contains repository classes that encapsulate all document
store access. Repositories provide a clean abstraction over the store,
making the code more testable and maintainable.

Key Components:
- DocumentStore: Gateway protocol with Firestore and in-memory backends
- BaseRepository: Foundation class with retrying reads
- SettingsRepository: The singleton settings document and its subscription
- CatalogRepository: Resource hubs and provisions
"""

from repositories.document_store import (
    DocumentStore,
    FirestoreDocumentStore,
    InMemoryDocumentStore,
)
from repositories.base import BaseRepository, new_document_id
from repositories.settings_repo import SettingsRepository
from repositories.catalog_repo import (
    CatalogRepository,
    get_catalog_repository,
    HUBS_COLLECTION,
    PROVISIONS_COLLECTION,
)

__all__ = [
    "DocumentStore",
    "FirestoreDocumentStore",
    "InMemoryDocumentStore",
    "BaseRepository",
    "new_document_id",
    "SettingsRepository",
    "CatalogRepository",
    "get_catalog_repository",
    "HUBS_COLLECTION",
    "PROVISIONS_COLLECTION",
]
