"""
Base Repository

Provides the foundation for all repository classes: read helpers over the
DocumentStore gateway with a single retry on transient store failures.

Design Principles:
1. Dependency Injection - Receives a DocumentStore, doesn't create it
2. Transient Recovery - Reads are retried once before StoreUnavailable propagates
3. Consistent interface - All repositories inherit this pattern
"""

import uuid
from typing import Any, Optional
import logging

from domain.errors import StoreUnavailable
from logging_config import setup_logging
from repositories.document_store import Document, DocumentStore

logger = setup_logging(__name__)


def new_document_id() -> str:
    """Return a 20-character id in the style of Firestore auto ids."""
    return uuid.uuid4().hex[:20]


class BaseRepository:
    """
    Base class for all repository implementations.

    Provides read_document() and read_collection() with recovery:
    1. Try the read
    2. On StoreUnavailable -> log and retry once
    3. If the retry fails -> raise StoreUnavailable to the caller

    Attributes:
        store: DocumentStore instance for data access
    """

    def __init__(self, store: DocumentStore, logger_instance: Optional[logging.Logger] = None):
        """
        Initialize repository with a document store.

        Args:
            store: DocumentStore instance
            logger_instance: Optional logger (defaults to module logger)
        """
        self.store = store
        self._logger = logger_instance or logger

    def _with_retry(self, description: str, fn, *args) -> Any:
        try:
            return fn(*args)
        except StoreUnavailable as e:
            self._logger.error(f"{description} failed ('{e}'); retrying once")
            return fn(*args)

    def read_document(self, collection: str, doc_id: str) -> Optional[Document]:
        """Read one document, or None when it doesn't exist."""
        return self._with_retry(
            f"Read of {collection}/{doc_id}", self.store.get_document, collection, doc_id
        )

    def read_collection(self, collection: str) -> list[tuple[str, Document]]:
        """Read every (id, document) pair in a collection."""
        return self._with_retry(f"List of {collection}", self.store.list_documents, collection)
