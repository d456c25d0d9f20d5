"""
Document Store Gateway

Schemaless key-document storage addressed by (collection, id), with live
subscriptions. Repositories depend on the DocumentStore protocol only, so
the hosted Firestore backend and the in-memory backend are interchangeable.
"""

import copy
import threading
from typing import Any, Callable, Optional, Protocol

from google.api_core import exceptions as google_exceptions

from domain.errors import StoreUnavailable
from logging_config import setup_logging

logger = setup_logging(__name__, log_file="document_store.log")

Document = dict[str, Any]
OnChange = Callable[[Optional[Document]], None]
OnError = Callable[[Exception], None]
Unsubscribe = Callable[[], None]


class DocumentStore(Protocol):
    def get_document(self, collection: str, doc_id: str) -> Optional[Document]: ...

    def set_document(self, collection: str, doc_id: str, value: Document) -> None: ...

    def delete_document(self, collection: str, doc_id: str) -> None: ...

    def list_documents(self, collection: str) -> list[tuple[str, Document]]: ...

    def subscribe(
        self, collection: str, doc_id: str, on_change: OnChange, on_error: OnError
    ) -> Unsubscribe: ...


# =============================================================================
# Firestore
# =============================================================================

class FirestoreDocumentStore:
    """DocumentStore backed by a google.cloud.firestore client.

    Google API failures are raised as StoreUnavailable.
    """

    def __init__(self, client):
        self._client = client

    def _ref(self, collection: str, doc_id: str):
        return self._client.collection(collection).document(doc_id)

    def get_document(self, collection: str, doc_id: str) -> Optional[Document]:
        try:
            snapshot = self._ref(collection, doc_id).get()
        except google_exceptions.GoogleAPIError as e:
            raise StoreUnavailable("read", f"{collection}/{doc_id}", e) from e
        return snapshot.to_dict() if snapshot.exists else None

    def set_document(self, collection: str, doc_id: str, value: Document) -> None:
        try:
            self._ref(collection, doc_id).set(value)
        except google_exceptions.GoogleAPIError as e:
            raise StoreUnavailable("write", f"{collection}/{doc_id}", e) from e

    def delete_document(self, collection: str, doc_id: str) -> None:
        try:
            self._ref(collection, doc_id).delete()
        except google_exceptions.GoogleAPIError as e:
            raise StoreUnavailable("delete", f"{collection}/{doc_id}", e) from e

    def list_documents(self, collection: str) -> list[tuple[str, Document]]:
        try:
            return [(snap.id, snap.to_dict() or {}) for snap in self._client.collection(collection).stream()]
        except google_exceptions.GoogleAPIError as e:
            raise StoreUnavailable("list", collection, e) from e

    def subscribe(
        self, collection: str, doc_id: str, on_change: OnChange, on_error: OnError
    ) -> Unsubscribe:
        path = f"{collection}/{doc_id}"

        # Firestore invokes this on its watch thread
        def _on_snapshot(snapshots, changes, read_time):
            try:
                for snap in snapshots:
                    on_change(snap.to_dict() if snap.exists else None)
            except Exception as e:
                logger.exception(f"Snapshot handler for {path} failed")
                on_error(e)

        try:
            watch = self._ref(collection, doc_id).on_snapshot(_on_snapshot)
        except google_exceptions.GoogleAPIError as e:
            error = StoreUnavailable("subscribe", path, e)
            on_error(error)
            return lambda: None
        return watch.unsubscribe


# =============================================================================
# In-memory
# =============================================================================

class InMemoryDocumentStore:
    """Process-local DocumentStore for development and tests.

    Mirrors Firestore's listener behaviour: subscribe() delivers the current
    document immediately, and every write is pushed to the document's
    listeners. Listeners run on the writing thread, outside the store lock.
    """

    def __init__(self):
        self._lock = threading.RLock()
        self._docs: dict[str, dict[str, Document]] = {}
        self._listeners: dict[tuple[str, str], list[tuple[OnChange, OnError]]] = {}

    def get_document(self, collection: str, doc_id: str) -> Optional[Document]:
        with self._lock:
            doc = self._docs.get(collection, {}).get(doc_id)
            return copy.deepcopy(doc)

    def set_document(self, collection: str, doc_id: str, value: Document) -> None:
        with self._lock:
            self._docs.setdefault(collection, {})[doc_id] = copy.deepcopy(dict(value))
        self._notify(collection, doc_id)

    def delete_document(self, collection: str, doc_id: str) -> None:
        with self._lock:
            self._docs.get(collection, {}).pop(doc_id, None)
        self._notify(collection, doc_id)

    def list_documents(self, collection: str) -> list[tuple[str, Document]]:
        with self._lock:
            return [(doc_id, copy.deepcopy(doc)) for doc_id, doc in self._docs.get(collection, {}).items()]

    def subscribe(
        self, collection: str, doc_id: str, on_change: OnChange, on_error: OnError
    ) -> Unsubscribe:
        key = (collection, doc_id)
        entry = (on_change, on_error)
        with self._lock:
            self._listeners.setdefault(key, []).append(entry)

        def _unsubscribe() -> None:
            with self._lock:
                listeners = self._listeners.get(key, [])
                if entry in listeners:
                    listeners.remove(entry)

        self._deliver(entry, self.get_document(collection, doc_id))
        return _unsubscribe

    def listener_count(self, collection: str, doc_id: str) -> int:
        with self._lock:
            return len(self._listeners.get((collection, doc_id), []))

    def _notify(self, collection: str, doc_id: str) -> None:
        with self._lock:
            listeners = list(self._listeners.get((collection, doc_id), []))
        for entry in listeners:
            self._deliver(entry, self.get_document(collection, doc_id))

    @staticmethod
    def _deliver(entry: tuple[OnChange, OnError], doc: Optional[Document]) -> None:
        on_change, on_error = entry
        try:
            on_change(doc)
        except Exception as e:
            logger.exception("Document listener failed")
            on_error(e)
