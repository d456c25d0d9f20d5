import os
import threading

import firebase_admin
from firebase_admin import credentials, firestore

from logging_config import setup_logging
from settings_service import SettingsService

logger = setup_logging(__name__)

# =============================================================================
# Firestore Configuration
# =============================================================================

# Serializes firebase_admin app initialization within the process
_INIT_LOCK = threading.Lock()

# Process-wide in-memory store used when [store].backend = "memory"
_memory_store = None


class FirestoreConfig:
    """Owns the firebase-admin app and hands out the Firestore client.

    The default firebase app is created once per process. Credentials come
    from GOOGLE_APPLICATION_CREDENTIALS when set, then from
    [firebase].credentials_path, then from application default credentials.
    """

    def __init__(self, project_id: str | None = None, credentials_path: str | None = None):
        self.project_id = project_id
        self.credentials_path = credentials_path
        self._client = None

    @classmethod
    def from_settings(cls, settings: SettingsService | None = None) -> "FirestoreConfig":
        settings = settings or SettingsService()
        fb = settings.firebase
        credentials_path = (
            os.getenv("GOOGLE_APPLICATION_CREDENTIALS", "").strip()
            or fb.get("credentials_path", "")
            or None
        )
        return cls(project_id=fb.get("project_id") or None, credentials_path=credentials_path)

    def _get_app(self) -> firebase_admin.App:
        with _INIT_LOCK:
            try:
                return firebase_admin.get_app()
            except ValueError:
                pass
            cred = credentials.Certificate(self.credentials_path) if self.credentials_path else None
            options = {"projectId": self.project_id} if self.project_id else None
            app = firebase_admin.initialize_app(cred, options)
            logger.info(f"Initialized firebase app for project {self.project_id or '<default>'}")
            return app

    @property
    def client(self):
        if self._client is None:
            self._client = firestore.client(self._get_app())
        return self._client


def get_document_store(settings: SettingsService | None = None):
    """Return the document store selected by [store].backend in settings.toml."""
    from repositories.document_store import FirestoreDocumentStore, InMemoryDocumentStore

    global _memory_store
    settings = settings or SettingsService()
    backend = settings.store_backend
    if backend == "memory":
        with _INIT_LOCK:
            if _memory_store is None:
                logger.info("Using in-memory document store")
                _memory_store = InMemoryDocumentStore()
            return _memory_store
    if backend == "firestore":
        return FirestoreDocumentStore(FirestoreConfig.from_settings(settings).client)
    raise ValueError(f"Unknown store backend '{backend}'. Expected 'firestore' or 'memory'")
