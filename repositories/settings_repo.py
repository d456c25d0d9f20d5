"""
Settings Repository

Reads, writes and watches the singleton settings document.
"""

from typing import Callable, Optional

from domain.errors import ValidationError
from domain.models import AppSettings
from logging_config import setup_logging
from repositories.base import BaseRepository
from repositories.document_store import Document, DocumentStore, Unsubscribe

logger = setup_logging(__name__, log_file="settings_repo.log")

DEFAULT_COLLECTION = "settings"
DEFAULT_DOCUMENT_ID = "general"


class SettingsRepository(BaseRepository):
    """Access to the settings/general document."""

    def __init__(
        self,
        store: DocumentStore,
        collection: str = DEFAULT_COLLECTION,
        document_id: str = DEFAULT_DOCUMENT_ID,
    ):
        super().__init__(store, logger)
        self.collection = collection
        self.document_id = document_id

    @property
    def path(self) -> str:
        return f"{self.collection}/{self.document_id}"

    def get_settings(self) -> Optional[AppSettings]:
        """Return the stored settings, or None when the document is absent.

        Raises:
            StoreUnavailable: If the store can't be read
            ValidationError: If the document is malformed
        """
        doc = self.read_document(self.collection, self.document_id)
        return AppSettings.from_document(doc) if doc is not None else None

    def save_settings(self, settings: AppSettings) -> None:
        self.store.set_document(self.collection, self.document_id, settings.to_document())
        self._logger.info(f"Saved {self.path}: {settings.to_document()}")

    def ensure_defaults(self) -> AppSettings:
        """Create the document with defaults if it doesn't exist yet."""
        current = self.get_settings()
        if current is not None:
            return current
        defaults = AppSettings.enabled()
        self.save_settings(defaults)
        return defaults

    def subscribe(
        self,
        on_change: Callable[[Optional[AppSettings]], None],
        on_error: Callable[[Exception], None],
    ) -> Unsubscribe:
        """Watch the settings document.

        on_change receives None when the document doesn't exist. Malformed
        documents are reported through on_error as ValidationError.
        """

        def _on_document(doc: Optional[Document]) -> None:
            if doc is None:
                on_change(None)
                return
            try:
                settings = AppSettings.from_document(doc)
            except ValidationError as e:
                self._logger.error(f"Malformed settings document at {self.path}: {e}")
                on_error(e)
                return
            on_change(settings)

        return self.store.subscribe(self.collection, self.document_id, _on_document, on_error)
