"""
Catalog Repository

Encapsulates all resource hub and provision document access. Provisions
live in their own collection and point at their hub through hubId.
"""

from typing import Optional

from domain.errors import NotFoundError, ValidationError
from domain.models import Provision, ResourceHub
from logging_config import setup_logging
from repositories.base import BaseRepository
from repositories.document_store import DocumentStore

logger = setup_logging(__name__, log_file="catalog_repo.log")

HUBS_COLLECTION = "resourceHubs"
PROVISIONS_COLLECTION = "provisions"


class CatalogRepository(BaseRepository):
    """Hubs and provisions over the document store."""

    def __init__(self, store: DocumentStore):
        super().__init__(store, logger)

    # -----------------------------------------------------------------
    # Provisions
    # -----------------------------------------------------------------

    def list_provisions(self, hub_id: Optional[str] = None) -> list[Provision]:
        """All provisions, optionally only those of one hub.

        Documents that fail validation are logged and skipped.
        """
        provisions = []
        for doc_id, doc in self.read_collection(PROVISIONS_COLLECTION):
            if hub_id is not None and doc.get("hubId") != hub_id:
                continue
            try:
                provisions.append(Provision.from_document(doc_id, doc))
            except ValidationError as e:
                self._logger.warning(f"Skipping invalid provision {doc_id}: {e}")
        return provisions

    def get_provision(self, provision_id: str) -> Provision:
        doc = self.read_document(PROVISIONS_COLLECTION, provision_id)
        if doc is None:
            raise NotFoundError(f"Provision '{provision_id}' not found")
        return Provision.from_document(provision_id, doc)

    def save_provision(self, provision: Provision) -> None:
        self.store.set_document(PROVISIONS_COLLECTION, provision.id, provision.to_document())

    def delete_provision(self, provision_id: str) -> None:
        self.store.delete_document(PROVISIONS_COLLECTION, provision_id)

    # -----------------------------------------------------------------
    # Hubs
    # -----------------------------------------------------------------

    def list_hubs(self, include_provisions: bool = True) -> list[ResourceHub]:
        """All hubs, sorted by name, with their provisions joined in."""
        by_hub: dict[str, list[Provision]] = {}
        if include_provisions:
            for provision in self.list_provisions():
                by_hub.setdefault(provision.hub_id, []).append(provision)

        hubs = []
        for doc_id, doc in self.read_collection(HUBS_COLLECTION):
            try:
                hubs.append(ResourceHub.from_document(doc_id, doc, by_hub.get(doc_id, [])))
            except ValidationError as e:
                self._logger.warning(f"Skipping invalid hub {doc_id}: {e}")
        return sorted(hubs, key=lambda h: h.name.lower())

    def get_hub(self, hub_id: str) -> ResourceHub:
        """Load one hub with its provisions.

        Raises:
            NotFoundError: If the hub doesn't exist
        """
        doc = self.read_document(HUBS_COLLECTION, hub_id)
        if doc is None:
            raise NotFoundError(f"Resource hub '{hub_id}' not found")
        return ResourceHub.from_document(hub_id, doc, self.list_provisions(hub_id))

    def save_hub(self, hub: ResourceHub) -> None:
        self.store.set_document(HUBS_COLLECTION, hub.id, hub.to_document())

    def delete_hub(self, hub_id: str) -> None:
        self.store.delete_document(HUBS_COLLECTION, hub_id)


def get_catalog_repository() -> CatalogRepository:
    """Get or create a CatalogRepository instance.

    Uses state.get_service for session state persistence across reruns.
    Falls back to direct instantiation if state module unavailable.
    """
    def _create() -> CatalogRepository:
        from config import get_document_store
        return CatalogRepository(get_document_store())

    try:
        from state import get_service
        return get_service("catalog_repository", _create)
    except ImportError:
        logger.debug("state module unavailable, creating new CatalogRepository instance")
        return _create()
