"""
Catalog Service

Admin CRUD for resource hubs and provisions. Validates form input into
domain models before anything is written.

Design Principles:
1. Dependency Injection - CatalogRepository passed in, not created
2. No Streamlit imports - pages and the API call the same methods
3. Deleting a hub deletes its provisions
"""

from dataclasses import replace
from typing import Optional

from domain.enums import Rarity
from domain.errors import NotFoundError, ValidationError
from domain.models import Provision, ResourceHub
from logging_config import setup_logging
from repositories.base import new_document_id
from repositories.catalog_repo import CatalogRepository

logger = setup_logging(__name__, log_file="catalog_service.log")


class CatalogService:
    """Resource hub and provision management.

    Args:
        repo: CatalogRepository instance for data access.
    """

    def __init__(self, repo: CatalogRepository):
        self._repo = repo

    @classmethod
    def create_default(cls) -> "CatalogService":
        from repositories.catalog_repo import get_catalog_repository
        return cls(get_catalog_repository())

    # -----------------------------------------------------------------
    # Hubs
    # -----------------------------------------------------------------

    def list_hubs(self, public_only: bool = False) -> list[ResourceHub]:
        hubs = self._repo.list_hubs()
        if public_only:
            hubs = [h for h in hubs if h.is_public]
        return hubs

    def get_hub(self, hub_id: str) -> ResourceHub:
        return self._repo.get_hub(hub_id)

    def create_hub(self, name: str, is_public: bool = True, hub_id: Optional[str] = None) -> ResourceHub:
        """Create a hub.

        Raises:
            ValidationError: If the name is blank or already used
        """
        name = (name or "").strip()
        existing = {h.name.lower() for h in self._repo.list_hubs(include_provisions=False)}
        if name.lower() in existing:
            raise ValidationError(f"A resource hub named '{name}' already exists")
        hub = ResourceHub(id=hub_id or new_document_id(), name=name, is_public=is_public)
        self._repo.save_hub(hub)
        logger.info(f"Created hub {hub.id} '{hub.name}'")
        return hub

    def set_hub_visibility(self, hub_id: str, is_public: bool) -> ResourceHub:
        hub = self._repo.get_hub(hub_id)
        updated = replace(hub, is_public=is_public)
        self._repo.save_hub(updated)
        return updated

    def delete_hub(self, hub_id: str) -> int:
        """Delete a hub and its provisions. Returns the number of provisions removed."""
        hub = self._repo.get_hub(hub_id)
        for provision in hub.provisions:
            self._repo.delete_provision(provision.id)
        self._repo.delete_hub(hub_id)
        logger.info(f"Deleted hub {hub_id} and {len(hub.provisions)} provisions")
        return len(hub.provisions)

    # -----------------------------------------------------------------
    # Provisions
    # -----------------------------------------------------------------

    def list_provisions(self, hub_id: Optional[str] = None) -> list[Provision]:
        provisions = self._repo.list_provisions(hub_id)
        return sorted(provisions, key=lambda p: (p.rarity.rank, p.name.lower()))

    def create_provision(
        self,
        name: str,
        rarity: Rarity | str,
        price: float | str,
        hub_id: str,
        provision_id: Optional[str] = None,
    ) -> Provision:
        """Create a provision in an existing hub.

        Raises:
            ValidationError: On a blank name, unknown rarity or non-positive price
            NotFoundError: If the hub doesn't exist
        """
        try:
            price = float(price)
        except (TypeError, ValueError) as e:
            raise ValidationError(f"Price must be a number, got {price!r}") from e
        self._repo.get_hub(hub_id)
        provision = Provision.from_document(
            provision_id or new_document_id(),
            {"name": name, "rarity": rarity.value if isinstance(rarity, Rarity) else rarity,
             "price": price, "hubId": hub_id},
        )
        self._repo.save_provision(provision)
        logger.info(f"Created provision {provision.id} '{provision.name}' in hub {hub_id}")
        return provision

    def delete_provision(self, provision_id: str) -> None:
        self._repo.get_provision(provision_id)
        self._repo.delete_provision(provision_id)
        logger.info(f"Deleted provision {provision_id}")

    # -----------------------------------------------------------------
    # Seeding
    # -----------------------------------------------------------------

    def seed(self, hubs: list[dict]) -> int:
        """Load hubs from plain dicts, skipping hubs whose id already exists.

        Each dict: {"id", "name", "isPublic", "provisions": [{"id", "name", "rarity", "price"}]}
        Returns the number of hubs written.
        """
        written = 0
        for raw in hubs:
            try:
                self._repo.get_hub(raw["id"])
                logger.info(f"Hub {raw['id']} already present, skipping")
                continue
            except NotFoundError:
                pass
            hub = ResourceHub(id=raw["id"], name=raw["name"], is_public=raw.get("isPublic", True))
            self._repo.save_hub(hub)
            for p in raw.get("provisions", []):
                self._repo.save_provision(Provision.from_document(p["id"], {**p, "hubId": hub.id}))
            written += 1
        return written


SAMPLE_HUBS = [
    {
        "id": "h1",
        "name": "Forest Cache",
        "isPublic": True,
        "provisions": [
            {"id": "p1", "name": "Trail Rations", "rarity": "common", "price": 5},
            {"id": "p2", "name": "Elven Cloak", "rarity": "rare", "price": 50},
        ],
    },
    {
        "id": "h2",
        "name": "Dwarven Armory",
        "isPublic": True,
        "provisions": [
            {"id": "p3", "name": "Iron Rivets", "rarity": "common", "price": 1},
            {"id": "p4", "name": "Steel Shield", "rarity": "uncommon", "price": 20},
            {"id": "p5", "name": "Mithril Chain", "rarity": "very_rare", "price": 800},
            {"id": "p6", "name": "Runed Warhammer", "rarity": "legendary", "price": 5000},
        ],
    },
]


def get_catalog_service() -> CatalogService:
    """
    Get or create a CatalogService instance.

    Uses state.get_service for session state persistence across reruns.
    Falls back to direct instantiation if state module unavailable.
    """
    try:
        from state import get_service
        return get_service('catalog_service', CatalogService.create_default)
    except ImportError:
        logger.debug("state module unavailable, creating new CatalogService instance")
        return CatalogService.create_default()
