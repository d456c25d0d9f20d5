"""
Domain Models

Dataclasses representing the core domain entities for Lodestone.
These models provide typed, structured data in place of the raw
dictionaries that come back from the document store.

Design Principles:
1. Immutability (frozen=True) - Generated lists are snapshots and never change
2. Factory methods - Clean construction from store documents
3. Computed properties - Business logic encapsulated in the model
4. Validation at construction - Invalid data raises ValidationError
"""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Mapping, Optional

from domain.converters import (
    format_timestamp,
    parse_timestamp,
    safe_float,
    safe_int,
    safe_str,
)
from domain.enums import Rarity, SettingsState
from domain.errors import ValidationError


# Type aliases for clarity
HubID = str
ProvisionID = str
Price = float


def _coerce_rarity(value: Any) -> Rarity:
    if isinstance(value, Rarity):
        return value
    try:
        return Rarity.from_string(value)
    except ValueError as e:
        raise ValidationError(str(e)) from e


# =============================================================================
# Provision - An item definition belonging to a hub
# =============================================================================

@dataclass(frozen=True)
class Provision:
    """
    An item definition with a rarity and a price.

    Attributes:
        id: Document id in the provisions collection
        name: Display name
        rarity: Rarity tier, drives selection weight
        price: Unit price, strictly positive
        hub_id: Id of the resource hub the provision belongs to
    """
    id: ProvisionID
    name: str
    rarity: Rarity
    price: Price
    hub_id: HubID = ""

    def __post_init__(self):
        if not self.name:
            raise ValidationError("Provision name must not be empty")
        if self.price <= 0:
            raise ValidationError(f"Provision '{self.name}' must have a positive price, got {self.price}")

    @classmethod
    def from_document(cls, doc_id: str, data: Mapping[str, Any]) -> "Provision":
        """
        Factory method to create a Provision from a store document.

        Args:
            doc_id: The document id
            data: Document fields (name, rarity, price, hubId)

        Raises:
            ValidationError: If a field is missing or invalid
        """
        try:
            price = safe_float(data.get("price"))
        except (TypeError, ValueError) as e:
            raise ValidationError(f"Provision {doc_id} has an invalid price: {data.get('price')!r}") from e
        return cls(
            id=doc_id,
            name=safe_str(data.get("name")),
            rarity=_coerce_rarity(data.get("rarity", "common")),
            price=price,
            hub_id=safe_str(data.get("hubId")),
        )

    def to_document(self) -> dict:
        return {
            "name": self.name,
            "rarity": self.rarity.value,
            "price": self.price,
            "hubId": self.hub_id,
        }


# =============================================================================
# ResourceHub - A named collection of provisions
# =============================================================================

@dataclass(frozen=True)
class ResourceHub:
    """
    A named collection of provisions lists are generated from.

    Provisions are stored in their own collection and joined in by hubId,
    so a hub loaded on its own has an empty provisions tuple.
    """
    id: HubID
    name: str
    provisions: tuple[Provision, ...] = field(default_factory=tuple)
    is_public: bool = True

    def __post_init__(self):
        if not self.name:
            raise ValidationError("Hub name must not be empty")

    @classmethod
    def from_document(
        cls,
        doc_id: str,
        data: Mapping[str, Any],
        provisions: Optional[list[Provision]] = None,
    ) -> "ResourceHub":
        """
        Factory method to create a ResourceHub from a store document.

        Raises:
            ValidationError: If the name is blank or isPublic is not a boolean
        """
        is_public = data.get("isPublic", True)
        if not isinstance(is_public, bool):
            raise ValidationError(f"Hub {doc_id}: isPublic must be a boolean, got {is_public!r}")
        return cls(
            id=doc_id,
            name=safe_str(data.get("name")),
            provisions=tuple(provisions or ()),
            is_public=is_public,
        )

    def to_document(self) -> dict:
        return {"name": self.name, "isPublic": self.is_public}

    @property
    def is_empty(self) -> bool:
        return not self.provisions

    @property
    def rarity_tiers(self) -> dict[Rarity, tuple[Provision, ...]]:
        """Provisions grouped by rarity, only tiers present, most common first."""
        tiers: dict[Rarity, tuple[Provision, ...]] = {}
        for rarity in Rarity.display_order():
            members = tuple(p for p in self.provisions if p.rarity is rarity)
            if members:
                tiers[rarity] = members
        return tiers


# =============================================================================
# RarityWeights - Relative selection weight per rarity tier
# =============================================================================

DEFAULT_RARITY_WEIGHTS: dict[Rarity, float] = {
    Rarity.COMMON: 60.0,
    Rarity.UNCOMMON: 25.0,
    Rarity.RARE: 10.0,
    Rarity.VERY_RARE: 4.0,
    Rarity.LEGENDARY: 1.0,
}


@dataclass(frozen=True)
class RarityWeights:
    """
    Relative selection weight per rarity tier.

    Weights are relative, not probabilities; a tier with weight 0 is
    never selected.
    """
    weights: tuple[tuple[Rarity, float], ...] = tuple(DEFAULT_RARITY_WEIGHTS.items())

    def __post_init__(self):
        for rarity, weight in self.weights:
            if weight < 0:
                raise ValidationError(f"Weight for {rarity.value} must not be negative, got {weight}")

    @classmethod
    def from_mapping(cls, mapping: Mapping[str, Any]) -> "RarityWeights":
        """
        Build weights from a {rarity name: weight} mapping.

        Rarities missing from the mapping keep their default weight.

        Raises:
            ValidationError: On an unknown rarity name or a negative weight
        """
        merged = dict(DEFAULT_RARITY_WEIGHTS)
        for name, weight in mapping.items():
            merged[_coerce_rarity(name)] = safe_float(weight)
        return cls(weights=tuple((r, merged[r]) for r in Rarity.display_order()))

    def weight_for(self, rarity: Rarity) -> float:
        for r, w in self.weights:
            if r is rarity:
                return w
        return 0.0


# =============================================================================
# GeneratedItem / GeneratedList - Immutable generation snapshot
# =============================================================================

@dataclass(frozen=True)
class GeneratedItem:
    """One line of a generated list: a provision snapshot and how many were drawn."""
    provision_id: ProvisionID
    name: str
    rarity: Rarity
    price: Price
    count: int = 1

    def __post_init__(self):
        if self.count < 1:
            raise ValidationError(f"Item '{self.name}' must have a count of at least 1, got {self.count}")

    @classmethod
    def from_provision(cls, provision: Provision, count: int = 1) -> "GeneratedItem":
        return cls(
            provision_id=provision.id,
            name=provision.name,
            rarity=provision.rarity,
            price=provision.price,
            count=count,
        )

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "GeneratedItem":
        return cls(
            provision_id=safe_str(data.get("provisionId")),
            name=safe_str(data.get("name")),
            rarity=_coerce_rarity(data.get("rarity", "common")),
            price=safe_float(data.get("price")),
            count=safe_int(data.get("count"), 1),
        )

    def to_dict(self) -> dict:
        return {
            "provisionId": self.provision_id,
            "name": self.name,
            "rarity": self.rarity.value,
            "price": self.price,
            "count": self.count,
        }

    @property
    def line_value(self) -> Price:
        return self.price * self.count


@dataclass(frozen=True)
class GeneratedList:
    """
    An immutable snapshot produced by one generation request.

    Items keep first-selection order.
    """
    hub_id: HubID
    hub_name: str
    items: tuple[GeneratedItem, ...]
    timestamp: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "GeneratedList":
        return cls(
            hub_id=safe_str(data.get("hubId")),
            hub_name=safe_str(data.get("hubName")),
            items=tuple(GeneratedItem.from_dict(i) for i in data.get("items", [])),
            timestamp=parse_timestamp(data.get("timestamp")) or datetime.now(timezone.utc),
        )

    def to_dict(self) -> dict:
        return {
            "hubId": self.hub_id,
            "hubName": self.hub_name,
            "items": [i.to_dict() for i in self.items],
            "timestamp": format_timestamp(self.timestamp),
        }

    @property
    def total_value(self) -> Price:
        return sum(i.line_value for i in self.items)

    @property
    def total_count(self) -> int:
        return sum(i.count for i in self.items)


# =============================================================================
# AppSettings - The global settings document
# =============================================================================

@dataclass(frozen=True)
class AppSettings:
    """
    The singleton settings document.

    deletion_confirmation_disabled_at is only kept while the confirmation
    is disabled; enabling always clears it.
    """
    show_deletion_confirmation: bool = True
    deletion_confirmation_disabled_at: Optional[datetime] = None

    def __post_init__(self):
        if self.show_deletion_confirmation and self.deletion_confirmation_disabled_at is not None:
            object.__setattr__(self, "deletion_confirmation_disabled_at", None)

    @classmethod
    def enabled(cls) -> "AppSettings":
        return cls(show_deletion_confirmation=True, deletion_confirmation_disabled_at=None)

    @classmethod
    def disabled(cls, at: datetime) -> "AppSettings":
        return cls(show_deletion_confirmation=False, deletion_confirmation_disabled_at=at)

    @classmethod
    def from_document(cls, data: Mapping[str, Any]) -> "AppSettings":
        """
        Parse the settings document.

        Raises:
            ValidationError: If the flag is not a boolean or the timestamp
                cannot be parsed
        """
        show = data.get("showDeletionConfirmation", True)
        if not isinstance(show, bool):
            raise ValidationError(f"showDeletionConfirmation must be a boolean, got {show!r}")
        try:
            disabled_at = parse_timestamp(data.get("deletionConfirmationDisabledAt"))
        except ValueError as e:
            raise ValidationError(f"Malformed deletionConfirmationDisabledAt: {e}") from e
        return cls(show_deletion_confirmation=show, deletion_confirmation_disabled_at=disabled_at)

    def to_document(self) -> dict:
        return {
            "showDeletionConfirmation": self.show_deletion_confirmation,
            "deletionConfirmationDisabledAt": format_timestamp(self.deletion_confirmation_disabled_at),
        }

    @property
    def state(self) -> SettingsState:
        if self.show_deletion_confirmation:
            return SettingsState.ENABLED
        return SettingsState.DISABLED_PENDING_REVERT
