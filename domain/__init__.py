"""
Domain Models Package

This package contains the core domain models for Lodestone.
These dataclasses provide typed, immutable structures in place of
raw store documents.

Key Components:
- Enums: Rarity, SettingsState
- Models: Provision, ResourceHub, RarityWeights, GeneratedItem, GeneratedList, AppSettings
- Errors: LodestoneError, StoreUnavailable, ValidationError, NotFoundError, TimerRaceError
"""

from domain.enums import Rarity, SettingsState
from domain.errors import (
    LodestoneError,
    NotFoundError,
    StoreUnavailable,
    TimerRaceError,
    ValidationError,
)
from domain.models import (
    DEFAULT_RARITY_WEIGHTS,
    AppSettings,
    GeneratedItem,
    GeneratedList,
    Provision,
    RarityWeights,
    ResourceHub,
)

__all__ = [
    # Enums
    "Rarity",
    "SettingsState",
    # Errors
    "LodestoneError",
    "NotFoundError",
    "StoreUnavailable",
    "TimerRaceError",
    "ValidationError",
    # Models
    "DEFAULT_RARITY_WEIGHTS",
    "AppSettings",
    "GeneratedItem",
    "GeneratedList",
    "Provision",
    "RarityWeights",
    "ResourceHub",
]
