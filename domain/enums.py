"""
Domain Enums

Enumerations for categorical data used throughout Lodestone.
These replace magic strings and provide type safety.
"""

from enum import Enum, auto


class Rarity(Enum):
    """
    Ordinal rarity tiers for provisions.

    The value is the string stored in provision documents. Declaration
    order is the ordinal order (common is the most frequent tier).
    """
    COMMON = "common"
    UNCOMMON = "uncommon"
    RARE = "rare"
    VERY_RARE = "very_rare"
    LEGENDARY = "legendary"

    @classmethod
    def from_string(cls, name: str) -> "Rarity":
        """
        Convert a rarity name to a Rarity.

        Args:
            name: Rarity name (case-insensitive, spaces or hyphens allowed)
                  Accepts: "common", "Very Rare", "very-rare", "LEGENDARY"

        Returns:
            Corresponding Rarity value

        Raises:
            ValueError: If name doesn't match a known rarity

        Example:
            >>> Rarity.from_string("Very Rare")
            <Rarity.VERY_RARE: 'very_rare'>
        """
        key = str(name).strip().lower().replace(" ", "_").replace("-", "_")
        for rarity in cls:
            if rarity.value == key:
                return rarity
        raise ValueError(
            f"Invalid rarity: {name}. "
            f"Must be one of: {', '.join(r.value for r in cls)}"
        )

    @classmethod
    def display_order(cls) -> list["Rarity"]:
        """Return rarities from most to least common."""
        return list(cls)

    @property
    def rank(self) -> int:
        return Rarity.display_order().index(self)

    @property
    def display_name(self) -> str:
        return self.value.replace("_", " ").title()

    @property
    def display_color(self) -> str:
        """Return the Streamlit badge color for this rarity."""
        return {
            Rarity.COMMON: "gray",
            Rarity.UNCOMMON: "green",
            Rarity.RARE: "blue",
            Rarity.VERY_RARE: "violet",
            Rarity.LEGENDARY: "orange",
        }[self]


class SettingsState(Enum):
    """
    States of the deletion-confirmation settings machine.

    ENABLED -> DISABLED_PENDING_REVERT on explicit disable.
    DISABLED_PENDING_REVERT -> ENABLED on timer expiry or explicit re-enable.
    """
    ENABLED = auto()
    DISABLED_PENDING_REVERT = auto()
