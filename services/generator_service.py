"""
List Generator Service

Pure business logic for building loot/inventory lists from a resource hub.
No Streamlit imports and no persistence: recording a generated list in the
history is the caller's job.

Selection:
1. Draw the number of picks uniformly from [min_picks, max_picks]
2. For each pick, choose a rarity tier present in the hub with probability
   proportional to its weight, then a provision uniformly inside the tier
3. Repeated picks of the same provision collapse into one line with a
   summed count, in first-selection order
"""

import random
from typing import Optional

from domain.enums import Rarity
from domain.errors import ValidationError
from domain.models import GeneratedItem, GeneratedList, Provision, RarityWeights, ResourceHub
from logging_config import setup_logging

logger = setup_logging(__name__, log_file="generator_service.log")


DEFAULT_MIN_PICKS = 3
DEFAULT_MAX_PICKS = 8


class ListGenerator:
    """Weighted-random list generator.

    Args:
        weights: Relative weight per rarity tier
        min_picks: Fewest selections per list (>= 1)
        max_picks: Most selections per list (>= min_picks)
        rng: Random source; pass a seeded random.Random for repeatable output
    """

    def __init__(
        self,
        weights: Optional[RarityWeights] = None,
        min_picks: int = DEFAULT_MIN_PICKS,
        max_picks: int = DEFAULT_MAX_PICKS,
        rng: Optional[random.Random] = None,
    ):
        if min_picks < 1 or max_picks < min_picks:
            raise ValueError(f"Invalid pick range [{min_picks}, {max_picks}]")
        self.weights = weights or RarityWeights()
        self.min_picks = min_picks
        self.max_picks = max_picks
        self._rng = rng or random.Random()

    @classmethod
    def create_default(cls) -> "ListGenerator":
        """Build a generator from settings.toml."""
        from settings_service import SettingsService, get_rarity_weights

        settings = SettingsService()
        return cls(
            weights=get_rarity_weights(),
            min_picks=settings.min_picks,
            max_picks=settings.max_picks,
        )

    def tier_probabilities(self, hub: ResourceHub) -> dict[Rarity, float]:
        """Probability of each tier present in the hub being chosen on one pick."""
        tiers = [r for r in hub.rarity_tiers if self.weights.weight_for(r) > 0]
        total = sum(self.weights.weight_for(r) for r in tiers)
        if total <= 0:
            return {}
        return {r: self.weights.weight_for(r) / total for r in tiers}

    def generate(self, hub: ResourceHub) -> GeneratedList:
        """Generate a list from the hub's provisions.

        Raises:
            ValidationError: If the hub has no provisions, or none in a
                tier with a positive weight
        """
        if hub.is_empty:
            raise ValidationError(f"Resource hub '{hub.name}' has no provisions")

        tiers = hub.rarity_tiers
        eligible = [r for r in tiers if self.weights.weight_for(r) > 0]
        if not eligible:
            raise ValidationError(
                f"Resource hub '{hub.name}' has no provisions in a rarity tier with positive weight"
            )
        tier_weights = [self.weights.weight_for(r) for r in eligible]

        picks = self._rng.randint(self.min_picks, self.max_picks)
        counts: dict[str, int] = {}
        chosen: dict[str, Provision] = {}
        for _ in range(picks):
            rarity = self._rng.choices(eligible, weights=tier_weights, k=1)[0]
            provision = self._rng.choice(tiers[rarity])
            if provision.id not in counts:
                chosen[provision.id] = provision
                counts[provision.id] = 0
            counts[provision.id] += 1

        items = tuple(GeneratedItem.from_provision(chosen[pid], count) for pid, count in counts.items())
        logger.debug(f"Generated {len(items)} lines ({picks} picks) from hub {hub.id}")
        return GeneratedList(hub_id=hub.id, hub_name=hub.name, items=items)


def get_list_generator() -> ListGenerator:
    """
    Get or create a ListGenerator instance.

    Uses state.get_service for session state persistence across reruns.
    Falls back to direct instantiation if state module unavailable.
    """
    try:
        from state import get_service
        return get_service('list_generator', ListGenerator.create_default)
    except ImportError:
        logger.debug("state module unavailable, creating new ListGenerator instance")
        return ListGenerator.create_default()
