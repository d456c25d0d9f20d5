"""Tests for ListGenerator."""

import random
from collections import Counter

import pytest

from domain.enums import Rarity
from domain.errors import ValidationError
from domain.models import Provision, RarityWeights, ResourceHub
from services.generator_service import ListGenerator


def _generator(seed=7, **kwargs):
    return ListGenerator(rng=random.Random(seed), **kwargs)


class TestGenerate:
    def test_items_non_empty_and_counts_positive(self, forest_cache):
        gen = _generator()
        for _ in range(200):
            generated = gen.generate(forest_cache)
            assert generated.items
            assert all(item.count >= 1 for item in generated.items)

    def test_no_duplicate_provision_ids(self, forest_cache):
        gen = _generator(min_picks=20, max_picks=30)
        for _ in range(100):
            ids = [item.provision_id for item in gen.generate(forest_cache).items]
            assert len(ids) == len(set(ids))

    def test_counts_sum_to_picks(self, forest_cache):
        gen = _generator(min_picks=5, max_picks=5)
        generated = gen.generate(forest_cache)
        assert generated.total_count == 5

    def test_items_reference_hub_provisions_only(self, forest_cache):
        gen = _generator()
        for _ in range(100):
            generated = gen.generate(forest_cache)
            assert {i.provision_id for i in generated.items} <= {"p1", "p2"}
            assert generated.hub_id == "h1"
            assert generated.hub_name == "Forest Cache"

    def test_rare_selected_less_often_than_common(self, forest_cache):
        gen = _generator(seed=42)
        totals = Counter()
        for _ in range(500):
            for item in gen.generate(forest_cache).items:
                totals[item.rarity] += item.count
        assert totals[Rarity.RARE] < totals[Rarity.COMMON]

    def test_frequency_tracks_configured_weights(self, forest_cache):
        # Equal weights: both tiers should be drawn about equally often
        weights = RarityWeights.from_mapping({"common": 1, "rare": 1})
        gen = _generator(seed=3, weights=weights, min_picks=10, max_picks=10)
        totals = Counter()
        for _ in range(400):
            for item in gen.generate(forest_cache).items:
                totals[item.provision_id] += item.count
        share = totals["p2"] / (totals["p1"] + totals["p2"])
        assert 0.4 < share < 0.6

    def test_snapshot_copies_provision_fields(self, forest_cache):
        generated = _generator(min_picks=10, max_picks=10).generate(forest_cache)
        by_id = {p.id: p for p in forest_cache.provisions}
        for item in generated.items:
            source = by_id[item.provision_id]
            assert (item.name, item.rarity, item.price) == (source.name, source.rarity, source.price)

    def test_output_in_first_selection_order(self):
        # With a single provision per tier the first line is always the first pick
        hub = ResourceHub(id="h", name="Solo", provisions=(Provision("only", "Only", Rarity.COMMON, 1),))
        generated = _generator(min_picks=4, max_picks=4).generate(hub)
        assert [(i.provision_id, i.count) for i in generated.items] == [("only", 4)]


class TestGenerateValidation:
    def test_empty_hub_rejected(self):
        with pytest.raises(ValidationError):
            _generator().generate(ResourceHub(id="h", name="Empty"))

    def test_hub_with_only_zero_weight_tiers_rejected(self, forest_cache):
        weights = RarityWeights.from_mapping({"common": 0, "rare": 0})
        with pytest.raises(ValidationError):
            _generator(weights=weights).generate(forest_cache)

    def test_zero_weight_tier_never_selected(self, forest_cache):
        weights = RarityWeights.from_mapping({"rare": 0})
        gen = _generator(weights=weights)
        for _ in range(100):
            assert all(i.provision_id == "p1" for i in gen.generate(forest_cache).items)

    def test_invalid_pick_range(self):
        with pytest.raises(ValueError):
            ListGenerator(min_picks=0)
        with pytest.raises(ValueError):
            ListGenerator(min_picks=5, max_picks=2)


class TestTierProbabilities:
    def test_probabilities_normalised_over_present_tiers(self, forest_cache):
        probs = _generator().tier_probabilities(forest_cache)
        assert set(probs) == {Rarity.COMMON, Rarity.RARE}
        assert probs[Rarity.COMMON] == pytest.approx(60 / 70)
        assert sum(probs.values()) == pytest.approx(1.0)


class TestCreateDefault:
    def test_reads_settings(self):
        gen = ListGenerator.create_default()
        assert gen.min_picks == 3
        assert gen.max_picks == 8
        assert gen.weights.weight_for(Rarity.LEGENDARY) == 1.0
