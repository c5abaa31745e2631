"""희귀도 가중치 / 깊이 스케일링 테스트"""

import dataclasses
import random
from collections import Counter

import pytest

from src.core.loot.models import ItemRarity
from src.core.loot.rarity import (
    DEFAULT_AFFIX_RANGES,
    DepthScaling,
    RarityRules,
    RarityWeights,
)

R = ItemRarity


class TestDepthScaling:
    def test_depth_zero_is_identity(self):
        scaling = DepthScaling()
        assert scaling.stat_factor(0) == 1.0
        assert scaling.value_factor(0) == 1.0
        assert scaling.rarity_bonus(0) == 0

    def test_rarity_bonus_floors(self):
        assert DepthScaling(rarity_scaling=0.5).rarity_bonus(3) == 1

    def test_rarity_bonus_capped(self):
        assert DepthScaling().rarity_bonus(500) == 50
        assert DepthScaling(max_rarity_bonus=10).rarity_bonus(30) == 10


class TestRarityWeights:
    def test_bonus_only_above_common(self):
        weights = RarityWeights({R.TRASH: 5, R.COMMON: 50, R.UNCOMMON: 25, R.RARE: 15})
        effective = weights.effective(10, DepthScaling())
        assert effective[R.TRASH] == 5
        assert effective[R.COMMON] == 50
        assert effective[R.UNCOMMON] == 35
        assert effective[R.RARE] == 25

    def test_absent_rarity_never_appears(self):
        effective = RarityWeights().effective(40, DepthScaling())
        assert R.ARTIFACT not in effective

    def test_empty_weights_rejected(self):
        with pytest.raises(ValueError, match="at least one rarity"):
            RarityWeights({})

    @pytest.mark.parametrize("weight", [0, -1])
    def test_non_positive_weight_rejected(self, weight):
        with pytest.raises(ValueError):
            RarityWeights({R.COMMON: weight})

    def test_deeper_raises_upper_tier_share(self):
        weights = RarityWeights()
        scaling = DepthScaling()
        previous = 0.0
        for depth in (0, 5, 10, 20, 40):
            effective = weights.effective(depth, scaling)
            upper = sum(w for r, w in effective.items() if r > R.COMMON)
            share = upper / sum(effective.values())
            assert share >= previous
            previous = share


class TestRarityRules:
    def test_defaults(self):
        rules = RarityRules()
        assert rules.value_multiplier(R.COMMON) == 1.0
        assert rules.value_multiplier(R.ARTIFACT) == 100.0
        assert rules.affix_range(R.UNCOMMON) == (0, 1)
        assert rules.affix_range(R.RARE) == (1, 2)
        assert rules.affix_range(R.EPIC) == (1, 3)
        assert rules.affix_range(R.LEGENDARY) == (2, 3)
        assert rules.affix_range(R.ARTIFACT) == (2, 4)

    def test_invalid_range_rejected(self):
        with pytest.raises(ValueError):
            RarityRules(affix_ranges={**DEFAULT_AFFIX_RANGES, R.RARE: (2, 1)})
        with pytest.raises(ValueError):
            RarityRules(affix_ranges={**DEFAULT_AFFIX_RANGES, R.ARTIFACT: (2, 5)})


class TestRarityRoll:
    def test_distribution_matches_weights(self, generator):
        weights = {R.COMMON: 70, R.UNCOMMON: 20, R.RARE: 8, R.EPIC: 2}
        config = dataclasses.replace(generator.config, rarity_weights=RarityWeights(weights))
        rng = random.Random(20240101)
        draws = 10_000
        counts = Counter(generator.roll_rarity(0, rng, config) for _ in range(draws))

        assert set(counts) <= set(weights)
        for rarity, weight in weights.items():
            assert counts[rarity] / draws == pytest.approx(weight / 100, abs=0.02)

    def test_depth_shifts_distribution_upward(self, generator):
        shallow_rng, deep_rng = random.Random(1), random.Random(1)
        shallow = Counter(generator.roll_rarity(0, shallow_rng) for _ in range(3000))
        deep = Counter(generator.roll_rarity(40, deep_rng) for _ in range(3000))
        assert deep[R.COMMON] < shallow[R.COMMON]
        assert deep[R.EPIC] + deep[R.LEGENDARY] > shallow[R.EPIC] + shallow[R.LEGENDARY]
