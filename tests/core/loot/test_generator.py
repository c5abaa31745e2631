"""ItemGenerator 테스트"""

import dataclasses
import logging
import random
from collections import Counter

import pytest

from src.core.event_types import EventTypes
from src.core.loot.affixes import AffixRegistry, AffixTable
from src.core.loot.errors import InvalidDepth
from src.core.loot.generator import ItemGenerator
from src.core.loot.models import (
    Affix,
    AffixType,
    GenerationContext,
    ItemCategory,
    ItemRarity,
    ItemType,
)
from src.core.loot.rarity import DEFAULT_AFFIX_RANGES, DepthScaling, RarityRules
from src.core.loot.sampling import round_half_up

R = ItemRarity
SWORD = ItemType.parse("weapon:sword")
MACE = ItemType.parse("weapon:mace")


class _CountingRandom(random.Random):
    def __init__(self, seed: int = 0) -> None:
        super().__init__(seed)
        self.calls = 0

    def randint(self, a: int, b: int) -> int:
        self.calls += 1
        return super().randint(a, b)

    def random(self) -> float:
        self.calls += 1
        return super().random()


def _with(generator: ItemGenerator, **changes) -> ItemGenerator:
    return ItemGenerator(dataclasses.replace(generator.config, **changes))


# ── 깊이 스케일링 ─────────────────────────────────────────────


class TestDepthScaling:
    def test_scaled_stat_rounds_half_up(self, generator):
        # 기본 damage 10, 배율 1 + 0.01 * 10 = 1.1
        scaled = _with(
            generator,
            depth_scaling=DepthScaling(stat_scaling=0.01, value_scaling=0.05, rarity_scaling=1.0),
        )
        spec = scaled.generate_item(
            MACE, 10, GenerationContext.COMBAT, random.Random(1), rarity_override=R.COMMON
        )
        assert spec.base_stats["damage"] == 10
        assert spec.stats["damage"] == 11

    def test_default_scaling_at_depth_ten(self, generator):
        spec = generator.generate_item(
            MACE, 10, GenerationContext.COMBAT, random.Random(1), rarity_override=R.COMMON
        )
        assert spec.stats["damage"] == 20
        # 45 * 1.0 * 1.5 = 67.5
        assert spec.value == 68

    def test_depth_zero_keeps_base_stats(self, generator):
        spec = generator.generate_item(
            SWORD, 0, GenerationContext.COMBAT, random.Random(1), rarity_override=R.COMMON
        )
        assert spec.stats == spec.base_stats
        assert spec.value == 50

    def test_monotonic_in_depth(self, generator):
        previous = None
        for depth in range(0, 30):
            spec = generator.generate_item(
                SWORD, depth, GenerationContext.COMBAT, random.Random(3), rarity_override=R.COMMON
            )
            if previous is not None:
                assert spec.value >= previous.value
                for stat, value in spec.stats.items():
                    assert value >= previous.stats[stat]
            previous = spec

    def test_value_formula_with_affixes(self, generator):
        rng = random.Random(21)
        for depth in (0, 3, 12):
            spec = generator.generate_item(
                SWORD, depth, GenerationContext.COMBAT, rng, rarity_override=R.EPIC
            )
            expected = round_half_up(50 * 10.0 * (1 + 0.05 * depth))
            expected += sum(a.value_bonus for a in spec.affixes)
            assert spec.value == expected

    def test_stats_include_affix_bonuses(self, generator):
        rng = random.Random(22)
        spec = generator.generate_item(
            SWORD, 4, GenerationContext.COMBAT, rng, rarity_override=R.LEGENDARY
        )
        for stat, base in spec.base_stats.items():
            expected = round_half_up(base * 1.4)
            expected += sum(a.stat_bonuses.get(stat, 0) for a in spec.affixes)
            assert spec.stats[stat] == max(0, expected)

    def test_negative_affixes_clamped_once_regardless_of_order(self, generator):
        # sword 기본 value 50 / attack 5, 두 접사 모두 항상 붙는다
        pool = AffixTable(
            prefixes=(Affix("Cursed", AffixType.PREFIX, {"attack": -10}, -100),),
            suffixes=(Affix("of Luck", AffixType.SUFFIX, {"attack": 4}, 60),),
        )
        cursed = _with(
            generator,
            affixes=AffixRegistry({"weapon": pool}),
            rarity_rules=RarityRules(affix_ranges={**DEFAULT_AFFIX_RANGES, R.COMMON: (2, 2)}),
        )
        orders = set()
        for seed in range(20):
            spec = cursed.generate_item(
                SWORD, 0, GenerationContext.COMBAT, random.Random(seed), rarity_override=R.COMMON
            )
            orders.add(tuple(spec.affix_names))
            assert spec.value == 10
            assert spec.stats["attack"] == 0
            assert spec.stats["damage"] == 8
        assert len(orders) == 2


# ── 접사 ──────────────────────────────────────────────────────


class TestAffixes:
    @pytest.mark.parametrize("rarity", list(ItemRarity))
    def test_count_within_rarity_range(self, generator, rarity):
        low, high = generator.config.rarity_rules.affix_range(rarity)
        rng = random.Random(rarity.value)
        counts = set()
        for _ in range(150):
            item_type = generator.select_item_type(GenerationContext.RANDOM, rng)
            spec = generator.generate_item(
                item_type, 5, GenerationContext.RANDOM, rng, rarity_override=rarity
            )
            assert low <= spec.applied_affix_count <= high
            counts.add(spec.applied_affix_count)
        assert counts == set(range(low, high + 1))

    def test_no_duplicate_affix_names(self, generator):
        rng = random.Random(31)
        for _ in range(300):
            spec = generator.generate_item(
                None, 8, GenerationContext.TREASURE, rng, rarity_override=R.ARTIFACT
            )
            assert len(spec.affix_names) == len(set(spec.affix_names))

    def test_missing_affix_pool_degrades(self, generator, bus, caplog):
        events = []
        bus.subscribe(EventTypes.AFFIX_POOL_EMPTY, events.append)
        bare = ItemGenerator(
            dataclasses.replace(generator.config, affixes=AffixRegistry()), event_bus=bus
        )
        with caplog.at_level(logging.WARNING, logger="src.core.loot.generator"):
            spec = bare.generate_item(
                SWORD, 2, GenerationContext.COMBAT, random.Random(4), rarity_override=R.RARE
            )
        assert spec.affixes == []
        assert spec.magical is True
        assert "No affixes registered" in caplog.text
        assert events[0].data["item_type"] == "weapon:sword"


# ── 생성 전체 ────────────────────────────────────────────────


class TestGenerateItem:
    def test_negative_depth_rejected_before_any_draw(self, generator):
        rng = _CountingRandom()
        with pytest.raises(InvalidDepth):
            generator.generate_item(None, -1, GenerationContext.RANDOM, rng)
        assert rng.calls == 0

    @pytest.mark.parametrize("depth", [True, 2.5, "3"])
    def test_non_integer_depth_rejected(self, generator, depth):
        with pytest.raises(InvalidDepth):
            generator.generate_item(SWORD, depth, GenerationContext.RANDOM, random.Random())

    def test_same_seed_same_item(self, generator):
        a = generator.generate_item(None, 7, GenerationContext.MERCHANT, random.Random(555))
        b = generator.generate_item(None, 7, GenerationContext.MERCHANT, random.Random(555))
        assert a.to_dict() == b.to_dict()

    def test_draw_order_type_then_rarity(self, generator):
        spec = generator.generate_item(None, 6, GenerationContext.COMBAT, random.Random(8))
        rng = random.Random(8)
        item_type = generator.select_item_type(GenerationContext.COMBAT, rng)
        rarity = generator.roll_rarity(6, rng)
        assert spec.item_type == item_type
        assert spec.rarity == rarity

    def test_requested_type_respected(self, generator):
        spec = generator.generate_item(
            ItemType.parse("armor:ring"), 1, GenerationContext.COMBAT, random.Random(2)
        )
        assert spec.item_type.key == "armor:ring"

    def test_magical_flag(self, generator):
        rng = random.Random(13)
        for _ in range(100):
            spec = generator.generate_item(None, 3, GenerationContext.RANDOM, rng)
            assert spec.magical == (bool(spec.affixes) or spec.rarity >= R.RARE)
        common = generator.generate_item(
            SWORD, 3, GenerationContext.RANDOM, rng, rarity_override=R.COMMON
        )
        assert common.magical is False

    def test_name_is_never_empty(self, generator):
        rng = random.Random(17)
        for _ in range(300):
            assert generator.generate_item(None, 15, GenerationContext.RANDOM, rng).name

    def test_generator_keeps_no_reference(self, generator):
        spec = generator.generate_item(SWORD, 1, GenerationContext.COMBAT, random.Random(1))
        spec.stats["attack"] = 999
        again = generator.generate_item(SWORD, 1, GenerationContext.COMBAT, random.Random(1))
        assert again.stats["attack"] != 999


class TestContextBias:
    def _categories(self, generator, context, seed=99, draws=3000):
        rng = random.Random(seed)
        return Counter(
            generator.select_item_type(context, rng).category for _ in range(draws)
        )

    def test_combat_favors_weapons_over_treasure(self, generator):
        combat = self._categories(generator, GenerationContext.COMBAT)
        treasure = self._categories(generator, GenerationContext.TREASURE)
        assert combat[ItemCategory.WEAPON] > treasure[ItemCategory.WEAPON]
        assert treasure[ItemCategory.MATERIAL] > combat[ItemCategory.MATERIAL]

    def test_random_context_roughly_uniform(self, generator):
        counts = self._categories(generator, GenerationContext.RANDOM, draws=6000)
        for category in ItemCategory:
            assert counts[category] / 6000 == pytest.approx(1 / 6, abs=0.03)

    def test_context_does_not_change_rarity(self, generator):
        spec_a = generator.generate_item(SWORD, 5, GenerationContext.COMBAT, random.Random(4))
        spec_b = generator.generate_item(SWORD, 5, GenerationContext.TREASURE, random.Random(4))
        assert spec_a.rarity == spec_b.rarity
