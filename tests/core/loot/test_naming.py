"""아이템 이름 생성기 테스트"""

import random

import pytest

from src.core.loot.defaults import default_name_pools
from src.core.loot.models import ItemCategory, ItemRarity, ItemType
from src.core.loot.naming import ItemNameGenerator, NameAffix, NamePools, with_article

R = ItemRarity
SWORD = ItemType.parse("weapon:sword")
RING = ItemType.parse("armor:ring")


@pytest.fixture()
def names() -> ItemNameGenerator:
    return ItemNameGenerator(default_name_pools())


def _tiny_pools(**overrides) -> NamePools:
    values = dict(
        base_names={"weapon:sword": ("Blade",)},
        prefixes=(NameAffix("Flaming", (ItemCategory.WEAPON,)),),
        suffixes=(NameAffix("of the Bear"),),
        plain_qualities=("Old",),
        fine_qualities=("Fine",),
        epithets=("Fabled",),
        legendary_names={"weapon": ("Excalibur",)},
        artifact_names=("Starfall", "The Worldrender"),
    )
    values.update(overrides)
    return NamePools(**values)


class TestWithArticle:
    @pytest.mark.parametrize(
        "raw, expected",
        [
            ("Starfall", "The Starfall"),
            ("The Dreambane", "The Dreambane"),
            ("the dreambane", "the dreambane"),
            ("An Ember Crown", "An Ember Crown"),
            ("Theodric's Edge", "The Theodric's Edge"),
        ],
    )
    def test_article(self, raw, expected):
        assert with_article(raw) == expected


class TestDeterminism:
    @pytest.mark.parametrize("rarity", list(ItemRarity))
    def test_same_stream_same_name(self, names, rarity):
        a = names.generate_name(SWORD, rarity, True, random.Random(77))
        b = names.generate_name(SWORD, rarity, True, random.Random(77))
        assert a == b


class TestCommonNames:
    def test_base_name_with_optional_plain_quality(self, names):
        pools = default_name_pools()
        rng = random.Random(8)
        for _ in range(200):
            name = names.generate_name(SWORD, R.COMMON, False, rng)
            words = name.split(" ", 1)
            assert name in pools.base_names["weapon:sword"] or (
                words[0] in pools.plain_qualities
                and words[1] in pools.base_names["weapon:sword"]
            )

    def test_missing_pool_uses_catalog_name(self):
        names = ItemNameGenerator(_tiny_pools(base_names={}, plain_qualities=()))
        assert names.generate_name(SWORD, R.TRASH, False, random.Random(1)) == "Iron Sword"


class TestUncommonNames:
    def test_enchanted_gets_single_magic_fragment(self):
        names = ItemNameGenerator(_tiny_pools())
        rng = random.Random(2)
        for _ in range(50):
            name = names.generate_name(SWORD, R.UNCOMMON, True, rng)
            assert name in ("Flaming Blade", "Blade of the Bear")

    def test_plain_uncommon_gets_quality_or_fragment(self):
        names = ItemNameGenerator(_tiny_pools())
        rng = random.Random(3)
        seen = {names.generate_name(SWORD, R.UNCOMMON, False, rng) for _ in range(200)}
        assert "Fine Blade" in seen
        assert seen <= {"Fine Blade", "Flaming Blade", "Blade of the Bear"}


class TestMagicalNames:
    def test_rare_composition(self):
        names = ItemNameGenerator(_tiny_pools())
        rng = random.Random(5)
        seen = {names.generate_name(SWORD, R.RARE, True, rng) for _ in range(200)}
        assert seen <= {
            "Flaming Blade",
            "Blade of the Bear",
            "Flaming Blade of the Bear",
        }
        assert "Flaming Blade of the Bear" in seen

    def test_category_restricted_prefix_not_used_on_other_categories(self):
        names = ItemNameGenerator(_tiny_pools(base_names={"armor:ring": ("Band",)}))
        rng = random.Random(6)
        for _ in range(100):
            assert "Flaming" not in names.generate_name(RING, R.EPIC, True, rng)


class TestLegendaryNames:
    def test_curated_first(self):
        names = ItemNameGenerator(_tiny_pools())
        assert names.generate_name(SWORD, R.LEGENDARY, False, random.Random(1)) == "Excalibur"

    def test_exhausted_falls_back_to_composition(self):
        names = ItemNameGenerator(_tiny_pools())
        name = names.generate_name(
            SWORD, R.LEGENDARY, False, random.Random(1), taken={"Excalibur"}
        )
        assert name != "Excalibur"
        assert "Blade" in name
        assert name != "Blade"


class TestArtifactNames:
    def test_curated_list_with_article(self):
        names = ItemNameGenerator(_tiny_pools())
        rng = random.Random(9)
        seen = {names.generate_name(SWORD, R.ARTIFACT, False, rng) for _ in range(50)}
        assert seen == {"The Starfall", "The Worldrender"}

    def test_default_artifacts_come_from_curated_list(self, names):
        curated = {with_article(n) for n in default_name_pools().artifact_names}
        rng = random.Random(10)
        for _ in range(50):
            assert names.generate_name(SWORD, R.ARTIFACT, True, rng) in curated

    def test_exhausted_list_composes_distinct_name(self):
        names = ItemNameGenerator(_tiny_pools())
        taken = {"The Starfall", "The Worldrender"}
        rng = random.Random(12)
        for _ in range(50):
            name = names.generate_name(SWORD, R.ARTIFACT, False, rng, taken=taken)
            assert name
            assert name not in taken
            assert name != "Blade"

    def test_exhausted_without_name_affixes_uses_epithet(self):
        names = ItemNameGenerator(_tiny_pools(prefixes=(), suffixes=(), artifact_names=()))
        name = names.generate_name(SWORD, R.ARTIFACT, False, random.Random(1))
        assert name == "Fabled Blade"
