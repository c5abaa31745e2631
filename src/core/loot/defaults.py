"""내장 기본 데이터 - 루트 테이블, 매핑, 접사 풀, 이름 풀

데이터 파일(LOOT_DATA_PATH)이 없거나 일부 섹션이 빠졌을 때 사용된다.
"""

from __future__ import annotations

from typing import Optional

from .affixes import AffixRegistry, AffixTable
from .models import Affix, AffixType, ItemCategory, ItemRarity, ItemType, LootEntry, LootTable
from .naming import NameAffix, NamePools

R = ItemRarity


def _item(
    key: str,
    weight: int,
    quantity: tuple[int, int] = (1, 1),
    rarity: Optional[ItemRarity] = None,
) -> LootEntry:
    return LootEntry(
        weight=weight,
        item_type=ItemType.parse(key),
        quantity_range=quantity,
        rarity_override=rarity,
    )


def _ref(table: str, weight: int) -> LootEntry:
    return LootEntry(weight=weight, table_ref=table)


def _table(guaranteed: int, max_drops: int, *entries: LootEntry) -> LootTable:
    return LootTable(entries=tuple(entries), guaranteed_drops=guaranteed, max_drops=max_drops)


# ── 루트 테이블 ───────────────────────────────────────────────

def default_tables() -> dict[str, LootTable]:
    return {
        # 화폐/지식 (다른 테이블에서 참조)
        "small_gold": _table(1, 1, _item("misc:gold", 1, (3, 30))),
        "medium_gold": _table(1, 1, _item("misc:gold", 1, (10, 75))),
        "large_gold": _table(1, 1, _item("misc:gold", 1, (50, 500))),
        "huge_gold": _table(1, 1, _item("misc:gold", 1, (200, 1000))),
        "knowledge": _table(
            1,
            1,
            _item("consumable:scroll", 70, rarity=R.RARE),
            _item("consumable:scroll", 30, rarity=R.EPIC),
        ),
        # 몬스터
        "goblin": _table(
            1,
            2,
            _item("consumable:potion", 30, rarity=R.COMMON),
            _item("weapon:dagger", 20, rarity=R.COMMON),
            _item("material:bone", 25, (1, 2)),
            _ref("small_gold", 25),
        ),
        "skeleton": _table(
            1,
            3,
            _item("weapon:sword", 25, rarity=R.COMMON),
            _item("armor:shield", 20, rarity=R.COMMON),
            _item("material:bone", 35, (2, 4)),
            _item("consumable:scroll", 15, rarity=R.UNCOMMON),
            _ref("small_gold", 5),
        ),
        "orc": _table(
            1,
            3,
            _item("weapon:axe", 30, rarity=R.COMMON),
            _item("armor:chest", 25, rarity=R.COMMON),
            _item("consumable:food", 20, (1, 3)),
            _item("material:metal", 15, (1, 2)),
            _ref("medium_gold", 10),
        ),
        "dragon": _table(
            3,
            6,
            _item("weapon:sword", 20, rarity=R.LEGENDARY),
            _item("armor:chest", 20, rarity=R.EPIC),
            _item("material:gem", 25, (3, 8), R.RARE),
            _item("consumable:scroll", 15, (2, 4), R.EPIC),
            _ref("large_gold", 20),
        ),
        # 상자
        "wooden_chest": _table(
            1,
            3,
            _item("consumable:potion", 30, (1, 3), R.COMMON),
            _item("tool:lockpick", 20),
            _item("material:wood", 25, (2, 5)),
            _ref("small_gold", 25),
        ),
        "iron_chest": _table(
            2,
            4,
            _item("weapon:sword", 25, rarity=R.UNCOMMON),
            _item("armor:chest", 25, rarity=R.UNCOMMON),
            _item("consumable:potion", 20, (2, 4), R.UNCOMMON),
            _item("material:metal", 15, (3, 6)),
            _ref("medium_gold", 15),
        ),
        "golden_chest": _table(
            2,
            5,
            _item("weapon:sword", 20, rarity=R.RARE),
            _item("armor:chest", 20, rarity=R.RARE),
            _item("material:gem", 25, (2, 5), R.RARE),
            _item("consumable:scroll", 20, (1, 3), R.RARE),
            _ref("large_gold", 15),
        ),
        # 깊이 구간
        "depth_1_5": _table(
            1,
            2,
            _item("weapon:dagger", 25, rarity=R.COMMON),
            _item("armor:boots", 20, rarity=R.COMMON),
            _item("consumable:potion", 30, (1, 2)),
            _item("tool:torch", 15, (1, 3)),
            _ref("small_gold", 10),
        ),
        "depth_6_10": _table(
            1,
            3,
            _item("weapon:sword", 25, rarity=R.UNCOMMON),
            _item("armor:chest", 25, rarity=R.UNCOMMON),
            _item("consumable:potion", 20, (2, 3), R.UNCOMMON),
            _item("material:metal", 20, (2, 4)),
            _ref("medium_gold", 10),
        ),
        "depth_11_20": _table(
            2,
            4,
            _item("weapon:sword", 20, rarity=R.RARE),
            _item("armor:chest", 20, rarity=R.RARE),
            _item("consumable:scroll", 25, (1, 2), R.RARE),
            _item("material:gem", 25, (1, 3), R.UNCOMMON),
            _ref("large_gold", 10),
        ),
        # 특수 장소
        "library": _table(
            2,
            4,
            _item("consumable:scroll", 50, (2, 5), R.UNCOMMON),
            _item("weapon:staff", 20, rarity=R.RARE),
            _item("material:herb", 20, (3, 6)),
            _ref("knowledge", 10),
        ),
        "armory": _table(
            2,
            5,
            _item("weapon:sword", 30, (1, 2), R.UNCOMMON),
            _item("armor:chest", 30, (1, 2), R.UNCOMMON),
            _item("weapon:bow", 20, rarity=R.UNCOMMON),
            _item("consumable:ammunition", 15, (10, 30)),
            _item("material:metal", 5, (5, 10)),
        ),
        "treasury": _table(
            3,
            6,
            _item("material:gem", 40, (3, 8), R.RARE),
            _item("armor:ring", 25, (1, 2), R.EPIC),
            _item("armor:amulet", 25, rarity=R.EPIC),
            _ref("huge_gold", 10),
        ),
    }


def default_monster_tables() -> dict[str, str]:
    return {
        "Goblin": "goblin",
        "Skeleton": "skeleton",
        "Orc": "orc",
        "Dragon": "dragon",
        "Rat": "goblin",
        "Spider": "goblin",
        "Zombie": "skeleton",
        "Troll": "orc",
    }


def default_depth_tables() -> dict[int, str]:
    """구간 시작 깊이 → 테이블. 조회는 가장 가까운 하위 키를 쓴다."""
    return {1: "depth_1_5", 6: "depth_6_10", 11: "depth_11_20"}


def default_special_tables() -> dict[str, str]:
    return {
        "Library": "library",
        "Armory": "armory",
        "Treasury": "treasury",
        "Altar": "library",
        "Forge": "armory",
    }


# ── 스탯 접사 ─────────────────────────────────────────────────

def _prefix(name: str, value_bonus: int, weight: int, **stats: int) -> Affix:
    return Affix(name, AffixType.PREFIX, dict(stats), value_bonus, weight)


def _suffix(name: str, value_bonus: int, weight: int, **stats: int) -> Affix:
    return Affix(name, AffixType.SUFFIX, dict(stats), value_bonus, weight)


def default_affixes() -> AffixRegistry:
    return AffixRegistry(
        {
            ItemCategory.WEAPON.value: AffixTable(
                prefixes=(
                    _prefix("Sharp", 25, 30, damage=2),
                    _prefix("Heavy", 40, 20, damage=4, attack=-1),
                    _prefix("Swift", 30, 25, attack=3),
                    _prefix("Balanced", 35, 15, attack=2, damage=1),
                ),
                suffixes=(
                    _suffix("of Power", 35, 25, strength=2),
                    _suffix("of Precision", 50, 15, critical_chance=5),
                    _suffix("of Slaying", 60, 10, critical_damage=10),
                ),
            ),
            ItemCategory.ARMOR.value: AffixTable(
                prefixes=(
                    _prefix("Sturdy", 30, 30, defense=3),
                    _prefix("Light", 25, 25, defense=1, dexterity=2),
                    _prefix("Reinforced", 45, 15, defense=5),
                ),
                suffixes=(
                    _suffix("of Protection", 40, 20, defense=4),
                    _suffix("of Vitality", 45, 15, constitution=3),
                    _suffix("of Evasion", 40, 15, dexterity=3),
                ),
            ),
            ItemCategory.CONSUMABLE.value: AffixTable(
                prefixes=(
                    _prefix("Potent", 15, 30, potency=3),
                    _prefix("Concentrated", 25, 15, potency=5),
                ),
                suffixes=(
                    _suffix("of Vigor", 20, 20, potency=2, constitution=1),
                    _suffix("of Clarity", 20, 20, intelligence=2),
                ),
            ),
            ItemCategory.TOOL.value: AffixTable(
                prefixes=(
                    _prefix("Sturdy", 10, 30, utility=1),
                    _prefix("Masterwork", 30, 10, utility=3),
                ),
                suffixes=(
                    _suffix("of Finding", 20, 20, perception=2),
                    _suffix("of the Delver", 25, 15, utility=2),
                ),
            ),
            ItemCategory.MATERIAL.value: AffixTable(
                prefixes=(
                    _prefix("Pure", 15, 30),
                    _prefix("Flawless", 40, 10),
                ),
                suffixes=(
                    _suffix("of Resonance", 25, 20, magic=1),
                    _suffix("of the Deep", 30, 15, magic=2),
                ),
            ),
            ItemCategory.MISC.value: AffixTable(
                prefixes=(
                    _prefix("Gilded", 30, 20),
                    _prefix("Antique", 25, 25),
                ),
                suffixes=(
                    _suffix("of Fortune", 40, 15, luck=2),
                    _suffix("of Whispers", 20, 20, magic=1),
                ),
            ),
        }
    )


# ── 이름 풀 ───────────────────────────────────────────────────

_WEAPONS = (ItemCategory.WEAPON,)
_ARMOR = (ItemCategory.ARMOR,)


def default_name_pools() -> NamePools:
    return NamePools(
        base_names={
            "weapon:sword": ("Sword", "Blade", "Saber", "Rapier", "Scimitar", "Longsword", "Broadsword", "Claymore"),
            "weapon:axe": ("Axe", "Hatchet", "Battleaxe", "War Axe", "Cleaver", "Tomahawk"),
            "weapon:mace": ("Mace", "Club", "Hammer", "War Hammer", "Flail", "Morningstar"),
            "weapon:dagger": ("Dagger", "Knife", "Stiletto", "Dirk", "Shiv"),
            "weapon:spear": ("Spear", "Lance", "Pike", "Javelin", "Halberd", "Trident"),
            "weapon:bow": ("Bow", "Longbow", "Shortbow", "Composite Bow", "Recurve Bow"),
            "weapon:crossbow": ("Crossbow", "Arbalest", "Hand Crossbow"),
            "weapon:staff": ("Staff", "Rod", "Scepter", "Quarterstaff", "Walking Stick"),
            "weapon:wand": ("Wand", "Rod", "Stick", "Branch", "Twig"),
            "weapon:thrown": ("Throwing Knife", "Dart", "Chakram"),
            "armor:helmet": ("Helmet", "Helm", "Cap", "Coif", "Circlet"),
            "armor:chest": ("Armor", "Chestplate", "Breastplate", "Mail", "Vest", "Tunic", "Robe", "Jacket"),
            "armor:legs": ("Leggings", "Greaves", "Pants", "Trousers", "Chaps"),
            "armor:boots": ("Boots", "Shoes", "Sandals", "Slippers", "Sabatons"),
            "armor:gloves": ("Gloves", "Gauntlets", "Mittens", "Bracers", "Vambraces"),
            "armor:shield": ("Shield", "Buckler", "Targe", "Kite Shield", "Tower Shield"),
            "armor:cloak": ("Cloak", "Cape", "Mantle", "Shroud"),
            "armor:ring": ("Ring", "Band", "Circle", "Loop", "Signet"),
            "armor:amulet": ("Amulet", "Pendant", "Necklace", "Charm", "Talisman", "Medallion"),
            "consumable:potion": ("Potion", "Elixir", "Draught", "Brew", "Tonic", "Philter"),
            "consumable:food": ("Bread", "Rations", "Jerky", "Cheese", "Apple", "Meat"),
            "consumable:scroll": ("Scroll", "Parchment", "Tome", "Manuscript"),
            "consumable:ammunition": ("Arrow", "Bolt", "Quarrel"),
            "tool:lockpick": ("Lockpick", "Pick Set", "Skeleton Pick"),
            "tool:torch": ("Torch", "Brand", "Lantern"),
            "tool:rope": ("Rope", "Cord", "Line"),
            "tool:key": ("Key", "Skeleton Key"),
            "material:metal": ("Iron Ore", "Steel Ingot", "Copper", "Silver", "Gold Nugget", "Mithril"),
            "material:wood": ("Oak Plank", "Ash Branch", "Yew Stave"),
            "material:leather": ("Leather Strip", "Hide", "Pelt"),
            "material:cloth": ("Linen", "Silk", "Wool Bolt"),
            "material:gem": ("Ruby", "Sapphire", "Emerald", "Diamond", "Amethyst", "Topaz"),
            "material:herb": ("Herb", "Flower", "Root", "Leaf", "Mushroom", "Moss"),
            "material:bone": ("Bone", "Skull", "Rib", "Fang"),
            "material:stone": ("Whetstone", "Granite", "Flint"),
            "misc:gold": ("Gold Coins",),
            "misc:trinket": ("Trinket", "Bauble", "Figurine", "Music Box"),
            "misc:idol": ("Idol", "Statuette", "Effigy"),
        },
        prefixes=(
            NameAffix("Flaming", _WEAPONS, 20),
            NameAffix("Frozen", _WEAPONS, 20),
            NameAffix("Shocking", _WEAPONS, 20),
            NameAffix("Venomous", _WEAPONS, 15),
            NameAffix("Warded", _ARMOR, 15),
            NameAffix("Blessed", (), 10),
            NameAffix("Cursed", (), 5),
            NameAffix("Enchanted", (), 15),
            NameAffix("Glowing", (), 12),
            NameAffix("Ancient", (), 8),
            NameAffix("Runic", (), 10),
        ),
        suffixes=(
            NameAffix("of Power", _WEAPONS, 20),
            NameAffix("of Slaying", _WEAPONS, 15),
            NameAffix("of Protection", _ARMOR, 20),
            NameAffix("of Warding", _ARMOR, 15),
            NameAffix("of Strength", (), 18),
            NameAffix("of Agility", (), 18),
            NameAffix("of the Eagle", (), 12),
            NameAffix("of the Bear", (), 12),
            NameAffix("of the Wolf", (), 12),
            NameAffix("of the Ancients", (), 8),
        ),
        plain_qualities=("Old", "Worn", "Simple", "Basic", "Common"),
        fine_qualities=(
            "Fine",
            "Well-made",
            "Sturdy",
            "Reliable",
            "Quality",
            "Masterwork",
            "Superior",
            "Excellent",
            "Refined",
        ),
        epithets=(
            "Legendary",
            "Fabled",
            "Mythical",
            "Ancient",
            "Divine",
            "Celestial",
            "Infernal",
            "Eternal",
            "Sacred",
        ),
        legendary_names={
            "weapon": (
                "Excalibur",
                "Durandal",
                "Gram",
                "Balmung",
                "Tyrfing",
                "Curtana",
                "Joyeuse",
                "Caladbolg",
                "Galatine",
            ),
            "weapon:mace": ("Mjolnir",),
            "armor": ("Aegis", "Svalinn", "Achilles' Mantle", "Ring of Gyges"),
        },
        artifact_names=(
            "The Worldrender",
            "Eternity's Edge",
            "Voidcaller",
            "Starfall",
            "The Dreambane",
            "Soulreaper",
            "The Timeless Crown",
            "Heart of the Mountain",
            "The Infinite Codex",
            "Whisper of the Void",
        ),
    )
