"""루트 생성 Core - 순수 Python, 월드/DB 무관"""

from .affixes import AffixRegistry, AffixTable
from .errors import (
    ConfigError,
    EmptyAffixPool,
    InvalidDepth,
    LootError,
    TableCycleDetected,
    UnknownTable,
)
from .generator import ItemGenerator
from .models import (
    Affix,
    AffixType,
    GenerationContext,
    ItemCategory,
    ItemRarity,
    ItemSpec,
    ItemType,
    LootEntry,
    LootTable,
)
from .naming import ItemNameGenerator, NamePools
from .rarity import DepthScaling, RarityRules, RarityWeights
from .sampling import RandomSource, make_rng
from .schema import LootData, default_loot_data, dump_loot_data, load_loot_data
from .tables import LootTableManager, TableRegistry

__all__ = [
    "Affix",
    "AffixRegistry",
    "AffixTable",
    "AffixType",
    "ConfigError",
    "DepthScaling",
    "EmptyAffixPool",
    "GenerationContext",
    "InvalidDepth",
    "ItemCategory",
    "ItemGenerator",
    "ItemNameGenerator",
    "ItemRarity",
    "ItemSpec",
    "ItemType",
    "LootData",
    "LootEntry",
    "LootError",
    "LootTable",
    "LootTableManager",
    "NamePools",
    "RandomSource",
    "RarityRules",
    "RarityWeights",
    "TableCycleDetected",
    "TableRegistry",
    "UnknownTable",
    "default_loot_data",
    "dump_loot_data",
    "load_loot_data",
    "make_rng",
]
