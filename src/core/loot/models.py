"""루트 생성 도메인 모델 (월드/DB 무관)"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Optional


class ItemRarity(int, Enum):
    """희귀도 7단계. 정수값 순서 = 등급 순서."""

    TRASH = 0
    COMMON = 1
    UNCOMMON = 2
    RARE = 3
    EPIC = 4
    LEGENDARY = 5
    ARTIFACT = 6

    @property
    def label(self) -> str:
        return self.name.capitalize()

    @classmethod
    def parse(cls, raw: str | int | "ItemRarity") -> "ItemRarity":
        """"Rare" / "rare" / 3 모두 허용."""
        if isinstance(raw, ItemRarity):
            return raw
        if isinstance(raw, int):
            return cls(raw)
        try:
            return cls[raw.strip().upper()]
        except KeyError:
            raise ValueError(f"Unknown rarity: {raw!r}") from None


class GenerationContext(str, Enum):
    """아이템 종류 분포 편향. 희귀도/스케일링에는 관여하지 않는다."""

    COMBAT = "combat"
    TREASURE = "treasure"
    MERCHANT = "merchant"
    RANDOM = "random"


class ItemCategory(str, Enum):
    WEAPON = "weapon"
    ARMOR = "armor"
    CONSUMABLE = "consumable"
    MATERIAL = "material"
    TOOL = "tool"
    MISC = "misc"


@dataclass(frozen=True, order=True)
class ItemType:
    """카테고리 + 세부 종류. 문자열 키: "weapon:sword"."""

    category: ItemCategory
    kind: str

    @property
    def key(self) -> str:
        return f"{self.category.value}:{self.kind}"

    @classmethod
    def parse(cls, raw: str) -> "ItemType":
        """ "weapon:sword" → ItemType. 형식 오류 시 ValueError."""
        category, sep, kind = raw.partition(":")
        if not sep or not kind:
            raise ValueError(f"Item type must look like 'category:kind', got {raw!r}")
        return cls(ItemCategory(category.strip().lower()), kind.strip().lower())

    def __str__(self) -> str:
        return self.key


class AffixType(str, Enum):
    PREFIX = "prefix"
    SUFFIX = "suffix"


@dataclass(frozen=True)
class Affix:
    """스탯 보너스를 가진 접두/접미사."""

    name: str  # "Sharp", "of Power"
    affix_type: AffixType
    stat_bonuses: dict[str, int] = field(default_factory=dict)  # {"damage": 2}
    value_bonus: int = 0
    weight: int = 10

    def __post_init__(self) -> None:
        if self.weight <= 0:
            raise ValueError(f"Affix weight must be positive: {self.name} ({self.weight})")


@dataclass(frozen=True)
class LootEntry:
    """테이블 항목. item_type 과 table_ref 중 정확히 하나만 설정."""

    weight: int
    item_type: Optional[ItemType] = None
    table_ref: Optional[str] = None
    quantity_range: tuple[int, int] = (1, 1)
    rarity_override: Optional[ItemRarity] = None

    def __post_init__(self) -> None:
        if (self.item_type is None) == (self.table_ref is None):
            raise ValueError("LootEntry needs exactly one of item_type / table_ref")
        if self.weight <= 0:
            raise ValueError(f"LootEntry weight must be positive, got {self.weight}")
        low, high = self.quantity_range
        if low < 0 or high < low:
            raise ValueError(f"Invalid quantity range: {self.quantity_range}")

    @property
    def is_reference(self) -> bool:
        return self.table_ref is not None


@dataclass(frozen=True)
class LootTable:
    """가중치 항목 집합 + 확정/최대 드롭 수."""

    entries: tuple[LootEntry, ...]
    guaranteed_drops: int = 1
    max_drops: int = 1

    def __post_init__(self) -> None:
        if not 0 <= self.guaranteed_drops <= self.max_drops:
            raise ValueError(
                f"Need 0 <= guaranteed_drops <= max_drops, "
                f"got {self.guaranteed_drops}/{self.max_drops}"
            )
        if self.max_drops > 0 and not self.entries:
            raise ValueError("LootTable with drops needs at least one entry")

    @property
    def total_weight(self) -> int:
        return sum(e.weight for e in self.entries)


@dataclass
class ItemSpec:
    """생성 결과. 월드 엔티티가 아니며 호출자가 소유한다."""

    item_type: ItemType
    rarity: ItemRarity
    base_stats: dict[str, int]
    stats: dict[str, int]  # 깊이 스케일링 + 접사 보너스 반영
    value: int
    weight: float
    affixes: list[Affix] = field(default_factory=list)
    name: str = ""
    magical: bool = False
    quantity: int = 1
    depth: int = 0

    @property
    def applied_affix_count(self) -> int:
        return len(self.affixes)

    @property
    def affix_names(self) -> list[str]:
        return [a.name for a in self.affixes]

    def to_dict(self) -> dict:
        """외부 생성기(create_item)로 넘기는 속성 사전."""
        return {
            "item_type": self.item_type.key,
            "rarity": self.rarity.label,
            "base_stats": dict(self.base_stats),
            "stats": dict(self.stats),
            "value": self.value,
            "weight": self.weight,
            "affixes": [
                {
                    "name": a.name,
                    "type": a.affix_type.value,
                    "stat_bonuses": dict(a.stat_bonuses),
                    "value_bonus": a.value_bonus,
                }
                for a in self.affixes
            ],
            "name": self.name,
            "magical": self.magical,
            "quantity": self.quantity,
            "depth": self.depth,
        }
