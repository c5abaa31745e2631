"""종류별 기본 스탯/가치/무게 정적 테이블"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional

from .models import ItemCategory, ItemType


@dataclass(frozen=True)
class BaseItemProfile:
    """스케일링 전 기본값."""

    item_type: ItemType
    base_name: str  # "Iron Sword"
    base_value: int
    weight: float  # kg
    stats: dict[str, int] = field(default_factory=dict)
    frequency: int = 10  # 카테고리 내 종류 선택 가중치


def _profile(
    key: str,
    base_name: str,
    base_value: int,
    weight: float,
    frequency: int = 10,
    **stats: int,
) -> BaseItemProfile:
    return BaseItemProfile(
        item_type=ItemType.parse(key),
        base_name=base_name,
        base_value=base_value,
        weight=weight,
        stats=dict(stats),
        frequency=frequency,
    )


BASE_ITEM_PROFILES: tuple[BaseItemProfile, ...] = (
    # 무기: attack / damage
    _profile("weapon:sword", "Iron Sword", 50, 3.0, 14, attack=5, damage=8),
    _profile("weapon:axe", "Battle Axe", 60, 4.0, 10, attack=7, damage=12),
    _profile("weapon:mace", "War Mace", 45, 3.5, 10, attack=6, damage=10),
    _profile("weapon:dagger", "Steel Dagger", 25, 1.0, 14, attack=3, damage=4),
    _profile("weapon:spear", "Iron Spear", 40, 2.5, 10, attack=4, damage=6),
    _profile("weapon:bow", "Hunting Bow", 75, 2.0, 10, attack=6, damage=7),
    _profile("weapon:crossbow", "Light Crossbow", 100, 4.0, 6, attack=8, damage=10),
    _profile("weapon:staff", "Wooden Staff", 30, 2.0, 8, attack=2, damage=3),
    _profile("weapon:wand", "Magic Wand", 80, 0.5, 6, attack=1, damage=2),
    _profile("weapon:thrown", "Throwing Knife", 15, 0.5, 8, attack=2, damage=3),
    # 방어구: defense
    _profile("armor:helmet", "Iron Helmet", 40, 2.0, 10, defense=3),
    _profile("armor:chest", "Chain Mail", 80, 15.0, 14, defense=8),
    _profile("armor:legs", "Iron Greaves", 60, 8.0, 10, defense=5),
    _profile("armor:boots", "Leather Boots", 25, 2.0, 10, defense=2),
    _profile("armor:gloves", "Leather Gloves", 20, 1.0, 10, defense=1),
    _profile("armor:shield", "Iron Shield", 50, 5.0, 10, defense=6),
    _profile("armor:cloak", "Traveler's Cloak", 30, 2.0, 8, defense=2),
    _profile("armor:ring", "Simple Ring", 100, 0.1, 4, defense=1),
    _profile("armor:amulet", "Bone Amulet", 75, 0.2, 4, defense=1),
    # 소모품: potency
    _profile("consumable:potion", "Health Potion", 25, 0.5, 16, potency=10),
    _profile("consumable:food", "Bread", 5, 0.2, 12, potency=3),
    _profile("consumable:scroll", "Magic Scroll", 50, 0.1, 8, potency=6),
    _profile("consumable:ammunition", "Arrow", 1, 0.1, 8, potency=1),
    # 도구: utility
    _profile("tool:lockpick", "Lockpick", 15, 0.1, 10, utility=2),
    _profile("tool:torch", "Torch", 2, 1.0, 14, utility=1),
    _profile("tool:rope", "Hemp Rope", 8, 2.0, 10, utility=1),
    _profile("tool:key", "Iron Key", 10, 0.1, 4, utility=1),
    # 재료
    _profile("material:metal", "Iron Ore", 10, 2.0, 12),
    _profile("material:wood", "Oak Plank", 3, 1.5, 10),
    _profile("material:leather", "Leather Strip", 6, 0.5, 10),
    _profile("material:cloth", "Linen Cloth", 4, 0.3, 10),
    _profile("material:gem", "Rough Gem", 60, 0.1, 6),
    _profile("material:herb", "Healing Herb", 5, 0.1, 10),
    _profile("material:bone", "Bone Fragment", 2, 0.5, 10),
    _profile("material:stone", "Whetstone", 3, 1.0, 8),
    # 기타
    _profile("misc:gold", "Gold Coin", 1, 0.01, 10),
    _profile("misc:trinket", "Curious Trinket", 20, 0.2, 8),
    _profile("misc:idol", "Small Idol", 45, 1.0, 4),
)


class BaseItemCatalog:
    """ItemType → BaseItemProfile 조회"""

    def __init__(self, profiles: tuple[BaseItemProfile, ...] = BASE_ITEM_PROFILES) -> None:
        self._profiles: dict[ItemType, BaseItemProfile] = {
            p.item_type: p for p in profiles
        }

    def get(self, item_type: ItemType) -> Optional[BaseItemProfile]:
        return self._profiles.get(item_type)

    def profile_for(self, item_type: ItemType) -> BaseItemProfile:
        """미등록 종류는 스탯 없는 최소 프로필로 대체."""
        profile = self._profiles.get(item_type)
        if profile is not None:
            return profile
        return BaseItemProfile(
            item_type=item_type,
            base_name=item_type.kind.replace("_", " ").title(),
            base_value=1,
            weight=1.0,
        )

    def in_category(self, category: ItemCategory) -> list[BaseItemProfile]:
        return [p for p in self._profiles.values() if p.item_type.category == category]

    def types(self) -> list[ItemType]:
        return list(self._profiles)
