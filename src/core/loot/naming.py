"""아이템 이름 생성기

희귀도별 명명 전략:
- Trash/Common: 기본명 (25% 확률로 평범한 품질 수식어)
- Uncommon: 기본명 + 품질 수식어 또는 단일 마법 접사
- Rare/Epic: [접두] 기본명 [접미]
- Legendary: 큐레이션 목록 우선, 소진 시 Epic 방식 조합
- Artifact: 별도 큐레이션 목록 ("The " 관사 보장), 소진 시 조합

이름용 접사는 스탯 접사(Affix)와 별개의 장식 텍스트다.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Collection, Optional, Sequence

from .base_items import BaseItemCatalog
from .models import ItemCategory, ItemRarity, ItemType
from .sampling import RandomSource, uniform_int, weighted_choice

logger = logging.getLogger(__name__)

ARTICLES = ("the", "a", "an")


@dataclass(frozen=True)
class NameAffix:
    """장식용 이름 조각. applies_to 가 비어 있으면 모든 카테고리에 적용."""

    name: str  # "Flaming", "of the Bear"
    applies_to: tuple[ItemCategory, ...] = ()
    weight: int = 10

    def applies_to_type(self, item_type: ItemType) -> bool:
        return not self.applies_to or item_type.category in self.applies_to


@dataclass(frozen=True)
class NamePools:
    """이름 생성 데이터 묶음."""

    base_names: dict[str, tuple[str, ...]] = field(default_factory=dict)  # 타입 키 → 기본명
    prefixes: tuple[NameAffix, ...] = ()
    suffixes: tuple[NameAffix, ...] = ()
    plain_qualities: tuple[str, ...] = ()
    fine_qualities: tuple[str, ...] = ()
    epithets: tuple[str, ...] = ()  # 조합 이름이 기본명과 같아질 때 쓰는 칭호
    legendary_names: dict[str, tuple[str, ...]] = field(default_factory=dict)  # 타입/카테고리 키
    artifact_names: tuple[str, ...] = ()

    def legendary_for(self, item_type: ItemType) -> list[str]:
        names = list(self.legendary_names.get(item_type.key, ()))
        for name in self.legendary_names.get(item_type.category.value, ()):
            if name not in names:
                names.append(name)
        return names


def with_article(name: str) -> str:
    """관사로 시작하지 않으면 "The " 를 붙인다."""
    first = name.split(" ", 1)[0].lower()
    if first in ARTICLES:
        return name
    return f"The {name}"


def _pick(rng: RandomSource, options: Sequence[str]) -> str:
    return options[uniform_int(rng, 0, len(options) - 1)]


class ItemNameGenerator:
    """동일 난수 상태 + 동일 입력 → 동일 이름. 내부 카운터 없음."""

    def __init__(self, pools: NamePools, catalog: Optional[BaseItemCatalog] = None) -> None:
        self._pools = pools
        self._catalog = catalog or BaseItemCatalog()

    @property
    def pools(self) -> NamePools:
        return self._pools

    def generate_name(
        self,
        item_type: ItemType,
        rarity: ItemRarity,
        has_enchantment: bool,
        rng: RandomSource,
        taken: Collection[str] = (),
    ) -> str:
        """표시 이름 생성.

        taken: 이미 사용된 고유 이름 (Legendary/Artifact 큐레이션 목록 소진 판정용)
        """
        if rarity is ItemRarity.ARTIFACT:
            return self._artifact_name(item_type, rng, taken)
        if rarity is ItemRarity.LEGENDARY:
            return self._legendary_name(item_type, rng, taken)
        if rarity in (ItemRarity.RARE, ItemRarity.EPIC):
            return self._magical_name(item_type, has_enchantment, rng)[0]
        if rarity is ItemRarity.UNCOMMON:
            if has_enchantment or rng.randint(1, 3) == 1:
                return self._simple_magical_name(item_type, rng)
            return self._quality_name(item_type, rng)
        return self._basic_name(item_type, rng)

    # ── 기본/품질 ──────────────────────────────────────────────

    def _base_name(self, item_type: ItemType, rng: RandomSource) -> str:
        options = self._pools.base_names.get(item_type.key)
        if options:
            return _pick(rng, options)
        logger.debug("No base-name pool for %s, using catalog name", item_type.key)
        return self._catalog.profile_for(item_type).base_name

    def _basic_name(self, item_type: ItemType, rng: RandomSource) -> str:
        base = self._base_name(item_type, rng)
        if self._pools.plain_qualities and rng.randint(1, 4) == 1:
            return f"{_pick(rng, self._pools.plain_qualities)} {base}"
        return base

    def _quality_name(self, item_type: ItemType, rng: RandomSource) -> str:
        base = self._base_name(item_type, rng)
        if not self._pools.fine_qualities:
            return base
        return f"{_pick(rng, self._pools.fine_qualities)} {base}"

    # ── 마법 접사 조합 ─────────────────────────────────────────

    def _name_affix(
        self, affixes: Sequence[NameAffix], item_type: ItemType, rng: RandomSource
    ) -> Optional[str]:
        applicable = [a for a in affixes if a.applies_to_type(item_type)]
        if not applicable:
            return None
        return weighted_choice(rng, applicable, [a.weight for a in applicable]).name

    def _prefix(self, item_type: ItemType, rng: RandomSource) -> Optional[str]:
        return self._name_affix(self._pools.prefixes, item_type, rng)

    def _suffix(self, item_type: ItemType, rng: RandomSource) -> Optional[str]:
        return self._name_affix(self._pools.suffixes, item_type, rng)

    def _one_affix(
        self, item_type: ItemType, rng: RandomSource
    ) -> tuple[Optional[str], Optional[str]]:
        """접두 또는 접미 하나. 고른 쪽 풀이 비면 반대쪽으로."""
        if rng.randint(1, 2) == 1:
            prefix = self._prefix(item_type, rng)
            if prefix is not None:
                return prefix, None
            return None, self._suffix(item_type, rng)
        suffix = self._suffix(item_type, rng)
        if suffix is not None:
            return None, suffix
        return self._prefix(item_type, rng), None

    def _simple_magical_name(self, item_type: ItemType, rng: RandomSource) -> str:
        base = self._base_name(item_type, rng)
        prefix, suffix = self._one_affix(item_type, rng)
        if prefix is None and suffix is None:
            return self._quality_name(item_type, rng)
        return _compose(prefix, base, suffix)

    def _magical_name(
        self, item_type: ItemType, force_affix: bool, rng: RandomSource
    ) -> tuple[str, str]:
        """[접두] 기본명 [접미]. 반환: (이름, 기본명)."""
        base = self._base_name(item_type, rng)
        prefix = self._prefix(item_type, rng) if rng.randint(1, 2) == 1 else None
        suffix = self._suffix(item_type, rng) if rng.randint(1, 2) == 1 else None
        if prefix is None and suffix is None and force_affix:
            prefix, suffix = self._one_affix(item_type, rng)
        return _compose(prefix, base, suffix), base

    def _composed_unique_name(self, item_type: ItemType, rng: RandomSource) -> str:
        """큐레이션 목록 소진 시. 기본명과 반드시 다른 이름."""
        name, base = self._magical_name(item_type, True, rng)
        if name == base:
            epithet = _pick(rng, self._pools.epithets) if self._pools.epithets else "Fabled"
            name = f"{epithet} {base}"
        return name

    # ── 고유 이름 ──────────────────────────────────────────────

    def _legendary_name(
        self, item_type: ItemType, rng: RandomSource, taken: Collection[str]
    ) -> str:
        available = [n for n in self._pools.legendary_for(item_type) if n not in taken]
        if available:
            return _pick(rng, available)
        logger.debug("Legendary names exhausted for %s, composing", item_type.key)
        return self._composed_unique_name(item_type, rng)

    def _artifact_name(
        self, item_type: ItemType, rng: RandomSource, taken: Collection[str]
    ) -> str:
        available = [
            with_article(n) for n in self._pools.artifact_names if with_article(n) not in taken
        ]
        if available:
            return _pick(rng, available)
        logger.debug("Artifact names exhausted, composing for %s", item_type.key)
        return self._composed_unique_name(item_type, rng)


def _compose(prefix: Optional[str], base: str, suffix: Optional[str]) -> str:
    return " ".join(part for part in (prefix, base, suffix) if part)
