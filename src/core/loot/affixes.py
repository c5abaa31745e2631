"""접사 테이블 - 타입별 접두/접미사 풀"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional

from .errors import EmptyAffixPool
from .models import Affix, AffixType, ItemType
from .sampling import RandomSource, weighted_sample

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class AffixTable:
    """한 타입의 접사 풀. 추첨은 접두/접미 구분 없이 합집합에서 이루어진다."""

    prefixes: tuple[Affix, ...] = ()
    suffixes: tuple[Affix, ...] = ()

    def __post_init__(self) -> None:
        for affix in self.prefixes:
            if affix.affix_type is not AffixType.PREFIX:
                raise ValueError(f"{affix.name!r} listed as prefix but is {affix.affix_type.value}")
        for affix in self.suffixes:
            if affix.affix_type is not AffixType.SUFFIX:
                raise ValueError(f"{affix.name!r} listed as suffix but is {affix.affix_type.value}")

    @property
    def pool(self) -> list[Affix]:
        """이름 중복 제거된 합집합 (먼저 등록된 쪽 우선)."""
        seen: set[str] = set()
        merged: list[Affix] = []
        for affix in (*self.prefixes, *self.suffixes):
            if affix.name not in seen:
                seen.add(affix.name)
                merged.append(affix)
        return merged

    def __len__(self) -> int:
        return len(self.pool)

    def sample(self, count: int, rng: RandomSource) -> list[Affix]:
        """가중치 비복원 추첨. 같은 이름은 두 번 나오지 않는다."""
        pool = self.pool
        return weighted_sample(rng, pool, [a.weight for a in pool], count)


class AffixRegistry:
    """타입 키 → AffixTable.

    "weapon:sword" 처럼 세부 종류 키가 우선하고, 없으면 "weapon" 카테고리 키를 쓴다.
    """

    def __init__(self, tables: Optional[dict[str, AffixTable]] = None) -> None:
        self._tables: dict[str, AffixTable] = dict(tables or {})

    def register(self, key: str, table: AffixTable) -> None:
        if key in self._tables:
            logger.warning("Overwriting affix table: %s", key)
        self._tables[key] = table

    def get(self, item_type: ItemType) -> Optional[AffixTable]:
        table = self._tables.get(item_type.key)
        if table is None:
            table = self._tables.get(item_type.category.value)
        return table

    def require(self, item_type: ItemType) -> AffixTable:
        """비어 있지 않은 테이블 반환. 없으면 EmptyAffixPool."""
        table = self.get(item_type)
        if table is None or len(table) == 0:
            raise EmptyAffixPool(item_type.key)
        return table

    def items(self) -> list[tuple[str, AffixTable]]:
        return list(self._tables.items())

    def count(self) -> int:
        return len(self._tables)
