"""희귀도 가중치 / 깊이 스케일링 / 희귀도 규칙 - 순수 데이터"""

from __future__ import annotations

import math
from dataclasses import dataclass, field

from .models import ItemRarity

# ── 기본값 ────────────────────────────────────────────────────

# Artifact 는 기본 분포에 없음 (특수 생성 또는 rarity_override 전용)
DEFAULT_RARITY_WEIGHTS: dict[ItemRarity, int] = {
    ItemRarity.TRASH: 5,
    ItemRarity.COMMON: 50,
    ItemRarity.UNCOMMON: 25,
    ItemRarity.RARE: 15,
    ItemRarity.EPIC: 4,
    ItemRarity.LEGENDARY: 1,
}

DEFAULT_VALUE_MULTIPLIERS: dict[ItemRarity, float] = {
    ItemRarity.TRASH: 0.1,
    ItemRarity.COMMON: 1.0,
    ItemRarity.UNCOMMON: 2.0,
    ItemRarity.RARE: 5.0,
    ItemRarity.EPIC: 10.0,
    ItemRarity.LEGENDARY: 25.0,
    ItemRarity.ARTIFACT: 100.0,
}

# (최소, 최대) 포함 범위
DEFAULT_AFFIX_RANGES: dict[ItemRarity, tuple[int, int]] = {
    ItemRarity.TRASH: (0, 0),
    ItemRarity.COMMON: (0, 0),
    ItemRarity.UNCOMMON: (0, 1),
    ItemRarity.RARE: (1, 2),
    ItemRarity.EPIC: (1, 3),
    ItemRarity.LEGENDARY: (2, 3),
    ItemRarity.ARTIFACT: (2, 4),
}

MAX_AFFIXES = 4


@dataclass(frozen=True)
class DepthScaling:
    """깊이당 선형 계수. depth 0 = 스케일링 없음."""

    stat_scaling: float = 0.1  # 깊이당 스탯 +10%
    value_scaling: float = 0.05  # 깊이당 가치 +5%
    rarity_scaling: float = 1.0  # 깊이당 상위 등급 가중치 +1
    max_rarity_bonus: int = 50

    def stat_factor(self, depth: int) -> float:
        return 1.0 + self.stat_scaling * depth

    def value_factor(self, depth: int) -> float:
        return 1.0 + self.value_scaling * depth

    def rarity_bonus(self, depth: int) -> int:
        return min(self.max_rarity_bonus, math.floor(depth * self.rarity_scaling))


@dataclass(frozen=True)
class RarityWeights:
    """희귀도 → 기본 추첨 가중치. 매핑에 없는 등급은 추첨 대상이 아니다."""

    base_weights: dict[ItemRarity, int] = field(
        default_factory=lambda: dict(DEFAULT_RARITY_WEIGHTS)
    )

    def __post_init__(self) -> None:
        if not self.base_weights:
            raise ValueError("RarityWeights needs at least one rarity")
        for rarity, weight in self.base_weights.items():
            if weight <= 0:
                raise ValueError(f"Rarity weight must be positive: {rarity.label}={weight}")

    def effective(self, depth: int, scaling: DepthScaling) -> dict[ItemRarity, int]:
        """깊이 보너스 적용 가중치. Common 이하 등급은 보너스 없음."""
        bonus = scaling.rarity_bonus(depth)
        return {
            rarity: weight + bonus if rarity > ItemRarity.COMMON else weight
            for rarity, weight in sorted(self.base_weights.items())
        }


@dataclass(frozen=True)
class RarityRules:
    """희귀도별 가치 배율 + 접사 수 범위."""

    value_multipliers: dict[ItemRarity, float] = field(
        default_factory=lambda: dict(DEFAULT_VALUE_MULTIPLIERS)
    )
    affix_ranges: dict[ItemRarity, tuple[int, int]] = field(
        default_factory=lambda: dict(DEFAULT_AFFIX_RANGES)
    )

    def __post_init__(self) -> None:
        for rarity, (low, high) in self.affix_ranges.items():
            if not 0 <= low <= high <= MAX_AFFIXES:
                raise ValueError(
                    f"Invalid affix range for {rarity.label}: ({low}, {high})"
                )

    def value_multiplier(self, rarity: ItemRarity) -> float:
        return self.value_multipliers.get(rarity, 1.0)

    def affix_range(self, rarity: ItemRarity) -> tuple[int, int]:
        return self.affix_ranges.get(rarity, (0, 0))
