"""아이템 생성 엔진

generate_item 한 번의 난수 소비 순서 (버전 간 고정):
    종류 → 희귀도 → 접사 수 → 접사 선택 → 이름

같은 시드 → 같은 던전 내용 재현이 이 순서에 의존하므로 순서를 바꾸지 말 것.
"""

from __future__ import annotations

import logging
import threading
from dataclasses import dataclass
from typing import TYPE_CHECKING, Collection, Optional

from src.core.event_bus import EventBus, GameEvent
from src.core.event_types import EventTypes

from .affixes import AffixRegistry
from .base_items import BaseItemCatalog
from .errors import EmptyAffixPool, InvalidDepth
from .models import Affix, GenerationContext, ItemCategory, ItemRarity, ItemSpec, ItemType
from .naming import ItemNameGenerator
from .rarity import DepthScaling, RarityRules, RarityWeights
from .sampling import RandomSource, round_half_up, uniform_int, weighted_choice

if TYPE_CHECKING:
    from .schema import LootData

logger = logging.getLogger(__name__)

# === 상황별 카테고리 분포 ===
CONTEXT_CATEGORY_WEIGHTS: dict[GenerationContext, dict[ItemCategory, int]] = {
    GenerationContext.COMBAT: {
        ItemCategory.WEAPON: 30,
        ItemCategory.ARMOR: 25,
        ItemCategory.CONSUMABLE: 25,
        ItemCategory.MATERIAL: 8,
        ItemCategory.TOOL: 6,
        ItemCategory.MISC: 6,
    },
    GenerationContext.TREASURE: {
        ItemCategory.WEAPON: 15,
        ItemCategory.ARMOR: 15,
        ItemCategory.CONSUMABLE: 10,
        ItemCategory.MATERIAL: 30,
        ItemCategory.TOOL: 5,
        ItemCategory.MISC: 25,
    },
    GenerationContext.MERCHANT: {
        ItemCategory.WEAPON: 18,
        ItemCategory.ARMOR: 18,
        ItemCategory.CONSUMABLE: 20,
        ItemCategory.MATERIAL: 15,
        ItemCategory.TOOL: 15,
        ItemCategory.MISC: 14,
    },
    GenerationContext.RANDOM: {category: 1 for category in ItemCategory},
}


@dataclass(frozen=True)
class GeneratorConfig:
    """생성 설정 스냅샷. reload 는 이 객체를 통째로 교체한다."""

    rarity_weights: RarityWeights
    depth_scaling: DepthScaling
    rarity_rules: RarityRules
    affixes: AffixRegistry
    names: ItemNameGenerator
    catalog: BaseItemCatalog


def validate_depth(depth: int) -> int:
    if isinstance(depth, bool) or not isinstance(depth, int) or depth < 0:
        raise InvalidDepth(depth)
    return depth


class ItemGenerator:
    """단일 아이템 생성기. 생성 결과에 대한 참조를 보관하지 않는다."""

    def __init__(
        self,
        config: GeneratorConfig,
        event_bus: Optional[EventBus] = None,
    ) -> None:
        self._config = config
        self._bus = event_bus
        self._reload_lock = threading.Lock()

    @classmethod
    def from_data(cls, data: "LootData", event_bus: Optional[EventBus] = None) -> "ItemGenerator":
        return cls(cls._config_from(data), event_bus=event_bus)

    @staticmethod
    def _config_from(data: "LootData") -> GeneratorConfig:
        catalog = BaseItemCatalog()
        return GeneratorConfig(
            rarity_weights=data.rarity_weights,
            depth_scaling=data.depth_scaling,
            rarity_rules=data.rarity_rules,
            affixes=data.affixes,
            names=ItemNameGenerator(data.name_pools, catalog),
            catalog=catalog,
        )

    @property
    def config(self) -> GeneratorConfig:
        return self._config

    def reload(self, data: "LootData") -> None:
        """설정 교체. 진행 중인 생성은 시작 시점 스냅샷을 계속 사용한다."""
        config = self._config_from(data)
        with self._reload_lock:
            self._config = config
        logger.info("Item generator configuration reloaded")

    # ── 공개 API ──────────────────────────────────────────────

    def generate_item(
        self,
        requested_type: Optional[ItemType],
        depth: int,
        context: GenerationContext,
        rng: RandomSource,
        rarity_override: Optional[ItemRarity] = None,
        taken_names: Collection[str] = (),
    ) -> ItemSpec:
        """완성된 ItemSpec 1개 생성.

        requested_type=None 이면 context 분포에서 종류를 뽑는다.
        rarity_override 가 있으면 희귀도 추첨을 건너뛴다.
        음수 깊이는 난수 소비 전에 InvalidDepth.
        """
        validate_depth(depth)
        config = self._config

        item_type = requested_type or self.select_item_type(context, rng, config)
        if rarity_override is not None:
            rarity = rarity_override
        else:
            rarity = self.roll_rarity(depth, rng, config)

        profile = config.catalog.profile_for(item_type)
        stat_factor = config.depth_scaling.stat_factor(depth)
        stats = {
            stat: round_half_up(base * stat_factor) for stat, base in profile.stats.items()
        }
        value = round_half_up(
            profile.base_value
            * config.rarity_rules.value_multiplier(rarity)
            * config.depth_scaling.value_factor(depth)
        )

        affixes = self._roll_affixes(item_type, rarity, rng, config)
        for affix in affixes:
            for stat, bonus in affix.stat_bonuses.items():
                stats[stat] = stats.get(stat, 0) + bonus
            value += affix.value_bonus
        # 0 하한은 모든 접사 합산 후 한 번만
        stats = {stat: max(0, amount) for stat, amount in stats.items()}
        value = max(0, value)

        magical = bool(affixes) or rarity >= ItemRarity.RARE
        name = config.names.generate_name(item_type, rarity, magical, rng, taken=taken_names)

        spec = ItemSpec(
            item_type=item_type,
            rarity=rarity,
            base_stats=dict(profile.stats),
            stats=stats,
            value=value,
            weight=profile.weight,
            affixes=affixes,
            name=name,
            magical=magical,
            depth=depth,
        )
        logger.debug(
            "Generated %s [%s] %s (value=%d, affixes=%d, depth=%d)",
            spec.name,
            rarity.label,
            item_type.key,
            value,
            len(affixes),
            depth,
        )
        return spec

    def select_item_type(
        self,
        context: GenerationContext,
        rng: RandomSource,
        config: Optional[GeneratorConfig] = None,
    ) -> ItemType:
        """카테고리(상황 가중치) → 세부 종류(빈도 가중치) 순서로 추첨."""
        config = config or self._config
        weights = CONTEXT_CATEGORY_WEIGHTS[context]
        categories = [c for c in weights if config.catalog.in_category(c)]
        category = weighted_choice(rng, categories, [weights[c] for c in categories])
        profiles = config.catalog.in_category(category)
        profile = weighted_choice(rng, profiles, [p.frequency for p in profiles])
        return profile.item_type

    def roll_rarity(
        self,
        depth: int,
        rng: RandomSource,
        config: Optional[GeneratorConfig] = None,
    ) -> ItemRarity:
        """깊이 보너스 반영 단일 가중치 추첨."""
        config = config or self._config
        weights = config.rarity_weights.effective(depth, config.depth_scaling)
        rarities = list(weights)
        return weighted_choice(rng, rarities, [weights[r] for r in rarities])

    # ── 접사 ──────────────────────────────────────────────────

    def _roll_affixes(
        self,
        item_type: ItemType,
        rarity: ItemRarity,
        rng: RandomSource,
        config: GeneratorConfig,
    ) -> list[Affix]:
        low, high = config.rarity_rules.affix_range(rarity)
        count = uniform_int(rng, low, high)
        if count == 0:
            return []

        try:
            table = config.affixes.require(item_type)
        except EmptyAffixPool as exc:
            logger.warning("%s, %s item gets no affixes", exc, rarity.label)
            self._emit(
                EventTypes.AFFIX_POOL_EMPTY,
                {"item_type": item_type.key, "rarity": rarity.label, "requested": count},
            )
            return []

        affixes = table.sample(count, rng)
        if len(affixes) < count:
            logger.warning(
                "Affix pool for %s has only %d entries, %d requested",
                item_type.key,
                len(affixes),
                count,
            )
        return affixes

    def _emit(self, event_type: str, data: dict) -> None:
        if self._bus is not None:
            self._bus.emit(GameEvent(event_type=event_type, data=data, source="item_generator"))
