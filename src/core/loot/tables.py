"""루트 테이블 관리자 - 이름 레지스트리 + 재귀 해석

테이블 참조 그래프는 로드 시점이 아니라 해석 시점에 지연 검증한다
(전방 참조 허용). 순환은 재귀 깊이 상한으로 끊는다.
"""

from __future__ import annotations

import logging
import threading
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Collection, Optional

from src.core.event_bus import EventBus, GameEvent
from src.core.event_types import EventTypes

from .errors import TableCycleDetected, UnknownTable
from .generator import ItemGenerator, validate_depth
from .models import GenerationContext, ItemSpec, LootEntry, LootTable
from .sampling import RandomSource, uniform_int, weighted_choice

if TYPE_CHECKING:
    from .schema import LootData

logger = logging.getLogger(__name__)

DEFAULT_MAX_DEPTH = 8
DEFAULT_TABLE = "depth_1_5"

# 상자 종류 별칭 → 테이블
CONTAINER_ALIASES: dict[str, str] = {
    "chest": "wooden_chest",
    "wooden_chest": "wooden_chest",
    "iron_chest": "iron_chest",
    "metal_chest": "iron_chest",
    "golden_chest": "golden_chest",
    "gold_chest": "golden_chest",
    "treasure_chest": "golden_chest",
}


@dataclass(frozen=True)
class TableRegistry:
    """불변 스냅샷. reload 시 새 객체로 교체된다."""

    tables: dict[str, LootTable] = field(default_factory=dict)
    monster_tables: dict[str, str] = field(default_factory=dict)
    depth_tables: dict[int, str] = field(default_factory=dict)
    special_tables: dict[str, str] = field(default_factory=dict)
    container_tables: dict[str, str] = field(default_factory=dict)


@dataclass(frozen=True)
class LootTableStatistics:
    total_tables: int
    total_entries: int
    monster_mappings: int
    depth_mappings: int
    special_mappings: int
    container_mappings: int


class LootTableManager:
    """
    이름 있는 루트 테이블 저장소.
    resolve() 로 테이블을 구체 ItemSpec 목록으로 해석한다.
    """

    def __init__(
        self,
        generator: ItemGenerator,
        registry: Optional[TableRegistry] = None,
        default_table: str = DEFAULT_TABLE,
        max_depth: int = DEFAULT_MAX_DEPTH,
        event_bus: Optional[EventBus] = None,
    ) -> None:
        if max_depth < 1:
            raise ValueError(f"max_depth must be >= 1, got {max_depth}")
        self._generator = generator
        self._registry = registry or TableRegistry()
        self._default_table = default_table
        self._max_depth = max_depth
        self._bus = event_bus
        self._reload_lock = threading.Lock()

    @classmethod
    def from_data(
        cls,
        data: "LootData",
        generator: ItemGenerator,
        event_bus: Optional[EventBus] = None,
    ) -> "LootTableManager":
        from src.config import settings

        return cls(
            generator,
            registry=data.registry,
            default_table=settings.DEFAULT_LOOT_TABLE,
            max_depth=settings.MAX_TABLE_DEPTH,
            event_bus=event_bus,
        )

    # ── 레지스트리 ────────────────────────────────────────────

    @property
    def registry(self) -> TableRegistry:
        return self._registry

    @property
    def default_table(self) -> str:
        return self._default_table

    def add_table(self, name: str, table: LootTable) -> None:
        """단일 테이블 추가/교체 (스냅샷 재생성)."""
        with self._reload_lock:
            current = self._registry
            if name in current.tables:
                logger.warning("Overwriting loot table: %s", name)
            self._registry = TableRegistry(
                tables={**current.tables, name: table},
                monster_tables=current.monster_tables,
                depth_tables=current.depth_tables,
                special_tables=current.special_tables,
                container_tables=current.container_tables,
            )

    def get_table(self, name: str) -> Optional[LootTable]:
        return self._registry.tables.get(name)

    def reload(self, data: "LootData") -> None:
        """배치 사이에 호출. 진행 중 resolve 는 이전 스냅샷으로 끝난다."""
        with self._reload_lock:
            self._registry = data.registry
        logger.info("Reloaded %d loot tables", len(data.registry.tables))
        self._emit(
            EventTypes.LOOT_DATA_RELOADED, {"tables": len(data.registry.tables)}
        )

    def statistics(self) -> LootTableStatistics:
        registry = self._registry
        return LootTableStatistics(
            total_tables=len(registry.tables),
            total_entries=sum(len(t.entries) for t in registry.tables.values()),
            monster_mappings=len(registry.monster_tables),
            depth_mappings=len(registry.depth_tables),
            special_mappings=len(registry.special_tables),
            container_mappings=len(registry.container_tables),
        )

    # ── 의미 키 → 테이블 이름 ─────────────────────────────────

    def table_for_monster(self, monster_name: str) -> str:
        return self._registry.monster_tables.get(monster_name, self._default_table)

    def table_for_depth(self, depth: int) -> str:
        """정확한 키 → 가장 가까운 하위 구간 → 기본 테이블."""
        validate_depth(depth)
        depth_tables = self._registry.depth_tables
        if depth in depth_tables:
            return depth_tables[depth]
        lower = [d for d in depth_tables if d <= depth]
        if lower:
            return depth_tables[max(lower)]
        return self._default_table

    def table_for_location(self, location_name: str) -> str:
        return self._registry.special_tables.get(location_name, self._default_table)

    def table_for_container(self, container_type: str) -> str:
        key = container_type.strip().lower()
        mapped = self._registry.container_tables.get(key)
        if mapped is None:
            mapped = CONTAINER_ALIASES.get(key, self._default_table)
        return mapped

    def resolve_monster(
        self, monster_name: str, depth: int, rng: RandomSource, **kwargs
    ) -> list[ItemSpec]:
        table = self.table_for_monster(monster_name)
        return self._resolve_with_fallback(table, depth, GenerationContext.COMBAT, rng, **kwargs)

    def resolve_depth(self, depth: int, rng: RandomSource, **kwargs) -> list[ItemSpec]:
        table = self.table_for_depth(depth)
        return self._resolve_with_fallback(table, depth, GenerationContext.RANDOM, rng, **kwargs)

    def resolve_location(
        self, location_name: str, depth: int, rng: RandomSource, **kwargs
    ) -> list[ItemSpec]:
        table = self.table_for_location(location_name)
        return self._resolve_with_fallback(table, depth, GenerationContext.TREASURE, rng, **kwargs)

    def resolve_container(
        self, container_type: str, depth: int, rng: RandomSource, **kwargs
    ) -> list[ItemSpec]:
        table = self.table_for_container(container_type)
        return self._resolve_with_fallback(table, depth, GenerationContext.TREASURE, rng, **kwargs)

    # ── 해석 ──────────────────────────────────────────────────

    def resolve(
        self,
        table_name: str,
        depth: int,
        context: GenerationContext,
        rng: RandomSource,
        taken_names: Optional[Collection[str]] = None,
    ) -> list[ItemSpec]:
        """테이블 해석. 최상위 테이블이 없으면 UnknownTable.

        하위 참조 실패(미등록/순환)는 해당 가지만 기본 테이블 대체 또는 절단하고 계속한다.
        """
        validate_depth(depth)
        registry = self._registry
        if table_name not in registry.tables:
            raise UnknownTable(table_name)
        return self._resolve_table(
            registry, table_name, depth, context, rng, 0, _Resolution(_names(taken_names))
        )

    def _resolve_with_fallback(
        self,
        table_name: str,
        depth: int,
        context: GenerationContext,
        rng: RandomSource,
        taken_names: Optional[Collection[str]] = None,
    ) -> list[ItemSpec]:
        validate_depth(depth)
        registry = self._registry
        state = _Resolution(_names(taken_names))
        return self._resolve_reference(registry, table_name, depth, context, rng, 0, state)

    def _resolve_reference(
        self,
        registry: TableRegistry,
        table_name: str,
        depth: int,
        context: GenerationContext,
        rng: RandomSource,
        level: int,
        state: _Resolution,
    ) -> list[ItemSpec]:
        """복구 가능한 실패를 흡수하는 참조 해석."""
        if table_name in state.cut_tables:
            return []
        try:
            return self._resolve_table(registry, table_name, depth, context, rng, level, state)
        except UnknownTable as exc:
            if table_name == self._default_table or self._default_table not in registry.tables:
                logger.warning("%s, no usable default table, dropping branch", exc)
                self._emit(EventTypes.LOOT_TABLE_FALLBACK, {"table": table_name, "fallback": None})
                return []
            logger.warning("%s, falling back to %r", exc, self._default_table)
            self._emit(
                EventTypes.LOOT_TABLE_FALLBACK,
                {"table": table_name, "fallback": self._default_table},
            )
            return self._resolve_reference(
                registry, self._default_table, depth, context, rng, level, state
            )
        except TableCycleDetected as exc:
            # 같은 해석 안에서 이 테이블로의 참조는 이후 모두 빈 결과
            state.cut_tables.add(exc.table_name)
            logger.warning("%s, truncating branch", exc)
            self._emit(
                EventTypes.LOOT_TABLE_CYCLE,
                {"table": exc.table_name, "max_depth": exc.max_depth},
            )
            return []

    def _resolve_table(
        self,
        registry: TableRegistry,
        table_name: str,
        depth: int,
        context: GenerationContext,
        rng: RandomSource,
        level: int,
        state: _Resolution,
    ) -> list[ItemSpec]:
        if level >= self._max_depth:
            raise TableCycleDetected(table_name, self._max_depth)
        table = registry.tables.get(table_name)
        if table is None:
            raise UnknownTable(table_name)
        if not table.entries:
            return []

        results: list[ItemSpec] = []
        for entry in self._draw_entries(table, rng):
            if entry.is_reference:
                results.extend(
                    self._resolve_reference(
                        registry, entry.table_ref, depth, context, rng, level + 1, state
                    )
                )
                continue
            spec = self._generator.generate_item(
                entry.item_type,
                depth,
                context,
                rng,
                rarity_override=entry.rarity_override,
                taken_names=state.taken,
            )
            spec.quantity = uniform_int(rng, *entry.quantity_range)
            if spec.quantity == 0:
                continue
            state.taken.add(spec.name)
            results.append(spec)
        return results

    def _draw_entries(self, table: LootTable, rng: RandomSource):
        """확정 드롭 + 추가 드롭 (항목 가중치/총 가중치 확률로 포함).

        항목 선택과 해석이 번갈아 일어나도록 제너레이터로 하나씩 넘긴다.
        """
        entries = list(table.entries)
        weights = [e.weight for e in entries]
        total = table.total_weight

        for _ in range(table.guaranteed_drops):
            yield weighted_choice(rng, entries, weights)

        for _ in range(table.max_drops - table.guaranteed_drops):
            candidate: LootEntry = weighted_choice(rng, entries, weights)
            if rng.randint(1, total) <= candidate.weight:
                yield candidate

    def _emit(self, event_type: str, data: dict) -> None:
        if self._bus is not None:
            self._bus.emit(GameEvent(event_type=event_type, data=data, source="loot_tables"))


@dataclass
class _Resolution:
    """최상위 해석 1회의 가변 상태."""

    taken: set[str]
    cut_tables: set[str] = field(default_factory=set)


def _names(taken: Optional[Collection[str]]) -> set[str]:
    """해석 1회 동안 누적되는 사용 이름 집합."""
    return set(taken) if taken is not None else set()
