"""루트 Service - Core 생성 결과를 월드 엔티티로 구체화, EventBus 통신

Service → Core 허용. 월드 엔티티 생성은 주입된 create_item 에 위임한다.
Core 는 ItemSpec 만 반환하고 월드를 알지 못한다.
"""

from __future__ import annotations

import threading
from pathlib import Path
from typing import Any, Iterable, Optional, Protocol, Sequence, Union

from src.core.event_bus import EventBus, GameEvent
from src.core.event_types import EventTypes
from src.core.logging import get_logger
from src.core.loot.generator import ItemGenerator
from src.core.loot.models import GenerationContext, ItemRarity, ItemSpec
from src.core.loot.sampling import RandomSource
from src.core.loot.schema import LootData, default_loot_data, load_loot_data
from src.core.loot.tables import LootTableManager

logger = get_logger(__name__)

Position = tuple[int, int]

SCATTER_CHANCE = 5  # 타일당 %
DEFAULT_CHEST_COUNT = 3
DEFAULT_MONSTER_COUNT = 5
DEFAULT_DUNGEON_MONSTERS = ("Goblin", "Skeleton", "Orc")


class ItemFactory(Protocol):
    """ItemSpec → 월드 아이템 핸들. 반환값은 Service 가 해석하지 않는다."""

    def __call__(self, spec: ItemSpec, position: Position) -> Any: ...


def load_configured_data(path: Optional[Union[str, Path]] = None) -> LootData:
    """path → settings.LOOT_DATA_PATH → 내장 기본 데이터 순."""
    if path is None:
        from src.config import settings

        path = settings.LOOT_DATA_PATH
    if path is None:
        return default_loot_data()
    return load_loot_data(path)


class LootService:
    """몬스터/상자/장소 드롭 + 던전 배치"""

    def __init__(
        self,
        generator: ItemGenerator,
        manager: LootTableManager,
        create_item: ItemFactory,
        event_bus: Optional[EventBus] = None,
    ):
        self._generator = generator
        self._manager = manager
        self._create_item = create_item
        self._bus = event_bus
        # 세션 동안 사용된 고유(Legendary/Artifact) 이름
        self._claimed: set[str] = set()
        # reload 는 진행 중인 배치가 끝날 때까지 대기
        self._lock = threading.RLock()

    @classmethod
    def from_settings(
        cls,
        create_item: ItemFactory,
        event_bus: Optional[EventBus] = None,
    ) -> "LootService":
        data = load_configured_data()
        generator = ItemGenerator.from_data(data, event_bus=event_bus)
        manager = LootTableManager.from_data(data, generator, event_bus=event_bus)
        return cls(generator, manager, create_item, event_bus=event_bus)

    @property
    def generator(self) -> ItemGenerator:
        return self._generator

    @property
    def manager(self) -> LootTableManager:
        return self._manager

    @property
    def claimed_names(self) -> frozenset[str]:
        return frozenset(self._claimed)

    def reset_session(self) -> None:
        """새 게임 세션. 고유 이름 목록을 다시 사용할 수 있게 된다."""
        with self._lock:
            self._claimed.clear()

    # === 데이터 ===

    def reload(self, path: Optional[Union[str, Path]] = None) -> LootData:
        """데이터 파일 재로드. 로드 실패(ConfigError) 시 기존 데이터 유지."""
        with self._lock:
            data = load_configured_data(path)
            self._generator.reload(data)
            self._manager.reload(data)
        logger.info("Loot data reloaded (%d tables)", len(data.registry.tables))
        return data

    # === 드롭 ===

    def drop_for_monster(
        self, monster_name: str, position: Position, depth: int, rng: RandomSource
    ) -> list[Any]:
        with self._lock:
            specs = self._manager.resolve_monster(
                monster_name, depth, rng, taken_names=self._claimed
            )
            return self._materialize(specs, position, f"monster:{monster_name}")

    def open_container(
        self, container_type: str, position: Position, depth: int, rng: RandomSource
    ) -> list[Any]:
        with self._lock:
            specs = self._manager.resolve_container(
                container_type, depth, rng, taken_names=self._claimed
            )
            return self._materialize(specs, position, f"container:{container_type}")

    def loot_location(
        self, location_name: str, position: Position, depth: int, rng: RandomSource
    ) -> list[Any]:
        with self._lock:
            specs = self._manager.resolve_location(
                location_name, depth, rng, taken_names=self._claimed
            )
            return self._materialize(specs, position, f"location:{location_name}")

    def drop_random_item(
        self,
        position: Position,
        depth: int,
        rng: RandomSource,
        context: GenerationContext = GenerationContext.RANDOM,
    ) -> Any:
        with self._lock:
            spec = self._generator.generate_item(
                None, depth, context, rng, taken_names=self._claimed
            )
            return self._materialize([spec], position, "scatter")[0]

    def populate_dungeon(
        self,
        width: int,
        height: int,
        depth: int,
        rng: RandomSource,
        chests: int = DEFAULT_CHEST_COUNT,
        monsters: int = DEFAULT_MONSTER_COUNT,
        container_type: str = "iron_chest",
        monster_names: Sequence[str] = DEFAULT_DUNGEON_MONSTERS,
    ) -> list[Any]:
        """던전 한 층 배치.

        1. 타일마다 SCATTER_CHANCE% 확률로 무작위 아이템
        2. 무작위 위치 상자 chests 개
        3. 무작위 몬스터 monsters 마리의 드롭
        """
        if width <= 0 or height <= 0:
            raise ValueError(f"Dungeon size must be positive, got {width}x{height}")
        if monsters > 0 and not monster_names:
            raise ValueError("monster_names is empty")

        handles: list[Any] = []
        with self._lock:
            for x in range(width):
                for y in range(height):
                    if rng.randint(1, 100) <= SCATTER_CHANCE:
                        handles.append(self.drop_random_item((x, y), depth, rng))

            for _ in range(chests):
                position = _random_position(rng, width, height)
                handles.extend(self.open_container(container_type, position, depth, rng))

            for _ in range(monsters):
                monster = monster_names[rng.randint(0, len(monster_names) - 1)]
                position = _random_position(rng, width, height)
                handles.extend(self.drop_for_monster(monster, position, depth, rng))

        logger.info(
            "Populated %dx%d dungeon at depth %d with %d items",
            width,
            height,
            depth,
            len(handles),
        )
        return handles

    # === 내부 ===

    def _materialize(
        self, specs: Iterable[ItemSpec], position: Position, source: str
    ) -> list[Any]:
        handles = []
        for spec in specs:
            if spec.rarity >= ItemRarity.LEGENDARY:
                self._claimed.add(spec.name)
            handles.append(self._create_item(spec, position))
            self._emit(
                EventTypes.ITEM_CREATED,
                {
                    "name": spec.name,
                    "item_type": spec.item_type.key,
                    "rarity": spec.rarity.label,
                    "quantity": spec.quantity,
                    "position": position,
                },
            )
        if handles:
            self._emit(
                EventTypes.LOOT_DROPPED,
                {"source": source, "count": len(handles), "position": position},
            )
        return handles

    def _emit(self, event_type: str, data: dict) -> None:
        if self._bus is not None:
            self._bus.emit(GameEvent(event_type=event_type, data=data, source="loot_service"))


def _random_position(rng: RandomSource, width: int, height: int) -> Position:
    return rng.randint(0, width - 1), rng.randint(0, height - 1)
