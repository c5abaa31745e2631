"""Shared test fixtures."""

import random

import pytest

from src.core.event_bus import EventBus
from src.core.loot.generator import ItemGenerator
from src.core.loot.schema import LootData, default_loot_data
from src.core.loot.tables import LootTableManager


@pytest.fixture()
def rng() -> random.Random:
    """고정 시드 난수 소스"""
    return random.Random(1234)


@pytest.fixture()
def bus() -> EventBus:
    return EventBus()


@pytest.fixture()
def loot_data() -> LootData:
    """내장 기본 루트 데이터"""
    return default_loot_data()


@pytest.fixture()
def generator(loot_data: LootData, bus: EventBus) -> ItemGenerator:
    return ItemGenerator.from_data(loot_data, event_bus=bus)


@pytest.fixture()
def manager(loot_data: LootData, generator: ItemGenerator, bus: EventBus) -> LootTableManager:
    return LootTableManager(generator, registry=loot_data.registry, event_bus=bus)
