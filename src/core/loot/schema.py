"""루트 데이터 문서 (JSON) 스키마 + 로드/저장

문서 섹션(tables, monster_tables, ..., depth_scaling)은 모두 선택이다.
파일에 없는 섹션은 기본 데이터(base)를 그대로 쓰고, 있는 섹션은 통째로 교체한다.
알 수 없는 필드는 무시한다.
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Annotated, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from .affixes import AffixRegistry, AffixTable
from .defaults import (
    default_affixes,
    default_depth_tables,
    default_monster_tables,
    default_name_pools,
    default_special_tables,
    default_tables,
)
from .errors import ConfigError
from .models import Affix, AffixType, ItemCategory, ItemRarity, ItemType, LootEntry, LootTable
from .naming import NameAffix, NamePools
from .rarity import DepthScaling, RarityRules, RarityWeights
from .tables import TableRegistry

logger = logging.getLogger(__name__)

PathLike = Union[str, Path]

# 고유 이름 (빈 문자열이면 "The " 같은 이름이 만들어진다)
NonEmptyName = Annotated[str, Field(min_length=1)]


# === 문서 모델 ===


class _Document(BaseModel):
    model_config = ConfigDict(extra="ignore")


class LootEntryDoc(_Document):
    """테이블 항목. item_type / table_ref 중 하나"""

    weight: int = Field(..., gt=0)
    item_type: Optional[str] = Field(None, description='"category:kind"')
    table_ref: Optional[str] = None
    quantity: tuple[int, int] = (1, 1)
    rarity: Optional[str] = Field(None, description="rarity_override 등급 이름")


class LootTableDoc(_Document):
    entries: list[LootEntryDoc] = []
    guaranteed_drops: int = Field(1, ge=0)
    max_drops: int = Field(1, ge=0)


class AffixDoc(_Document):
    name: str = Field(..., min_length=1)
    stat_bonuses: dict[str, int] = {}
    value_bonus: int = 0
    weight: int = Field(10, gt=0)


class AffixTableDoc(_Document):
    prefixes: list[AffixDoc] = []
    suffixes: list[AffixDoc] = []


class NameAffixDoc(_Document):
    name: str = Field(..., min_length=1)
    applies_to: list[ItemCategory] = []
    weight: int = Field(10, gt=0)


class NamePoolsDoc(_Document):
    """없는 필드는 기본 이름 풀 값 유지"""

    base_names: Optional[dict[str, list[str]]] = None
    prefixes: Optional[list[NameAffixDoc]] = None
    suffixes: Optional[list[NameAffixDoc]] = None
    plain_qualities: Optional[list[str]] = None
    fine_qualities: Optional[list[str]] = None
    epithets: Optional[list[str]] = None
    legendary_names: Optional[dict[str, list[NonEmptyName]]] = None
    artifact_names: Optional[list[NonEmptyName]] = None


class RarityDoc(_Document):
    """등급 이름("Rare") 키. 없는 필드는 기본값 유지"""

    weights: Optional[dict[str, int]] = None
    value_multipliers: Optional[dict[str, float]] = None
    affix_ranges: Optional[dict[str, tuple[int, int]]] = None


class DepthScalingDoc(_Document):
    stat_scaling: float = Field(0.1, ge=0)
    value_scaling: float = Field(0.05, ge=0)
    rarity_scaling: float = Field(1.0, ge=0)
    max_rarity_bonus: int = Field(50, ge=0)


class LootDocument(_Document):
    """루트 데이터 파일 최상위 구조"""

    tables: Optional[dict[str, LootTableDoc]] = None
    monster_tables: Optional[dict[str, str]] = None
    depth_tables: Optional[dict[int, str]] = None
    special_tables: Optional[dict[str, str]] = None
    container_tables: Optional[dict[str, str]] = None
    affixes: Optional[dict[str, AffixTableDoc]] = None
    names: Optional[NamePoolsDoc] = None
    rarity: Optional[RarityDoc] = None
    depth_scaling: Optional[DepthScalingDoc] = None


# === 도메인 묶음 ===


@dataclass(frozen=True)
class LootData:
    """생성기/테이블 관리자가 소비하는 완성 데이터 묶음"""

    registry: TableRegistry
    affixes: AffixRegistry
    name_pools: NamePools
    rarity_weights: RarityWeights
    depth_scaling: DepthScaling
    rarity_rules: RarityRules


def default_loot_data() -> LootData:
    """내장 기본 데이터"""
    return LootData(
        registry=TableRegistry(
            tables=default_tables(),
            monster_tables=default_monster_tables(),
            depth_tables=default_depth_tables(),
            special_tables=default_special_tables(),
        ),
        affixes=default_affixes(),
        name_pools=default_name_pools(),
        rarity_weights=RarityWeights(),
        depth_scaling=DepthScaling(),
        rarity_rules=RarityRules(),
    )


# === 문서 → 도메인 ===


def _rarity_keyed(raw: dict, what: str) -> dict[ItemRarity, object]:
    result = {}
    for key, value in raw.items():
        try:
            result[ItemRarity.parse(key)] = value
        except ValueError as e:
            raise ConfigError(f"{what}: {e}") from e
    return result


def _entry_from_doc(table_name: str, doc: LootEntryDoc) -> LootEntry:
    try:
        return LootEntry(
            weight=doc.weight,
            item_type=ItemType.parse(doc.item_type) if doc.item_type else None,
            table_ref=doc.table_ref,
            quantity_range=tuple(doc.quantity),
            rarity_override=ItemRarity.parse(doc.rarity) if doc.rarity else None,
        )
    except ValueError as e:
        raise ConfigError(f"Invalid entry in loot table {table_name!r}: {e}") from e


def _table_from_doc(name: str, doc: LootTableDoc) -> LootTable:
    entries = tuple(_entry_from_doc(name, e) for e in doc.entries)
    try:
        return LootTable(
            entries=entries,
            guaranteed_drops=doc.guaranteed_drops,
            max_drops=doc.max_drops,
        )
    except ValueError as e:
        raise ConfigError(f"Invalid loot table {name!r}: {e}") from e


def _affix_table_from_doc(key: str, doc: AffixTableDoc) -> AffixTable:
    prefixes = tuple(
        Affix(a.name, AffixType.PREFIX, dict(a.stat_bonuses), a.value_bonus, a.weight)
        for a in doc.prefixes
    )
    suffixes = tuple(
        Affix(a.name, AffixType.SUFFIX, dict(a.stat_bonuses), a.value_bonus, a.weight)
        for a in doc.suffixes
    )
    if not prefixes and not suffixes:
        logger.warning("Affix table %s is empty", key)
    return AffixTable(prefixes=prefixes, suffixes=suffixes)


def _name_affixes(docs: list[NameAffixDoc]) -> tuple[NameAffix, ...]:
    return tuple(NameAffix(d.name, tuple(d.applies_to), d.weight) for d in docs)


def _pools_from_doc(doc: NamePoolsDoc, base: NamePools) -> NamePools:
    def keyed(raw: Optional[dict[str, list[str]]], fallback: dict[str, tuple[str, ...]]):
        if raw is None:
            return fallback
        return {key: tuple(names) for key, names in raw.items()}

    def listed(raw: Optional[list[str]], fallback: tuple[str, ...]) -> tuple[str, ...]:
        return fallback if raw is None else tuple(raw)

    return NamePools(
        base_names=keyed(doc.base_names, base.base_names),
        prefixes=base.prefixes if doc.prefixes is None else _name_affixes(doc.prefixes),
        suffixes=base.suffixes if doc.suffixes is None else _name_affixes(doc.suffixes),
        plain_qualities=listed(doc.plain_qualities, base.plain_qualities),
        fine_qualities=listed(doc.fine_qualities, base.fine_qualities),
        epithets=listed(doc.epithets, base.epithets),
        legendary_names=keyed(doc.legendary_names, base.legendary_names),
        artifact_names=listed(doc.artifact_names, base.artifact_names),
    )


def _rarity_from_doc(
    doc: RarityDoc, weights: RarityWeights, rules: RarityRules
) -> tuple[RarityWeights, RarityRules]:
    try:
        if doc.weights is not None:
            weights = RarityWeights(_rarity_keyed(doc.weights, "rarity.weights"))
        if doc.value_multipliers is not None or doc.affix_ranges is not None:
            rules = RarityRules(
                value_multipliers=(
                    _rarity_keyed(doc.value_multipliers, "rarity.value_multipliers")
                    if doc.value_multipliers is not None
                    else rules.value_multipliers
                ),
                affix_ranges=(
                    {
                        r: tuple(v)
                        for r, v in _rarity_keyed(doc.affix_ranges, "rarity.affix_ranges").items()
                    }
                    if doc.affix_ranges is not None
                    else rules.affix_ranges
                ),
            )
    except ValueError as e:
        raise ConfigError(f"Invalid rarity section: {e}") from e
    return weights, rules


def from_document(doc: LootDocument, base: Optional[LootData] = None) -> LootData:
    """문서 → LootData. 없는 섹션은 base(기본: 내장 데이터)에서 가져온다."""
    base = base or default_loot_data()
    registry = base.registry

    tables = registry.tables
    if doc.tables is not None:
        tables = {name: _table_from_doc(name, t) for name, t in doc.tables.items()}

    affixes = base.affixes
    if doc.affixes is not None:
        affixes = AffixRegistry(
            {key: _affix_table_from_doc(key, t) for key, t in doc.affixes.items()}
        )

    name_pools = base.name_pools
    if doc.names is not None:
        name_pools = _pools_from_doc(doc.names, base.name_pools)

    rarity_weights, rarity_rules = base.rarity_weights, base.rarity_rules
    if doc.rarity is not None:
        rarity_weights, rarity_rules = _rarity_from_doc(doc.rarity, rarity_weights, rarity_rules)

    depth_scaling = base.depth_scaling
    if doc.depth_scaling is not None:
        depth_scaling = DepthScaling(**doc.depth_scaling.model_dump())

    return LootData(
        registry=TableRegistry(
            tables=tables,
            monster_tables=_or(doc.monster_tables, registry.monster_tables),
            depth_tables=_or(doc.depth_tables, registry.depth_tables),
            special_tables=_or(doc.special_tables, registry.special_tables),
            container_tables=_or(doc.container_tables, registry.container_tables),
        ),
        affixes=affixes,
        name_pools=name_pools,
        rarity_weights=rarity_weights,
        depth_scaling=depth_scaling,
        rarity_rules=rarity_rules,
    )


def _or(value: Optional[dict], fallback: dict) -> dict:
    return dict(fallback) if value is None else dict(value)


# === 도메인 → 문서 ===


def _entry_to_doc(entry: LootEntry) -> LootEntryDoc:
    return LootEntryDoc(
        weight=entry.weight,
        item_type=entry.item_type.key if entry.item_type else None,
        table_ref=entry.table_ref,
        quantity=entry.quantity_range,
        rarity=entry.rarity_override.label if entry.rarity_override is not None else None,
    )


def _affix_to_doc(affix: Affix) -> AffixDoc:
    return AffixDoc(
        name=affix.name,
        stat_bonuses=dict(affix.stat_bonuses),
        value_bonus=affix.value_bonus,
        weight=affix.weight,
    )


def _name_affix_to_doc(affix: NameAffix) -> NameAffixDoc:
    return NameAffixDoc(name=affix.name, applies_to=list(affix.applies_to), weight=affix.weight)


def to_document(data: LootData) -> LootDocument:
    registry = data.registry
    pools = data.name_pools
    rules = data.rarity_rules
    return LootDocument(
        tables={
            name: LootTableDoc(
                entries=[_entry_to_doc(e) for e in table.entries],
                guaranteed_drops=table.guaranteed_drops,
                max_drops=table.max_drops,
            )
            for name, table in registry.tables.items()
        },
        monster_tables=dict(registry.monster_tables),
        depth_tables=dict(registry.depth_tables),
        special_tables=dict(registry.special_tables),
        container_tables=dict(registry.container_tables),
        affixes={
            key: AffixTableDoc(
                prefixes=[_affix_to_doc(a) for a in table.prefixes],
                suffixes=[_affix_to_doc(a) for a in table.suffixes],
            )
            for key, table in data.affixes.items()
        },
        names=NamePoolsDoc(
            base_names={k: list(v) for k, v in pools.base_names.items()},
            prefixes=[_name_affix_to_doc(a) for a in pools.prefixes],
            suffixes=[_name_affix_to_doc(a) for a in pools.suffixes],
            plain_qualities=list(pools.plain_qualities),
            fine_qualities=list(pools.fine_qualities),
            epithets=list(pools.epithets),
            legendary_names={k: list(v) for k, v in pools.legendary_names.items()},
            artifact_names=list(pools.artifact_names),
        ),
        rarity=RarityDoc(
            weights={r.label: w for r, w in data.rarity_weights.base_weights.items()},
            value_multipliers={r.label: m for r, m in rules.value_multipliers.items()},
            affix_ranges={r.label: span for r, span in rules.affix_ranges.items()},
        ),
        depth_scaling=DepthScalingDoc(
            stat_scaling=data.depth_scaling.stat_scaling,
            value_scaling=data.depth_scaling.value_scaling,
            rarity_scaling=data.depth_scaling.rarity_scaling,
            max_rarity_bonus=data.depth_scaling.max_rarity_bonus,
        ),
    )


# === 파일 I/O ===


def parse_loot_data(raw: Union[str, bytes, dict], base: Optional[LootData] = None) -> LootData:
    """JSON 텍스트 또는 dict → LootData. 형식 오류는 ConfigError."""
    try:
        if isinstance(raw, dict):
            doc = LootDocument.model_validate(raw)
        else:
            doc = LootDocument.model_validate_json(raw)
    except ValidationError as e:
        first = e.errors()[0]
        location = ".".join(str(part) for part in first["loc"])
        raise ConfigError(
            f"Invalid loot document at {location or '<root>'}: {first['msg']}"
        ) from e
    return from_document(doc, base)


def load_loot_data(path: PathLike, base: Optional[LootData] = None) -> LootData:
    """파일에서 로드. 읽기/형식 오류는 경로를 포함한 ConfigError."""
    path = Path(path)
    try:
        text = path.read_text(encoding="utf-8")
    except OSError as e:
        raise ConfigError(f"Cannot read loot data {path}: {e}") from e
    except UnicodeDecodeError as e:
        raise ConfigError(f"Cannot decode loot data {path}: {e}") from e
    try:
        raw = json.loads(text)
    except json.JSONDecodeError as e:
        raise ConfigError(f"Malformed JSON in {path}: {e}") from e
    if not isinstance(raw, dict):
        raise ConfigError(f"{path}: top-level value must be an object")
    try:
        data = parse_loot_data(raw, base)
    except ConfigError as e:
        raise ConfigError(f"{path}: {e}") from e
    logger.info(
        "Loaded loot data from %s (%d tables, %d affix tables)",
        path,
        len(data.registry.tables),
        data.affixes.count(),
    )
    return data


def dump_loot_data(data: LootData, path: PathLike) -> None:
    """전체 문서를 JSON 으로 저장"""
    path = Path(path)
    doc = to_document(data)
    path.write_text(
        json.dumps(doc.model_dump(mode="json"), ensure_ascii=False, indent=2),
        encoding="utf-8",
    )
    logger.info("Wrote loot data to %s", path)
