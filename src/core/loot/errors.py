"""루트 생성 예외 계층

로드 시점 오류(ConfigError)만 치명적이다.
나머지는 생성 도중 내부에서 잡혀 경고 로그 후 축소 결과로 대체된다.
"""

from __future__ import annotations


class LootError(Exception):
    """루트 생성 서브시스템 기본 예외"""


class ConfigError(LootError):
    """테이블/접사/이름 데이터 파일 형식 오류"""


class UnknownTable(LootError):
    """등록되지 않은 테이블 이름 참조"""

    def __init__(self, table_name: str) -> None:
        super().__init__(f"Unknown loot table: {table_name!r}")
        self.table_name = table_name


class TableCycleDetected(LootError):
    """테이블 참조 재귀가 상한을 초과"""

    def __init__(self, table_name: str, max_depth: int) -> None:
        super().__init__(
            f"Loot table recursion exceeded {max_depth} levels at {table_name!r}"
        )
        self.table_name = table_name
        self.max_depth = max_depth


class InvalidDepth(LootError, ValueError):
    """음수 깊이. 난수 소비 전에 거부된다."""

    def __init__(self, depth: int) -> None:
        super().__init__(f"Depth must be a non-negative integer, got {depth!r}")
        self.depth = depth


class EmptyAffixPool(LootError):
    """희귀도가 접사를 요구하지만 해당 타입에 등록된 접사가 없음"""

    def __init__(self, type_key: str) -> None:
        super().__init__(f"No affixes registered for {type_key!r}")
        self.type_key = type_key
