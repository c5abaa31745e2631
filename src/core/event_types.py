"""이벤트 유형 상수

루트 생성 서브시스템이 발행하는 진단/결과 이벤트.
데이터는 식별자(테이블 이름, 타입 키, 수량)만 담는다.
"""


class EventTypes:
    """이벤트 유형 문자열 상수"""

    # === 진단 (복구 가능한 생성 시점 오류) ===
    LOOT_TABLE_FALLBACK = "loot_table_fallback"
    LOOT_TABLE_CYCLE = "loot_table_cycle"
    AFFIX_POOL_EMPTY = "affix_pool_empty"

    # === 데이터 ===
    LOOT_DATA_RELOADED = "loot_data_reloaded"

    # === 결과 (service → 게임 루프) ===
    LOOT_DROPPED = "loot_dropped"
    ITEM_CREATED = "item_created"
