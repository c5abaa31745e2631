"""난수 소스 + 가중치 추첨 공용 유틸

모든 추첨은 호출자가 넘긴 RandomSource 하나로만 이루어진다.
전역 random 모듈 상태는 사용하지 않는다.
"""

from __future__ import annotations

import math
import random
from bisect import bisect_left
from itertools import accumulate
from typing import Optional, Protocol, Sequence, TypeVar

T = TypeVar("T")


class RandomSource(Protocol):
    """주입형 난수 소스. random.Random 이 그대로 만족한다."""

    def randint(self, a: int, b: int) -> int: ...

    def random(self) -> float: ...


def make_rng(seed: Optional[int] = None) -> random.Random:
    """시드 고정 random.Random 생성. seed=None 이면 settings.WORLD_SEED 사용."""
    if seed is None:
        from src.config import settings

        seed = settings.WORLD_SEED
    return random.Random(seed)


def uniform_int(rng: RandomSource, low: int, high: int) -> int:
    """[low, high] 균등 정수. low == high 이면 난수를 소비하지 않는다."""
    if high < low:
        raise ValueError(f"Empty range: [{low}, {high}]")
    if low == high:
        return low
    return rng.randint(low, high)


def weighted_choice(rng: RandomSource, items: Sequence[T], weights: Sequence[int]) -> T:
    """누적 가중치 + 이진 탐색 단일 추첨.

    가중치 0 항목은 절대 선택되지 않는다. 음수 가중치나 총합 0은 프로그래밍 오류.
    """
    if len(items) != len(weights):
        raise ValueError("items and weights must have the same length")
    if not items:
        raise ValueError("Cannot choose from an empty sequence")
    if any(w < 0 for w in weights):
        raise ValueError(f"Negative weight in {list(weights)}")

    cumulative = list(accumulate(weights))
    total = cumulative[-1]
    if total <= 0:
        raise ValueError("Total weight must be positive")

    roll = rng.randint(1, total)
    return items[bisect_left(cumulative, roll)]


def weighted_sample(
    rng: RandomSource, items: Sequence[T], weights: Sequence[int], count: int
) -> list[T]:
    """비복원 가중치 추첨. count 가 후보 수보다 크면 후보 전체를 추첨 순서대로 반환."""
    pool = list(items)
    pool_weights = list(weights)
    picked: list[T] = []
    while pool and len(picked) < count:
        choice = weighted_choice(rng, range(len(pool)), pool_weights)
        picked.append(pool.pop(choice))
        pool_weights.pop(choice)
    return picked


def round_half_up(value: float) -> int:
    """0.5 올림 반올림 (음수 입력은 0으로 고정)."""
    if value <= 0:
        return 0
    # 10 * 1.1 = 11.000000000000002 같은 부동소수 잡음 제거
    return int(math.floor(round(value, 9) + 0.5))
