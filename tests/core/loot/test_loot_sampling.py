"""가중치 추첨 / 반올림 유틸 테스트"""

import random
from collections import Counter

import pytest

from src.core.loot.sampling import (
    make_rng,
    round_half_up,
    uniform_int,
    weighted_choice,
    weighted_sample,
)


class _CountingRandom(random.Random):
    def __init__(self, seed: int = 0) -> None:
        super().__init__(seed)
        self.calls = 0

    def randint(self, a: int, b: int) -> int:
        self.calls += 1
        return super().randint(a, b)


class TestWeightedChoice:
    def test_zero_weight_never_selected(self):
        rng = random.Random(7)
        picks = {weighted_choice(rng, ["a", "b", "c"], [0, 5, 0]) for _ in range(500)}
        assert picks == {"b"}

    def test_distribution_follows_weights(self):
        rng = random.Random(42)
        counts = Counter(weighted_choice(rng, ["x", "y"], [3, 1]) for _ in range(8000))
        assert counts["x"] / 8000 == pytest.approx(0.75, abs=0.02)

    def test_same_seed_same_sequence(self):
        first, second = random.Random(5), random.Random(5)
        a = [weighted_choice(first, "abcd", [1, 2, 3, 4]) for _ in range(50)]
        b = [weighted_choice(second, "abcd", [1, 2, 3, 4]) for _ in range(50)]
        assert a == b

    def test_empty_sequence_rejected(self):
        with pytest.raises(ValueError):
            weighted_choice(random.Random(), [], [])

    def test_negative_weight_rejected(self):
        with pytest.raises(ValueError):
            weighted_choice(random.Random(), ["a", "b"], [2, -1])

    def test_all_zero_rejected(self):
        with pytest.raises(ValueError):
            weighted_choice(random.Random(), ["a", "b"], [0, 0])

    def test_length_mismatch_rejected(self):
        with pytest.raises(ValueError):
            weighted_choice(random.Random(), ["a", "b"], [1])


class TestWeightedSample:
    def test_no_duplicates(self):
        rng = random.Random(3)
        for _ in range(200):
            picked = weighted_sample(rng, list("abcdef"), [1, 2, 3, 4, 5, 6], 4)
            assert len(picked) == len(set(picked)) == 4

    def test_count_larger_than_pool_returns_all(self):
        picked = weighted_sample(random.Random(1), ["a", "b"], [1, 1], 5)
        assert sorted(picked) == ["a", "b"]

    def test_zero_count(self):
        assert weighted_sample(random.Random(1), ["a"], [1], 0) == []


class TestUniformInt:
    def test_degenerate_range_consumes_no_draw(self):
        rng = _CountingRandom()
        assert uniform_int(rng, 2, 2) == 2
        assert rng.calls == 0

    def test_inclusive_bounds(self):
        rng = random.Random(9)
        values = {uniform_int(rng, 1, 3) for _ in range(300)}
        assert values == {1, 2, 3}

    def test_inverted_range_rejected(self):
        with pytest.raises(ValueError):
            uniform_int(random.Random(), 3, 1)


class TestRoundHalfUp:
    @pytest.mark.parametrize(
        "value, expected",
        [(10 * 1.1, 11), (2.5, 3), (3.5, 4), (2.4999, 2), (0.5, 1), (-4.2, 0), (0, 0)],
    )
    def test_rounding(self, value, expected):
        assert round_half_up(value) == expected


class TestMakeRng:
    def test_explicit_seed_reproducible(self):
        assert make_rng(99).random() == make_rng(99).random()

    def test_world_seed_used_when_no_seed(self, monkeypatch):
        from src.config import settings

        monkeypatch.setattr(settings, "WORLD_SEED", 2024)
        assert make_rng().random() == random.Random(2024).random()
