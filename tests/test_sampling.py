import random

import pytest

from dimension.generation.sampling import pick_unique_index, pick_weighted


class FixedRandom:
    """Stand-in RNG returning scripted values."""

    def __init__(self, value=0.0, index=None):
        self.value = value
        self.index = index
        self.calls = 0

    def random(self):
        return self.value

    def randrange(self, lo, hi=None):
        self.calls += 1
        return lo if self.index is None else self.index


def test_pick_weighted_first_crossing():
    # roll = 0.5 * 4 = 2.0 -> a leaves 1.0, b leaves 0.0 -> b
    assert pick_weighted(FixedRandom(0.5), ["a", "b", "c"], [1, 1, 2]) == "b"
    assert pick_weighted(FixedRandom(0.0), ["a", "b", "c"], [1, 1, 2]) == "a"
    assert pick_weighted(FixedRandom(0.999), ["a", "b", "c"], [1, 1, 2]) == "c"


def test_pick_weighted_zero_weights_still_selectable():
    rng = random.Random(5)
    picks = {pick_weighted(rng, ["x", "y"], [0.0, 0.0]) for _ in range(200)}
    assert picks == {"x", "y"}


def test_pick_weighted_requires_candidates():
    with pytest.raises(ValueError):
        pick_weighted(random.Random(1), [], [])


def test_pick_weighted_respects_weights_roughly():
    rng = random.Random(11)
    counts = {"heavy": 0, "light": 0}
    for _ in range(2000):
        counts[pick_weighted(rng, ["heavy", "light"], [9.0, 1.0])] += 1
    assert counts["heavy"] > counts["light"] * 4


def test_pick_unique_index_distinct():
    rng = random.Random(3)
    used = set()
    picks = [pick_unique_index(rng, 4, 14, used) for _ in range(10)]
    assert sorted(picks) == list(range(4, 14))


def test_pick_unique_index_falls_back_to_scan():
    rng = FixedRandom(index=0)
    used = {0, 1}
    assert pick_unique_index(rng, 0, 5, used, retries=24) == 2
    assert rng.calls == 24
    assert used == {0, 1, 2}


def test_pick_unique_index_single_slot():
    used = set()
    assert pick_unique_index(random.Random(1), 7, 8, used) == 7
    assert used == {7}
