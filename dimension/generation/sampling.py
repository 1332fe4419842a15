"""Random selection helpers shared by the generation phases.

Both helpers take the attempt's own ``random.Random`` so a phase never touches
the module-level RNG (attempts must stay independent and reproducible).
"""
from __future__ import annotations

import random
from typing import MutableSet, Sequence, TypeVar

T = TypeVar("T")

MIN_PICK_WEIGHT = 0.0001
UNIQUE_PICK_RETRIES = 24


def pick_weighted(rng: random.Random, candidates: Sequence[T], weights: Sequence[float]) -> T:
    """Roulette pick: first candidate whose cumulative weight crosses the roll wins."""
    if not candidates:
        raise ValueError("pick_weighted needs at least one candidate")
    total = 0.0
    for w in weights:
        total += max(MIN_PICK_WEIGHT, w)
    roll = rng.random() * total
    for candidate, w in zip(candidates, weights):
        roll -= max(MIN_PICK_WEIGHT, w)
        if roll <= 0.0:
            return candidate
    # float drift
    return candidates[-1]


def pick_unique_index(
    rng: random.Random,
    lo: int,
    hi: int,
    used: MutableSet[int],
    retries: int = UNIQUE_PICK_RETRIES,
) -> int:
    """Pick an index in [lo, hi) not yet in `used` and record it.

    Random draws first (bounded by `retries`), then a linear scan so the result
    stays distinct without unbounded retrying. Returns `lo` when the range is
    exhausted.
    """
    if hi - lo <= 1:
        used.add(lo)
        return lo
    for _ in range(retries):
        candidate = rng.randrange(lo, hi)
        if candidate not in used:
            used.add(candidate)
            return candidate
    for candidate in range(lo, hi):
        if candidate not in used:
            used.add(candidate)
            return candidate
    return lo


__all__ = ["pick_weighted", "pick_unique_index", "MIN_PICK_WEIGHT", "UNIQUE_PICK_RETRIES"]
