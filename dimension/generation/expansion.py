"""Filler phase: unbiased percolation growth until the walkable target is reached."""
from __future__ import annotations

import logging
import random

from .hexcoord import DIRECTION_COUNT
from .tiles import TileKind
from .walkable import WalkableMap

logger = logging.getLogger(__name__)


def expansion_guard(target: int) -> int:
    return max(2048, target * 25)


def expand_to_target(rng: random.Random, target: int, walkable: WalkableMap) -> int:
    """Add filler tiles next to random walkable tiles; returns how many were added.

    Stopping short (guard exhausted) is not an error, the layout is just smaller.
    """
    if target <= len(walkable) or not len(walkable):
        return 0
    added = 0
    guard = expansion_guard(target)
    while len(walkable) < target and guard > 0:
        guard -= 1
        origin = walkable.random_coord(rng)
        if walkable.add(origin.neighbor(rng.randrange(DIRECTION_COUNT)), TileKind.FILLER):
            added += 1
    if len(walkable) < target:
        logger.debug("Filler expansion stopped short tiles=%s target=%s", len(walkable), target)
    return added


__all__ = ["expand_to_target", "expansion_guard"]
