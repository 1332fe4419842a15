"""Pocket phase: blob-shaped branches grown from spine tiles."""
from __future__ import annotations

import logging
import random
from typing import Any, Dict, List, NamedTuple, Optional, Sequence, Set

from .hexcoord import DIRECTION_COUNT, HexCoord
from .profile import GenerationProfile
from .sampling import pick_unique_index
from .tiles import TileKind
from .walkable import WalkableMap

logger = logging.getLogger(__name__)

MAX_ADDS_PER_ITERATION = 3
FRONTIER_CAP_FACTOR = 3


class BlobResult(NamedTuple):
    seed: HexCoord
    budget: int
    grown: int
    # 'budget' when complete, else 'frontier' or 'guard'
    stop_reason: str


def eligible_seed_range(spine_length: int, start_padding: int, end_padding: int):
    """Return (lo, hi) spine indices eligible as pocket seeds, or None when empty."""
    lo = max(0, start_padding)
    hi = spine_length - max(0, end_padding)
    if hi <= lo:
        return None
    return lo, hi


def grow_pocket_blob(rng: random.Random, seed: HexCoord, budget: int, walkable: WalkableMap) -> BlobResult:
    if budget <= 0:
        return BlobResult(seed, budget, 0, "budget")
    frontier: List[HexCoord] = [seed]
    grown = 0
    guard = budget * 20 + 20
    while grown < budget and frontier and guard > 0:
        guard -= 1
        origin = frontier[rng.randrange(len(frontier))]
        attempts = 1 + rng.randrange(MAX_ADDS_PER_ITERATION)
        for _ in range(attempts):
            if grown >= budget:
                break
            candidate = origin.neighbor(rng.randrange(DIRECTION_COUNT))
            if not walkable.add(candidate, TileKind.POCKET):
                continue
            frontier.append(candidate)
            grown += 1
        if len(frontier) > budget * FRONTIER_CAP_FACTOR:
            frontier.pop(rng.randrange(len(frontier)))

    if grown >= budget:
        reason = "budget"
    elif not frontier:
        reason = "frontier"
    else:
        reason = "guard"
    return BlobResult(seed, budget, grown, reason)


def generate_pockets(
    rng: random.Random,
    profile: GenerationProfile,
    spine: Sequence[HexCoord],
    walkable: WalkableMap,
    metrics: Optional[Dict[str, Any]] = None,
) -> List[BlobResult]:
    """Grow `min(pocket_seed_count, range size)` blobs from distinct spine indices.

    Partial blobs are kept; each shortfall is logged and counted in metrics.
    """
    if profile.pocket_seed_count <= 0 or not spine:
        return []
    span = eligible_seed_range(len(spine), profile.pocket_start_padding, profile.pocket_end_padding)
    if span is None:
        logger.debug("Pocket seed range empty spine_len=%s", len(spine))
        return []
    lo, hi = span
    seed_count = min(profile.pocket_seed_count, hi - lo)
    used: Set[int] = set()
    blobs: List[BlobResult] = []
    for _ in range(seed_count):
        index = pick_unique_index(rng, lo, hi, used)
        budget = rng.randint(profile.pocket_min_size, profile.pocket_max_size)
        blob = grow_pocket_blob(rng, spine[index], budget, walkable)
        blobs.append(blob)
        if blob.grown < blob.budget:
            logger.info(
                "Pocket blob short seed=%s index=%s grown=%s budget=%s reason=%s",
                blob.seed, index, blob.grown, blob.budget, blob.stop_reason,
            )
    if metrics is not None:
        metrics["pocket_blobs"] = len(blobs)
        metrics["pocket_tiles"] = sum(b.grown for b in blobs)
        metrics["pocket_shortfall"] = sum(b.budget - b.grown for b in blobs)
    return blobs


__all__ = ["BlobResult", "eligible_seed_range", "grow_pocket_blob", "generate_pockets"]
