"""Spine phase: biased weighted random walk from the start tile toward a virtual boss anchor."""
from __future__ import annotations

import random
from typing import List, NamedTuple

from .hexcoord import DIRECTION_COUNT, ORIGIN, HexCoord, left_of, right_of, step_repeated
from .profile import GenerationProfile
from .sampling import pick_weighted
from .tiles import TileKind
from .walkable import WalkableMap

BASE_STEP_WEIGHT = 0.25
BACKTRACK_PENALTY = 0.30
MIN_STEP_WEIGHT = 0.05


class SpineHeading(NamedTuple):
    start: HexCoord
    anchor: HexCoord
    forward: int
    left: int
    right: int


class SpineResult(NamedTuple):
    path: List[HexCoord]
    heading: SpineHeading
    target_length: int
    extension_steps: int
    boxed_in: bool


def boss_anchor(rng: random.Random, start: HexCoord, forward: int, target_length: int) -> HexCoord:
    """Step `target_length` along forward, then shift sideways by up to max(1, L//5)."""
    anchor = step_repeated(start, forward, target_length)
    lateral_max = max(1, target_length // 5)
    shift = rng.randint(-lateral_max, lateral_max)
    if shift > 0:
        anchor = step_repeated(anchor, right_of(forward), shift)
    elif shift < 0:
        anchor = step_repeated(anchor, left_of(forward), -shift)
    return anchor


def pick_spine_step(
    rng: random.Random,
    current: HexCoord,
    heading: SpineHeading,
    walkable: WalkableMap,
    profile: GenerationProfile,
) -> HexCoord:
    """Choose the next spine tile among non-spine neighbours.

    Returns `current` when every neighbour is already spine (walk is boxed in).
    """
    start, anchor = heading.start, heading.anchor
    current_boss_dist = current.distance_to(anchor)
    current_start_dist = current.distance_to(start)

    coords: List[HexCoord] = []
    weights: List[float] = []
    for direction in range(DIRECTION_COUNT):
        nxt = current.neighbor(direction)
        if walkable.is_kind(nxt, TileKind.SPINE):
            continue
        next_start_dist = nxt.distance_to(start)
        weight = BASE_STEP_WEIGHT
        weight += (current_boss_dist - nxt.distance_to(anchor)) * profile.toward_boss_bias
        weight += (next_start_dist - current_start_dist) * profile.outward_bias
        if direction == heading.forward:
            weight += profile.forward_direction_bonus
        elif direction == heading.left or direction == heading.right:
            weight += profile.side_direction_bonus
        if next_start_dist < current_start_dist - 1:
            weight *= BACKTRACK_PENALTY
        if weight < MIN_STEP_WEIGHT:
            weight = MIN_STEP_WEIGHT
        coords.append(nxt)
        weights.append(weight)

    if not coords:
        return current
    return pick_weighted(rng, coords, weights)


def generate_spine(rng: random.Random, profile: GenerationProfile, walkable: WalkableMap) -> SpineResult:
    start = ORIGIN
    walkable.add(start, TileKind.SPINE)
    path = [start]

    target_length = rng.randint(profile.spine_min_length, profile.spine_max_length)
    forward = rng.randrange(DIRECTION_COUNT)
    heading = SpineHeading(
        start=start,
        anchor=boss_anchor(rng, start, forward, target_length),
        forward=forward,
        left=left_of(forward),
        right=right_of(forward),
    )

    current = start
    boxed_in = False
    for _ in range(target_length):
        nxt = pick_spine_step(rng, current, heading, walkable, profile)
        if nxt == current:
            boxed_in = True
            break
        current = nxt
        walkable.add(current, TileKind.SPINE)
        path.append(current)

    extension_steps = 0
    guard = max(profile.spine_min_length, profile.spine_max_length)
    while not boxed_in and start.distance_to(current) < profile.min_boss_distance and guard > 0:
        guard -= 1
        nxt = pick_spine_step(rng, current, heading, walkable, profile)
        if nxt == current:
            boxed_in = True
            break
        current = nxt
        walkable.add(current, TileKind.SPINE)
        path.append(current)
        extension_steps += 1

    return SpineResult(path, heading, target_length, extension_steps, boxed_in)


__all__ = ["SpineHeading", "SpineResult", "boss_anchor", "pick_spine_step", "generate_spine"]
