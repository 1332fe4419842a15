"""Biome partition: discrete nearest-center (Voronoi) labelling of walkable tiles."""
from __future__ import annotations

import random
from typing import Dict, List, NamedTuple, Sequence, Set

from .hexcoord import HexCoord
from .sampling import pick_unique_index
from .tiles import DEFAULT_BIOME

MAX_BIOME_CENTERS = 256


class BiomeAssignment(NamedTuple):
    labels: Dict[HexCoord, str]
    centers: List[HexCoord]
    center_biomes: List[str]

    def center_for(self, coord: HexCoord) -> HexCoord:
        """Nearest center by hex distance; first center wins ties."""
        return self.centers[nearest_center_index(coord, self.centers)]


def biome_center_count(walkable_count: int, patch_size: int) -> int:
    if walkable_count <= 0:
        return 0
    upper = min(MAX_BIOME_CENTERS, walkable_count)
    return max(1, min(walkable_count // max(1, patch_size), upper))


def nearest_center_index(coord: HexCoord, centers: Sequence[HexCoord]) -> int:
    best_index = 0
    best_dist = None
    for i, center in enumerate(centers):
        dist = coord.distance_to(center)
        if best_dist is None or dist < best_dist:
            best_dist = dist
            best_index = i
    return best_index


def assign_biomes(
    rng: random.Random,
    walkable: Sequence[HexCoord],
    biome_groups: Sequence[str],
    patch_size: int,
) -> BiomeAssignment:
    """Pick distinct patch centers, label each at random, then label every tile by its nearest center.

    `walkable` must be the attempt's insertion-ordered coordinates so center
    sampling is reproducible. Label duplicates across centers are allowed.
    """
    if not walkable:
        return BiomeAssignment({}, [], [])
    pool = list(biome_groups) or [DEFAULT_BIOME]

    count = biome_center_count(len(walkable), patch_size)
    used: Set[int] = set()
    centers: List[HexCoord] = []
    center_biomes: List[str] = []
    for _ in range(count):
        centers.append(walkable[pick_unique_index(rng, 0, len(walkable), used)])
        center_biomes.append(pool[rng.randrange(len(pool))])

    labels = {coord: center_biomes[nearest_center_index(coord, centers)] for coord in walkable}
    return BiomeAssignment(labels, centers, center_biomes)


__all__ = [
    "BiomeAssignment",
    "MAX_BIOME_CENTERS",
    "assign_biomes",
    "biome_center_count",
    "nearest_center_index",
]
