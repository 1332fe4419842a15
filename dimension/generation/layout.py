"""Layout: the immutable result of one generation run."""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, NamedTuple, Optional, Set, Tuple

from .hexcoord import HexCoord, hex_range
from .tiles import TileKind


class TileData(NamedTuple):
    coord: HexCoord
    biome_group: str
    has_prop: bool
    prop_id: Optional[str]
    kind: TileKind

    def to_dict(self) -> Dict[str, Any]:
        return {
            'q': self.coord.q,
            'r': self.coord.r,
            'biome': self.biome_group,
            'has_prop': self.has_prop,
            'prop_id': self.prop_id,
            'kind': self.kind.value,
        }


@dataclass(frozen=True)
class Layout:
    seed_used: int
    start_coord: HexCoord
    boss_coord: HexCoord
    boss_reachable: bool
    spine_coords: Tuple[HexCoord, ...]
    pocket_coords: Tuple[HexCoord, ...]
    tiles: Tuple[TileData, ...]
    boss_arena_radius: int = 7
    # Timing and counters; never part of equality or the default serialization.
    metrics: Dict[str, Any] = field(default_factory=dict, compare=False, repr=False)

    @property
    def walkable_count(self) -> int:
        return len(self.tiles)

    def walkable_set(self) -> Set[HexCoord]:
        return {t.coord for t in self.tiles}

    def tile_at(self, coord: HexCoord) -> Optional[TileData]:
        index = self._tile_index()
        return index.get(coord)

    def _tile_index(self) -> Dict[HexCoord, TileData]:
        cached = self.__dict__.get('_index')
        if cached is None:
            cached = {t.coord: t for t in self.tiles}
            object.__setattr__(self, '_index', cached)
        return cached

    def boss_arena(self, radius: Optional[int] = None) -> List[HexCoord]:
        """Walkable coordinates within `radius` of the boss, sorted by (q, r)."""
        radius = self.boss_arena_radius if radius is None else radius
        index = self._tile_index()
        return sorted(c for c in hex_range(self.boss_coord, radius) if c in index)

    def to_dict(self, include_metrics: bool = False) -> Dict[str, Any]:
        out: Dict[str, Any] = {
            'seed': self.seed_used,
            'start': self.start_coord.to_list(),
            'boss': self.boss_coord.to_list(),
            'boss_reachable': self.boss_reachable,
            'walkable_count': self.walkable_count,
            'spine': [c.to_list() for c in self.spine_coords],
            'pockets': [c.to_list() for c in self.pocket_coords],
            'tiles': [t.to_dict() for t in self.tiles],
        }
        if include_metrics:
            out['metrics'] = dict(self.metrics)
        return out

    def summary(self) -> Dict[str, Any]:
        return {
            'seed': self.seed_used,
            'tiles': self.walkable_count,
            'spine': len(self.spine_coords),
            'pockets': len(self.pocket_coords),
            'boss_reachable': self.boss_reachable,
        }


__all__ = ["TileData", "Layout"]
