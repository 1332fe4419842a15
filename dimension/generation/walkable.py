"""Per-attempt walkable map: coordinate -> tile kind, plus insertion order for sampling."""
from __future__ import annotations

import random
from typing import Dict, Iterable, Iterator, List, Optional

from .hexcoord import HexCoord
from .tiles import TileKind


class WalkableMap:
    """Single owner of tile membership during one attempt.

    A coordinate is tagged once, by the phase that first adds it; later adds
    are no-ops. The ordered list backs uniform random sampling.
    """
    __slots__ = ("_kinds", "_order")

    def __init__(self, coords: Optional[Iterable[HexCoord]] = None, kind: TileKind = TileKind.FILLER):
        self._kinds: Dict[HexCoord, TileKind] = {}
        self._order: List[HexCoord] = []
        for c in coords or ():
            self.add(c, kind)

    def add(self, coord: HexCoord, kind: TileKind) -> bool:
        if coord in self._kinds:
            return False
        self._kinds[coord] = kind
        self._order.append(coord)
        return True

    def __contains__(self, coord) -> bool:
        return coord in self._kinds

    def __len__(self) -> int:
        return len(self._order)

    def __iter__(self) -> Iterator[HexCoord]:
        return iter(self._order)

    def kind_of(self, coord: HexCoord) -> Optional[TileKind]:
        return self._kinds.get(coord)

    def is_kind(self, coord: HexCoord, kind: TileKind) -> bool:
        return self._kinds.get(coord) is kind

    @property
    def coords(self) -> List[HexCoord]:
        """Insertion-ordered coordinates (do not mutate)."""
        return self._order

    def random_coord(self, rng: random.Random) -> HexCoord:
        return self._order[rng.randrange(len(self._order))]

    def count(self, kind: TileKind) -> int:
        return sum(1 for k in self._kinds.values() if k is kind)

    def coords_of(self, kind: TileKind) -> List[HexCoord]:
        return [c for c in self._order if self._kinds[c] is kind]


__all__ = ["WalkableMap"]
