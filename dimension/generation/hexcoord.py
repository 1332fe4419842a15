"""Axial hex coordinates: neighbours, distance and small range helpers."""
from __future__ import annotations
from typing import Iterator, List, NamedTuple


class HexCoord(NamedTuple):
    """Axial hex coordinate (q, r). Cube s = -q-r."""
    q: int
    r: int

    @property
    def s(self) -> int:
        return -self.q - self.r

    def neighbor(self, direction: int) -> "HexCoord":
        dq, dr = NEIGHBOR_DIRS[direction]
        return HexCoord(self.q + dq, self.r + dr)

    def distance_to(self, other: "HexCoord") -> int:
        return hex_distance(self, other)

    def to_list(self) -> List[int]:
        return [self.q, self.r]

    def __str__(self) -> str:
        return f"({self.q},{self.r})"


# Cyclic order: d+1 and d+5 (mod 6) are the angular neighbours of d.
NEIGHBOR_DIRS = (
    HexCoord(+1, 0),
    HexCoord(+1, -1),
    HexCoord(0, -1),
    HexCoord(-1, 0),
    HexCoord(-1, +1),
    HexCoord(0, +1),
)
DIRECTION_COUNT = len(NEIGHBOR_DIRS)
ORIGIN = HexCoord(0, 0)


def neighbor(coord: HexCoord, direction: int) -> HexCoord:
    return coord.neighbor(direction % DIRECTION_COUNT)


def neighbors(coord: HexCoord) -> List[HexCoord]:
    return [coord.neighbor(d) for d in range(DIRECTION_COUNT)]


def hex_distance(a: HexCoord, b: HexCoord) -> int:
    dq = a[0] - b[0]
    dr = a[1] - b[1]
    return (abs(dq) + abs(dr) + abs(dq + dr)) // 2


def left_of(direction: int) -> int:
    return (direction + 5) % DIRECTION_COUNT


def right_of(direction: int) -> int:
    return (direction + 1) % DIRECTION_COUNT


def step_repeated(coord: HexCoord, direction: int, count: int) -> HexCoord:
    """Walk `count` steps from `coord` along one direction."""
    dq, dr = NEIGHBOR_DIRS[direction]
    return HexCoord(coord.q + dq * count, coord.r + dr * count)


def hex_range(center: HexCoord, radius: int) -> Iterator[HexCoord]:
    """Yield every coordinate within `radius` of `center` (center included)."""
    if radius < 0:
        return
    for dq in range(-radius, radius + 1):
        for dr in range(max(-radius, -dq - radius), min(radius, -dq + radius) + 1):
            yield HexCoord(center.q + dq, center.r + dr)


__all__ = [
    "HexCoord",
    "NEIGHBOR_DIRS",
    "DIRECTION_COUNT",
    "ORIGIN",
    "neighbor",
    "neighbors",
    "hex_distance",
    "left_of",
    "right_of",
    "step_repeated",
    "hex_range",
]
