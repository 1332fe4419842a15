"""Connectivity: start->boss reachability and the greedy force-connect backstop."""
from __future__ import annotations

from collections import deque
from typing import Container, NamedTuple, Set

from .hexcoord import DIRECTION_COUNT, HexCoord
from .tiles import TileKind
from .walkable import WalkableMap

FORCE_CONNECT_GUARD = 8192


class ForceConnectResult(NamedTuple):
    reached: bool
    steps: int
    carved: int


def reachable_from(start: HexCoord, walkable: Container[HexCoord]) -> Set[HexCoord]:
    """Flood fill over hex adjacency; the set of tiles reachable from start."""
    if start not in walkable:
        return set()
    visited = {start}
    q = deque([start])
    while q:
        current = q.popleft()
        for d in range(DIRECTION_COUNT):
            nxt = current.neighbor(d)
            if nxt in walkable and nxt not in visited:
                visited.add(nxt)
                q.append(nxt)
    return visited


def is_reachable(start: HexCoord, boss: HexCoord, walkable: Container[HexCoord]) -> bool:
    """BFS from start, stopping as soon as boss is dequeued."""
    if start not in walkable or boss not in walkable:
        return False
    visited = {start}
    q = deque([start])
    while q:
        current = q.popleft()
        if current == boss:
            return True
        for d in range(DIRECTION_COUNT):
            nxt = current.neighbor(d)
            if nxt in walkable and nxt not in visited:
                visited.add(nxt)
                q.append(nxt)
    return False


def force_connect(
    start: HexCoord,
    boss: HexCoord,
    walkable: WalkableMap,
    guard: int = FORCE_CONNECT_GUARD,
) -> ForceConnectResult:
    """Carve a greedy corridor from start toward boss, one closest neighbour per step.

    The corridor may touch or double back along existing tiles; only the outcome
    (boss reached before the guard expires) is reported.
    """
    current = start
    steps = 0
    carved = 0
    while current != boss and guard > 0:
        guard -= 1
        best = current
        best_dist = current.distance_to(boss)
        for d in range(DIRECTION_COUNT):
            nxt = current.neighbor(d)
            dist = nxt.distance_to(boss)
            if dist < best_dist:
                best_dist = dist
                best = nxt
        if best == current:
            break
        current = best
        steps += 1
        if walkable.add(current, TileKind.FILLER):
            carved += 1
    return ForceConnectResult(current == boss, steps, carved)


__all__ = ["ForceConnectResult", "FORCE_CONNECT_GUARD", "reachable_from", "is_reachable", "force_connect"]
