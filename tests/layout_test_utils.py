from collections import deque

# Axial offsets duplicated here so helpers stay independent of the code under test.
HEX_DIRS = ((1, 0), (1, -1), (0, -1), (-1, 0), (-1, 1), (0, 1))


def hex_dist(a, b):
    dq = a[0] - b[0]
    dr = a[1] - b[1]
    return (abs(dq) + abs(dr) + abs(dq + dr)) // 2


def bfs_reachable(coords, start):
    """Return set of (q,r) tiles reachable from start over the given coords."""
    walk = {(c[0], c[1]) for c in coords}
    start = (start[0], start[1])
    if start not in walk:
        return set()
    q = deque([start])
    vis = {start}
    while q:
        cq, cr = q.popleft()
        for dq, dr in HEX_DIRS:
            n = (cq + dq, cr + dr)
            if n in walk and n not in vis:
                vis.add(n)
                q.append(n)
    return vis


def layout_coords(layout):
    return [(t.coord.q, t.coord.r) for t in layout.tiles]


def tiles_of_kind(layout, kind):
    return [t.coord for t in layout.tiles if t.kind is kind]
