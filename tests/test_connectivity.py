from dimension.generation import TileKind
from dimension.generation.connectivity import force_connect, is_reachable, reachable_from
from dimension.generation.hexcoord import ORIGIN, HexCoord, step_repeated
from dimension.generation.walkable import WalkableMap


def _line(length, direction=0):
    return [step_repeated(ORIGIN, direction, i) for i in range(length)]


def test_reachable_along_line():
    tiles = set(_line(6))
    assert is_reachable(ORIGIN, HexCoord(5, 0), tiles)
    assert reachable_from(ORIGIN, tiles) == tiles


def test_gap_breaks_reachability():
    tiles = set(_line(6))
    tiles.discard(HexCoord(3, 0))
    assert not is_reachable(ORIGIN, HexCoord(5, 0), tiles)
    assert reachable_from(ORIGIN, tiles) == {HexCoord(0, 0), HexCoord(1, 0), HexCoord(2, 0)}


def test_missing_endpoints():
    tiles = set(_line(3))
    assert not is_reachable(HexCoord(9, 9), ORIGIN, tiles)
    assert not is_reachable(ORIGIN, HexCoord(9, 9), tiles)
    assert reachable_from(HexCoord(9, 9), tiles) == set()


def test_force_connect_carves_filler_path():
    boss = HexCoord(6, -3)
    walkable = WalkableMap([ORIGIN, boss], TileKind.SPINE)
    assert not is_reachable(ORIGIN, boss, walkable)
    result = force_connect(ORIGIN, boss, walkable)
    assert result.reached
    assert result.steps == ORIGIN.distance_to(boss)
    assert result.carved == result.steps - 1  # boss itself was already walkable
    assert is_reachable(ORIGIN, boss, walkable)
    assert walkable.is_kind(boss, TileKind.SPINE)
    assert walkable.count(TileKind.FILLER) == result.carved


def test_force_connect_guard_expiry_reports_failure():
    boss = HexCoord(50, 0)
    walkable = WalkableMap([ORIGIN, boss], TileKind.SPINE)
    result = force_connect(ORIGIN, boss, walkable, guard=10)
    assert not result.reached
    assert result.steps == 10


def test_force_connect_same_tile():
    walkable = WalkableMap([ORIGIN], TileKind.SPINE)
    result = force_connect(ORIGIN, ORIGIN, walkable)
    assert result.reached and result.steps == 0


def _spy_force_connect(monkeypatch, captured):
    from dimension.generation import pipeline

    real_force_connect = pipeline.force_connect

    def spy(start, boss, walkable, *args, **kwargs):
        before = set(walkable.coords)
        result = real_force_connect(start, boss, walkable, *args, **kwargs)
        captured["carved"] = set(walkable.coords) - before
        captured["result"] = result
        return result

    monkeypatch.setattr(pipeline, "is_reachable", lambda start, boss, walkable: False)
    monkeypatch.setattr(pipeline, "force_connect", spy)


def test_pipeline_uses_force_connect_outcome(monkeypatch, small_profile):
    from dimension.generation import hex_distance, pipeline

    captured = {}
    _spy_force_connect(monkeypatch, captured)
    layout = pipeline.generate_once(21, small_profile)
    result = captured["result"]
    assert result.reached
    assert layout.boss_reachable == layout.metrics["force_connected"] == result.reached
    # greedy carving closes one unit of distance per step
    assert layout.metrics["force_connect_steps"] == result.steps
    assert result.steps == hex_distance(layout.start_coord, layout.boss_coord)
    assert len(captured["carved"]) == result.carved
    for coord in captured["carved"]:
        assert layout.tile_at(coord).kind is TileKind.FILLER


def test_pipeline_reports_failed_force_connect(monkeypatch, small_profile):
    from dimension.generation import pipeline
    from dimension.generation.connectivity import ForceConnectResult

    monkeypatch.setattr(pipeline, "is_reachable", lambda start, boss, walkable: False)
    monkeypatch.setattr(pipeline, "force_connect", lambda start, boss, walkable: ForceConnectResult(False, 0, 0))
    layout = pipeline.generate_once(21, small_profile)
    assert layout.boss_reachable is False
    assert layout.metrics["force_connected"] is False
