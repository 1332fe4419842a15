import dataclasses
import logging

from dimension.generation import ATTEMPT_SEED_STRIDE, MAX_ATTEMPTS, Layout, ORIGIN, TileData, TileKind, pipeline
from dimension.generation.hexcoord import HexCoord


def _fake_layout(seed, tiles, reachable):
    data = tuple(TileData(HexCoord(i, 0), "A", False, None, TileKind.FILLER) for i in range(tiles))
    return Layout(
        seed_used=seed,
        start_coord=ORIGIN,
        boss_coord=HexCoord(tiles - 1, 0),
        boss_reachable=reachable,
        spine_coords=(ORIGIN,),
        pocket_coords=(),
        tiles=data,
        metrics={},
    )


def test_attempt_seeds():
    assert pipeline.attempt_seeds(100) == [100, 100 + 7919, 100 + 2 * 7919, 100 + 3 * 7919]
    assert MAX_ATTEMPTS == 4 and ATTEMPT_SEED_STRIDE == 7919


def test_returns_first_reachable_and_stops(monkeypatch):
    calls = []

    def fake_once(seed, profile, registry, enable_metrics=True):
        calls.append(seed)
        return _fake_layout(seed, 10, reachable=len(calls) == 2)

    monkeypatch.setattr(pipeline, "generate_once", fake_once)
    result = pipeline.generate_with_retries(500)
    assert calls == [500, 500 + 7919]
    assert result.seed_used == 500 + 7919
    assert result.boss_reachable is True
    assert result.metrics["attempts"] == 2


def test_all_fail_returns_largest_with_warning(monkeypatch, caplog):
    sizes = iter([5, 12, 12, 3])
    calls = []

    def fake_once(seed, profile, registry, enable_metrics=True):
        calls.append(seed)
        return _fake_layout(seed, next(sizes), reachable=False)

    monkeypatch.setattr(pipeline, "generate_once", fake_once)
    with caplog.at_level(logging.WARNING, logger="dimension.generation.pipeline"):
        result = pipeline.generate_with_retries(1)
    assert len(calls) == 4
    # first of the equal-size attempts is kept
    assert result.seed_used == 1 + 7919
    assert result.walkable_count == 12
    assert result.boss_reachable is False
    assert result.metrics["attempts"] == 4
    assert any("failed connectivity" in r.getMessage() for r in caplog.records)


def test_no_cross_attempt_contamination(monkeypatch, small_profile):
    real_once = pipeline.generate_once
    seen = []

    def flaky_once(seed, profile, registry, enable_metrics=True):
        layout = real_once(seed, profile, registry, enable_metrics=enable_metrics)
        seen.append(layout)
        if len(seen) == 1:
            return dataclasses.replace(layout, boss_reachable=False)
        return layout

    monkeypatch.setattr(pipeline, "generate_once", flaky_once)
    result = pipeline.generate_with_retries(77, small_profile)
    assert result.seed_used == 77 + 7919
    fresh = real_once(77 + 7919, small_profile)
    assert result == fresh
    discarded_only = seen[0].walkable_set() - fresh.walkable_set()
    assert not (discarded_only & result.walkable_set())


def test_real_layouts_reachable_on_first_attempt(small_profile):
    # the spine is a connected chain, so the first attempt is normally accepted
    result = pipeline.generate_with_retries(4242, small_profile)
    assert result.boss_reachable
    assert result.metrics["attempts"] == 1
    assert result.seed_used == 4242
