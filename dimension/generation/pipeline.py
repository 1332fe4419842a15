"""Pipeline orchestration for layout generation.

`generate_once` runs every phase for a single attempt seed with its own
``random.Random``; `generate_with_retries` derives up to four attempt seeds from
the base seed and returns the first reachable layout (or the largest one).
`DimensionGenerator` is the stateful front used by the CLI and HTTP layer: it
owns the active profile/registry, remembers the latest layout and notifies
subscribers when a generation completes.
"""
from __future__ import annotations

import logging
import random
import time
from typing import Any, Callable, Dict, List, Optional

from .biomes import assign_biomes
from .connectivity import force_connect, is_reachable
from .expansion import expand_to_target
from .layout import Layout, TileData
from .metrics import init_metrics
from .pockets import generate_pockets
from .profile import DEFAULT_PROFILE, GenerationProfile
from .props import PropRegistry, pick_prop, resolve_prop_pool
from .spine import generate_spine
from .tiles import DEFAULT_BIOME, TileKind
from .walkable import WalkableMap

logger = logging.getLogger(__name__)

MAX_ATTEMPTS = 4
ATTEMPT_SEED_STRIDE = 7919
DEFAULT_FIXED_SEED = 1337


def attempt_seeds(base_seed: int, attempts: int = MAX_ATTEMPTS) -> List[int]:
    return [base_seed + i * ATTEMPT_SEED_STRIDE for i in range(attempts)]


def generate_once(
    seed: int,
    profile: Optional[GenerationProfile] = None,
    registry: Optional[PropRegistry] = None,
    enable_metrics: bool = True,
) -> Layout:
    """Run spine, pockets, expansion, connectivity, biomes and props for one seed.

    Every collection and the random source are local to this call, so two
    attempts never share state.
    """
    profile = profile or DEFAULT_PROFILE
    rng = random.Random(seed)
    metrics: Dict[str, Any] = init_metrics() if enable_metrics else {}

    if enable_metrics:
        start = time.perf_counter()
        phase_times: Dict[str, int] = {}

        def _phase(label, fn, *a, **k):
            ps = time.perf_counter(); r = fn(*a, **k); pe = time.perf_counter()
            phase_times[label] = int((pe - ps) * 1000)
            return r
    else:
        def _phase(label, fn, *a, **k):
            return fn(*a, **k)

    walkable = WalkableMap()
    spine = _phase('spine', generate_spine, rng, profile, walkable)
    start_coord = spine.path[0]
    boss_coord = spine.path[-1]

    blobs = _phase('pockets', generate_pockets, rng, profile, spine.path, walkable, metrics if enable_metrics else None)

    target = profile.effective_target_tile_count
    filler = _phase('expansion', expand_to_target, rng, target, walkable)

    # Force-connect is a backstop; its own outcome is the final reachability flag.
    reachable = _phase('reachability', is_reachable, start_coord, boss_coord, walkable)
    connect = None
    if not reachable:
        connect = _phase('force_connect', force_connect, start_coord, boss_coord, walkable)
        reachable = connect.reached
        logger.debug("Force-connect seed=%s reached=%s steps=%s", seed, connect.reached, connect.steps)

    biomes = _phase('biomes', assign_biomes, rng, walkable.coords, profile.biome_groups, profile.biome_patch_size)

    def _build_tiles():
        pool = resolve_prop_pool(profile, registry)
        out = []
        for coord in sorted(walkable):
            has_prop = rng.random() < profile.prop_chance
            prop_id = pick_prop(rng, pool) if has_prop else None
            out.append(TileData(
                coord=coord,
                biome_group=biomes.labels.get(coord, DEFAULT_BIOME),
                has_prop=has_prop,
                prop_id=prop_id,
                kind=walkable.kind_of(coord),
            ))
        return tuple(out)

    tiles = _phase('tiles', _build_tiles)

    if enable_metrics:
        metrics['spine_target_length'] = spine.target_length
        metrics['spine_extension_steps'] = spine.extension_steps
        metrics['spine_boxed_in'] = spine.boxed_in
        metrics['filler_tiles'] = filler
        metrics['expansion_shortfall'] = max(0, target - len(walkable))
        if connect is not None:
            metrics['force_connect_steps'] = connect.steps
            metrics['force_connected'] = connect.reached
        metrics['biome_centers'] = len(biomes.centers)
        metrics['props_placed'] = sum(1 for t in tiles if t.has_prop)
        metrics['runtime_ms'] = int((time.perf_counter() - start) * 1000)
        metrics['phase_ms'] = phase_times

    logger.debug(
        "Attempt seed=%s tiles=%s spine=%s pockets=%s blobs=%s reachable=%s",
        seed, len(walkable), len(spine.path), walkable.count(TileKind.POCKET), len(blobs), reachable,
    )
    return Layout(
        seed_used=seed,
        start_coord=start_coord,
        boss_coord=boss_coord,
        boss_reachable=reachable,
        spine_coords=tuple(spine.path),
        pocket_coords=tuple(sorted(walkable.coords_of(TileKind.POCKET))),
        tiles=tiles,
        boss_arena_radius=profile.boss_arena_radius,
        metrics=metrics,
    )


def generate_with_retries(
    base_seed: int,
    profile: Optional[GenerationProfile] = None,
    registry: Optional[PropRegistry] = None,
    enable_metrics: bool = True,
) -> Layout:
    """Return the first reachable attempt, else the attempt with the most tiles.

    A degraded result is signalled by ``boss_reachable=False``; nothing is raised.
    """
    profile = profile or DEFAULT_PROFILE
    best: Optional[Layout] = None
    attempts = 0
    for attempt_seed in attempt_seeds(base_seed):
        attempts += 1
        attempt = generate_once(attempt_seed, profile, registry, enable_metrics=enable_metrics)
        if best is None or attempt.walkable_count > best.walkable_count:
            best = attempt
        if attempt.boss_reachable:
            if enable_metrics:
                attempt.metrics['attempts'] = attempts
            return attempt

    logger.warning(
        "Generated layout failed connectivity after %s attempts base_seed=%s best_seed=%s tiles=%s",
        attempts, base_seed, best.seed_used, best.walkable_count,
    )
    if enable_metrics:
        best.metrics['attempts'] = attempts
    return best


class DimensionGenerator:
    """Holds the active profile and the most recent layout.

    Subscribers added to `on_generated` are called with each new layout after
    `regenerate()`; a failing subscriber is logged and does not stop the others.
    """

    def __init__(
        self,
        profile: Optional[GenerationProfile] = None,
        registry: Optional[PropRegistry] = None,
        use_fixed_seed: bool = True,
        fixed_seed: int = DEFAULT_FIXED_SEED,
        enable_metrics: bool = True,
    ):
        self.profile = profile or DEFAULT_PROFILE
        self.registry = registry
        self.use_fixed_seed = use_fixed_seed
        self.fixed_seed = fixed_seed
        self.enable_metrics = enable_metrics
        self.latest_layout: Optional[Layout] = None
        self.on_generated: List[Callable[[Layout], None]] = []

    def next_seed(self) -> int:
        if self.use_fixed_seed:
            return self.fixed_seed
        return random.randint(1, 1_000_000)

    def regenerate(self, seed: Optional[int] = None) -> Layout:
        seed = self.next_seed() if seed is None else seed
        layout = generate_with_retries(seed, self.profile, self.registry, enable_metrics=self.enable_metrics)
        self.latest_layout = layout
        logger.info(
            "Generated layout seed=%s tiles=%s spine=%s pockets=%s reachable=%s",
            layout.seed_used, layout.walkable_count, len(layout.spine_coords),
            len(layout.pocket_coords), layout.boss_reachable,
        )
        for callback in list(self.on_generated):
            try:
                callback(layout)
            except Exception:
                logger.exception("on_generated subscriber failed")
        return layout


__all__ = [
    "MAX_ATTEMPTS",
    "ATTEMPT_SEED_STRIDE",
    "DEFAULT_FIXED_SEED",
    "attempt_seeds",
    "generate_once",
    "generate_with_retries",
    "DimensionGenerator",
]
