"""
project: Dimension layout generator
module: layout_api.py
License: MIT

Layout generation API routes.

Endpoints:
  GET  /api/layout/profile          active generation profile
  GET  /api/layout?seed=<int|str>   layout for the active profile
  POST /api/layout                  layout for {"seed": ..., "profile": {...overrides}}
  GET  /api/layout/metrics?seed=    generation metrics for a seed
"""

import hashlib
import os
import random
import threading

from flask import Blueprint, current_app, jsonify, request

from dimension.generation import GenerationProfile, Layout, ProfileError, generate_with_retries, load_profile
from dimension.logging_utils import layout_fields, log

bp_layout = Blueprint("layout_api", __name__)

MAX_SEED = 9223372036854775807

# Simple in-process cache (seed, profile)->Layout. Thread-safe with a lock because
# the dev server may serve requests from several threads.
_layout_cache = {}
_layout_cache_lock = threading.Lock()
_LAYOUT_CACHE_MAX = 8

# Per-request overrides run in the request thread; these keep one POST from
# asking for an unbounded amount of work. (profile field, config key, default)
OVERRIDE_CEILINGS = (
    ("target_tile_count", "DIMENSION_MAX_TARGET_TILES", 20_000),
    ("spine_max_length", "DIMENSION_MAX_SPINE_LENGTH", 2_000),
    ("pocket_max_size", "DIMENSION_MAX_POCKET_SIZE", 500),
    ("pocket_seed_count", "DIMENSION_MAX_POCKET_SEEDS", 256),
)


def _coerce_seed(payload_seed):
    """Convert provided seed (int or str) into a bounded 64-bit signed int."""
    if payload_seed is None or isinstance(payload_seed, bool):
        return random.randint(1, 1_000_000)
    if isinstance(payload_seed, int):
        return payload_seed % MAX_SEED
    if isinstance(payload_seed, str):
        s = payload_seed.strip()
        if not s:
            return random.randint(1, 1_000_000)
        # isdecimal, not isdigit: superscripts and the like are not valid int() input
        if s.isdecimal():
            return int(s) % MAX_SEED
        h = hashlib.sha256(s.encode("utf-8")).digest()
        return int.from_bytes(h[:8], "big") % MAX_SEED
    # Fallback
    return random.randint(1, 1_000_000)


def _cache_disabled() -> bool:
    return bool(current_app.config.get("DIMENSION_DISABLE_CACHE")) or os.environ.get("DIMENSION_DISABLE_CACHE") == "1"


def clear_layout_cache():
    with _layout_cache_lock:
        _layout_cache.clear()


def get_cached_layout(seed: int, profile: GenerationProfile) -> Layout:
    registry = current_app.config.get("DIMENSION_PROP_REGISTRY")
    enable_metrics = bool(current_app.config.get("DIMENSION_ENABLE_GENERATION_METRICS", True))
    if _cache_disabled():
        return generate_with_retries(seed, profile, registry, enable_metrics=enable_metrics)
    # Profiles are frozen dataclasses, so they hash by value.
    key = (seed, profile, id(registry), enable_metrics)
    with _layout_cache_lock:
        layout = _layout_cache.get(key)
        if layout is not None:
            return layout
    layout = generate_with_retries(seed, profile, registry, enable_metrics=enable_metrics)
    with _layout_cache_lock:
        _layout_cache[key] = layout
        if len(_layout_cache) > _LAYOUT_CACHE_MAX:
            first_key = next(iter(_layout_cache.keys()))
            if first_key != key:
                _layout_cache.pop(first_key, None)
    return layout


def _active_profile() -> GenerationProfile:
    return current_app.config["DIMENSION_PROFILE"]


def check_override_ceilings(base: GenerationProfile, profile: GenerationProfile) -> None:
    """Raise ProfileError when an override pushes a size field above the server limit.

    Only fields the request changed are checked, so a deployment profile that is
    itself above a limit still accepts unrelated overrides.
    """
    for field_name, config_key, default in OVERRIDE_CEILINGS:
        ceiling = int(current_app.config.get(config_key, default))
        value = getattr(profile, field_name)
        if value > ceiling and value != getattr(base, field_name):
            raise ProfileError(f"{field_name}={value} exceeds the server limit of {ceiling}")


def _layout_response(seed: int, profile: GenerationProfile):
    req_log = log.bind(base_seed=seed)
    with req_log.timed("layout_generated") as extra:
        layout = get_cached_layout(seed, profile)
        extra.update(layout_fields(layout))
    if not layout.boss_reachable:
        req_log.warn(event="layout_unreachable", boss=layout.boss_coord)
    return jsonify(layout.to_dict())


@bp_layout.route("/api/layout/profile")
def layout_profile():
    return jsonify(_active_profile().to_dict())


@bp_layout.route("/api/layout", methods=["GET"])
def layout_get():
    seed = _coerce_seed(request.args.get("seed"))
    return _layout_response(seed, _active_profile())


@bp_layout.route("/api/layout", methods=["POST"])
def layout_post():
    """Generate a layout with optional per-request profile overrides.

    Body JSON (all optional):
      { "seed": <int|str|null>, "profile": { <profile field>: <value>, ... } }
    Invalid overrides, or overrides above the server size limits
    (DIMENSION_MAX_* config), answer 400 with {"error": ...}.
    """
    data = request.get_json(silent=True)
    if data is None:
        data = {}
    if not isinstance(data, dict):
        return jsonify({"error": "body must be a JSON object"}), 400
    overrides = data.get("profile") or {}
    if not isinstance(overrides, dict):
        return jsonify({"error": "profile must be an object"}), 400
    base = _active_profile()
    try:
        profile = load_profile(base, overrides=overrides)
        check_override_ceilings(base, profile)
    except ProfileError as e:
        log.warn(event="profile_rejected", error=str(e))
        return jsonify({"error": str(e)}), 400
    seed = _coerce_seed(data.get("seed"))
    return _layout_response(seed, profile)


@bp_layout.route("/api/layout/metrics")
def layout_metrics():
    if not current_app.config.get("DIMENSION_ENABLE_GENERATION_METRICS", True):
        return jsonify({"error": "generation metrics disabled"}), 404
    seed = _coerce_seed(request.args.get("seed"))
    layout = get_cached_layout(seed, _active_profile())
    return jsonify({"seed": seed, "seed_used": layout.seed_used, "boss_reachable": layout.boss_reachable, "metrics": layout.metrics})
