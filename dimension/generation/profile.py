"""Generation profile: validated, clamped configuration shared by every generation stage.

Profiles are frozen. Editing goes through :meth:`GenerationProfile.replace`, which
re-runs the clamping in ``__post_init__`` so the min/max invariants always hold.

Usage:
    profile = load_profile("profiles/short.json", overrides={"pocket_seed_count": 0})
    tighter = profile.replace(spine_min_length=40, spine_max_length=30)  # max clamped up to 40
"""
from __future__ import annotations

import dataclasses
import json
import os
from dataclasses import dataclass, field, fields
from typing import Any, Dict, Mapping, Optional, Tuple, Union

from .errors import ProfileError

DEFAULT_BIOME_GROUPS: Tuple[str, ...] = ("MEADOW", "FOREST", "DESERT", "MIRE", "VOLCANIC")
DEFAULT_PROP_POOL: Tuple[str, ...] = ("Tree", "Rock", "Shrub", "Skull", "Crystal", "Totem")

_INT_FIELDS = {
    "spine_min_length",
    "spine_max_length",
    "target_tile_count",
    "min_boss_distance",
    "boss_arena_radius",
    "pocket_seed_count",
    "pocket_min_size",
    "pocket_max_size",
    "pocket_start_padding",
    "pocket_end_padding",
    "biome_patch_size",
}
_FLOAT_FIELDS = {
    "toward_boss_bias",
    "outward_bias",
    "forward_direction_bonus",
    "side_direction_bonus",
    "prop_chance",
}
_LIST_FIELDS = {"biome_groups", "random_prop_pool"}


def _clean_names(values) -> Tuple[str, ...]:
    out = []
    for v in values or ():
        if v is None:
            continue
        s = str(v).strip()
        if s:
            out.append(s)
    return tuple(out)


@dataclass(frozen=True)
class GenerationProfile:
    # Layout targets
    spine_min_length: int = 180
    spine_max_length: int = 240
    target_tile_count: int = 2000
    min_boss_distance: int = 180
    boss_arena_radius: int = 7

    # Spine bias
    toward_boss_bias: float = 5.0
    outward_bias: float = 2.0
    forward_direction_bonus: float = 3.0
    side_direction_bonus: float = 1.0

    # Pockets
    pocket_seed_count: int = 14
    pocket_min_size: int = 12
    pocket_max_size: int = 50
    pocket_start_padding: int = 8
    pocket_end_padding: int = 8

    # Biome patches
    biome_patch_size: int = 48
    biome_groups: Tuple[str, ...] = field(default=DEFAULT_BIOME_GROUPS)

    # Prop randomization
    prop_chance: float = 0.25
    random_prop_pool: Tuple[str, ...] = field(default=DEFAULT_PROP_POOL)

    def __post_init__(self):
        spine_min = max(8, int(self.spine_min_length))
        spine_max = max(spine_min, int(self.spine_max_length))
        pocket_min = max(1, int(self.pocket_min_size))
        clamped = {
            "spine_min_length": spine_min,
            "spine_max_length": spine_max,
            "min_boss_distance": min(max(int(self.min_boss_distance), 2), spine_max),
            "boss_arena_radius": max(1, int(self.boss_arena_radius)),
            "target_tile_count": max(int(self.target_tile_count), spine_min + 2),
            "toward_boss_bias": max(0.0, float(self.toward_boss_bias)),
            "outward_bias": max(0.0, float(self.outward_bias)),
            "forward_direction_bonus": max(0.0, float(self.forward_direction_bonus)),
            "side_direction_bonus": max(0.0, float(self.side_direction_bonus)),
            "pocket_seed_count": max(0, int(self.pocket_seed_count)),
            "pocket_min_size": pocket_min,
            "pocket_max_size": max(pocket_min, int(self.pocket_max_size)),
            "pocket_start_padding": max(0, int(self.pocket_start_padding)),
            "pocket_end_padding": max(0, int(self.pocket_end_padding)),
            "biome_patch_size": max(1, int(self.biome_patch_size)),
            "biome_groups": _clean_names(self.biome_groups),
            "prop_chance": min(max(float(self.prop_chance), 0.0), 1.0),
            # Pool entries are trimmed/de-duplicated at resolve time; keep them as given.
            "random_prop_pool": tuple("" if p is None else str(p) for p in (self.random_prop_pool or ())),
        }
        for name, value in clamped.items():
            object.__setattr__(self, name, value)

    @property
    def effective_target_tile_count(self) -> int:
        """Filler target; never below the minimum guaranteed spine size."""
        return max(self.target_tile_count, self.spine_min_length + 2)

    def replace(self, **changes: Any) -> "GenerationProfile":
        """Return an edited copy; the edit is clamped like a fresh profile."""
        return dataclasses.replace(self, **changes)

    def to_dict(self) -> Dict[str, Any]:
        out: Dict[str, Any] = {}
        for f in fields(self):
            value = getattr(self, f.name)
            out[f.name] = list(value) if f.name in _LIST_FIELDS else value
        return out

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "GenerationProfile":
        if not isinstance(data, Mapping):
            raise ProfileError("profile must be a JSON object")
        known = {f.name for f in fields(cls)}
        unknown = sorted(set(data) - known)
        if unknown:
            raise ProfileError(f"unknown profile keys: {', '.join(unknown)}")
        kwargs: Dict[str, Any] = {}
        for key, value in data.items():
            if key in _INT_FIELDS:
                if isinstance(value, bool) or not isinstance(value, int):
                    raise ProfileError(f"{key} must be an integer")
            elif key in _FLOAT_FIELDS:
                if isinstance(value, bool) or not isinstance(value, (int, float)):
                    raise ProfileError(f"{key} must be a number")
            elif key in _LIST_FIELDS:
                if isinstance(value, str) or not isinstance(value, (list, tuple)):
                    raise ProfileError(f"{key} must be a list of strings")
                if not all(isinstance(v, str) for v in value):
                    raise ProfileError(f"{key} must be a list of strings")
                value = tuple(value)
            kwargs[key] = value
        return cls(**kwargs)


DEFAULT_PROFILE = GenerationProfile()


def _load_json_file(path: str) -> Dict[str, Any]:
    try:
        with open(path, "r", encoding="utf-8") as f:
            return json.load(f)
    except OSError as e:
        raise ProfileError(f"cannot read profile '{path}': {e}") from e
    except json.JSONDecodeError as e:
        raise ProfileError(f"profile '{path}' is not valid JSON: {e}") from e


def load_profile(
    source: Union[str, Mapping[str, Any], GenerationProfile, None] = None,
    overrides: Optional[Mapping[str, Any]] = None,
) -> GenerationProfile:
    """Build a profile from a JSON path, a dict, or an existing profile, then apply overrides.

    Missing keys fall back to the defaults. Overrides are the last layer.
    """
    if source is None:
        data: Dict[str, Any] = {}
    elif isinstance(source, GenerationProfile):
        data = source.to_dict()
    elif isinstance(source, str):
        if not os.path.isfile(source):
            raise ProfileError(f"profile file not found: {source}")
        data = _load_json_file(source)
    elif isinstance(source, Mapping):
        data = dict(source)
    else:
        raise TypeError("source must be a path, a mapping or a GenerationProfile")

    if not isinstance(data, dict):
        raise ProfileError("profile must be a JSON object")
    if overrides:
        data = {**data, **dict(overrides)}
    return GenerationProfile.from_dict(data)


__all__ = [
    "GenerationProfile",
    "DEFAULT_PROFILE",
    "DEFAULT_BIOME_GROUPS",
    "DEFAULT_PROP_POOL",
    "load_profile",
]
