"""Public layout generation interface."""

from .errors import GenerationConfigError, ProfileError, RegistryError  # noqa: F401
from .hexcoord import ORIGIN, HexCoord, hex_distance  # noqa: F401
from .layout import Layout, TileData  # noqa: F401
from .pipeline import (  # noqa: F401
    ATTEMPT_SEED_STRIDE,
    MAX_ATTEMPTS,
    DimensionGenerator,
    generate_once,
    generate_with_retries,
)
from .profile import DEFAULT_PROFILE, GenerationProfile, load_profile  # noqa: F401
from .props import PropDefinition, PropRegistry, load_registry  # noqa: F401
from .tiles import DEFAULT_BIOME, FALLBACK_PROP_ID, TileKind  # noqa: F401

__all__ = [
    "GenerationConfigError",
    "ProfileError",
    "RegistryError",
    "HexCoord",
    "ORIGIN",
    "hex_distance",
    "Layout",
    "TileData",
    "TileKind",
    "DEFAULT_BIOME",
    "FALLBACK_PROP_ID",
    "GenerationProfile",
    "DEFAULT_PROFILE",
    "load_profile",
    "PropDefinition",
    "PropRegistry",
    "load_registry",
    "DimensionGenerator",
    "generate_once",
    "generate_with_retries",
    "MAX_ATTEMPTS",
    "ATTEMPT_SEED_STRIDE",
]
