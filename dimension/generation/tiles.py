from enum import Enum


class TileKind(str, Enum):
    SPINE = "spine"
    POCKET = "pocket"
    FILLER = "filler"


# Biome label used when a profile carries no biome groups.
DEFAULT_BIOME = "DEFAULT"
# Prop id used when neither the profile nor the registry supplies any.
FALLBACK_PROP_ID = "RandomProp"

__all__ = ["TileKind", "DEFAULT_BIOME", "FALLBACK_PROP_ID"]
