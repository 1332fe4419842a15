from typing import Any, Dict


def init_metrics() -> Dict[str, Any]:
    return {
        'attempts': 0,
        'spine_target_length': 0,
        'spine_extension_steps': 0,
        'spine_boxed_in': False,
        'pocket_blobs': 0,
        'pocket_tiles': 0,
        'pocket_shortfall': 0,
        'filler_tiles': 0,
        'expansion_shortfall': 0,
        'force_connect_steps': 0,
        'force_connected': False,
        'biome_centers': 0,
        'props_placed': 0,
        'runtime_ms': 0.0,
        'phase_ms': {},
    }
