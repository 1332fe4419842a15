import os
import sys

import pytest

# Ensure repository root importable early
ROOT_DIR = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))
if ROOT_DIR not in sys.path:
    sys.path.insert(0, ROOT_DIR)

from dimension import create_app  # noqa: E402
from dimension.generation import GenerationProfile  # noqa: E402
from dimension.routes.layout_api import clear_layout_cache  # noqa: E402

# Smaller than the default profile so route/invariant sweeps stay fast.
SMALL_PROFILE_FIELDS = dict(
    spine_min_length=30,
    spine_max_length=40,
    target_tile_count=300,
    min_boss_distance=20,
    pocket_seed_count=4,
    pocket_min_size=5,
    pocket_max_size=15,
    pocket_start_padding=3,
    pocket_end_padding=3,
    biome_patch_size=24,
)


@pytest.fixture()
def small_profile():
    return GenerationProfile(**SMALL_PROFILE_FIELDS)


@pytest.fixture()
def test_app(small_profile):
    app = create_app({"TESTING": True, "DIMENSION_PROFILE": small_profile})
    return app


@pytest.fixture(autouse=True)
def _fresh_layout_cache():
    clear_layout_cache()
    yield
    clear_layout_cache()


@pytest.fixture()
def client(test_app):
    return test_app.test_client()
