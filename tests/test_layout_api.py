import pytest

from dimension import create_app
from dimension.routes.layout_api import MAX_SEED, _coerce_seed, get_cached_layout


def test_profile_endpoint(client, small_profile):
    r = client.get("/api/layout/profile")
    assert r.status_code == 200
    data = r.get_json()
    assert data == small_profile.to_dict()
    assert isinstance(data["biome_groups"], list)


def test_layout_get_is_deterministic(client):
    a = client.get("/api/layout?seed=42").get_json()
    b = client.get("/api/layout?seed=42").get_json()
    assert a == b
    assert a["seed"] in [42 + i * 7919 for i in range(4)]
    assert a["start"] == [0, 0]
    assert a["walkable_count"] == len(a["tiles"])
    assert "metrics" not in a


def test_string_seed_hashed_deterministically(client):
    a = client.get("/api/layout?seed=dusk").get_json()
    b = client.get("/api/layout?seed=dusk").get_json()
    assert a == b
    assert a["seed"] >= 0


def test_post_with_overrides(client):
    r = client.post("/api/layout", json={"seed": 7, "profile": {"pocket_seed_count": 0, "prop_chance": 0.0}})
    assert r.status_code == 200
    data = r.get_json()
    assert data["pockets"] == []
    assert not any(t["has_prop"] for t in data["tiles"])
    assert all(t["kind"] != "pocket" for t in data["tiles"])


def test_post_without_body_uses_random_seed(client):
    r = client.post("/api/layout")
    assert r.status_code == 200
    assert r.get_json()["boss_reachable"] in (True, False)


@pytest.mark.parametrize(
    "body",
    [
        {"profile": {"bogus": 1}},
        {"profile": {"spine_min_length": "long"}},
        {"profile": ["not", "an", "object"]},
        ["not", "an", "object"],
        {"profile": {"target_tile_count": 100_000_000}},
        {"profile": {"spine_max_length": 50_000_000}},
        {"profile": {"spine_min_length": 50_000}},
        {"profile": {"pocket_max_size": 10_000}},
        {"profile": {"pocket_seed_count": 10_000}},
    ],
)
def test_post_rejects_bad_payloads(client, body):
    r = client.post("/api/layout", json=body)
    assert r.status_code == 400
    assert "error" in r.get_json()


def test_metrics_endpoint(client):
    r = client.get("/api/layout/metrics?seed=12345")
    assert r.status_code == 200
    data = r.get_json()
    assert data["seed"] == 12345
    assert "boss_reachable" in data
    for k in ["attempts", "spine_target_length", "pocket_tiles", "filler_tiles", "biome_centers", "runtime_ms"]:
        assert k in data["metrics"]


def test_metrics_disabled(small_profile):
    app = create_app({"TESTING": True, "DIMENSION_PROFILE": small_profile,
                      "DIMENSION_ENABLE_GENERATION_METRICS": False})
    r = app.test_client().get("/api/layout/metrics?seed=1")
    assert r.status_code == 404


def test_cache_reuses_layout(test_app, small_profile):
    with test_app.app_context():
        a = get_cached_layout(10, small_profile)
        b = get_cached_layout(10, small_profile)
        assert a is b


def test_cache_can_be_disabled(monkeypatch, test_app, small_profile):
    monkeypatch.setenv("DIMENSION_DISABLE_CACHE", "1")
    with test_app.app_context():
        a = get_cached_layout(10, small_profile)
        b = get_cached_layout(10, small_profile)
        assert a is not b
        assert a == b


def test_cache_bounded(test_app, small_profile):
    from dimension.routes import layout_api

    with test_app.app_context():
        for seed in range(12):
            get_cached_layout(seed, small_profile.replace(target_tile_count=60))
    assert len(layout_api._layout_cache) <= 8


def test_coerce_seed():
    assert _coerce_seed(42) == 42
    assert _coerce_seed(" 99 ") == 99
    assert _coerce_seed(MAX_SEED + 5) == 5
    assert _coerce_seed("dusk") == _coerce_seed("dusk")
    assert 0 <= _coerce_seed("dusk") < MAX_SEED
    for empty in (None, "", "   ", True, 3.5):
        assert 1 <= _coerce_seed(empty) <= 1_000_000


def test_profile_path_from_env(monkeypatch, tmp_path):
    path = tmp_path / "profile.json"
    path.write_text('{"spine_min_length": 12, "spine_max_length": 12, "target_tile_count": 40}')
    monkeypatch.setenv("DIMENSION_PROFILE_PATH", str(path))
    app = create_app({"TESTING": True})
    data = app.test_client().get("/api/layout/profile").get_json()
    assert data["spine_min_length"] == 12


def test_registry_path_from_config(tmp_path, small_profile):
    reg = tmp_path / "props.json"
    reg.write_text('{"props": [{"id": "Lantern"}]}')
    app = create_app({
        "TESTING": True,
        "DIMENSION_PROFILE": small_profile.replace(random_prop_pool=(), prop_chance=1.0),
        "DIMENSION_PROP_REGISTRY_PATH": str(reg),
    })
    data = app.test_client().get("/api/layout?seed=3").get_json()
    assert {t["prop_id"] for t in data["tiles"]} == {"Lantern"}


def test_bad_profile_path_fails_fast(monkeypatch, tmp_path):
    from dimension.generation import ProfileError

    monkeypatch.setenv("DIMENSION_PROFILE_PATH", str(tmp_path / "missing.json"))
    with pytest.raises(ProfileError):
        create_app({"TESTING": True})


def test_override_ceiling_from_config(small_profile):
    app = create_app({"TESTING": True, "DIMENSION_PROFILE": small_profile, "DIMENSION_MAX_TARGET_TILES": 350})
    client = app.test_client()
    r = client.post("/api/layout", json={"seed": 4, "profile": {"target_tile_count": 400}})
    assert r.status_code == 400
    assert "target_tile_count" in r.get_json()["error"]
    r = client.post("/api/layout", json={"seed": 4, "profile": {"target_tile_count": 340}})
    assert r.status_code == 200
    assert r.get_json()["walkable_count"] >= 340


def test_deployment_profile_above_ceiling_accepts_other_overrides(small_profile):
    app = create_app({
        "TESTING": True,
        "DIMENSION_PROFILE": small_profile.replace(target_tile_count=500),
        "DIMENSION_MAX_TARGET_TILES": 400,
    })
    r = app.test_client().post("/api/layout", json={"seed": 4, "profile": {"prop_chance": 0.0}})
    assert r.status_code == 200


def test_non_ascii_digit_seed_is_hashed(client):
    r = client.get("/api/layout?seed=%C2%B2")
    assert r.status_code == 200
    seed = _coerce_seed("²")
    assert seed == _coerce_seed("²")
    assert seed != 2
    assert r.get_json()["seed"] in [seed + i * 7919 for i in range(4)]
    # other decimal scripts are valid int() input
    assert _coerce_seed("٣") == 3
