"""
project: Dimension layout generator
module: __init__.py
License: MIT

Flask application factory.

Configuration is sourced from environment variables (optionally via a local
.env file) with defaults suited to development. The generation profile and the
optional prop registry are loaded once per app and stored in ``app.config``.
"""

import logging
import os
import uuid

from dotenv import load_dotenv
from flask import Flask, jsonify

from dimension.generation import GenerationConfigError, load_profile, load_registry

# Load .env if present so DIMENSION_* settings can be supplied without
# exporting shell variables during development.
load_dotenv()


def _env_flag(name: str, default: str = "0") -> bool:
    return os.getenv(name, default).lower() in ("1", "true", "yes", "on")


def create_app(config: dict | None = None) -> Flask:
    """Build and return a configured Flask app.

    ``config`` is applied last, after the environment, so tests can supply a
    profile path or toggle metrics without touching os.environ.
    """
    app = Flask(__name__, instance_relative_config=True)

    try:
        os.makedirs(app.instance_path, exist_ok=True)
    except OSError:
        # Read-only deployments still serve layouts; only file logging needs it.
        pass

    app.config.update(
        SECRET_KEY=os.getenv("SECRET_KEY", "dev-secret-change-me"),
        DIMENSION_PROFILE_PATH=os.getenv("DIMENSION_PROFILE_PATH") or None,
        DIMENSION_PROP_REGISTRY_PATH=os.getenv("DIMENSION_PROP_REGISTRY_PATH") or None,
        DIMENSION_ENABLE_GENERATION_METRICS=_env_flag("DIMENSION_ENABLE_GENERATION_METRICS", "1"),
        DIMENSION_DISABLE_CACHE=_env_flag("DIMENSION_DISABLE_CACHE"),
        # Size ceilings for per-request profile overrides on POST /api/layout
        DIMENSION_MAX_TARGET_TILES=int(os.getenv("DIMENSION_MAX_TARGET_TILES", "20000")),
        DIMENSION_MAX_SPINE_LENGTH=int(os.getenv("DIMENSION_MAX_SPINE_LENGTH", "2000")),
        DIMENSION_MAX_POCKET_SIZE=int(os.getenv("DIMENSION_MAX_POCKET_SIZE", "500")),
        DIMENSION_MAX_POCKET_SEEDS=int(os.getenv("DIMENSION_MAX_POCKET_SEEDS", "256")),
    )
    if config:
        app.config.update(config)

    # Fail fast on a bad profile/registry: these are deployment errors.
    if "DIMENSION_PROFILE" not in app.config:
        app.config["DIMENSION_PROFILE"] = load_profile(app.config.get("DIMENSION_PROFILE_PATH"))
    if "DIMENSION_PROP_REGISTRY" not in app.config:
        registry_path = app.config.get("DIMENSION_PROP_REGISTRY_PATH")
        app.config["DIMENSION_PROP_REGISTRY"] = load_registry(registry_path) if registry_path else None

    from dimension.routes.layout_api import bp_layout

    app.register_blueprint(bp_layout)

    @app.errorhandler(GenerationConfigError)
    def config_error(e):
        return jsonify({"error": str(e)}), 400

    # Error handling: log details under a short id the client can report back
    @app.errorhandler(500)
    def internal_error(e):
        error_id = uuid.uuid4().hex[:8]
        logging.exception("Unhandled exception (id=%s)", error_id)
        return jsonify({"error": "internal server error", "error_id": error_id}), 500

    return app
