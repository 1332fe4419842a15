"""Structured event logging for the CLI and the HTTP layer.

One line per event, ``key=value`` pairs or one JSON object, written to stdout
(errors to stderr). The generator core does not use this module; it logs
through the stdlib ``logging`` module so library callers keep control of it.

Usage:
    from dimension.logging_utils import log, layout_fields
    req_log = log.bind(base_seed=42)
    with req_log.timed("layout_generated") as extra:
        layout = generate_with_retries(42)
        extra.update(layout_fields(layout))

Level comes from DIMENSION_LOG_LEVEL (debug/info/warn/error), JSON output from
DIMENSION_LOG_JSON. Reserved keys: level, ts.
"""

from __future__ import annotations

import json
import os
import sys
import time
from contextlib import contextmanager

LEVELS = {"debug": 10, "info": 20, "warn": 30, "error": 40}
CURRENT_LEVEL = LEVELS.get(os.getenv("DIMENSION_LOG_LEVEL", "info").lower(), 20)
JSON_MODE = os.getenv("DIMENSION_LOG_JSON", "0").lower() in ("1", "true", "yes", "on")


def _render_value(v):
    if isinstance(v, (bool, int, float)):
        return str(v)
    if isinstance(v, (tuple, list)):
        # HexCoord and other small sequences: q,r
        return ",".join(str(x) for x in v)
    return str(v).replace(" ", "_")


def _format(level: str, fields: dict) -> str:
    ts = int(time.time())
    if JSON_MODE:
        rec = {"level": level, "ts": ts}
        rec.update((k, v) for k, v in fields.items() if v is not None)
        return json.dumps(rec, separators=(",", ":"), default=str)
    parts = [f"level={level}", f"ts={ts}"]
    parts.extend(f"{k}={_render_value(v)}" for k, v in fields.items() if v is not None)
    return " ".join(parts)


def layout_fields(layout) -> dict:
    """Standard summary fields for a generated layout."""
    return {
        "seed_used": layout.seed_used,
        "tiles": layout.walkable_count,
        "spine": len(layout.spine_coords),
        "pockets": len(layout.pocket_coords),
        "reachable": layout.boss_reachable,
    }


class _Logger:
    def __init__(self, name: str | None = None, context: dict | None = None):
        self.name = name or "dimension"
        self.context = dict(context or {})

    def bind(self, **fields) -> "_Logger":
        """Child logger whose lines always carry ``fields`` (call-site values win)."""
        return _Logger(self.name, {**self.context, **fields})

    def _log(self, lvl: str, **fields):
        if LEVELS[lvl] < CURRENT_LEVEL:
            return
        merged = {"logger": self.name, **self.context, **fields}
        print(_format(lvl, merged), file=sys.stderr if lvl == "error" else sys.stdout)

    def debug(self, **fields):
        self._log("debug", **fields)

    def info(self, **fields):
        self._log("info", **fields)

    def warn(self, **fields):
        self._log("warn", **fields)

    def error(self, **fields):
        self._log("error", **fields)

    @contextmanager
    def timed(self, event: str, **fields):
        """Emit one info line for ``event`` with ``elapsed_ms`` once the block finishes.

        The yielded dict can be filled inside the block; a raised exception is
        logged as an error line for the same event and re-raised.
        """
        extra: dict = {}
        start = time.perf_counter()
        try:
            yield extra
        except Exception as e:
            elapsed = round((time.perf_counter() - start) * 1000.0, 1)
            self.error(**{"event": event, "elapsed_ms": elapsed, "error": type(e).__name__, **fields, **extra})
            raise
        elapsed = round((time.perf_counter() - start) * 1000.0, 1)
        self.info(**{"event": event, "elapsed_ms": elapsed, **fields, **extra})


_LOGGER_CACHE: dict = {}


def get_logger(name: str) -> _Logger:
    if name not in _LOGGER_CACHE:
        _LOGGER_CACHE[name] = _Logger(name)
    return _LOGGER_CACHE[name]


log = get_logger("dimension")
