"""
project: Dimension layout generator
module: server.py
License: MIT

Server bootstrap.

Exposes a helper to start the Flask development server with logging routed
to the console and a rotating file under the app's instance/ directory.
"""

import logging
import os
import sys
from logging.handlers import RotatingFileHandler

from dimension import create_app

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"


def start_server(host="0.0.0.0", port=5000, debug: bool = False):  # pragma: no cover (runtime only)
    """Create the app, configure logging and serve until interrupted.

    When debug=True, Flask's debugger and reloader provide verbose tracebacks.
    """
    app = create_app()
    _configure_logging(app.instance_path)
    try:
        print(f"[INFO] Starting layout server on {host}:{port}")
        app.run(host=host, port=port, debug=debug)
    except KeyboardInterrupt:
        print("\n[INFO] Server stopped by user (Ctrl+C)")
        sys.exit(0)


def _configure_logging(log_dir: str, level: int = logging.INFO) -> str:
    """Configure logging to both console and a rotating file in `log_dir`.

    The file path will be <log_dir>/app.log. Retains a few backups to avoid growth.
    Returns the log file path.
    """
    try:
        os.makedirs(log_dir, exist_ok=True)
    except OSError:
        pass
    log_path = os.path.join(log_dir, "app.log")

    root = logging.getLogger()
    root.setLevel(level)

    # Rotating file handler
    file_handler = RotatingFileHandler(log_path, maxBytes=1_000_000, backupCount=3)
    file_handler.setLevel(level)
    file_handler.setFormatter(logging.Formatter(LOG_FORMAT))

    # Console handler (for terminals/tasks that show output)
    console = logging.StreamHandler()
    console.setLevel(level)
    console.setFormatter(logging.Formatter(LOG_FORMAT))

    # Avoid duplicate handlers if reconfigured
    for h in list(root.handlers):
        root.removeHandler(h)
        h.close()

    root.addHandler(file_handler)
    root.addHandler(console)
    return log_path
