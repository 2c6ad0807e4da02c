"""
project: Cellmap
module: server.py
License: MIT

Server bootstrap: logging setup and the development HTTP server.
"""

import logging
import os
from logging.handlers import RotatingFileHandler

from flask import Flask

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"


def start_server(app: Flask, host="0.0.0.0", port=5000, debug: bool = False):  # pragma: no cover (runtime only)
    """Configure logging and run the Flask development server."""
    _configure_logging(app)
    logging.getLogger(__name__).info("Starting map server on %s:%d", host, port)
    app.run(host=host, port=port, debug=debug)


def _configure_logging(app: Flask, level: int = logging.INFO):
    """Configure logging to both console and a rotating file in instance/.

    The file path will be instance/cellmap.log. Retains a few backups to avoid growth.
    """
    log_dir = app.instance_path
    try:
        os.makedirs(log_dir, exist_ok=True)
    except OSError:
        pass
    log_path = os.path.join(log_dir, "cellmap.log")

    root = logging.getLogger()
    root.setLevel(level)

    file_handler = RotatingFileHandler(log_path, maxBytes=1_000_000, backupCount=3)
    file_handler.setLevel(level)
    file_handler.setFormatter(logging.Formatter(LOG_FORMAT))

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
