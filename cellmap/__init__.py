"""
project: Cellmap
module: __init__.py
License: MIT

Flask application factory.

Configuration is sourced from environment variables (optionally via a local
``.env`` file) with development defaults. A local ``instance/`` directory holds
runtime data such as the log file.
"""

import logging
import os
import uuid

from dotenv import load_dotenv
from flask import Flask, jsonify
from werkzeug.exceptions import HTTPException

# Load .env if present so CELLMAP_* settings can be supplied without exporting
# shell variables during development.
load_dotenv()

__version__ = "0.4.0"


def _env_flag(name: str, default: str = "0") -> bool:
    return os.getenv(name, default).lower() in ("1", "true", "yes", "on")


def create_app(overrides: dict | None = None) -> Flask:
    """Build the Flask app with the map blueprint registered.

    ``overrides`` is applied last, after environment defaults, so tests can
    point the app at a temporary template directory.
    """
    app = Flask(__name__, instance_relative_config=True)

    try:
        os.makedirs(app.instance_path, exist_ok=True)
    except OSError:
        # Read-only installs still serve maps; only file logging needs it.
        pass

    app.config.update(
        CELLMAP_TEMPLATE_DIR=os.getenv("CELLMAP_TEMPLATE_DIR", "data/maps"),
        CELLMAP_DEFAULT_TEMPLATE=os.getenv("CELLMAP_DEFAULT_TEMPLATE", "crypt"),
        CELLMAP_MAX_ATTEMPTS=int(os.getenv("CELLMAP_MAX_ATTEMPTS", "8")),
        CELLMAP_DISABLE_CACHE=_env_flag("CELLMAP_DISABLE_CACHE"),
        CELLMAP_CACHE_SIZE=int(os.getenv("CELLMAP_CACHE_SIZE", "8")),
    )
    if overrides:
        app.config.update(overrides)

    from cellmap.routes.maps_api import bp_maps

    app.register_blueprint(bp_maps)

    @app.errorhandler(HTTPException)
    def http_error(e):
        return jsonify({"error": e.description}), e.code

    # Error handling: log details, return a short id the caller can quote
    @app.errorhandler(500)
    def internal_error(e):
        error_id = uuid.uuid4().hex[:8]
        logging.exception("Unhandled exception (id=%s)", error_id)
        return jsonify({"error": "internal error", "error_id": error_id}), 500

    return app
