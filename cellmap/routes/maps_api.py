"""
project: Cellmap
module: maps_api.py
License: MIT

Map template listing and generation routes.

Generated maps are JSON: grid size, the ordered cell list with per-side door
flags, the start/end cell positions, the direct path and the extra links.
"""

import hashlib
import random
import threading

from flask import Blueprint, current_app, jsonify, request

from cellmap.logging_utils import get_logger
from cellmap.mapgen import (
    GenerationFailed,
    GeneratorConfig,
    TemplateError,
    TemplateNotFound,
    find_template,
    list_templates,
    make_generator,
)

bp_maps = Blueprint("maps", __name__)
log = get_logger("maps")

SEED_MAX_INT = 2**31 - 1

# Simple in-process cache (root,name,seed)->GeneratedMap. Thread-safe with a lock because the dev server may
# serve requests from several threads.
_map_cache = {}
_map_cache_lock = threading.Lock()


def coerce_seed(payload_seed):
    """Convert provided seed (int or str) into a bounded non-negative int."""
    if payload_seed is None:
        return random.randint(1, 1_000_000)
    if isinstance(payload_seed, int):
        return payload_seed % SEED_MAX_INT
    if isinstance(payload_seed, str):
        s = payload_seed.strip()
        if not s:
            return random.randint(1, 1_000_000)
        if s.isdecimal():
            return int(s) % SEED_MAX_INT
        h = hashlib.sha256(s.encode("utf-8")).digest()
        return int.from_bytes(h[:8], "big") % SEED_MAX_INT
    return random.randint(1, 1_000_000)


def get_cached_map(name: str, seed: int):
    cfg = current_app.config
    root = cfg["CELLMAP_TEMPLATE_DIR"]

    def _generate():
        template = find_template(root, name)
        generator = make_generator(template, GeneratorConfig(max_attempts=cfg["CELLMAP_MAX_ATTEMPTS"]))
        return generator.generate(seed)

    if cfg.get("CELLMAP_DISABLE_CACHE"):
        return _generate()
    key = (root, name, seed)
    with _map_cache_lock:
        generated = _map_cache.get(key)
    if generated is not None:
        return generated
    generated = _generate()
    with _map_cache_lock:
        _map_cache[key] = generated
        while len(_map_cache) > max(1, cfg["CELLMAP_CACHE_SIZE"]):
            _map_cache.pop(next(iter(_map_cache)))
    return generated


def clear_cache():
    with _map_cache_lock:
        _map_cache.clear()


def _generate_or_error(name: str):
    seed = coerce_seed(request.args.get("seed"))
    try:
        return get_cached_map(name, seed), None
    except TemplateNotFound:
        return None, (jsonify({"error": f"unknown template: {name}"}), 404)
    except TemplateError as exc:
        log.warn("template_error", template=name, error=str(exc))
        return None, (jsonify({"error": str(exc)}), 400)
    except GenerationFailed as exc:
        log.warn("generation_failed", template=name, seed=seed, attempts=exc.attempts)
        return None, (jsonify({"error": str(exc), "seed": seed, "attempts": exc.attempts}), 422)


@bp_maps.route("/api/maps")
def templates_index():
    """Response: { 'templates': [<name>, ...], 'default': <name> }"""
    cfg = current_app.config
    return jsonify({"templates": list_templates(cfg["CELLMAP_TEMPLATE_DIR"]), "default": cfg["CELLMAP_DEFAULT_TEMPLATE"]})


@bp_maps.route("/api/maps/default")
def default_map():
    return map_detail(current_app.config["CELLMAP_DEFAULT_TEMPLATE"])


@bp_maps.route("/api/maps/<name>")
def map_detail(name):
    """Generate (or fetch from cache) the map for ``name`` and ``?seed=``."""
    generated, error = _generate_or_error(name)
    if error:
        return error
    log.info("map_served", template=name, seed=generated.seed, cells=len(generated.cells))
    return jsonify(generated.to_dict())


@bp_maps.route("/api/maps/<name>/metrics")
def map_metrics(name):
    generated, error = _generate_or_error(name)
    if error:
        return error
    return jsonify({"seed": generated.seed, "used_seed": generated.used_seed, "metrics": generated.metrics})
