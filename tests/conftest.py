import os
import sys

import pytest

# Ensure repository root importable early
ROOT_DIR = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))
if ROOT_DIR not in sys.path:
    sys.path.insert(0, ROOT_DIR)

from cellmap import create_app  # noqa: E402
from cellmap.routes.maps_api import clear_cache  # noqa: E402

TEMPLATE_DIR = os.path.join(ROOT_DIR, "data", "maps")


@pytest.fixture()
def template_dir():
    return TEMPLATE_DIR


@pytest.fixture()
def test_app(template_dir):
    app = create_app(
        {
            "TESTING": True,
            "CELLMAP_TEMPLATE_DIR": template_dir,
            "CELLMAP_DEFAULT_TEMPLATE": "crypt",
            "CELLMAP_DISABLE_CACHE": False,
            "CELLMAP_CACHE_SIZE": 4,
        }
    )
    clear_cache()
    yield app
    clear_cache()


@pytest.fixture()
def client(test_app):
    return test_app.test_client()


@pytest.fixture
def write_template(tmp_path):
    """Write a template directory under tmp_path and return the template root.

    ``cells`` maps file stem -> JSON body (dict) for each cell*.json file.
    """
    import json

    def _write(name, definition, cells):
        root = tmp_path / "maps"
        tdir = root / name
        tdir.mkdir(parents=True, exist_ok=True)
        (tdir / "def.json").write_text(json.dumps(definition), encoding="utf-8")
        for stem, body in cells.items():
            (tdir / f"{stem}.json").write_text(json.dumps(body), encoding="utf-8")
        return root

    return _write
