"""Map template loading.

A template is a directory holding a ``def.json`` describing the map and one
``cell*.json`` per allowed cell footprint::

    data/maps/crypt/def.json     {"name": "Crypt", "generator": "room", "width": "18-24", "height": "18-24"}
    data/maps/crypt/cell1x1.json {"size": "1x1", "weight": 0.5}
    data/maps/crypt/cell2x3.json {"size": "2x3", "doors": [true, ...]}

Keys are matched case-insensitively and ``maximum_count`` may also be written
``maximumCount``. Files may carry ``//`` or ``/* */`` comments and trailing
commas.
"""
from __future__ import annotations

import json
import random
import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, NamedTuple, Optional, Tuple

from .catalog import SizeCatalog
from .errors import TemplateError, TemplateNotFound

_RANGE_RE = re.compile(r"^\s*(\d+)\s*(?:-\s*(\d+)\s*)?$")
_SIZE_RE = re.compile(r"^\s*(\d+)\s*[xX]\s*(\d+)\s*$")
# String literals are matched first so comment markers inside them survive.
_COMMENT_RE = re.compile(r'("(?:\\.|[^"\\])*")|//[^\n]*|/\*.*?\*/', re.DOTALL)
_TRAILING_COMMA_RE = re.compile(r'("(?:\\.|[^"\\])*")|,(?=\s*[}\]])')


def _as_int(value: Any, what: str) -> int:
    if isinstance(value, bool):
        raise TemplateError(f"invalid {what}: {value!r}")
    try:
        return int(value)
    except (TypeError, ValueError) as exc:
        raise TemplateError(f"invalid {what}: {value!r}") from exc


class IncRange(NamedTuple):
    """Inclusive integer range."""

    start: int
    end: int

    def draw(self, rng: random.Random) -> int:
        return rng.randint(self.start, self.end)

    @classmethod
    def parse(cls, value: Any) -> "IncRange":
        if isinstance(value, bool):
            raise TemplateError(f"invalid range: {value!r}")
        if isinstance(value, int):
            start = end = value
        elif isinstance(value, (list, tuple)) and len(value) == 2:
            start, end = _as_int(value[0], "range"), _as_int(value[1], "range")
        elif isinstance(value, str):
            m = _RANGE_RE.match(value)
            if not m:
                raise TemplateError(f"invalid range: {value!r}")
            start = int(m.group(1))
            end = int(m.group(2)) if m.group(2) is not None else start
        else:
            raise TemplateError(f"invalid range: {value!r}")
        if start < 1 or end < start:
            raise TemplateError(f"invalid range: {value!r}")
        return cls(start, end)


def parse_size(value: Any) -> Tuple[int, int]:
    if isinstance(value, str):
        m = _SIZE_RE.match(value)
        if not m:
            raise TemplateError(f"invalid cell size: {value!r}")
        w, h = int(m.group(1)), int(m.group(2))
    elif isinstance(value, (list, tuple)) and len(value) == 2:
        w, h = _as_int(value[0], "cell size"), _as_int(value[1], "cell size")
    else:
        raise TemplateError(f"invalid cell size: {value!r}")
    if w < 1 or h < 1:
        raise TemplateError(f"invalid cell size: {value!r}")
    return w, h


@dataclass
class CellTemplate:
    name: str
    size: Tuple[int, int]
    weight: float = 1.0
    maximum_count: Optional[int] = None
    doors: Optional[List[bool]] = None

    def __post_init__(self):
        w, h = self.size
        if self.weight < 0:
            raise TemplateError(f"{self.name}: weight must be non-negative")
        if self.maximum_count is not None and self.maximum_count < 0:
            raise TemplateError(f"{self.name}: maximum_count must be non-negative")
        if self.doors is not None and len(self.doors) != 2 * (w + h):
            raise TemplateError(f"{self.name}: doors must list {2 * (w + h)} flags, got {len(self.doors)}")

    # Door eligibility is laid out north, east, south, west around the footprint.
    def door_sides(self) -> Dict[str, List[bool]]:
        w, h = self.size
        doors = self.doors if self.doors is not None else [True] * (2 * (w + h))
        return {
            "north": doors[0:w],
            "east": doors[w:w + h],
            "south": doors[w + h:2 * w + h],
            "west": doors[2 * w + h:2 * w + 2 * h],
        }


@dataclass
class MapTemplate:
    name: str
    width: IncRange
    height: IncRange
    cell_templates: List[CellTemplate] = field(default_factory=list)
    generator: str = "room"

    @property
    def catalog(self) -> SizeCatalog:
        return SizeCatalog.from_templates(self.cell_templates)


def _lower_keys(data: Dict[str, Any]) -> Dict[str, Any]:
    return {k.lower().replace("_", ""): v for k, v in data.items()}


def _strip_relaxed_syntax(text: str) -> str:
    text = _COMMENT_RE.sub(lambda m: m.group(1) or "", text)
    return _TRAILING_COMMA_RE.sub(lambda m: m.group(1) or "", text)


def _read_json(path: Path) -> Dict[str, Any]:
    try:
        text = path.read_text(encoding="utf-8")
        data = json.loads(_strip_relaxed_syntax(text))
    except (json.JSONDecodeError, UnicodeDecodeError) as exc:
        raise TemplateError(f"{path}: {exc}") from exc
    if not isinstance(data, dict):
        raise TemplateError(f"{path}: expected a JSON object")
    return _lower_keys(data)


def cell_template_from_dict(name: str, data: Dict[str, Any]) -> CellTemplate:
    data = _lower_keys(data)
    if "size" not in data:
        raise TemplateError(f"{name}: missing size")
    doors = data.get("doors")
    if doors is not None and not (isinstance(doors, list) and all(isinstance(d, bool) for d in doors)):
        raise TemplateError(f"{name}: doors must be a list of booleans")
    weight = data.get("weight", 1.0)
    if isinstance(weight, bool) or not isinstance(weight, (int, float)):
        raise TemplateError(f"{name}: invalid weight: {weight!r}")
    maximum = data.get("maximumcount")
    return CellTemplate(
        name=name,
        size=parse_size(data["size"]),
        weight=float(weight),
        maximum_count=_as_int(maximum, "maximum_count") if maximum is not None else None,
        doors=list(doors) if doors is not None else None,
    )


def map_template_from_dict(data: Dict[str, Any], cell_templates: List[CellTemplate]) -> MapTemplate:
    data = _lower_keys(data)
    for key in ("width", "height"):
        if key not in data:
            raise TemplateError(f"template missing {key}")
    return MapTemplate(
        name=str(data.get("name", "unnamed")),
        width=IncRange.parse(data["width"]),
        height=IncRange.parse(data["height"]),
        cell_templates=cell_templates,
        generator=str(data.get("generator", "room")).lower(),
    )


def load_template(path) -> MapTemplate:
    """Load the template stored in directory ``path``."""
    root = Path(path)
    def_path = root / "def.json"
    if not def_path.is_file():
        raise TemplateNotFound(f"no template at {root}")
    cells = [
        cell_template_from_dict(cell_path.stem, _read_json(cell_path))
        for cell_path in sorted(root.glob("cell*.json"))
    ]
    if not cells:
        raise TemplateError(f"{root}: no cell*.json templates")
    template = map_template_from_dict(_read_json(def_path), cells)
    if template.name == "unnamed":
        template.name = root.name
    return template


def list_templates(root) -> List[str]:
    base = Path(root)
    if not base.is_dir():
        return []
    return sorted(p.name for p in base.iterdir() if (p / "def.json").is_file())


def find_template(root, name: str) -> MapTemplate:
    # Directory names only; keeps lookups inside the template root.
    if not name or "/" in name or "\\" in name or name.startswith("."):
        raise TemplateNotFound(f"invalid template name: {name!r}")
    return load_template(Path(root) / name)


__all__ = [
    "IncRange",
    "CellTemplate",
    "MapTemplate",
    "parse_size",
    "load_template",
    "list_templates",
    "find_template",
    "cell_template_from_dict",
    "map_template_from_dict",
]
