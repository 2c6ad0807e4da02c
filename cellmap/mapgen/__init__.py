"""Public map generation interface."""

from .catalog import SizeCatalog
from .cells import EAST, NORTH, SIDES, SOUTH, WEST, DoorMask, MapCell, WorkingCell
from .config import GeneratorConfig
from .errors import (
    GenerationError,
    GenerationFailed,
    MapGenError,
    NotAdjacentError,
    StartPointUncovered,
    TemplateError,
    TemplateNotFound,
    UnreachableEndError,
)
from .pipeline import GENERATORS, GeneratedMap, RoomGenerator, generate_map, make_generator
from .templates import CellTemplate, IncRange, MapTemplate, find_template, list_templates, load_template

__all__ = [
    "SizeCatalog",
    "DoorMask",
    "MapCell",
    "WorkingCell",
    "NORTH",
    "SOUTH",
    "EAST",
    "WEST",
    "SIDES",
    "GeneratorConfig",
    "MapGenError",
    "TemplateError",
    "TemplateNotFound",
    "GenerationError",
    "StartPointUncovered",
    "UnreachableEndError",
    "GenerationFailed",
    "NotAdjacentError",
    "GENERATORS",
    "GeneratedMap",
    "RoomGenerator",
    "generate_map",
    "make_generator",
    "CellTemplate",
    "IncRange",
    "MapTemplate",
    "find_template",
    "list_templates",
    "load_template",
]
