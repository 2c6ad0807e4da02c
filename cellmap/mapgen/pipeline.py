"""Pipeline orchestration for room-map generation.

Phases, all drawing from one ``random.Random`` per attempt:

    grid size -> start/end points -> packing -> neighbor graph -> shortest path
    -> extra rooms & links -> doors -> emitted cells

Random-dependent failures (a start/end point landing in a packing gap, an end
cell the start cannot reach) are retried with a fresh seed taken from a seed
stream derived from the caller's seed, so a given seed always yields the same
map or the same failure.
"""
from __future__ import annotations

import logging
import random
import time
from dataclasses import dataclass, field
from typing import Any, Dict, Iterator, List, Optional, Tuple, Union

from .catalog import SizeCatalog
from .cells import MapCell
from .config import GeneratorConfig
from .connectivity import expand, path_edges
from .doors import plan_doors, to_map_cell
from .errors import GenerationError, GenerationFailed, StartPointUncovered, TemplateError
from .graph import build_neighbors
from .metrics import init_metrics
from .packing import draw_endpoints, pack_cells
from .pathfinding import shortest_path
from .templates import MapTemplate, find_template

logger = logging.getLogger(__name__)

SEED_BOUND = 2**31 - 1


@dataclass
class GeneratedMap:
    template: str
    seed: int
    used_seed: int
    attempts: int
    width: int
    height: int
    cells: List[MapCell]
    start: int
    end: int
    path: List[int]
    extra_links: List[Tuple[int, int]]
    catalog: SizeCatalog = field(repr=False, compare=False)
    metrics: Dict[str, Any] = field(default_factory=dict, compare=False)

    @property
    def size(self) -> Tuple[int, int]:
        return self.width, self.height

    def to_dict(self) -> Dict[str, Any]:
        return {
            "template": self.template,
            "seed": self.seed,
            "used_seed": self.used_seed,
            "attempts": self.attempts,
            "width": self.width,
            "height": self.height,
            "start": self.start,
            "end": self.end,
            "path": list(self.path),
            "extra_links": [list(link) for link in self.extra_links],
            "cells": [cell.to_dict() for cell in self.cells],
        }


def attempt_seeds(seed: int, attempts: int) -> Iterator[int]:
    stream = random.Random(seed)
    yield seed
    for _ in range(attempts - 1):
        yield stream.randint(0, SEED_BOUND)


class RoomGenerator:
    """Packs a grid with catalog-sized rooms and links them with doors."""

    def __init__(self, template: MapTemplate, config: Optional[GeneratorConfig] = None):
        self.template = template
        self.config = config or GeneratorConfig()
        self.catalog = template.catalog
        if not self.catalog.fits_within(template.width.end, template.height.end):
            raise TemplateError(
                f"{template.name}: no cell size fits within {template.width.end}x{template.height.end}"
            )

    def generate(self, seed: Optional[int] = None) -> GeneratedMap:
        if seed is None:
            seed = random.randint(0, SEED_BOUND)
        last_error: Optional[GenerationError] = None
        for attempt, attempt_seed in enumerate(attempt_seeds(seed, self.config.max_attempts), start=1):
            try:
                generated = self._attempt(seed, attempt_seed, attempt)
            except GenerationError as exc:
                logger.warning("Map %s seed %d attempt %d failed: %s", self.template.name, attempt_seed, attempt, exc)
                last_error = exc
                continue
            logger.info(
                "Generated map %s seed=%d (used %d) size=%dx%d cells=%d path=%d in %dms",
                self.template.name, seed, attempt_seed, generated.width, generated.height,
                len(generated.cells), len(generated.path), generated.metrics["runtime_ms"],
            )
            return generated
        raise GenerationFailed(
            f"{self.template.name}: no valid map after {self.config.max_attempts} attempts ({last_error})",
            attempts=self.config.max_attempts,
        )

    def _attempt(self, seed: int, attempt_seed: int, attempt: int) -> GeneratedMap:
        rng = random.Random(attempt_seed)
        metrics = init_metrics()
        metrics["attempts"] = attempt
        phase_times: Dict[str, int] = {}
        start = time.perf_counter()

        def _phase(label, fn, *a, **k):
            ps = time.perf_counter()
            r = fn(*a, **k)
            phase_times[label] = int((time.perf_counter() - ps) * 1000)
            logger.debug("%s took %dms", label, phase_times[label])
            return r

        width = self.template.width.draw(rng)
        height = self.template.height.draw(rng)
        if not self.catalog.fits_within(width, height):
            raise TemplateError(f"{self.template.name}: no cell size fits within {width}x{height}")
        start_point, end_point = draw_endpoints(width, height, rng)

        packed = _phase("Building the cells", pack_cells, width, height, self.catalog, rng, start_point, end_point)
        if packed.start_index is None or packed.end_index is None:
            raise StartPointUncovered(f"start {start_point} or end {end_point} fell in a gap")
        cells = packed.cells

        _phase("Building the neighbour graph", build_neighbors, cells)
        route = _phase("Running the shortest path search", shortest_path, cells, packed.start_index, packed.end_index)
        expansion = _phase("Selecting cells", expand, cells, route.path, width * height, rng, self.config)
        edges = path_edges(route.path) + expansion.extra_links
        masks = _phase("Adding doors", plan_doors, cells, edges, rng)

        ordered = sorted(expansion.selected)
        position = {idx: pos for pos, idx in enumerate(ordered)}
        map_cells = [to_map_cell(cells[idx], masks.get(idx)) for idx in ordered]

        metrics.update(
            cells_packed=len(cells),
            cells_selected=len(ordered),
            path_length=len(route.path),
            rooms_requested=expansion.rooms_requested,
            rooms_recruited=expansion.recruited,
            links_requested=expansion.links_requested,
            links_added=expansion.links_added,
            doors_placed=len(edges),
            gap_units=packed.gap_units,
            path_cost=route.cost,
        )
        metrics["runtime_ms"] = int((time.perf_counter() - start) * 1000)
        metrics["phase_ms"] = phase_times

        return GeneratedMap(
            template=self.template.name,
            seed=seed,
            used_seed=attempt_seed,
            attempts=attempt,
            width=width,
            height=height,
            cells=map_cells,
            start=position[packed.start_index],
            end=position[packed.end_index],
            path=[position[idx] for idx in route.path],
            extra_links=[(position[a], position[b]) for a, b in expansion.extra_links],
            catalog=self.catalog,
            metrics=metrics,
        )


GENERATORS = {
    "room": RoomGenerator,
}


def make_generator(template: MapTemplate, config: Optional[GeneratorConfig] = None):
    try:
        cls = GENERATORS[template.generator.lower()]
    except KeyError:
        raise TemplateError(f"{template.name}: unknown generator {template.generator!r}") from None
    return cls(template, config)


def generate_map(
    template: Union[MapTemplate, str],
    seed: Optional[int] = None,
    *,
    config: Optional[GeneratorConfig] = None,
    template_root: str = "data/maps",
) -> GeneratedMap:
    """Generate one map from a template object or a template directory name."""
    if isinstance(template, str):
        template = find_template(template_root, template)
    return make_generator(template, config).generate(seed)


__all__ = ["GeneratedMap", "RoomGenerator", "GENERATORS", "make_generator", "generate_map", "attempt_seeds"]
