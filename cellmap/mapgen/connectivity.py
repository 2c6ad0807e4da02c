"""Grow the direct path into a branching map.

Two passes share the generator's RNG:

* recruitment pulls unselected neighbors of random selected cells into the
  map, linking each recruit to the cell that pulled it;
* augmentation adds extra links between cells that are already selected.

Both passes give up on a round after a bounded number of misses, so small or
saturated graphs produce fewer extras instead of spinning forever.
"""
from __future__ import annotations

import logging
import random
from dataclasses import dataclass, field
from typing import FrozenSet, List, Set, Tuple

from .cells import WorkingCell
from .config import GeneratorConfig

logger = logging.getLogger(__name__)

Link = Tuple[int, int]


def draw_count(rng: random.Random, area: int, divisors: Tuple[int, int]) -> int:
    lo, hi = area // divisors[0], area // divisors[1]
    return rng.randrange(lo, hi) if hi > lo else lo


def path_edges(path: List[int]) -> List[Link]:
    return list(zip(path, path[1:]))


@dataclass
class Expansion:
    selected: List[int]
    extra_links: List[Link] = field(default_factory=list)
    rooms_requested: int = 0
    links_requested: int = 0
    recruited: int = 0

    @property
    def links_added(self) -> int:
        return len(self.extra_links) - self.recruited


def _pair(a: int, b: int) -> FrozenSet[int]:
    return frozenset((a, b))


def recruit_rooms(cells: List[WorkingCell], expansion: Expansion, selected_set: Set[int],
                  count: int, rng: random.Random, retry_limit: int) -> None:
    selected = expansion.selected
    for _ in range(count):
        for _attempt in range(retry_limit):
            source = selected[rng.randrange(len(selected))]
            candidates = sorted({n for n in cells[source].neighbors if n not in selected_set})
            if candidates:
                recruit = candidates[rng.randrange(len(candidates))]
                expansion.extra_links.append((source, recruit))
                selected.append(recruit)
                selected_set.add(recruit)
                expansion.recruited += 1
                break
        else:
            logger.debug("Room recruitment stopped after %d of %d rooms", expansion.recruited, count)
            return


def add_extra_links(cells: List[WorkingCell], expansion: Expansion, selected_set: Set[int],
                    tree_edges: List[Link], count: int, rng: random.Random, retry_limit: int) -> None:
    selected = expansion.selected
    taken = {_pair(a, b) for a, b in tree_edges}
    taken.update(_pair(a, b) for a, b in expansion.extra_links)
    added = 0
    for _ in range(count):
        for _attempt in range(retry_limit):
            c1 = selected[rng.randrange(len(selected))]
            neighbors = cells[c1].neighbors
            if not neighbors:
                continue
            c2 = neighbors[rng.randrange(len(neighbors))]
            key = _pair(c1, c2)
            if c1 != c2 and c2 in selected_set and key not in taken:
                expansion.extra_links.append((c1, c2))
                taken.add(key)
                added += 1
                break
        else:
            logger.debug("Extra linking stopped after %d of %d links", added, count)
            return


def expand(cells: List[WorkingCell], path: List[int], area: int, rng: random.Random,
           config: GeneratorConfig | None = None) -> Expansion:
    """Select the direct path plus extra rooms, and collect the extra links between them."""
    config = config or GeneratorConfig()
    expansion = Expansion(selected=list(path))
    selected_set = set(path)

    expansion.rooms_requested = draw_count(rng, area, config.recruit_divisors)
    recruit_rooms(cells, expansion, selected_set, expansion.rooms_requested, rng, config.recruit_retry_limit)

    expansion.links_requested = draw_count(rng, area, config.link_divisors)
    add_extra_links(cells, expansion, selected_set, path_edges(path), expansion.links_requested, rng,
                    config.link_retry_limit)
    return expansion


__all__ = ["Expansion", "expand", "draw_count", "path_edges", "recruit_rooms", "add_extra_links"]
