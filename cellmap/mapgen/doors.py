"""Door placement: one opening per accepted edge, on the wall the two cells share.

Door masks are rebuilt from scratch on every call; the working cells are never
touched, so planning the same edges with an identically seeded RNG gives the
same doors.
"""
from __future__ import annotations

import random
from typing import Dict, Iterable, List, Tuple

from .cells import EAST, NORTH, SIDES, SOUTH, WEST, DoorMask, MapCell, WorkingCell
from .errors import NotAdjacentError

Link = Tuple[int, int]


def shared_span(start1: int, len1: int, start2: int, len2: int) -> Tuple[int, int, int]:
    """Overlap of two wall spans as ``(offset in first, offset in second, length)``.

    Covers all four containment cases: first contains second, second contains
    first, and partial overlap from either side.
    """
    lo = max(start1, start2)
    hi = min(start1 + len1, start2 + len2)
    return lo - start1, lo - start2, hi - lo


def place_door(c1: WorkingCell, c2: WorkingCell, masks: Dict[int, Dict[str, int]], rng: random.Random):
    """Place a single door between ``c1`` and ``c2``; returns ``(side, offset)`` on the west/north cell."""
    if c1.x > c2.x:
        c1, c2 = c2, c1
    if c1.x + c1.width == c2.x:
        offset1, offset2, length = shared_span(c1.y, c1.height, c2.y, c2.height)
        if length <= 0:
            raise NotAdjacentError(f"cells {c1.index} and {c2.index} touch at a corner only")
        door = rng.randrange(length)
        masks[c1.index][EAST] |= 1 << (offset1 + door)
        masks[c2.index][WEST] |= 1 << (offset2 + door)
        return EAST, offset1 + door

    if c1.y > c2.y:
        c1, c2 = c2, c1
    if c1.y + c1.height == c2.y:
        offset1, offset2, length = shared_span(c1.x, c1.width, c2.x, c2.width)
        if length <= 0:
            raise NotAdjacentError(f"cells {c1.index} and {c2.index} touch at a corner only")
        door = rng.randrange(length)
        masks[c1.index][SOUTH] |= 1 << (offset1 + door)
        masks[c2.index][NORTH] |= 1 << (offset2 + door)
        return SOUTH, offset1 + door

    raise NotAdjacentError(f"cells {c1.index} and {c2.index} share no wall")


def plan_doors(cells: List[WorkingCell], edges: Iterable[Link], rng: random.Random) -> Dict[int, Dict[str, int]]:
    """Door bits per cell index and side, for every cell touched by ``edges``."""
    masks: Dict[int, Dict[str, int]] = {}
    for a, b in edges:
        for idx in (a, b):
            if idx not in masks:
                masks[idx] = dict.fromkeys(SIDES, 0)
        place_door(cells[a], cells[b], masks, rng)
    return masks


def to_map_cell(cell: WorkingCell, masks: Dict[str, int] | None = None) -> MapCell:
    masks = masks or {}
    return MapCell(
        x=cell.x,
        y=cell.y,
        width=cell.width,
        height=cell.height,
        doors_north=DoorMask(cell.width, masks.get(NORTH, 0)),
        doors_south=DoorMask(cell.width, masks.get(SOUTH, 0)),
        doors_east=DoorMask(cell.height, masks.get(EAST, 0)),
        doors_west=DoorMask(cell.height, masks.get(WEST, 0)),
    )


__all__ = ["shared_span", "place_door", "plan_doors", "to_map_cell"]
