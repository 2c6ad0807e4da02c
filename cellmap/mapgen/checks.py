"""Structural checks over an emitted cell list.

Used by the test-suite and ``scripts/diagnose_seeds.py``. Nothing here is
needed to generate a map.
"""
from __future__ import annotations

from collections import deque
from typing import Dict, Iterable, List, Optional, Set, Tuple

from .cells import EAST, NORTH, OPPOSITE, SIDES, SOUTH, WEST, Coord2D, MapCell


def unit_owner(cells: List[MapCell]) -> Dict[Coord2D, int]:
    owner: Dict[Coord2D, int] = {}
    for idx, cell in enumerate(cells):
        for unit in cell.units():
            owner.setdefault(unit, idx)
    return owner


def find_overlaps(cells: List[MapCell]) -> List[Tuple[int, int]]:
    seen: Dict[Coord2D, int] = {}
    overlaps: Set[Tuple[int, int]] = set()
    for idx, cell in enumerate(cells):
        for unit in cell.units():
            other = seen.get(unit)
            if other is not None:
                overlaps.add((other, idx))
            else:
                seen[unit] = idx
    return sorted(overlaps)


def _door_units(cell: MapCell, side: str, offset: int) -> Tuple[Coord2D, Coord2D]:
    """Unit just inside the door and the unit just outside it."""
    if side == NORTH:
        return (cell.x + offset, cell.y), (cell.x + offset, cell.y - 1)
    if side == SOUTH:
        return (cell.x + offset, cell.y + cell.height - 1), (cell.x + offset, cell.y + cell.height)
    if side == WEST:
        return (cell.x, cell.y + offset), (cell.x - 1, cell.y + offset)
    return (cell.x + cell.width - 1, cell.y + offset), (cell.x + cell.width, cell.y + offset)


def _offset_on(cell: MapCell, side: str, unit: Coord2D) -> int:
    return unit[0] - cell.x if side in (NORTH, SOUTH) else unit[1] - cell.y


def iter_doors(cells: List[MapCell], owner: Optional[Dict[Coord2D, int]] = None):
    """Yield ``(cell_index, side, offset, facing_index_or_None, facing_offset)`` for every door bit."""
    owner = owner if owner is not None else unit_owner(cells)
    for idx, cell in enumerate(cells):
        for side in SIDES:
            for offset in cell.doors(side).offsets():
                _inside, outside = _door_units(cell, side, offset)
                facing = owner.get(outside)
                facing_offset = _offset_on(cells[facing], OPPOSITE[side], outside) if facing is not None else -1
                yield idx, side, offset, facing, facing_offset


def unmatched_doors(cells: List[MapCell]) -> List[Tuple[int, str, int]]:
    """Door bits with no mirrored bit on the facing cell."""
    bad = []
    for idx, side, offset, facing, facing_offset in iter_doors(cells):
        if facing is None or not cells[facing].doors(OPPOSITE[side])[facing_offset]:
            bad.append((idx, side, offset))
    return bad


def door_graph(cells: List[MapCell]) -> Dict[int, Set[int]]:
    graph: Dict[int, Set[int]] = {idx: set() for idx in range(len(cells))}
    for idx, _side, _offset, facing, _facing_offset in iter_doors(cells):
        if facing is not None:
            graph[idx].add(facing)
    return graph


def reachable_from(cells: List[MapCell], start: int) -> Set[int]:
    graph = door_graph(cells)
    seen = {start}
    queue = deque([start])
    while queue:
        current = queue.popleft()
        for nxt in graph[current]:
            if nxt not in seen:
                seen.add(nxt)
                queue.append(nxt)
    return seen


def off_catalog(cells: Iterable[MapCell], catalog) -> List[int]:
    return [idx for idx, cell in enumerate(cells) if (cell.width, cell.height) not in catalog]


def analyze(generated) -> Dict[str, list]:
    cells = generated.cells
    reachable = reachable_from(cells, generated.start) if cells else set()
    return {
        "overlaps": find_overlaps(cells),
        "unmatched_doors": unmatched_doors(cells),
        "unreachable_cells": sorted(set(range(len(cells))) - reachable),
        "off_catalog": off_catalog(cells, generated.catalog),
    }


__all__ = [
    "find_overlaps",
    "unmatched_doors",
    "door_graph",
    "reachable_from",
    "off_catalog",
    "iter_doors",
    "analyze",
]
