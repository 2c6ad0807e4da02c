"""Grid packing: carve a bounded grid into non-overlapping catalog-sized cells."""
from __future__ import annotations

import random
from typing import List, NamedTuple, Optional

from .catalog import SizeCatalog
from .cells import Coord2D, WorkingCell

EMPTY = -1


class PackResult(NamedTuple):
    cells: List[WorkingCell]
    start_index: Optional[int]
    end_index: Optional[int]
    occupancy: List[List[int]]

    @property
    def gap_units(self) -> int:
        return sum(1 for column in self.occupancy for idx in column if idx == EMPTY)


def _randrange_or_low(rng: random.Random, lo: int, hi: int) -> int:
    return rng.randrange(lo, hi) if hi > lo else lo


def draw_endpoints(width: int, height: int, rng: random.Random):
    """Provisional start point near the top-left corner and end point near the bottom-right one."""
    start = (_randrange_or_low(rng, 0, width // 6), _randrange_or_low(rng, 0, height // 6))
    end = (_randrange_or_low(rng, width * 5 // 6, width), _randrange_or_low(rng, height * 5 // 6, height))
    return start, end


def _free_run(occupancy, x: int, y: int, dx: int, dy: int, cap: int, limit: int) -> int:
    run = 0
    while run < cap and run < limit and occupancy[x + dx * run][y + dy * run] == EMPTY:
        run += 1
    return run


def pack_cells(
    width: int,
    height: int,
    catalog: SizeCatalog,
    rng: random.Random,
    start_point: Coord2D,
    end_point: Coord2D,
) -> PackResult:
    """Fill the grid column by column with cells whose footprint is in ``catalog``.

    Positions whose free run fits no footprint stay empty. Cells only ever
    extend right and down from an uncovered position and every earlier cell
    lies in a column to the left or above in the same column, so checking the
    first row and first column of the candidate is enough to rule out overlap.
    """
    occupancy = [[EMPTY for _ in range(height)] for _ in range(width)]
    cells: List[WorkingCell] = []
    start_index = end_index = None
    cap = catalog.max_dimension

    for x in range(width):
        y = 0
        while y < height:
            if occupancy[x][y] != EMPTY:
                y += 1
                continue
            run_x = _free_run(occupancy, x, y, 1, 0, cap, width - x)
            run_y = _free_run(occupancy, x, y, 0, 1, cap, height - y)
            candidates = catalog.fitting(run_x, run_y) if run_x and run_y else []
            if not candidates:
                y += 1
                continue
            w, h = candidates[rng.randrange(len(candidates))]
            cell = WorkingCell(x, y, w, h, index=len(cells), cost=rng.random())
            for ux, uy in cell.units():
                occupancy[ux][uy] = cell.index
            cells.append(cell)
            if cell.contains(*start_point):
                start_index = cell.index
            if cell.contains(*end_point):
                end_index = cell.index
            y += h
    return PackResult(cells, start_index, end_index, occupancy)


__all__ = ["PackResult", "pack_cells", "draw_endpoints", "EMPTY"]
