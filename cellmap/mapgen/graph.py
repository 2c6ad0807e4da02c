"""Neighbor graph: cells that share a wall segment of positive length."""
from __future__ import annotations

from typing import List

from .cells import WorkingCell


def _spans_overlap(a_start: int, a_len: int, b_start: int, b_len: int) -> bool:
    return a_start <= b_start <= a_start + a_len - 1 or b_start <= a_start <= b_start + b_len - 1


def are_adjacent(a: WorkingCell, b: WorkingCell) -> bool:
    if (b.x + b.width == a.x or a.x + a.width == b.x) and _spans_overlap(a.y, a.height, b.y, b.height):
        return True
    if (b.y + b.height == a.y or a.y + a.height == b.y) and _spans_overlap(a.x, a.width, b.x, b.width):
        return True
    return False


def build_neighbors(cells: List[WorkingCell]) -> int:
    """Append neighbor indices to every cell; returns the number of (directed) links.

    Each adjacency is found once from each side. Lists are not deduplicated.
    """
    links = 0
    for cell in cells:
        for other in cells:
            if other.index != cell.index and are_adjacent(cell, other):
                cell.neighbors.append(other.index)
                links += 1
    return links


__all__ = ["are_adjacent", "build_neighbors"]
