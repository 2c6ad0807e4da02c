"""Weighted shortest path between the start and end cells.

Plain Dijkstra with a linear scan for the next cell; maps hold at most a few
hundred cells so the O(n^2) selection is fine. Routing into a cell costs that
cell's ``cost``.
"""
from __future__ import annotations

import math
from typing import List, NamedTuple, Optional

from .cells import WorkingCell
from .errors import UnreachableEndError


class PathResult(NamedTuple):
    path: List[int]
    distance: List[float]
    predecessor: List[Optional[int]]

    @property
    def cost(self) -> float:
        return self.distance[self.path[-1]]


def shortest_path(cells: List[WorkingCell], start: int, end: int) -> PathResult:
    count = len(cells)
    distance = [math.inf] * count
    distance[start] = 0.0
    predecessor: List[Optional[int]] = [None] * count
    visited = [False] * count
    remaining = count

    while remaining and not visited[end]:
        current = None
        best = math.inf
        for idx in range(count):
            if not visited[idx] and distance[idx] < best:
                current, best = idx, distance[idx]
        if current is None:
            # everything left is disconnected from start
            break
        for neighbor in cells[current].neighbors:
            if visited[neighbor]:
                continue
            through = distance[current] + cells[neighbor].cost
            if through < distance[neighbor]:
                distance[neighbor] = through
                predecessor[neighbor] = current
        visited[current] = True
        remaining -= 1

    return PathResult(reconstruct_path(predecessor, start, end), distance, predecessor)


def reconstruct_path(predecessor: List[Optional[int]], start: int, end: int) -> List[int]:
    """Walk predecessors back from ``end``; the chain must terminate at ``start``."""
    path = [end]
    seen = {end}
    node = end
    while node != start:
        node = predecessor[node]
        if node is None or node in seen:
            raise UnreachableEndError(f"cell {end} is not reachable from cell {start}")
        path.append(node)
        seen.add(node)
    path.reverse()
    return path


__all__ = ["PathResult", "shortest_path", "reconstruct_path"]
