import pytest

from cellmap.mapgen import UnreachableEndError
from cellmap.mapgen.graph import are_adjacent
from cellmap.mapgen.pathfinding import reconstruct_path, shortest_path
from map_test_utils import cell, packed_grid


def _diamond():
    # 0 -> {1 (expensive), 2 (cheap)} -> 3
    cells = [cell(0, 0, 1, 1, 0, 0.1), cell(1, 0, 1, 1, 1, 5.0), cell(0, 1, 1, 1, 2, 1.0), cell(1, 1, 1, 1, 3, 1.0)]
    cells[0].neighbors = [1, 2]
    cells[1].neighbors = [0, 3]
    cells[2].neighbors = [0, 3]
    cells[3].neighbors = [1, 2]
    return cells


def test_prefers_cheaper_route():
    result = shortest_path(_diamond(), 0, 3)
    assert result.path == [0, 2, 3]
    assert result.cost == pytest.approx(2.0)
    assert result.predecessor[3] == 2


def test_start_equals_end():
    cells = [cell(0, 0, 1, 1, 0)]
    result = shortest_path(cells, 0, 0)
    assert result.path == [0]
    assert result.cost == 0


def test_corner_to_corner_on_square_lattice():
    packed = packed_grid(10, 10, [(2, 2)], seed=21, start=(0, 0), end=(9, 9))
    cells = packed.cells
    result = shortest_path(cells, packed.start_index, packed.end_index)
    path = result.path
    assert path[0] == packed.start_index == 0
    assert path[-1] == packed.end_index == 24
    assert (cells[path[0]].x, cells[path[0]].y) == (0, 0)
    assert (cells[path[-1]].x, cells[path[-1]].y) == (8, 8)
    # manhattan distance 4+4 steps between lattice corners
    assert len(path) >= 9
    assert len(set(path)) == len(path)
    for a, b in zip(path, path[1:]):
        assert are_adjacent(cells[a], cells[b])
        assert result.distance[a] <= result.distance[b]
        assert result.distance[b] == pytest.approx(result.distance[a] + cells[b].cost)


def test_disconnected_end_raises():
    cells = [cell(0, 0, 1, 1, 0), cell(5, 5, 1, 1, 1)]
    with pytest.raises(UnreachableEndError):
        shortest_path(cells, 0, 1)


def test_reconstruct_rejects_cycles():
    with pytest.raises(UnreachableEndError):
        reconstruct_path([None, 2, 1], start=0, end=1)


def test_reconstruct_walks_back_to_start():
    assert reconstruct_path([None, 0, 1, 2], start=0, end=3) == [0, 1, 2, 3]
