import random

import pytest

from cellmap.mapgen import GeneratorConfig
from cellmap.mapgen.connectivity import draw_count, expand, path_edges
from cellmap.mapgen.graph import build_neighbors
from cellmap.mapgen.pathfinding import shortest_path
from map_test_utils import cell, packed_grid


def test_draw_count_bounds():
    rng = random.Random(2)
    for _ in range(100):
        assert 6 <= draw_count(rng, 100, (15, 5)) < 20
    # empty range falls back to the lower bound
    assert draw_count(rng, 1, (15, 5)) == 0
    assert draw_count(rng, 30, (15, 15)) == 2


def test_path_edges():
    assert path_edges([4, 7, 9]) == [(4, 7), (7, 9)]
    assert path_edges([3]) == []


@pytest.mark.parametrize("seed", [1, 5, 9, 13])
def test_expansion_properties(seed):
    packed = packed_grid(14, 14, [(1, 1), (2, 2), (1, 2)], seed=seed, start=(0, 0), end=(13, 13))
    cells = packed.cells
    route = shortest_path(cells, packed.start_index, packed.end_index)
    expansion = expand(cells, route.path, 14 * 14, random.Random(seed))

    selected = expansion.selected
    assert selected[: len(route.path)] == route.path
    assert len(set(selected)) == len(selected)
    assert packed.start_index in selected and packed.end_index in selected

    tree = {frozenset(e) for e in path_edges(route.path)}
    seen = set()
    for a, b in expansion.extra_links:
        key = frozenset((a, b))
        assert a != b
        assert b in cells[a].neighbors
        assert key not in tree
        assert key not in seen
        seen.add(key)

    # recruits: every non-path cell was linked from an already selected cell
    recruit_links = expansion.extra_links[: expansion.recruited]
    assert [b for _a, b in recruit_links] == selected[len(route.path):]
    for a, b in recruit_links:
        assert selected.index(a) < selected.index(b)
    assert expansion.recruited <= expansion.rooms_requested
    assert expansion.links_added <= expansion.links_requested


def test_saturated_graph_stops_instead_of_looping():
    cells = [cell(0, 0, 4, 4, 0), cell(4, 0, 4, 4, 1)]
    build_neighbors(cells)
    config = GeneratorConfig(recruit_retry_limit=10, link_retry_limit=10)
    expansion = expand(cells, [0, 1], 600, random.Random(0), config)
    assert expansion.selected == [0, 1]
    assert expansion.extra_links == []
    assert expansion.rooms_requested >= 40
    assert expansion.links_requested >= 10


def test_isolated_single_cell():
    cells = [cell(0, 0, 1, 1, 0)]
    expansion = expand(cells, [0], 1, random.Random(0))
    assert expansion.selected == [0]
    assert expansion.extra_links == []
