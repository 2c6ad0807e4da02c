from cellmap.mapgen.graph import are_adjacent, build_neighbors
from map_test_utils import cell, packed_grid


def test_side_by_side_cells_are_neighbors():
    a, b = cell(0, 0, 2, 3, 0), cell(2, 1, 2, 4, 1)
    assert are_adjacent(a, b) and are_adjacent(b, a)


def test_stacked_cells_are_neighbors():
    a, b = cell(0, 0, 3, 2, 0), cell(2, 2, 1, 1, 1)
    assert are_adjacent(a, b) and are_adjacent(b, a)


def test_corner_contact_is_not_adjacency():
    a, b = cell(0, 0, 1, 1, 0), cell(1, 1, 1, 1, 1)
    assert not are_adjacent(a, b)


def test_gap_between_cells_is_not_adjacency():
    a, b = cell(0, 0, 2, 2, 0), cell(3, 0, 2, 2, 1)
    assert not are_adjacent(a, b)


def test_relation_is_symmetric_and_never_reflexive():
    result = packed_grid(12, 9, [(1, 1), (2, 3), (1, 2)], seed=4)
    cells = result.cells
    for c in cells:
        assert c.index not in c.neighbors
        for n in c.neighbors:
            assert c.index in cells[n].neighbors


def test_grid_of_squares_has_four_neighbor_lattice():
    result = packed_grid(10, 10, [(2, 2)])
    cells = result.cells
    corner = cells[0]
    assert sorted(corner.neighbors) == [1, 5]
    middle = cells[12]  # (4,4)
    assert sorted(middle.neighbors) == [7, 11, 13, 17]


def test_build_neighbors_counts_directed_links():
    cells = [cell(0, 0, 4, 4, 0), cell(4, 0, 4, 4, 1)]
    assert build_neighbors(cells) == 2
    assert cells[0].neighbors == [1]
    assert cells[1].neighbors == [0]
