from collections import deque

import pytest


def test_grid_has_dimension_squared_cells(maze_module):
    graph = maze_module.GridGraph(4)
    assert len(graph) == 16
    assert len(set(graph.cells())) == 16


def test_cells_are_row_major(maze_module):
    Cell = maze_module.Cell
    graph = maze_module.GridGraph(2)
    assert graph.cells() == (Cell(0, 0), Cell(1, 0), Cell(0, 1), Cell(1, 1))


def test_neighbors_follow_up_right_down_left(maze_module):
    Cell = maze_module.Cell
    graph = maze_module.GridGraph(3)

    assert graph.neighbors(Cell(1, 1)) == [Cell(1, 2), Cell(2, 1), Cell(1, 0), Cell(0, 1)]
    assert graph.neighbors(Cell(0, 0)) == [Cell(0, 1), Cell(1, 0)]
    assert graph.neighbors(Cell(2, 2)) == [Cell(2, 1), Cell(1, 2)]


def test_neighbors_rejects_out_of_bounds(maze_module):
    graph = maze_module.GridGraph(3)
    with pytest.raises(ValueError):
        graph.neighbors(maze_module.Cell(3, 0))


def test_edges_are_symmetric_and_orthogonal(maze_module):
    graph = maze_module.GridGraph(4)
    edges = graph.edges()

    # 2 * d * (d - 1) candidate edges on a square lattice.
    assert len(edges) == 2 * 4 * 3
    assert len(set(edges)) == len(edges)
    for edge in edges:
        assert abs(edge.a.x - edge.b.x) + abs(edge.a.y - edge.b.y) == 1
        assert edge.b in graph.neighbors(edge.a)
        assert edge.a in graph.neighbors(edge.b)


def test_grid_is_connected(maze_module):
    graph = maze_module.GridGraph(5)
    start = maze_module.Cell(0, 0)
    seen = {start}
    q = deque([start])
    while q:
        cur = q.popleft()
        for nxt in graph.neighbors(cur):
            if nxt not in seen:
                seen.add(nxt)
                q.append(nxt)
    assert seen == set(graph.cells())


def test_boundary_and_corners(maze_module):
    Cell = maze_module.Cell
    graph = maze_module.GridGraph(3)

    boundary = graph.boundary_cells()
    assert len(boundary) == 8
    assert Cell(1, 1) not in boundary
    assert graph.corners() == [Cell(0, 0), Cell(2, 0), Cell(0, 2), Cell(2, 2)]


def test_contains_checks_bounds(maze_module):
    Cell = maze_module.Cell
    graph = maze_module.GridGraph(2)
    assert Cell(1, 1) in graph
    assert Cell(2, 1) not in graph
    assert Cell(-1, 0) not in graph
    assert (0, 0) not in graph


@pytest.mark.parametrize("dimension", [1, 0, -1, -10])
def test_too_small_dimension_is_invalid(maze_module, dimension):
    with pytest.raises(maze_module.InvalidDimension):
        maze_module.GridGraph(dimension)


@pytest.mark.parametrize("dimension", [2.5, "3", True, None])
def test_non_integer_dimension_is_invalid(maze_module, dimension):
    with pytest.raises(maze_module.InvalidDimension):
        maze_module.GridGraph(dimension)


def test_invalid_dimension_is_a_value_error(maze_module):
    with pytest.raises(ValueError):
        maze_module.GridGraph(1)
