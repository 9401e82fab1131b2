import itertools
import math

import pytest

from graph_cvrp.core.graph import Graph
from graph_cvrp.core.shortest_paths import UNREACHABLE, Reachable, ShortestPathTable


def test_diagonal_cells(sparse_table):
    for i in range(sparse_table.size):
        assert sparse_table.cell(i, i) == Reachable(0.0, i)
        assert sparse_table.distance(i, i) == 0.0
        assert sparse_table.path(i, i) == []


def test_symmetry_and_triangle_inequality(sparse_table):
    n = sparse_table.size
    for i, j in itertools.product(range(n), repeat=2):
        assert sparse_table.distance(i, j) == pytest.approx(sparse_table.distance(j, i))
    for i, j, k in itertools.product(range(n), repeat=3):
        assert sparse_table.distance(i, j) <= sparse_table.distance(i, k) + sparse_table.distance(k, j) + 1e-9


def test_path_weight_matches_distance(sparse_graph, sparse_table):
    n = sparse_table.size
    for i, j in itertools.product(range(n), repeat=2):
        nodes = [i] + sparse_table.path(i, j)
        assert nodes[-1] == j
        weight = sum(sparse_graph.nodes[a].edges[b] for a, b in zip(nodes, nodes[1:]))
        assert weight == pytest.approx(sparse_table.distance(i, j))


def test_first_hop_of_shorter_detour(sparse_table):
    # 0-1-2 (4 + 2) beats the direct 0-2 edge (7)
    assert sparse_table.distance(0, 2) == pytest.approx(6.0)
    assert sparse_table.path(0, 2) == [1, 2]
    assert sparse_table.cell(0, 2) == Reachable(6.0, 1)


def test_unreachable_pairs_are_reported_not_raised():
    graph = Graph.from_edges(3, [(0, 1, 2.0)], [0.0, 1.0, 1.0], 10.0)
    table = ShortestPathTable.calculate(graph)
    assert table.cell(0, 2) is UNREACHABLE
    assert not table.cell(0, 2)
    assert not table.is_reachable(2, 1)
    assert math.isinf(table.distance(0, 2))
    assert table.path(0, 2) is None
    assert table.path(0, 1) == [1]


def test_table_is_read_only(sparse_table):
    with pytest.raises(ValueError):
        sparse_table.distances[0, 1] = 0.0
    with pytest.raises(ValueError):
        sparse_table.next_hops[0, 1] = 3
