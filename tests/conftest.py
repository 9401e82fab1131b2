import random

import pytest

from graph_cvrp.core.graph import Graph
from graph_cvrp.core.shortest_paths import ShortestPathTable


def complete_graph(num_nodes, demands, capacity=100.0, weight=10.0):
    edges = [(a, b, weight) for a in range(num_nodes) for b in range(a + 1, num_nodes)]
    return Graph.from_edges(num_nodes, edges, demands, capacity)


@pytest.fixture
def four_node_graph():
    """Depot plus three customers of demand 40, all edges of length 10."""
    return complete_graph(4, [0.0, 40.0, 40.0, 40.0])


@pytest.fixture
def five_node_graph():
    """Fully connected, every demand below capacity / 5."""
    return complete_graph(5, [0.0, 15.0, 15.0, 15.0, 15.0])


@pytest.fixture
def path_graph():
    """
    0 - 1 - 2 - 3 - 4 in a line (length 5 each) plus a long 0-4 shortcut.

    Demands make the walk towards 4 overflow on the way.
    """
    edges = [(0, 1, 5.0), (1, 2, 5.0), (2, 3, 5.0), (3, 4, 5.0), (0, 4, 50.0)]
    return Graph.from_edges(5, edges, [0.0, 30.0, 30.0, 50.0, 20.0], 100.0)


@pytest.fixture
def sparse_graph():
    edges = [
        (0, 1, 4.0), (0, 2, 7.0), (1, 2, 2.0), (1, 3, 6.0), (2, 4, 3.0),
        (3, 5, 1.0), (4, 5, 8.0), (5, 6, 2.5), (6, 7, 4.5), (4, 7, 9.0),
    ]
    demands = [0.0, 35.0, 20.0, 45.0, 60.0, 10.0, 55.0, 25.0]
    return Graph.from_edges(8, edges, demands, 100.0)


@pytest.fixture
def sparse_table(sparse_graph):
    return ShortestPathTable.calculate(sparse_graph)


@pytest.fixture
def rng():
    return random.Random(7)


@pytest.fixture
def square_graph():
    """0-1, 0-2, 1-3, 2-3 with unit lengths."""
    edges = [(0, 1, 1.0), (0, 2, 1.0), (1, 3, 1.0), (2, 3, 1.0)]
    return Graph.from_edges(4, edges, [0.0, 50.0, 30.0, 80.0], 100.0)


@pytest.fixture
def star_graph():
    """Spokes 0-1, 0-2, 0-3 of length 1, 2, 3; node 3 never fits next to node 1."""
    edges = [(0, 1, 1.0), (0, 2, 2.0), (0, 3, 3.0)]
    return Graph.from_edges(4, edges, [0.0, 60.0, 30.0, 50.0], 100.0)
