# graph_cvrp/core/generator.py
"""
Synthetic instance generation.

Edge lengths and demands are drawn from normal distributions and folded to
be positive. The graph always starts with a random spanning tree rooted at
the depot, so every generated instance is connected.
"""
from __future__ import annotations
from typing import Optional

import numpy as np

from .. import config
from .graph import DEPOT_ID, Graph


def _edge_length(rng: np.random.Generator, mean: float, deviation: float) -> float:
    return max(abs(rng.normal(mean, deviation)), config.MIN_EDGE_LENGTH)


def clamp_edge_count(size: int, num_edges: int) -> int:
    """Between a spanning tree (size - 1) and a complete graph."""
    return int(min(max(num_edges, size - 1), size * (size - 1) // 2))


def generate_graph(size: int = config.SIZE, num_edges: int = config.SPARSENESS,
                   edge_mean: float = config.EDGE_LENGTH_MEAN,
                   edge_deviation: float = config.EDGE_LENGTH_DEVIATION,
                   capacity: float = config.VEHICLE_CAPACITY,
                   rng: Optional[np.random.Generator] = None) -> Graph:
    if size < 1:
        raise ValueError(f"Graph needs at least the depot, got size={size}")
    if rng is None:
        rng = np.random.default_rng(config.RANDOM_SEED)

    graph = Graph(capacity)
    for node_id in range(size):
        graph.add_node(node_id)

    # Random walk spanning tree: an edge is added the first time the walk
    # enters a node outside the tree.
    in_tree = {DEPOT_ID}
    current = DEPOT_ID
    while len(in_tree) < size:
        neighbour = int(rng.integers(size))
        if neighbour not in in_tree:
            graph.add_edge(current, neighbour, _edge_length(rng, edge_mean, edge_deviation))
            in_tree.add(neighbour)
        current = neighbour

    target = clamp_edge_count(size, num_edges)
    missing = [(a, b) for a in range(size) for b in range(a + 1, size)
               if not graph.nodes[a].is_neighbour(b)]
    extra = target - graph.num_edges
    if extra > 0:
        for idx in rng.permutation(len(missing))[:extra]:
            a, b = missing[idx]
            graph.add_edge(a, b, _edge_length(rng, edge_mean, edge_deviation))
    return graph


def assign_demands(graph: Graph, mean: float = config.DEMAND_MEAN,
                   deviation: float = config.DEMAND_DEVIATION,
                   rng: Optional[np.random.Generator] = None) -> Graph:
    """Draws |N(mean, deviation)| for every customer, capped at the vehicle capacity."""
    if rng is None:
        rng = np.random.default_rng(config.RANDOM_SEED)
    for node_id in graph.customers():
        demand = abs(rng.normal(mean, deviation))
        graph.set_demand(node_id, min(demand, graph.capacity))
    return graph


def generate_instance(size: int = config.SIZE, num_edges: int = config.SPARSENESS,
                      seed: Optional[int] = None) -> Graph:
    """Graph plus demands, with the default distribution parameters from config."""
    rng = np.random.default_rng(config.RANDOM_SEED if seed is None else seed)
    graph = generate_graph(size, num_edges, rng=rng)
    return assign_demands(graph, rng=rng)
