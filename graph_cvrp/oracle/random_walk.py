# graph_cvrp/oracle/random_walk.py
from __future__ import annotations
from typing import TYPE_CHECKING, List, Optional, Tuple

import numpy as np

from .. import config

if TYPE_CHECKING:
    from ..core.graph import Graph


def transition_weights(graph: "Graph", current: int, previous: int,
                       p: float, q: float) -> Tuple[List[int], np.ndarray]:
    """
    Second order (node2vec style) step weights out of `current`.

    Stepping back to `previous` is weighted w/p, staying next to `previous`
    (a neighbour of it) w, moving away w/q, where w is the edge length.
    """
    prev_edges = graph.nodes[previous].edges
    neighbours = sorted(graph.nodes[current].edges)
    weights = np.empty(len(neighbours), dtype=np.float64)
    for idx, neighbour_id in enumerate(neighbours):
        w = graph.nodes[current].edges[neighbour_id]
        if neighbour_id == previous:
            weights[idx] = w / p
        elif neighbour_id in prev_edges:
            weights[idx] = w
        else:
            weights[idx] = w / q
    return neighbours, weights


def single_walk(graph: "Graph", start: int, demand_budget: float, p: float, q: float,
                rng: np.random.Generator, max_steps: int) -> List[int]:
    """
    One demand bounded walk starting at `start` (included).

    The walk collects demand from its own ledger and stops once the collected
    demand reaches `demand_budget` or after `max_steps` steps.
    """
    ledger = graph.demand_ledger()
    walk = [start]
    collected = ledger[start]
    ledger[start] = 0.0
    previous, current = graph.depot, start
    steps = 0
    while collected < demand_budget and steps < max_steps:
        neighbours, weights = transition_weights(graph, current, previous, p, q)
        if not neighbours:
            break
        nxt = neighbours[rng.choice(len(neighbours), p=weights / weights.sum())]
        collected += ledger[nxt]
        ledger[nxt] = 0.0
        walk.append(nxt)
        previous, current = current, nxt
        steps += 1
    return walk


def biased_random_walks(graph: "Graph", walks_per_node: int = config.WALKS_PER_NODE,
                        demand_budget: float = config.WALK_DEMAND_BUDGET,
                        p: float = config.WALK_P, q: float = config.WALK_Q,
                        rng: Optional[np.random.Generator] = None,
                        max_steps: int = config.WALK_MAX_STEPS) -> List[List[int]]:
    """Corpus of `walks_per_node` walks from every node, in rounds over all nodes."""
    if p <= 0 or q <= 0:
        raise ValueError(f"Walk parameters p and q must be positive, got p={p}, q={q}")
    if rng is None:
        rng = np.random.default_rng(config.RANDOM_SEED)
    walks = []
    for _ in range(walks_per_node):
        for node_id in range(graph.size):
            walks.append(single_walk(graph, node_id, demand_budget, p, q, rng, max_steps))
    return walks
