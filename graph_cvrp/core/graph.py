# graph_cvrp/core/graph.py
from __future__ import annotations
from collections import deque
from typing import Dict, Iterable, List, Set, Tuple

DEPOT_ID = 0


class InfeasibleInstanceError(ValueError):
    """Raised when an instance breaks a precondition of the routing core."""


class Node:
    def __init__(self, node_id: int, demand: float = 0.0):
        self.id = int(node_id)
        self.demand = float(demand)
        self.edges: Dict[int, float] = {}

    def is_neighbour(self, other_id: int) -> bool:
        return other_id in self.edges

    def __repr__(self) -> str:
        return f"Node({self.id}, d={self.demand:.2f}, deg={len(self.edges)})"


class Graph:
    """
    Weighted undirected graph rooted at the depot (node 0).

    Nodes are numbered 0..size-1. Every edge is stored in both directions
    with the same weight. Search code only reads the graph; the add_*/set_*
    helpers are used while an instance is being built.
    """

    def __init__(self, capacity: float):
        self._capacity = float(capacity)
        self.nodes: Dict[int, Node] = {}

    @classmethod
    def from_edges(cls, num_nodes: int, edges: Iterable[Tuple[int, int, float]],
                   demands: Iterable[float], capacity: float) -> "Graph":
        graph = cls(capacity)
        for node_id, demand in zip(range(num_nodes), demands):
            graph.add_node(node_id, demand)
        for node_id in range(len(graph.nodes), num_nodes):
            graph.add_node(node_id)
        for a, b, weight in edges:
            graph.add_edge(a, b, weight)
        return graph

    # --- construction ---------------------------------------------------------
    def add_node(self, node_id: int, demand: float = 0.0) -> Node:
        if node_id in self.nodes:
            raise ValueError(f"Node {node_id} already exists")
        node = Node(node_id, demand)
        self.nodes[node.id] = node
        return node

    def add_edge(self, a: int, b: int, weight: float):
        if a == b:
            raise ValueError(f"Self loop on node {a} is not allowed")
        if weight <= 0:
            raise ValueError(f"Edge {a}-{b} must have a positive length, got {weight}")
        if a not in self.nodes or b not in self.nodes:
            raise KeyError(f"Edge {a}-{b} references an unknown node")
        self.nodes[a].edges[b] = float(weight)
        self.nodes[b].edges[a] = float(weight)

    def set_demand(self, node_id: int, demand: float):
        self.nodes[node_id].demand = float(demand)

    # --- read only contract ---------------------------------------------------
    @property
    def depot(self) -> int:
        return DEPOT_ID

    @property
    def capacity(self) -> float:
        return self._capacity

    @property
    def size(self) -> int:
        return len(self.nodes)

    def __len__(self) -> int:
        return len(self.nodes)

    def __contains__(self, node_id) -> bool:
        return node_id in self.nodes

    def neighbors(self, node_id: int) -> Set[Tuple[int, float]]:
        return set(self.nodes[node_id].edges.items())

    def demand(self, node_id: int) -> float:
        return self.nodes[node_id].demand

    def customers(self) -> List[int]:
        return [nid for nid in sorted(self.nodes) if nid != DEPOT_ID]

    def edges(self) -> List[Tuple[int, int, float]]:
        """Each undirected edge once, as (smaller id, larger id, weight)."""
        return [(a, b, w) for a in sorted(self.nodes)
                for b, w in sorted(self.nodes[a].edges.items()) if a < b]

    @property
    def num_edges(self) -> int:
        return sum(len(node.edges) for node in self.nodes.values()) // 2

    def demand_ledger(self) -> List[float]:
        """Fresh working copy of all demands, indexed by node id."""
        return [self.nodes[nid].demand for nid in range(self.size)]

    def total_demand(self) -> float:
        return sum(node.demand for node in self.nodes.values())

    def __repr__(self) -> str:
        return (f"Graph(nodes={self.size}, edges={self.num_edges}, "
                f"capacity={self.capacity:.2f}, total_demand={self.total_demand():.2f})")


def reachable_from_depot(graph: Graph) -> Set[int]:
    seen = {DEPOT_ID}
    queue = deque([DEPOT_ID])
    while queue:
        current = queue.popleft()
        for neighbour_id in graph.nodes[current].edges:
            if neighbour_id not in seen:
                seen.add(neighbour_id)
                queue.append(neighbour_id)
    return seen


def validate_instance(graph: Graph) -> Graph:
    """
    Checks the preconditions every search component relies on.

    The repair walk has no notion of undeliverable demand and shortest paths
    must exist between all pairs, so an instance is rejected if the depot is
    missing, a demand is negative or larger than the capacity, or the graph
    is disconnected.
    """
    if graph.capacity <= 0:
        raise InfeasibleInstanceError(f"Infeasible instance: capacity must be positive, got {graph.capacity}")
    if DEPOT_ID not in graph.nodes:
        raise InfeasibleInstanceError("Infeasible instance: depot node 0 is missing")
    if sorted(graph.nodes) != list(range(graph.size)):
        raise InfeasibleInstanceError("Infeasible instance: node ids must be 0..n-1")
    if graph.demand(DEPOT_ID) != 0:
        raise InfeasibleInstanceError(f"Infeasible instance: depot demand must be 0, got {graph.demand(DEPOT_ID)}")

    for node in graph.nodes.values():
        if node.demand < 0:
            raise InfeasibleInstanceError(f"Infeasible instance: node {node.id} has negative demand {node.demand:.2f}")
        if node.demand > graph.capacity:
            raise InfeasibleInstanceError(
                f"Infeasible instance: demand {node.demand:.2f} of node {node.id} "
                f"exceeds vehicle capacity {graph.capacity:.2f}")

    unreachable = set(graph.nodes) - reachable_from_depot(graph)
    if unreachable:
        raise InfeasibleInstanceError(
            f"Infeasible instance: graph is disconnected, unreachable nodes {sorted(unreachable)}")
    return graph
