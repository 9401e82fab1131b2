# graph_cvrp/algorithm/greedy.py
from __future__ import annotations
import math
import time
from typing import TYPE_CHECKING, List, Optional

from ..core.data_structures import Route, SearchResult
from .route_repair import finalize_path

if TYPE_CHECKING:
    from ..core.graph import Graph
    from ..core.shortest_paths import ShortestPathTable
    from ..oracle.scoring import ScoringOracle


class GreedyConstructor:
    """
    Nearest feasible neighbour construction.

    From the current node the vehicle moves to the closest node (shortest path
    distance) that still has demand and fits in the remaining capacity; nodes
    are scanned in ascending id order so the lower id wins a tie. When nothing
    fits it returns to the depot and starts a new trip.
    """
    name = "greedy"

    def __init__(self, graph: "Graph", table: "ShortestPathTable"):
        self.graph = graph
        self.table = table
        self.demands: List[float] = graph.demand_ledger()
        self.load = 0.0
        self.visit_order: List[int] = []
        self.route: Optional[Route] = None

    def _next_node(self, current: int) -> int:
        capacity = self.graph.capacity
        best_dist = math.inf
        best_node = self.graph.depot
        for node_id in range(self.graph.size):
            if node_id == current or node_id == self.graph.depot:
                continue
            demand = self.demands[node_id]
            if demand <= 0 or self.load + demand > capacity:
                continue
            dist = self.table.distance(current, node_id)
            if dist < best_dist:
                best_dist = dist
                best_node = node_id
        return best_node

    def _pending(self) -> bool:
        return any(d > 0 for d in self.demands)

    def solve(self) -> SearchResult:
        start_time = time.time()
        depot = self.graph.depot
        current = depot
        self.demands = self.graph.demand_ledger()
        self.load = 0.0
        self.visit_order = [depot]

        while self._pending():
            nxt = self._next_node(current)
            if nxt == depot:
                if current == depot:
                    raise RuntimeError(
                        f"{self.name} construction is stuck at the depot; some demand "
                        "exceeds the capacity or is unreachable")
                self.load = 0.0
            else:
                self.load += self.demands[nxt]
                self.demands[nxt] = 0.0
            self.visit_order.append(nxt)
            current = nxt

        if self.visit_order[-1] != depot:
            self.visit_order.append(depot)
        self.route = finalize_path(self.graph, self.table, self.visit_order)
        return SearchResult(algorithm=self.name, route=self.route, permutation=self.permutation,
                            stops=list(self.visit_order), solve_time=time.time() - start_time)

    @property
    def permutation(self) -> List[int]:
        """Visitation order without the depot returns, the seed of the local search."""
        return [node for node in self.visit_order if node != self.graph.depot]

    @property
    def total_distance(self) -> float:
        return self.route.total_distance if self.route is not None else 0.0


class OracleGreedyConstructor(GreedyConstructor):
    """
    Greedy construction driven by a scoring oracle instead of distances.

    From the current node the vehicle moves to the pending node with the
    highest oracle score that still fits; the lower id wins a tie. A trip is
    closed at the depot when nothing fits.
    """
    name = "oracle_greedy"

    def __init__(self, graph: "Graph", table: "ShortestPathTable", oracle: "ScoringOracle"):
        super().__init__(graph, table)
        self.oracle = oracle

    def _next_node(self, current: int) -> int:
        capacity = self.graph.capacity
        scores = self.oracle.score(current)
        best_score = -math.inf
        best_node = self.graph.depot
        for node_id in range(self.graph.size):
            if node_id == current or node_id == self.graph.depot:
                continue
            demand = self.demands[node_id]
            if demand <= 0 or self.load + demand > capacity:
                continue
            if scores[node_id] > best_score:
                best_score = scores[node_id]
                best_node = node_id
        return best_node
