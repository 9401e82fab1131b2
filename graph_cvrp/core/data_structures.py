# graph_cvrp/core/data_structures.py
from __future__ import annotations
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Tuple

from .graph import DEPOT_ID


@dataclass(frozen=True)
class Route:
    """
    Concrete node-by-node tour of the vehicle.

    `nodes` starts and ends at the depot and every consecutive pair is a graph
    edge. `served[i]` is the demand picked up at position i (0 when the vehicle
    only passes through) and `loads[i]` is the vehicle load after position i,
    reset to 0 whenever the vehicle is at the depot.
    """
    nodes: Tuple[int, ...]
    served: Tuple[float, ...]
    loads: Tuple[float, ...]
    total_distance: float

    def __len__(self) -> int:
        return len(self.nodes)

    def __iter__(self):
        return iter(self.nodes)

    def visitation_order(self) -> List[int]:
        """Customers in the order their demand was picked up."""
        return [node for node, amount in zip(self.nodes, self.served) if amount > 0]

    def trips(self) -> List[List[int]]:
        """Splits the tour at every depot occurrence, each trip framed by depots."""
        trips, current = [], [DEPOT_ID]
        for node in self.nodes[1:]:
            current.append(node)
            if node == DEPOT_ID:
                if len(current) > 2:
                    trips.append(current)
                current = [DEPOT_ID]
        return trips

    @property
    def max_load(self) -> float:
        return max(self.loads) if self.loads else 0.0

    def __repr__(self) -> str:
        path_str = " -> ".join(map(str, self.nodes))
        return f"--- Route (Distance: {self.total_distance:.2f}, Trips: {len(self.trips())}) ---\nPath: {path_str}"


@dataclass
class SearchResult:
    """
    Read-only outcome of one heuristic, consumed by reporting code.

    `stops` is set when `route` was expanded from an explicit stop sequence
    with depot returns (finalize_path). Otherwise `route` is the repair
    expansion of `permutation`.
    """
    algorithm: str
    route: Route
    permutation: List[int]
    stops: Optional[List[int]] = None
    solve_time: float = 0.0
    history: Optional[Dict[str, list]] = field(default=None, repr=False)

    @property
    def total_distance(self) -> float:
        return self.route.total_distance
