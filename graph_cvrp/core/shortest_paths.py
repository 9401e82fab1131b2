# graph_cvrp/core/shortest_paths.py
from __future__ import annotations
import math
import time
from typing import TYPE_CHECKING, List, NamedTuple, Optional, Union

import numpy as np

if TYPE_CHECKING:
    from .graph import Graph

NO_HOP = -1


class Reachable(NamedTuple):
    distance: float
    next_hop: int


class Unreachable:
    _instance = None

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "UNREACHABLE"

    def __bool__(self) -> bool:
        return False


UNREACHABLE = Unreachable()
PathCell = Union[Reachable, Unreachable]


class ShortestPathTable:
    """
    All-pairs shortest distances and first hops of a graph.

    Built once with `calculate` and read-only afterwards, so one table can be
    shared by every search running on the same graph.
    """

    def __init__(self, distances: np.ndarray, next_hops: np.ndarray, build_time: float = 0.0):
        distances.setflags(write=False)
        next_hops.setflags(write=False)
        self.distances = distances
        self.next_hops = next_hops
        self.build_time = build_time
        # Plain nested lists for the hot lookups of the repair walk
        self._dist: List[List[float]] = distances.tolist()
        self._next: List[List[int]] = next_hops.tolist()

    @classmethod
    def calculate(cls, graph: "Graph") -> "ShortestPathTable":
        """Floyd-Warshall, O(V^3) time and O(V^2) memory."""
        start_time = time.time()
        size = graph.size
        dist = np.full((size, size), np.inf, dtype=np.float64)
        nxt = np.full((size, size), NO_HOP, dtype=np.int64)

        for node in graph.nodes.values():
            for neighbour_id, weight in node.edges.items():
                dist[node.id, neighbour_id] = weight
                nxt[node.id, neighbour_id] = neighbour_id
        diagonal = np.arange(size)
        dist[diagonal, diagonal] = 0.0
        nxt[diagonal, diagonal] = diagonal

        for k in range(size):
            via_k = dist[:, k, None] + dist[None, k, :]
            improved = via_k < dist
            dist = np.where(improved, via_k, dist)
            # The first hop towards j is the first hop towards k, not k itself
            nxt = np.where(improved, nxt[:, k, None], nxt)

        return cls(dist, nxt, build_time=time.time() - start_time)

    @property
    def size(self) -> int:
        return len(self._dist)

    def cell(self, origin: int, target: int) -> PathCell:
        hop = self._next[origin][target]
        if hop == NO_HOP:
            return UNREACHABLE
        return Reachable(self._dist[origin][target], hop)

    def is_reachable(self, origin: int, target: int) -> bool:
        return self._next[origin][target] != NO_HOP

    def distance(self, origin: int, target: int) -> float:
        if self._next[origin][target] == NO_HOP:
            return math.inf
        return self._dist[origin][target]

    def path(self, origin: int, target: int) -> Optional[List[int]]:
        """Hops from origin to target, origin excluded and target included."""
        next_row = self._next
        if next_row[origin][target] == NO_HOP:
            return None
        hops = []
        while origin != target:
            origin = next_row[origin][target]
            hops.append(origin)
        return hops

    def __repr__(self) -> str:
        return f"ShortestPathTable(size={self.size}, build_time={self.build_time:.3f}s)"
