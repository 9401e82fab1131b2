# graph_cvrp/algorithm/route_repair.py
"""
Turns a visitation order into a capacity feasible route.

A permutation only says which customer the vehicle should head for next. The
repair walk follows the shortest path towards each target and serves every
node on the way whose remaining demand still fits. When the next hop does not
fit, the vehicle steps onto it, goes back to the depot (picking up what still
fits on the way back) and resumes towards the same target. Customers already
emptied by such detours are skipped when their turn comes.
"""
from __future__ import annotations
from enum import Enum
from typing import TYPE_CHECKING, List, Sequence

from ..core.data_structures import Route

if TYPE_CHECKING:
    from ..core.graph import Graph
    from ..core.shortest_paths import ShortestPathTable


class RepairMode(Enum):
    CONCRETE = "concrete"   # full node-by-node route
    ABSTRACT = "abstract"   # served customers only


class _Trace:
    """Output of one repair walk. ABSTRACT mode only keeps `served_order`."""

    def __init__(self, mode: RepairMode, depot: int):
        self.concrete = mode is RepairMode.CONCRETE
        self.nodes: List[int] = [depot] if self.concrete else []
        self.served: List[float] = [0.0] if self.concrete else []
        self.loads: List[float] = [0.0] if self.concrete else []
        self.served_order: List[int] = []

    def visit(self, node: int, amount: float, load: float):
        if amount > 0:
            self.served_order.append(node)
        if self.concrete:
            self.nodes.append(node)
            self.served.append(amount)
            self.loads.append(load)


def _require_path(table: "ShortestPathTable", origin: int, target: int) -> List[int]:
    hops = table.path(origin, target)
    if hops is None:
        raise RuntimeError(
            f"No path between {origin} and {target}; the instance should have been "
            f"rejected by validate_instance")
    return hops


def _check_ids(graph: "Graph", node_ids: Sequence[int]):
    for node_id in node_ids:
        if node_id not in graph:
            raise ValueError(f"Unknown node id {node_id} in visitation order")


def _repair_walk(graph: "Graph", table: "ShortestPathTable",
                 permutation: Sequence[int], mode: RepairMode) -> _Trace:
    _check_ids(graph, permutation)
    capacity = graph.capacity
    depot = graph.depot
    ledger = graph.demand_ledger()
    trace = _Trace(mode, depot)
    load = 0.0
    current = depot

    for target in permutation:
        if ledger[target] <= 0:
            continue
        hops = _require_path(table, current, target)
        idx = 0
        while current != target:
            hop = hops[idx]
            if hop == depot:
                load = 0.0
                trace.visit(hop, 0.0, load)
                idx += 1
            elif load + ledger[hop] <= capacity:
                amount = ledger[hop]
                load += amount
                ledger[hop] = 0.0
                trace.visit(hop, amount, load)
                idx += 1
            else:
                # hop overflows: step onto it, return to the depot, start over
                trace.visit(hop, 0.0, load)
                for back in _require_path(table, hop, depot):
                    amount = 0.0
                    if back != depot and load + ledger[back] <= capacity:
                        amount = ledger[back]
                        load += amount
                        ledger[back] = 0.0
                    trace.visit(back, amount, 0.0 if back == depot else load)
                load = 0.0
                hops = _require_path(table, depot, target)
                idx = 0
                hop = depot
            current = hop

    for hop in _require_path(table, current, depot):
        trace.visit(hop, 0.0, 0.0 if hop == depot else load)
    return trace


def route_distance(table: "ShortestPathTable", nodes: Sequence[int]) -> float:
    return sum(table.distance(a, b) for a, b in zip(nodes, nodes[1:]))


def _as_route(table: "ShortestPathTable", trace: _Trace) -> Route:
    return Route(nodes=tuple(trace.nodes), served=tuple(trace.served),
                 loads=tuple(trace.loads), total_distance=route_distance(table, trace.nodes))


def permutation_to_route(graph: "Graph", table: "ShortestPathTable",
                         permutation: Sequence[int]) -> Route:
    """Concrete mode: the repaired route of a permutation and its distance."""
    return _as_route(table, _repair_walk(graph, table, permutation, RepairMode.CONCRETE))


def fix_permutation(graph: "Graph", table: "ShortestPathTable",
                    permutation: Sequence[int]) -> List[int]:
    """Abstract mode: customers in the order the repair walk actually serves them."""
    return _repair_walk(graph, table, permutation, RepairMode.ABSTRACT).served_order


def route_cost(graph: "Graph", table: "ShortestPathTable", permutation: Sequence[int]) -> float:
    return permutation_to_route(graph, table, permutation).total_distance


def finalize_path(graph: "Graph", table: "ShortestPathTable", stops: Sequence[int]) -> Route:
    """
    Expands an explicit stop sequence (customers and depot returns) into a route.

    Unlike the repair walk this trusts the caller: each stop is served in
    full, nodes between stops are only passed through and the load is reset
    at every depot. The route is closed at the depot if the sequence is not.
    """
    _check_ids(graph, stops)
    depot = graph.depot
    ledger = graph.demand_ledger()
    trace = _Trace(RepairMode.CONCRETE, depot)
    load = 0.0
    current = depot
    stops = list(stops)
    if stops and stops[0] == depot:
        stops = stops[1:]
    if not stops or stops[-1] != depot:
        stops.append(depot)

    for stop in stops:
        hops = _require_path(table, current, stop)
        for hop in hops:
            amount = 0.0
            if hop == depot:
                load = 0.0
            elif hop == stop:
                amount = ledger[hop]
                load += amount
                ledger[hop] = 0.0
            trace.visit(hop, amount, load)
        current = stop
    return _as_route(table, trace)
