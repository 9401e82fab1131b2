# graph_cvrp/utils/solution_analyzer.py
from __future__ import annotations
from typing import TYPE_CHECKING, List

if TYPE_CHECKING:
    from ..core.data_structures import Route, SearchResult
    from ..core.graph import Graph

TOLERANCE = 1e-6

# ==============================================================================
# HELPERS
# ==============================================================================

def _print_trip_stats(route: "Route"):
    trips = route.trips()
    nodes_per_trip = [len(set(trip) - {trip[0]}) for trip in trips]
    avg_len = sum(len(t) - 1 for t in trips) / len(trips) if trips else 0
    avg_nodes = sum(nodes_per_trip) / len(nodes_per_trip) if nodes_per_trip else 0

    print("\n[ADDITIONAL STATISTICS]")
    header = f"{'#Trips':<15} {'Avg Trip Hops':<20} {'Avg Nodes/Trip':<20} {'Max Load':<15} {'#Served':<15}"
    line = "-" * len(header)
    values = (f"{len(trips):<15} {avg_len:<20.2f} {avg_nodes:<20.2f} "
              f"{route.max_load:<15.2f} {len(route.visitation_order()):<15}")
    print(line); print(header); print(line); print(values); print(line)

# ==============================================================================
# PUBLIC
# ==============================================================================

def print_solution_details(result: "SearchResult"):
    """Console report of one search result: summary, statistics and trips."""
    route = result.route
    print("\n" + "#"*70 + f"\n### {result.algorithm.upper()} SOLUTION ###\n" + "#"*70)
    print(f"Total execution time: {result.solve_time:.2f} seconds")
    print(f"\n[SUMMARY]")
    print(f"Total Distance: {route.total_distance:.2f}")
    print(f"Route Length (hops): {len(route) - 1}")
    print(f"Permutation: {result.permutation}")
    _print_trip_stats(route)

    print("\n" + "-"*20 + " TRIPS " + "-"*20)
    for i, trip in enumerate(route.trips()):
        print(f"[Trip #{i+1}] " + " -> ".join(map(str, trip)))


def validate_route_feasibility(graph: "Graph", route: "Route") -> List[str]:
    """
    Checks a concrete route against the graph: depot at both ends, every
    hop along an edge, loads consistent and within capacity, every demand
    served exactly once. Prints a report and returns the list of problems.
    """
    print("\n" + "="*60 + "\n--- ROUTE FEASIBILITY VALIDATION ---\n" + "="*60)
    errors = []
    nodes = route.nodes
    depot = graph.depot

    if not nodes or nodes[0] != depot or nodes[-1] != depot:
        errors.append(f"Route must start and end at the depot {depot}, got {nodes[:1]}...{nodes[-1:]}")
    for a, b in zip(nodes, nodes[1:]):
        if a not in graph or not graph.nodes[a].is_neighbour(b):
            errors.append(f"Hop {a} -> {b} is not an edge of the graph")

    load = 0.0
    served = [0.0] * graph.size
    for pos, (node, amount, recorded) in enumerate(zip(nodes, route.served, route.loads)):
        if node == depot:
            load = 0.0
        load += amount
        if node in graph:
            served[node] += amount
        if abs(load - recorded) > TOLERANCE:
            errors.append(f"Position {pos} (node {node}): recorded load {recorded:.2f} != running load {load:.2f}")
        if load > graph.capacity + TOLERANCE:
            errors.append(f"Position {pos} (node {node}): load {load:.2f} exceeds capacity {graph.capacity:.2f}")

    for node_id in graph.customers():
        if abs(served[node_id] - graph.demand(node_id)) > TOLERANCE:
            errors.append(f"Node {node_id}: served {served[node_id]:.2f} of demand {graph.demand(node_id):.2f}")

    if not errors:
        print("\n[VALIDATION SUCCESS] Route is feasible and serves every demand.")
    else:
        print("\n[VALIDATION FAILED] Found the following issues:")
        for i, error in enumerate(errors):
            print(f"  {i+1}. {error}")
    print("="*60)
    return errors
