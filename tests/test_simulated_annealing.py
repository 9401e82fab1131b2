import random

import pytest

from graph_cvrp.algorithm.greedy import GreedyConstructor
from graph_cvrp.algorithm.route_repair import finalize_path, permutation_to_route, route_cost
from graph_cvrp.algorithm.simulated_annealing import AssistedSimulatedAnnealing, SimulatedAnnealing
from graph_cvrp.core.shortest_paths import ShortestPathTable
from graph_cvrp.oracle.cooccurrence import CooccurrenceOracle
from graph_cvrp.utils.solution_analyzer import validate_route_feasibility

MOVE_TYPES = {'new_best', 'better', 'sa_accepted', 'rejected'}


@pytest.fixture
def greedy_result(sparse_graph, sparse_table):
    return GreedyConstructor(sparse_graph, sparse_table).solve()


def test_best_never_worse_than_greedy(sparse_graph, sparse_table, greedy_result):
    sa = SimulatedAnnealing(sparse_graph, sparse_table, rng=random.Random(1))
    result = sa.solve(greedy_result.permutation, 0.95, 100.0, initial_stops=greedy_result.stops)
    assert result.total_distance <= greedy_result.total_distance + 1e-9
    assert result.total_distance <= route_cost(sparse_graph, sparse_table, greedy_result.permutation) + 1e-9


def test_best_route_matches_best_permutation(sparse_graph, sparse_table, greedy_result):
    result = SimulatedAnnealing(sparse_graph, sparse_table, rng=random.Random(2)).solve(
        greedy_result.permutation, 0.9, 50.0)
    assert result.total_distance == pytest.approx(
        route_cost(sparse_graph, sparse_table, result.permutation))
    assert sorted(result.permutation) == sparse_graph.customers()
    assert validate_route_feasibility(sparse_graph, result.route) == []


def test_same_seed_same_search(sparse_graph, sparse_table, greedy_result):
    runs = [SimulatedAnnealing(sparse_graph, sparse_table, rng=random.Random(11)).solve(
        greedy_result.permutation, 0.9, 100.0) for _ in range(2)]
    assert runs[0].permutation == runs[1].permutation
    assert runs[0].history == runs[1].history


def test_geometric_schedule_and_history(sparse_graph, sparse_table, greedy_result):
    result = SimulatedAnnealing(sparse_graph, sparse_table, rng=random.Random(3)).solve(
        greedy_result.permutation, 0.5, 10.0)
    history = result.history
    assert history["temperature"] == pytest.approx([10.0, 5.0, 2.5, 1.25])
    assert history["iteration"] == [1, 2, 3, 4]
    assert set(history["accepted_move_type"]) <= MOVE_TYPES
    assert set(history["move"]) <= {"swap", "relocate"}
    best = history["best_cost"]
    assert all(b <= a for a, b in zip(best, best[1:]))
    assert best[-1] == pytest.approx(result.total_distance)


def test_no_iterations_at_the_temperature_floor(sparse_graph, sparse_table, greedy_result):
    result = SimulatedAnnealing(sparse_graph, sparse_table).solve(greedy_result.permutation, 0.9, 1.0)
    assert result.history["iteration"] == []
    assert result.total_distance == pytest.approx(
        route_cost(sparse_graph, sparse_table, greedy_result.permutation))


def test_single_customer_is_left_alone(four_node_graph):
    table = ShortestPathTable.calculate(four_node_graph)
    result = SimulatedAnnealing(four_node_graph, table, rng=random.Random(0)).solve([2], 0.8, 20.0)
    assert result.permutation == [2]
    assert result.route.nodes == (0, 2, 0)


@pytest.mark.parametrize("cooling_rate, start_temperature", [
    (1.0, 100.0), (0.0, 100.0), (1.5, 100.0), (0.9, 0.0), (0.9, -5.0),
])
def test_invalid_schedule_is_rejected(sparse_graph, sparse_table, cooling_rate, start_temperature):
    sa = SimulatedAnnealing(sparse_graph, sparse_table)
    with pytest.raises(ValueError):
        sa.solve([1, 2, 3], cooling_rate, start_temperature)


def test_assisted_variant_uses_oracle_moves(sparse_graph, sparse_table, greedy_result):
    walks = [[0, 1, 2, 4, 5, 3], [0, 2, 1, 3, 5, 6, 7]]
    oracle = CooccurrenceOracle.fit(walks, sparse_graph.size)
    assisted = AssistedSimulatedAnnealing(sparse_graph, sparse_table, oracle, rng=random.Random(5))
    result = assisted.solve(greedy_result.permutation, 0.95, 100.0, initial_stops=greedy_result.stops)
    assert result.algorithm == "assisted_simulated_annealing"
    assert "oracle_relocate" in result.history["move"]
    assert set(result.history["move"]) <= {"oracle_relocate", "relocate"}
    assert result.total_distance <= greedy_result.total_distance + 1e-9
    assert validate_route_feasibility(sparse_graph, result.route) == []


def test_seeded_result_rebuilds_its_route_from_stops(four_node_graph):
    table = ShortestPathTable.calculate(four_node_graph)
    greedy = GreedyConstructor(four_node_graph, table).solve()
    # every permutation of the three customers costs 60, the greedy stops cost 50
    result = SimulatedAnnealing(four_node_graph, table, rng=random.Random(0)).solve(
        [1, 2, 3], 0.9, 50.0, initial_stops=greedy.stops)
    assert result.stops == [0, 1, 2, 0, 3, 0]
    assert result.permutation == [1, 2, 3]
    assert result.route.nodes == (0, 1, 2, 0, 3, 0)
    assert result.total_distance == pytest.approx(50.0)
    assert result.route == finalize_path(four_node_graph, table, result.stops)


def test_unseeded_result_rebuilds_its_route_from_permutation(sparse_graph, sparse_table, greedy_result):
    result = SimulatedAnnealing(sparse_graph, sparse_table, rng=random.Random(6)).solve(
        greedy_result.permutation, 0.9, 50.0, initial_stops=greedy_result.stops)
    if result.stops is None:
        assert result.route == permutation_to_route(sparse_graph, sparse_table, result.permutation)
    else:
        assert result.route == finalize_path(sparse_graph, sparse_table, result.stops)
        assert result.permutation == [n for n in result.stops if n != sparse_graph.depot]


def test_seed_is_ignored_when_not_shorter(five_node_graph):
    table = ShortestPathTable.calculate(five_node_graph)
    result = SimulatedAnnealing(five_node_graph, table, rng=random.Random(0)).solve(
        [1, 2, 3, 4], 0.9, 1.0, initial_stops=[0, 1, 2, 3, 4, 0])
    assert result.stops is None
    assert result.route == permutation_to_route(five_node_graph, table, [1, 2, 3, 4])
