import numpy as np
import pytest

from graph_cvrp.oracle.cooccurrence import CooccurrenceOracle
from graph_cvrp.oracle.random_walk import biased_random_walks, single_walk, transition_weights
from graph_cvrp.oracle.scoring import ScoringOracle


def test_step_weights_follow_return_and_in_out_parameters(square_graph, four_node_graph):
    neighbours, weights = transition_weights(square_graph, 3, 1, p=0.8, q=0.2)
    assert neighbours == [1, 2]
    # back to 1 is w / p, node 2 is not next to 1 so w / q
    assert weights.tolist() == pytest.approx([1.25, 5.0])

    neighbours, weights = transition_weights(four_node_graph, 1, 2, p=0.5, q=0.2)
    assert neighbours == [0, 2, 3]
    assert weights.tolist() == pytest.approx([10.0, 20.0, 10.0])


def test_walks_follow_edges_and_respect_limits(sparse_graph):
    walks = biased_random_walks(sparse_graph, walks_per_node=3, demand_budget=100.0,
                                rng=np.random.default_rng(0), max_steps=12)
    assert len(walks) == 3 * sparse_graph.size
    assert [w[0] for w in walks[:sparse_graph.size]] == list(range(sparse_graph.size))
    for walk in walks:
        assert len(walk) <= 13
        for a, b in zip(walk, walk[1:]):
            assert sparse_graph.nodes[a].is_neighbour(b)


def test_walk_stops_once_budget_is_collected(four_node_graph):
    walk = single_walk(four_node_graph, 1, demand_budget=80.0, p=1.0, q=1.0,
                       rng=np.random.default_rng(3), max_steps=100)
    collected = sum(four_node_graph.demand(n) for n in set(walk))
    assert collected >= 80.0
    assert sum(four_node_graph.demand(n) for n in set(walk[:-1])) < 80.0


def test_walks_are_reproducible(sparse_graph):
    first = biased_random_walks(sparse_graph, walks_per_node=2, rng=np.random.default_rng(9))
    second = biased_random_walks(sparse_graph, walks_per_node=2, rng=np.random.default_rng(9))
    assert first == second


def test_bad_walk_parameters(sparse_graph):
    with pytest.raises(ValueError):
        biased_random_walks(sparse_graph, walks_per_node=1, p=0.0)


def test_cooccurrence_scores_are_smoothed_successor_frequencies():
    oracle = CooccurrenceOracle.fit([[0, 1, 2], [0, 1, 3]], num_nodes=4, context_size=1, smoothing=1.0)
    assert oracle.score(0) == pytest.approx([1 / 6, 3 / 6, 1 / 6, 1 / 6])
    assert oracle.best_successor(0) == 1
    assert oracle.scores.sum(axis=1) == pytest.approx(np.ones(4))
    assert isinstance(oracle, ScoringOracle)


def test_wider_context_counts_later_successors():
    oracle = CooccurrenceOracle.fit([[0, 1, 2]], num_nodes=3, context_size=2, smoothing=1.0)
    # 0 is followed by 1 and 2 within two steps
    assert oracle.score(0) == pytest.approx([1 / 5, 2 / 5, 2 / 5])


@pytest.mark.parametrize("context_size, smoothing", [(0, 1.0), (1, 0.0)])
def test_invalid_oracle_parameters(context_size, smoothing):
    with pytest.raises(ValueError):
        CooccurrenceOracle.fit([[0, 1]], num_nodes=2, context_size=context_size, smoothing=smoothing)
