# graph_cvrp/algorithm/neighborhood.py
import random
from typing import TYPE_CHECKING, List, Sequence

if TYPE_CHECKING:
    from ..oracle.scoring import ScoringOracle


def relocate_move(permutation: Sequence[int], rng: random.Random) -> List[int]:
    """Removes a random element and reinserts it at a random position."""
    candidate = list(permutation)
    if len(candidate) < 2:
        return candidate
    first = rng.randrange(len(candidate))
    second = rng.randrange(len(candidate))
    candidate.insert(second, candidate.pop(first))
    return candidate


def swap_move(permutation: Sequence[int], rng: random.Random) -> List[int]:
    """Exchanges the elements at two random positions."""
    candidate = list(permutation)
    if len(candidate) < 2:
        return candidate
    first = rng.randrange(len(candidate))
    second = rng.randrange(len(candidate))
    candidate[first], candidate[second] = candidate[second], candidate[first]
    return candidate


def oracle_relocate_index(permutation: Sequence[int], oracle: "ScoringOracle", depot: int = 0) -> int:
    """
    Position whose element sits closest to the oracle's top score.

    For every position the oracle scores all possible successors of the
    previous node (the depot for the first position); the gap is the top score
    minus the score of the element actually placed there. The first position
    with the smallest gap wins.
    """
    best_index = 0
    min_gap = float('inf')
    predecessor = depot
    for index, node in enumerate(permutation):
        scores = oracle.score(predecessor)
        gap = max(scores) - scores[node]
        if gap < min_gap:
            min_gap = gap
            best_index = index
        predecessor = node
    return best_index


def oracle_relocate_move(permutation: Sequence[int], oracle: "ScoringOracle",
                         rng: random.Random, depot: int = 0) -> List[int]:
    candidate = list(permutation)
    if len(candidate) < 2:
        return candidate
    reinsert = oracle_relocate_index(candidate, oracle, depot)
    index = rng.randrange(len(candidate))
    candidate.insert(index, candidate.pop(reinsert))
    return candidate
