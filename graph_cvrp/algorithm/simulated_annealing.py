# graph_cvrp/algorithm/simulated_annealing.py
from __future__ import annotations
import math
import random
import time
from typing import TYPE_CHECKING, Dict, List, Optional, Sequence, Tuple

from .. import config
from ..core.data_structures import Route, SearchResult
from .neighborhood import oracle_relocate_move, relocate_move, swap_move
from .route_repair import finalize_path, fix_permutation, permutation_to_route

if TYPE_CHECKING:
    from ..core.graph import Graph
    from ..core.shortest_paths import ShortestPathTable
    from ..oracle.scoring import ScoringOracle


def _check_schedule(cooling_rate: float, start_temperature: float):
    if not 0.0 < cooling_rate < 1.0:
        raise ValueError(f"cooling_rate must be in (0, 1), got {cooling_rate}")
    if start_temperature <= 0:
        raise ValueError(f"start_temperature must be positive, got {start_temperature}")


class SimulatedAnnealing:
    """
    Permutation local search under a geometric cooling schedule.

    Every neighbour is repaired into the customer order the vehicle really
    serves, then expanded into a concrete route whose distance is the
    objective. The loop stops once the temperature reaches the floor.
    """
    name = "simulated_annealing"

    def __init__(self, graph: "Graph", table: "ShortestPathTable", rng: Optional[random.Random] = None,
                 swap_probability: float = config.SWAP_PROBABILITY, verbose: bool = False,
                 log_every: int = 100):
        self.graph = graph
        self.table = table
        self.rng = rng if rng is not None else random.Random(config.RANDOM_SEED)
        self.swap_probability = swap_probability
        self.verbose = verbose
        self.log_every = log_every

    def neighbour(self, permutation: Sequence[int]) -> Tuple[List[int], str]:
        if self.rng.random() < self.swap_probability:
            return swap_move(permutation, self.rng), "swap"
        return relocate_move(permutation, self.rng), "relocate"

    def evaluate(self, permutation: Sequence[int]) -> Tuple[List[int], Route]:
        """Repairs a permutation and returns it with its concrete route."""
        repaired = fix_permutation(self.graph, self.table, permutation)
        return repaired, permutation_to_route(self.graph, self.table, repaired)

    def solve(self, initial_permutation: Sequence[int], cooling_rate: float = config.COOLING_RATE,
              start_temperature: float = config.START_TEMPERATURE,
              initial_stops: Optional[Sequence[int]] = None) -> SearchResult:
        """
        Runs the annealing loop from `initial_permutation`.

        `initial_stops` is an explicit stop sequence with depot returns for the
        same start (the greedy visit order). When its route is shorter than the
        repaired permutation it seeds the best found solution, and the result
        then carries those stops so that `finalize_path(result.stops)` rebuilds
        `result.route`.
        """
        _check_schedule(cooling_rate, start_temperature)
        start_time = time.time()

        current_perm, current_route = self.evaluate(initial_permutation)
        current_cost = current_route.total_distance
        best_perm, best_route = list(current_perm), current_route
        best_stops: Optional[List[int]] = None
        if initial_stops is not None:
            seeded_route = finalize_path(self.graph, self.table, initial_stops)
            if seeded_route.total_distance < best_route.total_distance:
                best_stops = list(initial_stops)
                best_perm = [node for node in best_stops if node != self.graph.depot]
                best_route = seeded_route

        history: Dict[str, list] = {
            "iteration": [], "temperature": [], "current_cost": [], "best_cost": [],
            "candidate_cost": [], "move": [], "accepted_move_type": []
        }

        if self.verbose:
            print(f"\n--- Starting {self.name} ---")
            print(f"  Initial Temp: {start_temperature:.2f}, Cooling: {cooling_rate}, "
                  f"Initial Cost: {current_cost:.2f}")

        T = start_temperature
        i = 0
        while T > config.TEMPERATURE_FLOOR:
            i += 1
            candidate, move = self.neighbour(current_perm)
            candidate, candidate_route = self.evaluate(candidate)
            candidate_cost = candidate_route.total_distance

            move_type = 'rejected'
            if candidate_cost < best_route.total_distance:
                best_perm, best_route, best_stops = list(candidate), candidate_route, None
                move_type = 'new_best'

            if candidate_cost < current_cost:
                if move_type != 'new_best':
                    move_type = 'better'
                current_perm, current_cost = candidate, candidate_cost
            elif math.exp(-(candidate_cost - current_cost) / T) > self.rng.random():
                move_type = 'sa_accepted'
                current_perm, current_cost = candidate, candidate_cost

            if self.verbose and (i % self.log_every == 0 or move_type == 'new_best'):
                print(f"  Iter {i:>5} | Best: {best_route.total_distance:<10.2f} | Current: {current_cost:<10.2f} "
                      f"| Temp: {T:<8.2f} | Move: {move} | {move_type}")

            history["iteration"].append(i)
            history["temperature"].append(T)
            history["current_cost"].append(current_cost)
            history["best_cost"].append(best_route.total_distance)
            history["candidate_cost"].append(candidate_cost)
            history["move"].append(move)
            history["accepted_move_type"].append(move_type)

            T *= cooling_rate

        if self.verbose:
            print(f"--- {self.name} complete after {i} iterations. Best cost found: {best_route.total_distance:.2f} ---")
        return SearchResult(algorithm=self.name, route=best_route, permutation=best_perm,
                            stops=best_stops, solve_time=time.time() - start_time, history=history)


class AssistedSimulatedAnnealing(SimulatedAnnealing):
    """Annealing whose relocate move is steered by a scoring oracle half of the time."""
    name = "assisted_simulated_annealing"

    def __init__(self, graph: "Graph", table: "ShortestPathTable", oracle: "ScoringOracle",
                 rng: Optional[random.Random] = None,
                 oracle_move_probability: float = config.ORACLE_MOVE_PROBABILITY,
                 verbose: bool = False, log_every: int = 100):
        super().__init__(graph, table, rng=rng, verbose=verbose, log_every=log_every)
        self.oracle = oracle
        self.oracle_move_probability = oracle_move_probability

    def neighbour(self, permutation: Sequence[int]) -> Tuple[List[int], str]:
        if self.rng.random() < self.oracle_move_probability:
            return oracle_relocate_move(permutation, self.oracle, self.rng, self.graph.depot), "oracle_relocate"
        return relocate_move(permutation, self.rng), "relocate"
