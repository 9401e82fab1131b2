# run_experiments.py

import argparse
import datetime
import os
import random
import shutil
import sys
import time

import numpy as np
import pandas as pd

from graph_cvrp import config
from graph_cvrp.core.generator import generate_instance
from graph_cvrp.core.graph import InfeasibleInstanceError, validate_instance
from graph_cvrp.core.problem_parser import export_graph_csv, load_graph_csv
from graph_cvrp.core.shortest_paths import ShortestPathTable
from graph_cvrp.algorithm.greedy import GreedyConstructor, OracleGreedyConstructor
from graph_cvrp.algorithm.simulated_annealing import AssistedSimulatedAnnealing, SimulatedAnnealing
from graph_cvrp.oracle.cooccurrence import CooccurrenceOracle
from graph_cvrp.oracle.random_walk import biased_random_walks
from graph_cvrp.utils.logger import Logger, restore_streams
from graph_cvrp.utils.solution_analyzer import print_solution_details, validate_route_feasibility
from graph_cvrp.utils.plotter import plot_annealing_history, plot_results_comparison


def build_instance(size: int, run: int, run_dir: str):
    """Loads the configured CSV instance, or generates one for (size, run)."""
    if config.INSTANCE_NODES_PATH and config.INSTANCE_EDGES_PATH:
        print(f"Loading instance from '{config.INSTANCE_NODES_PATH}' / '{config.INSTANCE_EDGES_PATH}'")
        return load_graph_csv(config.INSTANCE_NODES_PATH, config.INSTANCE_EDGES_PATH, config.VEHICLE_CAPACITY)

    sparseness = max(config.SPARSENESS, int(size * config.SPARSENESS / config.SIZE))
    graph = generate_instance(size, sparseness, seed=config.RANDOM_SEED + 1000 * size + run)
    export_graph_csv(graph, os.path.join(run_dir, "instances"), prefix=f"size{size}_run{run}")
    return validate_instance(graph)


def solve_instance(graph, size: int, run: int, run_dir: str):
    rows = []
    table = ShortestPathTable.calculate(graph)
    print(f"{graph}\n{table}")

    # --- Greedy ---
    greedy = GreedyConstructor(graph, table)
    greedy_result = greedy.solve()

    # --- Baseline annealing ---
    sa = SimulatedAnnealing(graph, table, rng=random.Random(config.RANDOM_SEED + run), verbose=True)
    sa_result = sa.solve(greedy.permutation, config.COOLING_RATE, config.START_TEMPERATURE,
                         initial_stops=greedy_result.stops)

    # --- Scoring oracle from random walks ---
    oracle_start = time.time()
    walks = biased_random_walks(graph, rng=np.random.default_rng(config.RANDOM_SEED + run))
    oracle = CooccurrenceOracle.fit(walks, graph.size)
    print(f"Trained {oracle} on {len(walks)} walks in {time.time() - oracle_start:.2f}s")

    # --- Oracle driven greedy ---
    oracle_greedy_result = OracleGreedyConstructor(graph, table, oracle).solve()

    # --- Oracle assisted annealing ---
    assisted = AssistedSimulatedAnnealing(graph, table, oracle, rng=random.Random(config.RANDOM_SEED + run),
                                          verbose=True)
    assisted_result = assisted.solve(greedy.permutation, config.COOLING_RATE, config.START_TEMPERATURE,
                                     initial_stops=greedy_result.stops)

    for result in (greedy_result, oracle_greedy_result, sa_result, assisted_result):
        print_solution_details(result)
        errors = validate_route_feasibility(graph, result.route)
        rows.append({
            "size": size, "run": run, "algorithm": result.algorithm,
            "distance": result.total_distance, "seconds": result.solve_time,
            "feasible": not errors
        })
        if config.SAVE_PLOTS and result.history:
            plot_annealing_history(result.history, os.path.join(run_dir, "plots"),
                                   prefix=f"size{size}_run{run}_{result.algorithm}_")
    return rows


def main(args):
    # --- 1. SETUP ---
    if config.CLEAR_OLD_RESULTS_ON_START and os.path.exists(config.RESULTS_BASE_DIR):
        print(f"Config 'CLEAR_OLD_RESULTS_ON_START' is True. Removing old '{config.RESULTS_BASE_DIR}' directory...")
        shutil.rmtree(config.RESULTS_BASE_DIR)

    timestamp = datetime.datetime.now().strftime("%Y-%m-%d_%H-%M-%S")
    run_dir = os.path.join(config.RESULTS_BASE_DIR, f"experiment_run_{timestamp}")
    os.makedirs(run_dir, exist_ok=True)

    log_file_path = os.path.join(run_dir, "log.txt")
    sys.stdout = Logger(log_file_path, sys.stdout)
    sys.stderr = Logger(log_file_path, sys.stderr)
    try:
        run_all(run_dir, timestamp)
    finally:
        restore_streams()


def run_all(run_dir: str, timestamp: str):
    config_path = os.path.join(os.path.dirname(os.path.abspath(__file__)), 'graph_cvrp', 'config.py')
    try:
        shutil.copy(config_path, os.path.join(run_dir, 'config_snapshot.py'))
    except FileNotFoundError:
        print(f"Warning: Could not find '{config_path}' to create a snapshot.")

    random.seed(config.RANDOM_SEED)
    start_time = time.time()

    print("="*80)
    print("GRAPH CVRP HEURISTICS EXPERIMENT")
    print(f"Run ID: experiment_run_{timestamp}")
    print(f"Sizes: {config.EXPERIMENT_SIZES}, Runs per size: {config.RUNS_PER_SIZE}")
    print(f"Results for this run will be saved in: {run_dir}")
    print("="*80)

    # --- 2. EXPERIMENT LOOP ---
    all_rows = []
    for size in config.EXPERIMENT_SIZES:
        for run in range(config.RUNS_PER_SIZE):
            print("\n" + "#"*70 + f"\n### SIZE {size} | RUN {run + 1}/{config.RUNS_PER_SIZE} ###\n" + "#"*70)
            try:
                graph = build_instance(size, run, run_dir)
            except (FileNotFoundError, InfeasibleInstanceError, ValueError, KeyError) as e:
                print(f"FATAL ERROR: Could not build instance of size {size} (run {run}).")
                print(f"Details: {e}")
                continue
            all_rows.extend(solve_instance(graph, size, run, run_dir))

    # --- 3. RESULTS ---
    if all_rows:
        results_df = pd.DataFrame(all_rows)
        results_path = os.path.join(run_dir, config.RESULTS_FILE_NAME)
        results_df.to_csv(results_path, index=False)
        print("\n" + "="*60 + "\n--- SUMMARY ---\n" + "="*60)
        print(results_df.groupby(['size', 'algorithm'])['distance'].agg(['mean', 'min', 'max']).round(2))
        print(f"\nResults table saved to {results_path}")
        if config.SAVE_PLOTS:
            plot_results_comparison(all_rows, run_dir)

    print(f"\nExperiment complete in {time.time() - start_time:.2f}s. All artifacts have been saved to: {run_dir}")


def _apply_overrides(args):
    if args.sizes:
        config.EXPERIMENT_SIZES = args.sizes
    if args.runs is not None:
        config.RUNS_PER_SIZE = args.runs
    if args.seed is not None:
        config.RANDOM_SEED = args.seed
    if args.cooling_rate is not None:
        config.COOLING_RATE = args.cooling_rate
    if args.start_temperature is not None:
        config.START_TEMPERATURE = args.start_temperature
    if args.nodes and args.edges:
        config.INSTANCE_NODES_PATH = args.nodes
        config.INSTANCE_EDGES_PATH = args.edges
    if args.no_plots:
        config.SAVE_PLOTS = False


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description="Run the greedy constructors, annealing and oracle assisted annealing on CVRP graphs.")
    parser.add_argument('-s', '--sizes', type=int, nargs='+', default=None,
                        help="Instance sizes (number of nodes, depot included).")
    parser.add_argument('-r', '--runs', type=int, default=None, help="Runs per instance size.")
    parser.add_argument('--seed', type=int, default=None, help="Base random seed.")
    parser.add_argument('--cooling-rate', type=float, default=None, help="Geometric cooling factor in (0, 1).")
    parser.add_argument('--start-temperature', type=float, default=None, help="Initial annealing temperature.")
    parser.add_argument('--nodes', type=str, default=None, help="Node CSV (ID, Demand) of a fixed instance.")
    parser.add_argument('--edges', type=str, default=None, help="Edge CSV (From, To, Length) of a fixed instance.")
    parser.add_argument('--no-plots', action='store_true', help="Skip saving plots.")
    args = parser.parse_args()
    _apply_overrides(args)
    main(args)
