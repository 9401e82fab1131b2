# graph_cvrp/config.py

# ==============================================================================
# 1. INSTANCE GENERATION
# ==============================================================================
# Number of nodes in the generated graph (node 0 is the depot)
SIZE = 50
# Target number of undirected edges (spanning tree edges included)
SPARSENESS = 63

# Gaussian parameters of the edge lengths
EDGE_LENGTH_MEAN = 150.0
EDGE_LENGTH_DEVIATION = 25.0
# Lower bound on an edge length, edges must have a strictly positive weight
MIN_EDGE_LENGTH = 1e-6

# Gaussian parameters of the customer demands
DEMAND_MEAN = 30.0
DEMAND_DEVIATION = 10.0

# Capacity of the single vehicle
VEHICLE_CAPACITY = 100.0

# Optional CSV instance. When both paths are set the runner loads this
# instance instead of generating random graphs.
# Nodes file columns: ID, Demand    Edges file columns: From, To, Length
INSTANCE_NODES_PATH = None
INSTANCE_EDGES_PATH = None


# ==============================================================================
# 2. SIMULATED ANNEALING
# ==============================================================================
# Geometric cooling factor, temperature_{k+1} = temperature_k * COOLING_RATE
COOLING_RATE = 0.995
# Temperature at the first iteration
START_TEMPERATURE = 1000.0
# The search stops once the temperature drops to or below this value
TEMPERATURE_FLOOR = 1.0

# Baseline variant: probability of a swap move (relocate otherwise)
SWAP_PROBABILITY = 0.5
# Assisted variant: probability of an oracle guided relocate (random relocate otherwise)
ORACLE_MOVE_PROBABILITY = 0.5


# ==============================================================================
# 3. RANDOM WALK CORPUS (input of the scoring oracle)
# ==============================================================================
# Number of walks started from every node
WALKS_PER_NODE = 40
# A walk ends once it has collected this much demand
WALK_DEMAND_BUDGET = 100.0
# Hard limit on the number of steps of a single walk
WALK_MAX_STEPS = 50
# Return parameter: small P favours stepping back to the previous node
WALK_P = 0.8
# In-out parameter: small Q favours moving away from the previous node
WALK_Q = 0.2


# ==============================================================================
# 4. SCORING ORACLE
# ==============================================================================
# How many successors of a node inside a walk count as its context
CONTEXT_SIZE = 1
# Additive smoothing of the co-occurrence counts
SMOOTHING = 1.0


# ==============================================================================
# 5. EXPERIMENTS
# ==============================================================================
# Graph sizes the runner loops over. SPARSENESS is scaled with the size.
EXPERIMENT_SIZES = [SIZE]
# Independent runs (fresh instance and seed offset) per size
RUNS_PER_SIZE = 1
# Seed of every random source of a run (run i uses RANDOM_SEED + i)
RANDOM_SEED = 42


# ==============================================================================
# 6. RESULTS
# ==============================================================================
RESULTS_BASE_DIR = "results"
# If True, the old 'results' directory is removed at the start of every run.
CLEAR_OLD_RESULTS_ON_START = False
RESULTS_FILE_NAME = "results.csv"
# Save convergence plots for the annealing runs
SAVE_PLOTS = True
