# graph_cvrp/oracle/scoring.py
from typing import Protocol, Sequence, runtime_checkable


@runtime_checkable
class ScoringOracle(Protocol):
    """
    Learned preference for the node that should follow a given node.

    `score(node_id)` returns one value per graph node; a higher value means a
    stronger preference for that node as the successor of `node_id`. The
    assisted annealing search only ranks these values.
    """

    def score(self, node_id: int) -> Sequence[float]:
        ...
