# graph_cvrp/oracle/cooccurrence.py
from __future__ import annotations
import time
from typing import List, Sequence

import numpy as np

from .. import config


class CooccurrenceOracle:
    """
    Successor preferences learned from a random walk corpus.

    `counts[a, b]` is how often `b` appears within `context_size` steps after
    `a` in the walks. Scores are the row-wise softmax of the smoothed
    log-counts, so every row sums to 1.
    """

    def __init__(self, scores: np.ndarray, fit_time: float = 0.0):
        scores.setflags(write=False)
        self.scores = scores
        self.fit_time = fit_time
        self._rows: List[List[float]] = scores.tolist()

    @classmethod
    def fit(cls, walks: Sequence[Sequence[int]], num_nodes: int,
            context_size: int = config.CONTEXT_SIZE,
            smoothing: float = config.SMOOTHING) -> "CooccurrenceOracle":
        if context_size < 1:
            raise ValueError(f"context_size must be at least 1, got {context_size}")
        if smoothing <= 0:
            raise ValueError(f"smoothing must be positive, got {smoothing}")
        start_time = time.time()
        counts = np.zeros((num_nodes, num_nodes), dtype=np.float64)
        for walk in walks:
            for pos, node in enumerate(walk):
                for successor in walk[pos + 1:pos + 1 + context_size]:
                    if successor != node:
                        counts[node, successor] += 1.0

        logits = np.log(counts + smoothing)
        logits -= logits.max(axis=1, keepdims=True)
        scores = np.exp(logits)
        scores /= scores.sum(axis=1, keepdims=True)
        return cls(scores, fit_time=time.time() - start_time)

    @property
    def size(self) -> int:
        return len(self._rows)

    def score(self, node_id: int) -> List[float]:
        return self._rows[node_id]

    def best_successor(self, node_id: int) -> int:
        return int(np.argmax(self.scores[node_id]))

    def __repr__(self) -> str:
        return f"CooccurrenceOracle(size={self.size}, fit_time={self.fit_time:.3f}s)"
