import logging

import numpy as np

from airtsp.aco.kahan import KahanAdder
from airtsp.aco.sampler import CumulativeWeights, WeightedError

logger = logging.getLogger(__name__)


class TraversalExhausted(RuntimeError):
    """No complete tour was found within the allowed number of attempts."""


class Ant:
    """
    One ant slot of the colony. It owns its random generator and scratch buffers
    (visited mask, sampler) and reuses them for every tour it builds; it only
    reads the distance index and the weight graph it is handed.
    """

    def __init__(self, distances, seed=None, max_attempts=None):
        self.distances = distances
        self.num_nodes = distances.size
        self.rng = np.random.default_rng(seed)
        self.max_attempts = max_attempts
        self.not_visited = np.ones(self.num_nodes, dtype=bool)
        self.sampler = CumulativeWeights(self.num_nodes)
        self.failed_attempts = 0

    def traverse(self, weights, start_node=None):
        """
        Build one closed tour. Returns (tour, length), or None if an edge on the way
        is missing or no candidate can be sampled.
        """
        n = self.num_nodes
        if n == 0:
            return [], 0.0
        if n == 1:
            return [0], 0.0

        start = int(self.rng.integers(n)) if start_node is None else start_node
        not_visited = self.not_visited
        not_visited.fill(True)
        not_visited[start] = False

        tour = [start]
        current = start
        total = KahanAdder()

        while True:
            remaining = np.flatnonzero(not_visited)
            if remaining.size == 0:
                closing = self.distances.between(current, start)
                if closing is None:
                    return None
                return tour, total.push_and_result(closing)

            if remaining.size == 1:
                chosen = int(remaining[0])
            else:
                chosen = self.choose_next(weights.row(current, remaining), remaining)
                if chosen is None:
                    logger.debug("No next node from %d", current)
                    return None

            step = self.distances.between(current, chosen)
            if step is None:
                return None
            not_visited[chosen] = False
            tour.append(chosen)
            total.push(step)
            current = chosen

    def choose_next(self, row, candidates):
        """
        Sample one of `candidates` by weight, None if the weights admit no choice.
        Zero-length edges weigh +inf; when any are present the choice is uniform
        among them.
        """
        infinite = np.isposinf(row)
        if infinite.any():
            nearest = candidates[infinite]
            return int(nearest[self.rng.integers(nearest.size)])
        try:
            self.sampler.fill(row)
        except WeightedError as e:
            logger.debug("Cannot sample %d candidates: %s", candidates.size, e)
            return None
        return int(candidates[self.sampler.sample(self.rng)])

    def construct_tour(self, weights):
        """Traverse from fresh random starts until a full tour comes out."""
        attempts = 0
        while True:
            result = self.traverse(weights)
            if result is not None:
                return result
            attempts += 1
            self.failed_attempts += 1
            if self.max_attempts is not None and attempts >= self.max_attempts:
                raise TraversalExhausted(
                    f"No complete tour over {self.num_nodes} nodes after {attempts} attempts"
                )
