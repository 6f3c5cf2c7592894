import logging
import math
import os
from concurrent.futures import ThreadPoolExecutor

import numpy as np

from airtsp.aco.ant import Ant
from airtsp.aco.config import load_config
from airtsp.aco.graph import TriangleMatrix
from airtsp.aco.pheromones import PheromoneMatrix

cfg = load_config()

logger = logging.getLogger(__name__)

INIT_INTENSITY_MULTIPLIER = cfg["intensity"]["init_multiplier"]
MIN_INTENSITY = cfg["intensity"]["min"]


def split_quota(ants, workers):
    """Spread `ants` over `workers` as evenly as possible, in a fixed order."""
    base, extra = divmod(ants, workers)
    return [base + (1 if w < extra else 0) for w in range(workers)]


def run_group(ants, weights):
    """One tour from each ant of a worker's group, in order."""
    return [ant.construct_tour(weights) for ant in ants]


class AntColonySolver:
    """
    Ant colony over a DistanceIndex.

    Every iteration the edge weights are recomputed from the pheromones, the ants
    build tours in parallel against that frozen snapshot, the better half of the
    tours (the best tour so far included) is kept, the pheromones evaporate and the
    kept tours deposit Q / length on each of their edges.
    """

    def __init__(self, distances, initial_intensity=None, deposition_constant=None,
                 min_intensity=MIN_INTENSITY, max_attempts=None):
        self.distances = distances
        self.num_nodes = distances.size
        self.min_intensity = min_intensity
        self.max_attempts = max_attempts if max_attempts is not None else cfg.get("max_attempts")

        mean_dist = distances.mean() if self.num_nodes > 1 else math.nan
        if deposition_constant is not None:
            self.q = deposition_constant
        elif self.num_nodes > 1 and not math.isnan(mean_dist):
            self.q = mean_dist
        else:
            self.q = 1.0

        if initial_intensity is not None:
            self.initial_intensity = initial_intensity
        elif self.num_nodes > 1 and not math.isnan(mean_dist):
            self.initial_intensity = INIT_INTENSITY_MULTIPLIER * mean_dist
        else:
            self.initial_intensity = 0.0

        self.pheromones = PheromoneMatrix(distances, self.initial_intensity, min_intensity)
        self.weights = TriangleMatrix(self.num_nodes, fill=0.0)

        self.best_tour = None
        self.best_length = math.inf
        self.best_length_history = []
        self.best_tour_history = []
        self.pheromone_history = []
        self.total_iterations = 0

    def __repr__(self):
        return (f"AntColonySolver(num_nodes={self.num_nodes}, q={self.q:.6g}, "
                f"initial_intensity={self.initial_intensity:.6g})")

    def reset(self):
        self.pheromones.reset()
        self.best_tour = None
        self.best_length = math.inf
        self.best_length_history = []
        self.best_tour_history = []
        self.pheromone_history = []
        self.total_iterations = 0

    def spawn_ants(self, count, seed=None):
        """One Ant per ant slot, each with an independent random stream."""
        seeds = np.random.SeedSequence(seed).spawn(count)
        return [Ant(self.distances, seed=s, max_attempts=self.max_attempts) for s in seeds]

    def update_weights(self, alpha, beta):
        return self.pheromones.weights_into(self.weights, alpha, beta)

    def simulate(self, ants, pool=None, workers=1):
        """
        One tour per ant. The ants are handed to the workers in contiguous groups,
        so the tours come back in ant order whatever the worker count. Returns once
        every tour is in.
        """
        groups, start = [], 0
        for quota in split_quota(len(ants), max(1, workers)):
            if quota:
                groups.append(ants[start:start + quota])
            start += quota
        if pool is None or len(groups) <= 1:
            batches = [run_group(group, self.weights) for group in groups]
        else:
            futures = [pool.submit(run_group, group, self.weights) for group in groups]
            batches = [f.result() for f in futures]
        return [tour for batch in batches for tour in batch]

    def select(self, tours):
        """Elitism plus truncation: the better half of this round's tours and the champion."""
        candidates = list(tours)
        if self.best_tour is not None:
            candidates.append((self.best_tour, self.best_length))
        candidates.sort(key=lambda c: c[1])
        return candidates[:(len(candidates) + 1) // 2]

    def update_pheromones(self, kept, decay):
        self.pheromones.evaporate(decay)
        for tour, length in kept:
            if length > 0:
                self.pheromones.deposit(tour, self.q / length)

    def update_champion(self, kept, iteration):
        for tour, length in kept:
            if self.best_tour is None:
                logger.info("First cycle: %s, len: %.5f", tour, length)
            elif length < self.best_length:
                logger.info("New cycle: %s, len: %.6f, iteration: [%d]", tour, length, iteration)
            else:
                continue
            self.best_tour = list(tour)
            self.best_length = length

    def iterate(self, ants, decay, alpha, beta, pool=None, workers=1):
        """One full iteration; pheromone mutation starts only after every ant is done."""
        self.update_weights(alpha, beta)
        tours = self.simulate(ants, pool, workers)
        kept = self.select(tours)
        self.update_pheromones(kept, decay)
        self.update_champion(kept, self.total_iterations)

        self.total_iterations += 1
        self.best_length_history.append(self.best_length)
        self.best_tour_history.append(list(self.best_tour) if self.best_tour is not None else [])
        return kept

    def solve(self, iterations, ants, evaporation_rate, alpha, beta, workers=None, seed=None,
              record_pheromones=False):
        """
        Run the colony for a fixed number of iterations.

        Returns (tour, total_distance) of the best tour found. With a fixed seed the
        result does not depend on thread scheduling or on the worker count.
        """
        if self.num_nodes == 0:
            return [], 0.0
        if self.num_nodes == 1:
            return [0], 0.0
        if iterations < 1:
            raise ValueError(f"iterations must be at least 1, got {iterations}")
        if ants < 1:
            raise ValueError(f"ants must be at least 1, got {ants}")
        if not 0.0 <= evaporation_rate <= 1.0:
            raise ValueError(f"evaporation rate must be within [0, 1], got {evaporation_rate}")

        decay = 1.0 - evaporation_rate
        if workers is None:
            workers = cfg.get("workers") or os.cpu_count() or 1
        workers = max(1, min(workers, ants))

        self.reset()
        colony = self.spawn_ants(ants, seed)
        logger.debug("Solving %d nodes with %d ants on %d workers", self.num_nodes, ants, workers)

        with ThreadPoolExecutor(max_workers=workers) as pool:
            for _ in range(iterations):
                self.iterate(colony, decay, alpha, beta, pool, workers)
                if record_pheromones:
                    self.pheromone_history.append(self.pheromones.snapshot())

        retries = sum(ant.failed_attempts for ant in colony)
        if retries:
            logger.info("Discarded %d incomplete traversals", retries)
        logger.info("Best cycle: %s, len: %.5f", self.best_tour, self.best_length)
        return list(self.best_tour), self.best_length


def new_solver(distance_index, initial_intensity=None, deposition_constant=None, **kwargs):
    return AntColonySolver(distance_index, initial_intensity, deposition_constant, **kwargs)


def solve(solver, iterations, ants, evaporation_rate, alpha, beta, **kwargs):
    return solver.solve(iterations, ants, evaporation_rate, alpha, beta, **kwargs)
