import numpy as np

from airtsp.aco.config import load_config
from airtsp.aco.graph import TriangleMatrix

cfg = load_config()

MIN_INTENSITY = cfg["intensity"]["min"]


class PheromoneMatrix:
    """
    Pheromone intensity per unordered pair, shaped like the distance index.

    Pairs missing from the distance index carry no intensity (NaN) and stay that
    way. Stored values are never clamped; `min_intensity` is applied only when the
    edge weights are computed.
    """

    def __init__(self, distances, initial_intensity, min_intensity=MIN_INTENSITY):
        self.distances = distances
        self.initial_intensity = initial_intensity
        self.min_intensity = min_intensity
        self.graph = TriangleMatrix(distances.size)
        self.reset()

    @property
    def size(self):
        return self.graph.size

    @property
    def matrix(self):
        return self.graph.edges

    def reset(self):
        self.graph.edges[:] = np.where(self.distances.cost.present(), self.initial_intensity, np.nan)

    def between(self, node1, node2):
        return self.graph.between(node1, node2)

    def evaporate(self, decay):
        self.graph.edges *= decay

    def deposit(self, tour, delta):
        # np.add.at accumulates repeated offsets (a 2-node tour uses its edge twice)
        np.add.at(self.graph.edges, self.graph.positions(tour), delta)

    def weights_into(self, target, alpha, beta):
        """
        target <- max(intensity, floor)^alpha / cost^beta. Pairs without a cost get
        weight 0 so they are never sampled.
        """
        floor = self.min_intensity

        def weight(cost, intensity):
            with np.errstate(divide="ignore", invalid="ignore", over="ignore"):
                w = np.fmax(intensity, floor) ** alpha / cost ** beta
            return np.where(np.isnan(cost), 0.0, w)

        return self.distances.cost.merge_into(self.graph, target, weight)

    def snapshot(self):
        return self.graph.to_square(diagonal=np.nan)
