import logging
import math

import numpy as np
from scipy.special import lambertw

from airtsp.aco.geo import EARTH_RADIUS_KM, great_circle_pairs
from airtsp.aco.graph import TriangleMatrix, pos

logger = logging.getLogger(__name__)

# x = 3 + W0(-3 e^-3) solves x = 3 (1 - e^-x), the peak of x^3 / (e^x - 1)
PLANCK_PEAK = float(np.real(3.0 + lambertw(-3.0 / math.e ** 3, 0)))


def planck_scale(target):
    """Shape parameter `a` placing the peak of the curve at `target`."""
    return PLANCK_PEAK / target


def planck_law(x, a, k=1.0):
    """
    k * x^3 / (exp(a * x) - 1), vectorized. Where x is 0 or not finite the input is
    returned unchanged.
    """
    x = np.asarray(x, dtype=float)
    regular = np.isfinite(x) & (x != 0.0)
    safe = np.where(regular, x, 1.0)
    with np.errstate(over="ignore"):
        value = k * safe ** 3 / np.expm1(safe * a)
    return np.where(regular, value, x)


def planck_curve(target):
    """Curve peaking with value 1 at `target`, for use as a distance re-weighting."""
    if not target > 0:
        raise ValueError(f"target edge length must be positive, got {target}")
    a = planck_scale(target)
    k = 1.0 / float(planck_law(target, a))

    def curve(x):
        return planck_law(x, a, k)

    return curve


def reciprocal_planck(target):
    """Cost transform: reciprocal of the Planck curve (lowest cost at the target length)."""
    curve = planck_curve(target)

    def transform(x):
        with np.errstate(divide="ignore"):
            return 1.0 / curve(x)

    return transform


class DistanceIndex:
    """
    Pairwise great-circle distances between a fixed set of points.

    `graph` holds the true distances (NaN for excluded pairs). `cost` is what the
    colony weighs edges by: the same matrix, or its re-weighted copy when a target
    edge length was given.
    """

    def __init__(self, graph, cost=None, target_edge_length=None):
        self.graph = graph
        self.cost = graph if cost is None else cost
        assert self.cost.size == self.graph.size, (
            f"Mismatched graph sizes: {self.graph.size} vs {self.cost.size}"
        )
        self.target_edge_length = target_edge_length

    @property
    def size(self):
        return self.graph.size

    def __len__(self):
        return self.size

    def between(self, node1, node2):
        value = self.graph.between(node1, node2, default=0.0)
        if value is None or math.isnan(value):
            return None
        return value

    def cost_between(self, node1, node2):
        value = self.cost.between(node1, node2, default=0.0)
        if value is None or math.isnan(value):
            return None
        return value

    def mean(self):
        """Mean over present pairs; NaN when there are none."""
        present = self.graph.present()
        if not present.any():
            return math.nan
        return float(self.graph.edges[present].mean())

    def transform(self, f):
        """Re-weighted copy: `cost` becomes f(distance) for every present pair."""
        return DistanceIndex(self.graph, self.graph.transform(f), self.target_edge_length)


def build_distance_index(points, min_dist=None, exceptions=(), target_edge_length=None,
                         radius=EARTH_RADIUS_KM):
    """
    Precompute the distance between every pair of points.

    points: sequence of Coord (radians)
    min_dist: pairs closer than this are excluded, unless listed in `exceptions`
    exceptions: iterable of (i, j) index pairs, order-insensitive
    target_edge_length: re-weight costs with a Planck curve peaking at this length
    """
    points = list(points)
    n = len(points)
    graph = TriangleMatrix(n)

    if n > 1:
        lat = np.array([p.lat for p in points], dtype=float)
        lon = np.array([p.lon for p in points], dtype=float)
        rows, cols = np.tril_indices(n, k=-1)
        graph.edges[:] = great_circle_pairs(lat[rows], lon[rows], lat[cols], lon[cols], radius)

        if min_dist is not None:
            keep = graph.edges >= min_dist
            for i, j in exceptions:
                if i == j or not graph.in_bounds(i, j):
                    raise ValueError(f"Invalid exception pair ({i}, {j}) for {n} points")
                keep[pos(i, j)] = True
            excluded = int((~keep).sum())
            graph.edges[~keep] = np.nan
            logger.debug("Excluded %d of %d pairs closer than %s", excluded, keep.size, min_dist)

    index = DistanceIndex(graph)
    if target_edge_length is not None:
        index = index.transform(reciprocal_planck(target_edge_length))
        index.target_edge_length = target_edge_length
    return index
