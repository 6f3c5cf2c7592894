from airtsp.aco.ant import Ant, TraversalExhausted
from airtsp.aco.distances import DistanceIndex, build_distance_index, planck_curve
from airtsp.aco.engine import AntColonySolver, new_solver, solve
from airtsp.aco.geo import Coord, great_circle
from airtsp.aco.kahan import KahanAdder, kahan_sum
from airtsp.aco.sampler import AllWeightsZero, CumulativeWeights, InvalidWeight, NoItem, WeightedError

__all__ = [
    "AllWeightsZero",
    "Ant",
    "AntColonySolver",
    "Coord",
    "CumulativeWeights",
    "DistanceIndex",
    "InvalidWeight",
    "KahanAdder",
    "NoItem",
    "TraversalExhausted",
    "WeightedError",
    "build_distance_index",
    "great_circle",
    "kahan_sum",
    "new_solver",
    "planck_curve",
    "solve",
]
