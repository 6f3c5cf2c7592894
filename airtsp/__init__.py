"""Approximate shortest airport tours with Ant Colony Optimization."""
from airtsp.aco import (
    AntColonySolver,
    Coord,
    DistanceIndex,
    build_distance_index,
    new_solver,
    solve,
)

__all__ = [
    "AntColonySolver",
    "Coord",
    "DistanceIndex",
    "build_distance_index",
    "new_solver",
    "solve",
]

__version__ = "0.1.0"
