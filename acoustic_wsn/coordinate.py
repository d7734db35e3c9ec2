# acoustic_wsn/coordinate.py
import math
from typing import NamedTuple, Sequence
import numpy as np

from .constants import TOLERANCE


class Coordinate(NamedTuple):
    """2-D position in metres."""
    x: float = 0.0
    y: float = 0.0

    def dist(self, other: "Coordinate") -> float:
        return math.hypot(self.x - other.x, self.y - other.y)

    def almost_equal(self, other: "Coordinate", tol: float = TOLERANCE) -> bool:
        return abs(self.x - other.x) <= tol and abs(self.y - other.y) <= tol


def distance(a: Coordinate, b: Coordinate) -> float:
    return math.hypot(a[0] - b[0], a[1] - b[1])


def build_distance_matrix(positions: Sequence[Coordinate], origin: Coordinate) -> np.ndarray:
    """
    Symmetric matrix over ``[origin] + positions``; row/column 0 is the depot
    and node ``i`` sits at row ``i + 1``.
    """
    pts = np.array([tuple(origin)] + [tuple(p) for p in positions], dtype=np.float64)
    n = pts.shape[0]
    dist_matrix = np.zeros((n, n), dtype=np.float64)
    for i in range(n):
        for j in range(i + 1, n):
            d = math.hypot(pts[i, 0] - pts[j, 0], pts[i, 1] - pts[j, 1])
            dist_matrix[i, j] = dist_matrix[j, i] = d
    return dist_matrix
