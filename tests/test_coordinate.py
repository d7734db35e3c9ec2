# tests/test_coordinate.py
import numpy as np
from acoustic_wsn.coordinate import Coordinate, distance, build_distance_matrix


def test_distance_basic():
    a = Coordinate(0.0, 0.0)
    b = Coordinate(3.0, 4.0)
    assert abs(distance(a, b) - 5.0) < 1e-12
    assert abs(a.dist(b) - distance(b, a)) < 1e-12
    assert distance(a, a) == 0.0


def test_almost_equal():
    assert Coordinate(1.0, 1.0).almost_equal(Coordinate(1.0 + 1e-12, 1.0))
    assert not Coordinate(1.0, 1.0).almost_equal(Coordinate(1.1, 1.0))


def test_distance_matrix_depot_first():
    m = build_distance_matrix([Coordinate(1, 0), Coordinate(0, 2)], Coordinate(0, 0))
    assert m.shape == (3, 3)
    assert np.allclose(m, m.T)
    assert np.allclose(np.diag(m), 0.0)
    assert abs(m[0, 1] - 1.0) < 1e-12
    assert abs(m[0, 2] - 2.0) < 1e-12
    assert abs(m[1, 2] - np.sqrt(5.0)) < 1e-12
