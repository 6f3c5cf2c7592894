import math

import numpy as np
import pytest

from airtsp.aco.distances import build_distance_index, planck_curve, reciprocal_planck
from airtsp.aco.geo import EARTH_RADIUS_KM, Coord, great_circle
from airtsp.aco.graph import TriangleMatrix, cycle_edges, pos

QUARTER = math.pi * EARTH_RADIUS_KM / 2


def test_octant_distances(octant):
    index = build_distance_index(octant)
    assert index.size == 3
    for i in range(3):
        for j in range(3):
            expected = 0.0 if i == j else QUARTER
            assert index.between(i, j) == pytest.approx(expected, rel=1e-12)
        assert index.between(3, i) is None
        assert index.between(i, 3) is None
        assert index.between(-1, i) is None


def test_symmetric_with_zero_diagonal(europe, europe_index):
    n = len(europe)
    for i in range(n):
        assert europe_index.between(i, i) == 0.0
        for j in range(i):
            d = europe_index.between(i, j)
            assert d == europe_index.between(j, i)
            assert d > 0
            assert d == pytest.approx(great_circle(europe[i].coord, europe[j].coord), rel=1e-12)


def test_flattened_layout():
    assert [pos(1, 0), pos(2, 0), pos(2, 1), pos(3, 0)] == [0, 1, 2, 3]
    assert pos(0, 3) == pos(3, 0)
    m = TriangleMatrix(4, [10, 20, 21, 30, 31, 32])
    assert m.between(3, 1) == m.between(1, 3) == 31
    assert m.between(2, 2, default=0.0) == 0.0
    square = m.to_square()
    assert square[2, 1] == square[1, 2] == 21
    assert list(m.row(2, np.array([0, 1, 3]))) == [20, 21, 32]


def test_cycle_edges_wrap_around():
    assert list(cycle_edges([3, 1, 2])) == [(3, 1), (1, 2), (2, 3)]
    assert list(cycle_edges([])) == []


def test_min_dist_excludes_short_pairs(close_pair_points):
    index = build_distance_index(close_pair_points, min_dist=200.0)
    assert index.between(0, 1) is None
    assert index.between(1, 0) is None
    assert index.between(0, 2) is not None
    assert index.between(0, 0) == 0.0


@pytest.mark.parametrize("pair", [(0, 1), (1, 0)])
def test_exceptions_are_symmetric(close_pair_points, pair):
    index = build_distance_index(close_pair_points, min_dist=200.0, exceptions={pair})
    assert index.between(0, 1) == pytest.approx(great_circle(close_pair_points[0], close_pair_points[1]))
    assert index.between(1, 0) == index.between(0, 1)


def test_invalid_exception_pair(close_pair_points):
    with pytest.raises(ValueError):
        build_distance_index(close_pair_points, min_dist=200.0, exceptions={(0, 9)})


def test_degenerate_sizes():
    empty = build_distance_index([])
    assert empty.size == 0
    assert empty.between(0, 0) is None
    single = build_distance_index([Coord(0.1, 0.2)])
    assert single.size == 1
    assert single.between(0, 0) == 0.0
    assert math.isnan(single.mean())


def test_planck_curve_peaks_at_target():
    curve = planck_curve(500.0)
    v_499, v_500, v_501 = (float(curve(x)) for x in (499.0, 500.0, 501.0))
    assert v_500 == pytest.approx(1.0, abs=1e-9)
    assert v_499 < v_500
    assert v_501 < v_500


def test_planck_curve_identity_at_zero_and_infinity():
    curve = planck_curve(500.0)
    assert float(curve(0.0)) == 0.0
    assert float(curve(math.inf)) == math.inf
    assert math.isnan(float(curve(math.nan)))


def test_planck_curve_rejects_bad_target():
    with pytest.raises(ValueError):
        planck_curve(0.0)


def test_target_edge_length_reweights_cost_only(europe, europe_index):
    target = 800.0
    index = build_distance_index(europe.coords, target_edge_length=target)
    transform = reciprocal_planck(target)
    for i in range(len(europe)):
        for j in range(i):
            raw = europe_index.between(i, j)
            assert index.between(i, j) == raw
            assert index.cost_between(i, j) == pytest.approx(float(transform(raw)))
            assert index.cost_between(i, j) >= 1.0 - 1e-9


def test_mean_skips_excluded_pairs(close_pair_points):
    full = build_distance_index(close_pair_points)
    partial = build_distance_index(close_pair_points, min_dist=200.0)
    present = [full.between(i, j) for i in range(4) for j in range(i) if (i, j) != (1, 0)]
    assert partial.mean() == pytest.approx(sum(present) / len(present))
