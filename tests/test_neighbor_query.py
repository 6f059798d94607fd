import numpy as np
import pytest

from pointclean.neighbor_query import MIN_RADIUS_NEIGHBORS, NeighborQuery


@pytest.fixture
def line_points():
    # Points on the x axis at 0, 1, 2, ..., 9
    return np.stack([np.arange(10, dtype=np.float64), np.zeros(10), np.zeros(10)], axis=1)


def test_k_nearest_includes_query_point(line_points):
    query = NeighborQuery(line_points)
    result = query.neighbors(line_points[4], k=3)

    assert result.shape == (3, 3)
    np.testing.assert_array_equal(result[0], line_points[4])
    assert set(result[:, 0]) <= {3.0, 4.0, 5.0}


def test_k_larger_than_cloud_returns_all(line_points):
    query = NeighborQuery(line_points[:4])
    result = query.neighbors(line_points[0], k=10)

    assert result.shape == (4, 3)


def test_radius_without_cap(line_points):
    query = NeighborQuery(line_points)
    result = query.neighbors(line_points[5], k=0, radius=2.5)

    assert sorted(result[:, 0]) == [3.0, 4.0, 5.0, 6.0, 7.0]


def test_radius_capped_by_k_keeps_nearest(line_points):
    query = NeighborQuery(line_points)
    result = query.neighbors(line_points[5], k=3, radius=2.5)

    assert sorted(result[:, 0]) == [4.0, 5.0, 6.0]


def test_sparse_radius_falls_back_to_nearest(line_points):
    query = NeighborQuery(line_points)
    result = query.neighbors(line_points[0], k=0, radius=0.5)

    assert len(result) == MIN_RADIUS_NEIGHBORS
    assert sorted(result[:, 0]) == [0.0, 1.0, 2.0]


def test_rejects_non_3d_points():
    with pytest.raises(ValueError):
        NeighborQuery(np.zeros((5, 2)))


def test_sparse_radius_fallback_respects_k(line_points):
    query = NeighborQuery(line_points)
    result = query.neighbors(line_points[0], k=2, radius=0.5)

    assert sorted(result[:, 0]) == [0.0, 1.0]
