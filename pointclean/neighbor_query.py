import numpy as np
from scipy.spatial import cKDTree


# Radius queries finding fewer points than this fall back to that many nearest neighbors
MIN_RADIUS_NEIGHBORS = 3


class NeighborQuery:
    """KD-tree over a fixed set of 3D points answering k-nearest and radius queries.

    The indexed points include every query point of an outlier run, so a query
    on an indexed point always returns at least that point (at distance 0).
    """

    def __init__(self, points_xyz: np.ndarray):
        points_xyz = np.asarray(points_xyz, dtype=np.float64)
        if points_xyz.ndim != 2 or points_xyz.shape[1] != 3:
            raise ValueError(f"Expected (N, 3) coordinates, got shape {points_xyz.shape}")
        self._points = points_xyz
        self._tree = cKDTree(points_xyz)

    def neighbors(self, query: np.ndarray, k: int, radius: float = 0.0) -> np.ndarray:
        """Return up to k nearest points, or the points within radius capped at the k nearest.

        radius == 0 selects pure k-nearest mode. With radius > 0, k == 0 means no cap,
        and a sphere holding fewer than MIN_RADIUS_NEIGHBORS points is replaced by
        the MIN_RADIUS_NEIGHBORS nearest points (still capped by k) so isolated
        points do not look dense.
        """
        query = np.asarray(query, dtype=np.float64)
        if radius > 0:
            idx = np.asarray(self._tree.query_ball_point(query, r=radius), dtype=np.int64)
            if idx.size < MIN_RADIUS_NEIGHBORS:
                return self._k_nearest(query, min(MIN_RADIUS_NEIGHBORS, k) if k > 0 else MIN_RADIUS_NEIGHBORS)
            if k > 0 and idx.size > k:
                diffs = self._points[idx] - query
                sq = np.einsum("ij,ij->i", diffs, diffs)
                idx = idx[np.argsort(sq, kind="stable")[:k]]
            return self._points[idx]

        return self._k_nearest(query, k)

    def _k_nearest(self, query: np.ndarray, k: int) -> np.ndarray:
        if k <= 0:
            return np.empty((0, 3), dtype=np.float64)
        dists, idx = self._tree.query(query, k=k)
        dists = np.atleast_1d(dists)
        idx = np.atleast_1d(idx)
        # cKDTree pads with inf/len(points) when k exceeds the number of points
        found = np.isfinite(dists)
        return self._points[idx[found]]
