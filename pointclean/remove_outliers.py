import logging
from enum import Enum
from typing import Any, Callable, MutableSequence, Optional

import numpy as np

from .neighbor_query import NeighborQuery
from .neighborhood import average_squared_distance


logger = logging.getLogger(__name__)

PointMap = Callable[[Any], Any]
ProgressCallback = Callable[[float], bool]


class PreconditionError(AssertionError):
    """Raised when an outlier run is started with arguments that break its contract."""


class RunState(str, Enum):
    idle = "idle"
    scoring = "scoring"
    cancelled = "cancelled"
    ranking = "ranking"
    rewriting = "rewriting"
    done = "done"


def _require(condition: bool, message: str) -> None:
    if not condition:
        raise PreconditionError(message)


def extract_coordinates(points, point_map: Optional[PointMap] = None) -> np.ndarray:
    """Return the (N, 3) float64 coordinates of points through point_map (identity by default)."""
    if point_map is None:
        xyz = np.asarray(points, dtype=np.float64)
    else:
        xyz = np.asarray([point_map(p) for p in points], dtype=np.float64)
    if xyz.ndim != 2 or xyz.shape[1] != 3:
        raise ValueError(f"Point coordinates must form an (N, 3) array, got shape {xyz.shape}")
    return xyz


def first_index_to_remove(sorted_scores: np.ndarray, threshold_percent: float, threshold_distance: float) -> int:
    """Cut position in ascending scores: everything before it is kept.

    At most floor(n * threshold_percent / 100) positions are removable by the
    percent rule. A position is kept while it lies before that removable tail
    or its score is below the squared distance threshold; the cut lands after
    the last kept position.
    """
    sorted_scores = np.asarray(sorted_scores, dtype=np.float64)
    n = len(sorted_scores)
    removable = int(n * threshold_percent / 100.0)
    cut_by_percent = n - removable
    keep = (np.arange(n) < cut_by_percent) | (sorted_scores < threshold_distance * threshold_distance)
    kept = np.flatnonzero(keep)
    if kept.size == 0:
        return 0
    return int(kept[-1]) + 1


def _rewrite_in_place(points: MutableSequence, order: np.ndarray) -> None:
    if isinstance(points, np.ndarray):
        # Fancy indexing copies, so rows are not overwritten before they are read
        points[...] = points[order]
        return
    ranked = [points[i] for i in order]
    for dst, item in enumerate(ranked):
        points[dst] = item


class OutlierRemover:
    """Scores points by neighborhood density and packs inliers first.

    One instance runs one pass at a time. After a completed run `sorted_scores`
    holds the scores in the new point order; `state` tells a cancelled run
    apart from one that found nothing to remove.
    """

    def __init__(
        self,
        k: int,
        point_map: Optional[PointMap] = None,
        neighbor_radius: float = 0.0,
        threshold_percent: float = 10.0,
        threshold_distance: float = 0.0,
        callback: Optional[ProgressCallback] = None,
        neighbor_query=None,
    ):
        self.k = k
        self.point_map = point_map
        self.neighbor_radius = neighbor_radius
        self.threshold_percent = threshold_percent
        self.threshold_distance = threshold_distance
        self.callback = callback
        self.neighbor_query = neighbor_query
        self.state = RunState.idle
        self.sorted_scores: Optional[np.ndarray] = None

    def _check_preconditions(self, points: MutableSequence) -> None:
        _require(len(points) > 0, "remove_outliers requires at least one point")
        _require(self.neighbor_radius >= 0, f"neighbor_radius must be >= 0, got {self.neighbor_radius}")
        if self.neighbor_radius > 0:
            _require(
                self.k == 0 or self.k >= 2,
                f"k must be 0 (no cap) or >= 2 in radius mode, got {self.k}",
            )
        else:
            _require(self.k >= 2, f"k must be >= 2, got {self.k}")
        _require(
            0 <= self.threshold_percent <= 100,
            f"threshold_percent must be within [0, 100], got {self.threshold_percent}",
        )
        _require(self.threshold_distance >= 0, f"threshold_distance must be >= 0, got {self.threshold_distance}")

    def _score(self, xyz: np.ndarray, neighbor_query) -> Optional[np.ndarray]:
        nb_points = len(xyz)
        scores = np.empty(nb_points, dtype=np.float64)
        for nb in range(nb_points):
            scores[nb] = average_squared_distance(xyz[nb], neighbor_query, self.k, self.neighbor_radius)
            if self.callback is not None and not self.callback((nb + 1) / float(nb_points)):
                return None
        return scores

    def run(self, points: MutableSequence) -> int:
        """Reorder points by ascending score and return the index of the first point to remove.

        Returns len(points) and leaves points untouched when the callback cancels.
        """
        self._check_preconditions(points)
        self.sorted_scores = None
        nb_points = len(points)

        xyz = extract_coordinates(points, self.point_map)
        neighbor_query = self.neighbor_query if self.neighbor_query is not None else NeighborQuery(xyz)

        self.state = RunState.scoring
        scores = self._score(xyz, neighbor_query)
        if scores is None:
            self.state = RunState.cancelled
            logger.info("Outlier removal cancelled by callback | points=%d left unchanged", nb_points)
            return nb_points

        self.state = RunState.ranking
        order = np.argsort(scores, kind="stable")
        sorted_scores = scores[order]

        self.state = RunState.rewriting
        _rewrite_in_place(points, order)
        cut = first_index_to_remove(sorted_scores, self.threshold_percent, self.threshold_distance)

        self.sorted_scores = sorted_scores
        self.state = RunState.done
        logger.info(
            "Outlier removal | points=%d k=%d radius=%.6f threshold_percent=%.3f threshold_distance=%.6f | kept=%d removed=%d",
            nb_points,
            self.k,
            self.neighbor_radius,
            self.threshold_percent,
            self.threshold_distance,
            cut,
            nb_points - cut,
        )
        return cut


def remove_outliers(
    points: MutableSequence,
    k: int,
    *,
    point_map: Optional[PointMap] = None,
    neighbor_radius: float = 0.0,
    threshold_percent: float = 10.0,
    threshold_distance: float = 0.0,
    callback: Optional[ProgressCallback] = None,
    neighbor_query=None,
) -> int:
    """Sort points by average squared distance to their neighbors and return the first index to remove.

    The removed count is the smallest one for which at least one threshold
    holds: threshold_percent=100 leaves only threshold_distance in effect,
    threshold_distance=0 leaves only threshold_percent. Erase with
    ``del points[cut:]`` (or keep ``points[:cut]`` for arrays).
    """
    remover = OutlierRemover(
        k,
        point_map=point_map,
        neighbor_radius=neighbor_radius,
        threshold_percent=threshold_percent,
        threshold_distance=threshold_distance,
        callback=callback,
        neighbor_query=neighbor_query,
    )
    return remover.run(points)
