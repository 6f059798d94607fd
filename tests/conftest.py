import numpy as np
import pytest

from helpers import FAR_POINTS, write_las


@pytest.fixture
def grid_with_far_points() -> np.ndarray:
    # 10x10 grid with 0.1 spacing and five far points interleaved
    xs, ys = np.meshgrid(np.arange(10) * 0.1, np.arange(10) * 0.1)
    grid = np.stack([xs.ravel(), ys.ravel(), np.zeros(100)], axis=1)
    return np.insert(grid, [10, 30, 50, 70, 90], FAR_POINTS, axis=0)


@pytest.fixture
def las_file(tmp_path, grid_with_far_points) -> str:
    return write_las(tmp_path / "input" / "cloud.las", grid_with_far_points)
