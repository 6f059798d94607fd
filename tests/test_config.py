import pytest
from pydantic import ValidationError

from pointclean.config import CleaningConfig, OutlierParams, OutputMode


def test_defaults():
    config = CleaningConfig()

    assert config.outliers.k == 24
    assert config.outliers.neighbor_radius_m == 0.0
    assert config.outliers.threshold_percent == 10.0
    assert config.outliers.threshold_distance_m == 0.0
    assert config.output_mode == OutputMode.inliers
    assert config.time_limit_s is None


def test_radius_mode_allows_uncapped_k():
    params = OutlierParams(k=0, neighbor_radius_m=0.5)
    assert params.k == 0


@pytest.mark.parametrize(
    "kwargs",
    [
        {"k": 1},
        {"k": 0},
        {"k": 1, "neighbor_radius_m": 0.5},
        {"threshold_percent": 120.0},
        {"threshold_percent": -5.0},
        {"threshold_distance_m": -1.0},
        {"neighbor_radius_m": -0.1},
    ],
)
def test_invalid_outlier_params(kwargs):
    with pytest.raises(ValidationError):
        OutlierParams(**kwargs)


def test_output_mode_from_string():
    config = CleaningConfig(output_mode="classified")
    assert config.output_mode == OutputMode.classified
