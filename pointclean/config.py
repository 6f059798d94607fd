from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field, model_validator


class OutputMode(str, Enum):
    inliers = "inliers"
    split = "split"
    classified = "classified"


class OutlierParams(BaseModel):
    k: int = Field(24, ge=0, description="Neighbors per query; caps the count in radius mode (0 = no cap)")
    neighbor_radius_m: float = Field(0.0, ge=0.0, description="Spherical neighborhood radius; 0 = k-nearest mode")
    threshold_percent: float = Field(10.0, ge=0.0, le=100.0, description="Maximum percentage of points to remove")
    threshold_distance_m: float = Field(0.0, ge=0.0, description="Points with a smaller RMS neighbor distance are never removed")

    @model_validator(mode="after")
    def _check_k(self) -> "OutlierParams":
        if self.neighbor_radius_m > 0:
            if self.k == 1:
                raise ValueError("k must be 0 (no cap) or >= 2 in radius mode")
        elif self.k < 2:
            raise ValueError("k must be >= 2 unless neighbor_radius_m > 0")
        return self


class CleaningConfig(BaseModel):
    outliers: OutlierParams = Field(default_factory=OutlierParams)
    output_mode: OutputMode = Field(OutputMode.inliers, description="What to write for each cleaned file")
    progress_step: float = Field(0.1, gt=0.0, le=1.0, description="Fraction of points between progress log lines")
    time_limit_s: Optional[float] = Field(None, gt=0.0, description="Cancel scoring of a file after this many seconds")
    output_suffix: str = Field("_cleaned", description="Appended to the input file stem")
    min_points: int = Field(3, ge=1, description="Files with fewer points are written through unfiltered")
