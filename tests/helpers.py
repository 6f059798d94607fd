from pathlib import Path

import laspy
import numpy as np


FAR_POINTS = np.array(
    [
        (50.0, 50.0, 50.0),
        (-50.0, 50.0, 50.0),
        (50.0, -50.0, 50.0),
        (50.0, 50.0, -50.0),
        (-50.0, -50.0, -50.0),
    ]
)


def write_las(path, xyz: np.ndarray) -> str:
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    header = laspy.LasHeader(point_format=3, version="1.2")
    header.scales = np.array([0.001, 0.001, 0.001])
    header.offsets = np.zeros(3)
    las = laspy.LasData(header)
    las.x = xyz[:, 0]
    las.y = xyz[:, 1]
    las.z = xyz[:, 2]
    las.classification = np.full(len(xyz), 1, dtype=np.uint8)
    las.write(str(path))
    return str(path)
