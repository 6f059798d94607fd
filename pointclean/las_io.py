import os
import logging
from typing import Tuple

import laspy
import numpy as np


logger = logging.getLogger(__name__)

LOW_NOISE_CLASS = 7


def read_xyz(path: str) -> Tuple[laspy.LasData, np.ndarray]:
    """Read a LAS/LAZ file and return it with its (N, 3) scaled coordinates."""
    las = laspy.read(path)
    xyz = np.stack(
        [
            np.asarray(las.x, dtype=np.float64),
            np.asarray(las.y, dtype=np.float64),
            np.asarray(las.z, dtype=np.float64),
        ],
        axis=1,
    )
    logger.info("Read %d point(s) from %s", len(xyz), path)
    return las, xyz


def write_points_like(template_header: laspy.LasHeader, output_path: str, points: laspy.ScaleAwarePointRecord) -> str:
    """Write point records with the template's format, scales and offsets.

    Writes LAZ when a backend is available, otherwise falls back to .las.
    Returns the path actually written.
    """
    available_backends = list(laspy.LazBackend.detect_available())
    out_dir = os.path.dirname(output_path)
    if out_dir:
        os.makedirs(out_dir, exist_ok=True)
    las = laspy.create(file_version=template_header.version, point_format=template_header.point_format)
    las.header.scales = template_header.scales
    las.header.offsets = template_header.offsets
    if len(points) > 0:
        las.points = points
    if output_path.lower().endswith(".laz") and len(available_backends) > 0:
        las.write(output_path, do_compress=True, laz_backend=available_backends[0])
        return output_path
    out_path = output_path[:-4] + ".las" if output_path.lower().endswith(".laz") else output_path
    las.write(out_path)
    return out_path
