import os
import logging
from glob import glob
from typing import List

import numpy as np

from .config import CleaningConfig, OutputMode
from .las_io import LOW_NOISE_CLASS, read_xyz, write_points_like
from .progress import LoggingProgress, TimeLimit, chain
from .remove_outliers import OutlierRemover, RunState


logger = logging.getLogger(__name__)


def _ensure_dir(path: str) -> None:
    if path and not os.path.exists(path):
        os.makedirs(path, exist_ok=True)


def _output_path(file_path: str, output_dir: str, suffix: str) -> str:
    base, ext = os.path.splitext(os.path.basename(file_path))
    return os.path.join(output_dir, f"{base}{suffix}{ext.lower()}")


def clean_input(input_path: str, output_dir: str, config: CleaningConfig) -> List[str]:
    _ensure_dir(output_dir)
    written: List[str] = []

    if os.path.isfile(input_path) and input_path.lower().endswith((".las", ".laz")):
        logger.info("Cleaning single file: %s", input_path)
        written.extend(clean_file(input_path, output_dir, config))
        logger.info("Wrote %d file(s) from %s", len(written), input_path)
        return written

    if os.path.isdir(input_path):
        files = sorted(glob(os.path.join(input_path, "*.la[sz]")))
        logger.info("Discovered %d LAS/LAZ file(s) in directory: %s", len(files), input_path)
        if len(files) == 0:
            raise ValueError(f"No LAS/LAZ files found in directory: {input_path}")
        for f in files:
            logger.info("Processing file: %s", f)
            written.extend(clean_file(f, output_dir, config))
        logger.info("Wrote %d file(s) from directory: %s", len(written), input_path)
        return written

    raise FileNotFoundError(f"Input path is neither a LAS/LAZ file nor a directory: {input_path}")


def clean_file(file_path: str, output_dir: str, config: CleaningConfig) -> List[str]:
    """Remove density outliers from one LAS/LAZ file and write the result per config.output_mode.

    Returns the written paths; empty when scoring was cancelled.
    """
    _ensure_dir(output_dir)
    las, xyz = read_xyz(file_path)
    out_path = _output_path(file_path, output_dir, config.output_suffix)
    nb_points = len(xyz)

    if nb_points < config.min_points:
        logger.info(
            "File %s has %d point(s) < min_points=%d, writing it unfiltered",
            file_path,
            nb_points,
            config.min_points,
        )
        return [write_points_like(las.header, out_path, las.points)]

    params = config.outliers
    callback = chain(
        LoggingProgress(config.progress_step, label=os.path.basename(file_path)),
        TimeLimit(config.time_limit_s) if config.time_limit_s is not None else None,
    )
    remover = OutlierRemover(
        params.k,
        point_map=xyz.__getitem__,
        neighbor_radius=params.neighbor_radius_m,
        threshold_percent=params.threshold_percent,
        threshold_distance=params.threshold_distance_m,
        callback=callback,
    )
    order = np.arange(nb_points, dtype=np.int64)
    cut = remover.run(order)
    if remover.state == RunState.cancelled:
        logger.warning("File %s skipped: outlier scoring was cancelled", file_path)
        return []

    kept = order[:cut]
    removed = order[cut:]
    logger.info(
        "File %s | points=%d kept=%d removed=%d (%.2f%%)",
        file_path,
        nb_points,
        len(kept),
        len(removed),
        100.0 * len(removed) / nb_points,
    )

    if config.output_mode == OutputMode.classified:
        classification = np.asarray(las.classification).copy()
        classification[removed] = LOW_NOISE_CLASS
        las.classification = classification
        return [write_points_like(las.header, out_path, las.points)]

    # Keep inliers in file order rather than score order
    written = [write_points_like(las.header, out_path, las.points[np.sort(kept)])]
    if config.output_mode == OutputMode.split:
        outliers_path = _output_path(file_path, output_dir, config.output_suffix + "_outliers")
        written.append(write_points_like(las.header, outliers_path, las.points[np.sort(removed)]))
    return written
