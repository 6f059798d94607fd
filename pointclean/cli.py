import argparse
import logging
from typing import List, Optional

from pydantic import ValidationError

from .config import CleaningConfig, OutlierParams, OutputMode
from .run_pipeline import clean_input


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description=(
            "Remove sparse outliers from LAS/LAZ point clouds by ranking points on the "
            "average squared distance to their nearest neighbors."
        )
    )
    parser.add_argument("input", help="Path to a .las/.laz file or a directory of them.")
    parser.add_argument("output_dir", help="Directory for the cleaned files.")
    parser.add_argument("--k", type=int, default=24, help="Number of neighbors (cap in radius mode, 0 = no cap).")
    parser.add_argument(
        "--neighbor-radius",
        type=float,
        default=0.0,
        help="Spherical neighborhood radius in point units; 0 uses k-nearest neighbors.",
    )
    parser.add_argument(
        "--threshold-percent",
        type=float,
        default=10.0,
        help="Maximum percentage of points to remove.",
    )
    parser.add_argument(
        "--threshold-distance",
        type=float,
        default=0.0,
        help="Points whose RMS neighbor distance is below this are never removed.",
    )
    parser.add_argument(
        "--mode",
        choices=[m.value for m in OutputMode],
        default=OutputMode.inliers.value,
        help="inliers: write kept points; split: also write outliers; classified: flag outliers as class 7.",
    )
    parser.add_argument("--time-limit", type=float, default=None, help="Cancel scoring of a file after N seconds.")
    parser.add_argument("--progress-step", type=float, default=0.1, help="Fraction of points between progress logs.")
    parser.add_argument("--suffix", default="_cleaned", help="Suffix appended to output file names.")
    parser.add_argument("--log-level", default="INFO", help="Logging level.")
    return parser.parse_args(argv)


def build_config(args: argparse.Namespace) -> CleaningConfig:
    return CleaningConfig(
        outliers=OutlierParams(
            k=args.k,
            neighbor_radius_m=args.neighbor_radius,
            threshold_percent=args.threshold_percent,
            threshold_distance_m=args.threshold_distance,
        ),
        output_mode=OutputMode(args.mode),
        progress_step=args.progress_step,
        time_limit_s=args.time_limit,
        output_suffix=args.suffix,
    )


def main(argv: Optional[List[str]] = None) -> None:
    args = parse_args(argv)
    logging.basicConfig(level=args.log_level.upper(), format="%(levelname)s %(name)s: %(message)s")
    try:
        config = build_config(args)
    except ValidationError as e:
        raise SystemExit(f"Invalid parameters:\n{e}")
    clean_input(args.input, args.output_dir, config)


if __name__ == "__main__":
    main()
