import logging
from pointclean.config import CleaningConfig, OutlierParams, OutputMode
from pointclean.run_pipeline import clean_input


def main() -> None:
    logging.basicConfig(level=logging.INFO, format="%(levelname)s %(name)s: %(message)s")
    logging.getLogger("pointclean.progress").setLevel(logging.WARNING)
    # Set your absolute paths here
    input_path = "dataset/scans/scan_01.las"
    output_dir = "dataset/scans/cleaned"

    config = CleaningConfig(
        outliers=OutlierParams(
            k=24,
            neighbor_radius_m=0.0,
            threshold_percent=5.0,
            threshold_distance_m=0.05,
        ),
        output_mode=OutputMode.split,
        time_limit_s=600.0,
    )

    clean_input(input_path=input_path, output_dir=output_dir, config=config)


if __name__ == "__main__":
    main()
