#!/usr/bin/env python3
"""Build website/dataset.json from the location lists and population grid.

Usage:
    python scripts/create_dataset.py                          # Default data paths
    python scripts/create_dataset.py --output /tmp/ds.json    # Write elsewhere
    python scripts/create_dataset.py --no-cache               # Re-parse the ASC grid

Expects data/locations/*.json, data/UK_residential_population_2011_1_km.asc
and data/ukOutlinePolygon.json unless told otherwise (see middleclassmap/config.py and .env).
"""

import argparse
import logging
import sys
from pathlib import Path

# Ensure project root is on sys.path so `middleclassmap` is importable
PROJECT_ROOT = Path(__file__).resolve().parent.parent
sys.path.insert(0, str(PROJECT_ROOT))

from middleclassmap import config
from middleclassmap.dataset import run

logging.basicConfig(
    level=getattr(logging, config.LOG_LEVEL, logging.INFO),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger("create_dataset")


def parse_args(argv=None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Build the middle class map dataset")
    parser.add_argument(
        "--locations-dir", type=Path, default=config.LOCATIONS_DIR,
        help=f"Directory of location JSON files (default: {config.LOCATIONS_DIR})",
    )
    parser.add_argument(
        "--population", type=Path, default=config.POPULATION_ASC_PATH,
        help="ESRI ASCII population grid",
    )
    parser.add_argument(
        "--outline", type=Path, default=config.UK_OUTLINE_PATH,
        help="GeoJSON UK outline polygon",
    )
    parser.add_argument(
        "--output", type=Path, default=config.DATASET_OUTPUT_PATH,
        help=f"Where to write the dataset (default: {config.DATASET_OUTPUT_PATH})",
    )
    parser.add_argument(
        "--no-cache", action="store_true",
        help="Always parse the population grid instead of using the parquet cache",
    )
    return parser.parse_args(argv)


def main(argv=None) -> int:
    args = parse_args(argv)
    try:
        run(
            locations_dir=args.locations_dir,
            population_path=args.population,
            outline_path=args.outline,
            output_path=args.output,
            cache_path=None if args.no_cache else config.POPULATION_CACHE_PATH,
        )
    except Exception:
        logger.exception("Failed to create dataset")
        return 1

    logger.info("Successfully wrote %s", args.output)
    return 0


if __name__ == "__main__":
    sys.exit(main())
