"""Build the weighted GeoJSON dataset shown on the map.

Each location group is read from its own JSON file (a list of
{name, url, latitude, longitude} records). Points outside the UK outline
are dropped; the rest are weighted by how sparsely populated their
surroundings are, so a farm shop in the countryside counts for more than
a John Lewis in a city centre.
"""

import json
import logging
from pathlib import Path
from typing import Iterable, Mapping, Optional

import numpy as np
from pydantic import ValidationError

from . import config
from .geodesy.errors import GeodesyError
from .outline import is_in_uk, load_outline
from .population import PopulationGrid, load_population_grid, population_at
from .schemas import Feature, FeatureCollection, FeatureProperties, Location, PointGeometry

logger = logging.getLogger(__name__)

GROUP_SOURCES: dict[str, str] = {
    "COTE_BRASSERIE": "coteBrasserie.json",
    "FARM_SHOP": "farmShops.json",
    "INDEPENDENT_CINEMA": "independentCinemas.json",
    "JOHN_LEWIS": "johnLewis.json",
    "JOJO_MAMAN_BEBE": "jojoMamanBebe.json",
    "MICHELIN_AWARD": "bibGourmand.json",
    "NATIONAL_TRUST": "theNationalTrust.json",
    "RHS_PARTNER_GARDEN": "rhsPartnerGardens.json",
    "SPACE_NK": "spaceNK.json",
    "SWEATY_BETTY": "sweatyBetty.json",
    "THE_WHITE_COMPANY": "theWhiteCompany.json",
    "TROUVA_BOUTIQUE": "trouvaBoutiques.json",
}

# (population below, weight), checked in order
_WEIGHT_BANDS = (
    (500, 1.25),
    (2000, 1.0),
    (7500, 0.75),
    (20000, 0.5),
    (50000, 0.25),
)
_MIN_WEIGHT = 0.1


def point_weight(population: float) -> float:
    for limit, weight in _WEIGHT_BANDS:
        if population < limit:
            return weight
    return _MIN_WEIGHT


def load_locations(locations_dir: Path = config.LOCATIONS_DIR) -> dict[str, list[dict]]:
    """Read every group's source file; missing files are logged and skipped."""
    locations_dir = Path(locations_dir)
    locations: dict[str, list[dict]] = {}

    for group, filename in GROUP_SOURCES.items():
        path = locations_dir / filename
        if not path.is_file():
            logger.warning("No source file for %s: %s", group, path)
            continue
        with open(path, encoding="utf-8") as f:
            items = json.load(f)
        if not isinstance(items, list):
            raise ValueError(f"{path} must contain a JSON list")
        locations[group] = items
        logger.info("Loaded %d %s locations", len(items), group)

    return locations


def build_dataset(
    locations: Mapping[str, Iterable[dict]],
    grid: PopulationGrid,
    ring: np.ndarray,
) -> FeatureCollection:
    """Weight every in-UK location by its surrounding population."""
    collection = FeatureCollection()
    skipped = 0

    for group, items in locations.items():
        for item in items:
            try:
                location = Location.model_validate(item)
            except ValidationError as e:
                logger.warning("Skipping malformed %s record: %s", group, e.errors()[0]["msg"])
                skipped += 1
                continue

            point = (location.longitude, location.latitude)
            if not is_in_uk(point, ring):
                continue

            try:
                population = population_at(location.longitude, location.latitude, grid)
            except GeodesyError as e:
                logger.warning("Skipping %s '%s': %s", group, location.name.strip(), e)
                skipped += 1
                continue

            collection.features.append(
                Feature(
                    properties=FeatureProperties(
                        group=group,
                        name=location.name.strip(),
                        url=location.url,
                        weight=point_weight(population),
                    ),
                    geometry=PointGeometry(coordinates=[location.longitude, location.latitude]),
                )
            )

    logger.info("Built dataset: %d features, %d skipped", len(collection.features), skipped)
    return collection


def write_dataset(collection: FeatureCollection, path: Path = config.DATASET_OUTPUT_PATH) -> Path:
    path = Path(path).resolve()
    path.parent.mkdir(parents=True, exist_ok=True)
    data = collection.model_dump(mode="json")
    with open(path, "w", encoding="utf-8") as f:
        json.dump(data, f, separators=(",", ":"), ensure_ascii=False)
    logger.info("Wrote %d features to %s", len(collection.features), path)
    return path


def run(
    locations_dir: Path = config.LOCATIONS_DIR,
    population_path: Path = config.POPULATION_ASC_PATH,
    outline_path: Path = config.UK_OUTLINE_PATH,
    output_path: Path = config.DATASET_OUTPUT_PATH,
    cache_path: Optional[Path] = config.POPULATION_CACHE_PATH,
) -> FeatureCollection:
    """Load all inputs, build the dataset and write it out."""
    grid = load_population_grid(population_path, cache_path=cache_path)
    ring = load_outline(outline_path)
    locations = load_locations(locations_dir)

    collection = build_dataset(locations, grid, ring)
    write_dataset(collection, output_path)
    return collection
