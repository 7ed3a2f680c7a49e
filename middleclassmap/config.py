"""Application configuration loaded from environment variables."""

import os
from pathlib import Path

from dotenv import load_dotenv

PROJECT_ROOT: Path = Path(__file__).resolve().parent.parent

# Load .env from project root
load_dotenv(PROJECT_ROOT / ".env")


def _path(name: str, default: Path) -> Path:
    value = os.getenv(name)
    return Path(value).expanduser() if value else default


# Data files
DATA_DIR: Path = _path("DATA_DIR", PROJECT_ROOT / "data")
LOCATIONS_DIR: Path = _path("LOCATIONS_DIR", DATA_DIR / "locations")
POPULATION_ASC_PATH: Path = _path(
    "POPULATION_ASC_PATH", DATA_DIR / "UK_residential_population_2011_1_km.asc"
)
POPULATION_CACHE_PATH: Path = _path("POPULATION_CACHE_PATH", DATA_DIR / "cache" / "population.parquet")
UK_OUTLINE_PATH: Path = _path("UK_OUTLINE_PATH", DATA_DIR / "ukOutlinePolygon.json")

# Static map site and the dataset it reads
WEBSITE_DIR: Path = _path("WEBSITE_DIR", PROJECT_ROOT / "website")
DATASET_OUTPUT_PATH: Path = _path("DATASET_OUTPUT_PATH", WEBSITE_DIR / "dataset.json")

# Population raster alignment: the ASC grid is offset from the OS grid by a
# few cells, and a point's population is summed over a square window.
POPULATION_ADJUST_X: int = int(os.getenv("POPULATION_ADJUST_X", "4"))
POPULATION_ADJUST_Y: int = int(os.getenv("POPULATION_ADJUST_Y", "6"))
POPULATION_WINDOW: int = int(os.getenv("POPULATION_WINDOW", "2"))

# Logging
LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO").upper()

# CORS
CORS_ORIGINS: list[str] = [
    o.strip()
    for o in os.getenv("CORS_ORIGINS", "http://localhost:8000,http://127.0.0.1:8000").split(",")
    if o.strip()
]

# Rate limiting
RATE_LIMIT_DEFAULT: str = os.getenv("RATE_LIMIT_DEFAULT", "60/minute")
