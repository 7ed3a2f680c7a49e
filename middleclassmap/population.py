"""Residential population lookup from a 1km ESRI ASCII raster.

The raster (UK residential population 2011, 1km cells) is loaded once into a
numpy array indexed [northing_km, easting_km]; each query converts a WGS84
point to the OS grid and sums the cells in a small window around it.

Parsing the ~1300x700 text grid is slow, so a parquet copy is cached next to
the other data and reused while it is newer than the ASC file.
"""

import json
import logging
import math
import os
import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional

import numpy as np
import pyarrow as pa
import pyarrow.parquet as pq

from . import config
from .geodesy.latlon import LatLon
from .geodesy.osgrid import to_os_grid

logger = logging.getLogger(__name__)

_DATA_LINE_RE = re.compile(r"^[0-9-]")
_DEFAULT_NODATA = -9999


@dataclass(frozen=True)
class PopulationGrid:
    cells: np.ndarray  # row 0 is the southernmost row
    header: dict = field(default_factory=dict)

    @property
    def shape(self) -> tuple[int, int]:
        return self.cells.shape


def _parse_asc(path: Path) -> PopulationGrid:
    header: dict[str, float] = {}
    rows: list[list[str]] = []

    with open(path, encoding="utf-8") as f:
        for line in f:
            if _DATA_LINE_RE.match(line):
                rows.append(line.split())
                continue
            parts = line.split()
            if len(parts) == 2:
                try:
                    header[parts[0].lower()] = float(parts[1])
                except ValueError:
                    logger.warning("Ignoring ASC header line: %s", line.strip())

    if not rows:
        raise ValueError(f"No data rows found in {path}")

    cells = np.array(rows, dtype=float).astype(np.int64)
    nodata = int(header.get("nodata_value", _DEFAULT_NODATA))
    cells[cells == nodata] = 0

    # ASC rows run north to south; flip so row index grows with northing
    cells = np.ascontiguousarray(np.flipud(cells))
    return PopulationGrid(cells=cells, header=header)


def _read_cache(cache_path: Path) -> PopulationGrid:
    table = pq.read_table(cache_path)
    metadata = table.schema.metadata or {}
    header = json.loads(metadata.get(b"asc_header", b"{}"))
    cells = table.to_pandas().to_numpy(dtype=np.int64)
    return PopulationGrid(cells=cells, header=header)


def _write_cache(grid: PopulationGrid, cache_path: Path) -> None:
    cache_path.parent.mkdir(parents=True, exist_ok=True)
    columns = {f"c{i}": pa.array(grid.cells[:, i], type=pa.int64()) for i in range(grid.cells.shape[1])}
    table = pa.table(columns)
    table = table.replace_schema_metadata({"asc_header": json.dumps(grid.header)})
    pq.write_table(table, cache_path, compression="snappy")


def _cache_is_fresh(cache_path: Path, source_path: Path) -> bool:
    if not cache_path.exists():
        return False
    return os.path.getmtime(str(cache_path)) >= os.path.getmtime(str(source_path))


def load_population_grid(
    path: Path = config.POPULATION_ASC_PATH,
    cache_path: Optional[Path] = config.POPULATION_CACHE_PATH,
) -> PopulationGrid:
    """Load the population raster, using the parquet cache when it is fresh.

    Pass cache_path=None to always parse the ASC file.
    """
    path = Path(path)
    if not path.is_file():
        raise FileNotFoundError(f"Population grid not found: {path}")

    if cache_path is not None:
        cache_path = Path(cache_path)
        if _cache_is_fresh(cache_path, path):
            try:
                grid = _read_cache(cache_path)
                logger.info("Population grid loaded from cache: %d rows x %d columns", *grid.shape)
                return grid
            except (OSError, pa.ArrowException):
                logger.warning("Population cache %s unreadable, re-parsing", cache_path, exc_info=True)

    grid = _parse_asc(path)
    logger.info("Loaded %d rows in %d columns from %s", grid.shape[0], grid.shape[1], path.name)

    if cache_path is not None:
        try:
            _write_cache(grid, cache_path)
            logger.info("Population grid cached to %s", cache_path)
        except (OSError, pa.ArrowException):
            logger.warning("Failed to cache population grid", exc_info=True)

    return grid


def _round_km(metres: float) -> int:
    # round half up
    return math.floor(metres / 1000 + 0.5)


def population_at(
    lon: float,
    lat: float,
    grid: PopulationGrid,
    adjust_x: int = config.POPULATION_ADJUST_X,
    adjust_y: int = config.POPULATION_ADJUST_Y,
    window: int = config.POPULATION_WINDOW,
) -> int:
    """Total population in the window of 1km cells around a WGS84 point.

    Raises a GeodesyError if the point is outside the OS national grid.
    """
    gridref = to_os_grid(LatLon(lat, lon))

    # the ASC grid is slightly out of alignment with the OS grid
    x = _round_km(gridref.easting) - adjust_x
    y = _round_km(gridref.northing) - adjust_y

    rows = slice(max(y - window, 0), max(y + window, 0))
    cols = slice(max(x - window, 0), max(x + window, 0))
    return int(grid.cells[rows, cols].sum())
