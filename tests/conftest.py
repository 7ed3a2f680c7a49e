"""Shared test fixtures for the middle class map test suite."""

import json

import numpy as np
import pytest

from middleclassmap.main import app
from middleclassmap.population import PopulationGrid

# Rough box around Great Britain, [lon, lat]
GB_BOX = [[-9.0, 49.0], [3.0, 49.0], [3.0, 61.0], [-9.0, 61.0], [-9.0, 49.0]]


@pytest.fixture()
def client():
    """FastAPI test client."""
    from fastapi.testclient import TestClient

    app.state.limiter.reset()
    with TestClient(app) as c:
        yield c


@pytest.fixture()
def gb_ring():
    return np.array(GB_BOX)


@pytest.fixture()
def outline_file(tmp_path):
    """GeoJSON outline file with the GB box as its only polygon."""
    path = tmp_path / "ukOutlinePolygon.json"
    path.write_text(json.dumps({
        "type": "FeatureCollection",
        "features": [
            {
                "type": "Feature",
                "properties": {},
                "geometry": {"type": "Polygon", "coordinates": [GB_BOX]},
            }
        ],
    }))
    return path


@pytest.fixture()
def empty_grid():
    """1km grid covering the whole of the OS grid with no population."""
    return PopulationGrid(cells=np.zeros((1300, 700), dtype=np.int64))


@pytest.fixture()
def asc_file(tmp_path):
    """Tiny ESRI ASCII grid, northernmost row first."""
    path = tmp_path / "population.asc"
    path.write_text(
        "ncols 3\n"
        "nrows 2\n"
        "xllcorner 0\n"
        "yllcorner 0\n"
        "cellsize 1000\n"
        "NODATA_value -9999\n"
        "1 2 3\n"
        "-9999 5 6\n"
    )
    return path
