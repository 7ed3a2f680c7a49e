"""UK outline polygon and point-in-polygon test."""

import json
import logging
import numbers
from pathlib import Path

import numpy as np

from . import config

logger = logging.getLogger(__name__)


def load_outline(path: Path = config.UK_OUTLINE_PATH) -> np.ndarray:
    """Return the outer ring of the first feature in a GeoJSON file as an (n, 2) array of [lon, lat]."""
    path = Path(path)
    with open(path, encoding="utf-8") as f:
        geojson = json.load(f)

    try:
        ring = geojson["features"][0]["geometry"]["coordinates"][0]
    except (KeyError, IndexError, TypeError) as e:
        raise ValueError(f"No polygon found in {path}") from e

    ring = np.asarray(ring, dtype=float)
    if ring.ndim != 2 or ring.shape[1] < 2:
        raise ValueError(f"Malformed outline ring in {path}")

    logger.info("Loaded UK outline with %d vertices", len(ring))
    return ring[:, :2]


def _is_number(value) -> bool:
    return isinstance(value, numbers.Real) and not isinstance(value, bool)


def is_in_uk(point, ring: np.ndarray) -> bool:
    """True if point (lon, lat) lies inside ring, by even-odd ray casting.

    Points whose coordinates are not numbers are never inside.
    """
    if len(point) < 2 or not (_is_number(point[0]) and _is_number(point[1])):
        return False

    x, y = float(point[0]), float(point[1])
    xi, yi = ring[:, 0], ring[:, 1]
    # each vertex paired with its predecessor, closing the ring
    xj, yj = np.roll(xi, 1), np.roll(yi, 1)

    straddles = (yi > y) != (yj > y)
    with np.errstate(divide="ignore", invalid="ignore"):
        x_cross = (xj - xi) * (y - yi) / (yj - yi) + xi
    crossings = straddles & (x < x_cross)

    return bool(np.count_nonzero(crossings) % 2)
