"""Conversion between geodetic datums using Helmert 7-parameter transforms.

geodetic -> cartesian -> Helmert -> geodetic, always pivoting through WGS84
(see ellipsoids.DATUMS for the parameter convention).
"""

import logging
import math
from typing import Sequence, Union

from .cartesian import Cartesian, to_cartesian, to_latlon
from .ellipsoids import WGS84, Datum, get_datum
from .errors import UnrecognisedDatumError
from .latlon import LatLon

logger = logging.getLogger(__name__)


def apply_transform(cartesian: Cartesian, t: Sequence[float]) -> Cartesian:
    """Apply Helmert parameters t = (tx, ty, tz, s_ppm, rx, ry, rz) to a point.

    The result carries no datum; the caller labels it.
    """
    x1, y1, z1 = cartesian.x, cartesian.y, cartesian.z

    tx, ty, tz = t[0], t[1], t[2]  # metres
    s = t[3] / 1e6 + 1  # ppm -> scale factor
    rx = math.radians(t[4] / 3600)  # arc-seconds -> radians
    ry = math.radians(t[5] / 3600)
    rz = math.radians(t[6] / 3600)

    x2 = tx + x1 * s - y1 * rz + z1 * ry
    y2 = ty + x1 * rz + y1 * s - z1 * rx
    z2 = tz - x1 * ry + y1 * rx + z1 * s

    return Cartesian(x2, y2, z2)


def convert_cartesian_datum(cartesian: Cartesian, to_datum: Union[str, Datum]) -> Cartesian:
    """Convert a cartesian point from its own datum to to_datum."""
    to_datum = get_datum(to_datum)
    if cartesian.datum is None:
        raise UnrecognisedDatumError("cartesian coordinate has no datum")

    source = cartesian
    transform = None

    if cartesian.datum == WGS84:
        transform = to_datum.transform
    if to_datum == WGS84:
        # inverse transform
        transform = tuple(-p for p in cartesian.datum.transform)
    if transform is None:
        # neither end is WGS84: go to WGS84 first
        source = convert_cartesian_datum(cartesian, WGS84)
        transform = to_datum.transform

    converted = apply_transform(source, transform)
    return Cartesian(converted.x, converted.y, converted.z, to_datum)


def convert_datum(point: LatLon, to_datum: Union[str, Datum]) -> LatLon:
    """Convert a geodetic point to another datum.

    >>> p = convert_datum(LatLon(51.47788, -0.00147), "OSGB36")
    >>> str(p)  # doctest: +SKIP
    '51.4773°N, 000.0001°E'
    """
    to_datum = get_datum(to_datum)
    logger.debug("Converting %s from %s to %s", point, point.datum.name, to_datum.name)

    old_cartesian = to_cartesian(point)
    new_cartesian = convert_cartesian_datum(old_cartesian, to_datum)
    return to_latlon(new_cartesian)
