"""Geodetic latitude/longitude points on an ellipsoidal earth model.

A LatLon is an immutable value: latitude and longitude are validated and
wrapped into range when it is built, and "changing" a coordinate means
building a new point, e.g. ``dataclasses.replace(p, lat=52)``.
"""

import math
import sys
from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from typing import Any, NamedTuple, Optional, Union

from . import dms
from .ellipsoids import WGS84, Datum, get_datum
from .errors import FormatRangeError, InvalidCoordinateError


def _finite(value, name: str) -> float:
    if value is None or isinstance(value, bool):
        raise InvalidCoordinateError(f"invalid {name} '{value}'")
    try:
        number = float(value)
    except (TypeError, ValueError):
        raise InvalidCoordinateError(f"invalid {name} '{value}'") from None
    if not math.isfinite(number):
        raise InvalidCoordinateError(f"invalid {name} '{value}'")
    return number


@dataclass(frozen=True)
class LatLon:
    lat: float
    lon: float
    height: float = 0.0
    datum: Datum = WGS84

    def __post_init__(self):
        object.__setattr__(self, "lat", dms.wrap90(_finite(self.lat, "lat")))
        object.__setattr__(self, "lon", dms.wrap180(_finite(self.lon, "lon")))
        object.__setattr__(self, "height", _finite(self.height, "height"))
        object.__setattr__(self, "datum", get_datum(self.datum))

    @property
    def latitude(self) -> float:
        return self.lat

    @property
    def longitude(self) -> float:
        return self.lon

    @property
    def ellipsoid(self):
        return self.datum.ellipsoid

    def __str__(self) -> str:
        return to_string(self)


# ── Parsing ──────────────────────────────────────────────────────
#
# Input shapes accepted by parse_latlon, one variant per shape.


class CoordinatePair(NamedTuple):
    lat: Any
    lon: Any


class DelimitedText(NamedTuple):
    text: str


class CoordinateRecord(NamedTuple):
    fields: Mapping


class GeoJsonPoint(NamedTuple):
    coordinates: Sequence


PointInput = Union[CoordinatePair, DelimitedText, CoordinateRecord, GeoJsonPoint]


def classify(value, lon=None) -> PointInput:
    """Tag raw input with the variant it represents."""
    if isinstance(value, (CoordinatePair, DelimitedText, CoordinateRecord, GeoJsonPoint)):
        return value
    if lon is not None:
        return CoordinatePair(value, lon)
    if isinstance(value, Mapping):
        if value.get("type") == "Point" and isinstance(value.get("coordinates"), Sequence):
            return GeoJsonPoint(value["coordinates"])
        return CoordinateRecord(value)
    if isinstance(value, str):
        if len(value.split(",")) == 2:
            return DelimitedText(value)
        raise InvalidCoordinateError(f"invalid point '{value}'")
    if isinstance(value, Sequence) and len(value) == 2:
        return CoordinatePair(value[0], value[1])
    raise InvalidCoordinateError(f"invalid point '{value}'")


def _first(fields: Mapping, *keys):
    for key in keys:
        if fields.get(key) is not None:
            return fields[key]
    return None


def _parse_lat(value) -> float:
    return dms.wrap90(dms.parse(value))


def _parse_lon(value) -> float:
    return dms.wrap180(dms.parse(value))


def parse_latlon(value, lon=None, height: Optional[float] = None, datum: Union[str, Datum] = WGS84) -> LatLon:
    """Parse a point from a number pair, 'lat, lon' text, a record or GeoJSON.

    Latitude and longitude may be numeric or deg-min-sec text with compass
    letters ('51°28′40″N').  Records may use lat/latitude and
    lon/lng/longitude keys.  GeoJSON Point coordinates are [lon, lat, height].

    >>> parse_latlon("51.47788, -0.00147").lon
    -0.00147
    """
    source = classify(value, lon)

    if isinstance(source, GeoJsonPoint):
        coords = list(source.coordinates)
        if len(coords) < 2:
            raise InvalidCoordinateError(f"invalid point '{value}'")
        lat, lng = coords[1], coords[0]
        point_height = coords[2] if len(coords) > 2 and coords[2] is not None else 0
    elif isinstance(source, CoordinateRecord):
        fields = source.fields
        lat = _first(fields, "lat", "latitude")
        lng = _first(fields, "lon", "lng", "longitude")
        lat, lng = _parse_lat(lat), _parse_lon(lng)
        point_height = fields.get("height") or 0
    elif isinstance(source, DelimitedText):
        lat_text, lon_text = source.text.split(",")
        lat, lng = _parse_lat(lat_text), _parse_lon(lon_text)
        point_height = 0
    else:
        lat, lng = _parse_lat(source.lat), _parse_lon(source.lon)
        point_height = 0

    if height is not None:
        point_height = height

    if not isinstance(source, GeoJsonPoint) and (math.isnan(lat) or math.isnan(lng)):
        raise InvalidCoordinateError(f"invalid point '{value}'")

    return LatLon(lat, lng, point_height, datum)


# ── Comparison and formatting ────────────────────────────────────


def equals(point: LatLon, other: LatLon) -> bool:
    """True if both points have the same coordinates and the very same datum."""
    if not isinstance(other, LatLon):
        raise TypeError(f"invalid point '{other}'")

    eps = sys.float_info.epsilon
    if abs(point.lat - other.lat) > eps:
        return False
    if abs(point.lon - other.lon) > eps:
        return False
    if abs(point.height - other.height) > eps:
        return False
    return point.datum is other.datum


def to_string(
    point: LatLon,
    format: str = "d",
    dp: Optional[int] = None,
    dp_height: Optional[int] = None,
    separator: str = dms.DMS_SEPARATOR,
) -> str:
    """Format as 'd', 'dm', 'dms' or 'n' (signed numeric degrees).

    Height is appended (e.g. ' +46m') only when dp_height is given.

    >>> to_string(LatLon(51.47788, -0.00147, 46), "n", dp_height=0)
    '51.4779, -0.0015 +46m'
    """
    if format not in ("d", "dm", "dms", "n"):
        raise FormatRangeError(f"invalid format '{format}'")

    suffix = ""
    if dp_height is not None:
        sign = " +" if point.height >= 0 else " "
        suffix = f"{sign}{dms.to_fixed(point.height, dp_height)}m"

    if format == "n":
        if dp is None:
            dp = 4
        return f"{dms.to_fixed(point.lat, dp)}, {dms.to_fixed(point.lon, dp)}{suffix}"

    lat = dms.to_lat(point.lat, format, dp, separator)
    lon = dms.to_lon(point.lon, format, dp, separator)
    return f"{lat}, {lon}{suffix}"
