"""Geodesy endpoints: grid references, datum conversion, DMS and compass points."""

import math

from fastapi import APIRouter, HTTPException, Query

from ..geodesy import dms
from ..geodesy.datum import convert_datum
from ..geodesy.ellipsoids import get_datum
from ..geodesy.latlon import LatLon, to_string
from ..geodesy.osgrid import format_grid_ref, grid_to_latlon, parse_grid_ref, to_os_grid
from ..schemas import (
    CompassResponse,
    ConvertResponse,
    DmsResponse,
    GridRefResponse,
    LatLonGridResponse,
)

router = APIRouter(tags=["geodesy"])


@router.get("/gridref/{gridref}", response_model=GridRefResponse)
def gridref_to_latlon(gridref: str, datum: str = Query("WGS84")):
    """Convert an OS grid reference to the lat/lon of its SW corner."""
    ref = parse_grid_ref(gridref)
    point = grid_to_latlon(ref, datum)

    return GridRefResponse(
        gridref=format_grid_ref(ref),
        easting=ref.easting,
        northing=ref.northing,
        lat=point.lat,
        lon=point.lon,
        datum=point.datum.name,
        formatted=to_string(point, "dms", 2),
    )


@router.get("/latlon", response_model=LatLonGridResponse)
def latlon_to_gridref(
    lat: float = Query(..., ge=-90, le=90),
    lon: float = Query(..., ge=-180, le=180),
    datum: str = Query("WGS84"),
    digits: int = Query(10),
):
    """Convert a lat/lon point to an OS grid reference."""
    point = LatLon(lat, lon, 0, get_datum(datum))
    ref = to_os_grid(point)
    text = format_grid_ref(ref, digits)

    return LatLonGridResponse(
        lat=point.lat,
        lon=point.lon,
        datum=point.datum.name,
        easting=ref.easting,
        northing=ref.northing,
        gridref=text,
    )


@router.get("/convert", response_model=ConvertResponse)
def convert(
    lat: float = Query(..., ge=-90, le=90),
    lon: float = Query(..., ge=-180, le=180),
    height: float = Query(0.0),
    from_datum: str = Query("WGS84"),
    to_datum: str = Query("OSGB36"),
):
    """Convert a point between geodetic datums."""
    point = LatLon(lat, lon, height, get_datum(from_datum))
    converted = convert_datum(point, to_datum)

    return ConvertResponse(
        lat=converted.lat,
        lon=converted.lon,
        height=converted.height,
        datum=converted.datum.name,
        formatted=to_string(converted, "dms", 2, dp_height=2),
    )


@router.get("/dms", response_model=DmsResponse)
def parse_dms(value: str = Query(..., min_length=1)):
    """Parse degrees-minutes-seconds text into decimal degrees."""
    degrees = dms.parse(value)
    if math.isnan(degrees):
        raise HTTPException(status_code=400, detail=f"invalid degrees '{value}'")

    return DmsResponse(
        value=value,
        degrees=degrees,
        lat=dms.to_lat(degrees, "dms", 2),
        lon=dms.to_lon(degrees, "dms", 2),
    )


@router.get("/compass/{bearing}", response_model=CompassResponse)
def compass(bearing: float, precision: int = Query(3)):
    """Compass point for a bearing, to 1, 2 or 3 letters."""
    point = dms.compass_point(bearing, precision)

    return CompassResponse(bearing=bearing, precision=precision, compass_point=point)
