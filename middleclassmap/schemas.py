from typing import Literal, Optional, Union

from pydantic import BaseModel, StrictFloat, StrictInt

# --- Location source records ---

class Location(BaseModel):
    name: str
    url: Optional[str] = None
    # numeric strings are not coordinates
    latitude: Optional[Union[StrictInt, StrictFloat]] = None
    longitude: Optional[Union[StrictInt, StrictFloat]] = None


# --- Dataset (GeoJSON) schemas ---

class FeatureProperties(BaseModel):
    group: str
    name: str
    url: Optional[str] = None
    weight: float


class PointGeometry(BaseModel):
    type: Literal["Point"] = "Point"
    coordinates: list[float]


class Feature(BaseModel):
    type: Literal["Feature"] = "Feature"
    properties: FeatureProperties
    geometry: PointGeometry


class FeatureCollection(BaseModel):
    type: Literal["FeatureCollection"] = "FeatureCollection"
    features: list[Feature] = []


# --- Geodesy API responses ---

class GridRefResponse(BaseModel):
    gridref: str
    easting: float
    northing: float
    lat: float
    lon: float
    datum: str
    formatted: str


class LatLonGridResponse(BaseModel):
    lat: float
    lon: float
    datum: str
    easting: float
    northing: float
    gridref: str


class ConvertResponse(BaseModel):
    lat: float
    lon: float
    height: float
    datum: str
    formatted: str


class DmsResponse(BaseModel):
    value: str
    degrees: float
    lat: Optional[str] = None
    lon: Optional[str] = None


class CompassResponse(BaseModel):
    bearing: float
    precision: int
    compass_point: str
