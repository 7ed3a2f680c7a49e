"""Geocentric (ECEF) cartesian coordinates and conversion to/from geodetic points.

x points to 0°N,0°E, y to 0°N,90°E and z to 90°N, all in metres from the
earth's centre.
"""

import math
from dataclasses import dataclass
from typing import Optional, Union

from .ellipsoids import ELLIPSOIDS, WGS84, Datum, Ellipsoid, get_datum
from .latlon import LatLon
from .vector3d import Vector3d


@dataclass(frozen=True)
class Cartesian(Vector3d):
    datum: Optional[Datum] = None

    def __post_init__(self):
        super().__post_init__()
        if self.datum is not None:
            object.__setattr__(self, "datum", get_datum(self.datum))

    def to_string(self, dp: int = 0) -> str:
        return f"[{self.x:.{dp}f},{self.y:.{dp}f},{self.z:.{dp}f}]"


def to_cartesian(point: LatLon) -> Cartesian:
    """Convert a geodetic point to cartesian coordinates on the same datum.

    x = (ν+h)⋅cosφ⋅cosλ, y = (ν+h)⋅cosφ⋅sinλ, z = (ν⋅(1−e²)+h)⋅sinφ
    where ν = a/√(1−e²⋅sin²φ) and e² = 2f − f².
    """
    a, f = point.datum.ellipsoid.a, point.datum.ellipsoid.f

    phi = math.radians(point.lat)
    lam = math.radians(point.lon)
    h = point.height

    sin_phi, cos_phi = math.sin(phi), math.cos(phi)
    sin_lam, cos_lam = math.sin(lam), math.cos(lam)

    e2 = 2 * f - f * f  # 1st eccentricity squared
    nu = a / math.sqrt(1 - e2 * sin_phi * sin_phi)  # prime vertical radius of curvature

    x = (nu + h) * cos_phi * cos_lam
    y = (nu + h) * cos_phi * sin_lam
    z = (nu * (1 - e2) + h) * sin_phi

    return Cartesian(x, y, z, point.datum)


def geodetic_from_cartesian(
    cartesian: Vector3d,
    ellipsoid: Ellipsoid = ELLIPSOIDS["WGS84"],
) -> tuple[float, float, float]:
    """Return (lat, lon, height) of a cartesian point on the given ellipsoid.

    Uses Bowring's (1985) closed form, 'The accuracy of geodetic latitude and
    height equations', Survey Review vol 28, 218, for μm precision without
    iteration.
    """
    if not getattr(ellipsoid, "a", None):
        raise TypeError(f"invalid ellipsoid '{ellipsoid}'")

    x, y, z = cartesian.x, cartesian.y, cartesian.z
    a, b, f = ellipsoid.a, ellipsoid.b, ellipsoid.f

    e2 = 2 * f - f * f  # 1st eccentricity squared ≡ (a²−b²)/a²
    eps2 = e2 / (1 - e2)  # 2nd eccentricity squared ≡ (a²−b²)/b²
    p = math.sqrt(x * x + y * y)  # distance from minor axis
    r = math.sqrt(p * p + z * z)  # polar radius

    if p == 0:
        # on the polar axis the parametric latitude is undefined
        phi = 0.0
    else:
        # parametric latitude (Bowring eqn 17)
        tan_beta = (b * z) / (a * p) * (1 + eps2 * b / r)
        sin_beta = tan_beta / math.sqrt(1 + tan_beta * tan_beta)
        cos_beta = 1 / math.sqrt(1 + tan_beta * tan_beta)
        # geodetic latitude (Bowring eqn 18)
        phi = math.atan2(
            z + eps2 * b * sin_beta ** 3,
            p - e2 * a * cos_beta ** 3,
        )

    lam = math.atan2(y, x)

    # height above ellipsoid (Bowring eqn 7)
    sin_phi, cos_phi = math.sin(phi), math.cos(phi)
    nu = a / math.sqrt(1 - e2 * sin_phi * sin_phi)
    h = p * cos_phi + z * sin_phi - (a * a) / nu

    return math.degrees(phi), math.degrees(lam), h


def to_latlon(cartesian: Vector3d, datum: Optional[Union[str, Datum]] = None) -> LatLon:
    """Convert to a geodetic point on datum, else the cartesian's own datum, else WGS84."""
    if datum is None:
        datum = getattr(cartesian, "datum", None) or WGS84
    datum = get_datum(datum)

    lat, lon, height = geodetic_from_cartesian(cartesian, datum.ellipsoid)
    return LatLon(lat, lon, height, datum)
