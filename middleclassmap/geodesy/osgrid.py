"""Ordnance Survey National Grid references and conversion to/from lat/lon.

Transverse Mercator using the Thomas/Redfearn series as published by the OS
in 'A guide to coordinate systems in Great Britain'.  Grid references are on
OSGB36; lat/lon results default to WGS84.

Ellipsoidal calculations only: accurate to about 4-5 m.  Better accuracy
needs the OSTN15 geoid-based transformation, which is not implemented.
"""

import logging
import math
import re
from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal
from typing import Union

from .datum import convert_datum
from .dms import to_fixed
from .ellipsoids import ELLIPSOIDS, OSGB36, WGS84, Datum, get_datum
from .errors import ConvergenceError, FormatRangeError, InvalidGridReferenceError
from .latlon import LatLon

logger = logging.getLogger(__name__)

# National Grid projection constants
_AIRY = ELLIPSOIDS["Airy1830"]
_PHI0 = math.radians(49.0)  # latitude of true origin
_LAMBDA0 = math.radians(-2.0)  # longitude of true origin
_FALSE_ORIGIN_EASTING = -400e3  # metres from true origin
_FALSE_ORIGIN_NORTHING = 100e3
_E0 = -_FALSE_ORIGIN_EASTING  # easting of true origin, 400km
_N0 = -_FALSE_ORIGIN_NORTHING  # northing of true origin, -100km
_F0 = 0.9996012717  # scale factor on central meridian

MAX_EASTING = 700e3
MAX_NORTHING = 1300e3

# Iterations allowed when solving the meridional arc for latitude
MAX_ITERATIONS = 100

_NUMERIC_REF_RE = re.compile(r"^(\d+(?:\.\d+)?),\s*(\d+(?:\.\d+)?)$")
_LETTER_REF_RE = re.compile(r"^[HNST][ABCDEFGHJKLMNOPQRSTUVWXYZ]\s*[0-9]+\s*[0-9]+$", re.I)
_VALID_DIGITS = (0, 2, 4, 6, 8, 10, 12, 14, 16)


def _metres(value, name: str) -> float:
    try:
        number = float(value)
    except (TypeError, ValueError):
        raise InvalidGridReferenceError(f"invalid {name} '{value}'") from None
    if math.isnan(number):
        raise InvalidGridReferenceError(f"invalid {name} '{value}'")
    return number


@dataclass(frozen=True)
class OsGridRef:
    easting: float
    northing: float

    def __post_init__(self):
        easting = _metres(self.easting, "easting")
        northing = _metres(self.northing, "northing")
        if easting < 0 or easting > MAX_EASTING:
            raise InvalidGridReferenceError(f"invalid easting '{self.easting}'")
        if northing < 0 or northing > MAX_NORTHING:
            raise InvalidGridReferenceError(f"invalid northing '{self.northing}'")
        object.__setattr__(self, "easting", easting)
        object.__setattr__(self, "northing", northing)

    def __str__(self) -> str:
        return format_grid_ref(self)


# ── Projection ───────────────────────────────────────────────────


def _meridional_arc(phi: float) -> float:
    """Meridional arc from the true origin latitude to phi, scaled by F0."""
    a, b = _AIRY.a, _AIRY.b
    n = (a - b) / (a + b)
    n2 = n * n
    n3 = n2 * n

    dphi = phi - _PHI0
    sphi = phi + _PHI0

    ma = (1 + n + (5.0 / 4.0) * n2 + (5.0 / 4.0) * n3) * dphi
    mb = (3 * n + 3 * n2 + (21.0 / 8.0) * n3) * math.sin(dphi) * math.cos(sphi)
    mc = ((15.0 / 8.0) * n2 + (15.0 / 8.0) * n3) * math.sin(2 * dphi) * math.cos(2 * sphi)
    md = (35.0 / 24.0) * n3 * math.sin(3 * dphi) * math.cos(3 * sphi)

    return b * _F0 * (ma - mb + mc - md)


def _curvature(phi: float) -> tuple[float, float, float]:
    """Transverse (nu) and meridional (rho) radii of curvature, and eta²."""
    a, b = _AIRY.a, _AIRY.b
    e2 = 1 - (b * b) / (a * a)
    sin_phi = math.sin(phi)
    nu = a * _F0 / math.sqrt(1 - e2 * sin_phi ** 2)
    rho = a * _F0 * (1 - e2) / (1 - e2 * sin_phi ** 2) ** 1.5
    eta2 = nu / rho - 1
    return nu, rho, eta2


def grid_to_latlon(gridref: OsGridRef, datum: Union[str, Datum] = WGS84) -> LatLon:
    """Convert a grid reference to lat/lon of the SW corner of the square.

    OS have deprecated OSGB36 lat/lon in favour of WGS84, so WGS84 is the
    default; pass datum="OSGB36" for the historical coordinates.

    >>> str(grid_to_latlon(OsGridRef(651409.903, 313177.270)))  # doctest: +SKIP
    '52.6580°N, 001.7161°E'
    """
    datum = get_datum(datum)
    easting, northing = gridref.easting, gridref.northing
    a = _AIRY.a

    phi = _PHI0
    m = 0.0
    for _ in range(MAX_ITERATIONS):
        phi = (northing - _N0 - m) / (a * _F0) + phi
        m = _meridional_arc(phi)
        if abs(northing - _N0 - m) < 0.00001:  # 0.01mm
            break
    else:
        raise ConvergenceError(
            f"latitude did not converge within {MAX_ITERATIONS} iterations for {gridref}"
        )

    cos_phi = math.cos(phi)
    tan_phi = math.tan(phi)
    nu, rho, eta2 = _curvature(phi)

    tan2 = tan_phi ** 2
    tan4 = tan2 * tan2
    tan6 = tan4 * tan2
    sec_phi = 1 / cos_phi

    VII = tan_phi / (2 * rho * nu)
    VIII = tan_phi / (24 * rho * nu ** 3) * (5 + 3 * tan2 + eta2 - 9 * tan2 * eta2)
    IX = tan_phi / (720 * rho * nu ** 5) * (61 + 90 * tan2 + 45 * tan4)
    X = sec_phi / nu
    XI = sec_phi / (6 * nu ** 3) * (nu / rho + 2 * tan2)
    XII = sec_phi / (120 * nu ** 5) * (5 + 28 * tan2 + 24 * tan4)
    XIIA = sec_phi / (5040 * nu ** 7) * (61 + 662 * tan2 + 1320 * tan4 + 720 * tan6)

    de = easting - _E0
    lat = phi - VII * de ** 2 + VIII * de ** 4 - IX * de ** 6
    lon = _LAMBDA0 + X * de - XI * de ** 3 + XII * de ** 5 - XIIA * de ** 7

    point = LatLon(math.degrees(lat), math.degrees(lon), 0, OSGB36)
    if datum != OSGB36:
        point = convert_datum(point, datum)
    return point


def to_os_grid(point: LatLon) -> OsGridRef:
    """Convert a lat/lon point (any datum) to an OS grid reference.

    >>> format_grid_ref(to_os_grid(LatLon(52.65798, 1.71605)))
    'TG 51409 13177'
    """
    if point.datum != OSGB36:
        point = convert_datum(point, OSGB36)

    phi = math.radians(point.lat)
    lam = math.radians(point.lon)

    sin_phi, cos_phi = math.sin(phi), math.cos(phi)
    nu, rho, eta2 = _curvature(phi)
    m = _meridional_arc(phi)

    cos3 = cos_phi ** 3
    cos5 = cos3 * cos_phi ** 2
    tan2 = math.tan(phi) ** 2
    tan4 = tan2 * tan2

    I = m + _N0  # noqa: E741
    II = (nu / 2) * sin_phi * cos_phi
    III = (nu / 24) * sin_phi * cos3 * (5 - tan2 + 9 * eta2)
    IIIA = (nu / 720) * sin_phi * cos5 * (61 - 58 * tan2 + tan4)
    IV = nu * cos_phi
    V = (nu / 6) * cos3 * (nu / rho - tan2)
    VI = (nu / 120) * cos5 * (5 - 18 * tan2 + tan4 + 14 * eta2 - 58 * tan2 * eta2)

    dl = lam - _LAMBDA0
    northing = I + II * dl ** 2 + III * dl ** 4 + IIIA * dl ** 6
    easting = _E0 + IV * dl + V * dl ** 3 + VI * dl ** 5

    # round to mm precision
    northing = float(to_fixed(northing, 3))
    easting = float(to_fixed(easting, 3))

    try:
        return OsGridRef(easting, northing)
    except InvalidGridReferenceError as e:
        raise InvalidGridReferenceError(
            f"{e} from ({to_fixed(point.lat, 6)},{to_fixed(point.lon, 6)}).to_os_grid()"
        ) from e


# ── Text form ────────────────────────────────────────────────────


def _join_metres(hundred_km: int, digits: str) -> float:
    # digits beyond 5 are decimals of a metre
    whole = digits[:5].ljust(5, "0")
    fraction = digits[5:]
    text = f"{hundred_km}{whole}"
    if fraction:
        text += f".{fraction}"
    return float(text)


def parse_grid_ref(gridref: str) -> OsGridRef:
    """Parse a grid reference such as 'SU 387 148', 'SU387148' or '438700,114800'.

    Lettered references give the SW corner of the square they name.

    >>> parse_grid_ref("TG 51409 13177")
    OsGridRef(easting=651409.0, northing=313177.0)
    """
    text = str(gridref).strip()

    match = _NUMERIC_REF_RE.match(text)
    if match:
        return OsGridRef(match.group(1), match.group(2))

    if not _LETTER_REF_RE.match(text):
        raise InvalidGridReferenceError(f"invalid grid reference '{gridref}'")

    # letters to numbers, A->0 ... skipping I
    upper = text.upper()
    l1 = ord(upper[0]) - ord("A")  # 500km square
    l2 = ord(upper[1]) - ord("A")  # 100km square
    if l1 > 7:
        l1 -= 1
    if l2 > 7:
        l2 -= 1

    # 100km-square indexes from false origin (square SV)
    e100km = ((l1 - 2) % 5) * 5 + (l2 % 5)
    n100km = 19 - (l1 // 5) * 5 - (l2 // 5)

    en = text[2:].strip().split()
    if len(en) == 1:
        half = len(en[0]) // 2
        en = [en[0][:half], en[0][half:]]

    if len(en[0]) != len(en[1]):
        raise InvalidGridReferenceError(f"invalid grid reference '{gridref}'")

    return OsGridRef(_join_metres(e100km, en[0]), _join_metres(n100km, en[1]))


def _format_metres(value: float) -> str:
    text = format(Decimal(value).quantize(Decimal("0.001"), rounding=ROUND_HALF_UP), "f")
    whole, _, fraction = text.partition(".")
    fraction = fraction.rstrip("0")
    whole = whole.zfill(6)
    return f"{whole}.{fraction}" if fraction else whole


def format_grid_ref(gridref: OsGridRef, digits: int = 10) -> str:
    """Format as a lettered reference, e.g. 'TG 51409 13177'.

    digits=10 gives metres, 8 gives 10m squares and so on; digits=0 gives the
    fully numeric 'easting,northing' form.
    """
    if isinstance(digits, bool) or digits not in _VALID_DIGITS:
        raise FormatRangeError(f"invalid precision '{digits}'")
    digits = int(digits)

    e, n = gridref.easting, gridref.northing

    if digits == 0:
        return f"{_format_metres(e)},{_format_metres(n)}"

    e100km = math.floor(e / 100000)
    n100km = math.floor(n / 100000)

    # numeric equivalents of the grid letters
    l1 = (19 - n100km) - (19 - n100km) % 5 + (e100km + 10) // 5
    l2 = ((19 - n100km) * 5) % 25 + e100km % 5

    # compensate for skipped 'I'
    if l1 > 7:
        l1 += 1
    if l2 > 7:
        l2 += 1
    letters = chr(l1 + ord("A")) + chr(l2 + ord("A"))

    # strip 100km-grid indices and reduce precision
    shift = 5 - digits // 2
    if shift >= 0:
        e_part = math.floor((e % 100000) / 10 ** shift)
        n_part = math.floor((n % 100000) / 10 ** shift)
    else:
        e_part = math.floor((e % 100000) * 10 ** -shift)
        n_part = math.floor((n % 100000) * 10 ** -shift)

    width = digits // 2
    return f"{letters} {e_part:0{width}d} {n_part:0{width}d}"
