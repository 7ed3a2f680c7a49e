"""Parsing and formatting of degrees / minutes / seconds.

Latitude/longitude values may be given as signed decimal degrees or as
deg-min-sec text optionally suffixed by a compass letter, e.g. -3.62,
'3 37 12W', '3°37′12″W'.  Formatting mirrors the usual printed conventions:
degrees zero-padded to 3 digits (2 for latitude), minutes and seconds to 2,
symbols ° ′ ″ (U+00B0, U+2032, U+2033).
"""

import math
import re
from decimal import ROUND_HALF_UP, Decimal
from typing import Optional, Union

from .errors import FormatRangeError, InvalidCoordinateError

# Narrow no-break space between degrees, minutes, seconds and compass letter
DMS_SEPARATOR = "\u202f"

# Returned by to_lat/to_lon/to_brng when the value cannot be formatted
UNKNOWN = "–"

CARDINALS = (
    "N", "NNE", "NE", "ENE",
    "E", "ESE", "SE", "SSE",
    "S", "SSW", "SW", "WSW",
    "W", "WNW", "NW", "NNW",
)

_DEFAULT_DP = {
    "d": 4, "deg": 4,
    "dm": 2, "deg+min": 2,
    "dms": 0, "deg+min+sec": 0,
}

_SPLIT_RE = re.compile(r"[^0-9.,]+")
_NEGATIVE_RE = re.compile(r"^-|[WS]$", re.I)

Degrees = Union[float, int, str]


def to_fixed(value: float, dp: int) -> str:
    """Format value with exactly dp decimals, rounding half away from zero.

    Rounding works on the exact binary value of the float, so 1.005 gives
    '1.00' (it is really 1.00499...) while 12.5 gives '13'.
    """
    if value == 0:
        value = 0.0  # drop the sign of -0.0
    quantum = Decimal(1).scaleb(-int(dp))
    return format(Decimal(value).quantize(quantum, rounding=ROUND_HALF_UP), "f")


def _mod(x: float, n: float) -> float:
    if not math.isfinite(x):
        return math.nan
    return math.fmod(math.fmod(x, n) + n, n)


def wrap90(degrees: float) -> float:
    """Constrain degrees to -90..+90 (latitude); e.g. -91 => -89, 91 => 89."""
    if -90 <= degrees <= 90:
        return degrees
    # triangle wave f(x) = 4a/p * |(x - p/4) mod p - p/2| - a
    a, p = 90, 360
    return 4 * a / p * abs(_mod(degrees - p / 4, p) - p / 2) - a


def wrap180(degrees: float) -> float:
    """Constrain degrees to -180..+180 (longitude); e.g. -181 => 179, 181 => -179."""
    if -180 <= degrees <= 180:
        return degrees
    # sawtooth wave f(x) = (2ax/p - p/2) mod p - a
    a, p = 180, 360
    return _mod(2 * a * degrees / p - p / 2, p) - a


def wrap360(degrees: float) -> float:
    """Constrain degrees to 0..360 (bearing); e.g. -1 => 359, 361 => 1."""
    if 0 <= degrees < 360:
        return degrees
    a, p = 180, 360
    return _mod(2 * a * degrees / p, p)


def _part_value(part: str) -> float:
    if part == "":
        return 0.0
    try:
        return float(part)
    except ValueError:
        return math.nan


def parse(dms: Degrees) -> float:
    """Parse degrees or deg/min/sec into decimal degrees.

    Returns NaN if the value cannot be interpreted.

    >>> round(parse("51° 28′ 40.37″ N"), 4)
    51.4779
    """
    if isinstance(dms, bool) or dms is None:
        return math.nan
    if isinstance(dms, (int, float)):
        return float(dms)

    text = str(dms).strip()

    # signed decimal degrees without compass letter
    try:
        value = float(text)
    except ValueError:
        pass
    else:
        if math.isfinite(value):
            return value

    stripped = re.sub(r"[NSEW]$", "", re.sub(r"^-", "", text), flags=re.I)
    parts = _SPLIT_RE.split(stripped)
    if parts and parts[-1] == "":
        parts.pop()  # trailing symbol
    if not parts or parts == [""]:
        return math.nan

    if len(parts) == 3:
        deg = _part_value(parts[0]) + _part_value(parts[1]) / 60 + _part_value(parts[2]) / 3600
    elif len(parts) == 2:
        deg = _part_value(parts[0]) + _part_value(parts[1]) / 60
    elif len(parts) == 1:
        deg = _part_value(parts[0])
    else:
        return math.nan

    if _NEGATIVE_RE.search(text):
        deg = -deg
    return deg


def _as_degrees(deg) -> Optional[float]:
    if deg is None or isinstance(deg, bool):
        return None
    if isinstance(deg, str) and not deg.strip():
        return None
    try:
        value = float(deg)
    except (TypeError, ValueError):
        return None
    if not math.isfinite(value):
        return None
    return value


def to_dms(
    deg: Degrees,
    format: str = "d",
    dp: Optional[int] = None,
    separator: str = DMS_SEPARATOR,
) -> Optional[str]:
    """Format decimal degrees as 'd', 'dm' or 'dms'.

    The sign is discarded and no compass letter is added; degrees are padded
    to 3 digits.  Unknown formats fall back to 'd'.  Returns None when deg is
    not a finite number.
    """
    value = _as_degrees(deg)
    if value is None:
        return None

    if format not in _DEFAULT_DP:
        format = "d"
    if dp is None:
        dp = _DEFAULT_DP[format]

    value = abs(value)

    if format in ("dm", "deg+min"):
        d = math.floor(value)
        m = to_fixed((value * 60) % 60, dp)
        if float(m) == 60:  # rounded up
            m = to_fixed(0, dp)
            d += 1
        if float(m) < 10:
            m = "0" + m
        return f"{d:03d}°{separator}{m}′"

    if format in ("dms", "deg+min+sec"):
        d = math.floor(value)
        m = math.floor(value * 3600 / 60) % 60
        s = to_fixed((value * 3600) % 60, dp)
        if float(s) == 60:
            s = to_fixed(0, dp)
            m += 1
        if m == 60:
            m = 0
            d += 1
        if float(s) < 10:
            s = "0" + s
        return f"{d:03d}°{separator}{m:02d}′{separator}{s}″"

    d = to_fixed(value, dp)
    if float(d) < 100:
        d = "0" + d
    if float(d) < 10:
        d = "0" + d
    return d + "°"


def to_lat(deg: Degrees, format: str = "d", dp: Optional[int] = None, separator: str = DMS_SEPARATOR) -> str:
    """Format degrees as latitude: 2-digit degrees suffixed with N/S.

    >>> to_lat(-3.62, "dms", separator="")
    '03°37′12″S'
    """
    value = _as_degrees(deg)
    if value is None:
        return UNKNOWN
    lat = to_dms(wrap90(value), format, dp, separator)
    return lat[1:] + separator + ("S" if value < 0 else "N")


def to_lon(deg: Degrees, format: str = "d", dp: Optional[int] = None, separator: str = DMS_SEPARATOR) -> str:
    """Format degrees as longitude: 3-digit degrees suffixed with E/W."""
    value = _as_degrees(deg)
    if value is None:
        return UNKNOWN
    lon = to_dms(wrap180(value), format, dp, separator)
    return lon + separator + ("W" if value < 0 else "E")


def to_brng(deg: Degrees, format: str = "d", dp: Optional[int] = None, separator: str = DMS_SEPARATOR) -> str:
    """Format degrees as a bearing in 0°..360°."""
    value = _as_degrees(deg)
    if value is None:
        return UNKNOWN
    brng = to_dms(wrap360(value), format, dp, separator)
    return brng.replace("360", "0", 1)  # rounding may reach 360°


def compass_point(bearing: float, precision: int = 3) -> str:
    """Compass point for a bearing.

    precision 1 gives the 4 cardinals, 2 adds intercardinals, 3 gives all 16.
    """
    if precision not in (1, 2, 3):
        raise FormatRangeError(f"invalid precision '{precision}'")
    precision = int(precision)
    if isinstance(bearing, bool) or not math.isfinite(bearing):
        raise InvalidCoordinateError(f"invalid bearing '{bearing}'")

    bearing = wrap360(bearing)
    n = 4 * 2 ** (precision - 1)
    index = math.floor(bearing * n / 360 + 0.5) % n
    return CARDINALS[index * 16 // n]
