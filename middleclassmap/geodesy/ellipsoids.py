"""Reference ellipsoids and historical geodetic datums.

Datum transforms are Helmert 7-parameter sets converting *from WGS84 into*
the datum: (tx, ty, tz) in metres, s in parts-per-million, (rx, ry, rz) in
arc-seconds.  Transforms between two non-WGS84 datums go through WGS84, so
only WGS84-relative parameters are kept here.

No transform should be assumed accurate to better than a metre; for many
datums somewhat less.
"""

from dataclasses import dataclass
from typing import Union

from .errors import UnrecognisedDatumError


@dataclass(frozen=True)
class Ellipsoid:
    name: str
    a: float  # semi-major axis, metres
    b: float  # semi-minor axis, metres
    f: float  # flattening


@dataclass(frozen=True)
class Datum:
    name: str
    ellipsoid: Ellipsoid
    transform: tuple  # (tx, ty, tz, s, rx, ry, rz)


ELLIPSOIDS: dict[str, Ellipsoid] = {
    e.name: e
    for e in (
        Ellipsoid("WGS84", 6378137, 6356752.314245, 1 / 298.257223563),
        Ellipsoid("Airy1830", 6377563.396, 6356256.909, 1 / 299.3249646),
        Ellipsoid("AiryModified", 6377340.189, 6356034.448, 1 / 299.3249646),
        Ellipsoid("Bessel1841", 6377397.155, 6356078.962818, 1 / 299.1528128),
        Ellipsoid("Clarke1866", 6378206.4, 6356583.8, 1 / 294.978698214),
        Ellipsoid("Clarke1880IGN", 6378249.2, 6356515.0, 1 / 293.466021294),
        Ellipsoid("GRS80", 6378137, 6356752.31414, 1 / 298.257222101),
        Ellipsoid("Intl1924", 6378388, 6356911.946, 1 / 297),  # aka Hayford
        Ellipsoid("WGS72", 6378135, 6356750.5, 1 / 298.26),
    )
}

# Sources:
#   ED50     epsg.io/1311
#   ETRS89   epsg.io/1149, coincident with WGS84 at the 1-metre level
#   Irl1975  epsg.io/1954
#   NAD27    en.wikipedia.org/wiki/Helmert_transformation
#   NAD83    WGS84(G1150) -> NAD83(CORS96) @ epoch 1997.0
#   NTF      geodesie.ign.fr
#   OSGB36   epsg.io/1314, OS 'A guide to coordinate systems in Great Britain'
DATUMS: dict[str, Datum] = {
    d.name: d
    for d in (
        #                                              tx        ty        tz        s         rx        ry        rz
        Datum("ED50", ELLIPSOIDS["Intl1924"], (89.5, 93.8, 123.1, -1.2, 0.0, 0.0, 0.156)),
        Datum("ETRS89", ELLIPSOIDS["GRS80"], (0.0, 0.0, 0.0, 0.0, 0.0, 0.0, 0.0)),
        Datum("Irl1975", ELLIPSOIDS["AiryModified"], (-482.53, 130.596, -564.557, -8.15, 1.042, 0.214, 0.631)),
        Datum("NAD27", ELLIPSOIDS["Clarke1866"], (8.0, -160.0, -176.0, 0.0, 0.0, 0.0, 0.0)),
        Datum("NAD83", ELLIPSOIDS["GRS80"], (0.9956, -1.9103, -0.5215, -0.00062, 0.025915, 0.009426, 0.011599)),
        Datum("NTF", ELLIPSOIDS["Clarke1880IGN"], (168.0, 60.0, -320.0, 0.0, 0.0, 0.0, 0.0)),
        Datum("OSGB36", ELLIPSOIDS["Airy1830"], (-446.448, 125.157, -542.06, 20.4894, -0.1502, -0.247, -0.8421)),
        Datum("Potsdam", ELLIPSOIDS["Bessel1841"], (-582.0, -105.0, -414.0, -8.3, 1.04, 0.35, -3.08)),
        Datum("TokyoJapan", ELLIPSOIDS["Bessel1841"], (148.0, -507.0, -685.0, 0.0, 0.0, 0.0, 0.0)),
        Datum("WGS72", ELLIPSOIDS["WGS72"], (0.0, 0.0, -4.5, -0.22, 0.0, 0.0, 0.554)),
        Datum("WGS84", ELLIPSOIDS["WGS84"], (0.0, 0.0, 0.0, 0.0, 0.0, 0.0, 0.0)),
    )
}

WGS84 = DATUMS["WGS84"]
OSGB36 = DATUMS["OSGB36"]


def get_datum(datum: Union[str, Datum]) -> Datum:
    """Look up a datum by name (case-insensitive) or validate a Datum record."""
    if isinstance(datum, Datum):
        if not isinstance(datum.ellipsoid, Ellipsoid):
            raise UnrecognisedDatumError(f"unrecognised datum '{datum}'")
        return datum
    if isinstance(datum, str):
        for name, record in DATUMS.items():
            if name.lower() == datum.strip().lower():
                return record
    raise UnrecognisedDatumError(f"unrecognised datum '{datum}'")


def get_ellipsoid(ellipsoid: Union[str, Ellipsoid]) -> Ellipsoid:
    """Look up an ellipsoid by name (case-insensitive)."""
    if isinstance(ellipsoid, Ellipsoid):
        return ellipsoid
    if isinstance(ellipsoid, str):
        for name, record in ELLIPSOIDS.items():
            if name.lower() == ellipsoid.strip().lower():
                return record
    raise UnrecognisedDatumError(f"unrecognised ellipsoid '{ellipsoid}'")
