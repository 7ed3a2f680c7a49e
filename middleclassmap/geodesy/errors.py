"""Exceptions raised by the geodesy package.

All of them derive from ValueError so callers that only care about "bad input"
can catch that; callers that want to skip a single point catch GeodesyError.
"""


class GeodesyError(ValueError):
    """Base class for geodesy validation and range errors."""


class InvalidCoordinateError(GeodesyError):
    """Latitude, longitude or height is missing, non-numeric or unparseable."""


class UnrecognisedDatumError(GeodesyError):
    """Datum or ellipsoid is not one of the known constant records."""


class InvalidGridReferenceError(GeodesyError):
    """OS grid reference text is malformed or outside the national grid."""


class FormatRangeError(GeodesyError):
    """Format token, precision or number of digits is not supported."""


class ConvergenceError(GeodesyError):
    """Iterative latitude solution did not converge."""
