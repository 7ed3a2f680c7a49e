"""Tests for geodetic points: construction, parsing and formatting."""

import dataclasses

import pytest

from middleclassmap.geodesy.ellipsoids import DATUMS, OSGB36, WGS84, get_datum, get_ellipsoid
from middleclassmap.geodesy.errors import FormatRangeError, InvalidCoordinateError, UnrecognisedDatumError
from middleclassmap.geodesy.latlon import (
    CoordinatePair,
    CoordinateRecord,
    DelimitedText,
    GeoJsonPoint,
    LatLon,
    classify,
    equals,
    parse_latlon,
    to_string,
)

# ── Construction ─────────────────────────────────────────────────


class TestLatLon:
    def test_defaults(self):
        p = LatLon(51.5, -0.1)
        assert p.height == 0
        assert p.datum is WGS84
        assert p.latitude == 51.5
        assert p.longitude == -0.1

    def test_wraps_out_of_range(self):
        p = LatLon(91, 181)
        assert p.lat == pytest.approx(89)
        assert p.lon == pytest.approx(-179)

    def test_numeric_strings_accepted(self):
        assert LatLon("51.5", "-0.1").lat == 51.5

    def test_invalid_coordinate(self):
        with pytest.raises(InvalidCoordinateError):
            LatLon("x", 0)
        with pytest.raises(InvalidCoordinateError):
            LatLon(0, None)
        with pytest.raises(InvalidCoordinateError):
            LatLon(0, 0, float("nan"))

    def test_datum_by_name(self):
        assert LatLon(0, 0, datum="osgb36").datum is OSGB36

    def test_unknown_datum(self):
        with pytest.raises(UnrecognisedDatumError):
            LatLon(0, 0, datum="bogus")

    def test_replace_builds_new_point(self):
        p = LatLon(51.5, -0.1)
        q = dataclasses.replace(p, lat=95)
        assert q.lat == pytest.approx(85)
        assert p.lat == 51.5


class TestDatums:
    def test_lookup_case_insensitive(self):
        assert get_datum("wgs84") is WGS84
        assert get_ellipsoid("airy1830").a == 6377563.396

    def test_unknown_ellipsoid(self):
        with pytest.raises(UnrecognisedDatumError):
            get_ellipsoid("flat")

    def test_all_datums_have_seven_parameters(self):
        for datum in DATUMS.values():
            assert len(datum.transform) == 7


# ── Parsing ──────────────────────────────────────────────────────


class TestParse:
    def test_classify_variants(self):
        assert isinstance(classify(51.5, -0.1), CoordinatePair)
        assert isinstance(classify("51.5, -0.1"), DelimitedText)
        assert isinstance(classify({"lat": 51.5, "lon": -0.1}), CoordinateRecord)
        assert isinstance(classify({"type": "Point", "coordinates": [-0.1, 51.5]}), GeoJsonPoint)
        assert isinstance(classify([51.5, -0.1]), CoordinatePair)

    def test_delimited_text(self):
        p = parse_latlon("51.47788, -0.00147")
        assert p.lat == 51.47788
        assert p.lon == -0.00147

    def test_dms_pair(self):
        p = parse_latlon("51°28′40″N", "000°00′05″W")
        assert p.lat == pytest.approx(51.47778, abs=1e-5)
        assert p.lon == pytest.approx(-0.00139, abs=1e-5)

    def test_record_alternate_keys(self):
        p = parse_latlon({"latitude": 51.5, "lng": -0.1, "height": 12})
        assert (p.lat, p.lon, p.height) == (51.5, -0.1, 12)

    def test_geojson_point(self):
        p = parse_latlon({"type": "Point", "coordinates": [-0.1, 51.5, 10]})
        assert (p.lat, p.lon, p.height) == (51.5, -0.1, 10)

    def test_explicit_height_and_datum(self):
        p = parse_latlon(51.5, -0.1, height=20, datum="OSGB36")
        assert p.height == 20
        assert p.datum is OSGB36

    def test_unparseable(self):
        with pytest.raises(InvalidCoordinateError):
            parse_latlon("nonsense")
        with pytest.raises(InvalidCoordinateError):
            parse_latlon("abc, def")
        with pytest.raises(InvalidCoordinateError):
            parse_latlon({"name": "no coordinates"})


# ── Equality and formatting ──────────────────────────────────────


class TestEqualsAndFormat:
    def test_equals(self):
        assert equals(LatLon(51.5, -0.1), LatLon(51.5, -0.1))
        assert not equals(LatLon(51.5, -0.1), LatLon(51.5, -0.2))
        assert not equals(LatLon(51.5, -0.1), LatLon(51.5, -0.1, datum=OSGB36))

    def test_equals_rejects_non_point(self):
        with pytest.raises(TypeError):
            equals(LatLon(0, 0), "0, 0")

    def test_numeric_with_height(self):
        p = LatLon(51.47788, -0.00147, 46)
        assert to_string(p, "n", dp_height=0) == "51.4779, -0.0015 +46m"

    def test_degrees(self):
        p = LatLon(51.47788, -0.00147)
        assert to_string(p, separator="") == "51.4779°N, 000.0015°W"

    def test_dms(self):
        p = LatLon(-3.62, -3.62)
        assert to_string(p, "dms", separator="") == "03°37′12″S, 003°37′12″W"

    def test_bad_format(self):
        with pytest.raises(FormatRangeError):
            to_string(LatLon(0, 0), "x")
