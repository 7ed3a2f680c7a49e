"""Tests for 3-d vector algebra."""

import math

import pytest

from middleclassmap.geodesy.vector3d import Vector3d

I = Vector3d(1, 0, 0)
J = Vector3d(0, 1, 0)
K = Vector3d(0, 0, 1)


class TestArithmetic:
    def test_plus_minus(self):
        v = Vector3d(1, 2, 3)
        assert v.plus(Vector3d(1, 1, 1)) == Vector3d(2, 3, 4)
        assert v.minus(Vector3d(1, 1, 1)) == Vector3d(0, 1, 2)

    def test_scalar(self):
        v = Vector3d(1, 2, 3)
        assert v.times(2) == Vector3d(2, 4, 6)
        assert v.divided_by(2) == Vector3d(0.5, 1, 1.5)

    def test_operators(self):
        v = Vector3d(1, 2, 3)
        assert v + I == Vector3d(2, 2, 3)
        assert v - I == Vector3d(0, 2, 3)
        assert v * 2 == 2 * v == Vector3d(2, 4, 6)
        assert v / 2 == Vector3d(0.5, 1, 1.5)
        assert -v == Vector3d(-1, -2, -3)

    def test_dot_cross(self):
        assert I.dot(J) == 0
        assert Vector3d(1, 2, 3).dot(Vector3d(4, 5, 6)) == 32
        assert I.cross(J) == K
        assert J.cross(I) == K.negate()

    def test_length_and_unit(self):
        v = Vector3d(3, 4, 0)
        assert v.length == 5
        assert v.unit().length == pytest.approx(1)
        assert Vector3d(0, 0, 0).unit() == Vector3d(0, 0, 0)

    def test_immutable(self):
        with pytest.raises(Exception):
            I.x = 5


class TestAngles:
    def test_angle_unsigned(self):
        assert I.angle_to(J) == pytest.approx(math.pi / 2)
        assert J.angle_to(I) == pytest.approx(math.pi / 2)

    def test_angle_signed_by_normal(self):
        assert I.angle_to(J, K) == pytest.approx(math.pi / 2)
        assert I.angle_to(J, K.negate()) == pytest.approx(-math.pi / 2)

    def test_rotate_around(self):
        r = I.rotate_around(K, 90)
        assert r.x == pytest.approx(0, abs=1e-12)
        assert r.y == pytest.approx(1)
        assert r.z == pytest.approx(0, abs=1e-12)

    def test_rotate_returns_unit_vector(self):
        r = Vector3d(10, 0, 0).rotate_around(K, 45)
        assert r.length == pytest.approx(1)


class TestValidation:
    def test_non_numeric_component(self):
        with pytest.raises(TypeError):
            Vector3d("a", 0, 0)

    def test_non_finite_component(self):
        with pytest.raises(TypeError):
            Vector3d(math.nan, 0, 0)
        with pytest.raises(TypeError):
            Vector3d(0, math.inf, 0)

    def test_bool_component(self):
        with pytest.raises(TypeError):
            Vector3d(True, 0, 0)

    def test_non_vector_argument(self):
        with pytest.raises(TypeError):
            I.plus(3)
        with pytest.raises(TypeError):
            I.cross("j")

    def test_bad_scalar(self):
        with pytest.raises(TypeError):
            I.times("x")
        with pytest.raises(TypeError):
            I.rotate_around(K, math.nan)

    def test_to_string(self):
        assert Vector3d(1, 2.5, -3).to_string(1) == "[1.0,2.5,-3.0]"
        assert str(I) == "[1.000,0.000,0.000]"
