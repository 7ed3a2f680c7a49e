"""3-d vector algebra used as the substrate for cartesian (ECEF) coordinates.

Every operation returns a new vector, so calls can be chained:
``v1.cross(v2).dot(v3)`` is v1×v2⋅v3.
"""

import math
from dataclasses import dataclass
from numbers import Real
from typing import Optional

import numpy as np


def _is_number(value) -> bool:
    return isinstance(value, Real) and not isinstance(value, bool)


def _check_vector(value, name: str = "v") -> None:
    if not isinstance(value, Vector3d):
        raise TypeError(f"{name} is not Vector3d object")


def _check_scalar(value) -> None:
    if not _is_number(value) or math.isnan(value):
        raise TypeError(f"invalid scalar value '{value}'")


@dataclass(frozen=True)
class Vector3d:
    x: float
    y: float
    z: float

    def __post_init__(self):
        for name in ("x", "y", "z"):
            value = getattr(self, name)
            if not _is_number(value) or not math.isfinite(value):
                raise TypeError(f"invalid vector [{self.x},{self.y},{self.z}]")
            object.__setattr__(self, name, float(value))

    @property
    def length(self) -> float:
        """Magnitude (norm) of this vector."""
        return math.sqrt(self.x * self.x + self.y * self.y + self.z * self.z)

    def plus(self, v: "Vector3d") -> "Vector3d":
        _check_vector(v)
        return Vector3d(self.x + v.x, self.y + v.y, self.z + v.z)

    def minus(self, v: "Vector3d") -> "Vector3d":
        _check_vector(v)
        return Vector3d(self.x - v.x, self.y - v.y, self.z - v.z)

    def times(self, k: float) -> "Vector3d":
        _check_scalar(k)
        return Vector3d(self.x * k, self.y * k, self.z * k)

    def divided_by(self, k: float) -> "Vector3d":
        _check_scalar(k)
        return Vector3d(self.x / k, self.y / k, self.z / k)

    def dot(self, v: "Vector3d") -> float:
        _check_vector(v)
        return self.x * v.x + self.y * v.y + self.z * v.z

    def cross(self, v: "Vector3d") -> "Vector3d":
        _check_vector(v)
        return Vector3d(
            self.y * v.z - self.z * v.y,
            self.z * v.x - self.x * v.z,
            self.x * v.y - self.y * v.x,
        )

    def negate(self) -> "Vector3d":
        return Vector3d(-self.x, -self.y, -self.z)

    def unit(self) -> "Vector3d":
        """Unit vector in the same direction; unit and zero vectors are returned as-is."""
        norm = self.length
        if norm == 1 or norm == 0:
            return self
        return Vector3d(self.x / norm, self.y / norm, self.z / norm)

    def angle_to(self, v: "Vector3d", n: Optional["Vector3d"] = None) -> float:
        """Angle in radians between this vector and v.

        Without n the result is in 0..π.  With a plane normal n the result is
        signed (-π..+π): positive if this->v is clockwise looking along n.
        """
        _check_vector(v)
        if n is not None:
            _check_vector(n, "n")

        # n·p₁×p₂ is ill-conditioned, so only take its sign
        cross = self.cross(v)
        sign = 1 if n is None or cross.dot(n) >= 0 else -1

        sin_theta = cross.length * sign
        cos_theta = self.dot(v)
        return math.atan2(sin_theta, cos_theta)

    def rotate_around(self, axis: "Vector3d", angle: float) -> "Vector3d":
        """Rotate the unit vector of this point about axis by angle degrees."""
        _check_vector(axis, "axis")
        _check_scalar(angle)

        theta = math.radians(angle)
        p = self.unit()
        a = axis.unit()

        s = math.sin(theta)
        c = math.cos(theta)
        t = 1 - c
        x, y, z = a.x, a.y, a.z

        r = np.array([
            [t * x * x + c, t * x * y - s * z, t * x * z + s * y],
            [t * x * y + s * z, t * y * y + c, t * y * z - s * x],
            [t * x * z - s * y, t * y * z + s * x, t * z * z + c],
        ])
        rp = r @ np.array([p.x, p.y, p.z])
        return Vector3d(float(rp[0]), float(rp[1]), float(rp[2]))

    def to_string(self, dp: int = 3) -> str:
        return f"[{self.x:.{dp}f},{self.y:.{dp}f},{self.z:.{dp}f}]"

    def __str__(self) -> str:
        return self.to_string()

    def __add__(self, other):
        if not isinstance(other, Vector3d):
            return NotImplemented
        return self.plus(other)

    def __sub__(self, other):
        if not isinstance(other, Vector3d):
            return NotImplemented
        return self.minus(other)

    def __mul__(self, other):
        if not _is_number(other):
            return NotImplemented
        return self.times(other)

    __rmul__ = __mul__

    def __truediv__(self, other):
        if not _is_number(other):
            return NotImplemented
        return self.divided_by(other)

    def __neg__(self):
        return self.negate()
