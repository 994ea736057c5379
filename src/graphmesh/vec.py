"""Three-vector helpers used throughout graphmesh.

Vectors are plain ``(x, y, z)`` float tuples.  Evaluators may hand back
lists, tuples or anything indexable with at least three components, so the
helpers here index rather than unpack.
"""

from __future__ import annotations

from math import sqrt
from typing import Sequence, Tuple

from graphmesh.config import epsilon

Vec3 = Tuple[float, float, float]

ZERO: Vec3 = (0.0, 0.0, 0.0)
X_AXIS: Vec3 = (1.0, 0.0, 0.0)
Y_AXIS: Vec3 = (0.0, 1.0, 0.0)
Z_AXIS: Vec3 = (0.0, 0.0, 1.0)


def to_vec3(value: Sequence[float]) -> Vec3:
    """Return the XYZ components of ``value`` as a float tuple."""

    if len(value) < 3:
        raise ValueError("value must have at least three components")
    return float(value[0]), float(value[1]), float(value[2])


def add(a, b) -> Vec3:
    """``a + b``"""
    return (a[0] + b[0], a[1] + b[1], a[2] + b[2])


def sub(a, b) -> Vec3:
    """``a - b``"""
    return (a[0] - b[0], a[1] - b[1], a[2] - b[2])


def scale(a, c: float) -> Vec3:
    """vector ``a`` times scalar ``c``"""
    return (a[0] * c, a[1] * c, a[2] * c)


def madd(a, b, c: float) -> Vec3:
    """``a + b * c``"""
    return (a[0] + b[0] * c, a[1] + b[1] * c, a[2] + b[2] * c)


def dot(a, b) -> float:
    return a[0] * b[0] + a[1] * b[1] + a[2] * b[2]


def cross(a, b) -> Vec3:
    return (a[1] * b[2] - a[2] * b[1],
            a[2] * b[0] - a[0] * b[2],
            a[0] * b[1] - a[1] * b[0])


def mag(a) -> float:
    """magnitude of ``a``"""
    return sqrt(a[0] * a[0] + a[1] * a[1] + a[2] * a[2])


def dist(a, b) -> float:
    return mag(sub(a, b))


def normalize(a, fallback: Vec3 = Z_AXIS, tol: float = epsilon) -> Vec3:
    """Return ``a`` scaled to unit length.

    Vectors shorter than ``tol`` cannot be normalized meaningfully; for
    those ``fallback`` is returned unchanged so that no NaN ever leaves
    this function.
    """

    length = mag(a)
    if length < tol:
        return fallback
    return (a[0] / length, a[1] / length, a[2] / length)


def perpendicular(a) -> Vec3:
    """Return some unit vector orthogonal to unit vector ``a``."""

    ref = Y_AXIS if abs(a[1]) < 0.9 else X_AXIS
    return normalize(cross(a, ref), fallback=X_AXIS)


__all__ = [
    "Vec3",
    "ZERO",
    "X_AXIS",
    "Y_AXIS",
    "Z_AXIS",
    "to_vec3",
    "add",
    "sub",
    "scale",
    "madd",
    "dot",
    "cross",
    "mag",
    "dist",
    "normalize",
    "perpendicular",
]
