"""Tessellation of parametric curves ``r(t)``.

Curves are drawn either as a line list (:func:`parametric_curve`) or as a
lit tube swept around the curve (:func:`parametric_curve_tube`).  The tube
follows a rotation-minimizing frame rather than the Frenet frame, which
would spin wildly near inflection points and vanish on straight runs.

Tubes make no attempt to avoid self-intersection where the curvature
radius is smaller than ``tube_radius``.
"""

from __future__ import annotations

import logging
from math import cos, pi, sin
from typing import Callable, List, Sequence

from graphmesh import config
from graphmesh.mesh import Frame, Mesh, Vertex, line
from graphmesh.vec import (X_AXIS, Y_AXIS, Z_AXIS, Vec3, add, cross, dot,
                           mag, normalize, perpendicular, scale, sub,
                           to_vec3)

logger = logging.getLogger(__name__)

CurveFunc = Callable[[float], Sequence[float]]

PLANES = {
    'xy': lambda a, b: (a, b, 0.0),
    'xz': lambda a, b: (a, 0.0, b),
    'yz': lambda a, b: (0.0, a, b),
}


def sample_curve(curve_func: CurveFunc, t_min: float, t_max: float,
                 segments: int) -> List[Vec3]:
    """Return ``segments + 1`` uniformly spaced samples of the curve."""

    if segments < 1:
        return []
    dt = (t_max - t_min) / segments
    return [to_vec3(curve_func(t_min + i * dt)) for i in range(segments + 1)]


def parametric_curve(curve_func: CurveFunc, t_min: float, t_max: float,
                     segments: int, color: Vec3 = config.curve_color) -> Mesh:
    """Sample the curve into ``segments`` disjoint line segments (line list)."""

    points = sample_curve(curve_func, t_min, t_max, segments)
    verts: Mesh = []
    for p0, p1 in zip(points, points[1:]):
        verts.extend(line(p0, p1, color))
    return verts


def curve_tangents(points: Sequence[Vec3]) -> List[Vec3]:
    """Unit tangents at each sample by central difference.

    The two end samples use one-sided differences.  Where consecutive
    samples coincide the previous tangent is repeated (or +Z at the start).
    """

    n = len(points)
    tangents: List[Vec3] = []
    if n < 2:
        return [Z_AXIS] * n
    for i in range(n):
        fwd = sub(points[i + 1], points[i]) if i < n - 1 else sub(points[i], points[i - 1])
        bwd = sub(points[i], points[i - 1]) if i > 0 else fwd
        d = scale(add(fwd, bwd), 0.5)
        length = mag(d)
        if length < config.epsilon:
            tangents.append(tangents[-1] if tangents else Z_AXIS)
        else:
            tangents.append(scale(d, 1.0 / length))
    return tangents


def rotation_minimizing_frames(tangents: Sequence[Vec3]) -> List[Frame]:
    """Propagate a rotation-minimizing frame along ``tangents``.

    Tangents are normalized first; a zero tangent repeats the previous
    direction (``+Z`` at the start).  The first normal is ``tangent x ref``
    for a reference axis that is not nearly parallel to the first tangent.
    Each following normal is the previous one projected onto the plane
    orthogonal to the new tangent.  If the projection collapses (the
    tangent flipped by nearly 180 degrees) the previous binormal takes its
    place.
    """

    frames: List[Frame] = []
    if not tangents:
        return frames

    t0 = normalize(tangents[0], fallback=Z_AXIS)
    ref = Y_AXIS if abs(t0[1]) < config.frame_parallel_limit else X_AXIS
    n0 = normalize(cross(t0, ref), fallback=perpendicular(t0))
    frames.append(Frame(t0, n0, cross(t0, n0)))

    for ti in tangents[1:]:
        prev = frames[-1]
        ti = normalize(ti, fallback=prev.tangent)
        projected = sub(prev.normal, scale(ti, dot(prev.normal, ti)))
        length = mag(projected)
        if length > config.epsilon:
            ni = scale(projected, 1.0 / length)
        else:
            logger.debug("tangent reversal, substituting previous binormal")
            ni = prev.binormal
        frames.append(Frame(ti, ni, cross(ti, ni)))

    return frames


def parametric_curve_tube(curve_func: CurveFunc, t_min: float, t_max: float,
                          segments: int, tube_radius: float = config.tube_radius,
                          tube_segments: int = config.tube_segments,
                          color: Vec3 = config.curve_color) -> Mesh:
    """Sweep a tube of ``tube_radius`` around the curve (triangle list).

    Each of the ``segments + 1`` samples gets a ring of ``tube_segments``
    points; consecutive rings are stitched with two triangles per quad,
    wrapping around the ring.  The mesh has
    ``segments * tube_segments * 6`` vertices, or none when ``segments < 1``
    or ``tube_segments < 3``.
    """

    if segments < 1 or tube_segments < 3:
        return []

    points = sample_curve(curve_func, t_min, t_max, segments)
    frames = rotation_minimizing_frames(curve_tangents(points))

    angles = [2.0 * pi * j / tube_segments for j in range(tube_segments)]
    trig = [(cos(a), sin(a)) for a in angles]

    rings: List[List[Vertex]] = []
    for center, frame in zip(points, frames):
        n, b = frame.normal, frame.binormal
        ring = []
        for c, s in trig:
            radial = (c * n[0] + s * b[0], c * n[1] + s * b[1], c * n[2] + s * b[2])
            ring.append(Vertex(add(center, scale(radial, tube_radius)), radial, color))
        rings.append(ring)

    verts: Mesh = []
    for r0, r1 in zip(rings, rings[1:]):
        for j in range(tube_segments):
            j1 = (j + 1) % tube_segments
            verts.extend((r0[j], r0[j1], r1[j],
                          r1[j], r0[j1], r1[j1]))

    logger.debug(f"curve tube: {segments} segments x {tube_segments} sides -> {len(verts)} vertices")
    return verts


def lift_planar(curve_func: Callable[[float], Sequence[float]],
                plane: str = 'xy') -> CurveFunc:
    """Embed an R -> R^2 curve into one of the cardinal planes."""

    try:
        embed = PLANES[plane]
    except KeyError:
        raise ValueError(f"unknown curve plane {plane!r}, expected one of {sorted(PLANES)}")

    def lifted(t):
        a = curve_func(t)
        return embed(float(a[0]), float(a[1]))

    return lifted


def planar_curve(curve_func: Callable[[float], Sequence[float]],
                 t_min: float, t_max: float, segments: int, *,
                 plane: str = 'xy', tube: bool = True,
                 tube_radius: float = config.tube_radius,
                 tube_segments: int = config.tube_segments,
                 color: Vec3 = config.curve_color) -> Mesh:
    """Tessellate a 2D curve drawn in ``plane`` ('xy', 'xz' or 'yz')."""

    lifted = lift_planar(curve_func, plane)
    if tube:
        return parametric_curve_tube(lifted, t_min, t_max, segments,
                                     tube_radius, tube_segments, color)
    return parametric_curve(lifted, t_min, t_max, segments, color)


__all__ = [
    "CurveFunc",
    "sample_curve",
    "parametric_curve",
    "curve_tangents",
    "rotation_minimizing_frames",
    "parametric_curve_tube",
    "lift_planar",
    "planar_curve",
]
