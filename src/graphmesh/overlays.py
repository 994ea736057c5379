"""Differential-geometry overlays drawn as arrows on curves and surfaces.

Derivatives are taken by central difference with a step proportional to
the parameter range, ``fd_epsilon * max(1, |range|)``, so the estimate is
equally well conditioned on ``[0, 1]`` and on ``[0, 1000]``.
"""

from __future__ import annotations

import logging
from typing import List, Optional

from graphmesh import config
from graphmesh.curves import CurveFunc
from graphmesh.glyphs import oriented_arrow
from graphmesh.mesh import Frame, Mesh, SampleGrid
from graphmesh.surfaces import SurfaceFunc, surface_partials
from graphmesh.vec import (Z_AXIS, Vec3, cross, dist, dot, mag, normalize,
                           perpendicular, scale, sub, to_vec3)

logger = logging.getLogger(__name__)

TANGENT_MODES = ('both', 'u', 'v')


def derivative_step(lo: float, hi: float) -> float:
    """Finite-difference step scaled to the parameter range."""
    return config.fd_epsilon * max(1.0, abs(hi - lo))


def _params(lo: float, hi: float, count: int) -> List[float]:
    if count < 1:
        return []
    if count == 1:
        return [lo]
    return [lo + (hi - lo) * i / (count - 1) for i in range(count)]


def curve_derivatives(curve_func: CurveFunc, t: float, h: float):
    """Return ``(r, r', r'')`` at ``t`` by central differences of step ``h``."""

    p = to_vec3(curve_func(t))
    fwd = to_vec3(curve_func(t + h))
    bwd = to_vec3(curve_func(t - h))
    d1 = scale(sub(fwd, bwd), 1.0 / (2.0 * h))
    d2 = tuple((fwd[k] - 2.0 * p[k] + bwd[k]) / (h * h) for k in range(3))
    return p, d1, d2


def frenet_at(curve_func: CurveFunc, t: float, h: float) -> Frame:
    """Frenet frame ``(T, N, B)`` at ``t``.

    ``N`` is the part of ``r''`` orthogonal to ``T``.  On straight runs
    that component vanishes, and any unit vector perpendicular to ``T``
    is used instead.
    """

    _, d1, d2 = curve_derivatives(curve_func, t, h)
    tangent = normalize(d1, fallback=Z_AXIS)
    ortho = sub(d2, scale(tangent, dot(d2, tangent)))
    if mag(ortho) < config.curvature_epsilon * max(1.0, dot(d1, d1)):
        normal = perpendicular(tangent)
    else:
        normal = normalize(ortho)
    return Frame(tangent, normal, cross(tangent, normal))


def tangent_vectors(curve_func: CurveFunc, t_min: float, t_max: float, count: int,
                    arrow_scale: float = 0.3, color: Vec3 = config.arrow_color) -> Mesh:
    """Unit tangent arrows at ``count`` evenly spaced parameters."""

    h = derivative_step(t_min, t_max)
    verts: Mesh = []
    for t in _params(t_min, t_max, count):
        p, d1, _ = curve_derivatives(curve_func, t, h)
        if mag(d1) < config.epsilon:
            continue
        verts.extend(oriented_arrow(p, d1, arrow_scale, color))
    return verts


def curve_normals(curve_func: CurveFunc, t_min: float, t_max: float, count: int,
                  arrow_scale: float = 0.3, color: Vec3 = config.normal_color,
                  flip: bool = False) -> Mesh:
    """Principal normal arrows at ``count`` evenly spaced parameters."""

    h = derivative_step(t_min, t_max)
    verts: Mesh = []
    for t in _params(t_min, t_max, count):
        frame = frenet_at(curve_func, t, h)
        n = scale(frame.normal, -1.0) if flip else frame.normal
        verts.extend(oriented_arrow(to_vec3(curve_func(t)), n, arrow_scale, color))
    return verts


def frenet_frame(curve_func: CurveFunc, t_min: float, t_max: float, t_norm: float,
                 arrow_scale: float = 0.5) -> Mesh:
    """T, N and B arrows (red, green, blue) at one point of the curve.

    ``t_norm`` in [0, 1] picks the point within ``[t_min, t_max]``; values
    outside are clamped.
    """

    t_norm = min(max(t_norm, 0.0), 1.0)
    t = t_min + t_norm * (t_max - t_min)
    frame = frenet_at(curve_func, t, derivative_step(t_min, t_max))
    origin = to_vec3(curve_func(t))

    verts: Mesh = []
    for axis, color in zip((frame.tangent, frame.normal, frame.binormal),
                           config.frenet_colors):
        verts.extend(oriented_arrow(origin, axis, arrow_scale, color))
    return verts


def _surface_samples(surface_func: SurfaceFunc, u_min, u_max, v_min, v_max,
                     u_count, v_count, min_spacing):
    """Yield ``(position, dp/du, dp/dv)`` for well-separated grid samples.

    Candidates closer than ``min_spacing`` to an already accepted sample
    are skipped, which keeps glyphs from piling up where the
    parametrization collapses (sphere poles and the like).
    """

    grid = SampleGrid((u_min, v_min), (u_max, v_max), (u_count, v_count))
    h = max(derivative_step(u_min, u_max), derivative_step(v_min, v_max))
    placed: List[Vec3] = []
    skipped = 0
    for u, v in grid.points():
        p = to_vec3(surface_func(u, v))
        if any(dist(p, q) < min_spacing for q in placed):
            skipped += 1
            continue
        placed.append(p)
        dpdu, dpdv = surface_partials(surface_func, u, v, h)
        yield p, dpdu, dpdv
    if skipped:
        logger.debug(f"skipped {skipped} clustered overlay samples")


def surface_normals(surface_func: SurfaceFunc,
                    u_min: float, u_max: float, v_min: float, v_max: float,
                    u_count: int, v_count: int, arrow_scale: float = 0.3,
                    color: Vec3 = config.normal_color, flip: bool = False,
                    min_spacing: Optional[float] = None) -> Mesh:
    """Normal arrows on a ``u_count x v_count`` grid of the surface."""

    if min_spacing is None:
        min_spacing = config.overlay_min_spacing * arrow_scale
    verts: Mesh = []
    for p, dpdu, dpdv in _surface_samples(surface_func, u_min, u_max, v_min, v_max,
                                          u_count, v_count, min_spacing):
        n = normalize(cross(dpdu, dpdv), fallback=Z_AXIS)
        if flip:
            n = scale(n, -1.0)
        verts.extend(oriented_arrow(p, n, arrow_scale, color))
    return verts


def surface_tangents(surface_func: SurfaceFunc,
                     u_min: float, u_max: float, v_min: float, v_max: float,
                     u_count: int, v_count: int, arrow_scale: float = 0.3,
                     mode: str = 'both', min_spacing: Optional[float] = None,
                     u_color: Vec3 = config.tangent_u_color,
                     v_color: Vec3 = config.tangent_v_color) -> Mesh:
    """``dp/du`` (red) and/or ``dp/dv`` (green) arrows on the surface.

    ``mode`` is ``'both'``, ``'u'`` or ``'v'``.
    """

    if mode not in TANGENT_MODES:
        raise ValueError(f"unknown tangent mode {mode!r}, expected one of {TANGENT_MODES}")
    if min_spacing is None:
        min_spacing = config.overlay_min_spacing * arrow_scale

    verts: Mesh = []
    for p, dpdu, dpdv in _surface_samples(surface_func, u_min, u_max, v_min, v_max,
                                          u_count, v_count, min_spacing):
        if mode in ('both', 'u') and mag(dpdu) > config.epsilon:
            verts.extend(oriented_arrow(p, dpdu, arrow_scale, u_color))
        if mode in ('both', 'v') and mag(dpdv) > config.epsilon:
            verts.extend(oriented_arrow(p, dpdv, arrow_scale, v_color))
    return verts


__all__ = [
    "derivative_step",
    "curve_derivatives",
    "frenet_at",
    "tangent_vectors",
    "curve_normals",
    "frenet_frame",
    "surface_normals",
    "surface_tangents",
]
