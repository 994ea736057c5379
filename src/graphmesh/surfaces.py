"""Tessellation of parametric surfaces ``r(u, v)``.

The surface is sampled on a regular ``(u_segments + 1) x (v_segments + 1)``
grid.  Normals are estimated by central differences of the surface
function itself, so a surface handed over as a bare callable still lights
correctly.
"""

from __future__ import annotations

import logging
from typing import Callable, List, Sequence

from graphmesh import config
from graphmesh.color import height_to_color
from graphmesh.mesh import Mesh, Vertex, line
from graphmesh.vec import Z_AXIS, Vec3, cross, normalize, scale, sub, to_vec3

logger = logging.getLogger(__name__)

SurfaceFunc = Callable[[float, float], Sequence[float]]


def surface_partials(surface_func: SurfaceFunc, u: float, v: float,
                     eps: float = config.fd_epsilon):
    """Return ``(dp/du, dp/dv)`` by central difference."""

    inv = 1.0 / (2.0 * eps)
    dpdu = scale(sub(surface_func(u + eps, v), surface_func(u - eps, v)), inv)
    dpdv = scale(sub(surface_func(u, v + eps), surface_func(u, v - eps)), inv)
    return dpdu, dpdv


def surface_normal(surface_func: SurfaceFunc, u: float, v: float,
                   eps: float = config.fd_epsilon) -> Vec3:
    """Unit normal ``dp/du x dp/dv`` at ``(u, v)``.

    Degenerate parametrizations (poles, collapsed edges) give a vanishing
    cross product; those points get ``(0, 0, 1)``.
    """

    dpdu, dpdv = surface_partials(surface_func, u, v, eps)
    return normalize(cross(dpdu, dpdv), fallback=Z_AXIS)


def _grid_params(lo: float, hi: float, segments: int) -> List[float]:
    d = (hi - lo) / segments
    return [lo + i * d for i in range(segments + 1)]


def parametric_surface(surface_func: SurfaceFunc,
                       u_min: float, u_max: float, v_min: float, v_max: float,
                       u_segments: int, v_segments: int,
                       color_by_height: bool = True) -> Mesh:
    """Triangulate the surface over ``[u_min, u_max] x [v_min, v_max]``.

    Each grid cell becomes two triangles, ``(p00, p10, p11)`` and
    ``(p00, p11, p01)``, wound consistently with the ``dp/du x dp/dv``
    normal.  With ``color_by_height`` every vertex is colored by its z
    coordinate against the z range observed over the whole patch;
    otherwise the neutral surface color is used.

    Returns a triangle list of ``u_segments * v_segments * 6`` vertices.
    """

    if u_segments < 1 or v_segments < 1:
        return []

    us = _grid_params(u_min, u_max, u_segments)
    vs = _grid_params(v_min, v_max, v_segments)

    positions = [[to_vec3(surface_func(u, v)) for v in vs] for u in us]
    heights = [p[2] for column in positions for p in column]
    min_h, max_h = min(heights), max(heights)

    normals = [[surface_normal(surface_func, u, v) for v in vs] for u in us]

    if color_by_height:
        colors = [[height_to_color(p[2], min_h, max_h) for p in column] for column in positions]
    else:
        colors = [[config.neutral_color] * len(vs) for _ in us]

    def vert(i, j):
        return Vertex(positions[i][j], normals[i][j], colors[i][j],
                      (i / u_segments, j / v_segments))

    verts: Mesh = []
    for i in range(u_segments):
        for j in range(v_segments):
            v00 = vert(i, j)
            v10 = vert(i + 1, j)
            v01 = vert(i, j + 1)
            v11 = vert(i + 1, j + 1)
            verts.extend((v00, v10, v11, v00, v11, v01))

    logger.debug(f"surface: {u_segments}x{v_segments} grid -> {len(verts)} vertices")
    return verts


def parametric_surface_wireframe(surface_func: SurfaceFunc,
                                 u_min: float, u_max: float, v_min: float, v_max: float,
                                 u_segments: int, v_segments: int,
                                 color: Vec3 = config.wireframe_color) -> Mesh:
    """Iso-parameter curves of the surface as a line list.

    Every grid column (constant u) and every grid row (constant v) is
    emitted as a polyline of disjoint segments; no triangles.
    """

    if u_segments < 1 or v_segments < 1:
        return []

    us = _grid_params(u_min, u_max, u_segments)
    vs = _grid_params(v_min, v_max, v_segments)
    positions = [[to_vec3(surface_func(u, v)) for v in vs] for u in us]

    verts: Mesh = []
    # constant u
    for column in positions:
        for p0, p1 in zip(column, column[1:]):
            verts.extend(line(p0, p1, color))
    # constant v
    for j in range(v_segments + 1):
        for i in range(u_segments):
            verts.extend(line(positions[i][j], positions[i + 1][j], color))
    return verts


def height_surface(height_func: Callable[[float, float], float]) -> SurfaceFunc:
    """Wrap a scalar ``z = f(x, y)`` as a surface ``(x, y, f(x, y))``."""

    def surface(u, v):
        return (u, v, float(height_func(u, v)))

    return surface


__all__ = [
    "SurfaceFunc",
    "surface_partials",
    "surface_normal",
    "parametric_surface",
    "parametric_surface_wireframe",
    "height_surface",
]
