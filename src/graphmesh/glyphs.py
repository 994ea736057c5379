"""Canonical glyph meshes and the routine that places them in the world.

Glyphs are built once in a local frame (arrows point along +Z, cubes are
centered on the origin) and then rotated and translated into place by
:func:`place_glyph`.  Every call site that draws an oriented glyph goes
through :func:`orientation_basis`, so the degenerate-basis handling lives
in exactly one spot.
"""

from __future__ import annotations

import logging
from math import cos, pi, sin, sqrt
from typing import Sequence, Tuple

from graphmesh import config
from graphmesh.mesh import GlyphInstance, Mesh, Vertex
from graphmesh.vec import (X_AXIS, Y_AXIS, Z_AXIS, Vec3, add, cross, mag,
                           normalize)

logger = logging.getLogger(__name__)

Basis = Tuple[Vec3, Vec3, Vec3]


def _ring(radius: float, segments: int, z: float):
    """Yield ``(c0, s0, c1, s1, p0, p1)`` for each slice of a ring."""

    for i in range(segments):
        a0 = 2.0 * pi * i / segments
        a1 = 2.0 * pi * (i + 1) / segments
        c0, s0 = cos(a0), sin(a0)
        c1, s1 = cos(a1), sin(a1)
        yield (c0, s0, c1, s1,
               (radius * c0, radius * s0, z),
               (radius * c1, radius * s1, z))


def arrow_mesh(shaft_length: float, shaft_radius: float,
               head_length: float, head_radius: float,
               segments: int = 8, color: Vec3 = config.arrow_color) -> Mesh:
    """Build an arrow along local +Z starting at the origin.

    The arrow is a cylindrical shaft from ``z=0`` to ``z=shaft_length``, a
    cone from there to the tip at ``shaft_length + head_length``, and two
    disk caps closing the shaft bottom and the cone base.  The result is a
    triangle list of ``segments * 12`` vertices.

    Parameters
    ----------
    shaft_length, shaft_radius : float
        Cylinder dimensions.
    head_length, head_radius : float
        Cone dimensions.
    segments : int
        Slices around the axis; fewer than three yields an empty mesh.
    color : tuple
        RGB color applied to every vertex.
    """

    verts: Mesh = []
    if segments < 3:
        return verts

    # shaft: two triangles per slice, radial normals
    for c0, s0, c1, s1, p00, p01 in _ring(shaft_radius, segments, 0.0):
        n0 = (c0, s0, 0.0)
        n1 = (c1, s1, 0.0)
        p10 = (p00[0], p00[1], shaft_length)
        p11 = (p01[0], p01[1], shaft_length)

        verts.append(Vertex(p00, n0, color))
        verts.append(Vertex(p01, n1, color))
        verts.append(Vertex(p10, n0, color))

        verts.append(Vertex(p10, n0, color))
        verts.append(Vertex(p01, n1, color))
        verts.append(Vertex(p11, n1, color))

    # head: slant normal balances the radial and axial components by the
    # cone's radius/length ratio
    tip = (0.0, 0.0, shaft_length + head_length)
    hyp = sqrt(head_radius * head_radius + head_length * head_length)
    if hyp > 0.0:
        nr = head_length / hyp
        nz = head_radius / hyp
    else:
        nr, nz = 0.0, 1.0
    for c0, s0, c1, s1, base0, base1 in _ring(head_radius, segments, shaft_length):
        n0 = (nr * c0, nr * s0, nz)
        n1 = (nr * c1, nr * s1, nz)
        n_tip = normalize(add(n0, n1))

        verts.append(Vertex(base0, n0, color))
        verts.append(Vertex(base1, n1, color))
        verts.append(Vertex(tip, n_tip, color))

    cap_normal = (0.0, 0.0, -1.0)
    for radius, z in ((shaft_radius, 0.0), (head_radius, shaft_length)):
        center = (0.0, 0.0, z)
        for _c0, _s0, _c1, _s1, p0, p1 in _ring(radius, segments, z):
            verts.append(Vertex(center, cap_normal, color))
            verts.append(Vertex(p1, cap_normal, color))
            verts.append(Vertex(p0, cap_normal, color))

    return verts


_CUBE_FACES = (
    ((0, 0, 1), ((-1, -1, 1), (1, -1, 1), (1, 1, 1), (-1, 1, 1))),
    ((0, 0, -1), ((-1, -1, -1), (-1, 1, -1), (1, 1, -1), (1, -1, -1))),
    ((1, 0, 0), ((1, -1, -1), (1, 1, -1), (1, 1, 1), (1, -1, 1))),
    ((-1, 0, 0), ((-1, -1, -1), (-1, -1, 1), (-1, 1, 1), (-1, 1, -1))),
    ((0, 1, 0), ((-1, 1, -1), (-1, 1, 1), (1, 1, 1), (1, 1, -1))),
    ((0, -1, 0), ((-1, -1, -1), (1, -1, -1), (1, -1, 1), (-1, -1, 1))),
)


def colored_cube(half_size: float, color: Vec3) -> Mesh:
    """Axis-aligned cube centered on the origin, 36 vertices."""

    verts: Mesh = []
    s = half_size
    for normal, corners in _CUBE_FACES:
        n = (float(normal[0]), float(normal[1]), float(normal[2]))
        c = [(x * s, y * s, z * s) for x, y, z in corners]
        for idx in (0, 1, 2, 0, 2, 3):
            verts.append(Vertex(c[idx], n, color))
    return verts


def orientation_basis(direction: Sequence[float]) -> Basis:
    """Return an orthonormal ``(x, y, d)`` basis whose third axis is ``direction``.

    The reference axis is +Y unless ``direction`` is within a hair of it,
    in which case +X is used so the cross product never collapses.  A zero
    ``direction`` yields the identity basis.
    """

    if mag(direction) < config.epsilon:
        return X_AXIS, Y_AXIS, Z_AXIS
    d = normalize(direction)
    ref = Y_AXIS if abs(d[1]) < config.basis_parallel_limit else X_AXIS
    x_axis = normalize(cross(ref, d), fallback=X_AXIS)
    y_axis = cross(d, x_axis)
    return x_axis, y_axis, d


def _rotate(basis: Basis, v: Sequence[float]) -> Vec3:
    x, y, z = basis
    return (x[0] * v[0] + y[0] * v[1] + z[0] * v[2],
            x[1] * v[0] + y[1] * v[1] + z[1] * v[2],
            x[2] * v[0] + y[2] * v[1] + z[2] * v[2])


def place_glyph(mesh: Sequence[Vertex], position: Sequence[float],
                direction: Sequence[float] = Z_AXIS) -> Mesh:
    """Rotate ``mesh`` so local +Z follows ``direction``, then move it to
    ``position``.  Colors and uvs are untouched."""

    basis = orientation_basis(direction)
    px, py, pz = float(position[0]), float(position[1]), float(position[2])
    placed: Mesh = []
    for v in mesh:
        p = _rotate(basis, v.position)
        placed.append(Vertex((p[0] + px, p[1] + py, p[2] + pz),
                             _rotate(basis, v.normal), v.color, v.uv))
    return placed


def translate_glyph(mesh: Sequence[Vertex], position: Sequence[float]) -> Mesh:
    """Move ``mesh`` to ``position`` without rotating it."""

    return [Vertex(add(v.position, position), v.normal, v.color, v.uv) for v in mesh]


def oriented_arrow(position: Sequence[float], direction: Sequence[float],
                   length: float, color: Vec3,
                   proportions: Tuple[float, float, float, float] = config.overlay_arrow_proportions,
                   segments: int = config.overlay_arrow_segments) -> Mesh:
    """Arrow of total ``length`` starting at ``position`` pointing along ``direction``.

    ``proportions`` gives shaft length, shaft radius, head length and head
    radius as fractions of ``length``.
    """

    shaft, shaft_r, head, head_r = proportions
    mesh = arrow_mesh(length * shaft, length * shaft_r,
                      length * head, length * head_r, segments, color)
    return place_glyph(mesh, position, direction)


def place_instance(instance: GlyphInstance, length: float, color: Vec3,
                   proportions=config.field_arrow_proportions,
                   segments: int = config.field_arrow_segments) -> Mesh:
    """Draw a :class:`GlyphInstance` as an arrow of the given ``length``."""

    return oriented_arrow(instance.position, instance.direction, length,
                          color, proportions, segments)


__all__ = [
    "arrow_mesh",
    "colored_cube",
    "orientation_basis",
    "place_glyph",
    "translate_glyph",
    "oriented_arrow",
    "place_instance",
]
