"""Vertex and mesh containers shared by every graphmesh generator.

A mesh is nothing more than a ``list`` of :class:`Vertex`.  It is always
fully expanded (no index buffer) and is read either as disjoint line pairs
or as disjoint triangles; which one is given by the :class:`Topology`
documented on the generator that produced it.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from itertools import product
from typing import Iterator, List, Sequence, Tuple

import numpy as np

from graphmesh.vec import Vec3

Vec2 = Tuple[float, float]

NO_NORMAL: Vec3 = (0.0, 0.0, 0.0)
NO_UV: Vec2 = (0.0, 0.0)

#: floats per vertex in :func:`mesh_to_array` output
VERTEX_STRIDE = 11


class Topology(Enum):
    """How the caller should assemble a mesh."""

    LINE_LIST = 2
    TRIANGLE_LIST = 3

    @property
    def stride(self) -> int:
        return self.value


@dataclass(frozen=True)
class Vertex:
    """A single fully-expanded vertex."""

    position: Vec3
    normal: Vec3 = NO_NORMAL
    color: Vec3 = (1.0, 1.0, 1.0)
    uv: Vec2 = NO_UV


Mesh = List[Vertex]


@dataclass(frozen=True)
class Frame:
    """Orthonormal (tangent, normal, binormal) triple at one curve sample."""

    tangent: Vec3
    normal: Vec3
    binormal: Vec3


@dataclass(frozen=True)
class GlyphInstance:
    """Placement request for one canonical glyph."""

    position: Vec3
    direction: Vec3
    magnitude: float


@dataclass(frozen=True)
class SampleGrid:
    """Implicit lattice of ``resolution[i]`` samples between ``minimum[i]``
    and ``maximum[i]`` along each axis.

    A resolution of one places a single sample at the minimum; a resolution
    below one makes the grid empty.
    """

    minimum: Tuple[float, ...]
    maximum: Tuple[float, ...]
    resolution: Tuple[int, ...]

    def __post_init__(self):
        if not (len(self.minimum) == len(self.maximum) == len(self.resolution)):
            raise ValueError("minimum, maximum and resolution must have the same length")
        if not 1 <= len(self.resolution) <= 3:
            raise ValueError("a sample grid has one to three axes")

    @classmethod
    def cube(cls, range_min: Sequence[float], range_max: Sequence[float], resolution) -> "SampleGrid":
        """Build a 3D grid; an integer ``resolution`` is used on every axis."""

        if np.ndim(resolution) == 0:
            resolution = (resolution, resolution, resolution)
        return cls(tuple(float(x) for x in range_min[:3]),
                   tuple(float(x) for x in range_max[:3]),
                   tuple(int(r) for r in resolution[:3]))

    @property
    def dimension(self) -> int:
        return len(self.resolution)

    @property
    def is_empty(self) -> bool:
        return any(r < 1 for r in self.resolution)

    @property
    def count(self) -> int:
        if self.is_empty:
            return 0
        n = 1
        for r in self.resolution:
            n *= r
        return n

    def step(self, axis: int) -> float:
        res = self.resolution[axis]
        if res <= 1:
            return 0.0
        return (self.maximum[axis] - self.minimum[axis]) / (res - 1)

    def axis_values(self, axis: int) -> List[float]:
        lo = self.minimum[axis]
        h = self.step(axis)
        return [lo + i * h for i in range(max(self.resolution[axis], 0))]

    def points(self) -> Iterator[Tuple[float, ...]]:
        """Yield every lattice point, first axis outermost."""

        if self.is_empty:
            return
        yield from product(*(self.axis_values(a) for a in range(self.dimension)))

    def normalized(self, p: Sequence[float], axis: int) -> float:
        """Position of ``p`` along ``axis`` mapped to [0, 1]."""

        span = self.maximum[axis] - self.minimum[axis]
        if abs(span) < 1e-12:
            return 0.0
        return (p[axis] - self.minimum[axis]) / span

    def contains(self, p: Sequence[float], pad: float = 0.0) -> bool:
        for a in range(self.dimension):
            lo = min(self.minimum[a], self.maximum[a]) - pad
            hi = max(self.minimum[a], self.maximum[a]) + pad
            if p[a] < lo or p[a] > hi:
                return False
        return True


def line(p0: Vec3, p1: Vec3, color: Vec3) -> Tuple[Vertex, Vertex]:
    """Return a two-vertex line segment with no normal."""
    return (Vertex(p0, NO_NORMAL, color), Vertex(p1, NO_NORMAL, color))


def mesh_to_array(mesh: Sequence[Vertex]) -> np.ndarray:
    """Pack ``mesh`` into an ``(N, 11)`` ``float32`` array.

    Columns are position (3), normal (3), color (3) and uv (2), the
    interleaved layout a vertex buffer upload expects.
    """

    out = np.empty((len(mesh), VERTEX_STRIDE), dtype=np.float32)
    for i, v in enumerate(mesh):
        out[i, 0:3] = v.position
        out[i, 3:6] = v.normal
        out[i, 6:9] = v.color
        out[i, 9:11] = v.uv
    return out


def primitive_count(mesh: Sequence[Vertex], topology: Topology) -> int:
    """Number of complete lines or triangles in ``mesh``."""
    return len(mesh) // topology.stride


__all__ = [
    "Vec2",
    "Topology",
    "Vertex",
    "Mesh",
    "Frame",
    "GlyphInstance",
    "SampleGrid",
    "NO_NORMAL",
    "NO_UV",
    "VERTEX_STRIDE",
    "line",
    "mesh_to_array",
    "primitive_count",
]
