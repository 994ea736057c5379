"""Dispatch of user-defined ``R^n -> R^m`` functions to mesh generators.

A :class:`FunctionDefinition` carries everything about one plotted
function except the function itself: its dimensions, sampling domain,
resolution and which overlays to draw.  :func:`build_meshes` looks at
``(input_dim, output_dim)`` and produces every mesh the definition asks
for, each tagged with the topology the renderer should use.

The evaluator is whatever the expression layer compiled; it is called as
``f(t)``, ``f(u, v)`` or ``f((x, y, z))`` depending on ``input_dim`` and
returns a float when ``output_dim == 1`` or a sequence of ``output_dim``
floats otherwise.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, replace
from typing import Callable, Dict, Tuple

from graphmesh import config
from graphmesh.curves import (PLANES, lift_planar, parametric_curve,
                              parametric_curve_tube)
from graphmesh.fields import (gradient_field_2d, gradient_field_3d,
                              scalar_field, streamlines, vector_field)
from graphmesh.mesh import Mesh, SampleGrid, Topology, primitive_count
from graphmesh.overlays import (TANGENT_MODES, curve_normals, frenet_frame,
                                surface_normals, surface_tangents,
                                tangent_vectors)
from graphmesh.surfaces import (height_surface, parametric_surface,
                                parametric_surface_wireframe)

logger = logging.getLogger(__name__)

MeshSet = Dict[str, Tuple[Topology, Mesh]]


@dataclass
class FunctionDefinition:
    """Sampling and overlay settings for one ``R^n -> R^m`` function."""

    name: str = "r"
    input_dim: int = 1
    output_dim: int = 3
    show: bool = True
    color: Tuple[float, float, float] = config.curve_color
    range_min: Tuple[float, float, float] = (-10.0, -10.0, -10.0)
    range_max: Tuple[float, float, float] = (10.0, 10.0, 10.0)
    #: segments for curves, (u, v) segments for surfaces
    resolution: Tuple[int, int] = (200, 200)
    tube_radius: float = config.tube_radius
    arrow_scale: float = 0.3
    #: lattice resolution per axis for fields
    field_resolution: int = 5
    #: cardinal plane for R -> R^2 curves
    curve_plane: str = 'xy'

    wireframe: bool = False
    show_tangent_vectors: bool = False
    surface_tangent_mode: str = 'both'
    show_normal_vectors: bool = False
    flip_normal_vectors: bool = False
    show_frenet_frame: bool = False
    frenet_t: float = 0.5
    show_gradient_field: bool = False
    show_vector_field: bool = True
    show_streamlines: bool = False
    overlay_vector_count: int = 10
    overlay_vector_scale: float = 0.3

    def __post_init__(self):
        if self.input_dim not in (1, 2, 3):
            raise ValueError(f"input dimension must be 1, 2 or 3, got {self.input_dim}")
        if self.output_dim not in (1, 2, 3):
            raise ValueError(f"output dimension must be 1, 2 or 3, got {self.output_dim}")
        if self.curve_plane not in PLANES:
            raise ValueError(f"unknown curve plane {self.curve_plane!r}")
        if self.surface_tangent_mode not in TANGENT_MODES:
            raise ValueError(f"unknown tangent mode {self.surface_tangent_mode!r}")

    @property
    def kind(self) -> str:
        """Short description such as ``'curve'`` or ``'vector field'``."""

        if self.input_dim == 1:
            return 'curve' if self.output_dim >= 2 else 'graph'
        if self.input_dim == 2:
            return 'surface' if self.output_dim != 1 else 'height field'
        return 'scalar field' if self.output_dim == 1 else 'vector field'


def _snapshot(defn: FunctionDefinition) -> FunctionDefinition:
    """Copy ``defn`` so later edits by the caller cannot leak into a build."""

    return replace(defn,
                   color=tuple(defn.color),
                   range_min=tuple(defn.range_min),
                   range_max=tuple(defn.range_max),
                   resolution=tuple(defn.resolution))


def _as_curve(defn: FunctionDefinition, evaluator: Callable):
    if defn.output_dim == 3:
        return evaluator
    if defn.output_dim == 2:
        return lift_planar(evaluator, defn.curve_plane)
    return lambda t: (t, float(evaluator(t)), 0.0)


def _as_surface(defn: FunctionDefinition, evaluator: Callable):
    if defn.output_dim == 3:
        return evaluator
    if defn.output_dim == 1:
        return height_surface(evaluator)

    def planar(u, v):
        a = evaluator(u, v)
        return (float(a[0]), float(a[1]), 0.0)

    return planar


def _as_vector_field(defn: FunctionDefinition, evaluator: Callable):
    if defn.output_dim == 3:
        return evaluator

    def planar(p):
        a = evaluator(p)
        return (float(a[0]), float(a[1]), 0.0)

    return planar


def _build_curve(defn: FunctionDefinition, evaluator: Callable, out: MeshSet):
    curve = _as_curve(defn, evaluator)
    t_min, t_max = defn.range_min[0], defn.range_max[0]
    segments = defn.resolution[0]

    if defn.wireframe:
        out['curve'] = (Topology.LINE_LIST,
                        parametric_curve(curve, t_min, t_max, segments, defn.color))
    else:
        out['curve'] = (Topology.TRIANGLE_LIST,
                        parametric_curve_tube(curve, t_min, t_max, segments,
                                              defn.tube_radius, config.tube_segments,
                                              defn.color))

    count, scale = defn.overlay_vector_count, defn.overlay_vector_scale
    if defn.show_tangent_vectors:
        out['tangents'] = (Topology.TRIANGLE_LIST,
                           tangent_vectors(curve, t_min, t_max, count, scale))
    if defn.show_normal_vectors:
        out['normals'] = (Topology.TRIANGLE_LIST,
                          curve_normals(curve, t_min, t_max, count, scale,
                                        flip=defn.flip_normal_vectors))
    if defn.show_frenet_frame:
        out['frenet'] = (Topology.TRIANGLE_LIST,
                         frenet_frame(curve, t_min, t_max, defn.frenet_t, scale))


def _build_surface(defn: FunctionDefinition, evaluator: Callable, out: MeshSet):
    surface = _as_surface(defn, evaluator)
    u_min, u_max = defn.range_min[0], defn.range_max[0]
    v_min, v_max = defn.range_min[1], defn.range_max[1]
    u_seg, v_seg = defn.resolution

    if defn.wireframe:
        out['surface'] = (Topology.LINE_LIST,
                          parametric_surface_wireframe(surface, u_min, u_max, v_min, v_max,
                                                       u_seg, v_seg, defn.color))
    else:
        out['surface'] = (Topology.TRIANGLE_LIST,
                          parametric_surface(surface, u_min, u_max, v_min, v_max,
                                             u_seg, v_seg, color_by_height=True))

    count, scale = defn.overlay_vector_count, defn.overlay_vector_scale
    if defn.show_normal_vectors:
        out['normals'] = (Topology.TRIANGLE_LIST,
                          surface_normals(surface, u_min, u_max, v_min, v_max,
                                          count, count, scale,
                                          flip=defn.flip_normal_vectors))
    if defn.show_tangent_vectors:
        out['tangents'] = (Topology.TRIANGLE_LIST,
                           surface_tangents(surface, u_min, u_max, v_min, v_max,
                                            count, count, scale,
                                            mode=defn.surface_tangent_mode))
    if defn.show_gradient_field and defn.output_dim == 1:
        out['gradient'] = (Topology.TRIANGLE_LIST,
                           gradient_field_2d(evaluator, u_min, u_max, v_min, v_max,
                                             count, count, defn.arrow_scale))


def _build_field(defn: FunctionDefinition, evaluator: Callable, out: MeshSet):
    lo, hi, res = defn.range_min, defn.range_max, defn.field_resolution

    if defn.output_dim == 1:
        grid = SampleGrid.cube(lo, hi, res)
        steps = [grid.step(a) for a in range(3) if grid.step(a) > 0.0]
        cube_size = 0.3 * min(steps) if steps else config.cube_size
        out['scalar field'] = (Topology.TRIANGLE_LIST,
                               scalar_field(evaluator, lo, hi, res, cube_size))
        if defn.show_gradient_field:
            out['gradient'] = (Topology.TRIANGLE_LIST,
                               gradient_field_3d(evaluator, lo, hi, res, defn.arrow_scale))
        return

    field_func = _as_vector_field(defn, evaluator)
    if defn.show_vector_field:
        out['vector field'] = (Topology.TRIANGLE_LIST,
                               vector_field(field_func, lo, hi, res, defn.arrow_scale))
    if defn.show_streamlines:
        span = max(abs(hi[a] - lo[a]) for a in range(3))
        step = config.streamline_step * max(1.0, span / 10.0)
        out['streamlines'] = (Topology.LINE_LIST,
                              streamlines(field_func, lo, hi, res, step))


def build_meshes(defn: FunctionDefinition, evaluator: Callable) -> MeshSet:
    """Generate every mesh ``defn`` calls for.

    Returns a ``dict`` mapping a mesh name (``'curve'``, ``'surface'``,
    ``'vector field'``, ``'normals'`` ...) to ``(topology, vertices)``, in
    drawing order.  A hidden definition yields an empty ``dict``.
    """

    defn = _snapshot(defn)
    out: MeshSet = {}
    if not defn.show:
        return out

    if defn.input_dim == 1:
        _build_curve(defn, evaluator, out)
    elif defn.input_dim == 2:
        _build_surface(defn, evaluator, out)
    else:
        _build_field(defn, evaluator, out)

    logger.info(f"{defn.name}: built {defn.kind} "
                f"({', '.join(f'{k}={primitive_count(m, t)}' for k, (t, m) in out.items())})")
    return out


__all__ = ["FunctionDefinition", "MeshSet", "build_meshes"]
