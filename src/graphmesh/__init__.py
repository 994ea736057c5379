# -*- coding: utf-8 -*-
"""Procedural meshes for plotting ``R^n -> R^m`` functions.

Curves become tubes, surfaces become lit triangle patches, fields become
glyphs and streamlines.  Every generator is a pure function returning a
fully expanded list of :class:`~graphmesh.mesh.Vertex`.
"""

from importlib.metadata import PackageNotFoundError, version

try:
    __version__ = version("graphmesh")
except PackageNotFoundError:  # pragma: no cover - handled when package not installed
    __version__ = "unknown"

from graphmesh.color import height_to_color, magnitude_to_color
from graphmesh.curves import (parametric_curve, parametric_curve_tube,
                              planar_curve, rotation_minimizing_frames)
from graphmesh.definition import FunctionDefinition, build_meshes
from graphmesh.fields import (gradient_field_2d, gradient_field_3d,
                              scalar_field, streamlines, vector_field)
from graphmesh.glyphs import arrow_mesh, colored_cube, orientation_basis, place_glyph
from graphmesh.mesh import (Frame, GlyphInstance, Mesh, SampleGrid, Topology,
                            Vertex, mesh_to_array)
from graphmesh.overlays import (curve_normals, frenet_frame, surface_normals,
                                surface_tangents, tangent_vectors)
from graphmesh.surfaces import parametric_surface, parametric_surface_wireframe

__all__ = [
    "__version__",
    "Vertex",
    "Mesh",
    "Frame",
    "GlyphInstance",
    "SampleGrid",
    "Topology",
    "mesh_to_array",
    "magnitude_to_color",
    "height_to_color",
    "arrow_mesh",
    "colored_cube",
    "orientation_basis",
    "place_glyph",
    "parametric_curve",
    "parametric_curve_tube",
    "planar_curve",
    "rotation_minimizing_frames",
    "parametric_surface",
    "parametric_surface_wireframe",
    "vector_field",
    "scalar_field",
    "gradient_field_2d",
    "gradient_field_3d",
    "streamlines",
    "tangent_vectors",
    "curve_normals",
    "frenet_frame",
    "surface_normals",
    "surface_tangents",
    "FunctionDefinition",
    "build_meshes",
]
