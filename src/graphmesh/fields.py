"""Glyph and streamline visualizations of fields sampled on a 3D lattice.

Vector, gradient and scalar fields all follow the same two passes: first
evaluate every lattice point and collect the statistics needed to
normalize (maximum magnitude, or value range), then emit one glyph per
sample with its size and color driven by the normalized value.
:func:`glyph_field` implements those passes once; the public generators
only differ in what they evaluate and which glyph they emit.

Streamlines are traced with fixed-step fourth-order Runge-Kutta and
always stop after ``max_steps`` even when nothing else ends them.
"""

from __future__ import annotations

import logging
from typing import Callable, Iterable, List, Optional, Sequence, Tuple

from graphmesh import config
from graphmesh.color import magnitude_to_color
from graphmesh.glyphs import colored_cube, place_instance, translate_glyph
from graphmesh.mesh import GlyphInstance, Mesh, SampleGrid, line
from graphmesh.vec import Vec3, add, mag, madd, scale, to_vec3

logger = logging.getLogger(__name__)

VectorFunc = Callable[[Vec3], Sequence[float]]
ScalarFunc = Callable[[Vec3], float]

# (position, value, magnitude, normalized magnitude) -> glyph vertices
Emitter = Callable[[Vec3, object, float, float], Mesh]
# observed magnitudes -> (magnitude -> [0, 1])
Normalizer = Callable[[List[float]], Callable[[float], float]]


def max_normalizer(magnitudes: List[float]) -> Callable[[float], float]:
    """Normalize by the largest magnitude, floored to keep the division sane."""

    top = max(magnitudes, default=0.0)
    top = max(top, config.max_magnitude_floor)
    return lambda m: m / top


def range_normalizer(values: List[float]) -> Callable[[float], float]:
    """Normalize into ``[min, max]``; a degenerate range counts as width one."""

    if not values:
        return lambda v: 0.0
    lo, hi = min(values), max(values)
    width = hi - lo
    if width < config.range_epsilon:
        width = 1.0
    return lambda v: (v - lo) / width


def glyph_field(positions: Iterable[Vec3], evaluate: Callable[[Vec3], object],
                magnitude: Callable[[object], float], normalizer: Normalizer,
                emit: Emitter) -> Mesh:
    """Two-pass evaluate, normalize and emit pipeline.

    Parameters
    ----------
    positions : iterable of points
        Sample locations.
    evaluate : callable
        Maps a position to the sampled value.
    magnitude : callable
        Maps a sampled value to the scalar that is normalized.
    normalizer : callable
        Given every observed magnitude, returns the normalizing function.
    emit : callable
        ``emit(position, value, magnitude, t)`` returns the glyph vertices
        for one sample, or an empty list to skip it.
    """

    samples: List[Tuple[Vec3, object, float]] = []
    for pos in positions:
        value = evaluate(pos)
        samples.append((pos, value, magnitude(value)))

    norm = normalizer([m for _, _, m in samples])

    verts: Mesh = []
    for pos, value, m in samples:
        verts.extend(emit(pos, value, m, norm(m)))
    return verts


def arrow_emitter(arrow_scale: float) -> Emitter:
    """Emit field arrows sized and colored by normalized magnitude.

    Samples below ``min_magnitude`` have no meaningful direction and are
    dropped.
    """

    min_len = config.min_length_fraction * arrow_scale
    max_len = config.max_length_fraction * arrow_scale

    def emit(pos, value, m, t):
        if m < config.min_magnitude:
            return []
        length = min_len + (max_len - min_len) * t
        return place_instance(GlyphInstance(pos, value, m), length, magnitude_to_color(t))

    return emit


def _vector_glyphs(positions: Iterable[Vec3], evaluate: Callable[[Vec3], Vec3],
                   arrow_scale: float) -> Mesh:
    return glyph_field(positions, evaluate, mag, max_normalizer, arrow_emitter(arrow_scale))


def _lattice(range_min, range_max, resolution) -> SampleGrid:
    return SampleGrid.cube(range_min, range_max, resolution)


def vector_field(field_func: VectorFunc, range_min: Sequence[float],
                 range_max: Sequence[float], resolution,
                 arrow_scale: float = 1.0) -> Mesh:
    """One arrow per lattice point of a 3D vector field (triangle list).

    Arrow length runs from ``0.05 * arrow_scale`` for the weakest sample
    to ``0.8 * arrow_scale`` for the strongest, and color follows the same
    normalized magnitude.  A field that vanishes everywhere yields an
    empty mesh.
    """

    grid = _lattice(range_min, range_max, resolution)
    verts = _vector_glyphs(grid.points(), lambda p: to_vec3(field_func(p)), arrow_scale)
    logger.debug(f"vector field: {grid.count} samples -> {len(verts)} vertices")
    return verts


def scalar_field(scalar_func: ScalarFunc, range_min: Sequence[float],
                 range_max: Sequence[float], resolution,
                 cube_size: float = config.cube_size) -> Mesh:
    """One colored cube per lattice point of a scalar field (triangle list)."""

    grid = _lattice(range_min, range_max, resolution)
    half = cube_size * 0.5

    def emit(pos, value, m, t):
        return translate_glyph(colored_cube(half, magnitude_to_color(t)), pos)

    verts = glyph_field(grid.points(), lambda p: float(scalar_func(p)),
                        lambda v: v, range_normalizer, emit)
    logger.debug(f"scalar field: {grid.count} samples -> {len(verts)} vertices")
    return verts


def gradient_2d(scalar_func: Callable[[float, float], float], u: float, v: float,
                eps: float = config.fd_epsilon) -> Vec3:
    """``(df/du, df/dv, 0)`` by central difference."""

    inv = 1.0 / (2.0 * eps)
    return ((scalar_func(u + eps, v) - scalar_func(u - eps, v)) * inv,
            (scalar_func(u, v + eps) - scalar_func(u, v - eps)) * inv,
            0.0)


def gradient_3d(scalar_func: ScalarFunc, p: Sequence[float],
                eps: float = config.fd_epsilon) -> Vec3:
    """Central-difference gradient of a scalar field at ``p``."""

    inv = 1.0 / (2.0 * eps)
    x, y, z = p[0], p[1], p[2]
    return ((scalar_func((x + eps, y, z)) - scalar_func((x - eps, y, z))) * inv,
            (scalar_func((x, y + eps, z)) - scalar_func((x, y - eps, z))) * inv,
            (scalar_func((x, y, z + eps)) - scalar_func((x, y, z - eps))) * inv)


def gradient_field_2d(scalar_func: Callable[[float, float], float],
                      u_min: float, u_max: float, v_min: float, v_max: float,
                      u_count: int, v_count: int,
                      arrow_scale: float = 0.3) -> Mesh:
    """Gradient arrows of ``z = f(u, v)``.

    Arrows lie in the xy plane and sit on the graph, at ``(u, v, f(u, v))``.
    """

    grid = SampleGrid((u_min, v_min), (u_max, v_max), (u_count, v_count))
    positions = [(u, v, float(scalar_func(u, v))) for u, v in grid.points()]
    return _vector_glyphs(positions, lambda p: gradient_2d(scalar_func, p[0], p[1]),
                          arrow_scale)


def gradient_field_3d(scalar_func: ScalarFunc, range_min: Sequence[float],
                      range_max: Sequence[float], resolution,
                      arrow_scale: float = 0.3) -> Mesh:
    """Gradient arrows of a 3D scalar field on a lattice."""

    grid = _lattice(range_min, range_max, resolution)
    return _vector_glyphs(grid.points(), lambda p: gradient_3d(scalar_func, p),
                          arrow_scale)


def rk4_step(field_func: VectorFunc, p: Vec3, h: float,
             k1: Optional[Vec3] = None) -> Vec3:
    """Advance ``p`` by one classical Runge-Kutta step of size ``h``.

    ``k1`` is the velocity at ``p`` when the caller already has it.
    """

    if k1 is None:
        k1 = to_vec3(field_func(p))
    k2 = to_vec3(field_func(madd(p, k1, h * 0.5)))
    k3 = to_vec3(field_func(madd(p, k2, h * 0.5)))
    k4 = to_vec3(field_func(madd(p, k3, h)))
    slope = add(add(k1, scale(k2, 2.0)), add(scale(k3, 2.0), k4))
    return madd(p, slope, h / 6.0)


def trace_streamline(field_func: VectorFunc, seed: Sequence[float], step_size: float,
                     max_steps: int = config.streamline_max_steps,
                     bounds: Optional[SampleGrid] = None, pad: float = 1e-6) -> List[Vec3]:
    """Integrate forward from ``seed`` and return the visited points.

    Tracing stops at a stagnation point (speed below ``min_magnitude``),
    when the next point would leave ``bounds``, or after ``max_steps``
    steps, whichever comes first.
    """

    p = to_vec3(seed)
    points = [p]
    for _ in range(max(max_steps, 0)):
        velocity = to_vec3(field_func(p))
        if mag(velocity) < config.min_magnitude:
            break
        nxt = rk4_step(field_func, p, step_size, velocity)
        if bounds is not None and not bounds.contains(nxt, pad):
            break
        points.append(nxt)
        p = nxt
    return points


def streamlines(field_func: VectorFunc, range_min: Sequence[float],
                range_max: Sequence[float], resolution,
                step_size: float = config.streamline_step,
                max_steps: int = config.streamline_max_steps) -> Mesh:
    """Trace one streamline from every lattice point (line list).

    Each streamline is colored by its seed's normalized depth along z.
    """

    grid = _lattice(range_min, range_max, resolution)
    verts: Mesh = []
    for seed in grid.points():
        color = magnitude_to_color(grid.normalized(seed, 2))
        path = trace_streamline(field_func, seed, step_size, max_steps, grid)
        for p0, p1 in zip(path, path[1:]):
            verts.extend(line(p0, p1, color))
    logger.debug(f"streamlines: {grid.count} seeds -> {len(verts) // 2} segments")
    return verts


__all__ = [
    "VectorFunc",
    "ScalarFunc",
    "max_normalizer",
    "range_normalizer",
    "glyph_field",
    "arrow_emitter",
    "vector_field",
    "scalar_field",
    "gradient_2d",
    "gradient_3d",
    "gradient_field_2d",
    "gradient_field_3d",
    "rk4_step",
    "trace_streamline",
    "streamlines",
]
