"""Tests for glyph fields and streamlines."""

from math import exp, sqrt

import pytest

from graphmesh.color import magnitude_to_color
from graphmesh.fields import (glyph_field, gradient_2d, gradient_3d,
                              gradient_field_2d, gradient_field_3d,
                              max_normalizer, range_normalizer, rk4_step,
                              scalar_field, streamlines, trace_streamline,
                              vector_field)
from graphmesh.mesh import SampleGrid

ARROW_VERTS = 6 * 12
CUBE_VERTS = 36


def rotation(p):
    return (-p[1], p[0], 0.0)


def radius_xy(p):
    return sqrt(p[0] ** 2 + p[1] ** 2)


class TestNormalizers:
    """the statistics pass of the glyph pipeline"""

    def test_max_floor(self):
        norm = max_normalizer([0.0, 0.0])
        assert norm(0.0) == 0.0
        assert norm(1e-3) == 1.0

    def test_max(self):
        norm = max_normalizer([1.0, 4.0, 2.0])
        assert norm(2.0) == 0.5

    def test_range(self):
        norm = range_normalizer([-1.0, 3.0])
        assert norm(-1.0) == 0.0
        assert norm(1.0) == 0.5

    def test_degenerate_range(self):
        norm = range_normalizer([2.0, 2.0])
        assert norm(2.0) == 0.0


def test_glyph_field_two_passes():
    calls = []

    def emit(pos, value, m, t):
        calls.append((pos, value, m, t))
        return []

    glyph_field([(0.0, 0.0, 0.0), (1.0, 0.0, 0.0)], lambda p: 2.0 * p[0],
                lambda v: v, max_normalizer, emit)
    assert [c[3] for c in calls] == [0.0, 1.0]


class TestVectorField:
    """arrows at lattice points"""

    def test_zero_field_is_empty(self):
        mesh = vector_field(lambda p: (0.0, 0.0, 0.0), (-1, -1, -1), (1, 1, 1), 4)
        assert mesh == []

    def test_constant_field(self):
        mesh = vector_field(lambda p: (1.0, 0.0, 0.0), (0, 0, 0), (1, 1, 1), 2, 1.0)
        assert len(mesh) == 8 * ARROW_VERTS
        assert all(v.color == (1.0, 0.0, 0.0) for v in mesh)
        reach = max(v.position[0] for v in mesh)
        assert abs(reach - (1.0 + 0.8)) < 1e-9

    def test_magnitude_scaling(self):
        mesh = vector_field(lambda p: (p[0], 0.0, 0.0), (0, 0, 0), (2, 0, 0),
                            (3, 1, 1), arrow_scale=2.0)
        # the x=0 sample vanishes and is skipped
        assert len(mesh) == 2 * ARROW_VERTS
        weak, strong = mesh[:ARROW_VERTS], mesh[ARROW_VERTS:]
        assert weak[0].color == magnitude_to_color(0.5)
        assert strong[0].color == (1.0, 0.0, 0.0)
        weak_len = 0.05 * 2.0 + (0.8 - 0.05) * 2.0 * 0.5
        assert abs(max(v.position[0] for v in weak) - (1.0 + weak_len)) < 1e-9
        assert abs(max(v.position[0] for v in strong) - (2.0 + 1.6)) < 1e-9

    def test_single_sample(self):
        mesh = vector_field(lambda p: (0.0, 0.0, 5.0), (1, 2, 3), (9, 9, 9), 1)
        assert len(mesh) == ARROW_VERTS
        assert abs(min(v.position[2] for v in mesh) - 3.0) < 1e-9

    def test_empty_resolution(self):
        assert vector_field(lambda p: (1.0, 0.0, 0.0), (0, 0, 0), (1, 1, 1), 0) == []


class TestScalarField:
    """colored cubes at lattice points"""

    def test_count_and_colors(self):
        mesh = scalar_field(lambda p: p[2], (0, 0, 0), (1, 1, 1), 2, cube_size=0.2)
        assert len(mesh) == 8 * CUBE_VERTS
        for v in mesh:
            expected = (0.0, 0.0, 1.0) if v.position[2] < 0.5 else (1.0, 0.0, 0.0)
            assert v.color == expected

    def test_constant_field(self):
        mesh = scalar_field(lambda p: 4.2, (0, 0, 0), (1, 1, 1), 2)
        assert len(mesh) == 8 * CUBE_VERTS
        assert all(v.color == (0.0, 0.0, 1.0) for v in mesh)

    def test_cube_size(self):
        mesh = scalar_field(lambda p: 0.0, (0, 0, 0), (0, 0, 0), 1, cube_size=0.5)
        xs = [v.position[0] for v in mesh]
        assert abs(max(xs) - 0.25) < 1e-12
        assert abs(min(xs) + 0.25) < 1e-12


class TestGradients:
    """finite-difference gradients"""

    def test_gradient_2d(self):
        g = gradient_2d(lambda x, y: x * x + y, 1.0, 2.0)
        assert abs(g[0] - 2.0) < 1e-6
        assert abs(g[1] - 1.0) < 1e-6
        assert g[2] == 0.0

    def test_gradient_3d(self):
        g = gradient_3d(lambda p: p[0] * p[1] + p[2] ** 2, (2.0, 3.0, -1.0))
        assert abs(g[0] - 3.0) < 1e-6
        assert abs(g[1] - 2.0) < 1e-6
        assert abs(g[2] + 2.0) < 1e-6

    def test_field_2d(self):
        mesh = gradient_field_2d(lambda x, y: x + y, 0.0, 1.0, 0.0, 1.0, 3, 3)
        assert len(mesh) == 9 * ARROW_VERTS

    def test_field_2d_sits_on_graph(self):
        mesh = gradient_field_2d(lambda x, y: 5.0 + x, 0.0, 1.0, 0.0, 1.0, 1, 1)
        # one arrow at (0, 0, 5) pointing along +x
        assert len(mesh) == ARROW_VERTS
        assert all(abs(v.position[2] - 5.0) < 0.1 for v in mesh)

    def test_constant_has_no_gradient(self):
        assert gradient_field_2d(lambda x, y: 1.0, 0.0, 1.0, 0.0, 1.0, 3, 3) == []
        assert gradient_field_3d(lambda p: 1.0, (0, 0, 0), (1, 1, 1), 3) == []

    def test_field_3d(self):
        mesh = gradient_field_3d(lambda p: p[0] + p[1] + p[2], (0, 0, 0), (1, 1, 1), 2)
        assert len(mesh) == 8 * ARROW_VERTS


def test_rk4_step_exponential():
    p = rk4_step(lambda q: q, (1.0, 0.0, 0.0), 0.1)
    assert abs(p[0] - exp(0.1)) < 1e-6


class TestStreamlines:
    """RK4 streamline tracing"""

    bounds = SampleGrid.cube((-2, -2, -2), (2, 2, 2), 3)

    def test_circular_orbit(self):
        path = trace_streamline(rotation, (1.0, 0.0, 0.0), 0.05, 200, self.bounds)
        assert len(path) == 201
        for p in path:
            assert abs(radius_xy(p) - 1.0) < 1e-6
            assert p[2] == 0.0

    def test_step_bound(self):
        path = trace_streamline(rotation, (1.0, 0.0, 0.0), 0.05, 10, self.bounds)
        assert len(path) == 11

    def test_four_evaluations_per_step(self):
        calls = []

        def counted(p):
            calls.append(p)
            return rotation(p)

        path = trace_streamline(counted, (1.0, 0.0, 0.0), 0.05, 10, self.bounds)
        assert len(path) == 11
        assert len(calls) == 40

    def test_rk4_step_reuses_given_velocity(self):
        calls = []

        def counted(p):
            calls.append(p)
            return rotation(p)

        seed = (1.0, 0.0, 0.0)
        expected = rk4_step(rotation, seed, 0.05)
        assert rk4_step(counted, seed, 0.05, rotation(seed)) == expected
        assert len(calls) == 3

    def test_stagnation(self):
        assert trace_streamline(rotation, (0.0, 0.0, 0.0), 0.05, 200, self.bounds) == [(0.0, 0.0, 0.0)]

    def test_leaves_box(self):
        box = SampleGrid.cube((0, 0, 0), (1, 1, 1), 2)
        path = trace_streamline(lambda p: (1.0, 0.0, 0.0), (0.0, 0.5, 0.5), 0.05, 200, box)
        assert 2 < len(path) < 201
        assert all(box.contains(p, 1e-6) for p in path)
        assert abs(path[-1][0] - 1.0) < 1e-6

    def test_mesh_orbits(self):
        mesh = streamlines(rotation, (-1, -1, 0), (1, 1, 0), (3, 3, 1), 0.05)
        assert mesh
        assert len(mesh) % 2 == 0
        for i in range(0, len(mesh), 2):
            a, b = mesh[i].position, mesh[i + 1].position
            assert abs(radius_xy(a) - radius_xy(b)) < 1e-6
        # flat z range colors everything from the bottom of the ramp
        assert all(v.color == (0.0, 0.0, 1.0) for v in mesh)

    def test_zero_field(self):
        assert streamlines(lambda p: (0.0, 0.0, 0.0), (0, 0, 0), (1, 1, 1), 3) == []

    def test_depth_coloring(self):
        mesh = streamlines(lambda p: (1.0, 0.0, 0.0), (0, 0, 0), (1, 0, 1), (2, 1, 2), 0.1)
        colors = {v.color for v in mesh}
        assert colors == {(0.0, 0.0, 1.0), (1.0, 0.0, 0.0)}

    @pytest.mark.parametrize("max_steps", [0, -1])
    def test_no_steps(self, max_steps):
        assert streamlines(rotation, (-1, -1, 0), (1, 1, 0), 3, 0.05, max_steps) == []
