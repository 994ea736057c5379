"""Tests for parametric surface tessellation."""

from math import cos, pi, sin

import pytest

from graphmesh.config import neutral_color
from graphmesh.surfaces import (height_surface, parametric_surface,
                                parametric_surface_wireframe, surface_normal)
from graphmesh.vec import cross, dot, mag, sub


def plane(u, v):
    return (u, v, 0.0)


def sphere(u, v):
    return (2 * cos(u) * sin(v), 2 * sin(u) * sin(v), 2 * cos(v))


class TestParametricSurface:
    """Test triangulated patches."""

    def test_vertex_count(self):
        mesh = parametric_surface(plane, 0.0, 1.0, 0.0, 2.0, 4, 3)
        assert len(mesh) == 4 * 3 * 6

    @pytest.mark.parametrize("u_seg,v_seg", [(0, 4), (4, 0), (-1, -1)])
    def test_no_segments(self, u_seg, v_seg):
        assert parametric_surface(plane, 0.0, 1.0, 0.0, 1.0, u_seg, v_seg) == []

    def test_flat_normals(self):
        mesh = parametric_surface(plane, -1.0, 1.0, -1.0, 1.0, 6, 6)
        for v in mesh:
            assert abs(v.normal[0]) < 1e-9
            assert abs(v.normal[1]) < 1e-9
            assert abs(abs(v.normal[2]) - 1.0) < 1e-9
        first = mesh[0].normal[2]
        assert all(v.normal[2] == first for v in mesh)

    def test_winding_agrees_with_normals(self):
        mesh = parametric_surface(plane, 0.0, 1.0, 0.0, 1.0, 3, 3)
        for i in range(0, len(mesh), 3):
            a, b, c = (m.position for m in mesh[i:i + 3])
            geometric = cross(sub(b, a), sub(c, a))
            assert dot(geometric, mesh[i].normal) > 0.0

    def test_flat_patch_is_neutral(self):
        mesh = parametric_surface(plane, 0.0, 1.0, 0.0, 1.0, 2, 2)
        assert all(v.color == neutral_color for v in mesh)

    def test_height_coloring(self):
        mesh = parametric_surface(lambda u, v: (u, v, u), 0.0, 1.0, 0.0, 1.0, 4, 4)
        for v in mesh:
            if v.position[2] == 0.0:
                assert v.color == (0.0, 0.0, 1.0)
            elif v.position[2] == 1.0:
                assert v.color == (1.0, 0.0, 0.0)

    def test_uniform_color_when_disabled(self):
        mesh = parametric_surface(lambda u, v: (u, v, u), 0.0, 1.0, 0.0, 1.0, 4, 4,
                                  color_by_height=False)
        assert all(v.color == neutral_color for v in mesh)

    def test_uv(self):
        mesh = parametric_surface(plane, 0.0, 1.0, 0.0, 1.0, 2, 2)
        uvs = {v.uv for v in mesh}
        assert (0.0, 0.0) in uvs
        assert (1.0, 1.0) in uvs


class TestSphere:
    """sphere of radius 2 at 30 x 30"""

    @pytest.fixture(scope="class")
    def mesh(self):
        return parametric_surface(sphere, 0.0, 2 * pi, 0.0, pi, 30, 30)

    def test_on_sphere(self, mesh):
        assert len(mesh) == 30 * 30 * 6
        for v in mesh:
            assert abs(mag(v.position) - 2.0) < 1e-9

    def test_normals_radial(self, mesh):
        for v in mesh:
            assert abs(mag(v.normal) - 1.0) < 1e-9
            if abs(v.position[2]) < 1.9:
                radial = tuple(c / 2.0 for c in v.position)
                assert abs(abs(dot(v.normal, radial)) - 1.0) < 1e-6


def test_surface_normal_degenerate_pole():
    # dp/du vanishes at the pole
    assert surface_normal(sphere, 1.0, 0.0) == (0.0, 0.0, 1.0)


def test_surface_normal_fallback_for_constant():
    assert surface_normal(lambda u, v: (1.0, 1.0, 1.0), 0.3, 0.4) == (0.0, 0.0, 1.0)


class TestWireframe:
    """iso-parameter line lists"""

    def test_counts(self):
        mesh = parametric_surface_wireframe(plane, 0.0, 1.0, 0.0, 1.0, 4, 3)
        # (u+1) columns of v segments plus (v+1) rows of u segments
        assert len(mesh) == 2 * (5 * 3 + 4 * 4)
        assert all(v.normal == (0.0, 0.0, 0.0) for v in mesh)

    def test_no_segments(self):
        assert parametric_surface_wireframe(plane, 0.0, 1.0, 0.0, 1.0, 0, 3) == []

    def test_iso_lines(self):
        mesh = parametric_surface_wireframe(plane, 0.0, 1.0, 0.0, 1.0, 2, 2)
        for i in range(0, len(mesh), 2):
            a, b = mesh[i].position, mesh[i + 1].position
            assert a[0] == b[0] or a[1] == b[1]


def test_height_surface():
    surf = height_surface(lambda x, y: x * y)
    assert surf(2.0, 3.0) == (2.0, 3.0, 6.0)
