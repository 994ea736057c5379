"""Tests for the scalar to color gradient."""

import pytest

from graphmesh.color import height_to_color, magnitude_to_color
from graphmesh.config import neutral_color


def _close(a, b, tol=1e-12):
    return all(abs(x - y) < tol for x, y in zip(a, b))


class TestMagnitudeToColor:
    """Test the fixed blue -> red ramp."""

    def test_endpoints(self):
        assert magnitude_to_color(0.0) == (0.0, 0.0, 1.0)
        assert magnitude_to_color(1.0) == (1.0, 0.0, 0.0)

    @pytest.mark.parametrize("t,expected", [
        (0.25, (0.0, 1.0, 1.0)),
        (0.5, (0.0, 1.0, 0.0)),
        (0.75, (1.0, 1.0, 0.0)),
        (0.125, (0.0, 0.5, 1.0)),
        (0.875, (1.0, 0.5, 0.0)),
    ])
    def test_breakpoints(self, t, expected):
        assert _close(magnitude_to_color(t), expected)

    def test_clamps_out_of_range(self):
        assert magnitude_to_color(-3.0) == magnitude_to_color(0.0)
        assert magnitude_to_color(7.5) == magnitude_to_color(1.0)

    def test_components_in_unit_range(self):
        for i in range(101):
            c = magnitude_to_color(i / 100.0)
            assert all(0.0 <= x <= 1.0 for x in c)


def test_height_to_color_degenerate_range():
    assert height_to_color(1.0, 1.0, 1.0) == neutral_color
    assert height_to_color(3.0, 2.0, 2.0 + 1e-9) == neutral_color


def test_height_to_color_normalizes():
    assert _close(height_to_color(5.0, 0.0, 10.0), (0.0, 1.0, 0.0))
    assert height_to_color(0.0, 0.0, 10.0) == (0.0, 0.0, 1.0)
    assert height_to_color(10.0, 0.0, 10.0) == (1.0, 0.0, 0.0)
