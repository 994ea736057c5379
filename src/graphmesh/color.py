"""Scalar to RGB color mapping.

The gradient is a fixed five-stop ramp, blue -> cyan -> green -> yellow ->
red, with breakpoints at 0.25, 0.5 and 0.75.
"""

from __future__ import annotations

from graphmesh.config import neutral_color, range_epsilon
from graphmesh.vec import Vec3


def magnitude_to_color(t: float) -> Vec3:
    """Map ``t`` in [0, 1] onto the gradient; out-of-range values are clamped."""

    t = min(max(float(t), 0.0), 1.0)
    if t < 0.25:
        s = t / 0.25
        return (0.0, s, 1.0)
    elif t < 0.5:
        s = (t - 0.25) / 0.25
        return (0.0, 1.0, 1.0 - s)
    elif t < 0.75:
        s = (t - 0.5) / 0.25
        return (s, 1.0, 0.0)
    else:
        s = (t - 0.75) / 0.25
        return (1.0, 1.0 - s, 0.0)


def height_to_color(height: float, min_height: float, max_height: float) -> Vec3:
    """Color ``height`` against the observed ``[min_height, max_height]`` range.

    A range narrower than ``range_epsilon`` has no meaningful gradient, so
    the neutral surface color is returned instead.
    """

    if max_height - min_height < range_epsilon:
        return neutral_color
    return magnitude_to_color((height - min_height) / (max_height - min_height))


__all__ = ["magnitude_to_color", "height_to_color"]
