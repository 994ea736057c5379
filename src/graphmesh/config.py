"""Numeric tolerances and default visual parameters for graphmesh.

These are module constants in the spirit of ``epsilon``: per-call keyword
arguments override the defaults, and redefining the tolerances globally is
done at your peril.
"""

## tolerances
## -----------

#: general length tolerance for normalization
epsilon = 1e-8

#: finite-difference step for surface normals and gradients
fd_epsilon = 1e-4

#: height/value ranges narrower than this are treated as degenerate
range_epsilon = 1e-6

#: field samples with magnitude below this are not drawn
min_magnitude = 1e-6

#: floor for the maximum magnitude used to normalize a vector field
max_magnitude_floor = 1e-3

#: normal component of r'' below this (relative to |r'|^2) counts as straight
curvature_epsilon = 1e-5

#: orientation basis switches reference axis above this ``|d.y|``
basis_parallel_limit = 0.99

#: rotation-minimizing frame seed switches reference axis above this ``|t.y|``
frame_parallel_limit = 0.9


## colors
## -------

neutral_color = (0.5, 0.7, 1.0)
curve_color = (1.0, 1.0, 0.0)
arrow_color = (1.0, 0.0, 0.0)
wireframe_color = (1.0, 1.0, 1.0)
normal_color = (0.0, 0.0, 1.0)
tangent_u_color = (1.0, 0.0, 0.0)
tangent_v_color = (0.0, 1.0, 0.0)
frenet_colors = ((1.0, 0.0, 0.0), (0.0, 1.0, 0.0), (0.0, 0.0, 1.0))


## glyph proportions
## ------------------

#: field arrows are sized between these fractions of ``arrow_scale``
min_length_fraction = 0.05
max_length_fraction = 0.8

#: (shaft length, shaft radius, head length, head radius) as fractions of
#: the arrow length
field_arrow_proportions = (0.7, 0.04, 0.3, 0.1)
field_arrow_segments = 6

#: overlay arrows use a slightly stockier profile
overlay_arrow_proportions = (0.75, 0.03, 0.25, 0.08)
overlay_arrow_segments = 8


## defaults
## ---------

tube_radius = 0.03
tube_segments = 8
cube_size = 0.1
streamline_step = 0.05
streamline_max_steps = 200

#: overlay glyphs closer than this fraction of ``arrow_scale`` are merged
overlay_min_spacing = 0.25
