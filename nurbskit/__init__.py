"""
.. include:: ../README.md
"""
from nurbskit.exceptions import (
    NURBSError,
    UnsetStateError,
    InvalidDirectionError,
    DimensionMismatchError,
    DomainError,
)
from nurbskit.knot_vector import (
    compute_multiplicity,
    compute_continuity,
    compute_knot_vector,
    degree_from_knot,
    required_nc,
)
from nurbskit.b_spline_basis import BSplineBasis
from nurbskit.nurbs import NURBS
from nurbskit.nurbs_curve import NURBSCurve
from nurbskit.nurbs_surface import NURBSSurface
