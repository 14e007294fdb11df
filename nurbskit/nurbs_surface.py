from typing import Iterable, Union

import numpy as np

from nurbskit.b_spline_basis import BSplineBasis
from nurbskit.knot_vector import compute_knot_vector, degree_from_knot
from nurbskit.nurbs import NURBS


class NURBSSurface(NURBS):
    """
    Tensor product NURBS surface: two parametric directions.

    Parameters
    ----------
    knot1 : Union[Iterable[float], None], optional
        Clamped knot vector of direction 1. By default, None.
    knot2 : Union[Iterable[float], None], optional
        Clamped knot vector of direction 2. By default, None.
    ctrl_pts : Union[Iterable, None], optional
        Control points of shape (nc1 * nc2, d), direction 1 running fastest.
        By default, None.
    weights : Union[Iterable[float], None], optional
        One strictly positive weight per control point, same ordering.
        By default, None.

    Notes
    -----
    Evaluating on a grid `(xi, eta)` returns `xi.size * eta.size` points,
    `xi` running fastest.

    Examples
    --------
    Bilinear patch:
    >>> surf = NURBSSurface([0., 0., 1., 1.], [0., 0., 1., 1.],
    ...                     [[0., 0.], [1., 0.], [0., 1.], [1., 1.]])
    >>> surf.evaluate((np.array([0.5]), np.array([0.25])))
    array([[0.5 , 0.25]])
    """

    NPa = 2

    def __init__(
        self,
        knot1: Union[Iterable[float], None] = None,
        knot2: Union[Iterable[float], None] = None,
        ctrl_pts: Union[Iterable, None] = None,
        weights: Union[Iterable[float], None] = None,
    ):
        super().__init__()
        if knot1 is not None and knot2 is not None and ctrl_pts is not None:
            self.set(knot1, knot2, ctrl_pts, weights)

    def set(
        self,
        knot1: Iterable[float],
        knot2: Iterable[float],
        ctrl_pts: Iterable,
        weights: Union[Iterable[float], None] = None,
    ):
        """
        Configure the surface from its two knot vectors and its control net.

        Raises
        ------
        DimensionMismatchError
            If a knot vector is malformed, or if the number of control points
            or weights differs from `nc1 * nc2`.
        DomainError
            If a weight is not strictly positive.
        """
        bases = []
        for knot in (knot1, knot2):
            knot = np.asarray(knot, dtype="float")
            bases.append(BSplineBasis(degree_from_knot(knot), knot))
        self._configure(bases, ctrl_pts, weights)

    def set_from_breakpoints(
        self,
        breakpoints1: Iterable[float],
        breakpoints2: Iterable[float],
        degrees: Iterable[int],
        continuity1: Iterable[int],
        continuity2: Iterable[int],
        ctrl_pts: Iterable,
        weights: Union[Iterable[float], None] = None,
    ):
        """
        Configure the surface from per direction breakpoints, degrees and
        continuities. See `compute_knot_vector`.
        """
        degree1, degree2 = degrees
        bases = [
            BSplineBasis(degree1, compute_knot_vector(breakpoints1, degree1, continuity1)),
            BSplineBasis(degree2, compute_knot_vector(breakpoints2, degree2, continuity2)),
        ]
        self._configure(bases, ctrl_pts, weights)
