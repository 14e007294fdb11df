from typing import Iterable, Union

import numpy as np

from nurbskit.b_spline_basis import BSplineBasis
from nurbskit.knot_vector import compute_knot_vector, degree_from_knot
from nurbskit.nurbs import NURBS


class NURBSCurve(NURBS):
    """
    NURBS curve: one parametric direction.

    Parameters
    ----------
    knot : Union[Iterable[float], None], optional
        Clamped knot vector. The degree is read from the multiplicity of its
        first knot. If `None`, the curve stays uninitialized until one of the
        `set` methods is called. By default, None.
    ctrl_pts : Union[Iterable, None], optional
        Control points of shape (nc, d). By default, None.
    weights : Union[Iterable[float], None], optional
        One strictly positive weight per control point. By default, None.

    Examples
    --------
    Quadratic Bézier arc evaluated at its middle:
    >>> curve = NURBSCurve([0., 0., 0., 1., 1., 1.], [[0., 0.], [1., 2.], [2., 0.]])
    >>> curve.evaluate([0.5])
    array([[1., 1.]])
    """

    NPa = 1

    def __init__(
        self,
        knot: Union[Iterable[float], None] = None,
        ctrl_pts: Union[Iterable, None] = None,
        weights: Union[Iterable[float], None] = None,
    ):
        super().__init__()
        if knot is not None and ctrl_pts is not None:
            self.set(knot, ctrl_pts, weights)

    def set(
        self,
        knot: Iterable[float],
        ctrl_pts: Iterable,
        weights: Union[Iterable[float], None] = None,
    ):
        """
        Configure the curve from its knot vector and control points.

        Raises
        ------
        DimensionMismatchError
            If the knot vector is malformed, or if the number of control points
            or weights differs from `sum(multiplicity) - degree - 1`.
        DomainError
            If a weight is not strictly positive.
        """
        knot = np.asarray(knot, dtype="float")
        self._configure([BSplineBasis(degree_from_knot(knot), knot)], ctrl_pts, weights)

    def set_from_breakpoints(
        self,
        breakpoints: Iterable[float],
        degree: int,
        continuity: Iterable[int],
        ctrl_pts: Iterable,
        weights: Union[Iterable[float], None] = None,
    ):
        """
        Configure the curve from distinct breakpoints, a degree and the
        continuity at each breakpoint. See `compute_knot_vector`.

        Examples
        --------
        >>> curve = NURBSCurve()
        >>> curve.set_from_breakpoints([0., 0.5, 1.], 2, [-1, 1, -1], np.zeros((4, 2)))
        >>> curve.knot()
        array([0. , 0. , 0. , 0.5, 1. , 1. , 1. ])
        """
        knot = compute_knot_vector(breakpoints, degree, continuity)
        self._configure([BSplineBasis(degree, knot)], ctrl_pts, weights)

    def set_bezier(
        self, ctrl_pts: Iterable, weights: Union[Iterable[float], None] = None
    ):
        """
        Configure a Bézier curve on `[0, 1]`: the degree is the number of
        control points minus one.
        """
        ctrl_pts = np.asarray(ctrl_pts, dtype="float")
        nc = ctrl_pts.shape[0]
        knot = np.hstack((np.zeros(nc), np.ones(nc)))
        self._configure([BSplineBasis(nc - 1, knot)], ctrl_pts, weights)
