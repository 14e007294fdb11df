"""
Homogeneous coordinates for rational control nets.

Refinement algorithms are written for polynomial B-splines. A rational net is
lifted to `(w x, w y, ..., w)` in one more dimension, processed as a
polynomial net, then projected back.
"""
import numpy as np

from nurbskit import settings


def lift(
    ctrl_pts: np.ndarray[np.floating], weights: np.ndarray[np.floating]
) -> np.ndarray[np.floating]:
    """
    Weighted points with the weight appended as last coordinate.

    Parameters
    ----------
    ctrl_pts : np.ndarray[np.floating]
        Control points of shape (nc, d).
    weights : np.ndarray[np.floating]
        Weights of shape (nc,).

    Returns
    -------
    pts_h : np.ndarray[np.floating]
        Homogeneous control points of shape (nc, d + 1).

    Examples
    --------
    >>> lift(np.array([[1., 2.]]), np.array([0.5]))
    array([[0.5, 1. , 0.5]])
    """
    weights = np.asarray(weights, dtype="float")
    return np.hstack((ctrl_pts * weights[:, None], weights[:, None]))


def project(
    pts_h: np.ndarray[np.floating],
) -> tuple[np.ndarray[np.floating], np.ndarray[np.floating]]:
    """
    Inverse of `lift`: split homogeneous points into `(ctrl_pts, weights)`.
    """
    weights = pts_h[:, -1].copy()
    ctrl_pts = pts_h[:, :-1] / weights[:, None]
    return ctrl_pts, weights


def removal_tolerance(
    pts_h: np.ndarray[np.floating], tol: float, rational: bool
) -> float:
    """
    Distance bound used by knot removal on homogeneous points.

    `tol` is relative to the size of the net: the geometry may move by at most
    `d = tol * (1 + max |P|)`. For a rational net, `d` is turned into a bound
    on the homogeneous points with the Piegl-Tiller scaling
    `d * w_min / (1 + max |P|)`, i.e. `tol * w_min`.

    Parameters
    ----------
    pts_h : np.ndarray[np.floating]
        Homogeneous control points of shape (nc, d + 1) if `rational`, plain
        control points of shape (nc, d) otherwise.
    tol : float
        Relative tolerance.
    rational : bool
        Whether the last coordinate of `pts_h` holds the weights.

    Returns
    -------
    bound : float
        Largest distance between homogeneous points accepted by the removal.
        It never goes below the round-off level of the coordinates of `pts_h`.
    """
    if rational:
        ctrl_pts, weights = project(pts_h)
    else:
        ctrl_pts = pts_h
    scale = 1 + np.max(np.linalg.norm(ctrl_pts, axis=1))
    d = tol * scale
    bound = d * np.min(weights) / scale if rational else d
    roundoff = settings.KNOT_REMOVAL_ROUNDOFF * np.finfo("float").eps * (
        1 + np.max(np.linalg.norm(pts_h, axis=1))
    )
    return float(max(bound, roundoff))
