"""
Shape preserving refinement of a 1D control net.

The functions below implement the classical algorithms of Piegl & Tiller
(The NURBS Book, A5.1 knot insertion, A5.8 knot removal and A5.9 degree
elevation) on polynomial control nets. A net is an array of shape
(n + 1, n_cols): one row per control point. Columns can hold the
coordinates of a single point, homogeneous coordinates, or several points
side by side when a tensor product net is processed along one direction.

Inputs are never modified: new arrays are returned.
"""
import logging

import numpy as np
from scipy.special import comb

from nurbskit.exceptions import DomainError

logger = logging.getLogger(__name__)


def _check_in_domain(p: int, knot: np.ndarray[np.floating], u: float):
    if not (knot[p] <= u <= knot[-p - 1]):
        raise DomainError(
            f"Knot {u} is outside the definition interval [{knot[p]}, {knot[-p - 1]}]."
        )


def insert_knot(
    p: int,
    knot: np.ndarray[np.floating],
    pts: np.ndarray[np.floating],
    u: float,
    r: int = 1,
) -> tuple[np.ndarray[np.floating], np.ndarray[np.floating]]:
    """
    Insert the knot `u` `r` times without changing the curve.

    Parameters
    ----------
    p : int
        Degree.
    knot : np.ndarray[np.floating]
        Knot vector of size `n + p + 2`.
    pts : np.ndarray[np.floating]
        Control net of shape (`n + 1`, n_cols).
    u : float
        Knot value to insert, inside the definition interval.
    r : int, optional
        Number of insertions. By default, 1.

    Returns
    -------
    new_knot : np.ndarray[np.floating]
        Knot vector with `r` more entries.
    new_pts : np.ndarray[np.floating]
        Control net with `r` more rows.

    Raises
    ------
    DomainError
        If `u` is outside of the definition interval, if `r` is negative or
        if the multiplicity of `u` would exceed `p`.

    Examples
    --------
    >>> knot = np.array([0., 0., 0., 1., 1., 1.])
    >>> pts = np.array([[0., 0.], [1., 2.], [2., 0.]])
    >>> new_knot, new_pts = insert_knot(2, knot, pts, 0.5)
    >>> new_knot
    array([0. , 0. , 0. , 0.5, 1. , 1. , 1. ])
    >>> new_pts
    array([[0. , 0. ],
           [0.5, 1. ],
           [1.5, 1. ],
           [2. , 0. ]])
    """
    if r < 0:
        raise DomainError(f"Number of insertions must be non-negative, got {r}.")
    _check_in_domain(p, knot, u)
    if r == 0:
        return knot.copy(), pts.copy()
    s = int(np.count_nonzero(knot == u))
    if s + r > p:
        raise DomainError(
            f"Inserting {u} {r} times would raise its multiplicity to {s + r} > degree {p}."
        )
    n = pts.shape[0] - 1
    k = int(np.searchsorted(knot, u, side="right")) - 1

    new_knot = np.empty(knot.size + r, dtype="float")
    new_knot[: k + 1] = knot[: k + 1]
    new_knot[k + 1 : k + r + 1] = u
    new_knot[k + r + 1 :] = knot[k + 1 :]

    new_pts = np.empty((n + 1 + r, pts.shape[1]), dtype="float")
    new_pts[: k - p + 1] = pts[: k - p + 1]
    new_pts[k - s + r :] = pts[k - s :]
    R = pts[k - p : k - s + 1].astype("float")
    for j in range(1, r + 1):
        L = k - p + j
        for i in range(p - j - s + 1):
            alpha = (u - knot[L + i]) / (knot[i + k + 1] - knot[L + i])
            R[i] = alpha * R[i + 1] + (1.0 - alpha) * R[i]
        new_pts[L] = R[0]
        new_pts[k + r - j - s] = R[p - j - s]
    L = k - p + r
    for i in range(L + 1, k - s):
        new_pts[i] = R[i - L]
    return new_knot, new_pts


def _max_distance(a: np.ndarray, b: np.ndarray, n_coords: int) -> float:
    diff = (a - b).reshape((-1, n_coords))
    return float(np.max(np.linalg.norm(diff, axis=1)))


def remove_knot(
    p: int,
    knot: np.ndarray[np.floating],
    pts: np.ndarray[np.floating],
    u: float,
    num: int,
    tol: float,
    n_coords: int,
) -> tuple[int, np.ndarray[np.floating], np.ndarray[np.floating]]:
    """
    Remove the knot `u` up to `num` times while the curve stays unchanged.

    A removal is only accepted when the reduced net reproduces the original
    one within `tol`, so fewer than `num` removals can happen.

    Parameters
    ----------
    p : int
        Degree.
    knot : np.ndarray[np.floating]
        Knot vector.
    pts : np.ndarray[np.floating]
        Control net of shape (`n + 1`, n_cols).
    u : float
        Knot value to remove.
    num : int
        Maximum number of removals, clipped to the multiplicity of `u`.
    tol : float
        Largest distance allowed between a removed point and its
        reconstruction.
    n_coords : int
        Number of coordinates per point. Each row holds
        `n_cols // n_coords` points, the check uses the farthest one.

    Returns
    -------
    t : int
        Number of removals actually performed.
    new_knot : np.ndarray[np.floating]
        Knot vector with `t` fewer entries.
    new_pts : np.ndarray[np.floating]
        Control net with `t` fewer rows.

    Raises
    ------
    DomainError
        If `num` is negative.

    Notes
    -----
    Values that are not interior knots cannot be removed: `t` is then 0.
    """
    if num < 0:
        raise DomainError(f"Number of removals must be non-negative, got {num}.")
    s = int(np.count_nonzero(knot == u))
    num = min(num, s)
    interior = knot[p] < u < knot[-p - 1]
    if num == 0 or not interior:
        return 0, knot.copy(), pts.copy()

    n = pts.shape[0] - 1
    m = n + p + 1
    order = p + 1
    r = int(np.searchsorted(knot, u, side="right")) - 1
    fout = (2 * r - s - p) // 2
    last = r - s
    first = r - p
    U = knot.astype("float")
    Pw = pts.astype("float")
    temp = np.zeros((2 * p + 1, pts.shape[1]), dtype="float")

    t = 0
    while t < num:
        off = first - 1
        temp[0] = Pw[off]
        temp[last + 1 - off] = Pw[last + 1]
        i, j = first, last
        ii, jj = 1, last - off
        while j - i > t:
            alfi = (u - U[i]) / (U[i + order + t] - U[i])
            alfj = (u - U[j - t]) / (U[j + order] - U[j - t])
            temp[ii] = (Pw[i] - (1.0 - alfi) * temp[ii - 1]) / alfi
            temp[jj] = (Pw[j] - alfj * temp[jj + 1]) / (1.0 - alfj)
            i += 1
            ii += 1
            j -= 1
            jj -= 1
        if j - i < t:
            removable = _max_distance(temp[ii - 1], temp[jj + 1], n_coords) <= tol
        else:
            alfi = (u - U[i]) / (U[i + order + t] - U[i])
            rebuilt = alfi * temp[ii + t + 1] + (1.0 - alfi) * temp[ii - 1]
            removable = _max_distance(Pw[i], rebuilt, n_coords) <= tol
        if not removable:
            break
        i, j = first, last
        while j - i > t:
            Pw[i] = temp[i - off]
            Pw[j] = temp[j - off]
            i += 1
            j -= 1
        first -= 1
        last += 1
        t += 1

    logger.debug("Knot %s removed %d time(s) out of %d requested.", u, t, num)
    if t == 0:
        return 0, knot.copy(), pts.copy()

    for k in range(r + 1, m + 1):
        U[k - t] = U[k]
    j = i = fout
    for k in range(1, t):
        if k % 2 == 1:
            i += 1
        else:
            j -= 1
    for k in range(i + 1, n + 1):
        Pw[j] = Pw[k]
        j += 1
    return t, U[: m + 1 - t], Pw[: n + 1 - t]


def elevate_degree(
    p: int,
    knot: np.ndarray[np.floating],
    pts: np.ndarray[np.floating],
    t: int,
) -> tuple[np.ndarray[np.floating], np.ndarray[np.floating]]:
    """
    Raise the degree of a curve from `p` to `p + t` without changing it.

    The curve is split into Bézier segments, each segment is elevated with
    the binomial formula and the unnecessary knots introduced by the split
    are removed on the fly.

    Parameters
    ----------
    p : int
        Current degree.
    knot : np.ndarray[np.floating]
        Knot vector.
    pts : np.ndarray[np.floating]
        Control net of shape (`n + 1`, n_cols).
    t : int
        Degree increment.

    Returns
    -------
    new_knot : np.ndarray[np.floating]
        Knot vector where each distinct knot is repeated `t` more times.
    new_pts : np.ndarray[np.floating]
        Control net of the elevated curve.

    Examples
    --------
    >>> knot = np.array([0., 0., 0., 1., 1., 1.])
    >>> pts = np.array([[0., 0.], [1., 2.], [2., 0.]])
    >>> new_knot, new_pts = elevate_degree(2, knot, pts, 1)
    >>> new_knot
    array([0., 0., 0., 0., 1., 1., 1., 1.])
    >>> new_pts
    array([[0.        , 0.        ],
           [0.66666667, 1.33333333],
           [1.33333333, 1.33333333],
           [2.        , 0.        ]])
    """
    if t < 0:
        raise DomainError(f"Degree increment must be non-negative, got {t}.")
    if t == 0:
        return knot.copy(), pts.copy()
    # pieces joined by a knot of multiplicity p + 1 are elevated separately
    values, mult = np.unique(knot, return_counts=True)
    broken = values[1:-1][mult[1:-1] == p + 1]
    if broken.size > 0:
        b = int(np.searchsorted(knot, broken[0], side="right")) - 1
        knot1, pts1 = _elevate_clamped(p, knot[: b + 1], pts[: b - p], t)
        knot2, pts2 = elevate_degree(p, knot[b - p :], pts[b - p :], t)
        return np.hstack((knot1, knot2[p + t + 1 :])), np.vstack((pts1, pts2))
    return _elevate_clamped(p, knot, pts, t)


def _elevate_clamped(p, knot, pts, t):
    if p == 0:
        # a single constant segment
        return np.repeat(knot, t + 1), np.repeat(pts, t + 1, axis=0)
    U = knot
    Pw = pts
    n = Pw.shape[0] - 1
    m = n + p + 1
    ph = p + t
    ph2 = ph // 2
    n_cols = Pw.shape[1]

    # coefficients elevating a Bezier segment from p to ph
    bezalfs = np.zeros((ph + 1, p + 1), dtype="float")
    bezalfs[0, 0] = bezalfs[ph, p] = 1.0
    for i in range(1, ph2 + 1):
        inv = 1.0 / comb(ph, i)
        for j in range(max(0, i - t), min(p, i) + 1):
            bezalfs[i, j] = inv * comb(p, j) * comb(t, i - j)
    for i in range(ph2 + 1, ph):
        for j in range(max(0, i - t), min(p, i) + 1):
            bezalfs[i, j] = bezalfs[ph - i, p - j]

    n_segments = np.unique(U).size - 1
    Uh = np.zeros(U.size + t * (n_segments + 1), dtype="float")
    Qw = np.zeros((n + 1 + t * n_segments, n_cols), dtype="float")
    bpts = np.zeros((p + 1, n_cols), dtype="float")
    ebpts = np.zeros((ph + 1, n_cols), dtype="float")
    next_bpts = np.zeros((max(p - 1, 0), n_cols), dtype="float")
    alfs = np.zeros(max(p - 1, 0), dtype="float")

    mh = ph
    kind = ph + 1
    r = -1
    a = p
    b = p + 1
    cind = 1
    ua = U[0]
    Qw[0] = Pw[0]
    Uh[: ph + 1] = ua
    bpts[:] = Pw[: p + 1]

    while b < m:
        i = b
        while b < m and U[b] == U[b + 1]:
            b += 1
        mul = b - i + 1
        mh += mul + t
        ub = U[b]
        oldr = r
        r = p - mul
        lbz = (oldr + 2) // 2 if oldr > 0 else 1
        rbz = ph - (r + 1) // 2 if r > 0 else ph

        # insert ub r times to isolate the Bezier segment
        if r > 0:
            numer = ub - ua
            for k in range(p, mul, -1):
                alfs[k - mul - 1] = numer / (U[a + k] - ua)
            for j in range(1, r + 1):
                save = r - j
                s = mul + j
                for k in range(p, s - 1, -1):
                    bpts[k] = alfs[k - s] * bpts[k] + (1.0 - alfs[k - s]) * bpts[k - 1]
                next_bpts[save] = bpts[p]

        for i in range(lbz, ph + 1):
            ebpts[i] = 0.0
            for j in range(max(0, i - t), min(p, i) + 1):
                ebpts[i] += bezalfs[i, j] * bpts[j]

        # remove the knot ua oldr times
        if oldr > 1:
            first = kind - 2
            last = kind
            den = ub - ua
            bet = (ub - Uh[kind - 1]) / den
            for tr in range(1, oldr):
                i = first
                j = last
                kj = j - kind + 1
                while j - i > tr:
                    if i < cind:
                        alf = (ub - Uh[i]) / (ua - Uh[i])
                        Qw[i] = alf * Qw[i] + (1.0 - alf) * Qw[i - 1]
                    if j >= lbz:
                        if j - tr <= kind - ph + oldr:
                            gam = (ub - Uh[j - tr]) / den
                            ebpts[kj] = gam * ebpts[kj] + (1.0 - gam) * ebpts[kj + 1]
                        else:
                            ebpts[kj] = bet * ebpts[kj] + (1.0 - bet) * ebpts[kj + 1]
                    i += 1
                    j -= 1
                    kj -= 1
                first -= 1
                last += 1

        if a != p:
            for i in range(ph - oldr):
                Uh[kind] = ua
                kind += 1

        for j in range(lbz, rbz + 1):
            Qw[cind] = ebpts[j]
            cind += 1

        if b < m:
            for j in range(r):
                bpts[j] = next_bpts[j]
            for j in range(r, p + 1):
                bpts[j] = Pw[b - p + j]
            a = b
            b += 1
            ua = ub
        else:
            Uh[kind : kind + ph + 1] = ub

    nh = mh - ph - 1
    return Uh[: nh + ph + 2].copy(), Qw[: nh + 1].copy()
