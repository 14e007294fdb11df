from typing import Iterable

import numpy as np
import numba as nb
import scipy.sparse as sps

from nurbskit.exceptions import DomainError
from nurbskit.knot_vector import (
    check_knot_vector,
    compute_continuity,
    compute_multiplicity,
)


class BSplineBasis:
    """
    BSpline basis in 1D.

    A class representing a one-dimensional clamped B-spline basis. Provides the
    span search, the local (nonzero) basis functions and their derivatives at a
    parameter, and the full-width sparse basis matrices used to combine basis
    values with control points.

    Attributes
    ----------
    p : int
        Degree of the polynomials composing the basis.
    knot : np.ndarray[np.floating]
        Knot vector defining the B-spline basis. Contains non-decreasing sequence
        of isoparametric coordinates, clamped at both ends.
    m : int
        Last index of the knot vector (size - 1).
    n : int
        Last index of the basis functions. When evaluated, returns an array of size
        `n + 1`.
    span : tuple[float, float]
        Interval of definition of the basis `(knot[p], knot[m - p])`.

    Notes
    -----
    Basis functions are evaluated with the triangular tables of the Cox-de Boor
    recursion (Piegl & Tiller, algorithms A2.1 to A2.3) compiled with numba.
    """

    p: int
    knot: np.ndarray[np.floating]
    m: int
    n: int
    span: tuple[float, float]

    def __init__(self, p: int, knot: Iterable[float]):
        """
        Initialize a B-spline basis with specified degree and knot vector.

        Parameters
        ----------
        p : int
            Degree of the B-spline polynomials.
        knot : Iterable[float]
            Knot vector defining the B-spline basis. Must be non-decreasing and
            clamped (first and last knots repeated `p + 1` times).

        Raises
        ------
        DimensionMismatchError
            If the knot vector is malformed for degree `p`.

        Examples
        --------
        Create a quadratic B-spline basis with a single interior knot:
        >>> basis = BSplineBasis(2, [0., 0., 0., 0.5, 1., 1., 1.])
        >>> basis.n, basis.span
        (3, (0.0, 1.0))
        """
        self.p = int(p)
        self.knot = check_knot_vector(knot, self.p)
        self.m = self.knot.size - 1
        self.n = self.m - self.p - 1
        self.span = (float(self.knot[self.p]), float(self.knot[self.m - self.p]))

    def check_domain(self, XI: Iterable[float]) -> np.ndarray[np.floating]:
        """
        Return `XI` as a flat float array, failing if any value lies outside
        of `span`.

        Raises
        ------
        DomainError
            If a parameter is outside of the definition interval.
        """
        XI = np.asarray(XI, dtype="float").ravel()
        lower, upper = self.span
        outside = ~((XI >= lower) & (XI <= upper))
        if np.any(outside):
            raise DomainError(
                f"Parameters {XI[outside].tolist()} are outside the definition interval [{lower}, {upper}]."
            )
        return XI

    def uniform(self, res: int) -> np.ndarray[np.floating]:
        """
        `res` parameters evenly spaced over the span, both ends included.

        Examples
        --------
        >>> BSplineBasis(2, [0., 0., 0., 1., 1., 1.]).uniform(5)
        array([0.  , 0.25, 0.5 , 0.75, 1.  ])
        """
        if res < 1:
            raise DomainError(f"Resolution must be at least 1, got {res}.")
        return np.linspace(self.span[0], self.span[1], int(res))

    def find_span(self, xi: float) -> int:
        """
        Index `i` of the knot interval `[knot[i], knot[i + 1][` holding `xi`.

        The upper end of the domain belongs to the last nonempty interval, so
        `find_span(span[1])` returns `n`.

        Examples
        --------
        >>> basis = BSplineBasis(2, [0., 0., 0., 0.5, 1., 1., 1.])
        >>> basis.find_span(0.25), basis.find_span(0.5), basis.find_span(1.)
        (2, 3, 3)
        """
        (xi,) = self.check_domain([xi])
        return int(_find_span(self.n, self.p, self.knot, xi))

    def basis_funs(self, xi: float) -> np.ndarray[np.floating]:
        """
        Values of the `p + 1` basis functions that are nonzero at `xi`, namely
        `N_{i-p}, ..., N_i` with `i = find_span(xi)`.
        """
        (xi,) = self.check_domain([xi])
        span = _find_span(self.n, self.p, self.knot, xi)
        return _basis_funs(span, xi, self.p, self.knot)

    def ders_basis_funs(self, xi: float, k: int) -> np.ndarray[np.floating]:
        """
        Derivatives of the nonzero basis functions at `xi`.

        Parameters
        ----------
        xi : float
            Parameter in the span of the basis.
        k : int
            Highest derivative order to compute.

        Returns
        -------
        ders : np.ndarray[np.floating]
            Array of shape (`k + 1`, `p + 1`); `ders[j, r]` is the `j`-th
            derivative of `N_{i-p+r}` with `i = find_span(xi)`. Orders greater
            than `p` are zero.
        """
        if k < 0:
            raise DomainError(f"Derivative order must be non-negative, got {k}.")
        (xi,) = self.check_domain([xi])
        span = _find_span(self.n, self.p, self.knot, xi)
        return _ders_basis_funs(span, xi, self.p, int(k), self.knot)

    def N(self, XI: Iterable[float], k: int = 0) -> sps.coo_matrix:
        """
        Compute the k-th derivative of the B-spline basis functions at specified points.

        Parameters
        ----------
        XI : Iterable[float]
            Points in the isoparametric space at which to evaluate the basis functions.
        k : int, optional
            Order of the derivative to compute. By default, 0.

        Returns
        -------
        DN : sps.coo_matrix
            Sparse matrix containing the k-th derivative values. Each row corresponds to an
            evaluation point, each column to a basis function. Shape is (`XI.size`, `n + 1`).

        Raises
        ------
        DomainError
            If a point is outside of `span` or if `k` is negative.

        Examples
        --------
        >>> basis = BSplineBasis(2, [0., 0., 0., 1., 1., 1.])
        >>> basis.N([0., 0.5, 1.]).toarray()
        array([[1.  , 0.  , 0.  ],
               [0.25, 0.5 , 0.25],
               [0.  , 0.  , 1.  ]])
        >>> basis.N([0., 0.5, 1.], k=1).toarray()
        array([[-2.,  2.,  0.],
               [-1.,  0.,  1.],
               [ 0., -2.,  2.]])
        """
        if k < 0:
            raise DomainError(f"Derivative order must be non-negative, got {k}.")
        XI = self.check_domain(XI)
        vals, row, col = _DN(self.p, self.n, self.knot, XI, int(k))
        DN = sps.coo_matrix((vals, (row, col)), shape=(XI.size, self.n + 1))
        return DN

    def multiplicity(self) -> np.ndarray[np.integer]:
        return compute_multiplicity(self.knot)

    def continuity(self) -> np.ndarray[np.integer]:
        return compute_continuity(self.knot, self.p)

    def element_connectivity(self) -> np.ndarray[np.integer]:
        """
        Basis functions supported by each element (nonempty knot interval).

        Returns
        -------
        conn : np.ndarray[np.integer]
            Array of shape (n_elem, `p + 1`) where row `e` lists the indices of
            the basis functions that are nonzero on element `e`.

        Examples
        --------
        >>> BSplineBasis(2, [0., 0., 0., 0.5, 1., 1., 1.]).element_connectivity()
        array([[0, 1, 2],
               [1, 2, 3]])
        """
        spans = np.arange(self.p, self.n + 1)
        spans = spans[self.knot[spans] < self.knot[spans + 1]]
        return spans[:, None] - self.p + np.arange(self.p + 1)[None, :]

    def to_dict(self) -> dict:
        """
        Returns a dictionary representation of the BSplineBasis object.
        """
        return {"p": self.p, "knot": self.knot.tolist()}

    @classmethod
    def from_dict(cls, data: dict) -> "BSplineBasis":
        """
        Creates a BSplineBasis object from a dictionary representation.
        """
        return cls(data["p"], data["knot"])


# %% fast functions for evaluation


@nb.njit(nb.int64(nb.int64, nb.int64, nb.float64[:], nb.float64), cache=True)
def _find_span(n, p, knot, xi):
    """
    Binary search of the knot interval holding `xi`.

    Parameters
    ----------
    n : int
        Last index of the basis.
    p : int
        Degree of the polynomials composing the basis.
    knot : numpy.array of float
        Knot vector of the BSpline basis.
    xi : float
        Value in the parametric space, assumed inside `[knot[p], knot[n + 1]]`.

    Returns
    -------
    i : int
        Index such that `knot[i] <= xi < knot[i + 1]`, or `n` when `xi` is
        the upper end of the domain.
    """
    if xi >= knot[n + 1]:
        return n
    if xi <= knot[p]:
        return p
    low = p
    high = n + 1
    mid = (low + high) // 2
    while xi < knot[mid] or xi >= knot[mid + 1]:
        if xi < knot[mid]:
            high = mid
        else:
            low = mid
        mid = (low + high) // 2
    return mid


@nb.njit(
    nb.float64[:](nb.int64, nb.float64, nb.int64, nb.float64[:]), cache=True
)
def _basis_funs(span, xi, p, knot):
    """
    Nonzero basis functions `N_{span-p}, ..., N_{span}` at `xi`.

    Zero length knot intervals contribute nothing to the recursion.
    """
    N = np.zeros(p + 1)
    left = np.zeros(p + 1)
    right = np.zeros(p + 1)
    N[0] = 1.0
    for j in range(1, p + 1):
        left[j] = xi - knot[span + 1 - j]
        right[j] = knot[span + j] - xi
        saved = 0.0
        for r in range(j):
            denom = right[r + 1] + left[j - r]
            if denom != 0.0:
                temp = N[r] / denom
            else:
                temp = 0.0
            N[r] = saved + right[r + 1] * temp
            saved = left[j - r] * temp
        N[j] = saved
    return N


@nb.njit(
    nb.float64[:, :](nb.int64, nb.float64, nb.int64, nb.int64, nb.float64[:]),
    cache=True,
)
def _ders_basis_funs(span, xi, p, k, knot):
    """
    Derivatives up to order `k` of the nonzero basis functions at `xi`.

    Parameters
    ----------
    span : int
        Knot interval holding `xi`.
    xi : float
        Value in the parametric space.
    p : int
        Degree of the polynomials composing the basis.
    k : int
        Highest derivative order.
    knot : numpy.array of float
        Knot vector of the BSpline basis.

    Returns
    -------
    ders : numpy.array of float
        Array of shape (`k + 1`, `p + 1`), row `j` holding the `j`-th
        derivatives. Rows above `p` stay zero.
    """
    ndu = np.zeros((p + 1, p + 1))
    left = np.zeros(p + 1)
    right = np.zeros(p + 1)
    ndu[0, 0] = 1.0
    for j in range(1, p + 1):
        left[j] = xi - knot[span + 1 - j]
        right[j] = knot[span + j] - xi
        saved = 0.0
        for r in range(j):
            # lower triangle stores knot differences
            ndu[j, r] = right[r + 1] + left[j - r]
            if ndu[j, r] != 0.0:
                temp = ndu[r, j - 1] / ndu[j, r]
            else:
                temp = 0.0
            ndu[r, j] = saved + right[r + 1] * temp
            saved = left[j - r] * temp
        ndu[j, j] = saved

    ders = np.zeros((k + 1, p + 1))
    for j in range(p + 1):
        ders[0, j] = ndu[j, p]

    kmax = min(k, p)
    a = np.zeros((2, p + 1))
    for r in range(p + 1):
        s1 = 0
        s2 = 1
        a[0, 0] = 1.0
        for kk in range(1, kmax + 1):
            d = 0.0
            rk = r - kk
            pk = p - kk
            if r >= kk:
                a[s2, 0] = a[s1, 0] / ndu[pk + 1, rk]
                d = a[s2, 0] * ndu[rk, pk]
            if rk >= -1:
                j1 = 1
            else:
                j1 = -rk
            if r - 1 <= pk:
                j2 = kk - 1
            else:
                j2 = p - r
            for j in range(j1, j2 + 1):
                a[s2, j] = (a[s1, j] - a[s1, j - 1]) / ndu[pk + 1, rk + j]
                d += a[s2, j] * ndu[rk + j, pk]
            if r <= pk:
                a[s2, kk] = -a[s1, kk - 1] / ndu[pk + 1, r]
                d += a[s2, kk] * ndu[r, pk]
            ders[kk, r] = d
            s1, s2 = s2, s1

    fac = p
    for kk in range(1, kmax + 1):
        for j in range(p + 1):
            ders[kk, j] *= fac
        fac *= p - kk
    return ders


@nb.njit(
    nb.types.Tuple((nb.float64[:], nb.int64[:], nb.int64[:]))(
        nb.int64, nb.int64, nb.float64[:], nb.float64[:], nb.int64
    ),
    cache=True,
)
def _DN(p, n, knot, XI, k):
    """
    Compute the `k`-th derivative of the BSpline basis functions for a set
    of values in the parametric space.

    Parameters
    ----------
    p : int
        Degree of the polynomials composing the basis.
    n : int
        Last index of the basis.
    knot : numpy.array of float
        Knot vector of the BSpline basis.
    XI : numpy.array of float
        Values in the parametric space at which the BSpline is evaluated.
    k : int
        `k`-th derivative of the BSpline evaluated.

    Returns
    -------
    (vals, row, col) : (numpy.array of float, numpy.array of int, numpy.array of int)
        Values and indices of the `k`-th derivative matrix of the BSpline
        basis functions in the columns for each value of `XI` in the rows.
        Each row holds exactly `p + 1` entries.
    """
    loop1 = XI.size
    loop2 = p + 1
    vals = np.empty(loop1 * loop2, dtype=np.float64)
    row = np.empty(loop1 * loop2, dtype=np.int64)
    col = np.empty(loop1 * loop2, dtype=np.int64)
    for ind1 in range(loop1):
        xi = XI[ind1]
        span = _find_span(n, p, knot, xi)
        if k == 0:
            local = _basis_funs(span, xi, p, knot)
            for ind2 in range(loop2):
                vals[ind1 * loop2 + ind2] = local[ind2]
        else:
            ders = _ders_basis_funs(span, xi, p, k, knot)
            for ind2 in range(loop2):
                vals[ind1 * loop2 + ind2] = ders[k, ind2]
        for ind2 in range(loop2):
            row[ind1 * loop2 + ind2] = ind1
            col[ind1 * loop2 + ind2] = span - p + ind2
    return (vals, row, col)
