import json
import logging
import pickle
from typing import Iterable, Union

import numpy as np
import scipy.sparse as sps

from nurbskit import settings
from nurbskit.b_spline_basis import BSplineBasis
from nurbskit.exceptions import (
    DimensionMismatchError,
    DomainError,
    InvalidDirectionError,
    UnsetStateError,
)
from nurbskit.homogeneous import lift, project, removal_tolerance
from nurbskit.knot_refinement import elevate_degree, insert_knot, remove_knot
from nurbskit.knot_vector import required_nc
from nurbskit.tensor_product import apply_along_axis, kron_basis, wide_basis

logger = logging.getLogger(__name__)

Parameters = Union[np.ndarray[np.floating], tuple[np.ndarray[np.floating], ...]]


class NURBS:
    """
    Tensor product NURBS entity with `NPa` parametric directions.

    Owns one `BSplineBasis` per direction, the control points, the optional
    weights and the last evaluated geometry. Subclasses fix `NPa` and expose
    the configuration signatures of curves and surfaces.

    Attributes
    ----------
    NPa : int
        Number of parametric directions.

    Notes
    -----
    Control points are stored flattened, of shape (nc_1 * nc_2 * ..., d),
    direction 1 running fastest: the point `(i_1, i_2)` of a surface is at
    row `i_1 + nc_1 * i_2`. Weights follow the same ordering.

    Every mutation replaces knots, control points and weights together and
    marks the stored geometry as stale. Stale geometry is recomputed from the
    stored parameters the next time `Xg` is read.

    Directions are numbered from 1.
    """

    NPa: int = 0

    def __init__(self):
        self._bases: Union[list[BSplineBasis], None] = None
        self._ctrl_pts: Union[np.ndarray[np.floating], None] = None
        self._weights: Union[np.ndarray[np.floating], None] = None
        self._XI: Union[Parameters, None] = None
        self._Xg: Union[np.ndarray[np.floating], None] = None
        self._stale = True

    # %% state management

    def _configure(
        self,
        bases: list[BSplineBasis],
        ctrl_pts: Iterable,
        weights: Union[Iterable[float], None] = None,
    ):
        """
        Validate and commit a complete new state.
        """
        if len(bases) != self.NPa:
            raise DimensionMismatchError(
                f"Expected {self.NPa} knot vector(s), got {len(bases)}."
            )
        ctrl_pts = np.array(ctrl_pts, dtype="float")
        if ctrl_pts.ndim == 1:
            ctrl_pts = ctrl_pts.reshape((-1, 1))
        if ctrl_pts.ndim != 2:
            raise DimensionMismatchError(
                f"Control points must be given as an array of shape (nc, d), got shape {ctrl_pts.shape}."
            )
        for idx, basis in enumerate(bases):
            if required_nc(basis.knot, basis.p) != basis.n + 1:
                raise DimensionMismatchError(
                    f"Knot vector of direction {idx + 1} is inconsistent with degree {basis.p}."
                )
        nc = int(np.prod([basis.n + 1 for basis in bases]))
        if ctrl_pts.shape[0] != nc:
            raise DimensionMismatchError(
                f"The knot vector(s) require {nc} control points, got {ctrl_pts.shape[0]}."
            )
        if weights is not None:
            weights = np.array(weights, dtype="float").ravel()
            if weights.size != nc:
                raise DimensionMismatchError(
                    f"Got {weights.size} weights for {nc} control points."
                )
            if np.any(weights <= 0):
                raise DomainError("Weights must be strictly positive.")
        if self._bases is not None and any(
            old.span != new.span for old, new in zip(self._bases, bases)
        ):
            # stored samples may fall outside the new domain
            self._XI = None
            self._Xg = None
        self._bases = list(bases)
        self._ctrl_pts = ctrl_pts
        self._weights = weights
        self._stale = True
        logger.debug(
            "%s configured: degrees %s, control points %s, rational %s.",
            type(self).__name__,
            self.getDegrees().tolist(),
            self.get_shape(),
            self.is_rational(),
        )

    def _require_set(self):
        if self._bases is None:
            raise UnsetStateError("Knot vector is not set.")
        if self._ctrl_pts is None:
            raise UnsetStateError("Control points are not set.")

    def _axis(self, direction: int) -> int:
        """
        Index of `direction` in `bases`, after checking it exists.
        """
        if not isinstance(direction, (int, np.integer)) or not (
            1 <= direction <= self.NPa
        ):
            raise InvalidDirectionError(
                f"Invalid direction {direction}, expected an integer in [1, {self.NPa}]."
            )
        return int(direction) - 1

    def _grid(self, pts: np.ndarray[np.floating]) -> np.ndarray[np.floating]:
        # (nc_NPa, ..., nc_1, n_cols)
        return pts.reshape((*self.get_shape()[::-1], pts.shape[1]))

    def _homogeneous_pts(self) -> np.ndarray[np.floating]:
        if self._weights is None:
            return self._ctrl_pts.copy()
        return lift(self._ctrl_pts, self._weights)

    def _commit_pts(
        self, bases: list[BSplineBasis], grid: np.ndarray[np.floating]
    ):
        pts = grid.reshape((-1, grid.shape[-1]))
        if self._weights is None:
            self._configure(bases, pts)
        else:
            ctrl_pts, weights = project(pts)
            self._configure(bases, ctrl_pts, weights)

    def finalize(self):
        """
        Drop every piece of data, back to the uninitialized state.
        """
        self.__init__()

    # %% introspection

    def getDegrees(self) -> np.ndarray[np.integer]:
        """
        Degrees of every direction.
        """
        self._require_set()
        return np.array([basis.p for basis in self._bases], dtype="int")

    def getKnots(self) -> list[np.ndarray[np.floating]]:
        """
        Copies of the knot vectors of every direction.
        """
        self._require_set()
        return [basis.knot.copy() for basis in self._bases]

    def get_shape(self) -> tuple[int, ...]:
        """
        Number of control points along each direction, `(nc_1, nc_2, ...)`.
        """
        self._require_set()
        return tuple(basis.n + 1 for basis in self._bases)

    def degree(self, direction: int = 1) -> int:
        axis = self._axis(direction)
        self._require_set()
        return self._bases[axis].p

    def knot(
        self, direction: int = 1, index: Union[int, None] = None
    ) -> Union[np.ndarray[np.floating], float]:
        """
        Knot vector of a direction, or one of its knots when `index` is given.
        """
        axis = self._axis(direction)
        self._require_set()
        knot = self._bases[axis].knot
        if index is None:
            return knot.copy()
        return float(knot[index])

    def multiplicity(self, direction: int = 1) -> np.ndarray[np.integer]:
        axis = self._axis(direction)
        self._require_set()
        return self._bases[axis].multiplicity()

    def continuity(self, direction: int = 1) -> np.ndarray[np.integer]:
        axis = self._axis(direction)
        self._require_set()
        return self._bases[axis].continuity()

    def get_nc(self, direction: int = 1) -> int:
        """
        Number of control points required by the knot vector of a direction,
        `sum(multiplicity) - degree - 1`.
        """
        axis = self._axis(direction)
        self._require_set()
        basis = self._bases[axis]
        return required_nc(basis.knot, basis.p)

    def is_rational(self) -> bool:
        """
        Whether weights are stored and are not all equal.
        """
        if self._weights is None:
            return False
        return bool(np.any(self._weights != self._weights[0]))

    def get_ctrl_pts(
        self,
        index: Union[int, Iterable[int], None] = None,
        coord: Union[int, None] = None,
    ) -> Union[np.ndarray[np.floating], float]:
        """
        Copy of the control points, of one of them, or of one coordinate.

        Parameters
        ----------
        index : Union[int, Iterable[int], None], optional
            Flat index (or indices) of the control point(s). All points if `None`.
            By default, None.
        coord : Union[int, None], optional
            Coordinate to extract. All coordinates if `None`. By default, None.
        """
        self._require_set()
        pts = self._ctrl_pts if index is None else self._ctrl_pts[index]
        if coord is not None:
            pts = pts[..., coord]
        return np.copy(pts) if isinstance(pts, np.ndarray) else float(pts)

    def get_weights(
        self, index: Union[int, Iterable[int], None] = None
    ) -> Union[np.ndarray[np.floating], float]:
        self._require_set()
        if self._weights is None:
            raise UnsetStateError(f"The {type(self).__name__} has no weights.")
        if index is None:
            return self._weights.copy()
        w = self._weights[index]
        return np.copy(w) if isinstance(w, np.ndarray) else float(w)

    @property
    def XI(self) -> Parameters:
        """
        Parameters of the last evaluation: a tuple of per direction arrays
        for a grid, or an array of shape (`NPa`, n_points) for scattered
        points.
        """
        if self._XI is None:
            raise UnsetStateError("Parameter samples are not set.")
        return self._XI

    @property
    def Xg(self) -> np.ndarray[np.floating]:
        """
        Geometry points at the stored parameters, recomputed if the entity
        changed since the last evaluation.
        """
        if self._XI is None:
            raise UnsetStateError("Geometry points are not computed.")
        if self._stale:
            self.evaluate()
        return self._Xg

    def get_ng(self) -> tuple[int, ...]:
        """
        Number of geometry points along each direction for a grid, or
        `(n_points,)` for scattered points.
        """
        XI = self.XI
        if isinstance(XI, tuple):
            return tuple(xi.size for xi in XI)
        return (XI.shape[1],)

    # %% evaluation

    def _parameters(
        self,
        XI: Union[Parameters, Iterable[float], None] = None,
        res: Union[int, Iterable[int], None] = None,
    ) -> Parameters:
        """
        Normalize the parameter input of the evaluation methods.

        `XI` can be a tuple of per direction arrays (grid), an array of
        shape (`NPa`, n_points) (scattered points) or, for curves, a 1D array.
        `res` asks for uniformly spaced grid parameters, one resolution for
        every direction or one per direction. Without any of them, the stored
        parameters are reused.
        """
        self._require_set()
        if XI is not None and res is not None:
            raise ValueError("Give either parameters or a resolution, not both.")
        if res is not None:
            res = np.broadcast_to(np.asarray(res, dtype="int"), (self.NPa,))
            return tuple(basis.uniform(r) for basis, r in zip(self._bases, res))
        if XI is None:
            if self._XI is None:
                raise UnsetStateError("Parameter samples are not set.")
            return self._XI
        if isinstance(XI, tuple) and len(XI) == self.NPa:
            return tuple(
                basis.check_domain(xi) for basis, xi in zip(self._bases, XI)
            )
        XI = np.asarray(XI, dtype="float")
        if self.NPa == 1:
            return (self._bases[0].check_domain(XI),)
        if XI.ndim != 2 or XI.shape[0] != self.NPa:
            raise DimensionMismatchError(
                f"Scattered parameters must have shape ({self.NPa}, n_points), got {XI.shape}."
            )
        return np.array(
            [basis.check_domain(xi) for basis, xi in zip(self._bases, XI)]
        )

    def _orders(self, k: Union[int, Iterable[int]]) -> list[int]:
        k = np.broadcast_to(np.asarray(k, dtype="int"), (self.NPa,))
        if np.any(k < 0):
            raise DomainError(f"Derivative orders must be non-negative, got {k.tolist()}.")
        return k.tolist()

    def _DN(self, XI: Parameters, k: list[int]) -> sps.csr_matrix:
        mats = [basis.N(xi, k_d) for basis, xi, k_d in zip(self._bases, XI, k)]
        if isinstance(XI, tuple):
            return kron_basis(mats)
        return wide_basis(mats)

    def basis(
        self,
        XI: Union[Parameters, Iterable[float], None] = None,
        res: Union[int, Iterable[int], None] = None,
    ) -> sps.csr_matrix:
        """
        Basis functions at the given parameters.

        Parameters
        ----------
        XI : Union[Parameters, Iterable[float], None], optional
            Evaluation parameters, see `evaluate`. By default, None.
        res : Union[int, Iterable[int], None], optional
            Uniform resolution, see `evaluate`. By default, None.

        Returns
        -------
        R : sps.csr_matrix
            Matrix of shape (n_samples, nc). For a rational entity the rows
            hold `R_i = N_i w_i / sum_j(N_j w_j)`, otherwise the B-spline
            basis `N_i`.

        Notes
        -----
        The parameters are not stored.
        """
        XI = self._parameters(XI, res)
        N = self._DN(XI, [0] * self.NPa)
        if not self.is_rational():
            return N
        Nw = N @ sps.diags(self._weights)
        return (sps.diags(1 / np.asarray(Nw.sum(axis=1)).ravel()) @ Nw).tocsr()

    def derivative(
        self,
        XI: Union[Parameters, Iterable[float], None] = None,
        res: Union[int, Iterable[int], None] = None,
        k: Union[int, Iterable[int]] = 1,
        rational_derivative: Union[str, None] = None,
    ) -> sps.csr_matrix:
        """
        Derivatives of the basis functions at the given parameters.

        Parameters
        ----------
        XI : Union[Parameters, Iterable[float], None], optional
            Evaluation parameters, see `evaluate`. By default, None.
        res : Union[int, Iterable[int], None], optional
            Uniform resolution, see `evaluate`. By default, None.
        k : Union[int, Iterable[int]], optional
            Derivative order. An `int` applies to every direction, so `k=1`
            on a surface gives the mixed derivative d²/dxi deta. A list gives
            one order per direction, e.g. `[1, 0]`. By default, 1.
        rational_derivative : Union[str, None], optional
            How a rational basis is differentiated, `"renormalized"` or
            `"quotient"`. By default, `settings.RATIONAL_DERIVATIVE`.

        Returns
        -------
        dR : sps.csr_matrix
            Matrix of shape (n_samples, nc). Combine it with the control
            points to get tangent vectors: `dR @ ctrl_pts`.

        Notes
        -----
        - `"renormalized"` weighs the B-spline derivatives the same way as the
          positions: `dN_i w_i / sum_j(dN_j w_j)`. This is not the derivative
          of the rational basis, and the denominator can vanish.
        - `"quotient"` is the exact derivative
          `(dN_i w_i W - N_i w_i dW) / W²` with `W = sum_j(N_j w_j)`.
          Only first order derivatives along a single direction are supported.
        - Non-rational entities return the B-spline derivatives.
        """
        if rational_derivative is None:
            rational_derivative = settings.RATIONAL_DERIVATIVE
        if rational_derivative not in settings.RATIONAL_DERIVATIVE_MODES:
            raise ValueError(
                f"Unknown rational derivative {rational_derivative!r}, "
                f"expected one of {settings.RATIONAL_DERIVATIVE_MODES}."
            )
        XI = self._parameters(XI, res)
        k = self._orders(k)
        dN = self._DN(XI, k)
        if not self.is_rational():
            return dN
        W = sps.diags(self._weights)
        dNw = dN @ W
        if rational_derivative == "renormalized":
            return (sps.diags(1 / np.asarray(dNw.sum(axis=1)).ravel()) @ dNw).tocsr()
        if sum(k) != 1:
            raise DomainError(
                f"Quotient rule is only available for first derivatives, got orders {k}."
            )
        Nw = self._DN(XI, [0] * self.NPa) @ W
        w_sum = np.asarray(Nw.sum(axis=1)).ravel()
        dw_sum = np.asarray(dNw.sum(axis=1)).ravel()
        return (
            sps.diags(1 / w_sum) @ dNw - sps.diags(dw_sum / w_sum**2) @ Nw
        ).tocsr()

    def evaluate(
        self,
        XI: Union[Parameters, Iterable[float], None] = None,
        res: Union[int, Iterable[int], None] = None,
    ) -> np.ndarray[np.floating]:
        """
        Compute the geometry points and store them with their parameters.

        Parameters
        ----------
        XI : Union[Parameters, Iterable[float], None], optional
            Evaluation parameters. Three input formats are accepted:
            1. `tuple`: one array per direction, the points are evaluated at
            every combination (grid), direction 1 running fastest.
            2. `numpy.ndarray` of shape (`NPa`, n_points): one column per
            evaluation point.
            3. For curves only, a 1D array.
            If `None`, the stored parameters are reused. By default, None.
        res : Union[int, Iterable[int], None], optional
            Number of uniformly spaced parameters, for every direction or for
            each direction. By default, None.

        Returns
        -------
        Xg : np.ndarray[np.floating]
            Geometry points of shape (n_samples, d).

        Raises
        ------
        UnsetStateError
            If the entity is not configured, or if no parameters are given
            and none were stored before.
        DomainError
            If a parameter is outside of its direction's domain.
        """
        XI = self._parameters(XI, res)
        R = self.basis(XI)
        self._Xg = np.asarray(R @ self._ctrl_pts)
        self._XI = XI
        self._stale = False
        return self._Xg

    def __call__(
        self,
        XI: Union[Parameters, Iterable[float], None] = None,
        res: Union[int, Iterable[int], None] = None,
    ) -> np.ndarray[np.floating]:
        return self.evaluate(XI, res)

    # %% refinement

    def insert_knots(
        self,
        values: Union[float, Iterable[float]],
        r: Union[int, Iterable[int]] = 1,
        direction: int = 1,
    ):
        """
        Insert knots along one direction while keeping the geometry.

        Parameters
        ----------
        values : Union[float, Iterable[float]]
            Knot values to insert, inside the domain of the direction.
        r : Union[int, Iterable[int]], optional
            Number of insertions of each value. By default, 1.
        direction : int, optional
            Parametric direction. By default, 1.

        Raises
        ------
        DomainError
            If a value is outside the domain, a count is negative, or the
            multiplicity of a value would exceed the degree. The entity is
            then left unchanged.

        Examples
        --------
        >>> curve = NURBSCurve([0., 0., 0., 1., 1., 1.], [[0., 0.], [1., 2.], [2., 0.]])
        >>> curve.insert_knots(0.5)
        >>> curve.get_shape()
        (4,)
        """
        axis = self._axis(direction)
        self._require_set()
        values = np.atleast_1d(np.asarray(values, dtype="float"))
        r = np.broadcast_to(np.asarray(r, dtype="int"), values.shape)
        if np.any(r < 0):
            raise DomainError(f"Number of insertions must be non-negative, got {r.tolist()}.")
        basis = self._bases[axis]
        basis.check_domain(values)
        p, knot = basis.p, basis.knot
        grid = self._grid(self._homogeneous_pts())
        for u, r_u in zip(values, r):
            grid, knot = apply_along_axis(
                lambda arr: insert_knot(p, knot, arr, u, int(r_u))[::-1],
                grid,
                self.NPa - 1 - axis,
            )
            logger.debug(
                "Inserted knot %s %d time(s) in direction %d.", u, r_u, direction
            )
        bases = list(self._bases)
        bases[axis] = BSplineBasis(p, knot)
        self._commit_pts(bases, grid)

    def remove_knots(
        self,
        values: Union[float, Iterable[float]],
        r: Union[int, Iterable[int]] = 1,
        direction: int = 1,
        tol: Union[float, None] = None,
    ) -> np.ndarray[np.integer]:
        """
        Remove knots along one direction when the geometry allows it.

        Parameters
        ----------
        values : Union[float, Iterable[float]]
            Knot values to remove.
        r : Union[int, Iterable[int]], optional
            Maximum number of removals of each value. By default, 1.
        direction : int, optional
            Parametric direction. By default, 1.
        tol : Union[float, None], optional
            Largest deviation allowed on the control net, relative to
            `1 + max |P|`. By default,
            `settings.KNOT_REMOVAL_TOL`.

        Returns
        -------
        removed : np.ndarray[np.integer]
            Number of removals actually performed for each value. A knot whose
            removal would change the geometry, or a value that is not an
            interior knot, gives 0.

        Raises
        ------
        DomainError
            If a count is negative.
        """
        axis = self._axis(direction)
        self._require_set()
        if tol is None:
            tol = settings.KNOT_REMOVAL_TOL
        values = np.atleast_1d(np.asarray(values, dtype="float"))
        r = np.broadcast_to(np.asarray(r, dtype="int"), values.shape)
        if np.any(r < 0):
            raise DomainError(f"Number of removals must be non-negative, got {r.tolist()}.")
        p, knot = self._bases[axis].p, self._bases[axis].knot
        pts = self._homogeneous_pts()
        n_coords = pts.shape[1]
        tol = removal_tolerance(pts, tol, self._weights is not None)
        grid = self._grid(pts)
        removed = np.zeros(values.size, dtype="int")
        for i, (u, r_u) in enumerate(zip(values, r)):

            def remove(arr):
                t, new_knot, new_arr = remove_knot(p, knot, arr, u, int(r_u), tol, n_coords)
                return new_arr, t, new_knot

            grid, removed[i], knot = apply_along_axis(
                remove, grid, self.NPa - 1 - axis
            )
        logger.debug(
            "Removed knots %s %s time(s) in direction %d.",
            values.tolist(),
            removed.tolist(),
            direction,
        )
        if np.any(removed > 0):
            bases = list(self._bases)
            bases[axis] = BSplineBasis(p, knot)
            self._commit_pts(bases, grid)
        return removed

    def elevate_degree(self, t: int = 1, direction: int = 1):
        """
        Raise the degree of one direction by `t` while keeping the geometry.

        Raises
        ------
        DomainError
            If `t` is negative.
        """
        axis = self._axis(direction)
        self._require_set()
        if t < 0:
            raise DomainError(f"Degree increment must be non-negative, got {t}.")
        if t == 0:
            return
        p, knot = self._bases[axis].p, self._bases[axis].knot
        grid, knot = apply_along_axis(
            lambda arr: elevate_degree(p, knot, arr, int(t))[::-1],
            self._grid(self._homogeneous_pts()),
            self.NPa - 1 - axis,
        )
        logger.debug(
            "Elevated degree of direction %d from %d to %d.", direction, p, p + t
        )
        bases = list(self._bases)
        bases[axis] = BSplineBasis(p + t, knot)
        self._commit_pts(bases, grid)

    # %% direct edits

    def modify_ctrl_pts(
        self,
        value: Union[float, Iterable],
        index: Union[int, Iterable[int]],
        coord: Union[int, None] = None,
    ):
        """
        Overwrite control point(s), or one coordinate of them.
        """
        self._require_set()
        ctrl_pts = self._ctrl_pts.copy()
        if coord is None:
            ctrl_pts[index] = value
        else:
            ctrl_pts[index, coord] = value
        self._configure(self._bases, ctrl_pts, self._weights)

    def modify_weights(
        self, value: Union[float, Iterable[float]], index: Union[int, Iterable[int]]
    ):
        """
        Overwrite weight(s) of a rational entity.

        Raises
        ------
        UnsetStateError
            If the entity has no weights.
        DomainError
            If a new weight is not strictly positive.
        """
        self._require_set()
        if self._weights is None:
            raise UnsetStateError(f"The {type(self).__name__} has no weights.")
        weights = self._weights.copy()
        weights[index] = value
        self._configure(self._bases, self._ctrl_pts, weights)

    # %% mesh helpers

    def element_connectivity(self) -> np.ndarray[np.integer]:
        """
        Control points supporting each element of the parametric mesh.

        Returns
        -------
        conn : np.ndarray[np.integer]
            Array of shape (n_elem, (p_1 + 1) * (p_2 + 1) * ...). Elements and
            local control points are both numbered with direction 1 running
            fastest; entries are flat control point indices.
        """
        self._require_set()
        conn = None
        stride = 1
        for basis in self._bases:
            conn_d = basis.element_connectivity() * stride
            if conn is None:
                conn = conn_d
            else:
                conn = (conn_d[:, None, :, None] + conn[None, :, None, :]).reshape(
                    (conn_d.shape[0] * conn.shape[0], conn_d.shape[1] * conn.shape[1])
                )
            stride *= basis.n + 1
        return conn

    # %% persistence

    def to_dict(self) -> dict:
        """
        Returns a dictionary representation of the entity.
        """
        self._require_set()
        return {
            "bases": [basis.to_dict() for basis in self._bases],
            "ctrl_pts": self._ctrl_pts.tolist(),
            "weights": None if self._weights is None else self._weights.tolist(),
        }

    @classmethod
    def from_dict(cls, data: dict) -> "NURBS":
        """
        Creates an entity from a dictionary representation.
        """
        this = cls()
        this._configure(
            [BSplineBasis.from_dict(b) for b in data["bases"]],
            data["ctrl_pts"],
            data["weights"],
        )
        return this

    def save(self, filepath: str) -> None:
        """
        Save the entity to a file.
        Supported extensions: json, pkl
        """
        data = self.to_dict()
        ext = filepath.split(".")[-1]
        if ext == "json":
            with open(filepath, "w") as f:
                json.dump(data, f, indent=2)
        elif ext == "pkl":
            with open(filepath, "wb") as f:
                pickle.dump(data, f)
        else:
            raise ValueError(
                f"Unknown extension {ext}. Supported extensions: json, pkl."
            )

    @classmethod
    def load(cls, filepath: str) -> "NURBS":
        """
        Load an entity from a file.
        Supported extensions: json, pkl
        """
        ext = filepath.split(".")[-1]
        if ext == "json":
            with open(filepath, "r") as f:
                data = json.load(f)
        elif ext == "pkl":
            with open(filepath, "rb") as f:
                data = pickle.load(f)
        else:
            raise ValueError(
                f"Unknown extension {ext}. Supported extensions: json, pkl."
            )
        return cls.from_dict(data)
